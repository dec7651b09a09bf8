"""constants shared by the rating engines, computed once here to avoid recomputation"""
import math

# score range
MIN_SCORE = 1
MAX_SCORE = 6
FAILED_SCORE = 7  # an unsolved puzzle, optionally counted as a seventh guess

# elo constants
INITIAL_RATING = 1000.0
ELO_SCALE = 400.0
ALPHA = math.log(10.0) / ELO_SCALE

# map elo fitting
DEFAULT_TOL = 1e-6
MAX_ITERS = 200

# empirical bayes
TAU2_FLOOR = 0.01
MIN_RELIABLE_GAMES = 2
