"""math utility functions for the rating engines"""
import math
import numpy as np
from scipy.special import expit
from scipy.stats import gmean
from puzzlerank.utils.constants import ELO_SCALE, INITIAL_RATING, MAX_SCORE


def points(score_1, score_2, max_score=MAX_SCORE):
    """
    Converts a pair of guess counts into the outcome for the first player.

    Equal scores are a draw (0.5), the best possible score against the worst possible
    score is a full win (1.0), and points(a, b) + points(b, a) == 1.
    Works on scalars and on broadcastable numpy arrays.
    """
    return 0.5 + (score_2 - score_1) / (max_score - 1) / 2.0


def sigmoid(x):
    """a little faster than implementing it in numpy for d < 100000"""
    return expit(x)


def sigmoid_scalar(x):
    """no need to use numpy on scalars"""
    return 1.0 / (1.0 + math.exp(-x))


def base_10_sigmoid(x):
    """elo prefers base 10"""
    return 1.0 / (1.0 + np.power(10.0, -x))


def geometric_mean(x):
    return gmean(x)


def strength_to_elo(strengths, initial_rating=INITIAL_RATING, scale=ELO_SCALE):
    """map Bradley-Terry strengths onto the elo scale, a strength of 1 sits at the initial rating"""
    return initial_rating + scale * np.log10(strengths)
