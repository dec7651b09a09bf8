"""
Models Module
=============

Rating engines for players of a daily guessing puzzle, where each player posts one score per day
(the number of guesses, lower is better).

Included Rating Systems:
- IteratedElo: Elo updated day by day, every pair of players on a day is a graded game.
- MapElo: Bradley-Terry maximum a posteriori ratings fit jointly to every pairwise result.
- AverageScore: Average guesses corrected for day difficulty and shrunk with empirical Bayes.

All engines derive from DayRatingSystem and are fit on a DayDataset.
"""
from puzzlerank.models.average_score import AverageScore
from puzzlerank.models.iterated_elo import IteratedElo
from puzzlerank.models.map_elo import MapElo, build_win_matrix
