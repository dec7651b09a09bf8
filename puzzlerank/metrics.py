"""module for computing fit diagnostics of the rating engines"""

import numpy as np
from puzzlerank.utils.constants import ELO_SCALE
from puzzlerank.utils.math_utils import base_10_sigmoid


def pairwise_probs(ratings: np.ndarray, scale: float = ELO_SCALE) -> np.ndarray:
    """matrix of P(i outscores j) under the base 10 logistic model"""
    return base_10_sigmoid((ratings[:, None] - ratings[None, :]) / scale)


def bradley_terry_nll(win_matrix: np.ndarray, ratings: np.ndarray, scale: float = ELO_SCALE) -> float:
    """
    base 10 negative log likelihood of an outcome matrix per pairwise game

    win_matrix[i, j] holds the points i earned against j, so win_matrix[i, j] + win_matrix[j, i]
    is the number of games between i and j. Returns 0.0 when there are no pairwise games.
    """
    num_games = win_matrix.sum()
    if num_games == 0:
        return 0.0
    probs = pairwise_probs(ratings, scale)
    mask = win_matrix > 0
    np.fill_diagonal(mask, False)
    nll = -(win_matrix[mask] * np.log10(probs[mask])).sum()
    return float(nll / num_games)
