"""
Maximum a posteriori Elo ratings from the full outcome matrix
https://arxiv.org/abs/2207.06500 (Newman, 2023)
"""
import logging
import numpy as np
from puzzlerank.core.base import DayRatingSystem
from puzzlerank.metrics import bradley_terry_nll
from puzzlerank.utils.constants import DEFAULT_TOL, ELO_SCALE, INITIAL_RATING, MAX_ITERS, MAX_SCORE
from puzzlerank.utils.data_utils import DayDataset, validate_scores
from puzzlerank.utils.math_utils import geometric_mean, points, strength_to_elo

logger = logging.getLogger(__name__)


def build_win_matrix(dataset: DayDataset, max_score: int = MAX_SCORE) -> np.ndarray:
    """
    Accumulate graded pairwise outcomes over every day.

    win_matrix[i, j] is the sum of points(score_i, score_j) over the days both i and j played.
    The diagonal stays zero and single player days contribute nothing.
    """
    win_matrix = np.zeros(shape=(dataset.num_competitors, dataset.num_competitors), dtype=np.float64)
    for idxs, scores, day_key in dataset:
        validate_scores(scores, max_score, day_key)
        day_points = points(scores[:, None], scores[None, :], max_score)
        np.fill_diagonal(day_points, 0.0)
        win_matrix[np.ix_(idxs, idxs)] += day_points
    return win_matrix


class MapElo(DayRatingSystem):
    """
    Fits Bradley-Terry strengths p_i = 10^((elo_i - 1000) / 400) jointly to every result with
    a fixed point iteration. The 1 / (p_i + 1) terms come from a weak prior equivalent to one
    virtual draw against a competitor of strength 1.
    """

    rating_dim = 1

    def __init__(
        self,
        competitors: list,
        max_score: int = MAX_SCORE,
        tol: float = DEFAULT_TOL,
        max_iters: int = MAX_ITERS,
        initial_rating: float = INITIAL_RATING,
        scale: float = ELO_SCALE,
    ):
        """
        Parameters:
            competitors (list): A list of competitors to be rated within the system.
            max_score (int, optional): The worst possible score, 6 or 7 when failures count as 7. Defaults to 6.
            tol (float, optional): Stop once the summed absolute change of the strengths over one
                                   sweep drops below this. Defaults to 1e-6.
            max_iters (int, optional): Maximum number of sweeps. Defaults to 200.
            initial_rating (float, optional): Elo rating of a strength of 1. Defaults to 1000.0.
            scale (float, optional): Elo points per factor of 10 in strength. Defaults to 400.0.
        """
        super().__init__(competitors)
        self.max_score = max_score
        self.tol = tol
        self.max_iters = max_iters
        self.initial_rating = initial_rating
        self.scale = scale
        self.win_matrix = None
        self.strengths = None
        self.nlls = []
        self.num_iters = 0
        self.converged = False

    def predict(self, matchups: np.ndarray) -> np.ndarray:
        """probability that the first competitor of each matchup outscores the second"""
        strengths_1 = self.strengths[matchups[:, 0]]
        strengths_2 = self.strengths[matchups[:, 1]]
        return strengths_1 / (strengths_1 + strengths_2)

    def sweep(self, strengths: np.ndarray, win_matrix: np.ndarray):
        """
        One Gauss-Seidel pass over competitors in index order.

        strengths is updated in place so competitor i already sees the new values of
        competitors 0..i-1.
        """
        for i in range(self.num_competitors):
            p_i = strengths[i]
            pair_sums = p_i + strengths
            wins = win_matrix[i] * strengths / pair_sums
            losses = win_matrix[:, i] / pair_sums
            wins[i] = 0.0
            losses[i] = 0.0
            prior = 1.0 / (p_i + 1.0)
            strengths[i] = (prior + wins.sum()) / (prior + losses.sum())

    def normalize(self, strengths: np.ndarray, active: np.ndarray):
        """
        Divide the strengths of competitors with pairwise games by their geometric mean.

        Competitors without pairwise games stay at exactly 1, so the geometric mean of the
        whole vector is 1 as well.
        """
        if np.any(active):
            strengths[active] /= geometric_mean(strengths[active])

    def fit_matrix(self, win_matrix: np.ndarray) -> np.ndarray:
        """
        Run the fixed point iteration on a prebuilt outcome matrix and return the elo ratings.

        An NLL diagnostic is recorded after every sweep in self.nlls; it does not control the loop.
        """
        win_matrix = np.asarray(win_matrix, dtype=np.float64)
        if win_matrix.shape != (self.num_competitors, self.num_competitors):
            raise ValueError(f'win_matrix must have shape ({self.num_competitors}, {self.num_competitors})')
        active = (win_matrix.sum(axis=0) + win_matrix.sum(axis=1) - 2.0 * np.diag(win_matrix)) > 0

        strengths = np.ones(self.num_competitors, dtype=np.float64)
        self.nlls = []
        self.converged = False
        self.num_iters = 0
        change = np.inf
        for iteration in range(self.max_iters):
            prev_strengths = strengths.copy()
            self.sweep(strengths, win_matrix)
            self.normalize(strengths, active)
            ratings = strength_to_elo(strengths, self.initial_rating, self.scale)
            self.nlls.append(bradley_terry_nll(win_matrix, ratings, self.scale))
            self.num_iters = iteration + 1
            change = np.abs(prev_strengths - strengths).sum()
            if change < self.tol:
                self.converged = True
                break

        if self.converged:
            logger.debug(f'map elo converged after {self.num_iters} iterations (change {change:.3g})')
        else:
            logger.debug(f'map elo stopped after {self.num_iters} iterations without converging (change {change:.3g})')
        self.strengths = strengths
        self.ratings = strength_to_elo(strengths, self.initial_rating, self.scale)
        return self.ratings

    def fit_dataset(self, dataset: DayDataset) -> np.ndarray:
        self.check_dataset(dataset)
        self.win_matrix = build_win_matrix(dataset, self.max_score)
        return self.fit_matrix(self.win_matrix)
