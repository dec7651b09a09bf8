"""Elo updated day by day from pairwise score comparisons"""
from typing import Literal
import numpy as np
from puzzlerank.core.base import DayRatingSystem
from puzzlerank.utils.constants import ALPHA, INITIAL_RATING, MAX_SCORE
from puzzlerank.utils.data_utils import DayDataset, validate_scores
from puzzlerank.utils.math_utils import points, sigmoid, sigmoid_scalar


def elo_update(rating_1, rating_2, outcome, k, alpha=ALPHA):
    """
    One Elo game where the first competitor earns outcome in [0, 1].

    Returns the new pair of ratings, the second changes by exactly minus the change of the first.
    """
    prob = sigmoid_scalar(alpha * (rating_1 - rating_2))
    update = k * (outcome - prob)
    return rating_1 + update, rating_2 - update


class IteratedElo(DayRatingSystem):
    """
    Implements Elo over days of puzzle scores.

    Every day each competitor plays every other competitor of that day in both directions,
    and the outcome of a pairing is graded by points() instead of being a plain win or loss.
    """

    rating_dim = 1

    def __init__(
        self,
        competitors: list,
        initial_rating: float = INITIAL_RATING,
        k: float = 2.0,
        max_score: int = MAX_SCORE,
        alpha: float = ALPHA,
        pair_order: Literal['competitor', 'listed'] = 'competitor',
        dtype=np.float64,
    ):
        """
        Initializes the Elo rating system with the given parameters.

        Parameters:
            competitors (list): A list of competitors to be rated within the system.
            initial_rating (float, optional): The rating every competitor starts from. Defaults to 1000.0.
            k (float, optional): The K-factor, which controls the rate at which ratings change. Defaults to 2.0.
            max_score (int, optional): The worst possible score, 6 or 7 when failures count as 7. Defaults to 6.
            alpha (float, optional): Scaling factor used in the calculation of expected scores. Defaults to log(10) / 400.
            pair_order (str, optional): Order of the pairings within a day. 'competitor' visits competitors by
                                        ascending index (ascending player id), 'listed' uses the order of the
                                        day group as supplied. Defaults to 'competitor'.
            dtype: The data type for internal numpy computations. Defaults to np.float64.
        """
        super().__init__(competitors)
        if pair_order not in {'competitor', 'listed'}:
            raise ValueError(f'unknown pair_order: {pair_order}')
        self.initial_rating = initial_rating
        self.k = k
        self.max_score = max_score
        self.alpha = alpha
        self.pair_order = pair_order
        self.dtype = dtype
        self.rating_history = None

    def predict(self, matchups: np.ndarray) -> np.ndarray:
        """probability that the first competitor of each matchup outscores the second"""
        ratings_1 = self.ratings[matchups[:, 0]]
        ratings_2 = self.ratings[matchups[:, 1]]
        return sigmoid(self.alpha * (ratings_1 - ratings_2))

    def update(self, idxs: np.ndarray, scores: np.ndarray):
        """
        Treats every ordered pairing of one day as a sequential event.

        Each update is applied to the rating vector immediately so later pairings of the same
        day see the ratings produced by earlier ones.

        Parameters:
            idxs: Competitor indices of the day.
            scores: Raw scores aligned with idxs.
        """
        if self.pair_order == 'competitor':
            order = np.argsort(idxs, kind='stable')
            idxs, scores = idxs[order], scores[order]
        num_players = idxs.shape[0]
        for a in range(num_players):
            comp_1 = idxs[a]
            for b in range(num_players):
                if a == b:
                    continue
                comp_2 = idxs[b]
                outcome = points(scores[a], scores[b], self.max_score)
                self.ratings[comp_1], self.ratings[comp_2] = elo_update(
                    self.ratings[comp_1], self.ratings[comp_2], outcome, self.k, self.alpha
                )

    def fit_dataset(self, dataset: DayDataset) -> np.ndarray:
        """
        Walks the days of the dataset in order and records a rating snapshot after each one.

        rating_history has shape (num_days + 1, num_competitors), row 0 is the initial ratings.
        """
        self.check_dataset(dataset)
        self.ratings = np.zeros(shape=self.num_competitors, dtype=self.dtype) + self.initial_rating
        self.rating_history = np.empty(shape=(len(dataset) + 1, self.num_competitors), dtype=self.dtype)
        self.rating_history[0] = self.ratings
        for day_idx, (idxs, scores, day_key) in enumerate(dataset):
            validate_scores(scores, self.max_score, day_key)
            self.update(idxs, scores)
            self.rating_history[day_idx + 1] = self.ratings
        return self.ratings
