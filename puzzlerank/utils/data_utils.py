"""Classes and functions for working with day-grouped puzzle scores"""

import logging
from typing import Hashable, Mapping, Sequence, Tuple
import numpy as np
import polars as pl
from puzzlerank.utils.constants import FAILED_SCORE, MIN_SCORE

logger = logging.getLogger(__name__)

DayResults = Sequence[Tuple[Hashable, int]]


class InvalidDatasetError(ValueError):
    """Raised when day-grouped results do not have the expected shape."""


class InvalidScoreError(InvalidDatasetError):
    """Raised when a raw score is not an integer in the allowed range."""


def check_day_results(day_key, results):
    """raise InvalidDatasetError unless results is a sequence of (player, score) pairs"""
    try:
        is_pairs = all(len(result) == 2 for result in results)
    except TypeError:
        is_pairs = False
    if not is_pairs:
        raise InvalidDatasetError(f'results on day {day_key!r} must be (player, score) pairs')


def competitor_sort_key(player):
    """players of different types are grouped by type name so the order stays total"""
    return type(player).__name__, player


def filter_failures(days: Mapping[Hashable, DayResults], x_is_seven: bool) -> dict:
    """
    Drop failed attempts (score 7) unless they are counted as a score.

    Day groups left empty after filtering are removed. When x_is_seven is True the
    groups are returned unchanged.
    """
    if x_is_seven:
        return dict(days)
    filtered_days = {}
    for day_key, results in days.items():
        check_day_results(day_key, results)
        filtered = [(player, score) for player, score in results if score != FAILED_SCORE]
        if filtered:
            filtered_days[day_key] = filtered
    return filtered_days


def validate_scores(scores: np.ndarray, max_score: int, day_key=None):
    """raise InvalidScoreError if any score is non-integral or outside [MIN_SCORE, max_score]"""
    bad_mask = (scores != np.round(scores)) | (scores < MIN_SCORE) | (scores > max_score)
    if np.any(bad_mask):
        bad = scores[bad_mask][0]
        where = '' if day_key is None else f' on day {day_key!r}'
        raise InvalidScoreError(f'score {bad} is outside [{MIN_SCORE}, {max_score}]{where}')


class DayDataset:
    """
    Scores grouped by day, indexed for the rating engines.

    Competitors are sorted by player id, grouped by id type when types are mixed, and days
    keep the order they were supplied in, which the caller must make chronological. Both
    orders are fixed once here so every engine traverses players and days deterministically.

    Attributes:
        competitors (list): sorted unique player ids
        competitor_to_idx (dict): player id -> position in competitors
        day_keys (list): day keys in supplied order, empty days removed
        day_idxs (list of np.ndarray): competitor indices of each day, in listed order
        day_scores (list of np.ndarray): raw scores aligned with day_idxs
        games_played (np.ndarray): number of days each competitor appears in
    """

    def __init__(self, days: Mapping[Hashable, DayResults], max_score: int = FAILED_SCORE):
        self.max_score = max_score
        for day_key, results in days.items():
            check_day_results(day_key, results)
        self.day_keys = [day_key for day_key, results in days.items() if len(results) > 0]
        self._init_competitors(days)
        self._init_days(days)
        logger.info(f'loaded {len(self)} days with {self.num_games} games from {self.num_competitors} competitors')

    def _init_competitors(self, days):
        """Initialize competitor metadata."""
        try:
            unique_players = {player for day_key in self.day_keys for player, _ in days[day_key]}
            self.competitors = sorted(unique_players, key=competitor_sort_key)
        except TypeError as err:
            raise InvalidDatasetError('player ids must be hashable and comparable within each type') from err
        self.num_competitors = len(self.competitors)
        self.competitor_to_idx = dict(zip(self.competitors, range(self.num_competitors)))

    def _init_days(self, days):
        """Create numerical competitor indices and validated score arrays per day."""
        self.day_idxs = []
        self.day_scores = []
        for day_key in self.day_keys:
            results = days[day_key]
            idxs = np.array([self.competitor_to_idx[player] for player, _ in results], dtype=np.int64)
            if np.unique(idxs).shape[0] != idxs.shape[0]:
                raise InvalidDatasetError(f'a player appears more than once on day {day_key!r}')
            try:
                scores = np.array([score for _, score in results], dtype=np.float64)
            except (TypeError, ValueError) as err:
                raise InvalidScoreError(f'non-numeric score on day {day_key!r}') from err
            validate_scores(scores, self.max_score, day_key)
            self.day_idxs.append(idxs)
            self.day_scores.append(scores.astype(np.int64))

        self.games_played = np.zeros(self.num_competitors, dtype=np.int64)
        for idxs in self.day_idxs:
            self.games_played[idxs] += 1

    @classmethod
    def from_dataframe(
        cls,
        df: pl.DataFrame,
        competitor_col: str,
        day_col: str,
        score_col: str,
        max_score: int = FAILED_SCORE,
    ):
        """Build a dataset from one row per game, days ordered by first appearance."""
        grouped = (
            df.lazy()
            .select([
                pl.col(day_col).alias('day'),
                pl.col(competitor_col).alias('competitor'),
                pl.col(score_col).alias('score'),
            ])
            .group_by('day', maintain_order=True)
            .agg([pl.col('competitor'), pl.col('score')])
            .collect()
        )
        days = {
            row['day']: list(zip(row['competitor'], row['score']))
            for row in grouped.iter_rows(named=True)
        }
        return cls(days, max_score=max_score)

    @property
    def num_games(self) -> int:
        return int(self.games_played.sum())

    def all_games(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """flatten every game into (competitor_idxs, scores, day_positions)"""
        if len(self) == 0:
            empty = np.zeros(0, dtype=np.int64)
            return empty, empty.copy(), empty.copy()
        idxs = np.concatenate(self.day_idxs)
        scores = np.concatenate(self.day_scores)
        day_positions = np.repeat(np.arange(len(self)), [len(day) for day in self.day_idxs])
        return idxs, scores, day_positions

    def __len__(self):
        return len(self.day_keys)

    def __iter__(self):
        """Iterate through days."""
        for day_key, idxs, scores in zip(self.day_keys, self.day_idxs, self.day_scores):
            yield idxs, scores, day_key
