"""Day adjusted average scores with empirical Bayes shrinkage"""
import numpy as np
from puzzlerank.core.base import DayRatingSystem
from puzzlerank.utils.constants import MIN_RELIABLE_GAMES, TAU2_FLOOR
from puzzlerank.utils.data_utils import DayDataset


class AverageScore(DayRatingSystem):
    """
    Rates competitors by their average number of guesses, lower is better.

    With day_adjustment each score is corrected by how much harder or easier its day was than
    average. With bayes_adjustment the averages of competitors with at least two games are
    pulled toward the population mean in proportion to their sampling noise, and competitors
    with a single game are set to the population mean.
    """

    rating_dim = 1
    higher_is_better = False

    def __init__(
        self,
        competitors: list,
        day_adjustment: bool = True,
        bayes_adjustment: bool = True,
        tau2_floor: float = TAU2_FLOOR,
    ):
        super().__init__(competitors)
        self.day_adjustment = day_adjustment
        self.bayes_adjustment = bayes_adjustment
        self.tau2_floor = tau2_floor
        self.population_mean = np.nan
        self.weighted_mean = np.nan
        self.tau2 = np.nan

    def compute_day_effects(self, scores: np.ndarray, day_positions: np.ndarray, num_days: int) -> np.ndarray:
        """mean score of each day minus the grand average, zeros without day adjustment"""
        if not self.day_adjustment:
            return np.zeros(num_days, dtype=np.float64)
        day_sums = np.bincount(day_positions, weights=scores, minlength=num_days)
        day_counts = np.bincount(day_positions, minlength=num_days)
        return day_sums / day_counts - self.grand_average

    def compute_player_stats(self, idxs: np.ndarray, scores: np.ndarray, adjusted: np.ndarray):
        """per competitor counts, averages and Bessel corrected spread of the adjusted scores"""
        n = self.num_competitors
        self.games_played = np.bincount(idxs, minlength=n)
        has_games = self.games_played > 0
        counts = np.where(has_games, self.games_played, 1)
        self.raw_averages = np.where(has_games, np.bincount(idxs, weights=scores, minlength=n) / counts, np.nan)
        self.adjusted_averages = np.where(has_games, np.bincount(idxs, weights=adjusted, minlength=n) / counts, np.nan)
        self.day_adjustments = self.raw_averages - self.adjusted_averages

        # variance, std and standard error are undefined for a single game
        multi = self.games_played > 1
        deviations = adjusted - np.nan_to_num(self.adjusted_averages)[idxs]
        sum_sq = np.bincount(idxs, weights=np.square(deviations), minlength=n)
        self.adjusted_vars = np.full(n, np.nan)
        self.adjusted_vars[multi] = sum_sq[multi] / (self.games_played[multi] - 1)
        self.adjusted_stds = np.sqrt(self.adjusted_vars)
        self.adjusted_ses = self.adjusted_stds / np.sqrt(counts)

    def shrink(self):
        """
        Empirical Bayes on the adjusted averages.

        The population mean is the raw grand average. The between competitor variance tau^2 is the
        games weighted spread of reliable averages around it minus their average sampling variance,
        floored at tau2_floor.
        """
        reliable = self.games_played >= MIN_RELIABLE_GAMES
        single = self.games_played == 1
        weights = self.games_played[reliable]
        total_weight = weights.sum()
        means = self.adjusted_averages[reliable]
        sampling_vars = self.adjusted_vars[reliable] / weights

        self.population_mean = self.grand_average
        self.weighted_mean = (weights * means).sum() / total_weight
        weighted_var_means = (weights * np.square(means - self.population_mean)).sum() / total_weight
        avg_sampling_var = (weights * sampling_vars).sum() / total_weight
        self.tau2 = max(self.tau2_floor, weighted_var_means - avg_sampling_var)

        self.shrinkage_factors[reliable] = self.tau2 / (self.tau2 + sampling_vars)
        self.ratings[reliable] = (
            self.shrinkage_factors[reliable] * means + (1.0 - self.shrinkage_factors[reliable]) * self.population_mean
        )
        self.ratings[single] = self.population_mean

    def fit_dataset(self, dataset: DayDataset) -> np.ndarray:
        """compute final scores for every competitor, see the class docstring for the steps"""
        self.check_dataset(dataset)
        idxs, scores, day_positions = dataset.all_games()
        scores = scores.astype(np.float64)
        self.grand_average = scores.mean() if scores.shape[0] > 0 else np.nan
        self.day_effects = self.compute_day_effects(scores, day_positions, len(dataset))
        adjusted = scores - self.day_effects[day_positions]
        self.compute_player_stats(idxs, scores, adjusted)

        self.ratings = self.adjusted_averages.copy()
        self.shrinkage_factors = np.full(self.num_competitors, np.nan)
        self.population_mean = np.nan
        self.weighted_mean = np.nan
        self.tau2 = np.nan
        if self.bayes_adjustment and np.any(self.games_played >= MIN_RELIABLE_GAMES):
            self.shrink()
        return self.ratings
