"""configuration of a leaderboard calculation"""
import numbers
from dataclasses import dataclass, fields
from typing import Literal, Mapping
from puzzlerank.utils.constants import FAILED_SCORE, MAX_SCORE

STATS_METHODS = ('Elo', 'Average')
ELO_METHODS = ('Iterated', 'MAP')

# option names used by callers of the leaderboard, mapped to field names
OPTION_NAMES = {
    'xIsSeven': 'x_is_seven',
    'gameCutoff': 'game_cutoff',
    'statsMethod': 'stats_method',
    'eloMethod': 'elo_method',
    'eloK': 'elo_k',
    'dayAdjustment': 'day_adjustment',
    'bayesAdjustment': 'bayes_adjustment',
}


class InvalidConfigError(ValueError):
    """Raised when a leaderboard option has an unusable value."""


@dataclass(frozen=True)
class LeaderboardConfig:
    """
    Attributes:
        x_is_seven: count failed attempts as a score of 7 instead of dropping them
        game_cutoff: minimum number of games to appear on the leaderboard
        stats_method: 'Elo' (higher is better) or 'Average' (lower is better)
        elo_method: 'Iterated' or 'MAP', only used with stats_method 'Elo'
        elo_k: K-factor of iterated Elo
        day_adjustment: correct average scores for the difficulty of each day
        bayes_adjustment: shrink average scores toward the population mean
    """

    x_is_seven: bool = False
    game_cutoff: int = 3
    stats_method: Literal['Elo', 'Average'] = 'Elo'
    elo_method: Literal['Iterated', 'MAP'] = 'Iterated'
    elo_k: float = 2.0
    day_adjustment: bool = True
    bayes_adjustment: bool = True

    def __post_init__(self):
        if self.stats_method not in STATS_METHODS:
            raise InvalidConfigError(f'statsMethod must be one of {STATS_METHODS}, got {self.stats_method!r}')
        if self.elo_method not in ELO_METHODS:
            raise InvalidConfigError(f'eloMethod must be one of {ELO_METHODS}, got {self.elo_method!r}')
        if isinstance(self.game_cutoff, bool) or not isinstance(self.game_cutoff, int) or self.game_cutoff < 1:
            raise InvalidConfigError(f'gameCutoff must be an integer >= 1, got {self.game_cutoff!r}')
        for name in ('x_is_seven', 'day_adjustment', 'bayes_adjustment'):
            if not isinstance(getattr(self, name), bool):
                raise InvalidConfigError(f'{name} must be a bool, got {getattr(self, name)!r}')
        if isinstance(self.elo_k, bool) or not isinstance(self.elo_k, numbers.Real) or not self.elo_k > 0:
            raise InvalidConfigError(f'eloK must be positive, got {self.elo_k!r}')

    @property
    def max_score(self) -> int:
        return FAILED_SCORE if self.x_is_seven else MAX_SCORE

    @classmethod
    def from_options(cls, options: Mapping):
        """Build a config from camelCase option names, missing options keep their defaults."""
        field_names = {field.name for field in fields(cls)}
        kwargs = {}
        for key, value in options.items():
            name = OPTION_NAMES.get(key, key)
            if name not in field_names:
                raise InvalidConfigError(f'unknown option: {key}')
            kwargs[name] = value
        return cls(**kwargs)
