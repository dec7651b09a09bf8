"""Turning day-grouped scores into a ranked leaderboard"""
import logging
from dataclasses import dataclass
from typing import Hashable, List, Mapping, Optional
import numpy as np
from puzzlerank.configs import LeaderboardConfig
from puzzlerank.core.base import DayRatingSystem
from puzzlerank.models import AverageScore, IteratedElo, MapElo
from puzzlerank.utils.data_utils import DayDataset, DayResults, filter_failures

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaderboardEntry:
    player_id: Hashable
    games_played: int
    rating: float


def build_model(competitors: list, config: LeaderboardConfig) -> DayRatingSystem:
    """pick the rating engine named by the config"""
    if config.stats_method == 'Average':
        model = AverageScore(
            competitors=competitors,
            day_adjustment=config.day_adjustment,
            bayes_adjustment=config.bayes_adjustment,
        )
    elif config.elo_method == 'MAP':
        model = MapElo(competitors=competitors, max_score=config.max_score)
    else:
        model = IteratedElo(competitors=competitors, k=config.elo_k, max_score=config.max_score)
    logger.info(f'rating {len(competitors)} competitors with {type(model).__name__}')
    return model


def rank_competitors(model: DayRatingSystem, games_played: np.ndarray, game_cutoff: int) -> List[LeaderboardEntry]:
    """order a fitted model's competitors best first, dropping those with fewer than game_cutoff games"""
    leaderboard = []
    for comp_idx in model.ranking():
        if games_played[comp_idx] < game_cutoff:
            continue
        leaderboard.append(
            LeaderboardEntry(
                player_id=model.competitors[comp_idx],
                games_played=int(games_played[comp_idx]),
                rating=float(model.ratings[comp_idx]),
            )
        )
    logger.debug(f'{model.num_competitors - len(leaderboard)} competitors below the cutoff of {game_cutoff} games')
    return leaderboard


def calculate_leaderboard(
    days: Mapping[Hashable, DayResults],
    config: Optional[LeaderboardConfig] = None,
    **options,
) -> List[LeaderboardEntry]:
    """
    Rate every player in days and return the ranked leaderboard.

    Parameters:
        days: day key -> [(player, score), ...] in chronological order
        config: leaderboard configuration, built from options when omitted
        **options: camelCase options (xIsSeven, gameCutoff, statsMethod, eloMethod, eloK,
                   dayAdjustment, bayesAdjustment) when no config is given

    Returns:
        list of LeaderboardEntry, highest Elo first or lowest average first
    """
    if config is None:
        config = LeaderboardConfig.from_options(options)
    elif options:
        raise TypeError('pass either config or options, not both')

    dataset = DayDataset(filter_failures(days, config.x_is_seven), max_score=config.max_score)
    if dataset.num_competitors == 0:
        return []
    model = build_model(dataset.competitors, config)
    model.fit_dataset(dataset)
    return rank_competitors(model, dataset.games_played, config.game_cutoff)
