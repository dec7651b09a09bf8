from puzzlerank.configs import InvalidConfigError, LeaderboardConfig
from puzzlerank.leaderboard import LeaderboardEntry, build_model, calculate_leaderboard, rank_competitors
from puzzlerank.utils.data_utils import DayDataset, InvalidDatasetError, InvalidScoreError, filter_failures
