from puzzlerank.utils.data_utils import (
    DayDataset,
    InvalidDatasetError,
    InvalidScoreError,
    filter_failures,
)
