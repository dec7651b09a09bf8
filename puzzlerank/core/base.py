"""base class for day-based rating systems"""
from abc import ABC, abstractmethod
import numpy as np
from puzzlerank.utils.data_utils import DayDataset


class DayRatingSystem(ABC):
    """
    Base class for rating systems fit on puzzle scores grouped by day. This class provides the
    structure shared by the Elo and average score engines.

    Every call to fit_dataset rebuilds the rating buffers from scratch, nothing carries over
    between calls.

    Attributes:
        rating_dim (int): Dimension of competitor ratings, 1 for every engine here.
        higher_is_better (bool): Whether larger ratings rank higher. False for average scores,
                                 which count guesses.
        competitors (list): A list of competitors within the rating system.
        num_competitors (int): The number of competitors in the system.
        ratings (np.ndarray): Ratings from the most recent fit, None before the first fit.
    """

    rating_dim: int = 1
    higher_is_better: bool = True

    def __init__(self, competitors):
        """
        Parameters:
            competitors (list): The competitors to be rated, in the order of the dataset the
                                system will be fit on.
        """
        self.competitors = competitors
        self.num_competitors = len(competitors)
        self.ratings = None

    def check_dataset(self, dataset: DayDataset):
        if list(dataset.competitors) != list(self.competitors):
            raise ValueError('dataset competitors do not match the competitors of the rating system')

    @abstractmethod
    def fit_dataset(self, dataset: DayDataset) -> np.ndarray:
        """
        Fits ratings on every day of a dataset and returns the final rating vector.

        Parameters:
            dataset (DayDataset): day-grouped scores with the same competitors as this system
        """
        raise NotImplementedError

    def ranking(self) -> np.ndarray:
        """competitor indices from best to worst, ties keep competitor order"""
        if self.ratings is None:
            raise RuntimeError('fit_dataset must be called before ranking')
        sort_array = -self.ratings if self.higher_is_better else self.ratings
        return np.argsort(sort_array, kind='stable')

    def get_ratings(self) -> dict:
        if self.ratings is None:
            raise RuntimeError('fit_dataset must be called before get_ratings')
        return dict(zip(self.competitors, self.ratings.tolist()))
