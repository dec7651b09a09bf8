import numpy as np
import pytest
from puzzlerank.models.average_score import AverageScore
from puzzlerank.utils.data_utils import DayDataset


def fit(days, **kwargs):
    dataset = DayDataset(days)
    model = AverageScore(competitors=dataset.competitors, **kwargs)
    model.fit_dataset(dataset)
    return model


def test_no_adjustments_returns_raw_averages():
    model = fit({1: [('a', 2)], 2: [('b', 4)], 3: [('c', 6)]}, day_adjustment=False, bayes_adjustment=False)
    np.testing.assert_allclose(model.ratings, [2.0, 4.0, 6.0])
    np.testing.assert_array_equal(model.games_played, [1, 1, 1])
    assert np.all(np.isnan(model.adjusted_vars))
    assert np.all(np.isnan(model.shrinkage_factors))


def test_day_effects_remove_day_difficulty():
    days = {1: [('a', 2), ('b', 4)], 2: [('a', 4), ('b', 6)]}
    model = fit(days, day_adjustment=True, bayes_adjustment=False)
    assert model.grand_average == pytest.approx(4.0)
    np.testing.assert_allclose(model.day_effects, [-1.0, 1.0])
    np.testing.assert_allclose(model.raw_averages, [3.0, 5.0])
    np.testing.assert_allclose(model.adjusted_averages, [3.0, 5.0])
    np.testing.assert_allclose(model.adjusted_vars, [0.0, 0.0])
    np.testing.assert_allclose(model.day_adjustments, [0.0, 0.0])


def test_day_adjustment_changes_averages():
    # b only plays the hard day
    days = {1: [('a', 2), ('c', 3)], 2: [('a', 5), ('b', 5), ('c', 6)]}
    model = fit(days, day_adjustment=True, bayes_adjustment=False)
    grand = 21.0 / 5.0
    effects = np.array([2.5 - grand, 16.0 / 3.0 - grand])
    np.testing.assert_allclose(model.day_effects, effects)
    assert model.ratings[1] == pytest.approx(5.0 - effects[1])
    assert model.day_adjustments[1] == pytest.approx(effects[1])


def test_empirical_bayes_shrinkage():
    days = {1: [('a', 2), ('b', 5)], 2: [('a', 4), ('b', 5)], 3: [('c', 3)]}
    model = fit(days, day_adjustment=False, bayes_adjustment=True)
    pop = 19.0 / 5.0
    tau2 = (2 * (3.0 - pop) ** 2 + 2 * (5.0 - pop) ** 2) / 4.0 - (2 * (2.0 / 2.0) + 2 * 0.0) / 4.0
    s_a = tau2 / (tau2 + 1.0)
    assert model.population_mean == pytest.approx(pop)
    assert model.tau2 == pytest.approx(tau2)
    assert model.weighted_mean == pytest.approx(4.0)
    assert model.shrinkage_factors[0] == pytest.approx(s_a)
    assert model.ratings[0] == pytest.approx(s_a * 3.0 + (1.0 - s_a) * pop)
    assert model.ratings[1] == pytest.approx(5.0)
    # a single game is shrunk all the way
    assert model.ratings[2] == pytest.approx(pop)
    assert np.isnan(model.shrinkage_factors[2])


def test_tau2_is_floored():
    # averages sit on the population mean while individual games are noisy
    days = {1: [('a', 1), ('b', 5)], 2: [('a', 5), ('b', 1)]}
    model = fit(days, day_adjustment=False, bayes_adjustment=True)
    assert model.tau2 == pytest.approx(0.01)
    np.testing.assert_allclose(model.ratings, 3.0)


def test_shrinkage_stays_between_average_and_population_mean():
    days = {
        1: [('a', 2), ('b', 4), ('c', 5), ('d', 3)],
        2: [('a', 3), ('b', 6), ('c', 4)],
        3: [('a', 4), ('c', 2), ('e', 6)],
        4: [('b', 3), ('c', 5), ('d', 1)],
    }
    model = fit(days, day_adjustment=True, bayes_adjustment=True)
    low = np.minimum(model.adjusted_averages, model.population_mean) - 1e-12
    high = np.maximum(model.adjusted_averages, model.population_mean) + 1e-12
    assert np.all((model.ratings >= low) & (model.ratings <= high))
    reliable = model.games_played >= 2
    assert np.all((model.shrinkage_factors[reliable] >= 0.0) & (model.shrinkage_factors[reliable] <= 1.0))


def test_population_mean_is_raw_grand_average():
    days = {1: [('a', 2), ('b', 3)], 2: [('a', 6), ('b', 4), ('c', 5)]}
    model = fit(days, day_adjustment=True, bayes_adjustment=True)
    assert model.population_mean == pytest.approx(20.0 / 5.0)


def test_bayes_without_reliable_players_keeps_adjusted_averages():
    model = fit({1: [('a', 2), ('b', 3)], 2: [('c', 5)]}, day_adjustment=True, bayes_adjustment=True)
    np.testing.assert_allclose(model.ratings, model.adjusted_averages)
    assert np.isnan(model.tau2)


def test_standard_error():
    model = fit({1: [('a', 2)], 2: [('a', 4)], 3: [('a', 6)]}, day_adjustment=False, bayes_adjustment=False)
    assert model.adjusted_vars[0] == pytest.approx(4.0)
    assert model.adjusted_stds[0] == pytest.approx(2.0)
    assert model.adjusted_ses[0] == pytest.approx(2.0 / np.sqrt(3.0))


def test_ranking_is_ascending():
    model = fit({1: [('a', 5)], 2: [('b', 2)], 3: [('c', 4)]}, day_adjustment=False, bayes_adjustment=False)
    assert [model.competitors[idx] for idx in model.ranking()] == ['b', 'c', 'a']


def test_get_ratings_maps_players():
    model = fit({1: [('a', 2), ('b', 3)]}, day_adjustment=False, bayes_adjustment=False)
    assert model.get_ratings() == {'a': 2.0, 'b': 3.0}


def test_unfit_model_has_no_ranking():
    model = AverageScore(competitors=['a'])
    with pytest.raises(RuntimeError):
        model.ranking()
