"""
Tests for single-target distribution and expectation queries.
"""

import numpy as np
import pytest

from sfquery.algebra.factor import Factor
from sfquery.config import QueryConfig
from sfquery.model.element import Element
from sfquery.model.structure import FactorModel
from sfquery.structured.algorithm import OneTimeStructuredProbQuery, StructuredProbQueryAlgorithm
from sfquery.structured.distribution import Distribution
from sfquery.structured.errors import (
    AlgorithmInactiveError,
    MultipleScenariosError,
    NotATargetError,
    UnresolvedSupportError,
    ZeroMassError,
)
from sfquery.structured.solution import Bounds


@pytest.fixture
def ab_model():
    """A, B binary with joint weights 1, 3, 2, 4 (total mass 10)."""
    model = FactorModel()
    a = model.add_variable("A", [0, 1])
    b = model.add_variable("B", [0, 1])
    model.add_factor("f_AB", [a, b], [[1.0, 3.0], [2.0, 4.0]])
    return model, a, b


@pytest.fixture
def chain_model():
    model = FactorModel()
    a = model.add_variable("A", ["a0", "a1"])
    b = model.add_variable("B", [0, 1, 2])
    c = model.add_variable("C", [10, 20])
    model.add_factor("f_A", [a], [0.6, 0.4])
    model.add_factor("f_AB", [a, b], [[0.5, 0.3, 0.2], [0.1, 0.1, 0.8]])
    model.add_factor("f_BC", [b, c], [[0.3, 0.7], [0.5, 0.5], [0.9, 0.1]])
    return model, a, b, c


@pytest.fixture
def star_model():
    model = FactorModel()
    x = model.add_variable("X", ["lo", "hi"], has_star=True)
    y = model.add_variable("Y", [0, 1])
    model.add_factor("f_X", [x], [0.5, 0.3, 0.2])
    model.add_factor("f_XY", [x, y], [[0.9, 0.1], [0.4, 0.6], [0.5, 0.5]])
    return model, x, y


def started(model, *targets, **kwargs):
    alg = OneTimeStructuredProbQuery(model, *targets, **kwargs)
    alg.start()
    return alg


class TestComputeDistribution:
    def test_example_marginal(self, ab_model):
        model, a, b = ab_model
        alg = started(model, a, b)

        dist = alg.compute_distribution(a).to_list()
        assert [v for _, v in dist] == [0, 1]
        assert [p for p, _ in dist] == pytest.approx([0.4, 0.6])

        dist_b = alg.compute_distribution(b).to_list()
        assert [p for p, _ in dist_b] == pytest.approx([0.3, 0.7])

    def test_sums_to_one(self, chain_model):
        model, a, b, c = chain_model
        alg = started(model, a, b, c)

        for target in (a, b, c):
            total = sum(p for p, _ in alg.compute_distribution(target))
            assert abs(total - 1.0) < 1e-9

    def test_matches_brute_force(self, chain_model):
        model, a, b, c = chain_model
        alg = started(model, c)

        phi_A = np.array([0.6, 0.4])
        phi_AB = np.array([[0.5, 0.3, 0.2], [0.1, 0.1, 0.8]])
        phi_BC = np.array([[0.3, 0.7], [0.5, 0.5], [0.9, 0.1]])
        joint = phi_A[:, None, None] * phi_AB[:, :, None] * phi_BC[None, :, :]
        brute_C = joint.sum(axis=(0, 1)) / joint.sum()

        dist = alg.compute_distribution(c).to_list()
        assert [v for _, v in dist] == [10, 20]
        assert np.allclose([p for p, _ in dist], brute_C)

    def test_restartable_and_lazy(self, ab_model):
        model, a, _ = ab_model
        alg = started(model, a)

        dist = alg.compute_distribution(a)
        assert isinstance(dist, Distribution)
        assert len(dist) == 2
        assert list(dist) == list(dist)

    def test_unresolved_support_rejected(self, star_model):
        model, x, _ = star_model
        alg = started(model, x)

        with pytest.raises(UnresolvedSupportError, match=r"\*"):
            alg.compute_distribution(x)

    def test_unresolved_checked_before_any_solution(self, star_model):
        model, x, _ = star_model
        alg = OneTimeStructuredProbQuery(model, x)

        # Nothing has been solved, yet the range check fires first
        with pytest.raises(UnresolvedSupportError):
            alg.compute_distribution(x)

    def test_multiple_scenarios_rejected(self, star_model):
        model, _, y = star_model
        alg = started(model, y)

        assert set(alg.target_factors) == {Bounds.LOWER, Bounds.UPPER}
        with pytest.raises(MultipleScenariosError, match="bounds"):
            alg.compute_distribution(y)

    def test_unresolved_wins_over_multiple(self, star_model):
        model, x, y = star_model
        alg = started(model, x, y)

        with pytest.raises(UnresolvedSupportError):
            alg.compute_distribution(x)

    def test_multiple_scenarios_from_processed_solutions(self, ab_model):
        model, a, _ = ab_model
        alg = OneTimeStructuredProbQuery(model, a)
        va = model.collection.variable(a)
        f = Factor((va,), np.array([1.0, 1.0]), alg.semiring)

        alg.process_solutions({Bounds.LOWER: ([f], None), Bounds.UPPER: ([f], None)})
        with pytest.raises(MultipleScenariosError):
            alg.compute_distribution(a)

    def test_zero_mass(self, ab_model):
        model, a, _ = ab_model
        alg = OneTimeStructuredProbQuery(model, a)
        va = model.collection.variable(a)
        zero = Factor((va,), np.array([0.0, 0.0]), alg.semiring)

        alg.process_solutions({Bounds.LOWER: ([zero], None)})
        with pytest.raises(ZeroMassError):
            alg.compute_distribution(a)

    def test_zero_mass_tolerance(self, ab_model):
        model, a, _ = ab_model
        alg = OneTimeStructuredProbQuery(model, a, config=QueryConfig(zero_mass_tolerance=1e-6))
        va = model.collection.variable(a)
        tiny = Factor((va,), np.array([1e-9, 1e-9]), alg.semiring)

        alg.process_solutions({Bounds.LOWER: ([tiny], None)})
        with pytest.raises(ZeroMassError):
            alg.compute_distribution(a)

    def test_no_solution_processed(self, ab_model):
        model, a, _ = ab_model
        alg = OneTimeStructuredProbQuery(model, a)

        with pytest.raises(AlgorithmInactiveError):
            alg.compute_distribution(a)

    def test_non_target_has_no_marginal(self, ab_model):
        model, a, b = ab_model
        alg = started(model, a)

        with pytest.raises(NotATargetError):
            alg.compute_distribution(b)

    def test_unregistered_element(self, ab_model):
        model, a, _ = ab_model
        alg = started(model, a)

        with pytest.raises(NotATargetError):
            alg.compute_distribution(Element("A"))


class TestComputeExpectation:
    def test_indicator_matches_marginal(self, chain_model):
        model, a, b, c = chain_model
        alg = started(model, a, b, c)

        for target in (a, b, c):
            for p, value in alg.compute_distribution(target):
                e = alg.compute_expectation(target, lambda v, value=value: 1.0 if v == value else 0.0)
                assert e == pytest.approx(p, abs=1e-12)

    def test_expectation(self, ab_model):
        model, a, _ = ab_model
        alg = started(model, a)

        assert alg.compute_expectation(a, lambda v: 10.0 * v + 1.0) == pytest.approx(7.0)


class TestProcessSolutions:
    def test_repeated_identical_input(self, ab_model):
        model, a, b = ab_model
        alg = OneTimeStructuredProbQuery(model, a, b)
        solutions = alg.solve()

        first = alg.target_factors
        alg.process_solutions(solutions)
        second = alg.target_factors

        assert first is not second
        for target in (a, b):
            assert np.array_equal(first[Bounds.LOWER][target].data, second[Bounds.LOWER][target].data)

    def test_replacement_leaves_old_snapshot_intact(self, ab_model):
        model, a, _ = ab_model
        alg = OneTimeStructuredProbQuery(model, a)
        va = model.collection.variable(a)

        alg.process_solutions({Bounds.LOWER: ([Factor((va,), np.array([1.0, 1.0]), alg.semiring)], None)})
        old = alg.target_factors
        alg.process_solutions({Bounds.LOWER: ([Factor((va,), np.array([1.0, 3.0]), alg.semiring)], None)})

        assert np.allclose(old[Bounds.LOWER][a].data, [1.0, 1.0])
        assert [p for p, _ in alg.compute_distribution(a)] == pytest.approx([0.25, 0.75])


class TestQueryAPI:
    def test_probability(self, ab_model):
        model, a, b = ab_model
        alg = started(model, a, b)

        assert alg.probability(a, lambda v: v == 1) == pytest.approx(0.6)
        assert alg.probability_of(b, 0) == pytest.approx(0.3)

    def test_mean_and_variance(self, ab_model):
        model, a, _ = ab_model
        alg = started(model, a)

        assert alg.mean(a) == pytest.approx(0.6)
        assert alg.variance(a) == pytest.approx(0.24)

    def test_distribution_requires_target(self, ab_model):
        model, a, b = ab_model
        alg = started(model, a)

        with pytest.raises(NotATargetError):
            alg.distribution(b)
        with pytest.raises(NotATargetError):
            alg.expectation(b, float)

    def test_inactive_before_start(self, ab_model):
        model, a, _ = ab_model
        alg = OneTimeStructuredProbQuery(model, a)

        with pytest.raises(AlgorithmInactiveError):
            alg.distribution(a)

    def test_inactive_after_kill(self, ab_model):
        model, a, _ = ab_model
        alg = started(model, a)
        alg.kill()

        assert not alg.active
        assert len(alg.target_factors) == 0
        with pytest.raises(AlgorithmInactiveError):
            alg.mean(a)

    def test_start_twice(self, ab_model):
        model, a, _ = ab_model
        alg = started(model, a)

        with pytest.raises(RuntimeError):
            alg.start()

    def test_targets_fixed(self, ab_model):
        model, a, b = ab_model
        alg = OneTimeStructuredProbQuery(model, b, a)

        assert alg.problem_targets == [b, a]
        assert alg.query_targets == (b, a)

    def test_constructor_validation(self, ab_model):
        model, a, _ = ab_model
        other = FactorModel()
        z = other.add_variable("Z", [0])

        with pytest.raises(ValueError):
            OneTimeStructuredProbQuery(model)
        with pytest.raises(ValueError):
            OneTimeStructuredProbQuery(model, z)

    def test_base_algorithm_is_abstract(self, ab_model):
        model, a, _ = ab_model

        with pytest.raises(TypeError):
            StructuredProbQueryAlgorithm(model, a)
