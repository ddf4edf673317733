"""
Tests for target materialization.
"""

import numpy as np
import pytest

from sfquery.algebra.factor import Factor
from sfquery.algebra.semiring import SumProductSemiring
from sfquery.model.structure import FactorModel
from sfquery.solver.elimination import solve_all
from sfquery.structured.materialize import joint_factor, materialize_targets
from sfquery.structured.solution import Bounds


@pytest.fixture
def sr():
    return SumProductSemiring()


@pytest.fixture
def ab_model():
    model = FactorModel()
    a = model.add_variable("A", [0, 1])
    b = model.add_variable("B", [0, 1])
    model.add_factor("f_AB", [a, b], [[1.0, 3.0], [2.0, 4.0]])
    return model, a, b


class TestJointFactor:
    def test_empty_is_unit(self, sr):
        j = joint_factor([], sr)
        assert j.variables == ()
        assert float(j.data) == 1.0

    def test_product_of_all(self, sr, ab_model):
        model, a, b = ab_model
        solutions = solve_all(model, [a, b])
        j = joint_factor(solutions[Bounds.LOWER][0], sr)
        assert np.allclose(j.data, [[1.0, 3.0], [2.0, 4.0]])


class TestMaterializeTargets:
    def test_unnormalized_marginals(self, sr, ab_model):
        model, a, b = ab_model
        cache = materialize_targets(solve_all(model, [a, b]), [a, b], model.collection, sr)

        assert list(cache) == [Bounds.LOWER]
        assert np.allclose(cache[Bounds.LOWER][a].data, [4.0, 6.0])
        assert np.allclose(cache[Bounds.LOWER][b].data, [3.0, 7.0])

    def test_snapshot_is_read_only(self, sr, ab_model):
        model, a, b = ab_model
        cache = materialize_targets(solve_all(model, [a, b]), [a, b], model.collection, sr)

        with pytest.raises(TypeError):
            cache[Bounds.UPPER] = {}
        with pytest.raises(TypeError):
            cache[Bounds.LOWER][a] = None

    def test_deterministic(self, sr, ab_model):
        model, a, b = ab_model
        solutions = solve_all(model, [a, b])

        first = materialize_targets(solutions, [a, b], model.collection, sr)
        second = materialize_targets(solutions, [a, b], model.collection, sr)

        for target in (a, b):
            f1, f2 = first[Bounds.LOWER][target], second[Bounds.LOWER][target]
            assert f1.variables == f2.variables
            assert np.array_equal(f1.data, f2.data)

    def test_empty_solution_gives_uniform(self, sr, ab_model):
        model, a, _ = ab_model
        cache = materialize_targets({Bounds.LOWER: ([], None)}, [a], model.collection, sr)

        assert np.allclose(cache[Bounds.LOWER][a].data, [1.0, 1.0])

    def test_every_bounds_materialized(self, sr):
        model = FactorModel()
        x = model.add_variable("X", [0, 1], has_star=True)
        y = model.add_variable("Y", [0, 1])
        model.add_factor("f_XY", [x, y], [[1.0, 1.0], [1.0, 1.0], [2.0, 0.0]])

        cache = materialize_targets(solve_all(model, [x, y]), [x, y], model.collection, sr)

        assert set(cache) == {Bounds.LOWER, Bounds.UPPER}
        assert np.allclose(cache[Bounds.LOWER][y].data, [2.0, 2.0])
        assert np.allclose(cache[Bounds.UPPER][y].data, [3.0, 3.0])
