"""
Example: Anytime querying and bounds.

X has a pruned outcome (*), so the model is solved under lower and upper
bounds and point queries on it are rejected. Y alone is star-free but
still needs both bounds, so it is rejected too. The star-free model
Z--W is then queried by the anytime algorithm while it keeps re-solving.
"""

import logging

from sfquery import (
    AnytimeStructuredProbQuery,
    FactorModel,
    MultipleScenariosError,
    OneTimeStructuredProbQuery,
    QueryConfig,
    UnresolvedSupportError,
)


def bounded_model():
    model = FactorModel()
    x = model.add_variable("X", ["low", "high"], has_star=True)
    y = model.add_variable("Y", [0, 1])
    model.add_factor("f_X", [x], [0.5, 0.3, 0.2])
    model.add_factor("f_XY", [x, y], [[0.9, 0.1], [0.4, 0.6], [0.5, 0.5]])
    return model, x, y


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    model, x, y = bounded_model()
    alg = OneTimeStructuredProbQuery(model, x, y)
    alg.start()
    print(f"Bounds: {[bounds.name for bounds in alg.target_factors]}")
    for target in (x, y):
        try:
            alg.distribution(target)
        except (UnresolvedSupportError, MultipleScenariosError) as e:
            print(f"P({target.name}) rejected: {e}")

    model = FactorModel()
    z = model.add_variable("Z", [1, 2, 3])
    w = model.add_variable("W", [True, False])
    model.add_factor("f_ZW", [z, w], [[1, 1], [2, 1], [3, 1]])

    anytime = AnytimeStructuredProbQuery(model, z, w, config=QueryConfig(anytime_interval=0.01))
    anytime.start()
    anytime.wait_for_solution(timeout=5.0)
    print(f"\nE[Z] = {anytime.mean(z):.4f}, Var[Z] = {anytime.variance(z):.4f}")
    print(f"P(W) = {anytime.probability_of(w, True):.4f}")
    anytime.kill()
    print(f"Solved {anytime.iterations} times before kill")


if __name__ == "__main__":
    main()
