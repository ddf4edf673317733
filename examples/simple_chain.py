"""
Example: Simple chain factor model.

A--B--C with pairwise factors, queried for A and C.
"""

import numpy as np
from sfquery import FactorModel, OneTimeStructuredProbQuery


def main():
    model = FactorModel()

    # Define variables
    a = model.add_variable("A", [0, 1])
    b = model.add_variable("B", [0, 1])
    c = model.add_variable("C", [0, 1])

    # Unary on A
    phi_A = np.array([0.6, 0.4])

    # Pairwise on (A, B)
    phi_AB = np.array([
        [0.9, 0.1],
        [0.2, 0.8]
    ])

    # Pairwise on (B, C)
    phi_BC = np.array([
        [0.3, 0.7],
        [0.5, 0.5]
    ])

    model.add_factor("f_A", [a], phi_A)
    model.add_factor("f_AB", [a, b], phi_AB)
    model.add_factor("f_BC", [b, c], phi_BC)

    # Solve once; B is eliminated, A and C are kept
    print("Querying simple chain A--B--C for A and C...")
    alg = OneTimeStructuredProbQuery(model, a, c)
    alg.start()

    print("\nMarginal distributions:")
    for target in (a, c):
        print(f"  P({target.name}) = {alg.distribution(target).to_list()}")

    print(f"\nE[C] = {alg.mean(c):.6f}")
    print(f"P(A == C) via joint:")
    ordering, entries = alg.joint_distribution([c, a])
    pos = {name: i for i, (name, _) in enumerate(ordering)}
    p_eq = sum(p for p, vals in entries if vals[pos["A"]] == vals[pos["C"]])
    print(f"  {p_eq:.6f}")

    # Verify by brute force
    print("\n--- Verification by brute force ---")
    joint = np.zeros((2, 2))
    for x in range(2):
        for y in range(2):
            for z in range(2):
                joint[x, z] += phi_A[x] * phi_AB[x, y] * phi_BC[y, z]
    joint /= joint.sum()

    print(f"P(A == C) (brute force) = {np.trace(joint):.6f}")
    print(f"Match: {np.isclose(np.trace(joint), p_eq)}")


if __name__ == "__main__":
    main()
