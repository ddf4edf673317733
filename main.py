#!/usr/bin/env python3
"""
SFQuery: Structured Factored Queries

Exact marginal and joint queries over discrete factor models.

Usage:
    # Query marginals from a JSON problem
    python main.py query --input problem.json --output result.json

    # Joint distribution over the chosen targets
    python main.py query --input problem.json --targets A,B --joint

    # Run demos
    python main.py demo --example chain

    # Run tests
    python main.py test
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from sfquery import (
    FactorModel,
    MultipleScenariosError,
    OneTimeStructuredProbQuery,
    QueryConfig,
    UnresolvedSupportError,
    __version__,
)
from sfquery.structured.errors import QueryError

logger = logging.getLogger("sfquery.cli")


def load_problem_from_json(filepath: str) -> Tuple[FactorModel, List[str]]:
    """
    Load a model and its query targets from a JSON file.

    Expected format:
    {
        "variables": {"A": {"values": [0, 1], "star": false}, "B": [0, 1]},
        "factors": {
            "f1": {"scope": ["A", "B"], "values": [[1, 3], [2, 4]]}
        },
        "targets": ["A", "B"]
    }
    """
    with open(filepath, "r") as f:
        data = json.load(f)

    model = FactorModel.from_dict(data)
    targets = list(data.get("targets", data["variables"].keys()))
    return model, targets


def _plain(value: Any) -> Any:
    """JSON-friendly rendering of an extended value."""
    if not value.is_regular:
        return "*"
    v = value.value
    return v.item() if isinstance(v, np.generic) else v


def save_result_to_json(filepath: str, marginals: Dict[str, Any], joint: Optional[Dict[str, Any]]) -> None:
    """Save query results to a JSON file."""
    output: Dict[str, Any] = {"marginals": marginals}
    if joint is not None:
        output["joint"] = joint

    with open(filepath, "w") as f:
        json.dump(output, f, indent=2)


def cmd_query(args):
    """Execute the query command."""
    print(f"Loading problem from: {args.input}")
    model, target_names = load_problem_from_json(args.input)
    if args.targets:
        target_names = [t.strip() for t in args.targets.split(",") if t.strip()]

    config = QueryConfig.from_json(args.config) if args.config else QueryConfig()

    print(f"\nProblem specification:")
    print(f"  Variables: {len(model.collection)}")
    for component in model.collection:
        var = component.variable
        star = " (+ *)" if var.has_star else ""
        print(f"    {var.name}: {list(var.value_set.regular)}{star}")
    print(f"  Factors: {len(model.factors)}")
    for fdef in model.factor_defs():
        print(f"    {fdef.name}: scope {tuple(e.name for e in fdef.scope)}, shape {fdef.weights.shape}")

    try:
        targets = [model.element(n) for n in target_names]
    except KeyError as e:
        print(f"Error: {e}")
        return 1

    print(f"\nTargets: {', '.join(target_names)}")
    alg = OneTimeStructuredProbQuery(model, *targets, config=config)
    alg.start()

    marginals: Dict[str, Any] = {}
    status = 0
    print("\nMarginal distributions:")
    for t in targets:
        try:
            dist = alg.distribution(t).to_list()
        except QueryError as e:
            print(f"  P({t.name}) unavailable: {e}")
            marginals[t.name] = {"error": str(e)}
            status = 1
            continue
        marginals[t.name] = [[p, v.item() if isinstance(v, np.generic) else v] for p, v in dist]
        dist_str = ", ".join(f"{v!r}: {p:.6f}" for p, v in dist)
        print(f"  P({t.name}) = {{{dist_str}}}")

    joint = None
    if args.joint:
        try:
            ordering, entries = alg.joint_distribution(targets)
        except QueryError as e:
            print(f"\nJoint distribution failed: {e}")
            status = 1
        else:
            names = [name for name, _ in ordering]
            print(f"\nJoint distribution over ({', '.join(names)}):")
            for p, values in entries:
                vals = ", ".join(repr(_plain(v)) for v in values)
                print(f"  ({vals}) -> {p:.6f}")
            joint = {
                "ordering": names,
                "entries": [[p, [_plain(v) for v in values]] for p, values in entries],
            }

    if args.output:
        save_result_to_json(args.output, marginals, joint)
        print(f"\nResults saved to: {args.output}")

    return status


def demo_simple_chain():
    """Demo: Simple chain A -- B -- C"""
    print("=" * 60)
    print("Demo: Simple Chain A -- B -- C")
    print("=" * 60)

    model = FactorModel()
    a = model.add_variable("A", [0, 1])
    b = model.add_variable("B", [0, 1])
    c = model.add_variable("C", [0, 1])

    phi_A = np.array([0.6, 0.4])
    phi_AB = np.array([[0.9, 0.1], [0.2, 0.8]])
    phi_BC = np.array([[0.3, 0.7], [0.5, 0.5]])

    model.add_factor("f_A", [a], phi_A)
    model.add_factor("f_AB", [a, b], phi_AB)
    model.add_factor("f_BC", [b, c], phi_BC)

    # Brute force
    joint = phi_A[:, None, None] * phi_AB[:, :, None] * phi_BC[None, :, :]
    brute_C = joint.sum(axis=(0, 1)) / joint.sum()

    alg = OneTimeStructuredProbQuery(model, a, c)
    alg.start()
    dist_C = alg.distribution(c).to_list()

    print(f"\nP(C) brute force: {brute_C}")
    print(f"P(C) query:       {[p for p, _ in dist_C]}")
    print(f"E[C]:             {alg.mean(c):.6f}")

    passed = np.allclose(brute_C, [p for p, _ in dist_C])
    print(f"\nMatch: {'✓' if passed else '✗'}")
    return passed


def demo_bounds():
    """Demo: A model with * needs a bounds-aware query for its point answers."""
    print("=" * 60)
    print("Demo: Lower and upper bounds")
    print("=" * 60)

    model = FactorModel()
    x = model.add_variable("X", ["low", "high"], has_star=True)
    y = model.add_variable("Y", [0, 1])
    model.add_factor("f_X", [x], [0.5, 0.3, 0.2])
    model.add_factor("f_XY", [x, y], [[0.9, 0.1], [0.4, 0.6], [0.5, 0.5]])

    alg = OneTimeStructuredProbQuery(model, x, y)
    alg.start()

    print(f"\nBounds computed: {[b.name for b in alg.target_factors]}")
    passed = True
    for target in (x, y):
        try:
            alg.distribution(target)
            print(f"  P({target.name}): answered (unexpected)")
            passed = False
        except (UnresolvedSupportError, MultipleScenariosError) as e:
            print(f"  P({target.name}) rejected: {type(e).__name__}")

    print(f"\nRejected as expected: {'✓' if passed else '✗'}")
    return passed


def cmd_demo(args):
    """Execute the demo command."""
    demos = {
        "chain": demo_simple_chain,
        "bounds": demo_bounds,
    }

    if args.example == "all":
        results = []
        for name, func in demos.items():
            try:
                passed = func()
                results.append((name, passed))
            except Exception as e:
                logger.exception("Demo %s failed", name)
                print(f"Error in {name}: {e}")
                results.append((name, False))
            print()

        print("=" * 60)
        print("Summary")
        print("=" * 60)
        all_passed = True
        for name, passed in results:
            status = "✓ PASS" if passed else "✗ FAIL"
            print(f"  {name}: {status}")
            if not passed:
                all_passed = False

        return 0 if all_passed else 1

    try:
        passed = demos[args.example]()
        return 0 if passed else 1
    except Exception as e:
        logger.exception("Demo %s failed", args.example)
        print(f"Error: {e}")
        return 1


def cmd_test(args):
    """Execute the test command."""
    import subprocess

    test_dir = Path(__file__).parent / "tests"
    if not test_dir.exists():
        print(f"Test directory not found: {test_dir}")
        return 1

    cmd = [sys.executable, "-m", "pytest", str(test_dir)]
    if args.verbose:
        cmd.append("-v")
    if args.coverage:
        cmd.extend(["--cov=sfquery", "--cov-report=term-missing"])

    print(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, cwd=Path(__file__).parent)
    return result.returncode


def cmd_info(args):
    """Display system information."""
    print(f"SFQuery v{__version__}")
    print("Exact structured queries over discrete factor models")
    print()
    print("Elimination heuristics:")
    print("  min_fill   - fewest fill-in edges first (default)")
    print("  min_degree - fewest neighbours first")
    print()
    print("Python:", sys.version.split()[0])
    print("NumPy:", np.__version__)

    import networkx
    print("NetworkX:", networkx.__version__)

    return 0


def main():
    parser = argparse.ArgumentParser(
        prog="sfquery",
        description="SFQuery: Structured Factored Queries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Marginals for every target listed in the file
  sfquery query --input problem.json --output result.json

  # Joint distribution over A and B
  sfquery query --input problem.json --targets A,B --joint

  # Run demos
  sfquery demo --example all

  # Run tests
  sfquery test -v
"""
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"SFQuery {__version__}"
    )
    parser.add_argument("--debug", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Query command
    query_parser = subparsers.add_parser("query", help="Query a factor model")
    query_parser.add_argument("--input", "-i", type=str, required=True, help="Input JSON file")
    query_parser.add_argument("--output", "-o", type=str, help="Output JSON file")
    query_parser.add_argument("--targets", "-t", type=str, help="Comma separated targets: 'A,B'")
    query_parser.add_argument("--config", type=str, help="QueryConfig JSON file")
    query_parser.add_argument(
        "--joint", "-j",
        action="store_true",
        help="Also compute the joint distribution over the targets"
    )

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run demonstration examples")
    demo_parser.add_argument(
        "--example", "-e",
        choices=["chain", "bounds", "all"],
        default="all",
        help="Which example to run (default: all)"
    )

    # Test command
    test_parser = subparsers.add_parser("test", help="Run test suite")
    test_parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    test_parser.add_argument("--coverage", "-c", action="store_true", help="With coverage")

    # Info command
    subparsers.add_parser("info", help="Show system information")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "query":
        return cmd_query(args)
    elif args.command == "demo":
        return cmd_demo(args)
    elif args.command == "test":
        return cmd_test(args)
    elif args.command == "info":
        return cmd_info(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
