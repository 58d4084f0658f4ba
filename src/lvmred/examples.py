"""
Example model builders.

Mirrors the usual walkthrough: a single regression y ~ x1..x10, and a
two-outcome model y1 ~ x1..x10, y2 ~ x51..x150.
"""
from lvmred.model import ReducedLVM


def build_example_regression(n: int = 10, y: str = "y") -> ReducedLVM:
    model = ReducedLVM(metadata={"example": "regression"})
    model.add_regression(y, [f"x{i}" for i in range(1, n + 1)])
    return model


def build_example_lvm() -> ReducedLVM:
    model = ReducedLVM(metadata={"example": "lvm"})

    # Two outcomes with disjoint covariate sets
    model.add_regression("y1", [f"x{i}" for i in range(1, 11)])
    model.add_regression("y2", [f"x{i}" for i in range(51, 151)])

    return model
