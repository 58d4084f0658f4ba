"""
Demo: read and update the linear predictors of the example models.
"""

from lvmred.examples import build_example_regression, build_example_lvm
from lvmred.lp import lp, set_lp
from lvmred.serialization import model_to_yaml


def main():
    print("=" * 70)
    print("REGRESSION: y ~ x1 + ... + x10")
    print("=" * 70)
    m = build_example_regression()
    print("  lp(m)                    :", lp(m))
    print("  lp(m, 'link')            :", lp(m, fields="link"))
    print("  lp(m, ['x', 'link'])     :", lp(m, fields=["x", "link"], format="nested"))

    # Keep only the first three terms of y
    new_lp = lp(m, fields=None)["y"]
    new_lp = {k: v[:3] for k, v in new_lp.items()}
    m = set_lp(m, new_lp, selector=1)
    print("  after set_lp             :", lp(m, fields=None))
    print()

    print("=" * 70)
    print("LVM: y1 ~ x1..x10, y2 ~ x51..x150")
    print("=" * 70)
    m = build_example_lvm()
    print("  endogenous               :", lp(m, fields="endogeneous"))
    print("  number of links          :", lp(m, fields="n.link"))
    print("  links of lp 1            :", lp(m, fields="link", selector=1))
    print()

    print("YAML:")
    print(model_to_yaml(build_example_regression(n=3)))


if __name__ == "__main__":
    main()
