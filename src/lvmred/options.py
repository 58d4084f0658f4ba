"""
Process-wide options for the reduced LVM package.

The only option consumed here is the symbol table used to build
link strings (endogenous ~ covariate).
"""

from dataclasses import dataclass, fields, replace
from typing import Tuple


@dataclass(frozen=True)
class LavaOptions:
    """
    Global option table.

    Properties:
        symbol:
            Pair of connectors. The first joins an endogenous variable to a
            covariate ("y~x1"), the second marks a covariance ("y1~~y2").
    """

    symbol: Tuple[str, str] = ("~", "~~")


_options = LavaOptions()


def lava_options() -> LavaOptions:
    """Return the options currently in effect."""
    return _options


def set_lava_options(**kwargs) -> LavaOptions:
    """
    Update one or more options.

    Args:
        **kwargs: option name / value pairs

    Returns:
        The options that were in effect before the update.

    Raises:
        ValueError: If an option name is unknown.
    """
    global _options

    valid = [f.name for f in fields(LavaOptions)]
    unknown = [k for k in kwargs if k not in valid]
    if unknown:
        raise ValueError(
            f"option(s) {', '.join(unknown)} not valid; valid options: {', '.join(valid)}"
        )
    if "symbol" in kwargs:
        kwargs["symbol"] = tuple(kwargs["symbol"])

    previous = _options
    _options = replace(_options, **kwargs)
    return previous


def reset_lava_options() -> LavaOptions:
    """Restore the default options and return them."""
    global _options
    _options = LavaOptions()
    return _options
