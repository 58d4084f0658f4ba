"""
Linear predictor accessors for reduced LVM objects.

    lp(model, ...)              read a filtered/reshaped view of model.lp
    set_lp(model, value, ...)   replace all or part of model.lp

Both share selector resolution: entries are picked by 1-based position
or by endogenous variable name. Every argument is validated before
anything is read or written; failures raise InvalidArgumentError with
the offending values and the valid domain in the message.

The reader never mutates the model. The writer returns a new model
object, so callers rebind:

    m = set_lp(m, new_entry, selector="y")
"""

import copy
import logging
import warnings
from dataclasses import replace
from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union

from lvmred.model import LinearPredictorEntry, ReducedLVM
from lvmred.options import lava_options

logger = logging.getLogger(__name__)


class InvalidArgumentError(ValueError):
    """Raised when a field, format or selector argument is not valid."""
    pass


class LPField(Enum):
    """Attributes that can be extracted from a linear predictor entry."""
    LINK = "link"   # derived: endo ~ x
    CON = "con"
    NAME = "name"
    X = "x"
    ENDO = "endo"   # derived: the map key


class LPFormat(Enum):
    """Shape of the value returned by lp()."""
    VECTOR = "vector"         # one flat list
    PER_ENTRY = "per-entry"   # key -> raw value of the single field
    NESTED = "nested"         # key -> {field: value}


ENDOGENOUS = "endogeneous"
N_LINK = "n.link"

_FORMAT_ALIASES = {
    "list": LPFormat.PER_ENTRY,
    "list2": LPFormat.NESTED,
}

_ENTRY_KEYS = ("con", "name", "x")

Selector = Union[None, int, str, Sequence[int], Sequence[str]]


def _quote_all(values) -> str:
    return " ".join(f'"{v}"' for v in values)


def _coerce_fields(fields) -> List[LPField]:
    if isinstance(fields, (str, LPField)):
        fields = [fields]

    valid = [f.value for f in LPField]
    requested = [f.value if isinstance(f, LPField) else f for f in fields]
    invalid = [f for f in requested if f not in valid]
    if invalid:
        raise InvalidArgumentError(
            f"type {_quote_all(invalid)} is not valid; valid types: {_quote_all(valid)}"
        )
    return [LPField(f) for f in requested]


def _coerce_format(format) -> LPFormat:
    if isinstance(format, LPFormat):
        return format
    if format in _FORMAT_ALIASES:
        return _FORMAT_ALIASES[format]
    try:
        return LPFormat(format)
    except ValueError:
        valid = [f.value for f in LPFormat]
        raise InvalidArgumentError(
            f"format {format!r} is not valid; format must be one of: {_quote_all(valid)}"
        ) from None


def _describe_range(size: int) -> str:
    return f"1..{size}" if size > 0 else "(empty)"


def resolve_selector(keys: Sequence[str], selector: Selector) -> List[int]:
    """
    Turn a selector into 0-based positions into keys.

    Args:
        keys: Endogenous variable names, in map order
        selector: None (all entries), 1-based position(s) or name(s)

    Returns:
        List of 0-based positions, in selector order (duplicates kept)

    Raises:
        InvalidArgumentError: If a position is out of range, a name is
            not a key, or the selector mixes/uses unsupported types
    """
    keys = list(keys)
    if selector is None:
        return list(range(len(keys)))

    if isinstance(selector, (int, str)):
        items = [selector]
    elif isinstance(selector, (list, tuple, range)):
        items = list(selector)
    else:
        items = None

    if items == []:
        return []

    if items and all(isinstance(s, int) and not isinstance(s, bool) for s in items):
        invalid = [s for s in items if not 1 <= s <= len(keys)]
        if invalid:
            raise InvalidArgumentError(
                f"lp {' '.join(str(s) for s in invalid)} is not valid; "
                f"if numeric lp must be in: {_describe_range(len(keys))}"
            )
        return [s - 1 for s in items]

    if items and all(isinstance(s, str) for s in items):
        invalid = [s for s in items if s not in keys]
        if invalid:
            raise InvalidArgumentError(
                f"lp {_quote_all(invalid)} is not valid; "
                f"if character lp must be in: {_quote_all(keys)}"
            )
        return [keys.index(s) for s in items]

    raise InvalidArgumentError(
        f"lp must be integer position(s) or endogenous name(s), got {selector!r}"
    )


def _entry_view(key: str, entry: LinearPredictorEntry, wanted: List[LPField], sep: str) -> Dict[LPField, Any]:
    """Field values of one entry, including the derived link/endo."""
    view: Dict[LPField, Any] = {}
    for f in wanted:
        if f is LPField.LINK:
            view[f] = [f"{key}{sep}{xi}" for xi in entry.x]
        elif f is LPField.ENDO:
            view[f] = key
        else:
            view[f] = list(getattr(entry, f.value))
    return view


def _flatten(values) -> List[Any]:
    flat: List[Any] = []
    for value in values:
        if isinstance(value, (list, tuple)):
            flat.extend(value)
        else:
            flat.append(value)
    return flat


def lp(
    model: ReducedLVM,
    fields: Union[None, str, LPField, Sequence[Union[str, LPField]]] = "name",
    selector: Selector = None,
    format: Union[str, LPFormat] = "vector",
):
    """
    Extract the linear predictors of a model.

    Args:
        model: ReducedLVM holding the linear-predictor map
        fields:
            Attribute(s) among "link", "con", "name", "x", "endo", or
              None or []    -> con, name and x, nested format
              "endogeneous" -> the endogenous names (other arguments ignored)
              "n.link"      -> number of links per entry
        selector: Entries to consider, by 1-based position or by name
        format: "vector", "per-entry" or "nested"
            ("list" and "list2" are accepted for the last two)

    Returns:
        None when the model has no linear predictor, otherwise
            vector    -> flat list
            per-entry -> {endo: value} (or {endo: count} for "n.link")
            nested    -> {endo: {field: value}}

    Raises:
        InvalidArgumentError: On unknown fields/format, invalid selector,
            or a vector/per-entry format with more than one field

    Examples:
        lp(m, fields="link")        -> ["y~x1", "y~x2"]
        lp(m, fields="n.link")      -> {"y": 2}
        lp(m, fields=None)          -> {"y": {"con": [...], "name": [...], "x": ["x1", "x2"]}}
        lp(m, fields=["x", "link"], format="nested", selector=1)
    """
    if not model.lp:
        return None

    # one-element sequences behave like the bare value
    if isinstance(fields, (list, tuple)):
        fields = list(fields)
        if len(fields) == 1:
            fields = fields[0]

    size = False
    if fields is None or fields == []:
        wanted = [LPField.CON, LPField.NAME, LPField.X]
        format = LPFormat.NESTED
    elif fields == ENDOGENOUS:
        return list(model.lp)
    elif fields == N_LINK:
        wanted = [LPField.LINK]
        format = LPFormat.PER_ENTRY
        size = True
    else:
        wanted = _coerce_fields(fields)

    fmt = _coerce_format(format)
    if fmt is not LPFormat.NESTED and len(wanted) > 1:
        raise InvalidArgumentError(
            f"format must be \"{LPFormat.NESTED.value}\" when more than one type is requested; "
            f"number of types: {len(wanted)}"
        )

    keys = list(model.lp)
    positions = resolve_selector(keys, selector)
    logger.debug("lp: fields=%s format=%s positions=%s", [f.value for f in wanted], fmt.value, positions)

    sep = lava_options().symbol[0]
    views: List[Tuple[str, Dict[LPField, Any]]] = [
        (keys[i], _entry_view(keys[i], model.lp[keys[i]], wanted, sep)) for i in positions
    ]

    if fmt is LPFormat.NESTED:
        return {key: {f.value: view[f] for f in wanted} for key, view in views}

    field_ = wanted[0]
    if fmt is LPFormat.PER_ENTRY:
        if size:
            return {key: len(view[field_]) for key, view in views}
        return {key: view[field_] for key, view in views}

    return _flatten(view[field_] for _, view in views)


def _is_entry_mapping(value) -> bool:
    return isinstance(value, Mapping) and set(value.keys()) == set(_ENTRY_KEYS)


def _as_entry(value):
    """Entries are stored as fresh LinearPredictorEntry copies; anything else is kept as is."""
    if isinstance(value, LinearPredictorEntry):
        return copy.deepcopy(value)
    if isinstance(value, Mapping):
        return LinearPredictorEntry.from_mapping(value)
    return value


def set_lp(model: ReducedLVM, value, selector: Selector = None) -> ReducedLVM:
    """
    Update the linear predictors of a model.

    Args:
        model: ReducedLVM to update (left untouched)
        value:
            Without selector: the new map {endo: entry} (None empties it)
            With selector: a list of entries, a {endo: entry} mapping whose
            values are used in order, or a single entry when exactly one
            position is selected
        selector: Entries to replace, by 1-based position or by name

    Returns:
        New ReducedLVM carrying the updated map. It shares no mutable
        state with the input model.

    Raises:
        InvalidArgumentError: If the selector is not valid

    Note:
        The shape of value is not checked. Malformed entries are stored
        as given and only fail when they are read.
    """
    if selector is None:
        new_map = {key: _as_entry(entry) for key, entry in (value or {}).items()}
        logger.debug("set_lp: replaced whole map (%d entries)", len(new_map))
        return replace(model, lp=new_map, metadata=copy.deepcopy(model.metadata))

    keys = list(model.lp)
    positions = resolve_selector(keys, selector)

    if isinstance(value, LinearPredictorEntry) or (len(positions) == 1 and _is_entry_mapping(value)):
        value = [value]
    if isinstance(value, Mapping):
        value = list(value.values())
    values = list(value)

    if positions and not values:
        raise InvalidArgumentError(
            f"replacement has length zero; {len(positions)} entries selected"
        )
    if values and len(positions) % len(values) != 0:
        warnings.warn(
            f"number of entries to replace ({len(positions)}) is not a multiple "
            f"of replacement length ({len(values)})",
            UserWarning,
        )

    new_map = copy.deepcopy(model.lp)
    for i, pos in enumerate(positions):
        new_map[keys[pos]] = _as_entry(values[i % len(values)])
    logger.debug("set_lp: replaced %s", [keys[pos] for pos in positions])

    return replace(model, lp=new_map, metadata=copy.deepcopy(model.metadata))


def _selector_arg(raw: str):
    return int(raw) if raw.lstrip("-").isdigit() else raw


def main(argv=None):
    """Command line entry point: print lp() of a YAML model as YAML."""
    import argparse
    import yaml

    from lvmred.serialization import model_from_yaml

    parser = argparse.ArgumentParser(description='Extract the linear predictors of a reduced LVM')
    parser.add_argument('model_yaml', help='Path to a model saved with model_to_yaml')
    parser.add_argument('--fields', nargs='*', default=['name'],
                        help='link/con/name/x/endo, "endogeneous" or "n.link"; no value for con+name+x')
    parser.add_argument('--selector', nargs='*', type=_selector_arg, default=None,
                        help='positions (1-based) or endogenous names')
    parser.add_argument('--format', default='vector', help='vector, per-entry or nested')
    args = parser.parse_args(argv)

    with open(args.model_yaml) as fh:
        model = model_from_yaml(fh.read())

    result = lp(model, fields=args.fields or None, selector=args.selector or None, format=args.format)
    print(yaml.safe_dump(result, sort_keys=False), end='')


if __name__ == '__main__':
    main()
