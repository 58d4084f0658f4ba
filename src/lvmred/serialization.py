"""
Serialization helpers for reduced LVM objects (ReducedLVM, LinearPredictorEntry).

Provides lossless JSON/YAML round-trip via intermediate dict representation.
The linear-predictor map is stored as a list of records so that its order
survives key sorting.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml

from lvmred.model import LinearPredictorEntry, LinearPredictorMap, ReducedLVM


def entry_to_dict(e: LinearPredictorEntry) -> Dict[str, Any]:
    if not isinstance(e, LinearPredictorEntry):
        raise TypeError(f"Unsupported linear predictor entry type: {type(e)}")
    return e.to_dict()


def entry_from_dict(d: Dict[str, Any]) -> LinearPredictorEntry:
    if not isinstance(d, dict):
        raise TypeError(f"Unsupported linear predictor record type: {type(d)}")
    return LinearPredictorEntry.from_mapping(d)


def lp_map_to_dict(m: LinearPredictorMap) -> List[Dict[str, Any]]:
    return [{"endo": endo, **entry_to_dict(e)} for endo, e in m.items()]


def lp_map_from_dict(records: List[Dict[str, Any]] | None) -> LinearPredictorMap:
    if not records:
        return {}
    return {r["endo"]: entry_from_dict(r) for r in records}


def model_to_dict(m: ReducedLVM) -> Dict[str, Any]:
    return {"lp": lp_map_to_dict(m.lp), "metadata": m.metadata}


def model_from_dict(d: Dict[str, Any]) -> ReducedLVM:
    return ReducedLVM(lp=lp_map_from_dict(d.get("lp")), metadata=d.get("metadata") or {})


def model_to_json(m: ReducedLVM) -> str:
    return json.dumps(model_to_dict(m), sort_keys=True)


def model_from_json(s: str) -> ReducedLVM:
    d = json.loads(s)
    return model_from_dict(d)


def model_to_yaml(m: ReducedLVM) -> str:
    return yaml.safe_dump(model_to_dict(m), sort_keys=False)


def model_from_yaml(s: str) -> ReducedLVM:
    d = yaml.safe_load(s)
    return model_from_dict(d or {})
