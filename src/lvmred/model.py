"""
Core Reduced LVM Objects

Defines the data structures holding the linear predictors of a
reduced latent variable model.

These are pure data classes representing:
    - Linear predictor entries (one per endogenous variable)
    - The host model (root container of the linear-predictor map)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about estimation or fitting
        - Store source data only (link/endo are derived on read)
        - Are fully serializable
        - Represent structure, not behavior
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from lvmred.options import lava_options


@dataclass
class LinearPredictorEntry:
    """
    Linear predictor of a single endogenous variable.

    Properties:
        con:
            Connection labels, one per predictor term
            Example: ["y~x1", "y~x2"]

        name:
            Predictor names, parallel to con (same length)

        x:
            Covariates feeding this predictor (may be empty)

    DESIGN NOTE:
        link ("y~x1") and endo ("y") are NOT stored here.
        They depend on the map key and the global symbol,
        so they are recomputed every time they are requested.
    """

    con: List[str] = field(default_factory=list)
    name: List[str] = field(default_factory=list)
    x: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[str]]:
        return {"con": list(self.con), "name": list(self.name), "x": list(self.x)}

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "LinearPredictorEntry":
        """Build an entry from a {con, name, x} mapping; derived keys are ignored."""
        return cls(
            con=list(mapping.get("con") or []),
            name=list(mapping.get("name") or []),
            x=list(mapping.get("x") or []),
        )


LinearPredictorMap = Dict[str, LinearPredictorEntry]


@dataclass
class ReducedLVM:
    """
    Host model object carrying the linear-predictor map.

    Only the lp slot is modelled here. Everything else a latent variable
    model holds (graph, parameters, covariances) lives in the surrounding
    library.

    Properties:
        lp:
            Ordered mapping endogenous variable name -> LinearPredictorEntry

        metadata:
            Arbitrary key-value pairs (use sparingly)

    INVARIANTS:
        - Keys of lp are the endogenous variable names, unique
        - con and name of every entry have equal length
    """

    lp: LinearPredictorMap = field(default_factory=dict)
    metadata: Dict[str, str] = field(default_factory=dict)

    def endogenous(self) -> List[str]:
        """Endogenous variable names, in map order."""
        return list(self.lp)

    def get_entry(self, endo: str) -> Optional[LinearPredictorEntry]:
        """
        Retrieve the linear predictor of an endogenous variable.

        Args:
            endo: Endogenous variable name

        Returns:
            LinearPredictorEntry or None if not found
        """
        return self.lp.get(endo)

    def add_regression(
        self,
        y: str,
        x: Sequence[str],
        con: Optional[Sequence[str]] = None,
        name: Optional[Sequence[str]] = None,
    ) -> LinearPredictorEntry:
        """
        Register covariates x in the linear predictor of y.

        Default connection labels are "y~xi" (current link symbol) and
        default predictor names are the covariate names. Covariates are
        appended when y already has a linear predictor.

        Returns:
            The (new or extended) entry of y
        """
        x = list(x)
        if con is None:
            sep = lava_options().symbol[0]
            con = [f"{y}{sep}{xi}" for xi in x]
        if name is None:
            name = list(x)
        if len(con) != len(name):
            raise ValueError(
                f"con and name must have the same length, got {len(con)} and {len(name)}"
            )

        entry = self.lp.setdefault(y, LinearPredictorEntry())
        entry.con.extend(con)
        entry.name.extend(name)
        entry.x.extend(x)
        return entry

    def lp_view(
        self,
        fields: Union[None, str, Sequence[str]] = "name",
        selector=None,
        format="vector",
    ):
        """Read the linear predictors (see lvmred.lp.lp)."""
        from lvmred.lp import lp
        return lp(self, fields=fields, selector=selector, format=format)

    def set_lp(self, value, selector=None) -> "ReducedLVM":
        """Return a copy with the linear predictors replaced (see lvmred.lp.set_lp)."""
        from lvmred.lp import set_lp
        return set_lp(self, value, selector=selector)
