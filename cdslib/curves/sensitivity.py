"""
Point sensitivities to curve nodes.

A sensitivity is keyed by the curve name and the index of the node it refers
to; values for the same node are merged by addition.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Mapping, Tuple

import pandas as pd


@dataclass(frozen=True, order=True)
class NodeId:
    """Identifies one node (zero rate parameter) of a named curve."""

    curve_name: str
    index: int

    def __str__(self) -> str:
        return f"{self.curve_name}[{self.index}]"


class PointSensitivities:
    """Immutable map from curve node to first-order sensitivity."""

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[NodeId, float] | None = None):
        self._values: Dict[NodeId, float] = dict(values) if values else {}

    @classmethod
    def none(cls) -> "PointSensitivities":
        return cls()

    @classmethod
    def of_curve(cls, curve_name: str, values) -> "PointSensitivities":
        """Build from one value per node of ``curve_name``, in node order."""
        return cls(
            {NodeId(curve_name, i): float(v) for i, v in enumerate(values)}
        )

    def combined_with(self, other: "PointSensitivities") -> "PointSensitivities":
        merged = dict(self._values)
        for node, value in other._values.items():
            merged[node] = merged.get(node, 0.0) + value
        return PointSensitivities(merged)

    def multiplied_by(self, factor: float) -> "PointSensitivities":
        return PointSensitivities(
            {node: float(value * factor) for node, value in self._values.items()}
        )

    def get(self, node: NodeId, default: float = 0.0) -> float:
        return self._values.get(node, default)

    def for_curve(self, curve_name: str) -> Dict[int, float]:
        """Sensitivities of one curve keyed by node index."""
        return {
            node.index: value
            for node, value in self._values.items()
            if node.curve_name == curve_name
        }

    def items(self) -> Iterator[Tuple[NodeId, float]]:
        return iter(sorted(self._values.items()))

    def is_empty(self) -> bool:
        return not self._values

    def to_frame(self) -> pd.DataFrame:
        """Report as a DataFrame with curve, node and sensitivity columns."""
        rows = [
            {"curve": node.curve_name, "node": node.index, "sensitivity": value}
            for node, value in self.items()
        ]
        return pd.DataFrame(rows, columns=["curve", "node", "sensitivity"])

    def __add__(self, other: "PointSensitivities") -> "PointSensitivities":
        if not isinstance(other, PointSensitivities):
            return NotImplemented
        return self.combined_with(other)

    def __sub__(self, other: "PointSensitivities") -> "PointSensitivities":
        if not isinstance(other, PointSensitivities):
            return NotImplemented
        return self.combined_with(other.multiplied_by(-1.0))

    def __mul__(self, factor: float) -> "PointSensitivities":
        if not isinstance(factor, (int, float)):
            return NotImplemented
        return self.multiplied_by(float(factor))

    __rmul__ = __mul__

    def __neg__(self) -> "PointSensitivities":
        return self.multiplied_by(-1.0)

    def __getitem__(self, node: NodeId) -> float:
        return self._values[node]

    def __contains__(self, node: object) -> bool:
        return node in self._values

    def __iter__(self) -> Iterator[NodeId]:
        return iter(sorted(self._values))

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PointSensitivities):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        body = ", ".join(f"{node}: {value:.6g}" for node, value in self.items())
        return f"PointSensitivities({{{body}}})"
