from __future__ import annotations

import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

import numpy as np

from .geometry import build_washer_mesh, triangle_normal
from .types import MeshMeta, MeshOptions, WasherParams, DEFAULT_NAME


ZERO_EPS = 1e-12
QUANTUM = Decimal("1e-8")


def format_stl_number(value: float) -> str:
    """Plain decimal text for an STL coordinate: no exponent, no float noise."""
    value = float(value)
    if abs(value) < ZERO_EPS:
        return "0"
    # Exact binary value, ties away from zero.
    rounded = Decimal(value).quantize(QUANTUM, rounding=ROUND_HALF_UP)
    if rounded == 0:
        return "0"
    return format(rounded.normalize(), "f")


def _vec(v: Iterable[float]) -> str:
    return " ".join(format_stl_number(c) for c in v)


def solid_name(name: Optional[str]) -> str:
    return re.sub(r"\s+", "_", name or DEFAULT_NAME)


def serialize_ascii_stl(name: Optional[str], triangles: np.ndarray) -> str:
    solid = solid_name(name)
    lines = [f"solid {solid}"]
    for tri in triangles:
        lines.append(f"  facet normal {_vec(triangle_normal(tri))}")
        lines.append("    outer loop")
        for vertex in tri:
            lines.append(f"      vertex {_vec(vertex)}")
        lines.append("    endloop")
        lines.append("  endfacet")
    lines.append(f"endsolid {solid}")
    return "\n".join(lines)


def build_washer_stl(
    params: Union[WasherParams, Mapping[str, Any]],
    options: Optional[Union[MeshOptions, Mapping[str, Any]]] = None,
    name: Optional[str] = DEFAULT_NAME,
) -> Tuple[str, MeshMeta]:
    triangles, meta = build_washer_mesh(params, options)
    return serialize_ascii_stl(name, triangles), meta


def download_filename(meta: MeshMeta) -> str:
    return (
        f"washer_{meta.slice}"
        f"_od{format_stl_number(meta.outer_diameter)}"
        f"_id{format_stl_number(meta.inner_diameter)}"
        f"_t{format_stl_number(meta.thickness)}.stl"
    )
