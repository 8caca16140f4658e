from __future__ import annotations

from typing import Any, List, Mapping, Optional, Tuple, Union

import numpy as np

from .types import WasherParams, MeshOptions, MeshMeta, TAU, SLICE_QUARTER
from .validate import validate_washer_params, normalize_options


Z_UP = np.array([0.0, 0.0, 1.0])
Z_DOWN = np.array([0.0, 0.0, -1.0])


def circle_point(radius: float, angle: float, z: float) -> np.ndarray:
    return np.array([radius * np.cos(angle), radius * np.sin(angle), z], dtype=float)


def triangle_normal(triangle: np.ndarray) -> np.ndarray:
    """Unit normal of ``triangle`` by the right-hand rule; zero vector if degenerate."""
    a, b, c = np.asarray(triangle, dtype=float)
    n = np.cross(b - a, c - a)
    length = float(np.linalg.norm(n))
    if length == 0.0:
        return np.zeros(3, dtype=float)
    return n / length


def orient_triangle(a: np.ndarray, b: np.ndarray, c: np.ndarray, hint: np.ndarray) -> np.ndarray:
    """Return the triangle ``(a, b, c)`` wound so its normal does not oppose ``hint``."""
    tri = np.array([a, b, c], dtype=float)
    if float(np.dot(triangle_normal(tri), hint)) >= 0:
        return tri
    return tri[[0, 2, 1]]


def _annulus_step(
    r_out: float, r_in: float, a0: float, a1: float, z0: float, z1: float
) -> List[np.ndarray]:
    ob0, ob1 = circle_point(r_out, a0, z0), circle_point(r_out, a1, z0)
    ot0, ot1 = circle_point(r_out, a0, z1), circle_point(r_out, a1, z1)
    ib0, ib1 = circle_point(r_in, a0, z0), circle_point(r_in, a1, z0)
    it0, it1 = circle_point(r_in, a0, z1), circle_point(r_in, a1, z1)

    a_mid = (a0 + a1) / 2
    outward = np.array([np.cos(a_mid), np.sin(a_mid), 0.0])
    inward = -outward

    return [
        orient_triangle(ot0, ot1, it1, Z_UP),
        orient_triangle(ot0, it1, it0, Z_UP),
        orient_triangle(ob0, ib1, ob1, Z_DOWN),
        orient_triangle(ob0, ib0, ib1, Z_DOWN),
        orient_triangle(ob0, ob1, ot1, outward),
        orient_triangle(ob0, ot1, ot0, outward),
        orient_triangle(ib0, it1, ib1, inward),
        orient_triangle(ib0, it0, it1, inward),
    ]


def _disk_step(r_out: float, a0: float, a1: float, z0: float, z1: float) -> List[np.ndarray]:
    # Center fans instead of annular caps: a zero inner radius would collapse
    # half of the cap triangles to zero area.
    ob0, ob1 = circle_point(r_out, a0, z0), circle_point(r_out, a1, z0)
    ot0, ot1 = circle_point(r_out, a0, z1), circle_point(r_out, a1, z1)
    center_top = np.array([0.0, 0.0, z1])
    center_bottom = np.array([0.0, 0.0, z0])

    a_mid = (a0 + a1) / 2
    outward = np.array([np.cos(a_mid), np.sin(a_mid), 0.0])

    return [
        orient_triangle(center_top, ot0, ot1, Z_UP),
        orient_triangle(center_bottom, ob1, ob0, Z_DOWN),
        orient_triangle(ob0, ob1, ot1, outward),
        orient_triangle(ob0, ot1, ot0, outward),
    ]


def _slice_cap(
    r_out: float, r_in: float, angle: float, z0: float, z1: float, side: float
) -> List[np.ndarray]:
    # side is +1 at the start of the sweep and -1 at its end, so the hint
    # always points away from the swept interior.
    ob, ot = circle_point(r_out, angle, z0), circle_point(r_out, angle, z1)
    ib, it = circle_point(r_in, angle, z0), circle_point(r_in, angle, z1)
    hint = side * np.array([np.sin(angle), -np.cos(angle), 0.0])
    return [
        orient_triangle(ob, ot, it, hint),
        orient_triangle(ob, it, ib, hint),
    ]


def build_washer_mesh(
    params: Union[WasherParams, Mapping[str, Any]],
    options: Optional[Union[MeshOptions, Mapping[str, Any]]] = None,
) -> Tuple[np.ndarray, MeshMeta]:
    """
    Tessellate a washer (or a solid disk when the inner diameter is zero).

    Returns:
        (triangles, meta) where ``triangles`` has shape (N, 3, 3) and every
        triangle is wound with its normal pointing out of the solid.
    """
    params = validate_washer_params(params)
    options = normalize_options(options)

    is_quarter = options.slice == SLICE_QUARTER
    angle_start = 0.0
    angle_span = np.pi / 2 if is_quarter else TAU
    sweep_segments = max(1, options.segments // 4) if is_quarter else options.segments

    r_out = params.outer_diameter / 2
    r_in = params.inner_diameter / 2
    z_bottom = 0.0
    z_top = params.thickness

    triangles: List[np.ndarray] = []
    for i in range(sweep_segments):
        a0 = angle_start + (i / sweep_segments) * angle_span
        a1 = angle_start + ((i + 1) / sweep_segments) * angle_span
        if r_in > 0:
            triangles.extend(_annulus_step(r_out, r_in, a0, a1, z_bottom, z_top))
        else:
            triangles.extend(_disk_step(r_out, a0, a1, z_bottom, z_top))

    if is_quarter:
        # Cut faces at both ends of the sweep close the solid.
        for angle, side in ((angle_start, 1.0), (angle_start + angle_span, -1.0)):
            triangles.extend(_slice_cap(r_out, r_in, angle, z_bottom, z_top, side))

    mesh = np.asarray(triangles, dtype=float).reshape(-1, 3, 3)
    meta = MeshMeta(
        outer_diameter=params.outer_diameter,
        inner_diameter=params.inner_diameter,
        thickness=params.thickness,
        outer_radius=r_out,
        inner_radius=r_in,
        segments=options.segments,
        sweep_segments=sweep_segments,
        slice=options.slice,
        triangle_count=int(mesh.shape[0]),
    )
    return mesh, meta
