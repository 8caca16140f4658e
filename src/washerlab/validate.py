from __future__ import annotations

import math
from typing import Any, Mapping, Optional, Union

from .types import (
    WasherParams,
    MeshOptions,
    DEFAULT_SEGMENTS,
    MIN_SEGMENTS,
    SLICE_FULL,
    SLICE_QUARTER,
    SLICES,
)


class ValidationError(ValueError):
    """Raised when washer parameters, options or batch input are invalid."""


_PARAM_KEYS = (
    ("outerDiameter", "outer_diameter"),
    ("innerDiameter", "inner_diameter"),
    ("thickness", "thickness"),
)


def to_finite_number(value: Any, label: str) -> float:
    try:
        num = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a finite number.") from None
    if not math.isfinite(num):
        raise ValidationError(f"{label} must be a finite number.")
    return num


def _lookup(raw: Mapping[str, Any], camel: str, snake: str) -> Any:
    if camel in raw:
        return raw[camel]
    return raw.get(snake)


def validate_washer_params(raw: Union[Mapping[str, Any], WasherParams]) -> WasherParams:
    """Coerce raw outer/inner diameter and thickness into a checked ``WasherParams``.

    Accepts the camelCase keys used by batch files and the web form as well as
    snake_case keys. Checks run in a fixed order so the first offending field is
    the one reported.
    """
    if isinstance(raw, WasherParams):
        raw = {
            "outerDiameter": raw.outer_diameter,
            "innerDiameter": raw.inner_diameter,
            "thickness": raw.thickness,
        }
    outer, inner, thickness = (
        to_finite_number(_lookup(raw, camel, snake), camel) for camel, snake in _PARAM_KEYS
    )

    if outer <= 0:
        raise ValidationError("outerDiameter must be > 0.")
    if inner < 0:
        raise ValidationError("innerDiameter must be >= 0.")
    if thickness <= 0:
        raise ValidationError("thickness must be > 0.")
    if outer <= inner:
        raise ValidationError("outerDiameter must be greater than innerDiameter.")

    return WasherParams(outer_diameter=outer, inner_diameter=inner, thickness=thickness)


def normalize_segments(value: Any = None) -> int:
    if value is None:
        value = DEFAULT_SEGMENTS
    segments = math.floor(to_finite_number(value, "segments"))
    if segments < MIN_SEGMENTS:
        raise ValidationError(f"segments must be >= {MIN_SEGMENTS}.")
    return int(segments)


def normalize_slice(value: Optional[Any] = None) -> str:
    slice_mode = SLICE_FULL if value is None else str(value).lower()
    if slice_mode not in SLICES:
        raise ValidationError(f'slice must be "{SLICE_FULL}" or "{SLICE_QUARTER}".')
    return slice_mode


def normalize_options(raw: Union[Mapping[str, Any], MeshOptions, None] = None) -> MeshOptions:
    if isinstance(raw, MeshOptions):
        raw = {"segments": raw.segments, "slice": raw.slice}
    raw = raw or {}
    return MeshOptions(
        segments=normalize_segments(raw.get("segments")),
        slice=normalize_slice(raw.get("slice")),
    )
