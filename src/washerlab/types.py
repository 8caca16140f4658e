from __future__ import annotations

import math
from dataclasses import dataclass, asdict, field
from typing import Optional, Dict, Any, List


TAU = 2.0 * math.pi
DEFAULT_SEGMENTS = 128
MIN_SEGMENTS = 3
SLICE_FULL = "full"
SLICE_QUARTER = "quarter"
SLICES = (SLICE_FULL, SLICE_QUARTER)
DEFAULT_NAME = "washer"


@dataclass(frozen=True)
class WasherParams:
    outer_diameter: float
    inner_diameter: float
    thickness: float


@dataclass(frozen=True)
class MeshOptions:
    segments: int = DEFAULT_SEGMENTS
    slice: str = SLICE_FULL


@dataclass(frozen=True)
class MeshMeta:
    outer_diameter: float
    inner_diameter: float
    thickness: float
    outer_radius: float
    inner_radius: float
    segments: int
    sweep_segments: int
    slice: str
    triangle_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SingleOptions:
    # Raw values as given on the command line; coerced by the validator.
    outer: Any = None
    inner: Any = None
    thickness: Any = None
    segments: Any = None
    slice: Optional[str] = None
    output_path: str = "output/washer.stl"
    name: str = DEFAULT_NAME


@dataclass
class BatchOptions:
    input_path: str
    output_dir: str = "output"
    segments: Any = None  # fallback for items without their own value
    slice: Optional[str] = None
    name: Optional[str] = None


@dataclass
class GenerateResult:
    output_path: str
    meta: MeshMeta
    stats: Dict[str, Any] = field(default_factory=dict)


@dataclass
class BatchResult:
    output_dir: str
    items: List[GenerateResult]

    @property
    def total_triangles(self) -> int:
        return sum(item.meta.triangle_count for item in self.items)
