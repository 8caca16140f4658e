__all__ = [
    "build_washer_mesh",
    "build_washer_stl",
    "serialize_ascii_stl",
    "validate_washer_params",
    "ValidationError",
    "WasherParams",
    "MeshOptions",
    "MeshMeta",
]

__version__ = "0.1.0"

from .types import WasherParams, MeshOptions, MeshMeta
from .validate import ValidationError, validate_washer_params
from .geometry import build_washer_mesh
from .stl import build_washer_stl, serialize_ascii_stl
