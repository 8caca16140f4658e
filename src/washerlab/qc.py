from __future__ import annotations

from typing import Any, Dict

import numpy as np
import trimesh as tm
from trimesh import triangles as tmtriangles


def to_trimesh(triangles: np.ndarray) -> tm.Trimesh:
    # Triangle soup -> indexed mesh; coincident corners are merged on process.
    return tm.Trimesh(**tmtriangles.to_kwargs(np.asarray(triangles, dtype=float)), process=True)


def mesh_summary(triangles: np.ndarray) -> Dict[str, Any]:
    """Informational volume/area/extent report for a generated washer mesh."""
    mesh = to_trimesh(triangles)
    extents = mesh.extents
    return {
        "volume_mm3": float(mesh.volume),
        "surface_area_mm2": float(mesh.area),
        "extents_mm": [float(extents[0]), float(extents[1]), float(extents[2])],
    }
