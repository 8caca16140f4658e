from __future__ import annotations

import argparse
import os
from typing import Any, Dict, List, Optional

from .io import save_json


THICKNESSES_MM = [0.5, 1, 2, 3, 4, 5]
INNER_DIAMETER_MIN_MM = 2
INNER_DIAMETER_MAX_MM = 10
TOLERANCES_MM = [0.2]


def to_path_token(value: float) -> str:
    return str(value).replace(".", "p", 1)


def build_permutations() -> List[Dict[str, Any]]:
    """Nominal catalogue: every outer diameter from inner+2 up to 2*inner+2, per thickness."""
    items = []
    for thickness in THICKNESSES_MM:
        for inner in range(INNER_DIAMETER_MIN_MM, INNER_DIAMETER_MAX_MM + 1):
            for outer in range(inner + 2, 2 * inner + 3):
                name = f"washer_thickness_{thickness}_inner_{inner}_outer_{outer}"
                items.append({
                    "name": name,
                    "innerDiameter": inner,
                    "outerDiameter": outer,
                    "thickness": thickness,
                    "output": f"nominal/{name}.stl",
                })
    return items


def build_tolerance_permutations(base_items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # Widen the bore only; outer diameter and thickness stay nominal.
    items = []
    for base in base_items:
        for tol in TOLERANCES_MM:
            name = f"{base['name']}_tolerance_{to_path_token(tol)}"
            items.append({
                "name": name,
                "innerDiameter": base["innerDiameter"] + tol,
                "outerDiameter": base["outerDiameter"],
                "thickness": base["thickness"],
                "output": f"tolerance_0p2/{name}.stl",
            })
    return items


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="washerlab-permutations", description="Write washer catalogue batch files")
    p.add_argument("--outdir", default="examples", help="Directory for the batch JSON files")
    args = p.parse_args(argv)

    base_items = build_permutations()
    tolerance_items = build_tolerance_permutations(base_items)

    base_path = os.path.join(args.outdir, "batch.permutations.json")
    save_json(base_items, base_path)
    print(f"Wrote {len(base_items)} permutations to {base_path}")

    tolerance_path = os.path.join(args.outdir, "batch.permutations.tolerance.json")
    save_json(tolerance_items, tolerance_path)
    print(f"Wrote {len(tolerance_items)} tolerance permutations to {tolerance_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
