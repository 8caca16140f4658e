from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Callable, List, Optional

from .types import SingleOptions, BatchOptions, GenerateResult, BatchResult
from .geometry import build_washer_mesh
from .stl import serialize_ascii_stl, format_stl_number as fmt
from .qc import mesh_summary
from .io import load_batch, save_text, to_slug
from .validate import ValidationError


logger = logging.getLogger("washerlab.cli")


def generate_single(opts: SingleOptions) -> GenerateResult:
    params = {"outerDiameter": opts.outer, "innerDiameter": opts.inner, "thickness": opts.thickness}
    triangles, meta = build_washer_mesh(params, {"segments": opts.segments, "slice": opts.slice})
    save_text(serialize_ascii_stl(opts.name, triangles), opts.output_path)
    return GenerateResult(output_path=opts.output_path, meta=meta, stats=mesh_summary(triangles))


def generate_batch(
    opts: BatchOptions,
    on_item: Optional[Callable[[int, int, GenerateResult], None]] = None,
) -> BatchResult:
    """Generate one STL per batch entry; the first failing entry aborts the run."""
    items = load_batch(opts.input_path)
    os.makedirs(opts.output_dir, exist_ok=True)

    results: List[GenerateResult] = []
    for i, item in enumerate(items):
        name = item.get("name") or opts.name or f"washer_{i + 1}"
        segments = item.get("segments")
        if segments is None:
            segments = opts.segments
        output_file = item.get("output") or f"{to_slug(name)}.stl"
        output_path = os.path.join(opts.output_dir, output_file)

        try:
            triangles, meta = build_washer_mesh(
                item,
                {"segments": segments, "slice": item.get("slice") or opts.slice},
            )
        except ValidationError as e:
            raise ValidationError(f"Batch item at index {i}: {e}") from e

        save_text(serialize_ascii_stl(str(name), triangles), output_path)
        res = GenerateResult(output_path=output_path, meta=meta)
        results.append(res)
        logger.debug("batch item %d -> %s (%d triangles)", i, output_path, meta.triangle_count)
        if on_item is not None:
            on_item(i, len(items), res)

    return BatchResult(output_dir=opts.output_dir, items=results)


def _print_batch_item(i: int, total: int, res: GenerateResult) -> None:
    m = res.meta
    print(
        f"[{i + 1}/{total}] {res.output_path} | outer={fmt(m.outer_diameter)} inner={fmt(m.inner_diameter)} "
        f"thickness={fmt(m.thickness)} | slice={m.slice} | segments={m.segments} | triangles={m.triangle_count}"
    )


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="washerlab",
        description="Generate washer (annulus or solid disk) meshes as ASCII STL",
        epilog="Single mode needs --outer, --inner and --thickness; batch mode needs --input.",
    )
    p.add_argument("--outer", default=None, help="Outer diameter in mm")
    p.add_argument("--inner", default=None, help="Inner diameter in mm (0 for a solid disk)")
    p.add_argument("--thickness", default=None, help="Height along Z in mm")
    p.add_argument("--input", default=None, help="Batch mode: JSON file with an array of washer objects")
    p.add_argument("--segments", default=None, help="Circle smoothness (default: 128)")
    p.add_argument("--slice", default=None, help="Shape mode: full | quarter (default: full)")
    p.add_argument("--output", default=os.path.join("output", "washer.stl"), help="Single mode output STL path")
    p.add_argument("--output-dir", default="output", help="Batch mode output directory")
    p.add_argument("--name", default=None, help="STL solid name (default: washer)")
    return p


def _run(args: argparse.Namespace) -> None:
    if args.input:
        batch = generate_batch(
            BatchOptions(
                input_path=args.input,
                output_dir=args.output_dir,
                segments=args.segments,
                slice=args.slice,
                name=args.name,
            ),
            on_item=_print_batch_item,
        )
        print(f"Batch complete. Generated {len(batch.items)} file(s).")
        print(f"Output directory: {batch.output_dir}")
        print(f"Total triangles: {batch.total_triangles}")
        return

    res = generate_single(
        SingleOptions(
            outer=args.outer,
            inner=args.inner,
            thickness=args.thickness,
            segments=args.segments,
            slice=args.slice,
            output_path=args.output,
            name=args.name or "washer",
        )
    )
    m = res.meta
    print("STL generated successfully.")
    print(f"Path: {res.output_path}")
    print(f"Params (mm): outer={fmt(m.outer_diameter)}, inner={fmt(m.inner_diameter)}, thickness={fmt(m.thickness)}")
    print(f"Slice: {m.slice}")
    print(f"Segments: {m.segments}")
    print(f"Triangles: {m.triangle_count}")
    print(f"Volume (mm^3): {res.stats['volume_mm3']:.3f}")


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "WARNING"))
    args = build_arg_parser().parse_args(argv)
    try:
        _run(args)
    except Exception as e:
        logger.debug("generation failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
