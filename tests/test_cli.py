import json
import os

from washerlab.cli import generate_batch, main
from washerlab.types import BatchOptions


def _batch(tmp_path, items):
    path = tmp_path / "batch.json"
    path.write_text(json.dumps(items), encoding="utf-8")
    return str(path)


def test_single_mode_writes_stl(tmp_path, capsys):
    out = tmp_path / "nested" / "w.stl"
    code = main([
        "--outer", "30", "--inner", "10", "--thickness", "2",
        "--segments", "16", "--output", str(out), "--name", "test washer",
    ])
    assert code == 0
    text = out.read_text(encoding="utf-8")
    assert text.startswith("solid test_washer\n")
    assert text.endswith("endsolid test_washer")
    assert text.count("endfacet") == 128

    stdout = capsys.readouterr().out.splitlines()
    assert stdout[0] == "STL generated successfully."
    assert f"Path: {out}" in stdout
    assert "Params (mm): outer=30, inner=10, thickness=2" in stdout
    assert "Slice: full" in stdout
    assert "Segments: 16" in stdout
    assert "Triangles: 128" in stdout
    assert stdout[-1].startswith("Volume (mm^3): ")


def test_single_mode_quarter_disk(tmp_path, capsys):
    out = tmp_path / "q.stl"
    assert main([
        "--outer", "20", "--inner", "0", "--thickness", "5",
        "--segments", "12", "--slice", "quarter", "--output", str(out),
    ]) == 0
    assert out.read_text(encoding="utf-8").count("endfacet") == 16
    assert "Triangles: 16" in capsys.readouterr().out


def test_invalid_params_exit_nonzero(tmp_path, capsys):
    out = tmp_path / "bad.stl"
    code = main(["--outer", "10", "--inner", "10", "--thickness", "1", "--output", str(out)])
    assert code == 1
    assert capsys.readouterr().err == "Error: outerDiameter must be greater than innerDiameter.\n"
    assert not out.exists()


def test_missing_flag_reports_field(tmp_path, capsys):
    code = main(["--inner", "1", "--thickness", "1", "--output", str(tmp_path / "x.stl")])
    assert code == 1
    assert capsys.readouterr().err == "Error: outerDiameter must be a finite number.\n"


def test_too_few_segments(tmp_path, capsys):
    code = main([
        "--outer", "10", "--inner", "1", "--thickness", "1",
        "--segments", "2", "--output", str(tmp_path / "x.stl"),
    ])
    assert code == 1
    assert "segments must be >= 3." in capsys.readouterr().err


def test_batch_mode_slugs_names(tmp_path, capsys):
    input_path = _batch(tmp_path, [
        {"name": "M6 Washer", "outerDiameter": 12, "innerDiameter": 6.4, "thickness": 1.6},
        {"name": "Spacer Disk!", "outerDiameter": 20, "innerDiameter": 0, "thickness": 5, "slice": "quarter"},
    ])
    out_dir = tmp_path / "out"
    code = main(["--input", input_path, "--output-dir", str(out_dir), "--segments", "8"])
    assert code == 0
    assert sorted(os.listdir(out_dir)) == ["m6-washer.stl", "spacer-disk.stl"]
    first = (out_dir / "m6-washer.stl").read_text(encoding="utf-8")
    assert first.startswith("solid M6_Washer\n")
    assert first.count("endfacet") == 64
    assert (out_dir / "spacer-disk.stl").read_text(encoding="utf-8").count("endfacet") == 4 * 2 + 4

    stdout = capsys.readouterr().out.splitlines()
    assert stdout[0].startswith("[1/2] ")
    assert "| slice=full | segments=8 | triangles=64" in stdout[0]
    assert "outer=12 inner=6.4 thickness=1.6" in stdout[0]
    assert stdout[1].startswith("[2/2] ")
    assert "Batch complete. Generated 2 file(s)." in stdout
    assert "Total triangles: 76" in stdout


def test_batch_item_overrides_and_fallbacks(tmp_path):
    input_path = _batch(tmp_path, [
        {"outerDiameter": 10, "innerDiameter": 4, "thickness": 1},
        {"outerDiameter": 10, "innerDiameter": 4, "thickness": 1, "segments": 6, "output": "sub/custom.stl"},
    ])
    seen = []
    result = generate_batch(
        BatchOptions(input_path=input_path, output_dir=str(tmp_path / "out"), segments=4),
        on_item=lambda i, total, res: seen.append((i, total)),
    )
    assert seen == [(0, 2), (1, 2)]
    assert [r.meta.segments for r in result.items] == [4, 6]
    assert result.items[0].output_path == os.path.join(str(tmp_path / "out"), "washer_1.stl")
    assert os.path.isfile(tmp_path / "out" / "sub" / "custom.stl")
    assert result.total_triangles == 8 * 4 + 8 * 6


def test_batch_failure_reports_index(tmp_path, capsys):
    input_path = _batch(tmp_path, [
        {"name": "ok", "outerDiameter": 10, "innerDiameter": 4, "thickness": 1},
        {"name": "bad", "outerDiameter": 10, "innerDiameter": 12, "thickness": 1},
        {"name": "never", "outerDiameter": 10, "innerDiameter": 4, "thickness": 1},
    ])
    out_dir = tmp_path / "out"
    code = main(["--input", input_path, "--output-dir", str(out_dir), "--segments", "3"])
    assert code == 1
    err = capsys.readouterr().err
    assert err == "Error: Batch item at index 1: outerDiameter must be greater than innerDiameter.\n"
    assert (out_dir / "ok.stl").exists()
    assert not (out_dir / "never.stl").exists()


def test_batch_not_an_array(tmp_path, capsys):
    input_path = _batch(tmp_path, {"outerDiameter": 10})
    assert main(["--input", input_path, "--output-dir", str(tmp_path / "out")]) == 1
    assert capsys.readouterr().err == "Error: Batch input must be a JSON array of washer objects.\n"


def test_batch_missing_file(tmp_path, capsys):
    assert main(["--input", str(tmp_path / "missing.json")]) == 1
    assert capsys.readouterr().err.startswith("Error: ")
