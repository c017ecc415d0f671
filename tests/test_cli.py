import json

from typer.testing import CliRunner

from geolens.cli.main import app

from conftest import TRACT_BASE

runner = CliRunner()


def test_inspect_shapefile(tract_dir):
    result = runner.invoke(app, ["inspect", str(tract_dir)])

    assert result.exit_code == 0, result.output
    assert "shapefile" in result.output
    assert "features: 3" in result.output
    assert "NAMELSAD" in result.output


def test_inspect_geojson(geojson_path):
    result = runner.invoke(app, ["inspect", str(geojson_path)])

    assert result.exit_code == 0, result.output
    assert "geojson" in result.output
    assert "EPSG:4326" in result.output


def test_inspect_incomplete_shapefile(tract_dir):
    (tract_dir / f"{TRACT_BASE}.dbf").unlink()
    result = runner.invoke(app, ["inspect", str(tract_dir)])

    assert result.exit_code == 1
    assert f"{TRACT_BASE}.dbf" in result.output


def test_metadata(tract_dir):
    result = runner.invoke(app, ["metadata", str(tract_dir)])

    assert result.exit_code == 0, result.output
    assert f"{TRACT_BASE}.cpg: UTF-8" in result.output
    assert "MI_Metadata" in result.output


def test_render_writes_view_and_svg(tract_dir, tmp_path):
    out = tmp_path / "out" / "view.json"
    svg = tmp_path / "out" / "preview.svg"

    result = runner.invoke(app, [
        "render", str(tract_dir),
        "--out", str(out),
        "--svg", str(svg),
        "--label", "{NAMELSAD}",
        "--zoom", "11",
        "--scroll-locked",
    ])

    assert result.exit_code == 0, result.output
    view = json.loads(out.read_text(encoding="utf-8"))
    assert view["viewport"]["zoom"] == 11
    assert view["interaction"]["scroll_wheel_zoom"] is False
    assert [f["label"] for f in view["features"]] == [
        "Census Tract 1", "Census Tract 2", "Census Tract 3",
    ]
    assert svg.read_text(encoding="utf-8").startswith("<svg")


def test_render_rejects_bad_style(geojson_path, tmp_path):
    result = runner.invoke(app, [
        "render", str(geojson_path),
        "--out", str(tmp_path / "v.json"),
        "--fill-opacity", "3",
    ])

    assert result.exit_code == 1
    assert "fill_opacity" in result.output
    assert not (tmp_path / "v.json").exists()


def test_render_unsupported_geojson(tmp_path):
    path = tmp_path / "poly.geojson"
    path.write_text(json.dumps({"type": "Polygon", "coordinates": []}), encoding="utf-8")

    result = runner.invoke(app, ["render", str(path), "--out", str(tmp_path / "v.json")])

    assert result.exit_code == 1
    assert "FeatureCollection" in result.output


def test_render_passes_timeout(geojson_path, tmp_path, monkeypatch):
    import geolens.cli.main as cli

    seen = {}
    real_open_source = cli.open_source

    def spy(location, **kwargs):
        seen.update(kwargs)
        return real_open_source(location, **kwargs)

    monkeypatch.setattr(cli, "open_source", spy)

    result = runner.invoke(app, [
        "render", str(geojson_path),
        "--out", str(tmp_path / "v.json"),
        "--timeout", "2.5",
    ])

    assert result.exit_code == 0, result.output
    assert seen == {"timeout": 2.5}


def test_render_shapefile_with_timeout(tract_dir, tmp_path):
    result = runner.invoke(app, [
        "render", str(tract_dir),
        "--out", str(tmp_path / "v.json"),
        "--timeout", "5",
    ])

    assert result.exit_code == 0, result.output
    assert "3 features" in result.output
