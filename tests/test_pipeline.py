# tests/test_pipeline.py
from __future__ import annotations

import logging
import subprocess
import sys

import geopandas as gpd
import pytest
import yaml

from cycle_hire.config import config_from_dict
from cycle_hire.pipeline import main, run

LAYERS = {"boroughs_stats", "centroids_stats", "stations_stats"}


@pytest.fixture
def raw_config(tmp_path, demo_stations_path) -> dict:
    return {
        "inputs": {
            "stations": {"path": str(demo_stations_path)},
            "boroughs": {"resource": "demo_boroughs"},
        },
        "crs": {"target": "EPSG:27700"},
        "join": {"borough_key": "GSS_CODE", "predicate": "within"},
        "aggregate": {"sum_field": "total_slots", "count_column": "n_stations"},
        "centroids": {"method": "representative_point"},
        "output": {
            "path": str(tmp_path / "out" / "cycle_hire.gpkg"),
            "layers": {
                "boroughs": "boroughs_stats",
                "centroids": "centroids_stats",
                "stations": "stations_stats",
            },
        },
        "plot": {"enabled": True, "column": "n_stations"},
    }


def test_demo_run_end_to_end(tmp_path, raw_config) -> None:
    result = run(config_from_dict(raw_config, project_dir=tmp_path))

    assert set(result.layers) == LAYERS
    assert result.output_path.exists()
    assert result.plot_path == result.output_path.with_suffix(".png")
    assert result.plot_path.exists()

    # one station falls outside every borough
    assert len(result.stations) == 14
    assert result.stations.loc[result.stations["id"] == 13, "GSS_CODE"].iloc[0] is None

    stats = result.stats
    assert stats["GSS_CODE"].tolist() == ["E09000033", "E09000019", "E09000001", "E09000007"]
    assert stats["n_stations"].tolist() == [6, 3, 2, 2]
    assert stats["total_slots_sum"].tolist() == [134, 61, 54, 45]
    assert stats["n_stations"].sum() == 13


def test_written_layers_match_results(tmp_path, raw_config) -> None:
    result = run(config_from_dict(raw_config, project_dir=tmp_path))
    out = result.output_path

    boroughs = gpd.read_file(out, layer="boroughs_stats")
    centroids = gpd.read_file(out, layer="centroids_stats")
    stations = gpd.read_file(out, layer="stations_stats")

    assert len(boroughs) == 4
    assert len(centroids) == 4
    assert len(stations) == 13
    assert boroughs.crs.to_epsg() == 27700
    assert set(centroids.geom_type) == {"Point"}
    assert {"n_stations", "total_slots_sum"} <= set(boroughs.columns)

    westminster = boroughs.loc[boroughs["GSS_CODE"] == "E09000033"].iloc[0]
    assert westminster["n_stations"] == 6
    assert westminster["total_slots_sum"] == 134

    # representative points stay inside their own polygon
    merged = centroids.merge(
        boroughs[["GSS_CODE", "geometry"]].rename(columns={"geometry": "poly"}), on="GSS_CODE"
    )
    assert all(pt.within(poly) for pt, poly in zip(merged.geometry, merged["poly"]))


def test_rerun_replaces_layers(tmp_path, raw_config) -> None:
    config = config_from_dict(raw_config, project_dir=tmp_path)
    run(config)
    result = run(config)

    assert sorted(result.layers) == sorted(LAYERS)
    assert len(gpd.read_file(result.output_path, layer="boroughs_stats")) == 4


def test_main_reads_yaml(tmp_path, raw_config) -> None:
    raw_config["plot"]["enabled"] = False
    path = tmp_path / "pipeline.yaml"
    path.write_text(yaml.safe_dump(raw_config), encoding="utf-8")

    assert main(["--config", str(path)]) == 0
    assert (tmp_path / "out" / "cycle_hire.gpkg").exists()
    assert not (tmp_path / "out" / "cycle_hire.png").exists()


def test_repository_runner_forwards_config(tmp_path, raw_config, project_root) -> None:
    import importlib.util

    mod_spec = importlib.util.spec_from_file_location("run_pipeline", project_root / "scripts" / "run_pipeline.py")
    runner = importlib.util.module_from_spec(mod_spec)
    mod_spec.loader.exec_module(runner)

    raw_config["plot"]["enabled"] = False
    path = tmp_path / "pipeline.yaml"
    path.write_text(yaml.safe_dump(raw_config), encoding="utf-8")

    assert runner.main(["--config", str(path)]) == 0
    assert (tmp_path / "out" / "cycle_hire.gpkg").exists()


@pytest.mark.parametrize("descending,expected", [(True, True), (False, False)])
def test_busiest_borough_logged_only_for_descending_order(tmp_path, raw_config, caplog, descending, expected) -> None:
    raw_config["aggregate"]["sort_descending"] = descending
    raw_config["plot"]["enabled"] = False

    with caplog.at_level(logging.INFO, logger="cycle_hire.pipeline"):
        run(config_from_dict(raw_config, project_dir=tmp_path))

    assert any("Busiest borough" in r.getMessage() for r in caplog.records) is expected


def test_importing_pipeline_keeps_the_callers_backend(project_root) -> None:
    code = (
        "import matplotlib; matplotlib.use('pdf'); "
        "import cycle_hire.pipeline; print(matplotlib.get_backend())"
    )
    out = subprocess.run(
        [sys.executable, "-c", code], capture_output=True, text=True, check=True, cwd=project_root
    )
    assert out.stdout.strip().lower() == "pdf"
