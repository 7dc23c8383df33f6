from __future__ import annotations

from pathlib import Path

import geopandas as gpd
import matplotlib
import pytest
from shapely.geometry import MultiPolygon, Point, Polygon, box

matplotlib.use("Agg")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEMO_STATIONS = PROJECT_ROOT / "data" / "demo_cycle_hire.geojson"

BNG = "EPSG:27700"


@pytest.fixture
def project_root() -> Path:
    return PROJECT_ROOT


@pytest.fixture
def demo_stations_path() -> Path:
    assert DEMO_STATIONS.exists(), f"Missing demo input: {DEMO_STATIONS}"
    return DEMO_STATIONS


@pytest.fixture
def squares() -> gpd.GeoDataFrame:
    """Two unit squares sharing the edge x == 10."""
    return gpd.GeoDataFrame(
        {"code": ["A01", "B02"], "label": ["west", "east"]},
        geometry=[box(0, 0, 10, 10), box(10, 0, 20, 10)],
        crs=BNG,
    )


@pytest.fixture
def points() -> gpd.GeoDataFrame:
    """Two points in A, one in B, one on the shared edge, one outside everything."""
    return gpd.GeoDataFrame(
        {"pid": [1, 2, 3, 4, 5], "nbikes": [3, 0, 5, 2, 7], "nempty": [7, 9, 1, 2, 0]},
        geometry=[Point(5, 5), Point(15, 5), Point(10, 5), Point(30, 30), Point(2, 2)],
        index=[10, 11, 12, 13, 14],
        crs=BNG,
    )


@pytest.fixture
def u_shape() -> Polygon:
    """Non-convex polygon whose centroid (15, ~13.57) sits in the notch."""
    return Polygon([(0, 0), (30, 0), (30, 30), (20, 30), (20, 10), (10, 10), (10, 30), (0, 30)])


@pytest.fixture
def boroughs_frame(u_shape) -> gpd.GeoDataFrame:
    """Borough-schema frame in British National Grid."""
    return gpd.GeoDataFrame(
        {
            "NAME": ["Notch", "Block"],
            "GSS_CODE": ["E09000901", "E09000902"],
            "HECTARES": [0.07, 0.04],
            "NONLD_AREA": [0.0, 0.0],
            "ONS_INNER": ["T", "F"],
            "SUB_2009": [None, None],
            "SUB_2006": [None, None],
        },
        geometry=[MultiPolygon([u_shape]), MultiPolygon([box(40, 0, 60, 20)])],
        crs=BNG,
    )
