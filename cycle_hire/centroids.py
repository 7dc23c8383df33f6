from __future__ import annotations

import logging

import geopandas as gpd

log = logging.getLogger(__name__)

METHODS = ("centroid", "representative_point")


def _with_points(polygons: gpd.GeoDataFrame, points, label: str) -> gpd.GeoDataFrame:
    if polygons.crs is not None and polygons.crs.is_geographic:
        log.warning(f"Computing {label} in a geographic CRS ({polygons.crs.to_string()}); reproject first")
    out = polygons.copy()
    out[polygons.geometry.name] = points
    return out


def centroids(polygons: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """Centre of mass per polygon. May fall outside non-convex shapes."""
    return _with_points(polygons, polygons.geometry.centroid, "centroids")


def representative_points(polygons: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """A point guaranteed to lie inside each polygon, though not necessarily central."""
    return _with_points(polygons, polygons.geometry.representative_point(), "representative points")


def derive_points(polygons: gpd.GeoDataFrame, method: str) -> gpd.GeoDataFrame:
    if method == "centroid":
        return centroids(polygons)
    if method == "representative_point":
        return representative_points(polygons)
    raise ValueError(f"Unknown point method {method!r}; expected one of {METHODS}")
