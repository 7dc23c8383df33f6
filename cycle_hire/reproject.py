from __future__ import annotations

import logging

import geopandas as gpd
from pyproj import CRS

from .errors import CRSMismatchError, UnknownCRSError

log = logging.getLogger(__name__)


def reproject(gdf: gpd.GeoDataFrame, target_crs) -> gpd.GeoDataFrame:
    """
    Transform every geometry to target_crs (EPSG code, "EPSG:27700", pyproj CRS...).

    Attributes, row order and row count are untouched. The source CRS has to be
    known: a frame without one is refused rather than guessed.
    """
    if gdf.crs is None:
        raise UnknownCRSError("Cannot reproject: source CRS is unknown")

    # raises pyproj.exceptions.CRSError for unknown codes
    target = CRS.from_user_input(target_crs)

    out = gdf.to_crs(target)
    log.info(f"Reprojected {len(out):,} features: {gdf.crs.to_string()} -> {target.to_string()}")
    return out


def require_same_crs(left: gpd.GeoDataFrame, right: gpd.GeoDataFrame) -> None:
    if left.crs is None or right.crs is None:
        raise UnknownCRSError("Both collections need a CRS before they can be compared")
    if not CRS.from_user_input(left.crs).equals(CRS.from_user_input(right.crs)):
        raise CRSMismatchError(
            f"CRS mismatch: {left.crs.to_string()} vs {right.crs.to_string()}. "
            "Reproject one side first."
        )
