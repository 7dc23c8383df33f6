from __future__ import annotations

import logging

import geopandas as gpd

from .schemas import require_columns

log = logging.getLogger(__name__)


def add_total_slots(
    stations: gpd.GeoDataFrame,
    bikes_col: str = "nbikes",
    empty_col: str = "nempty",
    out_col: str = "total_slots",
) -> gpd.GeoDataFrame:
    """Return a copy with out_col = bikes_col + empty_col. Recompute after editing either input."""
    require_columns(stations, [bikes_col, empty_col], "stations")
    out = stations.copy()
    out[out_col] = out[bikes_col] + out[empty_col]
    log.info(f"Derived {out_col!r}: {int(out[out_col].sum()):,} slots over {len(out):,} stations")
    return out
