"""
Attribute and spatial joins between the station points and borough polygons.

attribute_join is a plain relational inner join on a key pair. spatial_join is
the bridge between the two datasets, which share no key: each point receives
the attributes of the polygon it falls in, and the output always has exactly
one row per input point.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import geopandas as gpd
import pandas as pd

from .errors import EmptyJoinError, SchemaError
from .reproject import require_same_crs
from .schemas import require_columns

log = logging.getLogger(__name__)

SPATIAL_JOIN_PREDICATES = ("within", "intersects", "covered_by")


def drop_geometry(gdf: gpd.GeoDataFrame) -> pd.DataFrame:
    """Tabular view of a feature collection. Undo only by joining back."""
    return pd.DataFrame(gdf.drop(columns=gdf.geometry.name))


# ------------------------------------------------------------------
# Attribute join
# ------------------------------------------------------------------

def attribute_join(
    left: pd.DataFrame,
    right: pd.DataFrame,
    left_on: str,
    right_on: Optional[str] = None,
    validate: Optional[str] = None,
) -> pd.DataFrame:
    """
    Inner join on left_on == right_on.

    `right` must already be a plain table (see drop_geometry); if `left` is a
    GeoDataFrame its geometry stays with its rows. `validate` is passed to
    pandas.merge ("one_to_one", "many_to_one", ...).
    """
    right_on = right_on or left_on
    if isinstance(right, gpd.GeoDataFrame):
        raise SchemaError(
            "Right side of an attribute join must not carry geometry; "
            "use drop_geometry() on it first"
        )
    require_columns(left, [left_on], "left table")
    require_columns(right, [right_on], "right table")

    out = left.merge(right, left_on=left_on, right_on=right_on, how="inner", validate=validate)
    if out.empty:
        raise EmptyJoinError(
            f"Attribute join {left_on!r} = {right_on!r} matched no rows "
            f"({len(left):,} left, {len(right):,} right)"
        )

    log.info(
        f"Attribute join {left_on!r} = {right_on!r}: {len(out):,} rows "
        f"(left {len(left):,}, right {len(right):,})"
    )
    return out


# ------------------------------------------------------------------
# Spatial join
# ------------------------------------------------------------------

def spatial_join(
    points: gpd.GeoDataFrame,
    polygons: gpd.GeoDataFrame,
    attributes: Iterable[str],
    predicate: str = "within",
) -> gpd.GeoDataFrame:
    """
    Attach `attributes` of the polygon each point falls in.

    - unmatched point: attribute is None (NaN for numeric attributes)
    - several matching polygons: the first one in polygon input order wins
    - row count, order and index of `points` are preserved

    With "within", a point on a shared boundary is inside neither polygon and
    stays unmatched.
    """
    if predicate not in SPATIAL_JOIN_PREDICATES:
        raise ValueError(
            f"Unsupported spatial join predicate {predicate!r}; "
            f"expected one of {SPATIAL_JOIN_PREDICATES}"
        )
    require_same_crs(points, polygons)

    attributes = list(attributes)
    require_columns(polygons, attributes, "polygons")
    clash = [a for a in attributes if a in points.columns]
    if clash:
        raise SchemaError(f"Join attribute(s) already present on points: {clash}")
    reserved = [c for c in ("index_right",) if c in points.columns or c in attributes]
    if reserved:
        raise SchemaError(f"Column name(s) reserved by the spatial join: {reserved}; rename them first")

    left = points.reset_index(drop=True)
    right = polygons[attributes + [polygons.geometry.name]].reset_index(drop=True)

    joined = gpd.sjoin(left, right, how="left", predicate=predicate)

    # one row per point: keep the lowest polygon position, then restore point order
    joined = joined.sort_values("index_right", kind="stable", na_position="last")
    joined = joined[~joined.index.duplicated(keep="first")].sort_index()
    unmatched = int(joined["index_right"].isna().sum())
    joined = joined.drop(columns="index_right")
    joined.index = points.index

    for col in attributes:
        dtype = polygons[col].dtype
        if dtype == object or pd.api.types.is_string_dtype(dtype):
            joined[col] = joined[col].astype(object).where(joined[col].notna(), None)

    log.info(
        f"Spatial join ({predicate}): {len(joined) - unmatched:,} matched, "
        f"{unmatched:,} unmatched of {len(joined):,} points"
    )
    return joined
