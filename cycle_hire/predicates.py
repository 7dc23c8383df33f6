"""
Read-only binary predicates between geometries and feature collections.

Every predicate reads left-to-right: pairs(stations, boroughs, "within")
yields (station, borough) labels where station.within(borough). These are for
ad-hoc questions ("which borough contains station X"), not bulk joins.
"""

from __future__ import annotations

from typing import Hashable, List, Optional, Set, Tuple

import geopandas as gpd
import numpy as np
import shapely
from shapely.geometry.base import BaseGeometry

from .reproject import require_same_crs

PREDICATES = (
    "contains",
    "within",
    "intersects",
    "touches",
    "crosses",
    "overlaps",
    "equals",
    "covers",
    "covered_by",
    "contains_properly",
    "disjoint",
    "dwithin",
)


def _predicate_fn(predicate: str, distance: Optional[float]):
    if predicate not in PREDICATES:
        raise ValueError(f"Unknown predicate {predicate!r}; expected one of {PREDICATES}")
    fn = getattr(shapely, predicate)
    if predicate == "dwithin":
        if distance is None:
            raise ValueError("'dwithin' needs a distance")
        return lambda a, b: fn(a, b, distance)
    return fn


def relate(a: BaseGeometry, b: BaseGeometry, predicate: str, distance: Optional[float] = None) -> bool:
    return bool(_predicate_fn(predicate, distance)(a, b))


def select(
    collection: gpd.GeoDataFrame,
    predicate: str,
    other: BaseGeometry,
    distance: Optional[float] = None,
) -> List[Hashable]:
    """Index labels of features f for which f.<predicate>(other) holds."""
    fn = _predicate_fn(predicate, distance)
    mask = np.asarray(fn(collection.geometry.to_numpy(), other), dtype=bool)
    return collection.index[mask].tolist()


def pairs(
    left: gpd.GeoDataFrame,
    right: gpd.GeoDataFrame,
    predicate: str,
    distance: Optional[float] = None,
) -> Set[Tuple[Hashable, Hashable]]:
    """(left label, right label) for every pair where left.<predicate>(right) holds."""
    fn = _predicate_fn(predicate, distance)
    require_same_crs(left, right)

    if predicate in right.sindex.valid_query_predicates:
        kwargs = {"distance": distance} if predicate == "dwithin" else {}
        li, ri = right.sindex.query(left.geometry, predicate=predicate, **kwargs)
    else:
        # equals / disjoint have no index support
        a = left.geometry.to_numpy()[:, np.newaxis]
        b = right.geometry.to_numpy()[np.newaxis, :]
        li, ri = np.nonzero(fn(a, b))

    return {(left.index[i], right.index[j]) for i, j in zip(li, ri)}
