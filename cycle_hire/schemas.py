"""
Typed records for the two feature collections used by the workflow.

The frames themselves stay geopandas objects; these records are what callers
get when they want one feature with its attributes and geometry as a unit, and
with absent values spelled as None rather than NaN.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

import pandas as pd
from shapely.geometry.base import BaseGeometry

from .errors import SchemaError

STATION_COLUMNS = ("id", "name", "area", "nbikes", "nempty")
BOROUGH_COLUMNS = (
    "NAME",
    "GSS_CODE",
    "HECTARES",
    "NONLD_AREA",
    "ONS_INNER",
    "SUB_2009",
    "SUB_2006",
)


@dataclass(frozen=True)
class Station:
    id: int
    name: str
    area: str
    nbikes: int
    nempty: int
    geometry: BaseGeometry
    borough_code: Optional[str] = None

    @property
    def total_slots(self) -> int:
        return self.nbikes + self.nempty


@dataclass(frozen=True)
class Borough:
    name: str
    gss_code: str
    hectares: float
    nonld_area: float
    ons_inner: str
    sub_2009: Optional[str]
    sub_2006: Optional[str]
    geometry: BaseGeometry


def require_columns(frame: pd.DataFrame, columns: Iterable[str], label: str) -> None:
    missing = [c for c in columns if c not in frame.columns]
    if missing:
        raise SchemaError(
            f"{label} is missing required column(s): {', '.join(missing)}. "
            f"Found columns: {list(frame.columns)}"
        )


def _value(v: Any) -> Any:
    """NaN / None / pd.NA -> None; everything else unchanged."""
    if v is None:
        return None
    if isinstance(v, BaseGeometry):
        return v
    try:
        if pd.isna(v):
            return None
    except (TypeError, ValueError):
        pass
    return v


def stations_from_frame(gdf, borough_key: Optional[str] = None) -> List[Station]:
    require_columns(gdf, STATION_COLUMNS, "stations")
    if borough_key is not None:
        require_columns(gdf, [borough_key], "stations")

    out: List[Station] = []
    for _, r in gdf.iterrows():
        code = _value(r[borough_key]) if borough_key is not None else None
        out.append(
            Station(
                id=int(r["id"]),
                name=str(r["name"]),
                area=str(r["area"]),
                nbikes=int(r["nbikes"]),
                nempty=int(r["nempty"]),
                geometry=r.geometry,
                borough_code=None if code is None else str(code),
            )
        )
    return out


def boroughs_from_frame(gdf) -> List[Borough]:
    require_columns(gdf, BOROUGH_COLUMNS, "boroughs")

    out: List[Borough] = []
    for _, r in gdf.iterrows():
        out.append(
            Borough(
                name=str(r["NAME"]),
                gss_code=str(r["GSS_CODE"]),
                hectares=float(r["HECTARES"]),
                nonld_area=float(r["NONLD_AREA"]),
                ons_inner=str(r["ONS_INNER"]),
                sub_2009=_value(r["SUB_2009"]),
                sub_2006=_value(r["SUB_2006"]),
                geometry=r.geometry,
            )
        )
    return out
