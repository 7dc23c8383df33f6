from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import List, Optional, Union

import geopandas as gpd

from .errors import DatasetNotFoundError, EmptyDatasetError, SchemaError, UnknownCRSError
from .schemas import BOROUGH_COLUMNS, STATION_COLUMNS, require_columns

log = logging.getLogger(__name__)

PathLike = Union[str, Path]

DATA_PACKAGE = "cycle_hire"
DATA_DIR = "data"
DATA_SUFFIX = ".geojson"


# ------------------------------------------------------------------
# Packaged datasets
# ------------------------------------------------------------------

def packaged_datasets() -> List[str]:
    root = resources.files(DATA_PACKAGE).joinpath(DATA_DIR)
    return sorted(
        p.name[: -len(DATA_SUFFIX)]
        for p in root.iterdir()
        if p.name.endswith(DATA_SUFFIX)
    )


def read_packaged(name: str) -> gpd.GeoDataFrame:
    """Read a dataset shipped inside the package, by name (no file path needed)."""
    resource = resources.files(DATA_PACKAGE).joinpath(DATA_DIR).joinpath(f"{name}{DATA_SUFFIX}")
    if not resource.is_file():
        raise DatasetNotFoundError(
            f"No packaged dataset named {name!r}. "
            f"Available: {', '.join(packaged_datasets()) or '(none)'}"
        )
    with resources.as_file(resource) as path:
        log.info(f"Loading packaged dataset {name!r}")
        return gpd.read_file(path)


# ------------------------------------------------------------------
# Validation shared by both loaders
# ------------------------------------------------------------------

def _check_loaded(gdf: gpd.GeoDataFrame, label: str, source: str) -> gpd.GeoDataFrame:
    if gdf.empty:
        raise EmptyDatasetError(f"No features found in {source}")
    if gdf.crs is None:
        raise UnknownCRSError(f"{label} from {source} has no CRS")
    return gdf


# ------------------------------------------------------------------
# Loaders
# ------------------------------------------------------------------

def read_stations(path: PathLike) -> gpd.GeoDataFrame:
    log.info(f"Loading stations: {path}")
    gdf = _check_loaded(gpd.read_file(path), "stations", str(path))
    require_columns(gdf, STATION_COLUMNS, "stations")
    log.info(f"Stations loaded: {len(gdf):,} features ({gdf.crs.to_string()})")
    return gdf


def load_boroughs(
    path: Optional[PathLike] = None,
    resource: Optional[str] = None,
) -> gpd.GeoDataFrame:
    """
    Load the borough polygons from a file path or from a packaged dataset.

    Exactly one of `path` / `resource` must be given. GSS_CODE must be unique,
    since it is the key every later join and aggregation relies on.
    """
    if (path is None) == (resource is None):
        raise ValueError("Pass exactly one of path= or resource=")

    if path is not None:
        log.info(f"Loading boroughs: {path}")
        source = str(path)
        gdf = gpd.read_file(path)
    else:
        source = f"packaged dataset {resource!r}"
        gdf = read_packaged(resource)

    gdf = _check_loaded(gdf, "boroughs", source)
    require_columns(gdf, BOROUGH_COLUMNS, "boroughs")

    dupes = gdf.loc[gdf["GSS_CODE"].duplicated(), "GSS_CODE"].tolist()
    if dupes:
        raise SchemaError(f"GSS_CODE must be unique in boroughs; duplicated: {sorted(set(dupes))}")

    log.info(f"Boroughs loaded: {len(gdf):,} features ({gdf.crs.to_string()})")
    return gdf
