from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Mapping, Union

import geopandas as gpd
import pandas as pd

from .errors import LayerExistsError, MissingGeometryError

log = logging.getLogger(__name__)

PathLike = Union[str, Path]

DRIVER = "GPKG"


def _require_geometry(name: str, frame) -> None:
    if not isinstance(frame, gpd.GeoDataFrame):
        raise MissingGeometryError(f"Layer {name!r} is a plain table; only feature collections can be written")
    try:
        frame.geometry
    except AttributeError as e:
        raise MissingGeometryError(f"Layer {name!r} has no active geometry column") from e


def list_layers(path: PathLike) -> pd.DataFrame:
    """Layer names and geometry types of a container, without reading features."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No such container: {path}")
    return gpd.list_layers(path)


def layer_names(path: PathLike) -> List[str]:
    return list_layers(path)["name"].tolist()


def write_layers(
    layers: Mapping[str, gpd.GeoDataFrame],
    path: PathLike,
    overwrite: bool = True,
) -> Path:
    """
    Write each collection as a named layer of one GeoPackage.

    Overwrite applies per layer: replacing a layer leaves the container's other
    layers as they were. Every layer is checked before anything is written.
    """
    path = Path(path)
    for name, frame in layers.items():
        _require_geometry(name, frame)

    existing = set(layer_names(path)) if path.exists() else set()
    if not overwrite:
        clash = sorted(existing & set(layers))
        if clash:
            raise LayerExistsError(f"Layer(s) already in {path}: {', '.join(clash)} (overwrite disabled)")

    path.parent.mkdir(parents=True, exist_ok=True)
    for name, frame in layers.items():
        action = "Replacing" if name in existing else "Writing"
        log.info(f"{action} layer {name!r} in {path} ({len(frame):,} features)")
        frame.to_file(path, layer=name, driver=DRIVER)

    return path
