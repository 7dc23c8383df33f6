"""
Pipeline configuration loaded from pipeline.yaml.

Relative paths resolve against an explicit project directory (by default the
directory holding the YAML file), never against the process's working
directory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from .centroids import METHODS
from .errors import ConfigError
from .joins import SPATIAL_JOIN_PREDICATES

PathLike = Union[str, Path]

LAYER_KEYS = ("boroughs", "centroids", "stations")


def get_by_path(d: dict, dotted: str) -> Any:
    """Fetch a nested value using a dotted path (e.g., 'inputs.stations.path')."""
    cur: Any = d
    for part in dotted.split("."):
        if not isinstance(cur, dict) or part not in cur:
            raise ConfigError(f"Missing key '{part}' while resolving '{dotted}'")
        cur = cur[part]
    return cur


def get_optional(d: dict, dotted: str, default: Any = None) -> Any:
    try:
        value = get_by_path(d, dotted)
    except ConfigError:
        return default
    return default if value is None else value


@dataclass
class PipelineConfig:
    project_dir: Path
    stations_path: Path
    boroughs_path: Optional[Path]
    boroughs_resource: Optional[str]
    target_crs: str
    output_path: Path
    layers: Dict[str, str]
    borough_key: str = "GSS_CODE"
    join_predicate: str = "within"
    sum_field: str = "total_slots"
    count_column: str = "n_stations"
    sort_descending: bool = True
    centroid_method: str = "representative_point"
    overwrite: bool = True
    plot_enabled: bool = False
    plot_out: Optional[Path] = None
    plot_column: str = "n_stations"
    plot_figsize: Tuple[float, float] = field(default=(10.0, 10.0))

    def resolve(self, p: PathLike) -> Path:
        return _resolve(self.project_dir, p)

    @property
    def sum_column(self) -> str:
        return f"{self.sum_field}_sum"


def _resolve(root: Path, p: PathLike) -> Path:
    p = Path(p)
    return p if p.is_absolute() else (root / p).resolve()


def config_from_dict(raw: dict, project_dir: Path) -> PipelineConfig:
    root = _resolve(project_dir, get_optional(raw, "paths.project_dir", project_dir))

    def resolve(p: PathLike) -> Path:
        return _resolve(root, p)

    boroughs_path = get_optional(raw, "inputs.boroughs.path")
    boroughs_resource = get_optional(raw, "inputs.boroughs.resource")
    if (boroughs_path is None) == (boroughs_resource is None):
        raise ConfigError("inputs.boroughs needs exactly one of 'path' or 'resource'")

    layers = {k: str(get_by_path(raw, f"output.layers.{k}")) for k in LAYER_KEYS}
    if len(set(layers.values())) != len(layers):
        raise ConfigError(f"output.layers names must be distinct, got {layers}")

    predicate = str(get_optional(raw, "join.predicate", "within"))
    if predicate not in SPATIAL_JOIN_PREDICATES:
        raise ConfigError(f"join.predicate must be one of {SPATIAL_JOIN_PREDICATES}, got {predicate!r}")

    method = str(get_optional(raw, "centroids.method", "representative_point"))
    if method not in METHODS:
        raise ConfigError(f"centroids.method must be one of {METHODS}, got {method!r}")

    plot_out = get_optional(raw, "plot.out")

    return PipelineConfig(
        project_dir=root,
        stations_path=resolve(get_by_path(raw, "inputs.stations.path")),
        boroughs_path=resolve(boroughs_path) if boroughs_path is not None else None,
        boroughs_resource=boroughs_resource,
        target_crs=str(get_by_path(raw, "crs.target")),
        output_path=resolve(get_by_path(raw, "output.path")),
        layers=layers,
        borough_key=str(get_optional(raw, "join.borough_key", "GSS_CODE")),
        join_predicate=predicate,
        sum_field=str(get_optional(raw, "aggregate.sum_field", "total_slots")),
        count_column=str(get_optional(raw, "aggregate.count_column", "n_stations")),
        sort_descending=bool(get_optional(raw, "aggregate.sort_descending", True)),
        centroid_method=method,
        overwrite=bool(get_optional(raw, "output.overwrite", True)),
        plot_enabled=bool(get_optional(raw, "plot.enabled", False)),
        plot_out=resolve(plot_out) if plot_out is not None else None,
        plot_column=str(get_optional(raw, "plot.column", "n_stations")),
        plot_figsize=tuple(float(v) for v in get_optional(raw, "plot.figsize", (10, 10))),
    )


def load_config(path: PathLike) -> PipelineConfig:
    path = Path(path).resolve()
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return config_from_dict(raw, project_dir=path.parent)
