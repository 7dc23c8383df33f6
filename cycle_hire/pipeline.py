from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import geopandas as gpd
import matplotlib
import pandas as pd

from .aggregate import aggregate_by_key
from .centroids import derive_points
from .config import PipelineConfig, load_config
from .enrich import add_total_slots
from .errors import PipelineError
from .joins import attribute_join, drop_geometry, spatial_join
from .loading import load_boroughs, read_stations
from .plots import plot_borough_stats
from .reproject import reproject
from .writer import layer_names, write_layers

log = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    stations: gpd.GeoDataFrame
    boroughs: gpd.GeoDataFrame
    stats: pd.DataFrame
    boroughs_stats: gpd.GeoDataFrame
    centroids_stats: gpd.GeoDataFrame
    stations_stats: gpd.GeoDataFrame
    output_path: Path
    layers: List[str]
    plot_path: Optional[Path] = None


def run(config: PipelineConfig) -> PipelineResult:
    key = config.borough_key

    # ---- load ----
    stations = read_stations(config.stations_path)
    boroughs = load_boroughs(path=config.boroughs_path, resource=config.boroughs_resource)

    # ---- derive + reproject ----
    stations = add_total_slots(stations)
    stations = reproject(stations, config.target_crs)
    boroughs = reproject(boroughs, config.target_crs)

    # ---- station -> borough ----
    stations = spatial_join(stations, boroughs, [key], predicate=config.join_predicate)

    # ---- per-borough statistics ----
    stats = aggregate_by_key(
        drop_geometry(stations),
        key=key,
        sum_field=config.sum_field,
        count_col=config.count_column,
        sum_col=config.sum_column,
        sort_descending=config.sort_descending,
    )
    if config.sort_descending and not stats.empty:
        top = stats.iloc[0]
        log.info(f"Busiest borough: {top[key]} ({int(top[config.count_column]):,} stations)")

    # ---- joined outputs ----
    boroughs_stats = attribute_join(boroughs, stats, left_on=key, validate="one_to_one")
    centroids_stats = derive_points(boroughs_stats, config.centroid_method)
    stations_stats = attribute_join(stations, stats, left_on=key, validate="many_to_one")

    # ---- write + check ----
    layers: Dict[str, gpd.GeoDataFrame] = {
        config.layers["boroughs"]: boroughs_stats,
        config.layers["centroids"]: centroids_stats,
        config.layers["stations"]: stations_stats,
    }
    out = write_layers(layers, config.output_path, overwrite=config.overwrite)

    written = layer_names(out)
    missing = sorted(set(layers) - set(written))
    if missing:
        raise PipelineError(f"Layers missing from {out} after write: {', '.join(missing)}")
    log.info(f"{out} layers: {', '.join(written)}")

    # ---- plot ----
    plot_path = None
    if config.plot_enabled:
        plot_path = plot_borough_stats(
            boroughs_stats,
            centroids_stats,
            config.plot_out or out.with_suffix(".png"),
            column=config.plot_column,
            figsize=config.plot_figsize,
        )

    return PipelineResult(
        stations=stations,
        boroughs=boroughs,
        stats=stats,
        boroughs_stats=boroughs_stats,
        centroids_stats=centroids_stats,
        stations_stats=stations_stats,
        output_path=out,
        layers=written,
        plot_path=plot_path,
    )


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="[%(asctime)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    matplotlib.use("Agg")

    ap = argparse.ArgumentParser(description="Run the cycle-hire / borough workflow (YAML-driven).")
    ap.add_argument("--config", default="pipeline.yaml", help="Path to the pipeline YAML.")
    args = ap.parse_args(argv)

    config = load_config(args.config)
    result = run(config)
    print(f"Wrote {len(result.layers)} layers to {result.output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
