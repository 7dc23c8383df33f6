"""
Cycle-hire stations and London boroughs: a vector workflow on geopandas.

Stages, each a thin call into geopandas / shapely / pyproj:
- loading:    stations from a file, boroughs from a file or packaged dataset
- enrich:     derived total_slots column
- reproject:  EPSG:4326 -> EPSG:27700
- joins:      attribute join and point-in-polygon spatial join
- aggregate:  per-borough counts and sums
- centroids:  centroids / representative points
- predicates: ad-hoc geometric queries
- writer:     multi-layer GeoPackage output and layer listing
- pipeline:   orchestration driven by pipeline.yaml
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("cycle-hire-boroughs")
except PackageNotFoundError:  # pragma: no cover - package not installed
    __version__ = "0.0.0"
