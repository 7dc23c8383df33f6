from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple, Union

import geopandas as gpd
import matplotlib.pyplot as plt

from .reproject import require_same_crs
from .schemas import require_columns

log = logging.getLogger(__name__)


def plot_borough_stats(
    boroughs: gpd.GeoDataFrame,
    points: gpd.GeoDataFrame,
    out: Union[str, Path],
    column: str,
    figsize: Tuple[float, float] = (10, 10),
) -> Path:
    """Choropleth of `column` per borough with the derived points drawn on top."""
    require_columns(boroughs, [column], "boroughs")
    require_same_crs(boroughs, points)

    out = Path(out)
    out.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=figsize)

    boroughs.plot(
        ax=ax,
        column=column,
        cmap="viridis",
        edgecolor="white",
        linewidth=0.5,
        legend=True,
        zorder=1,
    )

    if not points.empty:
        points.plot(
            ax=ax,
            color="black",
            markersize=8,
            zorder=2,
        )

    ax.set_title(f"Cycle hire: {column} per borough")
    ax.set_axis_off()
    plt.tight_layout()

    log.info(f"Saving plot to {out}")
    fig.savefig(out, dpi=150)
    plt.close(fig)
    return out
