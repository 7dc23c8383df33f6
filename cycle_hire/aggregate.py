from __future__ import annotations

import logging
from typing import Optional

import geopandas as gpd
import pandas as pd

from .errors import SchemaError
from .schemas import require_columns

log = logging.getLogger(__name__)


def aggregate_by_key(
    table: pd.DataFrame,
    key: str,
    sum_field: Optional[str] = None,
    count_col: str = "count",
    sum_col: Optional[str] = None,
    sort_descending: bool = True,
) -> pd.DataFrame:
    """
    One row per distinct `key`: member count, plus the sum of `sum_field` if given.

    Rows whose key is absent are dropped before grouping. With sort_descending
    the result is ordered by count (largest first), ties broken by key.
    """
    if isinstance(table, gpd.GeoDataFrame):
        raise SchemaError("Aggregate a tabular view; drop the geometry column first")

    required = [key] + ([sum_field] if sum_field else [])
    require_columns(table, required, "aggregation input")

    keyed = table[table[key].notna()]
    dropped = len(table) - len(keyed)
    if dropped:
        log.info(f"Dropped {dropped:,} row(s) with no {key!r} before grouping")

    aggs = {count_col: (key, "size")}
    if sum_field:
        sum_col = sum_col or f"{sum_field}_sum"
        aggs[sum_col] = (sum_field, "sum")

    out = keyed.groupby(key, sort=True).agg(**aggs).reset_index()

    if sort_descending:
        out = out.sort_values([count_col, key], ascending=[False, True], kind="stable")
        out = out.reset_index(drop=True)

    log.info(f"Aggregated {len(keyed):,} rows into {len(out):,} groups by {key!r}")
    return out
