"""Data format helpers for Parquet I/O."""

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from emsig_engine.core.constants import COL_PERIOD, OUTPUT_COLUMNS


def ensure_columns(df: pd.DataFrame, required_columns: list[str]) -> None:
    """Ensure dataframe has required columns.

    Args:
        df: DataFrame to check
        required_columns: List of required column names

    Raises:
        ValueError: If any required columns are missing
    """
    missing = set(required_columns) - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns: {missing}")


def read_parquet_schedule(path: str) -> pd.DataFrame:
    """Read a schedule from Parquet file.

    Args:
        path: Path to Parquet file

    Returns:
        DataFrame indexed by period name
    """
    df = pd.read_parquet(path)

    if COL_PERIOD not in df.columns:
        raise ValueError(f"Schedule must have '{COL_PERIOD}' column")
    ensure_columns(df, OUTPUT_COLUMNS)

    return df.set_index(COL_PERIOD)


def write_parquet_schedule(df: pd.DataFrame, path: str) -> None:
    """Write a schedule to Parquet file.

    Args:
        df: DataFrame indexed by period name
        path: Output path
    """
    df_copy = df.copy()
    df_copy.index.name = COL_PERIOD

    # Reset index to save period names as a column
    table = pa.Table.from_pandas(df_copy.reset_index(), preserve_index=False)
    pq.write_table(table, path, compression="snappy")
