# src/fallsim/utils/io.py
import pandas as pd
from pathlib import Path
from typing import Iterable

from fallsim.dynamics.state import Sample

COLUMNS = ["time", "velocity", "height"]


def series_to_frame(series: Iterable[Sample]) -> pd.DataFrame:
    """
    Convert a sample series to a DataFrame.

    Args:
        series: Samples in chronological order.

    Returns:
        DataFrame with columns time, velocity, height (empty if no samples).
    """
    rows = [(s.time, s.velocity, s.height) for s in series]
    return pd.DataFrame(rows, columns=COLUMNS)


def save_series(series: Iterable[Sample], filepath: str) -> Path:
    """
    Saves a sample series to a CSV file.

    Args:
        series: Samples, e.g. controller.series
        filepath: Destination path (e.g., 'results/skydiver.csv')
    """
    df = series_to_frame(series)
    if df.empty:
        raise ValueError("Sample series is empty. Nothing to save.")

    path = Path(filepath)
    # Ensure the directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    df.to_csv(path, index=False)
    print(f"Simulation results saved to {path.absolute()}")
    return path
