from __future__ import annotations
import os
from typing import Iterable, Tuple
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from fallsim.dynamics.state import Sample
from fallsim.models.aerodynamics import is_applicable


def _series_arrays(series: Iterable[Sample]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Unpack samples into (t, v, h) arrays.
    """
    samples = list(series)
    if not samples:
        raise ValueError("Sample series is empty.")
    t = np.array([s.time for s in samples], dtype=float)
    v = np.array([s.velocity for s in samples], dtype=float)
    h = np.array([s.height for s in samples], dtype=float)
    return t, v, h


def load_series_csv(csv_path: str) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Load (t, v, h) from a CSV written by save_series or CSVLogger.

    For CSVLogger files containing several runs only the last run is returned.
    """
    df = pd.read_csv(csv_path)
    if "run" in df.columns:
        df = df[df["run"] == df["run"].max()]
    tcol = "time" if "time" in df.columns else "t"
    for name in (tcol, "velocity", "height"):
        if name not in df.columns:
            raise KeyError(f"Column '{name}' not found in CSV.")
    return (
        df[tcol].to_numpy(dtype=float),
        df["velocity"].to_numpy(dtype=float),
        df["height"].to_numpy(dtype=float),
    )


def _finish(fig: Figure, save_path: str | None, show: bool) -> Figure:
    fig.tight_layout()
    if save_path:
        os.makedirs(os.path.dirname(save_path) or ".", exist_ok=True)
        fig.savefig(save_path, dpi=180, bbox_inches="tight")
    if show:
        plt.show()
    return fig


def plot_arrays(
    t: np.ndarray,
    v: np.ndarray,
    h: np.ndarray,
    terminal_velocity: float | None = None,
    save_path: str | None = None,
    show: bool = True,
) -> Figure:
    """
    Plot velocity vs time and height vs time, stacked.

    Parameters
    ----------
    t, v, h : (N,) arrays
        Time [s], velocity [m/s], height [m]
    terminal_velocity : float | None
        Draw a dashed reference line at this velocity if finite.
    save_path : str | None
        If given, save the figure to this path (png/svg).
    show : bool
        Whether to call plt.show().

    Returns
    -------
    fig : Figure
    """
    fig, axes = plt.subplots(2, 1, figsize=(10, 7), sharex=True)

    # Velocity
    axes[0].plot(t, v, color="#1a73e8", lw=2.0, label="v")
    if terminal_velocity is not None and is_applicable(terminal_velocity):
        axes[0].axhline(
            terminal_velocity, color="#654597", ls="--",
            label=f"terminal {terminal_velocity:.1f} m/s",
        )
    axes[0].set_ylabel("velocity [m/s]")
    axes[0].grid(True, alpha=0.3)
    axes[0].legend(loc="best")
    axes[0].set_title("Velocity vs. Time")

    # Height
    axes[1].plot(t, h, color="#34a853", lw=2.0)
    axes[1].set_xlabel("t [s]"); axes[1].set_ylabel("height [m]")
    axes[1].set_ylim(bottom=0.0)
    axes[1].grid(True, alpha=0.3)
    axes[1].set_title("Height vs. Time")

    return _finish(fig, save_path, show)


def plot_series(
    series: Iterable[Sample],
    terminal_velocity: float | None = None,
    save_path: str | None = None,
    show: bool = True,
) -> Figure:
    """Chart an in-memory sample series. See plot_arrays."""
    t, v, h = _series_arrays(series)
    return plot_arrays(t, v, h, terminal_velocity, save_path, show)


def plot_csv(
    csv_path: str,
    terminal_velocity: float | None = None,
    save_path: str | None = None,
    show: bool = True,
) -> Figure:
    """Chart a series stored on disk. See plot_arrays."""
    t, v, h = load_series_csv(csv_path)
    return plot_arrays(t, v, h, terminal_velocity, save_path, show)
