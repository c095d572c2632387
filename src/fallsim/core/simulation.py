"""
Simulation controller for real-time free-fall runs.

Drives the integrator from a frame scheduler, manages the
run/pause/resume/reset lifecycle and accumulates the sample series consumed
by live charts.
"""
from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

from fallsim.dynamics.state import KinematicState, Parameters, RunStatus, Sample
from fallsim.models.presets import AIR_DENSITY, INITIAL_PARAMS
from fallsim.utils.validation import (
    InvalidParameterError,
    validate_parameters,
    validate_positive,
    validate_timestep,
)

from .integrator import initial_state, step
from .scheduling import AsyncioFrameScheduler, FrameScheduler, ManualFrameScheduler

if TYPE_CHECKING:
    from matplotlib.figure import Figure

    from fallsim.logger import CSVLogger

# Frames longer than this trigger a RuntimeWarning [s]
DEFAULT_MAX_FRAME_DT = 1.0


class SimulationController:
    """
    Owner of one simulated drop and its time series.

    Parameters
    ----------
    params : Parameters | None
        Drop parameters. Defaults to INITIAL_PARAMS (skydiver from 1000 m).
    scheduler : FrameScheduler | None
        Schedule-next-frame primitive. Defaults to AsyncioFrameScheduler,
        which requires a running event loop when start() is called.
    air_density : float
        Air density [kg/m³]
    max_frame_dt : float
        Frame duration [s] above which a RuntimeWarning is issued. Such
        frames are still integrated.
    logger : CSVLogger | None
        Optional sink receiving every committed state
    verbose : bool
        Print lifecycle messages to the terminal

    Attributes
    ----------
    scheduler : FrameScheduler
        Frame scheduler in use
    run_index : int
        Number of runs started so far (1-based once running)

    Notes
    -----
    **Lifecycle:**

        IDLE --start()--> RUNNING --pause()--> PAUSED --resume()--> RUNNING
                             |
                        ground reached
                             v
                          FINISHED --start()--> (implicit reset) RUNNING

    reset() returns to IDLE from any state. set_parameters() validates,
    stores and resets in one call, so a run never continues with parameters
    other than the ones it started with.

    **Ticks:**

    At most one frame is pending. pause(), reset() and touchdown cancel it,
    and every request carries a generation token so a frame that fires after
    a transition does nothing.

    Examples
    --------
    >>> sched = ManualFrameScheduler()
    >>> controller = SimulationController(INITIAL_PARAMS, scheduler=sched, verbose=False)
    >>> controller.start()
    >>> sched.advance(100.0)
    True
    >>> round(controller.state.velocity, 3)
    0.981
    """

    def __init__(
        self,
        params: Parameters | None = None,
        scheduler: FrameScheduler | None = None,
        air_density: float = AIR_DENSITY,
        max_frame_dt: float = DEFAULT_MAX_FRAME_DT,
        logger: CSVLogger | None = None,
        verbose: bool = True,
    ) -> None:
        params = INITIAL_PARAMS if params is None else params
        validate_parameters(params)
        if air_density < 0:
            raise ValueError(f"Density must be non-negative, got {air_density}")
        validate_positive(max_frame_dt, "max_frame_dt")

        self.scheduler: FrameScheduler = (
            scheduler if scheduler is not None else AsyncioFrameScheduler()
        )
        self.air_density = float(air_density)
        self.max_frame_dt = float(max_frame_dt)
        self.logger = logger
        self.verbose = verbose
        self.run_index = 0

        self._params = params
        self._status = RunStatus.IDLE
        self._state = initial_state(params)
        self._series: list[Sample] = []
        self._committed = 0

        # Frame bookkeeping: set on start/resume, cleared on pause/reset/finish
        self._handle = None
        self._anchor: float | None = None
        self._generation = 0

    # --- Read-only views ---

    @property
    def status(self) -> RunStatus:
        """Current lifecycle status."""
        return self._status

    @property
    def state(self) -> KinematicState:
        """Current kinematic state."""
        return self._state

    @property
    def params(self) -> Parameters:
        """Parameters of the current run."""
        return self._params

    @property
    def series(self) -> tuple[Sample, ...]:
        """Snapshot of the sample series, oldest first."""
        return tuple(self._series)

    @property
    def tick_count(self) -> int:
        """Number of ticks that advanced the state since the last reset."""
        return self._committed

    # --- Lifecycle ---

    def start(self) -> None:
        """
        Begin a new run.

        A FINISHED run is reset first.

        Raises
        ------
        RuntimeError
            If already RUNNING or PAUSED (use resume())
        InvalidParameterError
            If the stored parameters are invalid; status is left unchanged

        Errors raised by the scheduler (e.g. no running event loop for
        AsyncioFrameScheduler) propagate and also leave the status unchanged.
        """
        if self._status is RunStatus.FINISHED:
            self.reset()
        if self._status is not RunStatus.IDLE:
            raise RuntimeError(
                f"Cannot start from {self._status.name}. "
                "Use resume() to continue a paused run or reset() first."
            )
        validate_parameters(self._params)

        # Nothing is committed unless the scheduler accepts the first frame
        anchor = self.scheduler.now()
        self._request_tick()
        self.run_index += 1
        self._status = RunStatus.RUNNING
        self._anchor = anchor

        p = self._params
        self._print(
            f"Run {self.run_index} started: h0={p.initial_height}m, m={p.mass}kg, "
            f"Cd={p.drag_coefficient}, A={p.cross_sectional_area}m², g={p.gravity}m/s²"
        )

    def pause(self) -> None:
        """
        Suspend a running simulation, keeping state and series.

        Raises
        ------
        RuntimeError
            If not RUNNING
        """
        if self._status is not RunStatus.RUNNING:
            raise RuntimeError(f"Cannot pause from {self._status.name}")
        self._cancel_tick()
        self._anchor = None
        self._status = RunStatus.PAUSED
        self._flush_logger()
        self._print(f"Paused at t={self._state.time:.3f}s, h={self._state.height:.2f}m")

    def resume(self) -> None:
        """
        Continue a paused simulation.

        The wall-clock anchor is re-synced to now, so the time spent paused
        is not simulated.

        Raises
        ------
        RuntimeError
            If not PAUSED. A scheduler error leaves the run PAUSED.
        """
        if self._status is not RunStatus.PAUSED:
            raise RuntimeError(f"Cannot resume from {self._status.name}")
        anchor = self.scheduler.now()
        self._request_tick()
        self._status = RunStatus.RUNNING
        self._anchor = anchor
        self._print(f"Resumed at t={self._state.time:.3f}s")

    def reset(self) -> None:
        """Cancel any pending frame and return to the initial state (idempotent)."""
        self._cancel_tick()
        self._anchor = None
        self._status = RunStatus.IDLE
        self._state = initial_state(self._params)
        self._series.clear()
        self._committed = 0
        self._flush_logger()

    def set_parameters(self, params: Parameters) -> None:
        """
        Replace the parameters and reset.

        Raises
        ------
        InvalidParameterError
            If params are invalid; the previous parameters, state and
            status are kept
        """
        validate_parameters(params)
        self._params = params
        self.reset()

    # --- Tick loop ---

    def _request_tick(self) -> None:
        token = self._generation
        self._handle = self.scheduler.request(lambda now: self._on_frame(token, now))

    def _cancel_tick(self) -> None:
        self.scheduler.cancel(self._handle)
        self._handle = None
        self._generation += 1

    def _on_frame(self, token: int, now: float) -> None:
        # Stale frame from before a pause/reset/finish
        if token != self._generation or self._status is not RunStatus.RUNNING:
            return
        self._handle = None
        self._tick(now)

    def _tick(self, now: float) -> None:
        """
        Advance the run by the real time elapsed since the previous frame.

        Parameters
        ----------
        now : float
            Frame timestamp [ms]
        """
        if self._anchor is None:
            # start() and resume() always anchor; this covers schedulers whose
            # first frame arrives before any reference was taken
            self._anchor = now
            self._request_tick()
            return

        dt = (now - self._anchor) / 1000.0
        self._anchor = now
        if dt <= 0:
            # Keep sample times strictly increasing
            self._request_tick()
            return
        validate_timestep(dt, self.max_frame_dt)

        try:
            candidate = step(self._state, self._params, dt, self.air_density)
        except InvalidParameterError:
            self.reset()
            raise

        self._series.append(candidate.to_sample())
        self._committed += 1

        if candidate.height <= 0:
            final = replace(candidate, height=0.0)
            self._series[-1] = final.to_sample()
            self._state = final
            self._status = RunStatus.FINISHED
            self._anchor = None
            self._generation += 1
            if self.logger is not None:
                self.logger.log(final, run=self.run_index)
            self._flush_logger()
            self._print(
                f"Touchdown at t={final.time:.3f}s, v={final.velocity:.2f}m/s "
                f"({self._committed} ticks)"
            )
            return

        self._state = candidate
        if self.logger is not None:
            self.logger.log(candidate, run=self.run_index)
        self._request_tick()

    # --- Analysis ---

    def to_dataframe(self) -> pd.DataFrame:
        """Series as a DataFrame with columns time, velocity, height."""
        from fallsim.utils.io import series_to_frame

        return series_to_frame(self._series)

    def get_energy(self) -> dict[str, float]:
        """
        Mechanical energy of the body in the current state (diagnostic).

        Returns
        -------
        dict[str, float]
            'kinetic', 'potential' (relative to ground) and 'total' [J]

        Notes
        -----
        Without drag the total is approximately conserved; with drag it
        decreases monotonically.
        """
        m = self._params.mass
        ke = 0.5 * m * self._state.velocity**2
        pe = m * self._params.gravity * self._state.height
        return {"kinetic": ke, "potential": pe, "total": ke + pe}

    def plot(self, save_path: str | Path | None = None, show: bool = False) -> Figure:
        """
        Chart the current series (velocity and height vs time).

        Raises
        ------
        RuntimeError
            If the series is empty
        """
        if not self._series:
            raise RuntimeError("No samples to plot. Has the simulation been run yet?")

        from fallsim.models.aerodynamics import terminal_velocity
        from fallsim.visualization.plotting import plot_series

        return plot_series(
            self._series,
            terminal_velocity=terminal_velocity(self._params, self.air_density),
            save_path=None if save_path is None else str(save_path),
            show=show,
        )

    # --- Internals ---

    def _flush_logger(self) -> None:
        if self.logger is not None:
            self.logger.flush()

    def _print(self, msg: str) -> None:
        if self.verbose:
            print(f"[Simulation] {msg}")


def simulate(
    params: Parameters | None = None,
    frame_dt: float = 1.0 / 60.0,
    duration: float = 600.0,
    air_density: float = AIR_DENSITY,
    logger: CSVLogger | None = None,
    log_interval: float = 0.0,
    verbose: bool = False,
) -> SimulationController:
    """
    Run a drop offline with a fixed frame duration.

    Uses a ManualFrameScheduler, so the result is deterministic and the call
    returns as fast as the CPU allows.

    Parameters
    ----------
    params : Parameters | None
        Drop parameters (default INITIAL_PARAMS)
    frame_dt : float
        Wall-clock duration of each frame [s]
    duration : float
        Maximum simulated time [s]. A run that has not touched down by then
        is left PAUSED.
    air_density : float
        Air density [kg/m³]
    logger : CSVLogger | None
        Optional CSV sink
    log_interval : float
        Interval [s] for printing progress. Set to <= 0 to disable.
    verbose : bool
        Print lifecycle messages

    Returns
    -------
    SimulationController
        Controller in FINISHED (ground reached) or PAUSED (duration hit) state

    Examples
    --------
    >>> c = simulate(Parameters.from_presets("Bowling Ball", initial_height=100))
    >>> c.status is RunStatus.FINISHED
    True
    """
    validate_positive(frame_dt, "frame_dt")
    scheduler = ManualFrameScheduler()
    controller = SimulationController(
        params,
        scheduler=scheduler,
        air_density=air_density,
        logger=logger,
        verbose=verbose,
    )
    controller.start()

    frame_ms = frame_dt * 1000.0
    last_log_time = 0.0
    while controller.status is RunStatus.RUNNING and controller.state.time < duration:
        scheduler.advance(frame_ms)

        # Terminal progress log
        t = controller.state.time
        if log_interval > 0 and (t - last_log_time) >= log_interval:
            print(
                f"[Simulation] t={t:6.2f}s | h={controller.state.height:8.2f}m, "
                f"v={controller.state.velocity:6.2f}m/s"
            )
            last_log_time = t

    if controller.status is RunStatus.RUNNING:
        controller.pause()
    return controller
