"""
Tests for the SimulationController lifecycle and tick loop.
"""
import numpy as np
import pytest

from fallsim.core.integrator import initial_state
from fallsim.core.scheduling import ManualFrameScheduler
from fallsim.core.simulation import SimulationController, simulate
from fallsim.dynamics.state import RunStatus
from fallsim.utils.validation import InvalidParameterError


class LeakyScheduler(ManualFrameScheduler):
    """Scheduler whose cancel() does nothing, so stale frames can still fire."""

    def __init__(self):
        super().__init__()
        self.callbacks = []

    def request(self, callback):
        self.callbacks.append(callback)
        return len(self.callbacks)

    def cancel(self, handle):
        pass

    def fire_all(self, ms):
        self.idle(ms)
        callbacks, self.callbacks = self.callbacks, []
        for cb in callbacks:
            cb(self.now())


class RefusingScheduler(ManualFrameScheduler):
    """Scheduler that can be told to refuse frame requests."""

    def __init__(self):
        super().__init__()
        self.refuse = False

    def request(self, callback):
        if self.refuse:
            raise RuntimeError("no running event loop")
        return super().request(callback)


def run_to_ground(controller, scheduler, frame_ms=1000 / 60, max_frames=100_000):
    for _ in range(max_frames):
        if controller.status is not RunStatus.RUNNING:
            break
        scheduler.advance(frame_ms)
    return controller


# --- Construction ---

def test_controller_creation(controller, skydiver):
    """New controller is idle at the release state with no samples."""
    assert controller.status is RunStatus.IDLE
    assert controller.state == initial_state(skydiver)
    assert controller.series == ()
    assert controller.tick_count == 0
    assert controller.params is skydiver


def test_invalid_parameters_rejected_at_construction(skydiver):
    with pytest.raises(InvalidParameterError):
        SimulationController(skydiver.with_changes(mass=0.0), scheduler=ManualFrameScheduler())


def test_nothing_happens_before_start(controller, scheduler):
    assert not scheduler.pending
    assert scheduler.advance(100.0) is False
    assert controller.series == ()


# --- Ticks ---

def test_start_requests_one_frame(controller, scheduler):
    controller.start()
    assert controller.status is RunStatus.RUNNING
    assert scheduler.pending
    assert controller.run_index == 1


def test_first_frame_advances_by_elapsed_time(controller, scheduler):
    """Scenario A through the controller: 100 ms frame from rest."""
    controller.start()
    scheduler.advance(100.0)

    s = controller.state
    assert s.time == pytest.approx(0.1)
    assert s.acceleration == pytest.approx(9.81)
    assert s.velocity == pytest.approx(0.981)
    assert s.height == pytest.approx(999.90, abs=5e-3)

    assert len(controller.series) == 1
    sample = controller.series[0]
    assert (sample.time, sample.velocity, sample.height) == (s.time, s.velocity, s.height)


def test_frame_without_anchor_only_anchors(controller, scheduler):
    """A frame with no wall-clock reference records one and does not integrate."""
    controller.start()
    controller._anchor = None
    scheduler.advance(5000.0)
    assert controller.series == ()
    assert controller.state.time == 0.0
    assert scheduler.pending

    scheduler.advance(50.0)
    assert controller.state.time == pytest.approx(0.05)


def test_zero_length_frame_is_skipped(controller, scheduler):
    controller.start()
    scheduler.advance(20.0)
    scheduler.advance(0.0)
    assert controller.tick_count == 1
    assert scheduler.pending


def test_large_frame_warns(controller, scheduler):
    controller.start()
    with pytest.warns(RuntimeWarning, match="Large timestep"):
        scheduler.advance(2500.0)
    assert controller.state.time == pytest.approx(2.5)


def test_series_strictly_increasing(controller, scheduler):
    """Uneven frames still give strictly increasing sample times."""
    controller.start()
    rng = np.random.default_rng(0)
    for ms in rng.uniform(5.0, 40.0, size=300):
        scheduler.advance(float(ms))

    t = np.array([s.time for s in controller.series])
    assert np.all(np.diff(t) > 0)
    assert len(controller.series) == controller.tick_count == 300


def test_series_is_snapshot(controller, scheduler):
    controller.start()
    scheduler.advance(16.0)
    snapshot = controller.series
    scheduler.advance(16.0)
    assert len(snapshot) == 1
    assert len(controller.series) == 2


# --- Termination ---

def test_run_finishes_on_ground(short_drop, scheduler):
    """Scenario C: final sample exactly at height 0 with positive time and speed."""
    c = SimulationController(short_drop, scheduler=scheduler, verbose=False)
    c.start()
    run_to_ground(c, scheduler)

    assert c.status is RunStatus.FINISHED
    last = c.series[-1]
    assert last.height == 0.0
    assert last.time > 0.0
    assert last.velocity > 0.0
    assert c.state.height == 0.0
    assert all(s.height > 0.0 for s in c.series[:-1])


def test_no_samples_after_finish(short_drop, scheduler):
    c = SimulationController(short_drop, scheduler=scheduler, verbose=False)
    c.start()
    run_to_ground(c, scheduler)
    n = len(c.series)

    assert not scheduler.pending
    assert scheduler.advance(16.0) is False
    assert len(c.series) == n
    assert c.status is RunStatus.FINISHED


def test_start_after_finish_resets(short_drop, scheduler):
    c = SimulationController(short_drop, scheduler=scheduler, verbose=False)
    c.start()
    run_to_ground(c, scheduler)

    c.start()
    assert c.status is RunStatus.RUNNING
    assert c.series == ()
    assert c.state == initial_state(short_drop)
    assert c.run_index == 2


def test_zero_gravity_never_finishes(skydiver, scheduler):
    """Scenario D: object hangs at the release height."""
    params = skydiver.with_changes(gravity=0.0)
    c = SimulationController(params, scheduler=scheduler, verbose=False)
    c.start()
    for _ in range(600):
        scheduler.advance(1000 / 60)

    assert c.status is RunStatus.RUNNING
    assert c.state.height == params.initial_height
    assert c.state.acceleration == 0.0
    assert all(s.height == params.initial_height for s in c.series)


# --- Pause / resume ---

def test_pause_preserves_state(controller, scheduler):
    controller.start()
    for _ in range(10):
        scheduler.advance(16.0)
    state, series = controller.state, controller.series

    controller.pause()
    assert controller.status is RunStatus.PAUSED
    assert not scheduler.pending

    scheduler.idle(60_000.0)
    assert controller.state == state
    assert controller.series == series


def test_resume_does_not_count_paused_time(controller, scheduler):
    controller.start()
    scheduler.advance(100.0)
    controller.pause()
    scheduler.idle(30_000.0)
    controller.resume()
    scheduler.advance(100.0)

    assert controller.status is RunStatus.RUNNING
    assert controller.state.time == pytest.approx(0.2)
    assert len(controller.series) == 2


def test_pause_resume_matches_uninterrupted_run(skydiver):
    """Pausing between frames does not alter the trajectory."""
    a_sched, b_sched = ManualFrameScheduler(), ManualFrameScheduler()
    a = SimulationController(skydiver, scheduler=a_sched, verbose=False)
    b = SimulationController(skydiver, scheduler=b_sched, verbose=False)
    a.start()
    b.start()
    for i in range(20):
        a_sched.advance(16.0)
        b_sched.advance(16.0)
        if i % 5 == 0:
            b.pause()
            b_sched.idle(1234.0)
            b.resume()
    assert a.state == b.state
    assert a.series == b.series


def test_stale_frame_after_pause_is_ignored(skydiver):
    """A frame that fires after pause() does not touch state or series."""
    sched = LeakyScheduler()
    c = SimulationController(skydiver, scheduler=sched, verbose=False)
    c.start()
    c.pause()
    sched.fire_all(100.0)
    assert c.series == ()
    assert c.state == initial_state(skydiver)


def test_stale_frame_after_reset_is_ignored(skydiver):
    sched = LeakyScheduler()
    c = SimulationController(skydiver, scheduler=sched, verbose=False)
    c.start()
    sched.fire_all(100.0)
    assert len(c.series) == 1

    c.reset()
    c.start()
    # Two frames queued: one from the first run, one from the second
    sched.fire_all(100.0)
    assert len(c.series) == 1
    assert c.state.time == pytest.approx(0.1)


# --- Reset / parameters ---

def test_reset_is_idempotent(controller, scheduler, skydiver):
    controller.start()
    for _ in range(5):
        scheduler.advance(16.0)

    controller.reset()
    once = (controller.status, controller.state, controller.series)
    controller.reset()
    twice = (controller.status, controller.state, controller.series)

    assert once == twice
    assert controller.status is RunStatus.IDLE
    assert controller.state == initial_state(skydiver)
    assert controller.series == ()
    assert controller.tick_count == 0
    assert not scheduler.pending


def test_set_parameters_resets(controller, scheduler, skydiver):
    controller.start()
    scheduler.advance(100.0)

    new = skydiver.with_changes(initial_height=500.0, gravity=1.62)
    controller.set_parameters(new)

    assert controller.params == new
    assert controller.status is RunStatus.IDLE
    assert controller.state.height == 500.0
    assert controller.state.acceleration == 1.62
    assert controller.series == ()
    assert not scheduler.pending


def test_set_invalid_parameters_keeps_previous(controller, scheduler, skydiver):
    controller.start()
    scheduler.advance(100.0)
    state = controller.state

    with pytest.raises(InvalidParameterError):
        controller.set_parameters(skydiver.with_changes(mass=-1.0))

    assert controller.params == skydiver
    assert controller.state == state
    assert controller.status is RunStatus.RUNNING


def test_invalid_mass_during_tick_resets_and_raises(controller, scheduler, skydiver):
    """An integrator error surfaces to the caller and leaves the controller IDLE."""
    controller.start()
    scheduler.advance(100.0)
    assert controller.tick_count == 1

    controller._params = skydiver.with_changes(mass=0.0)
    with pytest.raises(InvalidParameterError, match="mass"):
        scheduler.advance(16.0)

    assert controller.status is RunStatus.IDLE
    assert controller.series == ()
    assert controller.tick_count == 0
    assert not scheduler.pending


# --- Scheduler failures ---

def test_start_with_refusing_scheduler_stays_idle(skydiver):
    sched = RefusingScheduler()
    c = SimulationController(skydiver, scheduler=sched, verbose=False)

    sched.refuse = True
    with pytest.raises(RuntimeError, match="event loop"):
        c.start()
    assert c.status is RunStatus.IDLE
    assert c.run_index == 0
    assert not sched.pending

    sched.refuse = False
    c.start()
    assert c.status is RunStatus.RUNNING
    assert c.run_index == 1
    sched.advance(100.0)
    assert c.tick_count == 1


def test_resume_with_refusing_scheduler_stays_paused(skydiver):
    sched = RefusingScheduler()
    c = SimulationController(skydiver, scheduler=sched, verbose=False)
    c.start()
    sched.advance(100.0)
    c.pause()
    state = c.state

    sched.refuse = True
    with pytest.raises(RuntimeError, match="event loop"):
        c.resume()
    assert c.status is RunStatus.PAUSED
    assert c.state == state

    sched.refuse = False
    c.resume()
    sched.advance(50.0)
    assert c.state.time == pytest.approx(0.15)


def test_default_scheduler_outside_event_loop_stays_idle(skydiver):
    """AsyncioFrameScheduler needs a running loop; without one start() fails cleanly."""
    c = SimulationController(skydiver, verbose=False)
    with pytest.raises(RuntimeError):
        c.start()
    assert c.status is RunStatus.IDLE
    assert c.run_index == 0
    with pytest.raises(RuntimeError):
        c.start()
    assert c.status is RunStatus.IDLE


# --- Illegal transitions ---

def test_pause_when_idle_raises(controller):
    with pytest.raises(RuntimeError, match="Cannot pause"):
        controller.pause()


def test_resume_when_running_raises(controller):
    controller.start()
    with pytest.raises(RuntimeError, match="Cannot resume"):
        controller.resume()


def test_start_when_running_or_paused_raises(controller):
    controller.start()
    with pytest.raises(RuntimeError, match="Cannot start"):
        controller.start()
    controller.pause()
    with pytest.raises(RuntimeError, match="Cannot start"):
        controller.start()


# --- Offline driver and diagnostics ---

def test_simulate_reaches_ground(short_drop):
    c = simulate(short_drop, frame_dt=0.01)
    assert c.status is RunStatus.FINISHED
    assert c.series[-1].height == 0.0
    # ~1.43 s for 10 m with negligible drag
    assert 1.3 < c.state.time < 1.6


def test_simulate_duration_limit_pauses(skydiver):
    c = simulate(skydiver.with_changes(gravity=0.0), frame_dt=0.1, duration=5.0)
    assert c.status is RunStatus.PAUSED
    assert c.state.time == pytest.approx(5.0, abs=0.11)


def test_simulate_progress_log(short_drop, capsys):
    simulate(short_drop, frame_dt=0.01, log_interval=0.5, verbose=True)
    out = capsys.readouterr().out
    assert "[Simulation] Run 1 started" in out
    assert "[Simulation] t=" in out
    assert "Touchdown" in out


def test_to_dataframe(short_drop):
    c = simulate(short_drop, frame_dt=0.01)
    df = c.to_dataframe()
    assert list(df.columns) == ["time", "velocity", "height"]
    assert len(df) == len(c.series)
    assert df["height"].iloc[-1] == 0.0


def test_energy_decreases_with_drag(skydiver, scheduler):
    c = SimulationController(skydiver, scheduler=scheduler, verbose=False)
    c.start()
    energies = [c.get_energy()["total"]]
    for _ in range(500):
        scheduler.advance(1000 / 60)
        energies.append(c.get_energy()["total"])
    assert np.all(np.diff(energies) < 0)


def test_energy_initially_potential(controller):
    e = controller.get_energy()
    assert e["kinetic"] == 0.0
    assert e["potential"] == pytest.approx(75.0 * 9.81 * 1000.0)
