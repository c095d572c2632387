"""
Real-time drop driven by an asyncio event loop.

A bowling ball falls 100 m at wall-clock speed. Halfway through the run the
simulation is paused for one second and then resumed; the pause does not
show up as a jump in simulated time.
"""
import asyncio
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fallsim.core.scheduling import AsyncioFrameScheduler
from fallsim.core.simulation import SimulationController
from fallsim.dynamics.state import Parameters, RunStatus
from fallsim.visualization.readouts import fall_fraction, readouts


async def run():
    params = Parameters.from_presets("Bowling Ball", "Earth", initial_height=100.0)
    controller = SimulationController(params, scheduler=AsyncioFrameScheduler())

    controller.start()
    paused = False
    while controller.status is not RunStatus.FINISHED:
        await asyncio.sleep(0.25)
        state = controller.state
        bar = "#" * int(40 * fall_fraction(state.height, params.initial_height))
        print(f"{state.time:6.2f}s |{bar:<40}| {readouts(state, params)['Velocity']}")

        if not paused and state.height < params.initial_height / 2:
            controller.pause()
            await asyncio.sleep(1.0)
            controller.resume()
            paused = True

    print(f"\nLanded after {len(controller.series)} ticks, t={controller.state.time:.2f}s")


if __name__ == "__main__":
    asyncio.run(run())
