"""
Simple drop: skydiver from 1 km on Earth.

Demonstrates:
- Offline run with a fixed frame duration
- CSV logging of every committed tick
- Comparison against the adaptive scipy reference
- Automatic plot generation
"""
import time
from pathlib import Path
import sys

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fallsim.core.simulation import simulate
from fallsim.core.solver import ground_impact
from fallsim.dynamics.state import Parameters
from fallsim.logger import CSVLogger
from fallsim.models.aerodynamics import terminal_velocity
from fallsim.visualization.readouts import readouts

OUTPUT_DIR = Path(__file__).parent / "output" / "simple_drop"


def main():
    """Run simple drop simulation."""
    print("=" * 60)
    print("Simple Drop Test")
    print("=" * 60)

    params = Parameters.from_presets("Skydiver", "Earth", initial_height=1000.0)

    print(f"\nInitial Conditions:")
    print(f"  Altitude: {params.initial_height:.1f} m")
    print(f"  Mass: {params.mass:.1f} kg")
    print(f"  Drag area: {params.drag_coefficient * params.cross_sectional_area:.4f} m²")
    print(f"  Terminal velocity: {terminal_velocity(params):.2f} m/s")

    print(f"\nRunning simulation...")
    start = time.time()
    with CSVLogger(str(OUTPUT_DIR / "ticks.csv")) as logger:
        controller = simulate(params, frame_dt=1 / 60, logger=logger, log_interval=5.0)
    elapsed = time.time() - start

    print(f"\nResults:")
    for label, value in readouts(controller.state, params).items():
        print(f"  {label}: {value}")
    print(f"  Wall clock time: {elapsed:.3f} s")

    impact = ground_impact(params)
    if impact is not None:
        t_ref, v_ref = impact
        print(f"\nReference (solve_ivp):")
        print(f"  Touchdown time: {t_ref:.3f} s (frame run off by {controller.state.time - t_ref:+.3f} s)")
        print(f"  Touchdown velocity: {v_ref:.2f} m/s")

    energy = controller.get_energy()
    print(f"\nFinal Energy:")
    print(f"  Kinetic: {energy['kinetic']:.2f} J")
    print(f"  Potential: {energy['potential']:.2f} J")

    controller.plot(save_path=str(OUTPUT_DIR / "drop.png"))
    print(f"\nOutput saved to: {OUTPUT_DIR}")
    print("=" * 60)


if __name__ == "__main__":
    main()
