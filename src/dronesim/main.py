"""
Main entry point for the flight-core scenarios.

Run with: python -m dronesim.main

Examples:
    python -m dronesim.main                        # Run all scenarios
    python -m dronesim.main --scenario backward_loop
    python -m dronesim.main --scenario pad_drop --verbose
    python -m dronesim.main --list-scenarios
    python -m dronesim.main --no-plot              # Run without showing plots
"""

import argparse
import sys

import matplotlib.pyplot as plt

from dronesim.log import print_statistics
from dronesim.metrics import compute_all_metrics
from dronesim.params import default_params
from dronesim.plots import plot_altitude, plot_attitude, plot_3d_path
from dronesim.scenarios import get_scenario, list_scenarios, run_scenario
from dronesim.types import FlightLog


def run_one(name: str, show_plots: bool = True, verbose: bool = False) -> FlightLog:
    """Run a single scenario and report it."""
    spec = get_scenario(name)

    print("\n" + "=" * 60)
    print(name.upper().replace("_", " "))
    print("=" * 60)
    if spec.description:
        print(spec.description)

    log = run_scenario(name, verbose=verbose)
    print_statistics(log, name)

    metrics = compute_all_metrics(log)
    print(f"  Pitch total:     {metrics['pitch_total']:.2f} rad")
    print(f"  Roll total:      {metrics['roll_total']:.2f} rad")
    print(f"  Yaw total:       {metrics['yaw_total']:.2f} rad")
    print(f"  up.y range:      {metrics['up_y_range']:.3f}")
    print(f"  Crashed:         {bool(metrics['crashed'])}")

    if show_plots and len(log) > 1:
        plot_altitude(log, f"{name}: Altitude")
        plot_attitude(log, f"{name}: Attitude")
        plot_3d_path(log, f"{name}: 3D Path")

    return log


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Quad-rotor flight core scenarios",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m dronesim.main                          # Run all scenarios
  python -m dronesim.main --scenario barrel_roll   # Run one scenario
  python -m dronesim.main --no-plot                # Run without plots
        """,
    )

    parser.add_argument(
        "--scenario", "-s",
        type=str,
        default="all",
        help="Which scenario to run (default: all)",
    )

    parser.add_argument(
        "--list-scenarios",
        action="store_true",
        help="List registered scenarios and exit",
    )

    parser.add_argument(
        "--no-plot",
        action="store_true",
        help="Disable plot display",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print per-tick progress and mode changes",
    )

    args = parser.parse_args()

    if args.list_scenarios:
        for name in list_scenarios():
            print(f"  {name:16s} {get_scenario(name).description}")
        return

    if args.scenario != "all" and args.scenario not in list_scenarios():
        print(f"Unknown scenario '{args.scenario}'. "
              f"Choose from: {', '.join(list_scenarios())}", file=sys.stderr)
        sys.exit(2)

    print("=" * 60)
    print("  QUAD-ROTOR FLIGHT CORE")
    print("=" * 60)

    params = default_params()
    print(f"\nVehicle Parameters:")
    print(f"  Gravity: {params.gravity} m/s²")
    print(f"  Full-throttle thrust: {params.throttle_acceleration:.1f} m/s²")
    print(f"  Tilt envelope: ±{params.max_tilt_angle:.3f} rad")

    show_plots = not args.no_plot
    names = list_scenarios() if args.scenario == "all" else [args.scenario]
    for name in names:
        run_one(name, show_plots=show_plots, verbose=args.verbose)

    print("\n" + "=" * 60)
    print("SIMULATION COMPLETE")
    print("=" * 60)

    if show_plots:
        print("\nDisplaying plots... Close plot windows to exit.")
        plt.show()
    else:
        print("\nPlots disabled. Use without --no-plot to see visualizations.")


if __name__ == "__main__":
    main()
