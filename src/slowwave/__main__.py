"""
Command-line entry point: run one simulation and report wall-clock time.

Usage:
    python -m slowwave --duration 30
    python -m slowwave --duration 60 --seed 7 \\
        --column-params 30 -58.5 4 2 1 1.33 0.03 \\
        --stim-params 2 40 120 5 0 1 1050 350

Output:
    - Console summary (ticks, samples, markers, elapsed time)
    - Optional .npz file with the recorded traces and markers (--output)
    - Optional figure of the traces with stimulation markers (--plot)
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import matplotlib.pyplot as plt
import numpy as np

from slowwave.config import RunConfig
from slowwave.constants.time import DEFAULT_DOWNSAMPLE, DEFAULT_ONSET_S, DEFAULT_STEPS_PER_SECOND
from slowwave.dynamics.simulation import run_simulation
from slowwave.errors import SlowwaveError
from slowwave.utils.fft_analysis import measure_oscillation
from slowwave.visualization import DPI_DEFAULT, plot_column_traces

logger = logging.getLogger("slowwave")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slowwave",
        description="Simulate a stochastic neural mass model of a cortical column.",
    )
    parser.add_argument("--duration", type=float, default=30.0,
                        help="Recorded duration in seconds (after the onset)")
    parser.add_argument("--column-params", type=float, nargs=7, default=None,
                        metavar="P",
                        help="tau_e theta_e sigma_e alpha_Na tau_Na g_KNa dphi")
    parser.add_argument("--stim-params", type=float, nargs="+", default=None,
                        metavar="S",
                        help="mode strength duration ISI ISI_range n_stimuli "
                             "time_between [delay]")
    parser.add_argument("--steps-per-second", type=int, default=DEFAULT_STEPS_PER_SECOND)
    parser.add_argument("--onset", type=int, default=DEFAULT_ONSET_S,
                        help="Seconds simulated before recording starts")
    parser.add_argument("--downsample", type=int, default=DEFAULT_DOWNSAMPLE)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--check-finite", action="store_true",
                        help="Abort if the state becomes NaN or infinite")
    parser.add_argument("--output", type=str, default=None,
                        help="Write traces and markers to this .npz file")
    parser.add_argument("--plot", type=str, default=None,
                        help="Save a figure of the recorded traces to this path")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        run = RunConfig(
            steps_per_second=args.steps_per_second,
            onset_s=args.onset,
            downsample=args.downsample,
            seed=args.seed,
            check_finite=args.check_finite,
        )
        result = run_simulation(args.duration, args.column_params, args.stim_params, run)
    except SlowwaveError as e:
        logger.error("%s", e)
        return 1

    v_e = result.data["v_e"]
    sample_rate_hz = run.steps_per_second / run.downsample
    print("simulation done!")
    print(f"took {result.elapsed_s:.3f} seconds")
    print(f"ticks: {result.n_ticks}, samples: {len(v_e)}, markers: {len(result.markers)}, "
          f"seed: {result.seed}")
    freq, _ = measure_oscillation(v_e, sample_rate_hz)
    if freq > 0:
        print(f"dominant slow oscillation: {freq:.2f} Hz")

    if args.output:
        arrays = {name: trace.numpy() for name, trace in result.data.items()}
        arrays["markers"] = result.markers.numpy()
        np.savez(args.output, **arrays)
        logger.info("Saved output to %s", args.output)

    if args.plot:
        fig = plot_column_traces(result.data, sample_rate_hz, result.markers)
        fig.savefig(args.plot, dpi=DPI_DEFAULT)
        plt.close(fig)
        logger.info("Saved figure to %s", args.plot)
    return 0


if __name__ == "__main__":
    sys.exit(main())
