# Andy Zhao
"""
Command-line front end.

    ransackit {line,aff,affn,fm} ntrials maxerr minliers [inliers] < data

Reads whitespace-separated numbers from stdin, fits the chosen model family
with RANSAC and prints the result. If an `inliers` path is given, the inlier
rows are written there.

With `--confidence P`, the trial budget is raised to at least the number of
trials that draws one all-inlier sample with probability P, for the inlier
ratio given by `--inlier-ratio`.
"""
from __future__ import annotations

import argparse
import logging
import sys
from contextlib import ExitStack
from typing import Optional, Sequence

from .config import DEFAULT_INLIER_RATIO, DEFAULT_SEED, DEFAULT_WORKERS, RANSAC_DEBUG
from .io import read_ascii_floats, reshape_rows, write_inliers
from .models.cases import MODEL_CASES, get_model_case
from .ransac import RansacError, RansacResult, RunConfig, ransac, required_trials
from .utils.logger import setup_logger

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ransackit",
        description="Fit a model to data read from stdin with RANSAC.",
    )
    p.add_argument("model", choices=list(MODEL_CASES), help="Model family.")
    p.add_argument("ntrials", type=int, help="Number of models to try.")
    p.add_argument("maxerr", type=float, help="Inlier threshold (error < maxerr).")
    p.add_argument("minliers", type=int, help="Minimum number of inliers for success.")
    p.add_argument("inliers", nargs="?", default=None, help="Optional file receiving the inlier rows.")
    p.add_argument("--seed", type=int, default=DEFAULT_SEED, help="Random seed.")
    p.add_argument("--workers", type=int, default=DEFAULT_WORKERS, help="Threads evaluating trials.")
    p.add_argument(
        "--confidence", type=float, default=None,
        help="Raise ntrials so an all-inlier sample is drawn with this probability.",
    )
    p.add_argument(
        "--inlier-ratio", type=float, default=DEFAULT_INLIER_RATIO,
        help="Expected inlier ratio used with --confidence.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return p


def format_result(result: RansacResult) -> str:
    params = " ".join(f"{v:g}" for v in result.model)
    return (
        f"RANSAC found a model with {result.num_inliers} inliers\n"
        f"parameters = {params}\n"
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(
        "ransackit",
        log_level=logging.DEBUG if (args.verbose or RANSAC_DEBUG) else logging.WARNING,
    )

    with ExitStack() as stack:
        try:
            plugin = get_model_case(args.model)

            ntrials = args.ntrials
            if args.confidence is not None:
                needed = required_trials(
                    p_all_inliers=args.confidence,
                    inlier_ratio=args.inlier_ratio,
                    sample_size=plugin.nfit,
                )
                logger.info("confidence %g needs %d trials", args.confidence, needed)
                ntrials = max(ntrials, needed)

            config = RunConfig(
                ntrials=ntrials,
                max_error=args.maxerr,
                min_inliers=args.minliers,
                nfit=plugin.nfit,
            )

            # The file exists even when no model is found
            out = stack.enter_context(open(args.inliers, "w")) if args.inliers else None

            data = reshape_rows(read_ascii_floats(sys.stdin), plugin.datadim)
            logger.info("read %d data points of dimension %d", data.shape[0], plugin.datadim)

            result = ransac(plugin, data, config, rng=args.seed, workers=args.workers)
        except (RansacError, ValueError, OSError) as e:
            logger.error("%s", e)
            return 1

        if isinstance(result, RansacResult) and result.num_inliers > 0:
            sys.stdout.write(format_result(result))
            if out is not None:
                write_inliers(out, data, result.inliers)
        else:
            sys.stdout.write("RANSAC found no model\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
