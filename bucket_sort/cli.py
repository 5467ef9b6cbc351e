"""
Command line entry point.

    mpiexec -n 4 bucket-sort 1000
    bucket-sort --backend local --workers 4 1000
"""
import argparse

from .config import COORDINATOR, SortConfig, UsageError, validate_size
from .local import run_local


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bucket-sort",
        description="Distributed bucket sort of n random doubles in [0, 1).",
    )
    # Optional here so that a missing size goes through validate_size on every rank
    parser.add_argument("n", nargs="?", help="List size (> 0).")
    parser.add_argument(
        "--backend",
        choices=("mpi", "local"),
        default="mpi",
        help="mpi: one rank per MPI process. local: multiprocessing workers.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=4,
        help="Number of ranks for the local backend (MPI uses the world size).",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the data generator.")
    parser.add_argument("--quiet", action="store_true", help="Do not print lists and timings.")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.backend == "mpi":
        from mpi4py import MPI
        from .mpi import run_mpi

        comm = MPI.COMM_WORLD
        rank, num_workers = comm.Get_rank(), comm.Get_size()
    else:
        rank, num_workers = COORDINATOR, args.workers

    try:
        config = SortConfig(validate_size(args.n), num_workers,
                            seed=args.seed, verbose=not args.quiet)
    except UsageError as exc:
        # Every rank gets here on the same input; only rank 0 talks
        if rank == COORDINATOR:
            print(exc)
        return 1

    if args.backend == "mpi":
        run_mpi(config, comm)
    else:
        run_local(config)
    return 0
