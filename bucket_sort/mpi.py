"""
MPI backend: one rank per bucket, rank 0 coordinates.

    mpiexec -n 4 bucket-sort 1000
"""
import numpy as np
from mpi4py import MPI

from .channel import Channel
from .config import COORDINATOR, TAG_DATA, TAG_SIZE, SortConfig
from .coordinator import BucketCoordinator, BucketWorker
from .display import report_start, report_time


class MPIChannel(Channel):
    """Channel to `peer` over an MPI communicator."""

    def __init__(self, comm, peer: int):
        self.comm = comm
        self.peer = peer

    def send_count(self, count: int):
        self.comm.send(int(count), dest=self.peer, tag=TAG_SIZE)

    def recv_count(self) -> int:
        return int(self.comm.recv(source=self.peer, tag=TAG_SIZE))

    def send_values(self, values: np.ndarray):
        buffer = np.ascontiguousarray(values, dtype=np.double)
        self.comm.Send([buffer, MPI.DOUBLE], dest=self.peer, tag=TAG_DATA)

    def recv_values(self, count: int) -> np.ndarray:
        buffer = np.empty(count, dtype=np.double)
        self.comm.Recv([buffer, MPI.DOUBLE], source=self.peer, tag=TAG_DATA)
        return buffer


def mpi_channels(comm):
    """Coordinator side channels, one per worker rank."""
    return {rank: MPIChannel(comm, rank) for rank in range(1, comm.Get_size())}


def run_mpi(config: SortConfig, comm=None):
    """
    Run the protocol on this rank.

    Returns the SortResult on rank 0 and the sorted bucket on the others.
    There is one bucket per rank of `comm`: the world size is the worker
    count and `config.num_workers` is not used.
    Any failure aborts the whole job: there is no partial result.
    """
    comm = comm if comm is not None else MPI.COMM_WORLD
    rank = comm.Get_rank()
    size = comm.Get_size()

    if rank == COORDINATOR and config.verbose:
        report_start(size, config.size)

    # Synchronised start marker
    comm.Barrier()
    start_time = MPI.Wtime()

    try:
        if rank == COORDINATOR:
            coordinator = BucketCoordinator(size, mpi_channels(comm),
                                            verbose=config.verbose,
                                            display_limit=config.display_limit)
            values = coordinator.generate(config.size, config.seed)
            result = coordinator.run(values)
        else:
            worker = BucketWorker(rank, MPIChannel(comm, COORDINATOR),
                                  verbose=config.verbose,
                                  display_limit=config.display_limit)
            result = worker.run()
    except Exception as exc:
        print(f"[Processus {rank}] Error: {exc}")
        comm.Abort(1)
        raise

    end_time = MPI.Wtime()
    if rank == COORDINATOR and config.verbose:
        report_time(end_time - start_time)
    return result
