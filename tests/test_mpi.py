"""Single-rank MPI runs; skipped when mpi4py is unavailable."""

import numpy as np
import pytest

MPI = pytest.importorskip("mpi4py.MPI")

from bucket_sort import SortConfig, generate_values, is_sorted  # noqa: E402
from bucket_sort.config import TAG_DATA, TAG_SIZE  # noqa: E402
from bucket_sort.cli import main  # noqa: E402
from bucket_sort.mpi import MPIChannel, mpi_channels, run_mpi  # noqa: E402


def test_run_mpi_single_rank(capsys):
    result = run_mpi(SortConfig(size=50, num_workers=1, seed=5), MPI.COMM_SELF)
    out = capsys.readouterr().out
    assert "N Procs = 1  Array size = 50" in out
    assert "Total time:" in out
    assert len(result.values) == 50
    assert is_sorted(result.values)


def test_mpi_channels_single_rank():
    assert mpi_channels(MPI.COMM_SELF) == {}
    channel = MPIChannel(MPI.COMM_SELF, 0)
    assert channel.peer == 0


def test_main_mpi_backend(capsys):
    if MPI.COMM_WORLD.Get_size() != 1:
        pytest.skip("needs a single-rank world")
    assert main(["--quiet", "--seed", "1", "30"]) == 0
    assert main(["0"]) == 1
    assert "List size must be >0." in capsys.readouterr().out


def test_run_mpi_quiet():
    result = run_mpi(SortConfig(size=8, seed=2, verbose=False), MPI.COMM_SELF)
    assert np.array_equal(result.values, np.sort(generate_values(8, seed=2)))


def test_run_mpi_uses_communicator_size():
    result = run_mpi(SortConfig(size=8, num_workers=4, seed=2, verbose=False), MPI.COMM_SELF)
    assert result.bucket_sizes == [8]


# Exchanges with rank 0 itself: the matching operation is posted
# non-blocking first so the channel call never waits on itself.

def test_mpi_channel_send_count_and_values():
    comm = MPI.COMM_SELF
    channel = MPIChannel(comm, 0)

    req = comm.irecv(source=0, tag=TAG_SIZE)
    channel.send_count(3)
    assert req.wait() == 3

    received = np.empty(3, dtype=np.double)
    req = comm.Irecv([received, MPI.DOUBLE], source=0, tag=TAG_DATA)
    channel.send_values([0.7, 0.2, 0.4])
    req.Wait()
    assert list(received) == [0.7, 0.2, 0.4]


def test_mpi_channel_recv_count_and_values():
    comm = MPI.COMM_SELF
    channel = MPIChannel(comm, 0)

    req = comm.isend(2, dest=0, tag=TAG_SIZE)
    assert channel.recv_count() == 2
    req.wait()

    payload = np.array([0.9, 0.1], dtype=np.double)
    req = comm.Isend([payload, MPI.DOUBLE], dest=0, tag=TAG_DATA)
    values = channel.recv_values(2)
    req.Wait()
    assert values.dtype == np.double
    assert list(values) == [0.9, 0.1]


def test_mpi_channel_empty_bucket():
    comm = MPI.COMM_SELF
    channel = MPIChannel(comm, 0)

    req = comm.isend(0, dest=0, tag=TAG_SIZE)
    count = channel.recv_count()
    req.wait()

    empty = np.empty(0, dtype=np.double)
    req = comm.Isend([empty, MPI.DOUBLE], dest=0, tag=TAG_DATA)
    values = channel.recv_values(count)
    req.Wait()
    assert count == 0 and len(values) == 0

    received = np.empty(0, dtype=np.double)
    req = comm.Irecv([received, MPI.DOUBLE], source=0, tag=TAG_DATA)
    channel.send_values(values)
    req.Wait()
