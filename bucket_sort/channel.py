"""Blocking point-to-point channels between the coordinator and one worker."""
from abc import ABC, abstractmethod
from multiprocessing import Pipe

import numpy as np


class Channel(ABC):
    """
    One logical link between rank 0 and a worker rank.

    Wire contract, per worker:
        1. coordinator -> worker : bucket element count (int)
        2. coordinator -> worker : `count` doubles
        3. worker -> coordinator : `count` doubles, sorted

    Every operation blocks until the peer issues the matching one.
    A short or long payload is not detected.
    """

    @abstractmethod
    def send_count(self, count: int):
        ...

    @abstractmethod
    def recv_count(self) -> int:
        ...

    @abstractmethod
    def send_values(self, values: np.ndarray):
        ...

    @abstractmethod
    def recv_values(self, count: int) -> np.ndarray:
        ...


class PipeChannel(Channel):
    """Channel over one end of a duplex `multiprocessing.Pipe`."""

    def __init__(self, connection):
        self.connection = connection

    def send_count(self, count: int):
        self.connection.send(int(count))

    def recv_count(self) -> int:
        return int(self.connection.recv())

    def send_values(self, values: np.ndarray):
        self.connection.send_bytes(np.ascontiguousarray(values, dtype=np.double))

    def recv_values(self, count: int) -> np.ndarray:
        buffer = np.empty(count, dtype=np.double)
        self.connection.recv_bytes_into(buffer)
        return buffer

    def close(self):
        self.connection.close()


def pipe_channels(num_workers: int):
    """
    Build both ends for ranks 1..num_workers-1.

    Returns (coordinator_side, worker_side), two dicts keyed by worker rank.
    """
    coordinator_side = {}
    worker_side = {}
    for rank in range(1, num_workers):
        here, there = Pipe(duplex=True)
        coordinator_side[rank] = PipeChannel(here)
        worker_side[rank] = PipeChannel(there)
    return coordinator_side, worker_side
