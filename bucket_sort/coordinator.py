"""
Scatter / local sort / gather protocol of the distributed bucket sort.

Rank 0 owns the dataset, splits it by value into one bucket per rank,
ships buckets 1..K-1 out, sorts bucket 0 itself, takes the sorted buckets
back and concatenates them in rank order. Because bucket j only holds values
in (lim*j, lim*(j+1)], the concatenation is globally sorted.
"""
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from .config import COORDINATOR, DISPLAY_LIMIT
from .display import display_full_list, report_dropped, report_list
from .quicksort import quicksort


class Phase(Enum):
    INIT        = "init"
    GENERATE    = "generate"
    PARTITION   = "partition"
    DISTRIBUTE  = "distribute"
    AWAIT_SIZE  = "await_size"
    AWAIT_DATA  = "await_data"
    SORT        = "sort"
    COLLECT     = "collect"
    CONCATENATE = "concatenate"
    SEND        = "send"
    DONE        = "done"


@dataclass
class SortResult:
    values:       np.ndarray
    bucket_sizes: list = field(default_factory=list)
    dropped:      int = 0


def generate_values(size: int, seed=None) -> np.ndarray:
    """`size` doubles drawn uniformly in [0, 1)."""
    rng = np.random.default_rng(seed)
    return rng.random(size)


def bucket_bounds(num_workers: int):
    lim = 1.0 / num_workers
    return [(lim * j, lim * (j + 1)) for j in range(num_workers)]


def partition_values(values, num_workers: int):
    """
    Split values into num_workers buckets by value range.

    Bucket j keeps v when lim*j < v <= lim*(j+1). A value matching no bucket
    (exactly 0.0, negative, or above the top bound) is dropped and counted.

    Returns (buckets, dropped).
    """
    bounds = bucket_bounds(num_workers)
    buckets = [[] for _ in range(num_workers)]
    dropped = 0

    for v in values:
        for j, (low, high) in enumerate(bounds):
            if v > low and v <= high:
                buckets[j].append(v)
                break
        else:
            dropped += 1

    return [np.array(b, dtype=np.double) for b in buckets], dropped


class BucketCoordinator:
    """
    Rank 0 side of the protocol.

    `channels` maps each worker rank 1..num_workers-1 to a Channel.
    Rank 0 keeps bucket 0 and never sends it anywhere.
    """

    def __init__(self, num_workers: int, channels=None, sorter=quicksort,
                 verbose: bool = True, display_limit: int = DISPLAY_LIMIT):
        if num_workers < 1:
            raise ValueError(f"num_workers must be >= 1, got {num_workers}")
        channels = dict(channels or {})
        missing = [r for r in range(1, num_workers) if r not in channels]
        if missing:
            raise ValueError(f"No channel for worker rank(s) {missing}")

        self.num_workers   = num_workers
        self.channels      = channels
        self.sorter        = sorter
        self.verbose       = verbose
        self.display_limit = display_limit
        self.phase         = Phase.INIT

    def generate(self, size: int, seed=None) -> np.ndarray:
        self.phase = Phase.GENERATE
        return generate_values(size, seed)

    def partition(self, values):
        self.phase = Phase.PARTITION
        return partition_values(values, self.num_workers)

    def distribute(self, buckets):
        self.phase = Phase.DISTRIBUTE
        for rank in range(1, self.num_workers):
            channel = self.channels[rank]
            # Count first: the worker cannot size its buffer otherwise
            channel.send_count(len(buckets[rank]))
            channel.send_values(buckets[rank])

    def sort_own(self, buckets):
        self.phase = Phase.SORT
        self.sorter(buckets[COORDINATOR])

    def collect(self, buckets):
        """Replace buckets[1:] with the sorted buckets sent back by each worker."""
        self.phase = Phase.COLLECT
        for rank in range(1, self.num_workers):
            buckets[rank] = self.channels[rank].recv_values(len(buckets[rank]))
        return buckets

    def concatenate(self, buckets) -> np.ndarray:
        self.phase = Phase.CONCATENATE
        return np.concatenate([np.asarray(b, dtype=np.double) for b in buckets])

    def run(self, values) -> SortResult:
        values = np.asarray(values, dtype=np.double)
        if self.verbose:
            report_list("Full list", values, self.display_limit)

        buckets, dropped = self.partition(values)
        bucket_sizes = [len(b) for b in buckets]

        self.distribute(buckets)
        self.sort_own(buckets)
        self.collect(buckets)
        sorted_values = self.concatenate(buckets)

        if self.verbose:
            report_list("Final sorted List", sorted_values, self.display_limit)
            report_dropped(dropped)

        self.phase = Phase.DONE
        return SortResult(sorted_values, bucket_sizes, dropped)


class BucketWorker:
    """Worker rank side: receive one bucket, sort it, hand it back."""

    def __init__(self, rank: int, channel, sorter=quicksort,
                 verbose: bool = True, display_limit: int = DISPLAY_LIMIT):
        self.rank          = rank
        self.channel       = channel
        self.sorter        = sorter
        self.verbose       = verbose
        self.display_limit = display_limit
        self.phase         = Phase.INIT

    def run(self) -> np.ndarray:
        self.phase = Phase.AWAIT_SIZE
        size = self.channel.recv_count()

        self.phase = Phase.AWAIT_DATA
        bucket = self.channel.recv_values(size)
        if self.verbose:
            print(f"[Processus {self.rank}] bucket size {size}. Elements:"
                  f"{display_full_list(bucket, self.display_limit)}")

        self.phase = Phase.SORT
        self.sorter(bucket)
        if self.verbose:
            print(f"[Processus {self.rank}] Sorted elements:"
                  f"{display_full_list(bucket, self.display_limit)}")

        # Size is not re-sent: rank 0 already knows it
        self.phase = Phase.SEND
        self.channel.send_values(bucket)

        self.phase = Phase.DONE
        return bucket


def run_worker(rank: int, channel, sorter=quicksort, verbose: bool = True,
               display_limit: int = DISPLAY_LIMIT) -> np.ndarray:
    return BucketWorker(rank, channel, sorter, verbose, display_limit).run()
