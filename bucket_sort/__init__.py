"""Distributed bucket sort over a fixed set of ranks."""

from .config import SortConfig, UsageError, validate_size
from .quicksort import partition, quicksort, is_sorted
from .channel import Channel, PipeChannel, pipe_channels
from .coordinator import (
    Phase,
    SortResult,
    BucketCoordinator,
    BucketWorker,
    bucket_bounds,
    generate_values,
    partition_values,
    run_worker,
)
from .local import sort_with_processes

__all__ = [
    "SortConfig", "UsageError", "validate_size",
    "partition", "quicksort", "is_sorted",
    "Channel", "PipeChannel", "pipe_channels",
    "Phase", "SortResult", "BucketCoordinator", "BucketWorker",
    "bucket_bounds", "generate_values", "partition_values", "run_worker",
    "sort_with_processes",
]
