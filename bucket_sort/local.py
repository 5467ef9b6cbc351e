"""
Same protocol without an MPI launcher: workers are `multiprocessing`
processes, each linked to the coordinator by a duplex Pipe.
"""
from multiprocessing import Process
from time import perf_counter

from .channel import pipe_channels
from .config import DISPLAY_LIMIT, SortConfig
from .coordinator import BucketCoordinator, generate_values, run_worker
from .display import report_start, report_time


def _worker_main(rank, channel, verbose, display_limit):
    run_worker(rank, channel, verbose=verbose, display_limit=display_limit)
    channel.close()


def sort_with_processes(values, num_workers: int, verbose: bool = False,
                        display_limit: int = DISPLAY_LIMIT):
    """Bucket sort `values` with num_workers ranks, rank 0 in this process."""
    coordinator_side, worker_side = pipe_channels(num_workers)

    workers = []
    for rank, channel in worker_side.items():
        p = Process(target=_worker_main, args=(rank, channel, verbose, display_limit))
        p.start()
        workers.append(p)
    # The children hold their own copies now
    for channel in worker_side.values():
        channel.close()

    try:
        coordinator = BucketCoordinator(num_workers, coordinator_side,
                                        verbose=verbose, display_limit=display_limit)
        result = coordinator.run(values)
    except BaseException:
        for p in workers:
            p.terminate()
        raise
    finally:
        for p in workers:
            p.join()
        for channel in coordinator_side.values():
            channel.close()

    failed = [p.exitcode for p in workers if p.exitcode != 0]
    if failed:
        raise RuntimeError(f"{len(failed)} worker process(es) failed: exit codes {failed}")
    return result


def run_local(config: SortConfig):
    if config.verbose:
        report_start(config.num_workers, config.size)

    start_time = perf_counter()
    values = generate_values(config.size, config.seed)
    result = sort_with_processes(values, config.num_workers,
                                 verbose=config.verbose,
                                 display_limit=config.display_limit)
    if config.verbose:
        report_time(perf_counter() - start_time)
    return result
