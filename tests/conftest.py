import threading

import pytest

from bucket_sort import BucketCoordinator, BucketWorker, pipe_channels


def run_threaded(values, num_workers):
    """Run every rank of the protocol in this process, one thread per worker."""
    coordinator_side, worker_side = pipe_channels(num_workers)
    workers = [BucketWorker(rank, channel, verbose=False)
               for rank, channel in worker_side.items()]
    threads = [threading.Thread(target=w.run, daemon=True) for w in workers]
    for t in threads:
        t.start()

    coordinator = BucketCoordinator(num_workers, coordinator_side, verbose=False)
    result = coordinator.run(values)

    for t in threads:
        t.join(timeout=10)
        assert not t.is_alive()
    return coordinator, workers, result


@pytest.fixture
def threaded_sort():
    return run_threaded
