"""
In-place serial quicksort used by every rank on its own bucket.

The pivot is always the first element of the range, so already sorted input
costs O(n^2). Buckets are expected to be small and roughly uniform.
"""


def partition(values, start: int, end: int, pivot_index: int) -> int:
    """
    Partition values[start:end] around values[pivot_index].

    Returns the final pivot index p: everything before p is <= pivot,
    everything after p is > pivot.
    """
    pivot_value = values[pivot_index]

    # Park the pivot at the end of the range
    values[pivot_index] = values[end - 1]
    values[end - 1] = pivot_value

    store_index = start
    for i in range(start, end - 1):
        if values[i] <= pivot_value:
            values[i], values[store_index] = values[store_index], values[i]
            store_index += 1

    # Pivot to its final place
    values[store_index], values[end - 1] = values[end - 1], values[store_index]
    return store_index


def quicksort(values, start: int = 0, end: int = None):
    """Sort values[start:end] ascending, in place. Returns values."""
    if end is None:
        end = len(values)

    # Explicit stack instead of recursion: sorted input would go n levels deep
    pending = [(start, end)]
    while pending:
        lo, hi = pending.pop()
        if hi <= lo + 1:
            continue
        p = partition(values, lo, hi, lo)
        # Push the high side first so the low side is handled first
        pending.append((p + 1, hi))
        pending.append((lo, p))
    return values


def is_sorted(values) -> bool:
    return all(values[i] <= values[i + 1] for i in range(len(values) - 1))
