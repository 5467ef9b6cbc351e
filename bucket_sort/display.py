# display.py
from .config import DISPLAY_LIMIT


def display_full_list(values, limit: int = DISPLAY_LIMIT) -> str:
    # Do not display large lists
    if len(values) > limit:
        return "Not displaying 'full list' - n too large."
    return "".join(f" {v:g}" for v in values)


def report_start(num_workers: int, size: int):
    print(f"\nN Procs = {num_workers}  Array size = {size}\n")


def report_list(label: str, values, limit: int = DISPLAY_LIMIT):
    print(f"{label}:{display_full_list(values, limit)}")


def report_dropped(dropped: int):
    # Values outside every (low, high] range are lost, not repaired
    if dropped:
        print(f"Warning: {dropped} value(s) fell outside every bucket and were dropped.")


def report_time(elapsed: float):
    print(f"Total time: {elapsed:f} secs")
