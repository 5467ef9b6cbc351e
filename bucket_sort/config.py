# config.py
from dataclasses import dataclass
from typing import Optional

# --- Configuration ---
COORDINATOR   = 0
TAG_SIZE      = 11
TAG_DATA      = 12
DISPLAY_LIMIT = 100


class UsageError(ValueError):
    """Bad command line input; reported by the coordinator only."""


@dataclass
class SortConfig:
    size:          int
    num_workers:   int = 1
    seed:          Optional[int] = None
    display_limit: int = DISPLAY_LIMIT
    verbose:       bool = True

    def __post_init__(self):
        if self.size <= 0:
            raise UsageError("List size must be >0.")
        if self.num_workers < 1:
            raise UsageError("Need at least one worker.")


def validate_size(raw) -> int:
    # Every rank runs this on the same argv so they all agree on the outcome
    if raw is None:
        raise UsageError("Need one argument (= the list size n).")
    try:
        n = int(raw)
    except (TypeError, ValueError):
        raise UsageError(f"Invalid list size: {raw!r}") from None
    if n <= 0:
        raise UsageError("List size must be >0.")
    return n
