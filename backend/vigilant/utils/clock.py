"""Clock and id sources, injectable so checks are deterministic under test."""
import time
import uuid
from typing import Callable

Clock = Callable[[], int]
IdFactory = Callable[[], str]


def epoch_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def new_id() -> str:
    """Random unique identifier."""
    return str(uuid.uuid4())
