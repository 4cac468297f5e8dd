import time
from contextlib import contextmanager
from typing import Callable, Iterator


@contextmanager
def measure_ms() -> Iterator[Callable[[], int]]:
    start = time.perf_counter()
    yield lambda: int((time.perf_counter() - start) * 1000)
