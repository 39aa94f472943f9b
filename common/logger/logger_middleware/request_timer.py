# common/logger/logger_middleware/request_timer.py
import time
from contextlib import contextmanager
from typing import Iterator


class RequestTimer:
    """Per-request accumulator for named durations (ms) and counters."""

    def __init__(self) -> None:
        self.timings: dict[str, float] = {}

    @contextmanager
    def capture(self, name: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            self.add(name, (time.perf_counter() - start) * 1000)

    def add(self, name: str, duration_ms: float) -> None:
        # Same name used multiple times accumulates
        self.timings[name] = self.timings.get(name, 0) + duration_ms

    def increment(self, name: str) -> None:
        self.timings[name] = self.timings.get(name, 0) + 1

    def format_server_timing(self) -> str:
        # Formats into: db;dur=10.5, sql;dur=5.2
        return ", ".join(
            f"{name};dur={dur:.2f}"
            for name, dur in self.timings.items()
            if name != "query_count"
        )


__all__ = ["RequestTimer"]
