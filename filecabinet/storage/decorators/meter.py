import time
from dataclasses import dataclass
from typing import Callable, Optional

from colorama import Fore, Style

from ..interfaces import FileCabinetService
from .base import ServiceDecorator

TICKS_PER_SECOND = 10_000_000


@dataclass
class MethodTiming:
    """Accumulated timings for one service method."""
    calls: int = 0
    total_ticks: int = 0
    last_ticks: int = 0
    max_ticks: int = 0

    def record(self, ticks: int) -> None:
        self.calls += 1
        self.total_ticks += ticks
        self.last_ticks = ticks
        self.max_ticks = max(self.max_ticks, ticks)

    @property
    def average_ticks(self) -> float:
        return self.total_ticks / self.calls if self.calls else 0.0


def print_timing(method: str, ticks: int) -> None:
    print(f"{Fore.CYAN}{method}{Style.RESET_ALL} method execution duration is "
          f"{Fore.YELLOW}{ticks}{Style.RESET_ALL} ticks.")


class MeteringService(ServiceDecorator):
    """
    Measures the wall-clock duration of every call. ⏱️

    Durations are reported in ticks of 100 ns. Timing never changes what
    the wrapped service returns or raises; failed calls are measured too.
    """

    def __init__(self, service: FileCabinetService,
                 reporter: Optional[Callable[[str, int], None]] = print_timing):
        super().__init__(service)
        self._reporter = reporter
        self.timings: dict[str, MethodTiming] = {}

    def _invoke(self, method: str, *args):
        start = time.perf_counter()
        try:
            return super()._invoke(method, *args)
        finally:
            ticks = int((time.perf_counter() - start) * TICKS_PER_SECOND)
            self.timings.setdefault(method, MethodTiming()).record(ticks)
            if self._reporter is not None:
                self._reporter(method, ticks)

    def get_timing(self, method: str) -> MethodTiming:
        return self.timings.get(method, MethodTiming())
