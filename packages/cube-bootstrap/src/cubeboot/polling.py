"""Readiness polling with bounded attempts, optional backoff and a deadline."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class PollPolicy:
    attempts: int = 30
    interval_seconds: float = 2.0
    backoff: float = 1.0
    max_interval_seconds: float = 30.0
    deadline_seconds: float | None = None

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ValueError("poll attempts must be >= 1")
        if self.interval_seconds < 0:
            raise ValueError("poll interval must be >= 0")
        if self.backoff < 1.0:
            raise ValueError("poll backoff must be >= 1.0")

    def delays(self) -> list[float]:
        """Sleep durations between consecutive attempts (one fewer than attempts)."""
        out: list[float] = []
        delay = self.interval_seconds
        for _ in range(self.attempts - 1):
            out.append(delay)
            delay = min(delay * self.backoff, self.max_interval_seconds)
        return out


@dataclass(frozen=True)
class Ready:
    attempts: int
    elapsed_seconds: float

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class TimedOut:
    attempts: int
    elapsed_seconds: float
    reason: str

    def __bool__(self) -> bool:
        return False


PollResult = Ready | TimedOut


def poll_until(
    predicate: Callable[[], bool],
    policy: PollPolicy,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> PollResult:
    started = clock()
    delays = policy.delays()
    attempt = 0
    while True:
        attempt += 1
        if predicate():
            return Ready(attempts=attempt, elapsed_seconds=clock() - started)
        if attempt >= policy.attempts:
            return TimedOut(attempt, clock() - started, f"condition not met after {attempt} attempts")
        delay = delays[attempt - 1]
        if policy.deadline_seconds is not None and (clock() - started) + delay > policy.deadline_seconds:
            return TimedOut(attempt, clock() - started, f"deadline of {policy.deadline_seconds}s exceeded")
        sleep(delay)
