# -*- coding: utf-8 -*-
########################
# game_clock.py
########################
# Purpose:
# - Session-scoped simulation clock.
# - Accumulates elapsed wall-clock time and reports the delta since the previous tick.
#
# Design notes:
# - Ticks come from the display refresh timer and are irregular. Never assume a fixed dt.
# - The clock is frozen outside the Playing phase: a stopped clock reports a zero tick.
# - start() always begins a fresh session at elapsed 0.
# - Time source is injected as a callable returning seconds (time.perf_counter by default).
# - No Qt usage. Keep this module pure and deterministic for a given time source.
#
########################
# Interfaces:
# Public dataclasses:
# - ClockTick(elapsed_seconds: float, delta_seconds: float)
#
# Public classes:
# - class SimulationClock
#   - start() -> None
#   - stop() -> None
#   - tick() -> ClockTick
#   - is_running() -> bool
#   - elapsed_seconds() -> float
#
# Inputs:
# - time_source() -> float, monotonic seconds.
#
# Outputs:
# - ClockTick consumed by GameSession once per tick.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Callable, Optional

from gameplay_models import SimulationFault


@dataclass(frozen=True)
class ClockTick:
    elapsed_seconds: float
    delta_seconds: float


class SimulationClock:
    def __init__(self, time_source: Optional[Callable[[], float]] = None) -> None:
        self._time_source: Callable[[], float] = time_source or time.perf_counter
        self._is_running: bool = False
        self._elapsed_seconds: float = 0.0
        self._last_time_seconds: float = 0.0

    def start(self) -> None:
        self._elapsed_seconds = 0.0
        self._last_time_seconds = float(self._time_source())
        self._is_running = True

    def stop(self) -> None:
        self._is_running = False

    def is_running(self) -> bool:
        return bool(self._is_running)

    def elapsed_seconds(self) -> float:
        return float(self._elapsed_seconds)

    def tick(self) -> ClockTick:
        if not self._is_running:
            return ClockTick(elapsed_seconds=self._elapsed_seconds, delta_seconds=0.0)

        now_seconds = float(self._time_source())
        delta_seconds = now_seconds - self._last_time_seconds
        if delta_seconds < 0.0:
            raise SimulationFault(f"Time source went backwards by {-delta_seconds:.6f}s")

        self._last_time_seconds = now_seconds
        self._elapsed_seconds += delta_seconds
        return ClockTick(elapsed_seconds=self._elapsed_seconds, delta_seconds=delta_seconds)


def _run_unit_tests() -> None:
    now = [10.0]
    clock = SimulationClock(lambda: now[0])

    assert clock.tick() == ClockTick(elapsed_seconds=0.0, delta_seconds=0.0)

    clock.start()
    now[0] = 10.25
    first = clock.tick()
    assert abs(first.delta_seconds - 0.25) < 1e-9
    now[0] = 10.30
    second = clock.tick()
    assert abs(second.elapsed_seconds - 0.30) < 1e-9

    clock.stop()
    now[0] = 20.0
    assert clock.tick().delta_seconds == 0.0
    assert abs(clock.elapsed_seconds() - 0.30) < 1e-9

    clock.start()
    assert clock.elapsed_seconds() == 0.0


if __name__ == "__main__":
    _run_unit_tests()
    print("game_clock.py: ok")
