"""Per-command, per-user cooldown bookkeeping.

Layout: command name -> user id -> Cooldown. An entry is removed by a one-shot
event loop timer once its window elapses; lookups also ignore (and drop)
entries whose window has already passed, so an expired entry is never
observable even if the timer has not fired yet.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple
import asyncio
import logging
import time

logger = logging.getLogger(__name__)


class CooldownType(Enum):
    normal = 0
    skipped = 1
    errored = 2


@dataclass(slots=True)
class Cooldown:
    """Last-use record for one user of one command.

    Attributes:
        timestamp: Wall-clock time (epoch seconds) the command finished.
        type: Whether the run completed normally or errored.
    """
    timestamp: float
    type: CooldownType


CooldownMap = Dict[int, Cooldown]


class CooldownRegistry:
    """Holds one cooldown map per registered command.

    Args:
        error_cooldown_seconds: Window applied to `errored` entries.
        clock: Source of wall-clock seconds; replaceable in tests.
    """

    def __init__(self, error_cooldown_seconds: float, clock: Callable[[], float] = time.time):
        self.error_cooldown_seconds = error_cooldown_seconds
        self._clock = clock
        self._maps: Dict[str, CooldownMap] = {}
        self._timers: Dict[Tuple[str, int], asyncio.TimerHandle] = {}

    def Ensure(self, name: str) -> CooldownMap:
        """Create (if needed) and return the cooldown map for a command."""
        return self._maps.setdefault(name, {})

    def Has(self, name: str) -> bool:
        return name in self._maps

    def MapFor(self, name: str) -> CooldownMap:
        """Return the map for `name`; unknown commands are a LookupError."""
        try:
            return self._maps[name]
        except KeyError:
            raise LookupError(f"Could not find cooldown map for {name}.") from None

    def Now(self) -> float:
        return self._clock()

    def WindowFor(self, cooldown: Cooldown, command_seconds: float) -> float:
        if cooldown.type is CooldownType.errored:
            return self.error_cooldown_seconds
        if cooldown.type is CooldownType.normal:
            return command_seconds
        return 0

    def ExpiresAt(self, cooldown: Cooldown, command_seconds: float) -> float:
        return cooldown.timestamp + self.WindowFor(cooldown, command_seconds)

    def Get(self, name: str, user_id: int, command_seconds: float) -> Optional[Cooldown]:
        """Return the live cooldown for a user, or None when absent/expired."""
        cooldown_map = self.MapFor(name)
        cooldown = cooldown_map.get(user_id)
        if cooldown is None:
            return None
        if self.Now() >= self.ExpiresAt(cooldown, command_seconds):
            self.Clear(name, user_id)
            return None
        return cooldown

    def Apply(self, name: str, user_id: int, type: CooldownType, seconds: float) -> Cooldown:
        """Record a cooldown starting now and schedule its removal after `seconds`."""
        cooldown_map = self.MapFor(name)
        cooldown = Cooldown(timestamp=self.Now(), type=type)
        cooldown_map[user_id] = cooldown

        key = (name, user_id)
        previous = self._timers.pop(key, None)
        if previous is not None:
            previous.cancel()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop (e.g. sync callers): lookups still evict lazily.
            return cooldown
        self._timers[key] = loop.call_later(max(seconds, 0), self._Expire, name, user_id, cooldown)
        return cooldown

    def Clear(self, name: str, user_id: int) -> None:
        self._maps.get(name, {}).pop(user_id, None)
        timer = self._timers.pop((name, user_id), None)
        if timer is not None:
            timer.cancel()

    def _Expire(self, name: str, user_id: int, cooldown: Cooldown) -> None:
        cooldown_map = self._maps.get(name)
        if cooldown_map is not None and cooldown_map.get(user_id) is cooldown:
            del cooldown_map[user_id]
            logger.debug("Cooldown for %s expired for user %s", name, user_id)
        self._timers.pop((name, user_id), None)
