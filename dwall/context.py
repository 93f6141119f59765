"""Gathering the context snapshot from the network and the clock."""

import logging
from datetime import datetime
from typing import Callable, Optional

import pytz

from dwall.network import NetworkMonitor
from dwall.rules import ContextSnapshot


logger = logging.getLogger(__name__)


class Clock:
    """Wall clock in a configured timezone (local time when none is set)."""

    def __init__(self, timezone: str = ""):
        self.tz = pytz.timezone(timezone) if timezone else None

    def now(self) -> datetime:
        return datetime.now(self.tz)


def capture_context(
    monitor: NetworkMonitor,
    clock: Optional[Clock] = None,
    now_fn: Optional[Callable[[], datetime]] = None,
) -> ContextSnapshot:
    """
    Capture the current SSID and time of day.

    Args:
        monitor: Source of the current SSID
        clock: Clock to read (defaults to local time)
        now_fn: Overrides the clock, mainly for tests

    Returns:
        Fresh ContextSnapshot
    """
    if now_fn is None:
        now_fn = (clock or Clock()).now

    ssid = monitor.get_current_ssid()
    snapshot = ContextSnapshot.capture(ssid, now_fn())
    logger.debug(f"Context: ssid={snapshot.ssid!r} time={snapshot.now:%H:%M}")
    return snapshot
