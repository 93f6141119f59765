from __future__ import annotations

from datetime import datetime, time

import pytz

from dwall.context import Clock, capture_context


class FakeMonitor:
    def __init__(self, ssid: str | None) -> None:
        self.ssid = ssid

    def get_current_ssid(self) -> str | None:
        return self.ssid


def test_capture_context_uses_monitor_and_clock() -> None:
    ctx = capture_context(FakeMonitor("HomeWifi"), now_fn=lambda: datetime(2024, 1, 1, 22, 15, 42))
    assert ctx.ssid == "HomeWifi"
    assert ctx.now == time(22, 15)


def test_capture_context_not_connected() -> None:
    ctx = capture_context(FakeMonitor(None), now_fn=lambda: datetime(2024, 1, 1, 6, 0))
    assert ctx.ssid is None


def test_clock_timezone() -> None:
    assert Clock("Asia/Tokyo").now().tzinfo.zone == pytz.timezone("Asia/Tokyo").zone
    assert Clock().now().tzinfo is None
