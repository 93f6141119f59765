"""Wallpaper rules and the context-to-rule matching logic."""

import logging
from dataclasses import dataclass
from datetime import datetime, time
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple

from dwall.time_interval import TimeParseError, is_within_interval, parse_time


logger = logging.getLogger(__name__)


class RuleMode(Enum):
    """How a rule decides whether it is active."""

    NETWORK = "Wi-Fi"
    TIME = "Time"
    UNSET = ""

    @classmethod
    def from_label(cls, label: Optional[str]) -> "RuleMode":
        """Map a stored mode label to a RuleMode, UNSET for anything unknown."""
        for mode in cls:
            if mode.value == label:
                return mode
        return cls.UNSET


class RuleParseError(ValueError):
    """Raised when a rule's info does not fit its mode."""


@dataclass(frozen=True)
class Rule:
    """A configured wallpaper slot."""

    position: int
    name: str
    mode: RuleMode
    info: str
    filename: str = ""


@dataclass(frozen=True)
class ContextSnapshot:
    """Current Wi-Fi network and time of day, captured just before evaluation."""

    ssid: Optional[str]
    now: time

    @classmethod
    def capture(cls, ssid: Optional[str], current: datetime) -> "ContextSnapshot":
        """Build a snapshot, truncating the clock reading to the minute."""
        return cls(ssid=ssid or None, now=time(current.hour, current.minute))


ErrorCallback = Callable[[Rule, Exception], None]


def parse_interval(info: str) -> Tuple[time, time]:
    """
    Split a time rule's info into its start and end times.

    Args:
        info: Two whitespace-separated HH:mm tokens (e.g., "22:00 06:00")

    Returns:
        (start, end) tuple

    Raises:
        RuleParseError: If the info does not hold exactly two tokens
        TimeParseError: If a token is not a valid time
    """
    tokens = info.split() if info else []
    if len(tokens) != 2:
        raise RuleParseError(f"Time rule needs 'HH:mm HH:mm', got: {info!r}")
    return parse_time(tokens[0]), parse_time(tokens[1])


def format_interval(start: time, end: time) -> str:
    """Build the info string stored for a time rule."""
    return f"{start:%H:%M} {end:%H:%M}"


def is_rule_active(rule: Rule, ctx: ContextSnapshot) -> bool:
    """
    Evaluate one rule against the context.

    Raises:
        ValueError: If a time rule carries malformed info
    """
    if rule.mode is RuleMode.NETWORK:
        return ctx.ssid is not None and ctx.ssid == rule.info
    if rule.mode is RuleMode.TIME:
        start, end = parse_interval(rule.info)
        return is_within_interval(start, end, ctx.now)
    return False


def active_rules(
    rules: Iterable[Rule],
    ctx: ContextSnapshot,
    on_error: Optional[ErrorCallback] = None,
) -> List[Rule]:
    """
    Return the rules that are active for the given context.

    Rules are expected in ascending position order, as the store returns
    them. The result is a filter that keeps that order, so the first entry
    is the highest-priority match. A rule with malformed info is
    skipped and reported; the others are still evaluated.

    Args:
        rules: Configured rules, sorted by position
        ctx: Context snapshot to evaluate against
        on_error: Optional callback receiving (rule, exception) for skipped rules

    Returns:
        Active rules in priority order
    """
    active: List[Rule] = []

    for rule in rules:
        try:
            matched = is_rule_active(rule, ctx)
        except (RuleParseError, TimeParseError) as e:
            logger.warning(f"Skipping rule '{rule.name}' at position {rule.position}: {e}")
            if on_error is not None:
                on_error(rule, e)
            continue

        if matched:
            logger.debug(f"Active: {rule.name} ({rule.mode.value} {rule.info})")
            active.append(rule)

    return active


def validate_rule(rule: Rule) -> None:
    """
    Check a rule before it is saved.

    Raises:
        ValueError: If the rule would never evaluate correctly
    """
    if not rule.name or not rule.name.strip():
        raise ValueError("Rule name must not be empty")
    if rule.mode is RuleMode.UNSET:
        raise ValueError("Please select a mode ('Wi-Fi' or 'Time')")
    if rule.mode is RuleMode.NETWORK:
        if not rule.info:
            raise ValueError("Wi-Fi rule needs a network name (SSID)")
        if rule.info != rule.info.strip('"'):
            raise ValueError(f"SSID must not be quoted: {rule.info}")
    if rule.mode is RuleMode.TIME:
        parse_interval(rule.info)
