"""Display helpers for treasury amounts, token names, dates and addresses.

Everything here is pure: identical inputs always produce identical output.
"""

import logging
import math
import re
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Optional

from .config import TokenConfig

logger = logging.getLogger(__name__)

DEFAULT_DECIMALS = 6

# Leading numeric prefix, the way a lenient float parser reads "123abc" as 123.
_NUMBER_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_number(raw: Any) -> Optional[float]:
    """Parse the leading number of a raw amount, or None if there is none."""
    if raw is None:
        return None
    match = _NUMBER_PREFIX.match(str(raw))
    if not match:
        return None
    value = float(match.group(1))
    if not math.isfinite(value):
        return None
    return value


def to_fixed(value: float, places: int) -> str:
    """Fixed-point rendering of a float, rounding exact ties away from zero."""
    if value == 0:
        value = 0.0  # no "-0.00"
    quantum = Decimal(1).scaleb(-places)
    return f"{Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP):f}"


class Formatter:
    """Turns denoms and raw smallest-unit amounts into display strings."""

    def __init__(self, token_config: Optional[Mapping[str, TokenConfig]] = None):
        self.token_config = dict(token_config or {})

    def decimals(self, denom: str) -> int:
        token = self.token_config.get(denom)
        return token.decimals if token else DEFAULT_DECIMALS

    def name(self, denom: str) -> str:
        """Human label for a denom.

        Known denoms use their configured name. Unknown ones get a best-effort
        label from the shape of the denom string; this is purely syntactic and
        does not decode the denom's provenance.
        """
        token = self.token_config.get(denom)
        if token:
            return token.display_name

        if "factory/" in denom:
            return denom.split("/")[-1]
        elif "gamm/pool/" in denom:
            return f"GAMM-{denom.split('/')[-1]}"
        elif "ibc/" in denom:
            return "IBC Token"
        return denom

    def amount(self, raw: Any, denom: str) -> str:
        """Format a raw smallest-unit amount with tiered precision.

        Tiers, first match wins:
            < 0.000001      14 decimals
            < 0.01          8 decimals
            >= 1,000,000    millions, 2 decimals, "M"
            >= 1,000        thousands, 2 decimals, "K"
            >= 1            2 decimals
            otherwise       6 decimals

        Returns "0" when the amount cannot be parsed.
        """
        parsed = parse_number(raw)
        if parsed is None:
            return "0"
        value = parsed / 10 ** self.decimals(denom)

        if value < 0.000001:
            return to_fixed(value, 14)
        elif value < 0.01:
            return to_fixed(value, 8)
        elif value >= 1_000_000:
            return f"{to_fixed(value / 1_000_000, 2)}M"
        elif value >= 1_000:
            return f"{to_fixed(value / 1_000, 2)}K"
        elif value >= 1:
            return to_fixed(value, 2)
        return to_fixed(value, 6)


def format_date(value: Optional[str]) -> str:
    """Format an indexer timestamp like "Jan 5, 2024, 02:30 PM" in local time."""
    if not value:
        return "Invalid date"
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        logger.debug(f"Could not parse date: {value!r}")
        return "Invalid date"
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return f"{parsed:%b} {parsed.day}, {parsed.year}, {parsed:%I:%M %p}"


def shorten_address(address: str, head: int = 8, tail: int = 6) -> str:
    """Abbreviate a chain address, e.g. "osmo1sy9...z98pre"."""
    if len(address) <= head + tail:
        return address
    return f"{address[:head]}...{address[-tail:]}"
