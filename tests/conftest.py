"""
Shared fixtures for the dashboard tests.
"""

import asyncio
from typing import List, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest

from dao_dashboard.common.config import DashboardConfig

DAO_ADDRESS = "osmo1sy9k228qzke0nd3k3vmxdvr68xdlqsu66h3xgm9ke3c4jhamusvsz98pre"


class FakeClock:
    """Drop-in replacement for asyncio.sleep driven by advance()."""

    def __init__(self):
        self.now = 0.0
        self._waiters: List[Tuple[float, asyncio.Future]] = []

    async def sleep(self, delay: float) -> None:
        future = asyncio.get_running_loop().create_future()
        self._waiters.append((self.now + delay, future))
        await future

    async def settle(self, rounds: int = 10) -> None:
        """Let every ready task run."""
        for _ in range(rounds):
            await asyncio.sleep(0)

    async def advance(self, seconds: float) -> None:
        self.now += seconds
        due = [(d, f) for d, f in self._waiters if d <= self.now]
        self._waiters = [(d, f) for d, f in self._waiters if d > self.now]
        for _, future in due:
            if not future.done():
                future.set_result(None)
        await self.settle()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    return DashboardConfig(
        dao_address=DAO_ADDRESS,
        chain_id="osmosis-1",
        indexer_base_url="https://indexer.example",
        poll_interval=30,
    )


@pytest.fixture
def indexer():
    """Stand-in for IndexerClient."""
    client = MagicMock()
    client.get_all_proposals = AsyncMock(return_value=[])
    client.get_bank_balances = AsyncMock(return_value={})
    return client


def raw_proposal(proposal_id, title="Title", status="open", **extra):
    entry = {
        "id": proposal_id,
        "proposal": {"title": title, "description": f"About {title}", "status": status},
        "createdAt": "2024-01-05T14:30:00.000Z",
    }
    entry.update(extra)
    return entry
