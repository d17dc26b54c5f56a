"""
Tests for the treasury store.
"""

import pytest

from dao_dashboard.common.errors import FetchError, ParseError
from dao_dashboard.widgets.treasury import TreasuryStore

from conftest import DAO_ADDRESS

PAGE = "ibc/23A62409E4AD8133116C249B1FA38EED30E500A115D7B153109462CD82C1CD99"


class TestBalances:
    """Tests for TreasuryStore.balances."""

    @pytest.mark.asyncio
    async def test_filters_non_positive_and_non_numeric(self, config, indexer):
        indexer.get_bank_balances.return_value = {
            "uosmo": "2500000",
            "uion": "0",
            "ujuno": "-10",
            "ufoo": "lots",
            PAGE: "123456789",
        }
        store = TreasuryStore(config, indexer)
        await store.refresh()

        balances = store.balances()

        assert [b.denom for b in balances] == ["uosmo", PAGE]
        osmo, page = balances
        assert osmo.display_name == "uosmo"
        assert osmo.formatted_amount == "2.50"
        assert osmo.decimals == 6
        assert page.display_name == "PAGE"
        assert page.amount == "123456789"
        assert page.formatted_amount == "1.23"
        assert page.decimals == 8

    @pytest.mark.asyncio
    async def test_keeps_indexer_order(self, config, indexer):
        indexer.get_bank_balances.return_value = {"zeta": "1", "alpha": "2", "mid": "3"}
        store = TreasuryStore(config, indexer)
        await store.refresh()

        assert [b.denom for b in store.balances()] == ["zeta", "alpha", "mid"]

    def test_empty_before_first_fetch(self, config, indexer):
        store = TreasuryStore(config, indexer)
        assert store.balances() == []
        assert store.loading


class TestRefresh:
    """Tests for TreasuryStore error handling."""

    @pytest.mark.asyncio
    async def test_replaces_mapping(self, config, indexer):
        store = TreasuryStore(config, indexer)
        indexer.get_bank_balances.return_value = {"uosmo": "1"}
        await store.refresh()
        indexer.get_bank_balances.return_value = {"uion": "5"}
        await store.refresh()

        indexer.get_bank_balances.assert_awaited_with(DAO_ADDRESS)
        assert store.raw_balances == {"uion": "5"}

    @pytest.mark.asyncio
    async def test_non_ok_status_is_silent(self, config, indexer):
        store = TreasuryStore(config, indexer)
        indexer.get_bank_balances.return_value = {"uosmo": "1"}
        await store.refresh()

        indexer.get_bank_balances.side_effect = FetchError("HTTP error! status: 500", status=500)
        await store.refresh()

        assert store.error is None
        assert store.raw_balances == {"uosmo": "1"}
        assert not store.loading

    @pytest.mark.asyncio
    async def test_network_error_is_surfaced(self, config, indexer):
        store = TreasuryStore(config, indexer)
        indexer.get_bank_balances.side_effect = FetchError("Connection reset")
        await store.refresh()

        assert store.error == "Failed to load treasury data: Connection reset"

    @pytest.mark.asyncio
    async def test_parse_error_is_surfaced(self, config, indexer):
        store = TreasuryStore(config, indexer)
        indexer.get_bank_balances.side_effect = ParseError("Expected a balance mapping, got list")
        await store.refresh()

        assert store.error == "Failed to load treasury data: Expected a balance mapping, got list"

    @pytest.mark.asyncio
    async def test_stops_polling_when_closed(self, config, indexer, clock):
        indexer.get_bank_balances.return_value = {"uosmo": "1000000"}
        store = TreasuryStore(config, indexer, sleep=clock.sleep)

        store.start()
        await clock.settle()
        await clock.advance(30)
        assert indexer.get_bank_balances.await_count == 2

        store.close()
        await clock.advance(30)
        assert indexer.get_bank_balances.await_count == 2
        assert [b.formatted_amount for b in store.balances()] == ["1.00"]
