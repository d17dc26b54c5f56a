import asyncio
import logging
from typing import Dict, List, Optional

from ..common.config import DashboardConfig
from ..common.errors import FetchError
from ..common.formatting import Formatter, parse_number
from ..common.models import Balance
from ..common.poller import Poller, SleepFn
from ..integrations.daodao.client import IndexerClient

logger = logging.getLogger(__name__)


class TreasuryStore:
    """Polls the DAO treasury's bank balances for the treasury panel."""

    def __init__(
        self,
        config: DashboardConfig,
        client: IndexerClient,
        *,
        formatter: Optional[Formatter] = None,
        sleep: SleepFn = asyncio.sleep,
    ):
        self.config = config
        self.client = client
        self.formatter = formatter or Formatter(config.token_config)
        self._sleep = sleep
        self._raw: Dict[str, str] = {}
        self._poller: Optional[Poller] = None
        self.error: Optional[str] = None
        self.loading = True

    @property
    def raw_balances(self) -> Dict[str, str]:
        return dict(self._raw)

    def balances(self) -> List[Balance]:
        """Non-zero holdings in the order the indexer returned them."""
        result = []
        for denom, amount in self._raw.items():
            value = parse_number(amount)
            if value is None or value <= 0:
                continue
            result.append(
                Balance(
                    denom=denom,
                    display_name=self.formatter.name(denom),
                    amount=amount,
                    decimals=self.formatter.decimals(denom),
                    formatted_amount=self.formatter.amount(amount, denom),
                )
            )
        return result

    async def fetch(self) -> Optional[Dict[str, str]]:
        """Fetch balances; None means the indexer answered with a non-OK status."""
        try:
            return await self.client.get_bank_balances(self.config.dao_address)
        except FetchError as e:
            if not e.is_http_error:
                raise
            # Non-OK responses keep the last known balances without an error message
            logger.warning(f"Ignoring treasury response with status {e.status}")
            return None

    def apply(self, balances: Optional[Dict[str, str]]) -> None:
        self.loading = False
        if balances is None:
            return
        self._raw = dict(balances)
        self.error = None
        logger.info(f"Loaded {len(self._raw)} treasury balances")

    def report_error(self, error: Exception) -> None:
        self.loading = False
        self.error = f"Failed to load treasury data: {error}"
        logger.error(self.error)

    async def refresh(self) -> None:
        """Run one fetch outside the poll loop."""
        try:
            balances = await self.fetch()
        except Exception as e:
            self.report_error(e)
        else:
            self.apply(balances)

    def start(self) -> None:
        if self._poller is not None:
            return
        self._poller = Poller(
            self.fetch,
            self.config.poll_interval,
            self.apply,
            self.report_error,
            sleep=self._sleep,
            name="treasury",
        )
        self._poller.start()

    def close(self) -> None:
        if self._poller is not None:
            self._poller.dispose()

    async def __aenter__(self):
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.close()
