import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from ...common.errors import FetchError, ParseError

logger = logging.getLogger(__name__)


class IndexerClient:
    """Client for the DAO DAO indexer's read-only query API."""

    def __init__(self, base_url: str, chain_id: str, session: Optional[aiohttp.ClientSession] = None):
        """Initialize client with base URL and chain ID.

        A caller-supplied session is used as-is and left open on close.
        """
        self.base_url = base_url.rstrip("/")
        self.chain_id = chain_id
        self._session_instance = session
        self._owns_session = session is None

        logger.info(f"Initializing IndexerClient for {self.chain_id} at {self.base_url}")

    async def _session(self) -> aiohttp.ClientSession:
        """Get or create an aiohttp session."""
        if self._session_instance is None:
            self._session_instance = aiohttp.ClientSession()
        return self._session_instance

    def proposals_url(self, dao_address: str) -> str:
        return f"{self.base_url}/{self.chain_id}/contract/{dao_address}/daoCore/allProposals"

    def balances_url(self, address: str) -> str:
        return f"{self.base_url}/{self.chain_id}/account/{address}/bank/balances"

    async def _get_json(self, url: str) -> Any:
        """GET a URL and decode its JSON body.

        Raises:
            FetchError: on transport failures and non-200 responses.
            ParseError: if the body is not valid JSON.
        """
        session = await self._session()
        logger.debug(f"Fetching {url}")
        try:
            async with session.get(url) as response:
                if response.status != 200:
                    error_text = await response.text()
                    logger.error(f"Indexer request failed: {response.status} - {error_text[:200]}")
                    raise FetchError(f"HTTP error! status: {response.status}", status=response.status)

                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise ParseError(f"Invalid JSON from indexer: {e}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error fetching {url}: {e}")
            raise FetchError(str(e) or e.__class__.__name__) from e

    async def get_all_proposals(self, dao_address: str) -> Any:
        """Fetch the raw allProposals payload for a DAO core contract.

        The payload is returned undecoded; shape checks happen in the store.
        """
        return await self._get_json(self.proposals_url(dao_address))

    async def get_bank_balances(self, address: str) -> Dict[str, str]:
        """Fetch the denom -> raw amount mapping for an account."""
        data = await self._get_json(self.balances_url(address))
        if not isinstance(data, dict):
            raise ParseError(f"Expected a balance mapping, got {type(data).__name__}")
        return {str(denom): str(amount) for denom, amount in data.items()}

    async def close(self):
        if self._session_instance and self._owns_session:
            await self._session_instance.close()
            self._session_instance = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
