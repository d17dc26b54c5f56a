import asyncio
import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from ..common.config import DashboardConfig
from ..common.models import Proposal
from ..common.errors import ParseError
from ..common.poller import Poller, SleepFn
from ..integrations.daodao.client import IndexerClient

logger = logging.getLogger(__name__)


def normalize_proposals(payload: List[Any]) -> Tuple[Proposal, ...]:
    """Normalize an allProposals list and order it most recent first.

    The indexer returns proposals oldest first.

    Raises:
        ParseError: on a malformed entry or a duplicate id.
    """
    proposals = [Proposal.from_indexer(entry) for entry in payload]
    seen: Set[str] = set()
    for proposal in proposals:
        if proposal.id in seen:
            raise ParseError(f"Duplicate proposal id {proposal.id}")
        seen.add(proposal.id)
    return tuple(reversed(proposals))


class ProposalStore:
    """Polls the DAO's proposals and holds the proposal panel's state."""

    def __init__(self, config: DashboardConfig, client: IndexerClient, *, sleep: SleepFn = asyncio.sleep):
        self.config = config
        self.client = client
        self._sleep = sleep
        self._proposals: Tuple[Proposal, ...] = ()
        self._expanded: Set[str] = set()
        self._poller: Optional[Poller] = None
        self.error: Optional[str] = None
        self.loading = True

    @property
    def proposals(self) -> Tuple[Proposal, ...]:
        return self._proposals

    def get(self, proposal_id: str) -> Optional[Proposal]:
        """Get proposal by ID."""
        return next((p for p in self._proposals if p.id == proposal_id), None)

    def counts_by_status(self) -> Dict[str, int]:
        status_counts: Dict[str, int] = {}
        for p in self._proposals:
            status_counts[p.status.value] = status_counts.get(p.status.value, 0) + 1
        return status_counts

    # Expand / collapse

    def toggle(self, proposal_id: str) -> bool:
        """Flip the expanded state of a proposal and return the new state."""
        if proposal_id in self._expanded:
            self._expanded.discard(proposal_id)
            return False
        self._expanded.add(proposal_id)
        return True

    def is_expanded(self, proposal_id: str) -> bool:
        return proposal_id in self._expanded

    @property
    def expanded_ids(self) -> frozenset:
        return frozenset(self._expanded)

    # Fetching

    async def fetch(self) -> Optional[Tuple[Proposal, ...]]:
        """Fetch and normalize proposals; None means the payload was not a list."""
        payload = await self.client.get_all_proposals(self.config.dao_address)
        if not isinstance(payload, list):
            logger.warning(f"Ignoring non-list proposals payload ({type(payload).__name__})")
            return None
        return normalize_proposals(payload)

    def apply(self, proposals: Optional[Tuple[Proposal, ...]]) -> None:
        self.loading = False
        if proposals is None:
            return
        self._proposals = proposals
        self.error = None
        logger.info(f"Loaded {len(proposals)} proposals: {self.counts_by_status()}")

    def report_error(self, error: Exception) -> None:
        self.loading = False
        self.error = f"Failed to load proposals: {error}"
        logger.error(self.error)

    async def refresh(self) -> None:
        """Run one fetch outside the poll loop."""
        try:
            proposals = await self.fetch()
        except Exception as e:
            self.report_error(e)
        else:
            self.apply(proposals)

    # Lifecycle

    def start(self) -> None:
        if self._poller is not None:
            return
        self._poller = Poller(
            self.fetch,
            self.config.poll_interval,
            self.apply,
            self.report_error,
            sleep=self._sleep,
            name="proposals",
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
