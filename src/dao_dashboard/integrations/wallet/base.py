from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ...common.models import VoteChoice, VoteOutcome


class OfflineSigner(ABC):
    """Signing handle handed out by a wallet extension."""

    @abstractmethod
    async def get_accounts(self) -> List[Dict[str, Any]]:
        """Return the accounts this signer controls, each with an ``address``."""
        pass


class WalletProvider(ABC):
    """The wallet extension's capability surface (e.g. Keplr)."""

    @abstractmethod
    async def enable(self, chain_id: str) -> None:
        """Ask the user to allow access to a chain."""
        pass

    @abstractmethod
    def get_offline_signer(self, chain_id: str) -> OfflineSigner:
        """Return a signer for the chain."""
        pass


class VoteSubmitter(ABC):
    """Casts a vote on chain using a borrowed signer.

    Implementations build and broadcast the DAO proposal module's vote
    transaction. They must raise on failure.
    """

    @abstractmethod
    async def submit(self, proposal_id: str, choice: VoteChoice, signer: Any) -> VoteOutcome:
        pass
