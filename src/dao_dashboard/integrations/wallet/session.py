import logging
from typing import Optional, Union

from ...common.config import DashboardConfig
from ...common.errors import VoteInProgress, VoteSubmissionError, WalletUnavailable
from ...common.models import VoteChoice, VoteOutcome, WalletInfo
from .base import VoteSubmitter, WalletProvider

logger = logging.getLogger(__name__)


class WalletSession:
    """Wallet connection state and vote submission for one dashboard session.

    A single voting flag covers every proposal: while one vote is outstanding
    any other submission is rejected with VoteInProgress.
    """

    def __init__(self, config: DashboardConfig, provider: Optional[WalletProvider], submitter: VoteSubmitter):
        self.config = config
        self.provider = provider
        self.submitter = submitter
        self._wallet: Optional[WalletInfo] = None
        self.voting = False

    @property
    def wallet(self) -> Optional[WalletInfo]:
        return self._wallet

    @property
    def connected(self) -> bool:
        return self._wallet is not None

    @property
    def address(self) -> Optional[str]:
        return self._wallet.address if self._wallet else None

    async def connect(self) -> Optional[WalletInfo]:
        """Connect to the wallet extension.

        Failures are logged and leave the session disconnected.

        Returns:
            The connected wallet, or None if connecting failed.
        """
        try:
            if self.provider is None:
                raise WalletUnavailable("Please install Keplr extension")

            await self.provider.enable(self.config.chain_id)
            signer = self.provider.get_offline_signer(self.config.chain_id)
            accounts = await signer.get_accounts()
            if not accounts:
                raise WalletUnavailable(f"No accounts available for {self.config.chain_id}")

            self._wallet = WalletInfo(address=accounts[0]["address"], signer=signer)
            logger.info(f"Connected wallet {self._wallet.short_address()}")
            return self._wallet
        except Exception as e:
            self._wallet = None
            logger.error(f"Failed to connect: {e}")
            return None

    def disconnect(self) -> None:
        if self._wallet:
            logger.info(f"Disconnected wallet {self._wallet.short_address()}")
        self._wallet = None

    async def submit_vote(self, proposal_id: str, choice: Union[VoteChoice, str]) -> Optional[VoteOutcome]:
        """Submit a vote through the vote submitter.

        Does nothing when no wallet is connected. The voting flag is cleared
        whether or not the submission succeeds.

        Returns:
            The submitter's outcome, or None if nothing was submitted or the
            submission failed.

        Raises:
            VoteInProgress: if another submission is still outstanding.
            ValueError: if a wallet is connected and choice is not a valid vote.
        """
        if self._wallet is None:
            return None
        choice = VoteChoice(choice)
        if self.voting:
            raise VoteInProgress(f"A vote is already being submitted; rejected vote on proposal {proposal_id}")

        wallet = self._wallet
        self.voting = True
        try:
            logger.info(f"Voting {choice.value} on proposal {proposal_id} from address {wallet.address}")
            outcome = await self.submitter.submit(proposal_id, choice, wallet.signer)
            logger.info(f"Vote on proposal {proposal_id} submitted: {outcome.tx_hash or 'no tx hash'}")
            return outcome
        except Exception as e:
            error = e if isinstance(e, VoteSubmissionError) else VoteSubmissionError(str(e))
            logger.error(f"Vote failed: {error}")
            return None
        finally:
            self.voting = False
