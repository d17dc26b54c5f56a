from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import ParseError
from .formatting import shorten_address

DEFAULT_TITLE = "Untitled Proposal"
DEFAULT_DESCRIPTION = "No description provided"


def _text(value: Any) -> Optional[str]:
    """Scalar indexer values as strings; None stays None."""
    if value is None:
        return None
    return str(value)


class ProposalStatus(str, Enum):
    OPEN = "open"
    PASSED = "passed"
    REJECTED = "rejected"
    EXECUTED = "executed"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "ProposalStatus":
        """Map an indexer status to a known status, falling back to UNKNOWN."""
        try:
            return cls(value)
        except (TypeError, ValueError):
            return cls.UNKNOWN

    @property
    def label(self) -> str:
        return self.value.capitalize()


class VoteChoice(str, Enum):
    YES = "yes"
    NO = "no"


class Proposal(BaseModel):
    """A DAO proposal as shown in the proposal panel."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str = DEFAULT_TITLE
    description: str = DEFAULT_DESCRIPTION
    status: ProposalStatus = ProposalStatus.UNKNOWN
    created_at: Optional[str] = None
    completed_at: Optional[str] = None

    @classmethod
    def from_indexer(cls, raw: Any) -> "Proposal":
        """Normalize one entry of the indexer's allProposals response.

        Expected shape::

            {"id": ..., "proposal": {"title", "description", "status"},
             "createdAt": ..., "completedAt": ...}

        Raises:
            ParseError: if the entry is not an object or has no id.
        """
        if not isinstance(raw, dict):
            raise ParseError(f"Unexpected proposal entry: {raw!r}")
        if raw.get("id") is None:
            raise ParseError("Proposal entry is missing an id")

        body = raw.get("proposal")
        if not isinstance(body, dict):
            body = {}

        try:
            return cls(
                id=str(raw["id"]),
                title=_text(body.get("title")) or DEFAULT_TITLE,
                description=_text(body.get("description")) or DEFAULT_DESCRIPTION,
                status=ProposalStatus.parse(body.get("status")),
                created_at=_text(raw.get("createdAt")),
                completed_at=_text(raw.get("completedAt")),
            )
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            raise ParseError(f"Invalid proposal {raw['id']}: {field}: {first['msg']}") from e

    def is_open(self) -> bool:
        """Check if proposal is still accepting votes."""
        return self.status == ProposalStatus.OPEN

    @property
    def status_label(self) -> str:
        return self.status.label

    def summary(self, length: int = 100) -> str:
        """Collapsed-card preview of the description."""
        return f"{self.description[:length]}..."


class Balance(BaseModel):
    """A non-zero treasury holding."""
    model_config = ConfigDict(frozen=True)

    denom: str
    display_name: str
    amount: str
    decimals: int = 6
    formatted_amount: str = "0"


class WalletInfo(BaseModel):
    """A connected wallet. The signer is an opaque handle and is never inspected."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    address: str
    signer: Any

    def short_address(self) -> str:
        return shorten_address(self.address)


class VoteOutcome(BaseModel):
    """Result reported by a vote submitter."""
    proposal_id: str
    choice: VoteChoice
    voter: str
    tx_hash: Optional[str] = None
