from typing import Optional


class DashboardError(Exception):
    """Base class for dashboard errors."""


class FetchError(DashboardError):
    """Network or HTTP failure talking to the indexer.

    ``status`` is the HTTP status code when the server answered with a non-OK
    response, and ``None`` for transport failures.
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status

    @property
    def is_http_error(self) -> bool:
        return self.status is not None


class ParseError(DashboardError):
    """Response body was malformed or had an unexpected shape."""


class WalletUnavailable(DashboardError):
    """The wallet signing capability is absent."""


class VoteSubmissionError(DashboardError):
    """The vote submitter failed to cast a vote."""


class VoteInProgress(DashboardError):
    """A vote submission is already outstanding for this session."""
