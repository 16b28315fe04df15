"""Error taxonomy for the Spend backend.

Each error carries the HTTP status the API layer responds with and a public
message that is safe to return to the caller. Upstream details stay in the logs.
"""


class SpendError(Exception):
    """Base class for all errors surfaced by the Spend API."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotConnectedError(SpendError):
    """No credential is held and none could be obtained."""

    status_code = 400
    default_message = "No account connected"


class InvalidInputError(SpendError):
    """A required request field is missing or unusable."""

    status_code = 400
    default_message = "Invalid request"


class ProviderError(SpendError):
    """The upstream provider failed or returned something we cannot use.

    Args:
        message: Generic message returned to the caller.
        detail: Upstream context, logged but never returned.
        upstream_status: HTTP status reported by the provider, if any.
    """

    status_code = 500
    default_message = "Provider request failed"

    def __init__(
        self,
        message: str | None = None,
        detail: str | None = None,
        upstream_status: int | None = None,
    ):
        super().__init__(message)
        self.detail = detail
        self.upstream_status = upstream_status
