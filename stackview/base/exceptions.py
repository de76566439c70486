"""
Stackview exception hierarchy.

Two kinds of failure reach the HTTP layer: the request itself was
incomplete (:class:`InvalidRequestError`) or the emulated service raised
(:class:`UpstreamError`). :class:`ResourceNotFoundError` covers detail
lookups that come back empty.
"""


# ── Base ──────────────────────────────────────────────────────────────
class ConsoleError(Exception):
    """Root exception for all Stackview errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# ── Validation ────────────────────────────────────────────────────────
class InvalidRequestError(ConsoleError):
    """A required field is missing or malformed. Raised before any SDK call."""

    status_code = 400


# ── Upstream ──────────────────────────────────────────────────────────
class UpstreamError(ConsoleError):
    """The SDK call raised. Carries the upstream message verbatim."""

    status_code = 500


class ResourceNotFoundError(UpstreamError):
    """A detail lookup found nothing."""

    status_code = 404
