"""Ledger error taxonomy.

Services raise these; the API layer maps them to HTTP status codes
(see ``splitter.main``). Both kinds are terminal for the request.
"""


class LedgerError(Exception):
    """Base class for failures reported back to the caller."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(LedgerError):
    """Malformed or inconsistent input: bad sums, non-positive amounts, self-settlement."""


class NotFoundError(LedgerError):
    """Reference to a group, user, expense or settlement that does not exist."""
