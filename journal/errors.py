"""Domain error taxonomy.

These are raised inside the service layer and turned into failed
``ActionResult`` values at the ``TradeJournal`` boundary.
"""

from pydantic import ValidationError


class JournalError(Exception):
    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None, errors: dict[str, list[str]] | None = None):
        self.message = message or self.default_message
        self.errors = errors or {}
        super().__init__(self.message)


class AuthenticationRequired(JournalError):
    status_code = 401
    default_message = "You must be logged in"


class NotFoundOrForbidden(JournalError):
    """Missing, or owned by someone else. The two are never told apart."""

    status_code = 404
    default_message = "Not found or you don't have permission to access it"


class ValidationFailed(JournalError):
    status_code = 422
    default_message = "Please fix errors in the form"


class StoreFailure(JournalError):
    status_code = 503
    default_message = "The request could not be completed. Please try again."


def field_errors(exc: ValidationError) -> dict[str, list[str]]:
    """Flatten a pydantic (or FastAPI request) validation error into ``{field: [messages]}``."""
    flat: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        key = ".".join(loc) or "__root__"
        flat.setdefault(key, []).append(err.get("msg", "Invalid value"))
    return flat
