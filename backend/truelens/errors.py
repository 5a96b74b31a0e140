# truelens/errors.py
"""Error taxonomy shared by the orchestrators and the HTTP layer.

Every error carries the HTTP status it maps to and a client-visible message.
Messages stay generic; the underlying cause is only written to the server log.
"""


class TrueLensError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(TrueLensError):
    """A required field is missing or empty."""
    status_code = 400


class Unauthenticated(TrueLensError):
    """Missing, malformed, expired or revoked identity token."""
    status_code = 401


class NotFound(TrueLensError):
    status_code = 404


class UpstreamFailure(TrueLensError):
    """The LLM, the search API or the database failed."""
    status_code = 500
