

"""
   Errors of the copy-generation integration (OpenAI Responses API).
   Kept apart from the SDK's own exception types so callers only depend on these.
"""

class GenerationError(Exception):
    """Base for all generation errors."""


class GenerationRequestError(GenerationError):
    """The call itself failed: network, auth, quota, or missing/invalid prompt configuration."""

    def __init__(self, message: str, *, transient: bool = False):
        super().__init__(message)
        self.transient = transient      # connection / timeout / 429 / 5xx


class GenerationFormatError(GenerationError):
    """The call succeeded but the response is not a JSON object with a products list."""
