"""Error taxonomy for the guidance pipeline.

Only ValidationError ever reaches a caller of the pipeline; the oracle and
parse errors are absorbed by the Response Interpreter and turned into a
degraded GuidanceResult.
"""

from typing import Optional


class GuidanceError(Exception):
    """Base class for every pipeline error."""


class ValidationError(GuidanceError):
    """Wizard input failed the pre-submission checks."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class OracleUnavailable(GuidanceError):
    """No credential is configured, so the oracle cannot be called."""


class OracleCallFailed(GuidanceError):
    """The network call or the oracle itself raised."""


class MalformedReply(GuidanceError):
    """The oracle reply does not contain a usable JSON object."""
