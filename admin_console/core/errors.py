"""
Console error taxonomy.

Every failure below is recovered at the controller boundary and turned into a
user notification; none of them is meant to escape a screen controller.
"""

from typing import Optional


class ConsoleError(Exception):
    """Base error carrying the title/description shown to the user."""

    def __init__(self, title: str, description: str):
        super().__init__(description)
        self.title = title
        self.description = description


class ReadFailure(ConsoleError):
    """Initial load or refresh of a record family failed."""


class WriteFailure(ConsoleError):
    """A mutation was rejected by the backend."""


class PreconditionFailure(ConsoleError):
    """A local validation or workflow precondition is unmet; no request was sent."""


class DialogTransitionError(PreconditionFailure):
    """The requested dialog transition is not legal from the current state."""

    def __init__(self, current: str, action: str):
        super().__init__(
            "Ação indisponível",
            f"Não é possível {action} a partir do estado '{current}'.",
        )
        self.current = current
        self.action = action


class GatewayError(Exception):
    """Backend request failed. `message` is the backend's text when it gave one."""

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message or "Backend request failed")
        self.message = message
        self.code = code
