"""Domain exceptions raised by the repository and styleguide layers.

Routers translate these into HTTP responses; nothing in ``studio_core``
knows about status codes.
"""

from __future__ import annotations


class StudioError(Exception):
    """Base class for all Brand Studio domain errors."""


class DuplicateResourceError(StudioError):
    """A uniqueness constraint rejected the write (user model, domain, ...)."""

    def __init__(self, resource: str, detail: str = "") -> None:
        self.resource = resource
        self.detail = detail
        message = f"{resource} already exists"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ResourceNotFoundError(StudioError):
    """The referenced row does not exist or belongs to another user."""

    def __init__(self, resource: str, identifier: object) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier!r} not found")


class UsageLimitExceededError(StudioError):
    """The user has no generations left in the current allowance window."""

    def __init__(self, user_id: str, plan: str, used: int, allowed: int) -> None:
        self.user_id = user_id
        self.plan = plan
        self.used = used
        self.allowed = allowed
        super().__init__(f"Generation limit reached for plan {plan!r} ({used}/{allowed})")


class AppendOnlyViolationError(StudioError):
    """An update or delete was attempted on an append-only table."""


class InvalidSelectionError(StudioError):
    """A selected URL is not one of the generated candidates."""


class NoTemplatesAvailableError(StudioError):
    """The template catalog returned no templates for a creation request."""
