"""Failure taxonomy for discovery and confirmation passes."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .model import FormKey


class AmmolinkError(RuntimeError):
    """Base class for domain errors."""


class ResolutionFailure(AmmolinkError):
    """An identity or link could not be resolved to a record.

    Never fatal: the affected candidate simply stays unconfirmed.
    """

    def __init__(self, form_key: FormKey | None, detail: str = "") -> None:
        self.form_key = form_key
        message = f"Could not resolve {form_key or '<null link>'}"
        super().__init__(f"{message}: {detail}" if detail else message)


class AccessFailure(AmmolinkError):
    """A record or one of its properties could not be introspected."""

    def __init__(self, subject: str, *, property_name: str | None = None) -> None:
        self.subject = subject
        self.property_name = property_name
        target = f"{subject}.{property_name}" if property_name else subject
        super().__init__(f"Could not read {target}")


class OperationCancelledError(AmmolinkError):
    """Raised at a checkpoint once cancellation has been requested.

    ``partial`` carries whatever the interrupted operation had produced so far
    (for example a confirmation report), so callers can still inspect it.
    """

    def __init__(self, boundary: str, *, partial: object | None = None) -> None:
        self.boundary = boundary
        self.partial = partial
        super().__init__(f"Operation cancelled at {boundary}")
