"""
Not-found signalling for service operations.

Engine operations never raise for an unknown workflow, template or item id.
They return a ``NotFound`` value instead, and callers check for it:

    result = checklist_service.complete_item(wf_id, item_id, "hr.admin")
    if is_not_found(result):
        return api_error(E.NOT_FOUND, str(result))
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class NotFound:
    """Value returned in place of a missing resource.

    Args:
        resource: Human-readable entity name (e.g. "OnboardingWorkflow").
        resource_id: The id that was looked up.
    """

    resource: str
    resource_id: str | None = None

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        msg = self.resource
        if self.resource_id is not None:
            msg += f" id={self.resource_id}"
        return msg + " not found"

    def to_dict(self) -> dict:
        return {"resource": self.resource, "resource_id": self.resource_id}


def is_not_found(value) -> bool:
    return isinstance(value, NotFound)
