"""Self-reference detection for staff phrases ("my shifts", "assign me")."""

from typing import Optional

from pydantic import BaseModel

from scheduling_agent.resolution.entity_resolver import is_self_reference
from scheduling_agent.services.user_context import current_user


class StaffReference(BaseModel):
    is_self: bool
    staff_id: Optional[int] = None
    original_phrase: Optional[str] = None


def resolve_staff_reference(phrase: str) -> StaffReference:
    """
    Decide whether ``phrase`` points at the caller or names someone else.

    A self-reference resolves to the caller's staff id; anything else is
    handed back as a name fragment for a staff name search.
    """
    normalized = phrase.strip().lower()
    if is_self_reference(normalized):
        return StaffReference(is_self=True, staff_id=current_user().staff_id)
    return StaffReference(is_self=False, original_phrase=normalized)
