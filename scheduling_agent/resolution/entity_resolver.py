"""
Entity resolution engine.

Maps one free-text phrase to a bundle of lookup-table members using the
synonym tables and substring/token matching. Every field of the result is
either unset or a row of the current lookup snapshot.
"""

import logging
import re
from typing import Dict, List, Optional

from scheduling_agent.data.lookup_cache import LookupCache, LookupSnapshot
from scheduling_agent.resolution.synonyms import (
    LEAVE_STATUS_SYNONYMS,
    LEAVE_TYPE_SYNONYMS,
    SELF_REFERENCE_TOKENS,
    SHIFT_STATUS_SYNONYMS,
    SHIFT_TYPE_SYNONYMS,
)
from scheduling_agent.services.user_context import current_user
from scheduling_agent.shared.contracts import ResolvedEntities
from scheduling_agent.shared.schemas import (
    Department,
    LeaveStatus,
    LeaveType,
    Role,
    ShiftStatus,
    ShiftType,
    Staff,
)

logger = logging.getLogger(__name__)

_PUNCTUATION = re.compile(r"[^\w\s]")


def tokenize(phrase: str) -> List[str]:
    """Lower-case and split on whitespace."""
    return phrase.lower().split()


def is_self_reference(phrase: str) -> bool:
    """True when the phrase contains a first-person token such as "me" or "i"."""
    words = _PUNCTUATION.sub(" ", phrase.lower()).split()
    return any(word in SELF_REFERENCE_TOKENS for word in words)


def _token_lookup(tokens: List[str], table: Dict[str, str]) -> Optional[str]:
    for token in tokens:
        canonical = table.get(token)
        if canonical is not None:
            return canonical
    return None


def _phrase_then_token_lookup(
    phrase: str, tokens: List[str], table: Dict[str, str]
) -> Optional[str]:
    for key, canonical in table.items():
        if key in phrase:
            return canonical
    return _token_lookup(tokens, table)


class EntityResolver:
    """Resolves phrases against the lookup snapshot held by ``lookup``."""

    def __init__(self, lookup: LookupCache):
        self._lookup = lookup

    def resolve(self, phrase: Optional[str]) -> ResolvedEntities:
        """
        Resolve every entity type the phrase mentions.

        Args:
            phrase: Free text such as "approved sick leave in cardiology"

        Returns:
            ResolvedEntities with unmatched types left unset. An empty or
            whitespace-only phrase yields an empty bundle.
        """
        if not phrase or not phrase.strip():
            return ResolvedEntities()

        logger.info(f"Resolving entities for: {phrase}")
        snapshot = self._lookup.snapshot
        lowered = phrase.strip().lower()
        tokens = tokenize(lowered)

        return ResolvedEntities(
            department=self.resolve_department(tokens, snapshot),
            shift_type=self.resolve_shift_type(tokens, snapshot),
            shift_status=self.resolve_shift_status(tokens, snapshot),
            leave_status=self.resolve_leave_status(lowered, tokens, snapshot),
            leave_type=self.resolve_leave_type(lowered, tokens, snapshot),
            staff=self.resolve_self(lowered, snapshot),
            caller_role=self.resolve_caller_role(snapshot),
        )

    @staticmethod
    def resolve_department(
        tokens: List[str], snapshot: LookupSnapshot
    ) -> Optional[Department]:
        # First department in snapshot order containing any token
        for department in snapshot.departments:
            name = department.department_name.lower()
            if any(token in name for token in tokens):
                return department
        return None

    @staticmethod
    def resolve_shift_type(tokens: List[str], snapshot: LookupSnapshot) -> Optional[ShiftType]:
        canonical = _token_lookup(tokens, SHIFT_TYPE_SYNONYMS)
        return snapshot.shift_type_by_name(canonical) if canonical else None

    @staticmethod
    def resolve_shift_status(
        tokens: List[str], snapshot: LookupSnapshot
    ) -> Optional[ShiftStatus]:
        canonical = _token_lookup(tokens, SHIFT_STATUS_SYNONYMS)
        return snapshot.shift_status_by_name(canonical) if canonical else None

    @staticmethod
    def resolve_leave_status(
        phrase: str, tokens: List[str], snapshot: LookupSnapshot
    ) -> Optional[LeaveStatus]:
        canonical = _phrase_then_token_lookup(phrase, tokens, LEAVE_STATUS_SYNONYMS)
        return snapshot.leave_status_by_name(canonical) if canonical else None

    @staticmethod
    def resolve_leave_type(
        phrase: str, tokens: List[str], snapshot: LookupSnapshot
    ) -> Optional[LeaveType]:
        canonical = _phrase_then_token_lookup(phrase, tokens, LEAVE_TYPE_SYNONYMS)
        return snapshot.leave_type_by_name(canonical) if canonical else None

    @staticmethod
    def resolve_self(phrase: str, snapshot: LookupSnapshot) -> Optional[Staff]:
        if not is_self_reference(phrase):
            return None
        return snapshot.staff_by_id(current_user().staff_id)

    @staticmethod
    def resolve_caller_role(snapshot: LookupSnapshot) -> Optional[Role]:
        return snapshot.role_by_name(current_user().role)
