"""
Static synonym tables for entity resolution.

Keys are lower-case. Dict order is significant: phrase-level matching walks
the tables in insertion order and the first key contained in the phrase wins.
"""

from typing import Dict

LEAVE_TYPE_SYNONYMS: Dict[str, str] = {
    "sick": "Sick",
    "illness": "Sick",
    "medical": "Sick",
    "casual": "Casual",
    "personal": "Casual",
    "urgent": "Casual",
    "vacation": "Vacation",
    "holiday": "Vacation",
    "annual": "Vacation",
    "earned": "Vacation",
    "leave": "Vacation",
}

LEAVE_STATUS_SYNONYMS: Dict[str, str] = {
    "pending": "Pending",
    "in progress": "Pending",
    "awaiting": "Pending",
    "waiting": "Pending",
    "approved": "Approved",
    "approve": "Approved",
    "accept": "Approved",
    "accepted": "Approved",
    "granted": "Approved",
    "rejected": "Rejected",
    "reject": "Rejected",
    "deny": "Rejected",
    "denied": "Rejected",
    "refused": "Rejected",
}

SHIFT_TYPE_SYNONYMS: Dict[str, str] = {
    "night": "Night",
    "n": "Night",
    "morning": "Morning",
    "m": "Morning",
    "day": "Morning",
    "evening": "Evening",
    "e": "Evening",
}

SHIFT_STATUS_SYNONYMS: Dict[str, str] = {
    "scheduled": "Scheduled",
    "plan": "Scheduled",
    "planned": "Scheduled",
    "assigned": "Assigned",
    "assigned to": "Assigned",
    "completed": "Completed",
    "done": "Completed",
    "finished": "Completed",
    "cancelled": "Cancelled",
    "canceled": "Cancelled",
    "aborted": "Cancelled",
    "vacant": "Vacant",
    "open": "Vacant",
    "unassigned": "Vacant",
}

# Tokens that make a phrase refer to the caller
SELF_REFERENCE_TOKENS = frozenset({"me", "my", "i", "myself", "mine"})
