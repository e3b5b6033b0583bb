"""
Entity resolution output contract.

Each field is independently optional. When present it is a member of the
corresponding lookup table, never a value synthesized from the phrase.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from scheduling_agent.shared.schemas.entities import (
    Department,
    LeaveStatus,
    LeaveType,
    Role,
    ShiftStatus,
    ShiftType,
    Staff,
)


class ResolvedEntities(BaseModel):
    """Bundle of domain values resolved from a single phrase."""

    model_config = ConfigDict(frozen=True)

    department: Optional[Department] = Field(default=None)
    shift_type: Optional[ShiftType] = Field(default=None)
    shift_status: Optional[ShiftStatus] = Field(default=None)
    leave_status: Optional[LeaveStatus] = Field(default=None)
    leave_type: Optional[LeaveType] = Field(default=None)
    staff: Optional[Staff] = Field(
        default=None, description="The caller's own staff record, when referenced"
    )
    caller_role: Optional[Role] = Field(
        default=None, description="Role of the caller, taken from the user context"
    )

    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())
