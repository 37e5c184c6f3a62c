"""Domain models for household chores."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ChoreFrequency(Enum):
    """How often a chore repeats."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


@dataclass(frozen=True)
class Chore:
    """Represents a chore of the current house."""

    id: str
    title: str
    frequency: ChoreFrequency
    assigned_to_id: str | None
    assigned_to_name: str | None
    is_archived: bool
    updated_at: datetime
