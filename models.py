"""
Data models for Warikan Ledger
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class Participant:
    """Group member with a relative share of the total burden"""
    name: str
    weight: float = 1.0  # relative, e.g. 2.0 carries twice the share of 1.0


@dataclass(frozen=True)
class Expense:
    """Single payment made by one participant for the whole group"""
    id: str
    payer: str
    amount: float
    description: str


@dataclass(frozen=True)
class Settlement:
    """Transfer from a debtor to a creditor"""
    from_person: str
    to_person: str
    amount: float


@dataclass(frozen=True)
class Ledger:
    """Immutable snapshot of a session's participants and expenses"""
    participants: Tuple[Participant, ...] = field(default_factory=tuple)
    expenses: Tuple[Expense, ...] = field(default_factory=tuple)

    def participant_names(self) -> List[str]:
        return [p.name for p in self.participants]
