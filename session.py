"""
Interactive session state for Warikan Ledger.

SplitSession owns the mutable participant and expense lists of one GUI
session. Nothing is written to disk; each settlement run works on an
immutable Ledger snapshot taken at call time.
"""
from __future__ import annotations
import logging
import math
import uuid
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from computations import apply_settlements, compute_balances, compute_settlements, total_amount
from config import AppSettings
from errors import (
    DuplicateParticipant,
    EmptyParticipantSet,
    InvalidExpense,
    InvalidParticipant,
    InvalidWeight,
    UnknownParticipant,
    UnknownPayer,
)
from models import Expense, Ledger, Participant, Settlement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettlementReport:
    """Result of one settlement run"""
    ledger: Ledger
    balances: Dict[str, float]
    settlements: List[Settlement]


class SplitSession:
    """Keyed store of participants and their expenses"""

    def __init__(self, settings: Optional[AppSettings] = None):
        self.settings = settings or AppSettings()
        self._participants: List[Participant] = []
        self._expenses: List[Expense] = []
        self.last_payer: Optional[str] = None  # preselected in the add-expense dialog

    # ---------- Accessors ----------
    @property
    def participants(self) -> List[Participant]:
        return list(self._participants)

    @property
    def expenses(self) -> List[Expense]:
        return list(self._expenses)

    def participant_names(self) -> List[str]:
        return [p.name for p in self._participants]

    def get_participant(self, name: str) -> Participant:
        for p in self._participants:
            if p.name == name:
                return p
        raise UnknownParticipant(name)

    def total_amount(self) -> float:
        return total_amount(self._expenses)

    # ---------- CRUD: Participants ----------
    def _clamp_weight(self, name: str, weight: float) -> float:
        try:
            w = float(weight)
        except (TypeError, ValueError) as ex:
            raise InvalidWeight(f"weight of {name!r} is not a number: {weight!r}") from ex
        if math.isnan(w):
            w = self.settings.min_weight
        if math.isinf(w):
            raise InvalidWeight(f"weight of {name!r} must be finite")
        if w < self.settings.min_weight:
            logger.warning("Clamping weight of %r from %s to %s", name, w, self.settings.min_weight)
            w = self.settings.min_weight
        return w

    def add_participant(self, name: str, weight: Optional[float] = None) -> Participant:
        """Add a participant; weight defaults to the configured default weight"""
        name = (name or "").strip()
        if not name:
            raise InvalidParticipant("participant name is required")
        if any(p.name == name for p in self._participants):
            raise DuplicateParticipant(f"participant {name!r} already exists")
        w = self.settings.default_weight if weight is None else weight
        participant = Participant(name, self._clamp_weight(name, w))
        self._participants.append(participant)
        logger.info("Added participant %r (weight %s)", name, participant.weight)
        return participant

    def remove_participant(self, name: str) -> List[Expense]:
        """Remove a participant together with every expense they paid; returns the removed expenses"""
        self.get_participant(name)
        self._participants = [p for p in self._participants if p.name != name]
        removed = [e for e in self._expenses if e.payer == name]
        self._expenses = [e for e in self._expenses if e.payer != name]
        logger.info("Removed participant %r and %d expense(s)", name, len(removed))
        return removed

    def update_weight(self, name: str, weight: float) -> Participant:
        """Change a participant's weight; values below the floor are clamped"""
        for i, p in enumerate(self._participants):
            if p.name == name:
                updated = replace(p, weight=self._clamp_weight(name, weight))
                self._participants[i] = updated
                logger.info("Weight of %r set to %s", name, updated.weight)
                return updated
        raise UnknownParticipant(name)

    # ---------- CRUD: Expenses ----------
    def add_expense(self, payer: str, amount: float, description: str) -> Expense:
        """Record an expense paid by an existing participant"""
        if payer not in self.participant_names():
            raise UnknownPayer(f"payer {payer!r} is not a participant")
        try:
            amt = float(amount)
        except (TypeError, ValueError) as ex:
            raise InvalidExpense(f"amount is not a number: {amount!r}") from ex
        if not math.isfinite(amt) or amt <= 0:
            raise InvalidExpense("amount must be a positive number")
        description = (description or "").strip()
        if not description:
            raise InvalidExpense("description is required")

        expense = Expense(id=str(uuid.uuid4()), payer=payer, amount=amt, description=description)
        self._expenses.append(expense)
        logger.info("Added expense %s: %r paid %.2f for %r", expense.id, payer, amt, description)
        return expense

    def remove_expense(self, expense_id: str) -> Expense:
        for i, e in enumerate(self._expenses):
            if e.id == expense_id:
                del self._expenses[i]
                logger.info("Removed expense %s", expense_id)
                return e
        raise KeyError(expense_id)

    def clear(self) -> None:
        """Start over with an empty session"""
        self._participants = []
        self._expenses = []
        self.last_payer = None
        logger.info("Session cleared")

    # ---------- Settlement ----------
    def snapshot(self) -> Ledger:
        return Ledger(participants=tuple(self._participants), expenses=tuple(self._expenses))

    def settle(self) -> SettlementReport:
        """
        Compute balances and transfers for the current state.
        Raises EmptyParticipantSet when there is nobody to settle between.
        """
        ledger = self.snapshot()
        if not ledger.participants:
            raise EmptyParticipantSet("add at least one participant before settling")

        balances = compute_balances(ledger.participants, ledger.expenses)
        settlements = compute_settlements(
            balances,
            decimals=self.settings.decimals,
            tolerance=self.settings.tolerance,
        )

        residual = apply_settlements(balances, settlements)
        worst = max((abs(v) for v in residual.values()), default=0.0)
        logger.info(
            "Settled %d participants, %d expenses: %d transfer(s), max residual %.6f",
            len(ledger.participants), len(ledger.expenses), len(settlements), worst,
        )
        return SettlementReport(ledger=ledger, balances=balances, settlements=settlements)
