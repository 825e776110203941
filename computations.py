"""
Balance and settlement computations for Warikan Ledger
"""
from __future__ import annotations
import logging
import math
from typing import Dict, List, Mapping, Sequence

from errors import InvalidWeight, RoundingInvariantViolation, UnknownPayer
from models import Expense, Ledger, Participant, Settlement
from utils import round_money

logger = logging.getLogger(__name__)

CURRENCY_DECIMALS = 2
BALANCE_TOLERANCE = 1e-9


def total_amount(expenses: Sequence[Expense]) -> float:
    """Sum of all expense amounts"""
    return sum(float(e.amount) for e in expenses)


def total_weight(participants: Sequence[Participant]) -> float:
    """Sum of all participant weights; every weight must be positive"""
    total = 0.0
    for p in participants:
        w = float(p.weight)
        if not math.isfinite(w) or w <= 0:
            raise InvalidWeight(f"weight of {p.name!r} must be positive, got {p.weight!r}")
        total += w
    return total


def expected_shares(participants: Sequence[Participant], total: float) -> Dict[str, float]:
    """Weight-proportional share of `total` for each participant"""
    tw = total_weight(participants)
    return {p.name: (float(p.weight) / tw) * total for p in participants}


def paid_totals(participants: Sequence[Participant], expenses: Sequence[Expense]) -> Dict[str, float]:
    """Amount actually paid by each participant"""
    paid = {p.name: 0.0 for p in participants}
    for e in expenses:
        if e.payer not in paid:
            raise UnknownPayer(f"expense {e.id} paid by unknown participant {e.payer!r}")
        paid[e.payer] += float(e.amount)
    return paid


def compute_balances(
    participants: Sequence[Participant],
    expenses: Sequence[Expense],
) -> Dict[str, float]:
    """
    Compute each participant's balance: amount paid minus expected share.
    Positive -> is owed money; negative -> owes money. Values are not rounded.
    Returns an empty mapping when there are no participants.
    """
    if not participants:
        return {}

    paid = paid_totals(participants, expenses)
    expected = expected_shares(participants, total_amount(expenses))
    balances = {p.name: paid[p.name] - expected[p.name] for p in participants}

    logger.debug(
        "Balances for %d participants, %d expenses: %s",
        len(participants), len(expenses), balances,
    )
    return balances


def compute_summary(ledger: Ledger) -> Dict[str, dict]:
    """
    Compute display statistics for each participant.
    Returns dict mapping name -> {weight, ratio, expected, paid, balance}
    """
    people = ledger.participants
    if not people:
        return {}

    tw = total_weight(people)
    expected = expected_shares(people, total_amount(ledger.expenses))
    paid = paid_totals(people, ledger.expenses)

    return {
        p.name: {
            "weight": float(p.weight),
            "ratio": float(p.weight) / tw,
            "expected": expected[p.name],
            "paid": paid[p.name],
            "balance": paid[p.name] - expected[p.name],
        } for p in people
    }


def round_balances(balances: Mapping[str, float], decimals: int = CURRENCY_DECIMALS) -> Dict[str, float]:
    """Round balances for presentation"""
    return {name: round_money(v, decimals) for name, v in balances.items()}


def compute_settlements(
    balances: Mapping[str, float],
    decimals: int = CURRENCY_DECIMALS,
    tolerance: float = BALANCE_TOLERANCE,
) -> List[Settlement]:
    """
    Compute transfers that bring every balance to zero.
    Greedy largest-first matching: the largest debtor pays the largest creditor,
    whichever side is used up first moves on to the next candidate.
    Ties keep the insertion order of `balances`.
    """
    # working copies [name, remaining magnitude]; `balances` is left untouched
    debtors = [[name, -float(v)] for name, v in balances.items() if v < -tolerance]
    creditors = [[name, float(v)] for name, v in balances.items() if v > tolerance]
    debtors.sort(key=lambda x: x[1], reverse=True)
    creditors.sort(key=lambda x: x[1], reverse=True)

    settlements = []
    i = j = 0
    while i < len(debtors) and j < len(creditors):
        dname, damt = debtors[i]
        cname, camt = creditors[j]

        amount = round_money(min(damt, camt), decimals)
        if amount > 0:
            settlements.append(Settlement(dname, cname, amount))

        if math.isclose(damt, camt, rel_tol=0.0, abs_tol=tolerance):
            i += 1
            j += 1
        elif damt < camt:
            creditors[j][1] = camt - damt
            i += 1
        else:
            debtors[i][1] = damt - camt
            j += 1

    unmatched = {name: -amt for name, amt in debtors[i:]}
    unmatched.update({name: amt for name, amt in creditors[j:]})
    # only one side can be left over, so the sum bounds every entry
    residual = sum(unmatched.values())
    if round_money(residual, decimals) != 0:
        raise RoundingInvariantViolation(residual, unmatched)
    if unmatched:
        logger.debug("Dropped sub-unit remainder %r", unmatched)

    logger.debug("Settled %d debtors / %d creditors with %d transfers",
                 len(debtors), len(creditors), len(settlements))
    return settlements


def apply_settlements(
    balances: Mapping[str, float],
    settlements: Sequence[Settlement],
) -> Dict[str, float]:
    """Balances left over after every settlement is paid"""
    out = dict(balances)
    for s in settlements:
        out[s.from_person] = out.get(s.from_person, 0.0) + s.amount
        out[s.to_person] = out.get(s.to_person, 0.0) - s.amount
    return out
