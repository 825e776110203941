"""
Exception types for Warikan Ledger
"""
from __future__ import annotations


class WarikanError(Exception):
    """Base class for all application errors"""


class ConfigError(WarikanError, ValueError):
    """Settings file contains an invalid value"""


class InvalidWeight(WarikanError, ValueError):
    """Weight is not a usable positive number"""


class InvalidParticipant(WarikanError, ValueError):
    """Participant name is empty"""


class DuplicateParticipant(WarikanError, ValueError):
    """Participant name already exists in the session"""


class UnknownParticipant(WarikanError, KeyError):
    """No participant with the given name"""


class UnknownPayer(WarikanError, ValueError):
    """Expense refers to a payer who is not a participant"""


class InvalidExpense(WarikanError, ValueError):
    """Expense amount or description is missing or invalid"""


class EmptyParticipantSet(WarikanError):
    """Settlement requested for a session with no participants"""


class RoundingInvariantViolation(WarikanError, RuntimeError):
    """
    Debtors and creditors did not run out together.
    The balances did not sum to zero, so some amount was left unmatched.
    """

    def __init__(self, residual: float, unmatched: dict):
        self.residual = residual
        self.unmatched = unmatched
        names = ", ".join(f"{k}={v:.6f}" for k, v in unmatched.items())
        super().__init__(f"balances do not net to zero (residual {residual:.6f}: {names})")
