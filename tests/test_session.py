import math

import pytest

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
from models import Ledger, Participant, Settlement
from session import SplitSession


@pytest.fixture
def session():
    s = SplitSession()
    s.add_participant("A")
    s.add_participant("B")
    return s


def test_add_participant_defaults():
    s = SplitSession()
    p = s.add_participant("  Alice ")

    assert p == Participant("Alice", 1.0)
    assert s.participant_names() == ["Alice"]


def test_add_participant_uses_configured_default_weight():
    s = SplitSession(AppSettings(default_weight=2.0))

    assert s.add_participant("A").weight == 2.0
    assert s.add_participant("B", weight=0).weight == 0.1


def test_add_participant_rejects_empty_and_duplicate(session):
    with pytest.raises(InvalidParticipant):
        session.add_participant("   ")
    with pytest.raises(DuplicateParticipant):
        session.add_participant("A")
    assert session.participant_names() == ["A", "B"]


@pytest.mark.parametrize("weight, expected", [
    (2.5, 2.5),
    (0.1, 0.1),
    (0.05, 0.1),
    (0, 0.1),
    (-3, 0.1),
    (math.nan, 0.1),
])
def test_update_weight_clamps_to_floor(session, weight, expected):
    assert session.update_weight("A", weight).weight == expected
    assert session.get_participant("A").weight == expected


def test_update_weight_respects_configured_floor():
    s = SplitSession(AppSettings(min_weight=0.5))
    s.add_participant("A")

    assert s.update_weight("A", 0.2).weight == 0.5


def test_update_weight_errors(session):
    with pytest.raises(InvalidWeight):
        session.update_weight("A", math.inf)
    with pytest.raises(InvalidWeight):
        session.update_weight("A", "heavy")
    with pytest.raises(UnknownParticipant):
        session.update_weight("Z", 1.0)


def test_add_expense(session):
    e = session.add_expense("A", 100, "  sushi ")

    assert e.payer == "A"
    assert e.amount == 100.0
    assert e.description == "sushi"
    assert session.expenses == [e]
    assert session.total_amount() == 100.0


def test_expense_ids_are_unique(session):
    ids = {session.add_expense("A", 1, "x").id for _ in range(20)}
    assert len(ids) == 20


@pytest.mark.parametrize("amount", [0, -5, "abc", None, math.inf])
def test_add_expense_rejects_bad_amount(session, amount):
    with pytest.raises(InvalidExpense):
        session.add_expense("A", amount, "drinks")
    assert session.expenses == []


def test_add_expense_rejects_missing_description(session):
    with pytest.raises(InvalidExpense):
        session.add_expense("A", 10, "  ")


def test_add_expense_rejects_unknown_payer(session):
    with pytest.raises(UnknownPayer):
        session.add_expense("Z", 10, "taxi")


def test_remove_participant_cascades_to_expenses(session):
    session.add_participant("C")
    kept = session.add_expense("A", 100, "dinner")
    session.add_expense("B", 50, "drinks")
    session.add_expense("B", 20, "snacks")

    removed = session.remove_participant("B")

    assert [e.description for e in removed] == ["drinks", "snacks"]
    assert session.participant_names() == ["A", "C"]
    assert session.expenses == [kept]

    report = session.settle()
    assert set(report.balances) == {"A", "C"}
    assert report.settlements == [Settlement("C", "A", 50.0)]


def test_remove_unknown_participant(session):
    with pytest.raises(UnknownParticipant):
        session.remove_participant("Z")


def test_remove_expense(session):
    e = session.add_expense("A", 10, "coffee")
    assert session.remove_expense(e.id) == e
    assert session.expenses == []
    with pytest.raises(KeyError):
        session.remove_expense(e.id)


def test_settle_weighted_group():
    s = SplitSession()
    s.add_participant("A")
    s.add_participant("B")
    s.add_participant("C", 2)
    s.add_expense("A", 120, "hotel")

    report = s.settle()

    assert report.balances == {"A": 90.0, "B": -30.0, "C": -60.0}
    assert report.settlements == [Settlement("C", "A", 60.0), Settlement("B", "A", 30.0)]
    assert report == s.settle()


def test_settle_without_participants():
    with pytest.raises(EmptyParticipantSet):
        SplitSession().settle()


def test_settle_without_expenses(session):
    report = session.settle()
    assert report.settlements == []
    assert report.balances == {"A": 0.0, "B": 0.0}


def test_settle_with_whole_currency_units():
    s = SplitSession(AppSettings(decimals=0))
    for name in ("A", "B", "C"):
        s.add_participant(name)
    s.add_expense("A", 100, "taxi")

    assert s.settle().settlements == [Settlement("B", "A", 33.0), Settlement("C", "A", 33.0)]


def test_snapshot_is_independent_of_later_changes(session):
    session.add_expense("A", 10, "coffee")
    snap = session.snapshot()

    session.add_expense("B", 20, "cake")
    session.update_weight("A", 3)
    session.participants.append(Participant("X"))

    assert isinstance(snap, Ledger)
    assert len(snap.expenses) == 1
    assert snap.participants == (Participant("A"), Participant("B"))
    assert session.participant_names() == ["A", "B"]


def test_clear(session):
    session.add_expense("A", 10, "coffee")
    session.last_payer = "A"
    session.clear()

    assert session.participants == []
    assert session.expenses == []
    assert session.last_payer is None
