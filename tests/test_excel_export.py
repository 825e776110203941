from openpyxl import load_workbook

from config import AppSettings
from excel_export import export_excel
from models import Expense, Ledger, Participant, Settlement


def _ledger():
    return Ledger(
        participants=(Participant("A", 1), Participant("B", 1), Participant("C", 2)),
        expenses=(
            Expense("e1", "A", 100.0, "hotel"),
            Expense("e2", "A", 20.0, "taxi"),
        ),
    )


def test_export_workbook(tmp_path):
    path = tmp_path / "report.xlsx"
    export_excel(_ledger(), str(path))

    wb = load_workbook(path)
    assert wb.sheetnames == ["Participants", "Expenses", "Settlements"]

    rows = list(wb["Participants"].iter_rows(values_only=True))
    assert rows[0] == ("Participant", "Weight", "Share", "Expected", "Paid", "Balance")
    assert [r[0] for r in rows[1:]] == ["A", "B", "C"]
    assert rows[3][2] == 0.5
    assert rows[1][5] == 90

    rows = list(wb["Expenses"].iter_rows(values_only=True))
    assert rows[1] == ("A", "hotel", 100)
    assert rows[3] == ("TOTAL", None, "=SUM(C2:C3)")

    rows = list(wb["Settlements"].iter_rows(values_only=True))
    assert rows[1:] == [("C", "A", 60), ("B", "A", 30)]


def test_export_uses_given_settlements(tmp_path):
    path = tmp_path / "report.xlsx"
    settlements = [Settlement("B", "A", 12.5)]
    export_excel(_ledger(), str(path), AppSettings(decimals=0), settlements=settlements)

    wb = load_workbook(path)
    rows = list(wb["Settlements"].iter_rows(values_only=True))
    assert rows[1:] == [("B", "A", 12.5)]
    assert wb["Settlements"].cell(2, 3).number_format == "#,##0"


def test_export_without_expenses(tmp_path):
    path = tmp_path / "report.xlsx"
    export_excel(Ledger(participants=(Participant("A"),)), str(path))

    wb = load_workbook(path)
    assert wb["Expenses"].max_row == 1
    assert wb["Settlements"].max_row == 1
