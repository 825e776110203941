"""
Main application window for Warikan Ledger GUI
"""
from __future__ import annotations
import logging
from typing import Optional

try:
    import tkinter as tk
    from tkinter import ttk, messagebox, filedialog
except ModuleNotFoundError:
    tk = None
    ttk = None
    messagebox = None
    filedialog = None

from computations import compute_summary
from config import AppSettings
from errors import (
    DuplicateParticipant,
    EmptyParticipantSet,
    InvalidParticipant,
    RoundingInvariantViolation,
)
from excel_export import export_excel
from gui_dialogs import ExpenseDialog, WeightDialog
from session import SettlementReport, SplitSession
from utils import format_currency, format_percent

logger = logging.getLogger(__name__)


class WarikanApp(ttk.Frame):
    """Main application window"""

    def __init__(self, master: tk.Tk, settings: Optional[AppSettings] = None):
        super().__init__(master, padding=8)
        self.master = master
        self.master.title("Warikan")
        self.master.geometry("900x620")
        self.grid(row=0, column=0, sticky="nsew")
        self.master.rowconfigure(0, weight=1)
        self.master.columnconfigure(0, weight=1)

        self.settings = settings or AppSettings()
        self.session = SplitSession(self.settings)
        self.report: Optional[SettlementReport] = None

        self._build_menu()
        self._build_ui()
        self.refresh_all()

    def _money(self, amount: float) -> str:
        return format_currency(amount, self.settings.currency_symbol, self.settings.decimals)

    # ---------- Menu ----------
    def _build_menu(self):
        """Build application menu bar"""
        menubar = tk.Menu(self.master)
        filem = tk.Menu(menubar, tearoff=0)
        filem.add_command(label="New Session", command=self.new_session)
        filem.add_separator()
        filem.add_command(label="Export Excel…", command=self.export_excel_dialog)
        filem.add_separator()
        filem.add_command(label="Exit", command=self.master.destroy)
        menubar.add_cascade(label="File", menu=filem)
        self.master.config(menu=menubar)

    # ---------- UI ----------
    def _build_ui(self):
        """Build main UI with tabs"""
        nb = ttk.Notebook(self)
        nb.grid(row=0, column=0, sticky="nsew")
        self.rowconfigure(0, weight=1)
        self.columnconfigure(0, weight=1)

        self.tab_people = ttk.Frame(nb, padding=8)
        self.tab_expenses = ttk.Frame(nb, padding=8)
        self.tab_settle = ttk.Frame(nb, padding=8)

        nb.add(self.tab_people, text="Participants")
        nb.add(self.tab_expenses, text="Expenses")
        nb.add(self.tab_settle, text="Settlement")

        self._build_people_tab()
        self._build_expenses_tab()
        self._build_settle_tab()

    def _build_people_tab(self):
        """Build participant management tab"""
        self.tab_people.columnconfigure(0, weight=1)

        controls = ttk.Frame(self.tab_people)
        controls.grid(row=0, column=0, sticky="ew")
        self.new_person_var = tk.StringVar()
        entry = ttk.Entry(controls, textvariable=self.new_person_var, width=20)
        entry.pack(side="left")
        entry.bind("<Return>", lambda _e: self.add_person())
        ttk.Button(controls, text="Add", command=self.add_person).pack(side="left", padx=4)
        ttk.Button(controls, text="Edit Weight…", command=self.edit_selected_weight).pack(side="left", padx=4)
        ttk.Button(controls, text="Remove Selected", command=self.remove_selected_person).pack(side="left", padx=4)

        cols = ("name", "weight", "share", "expected")
        self.people_tree = ttk.Treeview(self.tab_people, columns=cols, show="headings", height=16)
        for c, w in zip(cols, [200, 90, 90, 140]):
            self.people_tree.heading(c, text=c)
            self.people_tree.column(c, width=w, anchor="w")
        self.people_tree.grid(row=1, column=0, sticky="nsew", pady=6)
        self.people_tree.bind("<Double-1>", lambda _e: self.edit_selected_weight())
        self.tab_people.rowconfigure(1, weight=1)

        ttk.Label(self.tab_people,
                  text="Note: removing a participant also removes every expense they paid.").grid(
            row=2, column=0, sticky="w", pady=(8, 0))

    def _build_expenses_tab(self):
        """Build expenses tab"""
        top = ttk.Frame(self.tab_expenses)
        top.grid(row=0, column=0, sticky="ew")
        self.tab_expenses.columnconfigure(0, weight=1)

        ttk.Button(top, text="Add", command=self.add_expense).pack(side="left", padx=3)
        ttk.Button(top, text="Delete", command=self.delete_selected_expense).pack(side="left", padx=3)
        self.total_var = tk.StringVar(value="")
        ttk.Label(top, textvariable=self.total_var).pack(side="right")

        ttk.Separator(self.tab_expenses, orient="horizontal").grid(row=1, column=0, sticky="ew", pady=6)

        cols = ("payer", "description", "amount")
        self.exp_tree = ttk.Treeview(self.tab_expenses, columns=cols, show="headings", height=18)
        for c, w in zip(cols, [140, 420, 120]):
            self.exp_tree.heading(c, text=c)
            self.exp_tree.column(c, width=w, anchor="w")
        self.exp_tree.grid(row=2, column=0, sticky="nsew")
        self.tab_expenses.rowconfigure(2, weight=1)

        yscroll = ttk.Scrollbar(self.tab_expenses, orient="vertical", command=self.exp_tree.yview)
        self.exp_tree.configure(yscroll=yscroll.set)
        yscroll.grid(row=2, column=1, sticky="ns")

    def _build_settle_tab(self):
        """Build settlement tab"""
        self.tab_settle.columnconfigure(0, weight=1)

        top = ttk.Frame(self.tab_settle)
        top.grid(row=0, column=0, sticky="ew")
        ttk.Button(top, text="Calculate", command=self.calculate).pack(side="left", padx=3)
        ttk.Button(top, text="Export Excel…", command=self.export_excel_dialog).pack(side="left", padx=3)

        self.settle_note = tk.StringVar(value="")
        ttk.Label(self.tab_settle, textvariable=self.settle_note).grid(row=1, column=0, sticky="w", pady=(6, 0))

        cols = ("person", "paid", "expected", "balance")
        self.bal_tree = ttk.Treeview(self.tab_settle, columns=cols, show="headings", height=8)
        for c, w in zip(cols, [160, 140, 140, 140]):
            self.bal_tree.heading(c, text=c)
            self.bal_tree.column(c, width=w, anchor="w")
        self.bal_tree.grid(row=2, column=0, sticky="nsew", pady=6)
        self.tab_settle.rowconfigure(2, weight=1)

        ttk.Label(self.tab_settle, text="Transfers:").grid(row=3, column=0, sticky="w", pady=(10, 0))
        tcols = ("from", "to", "amount")
        self.tr_tree = ttk.Treeview(self.tab_settle, columns=tcols, show="headings", height=8)
        for c, w in zip(tcols, [160, 160, 140]):
            self.tr_tree.heading(c, text=c)
            self.tr_tree.column(c, width=w, anchor="w")
        self.tr_tree.grid(row=4, column=0, sticky="nsew")
        self.tab_settle.rowconfigure(4, weight=1)

    # ---------- CRUD: Participants ----------
    def add_person(self):
        """Add new participant with default weight"""
        try:
            self.session.add_participant(self.new_person_var.get())
        except InvalidParticipant:
            return
        except DuplicateParticipant:
            messagebox.showinfo("Participants", "Name already exists.")
            return
        self.new_person_var.set("")
        self.refresh_all()

    def _selected_person(self) -> Optional[str]:
        sel = self.people_tree.selection()
        return sel[0] if sel else None

    def edit_selected_weight(self):
        """Edit weight of selected participant"""
        name = self._selected_person()
        if not name:
            messagebox.showinfo("Edit", "Select a participant first.")
            return
        dlg = WeightDialog(self.master, self.session, self.session.get_participant(name))
        self.master.wait_window(dlg)
        if dlg.result:
            self.refresh_all()

    def remove_selected_person(self):
        """Remove selected participant and their expenses"""
        name = self._selected_person()
        if not name:
            return
        count = sum(1 for e in self.session.expenses if e.payer == name)
        if messagebox.askyesno("Remove participant",
                               f"Remove '{name}'? {count} expense(s) paid by them will also be removed."):
            self.session.remove_participant(name)
            self.refresh_all()

    # ---------- CRUD: Expenses ----------
    def add_expense(self):
        """Add new expense"""
        if not self.session.participants:
            messagebox.showerror("No participants", "Please add at least one participant first.")
            return
        dlg = ExpenseDialog(self.master, self.session)
        self.master.wait_window(dlg)
        if dlg.result:
            self.refresh_all()

    def delete_selected_expense(self):
        """Delete selected expense"""
        sel = self.exp_tree.selection()
        if not sel:
            messagebox.showinfo("Delete", "Select an expense row first.")
            return
        if messagebox.askyesno("Delete", "Delete selected expense?"):
            self.session.remove_expense(sel[0])
            self.refresh_all()

    # ---------- Settlement ----------
    def calculate(self):
        """Run the settlement on the current session"""
        try:
            self.report = self.session.settle()
        except EmptyParticipantSet:
            self.report = None
            messagebox.showinfo("Settlement", "Add participants before calculating.")
        except RoundingInvariantViolation as ex:
            self.report = None
            logger.exception("Settlement failed")
            messagebox.showerror("Internal error", f"Settlement could not be balanced:\n{ex}")
        self.refresh_settlement()

    def new_session(self):
        """Discard all participants and expenses"""
        if messagebox.askyesno("New", "Start a new session (all entries will be lost)?"):
            self.session.clear()
            self.refresh_all()

    def export_excel_dialog(self):
        """Export to Excel file"""
        if not self.session.participants:
            messagebox.showinfo("Export", "Nothing to export yet.")
            return
        fp = filedialog.asksaveasfilename(
            title="Export Excel",
            defaultextension=".xlsx",
            filetypes=[("Excel Workbook", "*.xlsx")]
        )
        if not fp:
            return
        try:
            export_excel(self.session.snapshot(), fp, self.settings)
            messagebox.showinfo("Export", f"Exported: {fp}")
        except (OSError, RoundingInvariantViolation) as ex:
            logger.exception("Export to %s failed", fp)
            messagebox.showerror("Export failed", str(ex))

    # ---------- Refresh ----------
    def refresh_all(self):
        """Refresh all UI elements; any previous settlement is stale"""
        self.report = None
        self.refresh_people()
        self.refresh_expenses()
        self.refresh_settlement()

    def refresh_people(self):
        """Refresh participants tree view"""
        for iid in self.people_tree.get_children():
            self.people_tree.delete(iid)
        summary = compute_summary(self.session.snapshot())
        for p in self.session.participants:
            s = summary[p.name]
            self.people_tree.insert("", "end", iid=p.name, values=(
                p.name, f"{p.weight:g}", format_percent(s["ratio"]), self._money(s["expected"])
            ))

    def refresh_expenses(self):
        """Refresh expenses tree view"""
        for iid in self.exp_tree.get_children():
            self.exp_tree.delete(iid)
        for e in self.session.expenses:
            self.exp_tree.insert("", "end", iid=e.id, values=(e.payer, e.description, self._money(e.amount)))
        self.total_var.set(f"Total: {self._money(self.session.total_amount())}")

    def refresh_settlement(self):
        """Refresh balances and transfers from the last report"""
        for tree in (self.bal_tree, self.tr_tree):
            for iid in tree.get_children():
                tree.delete(iid)

        if self.report is None:
            self.settle_note.set("Press Calculate to compute transfers.")
            return

        summary = compute_summary(self.report.ledger)
        for name in self.report.ledger.participant_names():
            s = summary[name]
            self.bal_tree.insert("", "end", values=(
                name, self._money(s["paid"]), self._money(s["expected"]), self._money(s["balance"])
            ))
        for t in self.report.settlements:
            self.tr_tree.insert("", "end", values=(t.from_person, t.to_person, self._money(t.amount)))

        if self.report.settlements:
            self.settle_note.set(f"{len(self.report.settlements)} transfer(s) settle all balances.")
        else:
            self.settle_note.set("Everyone is settled up; no transfers needed.")
