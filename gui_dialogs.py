"""
Dialog windows for Warikan Ledger GUI
"""
from __future__ import annotations
from typing import Optional

try:
    import tkinter as tk
    from tkinter import ttk, messagebox
except ModuleNotFoundError:
    tk = None
    ttk = None
    messagebox = None

from errors import InvalidExpense, InvalidWeight, UnknownPayer
from models import Expense, Participant
from session import SplitSession
from utils import safe_float


class WeightDialog(tk.Toplevel):
    """Dialog for changing a participant's weight"""

    def __init__(self, master, session: SplitSession, participant: Participant):
        super().__init__(master)
        self.title(f"Weight: {participant.name}")
        self.resizable(False, False)
        self.session = session
        self.participant = participant
        self.result: Optional[Participant] = None

        floor = session.settings.min_weight
        frm = ttk.Frame(self, padding=10)
        frm.grid(row=0, column=0, sticky="nsew")

        ttk.Label(frm, text=f"Weight (minimum {floor:g})").grid(row=0, column=0, sticky="w")
        self.v_weight = tk.StringVar(value=f"{participant.weight:g}")
        ttk.Spinbox(
            frm, textvariable=self.v_weight, from_=floor, to=100.0, increment=0.1, width=10
        ).grid(row=0, column=1, sticky="w", padx=(6, 0))

        btns = ttk.Frame(frm)
        btns.grid(row=1, column=0, columnspan=2, sticky="e", pady=(10, 0))
        ttk.Button(btns, text="OK", command=self._ok).grid(row=0, column=0, padx=4)
        ttk.Button(btns, text="Cancel", command=self._cancel).grid(row=0, column=1, padx=4)

        self.bind("<Return>", lambda _e: self._ok())
        self.grab_set()
        self.transient(master)

    def _ok(self):
        """Apply weight (clamped to the floor) and close"""
        weight = safe_float(self.v_weight.get(), None)
        if weight is None:
            messagebox.showerror("Invalid weight", "Weight must be a number.", parent=self)
            return
        try:
            self.result = self.session.update_weight(self.participant.name, weight)
        except InvalidWeight as ex:
            messagebox.showerror("Invalid weight", str(ex), parent=self)
            return
        self.destroy()

    def _cancel(self):
        """Cancel and close"""
        self.result = None
        self.destroy()


class ExpenseDialog(tk.Toplevel):
    """Dialog for adding an expense"""

    def __init__(self, master, session: SplitSession):
        super().__init__(master)
        self.title("Add Expense")
        self.resizable(False, False)
        self.session = session
        self.result: Optional[Expense] = None

        self._bind_enter_to_ok()

        people = session.participant_names()
        last = session.last_payer

        frm = ttk.Frame(self, padding=10)
        frm.grid(row=0, column=0, sticky="nsew")

        self.v_payer = tk.StringVar(value=last if last in people else (people[0] if people else ""))
        self.v_amount = tk.StringVar(value="")
        self.v_description = tk.StringVar(value="")

        r = 0
        ttk.Label(frm, text="Paid by").grid(row=r, column=0, sticky="w", pady=2)
        ttk.Combobox(frm, textvariable=self.v_payer, values=people,
                     width=16, state="readonly").grid(row=r, column=1, sticky="w")
        r += 1

        ttk.Label(frm, text=f"Amount ({session.settings.currency_symbol})").grid(row=r, column=0, sticky="w", pady=2)
        ttk.Entry(frm, textvariable=self.v_amount, width=18).grid(row=r, column=1, sticky="w")
        r += 1

        ttk.Label(frm, text="Description").grid(row=r, column=0, sticky="w", pady=2)
        ttk.Entry(frm, textvariable=self.v_description, width=28).grid(row=r, column=1, sticky="w")
        r += 1

        btns = ttk.Frame(frm)
        btns.grid(row=r, column=0, columnspan=2, sticky="e", pady=(10, 0))
        ttk.Button(btns, text="OK", command=self._ok).grid(row=0, column=0, padx=4)
        ttk.Button(btns, text="Cancel", command=self._cancel).grid(row=0, column=1, padx=4)

        self.grab_set()
        self.transient(master)

    def _bind_enter_to_ok(self):
        """Bind Enter/Return to OK"""

        def on_enter(event=None):
            self._ok()
            return "break"

        self.bind("<Return>", on_enter)
        self.bind("<KP_Enter>", on_enter)

    def _ok(self):
        """Validate and save expense"""
        if not self.v_payer.get():
            messagebox.showerror("Missing payer", "Please select who paid.", parent=self)
            return

        amt = safe_float(self.v_amount.get(), None)
        if amt is None:
            messagebox.showerror("Invalid amount", "Amount must be a number.", parent=self)
            return

        try:
            self.result = self.session.add_expense(self.v_payer.get(), amt, self.v_description.get())
        except (InvalidExpense, UnknownPayer) as ex:
            messagebox.showerror("Invalid expense", str(ex), parent=self)
            return

        self.session.last_payer = self.result.payer
        self.destroy()

    def _cancel(self):
        """Cancel and close"""
        self.result = None
        self.destroy()
