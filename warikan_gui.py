"""
Warikan Ledger GUI
- Register participants with a weight (their relative share of the total).
- Record who paid what for the group.
- Compute the transfers that settle everyone up, and export them to Excel.

Run:
  python warikan_gui.py

Dependencies:
  pip install openpyxl
(Tkinter ships with most Python distributions; on some Linux you may need: sudo apt-get install python3-tk)
"""
from __future__ import annotations
import logging

try:
    import tkinter as tk
except ModuleNotFoundError:
    tk = None

from config import get_default_settings


def main():
    """Main entry point for the application"""
    if tk is None:
        raise RuntimeError(
            'tkinter is not available. Install it (e.g., on Ubuntu: sudo apt-get install python3-tk) '
            'and re-run to use the GUI.'
        )

    settings = get_default_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from main_app import WarikanApp

    root = tk.Tk()
    WarikanApp(root, settings)
    root.mainloop()


if __name__ == "__main__":
    main()
