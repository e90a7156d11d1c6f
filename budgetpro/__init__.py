"""Top‑level package for BudgetPro, a personal budget tracker.

The primary modules are:

* ``csv_codec`` – CSV import/export of transactions
* ``normalizer`` – validation of imported rows into transaction drafts
* ``reconciliation`` – budget-vs-actual reports for a calendar month
* ``goals`` – budget-goal and savings-goal progress and deadlines
* ``summary`` – dashboard totals and breakdowns
* ``state`` – the session state and the coordinator that mutates it
* ``dashboard`` – a Streamlit app that ties everything together

To run the dashboard from the command line you can execute:

```bash
streamlit run budgetpro/dashboard.py
```
"""

from .csv_codec import MalformedInput, decode_csv, encode_csv
from .normalizer import ImportResult, RowRejected
from .state import AppState, BudgetTracker

__all__ = [
    "AppState",
    "BudgetTracker",
    "ImportResult",
    "MalformedInput",
    "RowRejected",
    "decode_csv",
    "encode_csv",
]
