"""CSV export of transactions."""

from collections.abc import Iterable

import pandas as pd

from budgetbook.core.formatting import format_date
from budgetbook.core.models import Category, Transaction

EXPORT_COLUMNS = ["date", "type", "category", "description", "amount", "tags", "notes"]


def export_transactions_csv(transactions: Iterable[Transaction], categories: Iterable[Category]) -> str:
    """Render transactions as CSV, naming each category by its label.

    Transactions whose category is missing from the catalog keep the raw category id.
    """
    labels = {cat.id: cat.label for cat in categories}
    rows = [
        {
            "date": format_date(tx.date),
            "type": tx.type.value,
            "category": labels.get(tx.category_id, tx.category_id),
            "description": tx.description,
            "amount": tx.amount,
            "tags": ";".join(tx.tags),
            "notes": tx.notes or "",
        }
        for tx in transactions
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS).to_csv(index=False)
