"""
Enumerations shared with the academy API.

The API speaks in integer codes; tables show the names it returns alongside.
"""
from __future__ import annotations

CURRENCIES = {1: "USD", 2: "JOD"}

PAYMENT_METHODS = {1: "CliQ", 2: "PayPal", 3: "Cash", 4: "CreditCard"}

REVENUE_TYPES = {1: "Course", 2: "Event", 3: "Activity"}

EXPENSE_TYPES = {1: "Instructor", 2: "Marketing", 3: "Profit", 4: "Operational"}

# Revenue/expense type whose relatedEntityID points at a course or instructor.
RELATED_ENTITY_TYPE = 1

SORT_ORDERS = ("asc", "desc")


def currency_code(name: str | None) -> int:
    """USD maps to 1; any other currency name is treated as JOD."""
    return 1 if (name or "").strip().upper() == "USD" else 2


def payment_method_code(name: str | None) -> int:
    """Map a payment method name back to its code. Unknown names fall back to CreditCard."""
    wanted = (name or "").strip()
    for code, label in PAYMENT_METHODS.items():
        if label == wanted:
            return code
    return 4
