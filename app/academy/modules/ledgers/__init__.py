"""
Revenues and expenses.

Both are ledgers of typed, dated amounts in USD or JOD with an optional
related course (revenues) or instructor (expenses). One set of views serves
both; `Ledger` carries the field names and wording that differ.
"""
