"""
Shape the dashboard statistics payload into what the page renders.

Chart datasets are emitted in Chart.js form ({labels, datasets}) so the
template can hand them straight to the browser.
"""
from __future__ import annotations

from typing import Any

REVENUE_COLORS = ["#36A2EB", "#4BC0C0"]
EXPENSE_COLORS = ["#FF6384", "#FF9F40"]
NET_PROFIT_COLORS = ["#9966FF", "#C9CBCF"]
TOP_STUDENTS_LIMIT = 3


def _rows(stats: dict[str, Any], key: str) -> list[dict[str, Any]]:
    value = stats.get(key)
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


def _dataset(label: str, values: list[Any], colors: list[str]) -> dict[str, Any]:
    return {"label": label, "data": values, "backgroundColor": colors}


def revenue_chart(stats: dict[str, Any]) -> dict[str, Any]:
    rows = _rows(stats, "totalRevenues")
    return {
        "labels": [r.get("currency") for r in rows],
        "datasets": [_dataset("Total Revenues", [r.get("totalRevenue") or 0 for r in rows], REVENUE_COLORS)],
    }


def expense_chart(stats: dict[str, Any]) -> dict[str, Any]:
    rows = _rows(stats, "totalExpenses")
    return {
        "labels": [r.get("currency") for r in rows],
        "datasets": [_dataset("Total Expenses", [r.get("totalExpenses") or 0 for r in rows], EXPENSE_COLORS)],
    }


def net_profit_chart(stats: dict[str, Any]) -> dict[str, Any]:
    net = stats.get("netProfit") if isinstance(stats.get("netProfit"), dict) else {}
    return {
        "labels": ["USD", "JOD"],
        "datasets": [
            _dataset("Net Profit", [net.get("netProfitUSD") or 0, net.get("netProfitJOD") or 0], NET_PROFIT_COLORS)
        ],
    }


def build_dashboard(stats: dict[str, Any]) -> dict[str, Any]:
    return {
        "charts": {
            "revenues": revenue_chart(stats),
            "expenses": expense_chart(stats),
            "net_profit": net_profit_chart(stats),
        },
        "total_students": stats.get("totalStudents") or 0,
        "total_active_courses": stats.get("totalActiveCourses") or 0,
        "total_payments": stats.get("totalPayments") or 0,
        "total_payments_amount": _rows(stats, "totalPaymentsAmount"),
        "latest_payments": _rows(stats, "latestPayments"),
        "latest_expenses": _rows(stats, "latestExpenses"),
        "latest_revenues": _rows(stats, "latestRevenues"),
        "top_students": _rows(stats, "topStudents")[:TOP_STUDENTS_LIMIT],
    }
