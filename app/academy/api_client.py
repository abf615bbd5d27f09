from __future__ import annotations

import logging
import urllib.parse
from dataclasses import dataclass, field
from typing import Any

import requests
from flask import Flask

from app.academy.utils import active_filters

logger = logging.getLogger(__name__)


class AcademyApiError(RuntimeError):
    """Any failed call to the academy API (bad status, bad body)."""

    def __init__(self, message: str, *, status_code: int | None = None, path: str | None = None, api_message: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.path = path
        # Human-readable message from the API body, when it sent one.
        self.api_message = api_message


class AcademyApiUnavailable(AcademyApiError):
    """The API could not be reached at all (DNS, refused, timeout)."""


def _body_message(resp: requests.Response) -> str | None:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        msg = body.get("message") or body.get("title")
        return str(msg) if msg else None
    return None


def _as_list(data: Any) -> list[dict[str, Any]]:
    """List endpoints answer with either a bare array or a {"data": [...]} envelope."""
    if isinstance(data, dict):
        data = data.get("data")
    if not isinstance(data, list):
        return []
    return [row for row in data if isinstance(row, dict)]


@dataclass
class AcademyApiClient:
    base_url: str
    timeout_seconds: float = 30
    session: requests.Session = field(default_factory=requests.Session)

    # ---------- transport ----------
    def _url(self, path: str) -> str:
        return self.base_url.rstrip("/") + path

    def _send(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        try:
            resp = self.session.request(method, self._url(path), timeout=self.timeout_seconds, **kwargs)
        except requests.RequestException as e:
            logger.warning("Academy API %s %s unreachable: %s", method, path, e)
            raise AcademyApiUnavailable(f"{method} {path} failed: {e}", path=path) from e
        if not resp.ok:
            api_message = _body_message(resp)
            logger.warning("Academy API %s %s returned HTTP %s (%s)", method, path, resp.status_code, api_message or "no message")
            raise AcademyApiError(
                f"HTTP {resp.status_code} from academy API ({path})",
                status_code=resp.status_code,
                path=path,
                api_message=api_message,
            )
        return resp

    def request_json(self, method: str, path: str, *, json: Any = None, **kwargs: Any) -> Any:
        headers = {"Accept": "application/json", **kwargs.pop("headers", {})}
        resp = self._send(method, path, json=json, headers=headers, **kwargs)
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            logger.warning("Academy API %s %s returned a non-JSON body", method, path)
            raise AcademyApiError(f"Invalid JSON from academy API ({path})", status_code=resp.status_code, path=path) from e

    def _fetch_file(self, kind: str, file_name: str) -> tuple[bytes, str]:
        path = f"/api/File/{kind}/{urllib.parse.quote(file_name, safe='')}"
        resp = self._send("GET", path)
        return resp.content, resp.headers.get("Content-Type") or "application/octet-stream"

    # ---------- auth ----------
    def login(self, email: str, password: str) -> bool:
        """True only when the API answers with a literal `true`."""
        data = self.request_json(
            "POST",
            "/api/Login/UserLogin",
            json={"email": email, "password": password},
            headers={"Accept": "*/*"},
        )
        return data is True

    # ---------- dashboard ----------
    def get_dashboard_statistics(self) -> dict[str, Any] | None:
        data = self.request_json("GET", "/api/Dashboard/GetDashboardStatistics")
        return data if isinstance(data, dict) else None

    # ---------- instructors ----------
    def list_instructors(self) -> list[dict[str, Any]]:
        return _as_list(self.request_json("GET", "/api/Instructor/GetInstructors"))

    def save_instructor(self, payload: dict[str, Any]) -> Any:
        return self.request_json("POST", "/api/Instructor/AddOrUpdateInstructor", json=payload)

    def delete_instructor(self, instructor_id: int) -> None:
        self.request_json("DELETE", f"/api/Instructor/DeleteInstructor/{int(instructor_id)}")

    # ---------- courses ----------
    def list_courses(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        return _as_list(self.request_json("POST", "/api/Course/GetCourses", json=active_filters(filters or {})))

    def save_course(self, payload: dict[str, Any]) -> Any:
        return self.request_json("POST", "/api/Course/AddOrUpdateCourse", json=payload)

    def delete_course(self, course_id: int) -> None:
        self.request_json("DELETE", f"/api/Course/DeleteCourse/{int(course_id)}")

    # ---------- students ----------
    def list_students(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        return _as_list(self.request_json("POST", "/api/Student/GetStudentsByFilter", json=active_filters(filters or {})))

    def save_student(self, payload: dict[str, Any]) -> Any:
        return self.request_json("POST", "/api/Student/AddOrUpdateStudent", json=payload)

    def delete_student(self, student_id: int) -> None:
        self.request_json("DELETE", f"/api/Student/DeleteStudent/{int(student_id)}")

    # ---------- payments ----------
    def list_payments(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        return _as_list(self.request_json("POST", "/api/Payment/GetPaymentsByFilter", json=active_filters(filters or {})))

    def save_payment(self, payload: dict[str, Any]) -> Any:
        return self.request_json("POST", "/api/Payment/AddOrUpdatePayment", json=payload)

    def delete_payment(self, payment_id: int) -> None:
        self.request_json("DELETE", f"/api/Payment/DeletePayment/{int(payment_id)}")

    # ---------- files (payment receipts) ----------
    def upload_file(self, filename: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        """Upload a receipt and return the file id (`uuid`) the API assigned to it."""
        resp = self._send("POST", "/api/File/Upload", files={"file": (filename, data, content_type)})
        try:
            body = resp.json()
        except ValueError as e:
            raise AcademyApiError("Invalid JSON from academy API (/api/File/Upload)", path="/api/File/Upload") from e
        file_id = body.get("uuid") if isinstance(body, dict) else None
        if not file_id:
            raise AcademyApiError("Upload response did not include a file id", path="/api/File/Upload")
        return str(file_id)

    def download_file(self, file_name: str) -> tuple[bytes, str]:
        return self._fetch_file("Download", file_name)

    def view_file(self, file_name: str) -> tuple[bytes, str]:
        return self._fetch_file("View", file_name)

    # ---------- revenues ----------
    def list_revenues(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        return _as_list(self.request_json("POST", "/api/Revenue/GetRevenues", json=active_filters(filters or {})))

    def save_revenue(self, payload: dict[str, Any]) -> Any:
        return self.request_json("POST", "/api/Revenue/AddOrUpdateRevenue", json=payload)

    def delete_revenue(self, revenue_id: int) -> None:
        self.request_json("DELETE", f"/api/Revenue/DeleteRevenue/{int(revenue_id)}")

    # ---------- expenses ----------
    def list_expenses(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        return _as_list(self.request_json("POST", "/api/Expense/GetExpenses", json=active_filters(filters or {})))

    def save_expense(self, payload: dict[str, Any]) -> Any:
        return self.request_json("POST", "/api/Expense/AddOrUpdateExpense", json=payload)

    def delete_expense(self, expense_id: int) -> None:
        self.request_json("DELETE", f"/api/Expense/DeleteExpense/{int(expense_id)}")


def init_api_client(app: Flask) -> None:
    app.extensions["academy_api"] = AcademyApiClient(
        base_url=app.config["ACADEMY_API_BASE_URL"],
        timeout_seconds=float(app.config.get("ACADEMY_API_TIMEOUT") or 30),
    )


def api_client(app: Flask | None = None) -> AcademyApiClient:
    """The app-wide client. Tests swap `app.extensions["academy_api"]` for a fake."""
    if app is None:
        from flask import current_app

        app = current_app
    return app.extensions["academy_api"]
