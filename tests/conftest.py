from __future__ import annotations

import copy
from typing import Any

import pytest

from app.academy import create_app
from app.academy.api_client import AcademyApiError, AcademyApiUnavailable
from app.academy.models import Base


class FakeAcademyApi:
    """
    In-memory stand-in for AcademyApiClient.

    Every call is recorded in `calls`; names listed in `failing` raise
    AcademyApiError and `unavailable` makes every call raise AcademyApiUnavailable.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.failing: set[str] = set()
        self.unavailable = False
        self.login_error: AcademyApiError | None = None
        self.dashboard: dict[str, Any] | None = None
        self.instructors: list[dict[str, Any]] = [
            {"instructorID": 1, "firstName": "Rana", "lastName": "Haddad", "email": "rana@example.com", "phoneNumber": "0790000001"},
            {"instructorID": 2, "firstName": "Omar", "lastName": "Khalil", "email": "omar@example.com", "phoneNumber": "0790000002"},
        ]
        self.courses: list[dict[str, Any]] = [
            {
                "courseID": 10,
                "courseName": "Python Basics",
                "courseDescription": "Intro course",
                "courseFee": 150,
                "startDate": "2025-03-01T00:00:00",
                "endDate": "2025-05-01T00:00:00",
                "instructorID": 1,
                "instructorName": "Rana Haddad",
            },
            {
                "courseID": 11,
                "courseName": "Data Science",
                "courseDescription": "",
                "courseFee": 300,
                "startDate": "2025-06-01T00:00:00",
                "endDate": "2025-08-01T00:00:00",
                "instructorID": 2,
                "instructorName": "Omar Khalil",
            },
        ]
        self.students: list[dict[str, Any]] = [
            {"studentID": 5, "fullName": "Lina Saleh", "fullNameInArabic": "لينا صالح", "address": "Amman", "email": "lina@example.com", "phoneNumber": "0781111111"},
            {"studentID": 6, "fullName": "Sami Nasser", "fullNameInArabic": "سامي ناصر", "address": "Irbid", "email": "sami@example.com", "phoneNumber": "0782222222"},
        ]
        self.payments: list[dict[str, Any]] = [
            {
                "paymentID": 100,
                "studentName": "Lina Saleh",
                "amount": 150,
                "paymentDate": "2025-03-02T00:00:00",
                "paymentMethodName": "Cash",
                "currencyName": "JOD",
                "fileID": "f-100",
                "fileName": "f-100.pdf",
                "courseName": "Python Basics",
            },
        ]
        self.revenues: list[dict[str, Any]] = [
            {
                "revenueID": 1,
                "amount": 200,
                "revenueDate": "2025-03-01T00:00:00",
                "description": "Spring cohort",
                "relatedEntityID": 10,
                "RevenueTypeId": 1,
                "revenueTypeName": "Course",
                "currency": 2,
                "currencyName": "JOD",
                "relatedEntityName": "Python Basics",
            },
            {
                "revenueID": 2,
                "amount": 50,
                "revenueDate": "2025-04-01T00:00:00",
                "description": "Open day",
                "relatedEntityID": None,
                "RevenueTypeId": 2,
                "revenueTypeName": "Event",
                "currency": 1,
                "currencyName": "USD",
                "relatedEntityName": None,
            },
        ]
        self.expenses: list[dict[str, Any]] = [
            {
                "expenseID": 1,
                "amount": 80,
                "expenseDate": "2025-03-05T00:00:00",
                "description": "Ads",
                "relatedEntityID": None,
                "expenseTypeId": 2,
                "expenseTypeName": "Marketing",
                "currency": 1,
                "currencyName": "USD",
                "relatedEntityName": None,
            },
        ]
        self.files: dict[str, tuple[bytes, str]] = {"f-100.pdf": (b"%PDF-1.4 receipt", "application/pdf")}
        self.uploads: list[tuple[str, bytes, str]] = []

    def _call(self, name: str, arg: Any = None) -> None:
        self.calls.append((name, copy.deepcopy(arg)))
        if self.unavailable:
            raise AcademyApiUnavailable(f"{name} failed: connection refused")
        if name in self.failing:
            raise AcademyApiError(f"HTTP 500 from academy API ({name})", status_code=500, path=name)

    def called(self, name: str) -> list[Any]:
        return [arg for n, arg in self.calls if n == name]

    # ---------- auth / dashboard ----------
    def login(self, email: str, password: str) -> bool:
        self._call("login", {"email": email})
        if self.login_error is not None:
            raise self.login_error
        return email == "admin@example.com" and password == "pw"

    def get_dashboard_statistics(self):
        self._call("get_dashboard_statistics")
        return self.dashboard

    # ---------- lists ----------
    def list_instructors(self):
        self._call("list_instructors")
        return copy.deepcopy(self.instructors)

    def list_courses(self, filters=None):
        self._call("list_courses", filters)
        return copy.deepcopy(self.courses)

    def list_students(self, filters=None):
        self._call("list_students", filters)
        return copy.deepcopy(self.students)

    def list_payments(self, filters=None):
        self._call("list_payments", filters)
        return copy.deepcopy(self.payments)

    def list_revenues(self, filters=None):
        self._call("list_revenues", filters)
        return copy.deepcopy(self.revenues)

    def list_expenses(self, filters=None):
        self._call("list_expenses", filters)
        return copy.deepcopy(self.expenses)

    # ---------- saves / deletes ----------
    def save_instructor(self, payload):
        self._call("save_instructor", payload)

    def delete_instructor(self, instructor_id):
        self._call("delete_instructor", instructor_id)

    def save_course(self, payload):
        self._call("save_course", payload)

    def delete_course(self, course_id):
        self._call("delete_course", course_id)

    def save_student(self, payload):
        self._call("save_student", payload)

    def delete_student(self, student_id):
        self._call("delete_student", student_id)

    def save_payment(self, payload):
        self._call("save_payment", payload)

    def delete_payment(self, payment_id):
        self._call("delete_payment", payment_id)

    def save_revenue(self, payload):
        self._call("save_revenue", payload)

    def delete_revenue(self, revenue_id):
        self._call("delete_revenue", revenue_id)

    def save_expense(self, payload):
        self._call("save_expense", payload)

    def delete_expense(self, expense_id):
        self._call("delete_expense", expense_id)

    # ---------- files ----------
    def upload_file(self, filename, data, content_type="application/octet-stream"):
        self._call("upload_file", filename)
        self.uploads.append((filename, data, content_type))
        return "new-uuid"

    def download_file(self, file_name):
        self._call("download_file", file_name)
        if file_name not in self.files:
            raise AcademyApiError("HTTP 404 from academy API", status_code=404, path=file_name)
        return self.files[file_name]

    def view_file(self, file_name):
        self._call("view_file", file_name)
        if file_name not in self.files:
            raise AcademyApiError("HTTP 404 from academy API", status_code=404, path=file_name)
        return self.files[file_name]


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    for k in ("ACADEMY_API_BASE_URL", "BRAND_LOGO_PATH", "RECEIPT_BACKGROUND_PATH"):
        monkeypatch.delenv(k, raising=False)

    app = create_app()
    app.config["TESTING"] = True

    engine = app.extensions["sqlalchemy_engine"]
    Base.metadata.create_all(bind=engine)

    app.extensions["academy_api"] = FakeAcademyApi()
    return app


@pytest.fixture()
def api(app) -> FakeAcademyApi:
    return app.extensions["academy_api"]


@pytest.fixture()
def client(app):
    return app.test_client()


def login(client, email: str = "admin@example.com", password: str = "pw"):
    return client.post("/auth/login", data={"email": email, "password": password}, follow_redirects=False)


def csrf(client) -> str:
    with client.session_transaction() as sess:
        sess.setdefault("csrf_token", "test-csrf-token")
        return sess["csrf_token"]


@pytest.fixture()
def auth_client(client):
    r = login(client)
    assert r.status_code == 302
    return client
