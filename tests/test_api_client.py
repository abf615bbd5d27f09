import json

import pytest
import requests

from app.academy.api_client import AcademyApiClient, AcademyApiError, AcademyApiUnavailable


class FakeResponse:
    def __init__(self, status_code=200, body=None, content=None, headers=None):
        self.status_code = status_code
        self.ok = 200 <= status_code < 400
        if content is None:
            content = b"" if body is None else json.dumps(body).encode("utf-8")
        self.content = content
        self.headers = headers or {}

    def json(self):
        return json.loads(self.content.decode("utf-8"))


class FakeSession:
    def __init__(self, *responses, error=None):
        self.responses = list(responses)
        self.error = error
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


def _client(*responses, error=None):
    session = FakeSession(*responses, error=error)
    return AcademyApiClient(base_url="https://api.example.test/", timeout_seconds=5, session=session), session


def test_login_true_only_for_literal_true():
    api, session = _client(FakeResponse(body=True))
    assert api.login("a@example.com", "pw") is True
    method, url, kwargs = session.requests[0]
    assert (method, url) == ("POST", "https://api.example.test/api/Login/UserLogin")
    assert kwargs["json"] == {"email": "a@example.com", "password": "pw"}
    assert kwargs["timeout"] == 5

    api, _ = _client(FakeResponse(body="true"))
    assert api.login("a@example.com", "pw") is False


def test_error_status_carries_api_message():
    api, _ = _client(FakeResponse(status_code=400, body={"message": "Account locked"}))
    with pytest.raises(AcademyApiError) as exc:
        api.login("a@example.com", "pw")
    assert exc.value.status_code == 400
    assert exc.value.api_message == "Account locked"


def test_unreachable_raises_unavailable():
    api, _ = _client(error=requests.ConnectionError("refused"))
    with pytest.raises(AcademyApiUnavailable):
        api.list_instructors()


def test_invalid_json_is_an_api_error():
    api, _ = _client(FakeResponse(content=b"<html>oops</html>"))
    with pytest.raises(AcademyApiError):
        api.get_dashboard_statistics()


def test_list_filters_drop_blank_values():
    api, session = _client(FakeResponse(body=[{"courseID": 1}]))
    rows = api.list_courses({"search": "py", "fee": "", "instructorId": None})
    assert rows == [{"courseID": 1}]
    method, url, kwargs = session.requests[0]
    assert (method, url) == ("POST", "https://api.example.test/api/Course/GetCourses")
    assert kwargs["json"] == {"search": "py"}


def test_revenue_list_unwraps_data_envelope():
    api, _ = _client(FakeResponse(body={"data": [{"revenueID": 1}, "junk"]}))
    assert api.list_revenues({}) == [{"revenueID": 1}]


def test_expense_list_accepts_bare_array():
    api, session = _client(FakeResponse(body=[{"expenseID": 4}]))
    assert api.list_expenses({"sortOrder": "asc"}) == [{"expenseID": 4}]
    assert session.requests[0][2]["json"] == {"sortOrder": "asc"}


def test_delete_uses_id_in_path():
    api, session = _client(FakeResponse(status_code=200))
    api.delete_student(5)
    method, url, _ = session.requests[0]
    assert (method, url) == ("DELETE", "https://api.example.test/api/Student/DeleteStudent/5")


def test_upload_returns_uuid():
    api, session = _client(FakeResponse(body={"uuid": "abc-123"}))
    assert api.upload_file("r.pdf", b"data", "application/pdf") == "abc-123"
    method, url, kwargs = session.requests[0]
    assert (method, url) == ("POST", "https://api.example.test/api/File/Upload")
    assert kwargs["files"] == {"file": ("r.pdf", b"data", "application/pdf")}


def test_upload_without_uuid_fails():
    api, _ = _client(FakeResponse(body={}))
    with pytest.raises(AcademyApiError):
        api.upload_file("r.pdf", b"data")


def test_download_and_view_return_bytes_and_type():
    api, session = _client(
        FakeResponse(content=b"PDFDATA", headers={"Content-Type": "application/pdf"}),
        FakeResponse(content=b"IMG"),
    )
    assert api.download_file("a b.pdf") == (b"PDFDATA", "application/pdf")
    assert api.view_file("x.png") == (b"IMG", "application/octet-stream")
    assert session.requests[0][1] == "https://api.example.test/api/File/Download/a%20b.pdf"
    assert session.requests[1][1] == "https://api.example.test/api/File/View/x.png"


def test_file_name_slashes_stay_in_one_path_segment():
    api, session = _client(FakeResponse(content=b"x"))
    api.download_file("../Delete/receipt.pdf")
    assert session.requests[0][1] == "https://api.example.test/api/File/Download/..%2FDelete%2Freceipt.pdf"
