from conftest import csrf


def test_students_list_ok(auth_client):
    r = auth_client.get("/students")
    assert r.status_code == 200
    html = r.get_data(as_text=True)
    assert "Lina Saleh" in html
    assert "لينا صالح" in html


def test_students_delete_asks_for_confirmation(auth_client):
    r = auth_client.get("/students")
    assert "Are you sure you want to delete student ID 5?" in r.get_data(as_text=True)


def test_students_filters_passed_to_api(auth_client, api):
    auth_client.get("/students?fullName=Lina&email=")
    filters = api.called("list_students")[0]
    assert filters["fullName"] == "Lina"
    assert filters["email"] == ""


def test_students_list_api_failure(auth_client, api):
    api.failing.add("list_students")
    r = auth_client.get("/students")
    assert b"Failed to fetch students. Please try again." in r.data


def test_student_create(auth_client, api):
    r = auth_client.post(
        "/students/new",
        data={
            "csrf_token": csrf(auth_client),
            "fullName": "Nour Ali",
            "fullNameInArabic": "نور علي",
            "address": "Zarqa",
            "email": "nour@example.com",
            "phoneNumber": "0784444444",
        },
    )
    assert r.status_code == 302
    assert api.called("save_student") == [
        {
            "studentID": 0,
            "fullName": "Nour Ali",
            "fullNameInArabic": "نور علي",
            "address": "Zarqa",
            "email": "nour@example.com",
            "phoneNumber": "0784444444",
            "isUpdate": False,
        }
    ]


def test_student_edit_prefills_form(auth_client):
    r = auth_client.get("/students/6/edit")
    assert r.status_code == 200
    assert 'value="Sami Nasser"' in r.get_data(as_text=True)


def test_student_save_failure_message(auth_client, api):
    api.failing.add("save_student")
    r = auth_client.post("/students/6/edit", data={"csrf_token": csrf(auth_client), "fullName": "Sami"})
    assert r.status_code == 502
    assert b"Failed to save student. Please check the details and try again." in r.data


def test_student_delete_keeps_filters(auth_client, api):
    r = auth_client.post("/students/5/delete?fullName=Lina", data={"csrf_token": csrf(auth_client)})
    assert r.status_code == 302
    assert "fullName=Lina" in r.headers["Location"]
    assert api.called("delete_student") == [5]
