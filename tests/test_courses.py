from conftest import csrf


def test_courses_list_ok(auth_client):
    r = auth_client.get("/courses")
    assert r.status_code == 200
    html = r.get_data(as_text=True)
    for header in ("ID", "Course Name", "Description", "Price", "Start Date", "End Date", "Instructor"):
        assert header in html
    assert "$150" in html
    assert "2025-03-01" in html
    assert "T00:00:00" not in html
    # Instructor filter dropdown comes from the instructors list
    assert "Rana Haddad" in html


def test_courses_filters_passed_to_api(auth_client, api):
    auth_client.get("/courses?search=py&fee=&instructorId=1&month=3&year=2025")
    assert api.called("list_courses")[0] == {
        "search": "py",
        "fee": "",
        "startDate": "",
        "endDate": "",
        "instructorId": "1",
        "month": "3",
        "year": "2025",
    }


def test_courses_bad_month_is_reported(auth_client, api):
    r = auth_client.get("/courses?month=13")
    assert b"Month must be between 1 and 12." in r.data
    assert api.called("list_courses") == []


def test_courses_list_api_failure(auth_client, api):
    api.failing.add("list_courses")
    r = auth_client.get("/courses")
    assert b"Failed to fetch courses. Please try again." in r.data


def test_course_create_coerces_empty_fee(auth_client, api):
    r = auth_client.post(
        "/courses/new",
        data={
            "csrf_token": csrf(auth_client),
            "courseName": "Web Dev",
            "courseDescription": "HTML and CSS",
            "courseFee": "",
            "startDate": "2025-09-01",
            "endDate": "2025-12-01",
            "instructorID": "2",
        },
    )
    assert r.status_code == 302
    payload = api.called("save_course")[0]
    assert payload == {
        "courseID": 0,
        "courseName": "Web Dev",
        "courseDescription": "HTML and CSS",
        "courseFee": 0,
        "startDate": "2025-09-01",
        "endDate": "2025-12-01",
        "instructorID": 2,
        "isUpdate": False,
    }


def test_course_edit_trims_dates(auth_client):
    r = auth_client.get("/courses/10/edit")
    assert r.status_code == 200
    html = r.get_data(as_text=True)
    assert 'value="2025-03-01"' in html
    assert 'value="2025-05-01"' in html


def test_course_update(auth_client, api):
    auth_client.post(
        "/courses/10/edit",
        data={
            "csrf_token": csrf(auth_client),
            "courseName": "Python Basics",
            "courseFee": "175.5",
            "startDate": "2025-03-01",
            "endDate": "2025-05-01",
            "instructorID": "1",
        },
    )
    payload = api.called("save_course")[0]
    assert payload["courseID"] == 10
    assert payload["courseFee"] == 175.5
    assert payload["isUpdate"] is True


def test_course_invalid_date_is_rejected(auth_client, api):
    r = auth_client.post(
        "/courses/new",
        data={"csrf_token": csrf(auth_client), "courseName": "X", "startDate": "2025-02-30"},
    )
    assert r.status_code == 400
    assert b"Start date must be a valid date" in r.data
    assert api.called("save_course") == []


def test_course_save_failure(auth_client, api):
    api.failing.add("save_course")
    r = auth_client.post("/courses/new", data={"csrf_token": csrf(auth_client), "courseName": "X"})
    assert r.status_code == 502
    assert b"Failed to save course. Please try again." in r.data


def test_course_delete(auth_client, api):
    r = auth_client.post("/courses/11/delete", data={"csrf_token": csrf(auth_client)})
    assert r.status_code == 302
    assert api.called("delete_course") == [11]
