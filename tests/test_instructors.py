from conftest import csrf


def test_instructors_list_requires_auth(client):
    r = client.get("/instructors")
    assert r.status_code == 302


def test_instructors_list_ok(auth_client):
    r = auth_client.get("/instructors")
    assert r.status_code == 200
    html = r.get_data(as_text=True)
    for header in ("ID", "First Name", "Last Name", "Email", "Phone"):
        assert header in html
    assert "rana@example.com" in html


def test_instructors_list_api_failure(auth_client, api):
    api.failing.add("list_instructors")
    r = auth_client.get("/instructors")
    assert r.status_code == 200
    assert b"Failed to fetch instructors. Please try again." in r.data


def test_instructor_create(auth_client, api):
    r = auth_client.post(
        "/instructors/new",
        data={
            "csrf_token": csrf(auth_client),
            "firstName": " Huda ",
            "lastName": "Aziz",
            "email": "huda@example.com",
            "phoneNumber": "0793333333",
        },
    )
    assert r.status_code == 302
    assert api.called("save_instructor") == [
        {
            "instructorID": 0,
            "firstName": "Huda",
            "lastName": "Aziz",
            "email": "huda@example.com",
            "phoneNumber": "0793333333",
            "isUpdate": False,
        }
    ]


def test_instructor_edit_prefills_form(auth_client):
    r = auth_client.get("/instructors/2/edit")
    assert r.status_code == 200
    assert b'value="Omar"' in r.data


def test_instructor_edit_unknown_id_redirects(auth_client):
    r = auth_client.get("/instructors/999/edit")
    assert r.status_code == 302


def test_instructor_update_sends_is_update(auth_client, api):
    auth_client.post(
        "/instructors/2/edit",
        data={"csrf_token": csrf(auth_client), "firstName": "Omar", "lastName": "K", "email": "", "phoneNumber": ""},
    )
    payload = api.called("save_instructor")[0]
    assert payload["instructorID"] == 2
    assert payload["isUpdate"] is True


def test_instructor_validation_errors(auth_client, api):
    r = auth_client.post("/instructors/new", data={"csrf_token": csrf(auth_client), "firstName": "", "lastName": ""})
    assert r.status_code == 400
    assert b"First name is required." in r.data
    assert api.called("save_instructor") == []


def test_instructor_save_failure(auth_client, api):
    api.failing.add("save_instructor")
    r = auth_client.post(
        "/instructors/new",
        data={"csrf_token": csrf(auth_client), "firstName": "A", "lastName": "B", "email": "", "phoneNumber": ""},
    )
    assert r.status_code == 502
    assert b"Failed to save instructor. Please try again." in r.data


def test_instructor_delete(auth_client, api):
    r = auth_client.post("/instructors/1/delete", data={"csrf_token": csrf(auth_client)}, follow_redirects=True)
    assert r.status_code == 200
    assert api.called("delete_instructor") == [1]
    assert b"Instructor deleted." in r.data


def test_instructor_delete_failure(auth_client, api):
    api.failing.add("delete_instructor")
    r = auth_client.post("/instructors/1/delete", data={"csrf_token": csrf(auth_client)}, follow_redirects=True)
    assert b"Failed to delete instructor. Please try again." in r.data
