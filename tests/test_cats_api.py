from datetime import date

import asyncpg

from conftest import bearer

CAT_ROW = {
    "cat_id": 3,
    "cat_name": "Fluffy",
    "weight": 4.2,
    "filename": None,
    "birthdate": date(2020, 1, 1),
    "lat": 60.1,
    "lng": 24.9,
    "owner_id": 7,
    "owner_name": "alice",
}

CAT_FORM = {
    "cat_name": "Fluffy",
    "weight": "4.2",
    "birthdate": "2020-01-01",
    "lat": "60.1",
    "lng": "24.9",
}


def test_list_cats_embeds_owner_summary(client, fake_db):
    fake_db.rows = [CAT_ROW]

    resp = client.get("/cats")

    assert resp.status_code == 200
    cat = resp.json()[0]
    assert cat["owner"] == {"user_id": 7, "user_name": "alice"}
    assert cat["coords"] == {"lat": 60.1, "lng": 24.9}
    assert cat["birthdate"] == "2020-01-01"
    assert "JOIN users" in fake_db.last_call[0]


def test_list_cats_empty_is_not_found(client, fake_db):
    fake_db.rows = []

    resp = client.get("/cats")

    assert resp.status_code == 404
    assert resp.json() == {"message": "No cats found"}


def test_get_cat(client, fake_db):
    fake_db.row = CAT_ROW

    resp = client.get("/cats/3")

    assert resp.status_code == 200
    assert resp.json()["cat_name"] == "Fluffy"
    assert fake_db.last_call[1] == (3,)


def test_get_missing_cat(client, fake_db):
    resp = client.get("/cats/404")

    assert resp.status_code == 404
    assert resp.json() == {"message": "Cat not found"}


def test_get_cat_rejects_non_numeric_id(client, fake_db):
    resp = client.get("/cats/abc")

    assert resp.status_code == 400
    assert resp.json()["message"].endswith(": cat_id")
    assert fake_db.calls == []


def test_create_cat_forces_owner_to_caller(client, fake_db, user_headers):
    fake_db.row = {"cat_id": 12}

    resp = client.post("/cats", data={**CAT_FORM, "owner": "99"}, headers=user_headers)

    assert resp.status_code == 200
    assert resp.json() == {"message": "Cat added", "id": 12}
    sql, args = fake_db.last_call
    assert "point($6, $7)" in sql
    assert args[2] == 7
    assert args[3] is None
    assert args[4] == date(2020, 1, 1)
    assert args[5:] == (60.1, 24.9)


def test_create_cat_stores_uploaded_image(client, fake_db, user_headers, tmp_path):
    fake_db.row = {"cat_id": 13}

    resp = client.post(
        "/cats",
        data=CAT_FORM,
        files={"file": ("fluffy.png", b"\x89PNG fake", "image/png")},
        headers=user_headers,
    )

    assert resp.status_code == 200
    filename = fake_db.last_call[1][3]
    assert filename.endswith(".png")
    assert (tmp_path / "uploads" / filename).read_bytes() == b"\x89PNG fake"


def test_create_cat_rejects_non_image_upload(client, fake_db, user_headers):
    resp = client.post(
        "/cats",
        data=CAT_FORM,
        files={"file": ("notes.txt", b"meow", "text/plain")},
        headers=user_headers,
    )

    assert resp.status_code == 400
    assert resp.json() == {"message": "Unsupported file type '.txt': file"}
    assert fake_db.calls == []


def test_create_cat_rejects_oversized_upload(client, fake_db, user_headers, monkeypatch):
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "4")

    resp = client.post(
        "/cats",
        data=CAT_FORM,
        files={"file": ("fluffy.jpg", b"0123456789", "image/jpeg")},
        headers=user_headers,
    )

    assert resp.status_code == 413
    assert fake_db.calls == []


def test_create_cat_requires_token(client, fake_db):
    resp = client.post("/cats", data=CAT_FORM)

    assert resp.status_code == 403
    assert resp.json() == {"message": "token not valid"}


def test_create_cat_validation_messages_follow_field_order(client, fake_db, user_headers):
    resp = client.post(
        "/cats",
        data={**CAT_FORM, "cat_name": "F", "weight": "-1"},
        headers=user_headers,
    )

    assert resp.status_code == 400
    message = resp.json()["message"]
    assert message.index(": cat_name") < message.index(": weight")
    assert fake_db.calls == []


def test_non_admin_update_is_scoped_to_owner(client, fake_db, user_headers):
    resp = client.put("/cats/3", json={"cat_name": "Tom"}, headers=user_headers)

    assert resp.status_code == 200
    assert resp.json() == {"message": "Cat updated"}
    sql, args = fake_db.last_call
    assert sql == "UPDATE cats SET cat_name = $1 WHERE cat_id = $2 AND owner = $3"
    assert args == ("Tom", 3, 7)


def test_update_of_foreign_cat_looks_like_missing_cat(client, fake_db):
    fake_db.affected = 0

    not_owned = client.put("/cats/3", json={"cat_name": "Tom"}, headers=bearer(user_id=8))
    missing = client.put("/cats/999", json={"cat_name": "Tom"}, headers=bearer(user_id=8))

    assert not_owned.status_code == missing.status_code == 400
    assert not_owned.json() == missing.json() == {"message": "No cats updated or you do not have permission"}


def test_admin_update_skips_ownership_predicate(client, fake_db, admin_headers):
    resp = client.put(
        "/cats/3",
        json={"weight": 5.0, "coords": {"lat": 61.0, "lng": 25.0}},
        headers=admin_headers,
    )

    assert resp.status_code == 200
    sql, args = fake_db.last_call
    assert "owner" not in sql
    assert "coords = point($2, $3)" in sql
    assert args == (5.0, 61.0, 25.0, 3)


def test_empty_update_is_rejected(client, fake_db, user_headers):
    resp = client.put("/cats/3", json={}, headers=user_headers)

    assert resp.status_code == 400
    assert resp.json() == {"message": "No fields to update: body"}
    assert fake_db.calls == []


def test_delete_cat_is_not_owner_scoped(client, fake_db):
    # Caller 8 does not own cat 3; deletion still goes through.
    resp = client.delete("/cats/3", headers=bearer(user_id=8))

    assert resp.status_code == 200
    assert resp.json() == {"message": "Cat deleted"}
    sql, args = fake_db.last_call
    assert "owner" not in sql
    assert args == (3,)


def test_delete_missing_cat(client, fake_db, user_headers):
    fake_db.affected = 0

    resp = client.delete("/cats/3", headers=user_headers)

    assert resp.status_code == 400
    assert resp.json() == {"message": "No cats deleted"}


def test_driver_failure_is_generic_500(client, fake_db):
    fake_db.error = ConnectionRefusedError("db down")

    resp = client.get("/cats")

    assert resp.status_code == 500
    assert resp.json() == {"message": "Internal server error"}


def test_failed_insert_removes_stored_image(client, fake_db, user_headers, tmp_path):
    fake_db.error = asyncpg.ForeignKeyViolationError("owner missing")

    resp = client.post(
        "/cats",
        data=CAT_FORM,
        files={"file": ("fluffy.png", b"\x89PNG fake", "image/png")},
        headers=user_headers,
    )

    assert resp.status_code == 400
    assert resp.json() == {"message": "No cats added: owner does not exist"}
    assert list((tmp_path / "uploads").iterdir()) == []
