"""
Tests for admin student management
"""

from sqlalchemy import select

from upskillnow.models import User, UserRole
from tests.conftest import make_user

BASE = "/api/admin/users"


def _student_payload(**overrides):
    payload = {
        "name": "Riya Patel",
        "email": "riya@example.com",
        "password": "longenough",
        "stream": "IT",
        "year": "FY",
        "mobile": "9876543210",
        "division": "A",
        "gender": "female",
    }
    payload.update(overrides)
    return payload


def _delete(client, url, ids):
    return client.request("DELETE", url, json={"ids": ids})


class TestCreateAndRead:
    def test_create_student(self, admin_client):
        response = admin_client.post(f"{BASE}/", json=_student_payload(role="admin"))

        assert response.status_code == 201
        student = response.json()["student"]
        assert student["role"] == "student"
        assert student["stream"] == "IT"
        assert student["profile_image"] == "/images/defaults/femaleDefaultProfile.png"

    def test_duplicate_email(self, admin_client, student):
        response = admin_client.post(f"{BASE}/", json=_student_payload(email=student.email))

        assert response.status_code == 400
        assert response.json()["error"] == "User already exists"

    def test_get_student(self, admin_client, student):
        response = admin_client.get(f"{BASE}/{student.id}")

        assert response.status_code == 200
        assert response.json()["student"]["email"] == student.email

    def test_get_missing_student(self, admin_client):
        response = admin_client.get(f"{BASE}/9999")

        assert response.status_code == 404
        assert response.json()["error"] == "Student not found"


class TestListing:
    def _seed(self, db):
        make_user(db, "arjun@example.com", name="Arjun Mehta", stream="CS", year="SY", gender="male")
        make_user(db, "meera@example.com", name="Meera Nair", stream="CS", year="TY", mobile="111")
        make_user(db, "kabir@college.edu", name="Kabir Shah", stream="DS", year="SY")

    def test_list_excludes_admins(self, admin_client, db):
        self._seed(db)
        body = admin_client.get(f"{BASE}/").json()

        assert body["total"] == 3
        assert body["page"] == 1
        assert body["limit"] == 10
        assert {s["email"] for s in body["students"]} == {
            "arjun@example.com",
            "meera@example.com",
            "kabir@college.edu",
        }

    def test_filters(self, admin_client, db):
        self._seed(db)

        by_name = admin_client.get(f"{BASE}/", params={"name": "MEHTA"}).json()
        assert [s["name"] for s in by_name["students"]] == ["Arjun Mehta"]

        by_email = admin_client.get(f"{BASE}/", params={"email": "college"}).json()
        assert [s["name"] for s in by_email["students"]] == ["Kabir Shah"]

        by_stream_year = admin_client.get(f"{BASE}/", params={"stream": "CS", "year": "SY"}).json()
        assert by_stream_year["total"] == 1

        by_mobile = admin_client.get(f"{BASE}/", params={"mobile": "111"}).json()
        assert [s["name"] for s in by_mobile["students"]] == ["Meera Nair"]

    def test_pagination(self, admin_client, db):
        self._seed(db)

        page_two = admin_client.get(f"{BASE}/", params={"page": 2, "limit": 2}).json()

        assert page_two["total"] == 3
        assert len(page_two["students"]) == 1
        assert page_two["page"] == 2


class TestUpdate:
    def test_update_fields_and_password(self, admin_client, client, student):
        response = admin_client.put(
            f"{BASE}/{student.id}",
            json={"name": "Sam Renamed", "division": "B", "password": "reset-by-admin"},
        )

        assert response.status_code == 200
        assert response.json()["student"]["name"] == "Sam Renamed"

        client.cookies.clear()
        login = client.post(
            "/api/auth/login", json={"email": student.email, "password": "reset-by-admin"}
        )
        assert login.status_code == 200

    def test_email_taken_by_someone_else(self, admin_client, admin, student):
        response = admin_client.put(f"{BASE}/{student.id}", json={"email": admin.email})
        assert response.status_code == 400


class TestSoftDelete:
    def test_soft_delete_and_restore(self, admin_client, db, student):
        response = admin_client.delete(f"{BASE}/{student.id}")

        assert response.status_code == 200
        deleted = response.json()["student"]
        assert deleted["is_deleted"] is True
        assert deleted["deleted_at"] is not None

        assert admin_client.get(f"{BASE}/").json()["total"] == 0
        assert admin_client.get(f"{BASE}/deleted").json()["total"] == 1

        restored = admin_client.put(f"{BASE}/{student.id}/restore").json()["student"]
        assert restored["is_deleted"] is False
        assert restored["deleted_at"] is None
        assert admin_client.get(f"{BASE}/").json()["total"] == 1

    def test_soft_deleted_session_stops_working(self, client, admin, student):
        from tests.conftest import sign_in

        sign_in(client, admin)
        client.delete(f"{BASE}/{student.id}")

        sign_in(client, student)
        assert client.get("/api/auth/me").status_code == 401

    def test_bulk_soft_delete_and_restore(self, admin_client, db):
        ids = [make_user(db, f"bulk{i}@example.com").id for i in range(3)]

        response = _delete(admin_client, f"{BASE}/soft", ids[:2])
        assert response.status_code == 200
        assert response.json()["count"] == 2
        assert admin_client.get(f"{BASE}/deleted").json()["total"] == 2

        response = admin_client.put(f"{BASE}/restore", json={"ids": ids[:2]})
        assert response.json()["count"] == 2
        assert admin_client.get(f"{BASE}/deleted").json()["total"] == 0

    def test_bulk_needs_ids(self, admin_client):
        response = _delete(admin_client, f"{BASE}/soft", [])

        assert response.status_code == 400
        assert response.json()["error"] == "No student IDs provided"
        assert admin_client.put(f"{BASE}/restore", json={}).status_code == 400


class TestHardDelete:
    def test_hard_delete_removes_record_and_folder(self, admin_client, db, student, storage):
        response = admin_client.delete(f"{BASE}/{student.id}/hard")

        assert response.status_code == 200
        db.expire_all()
        assert db.execute(select(User).where(User.id == student.id)).scalar_one_or_none() is None
        assert storage.deleted_folders == [student.id]

    def test_hard_delete_missing(self, admin_client, storage):
        assert admin_client.delete(f"{BASE}/9999/hard").status_code == 404
        assert storage.deleted_folders == []

    def test_bulk_hard_delete(self, admin_client, db, storage):
        ids = [make_user(db, f"gone{i}@example.com").id for i in range(2)]

        response = _delete(admin_client, f"{BASE}/hard", ids + [9999])

        assert response.json()["count"] == 2
        db.expire_all()
        remaining = db.execute(select(User.id).where(User.id.in_(ids))).scalars().all()
        assert remaining == []
        assert sorted(storage.deleted_folders) == sorted(ids)


class TestAdminAccountsAreOffLimits:
    def test_single_routes_do_not_reach_admins(self, admin_client, db, admin, storage):
        other = make_user(db, "second-admin@example.com", role=UserRole.ADMIN)

        for target in (admin.id, other.id):
            assert admin_client.get(f"{BASE}/{target}").status_code == 404
            assert admin_client.delete(f"{BASE}/{target}").status_code == 404
            assert admin_client.delete(f"{BASE}/{target}/hard").status_code == 404

        assert storage.deleted_folders == []
        assert admin_client.get("/api/auth/me").status_code == 200

    def test_bulk_routes_skip_admins(self, admin_client, db, admin, student, storage):
        response = _delete(admin_client, f"{BASE}/soft", [admin.id, student.id])
        assert response.json()["count"] == 1

        response = _delete(admin_client, f"{BASE}/hard", [admin.id, student.id])
        assert response.json()["count"] == 1
        assert storage.deleted_folders == [student.id]

        db.expire_all()
        assert db.execute(select(User).where(User.id == admin.id)).scalar_one().is_deleted is False


def test_student_cannot_manage_users(student_client, student):
    assert student_client.delete(f"{BASE}/{student.id}").status_code == 403
