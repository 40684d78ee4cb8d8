"""
Tests for course, chapter and module endpoints
"""

import pytest

from tests.conftest import sign_in

BASE = "/api/courses"


def course_payload(**overrides):
    payload = {
        "title": "Data Structures",
        "description": "Arrays, lists, trees and graphs",
        "image": "https://img.example.com/ds.png",
        "duration": "12 weeks",
        "start_date": "2025-07-01",
        "end_date": "2025-09-30",
        "department": "CS",
        "year": "SY",
        "semester": "SEM1",
        "chapters": [
            {
                "title": "Arrays",
                "modules": [
                    {"title": "Basics", "content": "Indexing"},
                    {"title": "Searching", "content": "Binary search", "image": "bs.png"},
                ],
            },
            {"title": "Trees"},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def course(admin_client):
    response = admin_client.post(f"{BASE}/", json=course_payload())
    assert response.status_code == 201
    return response.json()


class TestCourses:
    def test_create_builds_ordered_tree(self, course):
        assert [c["title"] for c in course["chapters"]] == ["Arrays", "Trees"]
        assert [c["position"] for c in course["chapters"]] == [0, 1]
        modules = course["chapters"][0]["modules"]
        assert [m["title"] for m in modules] == ["Basics", "Searching"]
        assert modules[1]["image"] == "bs.png"

    def test_student_can_read(self, client, student, course):
        sign_in(client, student)

        listing = client.get(f"{BASE}/")
        assert listing.status_code == 200
        assert [c["id"] for c in listing.json()] == [course["id"]]

        detail = client.get(f"{BASE}/{course['id']}")
        assert detail.json()["chapters"][0]["modules"][0]["content"] == "Indexing"

    def test_student_cannot_write(self, client, student, course):
        sign_in(client, student)

        assert client.post(f"{BASE}/", json=course_payload()).status_code == 403
        assert client.put(f"{BASE}/{course['id']}", json={"title": "Hacked"}).status_code == 403
        assert client.delete(f"{BASE}/{course['id']}").status_code == 403

    def test_invalid_department(self, admin_client):
        response = admin_client.post(f"{BASE}/", json=course_payload(department="ME"))

        assert response.status_code == 400
        assert "department" in response.json()["error"]

    def test_end_before_start(self, admin_client):
        response = admin_client.post(
            f"{BASE}/", json=course_payload(start_date="2025-09-30", end_date="2025-07-01")
        )
        assert response.status_code == 400

    def test_filter_requires_all_three(self, admin_client, course):
        response = admin_client.get(f"{BASE}/filter", params={"department": "CS", "year": "SY"})
        assert response.status_code == 400

    def test_filter(self, admin_client, course):
        admin_client.post(f"{BASE}/", json=course_payload(title="Networks", semester="SEM2"))

        response = admin_client.get(
            f"{BASE}/filter", params={"department": "CS", "year": "SY", "semester": "SEM1"}
        )

        assert response.status_code == 200
        results = response.json()
        assert [c["title"] for c in results] == ["Data Structures"]
        assert "chapters" not in results[0]

    def test_update(self, admin_client, course):
        response = admin_client.put(f"{BASE}/{course['id']}", json={"title": "DSA", "duration": "10 weeks"})

        assert response.status_code == 200
        assert response.json()["title"] == "DSA"
        assert response.json()["description"] == course["description"]

    def test_delete_cascades(self, admin_client, course):
        chapter_id = course["chapters"][0]["id"]

        assert admin_client.delete(f"{BASE}/{course['id']}").status_code == 200
        assert admin_client.get(f"{BASE}/{course['id']}").status_code == 404
        assert admin_client.get(f"{BASE}/{course['id']}/chapters/{chapter_id}").status_code == 404

    def test_missing_course(self, admin_client):
        response = admin_client.get(f"{BASE}/424242")

        assert response.status_code == 404
        assert response.json()["error"] == "Course not found"


class TestChapters:
    def test_add_chapter_goes_last(self, admin_client, course):
        response = admin_client.post(f"{BASE}/{course['id']}/chapters", json={"title": "Graphs"})

        assert response.status_code == 201
        assert response.json()["position"] == 2

        titles = [c["title"] for c in admin_client.get(f"{BASE}/{course['id']}").json()["chapters"]]
        assert titles == ["Arrays", "Trees", "Graphs"]

    def test_update_and_delete_chapter(self, admin_client, course):
        chapter_id = course["chapters"][1]["id"]
        url = f"{BASE}/{course['id']}/chapters/{chapter_id}"

        assert admin_client.put(url, json={"title": "Binary Trees"}).json()["title"] == "Binary Trees"
        assert admin_client.delete(url).status_code == 200
        assert admin_client.get(url).status_code == 404

    def test_chapter_must_belong_to_course(self, admin_client, course):
        other = admin_client.post(f"{BASE}/", json=course_payload(title="Other")).json()
        chapter_id = other["chapters"][0]["id"]

        response = admin_client.get(f"{BASE}/{course['id']}/chapters/{chapter_id}")
        assert response.status_code == 404


class TestModules:
    def test_add_module(self, admin_client, course):
        chapter_id = course["chapters"][1]["id"]
        response = admin_client.post(
            f"{BASE}/{course['id']}/chapters/{chapter_id}/modules",
            json={"title": "BST", "content": "Ordered trees"},
        )

        assert response.status_code == 201
        assert response.json()["position"] == 0
        assert response.json()["chapter_id"] == chapter_id

    def test_partial_update_keeps_other_fields(self, admin_client, course):
        chapter = course["chapters"][0]
        module = chapter["modules"][1]
        url = f"{BASE}/{course['id']}/chapters/{chapter['id']}/modules/{module['id']}"

        response = admin_client.put(url, json={"title": "Binary Search"})

        assert response.status_code == 200
        updated = response.json()
        assert updated["title"] == "Binary Search"
        assert updated["content"] == "Binary search"
        assert updated["image"] == "bs.png"

    def test_delete_module(self, admin_client, course):
        chapter = course["chapters"][0]
        url = f"{BASE}/{course['id']}/chapters/{chapter['id']}/modules/{chapter['modules'][0]['id']}"

        assert admin_client.delete(url).status_code == 200
        assert admin_client.get(url).status_code == 404

        remaining = admin_client.get(f"{BASE}/{course['id']}").json()["chapters"][0]["modules"]
        assert [m["title"] for m in remaining] == ["Searching"]
