"""
Tests for quiz authoring, scoring and attempt history
"""

from datetime import datetime, timedelta, timezone

import pytest

from upskillnow.models import AttemptType, Question, Quiz, QuizType
from upskillnow.schemas.quizzes import QuizSubmission
from upskillnow.services.quizzes import attempt_type_for, elapsed_seconds, score_submission
from tests.conftest import make_user, sign_in

BASE = "/api/quizzes"


def quiz_payload(**overrides):
    payload = {
        "title": "Arrays Quiz",
        "chapter_id": 1,
        "department": "CS",
        "year": "SY",
        "semester": "SEM1",
        "questions": [
            {"question": "Index of the first element?", "options": ["0", "1"], "correct_answer": 0},
            {
                "question": "Binary search needs?",
                "options": ["Sorted data", "A hash", "A stack"],
                "correct_answer": 0,
                "details": "Halving only works on ordered input",
            },
            {"question": "Array access cost?", "options": ["O(n)", "O(1)"], "correct_answer": 1},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def quiz(admin_client):
    response = admin_client.post(f"{BASE}/", json=quiz_payload())
    assert response.status_code == 201
    return response.json()


def _questions(*correct):
    return [Question(id=index + 1, correct_answer=answer) for index, answer in enumerate(correct)]


class TestScoring:
    def test_counts_matches_by_position(self):
        result = score_submission(_questions(0, 2, 1, 3), [0, 2, 0, 0])

        assert result.correct == 2
        assert result.total == 4
        assert [a["is_correct"] for a in result.answers] == [True, True, False, False]

    def test_short_submission_scores_missing_as_wrong(self):
        result = score_submission(_questions(1, 1, 1), [1])

        assert (result.correct, result.total) == (1, 3)
        assert result.answers[2] == {"question_id": 3, "selected_answer": None, "is_correct": False}

    def test_extra_answers_are_ignored(self):
        result = score_submission(_questions(1, 0), [1, 0, 1, 1, 1])

        assert (result.correct, result.total) == (2, 2)
        assert len(result.answers) == 2

    def test_skipped_questions(self):
        result = score_submission(_questions(0, 1), [None, 1])

        assert result.correct == 1

    @pytest.mark.parametrize("selected", [True, 1.0, "1"])
    def test_only_an_int_matches(self, selected):
        result = score_submission(_questions(1), [selected])

        assert result.correct == 0

    def test_empty_submission(self):
        result = score_submission(_questions(0, 1), [])

        assert (result.correct, result.total) == (0, 2)


class TestAttemptMetadata:
    def test_attempt_type(self):
        assert attempt_type_for(Quiz(type=QuizType.CHALLENGE.value)) is AttemptType.WEEKEND
        assert attempt_type_for(Quiz(type=QuizType.GENERAL.value)) is AttemptType.GENERAL

    def test_time_taken_wins(self):
        submission = QuizSubmission(answers=[], time_taken=42, started_at=datetime(2025, 1, 1))

        assert elapsed_seconds(submission) == 42

    def test_elapsed_from_start(self):
        now = datetime(2025, 3, 1, 10, 5, tzinfo=timezone.utc)
        submission = QuizSubmission(answers=[], started_at=now - timedelta(minutes=5))

        assert elapsed_seconds(submission, now=now) == 300

    def test_naive_start_is_utc(self):
        now = datetime(2025, 3, 1, 10, 0, 30, tzinfo=timezone.utc)
        submission = QuizSubmission(answers=[], started_at=datetime(2025, 3, 1, 10, 0, 0))

        assert elapsed_seconds(submission, now=now) == 30

    def test_no_timing(self):
        assert elapsed_seconds(QuizSubmission(answers=[])) == 0


class TestAuthoring:
    def test_create(self, quiz):
        assert quiz["type"] == "general"
        assert [q["position"] for q in quiz["questions"]] == [0, 1, 2]
        assert quiz["questions"][1]["details"] == "Halving only works on ordered input"

    def test_challenge_defaults(self, admin_client):
        response = admin_client.post(f"{BASE}/", json=quiz_payload(type="challenge"))

        assert response.status_code == 201
        assert response.json()["duration"] == 20
        assert response.json()["num_questions"] == 10

    def test_correct_answer_must_index_an_option(self, admin_client):
        payload = quiz_payload(
            questions=[{"question": "Pick", "options": ["a", "b"], "correct_answer": 2}]
        )

        assert admin_client.post(f"{BASE}/", json=payload).status_code == 400

    def test_needs_questions(self, admin_client):
        assert admin_client.post(f"{BASE}/", json=quiz_payload(questions=[])).status_code == 400

    def test_student_cannot_create(self, student_client):
        assert student_client.post(f"{BASE}/", json=quiz_payload()).status_code == 403

    def test_update_replaces_questions(self, admin_client, quiz):
        response = admin_client.put(
            f"{BASE}/{quiz['id']}",
            json={
                "title": "Arrays Quiz v2",
                "questions": [{"question": "Only one", "options": ["x", "y"], "correct_answer": 1}],
            },
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Arrays Quiz v2"
        assert [q["question"] for q in response.json()["questions"]] == ["Only one"]

    def test_delete(self, admin_client, quiz):
        assert admin_client.delete(f"{BASE}/{quiz['id']}").status_code == 200
        assert admin_client.get(f"{BASE}/{quiz['id']}").status_code == 404


class TestVisibility:
    def test_admin_sees_answers(self, admin_client, quiz):
        question = admin_client.get(f"{BASE}/{quiz['id']}").json()["questions"][0]

        assert question["correct_answer"] == 0

    def test_student_does_not(self, client, student, quiz):
        sign_in(client, student)

        fetched = client.get(f"{BASE}/{quiz['id']}").json()
        assert fetched["title"] == "Arrays Quiz"
        for question in fetched["questions"]:
            assert "correct_answer" not in question
            assert "details" not in question

        listed = client.get(f"{BASE}/").json()
        assert "correct_answer" not in listed[0]["questions"][0]

    def test_chapter_quiz(self, client, student, quiz):
        sign_in(client, student)

        assert client.get(f"{BASE}/chapter/1").json()["id"] == quiz["id"]
        assert client.get(f"{BASE}/chapter/99").status_code == 404


class TestSubmission:
    def test_submit_scores_on_server(self, client, student, quiz):
        sign_in(client, student)

        response = client.post(
            f"{BASE}/{quiz['id']}/submit", json={"answers": [0, 2, 1], "time_taken": 75}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Quiz submitted successfully"
        assert (body["score"], body["total_questions"]) == (2, 3)
        attempt = body["attempt"]
        assert attempt["user_id"] == student.id
        assert attempt["type"] == "general"
        assert attempt["time_taken"] == 75
        assert [a["is_correct"] for a in attempt["answers"]] == [True, False, True]

    def test_challenge_attempt_is_weekend(self, admin_client, student):
        challenge = admin_client.post(f"{BASE}/", json=quiz_payload(type="challenge")).json()
        sign_in(admin_client, student)

        attempt = admin_client.post(
            f"{BASE}/{challenge['id']}/submit", json={"answers": [0, 0, 1]}
        ).json()["attempt"]

        assert attempt["type"] == "weekend"

    def test_only_json_integers_count(self, quiz, student_client):
        response = student_client.post(
            f"{BASE}/{quiz['id']}/submit", json={"answers": ["0", False, 1.0]}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["score"] == 0
        assert [a["selected_answer"] for a in body["attempt"]["answers"]] == ["0", False, 1.0]
        assert not any(a["is_correct"] for a in body["attempt"]["answers"])

    def test_mixed_answers(self, quiz, student_client):
        response = student_client.post(
            f"{BASE}/{quiz['id']}/submit", json={"answers": [0, "0", 1]}
        )

        assert response.json()["score"] == 2

    def test_unknown_quiz(self, student_client):
        response = student_client.post(f"{BASE}/4040/submit", json={"answers": [0]})

        assert response.status_code == 404
        assert response.json()["error"] == "Quiz not found"

    def test_attempts_list_is_admin_only(self, client, admin, student, quiz):
        sign_in(client, student)
        client.post(f"{BASE}/{quiz['id']}/submit", json={"answers": [0, 0, 0]})
        assert client.get(f"{BASE}/{quiz['id']}/attempts").status_code == 403

        sign_in(client, admin)
        attempts = client.get(f"{BASE}/{quiz['id']}/attempts").json()
        assert [a["user_id"] for a in attempts] == [student.id]


class TestQuizLeaderboard:
    def test_ranked_by_score_then_time(self, client, db, student, quiz):
        fast = make_user(db, "fast@example.com", name="Fast")
        slow = make_user(db, "slow@example.com", name="Slow")

        for user, answers, seconds in (
            (slow, [0, 0, 1], 300),
            (student, [0, 1, 0], 30),
            (fast, [0, 0, 1], 90),
        ):
            sign_in(client, user)
            client.post(f"{BASE}/{quiz['id']}/submit", json={"answers": answers, "time_taken": seconds})

        board = client.get(f"{BASE}/{quiz['id']}/leaderboard").json()

        assert [entry["user"]["name"] for entry in board] == ["Fast", "Slow", "Sam Student"]
        assert board[0]["score"] == 3


    def test_hard_deleted_user_leaves_the_board(self, client, admin, student, quiz):
        sign_in(client, student)
        client.post(f"{BASE}/{quiz['id']}/submit", json={"answers": [0, 0, 1], "time_taken": 40})

        sign_in(client, admin)
        assert client.delete(f"/api/admin/users/{student.id}/hard").status_code == 200

        response = client.get(f"{BASE}/{quiz['id']}/leaderboard")
        assert response.status_code == 200
        assert response.json() == []
        assert client.get(f"{BASE}/{quiz['id']}/attempts").json() == []


class TestAttemptHistory:
    @pytest.fixture
    def attempt(self, client, student, quiz):
        sign_in(client, student)
        return client.post(f"{BASE}/{quiz['id']}/submit", json={"answers": [0, None, 1]}).json()["attempt"]

    def test_owner_sees_review(self, client, attempt):
        response = client.get(f"/api/attempts/{attempt['id']}")

        assert response.status_code == 200
        detail = response.json()
        assert detail["quiz_title"] == "Arrays Quiz"
        review = detail["review_data"]
        assert [r["user_selected"] for r in review] == [0, None, 1]
        assert [r["is_correct"] for r in review] == [True, False, True]
        assert review[1]["correct_answer"] == 0
        assert review[1]["details"] == "Halving only works on ordered input"

    def test_user_history(self, client, student, attempt):
        history = client.get(f"/api/attempts/user/{student.id}").json()

        assert [a["id"] for a in history] == [attempt["id"]]

    def test_other_student_forbidden(self, client, db, attempt, student):
        sign_in(client, make_user(db, "other@example.com"))

        assert client.get(f"/api/attempts/{attempt['id']}").status_code == 403
        assert client.get(f"/api/attempts/user/{student.id}").status_code == 403

    def test_admin_can_view(self, client, admin, attempt):
        sign_in(client, admin)

        assert client.get(f"/api/attempts/{attempt['id']}").status_code == 200

    def test_missing_attempt(self, client, attempt):
        response = client.get("/api/attempts/999")

        assert response.status_code == 404
        assert response.json()["error"] == "Attempt not found"

    def test_metadata_update_keeps_review(self, client, admin, attempt):
        sign_in(client, admin)
        client.put(f"{BASE}/{attempt['quiz_id']}", json={"title": "Arrays Quiz (revised)"})

        detail = client.get(f"/api/attempts/{attempt['id']}").json()

        assert detail["quiz_title"] == "Arrays Quiz (revised)"
        assert [r["user_selected"] for r in detail["review_data"]] == [0, None, 1]

    def test_replaced_questions_show_no_selection(self, client, admin, attempt):
        sign_in(client, admin)
        client.put(
            f"{BASE}/{attempt['quiz_id']}",
            json={"questions": [{"question": "New", "options": ["a", "b"], "correct_answer": 0}]},
        )

        review = client.get(f"/api/attempts/{attempt['id']}").json()["review_data"]

        assert [r["question"] for r in review] == ["New"]
        assert review[0]["user_selected"] is None
        assert review[0]["is_correct"] is False
