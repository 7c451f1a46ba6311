"""
Endpoint tests for /quiz-stats and /student-stats
"""
import pytest
from fastapi.testclient import TestClient

from student_records_api.app.main import create_app


class TestQuizStats:

    def test_stats_per_quiz_ordered_by_quiz_id(self, client):
        response = client.get("/quiz-stats")

        assert response.status_code == 200
        assert response.json() == [
            {
                "quiz_id": 1,
                "average_score": 80.0,
                "std_dev": 8.16,
                "min_score": 70,
                "max_score": 90,
                "participants": 3,
                "mixed_max_score": False,
            },
            {
                "quiz_id": 2,
                "average_score": 7.0,
                "std_dev": 1.0,
                "min_score": 6,
                "max_score": 8,
                "participants": 2,
                "mixed_max_score": False,
            },
        ]

    def test_min_not_above_average_not_above_max(self, client):
        for quiz in client.get("/quiz-stats").json():
            assert quiz["min_score"] <= quiz["average_score"] <= quiz["max_score"]
            assert quiz["std_dev"] >= 0
            assert quiz["participants"] >= 1

    def test_stats_follow_deletes(self, client):
        client.delete("/students/102")

        stats = {quiz["quiz_id"]: quiz for quiz in client.get("/quiz-stats").json()}

        assert stats[1]["participants"] == 2
        assert stats[1]["average_score"] == 75.0
        assert stats[2] == {
            "quiz_id": 2,
            "average_score": 8.0,
            "std_dev": 0.0,
            "min_score": 8,
            "max_score": 8,
            "participants": 1,
            "mixed_max_score": False,
        }

    def test_quiz_disappears_with_its_last_result(self, client):
        client.delete("/students/101")
        client.delete("/students/102")

        assert [quiz["quiz_id"] for quiz in client.get("/quiz-stats").json()] == [1]

    def test_no_results_is_empty_list(self, client):
        for student_id in (101, 102, 103):
            client.delete(f"/students/{student_id}")

        response = client.get("/quiz-stats")

        assert response.status_code == 200
        assert response.json() == []

    def test_mixed_max_scores_are_flagged(self, data_dir, settings):
        (data_dir / "quiz-results.csv").write_text(
            "quiz_id,student_id,score,max_score\n1,101,8,10\n1,102,80,100\n",
            encoding="utf-8",
        )
        with TestClient(create_app(settings)) as client:
            [quiz] = client.get("/quiz-stats").json()

        assert quiz["mixed_max_score"] is True
        assert quiz["average_score"] == 44.0

    def test_post_is_405(self, client):
        response = client.post("/quiz-stats", json={})
        assert response.status_code == 405
        assert "error" in response.json()


class TestStudentStats:

    @pytest.mark.parametrize(
        "student_id, quizzes_taken, average",
        [(101, 2, 80.0), (102, 2, 75.0), (103, 1, 70.0)],
    )
    def test_average_percentage(self, client, student_id, quizzes_taken, average):
        response = client.get(f"/student-stats/{student_id}")

        assert response.status_code == 200
        assert response.json() == {
            "student_id": student_id,
            "quizzes_taken": quizzes_taken,
            "average_percentage": average,
        }

    def test_student_without_results_is_404(self, client):
        created = client.post("/students", json={"name": "Daisy", "program": "Art"}).json()

        response = client.get(f"/student-stats/{created['id']}")

        assert response.status_code == 404
        assert response.json() == {"error": "No results found for student"}

    def test_unknown_student_is_404(self, client):
        assert client.get("/student-stats/999").status_code == 404

    def test_deleted_student_has_no_stats(self, client):
        client.delete("/students/101")
        assert client.get("/student-stats/101").status_code == 404

    def test_non_numeric_id_is_400(self, client):
        response = client.get("/student-stats/abc")
        assert response.status_code == 400
        assert "error" in response.json()
