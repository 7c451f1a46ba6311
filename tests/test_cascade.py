"""
Cascading deletes, rollback on failed saves and concurrent writes
"""
import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from unittest.mock import patch

import pytest

from student_records_api.app.core.storage import PersistenceError
from student_records_api.app.schemas.student import StudentCreate
from student_records_api.app.services.student_service import StudentService
from tests.helpers import read_rows


def _failing_save(path):
    return PersistenceError(Path(path), OSError("disk full"))


@pytest.mark.asyncio
async def test_delete_removes_student_and_results(loaded_records, settings):
    assert await StudentService.delete_student(loaded_records, 102) is True

    assert 102 not in loaded_records.students
    assert loaded_records.quiz_results.filter(lambda r: r.student_id == 102) == []
    assert len(loaded_records.quiz_results) == 3
    assert "1,102,90,100" not in read_rows(settings.quiz_results_csv)


@pytest.mark.asyncio
async def test_delete_unknown_student(loaded_records):
    assert await StudentService.delete_student(loaded_records, 999) is False
    assert len(loaded_records.students) == 3
    assert len(loaded_records.quiz_results) == 5


@pytest.mark.asyncio
async def test_failed_students_save_changes_nothing(loaded_records, settings):
    students_before = read_rows(settings.students_csv)
    results_before = read_rows(settings.quiz_results_csv)

    with patch.object(
        loaded_records.students, "save", side_effect=_failing_save(settings.students_csv)
    ):
        with pytest.raises(PersistenceError):
            await StudentService.delete_student(loaded_records, 101)

    assert 101 in loaded_records.students
    assert len(loaded_records.quiz_results) == 5
    assert read_rows(settings.students_csv) == students_before
    assert read_rows(settings.quiz_results_csv) == results_before


@pytest.mark.asyncio
async def test_failed_results_save_rolls_back_both_tables(loaded_records, settings):
    students_before = read_rows(settings.students_csv)
    results_before = read_rows(settings.quiz_results_csv)

    with patch.object(
        loaded_records.quiz_results, "save", side_effect=_failing_save(settings.quiz_results_csv)
    ):
        with pytest.raises(PersistenceError):
            await StudentService.delete_student(loaded_records, 101)

    assert loaded_records.students.get(101).name == "Mickey Mouse"
    assert len(loaded_records.quiz_results.filter(lambda r: r.student_id == 101)) == 2
    assert read_rows(settings.students_csv) == students_before
    assert read_rows(settings.quiz_results_csv) == results_before


@pytest.mark.asyncio
async def test_failed_rollback_save_is_logged(loaded_records, settings, caplog):
    students_save = loaded_records.students.save
    calls = []

    def save_once_then_fail():
        calls.append(1)
        if len(calls) == 1:
            return students_save()
        raise _failing_save(settings.students_csv)

    with patch.object(loaded_records.students, "save", side_effect=save_once_then_fail), patch.object(
        loaded_records.quiz_results, "save", side_effect=_failing_save(settings.quiz_results_csv)
    ):
        with caplog.at_level(logging.ERROR):
            with pytest.raises(PersistenceError) as excinfo:
                await StudentService.delete_student(loaded_records, 101)

    assert excinfo.value.path == Path(settings.quiz_results_csv)
    assert len(calls) == 2
    assert any("failed half way" in record.getMessage() for record in caplog.records)
    # Memory is restored even though the students file lost the row.
    assert 101 in loaded_records.students
    assert "101,Mickey Mouse,CS" not in read_rows(settings.students_csv)


def test_failed_delete_is_500_and_state_unchanged(client, records, settings):
    with patch.object(
        records.quiz_results, "save", side_effect=_failing_save(settings.quiz_results_csv)
    ):
        response = client.delete("/students/101")

    assert response.status_code == 500
    assert "error" in response.json()
    assert response.headers["access-control-allow-origin"] == "*"
    assert client.get("/students/101").status_code == 200
    assert client.get("/student-stats/101").json()["quizzes_taken"] == 2


def test_failed_create_is_500(client, records, settings):
    with patch.object(records.students, "save", side_effect=_failing_save(settings.students_csv)):
        response = client.post("/students", json={"name": "Daisy", "program": "Art"})

    assert response.status_code == 500
    assert "disk full" in response.json()["error"]
    assert len(read_rows(settings.students_csv)) == 3


def test_concurrent_creates_get_unique_ids(loaded_records, settings):
    def create(n):
        return asyncio.run(
            StudentService.create_student(
                loaded_records, StudentCreate(name=f"Student {n}", program="CS")
            )
        )

    with ThreadPoolExecutor(max_workers=8) as pool:
        created = list(pool.map(create, range(20)))

    ids = sorted(student.id for student in created)
    assert ids == list(range(104, 124))
    assert len(read_rows(settings.students_csv)) == 23

