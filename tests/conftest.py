"""
Pytest configuration and fixtures
"""
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from student_records_api.app.core.config import Settings  # noqa: E402
from student_records_api.app.core.storage import Records  # noqa: E402
from student_records_api.app.main import create_app  # noqa: E402

STUDENTS_CSV = """\
101,Mickey Mouse,CS
102,Donald Duck,Math
103,Goofy,CS
"""

# Quiz 2 comes first on purpose: statistics must still be ordered by quiz id.
QUIZ_RESULTS_CSV = """\
quiz_id,student_id,score,max_score
2,101,8,10
1,101,80,100
1,102,90,100
1,103,70,100
2,102,6,10
"""

USERS_CSV = """\
1,bruker1@epost.no,Bruker En
2,bruker2@epost.no,Bruker To
3,admin@skole.no,Admin
"""


@pytest.fixture
def data_dir(tmp_path):
    """Directory holding fresh copies of the three data files."""
    (tmp_path / "students.csv").write_text(STUDENTS_CSV, encoding="utf-8")
    (tmp_path / "quiz-results.csv").write_text(QUIZ_RESULTS_CSV, encoding="utf-8")
    (tmp_path / "users.csv").write_text(USERS_CSV, encoding="utf-8")
    return tmp_path


@pytest.fixture
def settings(data_dir):
    return Settings(
        log_level="WARNING",
        students_csv=str(data_dir / "students.csv"),
        quiz_results_csv=str(data_dir / "quiz-results.csv"),
        users_csv=str(data_dir / "users.csv"),
        save_retries=0,
    )


@pytest.fixture
def records(settings):
    """Stores backed by the temporary files, not yet loaded."""
    return Records.from_settings(settings)


@pytest.fixture
def loaded_records(records):
    records.load_all()
    return records


@pytest.fixture
def client(settings, records):
    """Test client whose startup loads ``records`` from the temporary files."""
    app = create_app(settings, records)
    with TestClient(app) as test_client:
        yield test_client
