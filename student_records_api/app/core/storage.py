"""
CSV-backed record stores.

Each table of the service (students, quiz results, users) lives in a
``RecordStore``: an ordered in-memory table loaded from a delimited
text file at startup and rewritten in full after every mutation.  The
store knows nothing about HTTP; services receive stores explicitly so
tests can hand them memory-only instances.

File rewrites are atomic.  Rows are written to a temporary file in the
target's directory, flushed to disk and then renamed over the target,
so a crash in the middle of a save never leaves a truncated table
behind.  Malformed rows found while loading are logged and skipped.
"""

from __future__ import annotations

import contextlib
import csv
import itertools
import logging
import os
import stat
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Hashable,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
)

from student_records_api.app.core.config import Settings
from student_records_api.app.schemas.quiz import QuizResult
from student_records_api.app.schemas.student import StudentRead
from student_records_api.app.schemas.user import UserRead

logger = logging.getLogger(__name__)

R = TypeVar("R")

PathLike = Union[str, os.PathLike]


class RecordStoreError(Exception):
    """Base class for record store failures."""


class PersistenceError(RecordStoreError):
    """A table could not be written back to its file."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None) -> None:
        self.path = path
        self.cause = cause
        message = f"could not write {path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class RowFormatError(ValueError):
    """A line of a data file does not describe a valid record."""


@dataclass(frozen=True)
class TableFormat(Generic[R]):
    """Describes how one table maps to rows of a delimited file.

    ``key_of`` extracts the primary key.  Tables without one (quiz
    results) are append-only lists and only support whole-table
    operations such as ``remove_where``.
    """

    name: str
    columns: Tuple[str, ...]
    parse_row: Callable[[List[str]], R]
    format_row: Callable[[R], List[Any]]
    key_of: Optional[Callable[[R], Hashable]] = None
    has_header: bool = False


def write_rows_atomically(
    path: Path, rows: Iterable[Sequence[Any]], header: Optional[Sequence[str]] = None
) -> None:
    """Write ``rows`` as CSV to ``path`` via a temporary file and ``os.replace``."""
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", newline="", encoding="utf-8") as handle:
            writer = csv.writer(handle, lineterminator="\n")
            if header:
                writer.writerow(header)
            writer.writerows(rows)
            handle.flush()
            os.fsync(handle.fileno())
        # mkstemp creates 0600 files; keep the permissions of the table being replaced.
        with contextlib.suppress(FileNotFoundError):
            os.chmod(tmp_name, stat.S_IMODE(os.stat(path).st_mode))
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise


class RecordStore(Generic[R]):
    """Ordered in-memory table with write-through persistence.

    Iteration order is load/insertion order; replacing a record with
    ``put`` keeps its position.  All public methods hold ``lock``, a
    re-entrant lock that callers also take when they need several
    operations (or several stores) to appear atomic.
    """

    def __init__(
        self,
        table: TableFormat[R],
        path: Optional[PathLike] = None,
        save_retries: int = 0,
    ) -> None:
        self.table = table
        self.path = Path(path) if path is not None else None
        self.save_retries = max(save_retries, 0)
        self.lock = threading.RLock()
        self._records: Dict[Hashable, R] = {}
        self._sequence = itertools.count()

    # ------------------------------------------------------------------
    # Loading and saving
    # ------------------------------------------------------------------
    def load(self) -> int:
        """Replace the table contents with the rows of the backing file.

        Returns the number of records loaded.  A missing file raises
        ``FileNotFoundError``; bad rows are logged and skipped one line
        at a time.  Each line is parsed on its own, so an unbalanced
        quote never swallows the lines after it.  When a key occurs
        more than once the first row is kept and later ones are skipped
        (a plain map insert would keep the last one instead).
        """
        if self.path is None:
            return 0
        loaded: Dict[Hashable, R] = {}
        skipped = 0
        with self.path.open("r", newline="", encoding="utf-8-sig") as handle:
            for line_no, line in enumerate(handle, 1):
                if self.table.has_header and line_no == 1:
                    continue
                line = line.rstrip("\r\n")
                if not line.strip():
                    continue
                try:
                    fields = [field.strip() for field in next(csv.reader([line]))]
                    if len(fields) != len(self.table.columns):
                        raise RowFormatError(
                            f"expected {len(self.table.columns)} fields, got {len(fields)}"
                        )
                    record = self.table.parse_row(fields)
                    key = self._key_for(record)
                    if key in loaded:
                        raise RowFormatError(f"duplicate key {key!r}")
                except (ValueError, csv.Error) as exc:
                    skipped += 1
                    logger.warning(
                        "Skipping %s line %d in %s (%s): %s",
                        self.table.name,
                        line_no,
                        self.path,
                        exc,
                        line,
                    )
                    continue
                loaded[key] = record
        with self.lock:
            self._records = loaded
        logger.info(
            "Loaded %d %s from %s (%d skipped)", len(loaded), self.table.name, self.path, skipped
        )
        return len(loaded)

    def save(self) -> None:
        """Rewrite the backing file from the current table.

        Retries ``save_retries`` times before raising ``PersistenceError``.
        The in-memory table is left as it is when saving fails.
        """
        if self.path is None:
            return
        with self.lock:
            rows = [self.table.format_row(record) for record in self._records.values()]
            header = self.table.columns if self.table.has_header else None
            last_error: Optional[OSError] = None
            for attempt in range(1, self.save_retries + 2):
                try:
                    write_rows_atomically(self.path, rows, header)
                except OSError as exc:
                    last_error = exc
                    logger.warning(
                        "Attempt %d to save %s to %s failed: %s",
                        attempt,
                        self.table.name,
                        self.path,
                        exc,
                    )
                    continue
                logger.info("Saved %d %s to %s", len(rows), self.table.name, self.path)
                return
        logger.error("Giving up saving %s to %s", self.table.name, self.path)
        raise PersistenceError(self.path, last_error)

    # ------------------------------------------------------------------
    # Table access
    # ------------------------------------------------------------------
    def next_id(self) -> int:
        """Return ``max(existing keys) + 1``, or ``1`` for an empty table."""
        self._require_key()
        with self.lock:
            return max(self._records, default=0) + 1

    def get(self, key: Hashable) -> Optional[R]:
        self._require_key()
        with self.lock:
            return self._records.get(key)

    def all(self) -> List[R]:
        with self.lock:
            return list(self._records.values())

    def filter(self, predicate: Callable[[R], bool]) -> List[R]:
        with self.lock:
            return [record for record in self._records.values() if predicate(record)]

    def put(self, record: R) -> R:
        """Insert ``record`` or replace the record with the same key."""
        with self.lock:
            self._records[self._key_for(record)] = record
            return record

    def remove(self, key: Hashable) -> Optional[R]:
        self._require_key()
        with self.lock:
            return self._records.pop(key, None)

    def remove_where(self, predicate: Callable[[R], bool]) -> List[R]:
        """Remove every record matching ``predicate`` and return them."""
        with self.lock:
            doomed = [key for key, record in self._records.items() if predicate(record)]
            return [self._records.pop(key) for key in doomed]

    def snapshot(self) -> Dict[Hashable, R]:
        with self.lock:
            return dict(self._records)

    def restore(self, snapshot: Dict[Hashable, R]) -> None:
        with self.lock:
            self._records = dict(snapshot)

    def __len__(self) -> int:
        with self.lock:
            return len(self._records)

    def __contains__(self, key: Hashable) -> bool:
        with self.lock:
            return key in self._records

    def _key_for(self, record: R) -> Hashable:
        if self.table.key_of is None:
            return next(self._sequence)
        return self.table.key_of(record)

    def _require_key(self) -> None:
        if self.table.key_of is None:
            raise TypeError(f"{self.table.name} table has no primary key")


# ----------------------------------------------------------------------
# Table formats
# ----------------------------------------------------------------------
def _parse_student(fields: List[str]) -> StudentRead:
    return StudentRead(id=int(fields[0]), name=fields[1], program=fields[2])


def _parse_quiz_result(fields: List[str]) -> QuizResult:
    quiz_id, student_id, score, max_score = (int(field) for field in fields)
    return QuizResult(quiz_id=quiz_id, student_id=student_id, score=score, max_score=max_score)


def _parse_user(fields: List[str]) -> UserRead:
    return UserRead(id=int(fields[0]), email=fields[1], name=fields[2])


STUDENT_TABLE: TableFormat[StudentRead] = TableFormat(
    name="students",
    columns=("id", "name", "program"),
    parse_row=_parse_student,
    format_row=lambda s: [s.id, s.name, s.program],
    key_of=lambda s: s.id,
)

QUIZ_RESULT_TABLE: TableFormat[QuizResult] = TableFormat(
    name="quiz results",
    columns=("quiz_id", "student_id", "score", "max_score"),
    parse_row=_parse_quiz_result,
    format_row=lambda r: [r.quiz_id, r.student_id, r.score, r.max_score],
    has_header=True,
)

USER_TABLE: TableFormat[UserRead] = TableFormat(
    name="users",
    columns=("id", "email", "name"),
    parse_row=_parse_user,
    format_row=lambda u: [u.id, u.email, u.name],
    key_of=lambda u: u.email,
)


class Records:
    """The stores one application instance works with.

    Built from ``Settings`` by ``from_settings``; tests usually build it
    directly with memory-only or ``tmp_path`` stores.
    """

    def __init__(
        self,
        students: RecordStore[StudentRead],
        quiz_results: RecordStore[QuizResult],
        users: RecordStore[UserRead],
    ) -> None:
        self.students = students
        self.quiz_results = quiz_results
        self.users = users

    @classmethod
    def from_settings(cls, settings: Settings) -> "Records":
        if not settings.students_csv:
            raise ValueError("A students CSV file must be configured")
        retries = settings.save_retries
        return cls(
            students=RecordStore(STUDENT_TABLE, settings.students_csv, retries),
            quiz_results=RecordStore(QUIZ_RESULT_TABLE, settings.quiz_results_csv, retries),
            users=RecordStore(USER_TABLE, settings.users_csv, retries),
        )

    def load_all(self) -> None:
        """Load every configured table and warn about orphaned quiz results."""
        self.students.load()
        self.quiz_results.load()
        self.users.load()
        orphans = self.quiz_results.filter(lambda r: r.student_id not in self.students)
        if orphans:
            logger.warning(
                "%d quiz results reference unknown students: %s",
                len(orphans),
                sorted({r.student_id for r in orphans}),
            )
