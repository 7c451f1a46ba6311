"""Student Records API client.

A thin wrapper around the HTTP API served by ``run.py``, built on the
``requests`` library.  Every method returns a tuple ``(data, error)``:
on success ``data`` holds the decoded JSON body (``None`` for empty
responses) and ``error`` is ``None``; on failure ``data`` is ``None``
and ``error`` is a dictionary with ``status_code`` and ``message``.

Example::

    client = StudentRecordsClient(base_url="http://localhost:8003")
    stats, error = client.quiz_stats()
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class StudentRecordsClient:
    """Client for the student records and quiz analytics endpoints."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    # Low level HTTP helper
    # ------------------------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Dict[str, Any] | None = None,
        json_body: Any | None = None,
    ) -> Result:
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    message = exc.response.json().get("error", "")
                except (ValueError, AttributeError):
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Students
    # ------------------------------------------------------------------
    def list_students(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", "/students")
        return data or [], error

    def get_student(self, student_id: int) -> Result:
        return self._request("GET", f"/students/{student_id}")

    def create_student(self, name: str, program: str) -> Result:
        return self._request("POST", "/students", json_body={"name": name, "program": program})

    def update_student(self, student_id: int, name: str, program: str) -> Result:
        return self._request(
            "PUT", f"/students/{student_id}", json_body={"name": name, "program": program}
        )

    def delete_student(self, student_id: int) -> Tuple[bool, Optional[Dict[str, Any]]]:
        """Delete a student (and its quiz results).  Returns ``(deleted, error)``."""
        _, error = self._request("DELETE", f"/students/{student_id}")
        return error is None, error

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------
    def quiz_stats(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", "/quiz-stats")
        return data or [], error

    def student_stats(self, student_id: int) -> Result:
        return self._request("GET", f"/student-stats/{student_id}")

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def search_users(self, email: str, *, safe: bool = True) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        path = "/search-safe" if safe else "/search"
        data, error = self._request("GET", path, params={"email": email})
        return data or [], error
