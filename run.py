"""Command line entry point for the Student Records API.

Loads the students table (and optionally the quiz results and users
tables) from CSV files and serves the API with uvicorn::

    python run.py 8003 studenter.csv quiz-res.csv
    python run.py 8001 studenter.csv --users-csv brukere.csv

Arguments override the corresponding environment variables read by
``student_records_api.app.core.config`` (``PORT``, ``STUDENTS_CSV``,
``QUIZ_RESULTS_CSV``, ``USERS_CSV``, ``HOST``, ``LOG_LEVEL``).  A data
file that does not exist is a fatal error.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from uvicorn import Config, Server

from student_records_api.app.core.config import Settings, settings
from student_records_api.app.main import create_app

logger = logging.getLogger("student_records_api.run")


def parse_args(argv: Optional[List[str]] = None) -> Settings:
    """Parse command line arguments into a ``Settings`` instance."""
    parser = argparse.ArgumentParser(description="Serve student records and quiz analytics over HTTP.")
    parser.add_argument("port", type=int, nargs="?", help="TCP port to listen on")
    parser.add_argument("students_csv", nargs="?", help="students file (id,name,program)")
    parser.add_argument(
        "quiz_results_csv",
        nargs="?",
        help="quiz results file with header (quiz_id,student_id,score,max_score)",
    )
    parser.add_argument("--users-csv", help="users file for the search endpoints (id,email,name)")
    parser.add_argument("--host", help="interface to bind (default: HOST or 0.0.0.0)")
    parser.add_argument("--log-level", help="logging level (default: LOG_LEVEL or INFO)")
    args = parser.parse_args(argv)

    configured = settings.replace(
        port=args.port,
        students_csv=args.students_csv,
        quiz_results_csv=args.quiz_results_csv,
        users_csv=args.users_csv,
        host=args.host,
        log_level=args.log_level,
    )
    if not configured.students_csv:
        parser.error("a students CSV file is required (argument or STUDENTS_CSV)")
    for path in (configured.students_csv, configured.quiz_results_csv, configured.users_csv):
        if path and not Path(path).is_file():
            parser.error(f"data file not found: {path}")
    return configured


def main(argv: Optional[List[str]] = None) -> int:
    configured = parse_args(argv)
    app = create_app(configured)
    config = Config(
        app=app,
        host=configured.host,
        port=configured.port,
        log_level=configured.log_level.lower(),
        reload=False,
    )
    server = Server(config)
    server.run()
    if not server.started:
        logger.error("Server failed to start")
        return 1
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        pass
