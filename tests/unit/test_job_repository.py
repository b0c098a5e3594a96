from unittest.mock import MagicMock

from docthumbs.database.models import JobRecord
from docthumbs.database.repositories.job_repository import JobRepository


def _mock_database() -> tuple[MagicMock, MagicMock, MagicMock]:
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    mock_db = MagicMock()
    mock_db.connection.return_value.__enter__ = MagicMock(return_value=mock_conn)
    mock_db.connection.return_value.__exit__ = MagicMock(return_value=False)
    return mock_db, mock_conn, mock_cursor


class TestEnqueue:
    def test_returns_new_job_id(self) -> None:
        db, conn, cursor = _mock_database()
        cursor.fetchone.return_value = (42,)

        assert JobRepository(db, max_attempts=3).enqueue("doc-1") == 42
        assert cursor.execute.call_args[0][1] == ("doc-1",)
        conn.commit.assert_called_once()


class TestClaimNextJob:
    def test_claims_and_marks_processing(self) -> None:
        db, conn, cursor = _mock_database()
        cursor.fetchone.return_value = {
            "id": 5, "document_id": "doc-1", "status": "pending", "attempts": 1,
        }

        job = JobRepository(db, max_attempts=3).claim_next_job()

        assert job == JobRecord(id=5, document_id="doc-1", status="processing", attempts=1)
        select_sql, select_params = cursor.execute.call_args[0]
        assert "FOR UPDATE SKIP LOCKED" in select_sql
        assert select_params == (3,)
        assert "status = 'processing'" in conn.execute.call_args[0][0]
        conn.commit.assert_called_once()

    def test_returns_none_when_queue_empty(self) -> None:
        db, conn, cursor = _mock_database()
        cursor.fetchone.return_value = None

        assert JobRepository(db, max_attempts=3).claim_next_job() is None
        conn.execute.assert_not_called()


class TestStatusUpdates:
    def test_mark_failed_stores_error(self) -> None:
        db, conn, _cursor = _mock_database()

        JobRepository(db, max_attempts=3).mark_failed(5, "boom")

        assert conn.execute.call_args[0][1] == ("boom", 5)
        conn.commit.assert_called_once()

    def test_increment_attempts_returns_job_to_pending(self) -> None:
        db, conn, _cursor = _mock_database()

        JobRepository(db, max_attempts=3).increment_attempts(5)

        sql = conn.execute.call_args[0][0]
        assert "attempts = attempts + 1" in sql
        assert "status = 'pending'" in sql
