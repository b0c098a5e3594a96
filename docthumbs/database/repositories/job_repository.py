from psycopg.rows import dict_row

from docthumbs.database.connection import Database
from docthumbs.database.models import JobRecord


class JobRepository:
    """Database operations for the thumbnail_jobs table."""

    def __init__(self, db: Database, max_attempts: int) -> None:
        self._db = db
        self._max_attempts = max_attempts

    def enqueue(self, document_id: str) -> int:
        """Insert a pending render job and return its id."""
        with self._db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO thumbnail_jobs (document_id, status)
                    VALUES (%s, 'pending')
                    RETURNING id
                    """,
                    (document_id,),
                )
                row = cur.fetchone()
            conn.commit()

        return row[0]

    def claim_next_job(self) -> JobRecord | None:
        """Claim the next pending job using SELECT FOR UPDATE SKIP LOCKED."""
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, document_id, status, attempts
                    FROM thumbnail_jobs
                    WHERE status = 'pending'
                      AND attempts < %s
                    ORDER BY created_at
                    LIMIT 1
                    FOR UPDATE SKIP LOCKED
                    """,
                    (self._max_attempts,),
                )
                row = cur.fetchone()

            if row is None:
                conn.rollback()
                return None

            conn.execute(
                """
                UPDATE thumbnail_jobs
                SET status = 'processing', locked_at = NOW(), updated_at = NOW()
                WHERE id = %s
                """,
                (row["id"],),
            )
            conn.commit()

        return JobRecord(
            id=row["id"],
            document_id=row["document_id"],
            status="processing",
            attempts=row["attempts"],
        )

    def mark_done(self, job_id: int) -> None:
        """Mark a job as done."""
        with self._db.connection() as conn:
            conn.execute(
                """
                UPDATE thumbnail_jobs
                SET status = 'done', updated_at = NOW()
                WHERE id = %s
                """,
                (job_id,),
            )
            conn.commit()

    def mark_failed(self, job_id: int, error: str) -> None:
        """Mark a job as permanently failed."""
        with self._db.connection() as conn:
            conn.execute(
                """
                UPDATE thumbnail_jobs
                SET status = 'failed', error_message = %s, updated_at = NOW()
                WHERE id = %s
                """,
                (error, job_id),
            )
            conn.commit()

    def increment_attempts(self, job_id: int) -> None:
        """Increment attempt count and return job to pending."""
        with self._db.connection() as conn:
            conn.execute(
                """
                UPDATE thumbnail_jobs
                SET attempts = attempts + 1, status = 'pending',
                    locked_at = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (job_id,),
            )
            conn.commit()

    def find_by_id(self, job_id: int) -> JobRecord | None:
        """Find a job by ID. Useful for tests."""
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, document_id, status, attempts,
                           error_message, locked_at, created_at, updated_at
                    FROM thumbnail_jobs
                    WHERE id = %s
                    """,
                    (job_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return JobRecord(
            id=row["id"],
            document_id=row["document_id"],
            status=row["status"],
            attempts=row["attempts"],
            error_message=row["error_message"],
            locked_at=row["locked_at"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
