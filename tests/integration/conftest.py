import os
import uuid
from collections.abc import Generator
from importlib import resources

import pytest

from docthumbs.config.settings import Settings
from docthumbs.database.connection import Database
from docthumbs.database.repositories.documents_repository import DocumentsRepository
from docthumbs.documents.models import Document, DocumentType, NewDocument


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "docthumbs_test")
    return Settings()


def _apply_schema(database: Database) -> None:
    schema = resources.files("docthumbs.database").joinpath("schema.sql").read_text()
    with database.connection() as conn:
        conn.execute(schema)
        conn.commit()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def database(test_settings: Settings) -> Generator[Database, None, None]:
    db = Database(test_settings)
    try:
        db.open()
        _apply_schema(db)
    except Exception as e:
        db.close()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to point at it.")
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def user_id(database: Database) -> Generator[int, None, None]:
    """A user id unique to the test; its documents (and their jobs) are removed afterwards."""
    uid = uuid.uuid4().int % 1_000_000_000 + 1_000_000
    yield uid
    with database.connection() as conn:
        conn.execute("DELETE FROM documents WHERE user_id = %s", (uid,))
        conn.commit()


@pytest.fixture
def documents_repo(database: Database) -> DocumentsRepository:
    return DocumentsRepository(database)


@pytest.fixture
def seed_document(documents_repo: DocumentsRepository, user_id: int) -> Document:
    doc_id = str(uuid.uuid4())
    return documents_repo.create(
        NewDocument(
            id=doc_id,
            user_id=user_id,
            name="report.pdf",
            original_name="report.pdf",
            type=DocumentType.PDF,
            mime_type="application/pdf",
            size=1024,
            file_path=f"users/{user_id}/documents/{doc_id}.pdf",
        )
    )
