from docthumbs.config.settings import Settings
from docthumbs.database.connection import Database
from docthumbs.database.repositories.base import BaseDocumentsRepository
from docthumbs.database.repositories.documents_repository import DocumentsRepository
from docthumbs.database.repositories.memory_documents_repository import (
    InMemoryDocumentsRepository,
)


class DocumentsRepositoryFactory:
    """Creates the document metadata store based on settings."""

    STORES = ("postgres", "memory")

    @classmethod
    def create(
        cls, settings: Settings, database: Database | None = None
    ) -> BaseDocumentsRepository:
        store = settings.metadata_store.lower()
        if store == "memory":
            return InMemoryDocumentsRepository()
        if store == "postgres":
            if database is None:
                raise ValueError("metadata_store 'postgres' requires a Database")
            return DocumentsRepository(database)
        raise ValueError(
            f"Unknown metadata store '{store}'. Choose from: {list(cls.STORES)}"
        )
