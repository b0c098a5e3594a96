from docthumbs.application import build_application
from docthumbs.config.settings import Settings
from docthumbs.database.connection import Database
from docthumbs.database.repositories.job_repository import JobRepository
from docthumbs.logging.logger import Log
from docthumbs.worker.job_runner import JobRunner
from docthumbs.worker.worker import Worker


def main() -> None:
    """Entry point: open database -> build dependencies -> start worker loop."""
    settings = Settings()
    Log.configure(settings.log_level)
    database = Database(settings)
    database.open()

    try:
        app = build_application(settings, database)
        try:
            job_repo = app.job_repo or JobRepository(database, settings.max_job_attempts)
            job_runner = JobRunner(app.processor, job_repo, app.store, settings)
            worker = Worker(job_repo, job_runner, settings)
            worker.run()
        finally:
            app.close()
    finally:
        database.close()


if __name__ == "__main__":
    main()
