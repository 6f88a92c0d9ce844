from sqlmodel import Session, SQLModel, create_engine

from cwl_app.core.config import get_settings
from cwl_app import models  # noqa: F401 - ensures models are registered with metadata

settings = get_settings()
engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    connect_args={"check_same_thread": False} if settings.database_url.startswith("sqlite") else {},
)


def init_db() -> None:
    """Create the data directory and tables; called during startup."""
    settings.data_path.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(engine)


def get_session():
    """Yield a session for dependency injection."""
    with Session(engine) as session:
        yield session
