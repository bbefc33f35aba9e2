"""Create the schema and seed the achievement catalog for local development."""

from stackstudy.core.logging import configure_logging
from stackstudy.db.session import SessionLocal, create_tables
from stackstudy.services.achievements import ensure_default_achievements


def init_db() -> None:
    """Initialize the database by creating all tables and catalog rows."""
    create_tables()
    with SessionLocal() as session, session.begin():
        ensure_default_achievements(session)


if __name__ == "__main__":
    configure_logging()
    init_db()
    print("Database initialized.")
