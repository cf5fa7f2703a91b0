from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def make_session_factory(database_url: str) -> sessionmaker:
    """
    Build the engine once (at app startup) and hand out its sessionmaker.
    Creates the tables if they do not exist yet.
    """
    connect_args = {}

    # SQLite objects are created in the threadpool that serves requests
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}

    engine = create_engine(database_url, connect_args=connect_args)

    # Import models so SQLAlchemy registers tables
    from family_tree.models import person  # noqa: F401

    Base.metadata.create_all(bind=engine)

    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
