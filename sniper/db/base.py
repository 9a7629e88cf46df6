from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session


def make_engine(dsn: str):
    if dsn.startswith("sqlite"):
        # one shared connection so an in-memory db is visible from every thread
        kwargs = {"connect_args": {"check_same_thread": False}}
        if dsn in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(dsn, echo=False, **kwargs)
    return create_engine(dsn, echo=False)


def init_db(engine):
    # import models so SQLModel registers the tables
    from sniper.db import models  # noqa: F401
    SQLModel.metadata.create_all(engine)


def session_scope(engine) -> Session:
    return Session(engine, expire_on_commit=False)
