from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi import Request

Base = declarative_base()


def make_engine(database_url: str):
    # sqlite needs check_same_thread off; in-memory sqlite must share one connection
    connect_args = {"check_same_thread": False} if database_url.startswith('sqlite') else {}
    kwargs = {}
    if database_url in ('sqlite://', 'sqlite:///:memory:'):
        kwargs['poolclass'] = StaticPool
    # pool_pre_ping for reliability with hosted postgres providers
    engine = create_engine(database_url, connect_args=connect_args, pool_pre_ping=True, **kwargs)
    if database_url.startswith('sqlite'):
        event.listen(engine, 'connect', _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # sqlite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine, session_factory, settings):
    """Create tables and the singleton fundraiser state row."""
    from . import models, state  # noqa: F401  (registers tables on Base)

    Base.metadata.create_all(bind=engine)
    db = session_factory()
    try:
        state.ensure_state(db, settings)
    finally:
        db.close()


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
