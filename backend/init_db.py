"""Initialize database (create tables and the fundraiser state row). Run: python backend/init_db.py"""
from fundboard.config import get_settings
from fundboard.database import init_db, make_engine, make_session_factory


def init():
    settings = get_settings()
    engine = make_engine(settings.DATABASE_URL)
    init_db(engine, make_session_factory(engine), settings)


if __name__ == '__main__':
    print('Initializing DB...')
    init()
    print('DB initialized.')
