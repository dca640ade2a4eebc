# classio/db/session.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from classio.core.config import settings

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # SQLite-соединение используется из пула потоков FastAPI
    connect_args = {"check_same_thread": False}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
