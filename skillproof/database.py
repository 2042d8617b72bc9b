from pathlib import Path
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from skillproof import config

DATABASE_URL = config.DATABASE_URL
Base = declarative_base()

# Фолбэк на локальную SQLite, если переменная не задана
if not DATABASE_URL or not DATABASE_URL.strip():
    db_path = Path(__file__).with_name("app.db")
    DATABASE_URL = f"sqlite:///{db_path}"

if DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
    # одна общая in-memory база на все соединения (тесты, локальные прогоны)
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
elif DATABASE_URL.startswith("sqlite"):
    engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False})
else:
    engine = create_engine(DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
