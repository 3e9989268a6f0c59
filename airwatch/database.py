import os
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from dotenv import load_dotenv

load_dotenv()

DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = int(os.getenv("DB_PORT", "3306"))
DB_NAME = os.getenv("DB_NAME", "airwatch")
DB_USER = os.getenv("DB_USER", "root")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")
DB_SSL_CA = os.getenv("DB_SSL_CA", None)

# DATABASE_URL wins over the DB_* parts (e.g. sqlite:// for local runs and tests)
DB_URL = os.getenv("DATABASE_URL") or f"mysql+pymysql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"

engine_kwargs = {"pool_pre_ping": True}
if DB_URL.startswith("sqlite"):
    engine_kwargs = {"connect_args": {"check_same_thread": False}}
    if DB_URL in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise every session sees an empty db
        engine_kwargs["poolclass"] = StaticPool
elif DB_SSL_CA:
    engine_kwargs["connect_args"] = {"ssl": {"ca": DB_SSL_CA}}

engine = create_engine(DB_URL, **engine_kwargs)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db():
    from .models import Base
    Base.metadata.create_all(bind=engine)

def check_db():
    try:
        with engine.connect() as conn:
            row = conn.execute(text("SELECT 1")).scalar()
            return True, "reachable" if row == 1 else "unexpected"
    except Exception as e:
        return False, str(e)
