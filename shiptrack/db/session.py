from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool
from shiptrack.core.config import settings
from contextlib import contextmanager
import logging

logger = logging.getLogger(__name__)

class Base(DeclarativeBase):
    pass

def _engine_options(dsn: str) -> dict:
    if dsn.startswith("sqlite"):
        # Local runs and tests share one in-process connection
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    return {
        "pool_size": 20,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 1800,
        "pool_pre_ping": True,
    }

engine = create_engine(settings.POSTGRES_DSN, echo=False, **_engine_options(settings.POSTGRES_DSN))

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

def get_db():
    """Provide a database session"""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

@contextmanager
def get_db_context():
    """Context manager version for scripts and startup hooks"""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

def create_all():
    import shiptrack.db.models  # noqa
    Base.metadata.create_all(bind=engine)

def check_db_health():
    """Check database connection health"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
