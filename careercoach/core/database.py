from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from careercoach.core.config import settings

engine = create_engine(settings.DATABASE_URL, future=True, pool_pre_ping=True, echo=settings.DATABASE_ECHO)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False, future=True)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_session_factory() -> sessionmaker:
    return SessionLocal

def init_db(bind=None):
    from careercoach.models.orm import Base
    Base.metadata.create_all(bind=bind or engine)
