from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from app.config.settings import AppConfig

DATABASE_URL = AppConfig.DATABASE['url']

# PostgreSQL on Render or similar needs sslmode=require; SQLite is used for tests and local runs
engine = create_engine(DATABASE_URL, **AppConfig.engine_options())

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# ✅ This is required to be imported wherever DB session is needed
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
