from sqlalchemy.orm import sessionmaker

from stockdash.database.engine import engine

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)
