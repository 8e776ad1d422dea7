from stockdash.database.base import Base
from stockdash.database.engine import build_engine, engine
from stockdash.database.session import SessionLocal

__all__ = ["Base", "SessionLocal", "build_engine", "engine"]
