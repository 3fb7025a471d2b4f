"""SQLAlchemy models for the laterfeed database."""

from sqlalchemy import create_engine, Column, Integer, String, Text, DateTime, Index
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class EntryModel(Base):
    """Database model for saved entries."""
    __tablename__ = "entries"
    # AUTOINCREMENT keeps SQLite from reusing the ids of deleted rows
    __table_args__ = (
        Index("idx_entries_created_at", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    url = Column(String(2048), nullable=False)
    title = Column(Text, nullable=False)
    summary = Column(Text)
    source_type = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False)  # naive UTC


def init_db(database_url: str):
    """Initialize database and create all tables."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Sessions are opened from the threadpool as well as the event loop
        connect_args["check_same_thread"] = False
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return engine

