from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Index, Integer

from stockdash.database.base import Base


class EntryRecord(Base):
    __tablename__ = "entries"

    id = Column(Integer, primary_key=True)
    # Weak reference: products can be deleted while their movements stay.
    product_id = Column(Integer, nullable=False)
    quantity = Column(Float, nullable=False)
    date = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_entries_product", "product_id"),
    )


class OutputRecord(Base):
    __tablename__ = "outputs"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, nullable=False)
    quantity = Column(Float, nullable=False)
    date = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_outputs_product", "product_id"),
    )


__all__ = ["EntryRecord", "OutputRecord"]
