from sqlalchemy import Column, Date, Float, Integer, String

from stockdash.database.base import Base


class ProductRecord(Base):
    __tablename__ = "products"

    # Assigned by the client (next integer), not autoincremented.
    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String, nullable=False)
    price = Column(Float, nullable=False, default=0)
    stock = Column(Float, nullable=False, default=0)
    expiration_date = Column(Date, nullable=False)


__all__ = ["ProductRecord"]
