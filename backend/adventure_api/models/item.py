"""
Shop item that booking lines point at. Priced per unit for purchases and
per unit per day for rentals.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Integer, Numeric, String

from adventure_api.db.base import Base, TimestampMixin


class Item(Base, TimestampMixin):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String(2000), nullable=True)
    category = Column(String(100), nullable=True, index=True)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    rental_price = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    purchase = Column(Boolean, nullable=False, default=True)
    rent = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint("price >= 0", name="check_item_price_non_negative"),
        CheckConstraint("rental_price >= 0", name="check_item_rental_price_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Item(id={self.id}, name={self.name})>"
