from sqlalchemy import Column, DateTime, Integer, String, Text, func
from sqlalchemy.orm import relationship

from storefront.core.database import Base

ORDER_STATUSES = ("pending", "approved", "rejected")


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)

    customer_name = Column(String(120), nullable=False)
    customer_email = Column(String(255), nullable=True)
    customer_phone = Column(String(30), nullable=False, index=True)
    customer_address = Column(Text, nullable=True)
    customer_message = Column(Text, nullable=True)
    delivery_time = Column(String(120), nullable=True)

    # amounts are integers in the smallest currency unit
    total_amount = Column(Integer, nullable=False, default=0)

    status = Column(String(16), nullable=False, default="pending", index=True)
    verified_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    stock_applied_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    order_items = relationship("OrderItem", back_populates="order", order_by="OrderItem.id")
