from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database import Base
from decimal import Decimal
from models.sales import DocumentState


class BillInfo(Base):
    """Invoice header raised against a delivery order"""
    __tablename__ = "bill_info"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    sales_info_id = Column(Integer, ForeignKey("sales_info.id"), nullable=True, index=True)
    bill_do = Column(String(30), nullable=False)
    bill_total = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    add_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    del_ind = Column(Integer, default=DocumentState.ACTIVE, nullable=False)

    # Relationships
    customer = relationship("Customer")
    sales_info = relationship("SalesInfo")
    items = relationship(
        "BillItem", back_populates="bill_info",
        cascade="all, delete-orphan", order_by="BillItem.id"
    )


class BillItem(Base):
    __tablename__ = "bill_items"

    id = Column(Integer, primary_key=True, index=True)
    bill_info_id = Column(Integer, ForeignKey("bill_info.id"), nullable=False, index=True)
    sales_info_id = Column(Integer, ForeignKey("sales_info.id"), nullable=True)
    bag_type_id = Column(Integer, ForeignKey("bag_types.id"), nullable=True)
    bundle_type = Column(String(150), nullable=True)
    bundle_qty = Column(Integer, default=0, nullable=False)
    item_price = Column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    item_total = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    del_ind = Column(Integer, default=DocumentState.ACTIVE, nullable=False)

    # Relationships
    bill_info = relationship("BillInfo", back_populates="items")
    bag_type = relationship("BagType")
