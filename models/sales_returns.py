from sqlalchemy import Column, Integer, String, Numeric, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database import Base
from decimal import Decimal
from models.sales import DocumentState


class ReturnInfo(Base):
    """Customer return note header"""
    __tablename__ = "return_info"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    customer_address = Column(Text, nullable=True)
    customer_contact = Column(String(20), nullable=True)
    return_no_bags = Column(Integer, default=0, nullable=False)
    add_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    del_ind = Column(Integer, default=DocumentState.ACTIVE, nullable=False)

    # Relationships
    customer = relationship("Customer")
    items = relationship(
        "ReturnItem", back_populates="return_info",
        cascade="all, delete-orphan", order_by="ReturnItem.id"
    )


class ReturnItem(Base):
    __tablename__ = "return_items"

    id = Column(Integer, primary_key=True, index=True)
    return_info_id = Column(Integer, ForeignKey("return_info.id"), nullable=False, index=True)
    complete_item_id = Column(Integer, ForeignKey("complete_items.id"), nullable=False, index=True)
    barcode_no = Column(String(30), nullable=True)
    bag_type_id = Column(Integer, ForeignKey("bag_types.id"), nullable=True)
    bundle_type = Column(String(150), nullable=True)
    n_weight = Column(Numeric(12, 3), default=Decimal("0.000"), nullable=False)
    no_of_bags = Column(Integer, default=0, nullable=False)
    item_price = Column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    item_total = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    return_status = Column(Integer, default=0, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Relationships
    return_info = relationship("ReturnInfo", back_populates="items")
    complete_item = relationship("CompleteItem")
    bag_type = relationship("BagType")
