from sqlalchemy import Column, Integer, String, Numeric, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database import Base
from decimal import Decimal


class DocumentState:
    """del_ind values shared by sales, return and invoice headers"""
    ACTIVE = 1
    DELETED = 0


class SalesInfo(Base):
    """Delivery order header"""
    __tablename__ = "sales_info"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    customer_address = Column(Text, nullable=True)
    customer_contact = Column(String(20), nullable=True)
    sales_no_bags = Column(Integer, default=0, nullable=False)
    add_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    del_ind = Column(Integer, default=DocumentState.ACTIVE, nullable=False)

    # Relationships
    customer = relationship("Customer")
    items = relationship(
        "SalesItem", back_populates="sales_info",
        cascade="all, delete-orphan", order_by="SalesItem.id"
    )

    @property
    def do_number(self) -> str:
        return f"DO-{self.id:05d}"


class SalesItem(Base):
    """Delivery order line, one finished goods bundle"""
    __tablename__ = "sales_items"

    id = Column(Integer, primary_key=True, index=True)
    sales_info_id = Column(Integer, ForeignKey("sales_info.id"), nullable=False, index=True)
    complete_item_id = Column(Integer, ForeignKey("complete_items.id"), nullable=False, index=True)
    barcode_no = Column(String(30), nullable=True)

    # Resolved once at entry: bag_type_id set for a known bag type, else free text only
    bag_type_id = Column(Integer, ForeignKey("bag_types.id"), nullable=True)
    bundle_type = Column(String(150), nullable=True)

    n_weight = Column(Numeric(12, 3), default=Decimal("0.000"), nullable=False)
    no_of_bags = Column(Integer, default=0, nullable=False)
    item_price = Column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    item_total = Column(Numeric(15, 2), default=Decimal("0.00"), nullable=False)
    sales_status = Column(Integer, default=0, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Relationships
    sales_info = relationship("SalesInfo", back_populates="items")
    complete_item = relationship("CompleteItem")
    bag_type = relationship("BagType")
