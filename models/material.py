from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database import Base
from decimal import Decimal


class MaterialInfo(Base):
    """Material Receiving Note header"""
    __tablename__ = "material_info"

    id = Column(Integer, primary_key=True, index=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False, index=True)
    total_reels = Column(Integer, default=0, nullable=False)
    total_net_weight = Column(Numeric(15, 3), default=Decimal("0.000"), nullable=False)
    total_gross_weight = Column(Numeric(15, 3), default=Decimal("0.000"), nullable=False)
    material_info_status = Column(Integer, default=1, nullable=False)
    add_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Relationships
    supplier = relationship("Supplier", back_populates="material_notes")
    items = relationship(
        "MaterialItem", back_populates="material_info",
        cascade="all, delete-orphan", order_by="MaterialItem.id"
    )

    def recompute_totals(self):
        self.total_reels = len(self.items)
        self.total_net_weight = sum((item.net_weight for item in self.items), Decimal("0.000"))
        self.total_gross_weight = sum((item.gross_weight for item in self.items), Decimal("0.000"))


class MaterialItem(Base):
    """One received reel"""
    __tablename__ = "material_items"

    id = Column(Integer, primary_key=True, index=True)
    material_info_id = Column(Integer, ForeignKey("material_info.id"), nullable=False, index=True)
    reel_no = Column(String(30), nullable=False)
    colour = Column(String(50), nullable=False)
    particular_id = Column(Integer, ForeignKey("particulars.id"), nullable=True)
    variety = Column(String(100), nullable=False)
    gsm = Column(String(20), nullable=False)
    size = Column(String(20), nullable=False)
    net_weight = Column(Numeric(12, 3), nullable=False)
    gross_weight = Column(Numeric(12, 3), nullable=False)
    barcode = Column(String(40), nullable=False, default="0", index=True)
    material_status = Column(Integer, default=0, nullable=False)
    added_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Relationships
    material_info = relationship("MaterialInfo", back_populates="items")
    particular = relationship("Particular")
