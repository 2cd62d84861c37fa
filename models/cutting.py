from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database import Base
from decimal import Decimal


class Cutting(Base):
    """A printed pack (or plain roll) attached to a job card for cutting"""
    __tablename__ = "cutting"

    id = Column(Integer, primary_key=True, index=True)
    job_card_id = Column(Integer, ForeignKey("job_cards.id"), nullable=False, index=True)
    source_stock_id = Column(Integer, ForeignKey("stock_items.id"), nullable=False)
    roll_barcode_no = Column(String(30), nullable=False)
    cutting_weight = Column(Numeric(12, 3), default=Decimal("0.000"), nullable=False)
    number_of_roll = Column(Integer, default=0, nullable=False)
    wastage = Column(Numeric(12, 3), default=Decimal("0.000"), nullable=False)
    added_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    update_date = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    del_ind = Column(Integer, default=0, nullable=False)

    # Relationships
    source_stock = relationship("StockItem")
    rolls = relationship("CuttingRoll", back_populates="cutting", cascade="all, delete-orphan")


class CuttingRoll(Base):
    __tablename__ = "cutting_rolls"

    id = Column(Integer, primary_key=True, index=True)
    cutting_id = Column(Integer, ForeignKey("cutting.id"), nullable=False, index=True)
    job_card_id = Column(Integer, ForeignKey("job_cards.id"), nullable=False, index=True)
    output_stock_id = Column(Integer, ForeignKey("stock_items.id"), nullable=True)
    cutting_roll_weight = Column(Numeric(12, 3), nullable=False)
    no_of_bags = Column(Integer, default=0, nullable=False)
    cutting_wastage = Column(Numeric(12, 3), default=Decimal("0.000"), nullable=False)
    cutting_barcode = Column(String(30), nullable=True, index=True)
    add_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Relationships
    cutting = relationship("Cutting", back_populates="rolls")
    output_stock = relationship("StockItem", foreign_keys=[output_stock_id])
