from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database import Base
from decimal import Decimal


class Slitting(Base):
    """A reel attached to a job card for slitting"""
    __tablename__ = "slitting"

    id = Column(Integer, primary_key=True, index=True)
    job_card_id = Column(Integer, ForeignKey("job_cards.id"), nullable=False, index=True)
    source_stock_id = Column(Integer, ForeignKey("stock_items.id"), nullable=False)
    roll_barcode_no = Column(String(30), nullable=False)
    number_of_roll = Column(Integer, default=0, nullable=False)
    wastage = Column(Numeric(12, 3), default=Decimal("0.000"), nullable=False)
    wastage_width = Column(Numeric(12, 3), default=Decimal("0.000"), nullable=False)
    added_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    update_date = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    del_ind = Column(Integer, default=0, nullable=False)

    # Relationships
    source_stock = relationship("StockItem")
    rolls = relationship("SlittingRoll", back_populates="slitting", cascade="all, delete-orphan")
    wastage_record = relationship(
        "SlittingWastage", back_populates="slitting", uselist=False, cascade="all, delete-orphan"
    )


class SlittingRoll(Base):
    __tablename__ = "slitting_rolls"

    id = Column(Integer, primary_key=True, index=True)
    slitting_id = Column(Integer, ForeignKey("slitting.id"), nullable=False, index=True)
    job_card_id = Column(Integer, ForeignKey("job_cards.id"), nullable=False, index=True)
    source_stock_id = Column(Integer, ForeignKey("stock_items.id"), nullable=False)
    output_stock_id = Column(Integer, ForeignKey("stock_items.id"), nullable=True)
    slitting_roll_weight = Column(Numeric(12, 3), nullable=False)
    slitting_roll_width = Column(Numeric(12, 3), nullable=False)
    slitting_barcode = Column(String(30), nullable=True, index=True)
    add_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Relationships
    slitting = relationship("Slitting", back_populates="rolls")
    output_stock = relationship("StockItem", foreign_keys=[output_stock_id])


class SlittingWastage(Base):
    """Companion wastage row, one per slitting record"""
    __tablename__ = "slitting_wastage"

    id = Column(Integer, primary_key=True, index=True)
    slitting_id = Column(Integer, ForeignKey("slitting.id"), nullable=False, unique=True)
    job_card_id = Column(Integer, ForeignKey("job_cards.id"), nullable=False, index=True)
    slitting_wastage = Column(Numeric(12, 3), default=Decimal("0.000"), nullable=False)
    add_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    slitting = relationship("Slitting", back_populates="wastage_record")
