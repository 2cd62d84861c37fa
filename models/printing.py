from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database import Base
from decimal import Decimal


class Print(Base):
    """A slit roll attached to a job card for printing"""
    __tablename__ = "prints"

    id = Column(Integer, primary_key=True, index=True)
    job_card_id = Column(Integer, ForeignKey("job_cards.id"), nullable=False, index=True)
    source_stock_id = Column(Integer, ForeignKey("stock_items.id"), nullable=False)
    print_barcode_no = Column(String(30), nullable=False)
    number_of_bag = Column(Integer, default=0, nullable=False)
    balance_weight = Column(Numeric(12, 3), default=Decimal("0.000"), nullable=False)
    balance_width = Column(Numeric(12, 3), default=Decimal("0.000"), nullable=False)
    print_wastage = Column(Numeric(12, 3), default=Decimal("0.000"), nullable=False)
    added_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    update_date = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    del_ind = Column(Integer, default=0, nullable=False)

    # Relationships
    source_stock = relationship("StockItem")
    packs = relationship("PrintPack", back_populates="print_record", cascade="all, delete-orphan")
    wastage_record = relationship(
        "PrintWastage", back_populates="print_record", uselist=False, cascade="all, delete-orphan"
    )


class PrintPack(Base):
    __tablename__ = "print_packs"

    id = Column(Integer, primary_key=True, index=True)
    print_id = Column(Integer, ForeignKey("prints.id"), nullable=False, index=True)
    job_card_id = Column(Integer, ForeignKey("job_cards.id"), nullable=False, index=True)
    source_stock_id = Column(Integer, ForeignKey("stock_items.id"), nullable=False)
    output_stock_id = Column(Integer, ForeignKey("stock_items.id"), nullable=True)
    print_pack_weight = Column(Numeric(12, 3), nullable=False)
    print_barcode = Column(String(30), nullable=True, index=True)
    add_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Relationships
    print_record = relationship("Print", back_populates="packs")
    output_stock = relationship("StockItem", foreign_keys=[output_stock_id])


class PrintWastage(Base):
    """Companion wastage row, created on the first wastage update"""
    __tablename__ = "print_wastage"

    id = Column(Integer, primary_key=True, index=True)
    print_id = Column(Integer, ForeignKey("prints.id"), nullable=False, unique=True)
    job_card_id = Column(Integer, ForeignKey("job_cards.id"), nullable=False, index=True)
    print_wastage = Column(Numeric(12, 3), default=Decimal("0.000"), nullable=False)
    add_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    print_record = relationship("Print", back_populates="wastage_record")
