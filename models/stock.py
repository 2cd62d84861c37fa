from sqlalchemy import Column, Integer, BigInteger, String, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database import Base
from decimal import Decimal
import enum


class StockStage(enum.IntEnum):
    """Department that produced or consumed a stock unit"""
    MRN = 1
    SLITTING = 2
    PRINTING = 3
    CUTTING = 4

    @property
    def label(self) -> str:
        return self.name


class StockStatus:
    AVAILABLE = 0
    USED = 1


class StockItem(Base):
    """One barcoded material unit: a received reel, a slit roll, a printed pack or a cut roll"""
    __tablename__ = "stock_items"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    stock_barcode = Column(BigInteger, nullable=True, unique=True, index=True)  # set right after insert for stage outputs
    particular_id = Column(Integer, ForeignKey("particulars.id"), nullable=True, index=True)
    material_item_size = Column(String(20), nullable=True)
    item_gsm = Column(String(20), nullable=True)
    item_net_weight = Column(Numeric(12, 3), default=Decimal("0.000"), nullable=False)

    # Stage holding the unit: the producer while available, the consumer once used
    material_used_by = Column(Integer, nullable=False, default=StockStage.MRN)
    produced_by = Column(Integer, nullable=False, default=StockStage.MRN)
    material_status = Column(Integer, nullable=False, default=StockStatus.AVAILABLE, index=True)

    # Origin batch (MRN header) and the received item it descends from
    main_id = Column(Integer, ForeignKey("material_info.id"), nullable=True, index=True)
    material_item_id = Column(Integer, ForeignKey("material_items.id"), nullable=True)
    source_stock_id = Column(Integer, ForeignKey("stock_items.id"), nullable=True)

    stock_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    particular = relationship("Particular")
    source = relationship("StockItem", remote_side=[id])

    @property
    def is_available(self) -> bool:
        return self.material_status == StockStatus.AVAILABLE

    def __repr__(self):
        return f"<StockItem(id={self.id}, barcode={self.stock_barcode}, status={self.material_status})>"
