from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database import Base
from decimal import Decimal


class CompleteItemState:
    """complete_item_info == UNBUNDLED until a bundle is finalized, then the bundle id"""
    UNBUNDLED = 1

    IN_HAND = 1   # del_ind
    CONSUMED = 0  # del_ind


class BundleInfo(Base):
    __tablename__ = "bundle_info"

    id = Column(Integer, primary_key=True, index=True)
    cutting_roll_id = Column(Integer, ForeignKey("cutting_rolls.id"), nullable=True, index=True)
    bundle_type = Column(String(150), nullable=True)
    total_bags = Column(Integer, default=0, nullable=False)
    total_weight = Column(Numeric(12, 3), default=Decimal("0.000"), nullable=False)
    slitting_wastage = Column(Numeric(12, 3), default=Decimal("0.000"), nullable=False)
    print_wastage = Column(Numeric(12, 3), default=Decimal("0.000"), nullable=False)
    cutting_wastage = Column(Numeric(12, 3), default=Decimal("0.000"), nullable=False)
    bundle_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    cutting_roll = relationship("CuttingRoll")


class CompleteItem(Base):
    """Finished goods ready for sale"""
    __tablename__ = "complete_items"

    id = Column(Integer, primary_key=True, index=True)
    complete_item_info = Column(Integer, default=CompleteItemState.UNBUNDLED, nullable=False, index=True)
    bag_type_id = Column(Integer, ForeignKey("bag_types.id"), nullable=True)
    bundle_type = Column(String(150), nullable=False, index=True)
    complete_item_weight = Column(Numeric(12, 3), default=Decimal("0.000"), nullable=False)
    complete_item_bags = Column(Integer, default=0, nullable=False)
    complete_item_barcode = Column(String(30), nullable=True, unique=True, index=True)
    complete_item_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    del_ind = Column(Integer, default=CompleteItemState.IN_HAND, nullable=False, index=True)

    bag_type = relationship("BagType")


class NonCompleteItem(Base):
    """Partial bundles kept back from a cutting roll"""
    __tablename__ = "non_complete_items"

    id = Column(Integer, primary_key=True, index=True)
    non_complete_info = Column(Integer, default=CompleteItemState.UNBUNDLED, nullable=False, index=True)
    bundle_type = Column(String(150), nullable=False)
    non_complete_weight = Column(Numeric(12, 3), default=Decimal("0.000"), nullable=False)
    non_complete_bags = Column(Integer, default=0, nullable=False)
    non_complete_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    del_ind = Column(Integer, default=1, nullable=False)
