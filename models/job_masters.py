from sqlalchemy import Column, Integer, String, Numeric, DateTime
from sqlalchemy.sql import func
from database import Base
from decimal import Decimal

# Row 1 of print sizes, cutting types and bag types stands for an inactive stage
INACTIVE_LOOKUP_ID = 1


class Particular(Base):
    """Paper roll type (kraft, white, ...)"""
    __tablename__ = "particulars"

    id = Column(Integer, primary_key=True, index=True)
    particular_name = Column(String(100), nullable=False, unique=True)
    particular_status = Column(Integer, default=1, nullable=False)  # 1 = active
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Colour(Base):
    __tablename__ = "colours"

    id = Column(Integer, primary_key=True, index=True)
    colour_name = Column(String(50), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class BagType(Base):
    __tablename__ = "bag_types"

    id = Column(Integer, primary_key=True, index=True)
    bag_type = Column(String(150), nullable=False, unique=True)
    bag_price = Column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class CuttingType(Base):
    __tablename__ = "cutting_types"

    id = Column(Integer, primary_key=True, index=True)
    cutting_type = Column(String(100), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class PrintSize(Base):
    """Printing cylinder sizes"""
    __tablename__ = "print_sizes"

    id = Column(Integer, primary_key=True, index=True)
    print_size = Column(String(50), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
