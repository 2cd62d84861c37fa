from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database import Base


class Supplier(Base):
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, index=True)
    supplier_name = Column(String(150), nullable=False, index=True)

    # Contact Details
    supplier_mobile = Column(String(20), nullable=True)
    supplier_email = Column(String(100), nullable=True)
    supplier_address = Column(Text, nullable=True)

    # 1 = active, 0 = deleted
    del_ind = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    material_notes = relationship("MaterialInfo", back_populates="supplier")

    def __repr__(self):
        return f"<Supplier(id={self.id}, name='{self.supplier_name}')>"
