from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    customer_full_name = Column(String(150), nullable=False, index=True)

    # Contact Details
    customer_mobile = Column(String(20), nullable=True)
    customer_email = Column(String(100), nullable=True)
    customer_address = Column(Text, nullable=True)

    # 1 = active, 0 = deleted
    del_ind = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    job_cards = relationship("JobCard", back_populates="customer")

    def __repr__(self):
        return f"<Customer(id={self.id}, name='{self.customer_full_name}')>"
