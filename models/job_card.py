from sqlalchemy import Column, Integer, String, DateTime, Date, Numeric, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database import Base
from decimal import Decimal


class JobSection:
    """Stage tags stored in JobCard.section_list"""
    SLITTING = "1"
    PRINTING = "2"
    CUTTING = "3"

    ORDER = (SLITTING, PRINTING, CUTTING)


class JobCard(Base):
    """Customer order driving the slitting, printing and cutting stages"""
    __tablename__ = "job_cards"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)

    # Comma joined subset of "1","2","3"
    section_list = Column(String(10), nullable=False, default="")
    unit_price = Column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)

    # Slitting
    slitting_roll_type = Column(Integer, ForeignKey("particulars.id"), nullable=False)
    slitting_paper_gsm = Column(String(20), nullable=True)
    slitting_paper_size = Column(Integer, nullable=True)
    slitting_size = Column(String(50), nullable=True)
    slitting_remark = Column(Text, default="")

    # Printing
    printing_size = Column(Integer, ForeignKey("print_sizes.id"), nullable=True)
    printing_color_type = Column(String(20), nullable=True)
    printing_color_name = Column(String(100), nullable=True)
    printing_no_of_bag = Column(String(20), nullable=True)
    printing_remark = Column(Text, default="")
    block_size = Column(String(50), default="")

    # Cutting
    cutting_type = Column(Integer, ForeignKey("cutting_types.id"), nullable=True)
    cutting_bags_select = Column(String(50), nullable=True)
    cutting_bag_type = Column(Integer, ForeignKey("bag_types.id"), nullable=True)
    cutting_print_name = Column(String(100), nullable=True)
    cutting_no_of_bag = Column(String(20), nullable=True)
    cutting_remark = Column(Text, default="")
    cutting_fold = Column(String(50), default="")

    # Dates
    add_date = Column(DateTime(timezone=True), nullable=False)
    delivery_date = Column(Date, nullable=True)
    updated_date = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Completion flags, set when a stage is finished
    card_slitting = Column(Integer, default=0, nullable=False)
    card_printing = Column(Integer, default=0, nullable=False)
    card_cutting = Column(Integer, default=0, nullable=False)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    del_ind = Column(Integer, default=0, nullable=False)  # 1 = deleted

    # Relationships
    customer = relationship("Customer", back_populates="job_cards")
    particular = relationship("Particular")
    print_size = relationship("PrintSize")
    cut_type = relationship("CuttingType")
    cut_bag_type = relationship("BagType")

    @property
    def sections(self) -> list:
        return [tag for tag in (self.section_list or "").split(",") if tag]

    def has_section(self, tag: str) -> bool:
        return tag in self.sections

    def __repr__(self):
        return f"<JobCard(id={self.id}, customer_id={self.customer_id}, sections='{self.section_list}')>"
