from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal


class SlittingConfig(BaseModel):
    active: bool = False
    value: Optional[str] = None
    remark: Optional[str] = ""


class PrintingConfig(BaseModel):
    active: bool = False
    cylinder_size: Optional[int] = None
    number_of_colors: Optional[str] = None
    selected_colors: List[str] = []
    number_of_bags: Optional[str] = None
    remark: Optional[str] = ""
    block_size: Optional[str] = ""


class CuttingConfig(BaseModel):
    active: bool = False
    cutting_type: Optional[int] = None
    selected_type: Optional[str] = None
    bag_type: Optional[int] = None
    print_name: Optional[str] = None
    number_of_bags: Optional[str] = None
    remark: Optional[str] = ""
    fold: Optional[str] = ""


class JobCardCreate(BaseModel):
    """Job card form payload, used for both create and full overwrite"""
    customer_id: int = Field(..., gt=0, description="Customer ID")
    paper_roll_id: int = Field(..., gt=0, description="Paper roll type (particular) ID")
    gsm: Optional[str] = None
    size: Optional[int] = None
    job_card_date: Optional[str] = Field(None, description="MM/DD/YYYY or YYYY-MM-DD")
    delivery_date: Optional[str] = Field(None, description="MM/DD/YYYY or YYYY-MM-DD")
    unit_price: Decimal = Field(Decimal("0.00"), ge=0)
    slitting: SlittingConfig = SlittingConfig()
    printing: PrintingConfig = PrintingConfig()
    cutting: CuttingConfig = CuttingConfig()


class JobCardUpdate(JobCardCreate):
    pass


class JobCardResponse(BaseModel):
    id: int
    customer_id: int
    section_list: str
    unit_price: Decimal
    slitting_roll_type: int
    slitting_paper_gsm: Optional[str] = None
    slitting_paper_size: Optional[int] = None
    slitting_size: Optional[str] = None
    slitting_remark: Optional[str] = None
    printing_size: Optional[int] = None
    printing_color_type: Optional[str] = None
    printing_color_name: Optional[str] = None
    printing_no_of_bag: Optional[str] = None
    printing_remark: Optional[str] = None
    block_size: Optional[str] = None
    cutting_type: Optional[int] = None
    cutting_bags_select: Optional[str] = None
    cutting_bag_type: Optional[int] = None
    cutting_print_name: Optional[str] = None
    cutting_no_of_bag: Optional[str] = None
    cutting_remark: Optional[str] = None
    cutting_fold: Optional[str] = None
    add_date: datetime
    delivery_date: Optional[date] = None
    updated_date: Optional[datetime] = None
    card_slitting: int
    card_printing: int
    card_cutting: int
    del_ind: int

    class Config:
        from_attributes = True


class JobCardListItem(BaseModel):
    """Job card row with its customer name, used by the job and stage lists"""
    id: int
    customer_id: int
    customer_full_name: Optional[str] = None
    section_list: str
    add_date: datetime
    delivery_date: Optional[date] = None
    card_slitting: int
    card_printing: int
    card_cutting: int


class StockOption(BaseModel):
    item_gsm: Optional[str] = None
    material_item_size: Optional[str] = None
