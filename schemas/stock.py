from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal


class StockItemResponse(BaseModel):
    id: int
    stock_barcode: int
    particular_id: Optional[int] = None
    material_item_size: Optional[str] = None
    item_gsm: Optional[str] = None
    item_net_weight: Decimal
    material_used_by: int
    produced_by: int
    material_status: int
    main_id: Optional[int] = None
    material_item_id: Optional[int] = None
    source_stock_id: Optional[int] = None
    stock_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class StockDetails(BaseModel):
    """Attributes of the consumed unit echoed back by the attach routes"""
    weight: Decimal
    size: Optional[str] = None
    gsm: Optional[str] = None


class StockRow(BaseModel):
    """Formatted stock list row"""
    id: int
    stock_barcode: str
    particular_id: Optional[int] = None
    particular_name: Optional[str] = None
    item_gsm: str
    material_item_size: str
    item_net_weight: Decimal
    material_status: str
    material_used_by: str
    stock_date: Optional[datetime] = None


class ParticularOption(BaseModel):
    id: int
    particular_name: str


class StockListResponse(BaseModel):
    data: List[StockRow]
    particulars: List[ParticularOption]


# Finished goods

class CompleteItemCreate(BaseModel):
    bag_type_id: Optional[int] = Field(None, description="Known bag type ID")
    bundle_type: Optional[str] = Field(None, description="Bag type name, used when no ID is given")
    complete_item_weight: Decimal = Field(..., ge=0)
    complete_item_bags: int = Field(..., ge=0)


class CompleteItemResponse(BaseModel):
    id: int
    complete_item_info: int
    bag_type_id: Optional[int] = None
    bundle_type: str
    complete_item_weight: Decimal
    complete_item_bags: int
    complete_item_barcode: Optional[str] = None
    complete_item_date: Optional[datetime] = None
    del_ind: int

    class Config:
        from_attributes = True


class NonCompleteItemCreate(BaseModel):
    bundle_type: str = Field(..., min_length=1, max_length=150)
    non_complete_weight: Decimal = Field(..., ge=0)
    non_complete_bags: int = Field(..., ge=0)


class NonCompleteItemResponse(BaseModel):
    id: int
    non_complete_info: int
    bundle_type: str
    non_complete_weight: Decimal
    non_complete_bags: int
    non_complete_date: Optional[datetime] = None
    del_ind: int

    class Config:
        from_attributes = True


class BundleData(BaseModel):
    cutting_roll_id: Optional[int] = None
    bundle_type: Optional[str] = None
    slitting_wastage: Decimal = Decimal("0.000")
    print_wastage: Decimal = Decimal("0.000")
    cutting_wastage: Decimal = Decimal("0.000")


class BundleFinalizeRequest(BaseModel):
    bundleData: BundleData
    completeItemIds: List[int] = []
    nonCompleteItemIds: List[int] = []


class BundleUpdateData(BundleData):
    id: int = Field(..., gt=0, description="Bundle ID")


class BundleUpdateRequest(BaseModel):
    """The bundle keeps exactly the listed items"""
    bundleData: BundleUpdateData
    completeItemIds: List[int] = []
    nonCompleteItemIds: List[int] = []


class BundleInfoResponse(BaseModel):
    id: int
    cutting_roll_id: Optional[int] = None
    bundle_type: Optional[str] = None
    total_bags: int
    total_weight: Decimal
    slitting_wastage: Decimal
    print_wastage: Decimal
    cutting_wastage: Decimal
    bundle_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class BundleProvenance(BaseModel):
    """Wastage recorded along the path that produced a cutting roll"""
    cutting_roll_id: int
    cutting_barcode: str
    job_card_id: int
    bag_type: Optional[str] = None
    no_of_bags: int
    cutting_roll_weight: Decimal
    cutting_wastage: Decimal
    print_wastage: Decimal
    slitting_wastage: Decimal
