from pydantic import BaseModel, Field
from typing import Optional, List, Union
from datetime import datetime
from decimal import Decimal

from schemas.stock import StockDetails


class SlittingAttach(BaseModel):
    roll_barcode_no: Union[str, int] = Field(..., description="Barcode of the reel to slit")


class SlittingDelete(BaseModel):
    slitting_id: int


class SlittingRollCreate(BaseModel):
    slitting_id: int
    slitting_roll_weight: Decimal = Field(..., gt=0)
    slitting_roll_width: Decimal = Field(..., gt=0)
    selectedBarcode: Optional[Union[str, int]] = Field(
        None, description="Reel the roll was cut from, defaults to the attached reel"
    )


class SlittingRollDelete(BaseModel):
    roll_id: int


class SlittingWastageUpdate(BaseModel):
    slitting_id: int
    wastage: Decimal = Field(..., ge=0)
    wastage_width: Decimal = Field(Decimal("0.000"), ge=0)


class SlittingResponse(BaseModel):
    id: int
    job_card_id: int
    source_stock_id: int
    roll_barcode_no: str
    number_of_roll: int
    wastage: Decimal
    wastage_width: Decimal
    added_date: Optional[datetime] = None
    del_ind: int

    class Config:
        from_attributes = True


class SlittingWithWeight(SlittingResponse):
    net_weight: Optional[Decimal] = None


class SlittingRollResponse(BaseModel):
    id: int
    slitting_id: int
    job_card_id: int
    source_stock_id: int
    output_stock_id: Optional[int] = None
    slitting_roll_weight: Decimal
    slitting_roll_width: Decimal
    slitting_barcode: Optional[str] = None
    add_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class SlittingWastageResponse(BaseModel):
    id: int
    slitting_id: int
    job_card_id: int
    slitting_wastage: Decimal

    class Config:
        from_attributes = True


class SlittingAttachResponse(BaseModel):
    success: bool = True
    message: str
    data: SlittingResponse
    wastage: SlittingWastageResponse
    stockDetails: StockDetails


class SlittingDetailResponse(BaseModel):
    data: dict
    slittingData: List[SlittingWithWeight]
    slittingRollData: List[SlittingRollResponse]
