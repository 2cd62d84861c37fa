from pydantic import BaseModel, Field
from typing import Optional, List, Union
from datetime import datetime
from decimal import Decimal

from schemas.stock import StockDetails


class CuttingAttach(BaseModel):
    jobCardId: int
    barcode: Union[str, int]
    weight: Optional[Decimal] = Field(None, ge=0, description="Weight on the scale, defaults to the unit's net weight")
    userId: Optional[int] = None


class CuttingRollCreate(BaseModel):
    cutting_id: int
    cutting_roll_weight: Decimal = Field(..., gt=0)
    no_of_bags: int = Field(..., ge=0)
    cutting_wastage: Decimal = Field(Decimal("0.000"), ge=0)


class CuttingResponse(BaseModel):
    id: int
    job_card_id: int
    source_stock_id: int
    roll_barcode_no: str
    cutting_weight: Decimal
    number_of_roll: int
    wastage: Decimal
    added_date: Optional[datetime] = None
    del_ind: int

    class Config:
        from_attributes = True


class CuttingWithWeight(CuttingResponse):
    net_weight: Optional[Decimal] = None


class CuttingRollResponse(BaseModel):
    id: int
    cutting_id: int
    job_card_id: int
    output_stock_id: Optional[int] = None
    cutting_roll_weight: Decimal
    no_of_bags: int
    cutting_wastage: Decimal
    cutting_barcode: Optional[str] = None
    add_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class CuttingAttachResponse(BaseModel):
    success: bool = True
    message: str
    data: CuttingResponse
    stockDetails: StockDetails


class CuttingDetailResponse(BaseModel):
    data: dict
    cuttingData: List[CuttingWithWeight]
    cuttingRollData: List[CuttingRollResponse]
