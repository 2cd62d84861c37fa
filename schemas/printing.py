from pydantic import BaseModel, Field
from typing import Optional, List, Union
from datetime import datetime
from decimal import Decimal

from schemas.stock import StockDetails


class PrintAttach(BaseModel):
    roll_barcode_no: Union[str, int] = Field(..., description="Barcode of the slit roll to print")


class PrintDelete(BaseModel):
    print_id: int


class PrintPackCreate(BaseModel):
    print_id: int
    print_pack_weight: Decimal = Field(..., gt=0)
    selectedBarcode: Union[str, int] = Field(..., description="Roll the pack was printed from")


class PrintPackDelete(BaseModel):
    pack_id: int


class PrintWastageUpdate(BaseModel):
    print_id: int
    print_wastage: Decimal = Field(..., ge=0)
    balance_weight: Decimal = Field(Decimal("0.000"), ge=0)
    balance_width: Decimal = Field(Decimal("0.000"), ge=0)


class PrintResponse(BaseModel):
    id: int
    job_card_id: int
    source_stock_id: int
    print_barcode_no: str
    number_of_bag: int
    balance_weight: Decimal
    balance_width: Decimal
    print_wastage: Decimal
    added_date: Optional[datetime] = None
    del_ind: int

    class Config:
        from_attributes = True


class PrintWithWeight(PrintResponse):
    net_weight: Optional[Decimal] = None


class PrintPackResponse(BaseModel):
    id: int
    print_id: int
    job_card_id: int
    source_stock_id: int
    output_stock_id: Optional[int] = None
    print_pack_weight: Decimal
    print_barcode: Optional[str] = None
    add_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class PrintWastageResponse(BaseModel):
    id: int
    print_id: int
    job_card_id: int
    print_wastage: Decimal

    class Config:
        from_attributes = True


class PrintAttachResponse(BaseModel):
    success: bool = True
    message: str
    data: PrintResponse
    stockDetails: StockDetails


class PrintDetailResponse(BaseModel):
    data: dict
    printData: List[PrintWithWeight]
    printPackData: List[PrintPackResponse]
