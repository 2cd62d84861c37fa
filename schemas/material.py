from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal


class MaterialItemCreate(BaseModel):
    """One reel, keyed like the CSV import columns"""
    material_item_reel_no: str = Field(..., min_length=1, max_length=30)
    material_colour: int = Field(..., gt=0, description="Colour ID")
    material_item_particular: Optional[int] = Field(None, description="Particular (paper roll type) ID")
    material_item_variety: str = Field(..., min_length=1, max_length=100)
    material_item_gsm: Decimal = Field(..., gt=0)
    material_item_size: str = Field(..., min_length=1, max_length=20)
    material_item_net_weight: Decimal = Field(..., gt=0)
    material_item_gross_weight: Decimal = Field(..., gt=0)

    @field_validator('material_item_reel_no')
    def validate_reel_no(cls, v):
        v = v.strip()
        if not v.isdecimal():
            raise ValueError('Reel number must be numeric')
        return v


class MaterialNoteCreate(BaseModel):
    supplierId: int = Field(..., gt=0)
    items: List[MaterialItemCreate] = Field(..., min_length=1)


class MaterialItemAdd(BaseModel):
    material_info_id: int = Field(..., gt=0)
    item: MaterialItemCreate


class MaterialItemEdit(MaterialItemCreate):
    material_item_id: Optional[int] = Field(None, description="Existing reel; omit to add a new one")


class MaterialNoteUpdate(BaseModel):
    supplierId: int = Field(..., gt=0)
    items: List[MaterialItemEdit] = []


class MaterialNoteDelete(BaseModel):
    id: int = Field(..., gt=0)


class MaterialItemResponse(BaseModel):
    id: int
    material_info_id: int
    reel_no: str
    colour: str
    particular_id: Optional[int] = None
    variety: str
    gsm: str
    size: str
    net_weight: Decimal
    gross_weight: Decimal
    barcode: str
    material_status: int
    added_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class MaterialNoteResponse(BaseModel):
    id: int
    supplier_id: int
    supplier_name: Optional[str] = None
    total_reels: int
    total_net_weight: Decimal
    total_gross_weight: Decimal
    material_info_status: int
    add_date: Optional[datetime] = None


class MaterialNoteDetail(MaterialNoteResponse):
    items: List[MaterialItemResponse] = []


class MaterialImportResponse(BaseModel):
    message: str
    data: MaterialNoteResponse
    imported: int
    skipped: int
