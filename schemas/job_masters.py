from pydantic import BaseModel, Field
from typing import Optional
from decimal import Decimal


class ParticularCreate(BaseModel):
    particular_name: str = Field(..., min_length=1, max_length=100, description="Paper roll type name")
    particular_status: int = Field(1, ge=0, le=1)


class ParticularResponse(BaseModel):
    id: int
    particular_name: str
    particular_status: int

    class Config:
        from_attributes = True


class ColourCreate(BaseModel):
    colour_name: str = Field(..., min_length=1, max_length=50)


class ColourResponse(BaseModel):
    id: int
    colour_name: str

    class Config:
        from_attributes = True


class BagTypeCreate(BaseModel):
    bag_type: str = Field(..., min_length=1, max_length=150)
    bag_price: Decimal = Field(Decimal("0.00"), ge=0)


class BagTypeUpdate(BaseModel):
    bag_type: Optional[str] = Field(None, min_length=1, max_length=150)
    bag_price: Optional[Decimal] = Field(None, ge=0)


class BagTypeResponse(BaseModel):
    id: int
    bag_type: str
    bag_price: Decimal

    class Config:
        from_attributes = True


class CuttingTypeCreate(BaseModel):
    cutting_type: str = Field(..., min_length=1, max_length=100)


class CuttingTypeResponse(BaseModel):
    id: int
    cutting_type: str

    class Config:
        from_attributes = True


class PrintSizeCreate(BaseModel):
    print_size: str = Field(..., min_length=1, max_length=50)


class PrintSizeResponse(BaseModel):
    id: int
    print_size: str

    class Config:
        from_attributes = True
