from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


class SupplierBase(BaseModel):
    supplier_name: str = Field(..., min_length=1, max_length=150, description="Supplier name")
    supplier_mobile: Optional[str] = Field(None, max_length=20, description="Mobile number")
    supplier_email: Optional[str] = Field(None, max_length=100, description="Email address")
    supplier_address: Optional[str] = Field(None, description="Full address")

    @field_validator('supplier_mobile')
    def validate_mobile(cls, v):
        if v and not v.replace('+', '').replace('-', '').replace(' ', '').isdigit():
            raise ValueError('Mobile number must contain only digits, +, -, and spaces')
        return v


class SupplierCreate(SupplierBase):
    pass


class SupplierUpdate(BaseModel):
    supplier_name: Optional[str] = Field(None, min_length=1, max_length=150)
    supplier_mobile: Optional[str] = Field(None, max_length=20)
    supplier_email: Optional[str] = Field(None, max_length=100)
    supplier_address: Optional[str] = None


class SupplierResponse(SupplierBase):
    id: int
    del_ind: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
