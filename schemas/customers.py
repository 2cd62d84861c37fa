from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


def _validate_mobile(v):
    if v and not v.replace('+', '').replace('-', '').replace(' ', '').isdigit():
        raise ValueError('Mobile number must contain only digits, +, -, and spaces')
    return v


def _validate_email(v):
    if v and '@' not in v:
        raise ValueError('Invalid email address')
    return v


class CustomerBase(BaseModel):
    customer_full_name: str = Field(..., min_length=1, max_length=150, description="Customer name")
    customer_mobile: Optional[str] = Field(None, max_length=20, description="Mobile number")
    customer_email: Optional[str] = Field(None, max_length=100, description="Email address")
    customer_address: Optional[str] = Field(None, description="Full address")

    @field_validator('customer_mobile')
    def validate_mobile(cls, v):
        return _validate_mobile(v)

    @field_validator('customer_email')
    def validate_email(cls, v):
        return _validate_email(v)


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(BaseModel):
    customer_full_name: Optional[str] = Field(None, min_length=1, max_length=150)
    customer_mobile: Optional[str] = Field(None, max_length=20)
    customer_email: Optional[str] = Field(None, max_length=100)
    customer_address: Optional[str] = None

    @field_validator('customer_mobile')
    def validate_mobile(cls, v):
        return _validate_mobile(v)

    @field_validator('customer_email')
    def validate_email(cls, v):
        return _validate_email(v)


class CustomerResponse(CustomerBase):
    id: int
    del_ind: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CustomerOption(BaseModel):
    """Customer entry for dropdowns"""
    customer_id: int
    customer_full_name: str
