from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal


# Delivery orders and returns share the same line shape

class DocumentLine(BaseModel):
    complete_item_id: int = Field(..., gt=0)
    barcode: Optional[str] = None
    bagType: Optional[str] = Field(None, description="Bag type name as entered")
    bagTypeId: Optional[int] = Field(None, description="Known bag type ID, takes precedence over the name")
    weight: Decimal = Field(Decimal("0.000"), ge=0)
    bags: int = Field(0, ge=0)
    price: Decimal = Field(Decimal("0.00"), ge=0)
    total: Decimal = Field(Decimal("0.00"), ge=0)
    sales_item_id: Optional[int] = Field(None, description="Existing line ID when updating")


class SalesDocumentCreate(BaseModel):
    customerId: int = Field(..., gt=0)
    items: List[DocumentLine] = Field(..., min_length=1)
    totalBags: int = Field(0, ge=0)


class SalesDocumentUpdate(SalesDocumentCreate):
    pass


class SalesItemResponse(BaseModel):
    id: int
    sales_info_id: int
    complete_item_id: int
    barcode_no: Optional[str] = None
    bag_type_id: Optional[int] = None
    bundle_type: Optional[str] = None
    n_weight: Decimal
    no_of_bags: int
    item_price: Decimal
    item_total: Decimal
    sales_status: int

    class Config:
        from_attributes = True


class SalesInfoResponse(BaseModel):
    id: int
    do_number: str
    customer_id: int
    customer_full_name: Optional[str] = None
    customer_address: Optional[str] = None
    customer_contact: Optional[str] = None
    sales_no_bags: int
    add_date: Optional[datetime] = None
    del_ind: int


class SalesInfoDetail(SalesInfoResponse):
    items: List[SalesItemResponse] = []


class ReturnItemResponse(BaseModel):
    id: int
    return_info_id: int
    complete_item_id: int
    barcode_no: Optional[str] = None
    bag_type_id: Optional[int] = None
    bundle_type: Optional[str] = None
    n_weight: Decimal
    no_of_bags: int
    item_price: Decimal
    item_total: Decimal
    return_status: int

    class Config:
        from_attributes = True


class ReturnInfoResponse(BaseModel):
    id: int
    customer_id: int
    customer_full_name: Optional[str] = None
    customer_address: Optional[str] = None
    customer_contact: Optional[str] = None
    return_no_bags: int
    add_date: Optional[datetime] = None
    del_ind: int


class ReturnInfoDetail(ReturnInfoResponse):
    items: List[ReturnItemResponse] = []


class BarcodeCheckResponse(BaseModel):
    """Complete item found by a barcode scan on the DO and return forms"""
    complete_item_id: int
    barcode: str
    bagType: str
    bagTypeId: Optional[int] = None
    weight: Decimal
    bags: int
    price: Decimal


# Invoices

class InvoiceLine(BaseModel):
    bagTypeId: Optional[int] = None
    bagType: Optional[str] = None
    quantity: int = Field(..., ge=0)
    price: Decimal = Field(Decimal("0.00"), ge=0)
    total: Decimal = Field(Decimal("0.00"), ge=0)


class InvoiceCreate(BaseModel):
    customerId: int = Field(..., gt=0)
    doId: Optional[int] = None
    doNumber: Optional[str] = None
    items: List[InvoiceLine] = Field(..., min_length=1)


class InvoiceUpdate(InvoiceCreate):
    pass


class BillItemResponse(BaseModel):
    id: int
    bill_info_id: int
    sales_info_id: Optional[int] = None
    bag_type_id: Optional[int] = None
    bundle_type: Optional[str] = None
    bundle_qty: int
    item_price: Decimal
    item_total: Decimal

    class Config:
        from_attributes = True


class BillInfoResponse(BaseModel):
    id: int
    customer_id: int
    customer_full_name: Optional[str] = None
    sales_info_id: Optional[int] = None
    bill_do: str
    bill_total: Decimal
    add_date: Optional[datetime] = None
    del_ind: int


class BillInfoDetail(BillInfoResponse):
    items: List[BillItemResponse] = []


class BagTypeLine(BaseModel):
    """Stored bag type resolution of one DO line group"""
    bagType: str
    bagTypeId: Optional[int] = None
    resolved: bool
    quantity: int
    price: Decimal
