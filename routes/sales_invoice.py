from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, joinedload
from typing import List
import logging

from database import get_db
from models.user import User
from models.sales import SalesInfo, DocumentState
from models.invoices import BillInfo, BillItem
from schemas.sales import InvoiceCreate, InvoiceUpdate, BillInfoResponse, BillInfoDetail, BillItemResponse
from dependencies import get_current_user
from utils.bag_types import resolve_bag_type
from utils.sales_documents import get_active_customer, line_total

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sales/invoice")


def bill_payload(bill: BillInfo, with_items: bool = False):
    fields = dict(
        id=bill.id,
        customer_id=bill.customer_id,
        customer_full_name=bill.customer.customer_full_name if bill.customer else None,
        sales_info_id=bill.sales_info_id,
        bill_do=bill.bill_do,
        bill_total=bill.bill_total,
        add_date=bill.add_date,
        del_ind=bill.del_ind,
    )
    if with_items:
        return BillInfoDetail(items=[BillItemResponse.model_validate(i) for i in bill.items], **fields)
    return BillInfoResponse(**fields)


def get_bill_or_404(db: Session, bill_id: int) -> BillInfo:
    bill = db.query(BillInfo).options(
        joinedload(BillInfo.customer)
    ).filter(BillInfo.id == bill_id, BillInfo.del_ind == DocumentState.ACTIVE).first()
    if not bill:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    return bill


def apply_invoice(db: Session, bill: BillInfo, payload: InvoiceCreate, user_id: int):
    """Set header and replace all lines; the total is the sum of line totals"""
    customer = get_active_customer(db, payload.customerId)

    sales_info = None
    if payload.doId is not None:
        sales_info = db.query(SalesInfo).filter(
            SalesInfo.id == payload.doId,
            SalesInfo.del_ind == DocumentState.ACTIVE
        ).first()
        if not sales_info:
            raise HTTPException(status_code=404, detail="Delivery order not found")

    bill_do = payload.doNumber or (sales_info.do_number if sales_info else None)
    if not bill_do:
        raise HTTPException(status_code=400, detail="DO number is required")

    bill.customer_id = customer.id
    bill.sales_info_id = sales_info.id if sales_info else None
    bill.bill_do = bill_do
    bill.bill_total = line_total(payload.items)

    bill.items.clear()
    for line in payload.items:
        bag_type = resolve_bag_type(db, line.bagTypeId, line.bagType)
        bill.items.append(BillItem(
            sales_info_id=bill.sales_info_id,
            bag_type_id=bag_type.id,
            bundle_type=bag_type.name,
            bundle_qty=line.quantity,
            item_price=line.price,
            item_total=line.total,
            user_id=user_id,
            del_ind=DocumentState.ACTIVE
        ))


@router.get("", response_model=List[BillInfoResponse])
def get_invoices(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    bills = db.query(BillInfo).options(
        joinedload(BillInfo.customer)
    ).filter(BillInfo.del_ind == DocumentState.ACTIVE).order_by(BillInfo.id.desc()).all()
    return [bill_payload(b) for b in bills]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_invoice(
    payload: InvoiceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        bill = BillInfo(user_id=current_user.id, del_ind=DocumentState.ACTIVE)
        apply_invoice(db, bill, payload, current_user.id)
        db.add(bill)

        db.commit()
        db.refresh(bill)

        logger.info(f"Created invoice {bill.id} for {bill.bill_do}, total {bill.bill_total}")
        return {"message": "Invoice created successfully", "data": bill_payload(bill, with_items=True)}

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating invoice: {e}")
        raise HTTPException(status_code=500, detail="Failed to create invoice")


@router.delete("")
def delete_invoice(
    id: int = Query(..., description="Invoice ID"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Soft delete an invoice"""
    bill = get_bill_or_404(db, id)
    bill.del_ind = DocumentState.DELETED
    for item in bill.items:
        item.del_ind = DocumentState.DELETED
    db.commit()

    logger.info(f"Deleted invoice {id}")
    return {"message": "Invoice deleted successfully"}


@router.get("/{bill_id}", response_model=BillInfoDetail)
def get_invoice(
    bill_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return bill_payload(get_bill_or_404(db, bill_id), with_items=True)


@router.put("/{bill_id}/update", response_model=BillInfoDetail)
def update_invoice(
    bill_id: int,
    payload: InvoiceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    bill = get_bill_or_404(db, bill_id)

    try:
        apply_invoice(db, bill, payload, current_user.id)

        db.commit()
        db.refresh(bill)

        logger.info(f"Updated invoice {bill_id}, total {bill.bill_total}")
        return bill_payload(bill, with_items=True)

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating invoice {bill_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update invoice")
