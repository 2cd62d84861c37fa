from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, joinedload
from typing import List
from decimal import Decimal
import logging

from database import get_db
from models.user import User
from models.customers import Customer
from models.job_masters import BagType
from models.finished_goods import CompleteItem, CompleteItemState
from models.sales import SalesInfo, SalesItem, DocumentState
from schemas.customers import CustomerOption
from schemas.job_masters import BagTypeResponse
from schemas.sales import (
    SalesDocumentCreate,
    SalesDocumentUpdate,
    SalesInfoResponse,
    SalesInfoDetail,
    SalesItemResponse,
    BarcodeCheckResponse,
    BagTypeLine,
)
from dependencies import get_current_user
from utils.bag_types import match_bag_type_name
from utils.sales_documents import get_active_customer, apply_customer, total_bags, sync_lines, release_all

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sales")


def sales_info_payload(sales_info: SalesInfo, with_items: bool = False):
    fields = dict(
        id=sales_info.id,
        do_number=sales_info.do_number,
        customer_id=sales_info.customer_id,
        customer_full_name=sales_info.customer.customer_full_name if sales_info.customer else None,
        customer_address=sales_info.customer_address,
        customer_contact=sales_info.customer_contact,
        sales_no_bags=sales_info.sales_no_bags,
        add_date=sales_info.add_date,
        del_ind=sales_info.del_ind,
    )
    if with_items:
        return SalesInfoDetail(items=[SalesItemResponse.model_validate(i) for i in sales_info.items], **fields)
    return SalesInfoResponse(**fields)


def get_sales_info_or_404(db: Session, do_id: int) -> SalesInfo:
    sales_info = db.query(SalesInfo).options(
        joinedload(SalesInfo.customer)
    ).filter(SalesInfo.id == do_id, SalesInfo.del_ind == DocumentState.ACTIVE).first()
    if not sales_info:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Delivery order not found")
    return sales_info


@router.get("/do", response_model=List[SalesInfoResponse])
def get_delivery_orders(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    orders = db.query(SalesInfo).options(
        joinedload(SalesInfo.customer)
    ).filter(SalesInfo.del_ind == DocumentState.ACTIVE).order_by(SalesInfo.id.desc()).all()
    return [sales_info_payload(o) for o in orders]


@router.get("/do/new")
def get_delivery_order_form(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    customers = db.query(Customer).filter(Customer.del_ind == 1).order_by(Customer.customer_full_name).all()
    return {
        "customers": [CustomerOption(customer_id=c.id, customer_full_name=c.customer_full_name) for c in customers]
    }


@router.post("/do/new", status_code=status.HTTP_201_CREATED)
def create_delivery_order(
    payload: SalesDocumentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create a delivery order and take its items out of stock, all or nothing"""
    try:
        customer = get_active_customer(db, payload.customerId)

        sales_info = SalesInfo(
            sales_no_bags=total_bags(payload.items, payload.totalBags),
            user_id=current_user.id,
            del_ind=DocumentState.ACTIVE
        )
        apply_customer(sales_info, customer)
        db.add(sales_info)
        db.flush()

        sync_lines(
            db, sales_info, payload.items, SalesItem,
            take_from=CompleteItemState.IN_HAND, put_to=CompleteItemState.CONSUMED,
            user_id=current_user.id
        )

        db.commit()
        db.refresh(sales_info)

        logger.info(f"Created delivery order {sales_info.do_number} with {len(sales_info.items)} items")
        return {
            "message": "Delivery order created successfully",
            "salesInfoId": sales_info.id,
            "doNumber": sales_info.do_number,
            "items": [SalesItemResponse.model_validate(i) for i in sales_info.items],
        }

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating delivery order: {e}")
        raise HTTPException(status_code=500, detail="Failed to create delivery order")


@router.get("/do/validate-barcode", response_model=BarcodeCheckResponse)
def validate_do_barcode(
    barcode: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Complete item in hand for a scanned barcode, priced from its bag type"""
    complete_item = db.query(CompleteItem).options(
        joinedload(CompleteItem.bag_type)
    ).filter(
        CompleteItem.complete_item_barcode == barcode.strip(),
        CompleteItem.del_ind == CompleteItemState.IN_HAND
    ).first()
    if not complete_item:
        raise HTTPException(status_code=404, detail="Barcode not found in complete items or already sold")

    bag_type = complete_item.bag_type
    if bag_type is None:
        bag_type = match_bag_type_name(complete_item.bundle_type, db.query(BagType).order_by(BagType.id).all())

    return BarcodeCheckResponse(
        complete_item_id=complete_item.id,
        barcode=complete_item.complete_item_barcode,
        bagType=bag_type.bag_type if bag_type else complete_item.bundle_type,
        bagTypeId=bag_type.id if bag_type else None,
        weight=complete_item.complete_item_weight,
        bags=complete_item.complete_item_bags,
        price=bag_type.bag_price if bag_type else Decimal("0.00"),
    )


@router.get("/do/{do_id}", response_model=SalesInfoDetail)
def get_delivery_order(
    do_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return sales_info_payload(get_sales_info_or_404(db, do_id), with_items=True)


@router.put("/do/{do_id}/update", response_model=SalesInfoDetail)
def update_delivery_order(
    do_id: int,
    payload: SalesDocumentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Replace header and lines; removed items go back to stock"""
    sales_info = get_sales_info_or_404(db, do_id)

    try:
        customer = get_active_customer(db, payload.customerId)
        apply_customer(sales_info, customer)
        sales_info.sales_no_bags = total_bags(payload.items, payload.totalBags)

        sync_lines(
            db, sales_info, payload.items, SalesItem,
            take_from=CompleteItemState.IN_HAND, put_to=CompleteItemState.CONSUMED,
            user_id=current_user.id
        )

        db.commit()
        db.refresh(sales_info)

        logger.info(f"Updated delivery order {sales_info.do_number}")
        return sales_info_payload(sales_info, with_items=True)

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating delivery order {do_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update delivery order")


@router.delete("/do/{do_id}")
def delete_delivery_order(
    do_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Soft delete a delivery order and return its items to stock"""
    sales_info = get_sales_info_or_404(db, do_id)

    try:
        release_all(db, sales_info, take_from=CompleteItemState.IN_HAND, put_to=CompleteItemState.CONSUMED)
        sales_info.del_ind = DocumentState.DELETED
        db.commit()

        logger.info(f"Deleted delivery order {sales_info.do_number}")
        return {"message": "Delivery order deleted successfully"}

    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting delivery order {do_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete delivery order")


@router.get("/do-numbers")
def get_do_numbers(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    orders = db.query(SalesInfo).options(
        joinedload(SalesInfo.customer)
    ).filter(SalesInfo.del_ind == DocumentState.ACTIVE).order_by(SalesInfo.id.desc()).all()
    return {
        "data": [
            {
                "id": o.id,
                "doNumber": o.do_number,
                "customerId": o.customer_id,
                "customerName": o.customer.customer_full_name if o.customer else "Unknown Customer",
            }
            for o in orders
        ]
    }


@router.get("/bag-types/{do_id}", response_model=List[BagTypeLine])
def get_do_bag_types(
    do_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Bag types on a delivery order, as resolved when its lines were saved"""
    sales_info = get_sales_info_or_404(db, do_id)

    groups = {}
    for item in sales_info.items:
        key = (item.bag_type_id, item.bundle_type if item.bag_type_id is None else None)
        if key not in groups:
            groups[key] = BagTypeLine(
                bagType=item.bag_type.bag_type if item.bag_type else (item.bundle_type or ""),
                bagTypeId=item.bag_type_id,
                resolved=item.bag_type_id is not None,
                quantity=0,
                price=item.item_price,
            )
        groups[key].quantity += item.no_of_bags
    return list(groups.values())


@router.get("/bag-type-names")
def get_bag_type_names(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    bag_types = db.query(BagType).order_by(BagType.id).all()
    return {"data": [BagTypeResponse.model_validate(b) for b in bag_types]}
