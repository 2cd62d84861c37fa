from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, joinedload
from typing import List
import logging

from database import get_db
from models.user import User
from models.customers import Customer
from models.finished_goods import CompleteItem, CompleteItemState
from models.sales import DocumentState
from models.sales_returns import ReturnInfo, ReturnItem
from schemas.customers import CustomerOption
from schemas.sales import (
    SalesDocumentCreate,
    SalesDocumentUpdate,
    ReturnInfoResponse,
    ReturnInfoDetail,
    ReturnItemResponse,
)
from dependencies import get_current_user
from utils.sales_documents import get_active_customer, apply_customer, total_bags, sync_lines, release_all

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sales/return")


def return_payload(return_info: ReturnInfo, with_items: bool = False):
    fields = dict(
        id=return_info.id,
        customer_id=return_info.customer_id,
        customer_full_name=return_info.customer.customer_full_name if return_info.customer else None,
        customer_address=return_info.customer_address,
        customer_contact=return_info.customer_contact,
        return_no_bags=return_info.return_no_bags,
        add_date=return_info.add_date,
        del_ind=return_info.del_ind,
    )
    if with_items:
        return ReturnInfoDetail(items=[ReturnItemResponse.model_validate(i) for i in return_info.items], **fields)
    return ReturnInfoResponse(**fields)


def get_return_or_404(db: Session, return_id: int) -> ReturnInfo:
    return_info = db.query(ReturnInfo).options(
        joinedload(ReturnInfo.customer)
    ).filter(ReturnInfo.id == return_id, ReturnInfo.del_ind == DocumentState.ACTIVE).first()
    if not return_info:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Return not found")
    return return_info


@router.get("", response_model=List[ReturnInfoResponse])
def get_returns(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    returns = db.query(ReturnInfo).options(
        joinedload(ReturnInfo.customer)
    ).filter(ReturnInfo.del_ind == DocumentState.ACTIVE).order_by(ReturnInfo.id.desc()).all()
    return [return_payload(r) for r in returns]


@router.get("/new")
def get_return_form(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    customers = db.query(Customer).filter(Customer.del_ind == 1).order_by(Customer.customer_full_name).all()
    return {
        "customers": [CustomerOption(customer_id=c.id, customer_full_name=c.customer_full_name) for c in customers]
    }


@router.post("/new", status_code=status.HTTP_201_CREATED)
def create_return(
    payload: SalesDocumentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Record returned goods and put them back in hand"""
    try:
        customer = get_active_customer(db, payload.customerId)

        return_info = ReturnInfo(
            return_no_bags=total_bags(payload.items, payload.totalBags),
            user_id=current_user.id,
            del_ind=DocumentState.ACTIVE
        )
        apply_customer(return_info, customer)
        db.add(return_info)
        db.flush()

        sync_lines(
            db, return_info, payload.items, ReturnItem,
            take_from=CompleteItemState.CONSUMED, put_to=CompleteItemState.IN_HAND,
            user_id=current_user.id
        )

        db.commit()
        db.refresh(return_info)

        logger.info(f"Created return {return_info.id} with {len(return_info.items)} items")
        return {
            "message": "Return created successfully",
            "returnInfoId": return_info.id,
            "items": [ReturnItemResponse.model_validate(i) for i in return_info.items],
        }

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating return: {e}")
        raise HTTPException(status_code=500, detail="Failed to create return")


@router.delete("")
def delete_return(
    id: int = Query(..., description="Return ID"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Soft delete a return; items it brought back count as sold again"""
    return_info = get_return_or_404(db, id)

    try:
        restored = release_all(
            db, return_info, take_from=CompleteItemState.CONSUMED, put_to=CompleteItemState.IN_HAND
        )
        return_info.del_ind = DocumentState.DELETED
        db.commit()

        logger.info(f"Deleted return {id}, {len(restored)} items marked sold again")
        return {"success": True, "message": "Return deleted successfully"}

    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting return {id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete return")


@router.get("/validate-barcode")
def validate_return_barcode(
    barcode: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """A returnable item is one that was sold and is not on an active return"""
    complete_item = db.query(CompleteItem).filter(
        CompleteItem.complete_item_barcode == barcode.strip()
    ).first()
    if not complete_item:
        raise HTTPException(status_code=404, detail="Barcode not found in complete items")

    on_return = db.query(ReturnItem).join(ReturnInfo).filter(
        ReturnItem.complete_item_id == complete_item.id,
        ReturnInfo.del_ind == DocumentState.ACTIVE
    ).first()
    if complete_item.del_ind != CompleteItemState.CONSUMED:
        detail = "This item has already been returned" if on_return else "This item has not been sold"
        raise HTTPException(status_code=409, detail=detail)

    return {
        "data": {
            "complete_item_id": complete_item.id,
            "barcode": complete_item.complete_item_barcode,
            "bagType": complete_item.bundle_type,
            "bagTypeId": complete_item.bag_type_id,
            "weight": complete_item.complete_item_weight,
            "bags": complete_item.complete_item_bags,
        }
    }


@router.get("/{return_id}", response_model=ReturnInfoDetail)
def get_return(
    return_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return return_payload(get_return_or_404(db, return_id), with_items=True)


@router.put("/{return_id}/update", response_model=ReturnInfoDetail)
def update_return(
    return_id: int,
    payload: SalesDocumentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Replace header and lines; items dropped from the return count as sold again"""
    return_info = get_return_or_404(db, return_id)

    try:
        customer = get_active_customer(db, payload.customerId)
        apply_customer(return_info, customer)
        return_info.return_no_bags = total_bags(payload.items, payload.totalBags)

        sync_lines(
            db, return_info, payload.items, ReturnItem,
            take_from=CompleteItemState.CONSUMED, put_to=CompleteItemState.IN_HAND,
            user_id=current_user.id
        )

        db.commit()
        db.refresh(return_info)

        logger.info(f"Updated return {return_id}")
        return return_payload(return_info, with_items=True)

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating return {return_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update return")
