"""Line handling shared by delivery orders and return notes.

A delivery order takes complete items out of hand (``del_ind`` 1 -> 0); a
return note puts them back (0 -> 1). Saving a document applies the header,
the line diff and the item flips in the caller's transaction.
"""
from decimal import Decimal
from typing import List, Set
import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from models.customers import Customer
from models.finished_goods import CompleteItem
from models.sales import DocumentState
from schemas.sales import DocumentLine
from utils.bag_types import resolve_bag_type

logger = logging.getLogger(__name__)


def get_active_customer(db: Session, customer_id: int) -> Customer:
    customer = db.query(Customer).filter(Customer.id == customer_id, Customer.del_ind == 1).first()
    if not customer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return customer


def apply_customer(document, customer: Customer):
    document.customer_id = customer.id
    document.customer_address = customer.customer_address
    document.customer_contact = customer.customer_mobile


def total_bags(lines: List[DocumentLine], declared: int) -> int:
    return declared or sum(line.bags for line in lines)


def line_values(db: Session, line: DocumentLine, complete_item: CompleteItem) -> dict:
    """Column values of a stored line, with the bag type resolved once"""
    bag_type = resolve_bag_type(
        db,
        line.bagTypeId or complete_item.bag_type_id,
        line.bagType or complete_item.bundle_type,
    )
    return {
        "complete_item_id": complete_item.id,
        "barcode_no": line.barcode or complete_item.complete_item_barcode,
        "bag_type_id": bag_type.id,
        "bundle_type": bag_type.name,
        "n_weight": line.weight,
        "no_of_bags": line.bags,
        "item_price": line.price,
        "item_total": line.total,
    }


def held_items(db: Session, document, put_to: int) -> Set[int]:
    """Complete items whose current state was set by ``document``.

    An item is held while it still sits in ``put_to`` and no newer active
    document of the same kind lists it. A resold or re-returned item belongs
    to the newer document.
    """
    header_model = type(document)
    held = set()
    for line in document.items:
        complete_item = line.complete_item
        if complete_item is None or complete_item.del_ind != put_to:
            continue
        line_model = type(line)
        newest = db.query(line_model).join(header_model).filter(
            line_model.complete_item_id == complete_item.id,
            header_model.del_ind == DocumentState.ACTIVE
        ).order_by(line_model.id.desc()).first()
        if newest is None or newest.id == line.id:
            held.add(complete_item.id)
    return held


def sync_lines(
    db: Session,
    document,
    lines: List[DocumentLine],
    line_model,
    take_from: int,
    put_to: int,
    user_id: int,
):
    """Make ``document.items`` match ``lines``.

    Items on dropped lines go back to ``take_from`` when this document still
    holds them; items on new lines must be in ``take_from`` (or held by this
    document) and move to ``put_to``.
    """
    complete_ids = [line.complete_item_id for line in lines]
    if len(set(complete_ids)) != len(complete_ids):
        raise HTTPException(status_code=400, detail="The same complete item appears on more than one line")

    existing = {item.id: item for item in document.items}
    for line in lines:
        if line.sales_item_id is not None and line.sales_item_id not in existing:
            raise HTTPException(status_code=404, detail=f"Line {line.sales_item_id} not found on this document")

    kept_ids = {line.sales_item_id for line in lines if line.sales_item_id is not None}
    held = held_items(db, document, put_to)

    # Dropped lines and lines that now point at a different item give their item back
    released = set()
    for item_id, item in existing.items():
        line = next((l for l in lines if l.sales_item_id == item_id), None)
        if item_id not in kept_ids or line.complete_item_id != item.complete_item_id:
            released.add(item.complete_item_id)
    released = (released & held) - set(complete_ids)
    for complete_item in db.query(CompleteItem).filter(CompleteItem.id.in_(released)).all() if released else []:
        complete_item.del_ind = take_from
    for item_id in set(existing) - kept_ids:
        document.items.remove(existing[item_id])

    for line in lines:
        complete_item = db.query(CompleteItem).filter(CompleteItem.id == line.complete_item_id).first()
        if not complete_item:
            raise HTTPException(status_code=404, detail=f"Complete item {line.complete_item_id} not found")
        if complete_item.id not in held and complete_item.del_ind != take_from:
            raise HTTPException(
                status_code=409,
                detail=f"Complete item {complete_item.complete_item_barcode or complete_item.id} is not available"
            )
        complete_item.del_ind = put_to

        values = line_values(db, line, complete_item)
        if line.sales_item_id is not None:
            for key, value in values.items():
                setattr(existing[line.sales_item_id], key, value)
        else:
            document.items.append(line_model(user_id=user_id, **values))

    db.flush()
    logger.info(f"Synced {len(lines)} lines on {type(document).__name__} {document.id}")


def release_all(db: Session, document, take_from: int, put_to: int):
    """Give back every item a deleted document still holds"""
    ids = held_items(db, document, put_to)
    if ids:
        db.query(CompleteItem).filter(CompleteItem.id.in_(ids)).update(
            {CompleteItem.del_ind: take_from}, synchronize_session=False
        )
    return ids


def line_total(lines) -> Decimal:
    return sum((Decimal(str(line.total)) for line in lines), Decimal("0.00"))
