"""Finished goods views.

``complete_item_info`` holds ``CompleteItemState.UNBUNDLED`` (1) until the
item is finalized into a bundle, then the bundle id. Bundle row 1 is kept as
a placeholder so no real bundle ever gets that id.
"""
from decimal import Decimal
from typing import Optional
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.finished_goods import BundleInfo, CompleteItem, CompleteItemState

logger = logging.getLogger(__name__)

UNBUNDLED_PLACEHOLDER = "UNBUNDLED"


def reserve_unbundled_id(db: Session):
    """Create the placeholder bundle on an empty table so it takes id 1."""
    if db.query(BundleInfo.id).first() is not None:
        return
    placeholder = BundleInfo(bundle_type=UNBUNDLED_PLACEHOLDER, total_bags=0, total_weight=Decimal("0.000"))
    db.add(placeholder)
    db.flush()
    if placeholder.id != CompleteItemState.UNBUNDLED:
        raise RuntimeError(f"Unbundled placeholder got id {placeholder.id}")
    logger.info("Reserved placeholder bundle row")


def in_hand_items(db: Session, bundle_type: Optional[str] = None):
    """Complete items not yet sold, bundled or not"""
    query = db.query(CompleteItem).filter(CompleteItem.del_ind == CompleteItemState.IN_HAND)
    if bundle_type:
        query = query.filter(CompleteItem.bundle_type == bundle_type)
    return query


def finished_goods_items(db: Session, direction: str, bundle_type: Optional[str] = None):
    """IN: bundled and not sold. OUT: sold."""
    query = db.query(CompleteItem)
    if direction == "OUT":
        query = query.filter(CompleteItem.del_ind == CompleteItemState.CONSUMED)
    else:
        query = query.filter(
            CompleteItem.del_ind == CompleteItemState.IN_HAND,
            CompleteItem.complete_item_info != CompleteItemState.UNBUNDLED
        )
    if bundle_type:
        query = query.filter(CompleteItem.bundle_type == bundle_type)
    return query


def totals(query) -> dict:
    """Count, bags and weight over a CompleteItem query"""
    count, bags, weight = query.with_entities(
        func.count(CompleteItem.id),
        func.coalesce(func.sum(CompleteItem.complete_item_bags), 0),
        func.coalesce(func.sum(CompleteItem.complete_item_weight), 0),
    ).one()
    return {
        "count": int(count or 0),
        "bags": int(bags or 0),
        "weight": round(float(weight or 0), 3),
    }
