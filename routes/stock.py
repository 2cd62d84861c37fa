from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func, or_
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional
import logging

from database import get_db
from models.user import User
from models.stock import StockItem, StockStage, StockStatus
from models.job_masters import Particular
from models.job_card import JobCard
from models.slitting import SlittingRoll
from models.printing import PrintPack
from models.cutting import Cutting, CuttingRoll
from models.finished_goods import BundleInfo, CompleteItem, NonCompleteItem, CompleteItemState
from models.sales import SalesItem
from models.sales_returns import ReturnItem
from schemas.stock import (
    StockRow,
    ParticularOption,
    StockListResponse,
    CompleteItemCreate,
    CompleteItemResponse,
    NonCompleteItemCreate,
    NonCompleteItemResponse,
    BundleFinalizeRequest,
    BundleUpdateRequest,
    BundleInfoResponse,
    BundleProvenance,
)
from dependencies import get_current_user
from utils.barcodes import generate_barcode
from utils.bag_types import resolve_bag_type
from utils.dates import parse_form_day
from utils.finished_goods import (
    reserve_unbundled_id, in_hand_items, finished_goods_items, totals
)

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stock")


def stock_row(stock_item: StockItem) -> StockRow:
    try:
        used_by = StockStage(stock_item.material_used_by).label
    except ValueError:
        used_by = str(stock_item.material_used_by)
    return StockRow(
        id=stock_item.id,
        stock_barcode=str(stock_item.stock_barcode),
        particular_id=stock_item.particular_id,
        particular_name=stock_item.particular.particular_name if stock_item.particular else None,
        item_gsm=f"{stock_item.item_gsm or ''}GSM",
        material_item_size=f"{stock_item.material_item_size or ''}CM",
        item_net_weight=stock_item.item_net_weight,
        material_status="IN" if stock_item.material_status == StockStatus.AVAILABLE else "OUT",
        material_used_by=used_by,
        stock_date=stock_item.stock_date,
    )


def day_start(value: str) -> datetime:
    try:
        day = parse_form_day(value)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


@router.get("/stock", response_model=StockListResponse)
def get_stock(
    materialId: Optional[int] = Query(None),
    indatepicker: Optional[str] = Query(None),
    outdatepicker: Optional[str] = Query(None),
    size_id: Optional[str] = Query(None),
    status_id: Optional[str] = Query(None),
    item_gsm: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Ledger units with optional filters"""
    query = db.query(StockItem).options(joinedload(StockItem.particular))

    if materialId:
        query = query.filter(StockItem.particular_id == materialId)

    if status_id not in (None, "", "3", "all"):
        if status_id not in ("0", "1"):
            raise HTTPException(status_code=400, detail="status_id must be 0, 1, 3 or all")
        query = query.filter(StockItem.material_status == int(status_id))

    if size_id:
        query = query.filter(StockItem.material_item_size == size_id.upper().replace("CM", "").strip())

    if item_gsm:
        query = query.filter(StockItem.item_gsm == item_gsm.upper().replace("GSM", "").strip())

    if indatepicker:
        query = query.filter(StockItem.stock_date >= day_start(indatepicker))
    if outdatepicker:
        # End day is inclusive
        query = query.filter(StockItem.stock_date < day_start(outdatepicker) + timedelta(days=1))

    stock_items = query.order_by(StockItem.id.desc()).all()
    particulars = db.query(Particular).filter(Particular.particular_status == 1).order_by(Particular.id).all()

    return StockListResponse(
        data=[stock_row(s) for s in stock_items],
        particulars=[ParticularOption(id=p.id, particular_name=p.particular_name) for p in particulars],
    )


@router.get("/unique")
def get_unique_gsm_sizes(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    rows = db.query(
        StockItem.item_gsm, StockItem.material_item_size
    ).distinct().order_by(StockItem.item_gsm, StockItem.material_item_size).all()
    return {"data": [{"item_gsm": gsm, "material_item_size": size} for gsm, size in rows]}


@router.get("/stockinhand")
def get_stock_in_hand(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Unsold complete items grouped by bag type"""
    rows = in_hand_items(db).with_entities(
        CompleteItem.bundle_type,
        func.max(CompleteItem.bag_type_id),
        func.coalesce(func.sum(CompleteItem.complete_item_weight), 0),
        func.coalesce(func.sum(CompleteItem.complete_item_bags), 0),
    ).group_by(CompleteItem.bundle_type).all()

    data = [
        {
            "bag_id": bag_type_id or 0,
            "bag_type": bundle_type,
            "itemweight": round(float(weight), 2),
            "itembags": int(bags),
        }
        for bundle_type, bag_type_id, weight, bags in rows
    ]
    data.sort(key=lambda row: (row["bag_id"], row["bag_type"]))
    return {"data": data}


@router.get("/finishingGoods")
def get_finishing_goods(
    status_filter: str = Query("IN", alias="status"),
    size: Optional[str] = Query(None, description="Bag type name"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Bundled goods still in hand (IN) or already sold (OUT)"""
    direction = status_filter.strip().upper()
    if direction not in ("IN", "OUT"):
        raise HTTPException(status_code=400, detail="status must be IN or OUT")

    items = finished_goods_items(db, direction, size).order_by(CompleteItem.id.desc()).all()
    return {
        "status": direction,
        "data": [CompleteItemResponse.model_validate(i) for i in items],
        "totals": totals(finished_goods_items(db, direction, size)),
    }


@router.get("/debug-counts")
def get_debug_counts(
    bundle_type: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Reconcile stock-in-hand against bundled finished goods"""
    in_hand = totals(in_hand_items(db, bundle_type))
    bundled = totals(finished_goods_items(db, "IN", bundle_type))
    unbundled = totals(
        in_hand_items(db, bundle_type).filter(CompleteItem.complete_item_info == CompleteItemState.UNBUNDLED)
    )
    return {
        "bundle_type": bundle_type,
        "stockInHand": in_hand,
        "finishingGoodsIn": bundled,
        "unbundled": unbundled,
        "finishingGoodsOut": totals(finished_goods_items(db, "OUT", bundle_type)),
    }


# Bundles

def bundle_members(db: Session, payload, bundle_id: Optional[int] = None):
    """Items a bundle will hold; each must be unbundled or already in ``bundle_id``.

    Sold items count only when they already belong to the bundle.
    """
    complete_ids = set(payload.completeItemIds)
    complete_items = db.query(CompleteItem).filter(
        CompleteItem.id.in_(complete_ids),
        or_(CompleteItem.del_ind == CompleteItemState.IN_HAND, CompleteItem.complete_item_info == bundle_id)
    ).all() if complete_ids else []
    if len(complete_items) != len(complete_ids):
        raise HTTPException(status_code=404, detail="Complete item not found")
    if any(i.complete_item_info not in (CompleteItemState.UNBUNDLED, bundle_id) for i in complete_items):
        raise HTTPException(status_code=409, detail="Complete item is already bundled")

    non_complete_ids = set(payload.nonCompleteItemIds)
    non_complete_items = db.query(NonCompleteItem).filter(
        NonCompleteItem.id.in_(non_complete_ids)
    ).all() if non_complete_ids else []
    if len(non_complete_items) != len(non_complete_ids):
        raise HTTPException(status_code=404, detail="Non-complete item not found")
    if any(i.non_complete_info not in (CompleteItemState.UNBUNDLED, bundle_id) for i in non_complete_items):
        raise HTTPException(status_code=409, detail="Non-complete item is already bundled")

    return complete_items, non_complete_items


def apply_bundle_data(bundle: BundleInfo, bundle_data, complete_items, non_complete_items):
    bundle.cutting_roll_id = bundle_data.cutting_roll_id
    bundle.bundle_type = bundle_data.bundle_type or (complete_items[0].bundle_type if complete_items else None)
    bundle.total_bags = sum(i.complete_item_bags for i in complete_items) \
        + sum(i.non_complete_bags for i in non_complete_items)
    bundle.total_weight = sum((i.complete_item_weight for i in complete_items), Decimal("0.000")) \
        + sum((i.non_complete_weight for i in non_complete_items), Decimal("0.000"))
    bundle.slitting_wastage = bundle_data.slitting_wastage
    bundle.print_wastage = bundle_data.print_wastage
    bundle.cutting_wastage = bundle_data.cutting_wastage


def check_cutting_roll(db: Session, cutting_roll_id: Optional[int]):
    if cutting_roll_id is not None:
        if not db.query(CuttingRoll).filter(CuttingRoll.id == cutting_roll_id).first():
            raise HTTPException(status_code=404, detail="Cutting roll not found")


@router.get("/bundle")
def get_bundles(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    bundles = db.query(BundleInfo).filter(
        BundleInfo.id != CompleteItemState.UNBUNDLED
    ).order_by(BundleInfo.id.desc()).all()
    return {"data": [BundleInfoResponse.model_validate(b) for b in bundles]}


def wastage_chain(db: Session, cutting: Cutting):
    """Print and slitting wastage of the records that produced a cutting source.

    A printed pack leads to its print record, whose source is a slit roll.
    A slit roll cut without printing leads straight to its slitting record.
    """
    print_wastage = Decimal("0.000")
    slitting_wastage = Decimal("0.000")
    slit_stock_id = cutting.source_stock_id

    pack = db.query(PrintPack).filter(PrintPack.output_stock_id == cutting.source_stock_id).first()
    if pack:
        print_wastage = pack.print_record.print_wastage or Decimal("0.000")
        slit_stock_id = pack.print_record.source_stock_id

    slit_roll = db.query(SlittingRoll).filter(SlittingRoll.output_stock_id == slit_stock_id).first()
    if slit_roll and slit_roll.slitting.wastage_record:
        slitting_wastage = slit_roll.slitting.wastage_record.slitting_wastage

    return print_wastage, slitting_wastage


@router.get("/bundle/barcode/{barcode}")
def get_bundle_provenance(
    barcode: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Wastage recorded along the path that produced a cutting roll"""
    roll = db.query(CuttingRoll).filter(CuttingRoll.cutting_barcode == barcode.strip()).first()
    if not roll:
        raise HTTPException(status_code=404, detail="Cutting roll not found")

    job_card = db.query(JobCard).options(
        joinedload(JobCard.cut_bag_type)
    ).filter(JobCard.id == roll.job_card_id).first()

    print_wastage, slitting_wastage = wastage_chain(db, roll.cutting)

    data = BundleProvenance(
        cutting_roll_id=roll.id,
        cutting_barcode=roll.cutting_barcode,
        job_card_id=roll.job_card_id,
        bag_type=job_card.cut_bag_type.bag_type if job_card and job_card.cut_bag_type else None,
        no_of_bags=roll.no_of_bags,
        cutting_roll_weight=roll.cutting_roll_weight,
        cutting_wastage=roll.cutting_wastage,
        print_wastage=print_wastage,
        slitting_wastage=slitting_wastage,
    )
    return {"message": "Bundle data fetched successfully", "data": data}


@router.get("/bundle/complete")
def get_complete_items(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Complete items waiting to be bundled"""
    items = in_hand_items(db).filter(
        CompleteItem.complete_item_info == CompleteItemState.UNBUNDLED
    ).order_by(CompleteItem.id.desc()).all()
    return {
        "message": "Complete items fetched successfully",
        "items": [CompleteItemResponse.model_validate(i) for i in items],
    }


@router.post("/bundle/complete", status_code=status.HTTP_201_CREATED)
def create_complete_item(
    item: CompleteItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    bag_type = resolve_bag_type(db, item.bag_type_id, item.bundle_type)

    try:
        complete_item = CompleteItem(
            complete_item_info=CompleteItemState.UNBUNDLED,
            bag_type_id=bag_type.id,
            bundle_type=bag_type.name,
            complete_item_weight=item.complete_item_weight,
            complete_item_bags=item.complete_item_bags,
            user_id=current_user.id,
            del_ind=CompleteItemState.IN_HAND
        )
        db.add(complete_item)
        db.flush()
        complete_item.complete_item_barcode = generate_barcode(complete_item.id)

        db.commit()
        db.refresh(complete_item)

        logger.info(f"Created complete item {complete_item.complete_item_barcode} ({complete_item.bundle_type})")
        return {
            "message": "Complete item created successfully",
            "item": CompleteItemResponse.model_validate(complete_item),
        }

    except Exception as e:
        db.rollback()
        logger.error(f"Error creating complete item: {e}")
        raise HTTPException(status_code=500, detail="Failed to create complete item")


@router.delete("/bundle/complete/{item_id}")
def delete_complete_item(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a complete item that is still loose: in hand, unbundled and on no sales document"""
    complete_item = db.query(CompleteItem).filter(CompleteItem.id == item_id).first()
    if not complete_item:
        raise HTTPException(status_code=404, detail="Item not found")
    if complete_item.del_ind != CompleteItemState.IN_HAND:
        raise HTTPException(status_code=409, detail="A sold item cannot be deleted")
    if complete_item.complete_item_info != CompleteItemState.UNBUNDLED:
        raise HTTPException(status_code=409, detail="A bundled item cannot be deleted")
    for line_model in (SalesItem, ReturnItem):
        if db.query(line_model).filter(line_model.complete_item_id == item_id).first():
            raise HTTPException(status_code=409, detail="Item appears on a sales document")

    try:
        db.delete(complete_item)
        db.commit()

        logger.info(f"Deleted complete item {complete_item.complete_item_barcode}")
        return {"message": "Item deleted successfully"}

    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting complete item {item_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete item")


@router.get("/bundle/non-complete")
def get_non_complete_items(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    items = db.query(NonCompleteItem).filter(
        NonCompleteItem.del_ind == 1,
        NonCompleteItem.non_complete_info == CompleteItemState.UNBUNDLED
    ).order_by(NonCompleteItem.id.desc()).all()
    return {
        "message": "Non-complete items fetched successfully",
        "items": [NonCompleteItemResponse.model_validate(i) for i in items],
    }


@router.post("/bundle/non-complete", status_code=status.HTTP_201_CREATED)
def create_non_complete_item(
    item: NonCompleteItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        non_complete_item = NonCompleteItem(
            non_complete_info=CompleteItemState.UNBUNDLED,
            bundle_type=item.bundle_type.strip(),
            non_complete_weight=item.non_complete_weight,
            non_complete_bags=item.non_complete_bags,
            user_id=current_user.id,
            del_ind=1
        )
        db.add(non_complete_item)
        db.commit()
        db.refresh(non_complete_item)

        logger.info(f"Created non-complete item {non_complete_item.id}")
        return {
            "message": "Non-complete item created successfully",
            "item": NonCompleteItemResponse.model_validate(non_complete_item),
        }

    except Exception as e:
        db.rollback()
        logger.error(f"Error creating non-complete item: {e}")
        raise HTTPException(status_code=500, detail="Failed to create non-complete item")


@router.post("/bundle/finalize", status_code=status.HTTP_201_CREATED)
def finalize_bundle(
    payload: BundleFinalizeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create a bundle and link its items, all or nothing"""
    if not payload.completeItemIds and not payload.nonCompleteItemIds:
        raise HTTPException(status_code=400, detail="No items selected for the bundle")

    try:
        check_cutting_roll(db, payload.bundleData.cutting_roll_id)
        complete_items, non_complete_items = bundle_members(db, payload)

        reserve_unbundled_id(db)

        bundle = BundleInfo(user_id=current_user.id)
        apply_bundle_data(bundle, payload.bundleData, complete_items, non_complete_items)
        db.add(bundle)
        db.flush()

        for item in complete_items:
            item.complete_item_info = bundle.id
        for item in non_complete_items:
            item.non_complete_info = bundle.id

        db.commit()
        db.refresh(bundle)

        logger.info(
            f"Finalized bundle {bundle.id} with {len(complete_items)} complete "
            f"and {len(non_complete_items)} non-complete items"
        )
        return {
            "message": "Bundle finalized successfully",
            "bundleInfo": BundleInfoResponse.model_validate(bundle),
        }

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error finalizing bundle: {e}")
        raise HTTPException(status_code=500, detail="Failed to finalize bundle")


@router.put("/bundle/update")
def update_bundle(
    payload: BundleUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Replace a bundle's details and item set; dropped items go back to unbundled"""
    bundle_id = payload.bundleData.id
    bundle = db.query(BundleInfo).filter(BundleInfo.id == bundle_id).first()
    if not bundle or bundle.id == CompleteItemState.UNBUNDLED:
        raise HTTPException(status_code=404, detail="Bundle not found")
    if not payload.completeItemIds and not payload.nonCompleteItemIds:
        raise HTTPException(status_code=400, detail="No items selected for the bundle")

    try:
        check_cutting_roll(db, payload.bundleData.cutting_roll_id)
        complete_items, non_complete_items = bundle_members(db, payload, bundle.id)

        kept = {i.id for i in complete_items}
        for item in db.query(CompleteItem).filter(CompleteItem.complete_item_info == bundle.id).all():
            if item.id in kept:
                continue
            if item.del_ind == CompleteItemState.CONSUMED:
                raise HTTPException(
                    status_code=409,
                    detail=f"Complete item {item.complete_item_barcode} has been sold and cannot leave its bundle"
                )
            item.complete_item_info = CompleteItemState.UNBUNDLED

        kept = {i.id for i in non_complete_items}
        for item in db.query(NonCompleteItem).filter(NonCompleteItem.non_complete_info == bundle.id).all():
            if item.id not in kept:
                item.non_complete_info = CompleteItemState.UNBUNDLED

        for item in complete_items:
            item.complete_item_info = bundle.id
        for item in non_complete_items:
            item.non_complete_info = bundle.id

        apply_bundle_data(bundle, payload.bundleData, complete_items, non_complete_items)
        bundle.bundle_date = func.now()
        bundle.user_id = current_user.id

        db.commit()
        db.refresh(bundle)

        logger.info(f"Updated bundle {bundle.id}")
        return {
            "message": "Bundle updated successfully",
            "bundle": BundleInfoResponse.model_validate(bundle),
        }

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating bundle {bundle_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update bundle")


@router.get("/bundle/view/{bundle_id}")
def view_bundle(
    bundle_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    bundle = db.query(BundleInfo).filter(BundleInfo.id == bundle_id).first()
    if not bundle or bundle.id == CompleteItemState.UNBUNDLED:
        raise HTTPException(status_code=404, detail="Bundle not found")

    complete_items = db.query(CompleteItem).filter(
        CompleteItem.complete_item_info == bundle.id
    ).order_by(CompleteItem.id).all()
    non_complete_items = db.query(NonCompleteItem).filter(
        NonCompleteItem.non_complete_info == bundle.id
    ).order_by(NonCompleteItem.id).all()

    return {
        "message": "Bundle information fetched successfully",
        "data": BundleInfoResponse.model_validate(bundle),
        "cuttingRoll": {
            "id": bundle.cutting_roll.id,
            "cutting_barcode": bundle.cutting_roll.cutting_barcode,
            "no_of_bags": bundle.cutting_roll.no_of_bags,
        } if bundle.cutting_roll else None,
        "completeItems": [CompleteItemResponse.model_validate(i) for i in complete_items],
        "nonCompleteItems": [NonCompleteItemResponse.model_validate(i) for i in non_complete_items],
    }
