from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, joinedload
from typing import List
from decimal import Decimal
import logging

from database import get_db
from models.user import User
from models.job_card import JobSection
from models.stock import StockStage
from models.cutting import Cutting, CuttingRoll
from models.finished_goods import BundleInfo
from schemas.job_card import JobCardListItem
from schemas.cutting import (
    CuttingAttach,
    CuttingRollCreate,
    CuttingResponse,
    CuttingRollResponse,
    CuttingAttachResponse,
    CuttingDetailResponse,
)
from dependencies import get_current_user
from utils.job_cards import active_job_cards, get_stage_job_card, job_card_summary, job_card_list_item
from utils.stock_ledger import find_by_barcode, mark_used, mint, release, retract

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cutting")


def recompute_cutting_wastage(cutting: Cutting):
    cutting.wastage = sum((roll.cutting_wastage for roll in cutting.rolls), Decimal("0.000"))


def ensure_not_bundled(db: Session, roll_ids: List[int]):
    if roll_ids and db.query(BundleInfo).filter(BundleInfo.cutting_roll_id.in_(roll_ids)).first():
        raise HTTPException(status_code=409, detail="Cutting roll has already been bundled")


@router.get("", response_model=List[JobCardListItem])
def get_cutting_jobs(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Job cards with a cutting stage"""
    return [job_card_list_item(jc) for jc in active_job_cards(db, JobSection.CUTTING)]


@router.post("/add-barcode", response_model=CuttingAttachResponse, status_code=201)
def attach_pack(
    payload: CuttingAttach,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Attach a printed pack (or plain roll) to the job card; it is consumed by cutting"""
    get_stage_job_card(db, payload.jobCardId, JobSection.CUTTING)

    try:
        stock_item = find_by_barcode(db, payload.barcode)
        mark_used(db, stock_item, StockStage.CUTTING)

        cutting = Cutting(
            job_card_id=payload.jobCardId,
            source_stock_id=stock_item.id,
            roll_barcode_no=str(stock_item.stock_barcode),
            cutting_weight=payload.weight if payload.weight is not None else stock_item.item_net_weight,
            number_of_roll=0,
            wastage=Decimal("0.000"),
            user_id=current_user.id,
            del_ind=0
        )
        db.add(cutting)

        db.commit()
        db.refresh(cutting)

        logger.info(f"Created cutting record {cutting.id} for job card {payload.jobCardId} from {stock_item.stock_barcode}")
        return {
            "success": True,
            "message": "Cutting barcode added successfully",
            "data": cutting,
            "stockDetails": {
                "weight": stock_item.item_net_weight,
                "size": stock_item.material_item_size,
                "gsm": stock_item.item_gsm,
            },
        }

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error attaching barcode to job card {payload.jobCardId}: {e}")
        raise HTTPException(status_code=500, detail="Failed to add cutting barcode")


@router.delete("/delete-barcode/{cutting_id}")
def delete_cutting(
    cutting_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a cutting record with its rolls, releasing the consumed unit"""
    cutting = db.query(Cutting).filter(Cutting.id == cutting_id).first()
    if not cutting:
        raise HTTPException(status_code=404, detail="Cutting record not found")

    try:
        ensure_not_bundled(db, [roll.id for roll in cutting.rolls])
        for roll in cutting.rolls:
            retract(db, roll.output_stock)

        source = cutting.source_stock
        db.delete(cutting)
        release(db, source)

        db.commit()

        logger.info(f"Deleted cutting record {cutting_id}, released {source.stock_barcode}")
        return {"success": True, "message": "Cutting record deleted successfully"}

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting cutting record {cutting_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete cutting record")


@router.delete("/delete-roll/{roll_id}")
def delete_cutting_roll(
    roll_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    roll = db.query(CuttingRoll).filter(CuttingRoll.id == roll_id).first()
    if not roll:
        raise HTTPException(status_code=404, detail="Cutting roll not found")

    try:
        ensure_not_bundled(db, [roll.id])
        retract(db, roll.output_stock)
        cutting = roll.cutting
        cutting.rolls.remove(roll)
        cutting.number_of_roll = max((cutting.number_of_roll or 0) - 1, 0)
        recompute_cutting_wastage(cutting)

        db.commit()

        logger.info(f"Deleted cutting roll {roll_id} from cutting {cutting.id}")
        return {"success": True, "message": "Cutting roll deleted successfully"}

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting cutting roll {roll_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete cutting roll")


@router.get("/{job_card_id}", response_model=CuttingDetailResponse)
def get_cutting_job(
    job_card_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    job_card = get_stage_job_card(db, job_card_id, JobSection.CUTTING)

    records = db.query(Cutting).options(
        joinedload(Cutting.source_stock)
    ).filter(Cutting.job_card_id == job_card_id).order_by(Cutting.id).all()

    cutting_data = []
    for record in records:
        row = CuttingResponse.model_validate(record).model_dump()
        row["net_weight"] = record.source_stock.item_net_weight if record.source_stock else None
        cutting_data.append(row)

    rolls = db.query(CuttingRoll).filter(
        CuttingRoll.job_card_id == job_card_id
    ).order_by(CuttingRoll.id).all()

    return {
        "data": job_card_summary(job_card),
        "cuttingData": cutting_data,
        "cuttingRollData": rolls,
    }


@router.post("/{job_card_id}/add-roll", status_code=201)
def add_cutting_roll(
    job_card_id: int,
    payload: CuttingRollCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Record a cut roll of bags and mint its stock unit"""
    cutting = db.query(Cutting).filter(
        Cutting.id == payload.cutting_id,
        Cutting.job_card_id == job_card_id
    ).first()
    if not cutting:
        raise HTTPException(status_code=404, detail="Cutting record not found")

    try:
        roll = CuttingRoll(
            job_card_id=job_card_id,
            cutting_roll_weight=payload.cutting_roll_weight,
            no_of_bags=payload.no_of_bags,
            cutting_wastage=payload.cutting_wastage,
            user_id=current_user.id
        )
        cutting.rolls.append(roll)

        output = mint(db, cutting.source_stock, payload.cutting_roll_weight, StockStage.CUTTING)
        roll.output_stock_id = output.id
        roll.cutting_barcode = str(output.stock_barcode)
        cutting.number_of_roll = (cutting.number_of_roll or 0) + 1
        recompute_cutting_wastage(cutting)

        db.commit()
        db.refresh(roll)

        logger.info(f"Added cutting roll {roll.cutting_barcode} ({roll.no_of_bags} bags) to cutting {cutting.id}")
        return {
            "success": True,
            "message": "Cutting roll added successfully",
            "data": CuttingRollResponse.model_validate(roll),
        }

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error adding cutting roll to cutting {payload.cutting_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to add cutting roll")


@router.post("/{job_card_id}/complete")
def complete_cutting(
    job_card_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    job_card = get_stage_job_card(db, job_card_id, JobSection.CUTTING)
    job_card.card_cutting = 1
    db.commit()
    db.refresh(job_card)

    logger.info(f"Cutting completed for job card {job_card_id}")
    return {
        "success": True,
        "message": "Cutting process marked as completed",
        "data": job_card_summary(job_card),
    }
