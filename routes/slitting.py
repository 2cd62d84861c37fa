from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, joinedload
from typing import List
from decimal import Decimal
import logging

from database import get_db
from models.user import User
from models.job_card import JobSection
from models.stock import StockStage, StockStatus
from models.slitting import Slitting, SlittingRoll, SlittingWastage
from schemas.job_card import JobCardListItem
from schemas.slitting import (
    SlittingAttach,
    SlittingDelete,
    SlittingRollCreate,
    SlittingRollDelete,
    SlittingWastageUpdate,
    SlittingResponse,
    SlittingRollResponse,
    SlittingAttachResponse,
    SlittingDetailResponse,
)
from dependencies import get_current_user
from utils.job_cards import active_job_cards, get_stage_job_card, job_card_summary, job_card_list_item
from utils.stock_ledger import find_by_barcode, mark_used, mint, release, retract

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/slitting")


def get_slitting_or_404(db: Session, slitting_id: int, job_card_id: int) -> Slitting:
    slitting = db.query(Slitting).filter(
        Slitting.id == slitting_id,
        Slitting.job_card_id == job_card_id
    ).first()
    if not slitting:
        raise HTTPException(status_code=404, detail="Slitting record not found")
    return slitting


@router.get("", response_model=List[JobCardListItem])
def get_slitting_jobs(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Job cards with a slitting stage"""
    return [job_card_list_item(jc) for jc in active_job_cards(db, JobSection.SLITTING)]


@router.get("/{job_card_id}", response_model=SlittingDetailResponse)
def get_slitting_job(
    job_card_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Job card with its slitting records and slit rolls"""
    job_card = get_stage_job_card(db, job_card_id, JobSection.SLITTING)

    records = db.query(Slitting).options(
        joinedload(Slitting.source_stock)
    ).filter(Slitting.job_card_id == job_card_id).order_by(Slitting.id).all()

    slitting_data = []
    for record in records:
        row = SlittingResponse.model_validate(record).model_dump()
        row["net_weight"] = record.source_stock.item_net_weight if record.source_stock else None
        slitting_data.append(row)

    rolls = db.query(SlittingRoll).filter(
        SlittingRoll.job_card_id == job_card_id
    ).order_by(SlittingRoll.id).all()

    return {
        "data": job_card_summary(job_card),
        "slittingData": slitting_data,
        "slittingRollData": rolls,
    }


@router.post("/{job_card_id}/add-barcode", response_model=SlittingAttachResponse, status_code=201)
def attach_reel(
    job_card_id: int,
    payload: SlittingAttach,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Attach a reel to the job card; the reel is consumed by slitting"""
    get_stage_job_card(db, job_card_id, JobSection.SLITTING)

    try:
        stock_item = find_by_barcode(db, payload.roll_barcode_no)
        mark_used(db, stock_item, StockStage.SLITTING)

        slitting = Slitting(
            job_card_id=job_card_id,
            source_stock_id=stock_item.id,
            roll_barcode_no=str(stock_item.stock_barcode),
            number_of_roll=0,
            wastage=Decimal("0.000"),
            wastage_width=Decimal("0.000"),
            user_id=current_user.id,
            del_ind=0
        )
        db.add(slitting)
        db.flush()

        wastage = SlittingWastage(
            slitting_id=slitting.id,
            job_card_id=job_card_id,
            slitting_wastage=Decimal("0.000"),
            user_id=current_user.id
        )
        db.add(wastage)

        db.commit()
        db.refresh(slitting)
        db.refresh(wastage)

        logger.info(f"Created slitting record {slitting.id} for job card {job_card_id} from {stock_item.stock_barcode}")
        return {
            "success": True,
            "message": "Slitting barcode added successfully",
            "data": slitting,
            "wastage": wastage,
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
        logger.error(f"Error attaching reel to job card {job_card_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to add slitting barcode")


@router.delete("/{job_card_id}/add-barcode")
def delete_slitting(
    job_card_id: int,
    payload: SlittingDelete,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a slitting record with its rolls and wastage, releasing the reel"""
    slitting = get_slitting_or_404(db, payload.slitting_id, job_card_id)

    try:
        for roll in slitting.rolls:
            retract(db, roll.output_stock)

        source = slitting.source_stock
        db.delete(slitting)
        release(db, source)

        db.commit()

        logger.info(f"Deleted slitting record {payload.slitting_id}, released {source.stock_barcode}")
        return {"success": True, "message": "Slitting record deleted successfully"}

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting slitting record {payload.slitting_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete slitting record")


@router.post("/{job_card_id}/add-roll", status_code=201)
def add_slitting_roll(
    job_card_id: int,
    payload: SlittingRollCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Record a slit roll and mint its stock unit"""
    slitting = get_slitting_or_404(db, payload.slitting_id, job_card_id)

    try:
        if payload.selectedBarcode:
            source = find_by_barcode(db, payload.selectedBarcode)
            if source.material_used_by != StockStage.SLITTING or source.material_status != StockStatus.USED:
                raise HTTPException(
                    status_code=400,
                    detail=f"Barcode {source.stock_barcode} is not attached to slitting"
                )
            if source.id != slitting.source_stock_id:
                raise HTTPException(
                    status_code=400,
                    detail=f"Barcode {source.stock_barcode} is not the reel of slitting record {slitting.id}"
                )
        else:
            source = slitting.source_stock

        roll = SlittingRoll(
            slitting_id=slitting.id,
            job_card_id=job_card_id,
            source_stock_id=source.id,
            slitting_roll_weight=payload.slitting_roll_weight,
            slitting_roll_width=payload.slitting_roll_width,
            user_id=current_user.id
        )
        db.add(roll)

        output = mint(
            db, source, payload.slitting_roll_weight, StockStage.SLITTING,
            size=str(payload.slitting_roll_width)
        )
        roll.output_stock_id = output.id
        roll.slitting_barcode = str(output.stock_barcode)
        slitting.number_of_roll = (slitting.number_of_roll or 0) + 1

        db.commit()
        db.refresh(roll)

        logger.info(f"Added slitting roll {roll.slitting_barcode} to slitting {slitting.id}")
        return {
            "success": True,
            "message": "Slitting roll added successfully",
            "data": SlittingRollResponse.model_validate(roll),
        }

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error adding slitting roll to slitting {payload.slitting_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to add slitting roll")


@router.delete("/{job_card_id}/delete-roll")
def delete_slitting_roll(
    job_card_id: int,
    payload: SlittingRollDelete,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    roll = db.query(SlittingRoll).filter(
        SlittingRoll.id == payload.roll_id,
        SlittingRoll.job_card_id == job_card_id
    ).first()
    if not roll:
        raise HTTPException(status_code=404, detail="Slitting roll not found")

    try:
        retract(db, roll.output_stock)
        slitting = roll.slitting
        slitting.number_of_roll = max((slitting.number_of_roll or 0) - 1, 0)
        db.delete(roll)

        db.commit()

        logger.info(f"Deleted slitting roll {payload.roll_id} from slitting {slitting.id}")
        return {"success": True, "message": "Slitting roll deleted successfully"}

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting slitting roll {payload.roll_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete slitting roll")


@router.post("/{job_card_id}/update-wastage")
def update_slitting_wastage(
    job_card_id: int,
    payload: SlittingWastageUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Set the wastage of a slitting record and its companion row"""
    slitting = get_slitting_or_404(db, payload.slitting_id, job_card_id)

    try:
        slitting.wastage = payload.wastage
        slitting.wastage_width = payload.wastage_width

        if slitting.wastage_record is None:
            slitting.wastage_record = SlittingWastage(
                job_card_id=job_card_id,
                user_id=current_user.id
            )
        slitting.wastage_record.slitting_wastage = payload.wastage

        db.commit()
        db.refresh(slitting)

        logger.info(f"Updated wastage of slitting {slitting.id} to {payload.wastage}")
        return {
            "success": True,
            "message": "Wastage updated successfully",
            "data": SlittingResponse.model_validate(slitting),
        }

    except Exception as e:
        db.rollback()
        logger.error(f"Error updating wastage of slitting {payload.slitting_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update wastage")


@router.post("/{job_card_id}/complete")
def complete_slitting(
    job_card_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    job_card = get_stage_job_card(db, job_card_id, JobSection.SLITTING)
    job_card.card_slitting = 1
    db.commit()
    db.refresh(job_card)

    logger.info(f"Slitting completed for job card {job_card_id}")
    return {
        "success": True,
        "message": "Slitting process marked as completed",
        "data": job_card_summary(job_card),
    }
