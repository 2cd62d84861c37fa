from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, joinedload
from typing import List
from decimal import Decimal
import logging

from database import get_db
from models.user import User
from models.job_card import JobSection
from models.stock import StockStage, StockStatus
from models.printing import Print, PrintPack, PrintWastage
from schemas.job_card import JobCardListItem
from schemas.printing import (
    PrintAttach,
    PrintDelete,
    PrintPackCreate,
    PrintPackDelete,
    PrintWastageUpdate,
    PrintResponse,
    PrintPackResponse,
    PrintWastageResponse,
    PrintAttachResponse,
    PrintDetailResponse,
)
from dependencies import get_current_user
from utils.job_cards import active_job_cards, get_stage_job_card, job_card_summary, job_card_list_item
from utils.stock_ledger import find_by_barcode, mark_used, mint, release, retract

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/printing")


def get_print_or_404(db: Session, print_id: int, job_card_id: int) -> Print:
    print_record = db.query(Print).filter(
        Print.id == print_id,
        Print.job_card_id == job_card_id
    ).first()
    if not print_record:
        raise HTTPException(status_code=404, detail="Print record not found")
    return print_record


@router.get("", response_model=List[JobCardListItem])
def get_printing_jobs(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Job cards with a printing stage"""
    return [job_card_list_item(jc) for jc in active_job_cards(db, JobSection.PRINTING)]


@router.get("/{job_card_id}", response_model=PrintDetailResponse)
def get_printing_job(
    job_card_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    job_card = get_stage_job_card(db, job_card_id, JobSection.PRINTING)

    records = db.query(Print).options(
        joinedload(Print.source_stock)
    ).filter(Print.job_card_id == job_card_id).order_by(Print.id).all()

    print_data = []
    for record in records:
        row = PrintResponse.model_validate(record).model_dump()
        row["net_weight"] = record.source_stock.item_net_weight if record.source_stock else None
        print_data.append(row)

    packs = db.query(PrintPack).filter(
        PrintPack.job_card_id == job_card_id
    ).order_by(PrintPack.id).all()

    return {
        "data": job_card_summary(job_card),
        "printData": print_data,
        "printPackData": packs,
    }


@router.post("/{job_card_id}/add-barcode", response_model=PrintAttachResponse, status_code=201)
def attach_roll(
    job_card_id: int,
    payload: PrintAttach,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Attach a slit roll to the job card; the roll is consumed by printing"""
    get_stage_job_card(db, job_card_id, JobSection.PRINTING)

    try:
        stock_item = find_by_barcode(db, payload.roll_barcode_no)
        mark_used(db, stock_item, StockStage.PRINTING)

        print_record = Print(
            job_card_id=job_card_id,
            source_stock_id=stock_item.id,
            print_barcode_no=str(stock_item.stock_barcode),
            number_of_bag=0,
            balance_weight=Decimal("0.000"),
            balance_width=Decimal("0.000"),
            print_wastage=Decimal("0.000"),
            user_id=current_user.id,
            del_ind=0
        )
        db.add(print_record)

        db.commit()
        db.refresh(print_record)

        logger.info(f"Created print record {print_record.id} for job card {job_card_id} from {stock_item.stock_barcode}")
        return {
            "success": True,
            "message": "Printing barcode added successfully",
            "data": print_record,
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
        logger.error(f"Error attaching roll to job card {job_card_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to add printing barcode")


@router.delete("/{job_card_id}/add-barcode")
def delete_print(
    job_card_id: int,
    payload: PrintDelete,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a print record with its packs and wastage, releasing the roll"""
    print_record = get_print_or_404(db, payload.print_id, job_card_id)

    try:
        for pack in print_record.packs:
            retract(db, pack.output_stock)

        source = print_record.source_stock
        db.delete(print_record)
        release(db, source)

        db.commit()

        logger.info(f"Deleted print record {payload.print_id}, released {source.stock_barcode}")
        return {"success": True, "message": "Print record deleted successfully"}

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting print record {payload.print_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete print record")


@router.post("/{job_card_id}/add-pack", status_code=201)
def add_print_pack(
    job_card_id: int,
    payload: PrintPackCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Record a printed pack and mint its stock unit"""
    print_record = get_print_or_404(db, payload.print_id, job_card_id)

    try:
        source = find_by_barcode(db, payload.selectedBarcode)
        if source.material_used_by != StockStage.PRINTING or source.material_status != StockStatus.USED:
            raise HTTPException(
                status_code=400,
                detail=f"Barcode {source.stock_barcode} is not attached to printing"
            )

        pack = PrintPack(
            print_id=print_record.id,
            job_card_id=job_card_id,
            source_stock_id=source.id,
            print_pack_weight=payload.print_pack_weight,
            user_id=current_user.id
        )
        db.add(pack)

        output = mint(db, source, payload.print_pack_weight, StockStage.PRINTING)
        pack.output_stock_id = output.id
        pack.print_barcode = str(output.stock_barcode)
        print_record.number_of_bag = (print_record.number_of_bag or 0) + 1

        db.commit()
        db.refresh(pack)

        logger.info(f"Added print pack {pack.print_barcode} to print {print_record.id}")
        return {
            "success": True,
            "message": "Print pack added successfully",
            "data": PrintPackResponse.model_validate(pack),
        }

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error adding print pack to print {payload.print_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to add print pack")


@router.delete("/{job_card_id}/delete-pack")
def delete_print_pack(
    job_card_id: int,
    payload: PrintPackDelete,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    pack = db.query(PrintPack).filter(
        PrintPack.id == payload.pack_id,
        PrintPack.job_card_id == job_card_id
    ).first()
    if not pack:
        raise HTTPException(status_code=404, detail="Print pack not found")

    try:
        retract(db, pack.output_stock)
        print_record = pack.print_record
        print_record.number_of_bag = max((print_record.number_of_bag or 0) - 1, 0)
        db.delete(pack)

        db.commit()

        logger.info(f"Deleted print pack {payload.pack_id} from print {print_record.id}")
        return {"success": True, "message": "Print pack deleted successfully"}

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting print pack {payload.pack_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete print pack")


@router.post("/{job_card_id}/update-wastage")
def update_print_wastage(
    job_card_id: int,
    payload: PrintWastageUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Set wastage and balance of a print record, creating its wastage row on first use"""
    print_record = get_print_or_404(db, payload.print_id, job_card_id)

    try:
        print_record.print_wastage = payload.print_wastage
        print_record.balance_weight = payload.balance_weight
        print_record.balance_width = payload.balance_width

        if print_record.wastage_record is None:
            print_record.wastage_record = PrintWastage(
                job_card_id=job_card_id,
                user_id=current_user.id
            )
        print_record.wastage_record.print_wastage = payload.print_wastage

        db.commit()
        db.refresh(print_record)

        logger.info(f"Updated wastage of print {print_record.id} to {payload.print_wastage}")
        return {
            "success": True,
            "message": "Print record and wastage updated successfully",
            "data": {
                "print": PrintResponse.model_validate(print_record),
                "wastage": PrintWastageResponse.model_validate(print_record.wastage_record),
            },
        }

    except Exception as e:
        db.rollback()
        logger.error(f"Error updating wastage of print {payload.print_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update print wastage")


@router.post("/{job_card_id}/complete")
def complete_printing(
    job_card_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    job_card = get_stage_job_card(db, job_card_id, JobSection.PRINTING)
    job_card.card_printing = 1
    db.commit()
    db.refresh(job_card)

    logger.info(f"Printing completed for job card {job_card_id}")
    return {
        "success": True,
        "message": "Printing process marked as completed",
        "data": job_card_summary(job_card),
    }
