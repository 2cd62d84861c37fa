from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload
from datetime import datetime, timezone
from typing import List
import logging

from database import get_db
from models.user import User
from models.customers import Customer
from models.job_card import JobCard
from models.job_masters import Particular, Colour, BagType, CuttingType, PrintSize, INACTIVE_LOOKUP_ID
from models.stock import StockItem
from schemas.customers import CustomerResponse
from schemas.job_card import JobCardCreate, JobCardUpdate, JobCardResponse, JobCardListItem
from schemas.job_masters import (
    ParticularResponse, ColourResponse, BagTypeResponse, CuttingTypeResponse, PrintSizeResponse
)
from dependencies import get_current_user
from utils.dates import parse_form_date, parse_form_day
from utils.job_cards import build_section_list, job_card_summary, job_card_list_item

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/job/jobcard")


def form_lookups(db: Session) -> dict:
    """Dropdown data for the job card form"""
    return {
        "customerInfo": [
            CustomerResponse.model_validate(c)
            for c in db.query(Customer).filter(Customer.del_ind == 1).order_by(Customer.customer_full_name).all()
        ],
        "paperRolls": [ParticularResponse.model_validate(p) for p in db.query(Particular).order_by(Particular.id).all()],
        "printSizes": [PrintSizeResponse.model_validate(p) for p in db.query(PrintSize).order_by(PrintSize.id).all()],
        "cuttingTypes": [CuttingTypeResponse.model_validate(c) for c in db.query(CuttingType).order_by(CuttingType.id).all()],
        "colors": [ColourResponse.model_validate(c) for c in db.query(Colour).order_by(Colour.id).all()],
        "bagTypes": [BagTypeResponse.model_validate(b) for b in db.query(BagType).order_by(BagType.id).all()],
    }


def stock_options(db: Session, particular_id: int) -> List[dict]:
    """Distinct gsm/size pairs in stock for a paper roll type"""
    rows = db.query(
        StockItem.item_gsm, StockItem.material_item_size
    ).filter(
        StockItem.particular_id == particular_id
    ).distinct().order_by(StockItem.item_gsm, StockItem.material_item_size).all()
    return [{"item_gsm": gsm, "material_item_size": size} for gsm, size in rows]


def apply_job_card_form(db: Session, job_card: JobCard, form: JobCardCreate):
    """Map the form onto every job card column, overwriting what was there"""
    customer = db.query(Customer).filter(Customer.id == form.customer_id, Customer.del_ind == 1).first()
    if not customer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")

    particular = db.query(Particular).filter(Particular.id == form.paper_roll_id).first()
    if not particular:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Paper roll type not found")

    try:
        add_date = parse_form_date(form.job_card_date)
        delivery_date = parse_form_day(form.delivery_date)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    slitting, printing, cutting = form.slitting, form.printing, form.cutting

    job_card.customer_id = form.customer_id
    job_card.section_list = build_section_list(slitting.active, printing.active, cutting.active)
    job_card.unit_price = form.unit_price
    if add_date is not None:
        job_card.add_date = add_date
    elif job_card.add_date is None:
        job_card.add_date = datetime.now(timezone.utc)
    job_card.delivery_date = delivery_date

    # Slitting
    job_card.slitting_roll_type = form.paper_roll_id
    job_card.slitting_paper_gsm = form.gsm
    job_card.slitting_paper_size = form.size
    job_card.slitting_size = slitting.value if slitting.active else None
    job_card.slitting_remark = (slitting.remark or "") if slitting.active else ""

    # Printing
    job_card.printing_size = (
        printing.cylinder_size if printing.active and printing.cylinder_size else INACTIVE_LOOKUP_ID
    )
    job_card.printing_color_type = printing.number_of_colors if printing.active else None
    job_card.printing_color_name = (
        ",".join((list(printing.selected_colors) + ["0", "0", "0", "0"])[:4])
        if printing.active and printing.selected_colors else None
    )
    job_card.printing_no_of_bag = printing.number_of_bags if printing.active else None
    job_card.printing_remark = (printing.remark or "") if printing.active else ""
    job_card.block_size = (printing.block_size or "") if printing.active else ""

    # Cutting
    job_card.cutting_type = (
        cutting.cutting_type if cutting.active and cutting.cutting_type else INACTIVE_LOOKUP_ID
    )
    job_card.cutting_bags_select = cutting.selected_type if cutting.active else None
    job_card.cutting_bag_type = (
        cutting.bag_type if cutting.active and cutting.bag_type else INACTIVE_LOOKUP_ID
    )
    job_card.cutting_print_name = cutting.print_name if cutting.active else None
    job_card.cutting_no_of_bag = cutting.number_of_bags if cutting.active else None
    job_card.cutting_remark = (cutting.remark or "") if cutting.active else ""
    job_card.cutting_fold = (cutting.fold or "") if cutting.active else ""


def get_job_card_or_404(db: Session, job_card_id: int) -> JobCard:
    job_card = db.query(JobCard).options(
        joinedload(JobCard.customer),
        joinedload(JobCard.particular)
    ).filter(JobCard.id == job_card_id, JobCard.del_ind == 0).first()
    if not job_card:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job card not found")
    return job_card


@router.get("/new")
def get_job_card_form(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return form_lookups(db)


@router.post("/new", response_model=JobCardResponse, status_code=status.HTTP_201_CREATED)
def create_job_card(
    form: JobCardCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create a job card"""
    job_card = JobCard(
        card_slitting=0,
        card_printing=0,
        card_cutting=0,
        user_id=current_user.id,
        del_ind=0
    )
    apply_job_card_form(db, job_card, form)

    try:
        db.add(job_card)
        db.commit()
        db.refresh(job_card)

        logger.info(f"Created job card {job_card.id} for customer {job_card.customer_id} (sections '{job_card.section_list}')")
        return job_card

    except Exception as e:
        db.rollback()
        logger.error(f"Error creating job card: {e}")
        raise HTTPException(status_code=500, detail="Failed to add job card")


@router.get("", response_model=List[JobCardListItem])
def get_job_cards(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    job_cards = db.query(JobCard).options(
        joinedload(JobCard.customer)
    ).filter(JobCard.del_ind == 0).order_by(JobCard.id.desc()).all()
    return [job_card_list_item(jc) for jc in job_cards]


@router.get("/view/{job_card_id}")
def view_job_card(
    job_card_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    job_card = get_job_card_or_404(db, job_card_id)
    data = job_card_summary(job_card)
    data["print_size"] = job_card.print_size.print_size if job_card.print_size else None
    data["cutting_type_name"] = job_card.cut_type.cutting_type if job_card.cut_type else None
    data["bag_type_name"] = job_card.cut_bag_type.bag_type if job_card.cut_bag_type else None
    return {"data": data}


@router.get("/edit/{job_card_id}")
def get_job_card_for_edit(
    job_card_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Job card with everything the edit form needs"""
    job_card = get_job_card_or_404(db, job_card_id)
    return {
        "jobCard": job_card_summary(job_card),
        **form_lookups(db),
        "materials": stock_options(db, job_card.slitting_roll_type),
    }


@router.put("/edit/{job_card_id}", response_model=JobCardResponse)
def update_job_card(
    job_card_id: int,
    form: JobCardUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    job_card = get_job_card_or_404(db, job_card_id)
    apply_job_card_form(db, job_card, form)

    try:
        db.commit()
        db.refresh(job_card)

        logger.info(f"Updated job card {job_card_id} (sections '{job_card.section_list}')")
        return job_card

    except Exception as e:
        db.rollback()
        logger.error(f"Error updating job card {job_card_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update job card")


@router.delete("/{job_card_id}")
def delete_job_card(
    job_card_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Soft delete a job card"""
    job_card = get_job_card_or_404(db, job_card_id)
    job_card.del_ind = 1
    db.commit()

    logger.info(f"Deleted job card {job_card_id}")
    return {"message": "Job card deleted successfully"}


@router.get("/stock/{particular_id}")
def get_stock_options(
    particular_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return {"uniqueValues": stock_options(db, particular_id)}
