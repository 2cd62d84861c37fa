from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import func
import logging

from database import get_db
from models.user import User
from models.job_masters import Particular, Colour, BagType, CuttingType, PrintSize, INACTIVE_LOOKUP_ID
from models.job_card import JobCard
from models.material import MaterialItem
from models.stock import StockItem
from models.finished_goods import CompleteItem
from models.sales import SalesItem
from models.sales_returns import ReturnItem
from models.invoices import BillItem
from schemas.job_masters import (
    ParticularCreate, ParticularResponse,
    ColourCreate, ColourResponse,
    BagTypeCreate, BagTypeUpdate, BagTypeResponse,
    CuttingTypeCreate, CuttingTypeResponse,
    PrintSizeCreate, PrintSizeResponse,
)
from dependencies import get_current_user

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/job")


def ensure_unique(db: Session, column, value: str, label: str):
    if db.query(column.class_).filter(func.lower(column) == value.strip().lower()).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{label} '{value}' already exists"
        )


def save(db: Session, obj, label: str):
    try:
        db.add(obj)
        db.commit()
        db.refresh(obj)
        logger.info(f"Created {label} {obj.id}")
        return obj
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating {label}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to create {label}")


def delete_lookup(db: Session, model, lookup_id: int, label: str, references, sentinel: bool = False):
    """Delete a lookup row that nothing references; the N/A row always stays"""
    row = db.query(model).filter(model.id == lookup_id).first()
    if not row:
        raise HTTPException(status_code=404, detail=f"{label.capitalize()} not found")
    if sentinel and row.id == INACTIVE_LOOKUP_ID:
        raise HTTPException(status_code=400, detail=f"The N/A {label} cannot be deleted")
    for column in references:
        if db.query(column).filter(column == lookup_id).first():
            raise HTTPException(status_code=409, detail=f"{label.capitalize()} {lookup_id} is in use")

    try:
        db.delete(row)
        db.commit()
        logger.info(f"Deleted {label} {lookup_id}")
        return {"message": "Deleted successfully"}
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting {label} {lookup_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to delete {label}")


# Colours

@router.get("/color")
def get_colours(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    colours = db.query(Colour).order_by(Colour.id).all()
    return {"data": [ColourResponse.model_validate(c) for c in colours]}


@router.get("/color/{colour_id}")
def get_colour(
    colour_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    colour = db.query(Colour).filter(Colour.id == colour_id).first()
    if not colour:
        raise HTTPException(status_code=404, detail="Colour not found")
    return {"data": ColourResponse.model_validate(colour)}


@router.post("/color", status_code=status.HTTP_201_CREATED)
def create_colour(
    colour: ColourCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    ensure_unique(db, Colour.colour_name, colour.colour_name, "Colour")
    db_colour = save(db, Colour(colour_name=colour.colour_name.strip()), "colour")
    return {"message": "Colour created successfully", "data": ColourResponse.model_validate(db_colour)}


# Bag types

@router.get("/bagtype")
def get_bag_types(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    bag_types = db.query(BagType).order_by(BagType.id).all()
    return {"data": [BagTypeResponse.model_validate(b) for b in bag_types]}


@router.post("/bagtype", status_code=status.HTTP_201_CREATED)
def create_bag_type(
    bag_type: BagTypeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    ensure_unique(db, BagType.bag_type, bag_type.bag_type, "Bag type")
    db_bag_type = save(
        db, BagType(bag_type=bag_type.bag_type.strip(), bag_price=bag_type.bag_price), "bag type"
    )
    return {"message": "Bag type created successfully", "data": BagTypeResponse.model_validate(db_bag_type)}


@router.put("/bagtype/{bag_type_id}")
def update_bag_type(
    bag_type_id: int,
    bag_type_update: BagTypeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    bag_type = db.query(BagType).filter(BagType.id == bag_type_id).first()
    if not bag_type:
        raise HTTPException(status_code=404, detail="Bag type not found")

    if bag_type_update.bag_type is not None:
        bag_type.bag_type = bag_type_update.bag_type.strip()
    if bag_type_update.bag_price is not None:
        bag_type.bag_price = bag_type_update.bag_price

    db.commit()
    db.refresh(bag_type)
    return {"message": "Bag type updated successfully", "data": BagTypeResponse.model_validate(bag_type)}


@router.delete("/bagtype/{bag_type_id}")
def delete_bag_type(
    bag_type_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return delete_lookup(
        db, BagType, bag_type_id, "bag type",
        [JobCard.cutting_bag_type, CompleteItem.bag_type_id, SalesItem.bag_type_id,
         ReturnItem.bag_type_id, BillItem.bag_type_id],
        sentinel=True
    )


# Cutting types

@router.get("/cuttingtype")
def get_cutting_types(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    cutting_types = db.query(CuttingType).order_by(CuttingType.id).all()
    return {"data": [CuttingTypeResponse.model_validate(c) for c in cutting_types]}


@router.post("/cuttingtype", status_code=status.HTTP_201_CREATED)
def create_cutting_type(
    cutting_type: CuttingTypeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    ensure_unique(db, CuttingType.cutting_type, cutting_type.cutting_type, "Cutting type")
    db_cutting_type = save(db, CuttingType(cutting_type=cutting_type.cutting_type.strip()), "cutting type")
    return {"message": "Cutting type created successfully", "data": CuttingTypeResponse.model_validate(db_cutting_type)}


# Print (cylinder) sizes

@router.get("/printsizes")
def get_print_sizes(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    print_sizes = db.query(PrintSize).order_by(PrintSize.id).all()
    return {"data": [PrintSizeResponse.model_validate(p) for p in print_sizes]}


@router.post("/printsizes", status_code=status.HTTP_201_CREATED)
def create_print_size(
    print_size: PrintSizeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    ensure_unique(db, PrintSize.print_size, print_size.print_size, "Print size")
    db_print_size = save(db, PrintSize(print_size=print_size.print_size.strip()), "print size")
    return {"message": "Print size created successfully", "data": PrintSizeResponse.model_validate(db_print_size)}


@router.delete("/printsizes/{print_size_id}")
def delete_print_size(
    print_size_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return delete_lookup(db, PrintSize, print_size_id, "print size", [JobCard.printing_size], sentinel=True)


# Paper roll types

@router.get("/rolltype")
def get_roll_types(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    particulars = db.query(Particular).filter(Particular.particular_status == 1).order_by(Particular.id).all()
    return {"data": [ParticularResponse.model_validate(p) for p in particulars]}


@router.post("/rolltype", status_code=status.HTTP_201_CREATED)
def create_roll_type(
    particular: ParticularCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    ensure_unique(db, Particular.particular_name, particular.particular_name, "Roll type")
    db_particular = save(
        db,
        Particular(
            particular_name=particular.particular_name.strip(),
            particular_status=particular.particular_status
        ),
        "roll type"
    )
    return {"message": "Roll type created successfully", "data": ParticularResponse.model_validate(db_particular)}


@router.delete("/rolltype/{particular_id}")
def delete_roll_type(
    particular_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return delete_lookup(
        db, Particular, particular_id, "roll type",
        [JobCard.slitting_roll_type, MaterialItem.particular_id, StockItem.particular_id]
    )
