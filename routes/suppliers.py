from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from database import get_db
from models.user import User
from models.suppliers import Supplier
from schemas.suppliers import SupplierCreate, SupplierUpdate, SupplierResponse
from dependencies import get_current_user

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/job/supplier")


def get_supplier_or_404(db: Session, supplier_id: int) -> Supplier:
    supplier = db.query(Supplier).filter(Supplier.id == supplier_id, Supplier.del_ind == 1).first()
    if not supplier:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Supplier not found")
    return supplier


@router.get("")
def get_suppliers(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    suppliers = db.query(Supplier).filter(Supplier.del_ind == 1).order_by(Supplier.supplier_name).all()
    return {
        "message": "Suppliers retrieved successfully",
        "data": [SupplierResponse.model_validate(s) for s in suppliers]
    }


@router.get("/{supplier_id}")
def get_supplier(
    supplier_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    supplier = get_supplier_or_404(db, supplier_id)
    return {
        "message": "Supplier retrieved successfully",
        "data": SupplierResponse.model_validate(supplier)
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_supplier(
    supplier: SupplierCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    existing = db.query(Supplier).filter(
        Supplier.supplier_name == supplier.supplier_name,
        Supplier.del_ind == 1
    ).first()
    if existing:
        raise HTTPException(status_code=400, detail="Supplier with this name already exists")

    try:
        db_supplier = Supplier(**supplier.model_dump(), del_ind=1)
        db.add(db_supplier)
        db.commit()
        db.refresh(db_supplier)

        logger.info(f"Created supplier {db_supplier.id} '{db_supplier.supplier_name}'")
        return {
            "message": "Supplier created successfully",
            "data": SupplierResponse.model_validate(db_supplier)
        }

    except Exception as e:
        db.rollback()
        logger.error(f"Error creating supplier: {e}")
        raise HTTPException(status_code=500, detail="Failed to create supplier")


@router.put("/{supplier_id}")
def update_supplier(
    supplier_id: int,
    supplier_update: SupplierUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    supplier = get_supplier_or_404(db, supplier_id)

    for field, value in supplier_update.model_dump(exclude_unset=True).items():
        setattr(supplier, field, value)

    db.commit()
    db.refresh(supplier)
    return {
        "message": "Supplier updated successfully",
        "data": SupplierResponse.model_validate(supplier)
    }


@router.delete("/{supplier_id}")
def delete_supplier(
    supplier_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    supplier = get_supplier_or_404(db, supplier_id)
    supplier.del_ind = 0
    db.commit()

    logger.info(f"Deleted supplier {supplier_id}")
    return {"message": "Supplier deleted successfully"}
