from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from database import get_db
from models.user import User
from models.customers import Customer
from schemas.customers import CustomerCreate, CustomerUpdate, CustomerResponse
from dependencies import get_current_user

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/job/customer")


def get_customer_or_404(db: Session, customer_id: int) -> Customer:
    customer = db.query(Customer).filter(Customer.id == customer_id, Customer.del_ind == 1).first()
    if not customer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return customer


@router.get("")
def get_customers(
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Active customers ordered by name"""
    query = db.query(Customer).filter(Customer.del_ind == 1)
    if search:
        query = query.filter(Customer.customer_full_name.ilike(f"%{search}%"))

    customers = query.order_by(Customer.customer_full_name).all()
    return {
        "message": "Customers retrieved successfully",
        "data": [CustomerResponse.model_validate(c) for c in customers]
    }


@router.get("/{customer_id}")
def get_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    customer = get_customer_or_404(db, customer_id)
    return {
        "message": "Customer retrieved successfully",
        "data": CustomerResponse.model_validate(customer)
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_customer(
    customer: CustomerCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        db_customer = Customer(**customer.model_dump(), del_ind=1)
        db.add(db_customer)
        db.commit()
        db.refresh(db_customer)

        logger.info(f"Created customer {db_customer.id} '{db_customer.customer_full_name}'")
        return {
            "message": "Customer created successfully",
            "data": CustomerResponse.model_validate(db_customer)
        }

    except Exception as e:
        db.rollback()
        logger.error(f"Error creating customer: {e}")
        raise HTTPException(status_code=500, detail="Failed to create customer")


@router.put("/{customer_id}")
def update_customer(
    customer_id: int,
    customer_update: CustomerUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    customer = get_customer_or_404(db, customer_id)

    for field, value in customer_update.model_dump(exclude_unset=True).items():
        setattr(customer, field, value)

    db.commit()
    db.refresh(customer)

    logger.info(f"Updated customer {customer_id}")
    return {
        "message": "Customer updated successfully",
        "data": CustomerResponse.model_validate(customer)
    }


@router.delete("/{customer_id}")
def delete_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Soft delete a customer"""
    customer = get_customer_or_404(db, customer_id)
    customer.del_ind = 0
    db.commit()

    logger.info(f"Deleted customer {customer_id}")
    return {"message": "Customer deleted successfully"}
