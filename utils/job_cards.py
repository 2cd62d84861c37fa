from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from models.job_card import JobCard, JobSection
from schemas.job_card import JobCardResponse


def build_section_list(slitting_active: bool, printing_active: bool, cutting_active: bool) -> str:
    """Tags of the active stages, always in slitting, printing, cutting order.

    >>> build_section_list(True, False, True)
    '1,3'
    """
    flags = (slitting_active, printing_active, cutting_active)
    return ",".join(tag for tag, active in zip(JobSection.ORDER, flags) if active)


def section_filter(tag: str):
    """SQL condition matching job cards whose section_list contains ``tag``."""
    return or_(
        JobCard.section_list == tag,
        JobCard.section_list.like(f"{tag},%"),
        JobCard.section_list.like(f"%,{tag}"),
        JobCard.section_list.like(f"%,{tag},%"),
    )


def active_job_cards(db: Session, tag: str):
    return db.query(JobCard).options(
        joinedload(JobCard.customer)
    ).filter(
        JobCard.del_ind == 0,
        section_filter(tag)
    ).order_by(JobCard.id.desc()).all()


def get_stage_job_card(db: Session, job_card_id: int, tag: str) -> JobCard:
    job_card = db.query(JobCard).options(
        joinedload(JobCard.customer),
        joinedload(JobCard.particular)
    ).filter(
        JobCard.id == job_card_id,
        JobCard.del_ind == 0,
        section_filter(tag)
    ).first()
    if not job_card:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Job card {job_card_id} not found"
        )
    return job_card


def job_card_summary(job_card: JobCard) -> dict:
    """Job card with its customer and paper roll type, as shown on the stage pages"""
    data = JobCardResponse.model_validate(job_card).model_dump()
    data["customer"] = {
        "id": job_card.customer.id,
        "customer_full_name": job_card.customer.customer_full_name,
        "customer_mobile": job_card.customer.customer_mobile,
        "customer_address": job_card.customer.customer_address,
    } if job_card.customer else None
    data["particular"] = {
        "id": job_card.particular.id,
        "particular_name": job_card.particular.particular_name,
    } if job_card.particular else None
    return data


def job_card_list_item(job_card: JobCard) -> dict:
    return {
        "id": job_card.id,
        "customer_id": job_card.customer_id,
        "customer_full_name": job_card.customer.customer_full_name if job_card.customer else None,
        "section_list": job_card.section_list,
        "add_date": job_card.add_date,
        "delivery_date": job_card.delivery_date,
        "card_slitting": job_card.card_slitting,
        "card_printing": job_card.card_printing,
        "card_cutting": job_card.card_cutting,
    }
