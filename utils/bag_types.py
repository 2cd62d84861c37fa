"""Bag type resolution for sales lines.

A line's bag type is resolved once when the document is saved: either a
known bag type row or free text that matched none. The result is stored
(``bag_type_id`` + ``bundle_type``) and read back as is.
"""
from dataclasses import dataclass
from typing import Optional, Union

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from models.job_masters import BagType


@dataclass(frozen=True)
class KnownBagType:
    id: int
    name: str


@dataclass(frozen=True)
class FreeTextBagType:
    name: str

    @property
    def id(self) -> None:
        return None


ResolvedBagType = Union[KnownBagType, FreeTextBagType]


def match_bag_type_name(name: str, bag_types) -> Optional[BagType]:
    """Exact case-insensitive match first, then containment either way."""
    wanted = name.strip().lower()
    if not wanted:
        return None
    for bag_type in bag_types:
        if bag_type.bag_type.lower() == wanted:
            return bag_type
    for bag_type in bag_types:
        known = bag_type.bag_type.lower()
        if known in wanted or wanted in known:
            return bag_type
    return None


def resolve_bag_type(
    db: Session,
    bag_type_id: Optional[int] = None,
    name: Optional[str] = None,
) -> ResolvedBagType:
    if bag_type_id:
        bag_type = db.query(BagType).filter(BagType.id == bag_type_id).first()
        if not bag_type:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Bag type {bag_type_id} not found"
            )
        return KnownBagType(id=bag_type.id, name=bag_type.bag_type)

    if not name or not name.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Bag type is required"
        )

    bag_types = db.query(BagType).order_by(BagType.id).all()
    matched = match_bag_type_name(name, bag_types)
    if matched:
        return KnownBagType(id=matched.id, name=matched.bag_type)
    return FreeTextBagType(name=name.strip())
