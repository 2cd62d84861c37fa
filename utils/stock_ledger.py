"""Barcode stock ledger operations shared by the process stages.

Units are append-only: a stage consumes a unit by flipping its status and
records its output as a new unit with a new barcode.
"""
from decimal import Decimal
from typing import Optional
import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from models.stock import StockItem, StockStage, StockStatus
from utils.barcodes import generate_barcode, parse_barcode

logger = logging.getLogger(__name__)


def find_by_barcode(db: Session, barcode) -> StockItem:
    """Look up a unit by barcode whatever its status."""
    try:
        barcode_value = parse_barcode(barcode)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid barcode format"
        )

    stock_item = db.query(StockItem).filter(StockItem.stock_barcode == barcode_value).first()
    if not stock_item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Barcode not found in stock or unavailable"
        )
    return stock_item


def mark_used(db: Session, stock_item: StockItem, stage: StockStage) -> StockItem:
    """Consume a unit for a stage.

    The status check and the write are one conditional UPDATE, so of two
    requests racing for the same barcode only one gets the row.
    """
    updated = db.query(StockItem).filter(
        StockItem.id == stock_item.id,
        StockItem.material_status == StockStatus.AVAILABLE
    ).update(
        {
            StockItem.material_status: StockStatus.USED,
            StockItem.material_used_by: int(stage),
        },
        synchronize_session=False
    )
    if updated == 0:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Barcode {stock_item.stock_barcode} is already used"
        )
    db.refresh(stock_item)
    logger.info(f"Stock {stock_item.stock_barcode} consumed by {StockStage(stage).label}")
    return stock_item


def release(db: Session, stock_item: StockItem) -> StockItem:
    """Undo mark_used: the unit is available again and back with its producer."""
    stock_item.material_status = StockStatus.AVAILABLE
    stock_item.material_used_by = stock_item.produced_by
    db.flush()
    logger.info(f"Stock {stock_item.stock_barcode} released")
    return stock_item


def mint(
    db: Session,
    source: StockItem,
    weight,
    stage: StockStage,
    size: Optional[str] = None,
    material_status: int = StockStatus.AVAILABLE,
) -> StockItem:
    """Create the unit a stage produced from ``source``.

    The barcode is built from the new ledger row id, so it is unique across
    every stage that mints units.
    """
    stock_item = StockItem(
        particular_id=source.particular_id,
        material_item_size=str(size) if size is not None else source.material_item_size,
        item_gsm=source.item_gsm,
        item_net_weight=Decimal(str(weight)),
        material_used_by=int(stage),
        produced_by=int(stage),
        material_status=material_status,
        main_id=source.main_id,
        material_item_id=source.material_item_id,
        source_stock_id=source.id,
    )
    db.add(stock_item)
    db.flush()
    stock_item.stock_barcode = int(generate_barcode(stock_item.id))
    db.flush()
    logger.info(f"Minted stock {stock_item.stock_barcode} from {source.stock_barcode} ({StockStage(stage).label})")
    return stock_item


def reel_fields(material_item) -> dict:
    """Ledger columns copied from a received reel."""
    return {
        "stock_barcode": parse_barcode(material_item.barcode),
        "particular_id": material_item.particular_id,
        "material_item_size": material_item.size,
        "item_gsm": material_item.gsm,
        "item_net_weight": material_item.net_weight,
    }


def receive(db: Session, material_item, main_id: int) -> StockItem:
    """Create the unit for a reel received on a material receiving note."""
    stock_item = StockItem(
        **reel_fields(material_item),
        material_used_by=int(StockStage.MRN),
        produced_by=int(StockStage.MRN),
        material_status=StockStatus.AVAILABLE,
        main_id=main_id,
        material_item_id=material_item.id,
    )
    db.add(stock_item)
    return stock_item


def reel_unit(db: Session, material_item) -> Optional[StockItem]:
    """The unit a reel was received as (not the units later stages minted from it)."""
    return db.query(StockItem).filter(
        StockItem.material_item_id == material_item.id,
        StockItem.produced_by == StockStage.MRN,
        StockItem.source_stock_id.is_(None)
    ).first()


def restamp(stock_item: StockItem, material_item) -> StockItem:
    """Copy an edited reel onto its unit; only an unused unit can change."""
    if stock_item.material_status != StockStatus.AVAILABLE:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Reel {material_item.barcode} has already been used"
        )
    for key, value in reel_fields(material_item).items():
        setattr(stock_item, key, value)
    return stock_item


def retract(db: Session, stock_item: Optional[StockItem]):
    """Remove a produced unit when the row that produced it is deleted."""
    if stock_item is None:
        return
    if stock_item.material_status != StockStatus.AVAILABLE:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Barcode {stock_item.stock_barcode} has already been used by a later stage"
        )
    db.delete(stock_item)
