from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File, Form
from fastapi.responses import Response
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from decimal import Decimal, InvalidOperation
from typing import Optional
import csv
import io
import logging

from config.settings import settings
from database import get_db
from models.user import User
from models.suppliers import Supplier
from models.job_masters import Particular, Colour
from models.material import MaterialInfo, MaterialItem
from models.stock import StockStatus
from schemas.material import (
    MaterialNoteCreate,
    MaterialItemAdd,
    MaterialItemCreate,
    MaterialItemResponse,
    MaterialNoteResponse,
    MaterialNoteDetail,
    MaterialImportResponse,
    MaterialNoteUpdate,
    MaterialNoteDelete,
)
from schemas.job_masters import ParticularCreate, ParticularResponse, ColourResponse
from schemas.suppliers import SupplierResponse
from dependencies import get_current_user
from utils.barcodes import material_barcode
from utils.stock_ledger import receive, reel_unit, restamp, retract

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/material")

REQUIRED_HEADERS = [
    "material_item_reel_no",
    "material_colour",
    "material_item_particular",
    "material_item_variety",
    "material_item_gsm",
    "material_item_size",
    "material_item_net_weight",
    "material_item_gross_weight",
]

CSV_CONTENT_TYPES = {"text/csv", "application/csv", "application/vnd.ms-excel"}


def note_payload(info: MaterialInfo) -> dict:
    return {
        "id": info.id,
        "supplier_id": info.supplier_id,
        "supplier_name": info.supplier.supplier_name if info.supplier else None,
        "total_reels": info.total_reels,
        "total_net_weight": info.total_net_weight,
        "total_gross_weight": info.total_gross_weight,
        "material_info_status": info.material_info_status,
        "add_date": info.add_date,
    }


def _decimal(value) -> Optional[Decimal]:
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def validate_csv_row(row: dict, colours: dict, particular_ids: set) -> Optional[dict]:
    """Turn one CSV row into material item fields, or None when the row is skipped.

    ``colours`` maps colour id to colour name.
    """
    values = {header: (row.get(header) or "").strip() for header in REQUIRED_HEADERS}

    missing = [header for header, value in values.items() if value == ""]
    if missing:
        logger.warning(f"Skipping CSV row with missing {', '.join(missing)}: {row}")
        return None

    if not values["material_item_reel_no"].isdecimal():
        logger.warning(f"Skipping CSV row with non-numeric reel number: {row}")
        return None

    colour = values["material_colour"]
    if not colour.isdecimal() or int(colour) not in colours:
        logger.warning(f"Skipping CSV row with invalid colour ID '{colour}'")
        return None

    particular = values["material_item_particular"]
    if not particular.isdecimal() or int(particular) not in particular_ids:
        logger.warning(f"Skipping CSV row with invalid particular '{particular}'")
        return None

    gsm = _decimal(values["material_item_gsm"])
    net_weight = _decimal(values["material_item_net_weight"])
    gross_weight = _decimal(values["material_item_gross_weight"])
    if gsm is None or net_weight is None or gross_weight is None:
        logger.warning(f"Skipping CSV row with non-numeric gsm or weight: {row}")
        return None

    return {
        "reel_no": values["material_item_reel_no"],
        "colour": colours[int(colour)],
        "particular_id": int(particular),
        "variety": values["material_item_variety"],
        "gsm": values["material_item_gsm"],
        "size": values["material_item_size"],
        "net_weight": net_weight,
        "gross_weight": gross_weight,
    }


def item_fields(db: Session, item: MaterialItemCreate) -> dict:
    """Validate a manually entered reel against the lookups"""
    colour = db.query(Colour).filter(Colour.id == item.material_colour).first()
    if not colour:
        raise HTTPException(status_code=400, detail=f"Colour {item.material_colour} not found")

    if item.material_item_particular is not None:
        particular = db.query(Particular).filter(Particular.id == item.material_item_particular).first()
        if not particular:
            raise HTTPException(status_code=400, detail=f"Particular {item.material_item_particular} not found")

    return {
        "reel_no": item.material_item_reel_no,
        "colour": colour.colour_name,
        "particular_id": item.material_item_particular,
        "variety": item.material_item_variety,
        "gsm": str(item.material_item_gsm),
        "size": item.material_item_size,
        "net_weight": item.material_item_net_weight,
        "gross_weight": item.material_item_gross_weight,
    }


def receive_items(db: Session, info: MaterialInfo, fields_list: list, user_id: int) -> list:
    """Add reels to a note, then give each its barcode and stock unit.

    Barcodes need the generated item ids, so items are flushed first.
    """
    items = []
    for fields in fields_list:
        item = MaterialItem(**fields, barcode="0", material_status=0, user_id=user_id)
        info.items.append(item)
        items.append(item)
    info.recompute_totals()
    db.flush()

    for item in items:
        item.barcode = material_barcode(item.id, item.reel_no)
        receive(db, item, info.id)
    db.flush()
    return items


def get_supplier_or_404(db: Session, supplier_id: int) -> Supplier:
    supplier = db.query(Supplier).filter(Supplier.id == supplier_id, Supplier.del_ind == 1).first()
    if not supplier:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Supplier not found")
    return supplier


def get_note_or_404(db: Session, note_id: int) -> MaterialInfo:
    info = db.query(MaterialInfo).options(
        joinedload(MaterialInfo.supplier),
        joinedload(MaterialInfo.items)
    ).filter(MaterialInfo.id == note_id).first()
    if not info:
        raise HTTPException(status_code=404, detail="Material receiving note not found")
    return info


@router.get("/material-receiving-note")
def get_material_notes(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    notes = db.query(MaterialInfo).options(
        joinedload(MaterialInfo.supplier)
    ).order_by(MaterialInfo.id.desc()).all()
    return {"data": [MaterialNoteResponse(**note_payload(n)) for n in notes]}


@router.get("/material-receiving-note/add")
def get_material_note_form(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return {
        "suppliers": [
            SupplierResponse.model_validate(s)
            for s in db.query(Supplier).filter(Supplier.del_ind == 1).order_by(Supplier.supplier_name).all()
        ],
        "particulars": [ParticularResponse.model_validate(p) for p in db.query(Particular).order_by(Particular.id).all()],
        "colours": [ColourResponse.model_validate(c) for c in db.query(Colour).order_by(Colour.id).all()],
    }


@router.get("/material-receiving-note/view/{note_id}", response_model=MaterialNoteDetail)
def view_material_note(
    note_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    info = get_note_or_404(db, note_id)
    return {**note_payload(info), "items": info.items}


@router.post("/material-receiving-note/add", response_model=MaterialNoteDetail, status_code=201)
def create_material_note(
    note: MaterialNoteCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create a note from manually entered reels"""
    get_supplier_or_404(db, note.supplierId)
    fields_list = [item_fields(db, item) for item in note.items]

    try:
        info = MaterialInfo(supplier_id=note.supplierId, material_info_status=1, user_id=current_user.id)
        db.add(info)
        receive_items(db, info, fields_list, current_user.id)

        db.commit()
        db.refresh(info)

        logger.info(f"Created material receiving note {info.id} with {info.total_reels} reels")
        return {**note_payload(info), "items": info.items}

    except IntegrityError as e:
        db.rollback()
        logger.error(f"Duplicate barcode while creating material receiving note: {e}")
        raise HTTPException(status_code=409, detail="A reel barcode already exists in stock")
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating material receiving note: {e}")
        raise HTTPException(status_code=500, detail="Failed to create material receiving note")


@router.post("/material-receiving-note/add-item", response_model=MaterialItemResponse, status_code=201)
def add_material_item(
    payload: MaterialItemAdd,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Add one reel to an existing note"""
    info = db.query(MaterialInfo).filter(MaterialInfo.id == payload.material_info_id).first()
    if not info:
        raise HTTPException(status_code=404, detail="Material receiving note not found")
    fields = item_fields(db, payload.item)

    try:
        item = receive_items(db, info, [fields], current_user.id)[0]

        db.commit()
        db.refresh(item)

        logger.info(f"Added reel {item.barcode} to material receiving note {info.id}")
        return item

    except IntegrityError as e:
        db.rollback()
        logger.error(f"Duplicate barcode while adding reel to note {info.id}: {e}")
        raise HTTPException(status_code=409, detail="A reel barcode already exists in stock")
    except Exception as e:
        db.rollback()
        logger.error(f"Error adding reel to note {payload.material_info_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to add item")


@router.delete("/material-receiving-note/delete-item/{item_id}")
def delete_material_item(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Remove a reel that has not been used yet, with its stock unit"""
    item = db.query(MaterialItem).filter(MaterialItem.id == item_id).first()
    if not item:
        raise HTTPException(status_code=404, detail="Material item not found")

    stock_item = reel_unit(db, item)
    if stock_item and stock_item.material_status != StockStatus.AVAILABLE:
        raise HTTPException(status_code=409, detail=f"Reel {item.barcode} has already been used")

    try:
        info = item.material_info
        if stock_item:
            db.delete(stock_item)
            db.flush()
        info.items.remove(item)
        info.recompute_totals()

        db.commit()

        logger.info(f"Deleted reel {item_id} from material receiving note {info.id}")
        return {"message": "Item deleted successfully"}

    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting material item {item_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete item")


@router.delete("/material-receiving-note")
def delete_material_note(
    payload: MaterialNoteDelete,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a note with its reels and their stock units; refused once any reel is used"""
    info = get_note_or_404(db, payload.id)

    try:
        for item in info.items:
            stock_item = reel_unit(db, item)
            if stock_item and stock_item.material_status != StockStatus.AVAILABLE:
                raise HTTPException(status_code=409, detail=f"Reel {item.barcode} has already been used")
            retract(db, stock_item)
        db.flush()
        db.delete(info)

        db.commit()

        logger.info(f"Deleted material receiving note {payload.id}")
        return {"message": "Deleted successfully"}

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting material receiving note {payload.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete material receiving note")


@router.get("/material-receiving-note/edit/{note_id}")
def get_material_note_for_edit(
    note_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    info = get_note_or_404(db, note_id)
    return {
        "materialInfo": MaterialNoteDetail(**note_payload(info), items=info.items),
        **get_material_note_form(db, current_user),
    }


@router.put("/material-receiving-note/edit/{note_id}", response_model=MaterialNoteDetail)
def update_material_note(
    note_id: int,
    payload: MaterialNoteUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Change the supplier, edit reels and add new ones.

    An edited reel carries its new values onto its stock unit, so a reel that
    has already been used can only be resubmitted unchanged.
    """
    info = get_note_or_404(db, note_id)
    get_supplier_or_404(db, payload.supplierId)

    existing = {item.id: item for item in info.items}
    for edit in payload.items:
        if edit.material_item_id is not None and edit.material_item_id not in existing:
            raise HTTPException(status_code=404, detail=f"Material item {edit.material_item_id} not found on this note")

    try:
        info.supplier_id = payload.supplierId

        new_fields = []
        for edit in payload.items:
            fields = item_fields(db, edit)
            if edit.material_item_id is None:
                new_fields.append(fields)
                continue

            item = existing[edit.material_item_id]
            changed = {key: value for key, value in fields.items() if getattr(item, key) != value}
            if not changed:
                continue
            for key, value in changed.items():
                setattr(item, key, value)
            item.barcode = material_barcode(item.id, item.reel_no)
            stock_item = reel_unit(db, item)
            if stock_item:
                restamp(stock_item, item)

        if new_fields:
            receive_items(db, info, new_fields, current_user.id)
        info.recompute_totals()

        db.commit()
        db.refresh(info)

        logger.info(f"Updated material receiving note {note_id} ({len(new_fields)} reels added)")
        return {**note_payload(info), "items": info.items}

    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Duplicate barcode while editing note {note_id}: {e}")
        raise HTTPException(status_code=409, detail="A reel barcode already exists in stock")
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating material receiving note {note_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update material receiving note")


@router.post("/material-receiving-note/import", response_model=MaterialImportResponse, status_code=201)
def import_material_note(
    supplierId: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create a note from a CSV of reels; invalid rows are skipped and counted"""
    if not supplierId or file is None:
        raise HTTPException(status_code=400, detail="Supplier ID and file are required.")
    if not supplierId.strip().isdecimal():
        raise HTTPException(status_code=400, detail="Invalid supplier ID")

    filename = (file.filename or "").lower()
    if file.content_type not in CSV_CONTENT_TYPES and not filename.endswith(".csv"):
        raise HTTPException(status_code=400, detail="Invalid file type. Please upload a CSV file.")

    content = file.file.read(settings.MAX_FILE_SIZE + 1)
    if len(content) > settings.MAX_FILE_SIZE:
        raise HTTPException(status_code=400, detail="File is too large")

    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="Error parsing CSV file.")

    reader = csv.DictReader(io.StringIO(text))
    headers = [h.strip() for h in (reader.fieldnames or [])]
    if not all(header in headers for header in REQUIRED_HEADERS):
        raise HTTPException(
            status_code=400,
            detail=f"CSV must contain the following headers: {', '.join(REQUIRED_HEADERS)}"
        )
    reader.fieldnames = headers

    supplier = get_supplier_or_404(db, int(supplierId))

    colours = {c.id: c.colour_name for c in db.query(Colour).all()}
    particular_ids = {p.id for p in db.query(Particular.id).all()}

    rows = [row for row in reader if any((v or "").strip() for v in row.values() if isinstance(v, str))]
    fields_list = [
        fields for fields in (validate_csv_row(row, colours, particular_ids) for row in rows)
        if fields is not None
    ]
    skipped = len(rows) - len(fields_list)

    if not fields_list:
        raise HTTPException(status_code=400, detail="No valid items found in the CSV file after validation.")

    try:
        info = MaterialInfo(supplier_id=supplier.id, material_info_status=1, user_id=current_user.id)
        db.add(info)
        receive_items(db, info, fields_list, current_user.id)

        db.commit()
        db.refresh(info)

        logger.info(f"Imported {len(fields_list)} reels into note {info.id} ({skipped} rows skipped)")
        return {
            "message": f"Successfully imported {len(fields_list)} items.",
            "data": note_payload(info),
            "imported": len(fields_list),
            "skipped": skipped,
        }

    except IntegrityError as e:
        db.rollback()
        logger.error(f"Duplicate barcode during CSV import: {e}")
        raise HTTPException(status_code=409, detail="A reel barcode already exists in stock")
    except Exception as e:
        db.rollback()
        logger.error(f"Error importing material receiving note: {e}")
        raise HTTPException(status_code=500, detail="Failed to import data.")


@router.get("/material-receiving-note/import/sample")
def get_import_sample(current_user: User = Depends(get_current_user)):
    """Sample CSV with the import headers"""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(REQUIRED_HEADERS)
    writer.writerow(["1001", "1", "1", "Kraft", "80", "90", "250.5", "255.0"])
    writer.writerow(["1002", "1", "1", "Kraft", "80", "90", "248.0", "252.5"])
    return Response(
        content=output.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=material_import_sample.csv"}
    )


@router.get("/particular")
def get_particulars(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    particulars = db.query(Particular).order_by(Particular.id).all()
    return {"data": [ParticularResponse.model_validate(p) for p in particulars]}


@router.post("/particular", status_code=201)
def create_particular(
    particular: ParticularCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    existing = db.query(Particular).filter(Particular.particular_name == particular.particular_name.strip()).first()
    if existing:
        raise HTTPException(status_code=400, detail="Particular already exists")

    db_particular = Particular(
        particular_name=particular.particular_name.strip(),
        particular_status=particular.particular_status
    )
    db.add(db_particular)
    db.commit()
    db.refresh(db_particular)

    logger.info(f"Created particular {db_particular.id} '{db_particular.particular_name}'")
    return {"message": "Particular created successfully", "data": ParticularResponse.model_validate(db_particular)}


@router.get("/material-items")
def get_material_items(
    material_info_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    query = db.query(MaterialItem)
    if material_info_id is not None:
        query = query.filter(MaterialItem.material_info_id == material_info_id)
    items = query.order_by(MaterialItem.id.desc()).all()
    return {"data": [MaterialItemResponse.model_validate(i) for i in items]}
