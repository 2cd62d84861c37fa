from datetime import datetime, date, timezone

import pytest

from utils.barcodes import generate_barcode, material_barcode, parse_barcode
from utils.dates import parse_form_date, parse_form_day
from utils.job_cards import build_section_list
from utils.bag_types import match_bag_type_name, resolve_bag_type, KnownBagType, FreeTextBagType


def test_generate_barcode_appends_timestamp():
    assert generate_barcode(7, datetime(2025, 3, 15, 9, 5, 30)) == "7150325090530"


def test_generate_barcode_rejects_non_positive_id():
    with pytest.raises(ValueError):
        generate_barcode(0)


def test_generate_barcode_differs_by_id_in_same_second():
    now = datetime(2025, 1, 2, 3, 4, 5)
    assert generate_barcode(12, now) != generate_barcode(13, now)


def test_material_barcode_is_item_id_then_reel():
    assert material_barcode(15, "2041") == "152041"


def test_material_barcode_requires_numeric_reel():
    with pytest.raises(ValueError):
        material_barcode(15, "A-1")


@pytest.mark.parametrize("value, expected", [("123456", 123456), (98765, 98765), (" 42 ", 42)])
def test_parse_barcode(value, expected):
    assert parse_barcode(value) == expected


@pytest.mark.parametrize("value", ["", None, "12a4", "-5"])
def test_parse_barcode_rejects_invalid(value):
    with pytest.raises(ValueError):
        parse_barcode(value)


@pytest.mark.parametrize("flags, expected", [
    ((True, True, True), "1,2,3"),
    ((True, False, True), "1,3"),
    ((False, True, False), "2"),
    ((False, False, False), ""),
])
def test_build_section_list_keeps_stage_order(flags, expected):
    assert build_section_list(*flags) == expected


def test_parse_form_date_anchors_at_utc_noon():
    assert parse_form_date("03/15/2025") == datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc)


def test_parse_form_date_accepts_iso():
    assert parse_form_day("2025-03-15") == date(2025, 3, 15)


def test_parse_form_date_blank_is_none():
    assert parse_form_date("") is None
    assert parse_form_date(None) is None


def test_parse_form_date_rejects_garbage():
    with pytest.raises(ValueError):
        parse_form_date("15th March")


class _BagType:
    def __init__(self, id, bag_type):
        self.id = id
        self.bag_type = bag_type


def test_match_bag_type_prefers_exact_match():
    bag_types = [_BagType(1, "Grocery Bag"), _BagType(2, "Grocery Bag Large")]
    assert match_bag_type_name("grocery bag large", bag_types).id == 2


def test_match_bag_type_falls_back_to_containment():
    bag_types = [_BagType(1, "Medicine Bag")]
    assert match_bag_type_name("Medicine Bag 2kg", bag_types).id == 1
    assert match_bag_type_name("Shoe Box", bag_types) is None


def test_resolve_bag_type_known_and_free_text(db, lookups):
    known = resolve_bag_type(db, name="grocery bag small")
    assert isinstance(known, KnownBagType)
    assert known.id == lookups["bag_type"].id

    free = resolve_bag_type(db, name="Custom Pouch")
    assert isinstance(free, FreeTextBagType)
    assert free.id is None
    assert free.name == "Custom Pouch"


def test_resolve_bag_type_unknown_id_is_rejected(db, lookups):
    from fastapi import HTTPException

    with pytest.raises(HTTPException) as exc:
        resolve_bag_type(db, bag_type_id=999)
    assert exc.value.status_code == 400


def test_seed_lookup_puts_placeholder_first_and_is_idempotent(db):
    from models.job_masters import BagType
    from models.finished_goods import BundleInfo
    from seed import seed_lookup, DEFAULT_BAG_TYPES, NOT_APPLICABLE
    from utils.finished_goods import reserve_unbundled_id

    seed_lookup(db, BagType, "bag_type", DEFAULT_BAG_TYPES, "bag types")
    seed_lookup(db, BagType, "bag_type", DEFAULT_BAG_TYPES, "bag types")
    reserve_unbundled_id(db)
    reserve_unbundled_id(db)
    db.commit()

    assert db.query(BagType).count() == len(DEFAULT_BAG_TYPES)
    assert db.get(BagType, 1).bag_type == NOT_APPLICABLE
    assert [b.id for b in db.query(BundleInfo).all()] == [1]
