from decimal import Decimal

from models.stock import StockItem, StockStage, StockStatus
from models.printing import Print, PrintPack, PrintWastage


def slit_roll(client, job_card, reel):
    slitting = client.post(
        f"/api/slitting/{job_card.id}/add-barcode", json={"roll_barcode_no": reel.stock_barcode}
    ).json()["data"]
    return client.post(
        f"/api/slitting/{job_card.id}/add-roll",
        json={"slitting_id": slitting["id"], "slitting_roll_weight": "80", "slitting_roll_width": "30"},
    ).json()["data"]


def test_attach_slit_roll_and_add_pack(client, db, make_job_card, make_stock):
    job_card = make_job_card()
    roll = slit_roll(client, job_card, make_stock())

    response = client.post(
        f"/api/printing/{job_card.id}/add-barcode", json={"roll_barcode_no": roll["slitting_barcode"]}
    )
    assert response.status_code == 201
    print_record = response.json()["data"]
    assert print_record["print_barcode_no"] == roll["slitting_barcode"]

    response = client.post(
        f"/api/printing/{job_card.id}/add-pack",
        json={
            "print_id": print_record["id"],
            "print_pack_weight": "40.5",
            "selectedBarcode": roll["slitting_barcode"],
        },
    )
    assert response.status_code == 201
    pack = response.json()["data"]

    db.expire_all()
    output = db.get(StockItem, pack["output_stock_id"])
    assert output.material_used_by == StockStage.PRINTING
    assert output.material_status == StockStatus.AVAILABLE
    assert output.item_net_weight == Decimal("40.500")
    assert db.get(Print, print_record["id"]).number_of_bag == 1

    slit = db.get(StockItem, roll["output_stock_id"])
    assert slit.material_status == StockStatus.USED
    assert slit.material_used_by == StockStage.PRINTING


def test_add_pack_requires_source_held_by_printing(client, make_job_card, make_stock):
    job_card = make_job_card()
    roll = slit_roll(client, job_card, make_stock())
    print_record = client.post(
        f"/api/printing/{job_card.id}/add-barcode", json={"roll_barcode_no": roll["slitting_barcode"]}
    ).json()["data"]
    other_roll = slit_roll(client, job_card, make_stock())

    response = client.post(
        f"/api/printing/{job_card.id}/add-pack",
        json={"print_id": print_record["id"], "print_pack_weight": "10", "selectedBarcode": other_roll["slitting_barcode"]},
    )
    assert response.status_code == 400


def test_update_wastage_upserts(client, db, make_job_card, make_stock):
    job_card = make_job_card()
    roll = slit_roll(client, job_card, make_stock())
    print_record = client.post(
        f"/api/printing/{job_card.id}/add-barcode", json={"roll_barcode_no": roll["slitting_barcode"]}
    ).json()["data"]

    for wastage in ("1.5", "2.25"):
        response = client.post(
            f"/api/printing/{job_card.id}/update-wastage",
            json={"print_id": print_record["id"], "print_wastage": wastage, "balance_weight": "3", "balance_width": "1"},
        )
        assert response.status_code == 200

    db.expire_all()
    assert db.query(PrintWastage).count() == 1
    assert db.query(PrintWastage).one().print_wastage == Decimal("2.250")


def test_delete_print_releases_roll_and_removes_packs(client, db, make_job_card, make_stock):
    job_card = make_job_card()
    roll = slit_roll(client, job_card, make_stock())
    print_record = client.post(
        f"/api/printing/{job_card.id}/add-barcode", json={"roll_barcode_no": roll["slitting_barcode"]}
    ).json()["data"]
    client.post(
        f"/api/printing/{job_card.id}/add-pack",
        json={"print_id": print_record["id"], "print_pack_weight": "40", "selectedBarcode": roll["slitting_barcode"]},
    )

    response = client.request(
        "DELETE", f"/api/printing/{job_card.id}/add-barcode", json={"print_id": print_record["id"]}
    )
    assert response.status_code == 200

    db.expire_all()
    slit = db.get(StockItem, roll["output_stock_id"])
    assert slit.material_status == StockStatus.AVAILABLE
    assert slit.material_used_by == StockStage.SLITTING
    assert db.query(PrintPack).count() == 0
    assert db.query(Print).count() == 0


def test_delete_pack_consumed_by_cutting_conflicts(client, db, make_job_card, make_stock):
    job_card = make_job_card()
    roll = slit_roll(client, job_card, make_stock())
    print_record = client.post(
        f"/api/printing/{job_card.id}/add-barcode", json={"roll_barcode_no": roll["slitting_barcode"]}
    ).json()["data"]
    pack = client.post(
        f"/api/printing/{job_card.id}/add-pack",
        json={"print_id": print_record["id"], "print_pack_weight": "40", "selectedBarcode": roll["slitting_barcode"]},
    ).json()["data"]

    assert client.post(
        "/api/cutting/add-barcode", json={"jobCardId": job_card.id, "barcode": pack["print_barcode"]}
    ).status_code == 201

    response = client.request("DELETE", f"/api/printing/{job_card.id}/delete-pack", json={"pack_id": pack["id"]})
    assert response.status_code == 409
    db.expire_all()
    assert db.query(PrintPack).count() == 1
