from datetime import datetime
from decimal import Decimal

from models.finished_goods import BundleInfo, CompleteItem
from models.stock import StockStage, StockStatus


def test_stock_list_formats_rows(client, db, make_stock):
    reel = make_stock(size="90", gsm="80")
    pack = make_stock(stage=StockStage.PRINTING)
    pack.material_status = StockStatus.USED
    db.commit()

    body = client.get("/api/stock/stock").json()
    assert body["particulars"][0]["particular_name"] == "Kraft Paper"

    rows = {row["id"]: row for row in body["data"]}
    assert rows[reel.id]["item_gsm"] == "80GSM"
    assert rows[reel.id]["material_item_size"] == "90CM"
    assert rows[reel.id]["material_status"] == "IN"
    assert rows[reel.id]["material_used_by"] == "MRN"
    assert rows[reel.id]["stock_barcode"] == str(reel.stock_barcode)
    assert rows[pack.id]["material_status"] == "OUT"
    assert rows[pack.id]["material_used_by"] == "PRINTING"


def test_stock_list_filters(client, db, make_stock):
    reel = make_stock(size="90", gsm="80")
    other = make_stock(size="60", gsm="100")
    used = make_stock(size="60", gsm="100")
    used.material_status = StockStatus.USED
    db.commit()

    def ids(**params):
        return {row["id"] for row in client.get("/api/stock/stock", params=params).json()["data"]}

    assert ids(size_id="90CM") == {reel.id}
    assert ids(item_gsm="100GSM") == {other.id, used.id}
    assert ids(status_id="1") == {used.id}
    assert ids(status_id="0") == {reel.id, other.id}
    assert ids(status_id="all") == {reel.id, other.id, used.id}
    assert client.get("/api/stock/stock", params={"status_id": "7"}).status_code == 400


def test_stock_list_date_range_includes_end_day(client, db, make_stock):
    early = make_stock()
    late = make_stock()
    early.stock_date = datetime(2025, 3, 10, 9, 0)
    late.stock_date = datetime(2025, 3, 15, 23, 0)
    db.commit()

    response = client.get(
        "/api/stock/stock", params={"indatepicker": "03/11/2025", "outdatepicker": "03/15/2025"}
    )
    assert {row["id"] for row in response.json()["data"]} == {late.id}
    assert client.get("/api/stock/stock", params={"indatepicker": "bad"}).status_code == 400


def create_complete_item(client, bags=100, weight="5", bundle_type="Grocery Bag Small", **extra):
    response = client.post(
        "/api/stock/bundle/complete",
        json={"bundle_type": bundle_type, "complete_item_weight": weight, "complete_item_bags": bags, **extra},
    )
    assert response.status_code == 201
    return response.json()["item"]


def test_complete_item_gets_barcode_and_known_bag_type(client, lookups):
    item = create_complete_item(client, bundle_type="grocery bag small")
    assert item["bag_type_id"] == lookups["bag_type"].id
    assert item["bundle_type"] == "Grocery Bag Small"
    assert item["complete_item_barcode"].startswith(str(item["id"]))
    assert item["complete_item_info"] == 1

    unbundled = client.get("/api/stock/bundle/complete").json()["items"]
    assert [i["id"] for i in unbundled] == [item["id"]]


def test_complete_item_with_unknown_bag_type_id(client, lookups):
    response = client.post(
        "/api/stock/bundle/complete",
        json={"bag_type_id": 99, "complete_item_weight": "1", "complete_item_bags": 1},
    )
    assert response.status_code == 400


def test_finalize_links_items_and_skips_placeholder(client, db, lookups):
    first = create_complete_item(client, bags=100, weight="5")
    second = create_complete_item(client, bags=150, weight="7.5")
    partial = client.post(
        "/api/stock/bundle/non-complete",
        json={"bundle_type": "Grocery Bag Small", "non_complete_weight": "1", "non_complete_bags": 20},
    ).json()["item"]

    response = client.post(
        "/api/stock/bundle/finalize",
        json={
            "bundleData": {},
            "completeItemIds": [first["id"], second["id"]],
            "nonCompleteItemIds": [partial["id"]],
        },
    )
    assert response.status_code == 201
    bundle = response.json()["bundleInfo"]
    assert bundle["id"] == 2
    assert bundle["total_bags"] == 270
    assert Decimal(str(bundle["total_weight"])) == Decimal("13.5")
    assert bundle["bundle_type"] == "Grocery Bag Small"

    db.expire_all()
    assert {i.complete_item_info for i in db.query(CompleteItem).all()} == {2}
    assert client.get("/api/stock/bundle/complete").json()["items"] == []

    listed = client.get("/api/stock/bundle").json()["data"]
    assert [b["id"] for b in listed] == [2]
    assert client.get("/api/stock/bundle/view/1").status_code == 404

    view = client.get("/api/stock/bundle/view/2").json()
    assert len(view["completeItems"]) == 2
    assert len(view["nonCompleteItems"]) == 1
    assert view["cuttingRoll"] is None


def test_finalize_rejects_rebundling_and_empty(client, db, lookups):
    item = create_complete_item(client)
    body = {"bundleData": {}, "completeItemIds": [item["id"]]}
    assert client.post("/api/stock/bundle/finalize", json=body).status_code == 201
    assert client.post("/api/stock/bundle/finalize", json=body).status_code == 409
    assert client.post("/api/stock/bundle/finalize", json={"bundleData": {}}).status_code == 400
    assert client.post(
        "/api/stock/bundle/finalize", json={"bundleData": {}, "completeItemIds": [999]}
    ).status_code == 404

    db.expire_all()
    assert db.query(BundleInfo).count() == 2


def test_finalize_is_all_or_nothing(client, db, lookups):
    item = create_complete_item(client)
    response = client.post(
        "/api/stock/bundle/finalize",
        json={"bundleData": {"cutting_roll_id": 55}, "completeItemIds": [item["id"]]},
    )
    assert response.status_code == 404

    db.expire_all()
    assert db.query(BundleInfo).count() == 0
    assert db.query(CompleteItem).one().complete_item_info == 1


def test_finishing_goods_and_debug_counts(client, db, lookups):
    bundled = create_complete_item(client, bags=100, weight="5")
    create_complete_item(client, bags=40, weight="2")
    sold = create_complete_item(client, bags=60, weight="3")
    client.post(
        "/api/stock/bundle/finalize",
        json={"bundleData": {}, "completeItemIds": [bundled["id"], sold["id"]]},
    )
    db.query(CompleteItem).filter(CompleteItem.id == sold["id"]).update({CompleteItem.del_ind: 0})
    db.commit()

    goods_in = client.get("/api/stock/finishingGoods", params={"status": "IN"}).json()
    assert [i["id"] for i in goods_in["data"]] == [bundled["id"]]
    assert goods_in["totals"] == {"count": 1, "bags": 100, "weight": 5.0}

    goods_out = client.get("/api/stock/finishingGoods", params={"status": "out"}).json()
    assert goods_out["status"] == "OUT"
    assert [i["id"] for i in goods_out["data"]] == [sold["id"]]

    assert client.get("/api/stock/finishingGoods", params={"status": "SIDEWAYS"}).status_code == 400

    counts = client.get("/api/stock/debug-counts").json()
    assert counts["stockInHand"]["bags"] == 140
    assert counts["finishingGoodsIn"]["bags"] == 100
    assert counts["unbundled"]["bags"] == 40
    assert counts["finishingGoodsOut"]["count"] == 1


def test_stock_in_hand_groups_by_bag_type(client, lookups):
    create_complete_item(client, bags=100, weight="5.125")
    create_complete_item(client, bags=50, weight="2.5")
    create_complete_item(client, bags=10, weight="1", bundle_type="Wine Carrier")

    data = client.get("/api/stock/stockinhand").json()["data"]
    assert data == [
        {"bag_id": 0, "bag_type": "Wine Carrier", "itemweight": 1.0, "itembags": 10},
        {"bag_id": lookups["bag_type"].id, "bag_type": "Grocery Bag Small", "itemweight": 7.62, "itembags": 150},
    ]


def slit_and_print(client, job_card, reel, slitting_wastage, print_wastage):
    """Run one reel through slitting and printing, returning the printed pack"""
    slitting = client.post(
        f"/api/slitting/{job_card.id}/add-barcode", json={"roll_barcode_no": reel.stock_barcode}
    ).json()["data"]
    client.post(
        f"/api/slitting/{job_card.id}/update-wastage",
        json={"slitting_id": slitting["id"], "wastage": slitting_wastage},
    )
    roll = client.post(
        f"/api/slitting/{job_card.id}/add-roll",
        json={"slitting_id": slitting["id"], "slitting_roll_weight": "80", "slitting_roll_width": "30"},
    ).json()["data"]

    print_record = client.post(
        f"/api/printing/{job_card.id}/add-barcode", json={"roll_barcode_no": roll["slitting_barcode"]}
    ).json()["data"]
    client.post(
        f"/api/printing/{job_card.id}/update-wastage",
        json={"print_id": print_record["id"], "print_wastage": print_wastage},
    )
    return client.post(
        f"/api/printing/{job_card.id}/add-pack",
        json={
            "print_id": print_record["id"],
            "print_pack_weight": "40",
            "selectedBarcode": roll["slitting_barcode"],
        },
    ).json()["data"]


def cut(client, job_card, barcode):
    cutting = client.post(
        "/api/cutting/add-barcode", json={"jobCardId": job_card.id, "barcode": str(barcode)}
    ).json()["data"]
    return client.post(
        f"/api/cutting/{job_card.id}/add-roll",
        json={"cutting_id": cutting["id"], "cutting_roll_weight": "10", "no_of_bags": 200, "cutting_wastage": "0.4"},
    ).json()["data"]


def test_bundle_provenance_follows_its_own_reel(client, make_job_card, make_stock):
    job_card = make_job_card()
    first_pack = slit_and_print(client, job_card, make_stock(), "5", "2")
    slit_and_print(client, job_card, make_stock(), "7", "9")

    roll = cut(client, job_card, first_pack["print_barcode"])

    response = client.get(f"/api/stock/bundle/barcode/{roll['cutting_barcode']}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["bag_type"] == "Grocery Bag Small"
    assert data["no_of_bags"] == 200
    assert Decimal(str(data["slitting_wastage"])) == Decimal("5")
    assert Decimal(str(data["print_wastage"])) == Decimal("2")
    assert Decimal(str(data["cutting_wastage"])) == Decimal("0.4")

    assert client.get("/api/stock/bundle/barcode/123").status_code == 404


def test_bundle_provenance_of_unprinted_roll(client, make_job_card, make_stock):
    job_card = make_job_card(printing=False)
    reel = make_stock()
    slitting = client.post(
        f"/api/slitting/{job_card.id}/add-barcode", json={"roll_barcode_no": reel.stock_barcode}
    ).json()["data"]
    client.post(
        f"/api/slitting/{job_card.id}/update-wastage",
        json={"slitting_id": slitting["id"], "wastage": "3.5"},
    )
    slit = client.post(
        f"/api/slitting/{job_card.id}/add-roll",
        json={"slitting_id": slitting["id"], "slitting_roll_weight": "80", "slitting_roll_width": "30"},
    ).json()["data"]

    roll = cut(client, job_card, slit["slitting_barcode"])

    data = client.get(f"/api/stock/bundle/barcode/{roll['cutting_barcode']}").json()["data"]
    assert Decimal(str(data["slitting_wastage"])) == Decimal("3.5")
    assert Decimal(str(data["print_wastage"])) == Decimal("0")


def test_bundle_provenance_of_outside_pack(client, make_job_card, make_stock):
    job_card = make_job_card()
    roll = cut(client, job_card, make_stock(stage=StockStage.PRINTING).stock_barcode)

    data = client.get(f"/api/stock/bundle/barcode/{roll['cutting_barcode']}").json()["data"]
    assert Decimal(str(data["slitting_wastage"])) == Decimal("0")
    assert Decimal(str(data["print_wastage"])) == Decimal("0")


def test_update_bundle_replaces_item_set(client, db, lookups):
    first = create_complete_item(client, bags=100, weight="5")
    second = create_complete_item(client, bags=150, weight="7.5")
    third = create_complete_item(client, bags=40, weight="2")
    bundle = client.post(
        "/api/stock/bundle/finalize",
        json={"bundleData": {}, "completeItemIds": [first["id"], second["id"]]},
    ).json()["bundleInfo"]

    response = client.put(
        "/api/stock/bundle/update",
        json={
            "bundleData": {"id": bundle["id"], "bundle_type": "Grocery Bag Small", "cutting_wastage": "0.3"},
            "completeItemIds": [first["id"], third["id"]],
        },
    )
    assert response.status_code == 200
    updated = response.json()["bundle"]
    assert updated["total_bags"] == 140
    assert Decimal(str(updated["total_weight"])) == Decimal("7")
    assert Decimal(str(updated["cutting_wastage"])) == Decimal("0.3")

    db.expire_all()
    assert db.get(CompleteItem, first["id"]).complete_item_info == bundle["id"]
    assert db.get(CompleteItem, third["id"]).complete_item_info == bundle["id"]
    assert db.get(CompleteItem, second["id"]).complete_item_info == 1
    assert [i["id"] for i in client.get("/api/stock/bundle/complete").json()["items"]] == [second["id"]]


def test_update_bundle_guards(client, db, lookups):
    first = create_complete_item(client)
    second = create_complete_item(client)
    bundle = client.post(
        "/api/stock/bundle/finalize", json={"bundleData": {}, "completeItemIds": [first["id"]]}
    ).json()["bundleInfo"]
    other = client.post(
        "/api/stock/bundle/finalize", json={"bundleData": {}, "completeItemIds": [second["id"]]}
    ).json()["bundleInfo"]

    def update(bundle_id, ids):
        return client.put(
            "/api/stock/bundle/update", json={"bundleData": {"id": bundle_id}, "completeItemIds": ids}
        )

    assert update(1, [first["id"]]).status_code == 404
    assert update(99, [first["id"]]).status_code == 404
    assert update(bundle["id"], []).status_code == 400
    assert update(bundle["id"], [second["id"]]).status_code == 409

    db.query(CompleteItem).filter(CompleteItem.id == first["id"]).update({CompleteItem.del_ind: 0})
    db.commit()
    third = create_complete_item(client)
    assert update(bundle["id"], [third["id"]]).status_code == 409
    assert update(bundle["id"], [first["id"], third["id"]]).status_code == 200

    db.expire_all()
    assert db.get(CompleteItem, second["id"]).complete_item_info == other["id"]


def test_delete_loose_complete_item(client, db, lookups):
    loose = create_complete_item(client)
    bundled = create_complete_item(client)
    client.post("/api/stock/bundle/finalize", json={"bundleData": {}, "completeItemIds": [bundled["id"]]})

    assert client.delete(f"/api/stock/bundle/complete/{bundled['id']}").status_code == 409
    assert client.delete(f"/api/stock/bundle/complete/{loose['id']}").status_code == 200
    assert client.delete(f"/api/stock/bundle/complete/{loose['id']}").status_code == 404

    db.expire_all()
    assert [i.id for i in db.query(CompleteItem).all()] == [bundled["id"]]


def test_sold_complete_item_cannot_be_deleted(client, make_customer, lookups):
    item = create_complete_item(client)
    customer = make_customer()
    client.post(
        "/api/sales/do/new",
        json={
            "customerId": customer.id,
            "items": [{"complete_item_id": item["id"], "weight": "5", "bags": 100, "price": "1.2", "total": "120"}],
        },
    )
    response = client.delete(f"/api/stock/bundle/complete/{item['id']}")
    assert response.status_code == 409
    assert response.json()["error"] == "A sold item cannot be deleted"
