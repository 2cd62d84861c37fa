from decimal import Decimal

import pytest

from models.finished_goods import CompleteItem, CompleteItemState
from models.invoices import BillInfo, BillItem
from models.sales import SalesInfo
from models.sales_returns import ReturnInfo


@pytest.fixture
def make_complete_item(client, lookups):
    def factory(bags=100, weight="5", bundle_type="Grocery Bag Small"):
        response = client.post(
            "/api/stock/bundle/complete",
            json={"bundle_type": bundle_type, "complete_item_weight": weight, "complete_item_bags": bags},
        )
        assert response.status_code == 201
        return response.json()["item"]
    return factory


def line(item, **overrides):
    values = {
        "complete_item_id": item["id"],
        "barcode": item["complete_item_barcode"],
        "weight": item["complete_item_weight"],
        "bags": item["complete_item_bags"],
        "price": "1.20",
        "total": "120.00",
    }
    values.update(overrides)
    return values


def item_state(db, item):
    db.expire_all()
    return db.get(CompleteItem, item["id"]).del_ind


def test_create_do_takes_items_out_of_hand(client, db, make_customer, make_complete_item):
    customer = make_customer()
    first, second = make_complete_item(), make_complete_item(bags=50)

    response = client.post(
        "/api/sales/do/new",
        json={"customerId": customer.id, "items": [line(first), line(second, total="60.00")]},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["doNumber"] == f"DO-{body['salesInfoId']:05d}"
    assert len(body["items"]) == 2
    assert body["items"][0]["bag_type_id"] is not None

    assert item_state(db, first) == CompleteItemState.CONSUMED
    assert item_state(db, second) == CompleteItemState.CONSUMED

    detail = client.get(f"/api/sales/do/{body['salesInfoId']}").json()
    assert detail["sales_no_bags"] == 150
    assert detail["customer_contact"] == customer.customer_mobile
    assert detail["customer_address"] == "1 Main St"


def test_item_cannot_be_sold_twice(client, db, make_customer, make_complete_item):
    customer = make_customer()
    item = make_complete_item()
    assert client.post("/api/sales/do/new", json={"customerId": customer.id, "items": [line(item)]}).status_code == 201

    response = client.post("/api/sales/do/new", json={"customerId": customer.id, "items": [line(item)]})
    assert response.status_code == 409
    db.expire_all()
    assert db.query(SalesInfo).count() == 1


def test_create_do_rejects_duplicate_lines_and_unknown_items(client, db, make_customer, make_complete_item):
    customer = make_customer()
    item = make_complete_item()
    response = client.post(
        "/api/sales/do/new", json={"customerId": customer.id, "items": [line(item), line(item)]}
    )
    assert response.status_code == 400

    response = client.post(
        "/api/sales/do/new", json={"customerId": customer.id, "items": [line(item), {"complete_item_id": 999}]}
    )
    assert response.status_code == 404

    assert item_state(db, item) == CompleteItemState.IN_HAND
    assert db.query(SalesInfo).count() == 0


def test_create_do_unknown_customer(client, make_complete_item):
    item = make_complete_item()
    response = client.post("/api/sales/do/new", json={"customerId": 77, "items": [line(item)]})
    assert response.status_code == 404
    assert response.json() == {"error": "Customer not found"}


def test_update_do_returns_dropped_items(client, db, make_customer, make_complete_item):
    customer = make_customer()
    kept, dropped, added = make_complete_item(), make_complete_item(), make_complete_item()
    created = client.post(
        "/api/sales/do/new", json={"customerId": customer.id, "items": [line(kept), line(dropped)]}
    ).json()
    kept_line = next(i for i in created["items"] if i["complete_item_id"] == kept["id"])

    response = client.put(
        f"/api/sales/do/{created['salesInfoId']}/update",
        json={
            "customerId": customer.id,
            "items": [line(kept, sales_item_id=kept_line["id"], price="2.00", total="200.00"), line(added)],
        },
    )
    assert response.status_code == 200
    items = response.json()["items"]
    assert {i["complete_item_id"] for i in items} == {kept["id"], added["id"]}
    assert Decimal(str(next(i for i in items if i["id"] == kept_line["id"])["item_total"])) == Decimal("200")

    assert item_state(db, kept) == CompleteItemState.CONSUMED
    assert item_state(db, dropped) == CompleteItemState.IN_HAND
    assert item_state(db, added) == CompleteItemState.CONSUMED


def test_update_do_with_foreign_line_id(client, make_customer, make_complete_item):
    customer = make_customer()
    item = make_complete_item()
    created = client.post("/api/sales/do/new", json={"customerId": customer.id, "items": [line(item)]}).json()

    response = client.put(
        f"/api/sales/do/{created['salesInfoId']}/update",
        json={"customerId": customer.id, "items": [line(item, sales_item_id=999)]},
    )
    assert response.status_code == 404


def test_delete_do_restores_items(client, db, make_customer, make_complete_item):
    customer = make_customer()
    item = make_complete_item()
    created = client.post("/api/sales/do/new", json={"customerId": customer.id, "items": [line(item)]}).json()

    assert client.delete(f"/api/sales/do/{created['salesInfoId']}").status_code == 200
    assert item_state(db, item) == CompleteItemState.IN_HAND
    assert client.get(f"/api/sales/do/{created['salesInfoId']}").status_code == 404
    assert client.get("/api/sales/do").json() == []
    assert client.get("/api/sales/do-numbers").json() == {"data": []}


def test_validate_barcode_prices_from_bag_type(client, make_customer, make_complete_item):
    item = make_complete_item()
    response = client.get("/api/sales/do/validate-barcode", params={"barcode": item["complete_item_barcode"]})
    assert response.status_code == 200
    data = response.json()
    assert data["complete_item_id"] == item["id"]
    assert data["bagType"] == "Grocery Bag Small"
    assert Decimal(str(data["price"])) == Decimal("1.20")

    free_text = make_complete_item(bundle_type="Wine Carrier")
    data = client.get(
        "/api/sales/do/validate-barcode", params={"barcode": free_text["complete_item_barcode"]}
    ).json()
    assert data["bagTypeId"] is None
    assert Decimal(str(data["price"])) == Decimal("0")

    customer = make_customer()
    client.post("/api/sales/do/new", json={"customerId": customer.id, "items": [line(item)]})
    assert client.get(
        "/api/sales/do/validate-barcode", params={"barcode": item["complete_item_barcode"]}
    ).status_code == 404


def test_bag_types_keep_stored_resolution(client, make_customer, make_complete_item):
    customer = make_customer()
    small_a, small_b = make_complete_item(bags=100), make_complete_item(bags=60)
    custom = make_complete_item(bags=10, bundle_type="Wine Carrier")
    created = client.post(
        "/api/sales/do/new",
        json={"customerId": customer.id, "items": [line(small_a), line(small_b), line(custom, price="0")]},
    ).json()

    groups = client.get(f"/api/sales/bag-types/{created['salesInfoId']}").json()
    by_name = {g["bagType"]: g for g in groups}
    assert by_name["Grocery Bag Small"]["resolved"] is True
    assert by_name["Grocery Bag Small"]["quantity"] == 160
    assert by_name["Wine Carrier"]["resolved"] is False
    assert by_name["Wine Carrier"]["bagTypeId"] is None
    assert by_name["Wine Carrier"]["quantity"] == 10


def test_do_form_lists_customers(client, make_customer):
    customer = make_customer()
    response = client.get("/api/sales/do/new")
    assert response.json()["customers"] == [
        {"customer_id": customer.id, "customer_full_name": "Acme Stores"}
    ]


@pytest.fixture
def delivery_order(client, make_customer, make_complete_item):
    customer = make_customer()
    item = make_complete_item()
    created = client.post("/api/sales/do/new", json={"customerId": customer.id, "items": [line(item)]}).json()
    return {"customer": customer, "item": item, **created}


def test_invoice_total_is_sum_of_lines(client, db, lookups, delivery_order):
    response = client.post(
        "/api/sales/invoice",
        json={
            "customerId": delivery_order["customer"].id,
            "doId": delivery_order["salesInfoId"],
            "items": [
                {"bagTypeId": lookups["bag_type"].id, "quantity": 100, "price": "1.20", "total": "120.00"},
                {"bagType": "Wine Carrier", "quantity": 10, "price": "2.50", "total": "25.00"},
            ],
        },
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["bill_do"] == delivery_order["doNumber"]
    assert Decimal(str(data["bill_total"])) == Decimal("145.00")
    assert [i["bag_type_id"] for i in data["items"]] == [lookups["bag_type"].id, None]

    response = client.put(
        f"/api/sales/invoice/{data['id']}/update",
        json={
            "customerId": delivery_order["customer"].id,
            "doNumber": "DO-MANUAL",
            "items": [{"bagTypeId": lookups["bag_type"].id, "quantity": 50, "price": "1.20", "total": "60.00"}],
        },
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["bill_do"] == "DO-MANUAL"
    assert Decimal(str(updated["bill_total"])) == Decimal("60.00")
    assert len(updated["items"]) == 1

    db.expire_all()
    assert db.query(BillItem).count() == 1


def test_invoice_requires_do_reference(client, lookups, make_customer):
    customer = make_customer()
    body = {"customerId": customer.id, "items": [{"bagTypeId": lookups["bag_type"].id, "quantity": 1}]}
    assert client.post("/api/sales/invoice", json=body).status_code == 400
    assert client.post("/api/sales/invoice", json={**body, "doId": 404}).status_code == 404


def test_delete_invoice_is_soft(client, db, lookups, delivery_order):
    created = client.post(
        "/api/sales/invoice",
        json={
            "customerId": delivery_order["customer"].id,
            "doId": delivery_order["salesInfoId"],
            "items": [{"bagTypeId": lookups["bag_type"].id, "quantity": 100, "price": "1.20", "total": "120.00"}],
        },
    ).json()["data"]

    response = client.delete("/api/sales/invoice", params={"id": created["id"]})
    assert response.status_code == 200

    db.expire_all()
    bill = db.get(BillInfo, created["id"])
    assert bill.del_ind == 0
    assert all(item.del_ind == 0 for item in bill.items)
    assert client.get(f"/api/sales/invoice/{created['id']}").status_code == 404
    assert client.get("/api/sales/invoice").json() == []
    assert client.delete("/api/sales/invoice", params={"id": created["id"]}).status_code == 404


def test_return_puts_sold_item_back_in_hand(client, db, delivery_order):
    item = delivery_order["item"]
    barcode = item["complete_item_barcode"]

    response = client.get("/api/sales/return/validate-barcode", params={"barcode": barcode})
    assert response.status_code == 200
    assert response.json()["data"]["complete_item_id"] == item["id"]

    response = client.post(
        "/api/sales/return/new",
        json={"customerId": delivery_order["customer"].id, "items": [line(item)]},
    )
    assert response.status_code == 201
    return_id = response.json()["returnInfoId"]
    assert item_state(db, item) == CompleteItemState.IN_HAND

    response = client.get("/api/sales/return/validate-barcode", params={"barcode": barcode})
    assert response.status_code == 409
    assert response.json()["error"] == "This item has already been returned"

    response = client.post(
        "/api/sales/return/new",
        json={"customerId": delivery_order["customer"].id, "items": [line(item)]},
    )
    assert response.status_code == 409

    detail = client.get(f"/api/sales/return/{return_id}").json()
    assert detail["return_no_bags"] == item["complete_item_bags"]
    assert [i["complete_item_id"] for i in detail["items"]] == [item["id"]]


def test_return_of_unsold_item(client, make_complete_item):
    item = make_complete_item()
    response = client.get("/api/sales/return/validate-barcode", params={"barcode": item["complete_item_barcode"]})
    assert response.status_code == 409
    assert response.json()["error"] == "This item has not been sold"
    assert client.get("/api/sales/return/validate-barcode", params={"barcode": "000"}).status_code == 404


def test_deleting_older_do_keeps_resold_item_sold(client, db, delivery_order):
    item = delivery_order["item"]
    customer = delivery_order["customer"]
    client.post("/api/sales/return/new", json={"customerId": customer.id, "items": [line(item)]})
    resold = client.post("/api/sales/do/new", json={"customerId": customer.id, "items": [line(item)]})
    assert resold.status_code == 201

    assert client.delete(f"/api/sales/do/{delivery_order['salesInfoId']}").status_code == 200
    assert item_state(db, item) == CompleteItemState.CONSUMED

    response = client.post("/api/sales/do/new", json={"customerId": customer.id, "items": [line(item)]})
    assert response.status_code == 409

    assert client.delete(f"/api/sales/do/{resold.json()['salesInfoId']}").status_code == 200
    assert item_state(db, item) == CompleteItemState.IN_HAND


def test_stale_do_cannot_drop_resold_item(client, db, make_complete_item, delivery_order):
    item = delivery_order["item"]
    customer = delivery_order["customer"]
    client.post("/api/sales/return/new", json={"customerId": customer.id, "items": [line(item)]})
    client.post("/api/sales/do/new", json={"customerId": customer.id, "items": [line(item)]})

    other = make_complete_item()
    response = client.put(
        f"/api/sales/do/{delivery_order['salesInfoId']}/update",
        json={"customerId": customer.id, "items": [line(other)]},
    )
    assert response.status_code == 200
    assert item_state(db, item) == CompleteItemState.CONSUMED
    assert item_state(db, other) == CompleteItemState.CONSUMED


def test_delete_return_marks_items_sold_again(client, db, delivery_order):
    item = delivery_order["item"]
    created = client.post(
        "/api/sales/return/new",
        json={"customerId": delivery_order["customer"].id, "items": [line(item)]},
    ).json()
    assert item_state(db, item) == CompleteItemState.IN_HAND

    response = client.delete("/api/sales/return", params={"id": created["returnInfoId"]})
    assert response.status_code == 200
    assert item_state(db, item) == CompleteItemState.CONSUMED

    db.expire_all()
    assert db.get(ReturnInfo, created["returnInfoId"]).del_ind == 0
    assert client.get(f"/api/sales/return/{created['returnInfoId']}").status_code == 404
    assert client.get("/api/sales/return").json() == []
    assert client.delete("/api/sales/return", params={"id": created["returnInfoId"]}).status_code == 404


def test_delete_return_leaves_resold_item_alone(client, db, delivery_order):
    item = delivery_order["item"]
    customer = delivery_order["customer"]
    created = client.post(
        "/api/sales/return/new", json={"customerId": customer.id, "items": [line(item)]}
    ).json()
    resold = client.post("/api/sales/do/new", json={"customerId": customer.id, "items": [line(item)]}).json()

    assert client.delete("/api/sales/return", params={"id": created["returnInfoId"]}).status_code == 200
    assert item_state(db, item) == CompleteItemState.CONSUMED

    assert client.delete(f"/api/sales/do/{resold['salesInfoId']}").status_code == 200
    assert item_state(db, item) == CompleteItemState.IN_HAND
