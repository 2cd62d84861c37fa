from models.job_card import JobCard
from models.job_masters import BagType, Particular, PrintSize


def job_card_form(customer_id, particular_id, **overrides):
    form = {
        "customer_id": customer_id,
        "paper_roll_id": particular_id,
        "gsm": "80",
        "size": 90,
        "job_card_date": "03/15/2025",
        "delivery_date": "03/30/2025",
        "unit_price": "1.25",
        "slitting": {"active": True, "value": "30", "remark": "3 cuts"},
        "printing": {"active": False},
        "cutting": {"active": True, "cutting_type": 2, "bag_type": 2, "number_of_bags": "5000"},
    }
    form.update(overrides)
    return form


def test_create_job_card_builds_section_list_and_sentinels(client, lookups, make_customer):
    customer = make_customer()
    response = client.post(
        "/api/job/jobcard/new",
        json=job_card_form(customer.id, lookups["particular"].id),
    )
    assert response.status_code == 201
    data = response.json()
    assert data["section_list"] == "1,3"
    assert data["printing_size"] == 1
    assert data["printing_remark"] == ""
    assert data["cutting_type"] == 2
    assert data["slitting_size"] == "30"
    assert data["add_date"].startswith("2025-03-15T12:00:00")
    assert data["delivery_date"] == "2025-03-30"
    assert data["del_ind"] == 0


def test_create_job_card_pads_selected_colours(client, lookups, make_customer):
    customer = make_customer()
    form = job_card_form(
        customer.id, lookups["particular"].id,
        printing={"active": True, "cylinder_size": 2, "number_of_colors": "2", "selected_colors": ["1", "3"]},
    )
    response = client.post("/api/job/jobcard/new", json=form)
    assert response.status_code == 201
    data = response.json()
    assert data["section_list"] == "1,2,3"
    assert data["printing_color_name"] == "1,3,0,0"
    assert data["printing_size"] == 2


def test_create_job_card_unknown_customer(client, lookups):
    response = client.post("/api/job/jobcard/new", json=job_card_form(99, lookups["particular"].id))
    assert response.status_code == 404
    assert response.json() == {"error": "Customer not found"}


def test_create_job_card_bad_date(client, lookups, make_customer):
    customer = make_customer()
    form = job_card_form(customer.id, lookups["particular"].id, job_card_date="not a date")
    response = client.post("/api/job/jobcard/new", json=form)
    assert response.status_code == 400


def test_create_job_card_validation_error_shape(client):
    response = client.post("/api/job/jobcard/new", json={"customer_id": 0})
    assert response.status_code == 400
    body = response.json()
    assert "error" in body
    assert body["details"]


def test_update_overwrites_stages(client, db, lookups, make_customer):
    customer = make_customer()
    created = client.post("/api/job/jobcard/new", json=job_card_form(customer.id, lookups["particular"].id)).json()

    form = job_card_form(
        customer.id, lookups["particular"].id,
        slitting={"active": False},
        cutting={"active": False},
        printing={"active": True, "cylinder_size": 2, "remark": "two colour"},
    )
    response = client.put(f"/api/job/jobcard/edit/{created['id']}", json=form)
    assert response.status_code == 200
    data = response.json()
    assert data["section_list"] == "2"
    assert data["slitting_size"] is None
    assert data["cutting_type"] == 1
    assert data["cutting_bag_type"] == 1
    assert data["printing_remark"] == "two colour"


def test_stage_lists_follow_section_list(client, make_job_card):
    slit_only = make_job_card(slitting=True, printing=False, cutting=False)
    print_cut = make_job_card(slitting=False, printing=True, cutting=True)

    slitting_ids = {row["id"] for row in client.get("/api/slitting").json()}
    printing_ids = {row["id"] for row in client.get("/api/printing").json()}
    cutting_ids = {row["id"] for row in client.get("/api/cutting").json()}

    assert slitting_ids == {slit_only.id}
    assert printing_ids == {print_cut.id}
    assert cutting_ids == {print_cut.id}


def test_stage_detail_rejects_card_without_stage(client, make_job_card):
    job_card = make_job_card(slitting=False, printing=True, cutting=False)
    assert client.get(f"/api/slitting/{job_card.id}").status_code == 404
    assert client.get(f"/api/printing/{job_card.id}").status_code == 200


def test_delete_job_card_is_soft(client, db, make_job_card):
    job_card = make_job_card()
    response = client.delete(f"/api/job/jobcard/{job_card.id}")
    assert response.status_code == 200

    db.expire_all()
    assert db.query(JobCard).filter(JobCard.id == job_card.id).one().del_ind == 1
    assert client.get(f"/api/job/jobcard/view/{job_card.id}").status_code == 404
    assert job_card.id not in {row["id"] for row in client.get("/api/job/jobcard").json()}


def test_view_job_card_includes_lookup_names(client, make_job_card):
    job_card = make_job_card()
    response = client.get(f"/api/job/jobcard/view/{job_card.id}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["bag_type_name"] == "Grocery Bag Small"
    assert data["customer"]["customer_full_name"] == "Acme Stores"


def test_non_numeric_id_is_a_bad_request(client):
    assert client.get("/api/job/jobcard/view/abc").status_code == 400


def test_delete_unused_lookups(client, db, lookups):
    spare_bag = client.post("/api/job/bagtype", json={"bag_type": "Wine Carrier", "bag_price": "3.00"}).json()["data"]
    spare_size = client.post("/api/job/printsizes", json={"print_size": "20 inch"}).json()["data"]
    spare_roll = client.post("/api/job/rolltype", json={"particular_name": "Brown Paper"}).json()["data"]

    assert client.delete(f"/api/job/bagtype/{spare_bag['id']}").status_code == 200
    assert client.delete(f"/api/job/printsizes/{spare_size['id']}").status_code == 200
    assert client.delete(f"/api/job/rolltype/{spare_roll['id']}").status_code == 200
    assert client.delete(f"/api/job/bagtype/{spare_bag['id']}").status_code == 404

    db.expire_all()
    assert db.get(BagType, spare_bag["id"]) is None
    assert db.get(PrintSize, spare_size["id"]) is None
    assert db.get(Particular, spare_roll["id"]) is None


def test_lookups_in_use_or_placeholder_are_kept(client, db, lookups, make_job_card):
    make_job_card()

    response = client.delete(f"/api/job/bagtype/{lookups['bag_type_na'].id}")
    assert response.status_code == 400
    assert client.delete(f"/api/job/printsizes/{lookups['print_size'].id}").status_code == 400

    assert client.delete(f"/api/job/bagtype/{lookups['bag_type'].id}").status_code == 409
    assert client.delete(f"/api/job/rolltype/{lookups['particular'].id}").status_code == 409

    db.expire_all()
    assert db.query(BagType).count() == 2
