from io import BytesIO
import pandas as pd
import pytest


def _create_invoice(client, customer, product, **extra):
    payload = {"client_id": customer.id, "items": [{"product_id": product.id, "quantity": 3, "discount": 10}]}
    payload.update(extra)
    return client.post("/invoices/", json=payload)


def test_health(client):
    assert client.get("/api/test").status_code == 200


def test_client_crud(client):
    response = client.post("/clients/", json={"name": "Sarl Atlas", "taxid": "123"})
    assert response.status_code == 201
    client_id = response.get_json()["id"]

    assert client.post("/clients/", json={"name": "Copie", "taxid": "123"}).status_code == 400
    assert client.put(f"/clients/{client_id}", json={"city": "Oran"}).get_json()["city"] == "Oran"
    assert client.get("/clients/999").status_code == 404


def test_product_create_and_list(client):
    response = client.post("/products/", json={"code": "P-1", "name": "Vis", "unit_price": "1.5", "tax_rate": 19})
    assert response.status_code == 201
    assert response.get_json()["unit_price"] == "1.50"

    assert client.post("/products/", json={"name": "sans code"}).status_code == 400
    assert [p["code"] for p in client.get("/products/").get_json()] == ["P-1"]


def test_invoice_lifecycle(client, customer, product):
    response = _create_invoice(client, customer, product)
    assert response.status_code == 201
    invoice = response.get_json()
    assert invoice["total"] == "321.30"
    assert invoice["client"]["name"] == "Sarl Atlas"

    payment = client.post("/payments/", json={"invoice_id": invoice["id"], "amount": "321.30",
                                              "payment_method": "cash"})
    assert payment.status_code == 201
    assert payment.get_json()["invoice_status"] == "paid"

    locked = client.put(f"/invoices/{invoice['id']}", json={"notes": "edit"})
    assert locked.status_code == 409


def test_invoice_validation_errors(client, customer):
    assert client.post("/invoices/", json={"client_id": customer.id}).status_code == 400
    response = client.post("/invoices/", json={"client_id": customer.id, "items": [{"product_id": 77}]})
    assert response.status_code == 400
    assert "not found" in response.get_json()["error"]


def test_payment_exceeding_balance(client, customer, product):
    invoice = _create_invoice(client, customer, product).get_json()
    response = client.post("/payments/", json={"invoice_id": invoice["id"], "amount": "500", "payment_method": "cash"})
    assert response.status_code == 422


def test_convert_proforma(client, customer, product):
    proforma = client.post("/proformas/", json={
        "client_id": customer.id, "items": [{"product_id": product.id, "quantity": 1}]
    }).get_json()

    response = client.post(f"/proformas/{proforma['id']}/convert")
    assert response.status_code == 201
    body = response.get_json()
    assert body["proforma_status"] == "approved"
    assert body["invoice"]["proforma_id"] == proforma["id"]

    assert client.post(f"/proformas/{proforma['id']}/convert").status_code == 400


def test_delivery_from_invoice(client, customer, product):
    invoice = _create_invoice(client, customer, product).get_json()
    response = client.post(f"/delivery-notes/from-invoice/{invoice['id']}", json={"driver_name": "Karim"})
    assert response.status_code == 201
    note = response.get_json()
    assert note["transport"]["driver_name"] == "Karim"
    assert note["final_invoice_id"] == invoice["id"]


def test_pdf_download(client, customer, product):
    invoice = _create_invoice(client, customer, product).get_json()
    response = client.get(f"/exports/invoice/{invoice['id']}/pdf")
    assert response.status_code == 200
    assert response.mimetype == "application/pdf"
    assert response.data.startswith(b"%PDF")
    assert f"Invoice_{invoice['number']}.pdf" in response.headers["Content-Disposition"]


def test_pdf_download_failure_is_reported(client):
    response = client.get("/exports/invoice/999/pdf")
    assert response.status_code == 500
    assert "error" in response.get_json()
    assert client.get("/exports/unknown/1/pdf").status_code == 404


def test_template_save_and_fetch(client):
    response = client.post("/pdf-templates/", json={"name": "Modèle A", "document_type": "invoice",
                                                    "layout_data": {"objects": []}})
    assert response.status_code == 200
    assert client.get("/pdf-templates/invoice").get_json()["name"] == "Modèle A"
    assert client.get("/pdf-templates/delivery").status_code == 404
    assert client.post("/pdf-templates/", json={"document_type": "memo", "layout_data": {}}).status_code == 400


def test_etat104_routes(client, customer, product):
    _create_invoice(client, customer, product, issue_date="2024-03-05")

    report = client.get("/reports/etat104?year=2024&month=3").get_json()
    assert report["grand_total"] == "321.30"
    assert report["clients"][0]["client_name"] == "Sarl Atlas"

    excel = client.get("/reports/etat104/export?year=2024&month=3&format=excel")
    assert excel.status_code == 200
    assert "Etat104_03_2024.xlsx" in excel.headers["Content-Disposition"]

    assert client.get("/reports/etat104?year=2024&month=14").status_code == 400
    assert client.get("/reports/etat104/export?format=csv").status_code == 400


def test_settings_roundtrip(client):
    assert client.get("/settings/").status_code == 404
    assert client.post("/settings/", json={"business_name": "Entreprise Test", "taxid": "0999"}).status_code == 201
    assert client.get("/settings/").get_json()["business_name"] == "Entreprise Test"


def test_invoice_and_client_list_exports(client, customer, product):
    _create_invoice(client, customer, product)

    response = client.get("/invoices/export")
    assert response.status_code == 200
    assert "invoices_export.xlsx" in response.headers["Content-Disposition"]
    sheet = pd.read_excel(BytesIO(response.data), sheet_name="Invoices")
    assert sheet.iloc[0]["client"] == "Sarl Atlas"
    assert sheet.iloc[0]["total"] == pytest.approx(321.30)

    clients = pd.read_excel(BytesIO(client.get("/clients/export").data), sheet_name="Clients")
    assert clients["name"].tolist() == ["Sarl Atlas"]
