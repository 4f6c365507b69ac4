SHOP_A_URL = "https://shopA.example"

INVOICE = {
    "invoice_number": "INV-0001",
    "client_name": "Jane Roe",
    "items_json": [{"description": "Lemon Haze 2g", "price_per_unit": 10, "quantity": 2, "total": 20}],
    "total_amount": 20,
    "vat_rate": 0.21,
}


class TestInvoices:

    def test_create_stores_in_shop(self, shop_client, backend):
        response = shop_client.post("/api/invoices", json={**INVOICE, "notes": "paid cash"})

        assert response.status_code == 200
        (stored,) = backend.rows(SHOP_A_URL, "invoices")
        assert stored["invoice_number"] == "INV-0001"
        assert stored["notes"] == "paid cash"
        # unset optional columns are left to database defaults
        assert "pdf_url" not in stored

    def test_create_requires_fields(self, shop_client, backend):
        response = shop_client.post("/api/invoices", json={"invoice_number": "INV-0002"})

        assert response.status_code == 400
        assert backend.calls == []

    def test_list_newest_first(self, shop_client, backend):
        shop_client.get("/api/invoices")

        (call,) = backend.calls_to("invoices")
        assert call.params["order"] == "created_at.desc"

    def test_get_and_delete(self, shop_client, backend):
        backend.seed(SHOP_A_URL, "invoices", [{"id": "i1", **INVOICE}])

        assert shop_client.get("/api/invoices/i1").json()["invoice_number"] == "INV-0001"
        response = shop_client.delete("/api/invoices/i1")

        assert response.json() == {"message": "Invoice deleted successfully"}
        assert backend.rows(SHOP_A_URL, "invoices") == []

    def test_get_missing(self, shop_client, backend):
        response = shop_client.get("/api/invoices/missing")

        assert response.status_code == 404
        assert response.json() == {"error": "Invoice not found"}
