"""Tests for GET /api/data/* endpoints."""

from api.app import build_services


class TestListInvoices:

    def test_empty_listing(self, client):
        response = client.get("/api/data/invoices")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"] == {"items": [], "page": 1, "pageSize": 10, "totalCount": 0, "totalPages": 0}

    def test_items_carry_derived_status(self, client, create_invoice):
        create_invoice()
        create_invoice(invoiceDate="2024-01-20")

        items = client.get("/api/data/invoices").json()["data"]["items"]

        assert [(i["id"], i["status"]) for i in items] == [
            ("INV-2024-002", "pending"),
            ("INV-2024-001", "overdue"),
        ]
        assert items[0]["dueDate"] == "2024-02-19"

    def test_search_status_and_sort(self, client, create_invoice):
        create_invoice(customerName="Priya Sharma", amount=500)
        create_invoice(customerName="Priya Menon", amount=900)
        create_invoice(customerName="Amit Patel", amount=700)

        response = client.get(
            "/api/data/invoices",
            params={"search": "priya", "status": "overdue", "sort": "amount"},
        )

        items = response.json()["data"]["items"]
        assert [i["customerName"] for i in items] == ["Priya Menon", "Priya Sharma"]

    def test_pagination(self, client, create_invoice):
        for _ in range(11):
            create_invoice()

        data = client.get("/api/data/invoices", params={"page": 2}).json()["data"]

        assert data["totalPages"] == 2
        assert len(data["items"]) == 1

    def test_page_past_end_is_empty(self, client, create_invoice):
        create_invoice()
        data = client.get("/api/data/invoices", params={"page": 5}).json()["data"]
        assert data["items"] == []

    def test_invalid_status_is_422(self, client):
        response = client.get("/api/data/invoices", params={"status": "late"})

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_page_zero_is_422(self, client):
        assert client.get("/api/data/invoices", params={"page": 0}).status_code == 422


class TestGetInvoice:

    def test_returns_invoice_with_timing(self, client, create_invoice):
        created = create_invoice()

        data = client.get(f"/api/data/invoices/{created['id']}").json()["data"]

        assert data["customerName"] == "Asha Rao"
        assert data["status"] == "overdue"
        assert data["timing"] == "Overdue by 1 days"

    def test_unknown_id_is_404(self, client):
        response = client.get("/api/data/invoices/INV-2024-999")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "NOT_FOUND"
        assert "INV-2024-999" in body["error"]["message"]


class TestInvoiceHistory:

    def test_history_newest_first(self, client, create_invoice):
        created = create_invoice()
        client.post("/api/actions", json={
            "domain": "invoice", "action": "update",
            "data": {"id": created["id"], "amount": 1200},
        })

        data = client.get(f"/api/data/invoices/{created['id']}/history").json()["data"]

        assert [e["action"] for e in data] == ["update", "create"]
        assert data[0]["changes"] == {"amount": {"old": 1000, "new": 1200}}

    def test_deleted_invoice_keeps_history(self, client, create_invoice):
        created = create_invoice()
        client.post("/api/actions", json={"domain": "invoice", "action": "delete", "data": {"id": created["id"]}})

        response = client.get(f"/api/data/invoices/{created['id']}/history")

        assert response.status_code == 200
        assert response.json()["data"][0]["action"] == "delete"

    def test_unknown_id_is_404(self, client):
        assert client.get("/api/data/invoices/INV-2024-999/history").status_code == 404

    def test_retained_history_is_bounded_by_config(self, config, local_store, clock, make_draft):
        services = build_services(config.model_copy(update={"audit_history_limit": 4}), store=local_store, clock=clock)
        invoice_svc = services["invoice"]
        invoice = invoice_svc.create(make_draft())

        for _ in range(500):
            invoice_svc.mark_paid(invoice.id)
            invoice_svc.mark_unpaid(invoice.id)

        assert len(services["audit"].get_entity_history("invoice", invoice.id)) == 4


class TestActivity:

    def test_lists_recent_mutations(self, client, create_invoice):
        created = create_invoice()
        client.post("/api/actions", json={"domain": "invoice", "action": "mark_paid", "data": {"id": created["id"]}})

        data = client.get("/api/data/activity").json()["data"]

        assert [e["message"] for e in data] == [
            "Marked INV-2024-001 paid on 2024-02-01",
            "Created INV-2024-001 for Asha Rao",
        ]

    def test_limit(self, client, create_invoice):
        for _ in range(3):
            create_invoice()

        data = client.get("/api/data/activity", params={"limit": 2}).json()["data"]

        assert [e["invoiceIds"] for e in data] == [["INV-2024-003"], ["INV-2024-002"]]


class TestSummary:

    def test_summary_metrics(self, client, create_invoice):
        create_invoice(amount=1000)
        paid = create_invoice(amount=2500)
        client.post("/api/actions", json={
            "domain": "invoice", "action": "mark_paid",
            "data": {"id": paid["id"], "paymentDate": "2024-02-01"},
        })

        data = client.get("/api/data/summary").json()["data"]

        assert data["totalOutstanding"] == 1000
        assert data["totalOverdue"] == 1000
        assert data["totalPaidThisMonth"] == 2500
        assert data["avgPaymentDelay"] == 1
        assert data["statusCounts"] == {"paid": 1, "pending": 0, "overdue": 1}
        assert data["amountByStatus"] == {"paid": 2500, "pending": 0, "overdue": 1000}

    def test_recent_limit(self, client, create_invoice):
        for _ in range(4):
            create_invoice()

        data = client.get("/api/data/summary", params={"recent": 2}).json()["data"]

        assert len(data["recentInvoices"]) == 2


class TestExport:

    def test_csv_download(self, client, create_invoice):
        create_invoice()

        response = client.get("/api/data/export", params={"status": "overdue"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.headers["content-disposition"] == (
            'attachment; filename="invoices_overdue_2024-02-01.csv"'
        )
        lines = response.text.splitlines()
        assert lines[0].startswith('"Invoice Number"')
        assert lines[1].startswith('"INV-2024-001","Asha Rao"')

    def test_export_ignores_pagination(self, client, create_invoice):
        for _ in range(12):
            create_invoice()

        response = client.get("/api/data/export")

        assert len(response.text.splitlines()) == 13

    def test_export_respects_filter(self, client, create_invoice):
        create_invoice()

        response = client.get("/api/data/export", params={"status": "paid"})

        assert len(response.text.splitlines()) == 1
