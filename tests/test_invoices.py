"""Tests for Invoice API and InvoiceCreate validation."""

from datetime import UTC, datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from cloudbill.main import app
from cloudbill.models.invoice import TaxType
from cloudbill.models.usage_record import MetricType, ResourceType
from cloudbill.repositories.billing_address_repository import BillingAddressRepository
from cloudbill.repositories.usage_record_repository import UsageRecordRepository
from cloudbill.schemas.billing_address import BillingAddressCreate
from cloudbill.schemas.invoice import InvoiceCreate, InvoiceGenerateRequest
from cloudbill.schemas.usage import UsageRecordCreate

ACCOUNT_ID = "acc-api"
GENERATE_PAYLOAD = {
    "account_id": ACCOUNT_ID,
    "period_start": "2026-03-01T00:00:00Z",
    "period_end": "2026-03-31T23:59:59Z",
}


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def usage(db_session):
    """Twenty VM hours (10000 paise) of unbilled usage in March."""
    return UsageRecordRepository(db_session).create(
        UsageRecordCreate(
            account_id=ACCOUNT_ID,
            resource_type=ResourceType.COMPUTE,
            resource_id="vm-1",
            resource_name="web-1",
            metric_type=MetricType.RUNTIME,
            quantity=Decimal("20"),
            unit="hours",
            unit_price=Decimal("500"),
            total_cost=Decimal("10000"),
            period_start=datetime(2026, 3, 10, 0, 0, tzinfo=UTC),
            period_end=datetime(2026, 3, 10, 20, 0, tzinfo=UTC),
        )
    )


@pytest.fixture
def karnataka_address(db_session):
    return BillingAddressRepository(db_session).create(
        BillingAddressCreate(
            account_id=ACCOUNT_ID,
            address_line1="12 Residency Road",
            city="Bengaluru",
            state="Karnataka",
            state_code="29",
            postal_code="560025",
            gst_number="29ABCDE1234F1Z5",
            is_default=True,
        )
    )


def _generate(client, **overrides):
    payload = {**GENERATE_PAYLOAD, **overrides}
    response = client.post("/v1/invoices/generate", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestGenerateInvoiceApi:
    def test_generate_inter_state(self, client, usage, karnataka_address):
        data = _generate(client)

        assert data["success"] is True
        invoice = data["invoice"]
        assert invoice["status"] == "draft"
        assert invoice["tax_type"] == "inter_state"
        assert invoice["subtotal_amount"] == 10000
        assert invoice["igst_amount"] == 1800
        assert invoice["cgst_amount"] == 0
        assert invoice["total_amount"] == 11800
        assert invoice["place_of_supply"] == "Karnataka"
        assert invoice["billing_address_id"] == str(karnataka_address.id)

        assert len(data["line_items"]) == 1
        assert data["line_items"][0]["amount"] == 10000
        assert Decimal(data["line_items"][0]["quantity"]) == Decimal("20")

        calculation = data["tax_calculation"]
        assert calculation["invoice_id"] == invoice["id"]
        assert calculation["customer_state_code"] == "29"
        assert Decimal(calculation["igst_rate"]) == Decimal("18")

    def test_generate_with_placeholder_address(self, client, usage):
        data = _generate(client)

        invoice = data["invoice"]
        assert invoice["tax_type"] == "intra_state"
        assert invoice["cgst_amount"] == 900
        assert invoice["sgst_amount"] == 900
        assert invoice["total_amount"] == 11800

    def test_generate_with_due_date(self, client, usage):
        data = _generate(client, due_date="2026-05-01T00:00:00Z")
        assert data["invoice"]["due_date"].startswith("2026-05-01T00:00:00")

    def test_generate_twice_returns_400(self, client, usage):
        _generate(client)

        response = client.post("/v1/invoices/generate", json=GENERATE_PAYLOAD)

        assert response.status_code == 400
        assert response.json()["detail"] == "No unbilled usage records found for the period"

    def test_generate_without_usage(self, client):
        response = client.post("/v1/invoices/generate", json=GENERATE_PAYLOAD)
        assert response.status_code == 400

    def test_generate_inverted_period(self, client):
        response = client.post(
            "/v1/invoices/generate",
            json={**GENERATE_PAYLOAD, "period_end": "2026-02-01T00:00:00Z"},
        )
        assert response.status_code == 422

    def test_generate_mixed_naive_and_offset_period(self, client, usage):
        response = client.post(
            "/v1/invoices/generate",
            json={
                **GENERATE_PAYLOAD,
                "period_start": "2026-03-01T00:00:00",
                "period_end": "2026-03-31T23:59:59+05:30",
            },
        )
        assert response.status_code == 201, response.text

    def test_generate_mixed_inverted_period(self, client):
        response = client.post(
            "/v1/invoices/generate",
            json={
                **GENERATE_PAYLOAD,
                "period_start": "2026-03-31T00:00:00",
                "period_end": "2026-03-01T00:00:00+05:30",
            },
        )
        assert response.status_code == 422

    def test_generate_missing_account(self, client):
        payload = {k: v for k, v in GENERATE_PAYLOAD.items() if k != "account_id"}
        response = client.post("/v1/invoices/generate", json=payload)
        assert response.status_code == 422

    def test_usage_marked_billed(self, client, usage):
        invoice = _generate(client)["invoice"]

        response = client.get("/v1/usage/", params={"account_id": ACCOUNT_ID})

        records = response.json()
        assert len(records) == 1
        assert records[0]["billed"] is True
        assert records[0]["invoice_id"] == invoice["id"]


class TestInvoiceQueries:
    def test_list_invoices(self, client, usage):
        invoice = _generate(client)["invoice"]

        response = client.get("/v1/invoices/")

        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "1"
        assert [i["id"] for i in response.json()] == [invoice["id"]]

    def test_list_filters(self, client, usage):
        _generate(client)

        assert client.get("/v1/invoices/", params={"status": "draft"}).json() != []
        assert client.get("/v1/invoices/", params={"status": "paid"}).json() == []
        assert client.get("/v1/invoices/", params={"account_id": "acc-none"}).json() == []

    def test_list_invalid_status(self, client):
        response = client.get("/v1/invoices/", params={"status": "refunded"})
        assert response.status_code == 422

    def test_get_invoice(self, client, usage):
        invoice = _generate(client)["invoice"]

        response = client.get(f"/v1/invoices/{invoice['id']}")

        assert response.status_code == 200
        assert response.json()["invoice_number"] == invoice["invoice_number"]

    def test_get_invoice_not_found(self, client):
        response = client.get(f"/v1/invoices/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Invoice not found"

    def test_get_line_items(self, client, usage):
        invoice = _generate(client)["invoice"]

        response = client.get(f"/v1/invoices/{invoice['id']}/line_items")

        assert response.status_code == 200
        items = response.json()
        assert len(items) == 1
        assert items[0]["description"] == "Virtual Machine Usage"
        assert items[0]["unit_price"] == 500

    def test_get_line_items_not_found(self, client):
        response = client.get(f"/v1/invoices/{uuid4()}/line_items")
        assert response.status_code == 404

    def test_get_tax_calculation(self, client, usage):
        invoice = _generate(client)["invoice"]

        response = client.get(f"/v1/invoices/{invoice['id']}/tax_calculation")

        assert response.status_code == 200
        data = response.json()
        assert data["supplier_state"] == "Maharashtra"
        assert data["total_tax_amount"] == 1800
        assert data["hsn_sac_code"] == "998314"

    def test_get_tax_calculation_not_found(self, client):
        response = client.get(f"/v1/invoices/{uuid4()}/tax_calculation")
        assert response.status_code == 404


class TestInvoiceLifecycleApi:
    def test_finalize(self, client, usage):
        invoice = _generate(client)["invoice"]

        response = client.post(f"/v1/invoices/{invoice['id']}/finalize")

        assert response.status_code == 200
        assert response.json()["status"] == "issued"
        assert response.json()["issued_at"] is not None

    def test_finalize_twice(self, client, usage):
        invoice = _generate(client)["invoice"]
        client.post(f"/v1/invoices/{invoice['id']}/finalize")

        response = client.post(f"/v1/invoices/{invoice['id']}/finalize")

        assert response.status_code == 400
        assert "draft" in response.json()["detail"]

    def test_finalize_not_found(self, client):
        assert client.post(f"/v1/invoices/{uuid4()}/finalize").status_code == 404

    def test_mark_paid(self, client, usage):
        invoice = _generate(client)["invoice"]

        response = client.post(f"/v1/invoices/{invoice['id']}/mark_paid")

        assert response.status_code == 200
        assert response.json()["status"] == "paid"
        assert response.json()["paid_at"] is not None

    def test_mark_paid_twice(self, client, usage):
        invoice = _generate(client)["invoice"]
        client.post(f"/v1/invoices/{invoice['id']}/mark_paid")

        response = client.post(f"/v1/invoices/{invoice['id']}/mark_paid")

        assert response.status_code == 400

    def test_mark_paid_not_found(self, client):
        assert client.post(f"/v1/invoices/{uuid4()}/mark_paid").status_code == 404

    def test_mark_overdue_past_due(self, client, usage):
        invoice = _generate(client, due_date="2026-04-01T00:00:00Z")["invoice"]
        client.post(f"/v1/invoices/{invoice['id']}/finalize")

        response = client.post(f"/v1/invoices/{invoice['id']}/mark_overdue")

        assert response.status_code == 200
        assert response.json()["status"] == "overdue"

    def test_mark_overdue_not_yet_due(self, client, usage):
        due = (datetime.now(UTC) + timedelta(days=5)).isoformat()
        invoice = _generate(client, due_date=due)["invoice"]

        response = client.post(f"/v1/invoices/{invoice['id']}/mark_overdue")

        assert response.status_code == 200
        assert response.json()["status"] == "draft"

    def test_mark_overdue_not_found(self, client):
        assert client.post(f"/v1/invoices/{uuid4()}/mark_overdue").status_code == 404

    def test_cancel(self, client, usage):
        invoice = _generate(client)["invoice"]

        response = client.post(f"/v1/invoices/{invoice['id']}/cancel")

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

    def test_cancel_paid(self, client, usage):
        invoice = _generate(client)["invoice"]
        client.post(f"/v1/invoices/{invoice['id']}/mark_paid")

        response = client.post(f"/v1/invoices/{invoice['id']}/cancel")

        assert response.status_code == 400

    def test_cancel_not_found(self, client):
        assert client.post(f"/v1/invoices/{uuid4()}/cancel").status_code == 404


class TestInvoiceCreateValidation:
    def _payload(self, **overrides):
        payload = {
            "account_id": ACCOUNT_ID,
            "invoice_number": "INV-20260401-0001",
            "billing_period_start": datetime(2026, 3, 1, tzinfo=UTC),
            "billing_period_end": datetime(2026, 3, 31, tzinfo=UTC),
            "subtotal_amount": 10000,
            "igst_amount": 1800,
            "total_amount": 11800,
            "tax_type": TaxType.INTER_STATE,
            "hsn_code": "998314",
            "sac_code": "998314",
            "place_of_supply": "Karnataka",
            "due_date": datetime(2026, 5, 1, tzinfo=UTC),
        }
        payload.update(overrides)
        return payload

    def test_valid(self):
        invoice = InvoiceCreate(**self._payload())
        assert invoice.total_amount == 11800

    def test_total_must_match(self):
        with pytest.raises(ValidationError, match="does not match"):
            InvoiceCreate(**self._payload(total_amount=11799))

    def test_igst_excludes_cgst_sgst(self):
        with pytest.raises(ValidationError, match="IGST"):
            InvoiceCreate(
                **self._payload(cgst_amount=900, sgst_amount=900, total_amount=13600)
            )

    def test_negative_amount(self):
        with pytest.raises(ValidationError):
            InvoiceCreate(**self._payload(subtotal_amount=-1, total_amount=1799))


class TestInvoiceGenerateRequest:
    def test_bounds_normalized_to_utc(self):
        ist = timezone(timedelta(hours=5, minutes=30))
        request = InvoiceGenerateRequest(
            account_id=ACCOUNT_ID,
            period_start=datetime(2026, 3, 1),
            period_end=datetime(2026, 3, 31, 23, 59, 59, tzinfo=ist),
            due_date=datetime(2026, 4, 30, 12, 0, tzinfo=ist),
        )
        assert request.period_start == datetime(2026, 3, 1, tzinfo=UTC)
        assert request.period_end == datetime(2026, 3, 31, 18, 29, 59, tzinfo=UTC)
        assert request.period_end.tzinfo == UTC
        assert request.due_date.tzinfo == UTC

    def test_inverted_mixed_bounds_rejected(self):
        ist = timezone(timedelta(hours=5, minutes=30))
        with pytest.raises(ValidationError, match="period_end must not be before"):
            InvoiceGenerateRequest(
                account_id=ACCOUNT_ID,
                period_start=datetime(2026, 3, 31),
                period_end=datetime(2026, 3, 1, tzinfo=ist),
            )
