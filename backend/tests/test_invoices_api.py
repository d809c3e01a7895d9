"""API tests for tax invoice endpoints."""

from __future__ import annotations

import uuid
from decimal import Decimal

import pytest
from httpx import AsyncClient

from hospitality.services import invoice_service

pytestmark = pytest.mark.asyncio


async def _authenticate(client: AsyncClient, email: str, password: str) -> str:
    response = await client.post(
        "/api/v1/auth/token",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert response.status_code == 200
    return response.json()["access_token"]


async def _cashier_headers(app_context: dict[str, object]) -> dict[str, str]:
    token = await _authenticate(
        app_context["client"],
        app_context["cashier_email"],
        app_context["cashier_password"],
    )
    return {"Authorization": f"Bearer {token}"}


async def test_issue_and_fetch_invoice(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = await _cashier_headers(app_context)
    reservation_id = app_context["reservation_id"]

    missing = await client.get(
        f"/api/v1/reservations/{reservation_id}/invoice", headers=headers
    )
    assert missing.status_code == 404

    created = await client.post(
        f"/api/v1/reservations/{reservation_id}/invoice", headers=headers
    )
    assert created.status_code == 201, created.text
    body = created.json()
    assert body["invoice_no"].startswith("INV-")
    assert Decimal(body["subtotal"]) == Decimal("1000.00")
    assert Decimal(body["tax_amount"]) == Decimal("150.00")
    assert Decimal(body["total_amount"]) == Decimal("1150.00")
    assert body["zatca_qr_code"]
    assert body["paid_at"] is None

    by_reservation = await client.get(
        f"/api/v1/reservations/{reservation_id}/invoice", headers=headers
    )
    assert by_reservation.status_code == 200
    assert by_reservation.json()["id"] == body["id"]

    by_id = await client.get(f"/api/v1/invoices/{body['id']}", headers=headers)
    assert by_id.status_code == 200
    assert by_id.json()["invoice_no"] == body["invoice_no"]


async def test_duplicate_invoice_conflicts(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = await _cashier_headers(app_context)
    url = f"/api/v1/reservations/{app_context['reservation_id']}/invoice"

    assert (await client.post(url, headers=headers)).status_code == 201
    duplicate = await client.post(url, headers=headers)
    assert duplicate.status_code == 409


async def test_unknown_reservation_and_invoice(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = await _cashier_headers(app_context)

    response = await client.post(
        f"/api/v1/reservations/{uuid.uuid4()}/invoice", headers=headers
    )
    assert response.status_code == 404
    response = await client.get(f"/api/v1/invoices/{uuid.uuid4()}", headers=headers)
    assert response.status_code == 404


async def test_pay_invoice_once(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = await _cashier_headers(app_context)
    created = await client.post(
        f"/api/v1/reservations/{app_context['reservation_id']}/invoice",
        headers=headers,
    )
    invoice_id = created.json()["id"]

    paid = await client.post(
        f"/api/v1/invoices/{invoice_id}/pay",
        json={"paid_at": "2024-03-02T12:00:00+00:00"},
        headers=headers,
    )
    assert paid.status_code == 200
    assert paid.json()["paid_at"] is not None

    again = await client.post(
        f"/api/v1/invoices/{invoice_id}/pay", json={}, headers=headers
    )
    assert again.status_code == 400


async def test_document_and_qr(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = await _cashier_headers(app_context)
    created = await client.post(
        f"/api/v1/reservations/{app_context['untaxed_reservation_id']}/invoice",
        headers=headers,
    )
    invoice = created.json()

    document = await client.get(
        f"/api/v1/invoices/{invoice['id']}/document", headers=headers
    )
    assert document.status_code == 200
    assert document.headers["content-type"].startswith("text/html")
    html = document.text
    assert invoice["invoice_no"] in html
    assert "1322.50 SAR" in html
    assert "172.50 SAR" in html
    assert "Chalet 3" in html
    assert 'class="qr-code"' in html
    assert "Confirmed / مؤكد" in html

    qr = await client.get(f"/api/v1/invoices/{invoice['id']}/qr", headers=headers)
    assert qr.status_code == 200
    records = {record["tag"]: record["value"] for record in qr.json()["records"]}
    assert records[1] == "Awwa Al-Makan Tourist Lodges"
    assert records[2] == "310231928400003"
    assert records[3].endswith("Z")
    assert records[4] == "1322.50"
    assert records[5] == "172.50"


async def test_requires_billing_role(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    token = await _authenticate(
        client,
        app_context["housekeeper_email"],
        app_context["housekeeper_password"],
    )
    response = await client.post(
        f"/api/v1/reservations/{app_context['reservation_id']}/invoice",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 403


async def test_requires_authentication(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    response = await client.get(
        f"/api/v1/reservations/{app_context['reservation_id']}/invoice"
    )
    assert response.status_code == 401


async def test_invoice_numbering_conflict_is_409(
    app_context: dict[str, object], monkeypatch: pytest.MonkeyPatch
) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = await _cashier_headers(app_context)

    first = await client.post(
        f"/api/v1/reservations/{app_context['reservation_id']}/invoice",
        headers=headers,
    )
    taken = first.json()["invoice_no"]

    async def always_taken(session, year):
        return taken

    monkeypatch.setattr(invoice_service, "_next_invoice_number", always_taken)
    response = await client.post(
        f"/api/v1/reservations/{app_context['untaxed_reservation_id']}/invoice",
        headers=headers,
    )
    assert response.status_code == 409
    assert "invoice number" in response.json()["detail"]
