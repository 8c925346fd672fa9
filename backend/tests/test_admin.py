# tests/test_admin.py
from __future__ import annotations

import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import select

from ceahub.core.config import settings
from ceahub.core.time import utcnow
from ceahub.models.agent import Agent
from ceahub.models.payout_request import PayoutRequest
from ceahub.models.sale import Sale

from conftest import auth_headers, create_agent, create_sale


async def create_admin(db) -> Agent:
    return await create_agent(db, role="admin", name="Site Admin", email="admin@example.com")


async def create_payout(db, agent: Agent, amount: str = "800.00", status: str = "requested") -> PayoutRequest:
    payout = PayoutRequest(
        agent_id=agent.id,
        amount_requested=Decimal(amount),
        status=status,
        sales_data="Client (2)",
        included_sale_ids=[],
    )
    db.add(payout)
    await db.flush()
    return payout


@pytest.mark.asyncio
async def test_approve_and_reject_sale(client, db):
    admin = await create_admin(db)
    agent = await create_agent(db)
    s1 = await create_sale(db, agent, 2)
    s2 = await create_sale(db, agent, 3)
    await db.commit()

    r1 = await client.put(f"/api/admin/approve-sale/{s1.id}", headers=auth_headers(admin.id))
    r2 = await client.put(f"/api/admin/reject-sale/{s2.id}", headers=auth_headers(admin.id))

    assert r1.status_code == 200
    assert r1.json()["status"] == "confirmed"
    assert r2.status_code == 200
    assert r2.json()["status"] == "rejected"


@pytest.mark.asyncio
async def test_rejected_sale_can_be_reapproved_by_default(client, db):
    admin = await create_admin(db)
    agent = await create_agent(db)
    sale = await create_sale(db, agent, 2, status="rejected")
    await db.commit()

    r = await client.put(f"/api/admin/approve-sale/{sale.id}", headers=auth_headers(admin.id))

    assert r.status_code == 200
    assert r.json()["status"] == "confirmed"


@pytest.mark.asyncio
async def test_enforced_transitions_reject_override(client, db, monkeypatch):
    monkeypatch.setattr(settings, "ENFORCE_STATUS_TRANSITIONS", True)
    admin = await create_admin(db)
    agent = await create_agent(db)
    sale = await create_sale(db, agent, 2, status="rejected")
    payout = await create_payout(db, agent, status="requested")
    await db.commit()

    r = await client.put(f"/api/admin/approve-sale/{sale.id}", headers=auth_headers(admin.id))
    p = await client.put(f"/api/admin/complete-payout/{payout.id}", headers=auth_headers(admin.id))

    assert r.status_code == 400
    assert r.json()["details"] == "invalid_status_transition"
    assert p.status_code == 400

    stmt = select(Sale).where(Sale.id == sale.id).execution_options(populate_existing=True)
    assert (await db.execute(stmt)).scalar_one().status == "rejected"


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["approve-sale", "reject-sale", "approve-payout", "complete-payout"])
async def test_unknown_id_is_404(client, db, path):
    admin = await create_admin(db)
    await db.commit()

    r = await client.put(f"/api/admin/{path}/{uuid.uuid4()}", headers=auth_headers(admin.id))

    assert r.status_code == 404


@pytest.mark.asyncio
async def test_malformed_id_is_400(client, db):
    admin = await create_admin(db)
    await db.commit()

    r = await client.put("/api/admin/approve-sale/42", headers=auth_headers(admin.id))

    assert r.status_code == 400


@pytest.mark.asyncio
async def test_payout_lifecycle(client, db):
    admin = await create_admin(db)
    agent = await create_agent(db)
    payout = await create_payout(db, agent)
    await db.commit()

    approved = await client.put(f"/api/admin/approve-payout/{payout.id}", headers=auth_headers(admin.id))
    completed = await client.put(f"/api/admin/complete-payout/{payout.id}", headers=auth_headers(admin.id))

    assert approved.json()["status"] == "approved"
    assert completed.json()["status"] == "completed"
    assert Decimal(str(completed.json()["amount_requested"])) == Decimal("800.00")


@pytest.mark.asyncio
async def test_all_sales_newest_first_with_agent_details(client, db):
    admin = await create_admin(db)
    agent = await create_agent(db, name="Naledi", agent_code="CEA-123456")
    old = await create_sale(db, agent, 1, names="Old")
    new = await create_sale(db, agent, 2, names="New")
    old.created_at = utcnow() - timedelta(days=2)
    orphan = Sale(agent_id=uuid.uuid4(), sale_count=1, sale_names="Ghost", status="pending")
    orphan.created_at = utcnow() - timedelta(days=5)
    db.add(orphan)
    await db.commit()

    r = await client.get("/api/admin/all-sales", headers=auth_headers(admin.id))

    assert r.status_code == 200
    rows = r.json()
    assert [row["id"] for row in rows] == [str(new.id), str(old.id), str(orphan.id)]
    assert rows[0]["agent_name"] == "Naledi"
    assert rows[0]["agent_internal_id"] == "CEA-123456"
    assert rows[2]["agent_name"] == "Unknown Agent"
    assert rows[2]["agent_internal_id"] == "N/A"


@pytest.mark.asyncio
async def test_get_and_update_agent_details(client, db):
    admin = await create_admin(db)
    agent = await create_agent(db, name="Sipho")
    await db.commit()

    got = await client.get(f"/api/admin/get-agent-details/{agent.id}", headers=auth_headers(admin.id))
    assert got.status_code == 200
    assert got.json()["name"] == "Sipho"

    r = await client.put(
        f"/api/admin/update-agent-details/{agent.id}",
        json={"town": "Durban", "province": "KwaZulu-Natal", "training_completed": True, "role": "admin"},
        headers=auth_headers(admin.id),
    )

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["data"]["town"] == "Durban"
    assert body["data"]["training_completed"] is True
    assert body["data"]["role"] == "admin"


@pytest.mark.asyncio
async def test_update_agent_details_validates_role(client, db):
    admin = await create_admin(db)
    agent = await create_agent(db)
    await db.commit()

    r = await client.put(
        f"/api/admin/update-agent-details/{agent.id}",
        json={"role": "superuser"},
        headers=auth_headers(admin.id),
    )

    assert r.status_code == 400


@pytest.mark.asyncio
async def test_password_reset(client, db, gateway):
    admin = await create_admin(db)
    agent = await create_agent(db)
    await db.commit()

    short = await client.put(
        f"/api/admin/update-agent-auth/{agent.id}",
        json={"new_password": "abc"},
        headers=auth_headers(admin.id),
    )
    ok = await client.put(
        f"/api/admin/update-agent-auth/{agent.id}",
        json={"new_password": "s3cret!"},
        headers=auth_headers(admin.id),
    )

    assert short.status_code == 400
    assert ok.status_code == 200
    assert ok.json() == {"success": True, "message": "Agent's password changed."}
    assert gateway.password_updates == [(agent.id, "s3cret!")]


@pytest.mark.asyncio
async def test_admin_search_matches_name_email_or_contact(client, db):
    admin = await create_admin(db)
    a = await create_agent(db, name="Zanele Khumalo", email="zk@example.com", contact_details="0711111111")
    b = await create_agent(db, name="Pieter", email="pieter@KHUMALO-family.co.za", contact_details="0722222222")
    c = await create_agent(db, name="Anele", email="anele@example.com", contact_details="0733333333")
    await db.commit()

    by_text = await client.get("/api/admin/search-agents", params={"query": "  khumalo "}, headers=auth_headers(admin.id))
    by_phone = await client.get("/api/admin/search-agents", params={"query": "07333"}, headers=auth_headers(admin.id))
    empty = await client.get("/api/admin/search-agents", params={"query": ""}, headers=auth_headers(admin.id))

    assert {row["id"] for row in by_text.json()} == {str(a.id), str(b.id)}
    assert [row["id"] for row in by_phone.json()] == [str(c.id)]
    assert empty.json() == []


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["name", "email", "role", "training_completed"])
async def test_update_agent_details_rejects_null_for_required_columns(client, db, field):
    admin = await create_admin(db)
    agent = await create_agent(db, name="Lerato")
    await db.commit()

    r = await client.put(
        f"/api/admin/update-agent-details/{agent.id}",
        json={field: None},
        headers=auth_headers(admin.id),
    )

    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Invalid input."
    assert [d["field"] for d in body["details"]] == [field]

    got = await client.get(f"/api/admin/get-agent-details/{agent.id}", headers=auth_headers(admin.id))
    assert got.json()["name"] == "Lerato"
