# tests/test_sales.py
from __future__ import annotations

import re

import pytest
from sqlalchemy import func, select

from ceahub.models.sale import Sale

from conftest import auth_headers, create_agent, create_sale


async def count_sales(db) -> int:
    return int((await db.execute(select(func.count(Sale.id)))).scalar_one())


@pytest.mark.asyncio
@pytest.mark.parametrize("n", [1, 7, 250])
async def test_log_sale_creates_pending_sale(client, db, n):
    agent = await create_agent(db)
    await db.commit()

    r = await client.post(
        "/api/log-sale",
        json={"saleCount": n, "saleNames": "Alice; Bob"},
        headers=auth_headers(agent.id),
    )

    assert r.status_code == 201
    body = r.json()
    assert body["status"] == "pending"
    assert body["sale_count"] == n
    assert body["sale_names"] == "Alice; Bob"
    assert body["agent_id"] == str(agent.id)
    assert await count_sales(db) == 1


@pytest.mark.asyncio
async def test_log_sale_accepts_numeric_string(client, db):
    agent = await create_agent(db)
    await db.commit()

    r = await client.post(
        "/api/log-sale",
        json={"saleCount": " 12 ", "saleNames": "Lerato"},
        headers=auth_headers(agent.id),
    )

    assert r.status_code == 201
    assert r.json()["sale_count"] == 12


@pytest.mark.asyncio
@pytest.mark.parametrize("sale_count", [0, -3, "abc", "", 2.5, None, True, "4x"])
async def test_log_sale_rejects_invalid_count(client, db, sale_count):
    agent = await create_agent(db)
    await db.commit()

    r = await client.post(
        "/api/log-sale",
        json={"saleCount": sale_count, "saleNames": "Alice"},
        headers=auth_headers(agent.id),
    )

    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Invalid input."
    assert any(d["field"] == "saleCount" for d in body["details"])
    assert await count_sales(db) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{"saleCount": 2, "saleNames": "   "}, {"saleCount": 2}, {}])
async def test_log_sale_requires_names(client, db, payload):
    agent = await create_agent(db)
    await db.commit()

    r = await client.post("/api/log-sale", json=payload, headers=auth_headers(agent.id))

    assert r.status_code == 400
    assert await count_sales(db) == 0


@pytest.mark.asyncio
async def test_sales_summary_buckets_and_amount(client, db):
    agent = await create_agent(db)
    await create_sale(db, agent, 3, status="pending")
    await create_sale(db, agent, 2, status="pending")
    await create_sale(db, agent, 4, status="confirmed")
    await create_sale(db, agent, 9, status="rejected")
    await create_sale(db, agent, 20, status="payout_pending")
    await db.commit()

    r = await client.get(f"/api/get-agent-sales/{agent.id}", headers=auth_headers(agent.id))

    assert r.status_code == 200
    body = r.json()
    assert body["pending_sales"] == 5
    assert body["confirmed_sales"] == 4
    assert body["amount_earned"] == "R800.00"
    assert re.fullmatch(r"[A-Z][a-z]+ \d{4}", body["period"])


@pytest.mark.asyncio
async def test_sales_summary_uses_bonus_rate_at_threshold(client, db):
    agent = await create_agent(db)
    await create_sale(db, agent, 6, status="confirmed")
    await create_sale(db, agent, 5, status="confirmed")
    await db.commit()

    r = await client.get(f"/api/get-agent-sales/{agent.id}", headers=auth_headers(agent.id))

    assert r.json()["confirmed_sales"] == 11
    assert r.json()["amount_earned"] == "R4400.00"


@pytest.mark.asyncio
async def test_sales_summary_for_agent_without_sales(client, db):
    agent = await create_agent(db)
    await db.commit()

    r = await client.get(f"/api/get-agent-sales/{agent.id}", headers=auth_headers(agent.id))

    assert r.status_code == 200
    assert r.json()["pending_sales"] == 0
    assert r.json()["confirmed_sales"] == 0
    assert r.json()["amount_earned"] == "R0.00"


@pytest.mark.asyncio
async def test_top_performers_ranks_approved_units(client, db):
    a = await create_agent(db, name="Ayanda", agent_code="CEA-000001")
    b = await create_agent(db, name="Bongani", agent_code="CEA-000002")
    c = await create_agent(db, name="Chloe", agent_code="CEA-000003")
    await create_sale(db, a, 5, status="confirmed")
    await create_sale(db, a, 4, status="payout_pending")
    await create_sale(db, b, 12, status="confirmed")
    await create_sale(db, b, 50, status="pending")
    await create_sale(db, c, 30, status="rejected")
    await db.commit()

    r = await client.get("/api/get-top-performers", headers=auth_headers(a.id))

    assert r.status_code == 200
    board = r.json()
    assert [(p["rank"], p["name"], p["confirmed_sales"]) for p in board] == [
        (1, "Bongani", 12),
        (2, "Ayanda", 9),
    ]
    assert board[0]["agent_internal_id"] == "CEA-000002"
