"""Tests for the call and lead history routes."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from callintake.core.config import settings
from callintake.models import Call, Lead, Organization

from conftest import ASSISTANT_ID, ORG_ID

TOKEN = "admin-secret"
HEADERS = {"X-Admin-Token": TOKEN}


@pytest.fixture(autouse=True)
def admin_token(monkeypatch):
    monkeypatch.setattr(settings, "admin_api_token", TOKEN)


@pytest_asyncio.fixture
async def history(session_factory, tenant):
    base = datetime(2025, 3, 4, 15, 0, tzinfo=timezone.utc)
    async with session_factory() as session:
        session.add(Organization(id="org-2", name="Other Co", slug="other"))
        session.add_all(
            [
                Call(
                    id="call-old",
                    org_id=ORG_ID,
                    assistant_id=ASSISTANT_ID,
                    caller_number="+15551234567",
                    started_at=base,
                    duration_seconds=60,
                    cost_cents=5,
                ),
                Call(
                    id="call-new",
                    org_id=ORG_ID,
                    assistant_id=ASSISTANT_ID,
                    vapi_call_id="vapi-new",
                    caller_number="+15559876543",
                    caller_name="Riley",
                    started_at=base + timedelta(hours=1),
                    duration_seconds=90,
                    cost_cents=8,
                    transcript="user: hello",
                    metadata_json={"model": "gpt-4o"},
                ),
                Call(id="call-foreign", org_id="org-2", started_at=base),
                Lead(id="lead-1", org_id=ORG_ID, phone="+15559876543", name="Riley", source="call"),
            ]
        )
        await session.commit()


@pytest.mark.asyncio
async def test_requests_without_token_are_forbidden(client) -> None:
    response = await client.get(f"/api/admin/orgs/{ORG_ID}/calls")

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_unset_token_denies_everyone(client, monkeypatch) -> None:
    monkeypatch.setattr(settings, "admin_api_token", "")

    response = await client.get(f"/api/admin/orgs/{ORG_ID}/calls", headers={"X-Admin-Token": ""})

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_calls_listed_newest_first(client, history) -> None:
    response = await client.get(f"/api/admin/orgs/{ORG_ID}/calls", headers=HEADERS)

    assert response.status_code == 200
    items = response.json()["items"]
    assert [item["call_id"] for item in items] == ["call-new", "call-old"]
    assert items[0]["caller_name"] == "Riley"


@pytest.mark.asyncio
async def test_calls_filtered_by_normalized_number(client, history) -> None:
    response = await client.get(
        f"/api/admin/orgs/{ORG_ID}/calls",
        params={"caller_number": "555-123-4567"},
        headers=HEADERS,
    )

    assert [item["call_id"] for item in response.json()["items"]] == ["call-old"]


@pytest.mark.asyncio
async def test_call_detail_includes_transcript(client, history) -> None:
    response = await client.get(f"/api/admin/orgs/{ORG_ID}/calls/call-new", headers=HEADERS)

    assert response.status_code == 200
    call = response.json()["call"]
    assert call["vapi_call_id"] == "vapi-new"
    assert call["transcript"] == "user: hello"
    assert call["metadata"] == {"model": "gpt-4o"}


@pytest.mark.asyncio
async def test_call_from_another_org_is_not_found(client, history) -> None:
    response = await client.get(f"/api/admin/orgs/{ORG_ID}/calls/call-foreign", headers=HEADERS)

    assert response.status_code == 404
    assert response.json()["detail"] == "Call not found"


@pytest.mark.asyncio
async def test_leads_listed(client, history) -> None:
    response = await client.get(f"/api/admin/orgs/{ORG_ID}/leads", headers=HEADERS)

    assert response.status_code == 200
    assert [(item["lead_id"], item["name"]) for item in response.json()["items"]] == [("lead-1", "Riley")]


@pytest.mark.asyncio
async def test_unusable_caller_filter_matches_nothing(client, history) -> None:
    response = await client.get(
        f"/api/admin/orgs/{ORG_ID}/calls",
        params={"caller_number": "nobody"},
        headers=HEADERS,
    )

    assert response.status_code == 200
    assert response.json()["items"] == []
