"""Create database schema and seed a demo organization and assistant for development."""
from __future__ import annotations

import asyncio
import os

from callintake.db.session import SessionLocal, engine
from callintake.models.assistant import Assistant
from callintake.models.base import Base
from callintake.models.organization import Organization, OrgTier

DEMO_ORG = {
	"id": "org-demo",
	"name": "Demo Plumbing Co",
	"slug": "demo-plumbing",
	"tier": OrgTier.PRO,
}

DEMO_ASSISTANT = {
	"id": "assistant-demo",
	"org_id": DEMO_ORG["id"],
	"vapi_assistant_id": os.environ.get("DEMO_VAPI_ASSISTANT_ID", "vapi-demo-assistant"),
	"name": "Front Desk",
	"phone_number": os.environ.get("DEMO_ASSISTANT_PHONE"),
}


async def create_schema() -> None:
	async with engine.begin() as conn:
		await conn.run_sync(Base.metadata.create_all)


async def seed_demo_tenant() -> None:
	"""Insert or update the demo organization and its assistant."""

	async with SessionLocal() as session:
		async with session.begin():
			org = await session.get(Organization, DEMO_ORG["id"])
			if org is None:
				session.add(Organization(**DEMO_ORG))
			else:
				org.name = DEMO_ORG["name"]
				org.slug = DEMO_ORG["slug"]
				org.tier = DEMO_ORG["tier"]

			assistant = await session.get(Assistant, DEMO_ASSISTANT["id"])
			if assistant is None:
				session.add(Assistant(**DEMO_ASSISTANT, config={}))
			else:
				assistant.vapi_assistant_id = DEMO_ASSISTANT["vapi_assistant_id"]
				assistant.name = DEMO_ASSISTANT["name"]
				assistant.phone_number = DEMO_ASSISTANT["phone_number"]


async def main() -> None:
	await create_schema()
	await seed_demo_tenant()
	assistant_id = DEMO_ASSISTANT["vapi_assistant_id"]
	print(f"Database schema ensured; demo assistant id: {assistant_id}")


if __name__ == "__main__":
	asyncio.run(main())
