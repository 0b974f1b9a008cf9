"""Seed script for development data.

Run with:  python -m shift_scheduler.seed
Registers a manager and a few employees in the directory stub, then fills the
open scheduling month for each employee through the bulk endpoint.
"""

from __future__ import annotations

import asyncio
import sys
from datetime import date

import httpx

from shift_scheduler.config import get_settings
from shift_scheduler.services.policy import iter_month_days, local_today, open_scheduling_month

BASE_URL = "http://localhost:8000"
MANAGER_ID = "00000000-0000-0000-0000-000000000001"

HEADERS = {
    "Content-Type": "application/json",
    "X-User-Id": MANAGER_ID,
    "X-Role": "manager",
}

EMPLOYEES = [
    {"id": MANAGER_ID, "full_name": "Lin Mei-Hua", "username": "meihua", "role": "MANAGER"},
    {"id": "00000000-0000-0000-0000-000000000002", "full_name": "Chen Wei", "username": "wei", "role": "EMPLOYEE"},
    {"id": "00000000-0000-0000-0000-000000000003", "full_name": "Wang Ting", "username": "ting", "role": "EMPLOYEE"},
    {"id": "00000000-0000-0000-0000-000000000004", "full_name": "Huang Jun", "username": "jun", "role": "EMPLOYEE"},
]

# Number of days each employee requests in the open month.
SHIFTS_PER_EMPLOYEE = 8


async def _safe_put(client: httpx.AsyncClient, url: str, json: dict, label: str) -> dict | None:
    """PUT (upsert), idempotent."""
    resp = await client.put(url, json=json, headers=HEADERS)
    if resp.status_code in (200, 201):
        print(f"  [OK] {label}")
        return resp.json()
    print(f"  [ERROR] {label}: {resp.status_code} {resp.text[:200]}")
    return None


async def seed_employees(client: httpx.AsyncClient) -> None:
    """Register the directory users."""
    print("\n--- Seeding employees ---")
    for emp in EMPLOYEES:
        body = {k: v for k, v in emp.items() if k != "id"}
        await _safe_put(client, f"{BASE_URL}/employees/{emp['id']}", body, emp["full_name"])


async def _schedulable_days(client: httpx.AsyncClient, year: int, month: int) -> list[date]:
    resp = await client.get(f"{BASE_URL}/calendar/{year}/{month}", headers=HEADERS)
    resp.raise_for_status()
    body = resp.json()
    blocked = {date.fromisoformat(h["date"]) for h in body["holidays"]}
    blocked.update(date.fromisoformat(d) for d in body["weekends"])
    return [d for d in iter_month_days(year, month) if d not in blocked]


async def seed_shifts(client: httpx.AsyncClient) -> None:
    """Save a month of shifts for each employee, staggered so no day exceeds capacity."""
    year, month = open_scheduling_month(local_today(get_settings().timezone))
    print(f"\n--- Seeding shifts for {year:04d}-{month:02d} ---")
    days = await _schedulable_days(client, year, month)
    employees = [e for e in EMPLOYEES if e["role"] == "EMPLOYEE"]

    for index, emp in enumerate(employees):
        # Offsetting each employee keeps at most two people on any day.
        picked = [d for i, d in enumerate(days) if (i + index) % len(employees) != 0][:SHIFTS_PER_EMPLOYEE]
        await _safe_put(
            client,
            f"{BASE_URL}/shifts/months/{year}/{month}",
            {"shift_dates": [d.isoformat() for d in picked], "target_user_id": emp["id"]},
            f"{emp['full_name']}: {len(picked)} days from {picked[0]:%m/%d}" if picked else emp["full_name"],
        )


async def main() -> None:
    print("=" * 60)
    print("  Shift Scheduler - Development Seed Script")
    print("=" * 60)

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            resp = await client.get(f"{BASE_URL}/health")
            if resp.status_code != 200:
                print(f"API health check failed: {resp.status_code}")
                sys.exit(1)
            print("\n[OK] API is healthy")
        except httpx.ConnectError:
            print("ERROR: Cannot connect to API at", BASE_URL)
            sys.exit(1)

        await seed_employees(client)
        await seed_shifts(client)

    print("\n" + "=" * 60)
    print("  Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
