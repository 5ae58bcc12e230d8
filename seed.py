"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations:
    python seed.py

Creates:
  - 8 sample profiles
  - 5 sample trips (hosted by the first three profiles)
  - join requests in every state, decided through the request lifecycle
    so seat counts are accounted exactly as in production
"""

import asyncio
from datetime import date, timedelta

from sqlalchemy import text

from travelbuddy.domain.entities import Identity, Profile, TripDraft
from travelbuddy.domain.enums import RequestStatus
from travelbuddy.infrastructure.database import async_session_factory, engine
from travelbuddy.infrastructure.repositories import ProfileRepository
from travelbuddy.services.lifecycle import RequestLifecycle
from travelbuddy.services.trips import TripService


PROFILES = [
    {"id": "u-aarav", "name": "Aarav Sharma", "email": "aarav@example.com"},
    {"id": "u-priya", "name": "Priya Patel", "email": "priya@example.com"},
    {"id": "u-rohan", "name": "Rohan Mehta", "email": "rohan@example.com"},
    {"id": "u-sneha", "name": "Sneha Gupta", "email": "sneha@example.com"},
    {"id": "u-vikram", "name": "Vikram Singh", "email": "vikram@example.com"},
    {"id": "u-ananya", "name": "Ananya Reddy", "email": "ananya@example.com"},
    {"id": "u-karan", "name": "Karan Joshi", "email": "karan@example.com"},
    {"id": "u-meera", "name": "Meera Nair", "email": "meera@example.com"},
]

_START = date.today() + timedelta(days=14)

TRIPS = [
    # (host, from, to, start offset days, length days, speed, seats)
    ("u-aarav", "Mumbai", "Goa", 0, 5, 2.5, 4),
    ("u-aarav", "Pune", "Lonavala", 3, 2, 3.5, 3),
    ("u-priya", "Bengaluru", "Coorg", 7, 4, 2.0, 5),
    ("u-priya", "Chennai", "Pondicherry", 10, 3, 3.0, 2),
    ("u-rohan", "Delhi", "Manali", 21, 7, 1.5, 6),
]

# (trip index, requester, decision or None for pending)
REQUESTS = [
    (0, "u-sneha", RequestStatus.APPROVED),
    (0, "u-vikram", RequestStatus.APPROVED),
    (0, "u-ananya", None),
    (1, "u-karan", RequestStatus.REJECTED),
    (1, "u-meera", None),
    (2, "u-sneha", RequestStatus.APPROVED),
    (3, "u-vikram", RequestStatus.APPROVED),  # fills the trip
    (4, "u-aarav", None),
]


async def seed():
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM profiles"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        # ── Profiles ──────────────────────────────────────────────────
        profiles = ProfileRepository(session)
        for p in PROFILES:
            await profiles.upsert(Profile(id=p["id"], name=p["name"], email=p["email"]))
        await session.commit()
        print(f"  Created {len(PROFILES)} profiles")

        # ── Trips ─────────────────────────────────────────────────────
        trip_service = TripService(session)
        trips = []
        for host, origin, destination, offset, length, speed, seats in TRIPS:
            start = _START + timedelta(days=offset)
            trip = await trip_service.create_trip(
                Identity(host),
                TripDraft(
                    start_location=origin,
                    destination=destination,
                    start_date=start,
                    end_date=start + timedelta(days=length),
                    speed=speed,
                    total_seats=seats,
                    description=f"{length}-day trip from {origin} to {destination}",
                ),
            )
            trips.append(trip)
        print(f"  Created {len(trips)} trips")

        # ── Join requests ─────────────────────────────────────────────
        lifecycle = RequestLifecycle(session)
        for index, requester, decision in REQUESTS:
            trip = trips[index]
            request = await lifecycle.submit(Identity(requester), trip.id)
            if decision is not None:
                await lifecycle.decide(request.id, decision, Identity(trip.creator_id))
        print(f"  Created {len(REQUESTS)} join requests")

        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
