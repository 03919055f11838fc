"""Seed the database with a demo host, their guests and a season of bookings.

Stays are spread over the months around today and cover every stay-length
bucket, so the calendar and statistics pages have something to show.

Run from the backend directory:
    python -m scripts.seed_data
"""

import asyncio
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Add backend to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete, select

from app.auth.passwords import hash_password
from app.database import async_session_factory, engine
from app.models.booking import Booking
from app.models.guest import Guest
from app.models.user import User

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

DEMO_USER = {
    "email": "demo@stayledger.local",
    "password": "demo1234",
    "name": "Demo Host",
}

GUESTS = [
    {
        "name": "Emma Thompson",
        "email": "emma.thompson@gmail.com",
        "phone": "+61412345678",
        "notes": "Prefers ground floor, allergic to shellfish",
    },
    {
        "name": "James Wilson",
        "email": "j.wilson@outlook.com",
        "phone": "+447911123456",
        "notes": None,
    },
    {
        "name": "Yuki Tanaka",
        "email": "yuki.tanaka@yahoo.co.jp",
        "phone": "+819012345678",
        "notes": "Honeymoon couple",
    },
    {
        "name": "Marie Dubois",
        "email": "marie.dubois@orange.fr",
        "phone": "+33612345678",
        "notes": None,
    },
    {
        "name": "Liam O'Brien",
        "email": "liam.obrien@gmail.com",
        "phone": "+353871234567",
        "notes": "Travels with a dog",
    },
    {
        "name": "Ananya Sharma",
        "email": "ananya.sharma@gmail.com",
        "phone": "+919812345678",
        "notes": "Vegetarian",
    },
]

NIGHTLY_RATE = Decimal("129.00")

# (guest name, days from today to check-in, nights, notes)
BOOKINGS = [
    ("James Wilson", -75, 5, "Late check-out if possible"),
    ("Yuki Tanaka", -60, 1, None),
    ("Marie Dubois", -52, 3, None),
    ("Liam O'Brien", -45, 16, "Long stay discount applied"),
    ("Emma Thompson", -20, 2, None),
    ("Ananya Sharma", -12, 9, "Traveling with elderly parents"),
    ("Emma Thompson", -2, 7, "Ground floor preferred, shellfish allergy"),
    ("James Wilson", 8, 4, None),
    ("Yuki Tanaka", 14, 1, "Flower arrangement on arrival"),
    ("Marie Dubois", 21, 12, None),
    ("Liam O'Brien", 40, 3, None),
]


async def seed() -> None:
    """Populate the database with demo data.

    Idempotent: an existing demo user is deleted together with their guests
    and bookings before everything is created again.
    """
    async with async_session_factory() as session:
        result = await session.execute(select(User).where(User.email == DEMO_USER["email"]))
        existing_user = result.scalar_one_or_none()

        if existing_user is not None:
            print(f"Demo user '{DEMO_USER['email']}' already exists. Deleting and re-seeding...")
            await session.execute(delete(Booking).where(Booking.owner_id == existing_user.id))
            await session.execute(delete(Guest).where(Guest.owner_id == existing_user.id))
            await session.execute(delete(User).where(User.id == existing_user.id))
            await session.flush()

        # ------------------------------------------------------------------
        # 1. Create demo user
        # ------------------------------------------------------------------
        user = User(
            email=DEMO_USER["email"],
            hashed_password=hash_password(DEMO_USER["password"]),
            name=DEMO_USER["name"],
            is_active=True,
        )
        session.add(user)
        await session.flush()
        print(f"Created demo user: {user.email} (id={user.id})")

        # ------------------------------------------------------------------
        # 2. Create guests
        # ------------------------------------------------------------------
        guests: dict[str, Guest] = {}
        for guest_data in GUESTS:
            guest = Guest(owner_id=user.id, **guest_data)
            session.add(guest)
            guests[guest.name] = guest
        await session.flush()
        print(f"Created {len(guests)} guests")

        # ------------------------------------------------------------------
        # 3. Create bookings
        # ------------------------------------------------------------------
        today = date.today()
        for guest_name, offset, nights, notes in BOOKINGS:
            check_in = today + timedelta(days=offset)
            session.add(
                Booking(
                    owner_id=user.id,
                    guest_id=guests[guest_name].id,
                    check_in=check_in,
                    check_out=check_in + timedelta(days=nights),
                    price=NIGHTLY_RATE * nights,
                    notes=notes,
                )
            )

        await session.commit()
        print(f"Created {len(BOOKINGS)} bookings")

    await engine.dispose()
    print(f"Done. Log in with {DEMO_USER['email']} / {DEMO_USER['password']}")


if __name__ == "__main__":
    asyncio.run(seed())
