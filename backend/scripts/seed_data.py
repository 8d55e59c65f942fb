"""Seed the database with a small RoomBnB marketplace.

Creates one demo host with four listings, two demo guests, bookings in every
lifecycle state and a couple of reviews on finished stays.

Run inside Docker:
    docker compose exec backend python -m scripts.seed_data
"""

import asyncio
import sys
from datetime import timedelta
from decimal import Decimal
from pathlib import Path

# Add backend to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete, select

from app.auth.passwords import hash_password
from app.database import async_session_factory
from app.models import Booking, BookingStatus, Favorite, GuestReview, Property, Review, User
from app.services.booking_service import calculate_total_price, utc_today

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

DEMO_PASSWORD = "demo1234"

DEMO_HOST = {
    "email": "host@roombnb.com",
    "first_name": "Maya",
    "last_name": "Rivera",
    "phone": "+1 555 0100",
    "is_host": True,
}

DEMO_GUESTS = [
    {"email": "guest@roombnb.com", "first_name": "Sam", "last_name": "Okafor", "phone": "+1 555 0101"},
    {"email": "traveler@roombnb.com", "first_name": "Lena", "last_name": "Fischer", "phone": None},
]

PROPERTIES = [
    {
        "title": "Sunny Loft near the Old Port",
        "description": "Bright top-floor loft with exposed beams, a walk from the harbour and the morning market.",
        "property_type": "Apartment",
        "price_per_night": Decimal("145.00"),
        "cleaning_fee": Decimal("35.00"),
        "bedrooms": 1,
        "bathrooms": Decimal("1.0"),
        "max_guests": 2,
        "address": "12 Rue de la Loge",
        "city": "Marseille",
        "country": "France",
        "amenities": ["wifi", "kitchen", "washer", "air_conditioning"],
        "images": ["https://images.roombnb.com/loft-1.jpg", "https://images.roombnb.com/loft-2.jpg"],
    },
    {
        "title": "Family House with Garden",
        "description": "Three-bedroom house with a fenced garden, barbecue and space for the whole family.",
        "property_type": "House",
        "price_per_night": Decimal("220.00"),
        "cleaning_fee": Decimal("60.00"),
        "bedrooms": 3,
        "bathrooms": Decimal("2.0"),
        "max_guests": 6,
        "address": "48 Elm Street",
        "city": "Portland",
        "country": "United States",
        "amenities": ["wifi", "kitchen", "parking", "garden", "bbq_grill"],
        "images": ["https://images.roombnb.com/house-1.jpg"],
    },
    {
        "title": "Cliffside Villa with Pool",
        "description": "Private villa overlooking the sea with an infinity pool and outdoor dining terrace.",
        "property_type": "Villa",
        "price_per_night": Decimal("480.00"),
        "cleaning_fee": Decimal("120.00"),
        "bedrooms": 4,
        "bathrooms": Decimal("3.5"),
        "max_guests": 8,
        "address": "Via Positanesi d'America 7",
        "city": "Positano",
        "country": "Italy",
        "amenities": ["wifi", "pool", "sea_view", "kitchen", "air_conditioning", "parking"],
        "images": ["https://images.roombnb.com/villa-1.jpg", "https://images.roombnb.com/villa-2.jpg"],
    },
    {
        "title": "Cozy Cabin in the Pines",
        "description": "Wood cabin with a fireplace and hot tub, ten minutes from the trailheads.",
        "property_type": "Cabin",
        "price_per_night": Decimal("130.00"),
        "cleaning_fee": Decimal("40.00"),
        "bedrooms": 2,
        "bathrooms": Decimal("1.0"),
        "max_guests": 4,
        "address": "3 Pine Ridge Road",
        "city": "Banff",
        "country": "Canada",
        "amenities": ["wifi", "fireplace", "hot_tub", "parking"],
        "images": ["https://images.roombnb.com/cabin-1.jpg"],
    },
]


def _build_bookings(properties: list[Property], guests: list[User]) -> list[dict]:
    """Check-in offsets are days from today, so the dashboards always have data."""
    loft, house, villa, cabin = properties
    sam, lena = guests
    return [
        # Finished stays (earnings, reviews)
        {"property": villa, "guest": sam, "start": -60, "nights": 5, "guests": 4, "status": BookingStatus.COMPLETED},
        {"property": loft, "guest": lena, "start": -30, "nights": 3, "guests": 2, "status": BookingStatus.COMPLETED},
        {"property": house, "guest": sam, "start": -10, "nights": 4, "guests": 5, "status": BookingStatus.CONFIRMED},
        # Upcoming
        {"property": cabin, "guest": lena, "start": 7, "nights": 3, "guests": 2, "status": BookingStatus.CONFIRMED},
        {"property": villa, "guest": lena, "start": 21, "nights": 7, "guests": 6, "status": BookingStatus.PENDING},
        {"property": loft, "guest": sam, "start": 14, "nights": 2, "guests": 1, "status": BookingStatus.PENDING},
        # Terminal, no longer holding dates
        {"property": house, "guest": lena, "start": 30, "nights": 3, "guests": 3, "status": BookingStatus.CANCELLED},
        {"property": cabin, "guest": sam, "start": 40, "nights": 2, "guests": 2, "status": BookingStatus.REJECTED},
    ]


# ---------------------------------------------------------------------------
# Main seed function
# ---------------------------------------------------------------------------


async def seed() -> None:
    """Populate the database with demo data.

    Idempotent: removes the demo accounts (and everything hanging off them)
    before re-creating them.
    """
    emails = [DEMO_HOST["email"], *(g["email"] for g in DEMO_GUESTS)]

    async with async_session_factory() as session:
        result = await session.execute(select(User.id).where(User.email.in_(emails)))
        existing_ids = list(result.scalars().all())

        if existing_ids:
            print("⚠️  Demo users already exist. Deleting and re-seeding...")
            property_ids = select(Property.id).where(Property.host_id.in_(existing_ids))
            booking_ids = select(Booking.id).where(
                Booking.property_id.in_(property_ids) | Booking.guest_id.in_(existing_ids)
            )
            await session.execute(delete(GuestReview).where(GuestReview.booking_id.in_(booking_ids)))
            await session.execute(delete(Review).where(Review.booking_id.in_(booking_ids)))
            await session.execute(delete(Booking).where(Booking.id.in_(booking_ids)))
            await session.execute(delete(Favorite).where(Favorite.user_id.in_(existing_ids)))
            await session.execute(delete(Property).where(Property.host_id.in_(existing_ids)))
            await session.execute(delete(User).where(User.id.in_(existing_ids)))
            await session.flush()

        # ------------------------------------------------------------------
        # 1. Users
        # ------------------------------------------------------------------
        password_hash = hash_password(DEMO_PASSWORD)
        host = User(hashed_password=password_hash, **DEMO_HOST)
        guests = [User(hashed_password=password_hash, is_host=False, **data) for data in DEMO_GUESTS]
        session.add_all([host, *guests])
        await session.flush()
        print(f"✅ Created host {host.email} and {len(guests)} guests")

        # ------------------------------------------------------------------
        # 2. Properties
        # ------------------------------------------------------------------
        properties = [Property(host_id=host.id, **data) for data in PROPERTIES]
        session.add_all(properties)
        await session.flush()
        for prop in properties:
            print(f"   🏠 {prop.title} ({prop.city}, ${prop.price_per_night}/night)")

        # ------------------------------------------------------------------
        # 3. Bookings
        # ------------------------------------------------------------------
        today = utc_today()
        bookings: list[Booking] = []
        for row in _build_bookings(properties, guests):
            check_in = today + timedelta(days=row["start"])
            check_out = check_in + timedelta(days=row["nights"])
            booking = Booking(
                property_id=row["property"].id,
                guest_id=row["guest"].id,
                check_in=check_in,
                check_out=check_out,
                number_of_guests=row["guests"],
                total_price=calculate_total_price(row["property"], check_in, check_out),
                status=row["status"].value,
            )
            session.add(booking)
            bookings.append(booking)
        await session.flush()
        print(f"✅ Created {len(bookings)} bookings")

        # ------------------------------------------------------------------
        # 4. Reviews and favorites
        # ------------------------------------------------------------------
        villa_stay, loft_stay = bookings[0], bookings[1]
        session.add_all(
            [
                Review(
                    user_id=villa_stay.guest_id,
                    property_id=villa_stay.property_id,
                    booking_id=villa_stay.id,
                    rating=5,
                    comment="Unreal views and a spotless pool. Maya was a fantastic host.",
                ),
                Review(
                    user_id=loft_stay.guest_id,
                    property_id=loft_stay.property_id,
                    booking_id=loft_stay.id,
                    rating=4,
                    comment="Great location, a bit noisy on Saturday night.",
                ),
                GuestReview(
                    host_id=host.id,
                    guest_id=villa_stay.guest_id,
                    booking_id=villa_stay.id,
                    rating=5,
                    comment="Left the villa in perfect condition. Welcome back any time.",
                ),
                Favorite(user_id=guests[0].id, property_id=properties[3].id),
                Favorite(user_id=guests[1].id, property_id=properties[2].id),
            ]
        )
        await session.commit()

        print()
        print("=" * 60)
        print("📊 Seed Summary")
        print("=" * 60)
        print(f"   Host:       {host.email} / {DEMO_PASSWORD}")
        print(f"   Guests:     {', '.join(g.email for g in guests)} / {DEMO_PASSWORD}")
        print(f"   Properties: {len(properties)}")
        print(f"   Bookings:   {len(bookings)}")
        print("=" * 60)
        print("🎉 Done! You can now log in at /api/v1/auth/login")


if __name__ == "__main__":
    asyncio.run(seed())
