"""SQLAlchemy models for RoomBnB.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from app.models.booking import Booking, BookingStatus
from app.models.favorite import Favorite
from app.models.property import Property
from app.models.review import GuestReview, Review
from app.models.user import User

__all__ = [
    "Booking",
    "BookingStatus",
    "Favorite",
    "GuestReview",
    "Property",
    "Review",
    "User",
]
