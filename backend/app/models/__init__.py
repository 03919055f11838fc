"""SQLAlchemy models for StayLedger.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from app.models.booking import Booking
from app.models.guest import Guest
from app.models.user import User

__all__ = [
    "Booking",
    "Guest",
    "User",
]
