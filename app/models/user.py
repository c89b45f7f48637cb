from sqlalchemy import Column, Integer, JSON, String

from app.db.base import Base


class User(Base):
    """
    User model representing a Google authenticated user.

    Uses the Google person id as primary key. Holds a single active session
    token that is overwritten on every login.
    """

    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)  # Google person id, never changes
    token = Column(String, nullable=False)
    name = Column(String, nullable=False)
    avatar = Column(String, nullable=False)
    contact = Column(String, nullable=False)
    wallet_id = Column(String, nullable=True)  # Stripe connected account id
    income = Column(Integer, default=0, nullable=False)
    listings = Column(JSON, default=list, nullable=False)
    bookings = Column(JSON, default=list, nullable=False)

    @property
    def has_wallet(self) -> bool:
        """Check whether a Stripe account is linked."""
        return bool(self.wallet_id)
