from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from marquee.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WatchlistEntry(Base):
    """One saved movie for one user.

    Display fields are a snapshot taken when the movie was added; later
    catalog changes are not reflected here. Rows are inserted and deleted,
    never updated.
    """
    __tablename__ = "watchlist_entries"
    __table_args__ = (
        UniqueConstraint("user_id", "movie_id", name="uq_watchlist_user_movie"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    movie_id = Column(Integer, nullable=False)
    movie_title = Column(String, nullable=False)
    poster_path = Column(String, nullable=True)
    release_date = Column(String, nullable=True)
    vote_average = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)

    user = relationship("User", back_populates="watchlist_entries")
