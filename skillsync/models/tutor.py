# skillsync/models/tutor.py
from sqlalchemy import Column, Integer, Float, Text, ForeignKey, Table, TIMESTAMP, func
from sqlalchemy.orm import relationship

from skillsync.database import Base

tutor_categories = Table(
    "tutor_categories",
    Base.metadata,
    Column("tutor_profile_id", Integer, ForeignKey("tutor_profiles.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", Integer, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)


class TutorProfile(Base):
    __tablename__ = "tutor_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    bio = Column(Text)
    hourly_rate = Column(Float, nullable=False, default=0.0)
    experience = Column(Integer, nullable=False, default=0)

    # Derived from the review set, see crud.review.update_tutor_rating
    rating_avg = Column(Float, nullable=False, default=0.0)
    rating_count = Column(Integer, nullable=False, default=0)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="tutor_profile")
    categories = relationship(
        "Category",
        secondary=tutor_categories,
        back_populates="tutors",
        lazy="selectin",
    )
    availability = relationship(
        "AvailabilitySlot",
        back_populates="tutor_profile",
        cascade="all, delete-orphan",
    )
    bookings = relationship("Booking", back_populates="tutor_profile")
    reviews = relationship("Review", back_populates="tutor_profile")
