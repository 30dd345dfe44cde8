# skillsync/models/booking.py
import enum

from sqlalchemy import Column, Integer, Float, String, ForeignKey, DateTime, TIMESTAMP, CheckConstraint, Index, func
from sqlalchemy.orm import relationship

from skillsync.database import Base


class BookingStatus(str, enum.Enum):
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Statuses that occupy a tutor's calendar
BLOCKING_STATUSES = (BookingStatus.CONFIRMED.value, BookingStatus.COMPLETED.value)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    tutor_profile_id = Column(Integer, ForeignKey("tutor_profiles.id", ondelete="CASCADE"), nullable=False)

    # Naive UTC
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    price = Column(Float, nullable=False)
    status = Column(String(20), nullable=False, default=BookingStatus.CONFIRMED.value)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="check_booking_interval"),
        CheckConstraint("price > 0", name="check_booking_price"),
        Index("ix_bookings_tutor_window", "tutor_profile_id", "start_time", "end_time"),
    )

    student = relationship("User", foreign_keys=[student_id], back_populates="bookings")
    tutor_profile = relationship("TutorProfile", back_populates="bookings")
    review = relationship("Review", back_populates="booking", uselist=False)
