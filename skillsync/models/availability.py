# skillsync/models/availability.py
import enum

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from skillsync.database import Base


class DayOfWeek(str, enum.Enum):
    MON = "MON"
    TUE = "TUE"
    WED = "WED"
    THU = "THU"
    FRI = "FRI"
    SAT = "SAT"
    SUN = "SUN"


DAY_ORDER = {day.value: index for index, day in enumerate(DayOfWeek)}


class AvailabilitySlot(Base):
    """
    Recurring weekly window a tutor advertises.
    Descriptive only: booking conflict checks never read these rows.
    """
    __tablename__ = "availability_slots"

    id = Column(Integer, primary_key=True, index=True)
    tutor_profile_id = Column(
        Integer,
        ForeignKey("tutor_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    day_of_week = Column(String(3), nullable=False)
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    tutor_profile = relationship("TutorProfile", back_populates="availability")
