from typing import Optional

from sqlalchemy.orm import Session, joinedload

from skillsync.models.tutor import TutorProfile


def get_tutor_profile(db: Session, tutor_profile_id: int) -> Optional[TutorProfile]:
    return (
        db.query(TutorProfile)
        .options(joinedload(TutorProfile.user))
        .filter(TutorProfile.id == tutor_profile_id)
        .first()
    )


def get_tutor_profile_by_user(db: Session, user_id: int) -> Optional[TutorProfile]:
    return db.query(TutorProfile).filter(TutorProfile.user_id == user_id).first()


def lock_tutor_profile(db: Session, tutor_profile_id: int) -> Optional[TutorProfile]:
    """SELECT ... FOR UPDATE on the profile row (ignored by SQLite)."""
    return (
        db.query(TutorProfile)
        .filter(TutorProfile.id == tutor_profile_id)
        .with_for_update()
        .first()
    )


def get_or_create_tutor_profile(db: Session, user_id: int) -> TutorProfile:
    """
    Get or create the tutor profile for a user.

    Returns:
        TutorProfile object
    """
    profile = get_tutor_profile_by_user(db, user_id)

    if not profile:
        profile = TutorProfile(
            user_id=user_id,
            hourly_rate=0.0,
            experience=0,
            rating_avg=0.0,
            rating_count=0,
        )
        db.add(profile)
        db.flush()

    return profile
