import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from careercoach.core.errors import NotFound
from careercoach.models.orm import User
from careercoach.services.insights import InsightStore

logger = logging.getLogger(__name__)

def require_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None: raise NotFound(f"user {user_id!r} not found")
    return user

def onboarding_status(db: Session, user_id: str) -> dict:
    user = db.get(User, user_id)
    return {"is_onboarded": bool(user and user.industry)}

def update_profile(db: Session, store: InsightStore, user_id: str, industry: str, experience: Optional[int] = None,
                   skills: Optional[List[str]] = None, bio: Optional[str] = None, email: Optional[str] = None) -> User:
    """Point the user at ``industry`` (creating its insight first if needed) and save the profile."""
    store.get_or_create(industry)
    user = db.get(User, user_id)
    if user is None:
        user = User(id=user_id, email=email)
        db.add(user)
        logger.info("Created user %s on first profile save", user_id)
    user.industry = industry
    user.experience = experience
    user.skills = list(skills or [])
    user.bio = bio
    db.commit()
    return user
