from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from careercoach.core.database import get_db
from careercoach.core.auth import require_roles, Principal
from careercoach.services.insights import InsightStore
from careercoach.services.users import update_profile, onboarding_status
from careercoach.api.deps import get_insight_store
from careercoach.api.schemas import ProfileIn, UserOut

router = APIRouter()

@router.put("/me/profile", response_model=UserOut)
def save_profile(payload: ProfileIn, user: Principal = Depends(require_roles("user","admin")), db: Session = Depends(get_db),
                 store: InsightStore = Depends(get_insight_store)):
    return update_profile(db, store, user.sub, payload.industry, payload.experience, payload.skills, payload.bio, email=user.email)

@router.get("/me/onboarding")
def get_onboarding(user: Principal = Depends(require_roles("user","admin")), db: Session = Depends(get_db)):
    return onboarding_status(db, user.sub)
