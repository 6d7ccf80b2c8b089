from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from careercoach.core.database import get_db
from careercoach.core.auth import require_roles, Principal
from careercoach.core.errors import NotFound
from careercoach.services.insights import InsightStore
from careercoach.services.users import require_user
from careercoach.api.deps import get_insight_store
from careercoach.api.schemas import InsightOut

router = APIRouter()

@router.get("/me", response_model=InsightOut)
def my_insight(user: Principal = Depends(require_roles("user","admin")), db: Session = Depends(get_db),
               store: InsightStore = Depends(get_insight_store)):
    u = require_user(db, user.sub)
    if not u.industry: raise NotFound("user has not completed onboarding")
    return store.get_or_create(u.industry)

@router.get("/{industry}", response_model=InsightOut)
def industry_insight(industry: str, user: Principal = Depends(require_roles("user","admin")), db: Session = Depends(get_db),
                     store: InsightStore = Depends(get_insight_store)):
    # admins may prime any key; everyone else only their own industry
    if not user.has_any("admin"):
        u = require_user(db, user.sub)
        if u.industry != industry:
            raise HTTPException(403, "Insights are limited to your own industry")
    return store.get_or_create(industry)
