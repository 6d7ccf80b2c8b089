from fastapi import APIRouter
from pydantic import BaseModel
from typing import List, Optional
from careercoach.core.auth import issue_token

router = APIRouter()

class MockLogin(BaseModel):
    user_id: str
    roles: List[str] = ["user"]
    email: Optional[str] = None

@router.post("/mock-login")
def mock_login(payload: MockLogin):
    token = issue_token(payload.user_id, payload.roles, email=payload.email)
    return {"access_token": token, "token_type": "bearer", "roles": payload.roles}
