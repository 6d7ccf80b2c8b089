from fastapi import APIRouter, Depends, Response
from typing import List
from sqlalchemy.orm import Session
from careercoach.core.database import get_db
from careercoach.core.auth import require_roles, Principal
from careercoach.core.errors import NotFound
from careercoach.services import documents
from careercoach.services.generative import GenerativeClient
from careercoach.services.users import require_user
from careercoach.api.deps import get_client
from careercoach.api.schemas import ImproveIn, ResumeIn, ResumeOut, CoverLetterIn, CoverLetterOut

resume_router = APIRouter()
letters_router = APIRouter()

@resume_router.post("/improve")
def improve_section(payload: ImproveIn, user: Principal = Depends(require_roles("user","admin")), db: Session = Depends(get_db),
                    client: GenerativeClient = Depends(get_client)):
    u = require_user(db, user.sub)
    return {"improved": documents.improve_resume_section(client, u, payload.section_type, payload.current)}

@resume_router.put("", response_model=ResumeOut)
def save_resume(payload: ResumeIn, user: Principal = Depends(require_roles("user","admin")), db: Session = Depends(get_db)):
    u = require_user(db, user.sub)
    return documents.save_resume(db, u.id, payload.content)

@resume_router.get("", response_model=ResumeOut)
def get_resume(user: Principal = Depends(require_roles("user","admin")), db: Session = Depends(get_db)):
    resume = documents.get_resume(db, user.sub)
    if resume is None: raise NotFound("no resume saved yet")
    return resume

@letters_router.post("", response_model=CoverLetterOut, status_code=201)
def create_letter(payload: CoverLetterIn, user: Principal = Depends(require_roles("user","admin")), db: Session = Depends(get_db),
                  client: GenerativeClient = Depends(get_client)):
    u = require_user(db, user.sub)
    return documents.generate_cover_letter(db, client, u, payload.job_title, payload.company_name, payload.job_description)

@letters_router.get("", response_model=List[CoverLetterOut])
def list_letters(user: Principal = Depends(require_roles("user","admin")), db: Session = Depends(get_db)):
    return documents.list_cover_letters(db, user.sub)

@letters_router.get("/{letter_id}", response_model=CoverLetterOut)
def get_letter(letter_id: str, user: Principal = Depends(require_roles("user","admin")), db: Session = Depends(get_db)):
    return documents.get_cover_letter(db, user.sub, letter_id)

@letters_router.delete("/{letter_id}", status_code=204)
def delete_letter(letter_id: str, user: Principal = Depends(require_roles("user","admin")), db: Session = Depends(get_db)):
    documents.delete_cover_letter(db, user.sub, letter_id)
    return Response(status_code=204)
