from fastapi import APIRouter, Depends
from typing import List
from sqlalchemy.orm import Session
from careercoach.core.database import get_db
from careercoach.core.auth import require_roles, Principal
from careercoach.services.assessments import AssessmentPipeline
from careercoach.services.users import require_user
from careercoach.api.deps import get_pipeline
from careercoach.api.schemas import QuizRequest, QuizOut, Submission, AssessmentOut

router = APIRouter()

@router.post("/quiz", response_model=QuizOut)
def generate_quiz(payload: QuizRequest, user: Principal = Depends(require_roles("user","admin")),
                  db: Session = Depends(get_db), pipeline: AssessmentPipeline = Depends(get_pipeline)):
  u = require_user(db, user.sub)
  industry = payload.industry or u.industry
  skills = payload.skills if payload.skills is not None else u.skills
  if not industry: raise ValueError("industry is required before generating a quiz")
  return QuizOut(questions=pipeline.generate_quiz(industry, skills))

@router.post("", response_model=AssessmentOut, status_code=201)
def submit_assessment(payload: Submission, user: Principal = Depends(require_roles("user","admin")),
                      db: Session = Depends(get_db), pipeline: AssessmentPipeline = Depends(get_pipeline)):
  u = require_user(db, user.sub)
  return pipeline.grade_and_save(u.id, payload.questions, payload.answers, industry=u.industry)

@router.get("", response_model=List[AssessmentOut])
def list_assessments(user: Principal = Depends(require_roles("user","admin")), db: Session = Depends(get_db),
                     pipeline: AssessmentPipeline = Depends(get_pipeline)):
  u = require_user(db, user.sub)
  return pipeline.list_assessments(u.id)
