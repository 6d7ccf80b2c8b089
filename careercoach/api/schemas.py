from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from careercoach.services.sanitizer import QuizQuestion, SalaryRange

class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

class InsightOut(ApiModel):
    industry: str
    salary_ranges: List[SalaryRange]
    growth_rate: float
    demand_level: str
    top_skills: List[str]
    market_outlook: str
    key_trends: List[str]
    recommended_skills: List[str]
    last_updated: datetime
    next_update: datetime

class QuizRequest(ApiModel):
    industry: Optional[str] = None
    skills: Optional[List[str]] = None

class QuizOut(ApiModel):
    questions: List[QuizQuestion]

class Submission(ApiModel):
    questions: List[QuizQuestion]
    answers: List[Optional[str]]

class QuestionResult(ApiModel):
    question: str
    options: List[str] = []
    answer: str
    explanation: str
    user_answer: Optional[str] = None
    is_correct: bool

class AssessmentOut(ApiModel):
    id: str
    quiz_score: float
    questions: List[QuestionResult]
    category: str
    improvement_tip: Optional[str] = None
    created_at: datetime

class ProfileIn(ApiModel):
    industry: str = Field(min_length=1)
    experience: Optional[int] = Field(default=None, ge=0, le=50)
    skills: List[str] = []
    bio: Optional[str] = Field(default=None, max_length=500)

class UserOut(ApiModel):
    id: str
    email: Optional[str] = None
    industry: Optional[str] = None
    experience: Optional[int] = None
    skills: List[str] = []
    bio: Optional[str] = None

class ImproveIn(ApiModel):
    section_type: str = Field(min_length=1)
    current: str = Field(min_length=1)

class ResumeIn(ApiModel):
    content: str

class ResumeOut(ApiModel):
    content: str
    updated_at: Optional[datetime] = None

class CoverLetterIn(ApiModel):
    job_title: str = Field(min_length=1)
    company_name: str = Field(min_length=1)
    job_description: str = ""

class CoverLetterOut(ApiModel):
    id: str
    content: str
    job_title: str
    company_name: str
    job_description: Optional[str] = None
    status: str
    created_at: datetime
