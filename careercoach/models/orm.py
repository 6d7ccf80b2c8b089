from datetime import datetime, timezone
from uuid import uuid4
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, Text, Float, Integer, ForeignKey, JSON, DateTime, Index

def utcnow() -> datetime: return datetime.now(timezone.utc)
def new_id() -> str: return str(uuid4())

class Base(DeclarativeBase): pass

class IndustryInsight(Base):
    __tablename__ = "industry_insights"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    industry: Mapped[str] = mapped_column(String, unique=True)
    salary_ranges: Mapped[list] = mapped_column(JSON)
    growth_rate: Mapped[float] = mapped_column(Float)
    demand_level: Mapped[str] = mapped_column(String)
    top_skills: Mapped[list] = mapped_column(JSON)
    market_outlook: Mapped[str] = mapped_column(String)
    key_trends: Mapped[list] = mapped_column(JSON)
    recommended_skills: Mapped[list] = mapped_column(JSON)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    next_update: Mapped[datetime] = mapped_column(DateTime(timezone=True))

class User(Base):
    __tablename__ = "users"
    id: Mapped[str] = mapped_column(String, primary_key=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    name: Mapped[str | None] = mapped_column(String, nullable=True)
    industry: Mapped[str | None] = mapped_column(String, ForeignKey("industry_insights.industry"), nullable=True)
    experience: Mapped[int | None] = mapped_column(Integer, nullable=True)
    skills: Mapped[list] = mapped_column(JSON, default=list)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

class Assessment(Base):
    __tablename__ = "assessments"
    __table_args__ = (Index("ix_assessments_user_id", "user_id"),)
    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"))
    quiz_score: Mapped[float] = mapped_column(Float)
    questions: Mapped[list] = mapped_column(JSON)
    category: Mapped[str] = mapped_column(String)
    improvement_tip: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

class Resume(Base):
    __tablename__ = "resumes"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), unique=True)
    content: Mapped[str] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

class CoverLetter(Base):
    __tablename__ = "cover_letters"
    __table_args__ = (Index("ix_cover_letters_user_id", "user_id"),)
    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"))
    content: Mapped[str] = mapped_column(Text)
    job_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    company_name: Mapped[str] = mapped_column(String)
    job_title: Mapped[str] = mapped_column(String)
    status: Mapped[str] = mapped_column(String, default="completed")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
