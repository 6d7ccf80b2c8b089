"""
Resume and cover-letter drafting.
"""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from careercoach.core.errors import NotFound
from careercoach.models.orm import CoverLetter, Resume, User
from careercoach.services.generative import GenerativeClient
from careercoach.services.prompts import build_cover_letter_prompt, build_resume_section_prompt
from careercoach.services.sanitizer import sanitize_text

logger = logging.getLogger(__name__)


def get_resume(db: Session, user_id: str) -> Optional[Resume]:
    return db.scalar(select(Resume).where(Resume.user_id == user_id))


def save_resume(db: Session, user_id: str, content: str) -> Resume:
    resume = get_resume(db, user_id)
    if resume is None:
        resume = Resume(user_id=user_id, content=content)
        db.add(resume)
    else:
        resume.content = content
    db.commit()
    return resume


def improve_resume_section(client: GenerativeClient, user: User, section_type: str, current: str) -> str:
    """Return an AI rewrite of one resume section; nothing is stored."""
    raw = client.invoke(build_resume_section_prompt(section_type, current, user.industry))
    return sanitize_text(raw)


def generate_cover_letter(
    db: Session,
    client: GenerativeClient,
    user: User,
    job_title: str,
    company_name: str,
    job_description: str = "",
) -> CoverLetter:
    prompt = build_cover_letter_prompt(
        job_title=job_title,
        company_name=company_name,
        job_description=job_description,
        industry=user.industry,
        experience=user.experience,
        skills=user.skills,
        bio=user.bio,
    )
    content = sanitize_text(client.invoke(prompt))
    letter = CoverLetter(
        user_id=user.id,
        content=content,
        job_description=job_description,
        company_name=company_name,
        job_title=job_title,
        status="completed",
    )
    db.add(letter)
    db.commit()
    logger.info("Generated cover letter %s for %s", letter.id, user.id)
    return letter


def list_cover_letters(db: Session, user_id: str) -> List[CoverLetter]:
    stmt = select(CoverLetter).where(CoverLetter.user_id == user_id).order_by(CoverLetter.created_at.desc())
    return list(db.scalars(stmt))


def get_cover_letter(db: Session, user_id: str, letter_id: str) -> CoverLetter:
    letter = db.get(CoverLetter, letter_id)
    if letter is None or letter.user_id != user_id:
        raise NotFound(f"cover letter {letter_id!r} not found")
    return letter


def delete_cover_letter(db: Session, user_id: str, letter_id: str) -> None:
    db.delete(get_cover_letter(db, user_id, letter_id))
    db.commit()
