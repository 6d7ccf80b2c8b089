"""
Quiz generation, grading and assessment persistence.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from careercoach.core.errors import GENERATION_ERRORS
from careercoach.models.orm import Assessment, utcnow
from careercoach.services.generative import GenerativeClient
from careercoach.services.prompts import build_improvement_tip_prompt, build_quiz_prompt
from careercoach.services.sanitizer import QUIZ_QUESTION_COUNT, QuizQuestion, sanitize_quiz, sanitize_text

logger = logging.getLogger(__name__)

TECHNICAL_CATEGORY = "Technical"

QuestionInput = Union[QuizQuestion, Dict[str, Any]]


def grade_answers(questions: Sequence[QuizQuestion], answers: Sequence[Optional[str]]) -> Tuple[List[Dict[str, Any]], float]:
    """Compare answers pairwise with the embedded correct answers.

    Returns the per-question result records and the percentage score.
    """
    if len(answers) != len(questions):
        raise ValueError(f"expected {len(questions)} answers, got {len(answers)}")
    results = []
    for q, given in zip(questions, answers):
        results.append({
            "question": q.question,
            "options": list(q.options),
            "answer": q.correct_answer,
            "explanation": q.explanation,
            "user_answer": given,
            "is_correct": given == q.correct_answer,
        })
    correct = sum(1 for r in results if r["is_correct"])
    score = 100.0 * correct / len(results) if results else 0.0
    return results, score


class AssessmentPipeline:
    """Generates quizzes, grades submissions and stores the attempts."""

    def __init__(self, session_factory: sessionmaker, client: GenerativeClient):
        self.session_factory = session_factory
        self.client = client

    def generate_quiz(self, industry: str, skills: Optional[Sequence[str]] = None) -> List[QuizQuestion]:
        raw = self.client.invoke(build_quiz_prompt(industry, skills, QUIZ_QUESTION_COUNT))
        return sanitize_quiz(raw).questions

    def improvement_tip(self, industry: Optional[str], wrong: List[Dict[str, Any]]) -> Optional[str]:
        """Best-effort tip for the wrong answers; any failure yields ``None``."""
        try:
            raw = self.client.invoke(build_improvement_tip_prompt(industry or "professional", wrong))
            return sanitize_text(raw)
        except GENERATION_ERRORS as e:
            logger.warning("Improvement tip skipped: %s (%s)", e.kind, e.detail or e.message)
        except Exception:
            logger.exception("Improvement tip skipped after unexpected error")
        return None

    def grade_and_save(
        self,
        user_id: str,
        questions: Sequence[QuestionInput],
        answers: Sequence[Optional[str]],
        industry: Optional[str] = None,
    ) -> Assessment:
        quiz = [q if isinstance(q, QuizQuestion) else QuizQuestion.model_validate(q) for q in questions]
        if len(quiz) != QUIZ_QUESTION_COUNT:
            raise ValueError(f"an assessment holds exactly {QUIZ_QUESTION_COUNT} questions, got {len(quiz)}")
        results, score = grade_answers(quiz, answers)

        wrong = [r for r in results if not r["is_correct"]]
        tip = self.improvement_tip(industry, wrong) if wrong else None

        with self.session_factory() as db, db.begin():
            row = Assessment(
                user_id=user_id,
                quiz_score=score,
                questions=results,
                category=TECHNICAL_CATEGORY,
                improvement_tip=tip,
                created_at=utcnow(),
            )
            db.add(row)
        logger.info("Saved assessment %s for %s: score %.1f, %d wrong", row.id, user_id, score, len(wrong))
        return row

    def list_assessments(self, user_id: str) -> List[Assessment]:
        with self.session_factory() as db:
            stmt = select(Assessment).where(Assessment.user_id == user_id).order_by(Assessment.created_at.asc())
            return list(db.scalars(stmt))
