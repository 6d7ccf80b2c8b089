"""
Validation boundary between the generative service and persistence.

Model output is treated as untrusted text: code fences are stripped, the rest is
parsed as JSON and validated against a pydantic schema in strict mode. Nothing
produced by the model is persisted without going through this module.
"""
import json
import logging
import re
from typing import List, Literal, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from careercoach.core.errors import MalformedOutputFailure, SchemaValidationFailure

logger = logging.getLogger(__name__)

QUIZ_QUESTION_COUNT = 10
OPTIONS_PER_QUESTION = 4

DemandLevel = Literal["High", "Medium", "Low"]
MarketOutlook = Literal["Positive", "Neutral", "Negative"]

_FENCE_OPEN = re.compile(r"^```[ \t]*(?:json|[\w+-]+(?=[ \t]*\r?\n))?[ \t]*(?:\r?\n)?", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"(?:\r?\n)?[ \t]*```$")


class ContentSchema(BaseModel):
    """Base for generated-content schemas: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class SalaryRange(ContentSchema):
    role: str
    min: float
    max: float
    median: float
    location: str


class IndustryInsightSchema(ContentSchema):
    salary_ranges: List[SalaryRange]
    growth_rate: float
    demand_level: DemandLevel
    top_skills: List[str]
    market_outlook: MarketOutlook
    key_trends: List[str]
    recommended_skills: List[str]

    @field_validator("demand_level", "market_outlook", mode="before")
    @classmethod
    def _title_case(cls, v):
        # models alternate between "HIGH" and "High"
        return v.strip().title() if isinstance(v, str) else v


class QuizQuestion(ContentSchema):
    question: str
    options: List[str] = Field(min_length=OPTIONS_PER_QUESTION, max_length=OPTIONS_PER_QUESTION)
    correct_answer: str
    explanation: str

    @field_validator("correct_answer")
    @classmethod
    def _answer_is_an_option(cls, v: str, info: ValidationInfo) -> str:
        options = info.data.get("options")
        if options is not None and v not in options:
            raise ValueError("correctAnswer must be one of the options")
        return v


class GeneratedQuiz(ContentSchema):
    questions: List[QuizQuestion] = Field(min_length=QUIZ_QUESTION_COUNT, max_length=QUIZ_QUESTION_COUNT)


S = TypeVar("S", bound=BaseModel)


def strip_fences(raw: str) -> str:
    """Remove a surrounding markdown code fence (optionally tagged ``json``) and whitespace."""
    text = (raw or "").strip()
    text = _FENCE_OPEN.sub("", text, count=1)
    text = _FENCE_CLOSE.sub("", text, count=1)
    return text.strip()


def _field_path(loc) -> str:
    return ".".join(str(p) for p in loc) or "<root>"


def sanitize(raw: str, schema: Type[S]) -> S:
    """Turn raw model text into a validated ``schema`` instance.

    Raises:
        MalformedOutputFailure: the text is not JSON once fences are removed.
        SchemaValidationFailure: the JSON does not match ``schema``; ``field``
            names the first violation (e.g. ``demandLevel`` or ``salaryRanges.2.median``).
    """
    text = strip_fences(raw)
    try:
        json.loads(text)
    except ValueError as e:
        logger.warning("Malformed %s output: %s", schema.__name__, e)
        raise MalformedOutputFailure("model output is not valid JSON", detail=str(e))
    try:
        return schema.model_validate_json(text, strict=True)
    except ValidationError as e:
        first = e.errors()[0]
        field = _field_path(first["loc"])
        logger.warning("Schema violation in %s output at %s: %s", schema.__name__, field, first["msg"])
        raise SchemaValidationFailure(field, first["msg"])


def sanitize_text(raw: str) -> str:
    """Fence-strip free-form model text; empty output counts as malformed."""
    text = strip_fences(raw)
    if not text:
        raise MalformedOutputFailure("model returned empty text")
    return text


def sanitize_insight(raw: str) -> IndustryInsightSchema:
    return sanitize(raw, IndustryInsightSchema)


def sanitize_quiz(raw: str) -> GeneratedQuiz:
    return sanitize(raw, GeneratedQuiz)
