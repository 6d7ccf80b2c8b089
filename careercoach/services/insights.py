"""
Industry insight store: single-flight lazy creation and weekly in-place refresh.
"""
import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from careercoach.core.errors import ConflictRetryExhausted, ContentSyncError, NotFound
from careercoach.models.orm import IndustryInsight, utcnow
from careercoach.services.generative import GenerativeClient
from careercoach.services.prompts import build_insight_prompt
from careercoach.services.sanitizer import IndustryInsightSchema, sanitize_insight

logger = logging.getLogger(__name__)


PG_UNIQUE_VIOLATION = "23505"


def _is_duplicate_key(err: IntegrityError) -> bool:
    """True when ``err`` is a unique-constraint violation (postgres or sqlite)."""
    orig = err.orig
    if getattr(orig, "pgcode", None) == PG_UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(orig)


@dataclass
class RefreshOutcome:
    """Result of refreshing one industry key."""
    industry: str
    ok: bool
    failure: Optional[str] = None
    detail: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


class InsightStore:
    """Owns IndustryInsight rows.

    ``get_or_create`` never refreshes an existing row; staleness is resolved by
    ``refresh_all`` only. Creation relies on the unique ``industry`` column:
    a caller that loses the insert race re-reads and returns the winner's row.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        client: GenerativeClient,
        refresh_interval: timedelta = timedelta(days=7),
        max_create_attempts: int = 3,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.session_factory = session_factory
        self.client = client
        self.refresh_interval = refresh_interval
        self.max_create_attempts = max(1, max_create_attempts)
        self.clock = clock

    def get(self, industry: str) -> Optional[IndustryInsight]:
        with self.session_factory() as db:
            return db.scalar(select(IndustryInsight).where(IndustryInsight.industry == industry))

    def get_or_create(self, industry: str) -> IndustryInsight:
        """Return the insight for ``industry``, generating it on first request."""
        if not industry or not industry.strip():
            raise ValueError("industry key must be non-empty")
        existing = self.get(industry)
        if existing is not None:
            return existing
        record = sanitize_insight(self.client.invoke(build_insight_prompt(industry)))
        return self.find_or_create(industry, record)

    def find_or_create(self, industry: str, record: IndustryInsightSchema) -> IndustryInsight:
        """Atomic find-or-create of the row for ``industry`` from a validated record."""
        for attempt in range(1, self.max_create_attempts + 1):
            try:
                with self.session_factory() as db, db.begin():
                    row = IndustryInsight(industry=industry, **self._fields(record))
                    db.add(row)
                logger.info("Created industry insight for %s", industry)
                return row
            except IntegrityError as e:
                if not _is_duplicate_key(e):
                    raise
                logger.info("Insight for %s created concurrently (attempt %d/%d)", industry, attempt, self.max_create_attempts)
            existing = self.get(industry)
            if existing is not None:
                return existing
        raise ConflictRetryExhausted(f"could not settle insight creation for {industry!r}")

    def industries(self) -> List[str]:
        with self.session_factory() as db:
            return list(db.scalars(select(IndustryInsight.industry).order_by(IndustryInsight.industry)))

    def refresh_all(self) -> List[RefreshOutcome]:
        """Regenerate every existing insight in place, one key at a time.

        A failing key is logged and recorded in the returned outcomes; it never
        stops the remaining keys and its stored row is left untouched.
        """
        keys = self.industries()
        outcomes = [self.refresh_one(k) for k in keys]
        failed = [o for o in outcomes if not o.ok]
        logger.info("Insight refresh finished: %d keys, %d refreshed, %d failed", len(outcomes), len(outcomes) - len(failed), len(failed))
        return outcomes

    def refresh_one(self, industry: str) -> RefreshOutcome:
        try:
            record = sanitize_insight(self.client.invoke(build_insight_prompt(industry)))
            self._update(industry, record)
        except ContentSyncError as e:
            logger.warning("Refresh of %s failed: %s (%s)", industry, e.kind, e.detail or e.message)
            return RefreshOutcome(industry, False, e.kind, e.detail or e.message)
        except SQLAlchemyError as e:
            logger.exception("Refresh of %s could not be persisted", industry)
            return RefreshOutcome(industry, False, "persistence_error", str(e))
        except Exception as e:
            logger.exception("Refresh of %s failed unexpectedly", industry)
            return RefreshOutcome(industry, False, "unexpected_error", repr(e))
        return RefreshOutcome(industry, True)

    def _update(self, industry: str, record: IndustryInsightSchema) -> None:
        with self.session_factory() as db, db.begin():
            res = db.execute(
                update(IndustryInsight).where(IndustryInsight.industry == industry).values(**self._fields(record))
            )
            if res.rowcount == 0:
                raise NotFound(f"industry insight {industry!r} no longer exists")

    def _fields(self, record: IndustryInsightSchema) -> dict:
        now = self.clock()
        data = record.model_dump()
        return {
            "salary_ranges": data["salary_ranges"],
            "growth_rate": data["growth_rate"],
            "demand_level": data["demand_level"],
            "top_skills": data["top_skills"],
            "market_outlook": data["market_outlook"],
            "key_trends": data["key_trends"],
            "recommended_skills": data["recommended_skills"],
            "last_updated": now,
            "next_update": now + self.refresh_interval,
        }
