from datetime import timedelta
from fastapi import Depends
from sqlalchemy.orm import sessionmaker
from careercoach.core.config import settings
from careercoach.core.database import get_session_factory
from careercoach.services.generative import GenerativeClient, get_generative_client
from careercoach.services.insights import InsightStore
from careercoach.services.assessments import AssessmentPipeline

def get_client() -> GenerativeClient:
    return get_generative_client()

def get_insight_store(factory: sessionmaker = Depends(get_session_factory), client: GenerativeClient = Depends(get_client)) -> InsightStore:
    return InsightStore(factory, client, refresh_interval=timedelta(days=settings.INSIGHT_REFRESH_INTERVAL_DAYS),
                        max_create_attempts=settings.INSIGHT_CREATE_MAX_ATTEMPTS)

def get_pipeline(factory: sessionmaker = Depends(get_session_factory), client: GenerativeClient = Depends(get_client)) -> AssessmentPipeline:
    return AssessmentPipeline(factory, client)
