"""
Shared fixtures: in-memory SQLite per test, a TestClient wired to it through
dependency overrides, users with bearer tokens and a scriptable LLM provider.
"""
from typing import List, Optional, Union

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from prepcoach.main import app
from prepcoach.db.base import Base
from prepcoach.db import models  # noqa: F401  registers models on Base.metadata
from prepcoach.db.models.user import User
from prepcoach.core.auth_dependency import get_db
from prepcoach.core.rate_limit import rate_limit_store
from prepcoach.core.security import hash_password, create_access_token
from prepcoach.core.service_dependency import (
    get_cv_analysis_service,
    get_evaluation_service,
    get_interview_evaluation_service,
    get_question_service,
)
from prepcoach.llm.provider import LLMProvider, LLMResponse
from prepcoach.services.cv_analysis_service import CVAnalysisService
from prepcoach.services.evaluation_service import EvaluationService
from prepcoach.services.heuristic_scorer import HeuristicScorer
from prepcoach.services.interview_evaluation_service import InterviewEvaluationService
from prepcoach.services.question_service import QuestionGenerationService


class FakeLLMProvider(LLMProvider):
    """Returns canned responses in order; an Exception instance is raised instead."""

    def __init__(self, *responses: Union[str, Exception]):
        self.responses: List[Union[str, Exception]] = list(responses)
        self.calls: List[dict] = []

    def chat(self, messages, model, temperature=0.7, max_tokens=None, **kwargs) -> LLMResponse:
        self.calls.append({"messages": messages, "model": model, "temperature": temperature})
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return LLMResponse(content=response, model=model or "fake")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    """Database session fixture."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def scorer() -> HeuristicScorer:
    """Heuristic scorer without jitter so scores are deterministic."""
    return HeuristicScorer(jitter=0)


@pytest.fixture
def client(db, scorer):
    """TestClient bound to the test database, with no LLM configured."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_question_service] = lambda: QuestionGenerationService(provider=None)
    app.dependency_overrides[get_evaluation_service] = lambda: EvaluationService(fallback=scorer)
    app.dependency_overrides[get_cv_analysis_service] = lambda: CVAnalysisService(provider=None)
    app.dependency_overrides[get_interview_evaluation_service] = lambda: InterviewEvaluationService(fallback=scorer)
    rate_limit_store.clear()

    yield TestClient(app)

    app.dependency_overrides.clear()
    rate_limit_store.clear()


def _make_user(db, email: str, password: str = "testpass123", full_name: Optional[str] = None) -> User:
    user = User(email=email, password_hash=hash_password(password), full_name=full_name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def test_user(db) -> User:
    return _make_user(db, "candidate@example.com", full_name="Test Candidate")


@pytest.fixture
def other_user(db) -> User:
    return _make_user(db, "someone.else@example.com")


@pytest.fixture
def auth_headers(test_user) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': test_user.email})}"}


@pytest.fixture
def other_auth_headers(other_user) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': other_user.email})}"}


@pytest.fixture
def fake_llm():
    """Factory for scripted LLM providers: fake_llm('{"score": 7, ...}', TimeoutError())."""
    return FakeLLMProvider
