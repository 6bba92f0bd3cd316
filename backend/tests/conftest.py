"""Pytest configuration and fixtures"""

import json
import os
from decimal import Decimal

# Set test environment variables BEFORE any imports
# This must happen at module load time, not in a fixture
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["DELIVERY_BACKEND"] = "simulated"
os.environ["FILING_BACKEND"] = "simulated"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from teisesdraugas.api.deps import get_model_client, get_storage
from teisesdraugas.core.security import create_access_token
from teisesdraugas.db.database import Base, get_db
from teisesdraugas.db.models import CaseCategory, CaseType, OpponentType, User, UserRole
from teisesdraugas.db.schemas import CaseCreate
from teisesdraugas.main import app
from teisesdraugas.services import case_service
from teisesdraugas.services.ai_client import ModelCallError, ModelResponse
from teisesdraugas.services.storage_service import LocalStorage

MODEL_ID = "test-model"


class FakeModelClient:
    """Stands in for BedrockModelClient; returns queued replies in order"""

    def __init__(self):
        self.model_id = MODEL_ID
        self.replies = []
        self.prompts = []

    def reply_with(self, text: str):
        self.replies.append(text)

    def fail_with(self, message: str):
        self.replies.append(ModelCallError(message, MODEL_ID))

    def complete(self, prompt: str, max_tokens: int) -> ModelResponse:
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return ModelResponse(text=reply, model_id=MODEL_ID, input_tokens=120, output_tokens=80)


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
def db_session(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def user(db_session):
    user = User(
        email="jonas@example.lt",
        name="Jonas Jonaitis",
        phone="+37060000000",
        personal_code="38703181745",
        role=UserRole.USER,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def other_user(db_session):
    user = User(email="ona@example.lt", name="Ona Onaitė", role=UserRole.USER)
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def lawyer(db_session):
    user = User(email="advokatas@example.lt", name="Petras Petraitis", role=UserRole.LAWYER)
    db_session.add(user)
    db_session.commit()
    return user


def auth_headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def auth_headers(user):
    return auth_headers_for(user)


@pytest.fixture
def other_headers(other_user):
    return auth_headers_for(other_user)


@pytest.fixture
def lawyer_headers(lawyer):
    return auth_headers_for(lawyer)


@pytest.fixture
def case(db_session, user):
    return case_service.create_case(
        db_session,
        user,
        CaseCreate(
            title="Negrąžintas nuomos užstatas",
            description="Nuomotojas negrąžino 800 EUR užstato po nuomos sutarties pabaigos.",
            case_type=CaseType.RENTAL_DEPOSIT,
            category=CaseCategory.LANDLORD_TENANT,
            claim_amount=Decimal("800.00"),
            opponent_name="UAB Nuomos Namai",
            opponent_address="Gedimino pr. 1, Vilnius",
            opponent_type=OpponentType.COMPANY,
        ),
    )


@pytest.fixture
def model_client():
    return FakeModelClient()


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path))


@pytest.fixture
def client(db_session, model_client, storage):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_model_client] = lambda: model_client
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def analysis_json():
    return json.dumps({
        "winProbability": 0.72,
        "legalBasis": [{
            "articles": ["6.477", "6.493"],
            "explanation": "Nuomotojas privalo grąžinti užstatą pasibaigus nuomai.",
            "strength": "strong",
        }],
        "riskFactors": [{
            "factor": "Nėra perdavimo akto",
            "severity": "medium",
            "mitigation": "Pateikite nuotraukas",
        }],
        "recommendedAction": "Siųskite pretenziją",
        "estimatedTimeline": "1-2 mėnesiai",
        "nextSteps": ["Surinkite įrodymus", "Siųskite pretenziją"],
        "summary": "Stipri byla dėl užstato grąžinimo.",
    }, ensure_ascii=False)


@pytest.fixture
def letter_json():
    return json.dumps({
        "content": "Gerb. UAB Nuomos Namai,\n\nReikalaujame grąžinti 800 EUR užstatą.",
        "legalBasis": ["CK 6.477", "CK 6.493"],
        "summary": "Reikalavimas grąžinti užstatą",
    }, ensure_ascii=False)


@pytest.fixture
def advice_json():
    return json.dumps({
        "analysis": "Oponentas pripažįsta dalį skolos.",
        "suggestedResponse": "Siūlome sumokėti 700 EUR per 7 dienas.",
        "recommendedOffer": 700,
        "strategy": "Laikykitės tvirtos pozicijos.",
    }, ensure_ascii=False)
