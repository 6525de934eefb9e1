"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- A fresh in-memory store per test
- A fake language model standing in for the hosted API
- FastAPI test client wired to both
"""

import json
import re

import pytest
from fastapi.testclient import TestClient

from recruiter import llm_service
from recruiter.main import app
from recruiter.prompts import CATEGORY_SYSTEM, RANKING_SYSTEM, RECALIBRATION_SYSTEM
from recruiter.store import RecruitingStore, get_store

SCORE_MARKER = re.compile(r"SCORE=(\d+)")


def category_payload() -> dict:
    return {
        "mainCategories": [
            {"name": "Technical Skills", "description": "Depth in the stack", "weight": 40},
            {"name": "Experience", "description": "Relevant years", "weight": 30},
            {"name": "Communication", "description": "Clarity", "weight": 30},
        ],
        "subCategories": [
            {"name": "Python", "relatedToMain": "Technical Skills", "description": "Python depth"},
        ],
        "evaluationGuidance": "Above 70 is a strong fit",
    }


def ranking_payload(score: int = 75) -> dict:
    return {
        "overallScore": score,
        "mainCategoryScores": {"Technical Skills": score, "Experience": 60, "Communication": 70},
        "subCategoryScores": {"Python": score},
        "summary": f"Candidate scored {score}.",
        "redFlags": ["Short tenure"],
        "interviewQuestions": [f"Question {i}?" for i in range(1, 11)],
        "aiFeedback": "Solid but unremarkable.",
    }


def recalibration_payload(score: int = 80, adjustment: int = 5) -> dict:
    return {
        "recalibratedScore": score,
        "scoreAdjustment": adjustment,
        "adjustmentReason": "Strong interview",
        "overallAssessment": "Better than the CV suggests.",
    }


def cv_text(score: int, name: str = "Jane Doe") -> str:
    """A CV long enough to be ranked; the fake model reads SCORE=NN from it."""
    return (
        f"{name}\nSenior Python developer with eight years of FastAPI and "
        f"PostgreSQL experience.\nSCORE={score}\n"
    )


class FakeLLM:
    """Replaces ``llm_service.chat``; answers based on the system prompt."""

    def __init__(self):
        self.calls: list[tuple[list[dict], float]] = []
        self.recalibrations: list[dict] = []
        self.fail_on: set[str] = set()
        self.raw_ranking: str | None = None

    def __call__(self, messages, temperature=0.7):
        self.calls.append((messages, temperature))
        system, user = messages[0]["content"], messages[-1]["content"]

        if system == CATEGORY_SYSTEM:
            return json.dumps(category_payload())

        if system == RANKING_SYSTEM:
            for marker in self.fail_on:
                if marker in user:
                    raise llm_service.LLMServiceError("Failed to call language model API")
            if self.raw_ranking is not None:
                return self.raw_ranking
            match = SCORE_MARKER.search(user)
            score = int(match.group(1)) if match else 50
            return "```json\n" + json.dumps(ranking_payload(score)) + "\n```"

        if system == RECALIBRATION_SYSTEM:
            payload = self.recalibrations.pop(0) if self.recalibrations else recalibration_payload()
            return json.dumps(payload)

        raise AssertionError(f"unexpected prompt: {system}")


@pytest.fixture
def store():
    return RecruitingStore()


@pytest.fixture
def fake_llm(monkeypatch):
    fake = FakeLLM()
    monkeypatch.setattr(llm_service, "chat", fake)
    return fake


@pytest.fixture
def client(store, fake_llm):
    """
    FastAPI test client with the store dependency overridden.
    """
    app.dependency_overrides[get_store] = lambda: store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_role_data():
    return {
        "title": "Senior Python Developer",
        "description": "Build and run FastAPI services on PostgreSQL.",
        "requiredSkills": "Python, FastAPI, SQL",
    }


@pytest.fixture
def saved_role(client, sample_role_data):
    response = client.post("/api/save-role", json=sample_role_data)
    assert response.status_code == 200
    return response.json()["role"]
