"""
Shared fixtures.

The AI gateway is always built around a fake ``generate`` so no test can
reach the real Gemini API.
"""

import os

import pytest

# Set before main is imported so load_settings never picks up real values
os.environ["GOOGLE_AI_API_KEY"] = ""
os.environ["SUGGESTION_DEBOUNCE_SECONDS"] = "0.05"

from fastapi.testclient import TestClient

import main
from services.ai_gateway import AIGateway
from services.resume_store import InMemoryResumeStore


class FakeGenerate:
    """Stands in for generate(model, prompt, params); records every call."""

    def __init__(self, response="", error=None):
        self.response = response
        self.error = error
        self.calls = []

    def __call__(self, model, prompt, params):
        self.calls.append({"model": model, "prompt": prompt, "params": params})
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def call_count(self):
        return len(self.calls)


@pytest.fixture
def fake_generate():
    return FakeGenerate()


@pytest.fixture
def gateway(fake_generate):
    return AIGateway(fake_generate, model="test-model")


@pytest.fixture
def store():
    return InMemoryResumeStore()


@pytest.fixture
def client(gateway, store):
    """Test client with the gateway and store swapped for test doubles."""
    main.app.dependency_overrides[main.get_gateway] = lambda: gateway
    main.app.dependency_overrides[main.get_store] = lambda: store
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()


@pytest.fixture
def strong_resume():
    """A resume that passes every content check for a software engineer."""
    bullets = " ".join(
        f"Developed feature {i} using Python, React and Node.js behind a REST API, "
        f"tracked in Git during Agile sprints and improved latency by {i}%."
        for i in range(1, 16)
    )
    return "SOFTWARE ENGINEER\nJavaScript specialist.\n" + bullets


@pytest.fixture
def valid_analysis():
    """A well-formed analysis payload as the model is asked to return it."""
    return {
        "overallScore": 80,
        "strengths": ["Clear layout"],
        "improvements": [{
            "category": "content",
            "issue": "No metrics",
            "suggestion": "Add numbers",
            "priority": "high",
            "section": "experience",
        }],
        "missingKeywords": ["Docker", "Docker", "AWS"],
        "enhancementAreas": ["Leadership"],
        "contentSuggestions": [{
            "section": "summary",
            "currentText": "Engineer",
            "suggestedText": "Backend engineer with 5 years...",
            "reason": "More specific",
        }],
    }
