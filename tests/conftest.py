"""
Pytest configuration and fixtures for Global Polymath Quest tests.
"""
import pytest

from tests.helpers import make_question


@pytest.fixture
def question():
    return make_question()


@pytest.fixture
def valid_payload():
    """Sample Gemini JSON response"""
    return {
        "text": "Which Japanese physicist first predicted the meson?",
        "options": ["Hideki Yukawa", "Sin-Itiro Tomonaga", "Leo Esaki", "Hantaro Nagaoka"],
        "correctAnswerIndex": 0,
        "explanation": "Yukawa predicted the meson in 1935 and won the 1949 Nobel Prize.",
    }
