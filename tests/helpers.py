"""
Shared test doubles for Global Polymath Quest tests.
"""
from polymath_quest.models import Difficulty, Question


class FakeProvider:
    """Records every request and answers from a queue of questions / exceptions."""

    def __init__(self, results=None):
        self.results = list(results or [])
        self.calls = []

    def generate_question(self, subject, difficulty, language, region="Global"):
        self.calls.append(
            {"subject": subject, "difficulty": difficulty, "language": language, "region": region}
        )
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def make_question(qid="q1", correct=1, difficulty=Difficulty.BEGINNER, subject="History"):
    return Question(
        id=qid,
        text="Which river flows through Cairo?",
        options=("Congo", "Nile", "Niger", "Zambezi"),
        correct_answer_index=correct,
        explanation="Cairo sits on the banks of the Nile.",
        difficulty=difficulty,
        subject=subject,
        language="English",
    )
