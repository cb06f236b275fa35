"""
models.py
======================

クイズのデータモデル定義。

- Difficulty: 5 段階の難易度（順序付き）
- Question: 生成された 1 問（不変）
- UserStats: プロセス存続中のみ保持されるユーザー統計
- GameState: 1 セッション分の進行状態
- Feedback: 直前の解答に対する正誤・解説表示
- SessionState: 上記をまとめた状態オブジェクト（遷移関数の入出力）

すべて frozen dataclass とし、状態更新は dataclasses.replace で新しい
インスタンスを作って行う。永続化はしない。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .catalog import (
    DEFAULT_LANGUAGE,
    DEFAULT_REGION,
    DEFAULT_SUBJECT,
    default_unlocked_subjects,
)


# ----------------------------------------------------------------------
#  難易度
# ----------------------------------------------------------------------
class Difficulty(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"
    MASTER = "Master"

    @property
    def tier(self) -> int:
        """DIFFICULTY_ORDER 上の位置 (0〜4)"""
        return DIFFICULTY_ORDER.index(self)


DIFFICULTY_ORDER: List[Difficulty] = [
    Difficulty.BEGINNER,
    Difficulty.INTERMEDIATE,
    Difficulty.ADVANCED,
    Difficulty.EXPERT,
    Difficulty.MASTER,
]


class View(str, Enum):
    LANDING = "landing"
    SETUP = "setup"
    QUIZ = "quiz"


# ----------------------------------------------------------------------
#  Question
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class Question:
    """
    生成された四択問題 1 問。

    id はクライアント側で振る短いランダム文字列で、
    グローバルな一意性は保証しない（衝突は無視できる前提）。
    """

    id: str
    text: str
    options: Tuple[str, ...]
    correct_answer_index: int
    explanation: str
    difficulty: Difficulty
    subject: str
    language: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Question":
        return cls(
            id=str(data["id"]),
            text=data["text"],
            options=tuple(data["options"]),
            correct_answer_index=int(data["correctAnswerIndex"]),
            explanation=data["explanation"],
            difficulty=Difficulty(data["difficulty"]),
            subject=data["subject"],
            language=data["language"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "options": list(self.options),
            "correctAnswerIndex": self.correct_answer_index,
            "explanation": self.explanation,
            "difficulty": self.difficulty.value,
            "subject": self.subject,
            "language": self.language,
        }

    def is_correct(self, index: int) -> bool:
        return index == self.correct_answer_index


# ----------------------------------------------------------------------
#  UserStats / GameState / Feedback
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class UserStats:
    total_score: int = 0
    level: int = 1
    xp: int = 0
    # 連続正解数（不正解で 0 に戻る）
    streak: int = 0
    unlocked_subjects: Tuple[str, ...] = field(
        default_factory=lambda: tuple(default_unlocked_subjects())
    )


@dataclass(frozen=True)
class GameState:
    current_question: Optional[Question] = None
    score: int = 0
    questions_answered: int = 0
    is_loading: bool = False
    selected_subject: str = DEFAULT_SUBJECT
    selected_language: str = DEFAULT_LANGUAGE
    current_difficulty: Difficulty = Difficulty.BEGINNER
    # 宣言のみ。現在の遷移ロジックでは True にならない
    is_game_over: bool = False


@dataclass(frozen=True)
class Feedback:
    is_correct: bool
    show: bool
    explanation: str


# ----------------------------------------------------------------------
#  SessionState
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class SessionState:
    """
    画面・ユーザー統計・ゲーム進行・フィードバックをまとめた状態。

    request_seq は問題リクエストの世代番号。新しいリクエストを出すたびに
    1 つ進み、古い世代の応答は適用されない。
    """

    view: View = View.LANDING
    stats: UserStats = field(default_factory=UserStats)
    game: GameState = field(default_factory=GameState)
    feedback: Optional[Feedback] = None
    selected_region: str = DEFAULT_REGION
    request_seq: int = 0

    @property
    def feedback_showing(self) -> bool:
        return self.feedback is not None and self.feedback.show
