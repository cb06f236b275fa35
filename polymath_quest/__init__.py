"""
polymath_quest パッケージ
======================

このパッケージは、Global Polymath Quest（AI 生成の地域別トリビア）の
内部ロジックを提供する。

主な役割:
- 設定管理（config）
- 分野・言語・地域カタログ（catalog）
- データモデル（models）
- Gemini による問題生成（generator）
- 画面遷移・難易度・スコアの状態管理（session）
- UI コンポーネント（ui）

app.py は Streamlit UI のみを担当し、内部ロジックはすべて本パッケージから呼ぶ。
"""

from .config import AppConfig, configure_logging
from .errors import MalformedResponseError, ProviderRequestError, QuestionProviderError
from .generator import GeminiQuestionProvider
from .models import (
    DIFFICULTY_ORDER,
    Difficulty,
    Feedback,
    GameState,
    Question,
    SessionState,
    UserStats,
    View,
)
from .session import SessionController, difficulty_for

__all__ = [
    "AppConfig",
    "configure_logging",
    "QuestionProviderError",
    "ProviderRequestError",
    "MalformedResponseError",
    "GeminiQuestionProvider",
    "DIFFICULTY_ORDER",
    "Difficulty",
    "Feedback",
    "GameState",
    "Question",
    "SessionState",
    "UserStats",
    "View",
    "SessionController",
    "difficulty_for",
]
