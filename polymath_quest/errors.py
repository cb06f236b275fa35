"""
errors.py
======================

問題生成まわりの例外階層。

QuestionProviderError
├── ProviderRequestError    : リモート呼び出し自体の失敗
└── MalformedResponseError  : 応答は返ったが JSON / スキーマとして不正
"""

from __future__ import annotations


class QuestionProviderError(Exception):
    """問題生成に失敗したことを表す基底例外"""


class ProviderRequestError(QuestionProviderError):
    """ネットワーク・API エラー、空応答やブロックされた応答"""


class MalformedResponseError(QuestionProviderError):
    """JSON でない、必須フィールド欠落、選択肢数や正解 index が範囲外"""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text
