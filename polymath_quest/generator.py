"""
generator.py
======================

Google Gemini に四択問題を 1 問生成させるアダプタ。

要件:
- (分野, 難易度, 言語, 地域) からプロンプトを組み立てる
- JSON 出力 + レスポンススキーマを指定して 1 回だけ呼び出す
- 応答 JSON を検証して Question に変換する
- 失敗時は QuestionProviderError 系の例外を送出する（リトライ・キャッシュなし）
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Dict, Optional

import google.generativeai as genai
from google.api_core.exceptions import GoogleAPIError, ResourceExhausted

from .catalog import GLOBAL_REGION
from .config import DEFAULT_MODEL
from .errors import MalformedResponseError, ProviderRequestError
from .models import Difficulty, Question

logger = logging.getLogger(__name__)

OPTION_COUNT = 4

# Gemini の response_schema（OpenAPI サブセット）
QUESTION_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "text": {"type": "STRING", "description": "The quiz question text."},
        "options": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "min_items": OPTION_COUNT,
            "max_items": OPTION_COUNT,
            "description": "Four possible answers.",
        },
        "correctAnswerIndex": {
            "type": "INTEGER",
            "description": "Index of the correct answer (0-3).",
        },
        "explanation": {
            "type": "STRING",
            "description": "A brief, interesting explanation of the correct answer.",
        },
    },
    "required": ["text", "options", "correctAnswerIndex", "explanation"],
}


# ------------------------------------------------------------
# プロンプト
# ------------------------------------------------------------
def build_prompt(subject: str, difficulty: Difficulty, language: str, region: str) -> str:
    """
    出題用プロンプト。region が "Global" 以外ならその地域に深く結びついた
    問題を求める一文を加える。
    """
    if region == GLOBAL_REGION:
        location_context = "global context"
    else:
        location_context = (
            f"the specific region of {region}, focusing on its local nuances, "
            "regional history, indigenous cultures, and specific geographical traits"
        )

    return f"""Generate a single, unique, and highly challenging multiple-choice question for a "Global Polymath Quest" app.

CONTEXT:
- Subject: {subject}
- Regional Focus: {location_context}
- Difficulty: {difficulty.value} (Scale: Beginner, Intermediate, Advanced, Expert, Master)
- Output Language: {language} (Question and all options MUST be in this language)

REQUIREMENTS:
- If a specific region ({region}) is selected, the question MUST deeply relate to that region's unique contribution to the subject.
- The question should feel like cultural or regional trivia mixed with academic depth.
- Avoid generic questions. Be specific.
- Provide exactly {OPTION_COUNT} plausible options.
- Provide a detailed, interesting, and educational explanation for the correct answer.

Ensure the tone is professional yet engaging."""


def new_question_id() -> str:
    return uuid.uuid4().hex[:9]


# ------------------------------------------------------------
# 応答 → Question
# ------------------------------------------------------------
def parse_question_payload(
    text: str,
    *,
    subject: str,
    difficulty: Difficulty,
    language: str,
    question_id: Optional[str] = None,
) -> Question:
    """
    モデルの JSON 応答を検証して Question を作る。
    スキーマ宣言だけに頼らず、選択肢数と正解 index の範囲もここで確認する。
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"response is not valid JSON: {e}", raw_text=text) from e

    if not isinstance(data, dict):
        raise MalformedResponseError("response JSON is not an object", raw_text=text)

    missing = [k for k in QUESTION_SCHEMA["required"] if k not in data]
    if missing:
        raise MalformedResponseError(
            f"response lacks required field(s): {', '.join(missing)}", raw_text=text
        )

    q_text = data["text"]
    options = data["options"]
    index = data["correctAnswerIndex"]
    explanation = data["explanation"]

    if not isinstance(q_text, str) or not isinstance(explanation, str):
        raise MalformedResponseError("text and explanation must be strings", raw_text=text)
    if not isinstance(options, list) or not all(isinstance(o, str) for o in options):
        raise MalformedResponseError("options must be a list of strings", raw_text=text)
    if len(options) != OPTION_COUNT:
        raise MalformedResponseError(
            f"expected {OPTION_COUNT} options, got {len(options)}", raw_text=text
        )
    # bool は int のサブクラスなので除外
    if isinstance(index, bool) or not isinstance(index, int):
        raise MalformedResponseError("correctAnswerIndex must be an integer", raw_text=text)
    if not 0 <= index < OPTION_COUNT:
        raise MalformedResponseError(
            f"correctAnswerIndex {index} out of range 0-{OPTION_COUNT - 1}", raw_text=text
        )

    return Question(
        id=question_id or new_question_id(),
        text=q_text.strip(),
        options=tuple(options),
        correct_answer_index=index,
        explanation=explanation.strip(),
        difficulty=difficulty,
        subject=subject,
        language=language,
    )


# ------------------------------------------------------------
# GeminiQuestionProvider
# ------------------------------------------------------------
class GeminiQuestionProvider:
    """
    Gemini を使った問題プロバイダ。

    主な機能:
    - generate_question(): 1 問生成して Question を返す
    """

    def __init__(self, api_key: str, model_name: str = DEFAULT_MODEL):
        self.api_key = api_key
        self.model_name = model_name
        genai.configure(api_key=api_key)

    def _generation_config(self) -> genai.GenerationConfig:
        return genai.GenerationConfig(
            response_mime_type="application/json",
            response_schema=QUESTION_SCHEMA,
        )

    def generate_question(
        self,
        subject: str,
        difficulty: Difficulty,
        language: str,
        region: str = GLOBAL_REGION,
    ) -> Question:
        prompt = build_prompt(subject, difficulty, language, region)
        logger.info(
            "Requesting question: subject=%s difficulty=%s language=%s region=%s",
            subject, difficulty.value, language, region,
        )

        try:
            model = genai.GenerativeModel(
                self.model_name,
                generation_config=self._generation_config(),
            )
            response = model.generate_content(prompt)
            text = response.text
        except ResourceExhausted as e:
            raise ProviderRequestError(f"Gemini quota exhausted (429): {e}") from e
        except GoogleAPIError as e:
            raise ProviderRequestError(f"Gemini request failed: {e}") from e
        except ValueError as e:
            # response.text は候補が無い・ブロックされた場合に ValueError を送出する
            raise ProviderRequestError(f"Gemini returned no usable text: {e}") from e

        question = parse_question_payload(
            text,
            subject=subject,
            difficulty=difficulty,
            language=language,
        )
        logger.debug("Received question %s", question.id)
        return question
