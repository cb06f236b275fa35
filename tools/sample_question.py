"""
tools/sample_question.py
===========================

Gemini に問題を 1 問だけ生成させ、JSON で標準出力に表示する開発用スクリプト。
プロンプトの出来や API キーの疎通確認に使う。

前提:
- 環境変数 GEMINI_API_KEY（または API_KEY）に Google Gemini API キーが設定されている
- pip で `google-generativeai` がインストールされていること

例:
    python tools/sample_question.py --subject Science --region Japan --difficulty Expert
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from polymath_quest.catalog import DEFAULT_LANGUAGE, DEFAULT_REGION, DEFAULT_SUBJECT
from polymath_quest.config import AppConfig, configure_logging
from polymath_quest.errors import QuestionProviderError
from polymath_quest.generator import GeminiQuestionProvider
from polymath_quest.models import DIFFICULTY_ORDER, Difficulty

logger = logging.getLogger("sample_question")


# -------------------------------------------------------------
#  引数
# -------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Global Polymath Quest 用 問題生成の動作確認スクリプト",
    )
    parser.add_argument("--subject", default=DEFAULT_SUBJECT, help="分野（デフォルト: History）")
    parser.add_argument(
        "--difficulty",
        default=Difficulty.BEGINNER.value,
        choices=[d.value for d in DIFFICULTY_ORDER],
        help="難易度（デフォルト: Beginner）",
    )
    parser.add_argument("--language", default=DEFAULT_LANGUAGE, help="出力言語（デフォルト: English）")
    parser.add_argument("--region", default=DEFAULT_REGION, help='地域（デフォルト: "Global"）')
    parser.add_argument("--model", default=None, help="使用する Gemini モデル名（任意）")
    return parser


# -------------------------------------------------------------
#  CLI エントリーポイント
# -------------------------------------------------------------
def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    cfg = AppConfig.from_toml()
    configure_logging(cfg.log_level)

    provider = GeminiQuestionProvider(
        cfg.gemini_api_key,
        model_name=args.model or cfg.gemini_model,
    )

    try:
        question = provider.generate_question(
            args.subject,
            Difficulty(args.difficulty),
            args.language,
            args.region,
        )
    except QuestionProviderError as e:
        logger.error("問題の生成に失敗しました: %s", e)
        return 1

    print(json.dumps(question.to_dict(), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
