"""
config.py
=========

アプリ全体で利用する設定値を一元管理する。
Gemini API キー、モデル名、初期選択値、ログレベルは
すべてこのクラスを通じて取得する。

本ファイルは app.py と tools/sample_question.py の共通設定でもある。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import toml

from .catalog import DEFAULT_LANGUAGE, DEFAULT_REGION, DEFAULT_SUBJECT

logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# 基本パス定義
# ------------------------------------------------------------

ROOT_DIR = Path(__file__).resolve().parent.parent
CONFIG_TOML_PATH = ROOT_DIR / "config.toml"

DEFAULT_MODEL = "gemini-3-flash-preview"
API_KEY_ENV_NAMES = ("GEMINI_API_KEY", "API_KEY")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


# ------------------------------------------------------------
# AppConfig
# ------------------------------------------------------------

@dataclass
class AppConfig:
    """
    アプリ設定クラス。

    - APIキーの読み取り（見つからなければ空文字。起動時には失敗させない）
    - Gemini モデル名
    - セットアップ画面の初期選択値
    - ログレベル
    """

    # ---------- API ----------
    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_MODEL

    # ---------- 初期選択 ----------
    app_name: str = "Global Polymath Quest"
    default_subject: str = DEFAULT_SUBJECT
    default_language: str = DEFAULT_LANGUAGE
    default_region: str = DEFAULT_REGION

    # ---------- ログ ----------
    log_level: str = "INFO"

    env_path: Path = ROOT_DIR / ".env"

    # ============================================================
    # 初期化処理
    # ============================================================

    def __post_init__(self):
        if not self.gemini_api_key:
            self.gemini_api_key = self._load_api_key()

    @classmethod
    def from_toml(cls, path: Optional[Path] = None, **overrides: Any) -> "AppConfig":
        """
        config.toml を反映した AppConfig を作る。
        ファイルが無い・壊れている場合はデフォルト値のまま。
        """
        data = read_toml(path or CONFIG_TOML_PATH)

        app = data.get("app") if isinstance(data.get("app"), dict) else {}
        gem = data.get("gemini") if isinstance(data.get("gemini"), dict) else {}
        log = data.get("logging") if isinstance(data.get("logging"), dict) else {}

        kwargs: Dict[str, Any] = {}
        for key, section, name in (
            ("app_name", app, "name"),
            ("default_subject", app, "default_subject"),
            ("default_language", app, "default_language"),
            ("default_region", app, "default_region"),
            ("gemini_model", gem, "model"),
            ("log_level", log, "level"),
        ):
            value = section.get(name)
            if isinstance(value, str) and value:
                kwargs[key] = value

        kwargs.update(overrides)
        return cls(**kwargs)

    # ============================================================
    # 内部関数
    # ============================================================

    def _load_api_key(self) -> str:
        """
        GEMINI_API_KEY → API_KEY → .env の GEMINI_API_KEY= 行 の順で探す。
        """
        for name in API_KEY_ENV_NAMES:
            key = os.environ.get(name)
            if key:
                return key

        # ローカル開発などで .env を使いたい場合にも対応
        if self.env_path.exists():
            for line in self.env_path.read_text(encoding="utf-8").splitlines():
                if line.startswith("GEMINI_API_KEY="):
                    return line.split("=", 1)[1].strip()

        logger.warning("Gemini API key not found; question requests will fail")
        return ""


# ============================================================
# TOML 読み取りユーティリティ
# ============================================================

def read_toml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        return toml.load(path)
    except (toml.TomlDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return {}


def configure_logging(level: str = "INFO") -> None:
    """
    ルートロガーを設定する。ハンドラは basicConfig で 1 度だけ付け、
    レベルは毎回反映する（未知のレベル名は INFO 扱い）。
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    logging.getLogger().setLevel(numeric)
