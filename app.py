"""
app.py
======================

Global Polymath Quest（Streamlit）エントリーポイント。

特徴:
- ランディング → セットアップ → クイズ の 3 画面構成
- 地域・分野・言語を選んで Gemini に問題を生成させる
- 3 問ごとに難易度が上がり、正解で スコア +10 / XP +25

前提:
- 環境変数 GEMINI_API_KEY（または API_KEY）が設定されていればオンライン出題が有効
- config.toml は任意（無ければデフォルト値）
"""

from __future__ import annotations

import logging

import streamlit as st

from polymath_quest.config import AppConfig, configure_logging
from polymath_quest.generator import GeminiQuestionProvider
from polymath_quest.models import View
from polymath_quest.session import SessionController
from polymath_quest.ui import render_landing_page, render_quiz_page, render_setup_page

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
#  アプリ設定・コントローラーのセッション保持
# ----------------------------------------------------------------------
def load_app_config() -> AppConfig:
    if "app_config" not in st.session_state:
        cfg = AppConfig.from_toml()
        configure_logging(cfg.log_level)
        st.session_state["app_config"] = cfg
    return st.session_state["app_config"]


def get_controller() -> SessionController:
    """SessionController をセッションに保持して返す。"""
    if "controller" not in st.session_state:
        cfg = load_app_config()
        provider = GeminiQuestionProvider(cfg.gemini_api_key, model_name=cfg.gemini_model)
        st.session_state["controller"] = SessionController.from_config(provider, cfg)
        logger.info("New session controller (model=%s)", cfg.gemini_model)
    return st.session_state["controller"]  # type: ignore[return-value]


# ----------------------------------------------------------------------
#  ページ: ランディング
# ----------------------------------------------------------------------
def render_landing() -> None:
    controller = get_controller()
    cfg = load_app_config()

    result = render_landing_page(controller.state, app_name=cfg.app_name)
    if result["begin"]:
        controller.go_to(View.SETUP)
        st.rerun()


# ----------------------------------------------------------------------
#  ページ: セットアップ
# ----------------------------------------------------------------------
def render_setup() -> None:
    controller = get_controller()

    result = render_setup_page(controller.state)

    controller.select_region(result["region"])
    controller.select_subject(result["subject"])
    controller.select_language(result["language"])

    if result["back"]:
        controller.go_to(View.LANDING)
        st.rerun()
    elif result["start"]:
        with st.spinner("Generating your first question..."):
            started = controller.start_new_game()
        if started:
            st.rerun()


# ----------------------------------------------------------------------
#  ページ: クイズ
# ----------------------------------------------------------------------
def render_quiz() -> None:
    controller = get_controller()

    result = render_quiz_page(controller.state)

    if result["clicked_home"]:
        controller.go_to(View.LANDING)
        st.rerun()
    elif result["selected_choice"] is not None:
        controller.handle_answer(result["selected_choice"])
        st.rerun()
    elif result["clicked_next"]:
        with st.spinner("Generating the next question..."):
            controller.next_question()
        st.rerun()


# ----------------------------------------------------------------------
#  メイン
# ----------------------------------------------------------------------
def main() -> None:
    st.set_page_config(
        page_title="Global Polymath Quest",
        page_icon="🌐",
        layout="centered",
    )

    load_app_config()
    view = get_controller().state.view

    if view == View.QUIZ:
        render_quiz()
    elif view == View.SETUP:
        render_setup()
    else:
        render_landing()


if __name__ == "__main__":
    main()
