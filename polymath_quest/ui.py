"""
ui.py
======================

Streamlit ベースの UI コンポーネントをまとめたモジュール。

責務:
- テーマ CSS の注入とモデル出力のエスケープ
- ランディング画面（ランク・XP 表示と開始ボタン）
- セットアップ画面（地域・分野・言語の選択）
- クイズ画面（質問・選択肢・正誤と解説・次へ）

ここでは「見た目」と「ユーザー操作の入力」だけを扱い、状態遷移は
app.py 経由で SessionController に任せる。
各 render_* は「何が押されたか」を dict で返す。
"""

from __future__ import annotations

import html
from typing import Any, Dict, Optional

import streamlit as st

from .catalog import LANGUAGES, SUBJECTS, region_icon, region_ids
from .models import SessionState

# ----------------------------------------------------------------------
#  テーマ定義
# ----------------------------------------------------------------------


THEME: Dict[str, str] = {
    "bg": "#f8fafc",
    "text": "#0f172a",
    "surface": "#f1f5f9",
    "surface_alt": "#ffffff",
    "border": "#e2e8f0",
    "primary": "#4f46e5",  # indigo
    "correct": "#10b981",
    "incorrect": "#f43f5e",
}


# ----------------------------------------------------------------------
#  CSS 生成
# ----------------------------------------------------------------------
def _generate_css(theme: Dict[str, str]) -> str:
    """テーマに応じたグローバル CSS を生成する。"""

    return f"""
    <style>
    html, body {{
        background: {theme['bg']};
        color: {theme['text']};
    }}

    .pq-card {{
        background: {theme['surface_alt']};
        padding: 1.25rem;
        border-radius: 20px;
        border: 1px solid {theme['border']};
        margin-bottom: 0.75rem;
    }}

    .pq-title {{
        font-weight: 800;
        font-size: 2.2rem;
        text-align: center;
    }}

    .pq-title span {{
        color: {theme['primary']};
    }}

    .pq-stat {{
        text-align: center;
    }}

    .pq-stat-value {{
        color: {theme['primary']};
        font-weight: 700;
        font-size: 1.8rem;
    }}

    .pq-stat-label {{
        font-size: 0.65rem;
        letter-spacing: 0.2em;
        text-transform: uppercase;
        opacity: 0.6;
    }}

    .pq-tags {{
        display: flex;
        flex-wrap: wrap;
        gap: 0.25rem;
        font-size: 0.8rem;
    }}

    .pq-tag {{
        padding: 0.1rem 0.6rem;
        border-radius: 999px;
        background: {theme['surface']};
        border: 1px solid {theme['border']};
    }}

    .pq-question-box {{
        background: {theme['surface_alt']};
        padding: 1rem;
        border-radius: 16px;
        border: 1px solid {theme['border']};
        font-size: 1.15rem;
        line-height: 1.6;
        margin: 0.5rem 0 0.75rem 0;
    }}

    .pq-feedback-correct {{
        border-left: 4px solid {theme['correct']};
    }}

    .pq-feedback-incorrect {{
        border-left: 4px solid {theme['incorrect']};
    }}
    </style>
    """


# ----------------------------------------------------------------------
#  テーマ注入・エスケープ
# ----------------------------------------------------------------------
def inject_theme() -> Dict[str, str]:
    st.markdown(_generate_css(THEME), unsafe_allow_html=True)
    return THEME


def _html_text(value: Any) -> str:
    """
    HTML に埋め込む文字列用。タグとして解釈されないようエスケープし、
    $...$ が数式にならないよう $ も \\$ にする。
    """
    return html.escape(str(value)).replace("$", "\\$")


def _label_text(value: Any) -> str:
    """st.button のラベル（Markdown として解釈される）用"""
    return str(value).replace("$", "\\$")




# ----------------------------------------------------------------------
#  ランディング
# ----------------------------------------------------------------------
def render_landing_page(state: SessionState, *, app_name: str) -> Dict[str, Any]:
    inject_theme()

    first, _, rest = app_name.partition(" ")
    st.markdown(
        f"<div class='pq-title'>🌐 {_html_text(first)} <span>{_html_text(rest)}</span></div>",
        unsafe_allow_html=True,
    )
    st.caption(
        "The ultimate AI quest. Conquer history, geography, and culture "
        "from any region in the world."
    )

    col_rank, col_xp = st.columns(2)
    for col, value, label in (
        (col_rank, state.stats.level, "Mastery Rank"),
        (col_xp, state.stats.xp, "Total XP"),
    ):
        with col:
            st.markdown(
                "<div class='pq-card pq-stat'>"
                f"<div class='pq-stat-value'>{value}</div>"
                f"<div class='pq-stat-label'>{label}</div>"
                "</div>",
                unsafe_allow_html=True,
            )

    begin = st.button("Begin Expedition ▶", key="pq_begin", use_container_width=True)
    return {"begin": begin}


# ----------------------------------------------------------------------
#  セットアップ
# ----------------------------------------------------------------------
def render_setup_page(state: SessionState) -> Dict[str, Any]:
    """
    戻り値:
        {
          "back": bool,
          "start": bool,
          "region": str,
          "subject": str,
          "language": str,
        }
    """
    inject_theme()
    game = state.game

    col_back, col_title = st.columns([1, 4])
    with col_back:
        back = st.button("◀ Back", key="pq_setup_back")
    with col_title:
        st.markdown("## Expedition Log")
        st.caption("Customize your localized quest parameters")

    regions = region_ids()
    st.markdown("### 🌐 Target Region")
    region = st.radio(
        "Target Region",
        regions,
        index=_index_or_zero(regions, state.selected_region),
        horizontal=True,
        label_visibility="collapsed",
        format_func=lambda r: f"{region_icon(r)} {r}",
    )

    col_subject, col_language = st.columns(2)
    with col_subject:
        st.markdown("### 📚 Focus Topic")
        subject = st.selectbox(
            "Focus Topic",
            SUBJECTS,
            index=_index_or_zero(SUBJECTS, game.selected_subject),
            label_visibility="collapsed",
        )
    with col_language:
        st.markdown("### 🈯 Language")
        language = st.selectbox(
            "Language",
            LANGUAGES,
            index=_index_or_zero(LANGUAGES, game.selected_language),
            label_visibility="collapsed",
        )

    st.markdown(
        "<div class='pq-tags'>"
        f"<span class='pq-tag'>Next difficulty: {game.current_difficulty.value}</span>"
        f"<span class='pq-tag'>Total score: {state.stats.total_score}</span>"
        "</div>",
        unsafe_allow_html=True,
    )

    start = st.button(
        "Start Quest ▶",
        key="pq_start",
        use_container_width=True,
        disabled=game.is_loading,
    )

    return {
        "back": back,
        "start": start,
        "region": region,
        "subject": subject,
        "language": language,
    }


# ----------------------------------------------------------------------
#  クイズ
# ----------------------------------------------------------------------
def render_quiz_page(state: SessionState) -> Dict[str, Any]:
    """
    戻り値:
        {
          "selected_choice": Optional[int],   # 新たに押された選択肢 index
          "clicked_next": bool,
          "clicked_home": bool,
        }
    """
    theme = inject_theme()
    game = state.game
    q = game.current_question

    selected_choice: Optional[int] = None
    clicked_next = False

    clicked_home = st.button("🏠 Home", key="pq_home")

    if q is None:
        st.info("No question loaded yet.")
        return {"selected_choice": None, "clicked_next": False, "clicked_home": clicked_home}

    # ----------------------------------------
    # ヘッダー
    # ----------------------------------------
    tags = [
        f"Challenge {game.questions_answered + 1}",
        q.subject,
        q.difficulty.value,
        q.language,
        state.selected_region,
        f"Score {game.score}",
        f"Streak {state.stats.streak}",
    ]
    st.markdown(
        "<div class='pq-tags'>"
        + "".join(f"<span class='pq-tag'>{_html_text(t)}</span>" for t in tags)
        + "</div>",
        unsafe_allow_html=True,
    )

    # レベル内の進捗 (XP 100 ごと)
    st.progress(state.stats.xp % 100, text=f"Level {state.stats.level}")

    st.markdown(
        f"<div class='pq-question-box'>{_html_text(q.text)}</div>",
        unsafe_allow_html=True,
    )

    # ----------------------------------------
    # 選択肢
    # ----------------------------------------
    feedback = state.feedback
    answered = feedback is not None and feedback.show

    for idx, option in enumerate(q.options):
        label = _label_text(option)
        if answered and idx == q.correct_answer_index:
            label = f"✅ {label}"
        if st.button(
            label,
            key=f"pq_choice_{idx}",
            use_container_width=True,
            disabled=answered or game.is_loading,
        ):
            selected_choice = idx

    # ----------------------------------------
    # 正誤と解説
    # ----------------------------------------
    if answered:
        css = "pq-feedback-correct" if feedback.is_correct else "pq-feedback-incorrect"
        heading = "Correct! +10" if feedback.is_correct else "Not quite."
        color = theme["correct"] if feedback.is_correct else theme["incorrect"]
        st.markdown(
            f"<div class='pq-card {css}'>"
            f"<strong style='color:{color}'>{heading}</strong><br>{_html_text(feedback.explanation)}"
            "</div>",
            unsafe_allow_html=True,
        )
        clicked_next = st.button(
            "Continue ▶",
            key="pq_next",
            use_container_width=True,
            disabled=game.is_loading,
        )

    st.caption(f"Answered this session: {game.questions_answered} · XP {state.stats.xp}")

    return {
        "selected_choice": selected_choice,
        "clicked_next": clicked_next,
        "clicked_home": clicked_home,
    }


def _index_or_zero(items, value) -> int:
    try:
        return list(items).index(value)
    except ValueError:
        return 0
