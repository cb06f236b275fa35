"""
session.py
======================

画面遷移・難易度の上昇・スコア/XP の記録を担うセッション制御。

構成:
- 純粋な遷移関数 (state, event) -> state
    go_to / select_subject / select_language / select_region
    begin_start_game / complete_start_game
    answer
    begin_next_question / complete_next_question
    fail_request
- SessionController: 現在の SessionState と問題プロバイダを持ち、
  begin → プロバイダ呼び出し → complete / fail の順に遷移関数を適用する

begin_* は request_seq を 1 進めた QuestionRequest を返す。complete / fail は
その request_id が最新の request_seq と一致するときだけ適用され、
古いリクエストの遅れた応答は捨てられる。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .config import AppConfig
from .models import (
    DIFFICULTY_ORDER,
    Difficulty,
    Feedback,
    GameState,
    Question,
    SessionState,
    View,
)

logger = logging.getLogger(__name__)

POINTS_PER_CORRECT = 10
XP_PER_CORRECT = 25
QUESTIONS_PER_TIER = 3


@dataclass(frozen=True)
class QuestionRequest:
    request_id: int
    subject: str
    difficulty: Difficulty
    language: str
    region: str


# ----------------------------------------------------------------------
#  難易度ランプ
# ----------------------------------------------------------------------
def difficulty_for(questions_answered: int) -> Difficulty:
    """
    解答済み数 n から次の問題の難易度を決める。

    index = min((n + 1) // 3, 4)
    n=0,1 → Beginner / n=2 → Intermediate / n=5 → Advanced /
    n=8 → Expert / n>=11 → Master
    """
    index = min((questions_answered + 1) // QUESTIONS_PER_TIER, len(DIFFICULTY_ORDER) - 1)
    return DIFFICULTY_ORDER[index]


def initial_state(config: Optional[AppConfig] = None) -> SessionState:
    if config is None:
        return SessionState()
    return SessionState(
        game=GameState(
            selected_subject=config.default_subject,
            selected_language=config.default_language,
        ),
        selected_region=config.default_region,
    )


def is_current(state: SessionState, request: QuestionRequest) -> bool:
    return request.request_id == state.request_seq


# ----------------------------------------------------------------------
#  画面遷移・セットアップ
# ----------------------------------------------------------------------
def go_to(state: SessionState, view: View) -> SessionState:
    """
    画面を切り替える。ランディングへ戻るとセッションは終了し、
    進行中のリクエストを無効化してゲーム進行とフィードバックを破棄する。
    難易度と分野・言語の選択は次のセッションへ引き継ぐ。
    """
    if view == View.LANDING:
        game = GameState(
            selected_subject=state.game.selected_subject,
            selected_language=state.game.selected_language,
            current_difficulty=state.game.current_difficulty,
        )
        return replace(
            state,
            view=view,
            feedback=None,
            game=game,
            request_seq=state.request_seq + 1,
        )
    return replace(state, view=view)


def select_subject(state: SessionState, subject: str) -> SessionState:
    return replace(state, game=replace(state.game, selected_subject=subject))


def select_language(state: SessionState, language: str) -> SessionState:
    return replace(state, game=replace(state.game, selected_language=language))


def select_region(state: SessionState, region: str) -> SessionState:
    return replace(state, selected_region=region)


def _request_for(state: SessionState, request_id: int, difficulty: Difficulty) -> QuestionRequest:
    return QuestionRequest(
        request_id=request_id,
        subject=state.game.selected_subject,
        difficulty=difficulty,
        language=state.game.selected_language,
        region=state.selected_region,
    )


# ----------------------------------------------------------------------
#  ゲーム開始
# ----------------------------------------------------------------------
def begin_start_game(state: SessionState) -> Tuple[SessionState, QuestionRequest]:
    # 難易度はリセットせず、前回セッションの current_difficulty を引き継ぐ
    seq = state.request_seq + 1
    game = replace(state.game, is_loading=True, score=0, questions_answered=0)
    new_state = replace(state, game=game, request_seq=seq)
    return new_state, _request_for(new_state, seq, game.current_difficulty)


def complete_start_game(
    state: SessionState, request: QuestionRequest, question: Question
) -> SessionState:
    if not is_current(state, request):
        return state
    game = replace(state.game, current_question=question, is_loading=False)
    return replace(state, game=game, view=View.QUIZ)


# ----------------------------------------------------------------------
#  解答
# ----------------------------------------------------------------------
def answer(state: SessionState, index: int) -> SessionState:
    """
    選択肢 index で解答する。問題が無い、またはフィードバック表示中なら無視。
    問題の切り替えと難易度の更新は next_question 側で行う。
    """
    question = state.game.current_question
    if question is None or state.feedback_showing:
        return state

    correct = question.is_correct(index)
    feedback = Feedback(is_correct=correct, show=True, explanation=question.explanation)

    if not correct:
        return replace(state, feedback=feedback, stats=replace(state.stats, streak=0))

    stats = state.stats
    return replace(
        state,
        feedback=feedback,
        game=replace(state.game, score=state.game.score + POINTS_PER_CORRECT),
        stats=replace(
            stats,
            total_score=stats.total_score + POINTS_PER_CORRECT,
            xp=stats.xp + XP_PER_CORRECT,
            streak=stats.streak + 1,
        ),
    )


# ----------------------------------------------------------------------
#  次の問題
# ----------------------------------------------------------------------
def begin_next_question(state: SessionState) -> Tuple[SessionState, QuestionRequest]:
    answered = state.game.questions_answered
    difficulty = difficulty_for(answered)
    seq = state.request_seq + 1
    game = replace(state.game, is_loading=True, questions_answered=answered + 1)
    new_state = replace(state, game=game, feedback=None, request_seq=seq)
    return new_state, _request_for(new_state, seq, difficulty)


def complete_next_question(
    state: SessionState, request: QuestionRequest, question: Question
) -> SessionState:
    if not is_current(state, request):
        return state
    game = replace(
        state.game,
        current_question=question,
        is_loading=False,
        current_difficulty=request.difficulty,
    )
    return replace(state, game=game)


def fail_request(state: SessionState, request: QuestionRequest) -> SessionState:
    """失敗時はローディングを外すだけ。画面・表示中の問題はそのまま"""
    if not is_current(state, request):
        return state
    return replace(state, game=replace(state.game, is_loading=False))


# ----------------------------------------------------------------------
#  SessionController
# ----------------------------------------------------------------------
class SessionController:
    """
    1 セッション分の状態を保持し、ユーザー操作を遷移関数に流すクラス。

    provider は generate_question(subject, difficulty, language, region)
    を持つオブジェクト（GeminiQuestionProvider など）。
    """

    def __init__(self, provider, state: Optional[SessionState] = None):
        self.provider = provider
        self.state = state if state is not None else SessionState()

    @classmethod
    def from_config(cls, provider, config: AppConfig) -> "SessionController":
        return cls(provider, initial_state(config))

    # ---------- 画面・セットアップ ----------
    def go_to(self, view: View) -> None:
        self.state = go_to(self.state, view)

    def select_subject(self, subject: str) -> None:
        self.state = select_subject(self.state, subject)

    def select_language(self, language: str) -> None:
        self.state = select_language(self.state, language)

    def select_region(self, region: str) -> None:
        self.state = select_region(self.state, region)

    # ---------- ゲーム進行 ----------
    def start_new_game(self) -> bool:
        """最初の問題を取得してクイズ画面へ。失敗時は False（画面はそのまま）"""
        self.state, request = begin_start_game(self.state)
        question = self._fetch(request)
        if question is None:
            self._apply(request, fail_request)
            return False
        self._apply(request, complete_start_game, question)
        return True

    def handle_answer(self, index: int) -> Optional[Feedback]:
        self.state = answer(self.state, index)
        return self.state.feedback

    def next_question(self) -> bool:
        """
        次の問題を取得する。失敗時は古い問題が表示されたままになるが、
        questions_answered は既に加算済み。
        """
        self.state, request = begin_next_question(self.state)
        question = self._fetch(request)
        if question is None:
            self._apply(request, fail_request)
            return False
        self._apply(request, complete_next_question, question)
        return True

    # ---------- 内部 ----------
    def _fetch(self, request: QuestionRequest) -> Optional[Question]:
        try:
            return self.provider.generate_question(
                request.subject,
                request.difficulty,
                request.language,
                request.region,
            )
        except Exception:
            logger.exception("Question request #%d failed", request.request_id)
            return None

    def _apply(self, request: QuestionRequest, transition, *args) -> None:
        if not is_current(self.state, request):
            logger.debug(
                "Dropping stale result for request #%d (latest is #%d)",
                request.request_id, self.state.request_seq,
            )
            return
        self.state = transition(self.state, request, *args)
