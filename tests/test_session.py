"""
Tests for the session state machine and SessionController.
"""
from dataclasses import replace

import pytest

from polymath_quest.config import AppConfig
from polymath_quest.errors import MalformedResponseError, ProviderRequestError
from polymath_quest.models import DIFFICULTY_ORDER, Difficulty, GameState, SessionState, View
from polymath_quest import session as s
from polymath_quest.session import SessionController, difficulty_for
from tests.helpers import FakeProvider, make_question


# ----------------------------------------------------------------------
#  Difficulty ramp
# ----------------------------------------------------------------------
@pytest.mark.parametrize(
    "answered,expected",
    [
        (0, Difficulty.BEGINNER),
        (1, Difficulty.BEGINNER),
        (2, Difficulty.INTERMEDIATE),
        (5, Difficulty.ADVANCED),
        (8, Difficulty.EXPERT),
        (11, Difficulty.MASTER),
        (100, Difficulty.MASTER),
    ],
)
def test_ramp_table(answered, expected):
    assert difficulty_for(answered) == expected


def test_ramp_matches_formula_and_never_decreases():
    previous = 0
    for n in range(60):
        tier = difficulty_for(n).tier
        assert tier == min((n + 1) // 3, 4)
        assert tier >= previous
        previous = tier


# ----------------------------------------------------------------------
#  start_new_game
# ----------------------------------------------------------------------
def _controller(results, state=None):
    provider = FakeProvider(results)
    return SessionController(provider, state), provider


def test_start_new_game_success_moves_to_quiz(question):
    controller, provider = _controller([question], SessionState(view=View.SETUP))

    assert controller.start_new_game() is True

    state = controller.state
    assert state.view == View.QUIZ
    assert state.game.current_question == question
    assert state.game.is_loading is False
    assert provider.calls == [
        {"subject": "History", "difficulty": Difficulty.BEGINNER, "language": "English", "region": "Global"}
    ]


def test_start_new_game_resets_score_and_count(question):
    start = SessionState(view=View.SETUP, game=GameState(score=40, questions_answered=7))
    controller, _ = _controller([question], start)

    controller.start_new_game()

    assert controller.state.game.score == 0
    assert controller.state.game.questions_answered == 0


def test_start_new_game_keeps_previous_difficulty(question):
    start = SessionState(view=View.SETUP, game=GameState(current_difficulty=Difficulty.EXPERT))
    controller, provider = _controller([question], start)

    controller.start_new_game()

    assert provider.calls[0]["difficulty"] == Difficulty.EXPERT
    assert controller.state.game.current_difficulty == Difficulty.EXPERT


def test_start_new_game_failure_keeps_view_and_clears_loading(caplog):
    controller, _ = _controller([ProviderRequestError("boom")], SessionState(view=View.SETUP))

    with caplog.at_level("ERROR"):
        assert controller.start_new_game() is False

    assert controller.state.view == View.SETUP
    assert controller.state.game.is_loading is False
    assert controller.state.game.current_question is None
    assert "failed" in caplog.text


def test_begin_start_game_sets_loading():
    state, request = s.begin_start_game(SessionState())
    assert state.game.is_loading is True
    assert request.request_id == state.request_seq == 1


# ----------------------------------------------------------------------
#  handle_answer
# ----------------------------------------------------------------------
def _quiz_state(question, **game_kwargs):
    return SessionState(view=View.QUIZ, game=GameState(current_question=question, **game_kwargs))


def test_correct_answer_awards_points(question):
    controller, _ = _controller([], _quiz_state(question, score=20))

    feedback = controller.handle_answer(question.correct_answer_index)

    assert feedback.is_correct is True
    assert feedback.show is True
    assert feedback.explanation == question.explanation
    assert controller.state.game.score == 30
    assert controller.state.stats.total_score == 10
    assert controller.state.stats.xp == 25


def test_incorrect_answer_changes_no_score(question):
    controller, _ = _controller([], _quiz_state(question, score=20))

    feedback = controller.handle_answer(3)

    assert feedback.is_correct is False
    assert controller.state.game.score == 20
    assert controller.state.stats.total_score == 0
    assert controller.state.stats.xp == 0


def test_second_answer_is_ignored(question):
    controller, _ = _controller([], _quiz_state(question))
    controller.handle_answer(0)
    after_first = controller.state

    controller.handle_answer(question.correct_answer_index)

    assert controller.state == after_first


def test_answer_without_question_is_ignored():
    state = SessionState()
    assert s.answer(state, 0) is state


def test_streak_counts_consecutive_correct_answers(question):
    state = _quiz_state(question)
    state = s.answer(state, 1)
    assert state.stats.streak == 1

    state = replace(state, feedback=None)
    state = s.answer(state, 1)
    assert state.stats.streak == 2

    state = replace(state, feedback=None)
    state = s.answer(state, 0)
    assert state.stats.streak == 0


# ----------------------------------------------------------------------
#  next_question
# ----------------------------------------------------------------------
def test_next_question_ramps_difficulty(question):
    q2 = make_question("q2", difficulty=Difficulty.INTERMEDIATE)
    controller, provider = _controller([q2], _quiz_state(question, questions_answered=2))
    controller.handle_answer(1)

    assert controller.next_question() is True

    state = controller.state
    assert provider.calls[0]["difficulty"] == Difficulty.INTERMEDIATE
    assert state.game.current_difficulty == Difficulty.INTERMEDIATE
    assert state.game.current_question == q2
    assert state.game.questions_answered == 3
    assert state.feedback is None
    assert state.game.is_loading is False


def test_next_question_failure_leaves_stale_question(question):
    controller, _ = _controller(
        [MalformedResponseError("bad json")], _quiz_state(question, questions_answered=4)
    )
    controller.handle_answer(1)

    assert controller.next_question() is False

    state = controller.state
    assert state.game.current_question == question
    assert state.game.is_loading is False
    assert state.game.questions_answered == 5
    assert state.game.current_difficulty == Difficulty.BEGINNER
    assert state.feedback is None


def test_full_session_reaches_master():
    questions = [make_question(f"q{i}") for i in range(14)]
    controller, provider = _controller(questions, SessionState(view=View.SETUP))

    controller.start_new_game()
    for _ in range(13):
        controller.handle_answer(1)
        controller.next_question()

    requested = [c["difficulty"] for c in provider.calls]
    assert requested[0] == Difficulty.BEGINNER
    assert requested[-1] == Difficulty.MASTER
    assert [d.tier for d in requested[1:]] == sorted(d.tier for d in requested[1:])
    assert controller.state.game.score == 130
    assert controller.state.stats.xp == 13 * 25


# ----------------------------------------------------------------------
#  Setup selections
# ----------------------------------------------------------------------
def test_region_only_changes_region_parameter(question):
    global_ctrl, global_provider = _controller([question], SessionState(view=View.SETUP))
    japan_ctrl, japan_provider = _controller([question], SessionState(view=View.SETUP))
    japan_ctrl.select_region("Japan")

    global_ctrl.start_new_game()
    japan_ctrl.start_new_game()

    g, j = global_provider.calls[0], japan_provider.calls[0]
    assert g["region"] == "Global"
    assert j["region"] == "Japan"
    assert {k: v for k, v in g.items() if k != "region"} == {
        k: v for k, v in j.items() if k != "region"
    }


def test_setup_selections_flow_into_request(question):
    controller, provider = _controller([question], SessionState(view=View.SETUP))
    controller.select_subject("Science")
    controller.select_language("Japanese")
    controller.select_region("Japan")

    controller.start_new_game()

    assert provider.calls[0] == {
        "subject": "Science",
        "difficulty": Difficulty.BEGINNER,
        "language": "Japanese",
        "region": "Japan",
    }


def test_initial_state_uses_config_defaults():
    cfg = AppConfig(
        gemini_api_key="k",
        default_subject="Music",
        default_language="French",
        default_region="Europe",
    )
    state = s.initial_state(cfg)
    assert state.view == View.LANDING
    assert state.game.selected_subject == "Music"
    assert state.game.selected_language == "French"
    assert state.selected_region == "Europe"


# ----------------------------------------------------------------------
#  Request correlation
# ----------------------------------------------------------------------
def test_stale_response_is_ignored(question):
    state, old_request = s.begin_start_game(SessionState(view=View.SETUP))
    state = s.go_to(state, View.LANDING)

    after = s.complete_start_game(state, old_request, question)

    assert after is state
    assert after.view == View.LANDING
    assert after.game.current_question is None


def test_older_next_request_cannot_overwrite_newer(question):
    state = _quiz_state(question)
    state, first = s.begin_next_question(state)
    state, second = s.begin_next_question(state)

    newer = make_question("newer")
    older = make_question("older")
    state = s.complete_next_question(state, second, newer)
    state = s.complete_next_question(state, first, older)

    assert state.game.current_question == newer


def test_late_failure_does_not_clear_newer_loading(question):
    state, first = s.begin_next_question(_quiz_state(question))
    state, _second = s.begin_next_question(state)

    assert s.fail_request(state, first).game.is_loading is True


def test_returning_to_landing_clears_loading_and_feedback(question):
    state = s.answer(_quiz_state(question), 1)
    state, _ = s.begin_next_question(state)
    state = s.answer(state, 1)

    state = s.go_to(state, View.LANDING)

    assert state.view == View.LANDING
    assert state.feedback is None
    assert state.game.is_loading is False


def test_returning_to_landing_discards_session_progress(question):
    state = replace(
        _quiz_state(
            question,
            score=30,
            questions_answered=6,
            current_difficulty=Difficulty.ADVANCED,
            selected_subject="Cuisine",
            selected_language="Korean",
        ),
        selected_region="Asia",
    )

    state = s.go_to(state, View.LANDING)

    game = state.game
    assert game.current_question is None
    assert game.score == 0
    assert game.questions_answered == 0
    assert game.current_difficulty == Difficulty.ADVANCED
    assert game.selected_subject == "Cuisine"
    assert game.selected_language == "Korean"
    assert state.selected_region == "Asia"


def test_go_to_setup_keeps_request_seq():
    state = SessionState(request_seq=3)
    assert s.go_to(state, View.SETUP).request_seq == 3


def test_difficulty_order_has_five_tiers():
    assert [d.value for d in DIFFICULTY_ORDER] == [
        "Beginner", "Intermediate", "Advanced", "Expert", "Master"
    ]
