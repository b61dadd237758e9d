"""Tests for kanatype.core.session – the match state machine."""

from __future__ import annotations

import logging
import random
from typing import List

import pytest

from kanatype.core.errors import EmptyWordBank, OvertypedInput
from kanatype.core.kana import Script
from kanatype.core.session import (
    CharacterState,
    Key,
    KeyEvent,
    KeystrokeResult,
    Outcome,
    Session,
    TargetCharacter,
    Word,
    generate_session,
    match_states,
)

INACTIVE = CharacterState.INACTIVE
ACTIVE = CharacterState.ACTIVE
CONFIRMED = CharacterState.CONFIRMED
INCORRECT = CharacterState.INCORRECT

BACKSPACE = KeyEvent.named(Key.BACKSPACE)


def _session(*texts: str, **kwargs) -> Session:
    return Session(list(texts), [Word.from_text(t) for t in texts], **kwargs)


def _type(session: Session, keys: str) -> List[KeystrokeResult]:
    return [session.apply_keystroke(KeyEvent.of(k)) for k in keys]


# ---------------------------------------------------------------------------
# Word / TargetCharacter
# ---------------------------------------------------------------------------

class TestWord:
    def test_from_text_splits_code_points(self):
        word = Word.from_text("きょう")
        assert [c.char for c in word.characters] == ["き", "ょ", "う"]
        assert word.states == [INACTIVE, INACTIVE, INACTIVE]

    def test_text_round_trips(self):
        assert Word.from_text("さかな").text == "さかな"

    def test_new_word_flags(self):
        word = Word.from_text("ねこ")
        assert word.is_active is False
        assert word.is_complete is False

    def test_activate(self):
        word = Word.from_text("ねこ")
        word.activate()
        assert word.is_active
        assert word.states == [ACTIVE, INACTIVE]

    def test_complete(self):
        word = Word.from_text("ねこ")
        word.activate()
        word.complete()
        assert word.is_complete
        assert not word.is_active
        assert word.states == [CONFIRMED, CONFIRMED]

    def test_apply_states_reports_change(self):
        word = Word.from_text("ねこ")
        assert word.apply_states([ACTIVE, INACTIVE]) is True
        assert word.apply_states([ACTIVE, INACTIVE]) is False

    def test_character_default_state(self):
        assert TargetCharacter("ね").state is INACTIVE


# ---------------------------------------------------------------------------
# KeyEvent
# ---------------------------------------------------------------------------

class TestKeyEvent:
    def test_printable(self):
        assert KeyEvent.of("a").is_printable

    def test_control_char_not_printable(self):
        assert not KeyEvent.of("\t").is_printable

    def test_multi_char_not_printable(self):
        assert not KeyEvent.of("ab").is_printable

    def test_backspace(self):
        assert BACKSPACE.is_backspace
        assert not BACKSPACE.is_printable


# ---------------------------------------------------------------------------
# match_states – pure recompute
# ---------------------------------------------------------------------------

class TestMatchStates:
    def test_empty_input_puts_cursor_at_start(self):
        assert match_states("ねこ", "") == [ACTIVE, INACTIVE]

    def test_confirmed_prefix_moves_cursor(self):
        assert match_states("ねこ", "ね") == [CONFIRMED, ACTIVE]

    def test_full_match(self):
        assert match_states("ねこ", "ねこ") == [CONFIRMED, CONFIRMED]

    def test_wrong_kana_is_incorrect_and_stops(self):
        assert match_states("ねこ", "にこ") == [INCORRECT, INACTIVE]

    def test_pending_romaji_is_active(self):
        assert match_states("ねこ", "n") == [ACTIVE, INACTIVE]

    def test_pending_after_confirmed(self):
        assert match_states("ねこ", "ねk") == [CONFIRMED, ACTIVE]

    def test_excess_ignored(self):
        assert match_states("ねこ", "ねこね") == [CONFIRMED, CONFIRMED]

    def test_empty_target(self):
        assert match_states("", "x") == []

    def test_katakana_script(self):
        assert match_states("ネコ", "ネk", Script.KATAKANA) == [CONFIRMED, ACTIVE]
        assert match_states("ネコ", "ナ", Script.KATAKANA) == [INCORRECT, INACTIVE]


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

class TestScenarios:
    def test_scenario_a_type_whole_word(self):
        session = generate_session(["ねこ"], 1, rng=random.Random(0))
        word = session.words[0]
        results = _type(session, "neko")

        assert results[-1].outcome is Outcome.SESSION_FINISHED
        assert word.is_complete
        assert not word.is_active
        assert word.states == [CONFIRMED, CONFIRMED]
        assert session.finished

    def test_scenario_a_transliteration_steps(self):
        session = _session("ねこ")
        steps = []
        for key in "nek":
            session.apply_keystroke(KeyEvent.of(key))
            steps.append(session.transliterated_input)
        assert steps == ["n", "ね", "ねk"]
        assert session.words[0].states == [CONFIRMED, ACTIVE]

    def test_scenario_b_wrong_kana(self):
        session = _session("ねこ")
        _type(session, "ni")
        assert session.transliterated_input == "に"
        assert session.words[0].states == [INCORRECT, INACTIVE]

    def test_scenario_c_incomplete_kana(self):
        session = _session("ねこ")
        _type(session, "n")
        assert session.words[0].states == [ACTIVE, INACTIVE]
        assert INCORRECT not in session.words[0].states

    def test_scenario_d_backspace_then_retype(self):
        direct = _session("ねこ")
        _type(direct, "ne")

        corrected = _session("ねこ")
        _type(corrected, "ne")
        corrected.apply_keystroke(BACKSPACE)
        _type(corrected, "e")

        assert corrected.words[0].states == direct.words[0].states == [CONFIRMED, ACTIVE]
        assert corrected.input_buffer == "ne"


# ---------------------------------------------------------------------------
# apply_keystroke – buffer handling
# ---------------------------------------------------------------------------

class TestKeystrokes:
    def test_printable_appends(self):
        session = _session("ねこ")
        result = session.apply_keystroke(KeyEvent.of("n"))
        assert result.outcome is Outcome.UPDATED
        assert session.input_buffer == "n"

    def test_backspace_removes_last(self):
        session = _session("ねこ")
        _type(session, "ne")
        session.apply_keystroke(BACKSPACE)
        assert session.input_buffer == "n"
        assert session.words[0].states == [ACTIVE, INACTIVE]

    def test_backspace_on_empty_is_noop(self):
        session = _session("ねこ")
        result = session.apply_keystroke(BACKSPACE)
        assert result.outcome is Outcome.IGNORED
        assert session.input_buffer == ""
        assert session.stats.keystrokes == 0

    def test_backspace_clears_incorrect(self):
        session = _session("ねこ")
        _type(session, "ni")
        session.apply_keystroke(BACKSPACE)
        assert session.words[0].states == [ACTIVE, INACTIVE]

    @pytest.mark.parametrize("key", [Key.OTHER, Key.ENTER, Key.ESCAPE])
    def test_named_keys_ignored(self, key: Key):
        session = _session("ねこ")
        result = session.apply_keystroke(KeyEvent.named(key))
        assert result.outcome is Outcome.IGNORED
        assert session.input_buffer == ""

    def test_non_printable_char_ignored(self):
        session = _session("ねこ")
        result = session.apply_keystroke(KeyEvent.of("\t"))
        assert result.outcome is Outcome.IGNORED

    def test_keystrokes_counted(self):
        session = _session("ねこ")
        _type(session, "ne")
        session.apply_keystroke(BACKSPACE)
        assert session.stats.keystrokes == 3
        assert session.stats.backspaces == 1


# ---------------------------------------------------------------------------
# apply_keystroke – word advance and finish
# ---------------------------------------------------------------------------

class TestAdvance:
    def test_word_complete_activates_next(self):
        session = _session("ねこ", "いぬ")
        results = _type(session, "neko")
        assert results[-1].outcome is Outcome.WORD_COMPLETE
        assert session.active_index == 1
        assert session.input_buffer == ""
        assert session.words[0].is_complete
        assert session.words[1].is_active
        assert session.words[1].states == [ACTIVE, INACTIVE]

    def test_session_finished_after_last_word(self):
        session = _session("ねこ", "いぬ")
        _type(session, "neko")
        results = _type(session, "inu")
        assert [r.outcome for r in results] == [
            Outcome.UPDATED,
            Outcome.UPDATED,
            Outcome.SESSION_FINISHED,
        ]
        assert session.finished
        assert session.active_index == len(session.words)
        assert session.active_word is None

    def test_keys_after_finish_ignored(self):
        session = _session("ねこ")
        _type(session, "neko")
        result = session.apply_keystroke(KeyEvent.of("a"))
        assert result.outcome is Outcome.IGNORED
        assert session.active_index == 1
        assert session.input_buffer == ""

    def test_on_finished_called_once(self):
        calls = []
        session = _session("ねこ", on_finished=calls.append)
        _type(session, "neko")
        _type(session, "neko")
        assert calls == [session]

    def test_at_most_one_active_word(self):
        session = _session("ねこ", "いぬ", "ねこ")
        for keys in ("neko", "inu", "neko"):
            for key in keys:
                session.apply_keystroke(KeyEvent.of(key))
                assert sum(w.is_active for w in session.words) <= 1

    def test_active_index_never_decreases(self):
        session = _session("ねこ", "いぬ")
        indices = []
        for event in [KeyEvent.of(k) for k in "neko"] + [BACKSPACE] + [KeyEvent.of(k) for k in "inu"]:
            session.apply_keystroke(event)
            indices.append(session.active_index)
        assert indices == sorted(indices)
        assert indices[-1] == 2

    def test_cursor_monotonic_without_backspace(self):
        session = _session("さかな")
        positions = []
        for key in "sakan":
            session.apply_keystroke(KeyEvent.of(key))
            positions.append(session.words[0].states.index(ACTIVE))
        assert positions == sorted(positions)

    def test_stats_finish_with_session(self):
        session = _session("ねこ")
        _type(session, "neko")
        assert session.stats.finished
        assert session.stats.completed_words == 1
        assert session.stats.completed_chars == 2

    def test_completion_with_syllabic_n(self):
        session = _session("ほん")
        results = _type(session, "hon")
        assert results[-1].outcome is Outcome.UPDATED
        assert session.words[0].states == [CONFIRMED, ACTIVE]
        assert session.apply_keystroke(KeyEvent.of("n")).outcome is Outcome.SESSION_FINISHED

    def test_katakana_session(self):
        session = _session("ネコ", script=Script.KATAKANA)
        assert _type(session, "neko")[-1].outcome is Outcome.SESSION_FINISHED


# ---------------------------------------------------------------------------
# Backspace recompute property
# ---------------------------------------------------------------------------

class TestRecompute:
    @pytest.mark.parametrize("prefix_len", range(6))
    def test_backspace_then_retype_matches_direct(self, prefix_len: int):
        keys = "sakana"[:prefix_len]

        direct = _session("さかな")
        _type(direct, keys)

        corrected = _session("さかな")
        _type(corrected, keys + "q")
        corrected.apply_keystroke(BACKSPACE)

        assert corrected.words[0].states == direct.words[0].states
        assert corrected.words[0].states == match_states("さかな", direct.transliterated_input)


# ---------------------------------------------------------------------------
# Overtyping
# ---------------------------------------------------------------------------

class TestOvertyped:
    def test_overtyped_reported(self, caplog: pytest.LogCaptureFixture):
        session = _session("ねこ")
        with caplog.at_level(logging.WARNING, logger="kanatype.core.session"):
            results = _type(session, "nekk")
        assert session.transliterated_input == "ねっk"
        overtyped = results[-1].overtyped
        assert isinstance(overtyped, OvertypedInput)
        assert overtyped.excess == "k"
        assert "Overtyped" in caplog.text

    def test_overtyped_keeps_last_partial_match(self):
        session = _session("ねこ")
        _type(session, "nekk")
        assert session.words[0].states == [CONFIRMED, INCORRECT]
        assert not session.words[0].is_complete

    def test_normal_input_not_overtyped(self):
        session = _session("ねこ")
        assert _type(session, "ne")[-1].overtyped is None


# ---------------------------------------------------------------------------
# needs_redraw
# ---------------------------------------------------------------------------

class TestRedrawFlag:
    def test_new_session_needs_redraw(self):
        assert _session("ねこ").needs_redraw

    def test_unchanged_states_do_not_set_flag(self):
        session = _session("ねこ")
        session.needs_redraw = False
        _type(session, "n")
        assert session.needs_redraw is False

    def test_state_change_sets_flag(self):
        session = _session("ねこ")
        _type(session, "n")
        session.needs_redraw = False
        _type(session, "e")
        assert session.needs_redraw is True

    def test_backspace_sets_flag(self):
        session = _session("ねこ")
        _type(session, "nek")
        session.needs_redraw = False
        session.apply_keystroke(BACKSPACE)
        assert session.needs_redraw is True

    def test_word_advance_sets_flag(self):
        session = _session("ねこ", "いぬ")
        _type(session, "nek")
        session.needs_redraw = False
        _type(session, "o")
        assert session.needs_redraw is True


# ---------------------------------------------------------------------------
# generate_session
# ---------------------------------------------------------------------------

class TestGenerateSession:
    def test_length(self):
        session = generate_session(["ねこ", "いぬ"], 5, rng=random.Random(1))
        assert len(session.words) == 5

    def test_deterministic_with_seeded_rng(self):
        bank = ["ねこ", "いぬ", "さかな", "とり"]
        session = generate_session(bank, 8, rng=random.Random(42))
        rng = random.Random(42)
        expected = [rng.choice(bank) for _ in range(8)]
        assert [w.text for w in session.words] == expected

    def test_repeats_allowed(self):
        session = generate_session(["ねこ"], 3, rng=random.Random(0))
        assert [w.text for w in session.words] == ["ねこ", "ねこ", "ねこ"]

    def test_first_word_activated(self):
        session = generate_session(["ねこ", "いぬ"], 3, rng=random.Random(3))
        assert session.active_index == 0
        assert session.words[0].is_active
        assert session.words[0].states[0] is ACTIVE
        assert all(s is INACTIVE for s in session.words[0].states[1:])

    def test_other_words_inactive(self):
        session = generate_session(["ねこ", "いぬ"], 3, rng=random.Random(3))
        for word in session.words[1:]:
            assert not word.is_active
            assert all(s is INACTIVE for s in word.states)

    def test_words_are_independent(self):
        session = generate_session(["ねこ"], 2, rng=random.Random(0))
        assert session.words[0].characters[0] is not session.words[1].characters[0]

    def test_keeps_word_bank(self):
        session = generate_session(["ねこ", "いぬ"], 1, rng=random.Random(0))
        assert session.word_bank == ("ねこ", "いぬ")

    def test_empty_bank(self):
        with pytest.raises(EmptyWordBank):
            generate_session([], 3)

    @pytest.mark.parametrize("count", [0, -1])
    def test_non_positive_count(self, count: int):
        with pytest.raises(ValueError):
            generate_session(["ねこ"], count)

    def test_empty_word_in_bank(self):
        with pytest.raises(ValueError):
            generate_session(["ねこ", ""], 2)

    def test_script_passed_through(self):
        session = generate_session(["ネコ"], 1, script=Script.KATAKANA)
        assert session.script is Script.KATAKANA

    def test_session_without_words(self):
        with pytest.raises(ValueError):
            Session(["ねこ"], [])
