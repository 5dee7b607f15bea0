"""
Tests for the synchronisation pipeline.

These tests walk complete edit cycles:
    - markup edits keep logic across re-parses
    - code-sample edits decode the embedded block
    - decode failures keep the last good questions and report once
    - boilerplate outside the block survives every cycle
"""

import pytest

from formsync.backends import Target, anchor_for, render
from formsync.editor import add_question, save_logic_for_option
from formsync.embedded_block import extract_block
from formsync.model import LogicRule
from formsync.payload import decode_payload_text, questions_to_json
from formsync.sync import (
    DEFAULT_MARKUP,
    UNBALANCED_BLOCK,
    apply_markup,
    apply_view_text,
    commit,
    initial_state,
    switch_view,
)


BLUE_LINE = '    <label><input type="radio" name="q0" value="Blue" /> Blue</label>\n'


@pytest.fixture
def color_state():
    """Default form plus a "Why blue?" question revealed by Blue."""
    state = initial_state()
    questions = add_question(state.questions, "Why blue?")
    questions = save_logic_for_option(questions, 0, "Blue", [1])
    return commit(state, questions)


class TestInitialState:
    """Test initial_state."""

    def test_default_markup(self):
        state = initial_state()
        assert [q.text for q in state.questions] == ["What is your favorite color?"]
        assert state.questions[0].options == ["Red", "Blue", "Green"]
        assert state.markup == DEFAULT_MARKUP
        assert state.view is Target.MARKUP
        assert state.view_text == DEFAULT_MARKUP
        assert state.error is None

    def test_code_view(self):
        state = initial_state(view="python")
        assert state.view is Target.PYTHON
        assert state.view_text == render(Target.PYTHON, state.questions)


class TestMarkupCycle:
    """Logic survives markup edits while its option exists."""

    def test_rule_survives_reparse(self, color_state):
        state = apply_markup(color_state, color_state.markup)
        assert state.questions == color_state.questions
        assert state.questions[0].logic == [LogicRule(option="Blue", show_questions=[1])]

    def test_rule_survives_payload_round_trip(self, color_state):
        state = apply_markup(color_state, color_state.markup)
        assert decode_payload_text(questions_to_json(state.questions)) == state.questions

    def test_removing_option_drops_rule(self, color_state):
        assert BLUE_LINE in color_state.markup
        state = apply_markup(color_state, color_state.markup.replace(BLUE_LINE, ""))
        assert state.questions[0].options == ["Red", "Green"]
        assert state.questions[0].logic == []

    def test_renaming_question_drops_behaviour(self, color_state):
        markup = color_state.markup.replace("What is your favorite color?", "Pick a colour")
        state = apply_markup(color_state, markup)
        assert state.questions[0].text == "Pick a colour"
        assert state.questions[0].logic == []

    def test_markup_view_text_is_canonical(self, color_state):
        state = apply_view_text(color_state, color_state.markup.replace("name=\"q1\"", "name=\"x\""))
        assert state.view_text == state.markup
        assert 'name="q1"' in state.markup

    def test_code_view_refreshes_block(self, color_state):
        state = switch_view(color_state, Target.JAVASCRIPT)
        state = apply_markup(state, state.markup.replace(BLUE_LINE, ""))
        block = extract_block(state.view_text, anchor_for(Target.JAVASCRIPT))
        assert block.block_text == questions_to_json(state.questions)


class TestCodeCycle:
    """Edits to the embedded block of a code sample."""

    @pytest.fixture
    def python_state(self, color_state):
        return switch_view(color_state, Target.PYTHON)

    def test_edit_block(self, python_state):
        text = python_state.view_text.replace('"Why blue?"', '"Why navy?"')
        state = apply_view_text(python_state, text)
        assert state.error is None
        assert [q.text for q in state.questions] == ["What is your favorite color?", "Why navy?"]
        assert "Why navy?" in state.markup

    def test_logic_from_block_is_sanitized(self, python_state):
        text = python_state.view_text.replace('"showQuestions": [\n            1\n          ]',
                                              '"showQuestions": [0, 1, 9]')
        assert text != python_state.view_text
        state = apply_view_text(python_state, text)
        assert state.questions[0].logic == [LogicRule(option="Blue", show_questions=[1])]
        assert extract_block(state.view_text, anchor_for(Target.PYTHON)).block_text == \
            questions_to_json(state.questions)

    def test_comment_in_block(self, python_state):
        text = python_state.view_text.replace('{\n  "form": [', "{\n  // don't touch\n  \"form\": [", 1)
        assert text != python_state.view_text
        state = apply_view_text(python_state, text)
        assert state.error is None
        assert state.questions == python_state.questions

    def test_huge_target_in_block(self, python_state):
        text = python_state.view_text.replace('"showQuestions": [\n            1\n          ]',
                                              '"showQuestions": [1' + "0" * 400 + ", 1]")
        assert text != python_state.view_text
        state = apply_view_text(python_state, text)
        assert state.error is None
        assert state.questions[0].logic == [LogicRule(option="Blue", show_questions=[1])]

    def test_boilerplate_preserved(self, python_state):
        text = "# my notes\n" + python_state.view_text + "\n# trailing\n"
        state = apply_view_text(python_state, text)
        assert state.error is None
        assert state.view_text == text

    def test_decode_error_keeps_questions(self, python_state):
        text = python_state.view_text.replace('"form": [', '"form": [}', 1)
        state = apply_view_text(python_state, text)
        assert state.error.startswith("Invalid JSON")
        assert state.questions == python_state.questions
        assert state.view_text == text

    def test_error_cleared_by_next_success(self, python_state):
        broken = apply_view_text(python_state, python_state.view_text.replace('"form"', '"forms"'))
        assert broken.error == "Payload is missing a 'form' array"
        fixed = apply_view_text(broken, python_state.view_text)
        assert fixed.error is None

    def test_missing_block_is_not_an_error(self, python_state):
        state = apply_view_text(python_state, "print('editing boilerplate')\n")
        assert state.error is None
        assert state.questions == python_state.questions
        assert state.view_text == "print('editing boilerplate')\n"

    def test_unbalanced_block(self, python_state):
        state = apply_view_text(python_state, "payload = {\n  \"form\": [\n")
        assert state.error == UNBALANCED_BLOCK
        assert state.questions == python_state.questions

    def test_commit_keeps_boilerplate(self, python_state):
        edited = apply_view_text(python_state, "# kept\n" + python_state.view_text)
        state = commit(edited, add_question(edited.questions))
        assert state.view_text.startswith("# kept\n")
        assert len(decode_payload_text(extract_block(state.view_text, anchor_for(Target.PYTHON)).block_text)) == 3

    def test_commit_without_block_rerenders(self, python_state):
        edited = apply_view_text(python_state, "nothing here")
        state = commit(edited, edited.questions)
        assert state.view_text == render(Target.PYTHON, state.questions)


class TestSwitchView:
    """Test switch_view."""

    @pytest.mark.parametrize("target", list(Target))
    def test_renders_target(self, color_state, target):
        state = switch_view(color_state, target)
        assert state.view is target
        assert state.view_text == render(target, color_state.questions)
        assert state.questions == color_state.questions
