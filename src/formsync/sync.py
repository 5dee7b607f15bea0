"""
Synchronisation pipeline between the canonical model and its views.

Called explicitly by the editor after each committed change; there are
no subscriptions, timers or background work. Every call takes an
EditorState snapshot and returns a new one.

    markup edit      -> parse -> merge -> canonical questions -> views
    code-sample edit -> extract block -> decode -> sanitize -> questions -> views
    editor operation -> commit -> views

Decode failures keep the last-known-good questions and record a single
error message, cleared by the next successful cycle. A code sample with
no block at all is not an error: the user may be editing boilerplate.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Union

from formsync.backends import Target, anchor_for, render, render_markup
from formsync.embedded_block import extract_block, has_block_start, replace_block
from formsync.markup_parser import parse_markup
from formsync.merger import merge_questions, sanitize_logic
from formsync.model import Question
from formsync.payload import questions_to_json, try_decode_payload


logger = logging.getLogger(__name__)

DEFAULT_MARKUP = """<form>
  <div class="question">
    <p>What is your favorite color?</p>
    <label><input type="radio" name="q0" value="Red" /> Red</label>
    <label><input type="radio" name="q0" value="Blue" /> Blue</label>
    <label><input type="radio" name="q0" value="Green" /> Green</label>
  </div>
</form>"""

UNBALANCED_BLOCK = "Payload block has unbalanced braces"


@dataclass(frozen=True)
class EditorState:
    """
    Snapshot of the editor.

    Properties:
        questions: Canonical question list (ground truth)
        markup: Canonical markup rendered from questions
        view: Target currently shown in the text editor
        view_text: Text currently shown for `view`
        error: Most recent decode failure, None after a successful cycle
    """

    questions: List[Question] = field(default_factory=list)
    markup: str = ""
    view: Target = Target.MARKUP
    view_text: str = ""
    error: Optional[str] = None


def _with_questions(state: EditorState, questions: List[Question], view_text: str) -> EditorState:
    return replace(
        state,
        questions=questions,
        markup=render_markup(questions),
        view_text=view_text,
        error=None,
    )


def _view_text(state: EditorState, questions: List[Question], current_text: Optional[str]) -> str:
    if state.view is Target.MARKUP:
        return render_markup(questions)
    anchor = anchor_for(state.view)
    if current_text and extract_block(current_text, anchor) is not None:
        return replace_block(current_text, anchor, questions_to_json(questions))
    return render(state.view, questions)


def apply_markup(state: EditorState, markup_text: str) -> EditorState:
    """Re-parse markup and carry logic and quotas across by text match."""
    questions = merge_questions(state.questions, parse_markup(markup_text))
    return _with_questions(state, questions, _view_text(state, questions, state.view_text))


def apply_view_text(state: EditorState, text: str) -> EditorState:
    """
    Feed text edited in the current view back into the model.

    For code samples only the embedded block is read. Boilerplate
    outside the block is kept exactly as typed.
    """
    if state.view is Target.MARKUP:
        return apply_markup(state, text)

    anchor = anchor_for(state.view)
    block = extract_block(text, anchor)
    if block is None:
        if has_block_start(text, anchor):
            logger.info("Keeping previous questions: %s", UNBALANCED_BLOCK)
            return replace(state, view_text=text, error=UNBALANCED_BLOCK)
        return replace(state, view_text=text)

    result = try_decode_payload(block.block_text)
    if not result.ok:
        return replace(state, view_text=text, error=result.error)

    questions = sanitize_logic(result.questions)
    return _with_questions(state, questions, replace_block(text, anchor, questions_to_json(questions)))


def commit(state: EditorState, questions: List[Question]) -> EditorState:
    """Adopt questions produced by an editor operation and refresh views."""
    return _with_questions(state, list(questions), _view_text(state, questions, state.view_text))


def switch_view(state: EditorState, target: Union[Target, str]) -> EditorState:
    target = Target(target)
    return replace(state, view=target, view_text=render(target, state.questions))


def initial_state(markup: str = DEFAULT_MARKUP, view: Union[Target, str] = Target.MARKUP) -> EditorState:
    state = apply_markup(EditorState(), markup)
    if Target(view) is not Target.MARKUP:
        state = switch_view(state, view)
    return state


__all__ = [
    "DEFAULT_MARKUP",
    "EditorState",
    "initial_state",
    "apply_markup",
    "apply_view_text",
    "commit",
    "switch_view",
]
