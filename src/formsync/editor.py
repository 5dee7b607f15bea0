"""
Editor operations on a question snapshot.

Every operation takes the current question list and returns a new one;
the input list and its questions are never mutated. Question-level
invariants are kept here:

    - Removing an option drops the rules bound to its value
    - Renaming an option carries its rule along
    - Removing a question clears logic and quotas on ALL survivors,
      because index shifts would silently misroute show_questions
    - Changing the text of a question with logic needs confirmation
"""

import copy
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from formsync.merger import clean_targets
from formsync.model import InputKind, LogicRule, Question, Quota, new_question


class EditorError(Exception):
    """Raised when an edit refers to a question or option that does not exist."""
    pass


@dataclass(frozen=True)
class PendingTextChange:
    """A text edit held back because the question carries logic."""
    index: int
    new_text: str
    old_text: str


def _copy(questions: List[Question]) -> List[Question]:
    return copy.deepcopy(list(questions))


def _check_index(questions: List[Question], index: int) -> None:
    if not 0 <= index < len(questions):
        raise EditorError(f"No question at index {index}")


def _check_option(question: Question, o_index: int) -> None:
    if not 0 <= o_index < len(question.options):
        raise EditorError(f"No option at index {o_index} in {question.text!r}")


def add_question(questions: List[Question], text: Optional[str] = None) -> List[Question]:
    result = _copy(questions)
    result.append(new_question() if text is None else new_question(text))
    return result


def remove_question(questions: List[Question], index: int) -> List[Question]:
    _check_index(questions, index)
    result = _copy(questions)
    del result[index]
    for question in result:
        question.logic = []
        question.quota = None
    return result


def set_input_kind(questions: List[Question], index: int, kind: InputKind) -> List[Question]:
    _check_index(questions, index)
    result = _copy(questions)
    result[index].input_kind = InputKind(kind)
    return result


def toggle_input_kind(questions: List[Question], index: int) -> List[Question]:
    _check_index(questions, index)
    kind = InputKind.SINGLE if questions[index].is_multi else InputKind.MULTI
    return set_input_kind(questions, index, kind)


def add_option(questions: List[Question], index: int) -> List[Question]:
    _check_index(questions, index)
    result = _copy(questions)
    options = result[index].options
    options.append(f"Option {len(options) + 1}")
    return result


def remove_option(questions: List[Question], q_index: int, o_index: int) -> List[Question]:
    _check_index(questions, q_index)
    _check_option(questions[q_index], o_index)
    result = _copy(questions)
    question = result[q_index]
    removed = question.options.pop(o_index)
    if removed not in question.options:
        question.logic = [r for r in question.logic if r.option != removed]
    return result


def rename_option(questions: List[Question], q_index: int, o_index: int, new_text: str) -> List[Question]:
    _check_index(questions, q_index)
    _check_option(questions[q_index], o_index)
    result = _copy(questions)
    question = result[q_index]
    old_text = question.options[o_index]
    question.options[o_index] = new_text
    rule = question.get_rule(old_text)
    if rule is not None and old_text not in question.options:
        rule.option = new_text
    return result


def set_question_text(questions: List[Question], index: int, new_text: str) -> List[Question]:
    """Apply a text change unconditionally."""
    _check_index(questions, index)
    result = _copy(questions)
    result[index].text = new_text
    return result


def request_text_change(questions: List[Question], index: int,
                        new_text: str) -> Tuple[List[Question], Optional[PendingTextChange]]:
    """
    Change question text, or hold the change back for confirmation.

    Returns:
        (questions, None) when applied, or the unchanged questions and a
        PendingTextChange when the question has logic attached
    """
    _check_index(questions, index)
    question = questions[index]
    if question.logic:
        return list(questions), PendingTextChange(index=index, new_text=new_text, old_text=question.text)
    return set_question_text(questions, index, new_text), None


def keep_logic(questions: List[Question], pending: PendingTextChange) -> List[Question]:
    return set_question_text(questions, pending.index, pending.new_text)


def clear_logic(questions: List[Question], pending: PendingTextChange) -> List[Question]:
    result = set_question_text(questions, pending.index, pending.new_text)
    result[pending.index].logic = []
    return result


def cancel_text_change(questions: List[Question], pending: PendingTextChange) -> List[Question]:
    return set_question_text(questions, pending.index, pending.old_text)


def parse_target_list(text: str) -> List[int]:
    """
    Convert the editor's 1-based "2, 4" notation to 0-based indices.

    Entries that are not whole numbers are skipped.
    """
    indices = []
    for part in (text or "").split(","):
        part = part.strip()
        if part.lstrip("-").isdigit():
            indices.append(int(part) - 1)
    return indices


def save_logic_for_option(questions: List[Question], q_index: int, option: str,
                          targets: Union[str, Iterable[int]]) -> List[Question]:
    """
    Create or replace the rule for one option.

    Args:
        targets: 1-based comma-separated string, or 0-based indices

    Self references and invalid indices are dropped silently; when
    nothing valid remains the option's rule is removed instead.
    """
    _check_index(questions, q_index)
    if option not in questions[q_index].options:
        raise EditorError(f"{option!r} is not an option of {questions[q_index].text!r}")

    raw = parse_target_list(targets) if isinstance(targets, str) else list(targets)
    show = clean_targets(raw, q_index, len(questions))

    result = _copy(questions)
    question = result[q_index]
    existing = question.get_rule(option)
    rules = [r for r in question.logic if r.option != option]
    if show:
        quota_check = existing.quota_check if existing is not None else None
        rules.append(LogicRule(option=option, show_questions=show, quota_check=quota_check))
    question.logic = rules
    return result


def remove_logic_for_option(questions: List[Question], q_index: int, option: str) -> List[Question]:
    _check_index(questions, q_index)
    result = _copy(questions)
    question = result[q_index]
    question.logic = [r for r in question.logic if r.option != option]
    return result


def save_quota(questions: List[Question], index: int, quota: Quota) -> List[Question]:
    _check_index(questions, index)
    result = _copy(questions)
    result[index].quota = copy.deepcopy(quota)
    return result


def remove_quota(questions: List[Question], index: int) -> List[Question]:
    _check_index(questions, index)
    result = _copy(questions)
    result[index].quota = None
    return result


__all__ = [
    "EditorError",
    "PendingTextChange",
    "add_question",
    "remove_question",
    "set_input_kind",
    "toggle_input_kind",
    "add_option",
    "remove_option",
    "rename_option",
    "set_question_text",
    "request_text_change",
    "keep_logic",
    "clear_logic",
    "cancel_text_change",
    "parse_target_list",
    "save_logic_for_option",
    "remove_logic_for_option",
    "save_quota",
    "remove_quota",
]
