"""
Behavioral Merger: carries logic and quotas across re-parses.

Markup has no place for logic rules or quotas, so every re-parse
produces questions without them. The merger reconciles the fresh
structural sequence against the previously held one:

    - A fresh question is matched to a previous one by a matcher
      (default: identical text, first match wins)
    - Matched: rules whose option still exists are kept, the quota is
      carried unconditionally
    - Unmatched: empty logic, no quota

Indices are NOT remapped. Each result question's index is its position
in the fresh sequence, and rule targets are kept only while they are
valid indices of that sequence other than the question's own.
"""

import copy
import logging
import math
from typing import Callable, Iterable, List, Optional, Sequence

from formsync.model import LogicRule, Question, new_uid


logger = logging.getLogger(__name__)

Matcher = Callable[[Sequence[Question], object], Optional[Question]]


def match_by_text(previous: Sequence[Question], fresh) -> Optional[Question]:
    """First previous question whose text equals the fresh record's text."""
    for candidate in previous:
        if candidate.text == fresh.text:
            return candidate
    return None


def match_by_identity(previous: Sequence[Question], fresh) -> Optional[Question]:
    """
    Match on the opaque uid, falling back to text.

    Records decoded from markup or payloads carry no uid, so for them
    this behaves exactly like match_by_text.
    """
    uid = getattr(fresh, "uid", None)
    if uid:
        for candidate in previous:
            if candidate.uid == uid:
                return candidate
    return match_by_text(previous, fresh)


def clean_targets(targets: Iterable, owner_index: int, question_count: int) -> List[int]:
    """
    Keep valid, distinct target indices in their original order.

    Drops non-numeric and non-finite values, fractions, negatives,
    indices past the end and the owning question's own index.
    """
    cleaned: List[int] = []
    for raw in targets or []:
        if isinstance(raw, bool):
            continue
        if isinstance(raw, int):
            index = raw
        else:
            try:
                number = float(raw)
            except (TypeError, ValueError):
                continue
            if not math.isfinite(number) or number != int(number):
                continue
            index = int(number)
        if index < 0 or index >= question_count or index == owner_index:
            continue
        if index not in cleaned:
            cleaned.append(index)
    return cleaned


def _carry_rules(rules: Iterable[LogicRule], options: List[str], owner_index: int,
                 question_count: int) -> List[LogicRule]:
    carried = []
    seen_options = set()
    for rule in rules:
        if rule.option not in options or rule.option in seen_options:
            continue
        seen_options.add(rule.option)
        carried.append(LogicRule(
            option=rule.option,
            show_questions=clean_targets(rule.show_questions, owner_index, question_count),
            quota_check=copy.deepcopy(rule.quota_check),
        ))
    return carried


def merge_questions(previous: Sequence[Question], fresh: Sequence,
                    matcher: Matcher = match_by_text) -> List[Question]:
    """
    Merge freshly parsed questions with previously held ones.

    Args:
        previous: Last canonical question list (may be empty)
        fresh: Structural records in their new order (anything with
            text, input_kind and options)
        matcher: Strategy choosing the previous question for a record

    Returns:
        New Question list; neither input is modified
    """
    previous = list(previous or [])
    count = len(fresh)
    merged: List[Question] = []

    for index, record in enumerate(fresh):
        options = list(record.options)
        found = matcher(previous, record)

        if found is None:
            merged.append(Question(
                text=record.text,
                input_kind=record.input_kind,
                options=options,
                uid=getattr(record, "uid", None) or new_uid(),
            ))
            continue

        logic = _carry_rules(found.logic, options, index, count)
        dropped = len(found.logic) - len(logic)
        if dropped:
            logger.debug("Dropped %d rule(s) from %r after merge", dropped, record.text)

        merged.append(Question(
            text=record.text,
            input_kind=record.input_kind,
            options=options,
            logic=logic,
            quota=copy.deepcopy(found.quota),
            uid=found.uid,
        ))

    return merged


def sanitize_logic(questions: Sequence[Question]) -> List[Question]:
    """
    Filter invalid rule references without matching anything.

    Used for questions that already carry their own logic (a decoded
    payload). Dangling options, duplicate rules, self references and
    out-of-range targets are dropped silently.
    """
    count = len(questions)
    result = []
    for index, question in enumerate(questions):
        cleaned = copy.deepcopy(question)
        cleaned.logic = _carry_rules(question.logic, question.options, index, count)
        result.append(cleaned)
    return result


__all__ = [
    "merge_questions",
    "sanitize_logic",
    "match_by_text",
    "match_by_identity",
    "clean_targets",
]
