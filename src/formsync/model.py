"""
Core Form Model Objects

Defines the canonical question model shared by every representation:
    - Questions (text, input kind, options)
    - Logic rules (option -> questions to reveal)
    - Quotas (answer-count thresholds)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about markup, payload documents or code samples
        - Represent structure and attached behaviour, not rendering
        - Are treated as snapshots: operations return new lists

Question position is its index. Indices are NOT stable identifiers;
they shift when questions are added or removed. The opaque `uid`
exists so a caller can match questions across edits without relying
on position or title text.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


PLACEHOLDER_TEXT = "Untitled Question"
PLACEHOLDER_OPTION = "Option 1"
NEW_QUESTION_TEXT = "New Question"


def new_uid() -> str:
    return uuid.uuid4().hex


class InputKind(Enum):
    """
    How a question collects answers.

    The value is the serialized `type` used in markup and payloads.
    """

    SINGLE = "radio"
    MULTI = "checkbox"

    @classmethod
    def from_type(cls, type_name: Optional[str]) -> "InputKind":
        """Anything other than an explicit checkbox is single-select."""
        if isinstance(type_name, str) and type_name.strip().lower() == "checkbox":
            return cls.MULTI
        return cls.SINGLE


class QuotaCondition(Enum):
    """
    Comparison applied between an answer count and a quota value.

    Keep this minimal. These are the three operators the editor offers.
    """

    EQUALS = "="
    LESS_THAN = "<"
    GREATER_THAN = ">"


@dataclass
class Quota:
    """
    A numeric threshold over the number of answers given to a question.

    Properties:
        condition:
            QuotaCondition applied as `count <condition> value`

        value:
            Threshold. None only while the quota is unset.
            Non-negative integers are expected but not enforced here.

        meet_requirement:
            Whether the quota must be met (editor/automation flag)
    """

    condition: QuotaCondition = QuotaCondition.EQUALS
    value: Optional[int] = None
    meet_requirement: bool = False


@dataclass
class LogicRule:
    """
    Binds one option value of the owning question to questions to reveal.

    Properties:
        option:
            Option value (not position) this rule fires on

        show_questions:
            Ordered, de-duplicated question indices to reveal when the
            option is selected. Never contains the owning question's index.

        quota_check:
            Option-scoped quota. Carried through every representation
            but not consulted by visibility resolution.
    """

    option: str
    show_questions: List[int] = field(default_factory=list)
    quota_check: Optional[Quota] = None


@dataclass
class StructuralQuestion:
    """
    The structural facts markup can express: text, kind, options.

    Logic and quotas never appear in markup, so the parser produces
    these and the merger turns them into full Questions.
    """

    text: str
    input_kind: InputKind = InputKind.SINGLE
    options: List[str] = field(default_factory=list)
    uid: Optional[str] = field(default=None, compare=False)


@dataclass
class Question:
    """
    The canonical unit of a form.

    Properties:
        text:
            Display string. Falls back to a placeholder when absent.

        input_kind:
            InputKind.SINGLE (scalar response) or InputKind.MULTI (set)

        options:
            Ordered option values. Duplicate values are legal;
            rules keyed on a duplicated value match the first/any one.

        logic:
            LogicRule list, at most one per option value in clean state

        quota:
            Optional question-scoped Quota

        uid:
            Opaque identity assigned at creation. Excluded from equality
            so structurally identical questions compare equal.

    INVARIANTS:
        - Every rule.option is one of options
        - rule.show_questions are valid indices, excluding this question's own
    """

    text: str = PLACEHOLDER_TEXT
    input_kind: InputKind = InputKind.SINGLE
    options: List[str] = field(default_factory=lambda: [PLACEHOLDER_OPTION])
    logic: List[LogicRule] = field(default_factory=list)
    quota: Optional[Quota] = None
    uid: str = field(default_factory=new_uid, compare=False)

    @property
    def is_multi(self) -> bool:
        return self.input_kind is InputKind.MULTI

    def get_rule(self, option: str) -> Optional[LogicRule]:
        """
        Retrieve the rule bound to an option value.

        Returns:
            First matching LogicRule or None
        """
        for rule in self.logic:
            if rule.option == option:
                return rule
        return None

    def structure(self) -> StructuralQuestion:
        """Strip logic and quota, keeping what markup can represent."""
        return StructuralQuestion(
            text=self.text,
            input_kind=self.input_kind,
            options=list(self.options),
            uid=self.uid,
        )


def new_question(text: str = NEW_QUESTION_TEXT) -> Question:
    """An empty question as created by the editor's "add" action."""
    return Question(text=text, input_kind=InputKind.SINGLE, options=[PLACEHOLDER_OPTION])
