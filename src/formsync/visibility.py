"""
Visibility Resolver: which questions are shown for given responses.

A question is either:
    - unconditional: no rule anywhere lists it in show_questions
    - conditional: at least one rule lists it

Unconditional questions are always visible. A conditional question is
visible when a rule targeting it fires, i.e. the rule's option is the
current response of the rule's owning question (equality for
single-select, membership for multi-select).

IMPORTANT: this is ONE hop only. Revealing a question does not make its
own rules fire; only recorded responses drive matching. Do not turn
this into a transitive closure over the rule graph.
"""

from typing import Any, Iterable, List, Mapping, Optional, Set

from formsync.model import Question


def response_for(responses: Optional[Mapping], index: int) -> Any:
    """Response of question `index`; keys may be ints or index strings."""
    if not responses:
        return None
    if index in responses:
        return responses[index]
    return responses.get(str(index))


def selected_values(question: Question, response: Any) -> List[str]:
    """Selected option values of a response, as a list."""
    if response is None:
        return []
    if question.is_multi:
        if isinstance(response, (list, tuple, set, frozenset)):
            return [v for v in response if v is not None]
        return [response]
    if isinstance(response, (list, tuple)):
        # a single-select answer submitted as a one-element list
        return list(response[:1])
    return [response]


def conditional_indices(questions: Iterable[Question]) -> Set[int]:
    """Union of every show_questions across every rule."""
    targets: Set[int] = set()
    for question in questions:
        for rule in question.logic:
            targets.update(rule.show_questions)
    return targets


def resolve_visible(questions: List[Question], responses: Optional[Mapping] = None) -> Set[int]:
    """
    Compute the currently visible question indices.

    Args:
        questions: Canonical question list with logic
        responses: {question index -> scalar | list of values}

    Returns:
        Set of visible indices (never contains out-of-range indices)
    """
    count = len(questions)
    conditional = conditional_indices(questions)
    visible = {i for i in range(count) if i not in conditional}

    for index, question in enumerate(questions):
        if not question.logic:
            continue
        selected = selected_values(question, response_for(responses, index))
        if not selected:
            continue
        for rule in question.logic:
            if rule.option in selected:
                visible.update(t for t in rule.show_questions if 0 <= t < count)

    return visible


__all__ = [
    "resolve_visible",
    "conditional_indices",
    "response_for",
    "selected_values",
]
