"""
Quota Evaluator: checks question quotas against answer counts.

The answer count of a question is:
    - the size of the response list for multi-select answers
    - 1 for a non-empty scalar response
    - 0 otherwise

Only questions carrying a quota appear in the result. A quota whose
value is still unset never passes.
"""

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from formsync.model import Question, QuotaCondition
from formsync.visibility import response_for


@dataclass
class QuotaResult:
    """Outcome of one question's quota check."""
    question_index: int
    condition: QuotaCondition
    value: Optional[int]
    count: int
    passed: bool

    def to_dict(self) -> dict:
        return {
            "questionIndex": self.question_index,
            "condition": self.condition.value,
            "value": self.value,
            "count": self.count,
            "passed": self.passed,
        }


def answer_count(response: Any) -> int:
    if isinstance(response, (list, tuple, set, frozenset)):
        return len(response)
    if response is None or response == "":
        return 0
    return 1


def compare(count: int, condition: QuotaCondition, value: Optional[int]) -> bool:
    if value is None:
        return False
    if condition is QuotaCondition.EQUALS:
        return count == value
    if condition is QuotaCondition.LESS_THAN:
        return count < value
    return count > value


def evaluate_quotas(questions: List[Question], responses: Optional[Mapping] = None) -> List[QuotaResult]:
    results = []
    for index, question in enumerate(questions):
        if question.quota is None:
            continue
        quota = question.quota
        count = answer_count(response_for(responses, index))
        results.append(QuotaResult(
            question_index=index,
            condition=quota.condition,
            value=quota.value,
            count=count,
            passed=compare(count, quota.condition, quota.value),
        ))
    return results


__all__ = ["QuotaResult", "evaluate_quotas", "answer_count"]
