"""
End-user response collection.

Responses map a question index to a scalar (single-select) or a list of
values (multi-select). Helpers here build the documents handed to the
submission boundary; they never mutate their inputs.
"""

from typing import Any, Dict, List, Mapping, Optional

from formsync.model import Question
from formsync.payload import question_to_dict, to_payload
from formsync.quota import evaluate_quotas
from formsync.visibility import resolve_visible, response_for


def record_response(questions: List[Question], responses: Optional[Mapping], index: int,
                    value: Any) -> Dict[int, Any]:
    """
    Record one end-user selection.

    Single-select stores the value. Multi-select toggles the value in
    the question's answer list.
    """
    updated = {int(k): v for k, v in (responses or {}).items()}
    if questions[index].is_multi:
        current = list(updated.get(index) or [])
        if value in current:
            current.remove(value)
        else:
            current.append(value)
        updated[index] = current
    else:
        updated[index] = value
    return updated


def answers_for(response: Any) -> List[str]:
    if response is None or response == "":
        return []
    if isinstance(response, (list, tuple, set, frozenset)):
        return [v for v in response if v is not None]
    return [response]


def build_answered_payload(questions: List[Question], responses: Optional[Mapping]) -> Dict[str, Any]:
    """The payload document with each `answer` filled from responses."""
    payload = to_payload(questions)
    for index, entry in enumerate(payload["form"]):
        entry["answer"] = answers_for(response_for(responses, index))
    return payload


def build_response_document(questions: List[Question], responses: Optional[Mapping],
                            form_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Snapshot of a completed form for submission.

    Only visible questions contribute answers; hidden questions are
    left out even when a stale response is still recorded for them.
    """
    visible = resolve_visible(questions, responses)
    answers = [
        {
            "questionIndex": index,
            "questionText": question.text or "",
            "answer": answers_for(response_for(responses, index)),
        }
        for index, question in enumerate(questions)
        if index in visible
    ]
    return {
        "formId": form_id,
        "formSnapshot": [question_to_dict(q) for q in questions],
        "answers": answers,
        "evaluatedQuotas": [r.to_dict() for r in evaluate_quotas(questions, responses)],
        "meta": {},
    }


__all__ = [
    "record_response",
    "build_answered_payload",
    "build_response_document",
]
