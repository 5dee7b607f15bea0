"""
Payload codec: canonical questions <-> the `{ "form": [...] }` document.

The payload document is the interchange format embedded in code samples
and sent to the submission endpoint. Encoding is explicit and stable:
keys are emitted in a fixed order so pretty-printed output is
byte-identical for identical questions. Decoding is defensive: missing
or mistyped fields fall back to defaults instead of failing.

Text decoding (`decode_payload_text`) is the only place that reports
errors, as PayloadDecodeError with a human-readable reason.
"""
from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import yaml

from formsync.model import (
    InputKind,
    LogicRule,
    Question,
    Quota,
    QuotaCondition,
    PLACEHOLDER_OPTION,
    PLACEHOLDER_TEXT,
)


logger = logging.getLogger(__name__)

JSON_INDENT = 2


class PayloadDecodeError(ValueError):
    """Raised when an embedded payload block cannot be decoded."""
    pass


def _as_index(raw: Any) -> Optional[int]:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    if isinstance(raw, int):
        return raw if raw >= 0 else None
    if not math.isfinite(raw) or raw != int(raw) or raw < 0:
        return None
    return int(raw)


def _as_quota_value(raw: Any) -> Optional[int]:
    if isinstance(raw, str):
        try:
            raw = float(raw.strip())
        except ValueError:
            return None
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    if isinstance(raw, int):
        return raw
    if not math.isfinite(raw):
        return None
    return int(raw)


def quota_to_dict(q: Quota | None) -> Dict[str, Any] | None:
    if q is None:
        return None
    return {
        "condition": q.condition.value,
        "value": q.value,
        "meetRequirement": q.meet_requirement,
    }


def quota_from_dict(d: Any) -> Quota | None:
    if not isinstance(d, dict):
        return None
    try:
        condition = QuotaCondition(d.get("condition", "="))
    except ValueError:
        condition = QuotaCondition.EQUALS
    return Quota(
        condition=condition,
        value=_as_quota_value(d.get("value")),
        meet_requirement=bool(d.get("meetRequirement", False)),
    )


def rule_to_dict(r: LogicRule) -> Dict[str, Any]:
    return {
        "option": r.option,
        "showQuestions": list(r.show_questions),
        "quotaCheck": quota_to_dict(r.quota_check),
    }


def rule_from_dict(d: Any) -> LogicRule | None:
    if not isinstance(d, dict) or not isinstance(d.get("option"), str):
        return None
    raw_targets = d.get("showQuestions")
    targets: List[int] = []
    for raw in raw_targets if isinstance(raw_targets, list) else []:
        index = _as_index(raw)
        if index is not None and index not in targets:
            targets.append(index)
    return LogicRule(
        option=d["option"],
        show_questions=targets,
        quota_check=quota_from_dict(d.get("quotaCheck")),
    )


def question_to_dict(q: Question) -> Dict[str, Any]:
    return {
        "question": q.text,
        "answer": [],
        "type": q.input_kind.value,
        "options": list(q.options),
        "logic": [rule_to_dict(r) for r in q.logic],
        "quota": quota_to_dict(q.quota),
    }


def question_from_dict(d: Any) -> Question:
    if not isinstance(d, dict):
        d = {}

    text = d.get("question")
    if not isinstance(text, str):
        text = d.get("text")
    if not isinstance(text, str):
        text = PLACEHOLDER_TEXT

    raw_options = d.get("options")
    if isinstance(raw_options, list) and raw_options:
        options = ["" if o is None else str(o) for o in raw_options]
    else:
        options = [PLACEHOLDER_OPTION]

    raw_logic = d.get("logic")
    logic = [r for r in (rule_from_dict(x) for x in raw_logic) if r is not None] \
        if isinstance(raw_logic, list) else []

    return Question(
        text=text,
        input_kind=InputKind.from_type(d.get("type")),
        options=options,
        logic=logic,
        quota=quota_from_dict(d.get("quota")),
    )


def to_payload(questions: List[Question]) -> Dict[str, Any]:
    return {"form": [question_to_dict(q) for q in questions or []]}


def from_payload(payload: Any) -> List[Question]:
    """
    Decode a payload document (or its bare `form` list) into Questions.

    Anything that is neither a dict with a `form` list nor a list
    decodes to an empty sequence.
    """
    form = payload.get("form") if isinstance(payload, dict) else payload
    if not isinstance(form, list):
        return []
    return [question_from_dict(item) for item in form]


def payload_to_json(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, indent=JSON_INDENT, ensure_ascii=False)


def questions_to_json(questions: List[Question]) -> str:
    return payload_to_json(to_payload(questions))


def payload_to_yaml(questions: List[Question]) -> str:
    return yaml.safe_dump(to_payload(questions), sort_keys=False, allow_unicode=True)


def payload_from_yaml(text: str) -> List[Question]:
    try:
        d = yaml.safe_load(text)
    except (yaml.YAMLError, ValueError) as e:
        raise PayloadDecodeError(f"Invalid YAML: {e}")
    _require_form(d)
    return from_payload(d)


# ---------------------------------------------------------------------------
# Tolerant text decoding
# ---------------------------------------------------------------------------

_PY_LITERALS = {"None": "null", "True": "true", "False": "false"}
_UNESCAPED_DOUBLE_QUOTE = re.compile(r'(?<!\\)"')


def _read_string(text: str, start: int) -> int:
    """Index of the closing quote of the string opening at `start`, or -1."""
    quote = text[start]
    pos = start + 1
    while pos < len(text):
        ch = text[pos]
        if ch == "\\":
            pos += 2
            continue
        if ch == quote:
            return pos
        pos += 1
    return -1


def tolerant_cleanup(text: str) -> str:
    """
    Turn a hand-edited, JSON-like literal into JSON.

    Outside of strings: strips // and /* */ comments, drops trailing
    commas before } or ], and maps None/True/False to JSON literals.
    Single-quoted strings become double-quoted. Text inside strings is
    never touched, so option values like "a//b" survive.
    """
    out: List[str] = []
    pos = 0
    n = len(text)
    while pos < n:
        ch = text[pos]

        if ch in "\"'":
            end = _read_string(text, pos)
            if end == -1:
                out.append(text[pos:])
                break
            body = text[pos + 1:end]
            if ch == "'":
                body = _UNESCAPED_DOUBLE_QUOTE.sub('\\"', body.replace("\\'", "'"))
            out.append('"' + body + '"')
            pos = end + 1
            continue

        if text.startswith("//", pos):
            newline = text.find("\n", pos)
            pos = n if newline == -1 else newline
            continue

        if text.startswith("/*", pos):
            close = text.find("*/", pos + 2)
            pos = n if close == -1 else close + 2
            continue

        if ch == ",":
            ahead = pos + 1
            while ahead < n and text[ahead].isspace():
                ahead += 1
            if ahead < n and text[ahead] in "}]":
                pos += 1
                continue

        if ch.isalpha() or ch == "_":
            end = pos
            while end < n and (text[end].isalnum() or text[end] == "_"):
                end += 1
            word = text[pos:end]
            out.append(_PY_LITERALS.get(word, word))
            pos = end
            continue

        out.append(ch)
        pos += 1

    return "".join(out)


def _require_form(d: Any) -> None:
    if not isinstance(d, dict):
        raise PayloadDecodeError("Payload must be an object")
    if not isinstance(d.get("form"), list):
        raise PayloadDecodeError("Payload is missing a 'form' array")


def decode_payload_text(block_text: str) -> List[Question]:
    """
    Decode the text of an embedded block into Questions.

    Raises:
        PayloadDecodeError: If the text is not valid (tolerant) JSON or
            has no `form` array
    """
    if not isinstance(block_text, str) or not block_text.strip():
        raise PayloadDecodeError("Payload block is empty")
    try:
        d = json.loads(tolerant_cleanup(block_text))
    except json.JSONDecodeError as e:
        raise PayloadDecodeError(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})")
    except (ValueError, RecursionError) as e:
        # integer literals past the digit limit, nesting past the recursion limit
        raise PayloadDecodeError(f"Invalid JSON: {e}")
    _require_form(d)
    return from_payload(d)


@dataclass
class DecodeResult:
    """Result-or-error wrapper returned across the component boundary."""

    questions: Optional[List[Question]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def try_decode_payload(block_text: str) -> DecodeResult:
    try:
        return DecodeResult(questions=decode_payload_text(block_text))
    except PayloadDecodeError as e:
        logger.info("Payload block rejected: %s", e)
        return DecodeResult(error=str(e))


__all__ = [
    "PayloadDecodeError",
    "DecodeResult",
    "to_payload",
    "from_payload",
    "payload_to_json",
    "questions_to_json",
    "payload_to_yaml",
    "payload_from_yaml",
    "tolerant_cleanup",
    "decode_payload_text",
    "try_decode_payload",
]
