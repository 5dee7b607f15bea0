"""
Markup generator: canonical questions -> form markup.

Output is the canonical reconstruction, not the markup a user typed:
fixed two-space indentation, one container per question, one label per
option, and input names derived from the question index (q{i} for
single-select, q{i}[] for multi-select). Parsing this output with
`formsync.markup_parser.parse_markup` reproduces the structure.
"""

from html import escape
from typing import List

from formsync.markup_parser import input_field_name
from formsync.model import Question


def _escape(s: str) -> str:
    return escape(s if isinstance(s, str) else "", quote=True)


def render_markup(questions: List[Question]) -> str:
    """
    Generate canonical form markup.

    Args:
        questions: Canonical question list

    Returns:
        Markup string, deterministic for a given question list
    """
    lines = ["<form>"]

    for index, question in enumerate(questions or []):
        kind = question.input_kind
        name = input_field_name(index, kind)
        lines.append('  <div class="question">')
        lines.append(f"    <p>{_escape(question.text)}</p>")
        for option in question.options:
            value = _escape(option)
            lines.append(
                f'    <label><input type="{kind.value}" name="{name}" value="{value}" /> {value}</label>'
            )
        lines.append("  </div>")

    lines.append("</form>")
    return "\n".join(lines)


__all__ = ["render_markup"]
