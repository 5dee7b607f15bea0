"""
Markup Parser (Layer 1: Raw Markup → Structural Questions).

Recognises one narrow convention and nothing else:

    <form>
      <div class="question">
        <p>Question text</p>
        <label><input type="radio" name="q0" value="Red" /> Red</label>
        ...
      </div>
    </form>

Rules:
    - The first <form> is the root; no root means no questions
    - Every element whose class list contains "question" is a container
    - The first <p> inside a container is the title
    - Every <input> inside a container is one option; its value comes
      from the `value` attribute, falling back to the label text
    - The FIRST input's type decides the kind for the whole question

Malformed markup never raises here. It yields an empty sequence,
which is indistinguishable from a form with no questions.
"""

import logging
from typing import List, Optional

import lxml.html
from lxml import etree

from formsync.model import (
    InputKind,
    StructuralQuestion,
    PLACEHOLDER_TEXT,
    PLACEHOLDER_OPTION,
)


logger = logging.getLogger(__name__)

QUESTION_XPATH = ".//*[contains(concat(' ', normalize-space(@class), ' '), ' question ')]"
EMPTY_FORM = "<form></form>"


def _load_fragment(markup_text: str):
    return lxml.html.fromstring(markup_text)


def _find_form(root) -> Optional[etree._Element]:
    # iter() includes the root itself, which is the common case for a bare fragment
    for node in root.iter("form"):
        return node
    return None


def _question_nodes(form) -> list:
    return form.xpath(QUESTION_XPATH)


def input_field_name(index: int, kind: InputKind) -> str:
    """Shared field name for the inputs of question `index`."""
    if kind is InputKind.MULTI:
        return f"q{index}[]"
    return f"q{index}"


def _option_value(inp) -> str:
    value = inp.get("value")
    if value is not None:
        return value
    parent = inp.getparent()
    if parent is not None and parent.tag == "label":
        return parent.text_content().strip()
    return (inp.tail or "").strip()


def _parse_container(node) -> StructuralQuestion:
    title = node.find(".//p")
    text = title.text_content().strip() if title is not None else ""

    inputs = node.xpath(".//input")
    kind = InputKind.from_type(inputs[0].get("type")) if inputs else InputKind.SINGLE
    options = [_option_value(inp) for inp in inputs]

    return StructuralQuestion(
        text=text or PLACEHOLDER_TEXT,
        input_kind=kind,
        options=options or [PLACEHOLDER_OPTION],
    )


def parse_markup(markup_text: str) -> List[StructuralQuestion]:
    """
    Parse markup into an ordered list of StructuralQuestion.

    Args:
        markup_text: Markup following the question-container convention

    Returns:
        Structural questions in document order, or [] when the markup
        has no form root or cannot be parsed at all
    """
    if not isinstance(markup_text, str) or not markup_text.strip():
        return []

    try:
        root = _load_fragment(markup_text)
    except (etree.ParserError, etree.XMLSyntaxError, ValueError) as e:
        logger.debug("Markup could not be parsed, treating as empty: %s", e)
        return []

    form = _find_form(root)
    if form is None:
        return []

    return [_parse_container(node) for node in _question_nodes(form)]


def canonicalize_markup(markup_text: str) -> str:
    """
    Normalise input names and re-serialise the form element.

    Inputs of question i are renamed to q{i} (single-select) or q{i}[]
    (checkbox). Everything else in the form is kept as written.
    Markup without a form root becomes an empty form.
    """
    if not isinstance(markup_text, str) or not markup_text.strip():
        return EMPTY_FORM

    try:
        root = _load_fragment(markup_text)
    except (etree.ParserError, etree.XMLSyntaxError, ValueError) as e:
        logger.debug("Markup could not be canonicalized: %s", e)
        return EMPTY_FORM

    form = _find_form(root)
    if form is None:
        return EMPTY_FORM

    for index, node in enumerate(_question_nodes(form)):
        for inp in node.xpath(".//input"):
            inp.set("name", input_field_name(index, InputKind.from_type(inp.get("type"))))

    return lxml.html.tostring(form, encoding="unicode", with_tail=False)


__all__ = [
    "parse_markup",
    "canonicalize_markup",
    "input_field_name",
]
