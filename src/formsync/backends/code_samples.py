"""
Code-sample generator for the payload document.

Each target renders fixed boilerplate (imports, URL constant, request
dispatch, response echo) around exactly one pretty-printed payload
block. The block is introduced by a per-template anchor phrase so the
sample can later be edited and read back by
`formsync.embedded_block.extract_block`.

Supported targets:
    - MARKUP: canonical form markup (no payload block)
    - PYTHON: requests
    - JAVASCRIPT: Node.js fetch
    - VBSCRIPT: WinHttp request
"""

import re
from enum import Enum
from typing import Dict, List, Optional, Union

from formsync.backends.markup_generator import render_markup
from formsync.config import DEFAULT_SUBMIT_URL
from formsync.embedded_block import BlockAnchor
from formsync.model import Question
from formsync.payload import questions_to_json


class Target(Enum):
    """Views the generator can render."""
    MARKUP = "html"
    PYTHON = "python"
    JAVASCRIPT = "javascript"
    VBSCRIPT = "vbscript"


ANCHORS: Dict[Target, BlockAnchor] = {
    Target.PYTHON: BlockAnchor.compile(r"^[ \t]*payload[ \t]*=[ \t]*", "payload = ", flags=re.MULTILINE),
    Target.JAVASCRIPT: BlockAnchor.compile(r"\bconst\s+payload\s*=\s*", "const payload = ", suffix=";"),
    Target.VBSCRIPT: BlockAnchor.compile(r"\bSet\s+payload\s*=\s*", "Set payload = ", flags=re.IGNORECASE),
}


def anchor_for(target: Union[Target, str]) -> Optional[BlockAnchor]:
    """The block anchor of a code-sample target; None for markup."""
    return ANCHORS.get(Target(target))


def _python(payload: str, url: str) -> List[str]:
    return [
        "# Python requests example",
        "import requests",
        "",
        f'url = "{url}"',
        "payload = " + payload,
        "",
        "resp = requests.post(url, json=payload)",
        "print(resp.status_code)",
        "print(resp.text)",
        "",
    ]


def _javascript(payload: str, url: str) -> List[str]:
    return [
        "// JavaScript (Node.js) fetch example",
        "import fetch from 'node-fetch';",
        "",
        f'const url = "{url}";',
        "const payload = " + payload + ";",
        "",
        "async function submitForm() {",
        "  try {",
        "    const resp = await fetch(url, {",
        "      method: 'POST',",
        "      headers: { 'Content-Type': 'application/json' },",
        "      body: JSON.stringify(payload)",
        "    });",
        "    console.log(resp.status);",
        "    console.log(await resp.text());",
        "  } catch (err) {",
        "    console.error('Error:', err);",
        "  }",
        "}",
        "",
        "submitForm();",
        "",
    ]


def _vbscript(payload: str, url: str) -> List[str]:
    return [
        "' VBScript HTTP request example (payload shown as JSON block)",
        'Set objHTTP = CreateObject("WinHttp.WinHttpRequest.5.1")',
        f'url = "{url}"',
        "Set payload = " + payload,
        'objHTTP.Open "POST", url, False',
        'objHTTP.SetRequestHeader "Content-Type", "application/json"',
        "objHTTP.Send payload",
        'WScript.Echo objHTTP.Status & " " & objHTTP.ResponseText',
        "",
    ]


_TEMPLATES = {
    Target.PYTHON: _python,
    Target.JAVASCRIPT: _javascript,
    Target.VBSCRIPT: _vbscript,
}


def render(target: Union[Target, str], questions: List[Question],
           canonical_markup: Optional[str] = None, url: str = DEFAULT_SUBMIT_URL) -> str:
    """
    Render one view of the canonical model.

    Args:
        target: Target (or its string value)
        questions: Canonical question list
        canonical_markup: Already-canonical markup returned as-is for
            the MARKUP target; rebuilt from `questions` when omitted
        url: Submission URL written into the boilerplate

    Returns:
        Rendered text; identical questions give byte-identical output
    """
    target = Target(target)
    if target is Target.MARKUP:
        return canonical_markup if canonical_markup is not None else render_markup(questions)

    payload = questions_to_json(questions or [])
    return "\n".join(_TEMPLATES[target](payload, url))


__all__ = ["Target", "ANCHORS", "anchor_for", "render"]
