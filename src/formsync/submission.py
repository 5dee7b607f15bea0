"""
Submission boundary: hands a finished document to the HTTP endpoint.

One POST per call. No retry, no backoff: any failure is raised once as
SubmissionError and it is up to the caller what to show.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests

from formsync.config import Config


logger = logging.getLogger(__name__)


class SubmissionError(Exception):
    """Raised when the endpoint cannot be reached or rejects the document."""
    pass


@dataclass
class SubmissionResult:
    success: bool
    identifier: Optional[str] = None
    raw: Any = None


def _identifier(body: Dict[str, Any]) -> Optional[str]:
    for key in ("id", "formId", "submissionId"):
        if body.get(key) is not None:
            return str(body[key])
    return None


class SubmissionClient:
    """
    POSTs payload or response documents as JSON.

    Args:
        url: Endpoint; defaults to Config.SUBMIT_URL
        timeout: Seconds; defaults to Config.SUBMIT_TIMEOUT
        session: Object with a requests-style `post`; a new
            requests.Session when omitted
    """

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None, session=None):
        self.url = url or Config.SUBMIT_URL
        self.timeout = timeout if timeout is not None else Config.submit_timeout()
        self.session = session or requests.Session()

    def submit(self, document: Dict[str, Any], timestamp: Optional[datetime] = None) -> SubmissionResult:
        body = dict(document)
        stamp = timestamp or datetime.now(timezone.utc)
        body["submittedAt"] = stamp.isoformat()

        try:
            r = self.session.post(self.url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Submission to %s failed: %s", self.url, e)
            raise SubmissionError(f"Could not reach {self.url}: {e}") from e

        if not 200 <= r.status_code < 300:
            logger.warning("Submission rejected: %s %s", r.status_code, r.reason)
            raise SubmissionError(f"Submission rejected: {r.status_code} {r.reason}")

        try:
            data = r.json()
        except ValueError as e:
            raise SubmissionError(f"Unexpected response format: {r.text[:200]}") from e

        if not isinstance(data, dict):
            raise SubmissionError("Unexpected response format: expected a JSON object")

        return SubmissionResult(
            success=bool(data.get("success", data.get("ok", False))),
            identifier=_identifier(data),
            raw=data,
        )


__all__ = ["SubmissionClient", "SubmissionResult", "SubmissionError"]
