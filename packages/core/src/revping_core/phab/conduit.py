"""Minimal Phabricator Conduit client.

Conduit takes form-encoded POSTs to ``/api/<method>`` with the call
parameters JSON-encoded in a ``params`` field. The API token rides along
inside ``params`` under ``__conduit__``. Responses always come back as HTTP
200 with ``error_code``/``error_info`` set on failure, so both transport and
API errors are surfaced as ConduitError.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 30


class ConduitError(Exception):
    """A Conduit call failed, either on the wire or inside Phabricator."""

    def __init__(self, method: str, message: str, code: str | None = None):
        super().__init__(f"{method}: {message}")
        self.method = method
        self.code = code


class ConduitClient:
    def __init__(self, base_url: str, token: str | None, timeout: float = _DEFAULT_TIMEOUT, session=None):
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._session = session or requests.Session()

    def call(self, method: str, params: dict[str, Any] | None = None) -> Any:
        """Invoke ``method`` and return its ``result`` payload."""
        payload = dict(params or {})
        if self._token:
            payload["__conduit__"] = {"token": self._token}

        url = f"{self._base_url}/api/{method}"
        logger.debug("Conduit call %s", method)
        try:
            resp = self._session.post(
                url,
                data={"params": json.dumps(payload), "output": "json", "__conduit__": "1"},
                timeout=self._timeout,
            )
            resp.raise_for_status()
            body = resp.json()
        except requests.RequestException as e:
            raise ConduitError(method, f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise ConduitError(method, "response was not valid JSON") from e

        if not isinstance(body, dict):
            raise ConduitError(method, f"unexpected response body of type {type(body).__name__}")
        if body.get("error_code"):
            raise ConduitError(method, body.get("error_info") or body["error_code"], code=body["error_code"])
        return body.get("result")
