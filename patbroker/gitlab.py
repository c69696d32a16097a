"""Clients for the token issuing service."""

from __future__ import annotations

import logging
import secrets
from typing import Any, Dict, List, Protocol

import requests

from .contracts import IssuedToken, TokenRequest
from .errors import IssuanceError

logger = logging.getLogger(__name__)


class TokenIssuer(Protocol):
    """Mints project access tokens for validated requests."""

    def create_project_access_token(self, request: TokenRequest) -> IssuedToken:
        """Create a token for ``request`` and return it."""


class GitLabClient:
    """Issues project access tokens through the GitLab REST API."""

    def __init__(self, base_url: str, token: str, timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout

    def _payload(self, request: TokenRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"name": request.name, "scopes": request.scopes}
        if request.access_level:
            payload["access_level"] = request.access_level
        if request.expires_at is not None:
            payload["expires_at"] = request.expires_at.date().isoformat()
        return payload

    def create_project_access_token(self, request: TokenRequest) -> IssuedToken:
        url = f"{self.base_url}/api/v4/projects/{request.resource_id}/access_tokens"
        try:
            resp = requests.post(
                url,
                json=self._payload(request),
                headers={"PRIVATE-TOKEN": self.token},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise IssuanceError(str(e)) from e

        if not resp.ok:
            raise IssuanceError(_error_message(resp), status_code=resp.status_code)

        try:
            body = resp.json()
            if not isinstance(body, dict):
                raise ValueError(f"expected an object, got {type(body).__name__}")
            return IssuedToken(
                token=body["token"],
                token_id=body.get("id"),
                resource_id=request.resource_id,
                name=body.get("name", request.name),
                scopes=body.get("scopes", request.scopes),
                access_level=body.get("access_level", request.access_level),
                expires_at=body.get("expires_at"),
            )
        except (ValueError, KeyError) as e:
            raise IssuanceError(
                f"{resp.status_code}: unexpected response: {e}",
                status_code=resp.status_code,
            ) from e


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return f"{resp.status_code}: {resp.text}"
    if not isinstance(body, dict):
        return f"{resp.status_code}: {body}"
    message = body.get("message") or body.get("error") or body
    return f"{resp.status_code}: {message}"


class InMemoryTokenIssuer:
    """Issue tokens locally without contacting a server.

    Useful for tests and dry runs. Every request is recorded in ``issued``.
    """

    def __init__(self) -> None:
        self.issued: List[IssuedToken] = []
        self._next_id = 0

    def create_project_access_token(self, request: TokenRequest) -> IssuedToken:
        self._next_id += 1
        issued = IssuedToken(
            token=f"glpat-{secrets.token_urlsafe(15)}",
            token_id=self._next_id,
            resource_id=request.resource_id,
            name=request.name,
            scopes=list(request.scopes),
            access_level=request.access_level,
            expires_at=request.expires_at,
        )
        self.issued.append(issued)
        logger.debug(f"Issued in-memory token {issued.token_id} for id={request.resource_id}")
        return issued
