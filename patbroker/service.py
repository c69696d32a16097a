"""Token creation service tying extraction, validation and issuance together."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional

from .config import BrokerConfig, load_config
from .contracts import TokenRequest, token_details
from .errors import (
    ConfigurationError,
    FieldDecodeError,
    IssuanceError,
    MultiError,
    RequestRejected,
)
from .extract import extract_token_request
from .fields import FieldData
from .gitlab import GitLabClient, TokenIssuer
from .validation import validate_token_request

logger = logging.getLogger(__name__)

ConfigLoader = Callable[[], Optional[BrokerConfig]]
IssuerFactory = Callable[[BrokerConfig], TokenIssuer]


def default_issuer(config: BrokerConfig) -> TokenIssuer:
    return GitLabClient(config.base_url, config.token, timeout=config.timeout)


class TokenService:
    """Handles project access token requests end to end.

    Configuration is resolved on every call so changes made between requests
    are picked up. Nothing is issued unless the request passes validation.
    """

    def __init__(
        self,
        config_loader: ConfigLoader = load_config,
        issuer_factory: Optional[IssuerFactory] = None,
    ) -> None:
        self._config_loader = config_loader
        self._issuer_factory = issuer_factory

    def _require_config(self) -> BrokerConfig:
        config = self._config_loader()
        if config is None:
            raise ConfigurationError(
                "GitLab backend configuration has not been set up"
            )
        return config

    def _prepare(
        self, fields: Mapping[str, Any], now: Optional[datetime] = None
    ) -> tuple[BrokerConfig, TokenRequest]:
        config = self._require_config()
        try:
            request = extract_token_request(FieldData(fields))
        except FieldDecodeError as e:
            errors = MultiError().append(e.field, str(e))
            raise RequestRejected(errors) from e

        errors = validate_token_request(request, config.policy_limits(), now=now)
        if errors:
            logger.info(
                f"Rejected token request for id={request.resource_id}: "
                f"{len(errors)} violation(s)"
            )
            raise RequestRejected(errors)
        return config, request

    def check_token(
        self, fields: Mapping[str, Any], now: Optional[datetime] = None
    ) -> TokenRequest:
        """Validate ``fields`` without issuing anything.

        Raises:
            ConfigurationError: no backend configuration is available.
            RequestRejected: the request is malformed or violates policy.
        """
        _, request = self._prepare(fields, now=now)
        return request

    def create_token(
        self, fields: Mapping[str, Any], now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """Validate ``fields`` and mint a project access token.

        Returns:
            Token details with ``token``, ``id``, ``name``, ``scopes``,
            ``access_level`` and, when set, ``expires_at``.

        Raises:
            ConfigurationError: no backend configuration is available.
            RequestRejected: the request is malformed or violates policy.
            IssuanceError: the issuing service failed.
        """
        config, request = self._prepare(fields, now=now)

        logger.debug(
            f"Generating access token id={request.resource_id} "
            f"name={request.name} scopes={request.scopes}"
        )
        issuer = (self._issuer_factory or default_issuer)(config)
        try:
            issued = issuer.create_project_access_token(request)
        except IssuanceError as e:
            logger.error(f"Token creation failed for id={request.resource_id}: {e}")
            raise IssuanceError(
                f"Failed to create a token - {e}", status_code=e.status_code
            ) from e
        return token_details(issued)
