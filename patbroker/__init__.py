"""patbroker: policy-checked GitLab project access tokens."""

from .config import BrokerConfig, load_config
from .contracts import AccessLevel, IssuedToken, PolicyLimits, TokenRequest, token_details
from .errors import (
    BrokerError,
    ConfigurationError,
    FieldDecodeError,
    IssuanceError,
    MultiError,
    RequestRejected,
    Violation,
)
from .extract import extract_token_request
from .fields import FieldData
from .gitlab import GitLabClient, InMemoryTokenIssuer, TokenIssuer
from .service import TokenService
from .validation import validate_token_request

__version__ = "0.1.0"
__all__ = [
    "AccessLevel",
    "BrokerConfig",
    "BrokerError",
    "ConfigurationError",
    "FieldData",
    "FieldDecodeError",
    "GitLabClient",
    "InMemoryTokenIssuer",
    "IssuanceError",
    "IssuedToken",
    "MultiError",
    "PolicyLimits",
    "RequestRejected",
    "TokenIssuer",
    "TokenRequest",
    "TokenService",
    "Violation",
    "extract_token_request",
    "load_config",
    "token_details",
    "validate_token_request",
]
