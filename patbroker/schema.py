"""Declarative schema, help text and examples for the token endpoint."""

from __future__ import annotations

from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field

FieldType = Literal["int", "string", "comma_string_slice", "time"]


class FieldSchema(BaseModel):
    """Type and description of a single request field."""

    type: FieldType
    description: str = ""


class RequestExample(BaseModel):
    """Example payload shown in help output."""

    description: str
    data: Dict[str, Any] = Field(default_factory=dict)


ACCESS_TOKEN_SCHEMA: Dict[str, FieldSchema] = {
    "id": FieldSchema(
        type="int", description="Project ID to create a project access token for"
    ),
    "name": FieldSchema(
        type="string", description="The name of the project access token"
    ),
    "scopes": FieldSchema(type="comma_string_slice", description="List of scopes"),
    "expires_at": FieldSchema(
        type="time", description="The token expires at midnight UTC on that date"
    ),
    "access_level": FieldSchema(
        type="int", description="Access level of the project access token"
    ),
}

HELP_SYNOPSIS = (
    "Generate a project access token for a given project with token name, scopes."
)

HELP_DESCRIPTION = """
Generates a project access token. You must supply the id of the project to
generate a token for, a name, which is used as the token's name in GitLab, and
the scopes for the generated project access token.
"""

TOKEN_EXAMPLES: List[RequestExample] = [
    RequestExample(
        description="Create a project access token",
        data={
            "id": 1,
            "name": "MyProjectAccessToken",
            "scopes": ["read_api", "read_repository"],
        },
    ),
]
