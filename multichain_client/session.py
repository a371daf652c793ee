"""Session and request envelope models (CAIP-25 / CAIP-27 shapes).

The client never interprets these beyond the envelope: sessions come back from the wallet
verbatim, and the models exist to build outbound params or to parse a session on demand.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ScopeObject(BaseModel):
    """Methods, notifications and accounts granted (or requested) for one scope."""
    model_config = ConfigDict(extra="allow")

    references: list[str] | None = None
    methods: list[str] = Field(default_factory=list)
    notifications: list[str] = Field(default_factory=list)
    accounts: list[str] | None = None


class SessionData(BaseModel):
    """What the wallet has currently granted to this client."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    session_scopes: dict[str, ScopeObject] = Field(default_factory=dict, alias="sessionScopes")
    scoped_properties: dict[str, Any] | None = Field(default=None, alias="scopedProperties")
    session_properties: dict[str, Any] | None = Field(default=None, alias="sessionProperties")
    expiry: str | None = None


class CreateSessionParams(BaseModel):
    """wallet_createSession params."""
    model_config = ConfigDict(populate_by_name=True)

    required_scopes: dict[str, ScopeObject] | None = Field(default=None, alias="requiredScopes")
    optional_scopes: dict[str, ScopeObject] | None = Field(default=None, alias="optionalScopes")
    scoped_properties: dict[str, Any] | None = Field(default=None, alias="scopedProperties")
    session_properties: dict[str, Any] | None = Field(default=None, alias="sessionProperties")


class MethodRequest(BaseModel):
    method: str = Field(min_length=1)
    params: Any = None


class InvokeMethodParams(BaseModel):
    """wallet_invokeMethod envelope: the core dispatches on this shape only."""

    scope: str = Field(min_length=1)
    request: MethodRequest
