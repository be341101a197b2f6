"""Permission registry and caller-permission schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PermissionNode(BaseModel):
    """One registry entry; children present for non-leaf keys."""

    key: str
    label_key: str
    children: list[PermissionNode] | None = None


class PermissionRegistryResponse(BaseModel):
    """Full registry tree plus the flat key list."""

    tree: list[PermissionNode]
    keys: list[str]


class MyPermissionsResponse(BaseModel):
    """Caller's effective permission keys and role assignment."""

    user_id: str
    role: str
    role_id: str | None
    permission_keys: list[str] = Field(default_factory=list)
