"""Permissions API: registry, caller permissions, role CRUD, grants, and seeding.

Every mutating route invalidates the permission cache through the service
layer; requirements are declared in app.api.v1.access.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from app.api.v1.dependencies import (
    authorize,
    get_authorization_service,
    get_current_identity,
    get_role_query_service,
    get_role_service,
)
from app.application.dtos.identity import CallerIdentity
from app.application.services.authorization_service import AuthorizationService
from app.application.services.role_service import RoleQueryService, RoleService
from app.core.limiter import limit_seed, limit_writes
from app.domain.permission_registry import get_all_permission_keys, iter_entries, registry_tree
from app.schemas.permission import MyPermissionsResponse, PermissionRegistryResponse
from app.schemas.role import (
    RoleCreateRequest,
    RoleDetailResponse,
    RolePermissionsSetRequest,
    RolePermissionsSetResponse,
    RoleResponse,
    RoleUpdate,
    SeedResponse,
)

router = APIRouter()


@router.get("/registry", response_model=PermissionRegistryResponse)
async def get_registry(
    _: Annotated[CallerIdentity, Depends(get_current_identity)],
):
    """Full permission catalog (tree for the admin UI plus flat keys in catalog order)."""
    return PermissionRegistryResponse.model_validate(
        {"tree": registry_tree(), "keys": [e.key for e in iter_entries()]}
    )


@router.get("/mine", response_model=MyPermissionsResponse)
async def get_my_permissions(
    identity: Annotated[CallerIdentity, Depends(get_current_identity)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
):
    """Caller's effective permission keys (cached, sorted)."""
    granted = await auth_svc.get_user_permissions(identity.id)
    return MyPermissionsResponse(
        user_id=identity.id,
        role=identity.role,
        role_id=identity.role_id,
        permission_keys=sorted(granted & get_all_permission_keys()),
    )


@router.get("/roles", response_model=list[RoleResponse])
async def list_roles(
    role_svc: Annotated[RoleQueryService, Depends(get_role_query_service)],
    _: Annotated[object, Depends(authorize("roles.list"))] = None,
):
    """List roles with user and grant counts, system roles first."""
    roles = await role_svc.find_all()
    return [RoleResponse.model_validate(r) for r in roles]


@router.get("/roles/{role_id}", response_model=RoleDetailResponse)
async def get_role(
    role_id: str,
    role_svc: Annotated[RoleQueryService, Depends(get_role_query_service)],
    _: Annotated[object, Depends(authorize("roles.get"))] = None,
):
    """Get a role with its granted permission keys."""
    detail = await role_svc.find_by_id(role_id)
    return RoleDetailResponse.model_validate(detail)


@router.post("/roles", response_model=RoleResponse, status_code=201)
@limit_writes
async def create_role(
    request: Request,
    body: RoleCreateRequest,
    role_svc: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[object, Depends(authorize("roles.create"))] = None,
):
    """Create a non-system role; slug derived from name. 409 on duplicate."""
    created = await role_svc.create(body.name, body.description)
    return RoleResponse.model_validate(created)


@router.patch("/roles/{role_id}", response_model=RoleResponse)
@limit_writes
async def update_role(
    request: Request,
    role_id: str,
    body: RoleUpdate,
    role_svc: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[object, Depends(authorize("roles.update"))] = None,
):
    """Update role name (re-slugs), description, or is_active."""
    updated = await role_svc.update(role_id, body.model_dump(exclude_unset=True))
    return RoleResponse.model_validate(updated)


@router.delete("/roles/{role_id}", status_code=204)
@limit_writes
async def delete_role(
    request: Request,
    role_id: str,
    role_svc: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[object, Depends(authorize("roles.delete"))] = None,
):
    """Delete a non-system role with no assigned users."""
    await role_svc.delete(role_id)
    return Response(status_code=204)


@router.put("/roles/{role_id}/permissions", response_model=RolePermissionsSetResponse)
@limit_writes
async def set_role_permissions(
    request: Request,
    role_id: str,
    body: RolePermissionsSetRequest,
    role_svc: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[object, Depends(authorize("roles.set_permissions"))] = None,
):
    """Replace the role's grants; ancestors of every submitted key are added."""
    result = await role_svc.set_role_permissions(role_id, body.permission_keys)
    return RolePermissionsSetResponse.model_validate(result)


@router.post("/seed", response_model=SeedResponse)
@limit_seed
async def seed_system_roles(
    request: Request,
    role_svc: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[object, Depends(authorize("roles.seed"))] = None,
):
    """Upsert system roles with default grants and migrate legacy users onto them."""
    result = await role_svc.seed_system_roles()
    return SeedResponse.model_validate(result)
