"""
Permission-based authorization

    router = APIRouter(dependencies=[Depends(require_permissions(READ_EVENTS))])

    @router.put("/{id}", dependencies=[Depends(require_permissions(EDIT_COMPANY))])
    async def update_company_endpoint(...):
        ...

    @router.get("/role/{id}", dependencies=[
        Depends(require_permissions(READ_ROLES, READ_PERMISSIONS, mode=RequireMode.ANY))
    ])

FastAPI runs every dependency attached to the router and to the route, so a
route guarded at both levels needs to pass both checks.
"""
import enum
import logging
from dataclasses import dataclass
from typing import AbstractSet, FrozenSet, List

from fastapi import Depends

from app.core.deps import Principal, get_current_principal
from app.core.errors import AuthorizationError

logger = logging.getLogger(__name__)


class RequireMode(str, enum.Enum):
    ALL = "all"
    ANY = "any"


@dataclass(frozen=True)
class PermissionRequirement:
    """A non-empty set of permission names and how many of them must be held"""
    permissions: FrozenSet[str]
    mode: RequireMode = RequireMode.ALL

    def __post_init__(self):
        raw = [self.permissions] if isinstance(self.permissions, str) else self.permissions
        names = frozenset(p.strip() for p in raw if p and p.strip())
        if not names:
            raise ValueError("A permission requirement needs at least one permission name")
        object.__setattr__(self, "permissions", names)
        object.__setattr__(self, "mode", RequireMode(self.mode))

    def is_satisfied_by(self, granted: AbstractSet[str]) -> bool:
        if self.mode == RequireMode.ALL:
            return self.permissions <= granted
        return not self.permissions.isdisjoint(granted)

    def missing(self, granted: AbstractSet[str]) -> List[str]:
        return sorted(self.permissions - granted)


def require_permissions(*names: str, mode: RequireMode = RequireMode.ALL):
    """
    Dependency factory for permission-based access control

    Args:
        names: Permission names to check
        mode: RequireMode.ALL (every name held) or RequireMode.ANY (at least one)

    Returns:
        A dependency returning the Principal when the check passes

    Raises:
        ValueError: At configuration time if no permission name is given
    """
    requirement = PermissionRequirement(frozenset(names), mode)
    required = sorted(requirement.permissions)

    def permission_checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not requirement.is_satisfied_by(principal.permissions):
            logger.warning(
                "Access denied for user %s: requires %s of %s, missing %s",
                principal.user_id,
                requirement.mode.value,
                required,
                requirement.missing(principal.permissions),
            )
            raise AuthorizationError(required_permissions=required)
        return principal

    permission_checker.requirement = requirement
    return permission_checker
