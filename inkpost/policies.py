"""
Inkpost Backend — Authorization Policy
=======================================

What:  Named authorization rules and the guard factory routes declare.
How:   A rule is a predicate over (current user, target id). require()
       turns a rule into a FastAPI dependency that authenticates the caller,
       evaluates the rule, and hands the user to the route.

Rules:
    authenticated   any caller with a valid token
    admin_only      role == ADMIN
    self_or_admin   the {target} path parameter is the caller's own id,
                    or the caller is an admin

Usage:
    @router.patch("/{id}")
    async def update(id: UUID, user: User = Depends(require(SELF_OR_ADMIN, target="id"))):
        ...

Ownership of posts and comments is not a policy rule: it needs the row,
so the posts and comments services check it after loading.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Union

from fastapi import Depends, Request

from inkpost.dependencies import get_current_user
from inkpost.exceptions import ForbiddenError
from inkpost.models import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PolicyRule:
    name: str
    message: str
    check: Callable[[User, Optional[uuid.UUID]], bool]

    def allows(self, user: User, target_id: Optional[uuid.UUID] = None) -> bool:
        return self.check(user, target_id)


AUTHENTICATED = PolicyRule(
    name="authenticated",
    message="Authentication required",
    check=lambda user, target_id: True,
)

ADMIN_ONLY = PolicyRule(
    name="admin_only",
    message="Admin access required",
    check=lambda user, target_id: user.is_admin,
)

SELF_OR_ADMIN = PolicyRule(
    name="self_or_admin",
    message="You can only modify your own account",
    check=lambda user, target_id: user.is_admin or (
        target_id is not None and user.id == target_id
    ),
)

RULES: Dict[str, PolicyRule] = {
    rule.name: rule for rule in (AUTHENTICATED, ADMIN_ONLY, SELF_OR_ADMIN)
}


def _target_from_path(request: Request, target: Optional[str]) -> Optional[uuid.UUID]:
    if not target:
        return None
    raw = request.path_params.get(target)
    if raw is None:
        return None
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        return None


def require(rule: Union[PolicyRule, str], target: Optional[str] = None):
    """
    Build a dependency enforcing `rule` for the current request.

    Args:
        rule:   A PolicyRule or its name ("admin_only", ...)
        target: Name of the path parameter holding the target id, for rules
                that compare against it

    Returns:
        An async dependency resolving to the authenticated User.
    """
    policy = RULES[rule] if isinstance(rule, str) else rule

    async def guard(
        request: Request,
        user: User = Depends(get_current_user),
    ) -> User:
        target_id = _target_from_path(request, target)
        if not policy.allows(user, target_id):
            logger.info(
                "Policy %s denied user %s on %s %s",
                policy.name, user.id, request.method, request.url.path,
            )
            raise ForbiddenError(policy.message)
        return user

    guard.__name__ = f"require_{policy.name}"
    return guard
