"""
Authorization policies

Capability checks are explicit rules keyed by action:
(principal, action, resource) -> allow / deny with a reason.
Handlers call authorize() instead of branching on roles themselves.
"""
import logging
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from marketplace.core.auth import Principal, Role
from marketplace.core.errors import AuthorizationError
from marketplace.domain.product import Product


logger = logging.getLogger(__name__)


class Action(str, Enum):
    PAYMENT_CREATE = "payment:create"
    PRODUCT_CREATE = "product:create"
    PRODUCT_TRASH = "product:trash"
    PRODUCT_RESTORE = "product:restore"
    PRODUCT_DELETE = "product:delete"
    REVENUE_OWN = "revenue:own"
    REVENUE_PLATFORM = "revenue:platform"


# A rule returns None when allowed, otherwise the denial message
Rule = Callable[[Principal, Optional[object]], Optional[str]]


def _owns(principal: Principal, product: Product) -> bool:
    return principal.role == Role.SELLER and str(product.seller_id) == principal.id


def _buyer_only(principal, resource):
    if principal.role != Role.BUYER:
        return "Only buyers can make payments"
    return None


def _seller_or_admin(principal, resource):
    if principal.role not in (Role.SELLER, Role.ADMIN):
        return "Only sellers can create products"
    return None


def _owner_or_admin(principal, product):
    if principal.is_admin or _owns(principal, product):
        return None
    return "You can only modify your own products"


def _trashed_and_owner_or_admin(principal, product):
    if not product.is_deleted:
        return "Product must be in trash before permanent deletion"
    if principal.is_admin or _owns(principal, product):
        return None
    return "You can only delete your own products"


def _seller_only(principal, resource):
    if principal.role != Role.SELLER:
        return "Only sellers can view their revenue"
    return None


def _admin_only(principal, resource):
    if not principal.is_admin:
        return "Admin privileges required"
    return None


POLICY_RULES: Dict[Action, Rule] = {
    Action.PAYMENT_CREATE: _buyer_only,
    Action.PRODUCT_CREATE: _seller_or_admin,
    Action.PRODUCT_TRASH: _owner_or_admin,
    Action.PRODUCT_RESTORE: _owner_or_admin,
    Action.PRODUCT_DELETE: _trashed_and_owner_or_admin,
    Action.REVENUE_OWN: _seller_only,
    Action.REVENUE_PLATFORM: _admin_only,
}


def evaluate(principal: Principal, action: Action, resource=None) -> Tuple[bool, Optional[str]]:
    """Return (allowed, denial_message) for an action"""
    reason = POLICY_RULES[action](principal, resource)
    return reason is None, reason


def is_allowed(principal: Principal, action: Action, resource=None) -> bool:
    allowed, _ = evaluate(principal, action, resource)
    return allowed


def authorize(principal: Principal, action: Action, resource=None) -> None:
    """
    Enforce a policy rule.

    Raises:
        AuthorizationError: with the rule's denial message
    """
    allowed, reason = evaluate(principal, action, resource)
    if not allowed:
        logger.warning(
            f"Denied {action.value} for user {principal.id} ({principal.role.value}): {reason}"
        )
        raise AuthorizationError(reason)
