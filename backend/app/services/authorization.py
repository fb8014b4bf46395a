"""
Authorization Rules
Decides whether a user may change a recipe.
"""

import enum
import logging
import uuid

from app.errors import Forbidden
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)


class RecipeAction(str, enum.Enum):
    UPDATE = "update"
    DELETE = "delete"


# Roles that may act on recipes they do not own
_ROLE_GRANTS = {
    UserRole.STANDARD: frozenset(),
    UserRole.MODERATOR: frozenset({RecipeAction.DELETE}),
    UserRole.ADMIN: frozenset({RecipeAction.UPDATE, RecipeAction.DELETE}),
}


def can_modify(user: User, owner_id: uuid.UUID, action: RecipeAction) -> bool:
    """
    Owners may always update and delete their own recipes.
    Moderators may also delete anyone's recipe; admins may update or delete any recipe.
    """
    if user.id == owner_id:
        return True
    return action in _ROLE_GRANTS.get(UserRole(user.role), frozenset())


def ensure_can_modify(user: User, owner_id: uuid.UUID, action: RecipeAction) -> None:
    """Raise Forbidden unless `can_modify` allows the action."""
    if not can_modify(user, owner_id, action):
        logger.info(f"Denied {action.value} by user {user.id} on recipe owned by {owner_id}")
        raise Forbidden(f"You are not allowed to {action.value} this recipe")
