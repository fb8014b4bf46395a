import uuid
from types import SimpleNamespace

import pytest

from app.errors import Forbidden
from app.models.user import UserRole
from app.services.authorization import RecipeAction, can_modify, ensure_can_modify

OWNER_ID = uuid.uuid4()


def make_user(role: UserRole, owns: bool):
    return SimpleNamespace(id=OWNER_ID if owns else uuid.uuid4(), role=role)


@pytest.mark.parametrize(
    ("role", "owns", "action", "allowed"),
    [
        (UserRole.STANDARD, True, RecipeAction.UPDATE, True),
        (UserRole.STANDARD, True, RecipeAction.DELETE, True),
        (UserRole.STANDARD, False, RecipeAction.UPDATE, False),
        (UserRole.STANDARD, False, RecipeAction.DELETE, False),
        (UserRole.MODERATOR, True, RecipeAction.UPDATE, True),
        (UserRole.MODERATOR, True, RecipeAction.DELETE, True),
        (UserRole.MODERATOR, False, RecipeAction.UPDATE, False),
        (UserRole.MODERATOR, False, RecipeAction.DELETE, True),
        (UserRole.ADMIN, True, RecipeAction.UPDATE, True),
        (UserRole.ADMIN, True, RecipeAction.DELETE, True),
        (UserRole.ADMIN, False, RecipeAction.UPDATE, True),
        (UserRole.ADMIN, False, RecipeAction.DELETE, True),
    ],
)
def test_can_modify_truth_table(role: UserRole, owns: bool, action: RecipeAction, allowed: bool) -> None:
    assert can_modify(make_user(role, owns), OWNER_ID, action) is allowed


def test_role_stored_as_plain_string_is_understood() -> None:
    user = SimpleNamespace(id=uuid.uuid4(), role="moderator")

    assert can_modify(user, OWNER_ID, RecipeAction.DELETE)


def test_ensure_can_modify_raises_forbidden() -> None:
    with pytest.raises(Forbidden) as excinfo:
        ensure_can_modify(make_user(UserRole.MODERATOR, False), OWNER_ID, RecipeAction.UPDATE)

    assert excinfo.value.status_code == 403
    assert "update" in excinfo.value.message


def test_ensure_can_modify_allows_owner() -> None:
    ensure_can_modify(make_user(UserRole.STANDARD, True), OWNER_ID, RecipeAction.DELETE)
