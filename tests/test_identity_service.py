"""
IdentityService tests: registration invariants and login matching.
"""

import pytest

from annotator.core.errors import AuthError, ConflictError, ErrorCode, ValidationError
from annotator.schemas import Role
from annotator.services import IdentityService


@pytest.fixture
def service(store) -> IdentityService:
    return IdentityService(store)


@pytest.fixture
async def alice(service: IdentityService):
    return await service.register(name="Alice", user_id="a001", password="secret", role="user")


# ============================================================================
# register
# ============================================================================

@pytest.mark.unit
async def test_register_returns_public_user(service: IdentityService):
    user = await service.register(name="Alice", user_id="a001", password="secret", role="user")

    assert user.to_wire() == {"id": "a001", "name": "Alice", "role": "user"}
    assert "password" not in user.to_wire()


@pytest.mark.unit
async def test_register_defaults_role_to_user(service: IdentityService):
    user = await service.register(name="Bob", user_id="b001", password="pw")
    assert user.role == Role.user


@pytest.mark.unit
async def test_register_stores_hashed_password(service: IdentityService, store):
    await service.register(name="Alice", user_id="a001", password="secret")

    stored = await store.get_user("a001")
    assert stored.password_hash != "secret"
    assert "secret" not in stored.password_hash


@pytest.mark.unit
@pytest.mark.parametrize("name,user_id,password", [
    ("", "a001", "secret"),
    ("Alice", "", "secret"),
    ("Alice", "a001", ""),
    ("   ", "a001", "secret"),
    (None, "a001", "secret"),
])
async def test_register_rejects_empty_fields(service: IdentityService, store, name, user_id, password):
    with pytest.raises(ValidationError) as exc_info:
        await service.register(name=name, user_id=user_id, password=password)

    assert exc_info.value.code == ErrorCode.VAL_MISSING_FIELD
    assert exc_info.value.status_code == 400
    assert await store.list_users() == []


@pytest.mark.unit
async def test_register_rejects_unknown_role(service: IdentityService):
    with pytest.raises(ValidationError) as exc_info:
        await service.register(name="Eve", user_id="e001", password="pw", role="superuser")

    assert exc_info.value.code == ErrorCode.VAL_INVALID_ROLE


@pytest.mark.unit
async def test_register_duplicate_id_conflicts(service: IdentityService, store, alice):
    with pytest.raises(ConflictError) as exc_info:
        await service.register(name="Someone Else", user_id="a001", password="other")

    assert exc_info.value.code == ErrorCode.CONFLICT_USER_EXISTS
    assert exc_info.value.status_code == 400
    assert len(await store.list_users()) == 1


@pytest.mark.unit
async def test_second_admin_conflicts(service: IdentityService):
    assert await service.admin_exists() is False
    await service.register(name="Root", user_id="root", password="pw", role="admin")
    assert await service.admin_exists() is True

    with pytest.raises(ConflictError) as exc_info:
        await service.register(name="Root2", user_id="root2", password="pw", role="admin")

    assert exc_info.value.code == ErrorCode.CONFLICT_ADMIN_EXISTS
    assert await service.admin_exists() is True


@pytest.mark.unit
async def test_volunteers_can_register_after_admin(service: IdentityService):
    await service.register(name="Root", user_id="root", password="pw", role="admin")
    user = await service.register(name="Vol", user_id="v1", password="pw", role="user")

    assert user.role == Role.user
    assert [u.id for u in await service.list_users()] == ["root", "v1"]


# ============================================================================
# login
# ============================================================================

@pytest.mark.unit
async def test_login_success(service: IdentityService, alice):
    user = await service.login(name="Alice", user_id="a001", password="secret")
    assert user.to_wire() == {"id": "a001", "name": "Alice", "role": "user"}


@pytest.mark.unit
@pytest.mark.parametrize("name,user_id,password", [
    ("alice", "a001", "secret"),
    ("Alice", "a002", "secret"),
    ("Alice", "a001", "Secret"),
])
async def test_login_requires_exact_match(service: IdentityService, alice, name, user_id, password):
    with pytest.raises(AuthError) as exc_info:
        await service.login(name=name, user_id=user_id, password=password)

    assert exc_info.value.code == ErrorCode.AUTH_INVALID_CREDENTIALS
    assert exc_info.value.status_code == 401


@pytest.mark.unit
async def test_login_missing_field_is_validation_error(service: IdentityService, alice):
    with pytest.raises(ValidationError):
        await service.login(name="Alice", user_id="a001", password=None)


@pytest.mark.unit
async def test_login_role_mismatch(service: IdentityService, alice):
    with pytest.raises(ValidationError) as exc_info:
        await service.login(name="Alice", user_id="a001", password="secret", role="admin")

    assert exc_info.value.code == ErrorCode.VAL_ROLE_MISMATCH


@pytest.mark.unit
async def test_login_bad_credentials_win_over_role(service: IdentityService, alice):
    """Role is only compared once the credentials match."""
    with pytest.raises(AuthError):
        await service.login(name="Alice", user_id="a001", password="wrong", role="admin")


@pytest.mark.unit
async def test_login_matching_role(service: IdentityService):
    await service.register(name="Root", user_id="root", password="pw", role="admin")

    user = await service.login(name="Root", user_id="root", password="pw", role="admin")
    assert user.role == Role.admin


@pytest.mark.unit
async def test_login_blank_role_is_ignored(service: IdentityService, alice):
    user = await service.login(name="Alice", user_id="a001", password="secret", role="")
    assert user.id == "a001"
