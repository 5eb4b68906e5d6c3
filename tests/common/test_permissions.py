import pytest

from src.store_ops.store_ops.core.enums import Role
from src.store_ops.store_ops.core.exceptions import AuthorizationError
from src.store_ops.store_ops.core.permissions import CAPABILITIES, Capability, has_capability, require_capability


def test_every_capability_has_a_role_set():
    assert set(CAPABILITIES) == set(Capability)


@pytest.mark.parametrize("capability", [Capability.VIEW_REGISTER_HISTORY, Capability.EDIT_SALES])
def test_supervisor_only_capabilities(capability):
    assert not has_capability(Role.STAFF, capability)
    assert has_capability(Role.MANAGER, capability)
    assert has_capability(Role.ADMIN, capability)


def test_staff_can_operate_registers_and_clock_in():
    assert has_capability(Role.STAFF, Capability.OPERATE_REGISTER)
    assert has_capability(Role.STAFF, Capability.CLOCK_ATTENDANCE)


def test_require_capability_raises_for_missing_permission():
    with pytest.raises(AuthorizationError):
        require_capability(Role.STAFF, Capability.VIEW_REGISTER_HISTORY)
