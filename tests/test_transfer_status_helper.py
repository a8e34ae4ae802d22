import pytest

from warehouse_service.app.enum.transfer_enum import TransferActor
from warehouse_service.app.helpers.transfer_status_helper import (
    InvalidTransition, TransitionNotPermitted, allowed_targets, check_transition, required_actor)

NOBODY = dict(is_admin=False, manages_source=False, manages_destination=False)
ADMIN = dict(is_admin=True, manages_source=True, manages_destination=True)
SOURCE = dict(is_admin=False, manages_source=True, manages_destination=False)
DESTINATION = dict(is_admin=False, manages_source=False, manages_destination=True)


def test_in_transit_only_reachable_from_approved():
    origins = [state for state in ("pending", "approved", "in-transit", "completed", "rejected",
                                   "return_requested", "return_approved", "return_shipped",
                                   "returned", "disposed")
               if required_actor(state, "in-transit") is not None]
    assert origins == ["approved"]


@pytest.mark.parametrize("current", ["pending", "completed", "rejected", "returned"])
def test_shipping_from_other_states_is_invalid(current):
    with pytest.raises(InvalidTransition):
        check_transition(current, "in-transit", **ADMIN)


def test_only_source_manager_ships():
    assert check_transition("approved", "in-transit", **SOURCE) == TransferActor.SOURCE_MANAGER
    with pytest.raises(TransitionNotPermitted):
        check_transition("approved", "in-transit", **DESTINATION)


def test_admin_is_not_a_source_manager_by_role_alone():
    with pytest.raises(TransitionNotPermitted):
        check_transition("approved", "in-transit", is_admin=True,
                         manages_source=False, manages_destination=False)


def test_pending_can_be_decided_by_either_manager():
    check_transition("pending", "approved", **SOURCE)
    check_transition("pending", "rejected", **DESTINATION)
    with pytest.raises(TransitionNotPermitted):
        check_transition("pending", "approved", **NOBODY)


def test_return_approval_is_admin_only():
    check_transition("return_requested", "return_approved", **ADMIN)
    with pytest.raises(TransitionNotPermitted):
        check_transition("return_requested", "disposed", **DESTINATION)


def test_unknown_status_is_invalid():
    assert required_actor("pending", "lost") is None
    with pytest.raises(InvalidTransition):
        check_transition("pending", "lost", **ADMIN)


def test_allowed_targets():
    assert sorted(allowed_targets("in-transit")) == ["completed", "return_requested"]
    assert allowed_targets("returned") == []
