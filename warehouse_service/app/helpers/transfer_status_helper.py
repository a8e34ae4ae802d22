from typing import Optional

from ..enum.transfer_enum import TransferActor, TransferStatus

S = TransferStatus

TRANSITIONS = {
    (S.PENDING, S.APPROVED): TransferActor.ANY_MANAGER,
    (S.PENDING, S.REJECTED): TransferActor.ANY_MANAGER,
    (S.APPROVED, S.IN_TRANSIT): TransferActor.SOURCE_MANAGER,
    (S.IN_TRANSIT, S.COMPLETED): TransferActor.DESTINATION_MANAGER,
    (S.IN_TRANSIT, S.RETURN_REQUESTED): TransferActor.DESTINATION_MANAGER,
    (S.RETURN_REQUESTED, S.RETURN_APPROVED): TransferActor.ADMIN,
    (S.RETURN_REQUESTED, S.DISPOSED): TransferActor.ADMIN,
    (S.RETURN_APPROVED, S.RETURN_SHIPPED): TransferActor.DESTINATION_MANAGER,
    (S.RETURN_SHIPPED, S.RETURNED): TransferActor.SOURCE_MANAGER,
}


class InvalidTransition(ValueError):
    pass


class TransitionNotPermitted(PermissionError):
    pass


def required_actor(current: str, target: str) -> Optional[TransferActor]:
    try:
        return TRANSITIONS.get((S(current), S(target)))
    except ValueError:
        return None


def is_permitted(actor: TransferActor, is_admin: bool,
                 manages_source: bool, manages_destination: bool) -> bool:
    if actor == TransferActor.ADMIN:
        return is_admin
    if actor == TransferActor.ANY_MANAGER:
        return is_admin or manages_source or manages_destination
    if actor == TransferActor.SOURCE_MANAGER:
        return manages_source
    return manages_destination


def check_transition(current: str, target: str, is_admin: bool,
                     manages_source: bool, manages_destination: bool) -> TransferActor:
    """Raise unless ``current -> target`` is legal for this caller."""
    actor = required_actor(current, target)
    if actor is None:
        raise InvalidTransition(
            f"Cannot move transfer from '{current}' to '{target}'")

    if not is_permitted(actor, is_admin, manages_source, manages_destination):
        raise TransitionNotPermitted(
            f"You are not allowed to move this transfer to '{target}'")

    return actor


def allowed_targets(current: str):
    return [target.value for (source, target) in TRANSITIONS if source.value == current]
