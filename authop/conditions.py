"""Operator conditions and lookups that report failures as conditions."""

from __future__ import annotations

import copy
import enum
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, List, Optional, Protocol, Sequence, Tuple

OAUTH_NAMESPACE = "openshift-authentication"
OAUTH_NAME = "oauth-openshift"


class ConditionStatus(str, enum.Enum):
    """Status value of an operator condition."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


@dataclass
class OperatorCondition:
    """A single condition in an operator's status."""

    type: str
    status: ConditionStatus
    reason: str = ""
    message: str = ""
    last_transition_time: Optional[datetime] = None


@dataclass
class OperatorStatus:
    """The part of an operator's status that holds its conditions."""

    conditions: List[OperatorCondition] = field(default_factory=list)


class NotFoundError(LookupError):
    """Raised when a requested object does not exist."""

    def __init__(self, resource: str, name: str) -> None:
        self.resource = resource
        self.name = name
        super().__init__(f'{resource} "{name}" not found'.strip())


class _OperatorClient(Protocol):
    def get_operator_status(self) -> OperatorStatus: ...

    def update_operator_status(self, status: OperatorStatus) -> Any: ...


def _now_like(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return datetime.now()
    return datetime.now(timezone.utc)


def controller_progressing_condition_name(controller_name: str) -> str:
    """Name of the Progressing condition owned by a controller."""
    return controller_name + "Progressing"


def find_operator_condition(
    conditions: Optional[Iterable[OperatorCondition]], condition_type: str
) -> Optional[OperatorCondition]:
    """Return the first condition of the given type, or None."""
    return next((c for c in conditions or () if c.type == condition_type), None)


class ControllerProgressingError(Exception):
    """An error that makes a controller go Progressing instead of Degraded.

    ``max_age`` sets how long the error may stay in the operator's status
    before it turns Degraded; a zero or negative age means never.
    """

    def __init__(self, reason: str, err: BaseException, max_age: timedelta) -> None:
        super().__init__(str(err))
        self.reason = reason
        self.err = err
        self.max_age = max_age
        self.__cause__ = err

    def __str__(self) -> str:
        return str(self.err)

    def to_condition(self, controller_name: str) -> OperatorCondition:
        return OperatorCondition(
            type=controller_progressing_condition_name(controller_name),
            status=ConditionStatus.TRUE,
            reason=self.reason,
            message=str(self.err),
        )

    def is_degraded(self, controller_name: str, last_status: OperatorStatus) -> bool:
        """Whether the same condition has been present for longer than max_age."""
        if self.max_age <= timedelta(0):
            return False
        last = find_operator_condition(
            last_status.conditions, controller_progressing_condition_name(controller_name)
        )
        if last is None:
            return False
        if last.reason != self.reason or last.message != str(self):
            return False
        transition = last.last_transition_time
        if transition is None:
            return False
        return transition + self.max_age < _now_like(transition)


def _set_operator_condition(
    conditions: List[OperatorCondition], new_condition: OperatorCondition
) -> None:
    existing = find_operator_condition(conditions, new_condition.type)
    if existing is None:
        conditions.append(
            replace(new_condition, last_transition_time=datetime.now(timezone.utc))
        )
        return
    if existing.status != new_condition.status:
        existing.status = new_condition.status
        existing.last_transition_time = datetime.now(timezone.utc)
    existing.reason = new_condition.reason
    existing.message = new_condition.message


def update_controller_conditions(
    operator_client: _OperatorClient,
    all_condition_names: Iterable[str],
    updated_conditions: Sequence[OperatorCondition],
) -> bool:
    """Set every named condition, resetting those not in ``updated_conditions``.

    Conditions ending in "Available" reset to True, all others to False.
    The status is written only when it changed; returns whether it was.
    """
    original = operator_client.get_operator_status()
    status = copy.deepcopy(original)
    for condition_type in sorted(set(all_condition_names)):
        updated = find_operator_condition(updated_conditions, condition_type)
        if updated is not None:
            new_condition = copy.copy(updated)
        else:
            default = (
                ConditionStatus.TRUE
                if condition_type.endswith("Available")
                else ConditionStatus.FALSE
            )
            new_condition = OperatorCondition(type=condition_type, status=default)
        _set_operator_condition(status.conditions, new_condition)

    if status == original:
        return False
    operator_client.update_operator_status(status)
    return True


def _degraded(prefix: str, reason: str, message: str) -> List[OperatorCondition]:
    return [
        OperatorCondition(
            type=prefix + "Degraded",
            status=ConditionStatus.TRUE,
            reason=reason,
            message=message,
        )
    ]


def get_auth_config(auth_lister: Any, condition_prefix: str) -> Tuple[Any, List[OperatorCondition]]:
    """Fetch the cluster authentication config, or a Degraded condition."""
    try:
        return auth_lister.get("cluster"), []
    except Exception as err:  # any lister failure is reported as a condition
        return None, _degraded(
            condition_prefix,
            "GetFailed",
            f"Unable to get cluster authentication config: {err}",
        )


def get_oauth_server_route(route_lister: Any, condition_prefix: str) -> Tuple[Any, List[OperatorCondition]]:
    """Fetch the OAuth server route, or a Degraded condition."""
    try:
        return route_lister.get(OAUTH_NAME, OAUTH_NAMESPACE), []
    except NotFoundError:
        return None, _degraded(
            condition_prefix,
            "NotFound",
            f"The OAuth server route '{OAUTH_NAMESPACE}/{OAUTH_NAME}' was not found",
        )
    except Exception as err:
        return None, _degraded(
            condition_prefix,
            "GetFailed",
            f"Unable to get '{OAUTH_NAMESPACE}/{OAUTH_NAME}' route: {err}",
        )


def get_oauth_server_service(service_lister: Any, condition_prefix: str) -> Tuple[Any, List[OperatorCondition]]:
    """Fetch the OAuth server service, or a Degraded condition."""
    try:
        return service_lister.get(OAUTH_NAME, OAUTH_NAMESPACE), []
    except Exception as err:
        return None, _degraded(
            condition_prefix,
            "GetFailed",
            f"Unable to get oauth server service: {err}",
        )