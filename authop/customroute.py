"""Status conditions of the custom OAuth route and certificate parsing."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence, Union

from cryptography import x509

from authop.conditions import ConditionStatus

_PEM_BLOCK = re.compile(
    rb"-----BEGIN ([^-\r\n]+)-----\r?\n(.*?)-----END \1-----", re.DOTALL
)


@dataclass
class Condition:
    """A condition of a component route in the ingress status."""

    type: str
    status: ConditionStatus
    reason: str = ""
    message: str = ""
    last_transition_time: Optional[datetime] = None


def _now() -> datetime:
    return datetime.now(timezone.utc)


def find_condition(conditions: Sequence[Condition], condition_type: str) -> Optional[Condition]:
    """Return the first condition of the given type, or None."""
    return next((c for c in conditions if c.type == condition_type), None)


def ensure_default_conditions(conditions: Optional[Sequence[Condition]]) -> List[Condition]:
    """Add healthy Progressing and Degraded conditions where they are missing."""
    result = list(conditions or ())
    for condition_type in ("Progressing", "Degraded"):
        if find_condition(result, condition_type) is None:
            result.append(
                Condition(
                    type=condition_type,
                    status=ConditionStatus.FALSE,
                    reason="AsExpected",
                    message="All is well",
                    last_transition_time=_now(),
                )
            )
    return result


def check_errors_configuring_custom_route(
    errors: Optional[Sequence[BaseException]],
) -> Optional[List[Condition]]:
    """Conditions reporting custom route errors, or None when there are none."""
    if not errors:
        return None
    now = _now()
    message = "Error Configuring custom route: [" + " ".join(str(e) for e in errors) + "]"
    return [
        Condition("Degraded", ConditionStatus.TRUE, "CustomRouteError", message, now),
        Condition("Progressing", ConditionStatus.FALSE, "CustomRouteError", message, now),
    ]


def degrade_if_time_elapsed(
    conditions: Sequence[Condition], condition: Condition, max_age: timedelta
) -> None:
    """Turn ``condition`` into Degraded if a matching one has aged past max_age.

    The age is measured against the condition's own transition time.
    """
    for existing in conditions:
        if (
            existing.reason == condition.reason
            and existing.message == condition.message
            and existing.type == condition.type
            and condition.last_transition_time is not None
            and condition.last_transition_time + max_age < condition.last_transition_time
        ):
            condition.type = "Degraded"


def parse_certificates(key_data: Union[bytes, str]) -> List[x509.Certificate]:
    """Parse every certificate in PEM data, skipping blocks that are not one."""
    if isinstance(key_data, str):
        key_data = key_data.encode()
    certs: List[x509.Certificate] = []
    for match in _PEM_BLOCK.finditer(key_data):
        try:
            der = base64.b64decode(b"".join(match.group(2).split()), validate=True)
            certs.append(x509.load_der_x509_certificate(der))
        except (binascii.Error, ValueError):
            continue
    if not certs:
        raise ValueError("data does not contain any valid certificates")
    return certs