"""Config observers that derive oauth-server settings from cluster config."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlsplit

from authop.conditions import NotFoundError
from authop.listers import InMemoryRecorder, Listers
from authop.unstructured import nested_field, nested_string, pruned, set_nested_field

_log = logging.getLogger(__name__)

ObserveResult = Tuple[Optional[dict], List[Exception]]

ASSET_PUBLIC_URL_PATH = ("oauthConfig", "assetPublicURL")
LOGIN_URL_PATH = ("oauthConfig", "loginURL")
SERVER_ARGUMENTS_PATH = ("serverArguments",)

NONE_AUDIT_PROFILE = "None"

AUDIT_OPTIONS_ARGS: Dict[str, List[str]] = {
    "audit-log-path": ["/var/log/oauth-server/audit.log"],
    "audit-log-format": ["json"],
    "audit-log-maxsize": ["100"],
    "audit-log-maxbackup": ["10"],
    "audit-policy-file": ["/var/run/configmaps/audit/audit.yaml"],
}


def _wrapped(message: str, cause: BaseException) -> ValueError:
    err = ValueError(f"{message}: {cause}")
    err.__cause__ = cause
    return err


def _check_url(value: str) -> None:
    """Raise ValueError when ``value`` is not a well-formed URL."""
    parts = urlsplit(value)
    parts.port  # accessing the port validates it


def _observe_status_url(
    lister: Any,
    status_key: str,
    path: Sequence[str],
    label: str,
    reason: str,
    field_label: str,
    recorder: InMemoryRecorder,
    existing_config: Optional[dict],
) -> ObserveResult:
    errs: List[Exception] = []
    try:
        obj = lister.get("cluster")
    except Exception as err:
        return existing_config, [err]

    observed_url, _ = nested_string(obj, "status", status_key)
    try:
        _check_url(observed_url)
    except ValueError as err:
        return existing_config, [_wrapped(f'failed to parse {label} "{observed_url}"', err)]

    observed_config: dict = {}
    try:
        set_nested_field(observed_config, observed_url, *path)
    except (TypeError, ValueError) as err:
        return existing_config, [err]

    try:
        current_url, _ = nested_string(existing_config, *path)
    except TypeError as err:
        # keep going on a broken existing config in an attempt to fix it
        errs.append(err)
        current_url = ""

    if current_url != observed_url:
        recorder.eventf(
            reason, f"{field_label} changed from %s to %s", current_url, observed_url
        )
    return observed_config, errs


def observe_console_url(
    listers: Listers, recorder: InMemoryRecorder, existing_config: Optional[dict]
) -> ObserveResult:
    """Observe the console URL as the oauth server's asset public URL."""
    config, errs = _observe_status_url(
        listers.console_lister,
        "consoleURL",
        ASSET_PUBLIC_URL_PATH,
        "consoleURL",
        "ObserveConsoleURL",
        "assetPublicURL",
        recorder,
        existing_config,
    )
    return pruned(config, ASSET_PUBLIC_URL_PATH), errs


def observe_api_server_url(
    listers: Listers, recorder: InMemoryRecorder, existing_config: Optional[dict]
) -> ObserveResult:
    """Observe the API server URL as the oauth server's login URL."""
    config, errs = _observe_status_url(
        listers.infrastructure_lister,
        "apiServerURL",
        LOGIN_URL_PATH,
        "apiServerURL",
        "ObserveAPIServerURL",
        "loginURL",
        recorder,
        existing_config,
    )
    return pruned(config, LOGIN_URL_PATH), errs


def _observe_audit(
    listers: Listers, recorder: InMemoryRecorder, existing_config: Optional[dict]
) -> ObserveResult:
    errs: List[Exception] = []
    api_server = None
    try:
        api_server = listers.api_server_lister.get("cluster")
    except NotFoundError:
        _log.warning("config.openshift.io/v1/cluster: not found")
    except Exception as err:
        return existing_config, [
            _wrapped("failed to get oauth.config.openshift.io/cluster", err)
        ]

    profile = ""
    if api_server is not None:
        profile, _ = nested_string(api_server, "spec", "audit", "profile")

    observed_config: dict = {}
    if profile != NONE_AUDIT_PROFILE:
        try:
            set_nested_field(observed_config, AUDIT_OPTIONS_ARGS, *SERVER_ARGUMENTS_PATH)
        except (TypeError, ValueError) as err:
            return existing_config, [
                _wrapped(
                    f"set nested field ({'/'.join(SERVER_ARGUMENTS_PATH)}) "
                    f"for profile ({profile})",
                    err,
                )
            ]

    try:
        current, _ = nested_field(existing_config, *SERVER_ARGUMENTS_PATH)
    except TypeError as err:
        return existing_config, [err]

    if current != AUDIT_OPTIONS_ARGS:
        recorder.eventf(
            "ObserveAuditProfile",
            "AuditProfile changed from '%s' to '%s'",
            current,
            AUDIT_OPTIONS_ARGS,
        )
    return observed_config, errs


def observe_audit(
    listers: Listers, recorder: InMemoryRecorder, existing_config: Optional[dict]
) -> ObserveResult:
    """Observe the audit profile and set the oauth server's audit arguments."""
    config, errs = _observe_audit(listers, recorder, existing_config)
    return pruned(config, SERVER_ARGUMENTS_PATH), errs