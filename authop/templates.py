"""Login, provider-selection and error page templates for the oauth server."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from authop.conditions import NotFoundError

CONSOLE_CONFIG_NAMESPACE = "openshift-config-managed"
CONSOLE_CONFIG_NAME = "console-config"
CONSOLE_CONFIG_KEY = "console-config.yaml"

LOGIN_TEMPLATE_KEY = "login.html"
PROVIDER_SELECTION_TEMPLATE_KEY = "providers.html"
ERRORS_TEMPLATE_KEY = "errors.html"

_OCP_BRANDING_DIR = "/var/config/system/secrets/v4-0-config-system-ocp-branding-template"
_USER_TEMPLATE_DIR = "/var/config/user/template/secret"

USER_LOGIN_TEMPLATE = f"{_USER_TEMPLATE_DIR}/v4-0-config-user-template-login/login.html"
USER_PROVIDER_SELECTION_TEMPLATE = (
    f"{_USER_TEMPLATE_DIR}/v4-0-config-user-template-provider-selection/providers.html"
)
USER_ERROR_TEMPLATE = f"{_USER_TEMPLATE_DIR}/v4-0-config-user-template-error/errors.html"

# Brands whose console branding is equivalent to the OCP one.
_OCP_EQUIVALENT_BRANDS = frozenset({"ocp", "dedicated", "online", "azure"})


class Brand(str, enum.Enum):
    """Product branding of the login pages."""

    OCP = "ocp"
    OKD = "okd"


DEFAULT_BRAND = Brand.OKD


@dataclass(frozen=True)
class OAuthTemplates:
    """Paths of the page templates served by the oauth server."""

    login: str = ""
    provider_selection: str = ""
    error: str = ""


OCP_DEFAULT_TEMPLATES = OAuthTemplates(
    login=f"{_OCP_BRANDING_DIR}/login.html",
    provider_selection=f"{_OCP_BRANDING_DIR}/providers.html",
    error=f"{_OCP_BRANDING_DIR}/errors.html",
)


def _get(obj: Any, key: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


def _secret_name(config_templates: Any, key: str) -> str:
    return _get(_get(config_templates, key), "name") or ""


def get_console_branding(cm_lister: Any) -> str:
    """Return the branding set in the console config, or "" when unset."""
    try:
        cm = cm_lister.get(CONSOLE_CONFIG_NAME, CONSOLE_CONFIG_NAMESPACE)
    except NotFoundError:
        return ""
    except Exception as err:
        raise ValueError(f"error getting console-config: {err}") from err

    data = (_get(cm, "data") or {}).get(CONSOLE_CONFIG_KEY, "")
    if not data:
        return ""

    try:
        config = yaml.safe_load(data)
    except yaml.YAMLError as err:
        raise ValueError(f"error parsing console-config: {err}") from err
    if config is None:
        return ""
    if not isinstance(config, Mapping):
        raise ValueError("error parsing console-config: document is not a mapping")

    customization = config.get("customization") or {}
    if not isinstance(customization, Mapping):
        raise ValueError("error parsing console-config: customization is not a mapping")
    branding = customization.get("branding") or ""
    if not isinstance(branding, str):
        raise ValueError("error parsing console-config: branding is not a string")
    return branding


def convert_templates_with_branding(
    cm_lister: Any, config_templates: Any, default_brand: Brand = DEFAULT_BRAND
) -> Tuple[Optional[OAuthTemplates], Optional[Dict[str, str]]]:
    """Work out the oauth server templates and the user secrets to sync.

    ``config_templates`` holds ``login``, ``providerSelection`` and ``error``
    secret references, each with a ``name``. Returns ``(None, None)`` when
    no template is set at all.
    """
    brand = get_console_branding(cm_lister)

    if brand == Brand.OKD.value:
        templates = OAuthTemplates()
    elif brand in _OCP_EQUIVALENT_BRANDS:
        templates = OCP_DEFAULT_TEMPLATES
    elif Brand(default_brand) is Brand.OCP:
        templates = OCP_DEFAULT_TEMPLATES
    else:
        templates = OAuthTemplates()

    sync_data: Dict[str, str] = {}
    login = _secret_name(config_templates, "login")
    if login:
        sync_data[LOGIN_TEMPLATE_KEY] = login
        templates = OAuthTemplates(USER_LOGIN_TEMPLATE, templates.provider_selection, templates.error)
    provider_selection = _secret_name(config_templates, "providerSelection")
    if provider_selection:
        sync_data[PROVIDER_SELECTION_TEMPLATE_KEY] = provider_selection
        templates = OAuthTemplates(templates.login, USER_PROVIDER_SELECTION_TEMPLATE, templates.error)
    error = _secret_name(config_templates, "error")
    if error:
        sync_data[ERRORS_TEMPLATE_KEY] = error
        templates = OAuthTemplates(templates.login, templates.provider_selection, USER_ERROR_TEMPLATE)

    if templates == OAuthTemplates():
        return None, None
    return templates, sync_data