# authop

Building blocks for an operator that manages an OAuth server. The package
covers operator conditions, config observers that derive oauth-server
settings from cluster config, login-page template selection, custom-route
conditions and helpers for encoding server arguments.

## Install

```
pip install authop
```

To run the tests:

```
pip install "authop[test]"
pytest
```

## Modules

### `authop.conditions`

- `ConditionStatus`: an enum with the values `TRUE`, `FALSE` and `UNKNOWN`.
- `OperatorCondition` and `OperatorStatus`: dataclasses for conditions and
  the status that holds them.
- `NotFoundError`: a `LookupError` for missing objects. Its message has the
  form `<resource> "<name>" not found`.
- `ControllerProgressingError(reason, err, max_age)` wraps an error.
  - `to_condition(controller_name)` gives a True `<controller>Progressing`
    condition.
  - `is_degraded(controller_name, last_status)` is true when a condition
    with the same reason and message has been in `last_status` for longer
    than `max_age`. A zero or negative `max_age` never degrades.
- `controller_progressing_condition_name` and `find_operator_condition`.
- `update_controller_conditions(operator_client, all_condition_names,
  updated_conditions)` sets every named condition. The client must have
  `get_operator_status()` and `update_operator_status(status)`. Names that
  are not in `updated_conditions` are reset: those ending in "Available"
  become True, all others False. The status is written only when it
  changed, and the function returns whether it was written.
- `get_auth_config`, `get_oauth_server_route` and `get_oauth_server_service`
  each return `(object, [])`. When the lister fails they return
  `(None, [<prefix>Degraded condition])`.

### `authop.arguments`

- `parse(raw)` turns a mapping of strings or lists of strings into
  `dict[str, list[str]]`. Any other kind of value raises `ValueError`.
- `shell_escape(s)` quotes a string so that a shell reads it as one token.
- `encode(args)` and `encode_with_delimiter(args, delimiter)` produce
  `--key=value` tokens sorted by key.

### `authop.unstructured`

Helpers for nested dictionaries:

- `nested_field`, `nested_string` and `set_nested_field` read and write a
  value along a path. They raise `TypeError` when a step along the path is
  not a mapping.
- `pruned(config, *paths)` returns a new config that keeps only the given
  paths.
- `unstructured_config_from(observed_bytes, *prefix)` returns the JSON of
  one subtree of an observed config.

### `authop.listers`

- `InMemoryLister` stores objects by namespace and name. It accepts objects
  with attributes, plain mappings, or mappings with a `metadata` entry. Its
  `get` raises `NotFoundError` when the object is missing.
- `InMemoryRecorder` collects events. `eventf` records one, and `events()`
  returns `(reason, message)` pairs.
- `Listers` is the set of stores that the observers read from.

### `authop.observers`

Each observer returns `(config, errors)`. On failure the existing config is
returned together with the errors.

- `observe_console_url`: writes the console URL to
  `oauthConfig.assetPublicURL`.
- `observe_api_server_url`: writes the API server URL to
  `oauthConfig.loginURL`.
- `observe_audit`: sets the audit `serverArguments`, unless the API server's
  audit profile is `None`.

### `authop.templates`

- `get_console_branding(cm_lister)` reads the branding from the
  `console-config` config map.
- `convert_templates_with_branding(cm_lister, config_templates,
  default_brand)` picks the login, provider-selection and error template
  paths. It returns those paths together with the user secrets that need
  syncing, or `(None, None)` when no template is set.
- `Brand` and `OAuthTemplates` are the types these functions use.

### `authop.customroute`

- `Condition`: a dataclass for custom-route conditions.
- `find_condition` and `ensure_default_conditions`.
- `check_errors_configuring_custom_route` and `degrade_if_time_elapsed`.
- `parse_certificates(key_data)` loads every certificate in a PEM bundle.
  It raises `ValueError` when the bundle contains none.

## Example

```python
from authop.arguments import encode

args = {"audit-log-format": ["json"], "audit-log-path": ["/var/log/oauth-server/audit.log"]}
print(encode(args))
# --audit-log-format=json \
# --audit-log-path=/var/log/oauth-server/audit.log
```

```python
from authop.listers import InMemoryLister, InMemoryRecorder, Listers
from authop.observers import observe_api_server_url

infrastructures = InMemoryLister()
infrastructures.add({"metadata": {"name": "cluster"},
                     "status": {"apiServerURL": "https://api.example.com:6443"}})
listers = Listers(infrastructure_lister=infrastructures)
recorder = InMemoryRecorder()

config, errors = observe_api_server_url(listers, recorder, {})
# config == {"oauthConfig": {"loginURL": "https://api.example.com:6443"}}
```

## What this package does not do

This is a library of pure functions and in-memory stores. It has no command
to start and does not run as an operator. It has no cluster API client, no
informers and no control loops. It does not create or update routes, and it
does not check over the network whether a route is reachable. Callers supply
the objects and the status writer themselves.