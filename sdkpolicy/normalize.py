from __future__ import annotations

from typing import Any, Optional

from .errors import MalformedConfigurationError
from .models import (
    ConditionDefinition,
    MappingTable,
    MethodMapping,
    Privilege,
    PrivilegeResourceTypeRef,
    ResourceOverride,
    ResourceTemplate,
    ServiceDefinition,
    TrackedCall,
)


_MISSING = object()


def _field(data: dict, path: str, *names: str, required: bool = False, default: Any = None) -> Any:
    """Return the first key present in `data`; camelCase and snake_case spellings are both accepted."""
    for name in names:
        value = data.get(name, _MISSING)
        if value is not _MISSING:
            return value
    if required:
        raise MalformedConfigurationError(f"missing required field '{names[0]}'", path=path)
    return default


def _require_dict(value: Any, path: str) -> dict:
    if not isinstance(value, dict):
        raise MalformedConfigurationError(f"expected an object, got {type(value).__name__}", path=path)
    return value


def _require_list(value: Any, path: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedConfigurationError(f"expected a list, got {type(value).__name__}", path=path)
    return value


def _str(value: Any, path: str, allow_empty: bool = True) -> str:
    if value is None:
        value = ""
    if not isinstance(value, str):
        raise MalformedConfigurationError(f"expected a string, got {type(value).__name__}", path=path)
    if not allow_empty and not value.strip():
        raise MalformedConfigurationError("must not be empty", path=path)
    return value


def _str_tuple(value: Any, path: str) -> tuple[str, ...]:
    return tuple(_str(v, f"{path}[{i}]") for i, v in enumerate(_require_list(value, path)))


#########################
####### CATALOGUE #######
#########################

def _resource_type_ref(raw: Any, path: str) -> PrivilegeResourceTypeRef:
    raw = _require_dict(raw, path)
    return PrivilegeResourceTypeRef(
        resource_type_name=_str(
            _field(raw, path, "resourceType", "resource_type", "resourceTypeName", required=True),
            f"{path}.resourceType",
        ),
        condition_keys=_str_tuple(_field(raw, path, "conditionKeys", "condition_keys"), f"{path}.conditionKeys"),
        dependent_actions=_str_tuple(
            _field(raw, path, "dependentActions", "dependent_actions"), f"{path}.dependentActions"
        ),
    )


def _privilege(raw: Any, path: str) -> Privilege:
    raw = _require_dict(raw, path)
    refs = _require_list(_field(raw, path, "resourceTypes", "resource_types"), f"{path}.resourceTypes")
    return Privilege(
        name=_str(_field(raw, path, "privilege", "name", required=True), f"{path}.privilege", allow_empty=False),
        description=_str(_field(raw, path, "description"), f"{path}.description"),
        access_level=_str(_field(raw, path, "accessLevel", "access_level"), f"{path}.accessLevel"),
        resource_types=tuple(_resource_type_ref(r, f"{path}.resourceTypes[{i}]") for i, r in enumerate(refs)),
    )


def _resource_template(raw: Any, path: str) -> ResourceTemplate:
    raw = _require_dict(raw, path)
    return ResourceTemplate(
        # Empty names occur in the public dataset; they never match a resource type.
        resource_type_name=_str(
            _field(raw, path, "resource", "resourceTypeName", "resource_type", required=True), f"{path}.resource"
        ),
        arn_template=_str(_field(raw, path, "arn", "arnTemplate", required=True), f"{path}.arn"),
        condition_keys=_str_tuple(_field(raw, path, "conditionKeys", "condition_keys"), f"{path}.conditionKeys"),
    )


def _condition(raw: Any, path: str) -> ConditionDefinition:
    raw = _require_dict(raw, path)
    return ConditionDefinition(
        condition=_str(_field(raw, path, "condition", required=True), f"{path}.condition"),
        description=_str(_field(raw, path, "description"), f"{path}.description"),
        type=_str(_field(raw, path, "type"), f"{path}.type"),
    )


def normalize_service(raw: Any, path: str = "catalogue[0]") -> ServiceDefinition:
    raw = _require_dict(raw, path)
    privileges = _require_list(_field(raw, path, "privileges"), f"{path}.privileges")
    resources = _require_list(_field(raw, path, "resources"), f"{path}.resources")
    conditions = _require_list(_field(raw, path, "conditions"), f"{path}.conditions")
    return ServiceDefinition(
        prefix=_str(_field(raw, path, "prefix", required=True), f"{path}.prefix", allow_empty=False),
        service_name=_str(_field(raw, path, "serviceName", "service_name"), f"{path}.serviceName"),
        privileges=tuple(_privilege(p, f"{path}.privileges[{i}]") for i, p in enumerate(privileges)),
        resources=tuple(_resource_template(r, f"{path}.resources[{i}]") for i, r in enumerate(resources)),
        conditions=tuple(_condition(c, f"{path}.conditions[{i}]") for i, c in enumerate(conditions)),
    )


def normalize_catalogue(raw: Any) -> list[ServiceDefinition]:
    if not isinstance(raw, list):
        raise MalformedConfigurationError("catalogue must be a list of service definitions", path="catalogue")
    return [normalize_service(s, f"catalogue[{i}]") for i, s in enumerate(raw)]


#########################
####### MAPPINGS ########
#########################

def _method_mapping(raw: Any, path: str) -> MethodMapping:
    raw = _require_dict(raw, path)
    overrides_raw = _field(raw, path, "resourceMappings", "resource_mappings", "resourceOverrides") or {}
    overrides_raw = _require_dict(overrides_raw, f"{path}.resourceMappings")
    overrides: dict[str, ResourceOverride] = {}
    for name, opts in overrides_raw.items():
        opts_path = f"{path}.resourceMappings.{name}"
        opts = _require_dict(opts, opts_path)
        overrides[name] = ResourceOverride(
            template=_str(_field(opts, opts_path, "template", required=True), f"{opts_path}.template")
        )
    return MethodMapping(
        target_action=_str(
            _field(raw, path, "action", "targetAction", required=True), f"{path}.action", allow_empty=False
        ),
        resource_overrides=overrides,
    )


def normalize_mapping_table(raw: Any) -> MappingTable:
    raw = _require_dict(raw, "mappings")

    aliases_raw = _require_dict(
        _field(raw, "mappings", "sdkServiceMappings", "sdk_service_mappings", "serviceAliases") or {},
        "mappings.sdkServiceMappings",
    )
    aliases = {
        str(k): _str(v, f"mappings.sdkServiceMappings.{k}", allow_empty=False) for k, v in aliases_raw.items()
    }

    methods_raw = _require_dict(
        _field(raw, "mappings", "sdkMethodIamMappings", "sdk_method_iam_mappings", "methodMappings") or {},
        "mappings.sdkMethodIamMappings",
    )
    methods: dict[str, tuple[MethodMapping, ...]] = {}
    for key, entries in methods_raw.items():
        entries_path = f"mappings.sdkMethodIamMappings.{key}"
        entries = _require_list(entries, entries_path)
        methods[str(key)] = tuple(_method_mapping(e, f"{entries_path}[{i}]") for i, e in enumerate(entries))

    permissionless = _str_tuple(
        _field(raw, "mappings", "sdkPermissionlessAction", "sdk_permissionless_actions", "permissionlessMethods"),
        "mappings.sdkPermissionlessAction",
    )

    return MappingTable(
        service_aliases=aliases,
        method_mappings=methods,
        permissionless_methods=frozenset(permissionless),
    )


#########################
##### TRACKED CALLS #####
#########################

def normalize_tracked_call(raw: Any, path: str = "calls[0]") -> TrackedCall:
    raw = _require_dict(raw, path)
    params_raw: Optional[dict] = _field(raw, path, "params", "parameters") or {}
    params_raw = _require_dict(params_raw, f"{path}.params")
    return TrackedCall(
        service=_str(_field(raw, path, "service", required=True), f"{path}.service", allow_empty=False),
        method=_str(_field(raw, path, "method", required=True), f"{path}.method", allow_empty=False),
        params={str(k): str(v) for k, v in params_raw.items() if v is not None},
    )


def normalize_tracked_calls(raw: Any) -> list[TrackedCall]:
    if not isinstance(raw, list):
        raise MalformedConfigurationError("tracked calls must be a list", path="calls")
    return [normalize_tracked_call(c, f"calls[{i}]") for i, c in enumerate(raw)]
