from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


WILDCARD = "*"


@dataclass(frozen=True)
class ConditionDefinition:
    condition: str
    description: str = ""
    type: str = ""


@dataclass(frozen=True)
class PrivilegeResourceTypeRef:
    resource_type_name: str
    condition_keys: tuple[str, ...] = ()
    dependent_actions: tuple[str, ...] = ()

    @property
    def is_wildcard(self) -> bool:
        return self.resource_type_name.endswith(WILDCARD)

    @property
    def base_name(self) -> str:
        return self.resource_type_name.replace(WILDCARD, "")


@dataclass(frozen=True)
class Privilege:
    name: str
    description: str = ""
    access_level: str = ""
    resource_types: tuple[PrivilegeResourceTypeRef, ...] = ()


@dataclass(frozen=True)
class ResourceTemplate:
    resource_type_name: str
    arn_template: str
    condition_keys: tuple[str, ...] = ()


@dataclass(frozen=True)
class ServiceDefinition:
    prefix: str
    privileges: tuple[Privilege, ...] = ()
    resources: tuple[ResourceTemplate, ...] = ()
    conditions: tuple[ConditionDefinition, ...] = ()
    service_name: str = ""


@dataclass(frozen=True)
class ResourceOverride:
    template: str


@dataclass(frozen=True)
class MethodMapping:
    target_action: str
    resource_overrides: dict[str, ResourceOverride] = field(default_factory=dict)


@dataclass(frozen=True)
class MappingTable:
    service_aliases: dict[str, str] = field(default_factory=dict)
    method_mappings: dict[str, tuple[MethodMapping, ...]] = field(default_factory=dict)
    permissionless_methods: frozenset[str] = frozenset()


@dataclass(frozen=True)
class TrackedCall:
    service: str
    method: str
    params: dict[str, str] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return f"{self.service.lower()}.{self.method.lower()}"


@dataclass(frozen=True)
class ResolvedPrivilege:
    privilege: Privilege
    mapping: Optional[MethodMapping] = None


@dataclass(frozen=True)
class PolicyStatement:
    action: str
    description: str
    resources: tuple[str, ...]

    def to_dict(self) -> dict:
        resource = self.resources[0] if len(self.resources) == 1 else list(self.resources)
        return {"Effect": "Allow", "Action": self.action, "Resource": resource}
