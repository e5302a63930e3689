from __future__ import annotations

from typing import Callable, Optional

from .models import MappingTable, MethodMapping, Privilege, ResolvedPrivilege, ServiceDefinition, TrackedCall


Strategy = Callable[[ServiceDefinition, TrackedCall], Optional[list[ResolvedPrivilege]]]


def _lower_index(table: dict) -> dict:
    out: dict = {}
    for key, value in table.items():
        out.setdefault(key.lower(), value)
    return out


class PrivilegeResolver:
    """
    Resolves one tracked call against one catalogue service.

    Strategies are tried in order and the first one returning a list (even an
    empty one) wins:
      - the SDK mapping table, keyed by "service.method"
      - a privilege named exactly like the SDK method
    """

    def __init__(self, mappings: MappingTable) -> None:
        self._aliases: dict[str, str] = _lower_index(mappings.service_aliases)
        self._method_mappings: dict[str, tuple[MethodMapping, ...]] = _lower_index(mappings.method_mappings)
        self.strategies: tuple[Strategy, ...] = (self._from_mapping_table, self._from_catalogue)

    def mapped_prefix(self, prefix: str) -> str:
        return self._aliases.get(prefix.lower(), prefix)

    def resolve(self, service: ServiceDefinition, call: TrackedCall) -> list[ResolvedPrivilege]:
        for strategy in self.strategies:
            result = strategy(service, call)
            if result is not None:
                return result
        return []

    def _from_mapping_table(self, service: ServiceDefinition, call: TrackedCall) -> Optional[list[ResolvedPrivilege]]:
        mapped = self._method_mappings.get(call.key)
        if mapped is None:
            return None

        prefix = self.mapped_prefix(service.prefix).lower()
        resolved: list[ResolvedPrivilege] = []
        for mapping in mapped:
            target = mapping.target_action.lower()
            privilege = _first(service.privileges, lambda p: f"{prefix}:{p.name.lower()}" == target)
            # Targets naming no catalogue privilege are dropped.
            if privilege is not None:
                resolved.append(ResolvedPrivilege(privilege=privilege, mapping=mapping))
        return resolved

    def _from_catalogue(self, service: ServiceDefinition, call: TrackedCall) -> Optional[list[ResolvedPrivilege]]:
        method = call.method.lower()
        privilege = _first(service.privileges, lambda p: p.name.lower() == method)
        if privilege is None:
            return None
        return [ResolvedPrivilege(privilege=privilege)]


def _first(privileges: tuple[Privilege, ...], pred: Callable[[Privilege], bool]) -> Optional[Privilege]:
    for privilege in privileges:
        if pred(privilege):
            return privilege
    return None
