from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence

from .arn import ArnTemplater, DeploymentContext
from .errors import MalformedConfigurationError, UnmatchedCallError
from .models import MappingTable, PolicyStatement, ServiceDefinition, TrackedCall
from .normalize import normalize_catalogue, normalize_mapping_table
from .policy import build_policy, serialize_policy
from .resolver import PrivilegeResolver
from .resources import resolve_resource_arns


# Generic SDK client lifecycle methods that never need a privilege.
GENERIC_SDK_METHODS = frozenset({
    "endpoint",
    "defineservice",
    "makerequest",
    "makeunauthenticatedrequest",
    "setuprequestlisteners",
    "waitfor",
})


class PolicyGenerator:
    """
    Turns a sequence of tracked SDK calls into an access policy document.

    The catalogue and mapping table are read-only for the lifetime of the
    generator; every call to generate_policy() is an independent pure pass.
    """

    def __init__(
        self,
        catalogue: Sequence[ServiceDefinition],
        mappings: MappingTable,
        context: Optional[DeploymentContext] = None,
    ) -> None:
        _validate(catalogue, mappings)
        self.catalogue = tuple(catalogue)
        self.mappings = mappings
        self.context = context or DeploymentContext()
        self.templater = ArnTemplater(self.context)
        self.resolver = PrivilegeResolver(mappings)
        self._permissionless = frozenset(m.lower() for m in mappings.permissionless_methods)

    @classmethod
    def from_raw(
        cls,
        catalogue: Any,
        mappings: Any,
        partition: Optional[str] = None,
        region: Optional[str] = None,
        account_id: Optional[str] = None,
    ) -> "PolicyGenerator":
        """Build from undecoded JSON/YAML-shaped data."""
        return cls(
            normalize_catalogue(catalogue),
            normalize_mapping_table(mappings),
            DeploymentContext.create(partition, region, account_id),
        )

    def is_permissionless(self, call: TrackedCall) -> bool:
        method = call.method.lower()
        return method in GENERIC_SDK_METHODS or method in self._permissionless or call.key in self._permissionless

    def find_service(self, call: TrackedCall) -> Optional[ServiceDefinition]:
        wanted = self.resolver.mapped_prefix(call.service).lower()
        for service in self.catalogue:
            if self.resolver.mapped_prefix(service.prefix).lower() == wanted:
                return service
        return None

    def statements_for_call(self, call: TrackedCall) -> list[PolicyStatement]:
        """Statements for one call; raises UnmatchedCallError when nothing resolves."""
        statements: list[PolicyStatement] = []
        if call.method.lower() in GENERIC_SDK_METHODS:
            return statements

        service = self.find_service(call)
        if service is not None:
            prefix = self.resolver.mapped_prefix(service.prefix)
            for resolved in self.resolver.resolve(service, call):
                arns = resolve_resource_arns(self.templater, service, resolved, call)
                statements.append(PolicyStatement(
                    action=f"{prefix}:{resolved.privilege.name}",
                    description=resolved.privilege.description,
                    resources=tuple(arns),
                ))

        if not statements and not self.is_permissionless(call):
            raise UnmatchedCallError(call.service, call.method)
        return statements

    def generate_statements(self, calls: Iterable[TrackedCall]) -> list[PolicyStatement]:
        statements: list[PolicyStatement] = []
        for call in calls:
            statements.extend(self.statements_for_call(call))
        return statements

    def build(self, calls: Iterable[TrackedCall]) -> dict:
        return build_policy(self.generate_statements(calls))

    def generate_policy(self, calls: Iterable[TrackedCall]) -> str:
        return serialize_policy(self.build(calls))


def _validate(catalogue: Sequence[ServiceDefinition], mappings: MappingTable) -> None:
    if not isinstance(mappings, MappingTable):
        raise MalformedConfigurationError("expected a MappingTable", path="mappings")
    seen: set[str] = set()
    for idx, service in enumerate(catalogue):
        if not isinstance(service, ServiceDefinition):
            raise MalformedConfigurationError("expected a ServiceDefinition", path=f"catalogue[{idx}]")
        prefix = service.prefix.lower()
        if prefix in seen:
            raise MalformedConfigurationError(f"duplicate service prefix '{service.prefix}'", path=f"catalogue[{idx}].prefix")
        seen.add(prefix)
