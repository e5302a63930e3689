from __future__ import annotations

from .arn import ArnTemplater
from .models import WILDCARD, ResolvedPrivilege, ServiceDefinition, TrackedCall


def resolve_resource_arns(
    templater: ArnTemplater,
    service: ServiceDefinition,
    resolved: ResolvedPrivilege,
    call: TrackedCall,
) -> list[str]:
    """
    Expand the ARNs a resolved privilege applies to for one call.

    An expanded ARN ending in "*" is kept only when the privilege's resource type
    reference is itself wildcarded. An empty result collapses to ["*"].
    """
    overrides = resolved.mapping.resource_overrides if resolved.mapping is not None else None
    arns: list[str] = []

    for ref in resolved.privilege.resource_types:
        wanted = ref.base_name.lower()
        for resource in service.resources:
            if not resource.resource_type_name or resource.resource_type_name.lower() != wanted:
                continue
            arn = templater.expand(resource.arn_template, call.params, overrides)
            if ref.is_wildcard or not arn.endswith(WILDCARD):
                arns.append(arn)

    return arns or [WILDCARD]
