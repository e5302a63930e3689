from .arn import ArnTemplater, DeploymentContext
from .core import GENERIC_SDK_METHODS, PolicyGenerator
from .errors import MalformedConfigurationError, PolicyGenerationError, UnmatchedCallError
from .models import (
    ConditionDefinition,
    MappingTable,
    MethodMapping,
    PolicyStatement,
    Privilege,
    PrivilegeResourceTypeRef,
    ResolvedPrivilege,
    ResourceOverride,
    ResourceTemplate,
    ServiceDefinition,
    TrackedCall,
)
from .policy import build_policy, serialize_policy

__all__ = [
    "ArnTemplater",
    "ConditionDefinition",
    "DeploymentContext",
    "GENERIC_SDK_METHODS",
    "MalformedConfigurationError",
    "MappingTable",
    "MethodMapping",
    "PolicyGenerationError",
    "PolicyGenerator",
    "PolicyStatement",
    "Privilege",
    "PrivilegeResourceTypeRef",
    "ResolvedPrivilege",
    "ResourceOverride",
    "ResourceTemplate",
    "ServiceDefinition",
    "TrackedCall",
    "UnmatchedCallError",
    "build_policy",
    "serialize_policy",
]
