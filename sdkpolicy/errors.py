from __future__ import annotations

from typing import Optional


class PolicyGenerationError(Exception):
    """Base class for every error raised while turning tracked calls into a policy."""


class UnmatchedCallError(PolicyGenerationError):
    """
    A tracked call resolved to no privilege and is not a known permissionless method.

    Fatal for the whole run: fix the catalogue/mapping data or filter the call.
    """

    def __init__(self, service: str, method: str) -> None:
        self.service = service
        self.method = method
        super().__init__(f"Could not find privilege match for {service.lower()}:{method}")


class MalformedConfigurationError(PolicyGenerationError, ValueError):
    def __init__(self, message: str, path: Optional[str] = None) -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)
