from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .models import WILDCARD, ResourceOverride


DEFAULT_PARTITION = "aws"
DEFAULT_REGION = "us-east-1"
DEFAULT_ACCOUNT_ID = "123456789012"

_UNRESOLVED_RE = re.compile(r"\$\{[^}]*\}")


@dataclass(frozen=True)
class DeploymentContext:
    partition: str = DEFAULT_PARTITION
    region: str = DEFAULT_REGION
    account_id: str = DEFAULT_ACCOUNT_ID

    @classmethod
    def create(
        cls,
        partition: Optional[str] = None,
        region: Optional[str] = None,
        account_id: Optional[str] = None,
    ) -> "DeploymentContext":
        return cls(
            partition=partition or DEFAULT_PARTITION,
            region=region or DEFAULT_REGION,
            account_id=account_id or DEFAULT_ACCOUNT_ID,
        )


def _placeholder_re(name: str) -> re.Pattern[str]:
    return re.compile(r"\$\{" + re.escape(name) + r"\}", re.IGNORECASE)


def _substitute(template: str, name: str, value: str) -> str:
    # A lambda keeps backslashes in the value literal.
    return _placeholder_re(name).sub(lambda _m: value, template)


class ArnTemplater:
    """
    Expands `${Param}` placeholders in catalogue ARN templates.

    Passes run in order, each over the previous result:
      1. mapping overrides (their literal template strings), except names the
         call itself supplies
      2. call parameters
      3. ${Partition}, ${Region}, ${Account} from the deployment context
      4. anything still unresolved becomes "*"
    """

    def __init__(self, context: Optional[DeploymentContext] = None) -> None:
        self.context = context or DeploymentContext()

    def expand(
        self,
        template: str,
        call_params: Optional[Mapping[str, Any]] = None,
        mapping_overrides: Optional[Mapping[str, ResourceOverride]] = None,
    ) -> str:
        arn = template
        call_params = call_params or {}
        passed = {name.lower() for name in call_params}

        for name, override in (mapping_overrides or {}).items():
            if name.lower() in passed:
                continue
            arn = _substitute(arn, name, override.template)

        for name, value in call_params.items():
            arn = _substitute(arn, name, str(value))

        arn = arn.replace("${Partition}", self.context.partition)
        arn = arn.replace("${Region}", self.context.region)
        arn = arn.replace("${Account}", self.context.account_id)

        return _UNRESOLVED_RE.sub(WILDCARD, arn)
