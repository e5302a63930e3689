#!/usr/bin/env python3

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

import yaml

REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sdkpolicy.errors import MalformedConfigurationError  # noqa: E402
from sdkpolicy.loader import load_catalogue, load_mapping_table  # noqa: E402
from sdkpolicy.models import MappingTable, ServiceDefinition  # noqa: E402


def unbound_targets(catalogue: list[ServiceDefinition], mappings: MappingTable) -> list[tuple[str, str]]:
    """Mapping entries whose target action names no catalogue privilege."""
    aliases = {k.lower(): v for k, v in mappings.service_aliases.items()}
    known: set[str] = set()
    for svc in catalogue:
        prefix = aliases.get(svc.prefix.lower(), svc.prefix).lower()
        for priv in svc.privileges:
            known.add(f"{prefix}:{priv.name.lower()}")

    out: list[tuple[str, str]] = []
    for key, entries in mappings.method_mappings.items():
        for entry in entries:
            if entry.target_action.lower() not in known:
                out.append((key, entry.target_action))
    return sorted(out)


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Validate the IAM definition catalogue and SDK mapping table.")
    ap.add_argument("--catalogue", default="data/iam_definition.json")
    ap.add_argument("--mappings", default="data/map.json")
    ap.add_argument("--strict", default=False, action="store_true", help="Fail when mapping targets name unknown privileges.")
    args = ap.parse_args(argv)

    try:
        catalogue = load_catalogue(args.catalogue)
        mappings = load_mapping_table(args.mappings)
    except (OSError, json.JSONDecodeError, yaml.YAMLError, MalformedConfigurationError) as e:
        print(f"Invalid dataset: {e}", file=sys.stderr)
        return 1

    print(f"Services: {len(catalogue)}")
    print(f"Privileges: {sum(len(s.privileges) for s in catalogue)}")
    print(f"Resource templates: {sum(len(s.resources) for s in catalogue)}")
    print(f"Method mappings: {len(mappings.method_mappings)}")
    print(f"Service aliases: {len(mappings.service_aliases)}")
    print(f"Permissionless methods: {len(mappings.permissionless_methods)}")

    unbound = unbound_targets(catalogue, mappings)
    if unbound:
        print(f"Unbound mapping targets: {len(unbound)}", file=sys.stderr)
        for key, action in unbound:
            print(f"  - {key} -> {action}", file=sys.stderr)
        if args.strict:
            return 2

    print("OK: datasets loaded.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
