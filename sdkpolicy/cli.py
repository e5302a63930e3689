from __future__ import annotations

import argparse
import json
import sys
from typing import Optional, Sequence

import boto3
import yaml
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from termcolor import colored

from .arn import DeploymentContext
from .core import PolicyGenerator
from .errors import PolicyGenerationError
from .loader import load_catalogue, load_mapping_table, load_tracked_calls, parse_tracked_calls
from .models import PolicyStatement, TrackedCall
from .policy import atomic_write_json, build_policy, serialize_policy


BOTO3_CONFIG = Config(retries={"max_attempts": 3, "mode": "adaptive"})

HELP = "Generate a least-privilege IAM policy from a recording of SDK calls.\n"


def _err(msg: str) -> None:
    print(f"{colored('[-] ', 'red')}{msg}", file=sys.stderr)


def _info(msg: str) -> None:
    print(f"{colored('[*] ', 'yellow')}{msg}", file=sys.stderr)


def resolve_context(
    profile: Optional[str] = None,
    partition: Optional[str] = None,
    region: Optional[str] = None,
    account_id: Optional[str] = None,
) -> DeploymentContext:
    """Explicit values win; a profile only fills what was left unset."""
    if profile:
        session = boto3.Session(profile_name=profile)
        region = region or session.region_name
        if not account_id:
            sts = session.client("sts", config=BOTO3_CONFIG)
            account_id = sts.get_caller_identity()["Account"]
        if not partition and region:
            partition = session.get_partition_for_region(region)
    return DeploymentContext.create(partition, region, account_id)


def _read_calls(path: Optional[str]) -> list[TrackedCall]:
    if not path or path == "-":
        return parse_tracked_calls(sys.stdin.read())
    return load_tracked_calls(path)


def print_explanations(statements: Sequence[PolicyStatement]) -> None:
    for st in statements:
        desc = st.description or "(no description)"
        print(f"{colored('[+] ', 'green')}{colored(st.action, 'yellow')}: {desc}", file=sys.stderr)
        for arn in st.resources:
            print(f"    - {arn}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sdk-policy", description=HELP)
    parser.add_argument("--catalogue", required=True, help="IAM definition file (JSON or YAML)")
    parser.add_argument("--mappings", required=True, help="SDK method to IAM privilege mapping file (JSON or YAML)")
    parser.add_argument("--calls", help="Tracked calls file (JSON list, JSON lines or YAML). Reads stdin when omitted or '-'")
    parser.add_argument("--partition", help="AWS partition for ${Partition} (default: aws)")
    parser.add_argument("--region", help="AWS region for ${Region} (default: us-east-1)")
    parser.add_argument("--account-id", help="AWS account ID for ${Account} (default: 123456789012)")
    parser.add_argument("--profile", help="AWS profile used to fill in region, account and partition")
    parser.add_argument("--out", help="Write the policy to this path instead of stdout")
    parser.add_argument("--explain", default=False, action="store_true", help="Print each statement with its privilege description")
    parser.add_argument("-v", "--verbose", default=False, action="store_true", help="Print a summary of the run")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        generator = PolicyGenerator(
            load_catalogue(args.catalogue),
            load_mapping_table(args.mappings),
            resolve_context(args.profile, args.partition, args.region, args.account_id),
        )
        calls = _read_calls(args.calls)

        statements: list[PolicyStatement] = []
        skipped = 0
        for call in calls:
            produced = generator.statements_for_call(call)
            if not produced:
                skipped += 1
            statements.extend(produced)
    except (ClientError, BotoCoreError) as e:
        _err(f"Error resolving AWS context for profile {args.profile}: {str(e)}")
        return 1
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        _err(f"Error reading input: {str(e)}")
        return 1
    except PolicyGenerationError as e:
        _err(f"Error: {str(e)}")
        return 1

    if args.verbose:
        ctx = generator.context
        _info(f"Context: partition={ctx.partition} region={ctx.region} account={ctx.account_id}")
        _info(f"Read {len(calls)} tracked call(s), emitted {len(statements)} statement(s), skipped {skipped} permissionless call(s)")
    if args.explain:
        print_explanations(statements)

    policy = build_policy(statements)
    if args.out:
        try:
            atomic_write_json(args.out, policy)
        except OSError as e:
            _err(f"Error writing {args.out}: {str(e)}")
            return 1
        if args.verbose:
            print(f"{colored('[+] ', 'green')}Policy written to {args.out}", file=sys.stderr)
    else:
        print(serialize_policy(policy))
    return 0
