#!/usr/bin/env python3

from __future__ import annotations

import argparse
import os
from typing import Optional, Sequence

import requests


CATALOGUE_URL = "https://raw.githubusercontent.com/iann0036/iam-dataset/refs/heads/main/aws/iam_definition.json"
MAPPINGS_URL = "https://raw.githubusercontent.com/iann0036/iamlive/refs/heads/main/iamlivecore/map.json"

CATALOGUE_FILE = "iam_definition.json"
MAPPINGS_FILE = "map.json"


def _download(url: str, dest: str) -> None:
    os.makedirs(os.path.dirname(dest) or ".", exist_ok=True)
    r = requests.get(url, timeout=120)
    r.raise_for_status()
    with open(dest, "wb") as f:
        f.write(r.content)


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Download the IAM definition catalogue and the SDK method mapping table.")
    ap.add_argument("--dest", default="data", help="Directory to write the datasets into (default: data).")
    ap.add_argument("--catalogue-url", default=CATALOGUE_URL)
    ap.add_argument("--mappings-url", default=MAPPINGS_URL)
    args = ap.parse_args(argv)

    for url, name in ((args.catalogue_url, CATALOGUE_FILE), (args.mappings_url, MAPPINGS_FILE)):
        dest = os.path.join(args.dest, name)
        _download(url, dest)
        print(f"Downloaded {url} -> {dest}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
