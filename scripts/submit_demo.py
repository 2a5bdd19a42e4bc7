#!/usr/bin/env python3
"""
Submit a sample transaction and wait for it to commit.

Requires a running ledger REST API (default http://localhost:8008/, or
GITCHAIN_REST_ENDPOINT) with the gitchain transaction processor attached.
"""

import argparse
import asyncio
import json
import sys
import uuid
from pathlib import Path

from gitchain import GitchainError, TransactionSubmitter
from gitchain.config import GitchainConfig
from gitchain.logs import setup_logging


def load_private_key(path: str) -> str:
    return Path(path).read_text().strip()


async def run(args: argparse.Namespace) -> int:
    config = GitchainConfig(
        poll_timeout_seconds=args.timeout,
        fail_on_invalid=True,
    )
    submitter = TransactionSubmitter(config=config)
    
    transaction = {
        "type": "push",
        "id": str(uuid.uuid4()),
        "repository": args.repository,
        "ref": args.ref,
        "meta": {"inputs": [], "outputs": []},
    }
    
    try:
        record = await submitter.submit_and_poll(
            load_private_key(args.key_file),
            transaction,
            api_base=args.api_base,
        )
    except GitchainError as e:
        state = "may have been submitted" if e.possibly_submitted else "was not submitted"
        print(f"Failed ({state}): {e}", file=sys.stderr)
        return 1
    
    print(json.dumps(record, indent=2))
    return 0


def main():
    parser = argparse.ArgumentParser(description="Submit a demo transaction")
    parser.add_argument("--key-file", default="./keys/signing.priv")
    parser.add_argument("--api-base", default=None, help="REST API base URL")
    parser.add_argument("--repository", default="demo/repo")
    parser.add_argument("--ref", default="refs/heads/main")
    parser.add_argument("--timeout", type=float, default=60.0, help="Seconds to wait for commit")
    parser.add_argument("--log-level", default="INFO")
    
    args = parser.parse_args()
    setup_logging(args.log_level)
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
