"""Fetch a repository's latest commit and export a few of its blocks.

Usage:
    ATPROTO_PDS_URL=https://bsky.social python examples/latest_commit.py did:plc:... [cid ...]
"""

from __future__ import annotations

import asyncio
import logging
import sys

from atproto_xrpc import ApiError, AsyncXrpcClient, XrpcError


async def main(did: str, cids: list[str]) -> int:
    async with AsyncXrpcClient.from_env() as client:
        try:
            commit = await client.sync.get_latest_commit(did)
            print(f"latest commit: cid={commit.cid} rev={commit.rev}")
            if cids:
                car = await client.sync.get_blocks(did, cids)
                print(f"fetched {len(car)} bytes of CAR data")
        except ApiError as error:
            print(f"server rejected the call: {error.status_code} {error.error}: {error.error_message}", file=sys.stderr)
            return 1
        except XrpcError as error:
            print(f"request failed: {error}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    if len(sys.argv) < 2:
        print(__doc__, file=sys.stderr)
        raise SystemExit(2)
    raise SystemExit(asyncio.run(main(sys.argv[1], sys.argv[2:])))
