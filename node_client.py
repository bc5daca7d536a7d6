#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Read-only client for a Modulr ledger node's HTTP API.

Lookups return the decoded JSON body. Non-2xx responses raise
NodeResponseError carrying the status and the raw body text.
"""

import argparse
import json
import logging
import os
import sys
import urllib.error
import urllib.parse
import urllib.request

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15
USER_AGENT = "modulr-keykit/1.0"
NODE_URL_ENV = "MODULR_NODE_URL"


class NodeResponseError(RuntimeError):
    def __init__(self, status: int, body: str):
        super().__init__(f"Node responded with {status}: {body}")
        self.status = status
        self.body = body


def encode_segment(segment) -> str:
    """Percent-encode one path segment, leaving only unreserved characters."""
    text = "" if segment is None else str(segment)
    return urllib.parse.quote(text.strip(), safe="-_.!~*'()")


def build_transaction_payload(sender, recipient, amount, nonce, payload=""):
    if sender is None or recipient is None or amount is None or nonce is None:
        raise ValueError("sender, recipient, amount and nonce must be provided")
    return {
        "sender": sender,
        "recipient": recipient,
        "amount": amount,
        "nonce": nonce,
        "payload": payload,
    }


def parse_json_response(status: int, body: str):
    if not 200 <= status < 300:
        raise NodeResponseError(status, body)
    return json.loads(body)


class NodeClient:
    def __init__(self, node_url: str, timeout: float = DEFAULT_TIMEOUT):
        if not node_url or not isinstance(node_url, str):
            raise ValueError("Node URL must be provided as a string")
        self.node_url = node_url.rstrip("/")
        self.timeout = timeout

    def build_url(self, endpoint: str = "") -> str:
        normalized = endpoint if endpoint.startswith("/") else f"/{endpoint}"
        return f"{self.node_url}{normalized}"

    def _get(self, path: str):
        url = self.build_url(path)
        log.debug("GET %s", url)
        req = urllib.request.Request(url)
        req.add_header("User-Agent", USER_AGENT)
        req.add_header("Accept", "application/json")
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                return parse_json_response(resp.status, resp.read().decode("utf-8"))
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace") if e.fp else ""
            raise NodeResponseError(e.code, body) from e

    def get_block_by_id(self, block_id):
        return self._get(f"/block/{encode_segment(block_id)}")

    def get_block_by_height(self, absolute_height_index):
        return self._get(f"/height/{encode_segment(absolute_height_index)}")

    def get_account_by_id(self, account_id):
        return self._get(f"/account/{encode_segment(account_id)}")

    def get_epoch_data(self, epoch_index):
        return self._get(f"/epoch_data/{encode_segment(epoch_index)}")

    def get_aggregated_finalization_proof(self, block_id):
        return self._get(f"/aggregated_finalization_proof/{encode_segment(block_id)}")

    def get_aggregated_epoch_finalization_proof(self, epoch_index):
        return self._get(f"/aggregated_epoch_finalization_proof/{encode_segment(epoch_index)}")

    def get_transaction_by_hash(self, tx_hash):
        return self._get(f"/transaction/{encode_segment(tx_hash)}")

    def submit_transaction(self, transaction=None):
        raise NotImplementedError("POST /transaction is not implemented yet")


LOOKUPS = {
    "block": "get_block_by_id",
    "height": "get_block_by_height",
    "account": "get_account_by_id",
    "epoch": "get_epoch_data",
    "afp": "get_aggregated_finalization_proof",
    "aefp": "get_aggregated_epoch_finalization_proof",
    "tx": "get_transaction_by_hash",
}


def main():
    parser = argparse.ArgumentParser(description="Query a Modulr node")
    parser.add_argument(
        "--node-url",
        default=os.environ.get(NODE_URL_ENV),
        help=f"node base URL (default: ${NODE_URL_ENV})",
    )
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT)
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging to stderr")
    parser.add_argument("lookup", choices=sorted(LOOKUPS), help="resource to fetch")
    parser.add_argument("key", help="block id, height, account id, epoch index or tx hash")
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if not args.node_url:
        parser.error(f"--node-url or {NODE_URL_ENV} is required")

    client = NodeClient(args.node_url, timeout=args.timeout)
    try:
        result = getattr(client, LOOKUPS[args.lookup])(args.key)
    except NodeResponseError as exc:
        parser.exit(1, f"Error: {exc}\n")
    except (urllib.error.URLError, OSError, ValueError) as exc:
        parser.exit(1, f"Error: cannot reach node: {exc}\n")
    json.dump(result, sys.stdout, indent=2)
    sys.stdout.write("\n")


if __name__ == "__main__":
    main()
