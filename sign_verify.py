#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Offline Ed25519 sign / verify tool for Modulr keys.

  sign    - PKCS8 Base64 private key + message -> Base64 signature
  verify  - Base58 public key + Base64 signature + message -> exit 0 if valid

Messages are signed as raw bytes; text given with --message is UTF-8 encoded.
"""

import argparse
import getpass
import logging
import sys
from pathlib import Path

from keypair_core import SigningFailure, sign, verify


def load_message(args, parser: argparse.ArgumentParser) -> bytes:
    if args.message is not None:
        return args.message.encode("utf-8")
    path = Path(args.message_file)
    if not path.exists():
        parser.exit(1, f"Error: message file not found: {path}\n")
    return path.read_bytes()


def resolve_private_key(args, parser: argparse.ArgumentParser) -> str:
    if args.key_stdin:
        if sys.stdin.isatty():
            parser.error("--key-stdin requires piped stdin input")
        return sys.stdin.readline().strip()
    if args.key_prompt:
        return getpass.getpass("Enter PKCS8 private key (Base64): ").strip()
    print(
        "WARNING: --key is visible in process list and shell history. "
        "Prefer --key-stdin or --key-prompt.",
        file=sys.stderr,
    )
    return args.key.strip()


def add_message_args(sub: argparse.ArgumentParser) -> None:
    group = sub.add_mutually_exclusive_group(required=True)
    group.add_argument("--message", help="message text (UTF-8 encoded before signing)")
    group.add_argument("--message-file", help="path to a file whose raw bytes are the message")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sign or verify messages with Modulr Ed25519 keys")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging to stderr")
    commands = parser.add_subparsers(dest="command", required=True)

    sign_cmd = commands.add_parser("sign", help="sign a message with a PKCS8 Base64 private key")
    key_group = sign_cmd.add_mutually_exclusive_group(required=True)
    key_group.add_argument(
        "--key",
        help="PKCS8 Base64 private key (HIGH RISK: prefer --key-stdin or --key-prompt)",
    )
    key_group.add_argument("--key-stdin", action="store_true", help="read the private key from stdin")
    key_group.add_argument("--key-prompt", action="store_true", help="prompt for the private key with hidden input")
    add_message_args(sign_cmd)

    verify_cmd = commands.add_parser("verify", help="verify a Base64 signature against a Base58 public key")
    verify_cmd.add_argument("--public-key", required=True, help="Base58 Ed25519 public key")
    verify_cmd.add_argument("--signature", required=True, help="Base64 Ed25519 signature")
    add_message_args(verify_cmd)
    return parser


def main():
    parser = build_parser()
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    message = load_message(args, parser)

    if args.command == "sign":
        private_key = resolve_private_key(args, parser)
        try:
            print(sign(message, private_key))
        except SigningFailure as exc:
            parser.exit(1, f"Error: {exc}\n")
        return

    if verify(message, args.signature, args.public_key):
        print("OK: signature is valid")
        return
    print("FAILED: signature is not valid for this key and message")
    sys.exit(1)


if __name__ == "__main__":
    main()
