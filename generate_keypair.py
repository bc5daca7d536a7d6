#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Offline Ed25519 keypair generator:
- Input: BIP39 mnemonic (+ optional passphrase), or nothing to create a
  fresh 24-word phrase
- Output: JSON bundle {mnemonic, derivationPath, publicKey, privateKey}
  * publicKey  = Base58 of the raw 32-byte Ed25519 public key
  * privateKey = Base64 of the PKCS8 DER private key

Derivation walks m/44'/7337'/0'/0' by default and is delegated to
`keypair_core.py` so every tool produces identical keys.
"""

import argparse
import getpass
import json
import logging
import sys

from keypair_core import (
    DEFAULT_DERIVATION_PATH,
    InvalidMnemonic,
    generate_default_keypair,
)

UINT31_MAX = 0x7FFFFFFF


def uint31_arg(flag_name: str):
    def _parse(value: str) -> int:
        try:
            parsed = int(value)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(f"{flag_name} must be an integer") from exc
        if parsed < 0 or parsed > UINT31_MAX:
            raise argparse.ArgumentTypeError(
                f"{flag_name} must be between 0 and {UINT31_MAX}"
            )
        return parsed

    return _parse


def resolve_mnemonic(args, parser: argparse.ArgumentParser) -> str:
    if args.mnemonic_stdin:
        if sys.stdin.isatty():
            parser.error("--mnemonic-stdin requires piped stdin input")
        return sys.stdin.readline().rstrip("\r\n")
    if args.mnemonic is not None:
        print(
            "WARNING: --mnemonic is visible in process list and shell history. "
            "Prefer --mnemonic-stdin.",
            file=sys.stderr,
        )
        return args.mnemonic
    return ""


def resolve_passphrase(args, parser: argparse.ArgumentParser) -> str:
    if args.passphrase_stdin:
        if sys.stdin.isatty():
            parser.error("--passphrase-stdin requires piped stdin input")
        return sys.stdin.readline().rstrip("\r\n")
    if args.passphrase_prompt:
        return getpass.getpass("Enter BIP39 passphrase (leave empty for none): ")
    if args.passphrase is not None:
        print(
            "WARNING: --passphrase is visible in process list and shell history. "
            "Prefer --passphrase-stdin or --passphrase-prompt.",
            file=sys.stderr,
        )
        return args.passphrase
    return ""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Derive a Modulr Ed25519 keypair bundle from a BIP39 mnemonic",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  fresh 24-word phrase:
    python generate_keypair.py

  restore from a phrase piped on stdin:
    echo "abandon ... art" | python generate_keypair.py --mnemonic-stdin

  custom path m/44'/7337'/1'/0':
    python generate_keypair.py --mnemonic-stdin --path 44 7337 1 0
""",
    )
    mnemonic_group = parser.add_mutually_exclusive_group()
    mnemonic_group.add_argument(
        "--mnemonic",
        default=None,
        help="BIP39 mnemonic words (HIGH RISK: visible in process list; prefer --mnemonic-stdin)",
    )
    mnemonic_group.add_argument(
        "--mnemonic-stdin",
        action="store_true",
        help="Read the mnemonic from the first line of stdin",
    )
    passphrase_group = parser.add_mutually_exclusive_group()
    passphrase_group.add_argument(
        "--passphrase",
        default=None,
        help=(
            "BIP39 passphrase (HIGH RISK: visible in process list and shell history; "
            "prefer --passphrase-stdin or --passphrase-prompt)"
        ),
    )
    passphrase_group.add_argument(
        "--passphrase-stdin",
        action="store_true",
        help="Read BIP39 passphrase from stdin (recommended for scripts)",
    )
    passphrase_group.add_argument(
        "--passphrase-prompt",
        action="store_true",
        help="Prompt passphrase with hidden input (recommended for interactive use)",
    )
    parser.add_argument(
        "--path",
        nargs="+",
        type=uint31_arg("--path"),
        default=None,
        metavar="INDEX",
        help=(
            "four hardened path segments "
            f"(default: {' '.join(map(str, DEFAULT_DERIVATION_PATH))}); "
            "any other count falls back to the default"
        ),
    )
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging to stderr")
    return parser


def main():
    parser = build_parser()
    args = parser.parse_args()
    if args.mnemonic_stdin and args.passphrase_stdin:
        parser.error(
            "--mnemonic-stdin cannot be combined with --passphrase-stdin; "
            "use --passphrase-prompt instead."
        )
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    mnemonic = resolve_mnemonic(args, parser)
    passphrase = resolve_passphrase(args, parser)

    if args.path is not None and len(args.path) != 4:
        print(
            f"WARNING: --path needs 4 segments, got {len(args.path)}; "
            f"using {'/'.join(map(str, DEFAULT_DERIVATION_PATH))}",
            file=sys.stderr,
        )

    try:
        bundle = generate_default_keypair(mnemonic, passphrase, args.path)
    except InvalidMnemonic as exc:
        parser.exit(1, f"Error: invalid mnemonic: {exc}\n")
    except (ValueError, RuntimeError) as exc:
        parser.exit(1, f"Error: {exc}\n")

    if not mnemonic.strip():
        print(
            "WARNING: a new mnemonic was generated. Write it down offline; "
            "it is not stored anywhere else.",
            file=sys.stderr,
        )
    print(json.dumps(bundle.to_dict(), indent=args.indent))


if __name__ == "__main__":
    main()
