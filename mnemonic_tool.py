#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Offline BIP39 phrase tool for Modulr keys:
- --generate [BITS]  print a fresh checksummed phrase (default 256 bits, 24 words)
- --validate PHRASE  check words and checksum after whitespace/case cleanup

The phrase is the only backup of a keypair; keys are derived from it with
generate_keypair.py.
"""

import argparse
import sys

import keypair_core as core

generate_mnemonic = core.generate_mnemonic
validate_mnemonic = core.validate_mnemonic


def entropy_bits_arg(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("--generate must be an integer") from exc
    if parsed not in core.VALID_ENTS:
        raise argparse.ArgumentTypeError(
            f"--generate must be one of {sorted(core.VALID_ENTS)} bits"
        )
    return parsed


def read_phrase(args, parser: argparse.ArgumentParser) -> str:
    if args.validate_stdin:
        if sys.stdin.isatty():
            parser.error("--validate-stdin requires piped stdin input")
        return sys.stdin.readline()
    print(
        "WARNING: --validate is visible in process list and shell history. "
        "Prefer --validate-stdin.",
        file=sys.stderr,
    )
    return args.validate


def main():
    parser = argparse.ArgumentParser(description="Generate or check a BIP39 phrase for Modulr keys")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--generate",
        type=entropy_bits_arg,
        nargs="?",
        const=core.DEFAULT_ENTROPY_BITS,
        metavar="BITS",
        help=f"generate a phrase from secure randomness (default: {core.DEFAULT_ENTROPY_BITS} bits)",
    )
    group.add_argument("--validate", help="check a phrase (HIGH RISK: prefer --validate-stdin)")
    group.add_argument("--validate-stdin", action="store_true", help="check a phrase read from stdin")
    parser.add_argument(
        "--wordlist",
        default=None,
        help="BIP39 wordlist file (default: English list bundled with the mnemonic package)",
    )
    args = parser.parse_args()

    try:
        if args.generate is not None:
            print(generate_mnemonic(args.generate, args.wordlist))
            print(
                "WARNING: this phrase is the only backup of the derived keys. "
                "Write it down offline.",
                file=sys.stderr,
            )
            return

        phrase = core.normalize_mnemonic(read_phrase(args, parser))
        validate_mnemonic(phrase, args.wordlist)
    except core.InvalidMnemonic as exc:
        sys.exit(f"INVALID: {exc}")
    except (ValueError, FileNotFoundError) as exc:
        sys.exit(f"Error: {exc}")
    print(f"OK: valid {len(phrase.split())}-word mnemonic")


if __name__ == "__main__":
    main()
