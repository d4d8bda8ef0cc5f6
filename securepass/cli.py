#!/usr/bin/env python3
"""
SecurePass CLI - Command-line interface for recipe-driven password generation.
"""

import argparse
import logging
import sys
from typing import List, Optional

from securepass.config import Config
from securepass.core.charclass import CharacterClass
from securepass.core.errors import SecurePassError
from securepass.core.generator import generate_passwords
from securepass.core.health import HealthTests
from securepass.core.log import setup_logging
from securepass.core.recipe import InclusionState, Recipe
from securepass.core.sampler import SecureSampler
from securepass.core.source import ArrayByteSource, ByteSource, get_default_source, secure_zero

STATE_CHOICES = [s.value for s in InclusionState]

# option name -> class
CLASS_OPTIONS = {
    "upper": CharacterClass.UPPER,
    "lower": CharacterClass.LOWER,
    "digits": CharacterClass.DIGIT,
    "symbols": CharacterClass.SYMBOL,
    "ambiguous": CharacterClass.AMBIGUOUS,
    "whitespace": CharacterClass.WHITESPACE,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="securepass",
        description="SecurePass - character password generator with exact entropy",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                 # 5 passwords from the configured recipe
  %(prog)s -l 8 --symbols exclude          # Letters and digits only
  %(prog)s --digits require --upper require
  %(prog)s --include "€" --exclude "{}"    # Add or veto literal characters
  %(prog)s --self-test -n 1                # Check the random source first
        """
    )

    gen_group = parser.add_argument_group('Generation')
    gen_group.add_argument("-l", "--length", type=int,
                           help="Password length (default: from config, 20)")
    gen_group.add_argument("-n", "--count", type=int,
                           help="Number of passwords (default: from config, 5)")

    class_group = parser.add_argument_group('Character classes')
    for option, tag in CLASS_OPTIONS.items():
        class_group.add_argument(f"--{option}", choices=STATE_CHOICES, metavar="STATE",
                                 help=f"{tag.value} characters: {'|'.join(STATE_CHOICES)}")
    class_group.add_argument("--include", metavar="CHARS",
                             help="Extra characters to add to the alphabet")
    class_group.add_argument("--exclude", metavar="CHARS",
                             help="Characters to remove from the alphabet (always wins)")

    src_group = parser.add_argument_group('Randomness')
    src_group.add_argument("-f", "--entropy-file", metavar="FILE",
                           help="Draw from captured entropy in FILE instead of the OS CSPRNG")
    src_group.add_argument("--no-hash", action="store_true",
                           help="Do not whiten the entropy file (NOT RECOMMENDED)")
    src_group.add_argument("--self-test", action="store_true",
                           help="Run randomness health tests before generating")

    cfg_group = parser.add_argument_group('Configuration')
    cfg_group.add_argument("--config", metavar="FILE",
                           help="Config file (default: ~/.securepass/config.json)")
    cfg_group.add_argument("--save-config", action="store_true",
                           help="Store the effective recipe in the config file")

    out_group = parser.add_argument_group('Output')
    out_group.add_argument("-q", "--quiet", action="store_true",
                           help="Print passwords only")
    out_group.add_argument("-v", "--verbose", action="count", default=0,
                           help="Log progress (-vv for debug)")
    return parser


def recipe_from_args(args: argparse.Namespace, config: Config) -> Recipe:
    """Configured recipe with command-line overrides applied."""
    recipe = config.recipe()
    states = dict(recipe.states)
    for option, tag in CLASS_OPTIONS.items():
        value = getattr(args, option)
        if value is not None:
            states[tag] = InclusionState.parse(value)

    return Recipe(
        length=args.length if args.length is not None else recipe.length,
        states=states,
        include_extra=args.include if args.include is not None else recipe.include_extra,
        exclude_extra=args.exclude if args.exclude is not None else recipe.exclude_extra,
    )


def _select_source(args: argparse.Namespace) -> ByteSource:
    if args.entropy_file:
        return ArrayByteSource.from_file(args.entropy_file, apply_hash=not args.no_hash)
    return get_default_source()


def _self_test(source: ByteSource) -> dict:
    # Finite sources are tested on a copy of the bytes the passwords will use.
    if isinstance(source, ArrayByteSource):
        snapshot = source.snapshot()
        try:
            return HealthTests.run_on_buffer(snapshot, name=source.name, verbose=False)
        finally:
            secure_zero(snapshot)
    return HealthTests.run_all(source, verbose=False)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = Config(args.config)

    try:
        if args.verbose >= 2:
            setup_logging(logging.DEBUG)
        elif args.verbose == 1:
            setup_logging(logging.INFO)
        else:
            setup_logging(config.get("logging", "level") or logging.WARNING)

        recipe = recipe_from_args(args, config)
        count = args.count if args.count is not None else config.get("generator", "count")
        source = _select_source(args)

        if args.self_test or config.get("health", "self_test"):
            results = _self_test(source)
            if not args.quiet:
                for test in results['tests']:
                    status = "PASS" if test['passed'] else "FAIL"
                    print(f"  {status}  {test['name']:<22} p-value: {test['p_value']:.6f}")
            if results['pass_rate'] < 1.0:
                print("ERROR: Random source failed health tests, refusing to generate.",
                      file=sys.stderr)
                return 1

        passwords = generate_passwords(recipe, count, SecureSampler(source))

        if args.save_config:
            config.set_recipe(recipe)
            config.set("generator", "count", count)
            config.save()

    except (SecurePassError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"Passwords ({recipe.length} chars, source={source.name}):")
        print("-" * 60)
    for password in passwords:
        if args.quiet:
            print(password)
        else:
            print(f"  {password}")
            print(f"    Entropy: ~{password.entropy:.1f} bits")
    return 0


if __name__ == "__main__":
    sys.exit(main())
