#!/usr/bin/env python3
"""
Command line interface for keystretch.

Usage:
    keystretch derive --password secret --salt pepper --iterations 4096 --length 32
    keystretch hmac --key key --message "The quick brown fox"
    keystretch algorithms
    keystretch bench --iterations 1000,10000
"""

import argparse
import getpass
import logging
import sys
from typing import List, Optional

from .config import ConfigError, KeystretchConfig
from .crypto.algorithms import get_default_provider, supported_algorithms
from .crypto.exceptions import KeyDerivationError
from .crypto.mac import hmac_hex
from .crypto.pbkdf2 import pbkdf2
from .crypto.utils import format_hex, parse_hex
from .evaluation.benchmark import DerivationBenchmark, estimate_iterations

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(prog='keystretch', description='PBKDF2 and HMAC key derivation')
    parser.add_argument('--config-dir', type=str, default=None,
                        help='Configuration directory (default: ~/.keystretch)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    derive_parser = subparsers.add_parser('derive', help='Derive a key with PBKDF2')
    derive_parser.add_argument('--algorithm', '-a', type=str, default=None,
                               help='Hash algorithm (default from settings)')
    derive_parser.add_argument('--password', '-p', type=str, default=None,
                               help='Password (prompted for when omitted)')
    salt_group = derive_parser.add_mutually_exclusive_group(required=True)
    salt_group.add_argument('--salt', '-s', type=str, help='Salt as text')
    salt_group.add_argument('--salt-hex', type=str, help='Salt as hex')
    derive_parser.add_argument('--iterations', '-c', type=int, default=None,
                               help='Iteration count (default from settings)')
    derive_parser.add_argument('--length', '-l', type=int, default=None,
                               help='Derived key length in bytes, 0 for the digest length')
    derive_parser.add_argument('--raw', action='store_true', default=None,
                               help='Write raw bytes instead of hex')
    derive_parser.add_argument('--timeout', type=float, default=None,
                               help='Abort after this many seconds')
    derive_parser.add_argument('--workers', type=int, default=None,
                               help='Threads used to compute output blocks')

    hmac_parser = subparsers.add_parser('hmac', help='Compute an HMAC')
    hmac_parser.add_argument('--algorithm', '-a', type=str, default=None,
                             help='Hash algorithm (default from settings)')
    hmac_parser.add_argument('--key', '-k', type=str, required=True, help='Secret key')
    hmac_parser.add_argument('--message', '-m', type=str, required=True, help='Message')

    subparsers.add_parser('algorithms', help='List supported hash algorithms')

    bench_parser = subparsers.add_parser('bench', help='Benchmark PBKDF2')
    bench_parser.add_argument('--algorithms', type=str, default=None,
                              help='Comma-separated algorithms (default: all)')
    bench_parser.add_argument('--iterations', type=str, default='1000,10000',
                              help='Comma-separated iteration counts')
    bench_parser.add_argument('--repeats', type=int, default=3, help='Timed runs per configuration')
    bench_parser.add_argument('--target', type=float, default=None,
                              help='Suggest an iteration count for this many seconds')

    return parser


def _run_derive(args, settings) -> int:
    algorithm = args.algorithm or settings.algorithm
    iterations = args.iterations if args.iterations is not None else settings.iterations
    key_length = args.length if args.length is not None else settings.key_length
    raw_output = args.raw if args.raw is not None else settings.raw_output
    workers = args.workers if args.workers is not None else settings.max_workers

    password = args.password
    if password is None:
        password = getpass.getpass('Password: ')

    if args.salt_hex is not None:
        try:
            salt = parse_hex(args.salt_hex)
        except ValueError:
            print(f"Error: invalid hex salt: {args.salt_hex}", file=sys.stderr)
            return 1
    else:
        salt = args.salt.encode('utf-8')

    key = pbkdf2(algorithm, password.encode('utf-8'), salt, iterations, key_length,
                 timeout=args.timeout, check_interval=settings.check_interval,
                 max_workers=workers)

    if raw_output:
        sys.stdout.buffer.write(key)
        sys.stdout.flush()
    else:
        print(format_hex(key))
    return 0


def _run_hmac(args, settings) -> int:
    algorithm = args.algorithm or settings.algorithm
    print(hmac_hex(algorithm, args.message.encode('utf-8'), args.key.encode('utf-8')))
    return 0


def _run_algorithms() -> int:
    provider = get_default_provider()
    print(f"{'ALGORITHM':<10} {'DIGEST':>6} {'BLOCK':>6}")
    for algorithm in supported_algorithms(provider):
        print(f"{algorithm.value:<10} {provider.digest_length(algorithm):>6} "
              f"{provider.block_size(algorithm):>6}")
    return 0


def _run_bench(args) -> int:
    algorithms = None
    if args.algorithms:
        algorithms = [x.strip() for x in args.algorithms.split(',')]
    try:
        iteration_counts = [int(x.strip()) for x in args.iterations.split(',')]
    except ValueError:
        print(f"Error: invalid iteration list: {args.iterations}", file=sys.stderr)
        return 1

    benchmark = DerivationBenchmark()
    results = benchmark.compare_algorithms(algorithms, iteration_counts, args.repeats)

    print(f"{'ALGORITHM':<10} {'ITERATIONS':>10} {'MEAN (s)':>10} {'ROUNDS/s':>12}")
    for result in results:
        print(f"{result.algorithm:<10} {result.iterations:>10} "
              f"{result.mean_time:>10.4f} {result.rounds_per_second:>12.0f}")

    if args.target is not None:
        for algorithm in algorithms or sorted({r.algorithm for r in results}):
            suggested = estimate_iterations(algorithm, args.target)
            print(f"Suggested iterations for {algorithm} at {args.target}s: {suggested}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command line interface."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    if not args.command:
        parser.print_help()
        return 1

    try:
        settings = KeystretchConfig(args.config_dir).load_settings()

        if args.command == 'derive':
            return _run_derive(args, settings)
        elif args.command == 'hmac':
            return _run_hmac(args, settings)
        elif args.command == 'algorithms':
            return _run_algorithms()
        elif args.command == 'bench':
            return _run_bench(args)

    except (KeyDerivationError, ConfigError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
