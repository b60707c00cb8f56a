#!/usr/bin/env python3
"""
RWA Registry - command-line entry point
"""

import argparse
import logging
import sys

from eth_account import Account

from rwa_registry.config.network import PRIVATE_KEY, REGISTRY_CALLER
from rwa_registry.cli.router import Router


def resolve_caller(caller=None, private_key=None):
    """Caller address from --caller / REGISTRY_CALLER, else derived from the private key."""
    caller = caller or REGISTRY_CALLER
    if caller:
        return caller
    private_key = private_key or PRIVATE_KEY
    if private_key:
        return Account.from_key(private_key).address
    return None


def main(argv=None):
    """Main entry point."""
    if argv is None:
        argv = sys.argv[1:]

    # Global options are parsed first, the rest goes to the Router
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument('--caller', type=str, help='Address the command is sent from')
    parser.add_argument('--rpc', type=str, help='RPC URL used by --check-conduit')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose output')
    global_args, remaining_argv = parser.parse_known_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if global_args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        caller = resolve_caller(global_args.caller)
    except ValueError as e:
        print(f"❌ Invalid PRIVATE_KEY: {e}")
        return 1

    router = Router()
    return router.dispatch(caller=caller, argv=remaining_argv, verbose=global_args.verbose, rpc_url=global_args.rpc)


if __name__ == '__main__':
    sys.exit(main())
