import argparse
import logging
import sys

from web3 import Web3

from .view import View
from ..config.components import FILE_COMPONENT
from ..config.network import REGISTRY_STATE_PATH, RPC_URL
from ..controllers.registry_controller import RegistryController
from ..services.conduit_check import UrnConduitCheck

logger = logging.getLogger(__name__)


class Router:
    """Parses CLI arguments and dispatches commands to the registry controller."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self):
        parser = argparse.ArgumentParser(description='RWA deal registry')
        parser.add_argument('--state', type=str, default=REGISTRY_STATE_PATH,
                            help='Path of the JSON registry state (default: %(default)s)')

        subparsers = parser.add_subparsers(dest='command', help='Command to run', required=True)

        # --- Registry lifecycle ---
        init_parser = subparsers.add_parser('init', help='Create a new registry state file')
        init_parser.add_argument('--owner', type=str, help='Initial ward (defaults to the caller)')
        init_parser.add_argument('--allow-zero-address', action='store_true',
                                 help='Accept the zero address for components')
        init_parser.add_argument('--force', action='store_true', help='Overwrite an existing state file')

        # --- Wards ---
        rely_parser = subparsers.add_parser('rely', help='Authorize an account')
        rely_parser.add_argument('account', type=str)
        deny_parser = subparsers.add_parser('deny', help='Revoke an account')
        deny_parser.add_argument('account', type=str)

        # --- Supported components ---
        subparsers.add_parser('supported', help='List supported component names')
        add_supported_parser = subparsers.add_parser('add-supported', help='Register a new component name')
        add_supported_parser.add_argument('name', type=str)

        # --- Deals ---
        subparsers.add_parser('list', help='List all deals')
        iter_parser = subparsers.add_parser('iter', help='List deals in [start, end)')
        iter_parser.add_argument('start', type=int)
        iter_parser.add_argument('end', type=int)

        show_parser = subparsers.add_parser('show', help='Show a deal and its components')
        show_parser.add_argument('ilk', type=str)

        add_parser = subparsers.add_parser('add', help='Add a deal, optionally with components')
        add_parser.add_argument('ilk', type=str)
        add_parser.add_argument('--component', '-c', action='append', dest='components', metavar='NAME=ADDR:VARIANT',
                                help='Component to attach (repeatable)')
        add_parser.add_argument('--check-conduit', action='store_true',
                                help="Check the urn's outputConduit() on chain (needs --rpc or RPC_URL)")

        finalize_parser = subparsers.add_parser('finalize', help='Finalize a deal')
        finalize_parser.add_argument('ilk', type=str)

        remove_parser = subparsers.add_parser('remove', help='Remove a deal without components')
        remove_parser.add_argument('ilk', type=str)

        # --- Components ---
        set_parser = subparsers.add_parser('set-component', help='Set or update a component')
        set_parser.add_argument('ilk', type=str)
        set_parser.add_argument('name', type=str)
        set_parser.add_argument('addr', type=str)
        set_parser.add_argument('variant', type=int)

        file_parser = subparsers.add_parser('file', help='Generic update, e.g. file RWA100-A component urn 0x.. 1')
        file_parser.add_argument('ilk', type=str)
        file_parser.add_argument('what', type=str, help=f"Parameter to update ('{FILE_COMPONENT}')")
        file_parser.add_argument('name', type=str)
        file_parser.add_argument('addr', type=str)
        file_parser.add_argument('variant', type=int)

        remove_component_parser = subparsers.add_parser('remove-component', help='Detach a component')
        remove_component_parser.add_argument('ilk', type=str)
        remove_component_parser.add_argument('name', type=str)

        get_parser = subparsers.add_parser('get-component', help='Show one component')
        get_parser.add_argument('ilk', type=str)
        get_parser.add_argument('name', type=str)

        return parser

    def _validators(self, args, rpc_url, view):
        if not getattr(args, 'check_conduit', False):
            return []
        rpc_url = rpc_url or RPC_URL
        if not rpc_url:
            raise ValueError("--check-conduit needs an RPC endpoint (--rpc or RPC_URL)")
        view.display_verbose(f"Checking urn output conduits via {rpc_url}")
        return [UrnConduitCheck(Web3(Web3.HTTPProvider(rpc_url)))]

    def dispatch(self, caller=None, argv=None, verbose=False, rpc_url=None) -> int:
        """Parses arguments, runs the command and returns a process exit code."""
        if argv is None:
            argv = sys.argv[1:]

        args = self.parser.parse_args(argv)
        view = View(verbose=verbose)
        view.display_verbose(f"Caller: {caller}")

        try:
            validators = self._validators(args, rpc_url, view)
        except ValueError as e:
            view.display_error(str(e))
            return 1

        controller = RegistryController(view, args.state, caller=caller, validators=validators)

        # --- Command Dispatch Logic ---
        if args.command == 'init':
            ok = controller.init(owner=args.owner, allow_zero_address=args.allow_zero_address, force=args.force)
        elif args.command == 'rely':
            ok = controller.rely(args.account)
        elif args.command == 'deny':
            ok = controller.deny(args.account)
        elif args.command == 'supported':
            ok = controller.show_supported()
        elif args.command == 'add-supported':
            ok = controller.add_supported(args.name)
        elif args.command == 'list':
            ok = controller.list_deals()
        elif args.command == 'iter':
            ok = controller.iter_deals(args.start, args.end)
        elif args.command == 'show':
            ok = controller.show_deal(args.ilk)
        elif args.command == 'add':
            ok = controller.add_deal(args.ilk, args.components)
        elif args.command == 'finalize':
            ok = controller.finalize(args.ilk)
        elif args.command == 'remove':
            ok = controller.remove(args.ilk)
        elif args.command == 'set-component':
            ok = controller.set_component(args.ilk, args.name, args.addr, args.variant)
        elif args.command == 'file':
            ok = controller.file(args.ilk, args.what, args.name, args.addr, args.variant)
        elif args.command == 'remove-component':
            ok = controller.remove_component(args.ilk, args.name)
        elif args.command == 'get-component':
            ok = controller.get_component(args.ilk, args.name)
        else:
            view.display_error(f"Unknown command: {args.command}")
            self.parser.print_help()
            ok = False
        return 0 if ok else 1
