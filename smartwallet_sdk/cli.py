"""
Command line demo of the smart-wallet flows.

Generates a fresh signer, mints demo tokens to its smart wallet (deploying
it), then pulls the tokens back out through the signer's EIP-7702
delegation and forwards them to a destination address.

Requires GAS_MANAGER_POLICY_ID and ALCHEMY_API_KEY in the environment.
"""
import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from .client import SmartWalletClient
from .config import WalletConfig
from .exceptions import SmartWalletError
from .flow import DEFAULT_DESTINATION, mint_and_deploy, withdraw_via_delegation
from .relayer import get_transport
from .signer import LocalSigner


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Smart wallet mint and 7702 withdraw demo")
    parser.add_argument("--network", help="Network name from networks.json (default: base-sepolia)")
    parser.add_argument("--private-key", help="Use this signer key instead of generating one")
    parser.add_argument("--destination", default=DEFAULT_DESTINATION,
                        help="Final recipient of the withdrawn tokens")
    parser.add_argument("--amount", type=int, default=100, help="Whole tokens to mint and move")
    parser.add_argument("--timeout", type=float, help="Polling deadline in seconds per batch")
    parser.add_argument("--dry-run", action="store_true",
                        help="Use the in-memory relayer instead of the network")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        config = WalletConfig.from_env(network=args.network)
        if args.timeout is not None:
            config = replace(config, poll_timeout=args.timeout)
        signer = LocalSigner(args.private_key) if args.private_key else LocalSigner.generate()
        transport = get_transport(config, dry_run=args.dry_run)
    except SmartWalletError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    print(f"Signer address: {signer.address}")

    try:
        with SmartWalletClient(config, signer=signer, transport=transport) as client:
            account = client.request_account()
            print(f"Smart wallet address: {account.address}")

            minted = mint_and_deploy(
                client, account.address, amount=args.amount,
                on_submitted=lambda call_id: print(f"Submitted prepared calls, got call id: {call_id}", flush=True)
            )
            print(f"Successfully minted ERC-20 token and deployed smart wallet. "
                  f"Explorer link: {minted.explorer_url}")

            moved = withdraw_via_delegation(
                client, account.address, destination=args.destination, amount=args.amount,
                on_submitted=lambda call_id: print(f"Submitted signer calls, got call id: {call_id}", flush=True)
            )
            print(f"Successfully pulled funds from the smart wallet and transferred to the "
                  f"destination address. Explorer link: {moved.explorer_url}")
    except SmartWalletError as e:
        step = e.step or "flow"
        code = f" (code: {e.code})" if e.code is not None else ""
        print(f"{step} failed: {e}{code}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
