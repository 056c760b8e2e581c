"""
Command line interface: sign a deployment transaction with a new program owner.

Usage:
    sign-deployment -i tx.json -o signed.json -a APrivateKey1... -n 1
"""
import argparse
import logging
import sys
from typing import List, Optional

from .exceptions import DeploySignerError
from .identity import derive_address, private_key_from_env
from .network import NETWORK_ENV_VAR, get_network, network_from_env
from .signer import load_private_key, sign_deployment_file
from .version import __version__

ADMIN_KEY_ENV_VAR = "DEPLOY_SIGNER_ADMIN_PRIVATE_KEY"
FEE_KEY_ENV_VAR = "DEPLOY_SIGNER_FEE_PRIVATE_KEY"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser"""
    parser = argparse.ArgumentParser(
        prog="sign-deployment",
        description="Sign a deployment transaction, modifying the program owner.",
    )
    parser.add_argument(
        "-i", "--input",
        required=True,
        metavar="INPUT",
        help="Input file containing the transaction JSON",
    )
    parser.add_argument(
        "-o", "--output",
        required=True,
        metavar="OUTPUT",
        help="Output file for the modified transaction JSON",
    )
    parser.add_argument(
        "-a", "--admin-private-key",
        metavar="ADMIN_PRIVATE_KEY",
        help="Admin private key to sign the deployment. This will be the new program owner. "
             f"Defaults to ${ADMIN_KEY_ENV_VAR}.",
    )
    parser.add_argument(
        "-f", "--fee-private-key",
        metavar="FEE_PRIVATE_KEY",
        help="Fee private key to sign the fee transaction. If not provided, uses the admin "
             f"private key. Defaults to ${FEE_KEY_ENV_VAR}.",
    )
    parser.add_argument(
        "-n", "--network",
        metavar="NETWORK",
        help=f"Network to use: 0=mainnet, 1=testnet, 2=canary. Defaults to ${NETWORK_ENV_VAR}.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the CLI.

    Args:
        argv: Arguments (defaults to sys.argv[1:])

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Explicit flags win over the environment
    admin_key_text = args.admin_private_key or private_key_from_env(ADMIN_KEY_ENV_VAR)
    fee_key_text = args.fee_private_key or private_key_from_env(FEE_KEY_ENV_VAR)

    if not admin_key_text:
        parser.error(f"an admin private key is required (-a or ${ADMIN_KEY_ENV_VAR})")

    try:
        if args.network is not None:
            network = get_network(args.network)
        else:
            network = network_from_env()
        if network is None:
            parser.error(f"a network is required (-n or ${NETWORK_ENV_VAR})")

        print("Starting deployment transaction signer")
        admin_key = load_private_key(admin_key_text, "admin")
        print(f"Using the private key for address: {derive_address(admin_key)}")

        sign_deployment_file(
            args.input,
            args.output,
            admin_key,
            fee_private_key=fee_key_text,
            network=network,
        )
    except DeploySignerError as e:
        logger.debug("Signing failed at stage %s", e.stage)
        print(f"❌ {e}", file=sys.stderr)
        return 1

    print("✅ Successfully modified deployment transaction")
    print(f"📁 Output saved to: {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
