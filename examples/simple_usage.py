#!/usr/bin/env python3
"""
Simple example of using the SmartWallet SDK.
"""
import os

from smartwallet_sdk import (
    Call, SmartWalletClient, SmartWalletError, WalletConfig, encode_function_call, explorer_link
)
from smartwallet_sdk.abi import DEMO_TOKEN_ADDRESS, ERC20_MINT


def main():
    """
    Demonstrate basic usage of the SmartWalletClient.

    This example shows how to:
    1. Load configuration and initialize the client
    2. Look up the smart wallet owned by the signer
    3. Send one sponsored call and wait for it to land
    """
    PRIVATE_KEY = os.environ.get("PRIVATE_KEY")
    if not PRIVATE_KEY:
        print("ERROR: PRIVATE_KEY environment variable is required")
        return

    try:
        config = WalletConfig.from_env()
    except SmartWalletError as e:
        print(f"ERROR: {e}")
        return

    with SmartWalletClient(config, priv_key=PRIVATE_KEY) as client:
        try:
            account = client.request_account()
            print(f"Smart wallet address: {account.address}")

            call = Call(
                to=DEMO_TOKEN_ADDRESS,
                data=encode_function_call(ERC20_MINT, (account.address, 10 ** 18))
            )
            status = client.send_calls([call], account.address)

            print("Calls completed successfully!")
            print(f"Transaction hash: {status.transaction_hash}")
            print(f"Explorer link: {explorer_link(config.explorer_base_url, status)}")

        except SmartWalletError as e:
            print(f"Error during {e.step}: {e}")


if __name__ == "__main__":
    main()
