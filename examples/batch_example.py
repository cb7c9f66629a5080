#!/usr/bin/env python3
"""
Example of batching several calls into one Safe transaction.

The transactions file is a JSON array (or a CSV with the same columns):

    [
      {"to": "0x...", "value": "0.1"},
      {"to": "0x...", "method": "transfer(address,uint256)", "params": ["0x...", "1000"]}
    ]
"""
import os
import sys
import logging

from safetx_sdk import SafeProposer, Web3SafeAccount


def main():
    logging.basicConfig(level=logging.INFO)

    if len(sys.argv) < 2:
        print(f"Usage: {sys.argv[0]} <transactions.json|csv> [export.json]")
        return

    RPC_URL = os.environ.get("RPC_URL", "https://ethereum-sepolia-rpc.publicnode.com")
    SAFE_ADDRESS = os.environ.get("SAFE_ADDRESS")
    if not SAFE_ADDRESS:
        print("ERROR: SAFE_ADDRESS environment variable is required")
        return

    proposer = SafeProposer(Web3SafeAccount.from_rpc(RPC_URL, SAFE_ADDRESS))

    # Export for the transaction builder instead of proposing
    if len(sys.argv) > 2:
        proposer.export_multi(sys.argv[2], sys.argv[1], name="Batch from example")
        print(f"Exported to {sys.argv[2]}")
        return

    proposal = proposer.propose_multi(sys.argv[1])
    print(f"Safe transaction hash: {proposal.safe_tx_hash}")


if __name__ == "__main__":
    main()
