#!/usr/bin/env python3
"""
Simple example of proposing a Safe transaction.
"""
import os
import logging

from safetx_sdk import LocalSigner, ProposalStore, SafeProposer, SafeTxError, Web3SafeAccount


def main():
    """
    Demonstrate basic usage of the SafeProposer.

    This example shows how to:
    1. Connect to a Safe
    2. Propose a plain ether transfer
    3. Sign the proposal as one of the owners
    """
    logging.basicConfig(level=logging.INFO)

    # Read configuration from environment
    RPC_URL = os.environ.get("RPC_URL", "https://ethereum-sepolia-rpc.publicnode.com")
    SAFE_ADDRESS = os.environ.get("SAFE_ADDRESS")
    PRIVATE_KEY = os.environ.get("PRIVATE_KEY")
    RECIPIENT = os.environ.get("RECIPIENT", "0x0000000000000000000000000000000000000001")

    # Verify configuration
    if not SAFE_ADDRESS:
        print("ERROR: SAFE_ADDRESS environment variable is required")
        return

    if not PRIVATE_KEY:
        print("ERROR: PRIVATE_KEY environment variable is required")
        return

    account = Web3SafeAccount.from_rpc(RPC_URL, SAFE_ADDRESS)
    proposer = SafeProposer(account, store=ProposalStore())

    try:
        proposal = proposer.propose(RECIPIENT, value="0.01")
        signature = proposer.sign_proposal(proposal.safe_tx_hash, LocalSigner(PRIVATE_KEY))

        print(f"Safe transaction hash: {proposal.safe_tx_hash}")
        print(f"Nonce: {proposal.tx.nonce}")
        print(f"Signature by {signature.signer}: {signature.data}")

    except SafeTxError as e:
        print(f"Error creating proposal: {str(e)}")


if __name__ == "__main__":
    main()
