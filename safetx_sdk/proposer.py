"""
SafeProposer - builds, hashes and stores Safe transaction proposals.
"""
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from .account import SafeAccount
from .assembler import assemble, build_safe_transaction
from .builder import (
    Description,
    build_meta_transaction,
    build_meta_transactions,
    encode_function_call,
    load_meta_transactions,
)
from .config import NetworkConfig
from .export import write_tx_builder_json
from .hashing import compute_safe_tx_hash
from .models import MetaTransaction, Operation, SafeSignature, SafeTransaction, SafeTxProposal, SignatureParts, TxDescription
from .signatures import sign_hash, split_signature
from .signer import Signer
from .store import ProposalStore
from .utils import to_checksum_address, to_hex

ERC20_TRANSFER_SIGNATURE = "transfer(address,uint256)"


class SafeProposer:
    """
    Creates Safe transaction proposals.

    The proposer handles:
    1. Building Safe transactions from single calls or MultiSend batches
    2. Hashing them through the Safe and verifying the hash locally
    3. Persisting proposals and owner signatures in a ProposalStore

    Every external call (nonce, chain id, on-chain hash) is made one at a
    time, in order, for each proposal.
    """

    def __init__(
        self,
        account: SafeAccount,
        store: Optional[ProposalStore] = None,
        multi_send_address: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the proposer

        Args:
            account: Safe account capability (e.g. Web3SafeAccount)
            store: Proposal store, defaults to a ProposalStore in ./cli_cache
            multi_send_address: MultiSend contract to batch with. If not
                given it is looked up by chain id when needed
            logger: Optional logger instance to use for debug/info logging
        """
        self.account = account
        self.store = store if store is not None else ProposalStore()
        self.multi_send_address = to_checksum_address(multi_send_address) if multi_send_address else None
        self.logger = logger or logging.getLogger(__name__)

    @property
    def safe_address(self) -> str:
        return self.account.address

    def _resolve_multi_send(self, chain_id: int) -> str:
        if self.multi_send_address:
            return self.multi_send_address
        return NetworkConfig.get_multi_send_address(chain_id)

    def _resolve_nonce(self, nonce: Optional[int]) -> int:
        if nonce is not None:
            self.logger.debug(f"Using pinned nonce {nonce}")
            return int(nonce)
        return self.account.get_nonce()

    def create_proposal(self, tx: SafeTransaction, chain_id: int, on_chain_hash: bool = False) -> SafeTxProposal:
        """
        Hash a Safe transaction and store it as a proposal.

        Args:
            tx: Assembled Safe transaction
            chain_id: Chain id of the Safe's network
            on_chain_hash: Trust the Safe's hash without local verification
                (required for pre-1.3.0 Safes)

        Returns:
            The stored proposal

        Raises:
            HashMismatch: If the Safe's hash differs from the local hash
        """
        safe_tx_hash = compute_safe_tx_hash(self.account, tx, chain_id, on_chain_only=on_chain_hash)
        proposal = SafeTxProposal(
            safe=self.safe_address,
            chain_id=chain_id,
            safe_tx_hash=to_hex(safe_tx_hash),
            tx=tx,
        )
        self.store.save_proposal(proposal)
        self.logger.info(f"Safe transaction hash: {proposal.safe_tx_hash}")
        return proposal

    def propose(
        self,
        to: str,
        value: str = "0",
        data: str = "0x",
        delegatecall: bool = False,
        on_chain_hash: bool = False,
        nonce: Optional[int] = None,
    ) -> SafeTxProposal:
        """
        Propose a single call from the Safe.

        Args:
            to: Target address
            value: Value in ether
            data: Call data as hex string
            delegatecall: Execute as delegatecall
            on_chain_hash: Trust the Safe's hash without local verification
            nonce: Nonce to use, defaults to the Safe's current nonce

        Returns:
            The stored proposal
        """
        self.logger.info(f"Using Safe at {self.safe_address}")
        meta_tx = build_meta_transaction(TxDescription(
            to=to,
            value=value,
            data=data,
            operation=Operation.DELEGATE_CALL if delegatecall else Operation.CALL,
        ))
        tx = assemble(meta_tx, self._resolve_nonce(nonce))
        chain_id = self.account.get_chain_id()
        return self.create_proposal(tx, chain_id, on_chain_hash=on_chain_hash)

    def _load(self, transactions: Union[str, Path, Iterable[Description]]) -> List[MetaTransaction]:
        if isinstance(transactions, (str, Path)):
            return load_meta_transactions(transactions)
        return build_meta_transactions(transactions)

    def propose_multi(
        self,
        transactions: Union[str, Path, Iterable[Description]],
        nonce: Optional[int] = None,
        on_chain_hash: bool = False,
    ) -> SafeTxProposal:
        """
        Propose one or more calls, batched through MultiSend when needed.

        Args:
            transactions: Path to a JSON or CSV file, or descriptions
            nonce: Nonce to use, defaults to the Safe's current nonce
            on_chain_hash: Trust the Safe's hash without local verification

        Returns:
            The stored proposal

        Raises:
            NoTransactionsProvided: If there are no transactions
        """
        self.logger.info(f"Using Safe at {self.safe_address}")
        resolved_nonce = self._resolve_nonce(nonce)
        txs = self._load(transactions)
        chain_id = self.account.get_chain_id()
        multi_send = self._resolve_multi_send(chain_id) if len(txs) > 1 else None
        tx = build_safe_transaction(txs, resolved_nonce, multi_send_address=multi_send)
        self.logger.debug(f"Safe transaction: {tx.model_dump(mode='json', by_alias=True)}")
        return self.create_proposal(tx, chain_id, on_chain_hash=on_chain_hash)

    def export_multi(
        self,
        path: Union[str, Path],
        transactions: Union[str, Path, Iterable[Description]],
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> None:
        """Export transactions for the transaction builder instead of proposing them"""
        txs = self._load(transactions)
        write_tx_builder_json(path, self.account.get_chain_id(), txs, name=name, description=description)

    def sign_proposal(self, safe_tx_hash: Union[str, bytes], signer: Signer) -> SafeSignature:
        """
        Sign a stored proposal and add the signature to its collection.

        Raises:
            StoreNotFound: If no proposal is stored for the hash
        """
        proposal = self.store.load_proposal(safe_tx_hash)
        signature = sign_hash(signer, proposal.safe_tx_hash)
        self.store.add_signature(proposal.safe_tx_hash, signature)
        return signature

    def propose_token_transfer(
        self,
        token: str,
        to: str,
        amount: Union[int, str],
        signer: Signer,
        value: str = "0",
        on_chain_hash: bool = False,
        nonce: Optional[int] = None,
    ) -> Tuple[SafeTxProposal, SignatureParts]:
        """
        Propose and sign an ERC-20 transfer from the Safe.

        Args:
            token: Token contract address
            to: Recipient of the tokens
            amount: Amount in the token's smallest unit
            signer: Owner signing the proposal
            value: Ether value sent along, in ether
            on_chain_hash: Trust the Safe's hash without local verification
            nonce: Nonce to use, defaults to the Safe's current nonce

        Returns:
            Tuple of (proposal, split signature)
        """
        data = encode_function_call(ERC20_TRANSFER_SIGNATURE, [to_checksum_address(to), int(amount)])
        meta_tx = build_meta_transaction(TxDescription(to=token, value=value, data=to_hex(data)))
        tx = assemble(meta_tx, self._resolve_nonce(nonce))
        proposal = self.create_proposal(tx, self.account.get_chain_id(), on_chain_hash=on_chain_hash)
        signature = sign_hash(signer, proposal.safe_tx_hash)
        self.store.add_signature(proposal.safe_tx_hash, signature)
        return proposal, split_signature(signature)

    def show_proposal(self, safe_tx_hash: Union[str, bytes]) -> Tuple[SafeTxProposal, bool]:
        """
        Load a proposal and check whether its nonce has been used.

        Returns:
            Tuple of (proposal, nonce_used)

        Raises:
            StoreNotFound: If no proposal is stored for the hash
            ValueError: If the proposal belongs to a different Safe
        """
        proposal = self.store.load_proposal(safe_tx_hash)
        self.logger.info(f"Using Safe at {proposal.safe}@{proposal.chain_id}")
        if to_checksum_address(proposal.safe) != to_checksum_address(self.safe_address):
            raise ValueError(
                f"Proposal {proposal.safe_tx_hash} belongs to Safe {proposal.safe}, not {self.safe_address}"
            )
        nonce_used = proposal.tx.nonce < self.account.get_nonce()
        if nonce_used:
            self.logger.warning(f"Nonce {proposal.tx.nonce} of {proposal.safe_tx_hash} has already been used")
        return proposal, nonce_used
