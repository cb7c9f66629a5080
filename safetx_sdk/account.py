"""
Access to a Safe account contract.
"""
import logging
from typing import Optional, Protocol

from web3 import Web3

from .models import SafeTransaction
from .utils import to_checksum_address

logger = logging.getLogger(__name__)


class SafeAccount(Protocol):
    """Protocol for the Safe contract capability used by the proposer"""
    address: str

    def get_nonce(self) -> int:
        """Current execution nonce of the Safe"""
        ...

    def get_transaction_hash(self, tx: SafeTransaction) -> bytes:
        """Hash of the transaction as computed by the Safe contract"""
        ...

    def get_chain_id(self) -> int:
        """Chain id of the network the Safe lives on"""
        ...


class Web3SafeAccount:
    """
    Safe account capability backed by a web3 connection.
    """

    # Minimal ABI of the Safe singleton
    SAFE_ABI = [
        {
            "inputs": [],
            "name": "nonce",
            "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
            "stateMutability": "view",
            "type": "function"
        },
        {
            "inputs": [],
            "name": "VERSION",
            "outputs": [{"internalType": "string", "name": "", "type": "string"}],
            "stateMutability": "view",
            "type": "function"
        },
        {
            "inputs": [
                {"internalType": "address", "name": "to", "type": "address"},
                {"internalType": "uint256", "name": "value", "type": "uint256"},
                {"internalType": "bytes", "name": "data", "type": "bytes"},
                {"internalType": "enum Enum.Operation", "name": "operation", "type": "uint8"},
                {"internalType": "uint256", "name": "safeTxGas", "type": "uint256"},
                {"internalType": "uint256", "name": "baseGas", "type": "uint256"},
                {"internalType": "uint256", "name": "gasPrice", "type": "uint256"},
                {"internalType": "address", "name": "gasToken", "type": "address"},
                {"internalType": "address", "name": "refundReceiver", "type": "address"},
                {"internalType": "uint256", "name": "_nonce", "type": "uint256"}
            ],
            "name": "getTransactionHash",
            "outputs": [{"internalType": "bytes32", "name": "", "type": "bytes32"}],
            "stateMutability": "view",
            "type": "function"
        }
    ]

    def __init__(self, w3: Web3, address: str, logger: Optional[logging.Logger] = None):
        """
        Initialize the account

        Args:
            w3: Connected Web3 instance
            address: Address of the Safe
            logger: Optional logger instance

        Raises:
            InvalidAddress: If address is not a valid address
        """
        self.w3 = w3
        self.address = to_checksum_address(address)
        self.logger = logger or logging.getLogger(__name__)
        self.contract = self.w3.eth.contract(address=self.address, abi=self.SAFE_ABI)
        self._chain_id: Optional[int] = None

    @classmethod
    def from_rpc(cls, rpc_url: str, address: str, logger: Optional[logging.Logger] = None) -> "Web3SafeAccount":
        """Create an account connected through an HTTP RPC endpoint"""
        return cls(Web3(Web3.HTTPProvider(rpc_url)), address, logger=logger)

    def get_nonce(self) -> int:
        nonce = self.contract.functions.nonce().call()
        self.logger.debug(f"Safe {self.address} nonce: {nonce}")
        return int(nonce)

    def get_version(self) -> str:
        return self.contract.functions.VERSION().call()

    def get_chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = int(self.w3.eth.chain_id)
        return self._chain_id

    def get_transaction_hash(self, tx: SafeTransaction) -> bytes:
        result = self.contract.functions.getTransactionHash(
            tx.to,
            tx.value,
            tx.data,
            int(tx.operation),
            tx.safe_tx_gas,
            tx.base_gas,
            tx.gas_price,
            tx.gas_token,
            tx.refund_receiver,
            tx.nonce,
        ).call()
        return bytes(result)
