"""
Data models for the Safe transaction SDK.
"""
from decimal import Decimal
from enum import IntEnum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_serializer, field_validator

from .exceptions import InvalidAmount
from .utils import MAX_UINT256, ZERO_ADDRESS, hex_to_bytes, to_checksum_address, to_hex


class Operation(IntEnum):
    """Execution context of a Safe call"""
    CALL = 0
    DELEGATE_CALL = 1


class TxDescription(BaseModel):
    """
    Loose description of a single call, as found in JSON or CSV input.

    `value` is in ether units. `operation` accepts 0/1, a boolean
    delegatecall flag or the names "call" / "delegatecall".
    """
    to: Optional[str] = None
    value: str = "0"
    data: Optional[str] = None
    method: Optional[str] = None
    params: Optional[List[Any]] = None
    operation: Operation = Operation.CALL

    @field_validator("value", mode="before")
    @classmethod
    def _value_to_str(cls, v: Any) -> Any:
        if v is None or v == "":
            return "0"
        if isinstance(v, Decimal):
            return format(v, "f")
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("operation", mode="before")
    @classmethod
    def _parse_operation(cls, v: Any) -> Any:
        if v is None or v == "":
            return Operation.CALL
        if isinstance(v, bool):
            return Operation.DELEGATE_CALL if v else Operation.CALL
        if isinstance(v, str):
            name = v.strip().lower()
            if name in ("call", "0", "false"):
                return Operation.CALL
            if name in ("delegatecall", "delegate_call", "1", "true"):
                return Operation.DELEGATE_CALL
            raise ValueError(f"Unknown operation: {v}")
        return v


class MetaTransaction(BaseModel):
    """A single call prior to batching or nonce assignment"""
    to: str
    value: int = 0
    data: bytes = b""
    operation: Operation = Operation.CALL

    class Config:
        frozen = True
        populate_by_name = True

    @field_validator("to")
    @classmethod
    def _checksum_to(cls, v: str) -> str:
        return to_checksum_address(v)

    @field_validator("value")
    @classmethod
    def _check_value(cls, v: int) -> int:
        if v < 0 or v > MAX_UINT256:
            raise InvalidAmount(f"Value out of uint256 range: {v}")
        return v

    @field_validator("data", mode="before")
    @classmethod
    def _parse_data(cls, v: Any) -> Any:
        if v is None:
            return b""
        if isinstance(v, str):
            return hex_to_bytes(v)
        return v

    @field_serializer("value", when_used="json")
    def _serialize_value(self, v: int) -> str:
        return str(v)

    @field_serializer("data", when_used="json")
    def _serialize_data(self, v: bytes) -> str:
        return to_hex(v)


class SafeTransaction(MetaTransaction):
    """
    The exact structure authenticated and executed by the Safe contract.

    The nonce is fixed at construction time and never changes afterwards.
    """
    safe_tx_gas: int = Field(0, alias="safeTxGas")
    base_gas: int = Field(0, alias="baseGas")
    gas_price: int = Field(0, alias="gasPrice")
    gas_token: str = Field(ZERO_ADDRESS, alias="gasToken")
    refund_receiver: str = Field(ZERO_ADDRESS, alias="refundReceiver")
    nonce: int

    @field_validator("gas_token", "refund_receiver")
    @classmethod
    def _checksum_gas_addresses(cls, v: str) -> str:
        return to_checksum_address(v)

    @field_validator("safe_tx_gas", "base_gas", "gas_price", "nonce")
    @classmethod
    def _check_uint(cls, v: int) -> int:
        if v < 0 or v > MAX_UINT256:
            raise ValueError(f"Value out of uint256 range: {v}")
        return v

    def to_meta_transaction(self) -> MetaTransaction:
        return MetaTransaction(to=self.to, value=self.value, data=self.data, operation=self.operation)


class SafeTxProposal(BaseModel):
    """A not yet executed Safe transaction, identified by its hash"""
    safe: str
    chain_id: int = Field(..., alias="chainId")
    safe_tx_hash: str = Field(..., alias="safeTxHash")
    tx: SafeTransaction

    class Config:
        frozen = True
        populate_by_name = True

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class SafeSignature(BaseModel):
    """An eth_sign signature adjusted for Safe verification"""
    signer: str
    data: str

    class Config:
        frozen = True


class SignatureParts(BaseModel):
    """A signature split into r, s (hex without prefix) and v"""
    signature: SafeSignature
    r: str
    s: str
    v: int


class TxBuilderMeta(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class TxBuilderExport(BaseModel):
    """Transaction builder interchange document"""
    version: str = "1.0"
    chain_id: str = Field(..., alias="chainId")
    created_at: int = Field(..., alias="createdAt")
    meta: TxBuilderMeta
    transactions: List[MetaTransaction]

    class Config:
        populate_by_name = True

    @field_validator("chain_id", mode="before")
    @classmethod
    def _chain_id_to_str(cls, v: Union[int, str]) -> str:
        return str(v)
