"""
Build MetaTransactions from transaction descriptions.

A description names a target, an ether value and optionally either raw
call data or a method signature with parameters. The payload source is
resolved once into one of three variants (RawPayload, MethodCall,
PlainTransfer) and encoded from there.
"""
import csv
import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Sequence, Tuple, Union

from eth_abi import encode as abi_encode
from eth_abi.exceptions import ABITypeError, EncodingError, ParseError
from eth_abi.grammar import TupleType, normalize, parse
from eth_utils import function_signature_to_4byte_selector
from pydantic import ValidationError

from .exceptions import InvalidAddress, InvalidAmount, InvalidPayloadEncoding, NoTransactionsProvided, SafeTxError
from .models import MetaTransaction, TxDescription
from .utils import hex_to_bytes, is_hex_string, parse_ether, to_checksum_address

logger = logging.getLogger(__name__)

_ARRAY_SUFFIX_RE = re.compile(r"^(\[\d*\])*")
_PARAM_MODIFIERS = {"memory", "calldata", "storage", "indexed", "payable"}

Description = Union[TxDescription, Mapping[str, Any]]


@dataclass(frozen=True)
class RawPayload:
    """Call data supplied verbatim"""
    data: bytes

    def encode(self) -> bytes:
        return self.data


@dataclass(frozen=True)
class MethodCall:
    """Call data to be ABI encoded from a method signature and parameters"""
    signature: str
    params: Tuple[Any, ...] = ()

    def encode(self) -> bytes:
        return encode_function_call(self.signature, self.params)


@dataclass(frozen=True)
class PlainTransfer:
    """No call data, a plain value transfer"""

    def encode(self) -> bytes:
        return b""


PayloadSource = Union[RawPayload, MethodCall, PlainTransfer]


def _matching_paren(text: str, start: int) -> int:
    depth = 0
    for i in range(start, len(text)):
        if text[i] == "(":
            depth += 1
        elif text[i] == ")":
            depth -= 1
            if depth == 0:
                return i
    raise InvalidPayloadEncoding(f"Unbalanced parentheses in method signature: {text}")


def _split_top_level(text: str) -> List[str]:
    parts, depth, current = [], 0, []
    for ch in text:
        if ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        current.append(ch)
    tail = "".join(current)
    if tail.strip() or parts:
        parts.append(tail)
    return parts


def _canonical_param(param: str) -> str:
    param = param.strip()
    if param.startswith("tuple("):
        param = param[len("tuple"):]
    if param.startswith("("):
        close = _matching_paren(param, 0)
        inner = ",".join(_canonical_param(p) for p in _split_top_level(param[1:close]))
        suffix = _ARRAY_SUFFIX_RE.match(param[close + 1:].strip()).group(0)
        return f"({inner}){suffix}"
    tokens = [t for t in param.split() if t not in _PARAM_MODIFIERS]
    if not tokens:
        raise InvalidPayloadEncoding("Empty parameter type in method signature")
    return normalize(tokens[0])


def parse_method_signature(signature: str) -> Tuple[str, List[str]]:
    """
    Parse a human readable method signature.

    Accepts forms like "transfer(address,uint256)",
    "transfer(address to, uint256 value)" or
    "function transfer(address to, uint256 value) returns (bool)".

    Returns:
        Tuple of (method name, canonical ABI types)

    Raises:
        InvalidPayloadEncoding: If the signature cannot be parsed
    """
    text = signature.strip()
    if text.startswith("function "):
        text = text[len("function "):].strip()
    open_idx = text.find("(")
    if open_idx <= 0:
        raise InvalidPayloadEncoding(f"Invalid method signature: {signature}")
    name = text[:open_idx].strip()
    if not re.match(r"^[A-Za-z_$][A-Za-z0-9_$]*$", name):
        raise InvalidPayloadEncoding(f"Invalid method name in signature: {signature}")
    close_idx = _matching_paren(text, open_idx)
    try:
        types = [_canonical_param(p) for p in _split_top_level(text[open_idx + 1:close_idx])]
    except (ParseError, ValueError) as e:
        raise InvalidPayloadEncoding(f"Invalid parameter type in {signature}: {e}")
    return name, types


def _coerce_arg(abi_type: Any, value: Any) -> Any:
    # JSON and CSV inputs carry numbers, bytes and addresses as strings
    if abi_type.is_array:
        return [_coerce_arg(abi_type.item_type, v) for v in value]
    if isinstance(abi_type, TupleType):
        value = list(value)
        if len(value) != len(abi_type.components):
            raise InvalidPayloadEncoding(
                f"{abi_type.to_type_str()} expects {len(abi_type.components)} values, got {len(value)}"
            )
        return tuple(_coerce_arg(c, v) for c, v in zip(abi_type.components, value))
    base = abi_type.base
    if isinstance(value, str):
        if base in ("uint", "int"):
            text = value.strip()
            return int(text, 16) if text.lower().startswith("0x") else int(text)
        if base == "address":
            return to_checksum_address(value)
        if base == "bytes":
            return hex_to_bytes(value)
        if base == "bool":
            flag = value.strip().lower()
            if flag in ("true", "1"):
                return True
            if flag in ("false", "0"):
                return False
            raise InvalidPayloadEncoding(f"Invalid bool value: {value!r}")
    return value


def encode_function_call(signature: str, params: Sequence[Any] = ()) -> bytes:
    """
    ABI encode a call: 4-byte selector followed by the encoded arguments.

    Args:
        signature: Human readable method signature
        params: Positional arguments

    Returns:
        Encoded call data

    Raises:
        InvalidPayloadEncoding: If the signature or arguments are invalid
    """
    name, types = parse_method_signature(signature)
    params = list(params or [])
    if len(params) != len(types):
        raise InvalidPayloadEncoding(
            f"{name} expects {len(types)} parameters, got {len(params)}"
        )
    canonical = f"{name}({','.join(types)})"
    try:
        args = [_coerce_arg(parse(t), p) for t, p in zip(types, params)]
        encoded = abi_encode(types, args)
    except (EncodingError, ABITypeError, ParseError, SafeTxError, ValueError, TypeError) as e:
        raise InvalidPayloadEncoding(f"Failed to encode call to {canonical}: {e}")
    selector = function_signature_to_4byte_selector(canonical)
    logger.debug(f"Encoded call to {canonical} with {len(encoded)} argument bytes")
    return selector + encoded


_FIELD_ERRORS = {
    "to": InvalidAddress,
    "value": InvalidAmount,
}


def _as_description(description: Description) -> TxDescription:
    if isinstance(description, TxDescription):
        return description
    try:
        return TxDescription.model_validate(dict(description))
    except ValidationError as e:
        error = e.errors()[0]
        field = error["loc"][0] if error["loc"] else None
        exc_class = _FIELD_ERRORS.get(field, InvalidPayloadEncoding)
        raise exc_class(f"Invalid {field or 'description'}: {error['msg']}") from e


def resolve_payload(description: Description) -> PayloadSource:
    """
    Decide where the call data comes from.

    Valid hex `data` wins, then `method` + `params`, otherwise the call is
    a plain transfer.

    Raises:
        InvalidPayloadEncoding: If non-empty `data` is not valid hex and no
            method is given
    """
    desc = _as_description(description)
    has_data = desc.data is not None and desc.data != ""
    if has_data and is_hex_string(desc.data):
        return RawPayload(hex_to_bytes(desc.data))
    if desc.method:
        return MethodCall(desc.method, tuple(desc.params or ()))
    if has_data:
        raise InvalidPayloadEncoding(f"Invalid hex string provided for data: {desc.data}")
    return PlainTransfer()


def build_meta_transaction(description: Description) -> MetaTransaction:
    """
    Build a MetaTransaction from a description.

    Args:
        description: TxDescription or mapping with to, value, data, method,
            params and operation

    Returns:
        The canonical MetaTransaction

    Raises:
        InvalidAddress: If `to` is not a valid address
        InvalidAmount: If `value` is not a valid ether amount
        InvalidPayloadEncoding: If the payload cannot be resolved
    """
    desc = _as_description(description)
    to = to_checksum_address(desc.to)
    value = parse_ether(desc.value)
    payload = resolve_payload(desc)
    return MetaTransaction(to=to, value=value, data=payload.encode(), operation=desc.operation)


def build_meta_transactions(descriptions: Iterable[Description]) -> List[MetaTransaction]:
    """
    Build MetaTransactions preserving input order.

    Raises:
        NoTransactionsProvided: If there are no descriptions
    """
    txs = [build_meta_transaction(d) for d in descriptions]
    if not txs:
        raise NoTransactionsProvided("No transactions provided")
    return txs


def read_csv(path: Union[str, Path]) -> List[TxDescription]:
    """
    Read transaction descriptions from a CSV file, one per row.

    Columns: to, value, data, method, params, operation. `params` holds a
    JSON array. Blank cells are treated as absent.
    """
    descriptions = []
    with open(path, newline="", encoding="utf-8-sig") as f:
        for row in csv.DictReader(f):
            fields = {k.strip(): (v.strip() if isinstance(v, str) else v) for k, v in row.items() if k}
            fields = {k: v for k, v in fields.items() if v not in (None, "")}
            if "params" in fields:
                try:
                    fields["params"] = json.loads(fields["params"])
                except json.JSONDecodeError as e:
                    raise InvalidPayloadEncoding(f"Invalid params column {fields['params']!r}: {e}")
            descriptions.append(_as_description(fields))
    return descriptions


def load_meta_transactions(path: Union[str, Path]) -> List[MetaTransaction]:
    """
    Load MetaTransactions from a JSON array or a CSV file.

    Raises:
        NoTransactionsProvided: If the file has no entries
    """
    path = Path(path)
    if path.suffix.lower() == ".csv":
        descriptions: List[Any] = read_csv(path)
    else:
        with open(path, "r", encoding="utf-8-sig") as f:
            descriptions = json.load(f)
        if not isinstance(descriptions, list):
            raise ValueError(f"Expected a JSON array of transactions in {path}")
    logger.debug(f"Loaded {len(descriptions)} transaction descriptions from {path}")
    return build_meta_transactions(descriptions)
