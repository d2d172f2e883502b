import dataclasses
from typing import Any, Dict, Optional, Tuple, Union

from eth_typing import ChecksumAddress
from hexbytes import HexBytes
from safe_eth.eth.constants import NULL_ADDRESS

from .constants import ADDRESS_BYTES
from .exceptions import MissingFieldError


class UnsetType:
    """
    Marker for a field without explicit value. Unlike ``0`` or ``b""``, an unset
    field takes its value from the defaults when the operation is filled
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return UnsetType, ()


UNSET = UnsetType()


def is_unset(value: Any) -> bool:
    return value is None or value is UNSET


def is_null_address(address: Optional[Union[ChecksumAddress, bytes]]) -> bool:
    """
    :return: ``True`` if ``address`` is not set or is the 20 bytes ``NULL_ADDRESS``
        sentinel. Malformed addresses are not null, so they fail when packed
    """
    if not address:
        return True
    try:
        address_bytes = HexBytes(address)
    except (TypeError, ValueError):
        return False
    return len(address_bytes) == ADDRESS_BYTES and not any(address_bytes)


@dataclasses.dataclass(eq=True, frozen=True)
class Paymaster:
    """
    Third party sponsoring the gas fees of a ``UserOperation``
    """

    address: ChecksumAddress
    verification_gas_limit: int
    post_op_gas_limit: int
    data: bytes = b""


@dataclasses.dataclass(eq=True, frozen=True)
class UserOperation:
    """
    EIP4337 UserOperation for Entrypoint v0.7, unpacked form

    https://github.com/eth-infinitism/account-abstraction/blob/v0.7.0/contracts/interfaces/PackedUserOperation.sol
    """

    sender: ChecksumAddress
    nonce: int
    init_code: bytes
    call_data: bytes
    call_gas_limit: int
    verification_gas_limit: int
    pre_verification_gas: int
    max_fee_per_gas: int
    max_priority_fee_per_gas: int
    paymaster: Optional[ChecksumAddress] = None
    paymaster_verification_gas_limit: Optional[int] = None
    paymaster_post_op_gas_limit: Optional[int] = None
    paymaster_data: Optional[bytes] = None
    signature: bytes = b""

    @property
    def sponsor(self) -> Optional[Paymaster]:
        """
        :return: ``Paymaster`` if the operation is sponsored, ``None`` if ``paymaster``
            is not set or is the ``NULL_ADDRESS``
        """
        if is_null_address(self.paymaster):
            return None
        return Paymaster(
            self.paymaster,
            self.paymaster_verification_gas_limit,
            self.paymaster_post_op_gas_limit,
            self.paymaster_data or b"",
        )

    def with_signature(self, signature: bytes) -> "UserOperation":
        return dataclasses.replace(self, signature=bytes(signature))


@dataclasses.dataclass(eq=True, frozen=True)
class PartialUserOperation:
    """
    ``UserOperation`` where any field can be ``UNSET``. Also used as the table of
    default values to fill operations with
    """

    sender: Union[ChecksumAddress, UnsetType] = UNSET
    nonce: Union[int, UnsetType] = UNSET
    init_code: Union[bytes, UnsetType] = UNSET
    call_data: Union[bytes, UnsetType] = UNSET
    call_gas_limit: Union[int, UnsetType] = UNSET
    verification_gas_limit: Union[int, UnsetType] = UNSET
    pre_verification_gas: Union[int, UnsetType] = UNSET
    max_fee_per_gas: Union[int, UnsetType] = UNSET
    max_priority_fee_per_gas: Union[int, UnsetType] = UNSET
    paymaster: Union[ChecksumAddress, None, UnsetType] = UNSET
    paymaster_verification_gas_limit: Union[int, None, UnsetType] = UNSET
    paymaster_post_op_gas_limit: Union[int, None, UnsetType] = UNSET
    paymaster_data: Union[bytes, None, UnsetType] = UNSET
    signature: Union[bytes, UnsetType] = UNSET


USER_OPERATION_FIELDS: Tuple[str, ...] = tuple(
    field.name for field in dataclasses.fields(UserOperation)
)
PAYMASTER_FIELDS: Tuple[str, ...] = (
    "paymaster_verification_gas_limit",
    "paymaster_post_op_gas_limit",
    "paymaster_data",
)
REQUIRED_FIELDS: Tuple[str, ...] = tuple(
    name
    for name in USER_OPERATION_FIELDS
    if name != "paymaster" and name not in PAYMASTER_FIELDS
)

DEFAULTS_FOR_USER_OPERATION = PartialUserOperation(
    sender=NULL_ADDRESS,
    nonce=0,
    init_code=b"",
    call_data=b"",
    call_gas_limit=0,
    # Default verification gas. Deployments (`init_code`) usually need more
    verification_gas_limit=150_000,
    # Should also cover calldata cost
    pre_verification_gas=21_000,
    max_fee_per_gas=0,
    max_priority_fee_per_gas=10**9,
    paymaster=NULL_ADDRESS,
    paymaster_data=b"",
    paymaster_verification_gas_limit=300_000,
    paymaster_post_op_gas_limit=0,
    signature=b"",
)


def fill_user_operation_defaults(
    partial: Union[PartialUserOperation, UserOperation],
    defaults: PartialUserOperation,
) -> UserOperation:
    """
    Build a complete ``UserOperation``, taking every field from ``partial`` unless it's
    ``UNSET`` or ``None``. Explicit zero values (``0``, ``b""``) are kept.

    ``UserOperation`` cannot hold ``UNSET`` and uses ``None`` for a missing paymaster,
    so it's returned as it is if it has every required field.

    :param partial:
    :param defaults: immutable table of values for the unset fields
    :return: complete ``UserOperation``
    :raises MissingFieldError: if a required field has no value nor default
    """
    is_missing = (
        (lambda value: value is UNSET)
        if isinstance(partial, UserOperation)
        else is_unset
    )
    values: Dict[str, Any] = {}
    for name in USER_OPERATION_FIELDS:
        value = getattr(partial, name, UNSET)
        if is_missing(value):
            value = getattr(defaults, name, UNSET)
        values[name] = None if is_unset(value) else value

    required = REQUIRED_FIELDS
    if not is_null_address(values["paymaster"]):
        required = REQUIRED_FIELDS + PAYMASTER_FIELDS
    missing = [name for name in required if values[name] is None]
    if missing:
        raise MissingFieldError(missing)

    return UserOperation(**values)


@dataclasses.dataclass(eq=True, frozen=True)
class PackedUserOperation:
    """
    Wire form of a ``UserOperation``, as expected by the EntryPoint. Build it using
    ``pack_user_operation``
    """

    sender: ChecksumAddress
    nonce: int
    init_code: bytes
    call_data: bytes
    account_gas_limits: bytes
    pre_verification_gas: int
    gas_fees: bytes
    paymaster_and_data: bytes
    signature: bytes

    def as_tuple(self, include_signature: bool = True) -> Tuple[Any, ...]:
        """
        :param include_signature:
        :return: ``PackedUserOperation`` struct values in Solidity order
        """
        values = (
            self.sender,
            self.nonce,
            self.init_code,
            self.call_data,
            self.account_gas_limits,
            self.pre_verification_gas,
            self.gas_fees,
            self.paymaster_and_data,
        )
        if include_signature:
            return values + (self.signature,)
        return values
