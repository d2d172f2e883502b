from typing import Any, List, Sequence

from eth_abi import encode as abi_encode
from eth_abi.exceptions import EncodingError as AbiEncodingError
from eth_typing import ChecksumAddress
from hexbytes import HexBytes
from safe_eth.eth.utils import fast_keccak

from .constants import (
    HANDLE_OPS_SELECTOR,
    PACKED_USER_OPERATION_TUPLE,
    USER_OPERATION_ABI_TYPES,
    USER_OPERATION_DOMAIN_ABI_TYPES,
    USER_OPERATION_HASH_ABI_TYPES,
)
from .exceptions import EncodingError
from .packing import pack_user_operation, to_address_bytes
from .user_operation import UserOperation


def _abi_encode(types: List[str], values: Sequence[Any]) -> bytes:
    try:
        return abi_encode(types, values)
    except AbiEncodingError as exc:
        raise EncodingError(str(exc)) from exc


def encode_user_operation(
    user_operation: UserOperation, for_signature: bool = True
) -> bytes:
    """
    ABI encode a ``UserOperation`` as the EntryPoint does

    :param user_operation:
    :param for_signature: if ``True`` dynamic fields are replaced by their ``keccak`` and
        ``signature`` is not included, that is the encoding used to calculate the
        ``user_operation_hash``. If ``False`` everything is encoded raw, useful for
        estimating calldata cost
    :return: ABI encoded ``UserOperation``
    :raises EncodingError:
    """
    packed_user_operation = pack_user_operation(user_operation)
    if for_signature:
        return _abi_encode(
            USER_OPERATION_HASH_ABI_TYPES,
            [
                packed_user_operation.sender,
                packed_user_operation.nonce,
                fast_keccak(packed_user_operation.init_code),
                fast_keccak(packed_user_operation.call_data),
                packed_user_operation.account_gas_limits,
                packed_user_operation.pre_verification_gas,
                packed_user_operation.gas_fees,
                fast_keccak(packed_user_operation.paymaster_and_data),
            ],
        )
    return _abi_encode(USER_OPERATION_ABI_TYPES, packed_user_operation.as_tuple())


def calculate_user_operation_hash(
    user_operation: UserOperation, entry_point: ChecksumAddress, chain_id: int
) -> HexBytes:
    """
    Same as ``EntryPoint.getUserOpHash``. ``entry_point`` and ``chain_id`` are part of
    the hash so it cannot be replayed on other EntryPoint or chain

    :param user_operation:
    :param entry_point: EntryPoint address
    :param chain_id:
    :return: ``user_operation_hash``
    :raises EncodingError:
    """
    user_operation_encoded = encode_user_operation(user_operation, for_signature=True)
    return HexBytes(
        fast_keccak(
            _abi_encode(
                USER_OPERATION_DOMAIN_ABI_TYPES,
                [
                    fast_keccak(user_operation_encoded),
                    to_address_bytes(entry_point),
                    chain_id,
                ],
            )
        )
    )


def encode_handle_ops(
    user_operations: Sequence[UserOperation], beneficiary: ChecksumAddress
) -> HexBytes:
    """
    Build calldata for ``EntryPoint.handleOps(PackedUserOperation[] ops, address beneficiary)``.
    Operations are expected to be already signed

    :param user_operations:
    :param beneficiary: address receiving the collected fees
    :return: calldata with function selector
    :raises EncodingError:
    """
    packed_user_operations = [
        pack_user_operation(user_operation).as_tuple()
        for user_operation in user_operations
    ]
    return HexBytes(
        HANDLE_OPS_SELECTOR
        + _abi_encode(
            [f"{PACKED_USER_OPERATION_TUPLE}[]", "address"],
            [packed_user_operations, to_address_bytes(beneficiary)],
        )
    )
