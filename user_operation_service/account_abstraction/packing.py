import operator
from typing import Optional, Union

from eth_typing import ChecksumAddress
from hexbytes import HexBytes
from safe_eth.eth.utils import fast_to_checksum_address

from .constants import ADDRESS_BYTES, UINT128_BYTES
from .exceptions import EncodingError
from .user_operation import PackedUserOperation, UserOperation, is_null_address


def to_uint128_bytes(value: int) -> bytes:
    """
    :param value:
    :return: ``value`` as a big endian ``bytes16``
    :raises EncodingError: if ``value`` is negative or does not fit in 128 bits
    """
    try:
        return operator.index(value).to_bytes(UINT128_BYTES, byteorder="big")
    except (OverflowError, TypeError, ValueError) as exc:
        raise EncodingError(f"Value={value!r} does not fit in uint128") from exc


def to_address_bytes(address: Union[ChecksumAddress, bytes]) -> bytes:
    """
    :param address:
    :return: ``address`` as 20 bytes
    :raises EncodingError: if ``address`` is not 20 bytes long
    """
    try:
        address_bytes = bytes(HexBytes(address))
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"Address={address!r} is not valid") from exc
    if len(address_bytes) != ADDRESS_BYTES:
        raise EncodingError(
            f"Address={address!r} has {len(address_bytes)} bytes, expected {ADDRESS_BYTES}"
        )
    return address_bytes


def pack_uint128_pair(high: int, low: int) -> bytes:
    """
    Pack two ``uint128`` in a Solidity ``bytes32``

    :param high: stored in the first 16 bytes
    :param low: stored in the last 16 bytes
    :return: 32 bytes
    :raises EncodingError:
    """
    return to_uint128_bytes(high) + to_uint128_bytes(low)


def pack_account_gas_limits(user_operation: UserOperation) -> bytes:
    """
    :return: Account Gas Limits is a ``bytes32`` in Solidity, first ``bytes16``
        ``verification_gas_limit`` and then ``call_gas_limit``
    """
    return pack_uint128_pair(
        user_operation.verification_gas_limit, user_operation.call_gas_limit
    )


def pack_gas_fees(user_operation: UserOperation) -> bytes:
    """
    :return: Gas Fees is a ``bytes32`` in Solidity, first ``bytes16``
        ``max_priority_fee_per_gas`` and then ``max_fee_per_gas``
    """
    return pack_uint128_pair(
        user_operation.max_priority_fee_per_gas, user_operation.max_fee_per_gas
    )


def pack_paymaster_and_data(
    paymaster: Optional[Union[ChecksumAddress, bytes]],
    verification_gas_limit: Optional[int],
    post_op_gas_limit: Optional[int],
    data: Optional[bytes],
) -> bytes:
    """
    Build ``paymasterAndData``. When there's no paymaster the rest of the parameters
    are ignored and not validated

    :param paymaster: ``None`` or ``NULL_ADDRESS`` for no paymaster
    :param verification_gas_limit:
    :param post_op_gas_limit:
    :param data:
    :return: ``paymaster (20 bytes) + verification gas (16 bytes) + post op gas (16 bytes) + data``,
        empty bytes if there's no paymaster
    :raises EncodingError:
    """
    if is_null_address(paymaster):
        return b""
    return (
        to_address_bytes(paymaster)
        + to_uint128_bytes(verification_gas_limit)
        + to_uint128_bytes(post_op_gas_limit)
        + bytes(HexBytes(data or b""))
    )


def pack_user_operation(user_operation: UserOperation) -> PackedUserOperation:
    """
    :param user_operation:
    :return: ``PackedUserOperation`` to be encoded and sent to the EntryPoint
    :raises EncodingError: if any field does not fit in its packed size
    """
    sponsor = user_operation.sponsor
    paymaster_and_data = (
        pack_paymaster_and_data(
            sponsor.address,
            sponsor.verification_gas_limit,
            sponsor.post_op_gas_limit,
            sponsor.data,
        )
        if sponsor
        else b""
    )
    return PackedUserOperation(
        sender=fast_to_checksum_address(
            "0x" + to_address_bytes(user_operation.sender).hex()
        ),
        nonce=user_operation.nonce,
        init_code=bytes(HexBytes(user_operation.init_code)),
        call_data=bytes(HexBytes(user_operation.call_data)),
        account_gas_limits=pack_account_gas_limits(user_operation),
        pre_verification_gas=user_operation.pre_verification_gas,
        gas_fees=pack_gas_fees(user_operation),
        paymaster_and_data=paymaster_and_data,
        signature=bytes(HexBytes(user_operation.signature)),
    )
