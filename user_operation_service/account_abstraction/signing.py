from typing import Union

from eth_account import Account
from eth_account.messages import defunct_hash_message, encode_defunct
from eth_keys.exceptions import BadSignature
from eth_keys.exceptions import ValidationError as EthKeysValidationError
from eth_typing import ChecksumAddress
from hexbytes import HexBytes

from .constants import SIGNATURE_LENGTH
from .encoding import calculate_user_operation_hash
from .exceptions import SigningError
from .user_operation import UserOperation

PrivateKey = Union[bytes, str]


def get_user_operation_signing_digest(
    user_operation: UserOperation, entry_point: ChecksumAddress, chain_id: int
) -> HexBytes:
    """
    :return: ``keccak("\\x19Ethereum Signed Message:\\n32" + user_operation_hash)``,
        the digest actually signed by the account owner
    """
    user_operation_hash = calculate_user_operation_hash(
        user_operation, entry_point, chain_id
    )
    return HexBytes(defunct_hash_message(primitive=user_operation_hash))


def sign_user_operation(
    user_operation: UserOperation,
    private_key: PrivateKey,
    entry_point: ChecksumAddress,
    chain_id: int,
) -> UserOperation:
    """
    Sign ``user_operation_hash`` using EIP-191 ``personal_sign``, same as
    ``signer.signMessage(userOpHash)``

    :param user_operation:
    :param private_key: only used for signing, it's not stored. The local copy is
        zeroed after signing, ``private_key`` itself and the copies made by
        ``eth_account`` are not
    :param entry_point: EntryPoint address
    :param chain_id:
    :return: copy of ``user_operation`` with ``signature`` set (``r + s + v``, 65 bytes)
    :raises SigningError: if ``private_key`` is not valid
    :raises EncodingError:
    """
    user_operation_hash = calculate_user_operation_hash(
        user_operation, entry_point, chain_id
    )
    try:
        key = bytearray(HexBytes(private_key))
    except (TypeError, ValueError) as exc:
        raise SigningError("Private key is not valid") from exc

    try:
        signed_message = Account.sign_message(
            encode_defunct(primitive=user_operation_hash), private_key=key
        )
    except (EthKeysValidationError, TypeError, ValueError) as exc:
        raise SigningError("Cannot sign user operation") from exc
    finally:
        key[:] = bytes(len(key))

    signature = bytes(signed_message.signature)
    if len(signature) != SIGNATURE_LENGTH:
        raise SigningError(f"Unexpected signature length={len(signature)}")
    return user_operation.with_signature(signature)


def recover_user_operation_signer(
    user_operation: UserOperation, entry_point: ChecksumAddress, chain_id: int
) -> ChecksumAddress:
    """
    :return: address of the owner that signed ``user_operation``
    :raises SigningError: if ``signature`` is not a valid 65 bytes ECDSA signature
    """
    if len(user_operation.signature) != SIGNATURE_LENGTH:
        raise SigningError(
            f"Signature length={len(user_operation.signature)} is not valid, expected {SIGNATURE_LENGTH}"
        )
    user_operation_hash = calculate_user_operation_hash(
        user_operation, entry_point, chain_id
    )
    try:
        return Account.recover_message(
            encode_defunct(primitive=user_operation_hash),
            signature=user_operation.signature,
        )
    except (BadSignature, EthKeysValidationError, ValueError) as exc:
        raise SigningError("Cannot recover user operation signer") from exc
