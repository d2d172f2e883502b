"""
ERC4337 Constants

EntryPoint v0.7.0
-----------------
    PackedUserOperation (
                        address sender,
                        uint256 nonce,
                        bytes initCode,
                        bytes callData,
                        bytes32 accountGasLimits,
                        uint256 preVerificationGas,
                        bytes32 gasFees,
                        bytes paymasterAndData,
                        bytes signature
                        )
"""

from safe_eth.eth.utils import fast_keccak_text

UINT128_BYTES = 16
ADDRESS_BYTES = 20
SIGNATURE_LENGTH = 65

# EIP-191 `personal_sign` prefix for a 32 bytes message
SIGNED_MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n32"

# Solidity ABI types
USER_OPERATION_HASH_ABI_TYPES = [
    "address",  # sender
    "uint256",  # nonce
    "bytes32",  # keccak(initCode)
    "bytes32",  # keccak(callData)
    "bytes32",  # accountGasLimits
    "uint256",  # preVerificationGas
    "bytes32",  # gasFees
    "bytes32",  # keccak(paymasterAndData)
]
USER_OPERATION_ABI_TYPES = [
    "address",  # sender
    "uint256",  # nonce
    "bytes",  # initCode
    "bytes",  # callData
    "bytes32",  # accountGasLimits
    "uint256",  # preVerificationGas
    "bytes32",  # gasFees
    "bytes",  # paymasterAndData
    "bytes",  # signature
]
USER_OPERATION_DOMAIN_ABI_TYPES = ["bytes32", "address", "uint256"]

PACKED_USER_OPERATION_TUPLE = "(" + ",".join(USER_OPERATION_ABI_TYPES) + ")"
HANDLE_OPS_SIGNATURE = f"handleOps({PACKED_USER_OPERATION_TUPLE}[],address)"
HANDLE_OPS_SELECTOR = fast_keccak_text(HANDLE_OPS_SIGNATURE)[:4]
