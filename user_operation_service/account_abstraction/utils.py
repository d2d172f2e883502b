import dataclasses
from functools import cache

from django.conf import settings

from eth_typing import ChecksumAddress
from safe_eth.eth.utils import fast_to_checksum_address

from .user_operation import DEFAULTS_FOR_USER_OPERATION, PartialUserOperation


@cache
def get_user_operation_defaults() -> PartialUserOperation:
    """
    :return: defaults for filling UserOperations, gas values can be overridden
        using ``ETHEREUM_4337_DEFAULT_*`` settings
    """
    return dataclasses.replace(
        DEFAULTS_FOR_USER_OPERATION,
        verification_gas_limit=settings.ETHEREUM_4337_DEFAULT_VERIFICATION_GAS_LIMIT,
        pre_verification_gas=settings.ETHEREUM_4337_DEFAULT_PRE_VERIFICATION_GAS,
        max_priority_fee_per_gas=settings.ETHEREUM_4337_DEFAULT_MAX_PRIORITY_FEE_PER_GAS,
        paymaster_verification_gas_limit=settings.ETHEREUM_4337_DEFAULT_PAYMASTER_VERIFICATION_GAS_LIMIT,
    )


def get_entry_point() -> ChecksumAddress:
    return fast_to_checksum_address(settings.ETHEREUM_4337_ENTRYPOINT)


def get_chain_id() -> int:
    return settings.ETHEREUM_4337_CHAIN_ID
