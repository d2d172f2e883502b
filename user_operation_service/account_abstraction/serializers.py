from typing import Any, Dict

import safe_eth.eth.django.serializers as eth_serializers
from hexbytes import HexBytes
from rest_framework import serializers
from rest_framework.exceptions import ValidationError

from .exceptions import MissingFieldError
from .user_operation import (
    UNSET,
    USER_OPERATION_FIELDS,
    PartialUserOperation,
    fill_user_operation_defaults,
)
from .utils import get_user_operation_defaults


class BytesField(eth_serializers.HexadecimalField):
    """
    ``0x`` is parsed as empty bytes instead of a blank value, so it's not replaced by defaults
    """

    def to_internal_value(self, data):
        if isinstance(data, str) and data.strip() == "0x":
            return HexBytes(b"")
        return super().to_internal_value(data)


# ================================================ #
#            Request Serializers
# ================================================ #
class UserOperationSerializer(serializers.Serializer):
    """
    Every field is optional. Not provided or ``null`` fields are filled using the
    configured defaults
    """

    sender = eth_serializers.EthereumAddressField(required=False, allow_null=True)
    nonce = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    init_code = BytesField(required=False, allow_null=True)
    call_data = BytesField(required=False, allow_null=True)
    call_gas_limit = serializers.IntegerField(
        min_value=0, required=False, allow_null=True
    )
    verification_gas_limit = serializers.IntegerField(
        min_value=0, required=False, allow_null=True
    )
    pre_verification_gas = serializers.IntegerField(
        min_value=0, required=False, allow_null=True
    )
    max_fee_per_gas = serializers.IntegerField(
        min_value=0, required=False, allow_null=True
    )
    max_priority_fee_per_gas = serializers.IntegerField(
        min_value=0, required=False, allow_null=True
    )
    paymaster = eth_serializers.EthereumAddressField(
        allow_zero_address=True, required=False, allow_null=True
    )
    paymaster_verification_gas_limit = serializers.IntegerField(
        min_value=0, required=False, allow_null=True
    )
    paymaster_post_op_gas_limit = serializers.IntegerField(
        min_value=0, required=False, allow_null=True
    )
    paymaster_data = BytesField(required=False, allow_null=True)
    signature = BytesField(required=False, allow_null=True)

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        attrs = super().validate(attrs)
        try:
            attrs["user_operation"] = fill_user_operation_defaults(
                self.get_partial_user_operation(attrs), get_user_operation_defaults()
            )
        except MissingFieldError as exc:
            raise ValidationError(
                {field_name: "Field is required" for field_name in exc.field_names}
            ) from exc
        return attrs

    @staticmethod
    def get_partial_user_operation(attrs: Dict[str, Any]) -> PartialUserOperation:
        return PartialUserOperation(
            **{
                field_name: (
                    bytes(attrs[field_name])
                    if isinstance(attrs.get(field_name), HexBytes)
                    else attrs.get(field_name, UNSET)
                )
                for field_name in USER_OPERATION_FIELDS
            }
        )


# ================================================ #
#            Response Serializers
# ================================================ #
class UserOperationResponseSerializer(serializers.Serializer):
    sender = eth_serializers.EthereumAddressField()
    nonce = serializers.IntegerField(min_value=0)
    init_code = eth_serializers.HexadecimalField()
    call_data = eth_serializers.HexadecimalField()
    call_gas_limit = serializers.IntegerField(min_value=0)
    verification_gas_limit = serializers.IntegerField(min_value=0)
    pre_verification_gas = serializers.IntegerField(min_value=0)
    max_fee_per_gas = serializers.IntegerField(min_value=0)
    max_priority_fee_per_gas = serializers.IntegerField(min_value=0)
    paymaster = eth_serializers.EthereumAddressField(allow_null=True)
    paymaster_verification_gas_limit = serializers.IntegerField(allow_null=True)
    paymaster_post_op_gas_limit = serializers.IntegerField(allow_null=True)
    paymaster_data = eth_serializers.HexadecimalField(allow_null=True)
    signature = eth_serializers.HexadecimalField()


class PackedUserOperationResponseSerializer(serializers.Serializer):
    sender = eth_serializers.EthereumAddressField()
    nonce = serializers.IntegerField(min_value=0)
    init_code = eth_serializers.HexadecimalField()
    call_data = eth_serializers.HexadecimalField()
    account_gas_limits = eth_serializers.HexadecimalField()
    pre_verification_gas = serializers.IntegerField(min_value=0)
    gas_fees = eth_serializers.HexadecimalField()
    paymaster_and_data = eth_serializers.HexadecimalField()
    signature = eth_serializers.HexadecimalField()


class UserOperationHashResponseSerializer(serializers.Serializer):
    user_operation_hash = eth_serializers.HexadecimalField()
    entry_point = eth_serializers.EthereumAddressField()
    chain_id = serializers.IntegerField(min_value=0)
    user_operation = UserOperationResponseSerializer(read_only=True)
    packed_user_operation = PackedUserOperationResponseSerializer(read_only=True)
