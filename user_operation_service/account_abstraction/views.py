import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.response import Response
from safe_eth.util.util import to_0x_hex_str

from . import serializers
from .encoding import calculate_user_operation_hash
from .exceptions import EncodingError
from .packing import pack_user_operation
from .utils import get_chain_id, get_entry_point

logger = logging.getLogger(__name__)


class UserOperationHashView(GenericAPIView):
    serializer_class = serializers.UserOperationSerializer

    @extend_schema(
        tags=["4337"],
        request=serializers.UserOperationSerializer,
        responses={
            200: serializers.UserOperationHashResponseSerializer,
            400: OpenApiResponse(description="Invalid data"),
            422: OpenApiResponse(description="UserOperation cannot be encoded"),
        },
    )
    def post(self, request, *args, **kwargs):
        """
        Fills a UserOperation with the configured defaults and returns it packed for the
        EntryPoint together with its `userOperationHash`, the hash the account owner must sign
        """
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user_operation = serializer.validated_data["user_operation"]
        entry_point = get_entry_point()
        chain_id = get_chain_id()
        try:
            packed_user_operation = pack_user_operation(user_operation)
            user_operation_hash = calculate_user_operation_hash(
                user_operation, entry_point, chain_id
            )
        except EncodingError as exc:
            return Response(
                status=status.HTTP_422_UNPROCESSABLE_ENTITY,
                data={
                    "code": 1,
                    "message": "UserOperation cannot be encoded",
                    "arguments": [str(exc)],
                },
            )

        logger.info(
            "Calculated user-operation-hash=%s for sender=%s nonce=%d",
            to_0x_hex_str(user_operation_hash),
            user_operation.sender,
            user_operation.nonce,
        )
        response_serializer = serializers.UserOperationHashResponseSerializer(
            {
                "user_operation_hash": user_operation_hash,
                "entry_point": entry_point,
                "chain_id": chain_id,
                "user_operation": user_operation,
                "packed_user_operation": packed_user_operation,
            }
        )
        return Response(status=status.HTTP_200_OK, data=response_serializer.data)
