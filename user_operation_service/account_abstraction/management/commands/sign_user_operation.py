import json
import logging
import os
import sys

from django.core.management.base import BaseCommand, CommandError

from djangorestframework_camel_case.util import camelize, underscoreize
from safe_eth.eth.utils import fast_to_checksum_address
from safe_eth.util.util import to_0x_hex_str

from ...encoding import calculate_user_operation_hash
from ...exceptions import UserOperationException
from ...packing import pack_user_operation
from ...serializers import (
    PackedUserOperationResponseSerializer,
    UserOperationResponseSerializer,
    UserOperationSerializer,
)
from ...signing import sign_user_operation
from ...utils import get_chain_id, get_entry_point

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Fill a UserOperation with the configured defaults and sign it"

    def add_arguments(self, parser):
        parser.add_argument(
            "user_operation",
            help="JSON file with the UserOperation (camelCase or snake_case), `-` for stdin",
        )
        parser.add_argument(
            "--private-key-env",
            default="USER_OPERATION_SIGNER_PRIVATE_KEY",
            help="Environment variable holding the signer private key",
        )
        parser.add_argument(
            "--entry-point",
            help="EntryPoint address. If not provided `ETHEREUM_4337_ENTRYPOINT` is used",
        )
        parser.add_argument(
            "--chain-id",
            type=int,
            help="Chain id. If not provided `ETHEREUM_4337_CHAIN_ID` is used",
        )

    def handle(self, *args, **options):
        private_key = os.environ.get(options["private_key_env"])
        if not private_key:
            raise CommandError(
                f"Private key environment variable {options['private_key_env']} is not set"
            )

        try:
            entry_point = (
                fast_to_checksum_address(options["entry_point"])
                if options["entry_point"]
                else get_entry_point()
            )
        except ValueError as exc:
            raise CommandError(
                f"EntryPoint address {options['entry_point']} is not valid"
            ) from exc
        chain_id = (
            options["chain_id"] if options["chain_id"] is not None else get_chain_id()
        )

        serializer = UserOperationSerializer(
            data=underscoreize(self.read_user_operation(options["user_operation"]))
        )
        if not serializer.is_valid():
            raise CommandError(f"Invalid UserOperation: {serializer.errors}")

        try:
            user_operation = sign_user_operation(
                serializer.validated_data["user_operation"],
                private_key,
                entry_point,
                chain_id,
            )
            user_operation_hash = calculate_user_operation_hash(
                user_operation, entry_point, chain_id
            )
            packed_user_operation = pack_user_operation(user_operation)
        except UserOperationException as exc:
            raise CommandError(f"Cannot sign UserOperation: {exc}") from exc

        logger.info(
            "Signed user-operation-hash=%s for sender=%s nonce=%d",
            to_0x_hex_str(user_operation_hash),
            user_operation.sender,
            user_operation.nonce,
        )
        self.stdout.write(
            json.dumps(
                camelize(
                    {
                        "user_operation_hash": to_0x_hex_str(user_operation_hash),
                        "entry_point": entry_point,
                        "chain_id": chain_id,
                        "user_operation": UserOperationResponseSerializer(
                            user_operation
                        ).data,
                        "packed_user_operation": PackedUserOperationResponseSerializer(
                            packed_user_operation
                        ).data,
                    }
                ),
                indent=2,
            )
        )
        self.stderr.write(
            self.style.SUCCESS(
                f"Signed user-operation-hash={to_0x_hex_str(user_operation_hash)}"
            )
        )

    def read_user_operation(self, path: str):
        try:
            if path == "-":
                return json.load(sys.stdin)
            with open(path) as user_operation_file:
                return json.load(user_operation_file)
        except (OSError, ValueError) as exc:
            raise CommandError(f"Cannot read UserOperation from {path}: {exc}") from exc
