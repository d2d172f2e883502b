from unittest import mock

from django.conf import settings
from django.test import SimpleTestCase

from eth_account import Account
from hexbytes import HexBytes
from safe_eth.eth.utils import fast_keccak
from safe_eth.util.util import to_0x_hex_str

from ..constants import SIGNED_MESSAGE_PREFIX
from ..encoding import calculate_user_operation_hash
from ..exceptions import SigningError
from ..signing import (
    get_user_operation_signing_digest,
    recover_user_operation_signer,
    sign_user_operation,
)
from .factories import UserOperationFactory

ENTRY_POINT = "0x0000000071727De22E5E9d8BAf0edAc6f37da032"
CHAIN_ID = 42161


class TestSigning(SimpleTestCase):
    def test_get_user_operation_signing_digest(self):
        user_operation = UserOperationFactory()
        user_operation_hash = calculate_user_operation_hash(
            user_operation, ENTRY_POINT, CHAIN_ID
        )
        self.assertEqual(
            get_user_operation_signing_digest(user_operation, ENTRY_POINT, CHAIN_ID),
            fast_keccak(SIGNED_MESSAGE_PREFIX + user_operation_hash),
        )

    def test_sign_user_operation(self):
        account = Account.create()
        user_operation = UserOperationFactory(sponsored=True)
        signed_user_operation = sign_user_operation(
            user_operation, account.key, ENTRY_POINT, CHAIN_ID
        )
        signature = signed_user_operation.signature
        self.assertEqual(len(signature), 65)
        self.assertIn(signature[-1], (27, 28))
        self.assertEqual(user_operation.signature, b"")
        self.assertEqual(
            signed_user_operation, user_operation.with_signature(signature)
        )

        # Same signature as signing the digest directly
        digest = get_user_operation_signing_digest(
            user_operation, ENTRY_POINT, CHAIN_ID
        )
        self.assertEqual(
            HexBytes(signature), account.unsafe_sign_hash(digest)["signature"]
        )
        self.assertEqual(
            recover_user_operation_signer(
                signed_user_operation, ENTRY_POINT, CHAIN_ID
            ),
            account.address,
        )

        # Private key as hex string
        self.assertEqual(
            sign_user_operation(
                user_operation, to_0x_hex_str(account.key), ENTRY_POINT, CHAIN_ID
            ),
            signed_user_operation,
        )

    def test_sign_user_operation_domain(self):
        account = Account.create()
        user_operation = UserOperationFactory()
        signed_user_operation = sign_user_operation(
            user_operation, account.key, ENTRY_POINT, CHAIN_ID
        )
        self.assertNotEqual(
            sign_user_operation(user_operation, account.key, ENTRY_POINT, 1),
            signed_user_operation,
        )
        # Signature is not valid for another chain
        self.assertNotEqual(
            recover_user_operation_signer(signed_user_operation, ENTRY_POINT, 1),
            account.address,
        )
        # Signing again replaces the signature, it's not part of the hash
        self.assertEqual(
            sign_user_operation(
                signed_user_operation, account.key, ENTRY_POINT, CHAIN_ID
            ),
            signed_user_operation,
        )

    def test_sign_user_operation_with_settings_key(self):
        account = Account.from_key(settings.ETHEREUM_TEST_PRIVATE_KEY)
        signed_user_operation = sign_user_operation(
            UserOperationFactory(),
            settings.ETHEREUM_TEST_PRIVATE_KEY,
            settings.ETHEREUM_4337_ENTRYPOINT,
            settings.ETHEREUM_4337_CHAIN_ID,
        )
        self.assertEqual(
            recover_user_operation_signer(
                signed_user_operation,
                settings.ETHEREUM_4337_ENTRYPOINT,
                settings.ETHEREUM_4337_CHAIN_ID,
            ),
            account.address,
        )

    def test_sign_user_operation_wipes_key(self):
        account = Account.create()
        with mock.patch.object(
            Account, "sign_message", wraps=Account.sign_message
        ) as sign_message_mock:
            signed_user_operation = sign_user_operation(
                UserOperationFactory(), account.key, ENTRY_POINT, CHAIN_ID
            )
        self.assertEqual(len(signed_user_operation.signature), 65)
        key = sign_message_mock.call_args.kwargs["private_key"]
        self.assertIsInstance(key, bytearray)
        self.assertEqual(key, bytearray(32))

    def test_sign_user_operation_invalid_key(self):
        user_operation = UserOperationFactory()
        for private_key in ("0x1234", "not-a-private-key", b"\x01" * 31, b""):
            with self.subTest(private_key=private_key):
                with self.assertRaises(SigningError):
                    sign_user_operation(
                        user_operation, private_key, ENTRY_POINT, CHAIN_ID
                    )

    def test_recover_user_operation_signer_invalid_signature(self):
        for signature in (b"", b"\x01" * 64, b"\x01" * 66):
            with self.subTest(signature=signature):
                with self.assertRaises(SigningError):
                    recover_user_operation_signer(
                        UserOperationFactory(signature=signature),
                        ENTRY_POINT,
                        CHAIN_ID,
                    )
