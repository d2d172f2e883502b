import copy
import dataclasses
import pickle

from django.test import SimpleTestCase

from eth_account import Account
from safe_eth.eth.constants import NULL_ADDRESS

from ..exceptions import MissingFieldError
from ..user_operation import (
    DEFAULTS_FOR_USER_OPERATION,
    UNSET,
    USER_OPERATION_FIELDS,
    Paymaster,
    PartialUserOperation,
    UnsetType,
    UserOperation,
    fill_user_operation_defaults,
    is_null_address,
)
from .factories import UserOperationFactory


class TestUserOperation(SimpleTestCase):
    def test_unset(self):
        self.assertIs(UnsetType(), UNSET)
        self.assertIs(copy.deepcopy(UNSET), UNSET)
        self.assertIs(pickle.loads(pickle.dumps(UNSET)), UNSET)
        self.assertFalse(UNSET)
        self.assertEqual(repr(UNSET), "UNSET")

    def test_is_null_address(self):
        self.assertTrue(is_null_address(None))
        self.assertTrue(is_null_address(""))
        self.assertTrue(is_null_address(NULL_ADDRESS))
        self.assertTrue(is_null_address(bytes(20)))
        self.assertFalse(is_null_address(Account.create().address))
        # Only the 20 bytes zero address is the sentinel
        self.assertFalse(is_null_address("0x00"))
        self.assertFalse(is_null_address(bytes(5)))
        self.assertFalse(is_null_address("not-an-address"))

    def test_sponsor(self):
        self.assertIsNone(UserOperationFactory().sponsor)
        self.assertIsNone(UserOperationFactory(paymaster=None).sponsor)

        user_operation = UserOperationFactory(sponsored=True)
        self.assertEqual(
            user_operation.sponsor,
            Paymaster(
                user_operation.paymaster,
                user_operation.paymaster_verification_gas_limit,
                user_operation.paymaster_post_op_gas_limit,
                user_operation.paymaster_data,
            ),
        )
        self.assertEqual(
            dataclasses.replace(user_operation, paymaster_data=None).sponsor.data, b""
        )

    def test_with_signature(self):
        user_operation = UserOperationFactory()
        signed_user_operation = user_operation.with_signature(b"\x01" * 65)
        self.assertEqual(signed_user_operation.signature, b"\x01" * 65)
        self.assertEqual(user_operation.signature, b"")
        self.assertEqual(
            dataclasses.replace(signed_user_operation, signature=b""), user_operation
        )


class TestFillUserOperationDefaults(SimpleTestCase):
    def test_fill_user_operation_defaults(self):
        sender = Account.create().address
        user_operation = fill_user_operation_defaults(
            PartialUserOperation(sender=sender, call_data=b"\x12\x34"),
            DEFAULTS_FOR_USER_OPERATION,
        )
        self.assertIsInstance(user_operation, UserOperation)
        self.assertEqual(user_operation.sender, sender)
        self.assertEqual(user_operation.call_data, b"\x12\x34")
        self.assertEqual(user_operation.pre_verification_gas, 21_000)
        self.assertEqual(user_operation.verification_gas_limit, 150_000)
        self.assertEqual(user_operation.max_priority_fee_per_gas, 10**9)
        self.assertEqual(user_operation.call_gas_limit, 0)
        self.assertEqual(user_operation.nonce, 0)
        self.assertEqual(user_operation.init_code, b"")
        self.assertEqual(user_operation.paymaster, NULL_ADDRESS)
        self.assertEqual(user_operation.paymaster_verification_gas_limit, 300_000)
        self.assertEqual(user_operation.signature, b"")
        self.assertIsNone(user_operation.sponsor)

    def test_fill_user_operation_defaults_keeps_zero_values(self):
        defaults = dataclasses.replace(
            DEFAULTS_FOR_USER_OPERATION,
            call_gas_limit=100_000,
            call_data=b"\xff",
            nonce=7,
        )
        user_operation = fill_user_operation_defaults(
            PartialUserOperation(call_gas_limit=0, call_data=b"", nonce=0), defaults
        )
        self.assertEqual(user_operation.call_gas_limit, 0)
        self.assertEqual(user_operation.call_data, b"")
        self.assertEqual(user_operation.nonce, 0)

        # `None` behaves as `UNSET`
        user_operation = fill_user_operation_defaults(
            PartialUserOperation(call_gas_limit=None, call_data=None, nonce=UNSET),
            defaults,
        )
        self.assertEqual(user_operation.call_gas_limit, 100_000)
        self.assertEqual(user_operation.call_data, b"\xff")
        self.assertEqual(user_operation.nonce, 7)

    def test_fill_user_operation_defaults_idempotent(self):
        for partial in (
            PartialUserOperation(),
            PartialUserOperation(sender=Account.create().address, call_gas_limit=0),
            PartialUserOperation(
                paymaster=Account.create().address, paymaster_data=b"\x01"
            ),
            UserOperationFactory(sponsored=True),
            UserOperationFactory(paymaster=None, paymaster_data=None),
        ):
            with self.subTest(partial=partial):
                user_operation = fill_user_operation_defaults(
                    partial, DEFAULTS_FOR_USER_OPERATION
                )
                self.assertEqual(
                    fill_user_operation_defaults(
                        user_operation, DEFAULTS_FOR_USER_OPERATION
                    ),
                    user_operation,
                )

    def test_fill_complete_user_operation(self):
        user_operation = UserOperationFactory(sponsored=True)
        self.assertEqual(
            fill_user_operation_defaults(user_operation, DEFAULTS_FOR_USER_OPERATION),
            user_operation,
        )
        self.assertEqual(
            fill_user_operation_defaults(user_operation, PartialUserOperation()),
            user_operation,
        )

    def test_fill_complete_user_operation_without_paymaster(self):
        user_operation = UserOperationFactory(
            paymaster=None,
            paymaster_verification_gas_limit=None,
            paymaster_post_op_gas_limit=None,
            paymaster_data=None,
        )
        filled_user_operation = fill_user_operation_defaults(
            user_operation, DEFAULTS_FOR_USER_OPERATION
        )
        self.assertEqual(filled_user_operation, user_operation)
        self.assertIsNone(filled_user_operation.paymaster)
        self.assertIsNone(filled_user_operation.paymaster_data)

        # `None` on a partial operation still takes the default
        filled_user_operation = fill_user_operation_defaults(
            PartialUserOperation(
                **{
                    name: getattr(user_operation, name)
                    for name in USER_OPERATION_FIELDS
                }
            ),
            DEFAULTS_FOR_USER_OPERATION,
        )
        self.assertEqual(filled_user_operation.paymaster, NULL_ADDRESS)
        self.assertEqual(filled_user_operation.paymaster_data, b"")
        self.assertIsNone(filled_user_operation.sponsor)

        # Required fields cannot be `None` on a complete operation
        with self.assertRaises(MissingFieldError) as context:
            fill_user_operation_defaults(
                dataclasses.replace(user_operation, nonce=None),
                DEFAULTS_FOR_USER_OPERATION,
            )
        self.assertEqual(context.exception.field_names, ("nonce",))

    def test_fill_user_operation_defaults_missing_fields(self):
        with self.assertRaises(MissingFieldError) as context:
            fill_user_operation_defaults(
                PartialUserOperation(sender=Account.create().address),
                PartialUserOperation(nonce=0, call_data=b""),
            )
        self.assertEqual(
            context.exception.field_names,
            (
                "init_code",
                "call_gas_limit",
                "verification_gas_limit",
                "pre_verification_gas",
                "max_fee_per_gas",
                "max_priority_fee_per_gas",
                "signature",
            ),
        )
        self.assertIn("init_code", str(context.exception))

        # Paymaster fields are not required when there's no paymaster
        defaults_without_paymaster = PartialUserOperation(
            **{
                field.name: getattr(DEFAULTS_FOR_USER_OPERATION, field.name)
                for field in dataclasses.fields(PartialUserOperation)
                if not field.name.startswith("paymaster")
            }
        )
        user_operation = fill_user_operation_defaults(
            PartialUserOperation(), defaults_without_paymaster
        )
        self.assertIsNone(user_operation.paymaster)
        self.assertIsNone(user_operation.paymaster_data)
        self.assertIsNone(user_operation.sponsor)

        with self.assertRaises(MissingFieldError) as context:
            fill_user_operation_defaults(
                PartialUserOperation(paymaster=Account.create().address),
                defaults_without_paymaster,
            )
        self.assertEqual(
            context.exception.field_names,
            (
                "paymaster_verification_gas_limit",
                "paymaster_post_op_gas_limit",
                "paymaster_data",
            ),
        )
