"""
With these settings, tests run faster.
"""

from .base import *  # noqa
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#debug
DEBUG = False
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="q8lVkJGsIiHcTSQKaWIBsMVPOGnCnF6f7NDGup8KdDNmviSaZVhP0Nq3q3MolmFU",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#test-runner
TEST_RUNNER = "django.test.runner.DiscoverRunner"

# CACHES
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#caches
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.dummy.DummyCache",
    },
}

# ERC4337
# ------------------------------------------------------------------------------
ETHEREUM_4337_ENTRYPOINT = "0x0000000071727De22E5E9d8BAf0edAc6f37da032"
ETHEREUM_4337_CHAIN_ID = 1337
ETHEREUM_4337_DEFAULT_VERIFICATION_GAS_LIMIT = 150_000
ETHEREUM_4337_DEFAULT_PRE_VERIFICATION_GAS = 21_000
ETHEREUM_4337_DEFAULT_MAX_PRIORITY_FEE_PER_GAS = 10**9
ETHEREUM_4337_DEFAULT_PAYMASTER_VERIFICATION_GAS_LIMIT = 300_000

# Ganache #2 private key
ETHEREUM_TEST_PRIVATE_KEY = (
    "6370fd033278c143179d81c5526140625662b8daa446c22ee2d73db3707e620c"
)

LOGGING["loggers"] = {  # noqa F405
    "user_operation_service": {
        "level": "DEBUG",
    }
}
