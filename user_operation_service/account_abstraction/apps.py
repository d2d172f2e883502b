from django.apps import AppConfig


class AccountAbstractionConfig(AppConfig):
    name = "user_operation_service.account_abstraction"
    verbose_name = "Account Abstraction (ERC4337) UserOperation encoding and signing"
