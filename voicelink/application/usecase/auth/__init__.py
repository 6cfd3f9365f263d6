"""Authentication use cases."""

from .get_current_account import GetCurrentAccountUseCase
from .initiate_login import InitiateLoginUseCase
from .login import LoginUseCase
from .redeem_session import RedeemSessionUseCase

__all__ = [
    "GetCurrentAccountUseCase",
    "InitiateLoginUseCase",
    "LoginUseCase",
    "RedeemSessionUseCase",
]
