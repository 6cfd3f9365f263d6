"""WhatsApp verification use cases."""

from .get_status import GetWhatsAppStatusUseCase
from .send_otp import SendOtpUseCase
from .verify_otp import VerifyOtpUseCase

__all__ = ["GetWhatsAppStatusUseCase", "SendOtpUseCase", "VerifyOtpUseCase"]
