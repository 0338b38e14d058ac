from farmconnect.messaging.bulk import send_bulk_sms
from farmconnect.messaging.pacing import PacedSender
from farmconnect.messaging.sms_gateway import SmsGateway, SmsSendResult, TwilioSmsGateway, build_sms_gateway

__all__ = [
    "PacedSender",
    "SmsGateway",
    "SmsSendResult",
    "TwilioSmsGateway",
    "build_sms_gateway",
    "send_bulk_sms",
]
