from app.models.alert import Notification, UserAlert
from app.models.device import Device
from app.models.operator import Operator
from app.models.valid_code import ValidCode

__all__ = [
    "Operator",
    "ValidCode",
    "Device",
    "UserAlert",
    "Notification",
]
