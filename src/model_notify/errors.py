"""Base exceptions for model-notify."""


class ModelNotifyError(Exception):
    """Base exception for all model-notify errors."""

    pass


class DeliveryError(ModelNotifyError):
    """Outbound notification was rejected by the messaging API."""

    def __init__(self, status: int, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(f"Delivery failed with status {status}")
