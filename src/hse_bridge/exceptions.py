from typing import Any


class BridgeError(Exception):
    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(BridgeError):
    status_code = 400


class RecordNotFoundError(BridgeError):
    status_code = 404


class VendorApiError(BridgeError):
    def __init__(self, status_code: int, body: Any):
        super().__init__(f"ServiceNow API error: {status_code} - {body}", status_code=status_code)
        self.body = body


class SummarizationApiError(BridgeError):
    status_code = 500

    def __init__(self, upstream_status: int, body: Any):
        super().__init__(f"OpenAI API error: {upstream_status} - {body}")
        self.upstream_status = upstream_status
        self.body = body


class MalformedModelOutputError(BridgeError):
    status_code = 500

    def __init__(self, reason: str):
        super().__init__(f"Failed to parse OpenAI response as JSON: {reason}")
        self.reason = reason
