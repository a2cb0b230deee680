"""
Error types raised by the contact pipeline.

Every error carries the HTTP status code and the message shown to the caller.
Diagnostic details (webhook status codes, transport errors) are logged and
never placed in these messages.
"""

GENERIC_ERROR_MESSAGE = "サーバーエラーが発生しました"


class ContactError(Exception):
    """Base class for errors that map directly to an HTTP error response"""

    status_code = 500
    public_message = GENERIC_ERROR_MESSAGE

    def __init__(self, detail: str = None):
        super().__init__(detail or self.public_message)
        self.detail = detail


class SubmissionValidationError(ContactError):
    """A required contact field is missing, empty or not a string"""

    status_code = 400
    public_message = "全ての項目を入力してください"


class BodyParseError(ContactError):
    """The request body is not valid UTF-8 JSON"""

    status_code = 500


class PayloadTooLargeError(ContactError):
    status_code = 413
    public_message = "リクエストが大きすぎます"


class WebhookRejectedError(ContactError):
    """Slack answered the notification with a non-200 status"""

    public_message = "Slack通知の送信に失敗しました"


class WebhookTransportError(ContactError):
    """The Slack webhook could not be reached"""
