"""Typed failures raised by the XAI client."""

from typing import Optional


class XAIError(Exception):
    """Base class for all XAI client failures."""


class XAIAPIError(XAIError):
    """The XAI API answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"XAI API error ({status_code}): {body}")


class XAIResponseParseError(XAIError):
    """The XAI API answered 2xx but the payload could not be interpreted."""


class NoMessageContentError(XAIResponseParseError):
    """No output item of type "message" was present."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "No message content in XAI response")


class NoTextContentError(XAIResponseParseError):
    """The message output carried no "output_text" item."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "No text content in XAI response")


class XAIStreamError(XAIError):
    """A streaming response could not be consumed."""
