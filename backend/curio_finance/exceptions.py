"""Exception types raised by Curio services."""

from typing import Optional


class CurioError(Exception):
    """Base class for all Curio errors."""


class LLMError(CurioError):
    """Base class for errors on the LLM insight/chat path."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class UnsupportedProvider(LLMError):
    """The requested provider name is not in the capability table."""


class CapabilityMismatch(LLMError):
    """The provider does not support the requested mode."""

    def __init__(self, provider: str, mode: str):
        super().__init__(f"Provider '{provider}' does not support {mode} mode", provider)
        self.mode = mode


class MissingCredential(LLMError):
    """A setting the provider needs (usually the API key) is absent."""


class ResponseParseError(LLMError):
    """Model output could not be coerced into the insight shape."""

    def __init__(self, message: str, provider: Optional[str] = None, raw: Optional[str] = None):
        super().__init__(message, provider)
        self.raw = raw


class ProviderTransportError(LLMError):
    """Network, authentication or rate-limit failure from the vendor."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        is_connection_error: bool = False,
        is_authentication_error: bool = False,
    ):
        super().__init__(message, provider)
        self.is_connection_error = is_connection_error
        self.is_authentication_error = is_authentication_error


class RecurringProcessingError(CurioError):
    """Realizing one recurring definition failed."""

    def __init__(self, kind: str, definition_id: str, cause: Exception):
        super().__init__(f"Failed to process recurring {kind} {definition_id}: {cause}")
        self.kind = kind
        self.definition_id = definition_id
        self.cause = cause
