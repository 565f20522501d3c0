"""Custom askdad exceptions."""


class AskDadError(Exception):
    """Base exception for askdad errors."""

    def __init__(
        self, message: str, original_error: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error


class ConfigurationError(AskDadError):
    """Exception raised when a required credential or setting is missing.

    This typically occurs when:
    - OPENAI_API_KEY is not set
    - ELEVENLABS_API_KEY or ELEVENLABS_VOICE_ID is not set

    Raised before any network call is attempted.
    """

    pass


class GenerationError(AskDadError):
    """Exception raised when the text generation API fails.

    This typically occurs when:
    - The API returns an error status (4xx/5xx)
    - The request times out
    - Network connectivity issues
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.status_code = status_code


class SpeechRelayError(AskDadError):
    """Exception raised when the speech stream cannot be established.

    status_code carries the vendor's HTTP status when the vendor answered,
    and is None when the request never got a response.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.status_code = status_code


class InputValidationError(AskDadError):
    """Exception raised for client input rejected before any vendor call."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code
