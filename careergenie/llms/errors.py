# =============================================================================
# careergenie/llms/errors.py — Provider failure taxonomy
# =============================================================================
# Every per-provider failure is a ProviderError; the gateway treats all of them
# as "try the next provider". AllProvidersFailedError ends a generate() call.
# =============================================================================


class ProviderError(Exception):
    """A single provider could not produce text."""


class ProviderNotConfiguredError(ProviderError):
    """Credential (or enable flag) for the provider is absent."""


class ProviderRemoteError(ProviderError):
    """Non-success status, timeout or transport failure."""


class ProviderResponseError(ProviderError):
    """Remote call succeeded but no text could be extracted."""


class AllProvidersFailedError(Exception):
    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("\n".join(self.errors))
