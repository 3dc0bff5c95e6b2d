class BullhornCliError(Exception):
    """Base class for every error the CLI reports to the user."""

    hint = None

    def __init__(self, message, hint=None):
        super().__init__(message)
        self.message = message
        if hint is not None:
            self.hint = hint


# Login handshake
class DiscoveryError(BullhornCliError):
    hint = "Check the username and Bullhorn status."


class AuthorizationError(BullhornCliError):
    hint = "Please check your username and password."


class TokenExchangeError(BullhornCliError):
    hint = "Please check your API keys."


class SessionFinalizeError(BullhornCliError):
    pass


# Session refresh
class RefreshPreconditionError(BullhornCliError):
    hint = "Refresh data is missing. Please run `bh auth login` again."


class RefreshFailedError(BullhornCliError):
    hint = "Your session has likely expired completely. Please run `bh auth login` to start a new session."


class UnauthenticatedError(BullhornCliError):
    hint = "Please run `bh auth login` to start a session."

    def __init__(self, message="You are not logged in.", hint=None):
        super().__init__(message, hint)


class ValidationError(BullhornCliError):
    pass


class ApiError(BullhornCliError):
    def __init__(self, message, status_code=None, server_message=None, hint=None):
        super().__init__(message, hint)
        self.status_code = status_code
        self.server_message = server_message

    def __str__(self):
        if self.status_code is None:
            return self.message
        detail = self.server_message or "No specific error message provided."
        return f"{self.message} Error {self.status_code}: {detail}"


def server_message(response):
    """Pull Bullhorn's error text out of a failed response, if there is any."""
    try:
        data = response.json()
    except ValueError:
        return response.text.strip() or None
    if not isinstance(data, dict):
        return None
    return data.get("errorMessage") or data.get("error_description") or data.get("error")
