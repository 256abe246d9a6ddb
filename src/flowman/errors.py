"""Exception hierarchy for flowman."""


class FlowmanError(Exception):
    """Base exception for flowman errors."""

    pass


class ValidationError(FlowmanError, ValueError):
    """Malformed input (API key, workspace ID, variable name, value)."""

    pass


class StorageError(FlowmanError):
    """Shell config file could not be read or written."""

    pass


class RemoteValidationError(FlowmanError):
    """Credentials were rejected by, or could not be checked against, the Postman API."""

    pass


class AuthenticationRequiredError(FlowmanError):
    """A command needs a stored API key and none was found."""

    pass
