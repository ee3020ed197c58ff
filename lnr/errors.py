"""Exception hierarchy: every failure the CLI reports to the user."""


class LnrError(Exception):
    """Base class. The message is shown to the user as-is."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TransportError(LnrError):
    """The request was not sent or no response came back."""


class ApiError(LnrError):
    """The API answered with a non-2xx status."""


class DecodeError(LnrError):
    """The response body did not have the shape expected for the operation."""


class NotFoundError(LnrError):
    """An expected zero-result case: branch, issue, organization, project, team."""


class ConfigError(LnrError):
    """The config file could not be created, read, parsed or written."""


class TemplateError(LnrError):
    """A template file could not be read, parsed or rendered."""


class InputError(LnrError):
    """A prompt was aborted or given an invalid answer."""


class GitError(LnrError):
    """The current git branch could not be determined."""
