"""Domain error kinds shared by the repository, the services and the routes."""


class AppError(Exception):
    """Base class for every error the service reports to its callers."""

    code = "INTERNAL_ERROR"
    default_message = "internal error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class InvalidInputError(AppError):
    code = "INVALID_INPUT"
    default_message = "invalid input"


class NotFoundError(AppError):
    code = "NOT_FOUND"
    default_message = "resource not found"


class TeamExistsError(AppError):
    code = "TEAM_EXISTS"
    default_message = "team already exists"


class PRExistsError(AppError):
    code = "PR_EXISTS"
    default_message = "PR already exists"


class PRMergedError(AppError):
    code = "PR_MERGED"
    default_message = "cannot modify merged PR"


class NotAssignedError(AppError):
    code = "NOT_ASSIGNED"
    default_message = "reviewer not assigned to PR"


class NoCandidateError(AppError):
    code = "NO_CANDIDATE"
    default_message = "no active candidates in team"


class InternalError(AppError):
    pass
