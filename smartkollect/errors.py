"""Error taxonomy for allocation requests.

Every error carries the HTTP status and the message the admin UI shows
verbatim, so the API layer only has to render them.
"""


class AllocationError(Exception):
    status_code = 500
    default_message = "An unexpected error occurred"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AllocationError):
    status_code = 400
    default_message = "Invalid request"


class AgentNotFound(AllocationError):
    status_code = 404
    default_message = "Agent not found"


class AccountNotFound(AllocationError):
    status_code = 404
    default_message = "Account not found"


class NoAccountsMatched(AllocationError):
    status_code = 404
    default_message = "No matching accounts found. Please check the account numbers and try again."


class DataUnavailable(AllocationError):
    status_code = 500
    default_message = "Error fetching accounts"


class PartialWriteFailure(AllocationError):
    status_code = 500
    default_message = "Failed to allocate accounts"


class ConfigurationError(AllocationError):
    status_code = 500
    default_message = "Server configuration error"


class AllocationNotFound(AllocationError):
    status_code = 404
    default_message = "No active allocation found for this account and agent"


class InteractionWriteFailure(AllocationError):
    status_code = 500
    default_message = "Failed to record interaction"
