class AppStatusCode:
    """Application level status codes returned inside the JSON envelope."""

    DATA_RETRIEVED_SUCCESSFULLY = "100"
    OPERATION_SUCCESSFUL = "101"

    OPERATION_FAILED = "200"
    OPERATION_ERROR = "201"
    INVALID_INPUT = "202"
    REQUIRED_VALIDATION_ERROR = "203"
    DUPLICATE_ADD_ERROR = "204"
    RECORD_NOT_FOUND = "205"
    INVALID_STATUS_TRANSITION = "206"
    INSUFFICIENT_STOCK = "207"

    UNAUTHORIZED_ACTION = "300"

    AUTHENTICATION_TOKEN_INVALID = "400"
    AUTHENTICATION_TOKEN_EXPIRED = "401"
    AUTHENTICATION_USER_INVALID = "402"
    AUTHENTICATION_USER_INACTIVE = "403"
    AUTHENTICATION_CREDENTIALS_INVALID = "404"
