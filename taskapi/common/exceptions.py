from enum import Enum
import logging
from typing import Any
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from sqlalchemy.exc import OperationalError

logger = logging.getLogger(__name__)


class ResourceType(str, Enum):
    TASK = "Task"


# Exceptions
class ResourceNotFoundException(Exception):
    code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource_type: ResourceType, identifier: str):
        self.resource_type = resource_type.value
        self.identifier = identifier
        super().__init__(f"{self.resource_type} '{identifier}' not found")


class KnownException(Exception):
    """A rejected request whose message is safe to show to the client."""

    code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationException(KnownException):
    """Malformed or disallowed input."""

    code = status.HTTP_400_BAD_REQUEST


class BusinessRuleException(KnownException):
    """Structurally valid input rejected by domain policy."""

    code = status.HTTP_409_CONFLICT


# Exception handlers
def resource_not_found_handler(request: Request, exc: ResourceNotFoundException):
    logger.error(exc)
    return JSONResponse(
        status_code=exc.code,
        content={"code": exc.code, "detail": str(exc)},
    )


def known_exception_handler(request: Request, exc: KnownException):
    logger.error(exc)
    return JSONResponse(
        status_code=exc.code,
        content={"code": exc.code, "detail": str(exc)},
    )


def unexpected_exception_handler(request: Request, exc: Exception):
    logger.error(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred"},
    )


def redis_exception_handler(request: Request, exc: RedisError):
    logger.error(f"Redis operation failed: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Service unavailable"},
    )


def database_exception_handler(request: Request, exc: OperationalError):
    logger.error(f"Database operation failed: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Service unavailable"},
    )


def validation_exception_handler(request: Request, exc: RequestValidationError):
    def loc_to_dot_sep(loc: tuple[Any, ...]) -> str:
        """Convert a tuple of location parts to a dot-separated string"""
        path = ""
        for i, x in enumerate(loc):
            if isinstance(x, str):
                if i > 0:
                    path += "."
                path += x
            elif isinstance(x, int):
                path += f"[{x}]"
            else:
                raise TypeError("Unexpected type")
        return path

    def process_error(error: dict[str, Any]) -> dict[str, Any]:
        processed = {k: v for k, v in error.items() if k != "ctx"}
        processed["loc"] = loc_to_dot_sep(error["loc"])
        return processed

    errors = [process_error(error) for error in exc.errors()]

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": "Validation error", "errors": errors},
    )


# Response definitions for OpenAPI documentation
ResponseDict = dict[int | str, dict[str, Any]]


def resource_not_found_response(
    resource_type: ResourceType,
) -> ResponseDict:
    return {
        404: {
            "description": f"{resource_type.value} not found",
            "content": {
                "application/json": {
                    "example": {
                        "code": 404,
                        "detail": f"{resource_type.value} 'example' not found",
                    }
                }
            },
        }
    }


bad_request_response: ResponseDict = {
    400: {
        "description": "Invalid input",
        "content": {
            "application/json": {
                "example": {"code": 400, "detail": "no fields to update"}
            }
        },
    }
}

business_rule_response: ResponseDict = {
    409: {
        "description": "Rejected by a business rule",
        "content": {
            "application/json": {
                "example": {"code": 409, "detail": "completed tasks cannot be edited"}
            }
        },
    }
}

service_unavailable_response: ResponseDict = {
    503: {
        "description": "Service unavailable",
        "content": {"application/json": {"example": {"detail": "Service unavailable"}}},
    }
}

internal_error_response: ResponseDict = {
    500: {
        "description": "Internal server error",
        "content": {
            "application/json": {"example": {"detail": "An unexpected error occurred"}}
        },
    }
}

validation_error_response: ResponseDict = {
    422: {
        "description": "Validation error",
        "content": {
            "application/json": {
                "example": {
                    "detail": "Validation error",
                    "errors": [
                        {
                            "type": "type",
                            "loc": "field.sub_field",
                            "msg": "error message",
                            "input": "input value",
                        }
                    ],
                }
            }
        },
    }
}
