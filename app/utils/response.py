from typing import Any
from datetime import datetime, date
from bson import ObjectId
from fastapi.responses import JSONResponse


def serialize_value(value: Any) -> Any:
    """Recursively convert ObjectId and datetime values into JSON-friendly strings"""
    if isinstance(value, ObjectId):
        return str(value)
    elif isinstance(value, (datetime, date)):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    return value


def success_response(
    message: str = "Success",
    data: Any = None,
    status_code: int = 200
) -> JSONResponse:
    """
    Standard success response

    Args:
        message: Success message
        data: Response data (optional). A null result is sent as ``"data": null``
            so "not found" reads the same as an empty lookup.
        status_code: HTTP status code (default: 200)

    Returns:
        JSONResponse with success format
    """
    response = {
        "success": True,
        "message": message,
        "data": serialize_value(data)
    }

    return JSONResponse(content=response, status_code=status_code)


def error_response(
    message: str = "Error",
    status_code: int = 400,
    data: Any = None
) -> JSONResponse:
    """
    Standard error response

    Args:
        message: Error message
        status_code: HTTP status code (default: 400)
        data: Extra detail, e.g. a partial-progress report (optional)

    Returns:
        JSONResponse with error format
    """
    response = {
        "success": False,
        "message": message
    }

    if data is not None:
        response["data"] = serialize_value(data)

    return JSONResponse(content=response, status_code=status_code)
