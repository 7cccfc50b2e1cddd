"""
Standard API response helpers.

Provides consistent response formatting for success and error cases.

Example:
    from common.utils import success_response, error_response

    @app.get("/users/{id}")
    async def get_user(id: str):
        user = await users.find_one({"_id": ObjectId(id)})
        if not user:
            return JSONResponse(
                status_code=404,
                content=error_response("User not found", code="USER_NOT_FOUND")
            )
        return success_response(user, message="User retrieved")
"""

from typing import Any, Optional, Dict, TYPE_CHECKING

if TYPE_CHECKING:
    from common.database.list_query import ListResult


def success_response(
    data: Any = None,
    message: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a standard success response.

    Args:
        data: The response data (can be dict, list, or any serializable type)
        message: Optional success message

    Returns:
        Dictionary with success=True and optional data/message
    """
    response: Dict[str, Any] = {"success": True}

    if data is not None:
        response["data"] = data

    if message:
        response["message"] = message

    return response


def error_response(
    message: str,
    code: Optional[str] = None,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    """
    Create a standard error response.

    Args:
        message: Human-readable error message
        code: Machine-readable error code (e.g., "USER_NOT_FOUND")
        details: Additional error details (per-field errors for validation)

    Returns:
        Dictionary with success=False and error info
    """
    error: Dict[str, Any] = {"message": message}

    if code:
        error["code"] = code

    if details is not None:
        error["details"] = details

    return {"success": False, "error": error}


def paginated_response(
    result: "ListResult",
    message: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a paginated success response from a list-query result.

    Returns:
        Dictionary with success=True and data={items, pagination}
    """
    return success_response(result.to_dict(), message=message)
