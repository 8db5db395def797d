"""统一错误响应"""

from starlette.responses import JSONResponse


def unauthenticated_response() -> JSONResponse:
    """缺少 bearer token 时的 401 响应"""
    return JSONResponse(
        status_code=401,
        content={
            "error": {
                "code": "UNAUTHENTICATED",
                "message": "Missing or empty bearer token",
            }
        },
    )
