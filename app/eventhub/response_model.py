from typing import Any, Callable, Optional
from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from eventhub.result import ErrorType, Result

STATUS_BY_ERROR = {
    ErrorType.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorType.RECORD_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorType.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorType.FORBIDDEN: status.HTTP_403_FORBIDDEN,
}


def ResponseModel(data, message):
    return {
        "data": data,
        "code": 200,
        "message": message,
    }


def ErrorResponseModel(error, code, message):
    return {"error": error, "code": code, "message": message}


def status_for(error_type: Optional[ErrorType]) -> int:
    return STATUS_BY_ERROR.get(error_type, status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_response(result: Result) -> JSONResponse:
    code = status_for(result.error_type)
    return JSONResponse(
        status_code=code,
        content=ErrorResponseModel(result.error_type.value, code, result.message),
    )


def result_to_response(
    result: Result,
    message: str = "Success",
    status_code: int = status.HTTP_200_OK,
    serializer: Optional[Callable[[Any], Any]] = None,
) -> JSONResponse:
    if result.is_failure:
        return error_response(result)
    data = serializer(result.value) if serializer else result.value
    body = ResponseModel(jsonable_encoder(data), message)
    body["code"] = status_code
    return JSONResponse(status_code=status_code, content=body)
