"""Ошибки сервиса и их HTTP-коды"""
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class ServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(ServiceError):
    """Нет сессии, сессия истекла или токен неизвестен"""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class NotFound(ServiceError):
    """Записи нет, либо вызывающему её видеть нельзя"""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ValidationError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class InternalError(ServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal error"


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Некорректное тело или параметры запроса - та же ValidationError"""
    errors = exc.errors()
    message = ValidationError.default_message
    if errors and errors[0].get("loc"):
        message = f"Invalid {errors[0]['loc'][-1]}"
    return await service_error_handler(request, ValidationError(message))
