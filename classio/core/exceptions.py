# classio/core/exceptions.py
"""
Ошибки уровня репозиториев.

Каждая операция либо возвращает типизированный результат, либо падает
одной из этих ошибок. HTTP-статус хранится в классе, обработчик в
classio.main превращает ошибку в ответ {"detail": ...}.
"""


class ClassioError(Exception):
    status_code = 500

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self):
        return f"{self.__class__.__name__}: {self.message}"


class AuthenticationRequired(ClassioError):
    status_code = 401

    def __init__(self, message: str = "Требуется авторизация", code: str | None = None):
        super().__init__(message, code)


class AccessDenied(ClassioError):
    # Один текст и для "нет такого", и для "чужое"
    status_code = 403

    def __init__(self, message: str = "Не найдено или доступ запрещён", code: str | None = None):
        super().__init__(message, code)


class NotFound(ClassioError):
    status_code = 404


class ValidationError(ClassioError):
    status_code = 400


class BackendError(ClassioError):
    status_code = 500

    def __init__(self, message: str, code: str | None = None, original_error: Exception | None = None):
        super().__init__(message, code)
        self.original_error = original_error
