class AppException(Exception):
    """应用程序异常基类"""

    def __init__(self, message: str, code: str = "APP_ERROR", status_code: int = 400):
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(self.message)


class BadRequestError(AppException):
    """请求参数缺失或不合法"""

    def __init__(self, message: str = "Bad request"):
        super().__init__(message, "BAD_REQUEST", 400)


class NotFoundError(AppException):
    """资源不存在错误"""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, "NOT_FOUND", 404)


class TokenNotFoundError(AppException):
    """令牌不存在

    验证令牌返回 404，重置令牌沿用 400。
    """

    def __init__(self, message: str = "Invalid token", status_code: int = 404):
        super().__init__(message, "TOKEN_NOT_FOUND", status_code)


class TokenExpiredError(AppException):
    def __init__(self, message: str = "Token has expired"):
        super().__init__(message, "TOKEN_EXPIRED", 400)


class AlreadyVerifiedError(AppException):
    def __init__(self, message: str = "Email has already verified"):
        super().__init__(message, "ALREADY_VERIFIED", 400)


class ServerConfigError(AppException):
    """服务端配置缺失（如 Firebase Admin 未初始化）"""

    def __init__(self, message: str = "Server configuration error"):
        super().__init__(message, "SERVER_CONFIG_ERROR", 500)


class EmailDeliveryError(AppException):
    """SMTP 发送失败"""

    def __init__(self, message: str = "Failed to send email"):
        super().__init__(message, "EMAIL_DELIVERY_ERROR", 500)
