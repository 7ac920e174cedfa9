from typing import Optional


class GatewayError(Exception):
    """Erro base do gateway."""


class ClientError(GatewayError):
    """Requisição inválida vinda do Alertmanager (responde 4xx)."""


class PayloadError(ClientError):
    """Corpo da requisição não é um JSON de webhook válido."""


class ConfigFileError(GatewayError):
    """Arquivo de configuração ilegível ou inválido."""


class SendError(GatewayError):
    """Falha no envio para o Synology Chat. Apenas logada, nunca repassada ao Alertmanager."""


class ConfigError(SendError):
    def __init__(self, message: str = "synology webhook url is empty"):
        super().__init__(message)


class TransportError(SendError):
    def __init__(self, cause: BaseException):
        super().__init__(f"synology request failed: {cause}")
        self.cause = cause


class RemoteRejected(SendError):
    def __init__(self, status: int, status_line: str, body: str):
        super().__init__(f"synology non-2xx: {status_line} body={body}")
        self.status = status
        self.status_line = status_line
        self.body = body


class InvalidResponse(SendError):
    def __init__(self, body: str):
        super().__init__(f"synology response not json: {body}")
        self.body = body


class RemoteNack(SendError):
    def __init__(self, code: Optional[int] = None, errors: Optional[str] = None):
        if code is None and errors is None:
            message = "synology success=false (no error details)"
        else:
            message = f"synology success=false code={code} errors={errors}"
        super().__init__(message)
        self.code = code
        self.errors = errors
