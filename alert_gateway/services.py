import json
import time
from typing import Callable, Optional

import requests
import urllib3
from pydantic import BaseModel, StrictBool, TypeAdapter, ValidationError

from .constants import MAX_RESPONSE_BODY_BYTES, RESPONSE_CHUNK_BYTES, SEND_TIMEOUT_SECONDS
from .errors import ConfigError, InvalidResponse, RemoteNack, RemoteRejected, TransportError

# Recebe (status_line, body) da resposta do Synology; usado pelo handler para log em modo debug
ResponseCallback = Callable[[str, str], None]


class SynologyError(BaseModel):
    code: Optional[int] = None
    errors: Optional[str] = None
    message: Optional[str] = None


class SynologyResponse(BaseModel):
    success: StrictBool = False
    error: Optional[SynologyError] = None


# JSON null na resposta equivale a {} (success=false, sem detalhes)
_RESPONSE_ADAPTER = TypeAdapter(Optional[SynologyResponse])


class SynologyChatSender:
    """
    Envia mensagens de texto para um Incoming Webhook do Synology Chat.

    O texto vai como application/x-www-form-urlencoded em um único campo
    `payload` contendo o JSON {"text": "..."}.
    """

    def __init__(self, webhook_url: str, insecure_skip_verify: bool = False, timeout: float = SEND_TIMEOUT_SECONDS):
        self.webhook_url = webhook_url
        self.insecure_skip_verify = insecure_skip_verify
        self.timeout = timeout
        if insecure_skip_verify:
            # Apenas silencia o aviso; a validação TLS é desligada somente nas requisições deste sender
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    @property
    def configured(self) -> bool:
        return bool((self.webhook_url or "").strip())

    def send_text(self, text: str, on_response: Optional[ResponseCallback] = None) -> None:
        """
        Envia `text` ao Synology Chat. Retorna None em caso de sucesso.

        Levanta:
          - ConfigError: URL do webhook vazia
          - TransportError: falha de rede/DNS/TLS/timeout
          - RemoteRejected: status HTTP fora de 2xx
          - InvalidResponse: resposta não é JSON no formato esperado
          - RemoteNack: Synology respondeu success=false
        """
        if not self.configured:
            raise ConfigError()

        # Prazo total da troca (conexão + leitura do corpo), não só entre leituras
        deadline = time.monotonic() + self.timeout
        form = {"payload": json.dumps({"text": text}, ensure_ascii=False)}

        try:
            resp = requests.post(
                self.webhook_url,
                data=form,
                timeout=self.timeout,
                verify=not self.insecure_skip_verify,
                stream=True,
            )
        except requests.RequestException as exc:
            raise TransportError(exc) from exc

        try:
            raw = self._read_body(resp, deadline)
        except (requests.RequestException, urllib3.exceptions.HTTPError) as exc:
            raise TransportError(exc) from exc
        finally:
            resp.close()

        body = raw.decode("utf-8", errors="replace").strip()
        status_line = f"{resp.status_code} {resp.reason or ''}".strip()

        if on_response is not None:
            on_response(status_line, body)

        if not 200 <= resp.status_code < 300:
            raise RemoteRejected(resp.status_code, status_line, body)

        try:
            result = _RESPONSE_ADAPTER.validate_json(raw)
        except ValidationError as exc:
            raise InvalidResponse(body) from exc

        if result is None:
            raise RemoteNack()
        if not result.success:
            if result.error is None:
                raise RemoteNack()
            raise RemoteNack(result.error.code, result.error.errors or result.error.message)

    def _read_body(self, resp: requests.Response, deadline: float) -> bytes:
        # Lê no máximo 1 MiB da resposta; corpos maiores são truncados
        chunks = []
        size = 0
        for chunk in resp.iter_content(chunk_size=RESPONSE_CHUNK_BYTES):
            chunks.append(chunk)
            size += len(chunk)
            if size >= MAX_RESPONSE_BODY_BYTES:
                break
            if time.monotonic() > deadline:
                raise requests.Timeout(f"response body not read within {self.timeout}s")
        return b"".join(chunks)[:MAX_RESPONSE_BODY_BYTES]
