import json
import logging
from typing import Optional

from flask import Flask, request

from .config import Config
from .constants import HEALTH_PATH, MAX_REQUEST_BODY_BYTES
from .errors import PayloadError, SendError
from .formatters import format_synology_text
from .models import AlertGroup, decode_alert_group
from .services import SynologyChatSender
from .utils import read_limited

logger = logging.getLogger(__name__)

OK_BODY = "ok\n"


def _dump_request(body: bytes) -> None:
    lines = [f"{request.method} {request.full_path.rstrip('?')} {request.environ.get('SERVER_PROTOCOL', 'HTTP/1.1')}"]
    lines.extend(f"{name}: {value}" for name, value in request.headers.items())
    lines.append("")
    lines.append(body.decode("utf-8", errors="replace"))
    logger.info("=========== INCOMING REQUEST START ===========")
    logger.info("\n".join(lines))
    logger.info("=========== INCOMING REQUEST END =============")

    try:
        pretty = json.dumps(json.loads(body), indent=2, ensure_ascii=False)
    except ValueError:
        return
    logger.info("=========== JSON PRETTY START ================")
    logger.info(pretty)
    logger.info("=========== JSON PRETTY END ==================")


def create_app(config: Config, sender: Optional[SynologyChatSender] = None) -> Flask:
    """
    Cria o Flask app com o endpoint de webhook e o health check.

    `sender` é opcional: None (ou URL vazia) desabilita o envio ao Synology Chat,
    mas o webhook continua respondendo 200 para payloads válidos.
    """
    app = Flask(__name__)
    debug = config.debug

    def log_synology_response(status_line: str, body: str) -> None:
        logger.info(f"synology response status={status_line}")
        if body:
            logger.info(f"synology response body={body}")

    def relay(group: AlertGroup) -> None:
        text = format_synology_text(group)

        if debug:
            logger.info("=========== SYNOLOGY TEXT START ==============")
            logger.info(text)
            logger.info("=========== SYNOLOGY TEXT END ================")

        if sender is None or not sender.configured:
            if debug:
                logger.info("synology sender not configured (disabled or empty webhook_url)")
            return

        try:
            sender.send_text(text, on_response=log_synology_response if debug else None)
        except SendError as exc:
            logger.error(f"synology send failed: {exc}")
        else:
            logger.info("synology chat sent OK")

    @app.route(HEALTH_PATH, methods=['GET'])
    def healthz():
        return OK_BODY, 200

    # provide_automatic_options=False: qualquer método além de POST recebe 405
    @app.route(config.server.webhook_path, methods=['POST'], provide_automatic_options=False)
    def webhook():
        try:
            # Limita a 10 MiB; o excedente é truncado (e normalmente falha no parse)
            body = read_limited(request.stream, MAX_REQUEST_BODY_BYTES)
        except Exception as exc:
            logger.error(f"failed to read body: {exc}")
            return "failed to read body\n", 400

        if debug:
            _dump_request(body)

        try:
            group = decode_alert_group(body)
        except PayloadError as exc:
            logger.error(f"json unmarshal failed: {exc}")
            return "invalid JSON\n", 400

        logger.info(
            f"alertmanager webhook received status={group.status} receiver={group.receiver} "
            f"alerts={len(group.alerts)} truncated={group.truncated_alerts}"
        )

        # Sempre 200 após o parse, mesmo se o envio falhar, para evitar retry storm do Alertmanager
        try:
            relay(group)
        except Exception:
            logger.exception("unexpected error while relaying alert to synology chat")
        return OK_BODY, 200

    return app
