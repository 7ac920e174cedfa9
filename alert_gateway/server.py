import argparse
import logging
import sys
from typing import Optional, Sequence

from .config import build_sender, load_config
from .constants import CONFIG_FILE, DEBUG_MODE
from .controller import create_app
from .errors import ConfigFileError
from .logger import configure_logging
from .utils import mask_webhook_url, parse_listen_addr

logger = logging.getLogger(__name__)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Alertmanager -> Synology Chat webhook gateway")
    parser.add_argument("--config", default=CONFIG_FILE, help="config file path (YAML)")
    args = parser.parse_args(argv)

    # Até ler o arquivo, usa o DEBUG_MODE do ambiente
    configure_logging(DEBUG_MODE)
    try:
        config = load_config(args.config)
    except ConfigFileError as exc:
        logger.error(str(exc))
        return 1
    configure_logging(config.debug)

    chat = config.synology_chat
    sender = build_sender(config)
    if config.debug:
        if sender is not None:
            logger.info(f"synology webhook url={mask_webhook_url(chat.webhook_url)}")
        else:
            logger.info(f"synology disabled or webhook_url empty (enabled={chat.enabled})")

    app = create_app(config, sender=sender)
    try:
        host, port = parse_listen_addr(config.server.listen_addr)
    except ValueError as exc:
        logger.error(str(exc))
        return 1

    logger.info(
        f"listening on {config.server.listen_addr} (path={config.server.webhook_path}) "
        f"debug={config.debug} config={args.config or '(env)'}"
    )
    # threaded=True: uma thread por requisição; use_reloader=False evita processo duplicado em debug.
    # Falha de bind encerra o processo dentro do próprio werkzeug (sys.exit(1)).
    app.run(host=host, port=port, debug=False, threaded=True, use_reloader=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
