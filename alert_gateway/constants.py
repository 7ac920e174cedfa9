import os

# Arquivo YAML opcional (sobrescreve as variáveis abaixo)
CONFIG_FILE = os.getenv("CONFIG_FILE", "")

# Servidor HTTP
LISTEN_ADDR = os.getenv("LISTEN_ADDR", ":8080")
WEBHOOK_PATH = os.getenv("WEBHOOK_PATH", "/webhook")
HEALTH_PATH = "/healthz"

# Integração com Synology Chat
SYNOLOGY_CHAT_ENABLED = os.getenv("SYNOLOGY_CHAT_ENABLED", "false").lower() == "true"
SYNOLOGY_WEBHOOK_URL = os.getenv("SYNOLOGY_WEBHOOK_URL", "")
SYNOLOGY_INSECURE_SKIP_VERIFY = os.getenv("SYNOLOGY_INSECURE_SKIP_VERIFY", "false").lower() == "true"

DEBUG_MODE = os.getenv("DEBUG_MODE", "False").lower() == "true"

# Limites
SEND_TIMEOUT_SECONDS = 10
MAX_REQUEST_BODY_BYTES = 10 << 20  # 10 MiB
MAX_RESPONSE_BODY_BYTES = 1 << 20  # 1 MiB
RESPONSE_CHUNK_BYTES = 64 * 1024

# Textos fixos da mensagem
NO_ALERTS_TEXT = "[Alertmanager] (no alerts in payload)"
NO_ALERTNAME_TEXT = "(no alertname)"
NO_DESCRIPTION_TEXT = "(no description/message/summary)"

# Ordem de prioridade das annotations usadas como corpo da mensagem
TEXT_ANNOTATION_PRIORITY = ("description", "message", "summary")
