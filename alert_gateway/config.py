"""
Configuração do gateway.

Os valores padrão vêm das variáveis de ambiente (ver constants.py). Se um
arquivo YAML for informado, ele sobrescreve esses valores:

    server:
      listen_addr: ":8080"
      webhook_path: "/webhook"
    synology_chat:
      enabled: true
      webhook_url: "https://nas.local/webapi/entry.cgi?...&token=..."
      insecure_skip_verify: false
    debug: false
"""
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .constants import (
    DEBUG_MODE,
    LISTEN_ADDR,
    SYNOLOGY_CHAT_ENABLED,
    SYNOLOGY_INSECURE_SKIP_VERIFY,
    SYNOLOGY_WEBHOOK_URL,
    WEBHOOK_PATH,
)
from .errors import ConfigFileError
from .services import SynologyChatSender


class ServerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    listen_addr: str = LISTEN_ADDR
    webhook_path: str = WEBHOOK_PATH

    @field_validator("listen_addr", mode="before")
    @classmethod
    def _default_listen_addr(cls, value):
        return value or LISTEN_ADDR

    @field_validator("webhook_path", mode="before")
    @classmethod
    def _default_webhook_path(cls, value):
        return value or WEBHOOK_PATH


class SynologyChatConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = SYNOLOGY_CHAT_ENABLED
    webhook_url: str = SYNOLOGY_WEBHOOK_URL
    insecure_skip_verify: bool = SYNOLOGY_INSECURE_SKIP_VERIFY


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    server: ServerConfig = ServerConfig()
    synology_chat: SynologyChatConfig = SynologyChatConfig()
    debug: bool = DEBUG_MODE


def load_config(path: Optional[str] = None) -> Config:
    if not path:
        return Config()

    try:
        with open(path, "r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigFileError(f"load config failed: {exc}") from exc

    # Arquivo vazio = apenas defaults
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigFileError(f"load config failed: {path} must contain a mapping")

    # Seções vazias no YAML (`server:`) viram None
    data = {key: ({} if value is None and key != "debug" else value) for key, value in data.items()}
    try:
        return Config.model_validate(data)
    except ValidationError as exc:
        raise ConfigFileError(f"load config failed: {exc}") from exc


def build_sender(config: Config) -> Optional[SynologyChatSender]:
    """Cria o sender apenas se a integração estiver habilitada e com URL preenchida."""
    chat = config.synology_chat
    if not chat.enabled or not chat.webhook_url.strip():
        return None
    return SynologyChatSender(chat.webhook_url, insecure_skip_verify=chat.insecure_skip_verify)
