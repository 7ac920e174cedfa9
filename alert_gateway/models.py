"""Modelos pydantic do payload de webhook do Alertmanager (versão 4)."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, field_validator

from .constants import NO_ALERTNAME_TEXT
from .errors import PayloadError


class _Payload(BaseModel):
    # Imutável após o parse; campos desconhecidos são ignorados.
    # populate_by_name vale só para construção em código; o JSON é lido apenas pelos aliases.
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_zero(cls, value: Any, info) -> Any:
        # JSON null equivale ao valor zero (mapa vazio, lista vazia, "" ou 0),
        # inclusive dentro de mapas (valor "") e da lista de alertas (alerta vazio)
        if value is None:
            field = cls.model_fields[info.field_name]
            if field.default_factory is not None:
                return field.default_factory()
            return field.default
        if isinstance(value, dict):
            return {key: "" if item is None else item for key, item in value.items()}
        if isinstance(value, list):
            return [{} if item is None else item for item in value]
        return value


class Alert(_Payload):
    """Alerta individual dentro de um grupo."""

    status: str = ""
    labels: Dict[str, str] = Field(default_factory=dict)
    annotations: Dict[str, str] = Field(default_factory=dict)
    starts_at: Optional[datetime] = Field(default=None, alias="startsAt")
    ends_at: Optional[datetime] = Field(default=None, alias="endsAt")
    generator_url: str = Field(default="", alias="generatorURL")
    fingerprint: str = ""

    def alert_name(self) -> str:
        return self.labels.get("alertname") or NO_ALERTNAME_TEXT


class AlertGroup(_Payload):
    """Uma entrega de webhook do Alertmanager com zero ou mais alertas."""

    receiver: str = ""
    status: str = ""
    alerts: List[Alert] = Field(default_factory=list)
    group_labels: Dict[str, str] = Field(default_factory=dict, alias="groupLabels")
    common_labels: Dict[str, str] = Field(default_factory=dict, alias="commonLabels")
    common_annotations: Dict[str, str] = Field(default_factory=dict, alias="commonAnnotations")
    external_url: str = Field(default="", alias="externalURL")
    version: str = ""
    group_key: str = Field(default="", alias="groupKey")
    truncated_alerts: StrictInt = Field(default=0, alias="truncatedAlerts")


def decode_alert_group(body: bytes) -> AlertGroup:
    """
    Converte o corpo bruto da requisição em AlertGroup.
    Qualquer JSON malformado ou fora do formato esperado vira PayloadError.
    """
    try:
        return AlertGroup.model_validate_json(body, by_alias=True, by_name=False)
    except ValidationError as exc:
        raise PayloadError(f"invalid alertmanager payload: {exc.error_count()} error(s): {exc}") from exc
