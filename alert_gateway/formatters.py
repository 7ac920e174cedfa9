from .constants import NO_ALERTS_TEXT, NO_DESCRIPTION_TEXT, TEXT_ANNOTATION_PRIORITY
from .models import Alert, AlertGroup


def one_line(text: str) -> str:
    """Deixa o texto em uma única linha para renderizar bem no chat."""
    return text.replace("\n", " ").replace("\r", " ").strip()


def pick_alert_text(alert: Alert) -> str:
    # Prioridade: description > message > summary
    for key in TEXT_ANNOTATION_PRIORITY:
        text = alert.annotations.get(key, "").strip()
        if text:
            return text
    return NO_DESCRIPTION_TEXT


def format_alert_line(alert: Alert) -> str:
    return f"[{alert.alert_name()}] {one_line(pick_alert_text(alert))}"


def format_synology_text(group: AlertGroup) -> str:
    """
    Monta o texto final enviado ao Incoming Webhook do Synology Chat.
    Uma linha por alerta no formato `[alertname] texto`, na ordem recebida.
    Sem alertas, retorna a mensagem fixa de fallback.
    """
    lines = [format_alert_line(alert) for alert in group.alerts]
    if not lines:
        return NO_ALERTS_TEXT
    return "\n".join(lines)
