from typing import BinaryIO, Tuple
from urllib.parse import urlsplit, parse_qs, urlencode


def mask_webhook_url(url: str) -> str:
    """Mascara o parâmetro `token` da URL do webhook para não vazar em log."""
    try:
        parts = urlsplit((url or "").strip())
        query = parse_qs(parts.query, keep_blank_values=True)
    except ValueError:
        return "(invalid url)"

    token = (query.get("token") or [""])[0]
    if token:
        query["token"] = [token[:4] + "***"]
        return parts._replace(query=urlencode(query, doseq=True)).geturl()

    masked = parts.geturl()
    if len(masked) > 120:
        return masked[:120] + "..."
    return masked


def parse_listen_addr(addr: str, default_port: int = 8080) -> Tuple[str, int]:
    """Converte `host:port` (ou `:port`) em tupla para o app.run do Flask."""
    addr = (addr or "").strip()
    if not addr:
        return "0.0.0.0", default_port
    host, sep, port = addr.rpartition(":")
    if not sep:
        return addr, default_port
    host = host.strip("[]") or "0.0.0.0"
    try:
        return host, int(port)
    except ValueError as exc:
        raise ValueError(f"invalid listen address: {addr!r}") from exc


def read_limited(stream: BinaryIO, limit: int, chunk_size: int = 64 * 1024) -> bytes:
    """Lê no máximo `limit` bytes do stream; o excedente é descartado (truncado)."""
    chunks = []
    remaining = limit
    while remaining > 0:
        chunk = stream.read(min(chunk_size, remaining))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)
