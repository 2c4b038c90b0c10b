"""JSON encoding used by structured logging and event exports."""

from collections.abc import Mapping
from typing import Any

import msgspec

__all__ = ("decode_json", "encode_json")


def _enc_hook(value: Any) -> Any:
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    return str(value)


_encoder = msgspec.json.Encoder(enc_hook=_enc_hook)
_decoder = msgspec.json.Decoder()


def encode_json(data: Any) -> str:
    """Encode ``data`` as a JSON string.

    Values msgspec cannot serialise natively (exceptions, mapping proxies,
    arbitrary objects) are converted first; anything unknown falls back to ``str``.
    """
    return _encoder.encode(data).decode("utf-8")


def decode_json(data: "str | bytes") -> Any:
    return _decoder.decode(data)
