"""Fast JSON encoding and decoding (orjson out, msgspec in)."""

from typing import Any

import msgspec
import orjson


class JSONParseError(Exception):
    """JSON parsing failed."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


_decoder = msgspec.json.Decoder()


def loads_json(text: str | bytes) -> Any:
    """
    Decode JSON text.

    Args:
        text: JSON document (str or UTF-8 bytes)

    Returns:
        Decoded Python value

    Raises:
        JSONParseError: If the document is not valid JSON
    """
    data = text.encode("utf-8") if isinstance(text, str) else text
    try:
        return _decoder.decode(data)
    except msgspec.DecodeError as e:
        raise JSONParseError(f"Invalid JSON: {e}", e) from e


def dumps_json(obj: Any) -> str:
    """Encode object to a compact JSON string."""
    return orjson.dumps(obj).decode("utf-8")
