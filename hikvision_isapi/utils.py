from functools import reduce
from typing import Any


def str_to_bool(value: str | bool | None) -> bool:
    """Convert ISAPI text flag to boolean."""
    if isinstance(value, bool):
        return value
    if value:
        return value.strip().lower() in ("true", "1")
    return False


def bool_to_str(value: bool) -> str:
    """Convert boolean to 'true' or 'false'."""
    return "true" if value else "false"


def as_list(value: Any) -> list:
    """Wrap a single XML node into a list, XML has no notion of one-item arrays."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def deep_get(dictionary: dict, path: str, default: Any = None) -> Any:
    """Get safely nested dictionary attribute."""
    result = reduce(
        lambda d, key: d.get(key, default) if isinstance(d, dict) else default,
        path.split("."),
        dictionary,
    )
    if default == []:
        return as_list(result)

    return result
