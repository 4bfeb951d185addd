"""snake_case <-> camelCase key conversion for persisted vs. wire shapes."""
import re
from typing import Any

_SNAKE_SEGMENT = re.compile(r"_([a-z0-9])")
_UPPER = re.compile(r"[A-Z]")


def snake_to_camel_key(key: str) -> str:
    return _SNAKE_SEGMENT.sub(lambda m: m.group(1).upper(), key)


def camel_to_snake_key(key: str) -> str:
    return _UPPER.sub(lambda m: "_" + m.group(0).lower(), key)


def to_camel(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {snake_to_camel_key(k) if isinstance(k, str) else k: to_camel(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_camel(v) for v in obj]
    return obj


def to_snake(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {camel_to_snake_key(k) if isinstance(k, str) else k: to_snake(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_snake(v) for v in obj]
    return obj
