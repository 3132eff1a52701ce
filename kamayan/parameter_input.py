"""Input deck made of named blocks that hold ``key = value`` parameters."""

from __future__ import annotations

import os
from collections.abc import Iterator


def _parse_bool(text: str) -> bool:
    value = text.strip()
    if value[:1] in ("0", "1") and value.isdigit():
        return int(value) != 0
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"cannot read {text!r} as a boolean")


class ParameterInput:
    """Parameters grouped by block, read from text such as::

        <block>
        key = value  # comment
    """

    def __init__(self) -> None:
        self._blocks: dict[str, dict[str, str]] = {}

    def load_from_string(self, text: str) -> None:
        """Read blocks and parameters from ``text``; later keys win."""
        block: str | None = None
        for number, raw in enumerate(text.splitlines(), start=1):
            line = raw.split("#", 1)[0].strip()
            if not line:
                continue
            if line.startswith("<"):
                end = line.find(">")
                if end < 0:
                    raise ValueError(f"line {number}: block name is missing '>'")
                block = line[1:end].strip()
                if not block:
                    raise ValueError(f"line {number}: empty block name")
                self._blocks.setdefault(block, {})
                continue
            if block is None:
                raise ValueError(f"line {number}: parameter outside of any block")
            key, sep, value = line.partition("=")
            key = key.strip()
            if not sep or not key:
                raise ValueError(f"line {number}: expected 'key = value', got {raw!r}")
            self._blocks[block][key] = value.strip()

    def load_from_file(self, path: str | os.PathLike[str]) -> None:
        """Read blocks and parameters from the file at ``path``."""
        with open(path, encoding="utf-8") as handle:
            self.load_from_string(handle.read())

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        block, key = item
        return key in self._blocks.get(block, {})

    def blocks(self) -> Iterator[str]:
        """Yield the block names in the order they were first seen."""
        return iter(self._blocks)

    def get_string(self, block: str, key: str) -> str:
        """Return the raw text stored for ``block``/``key``."""
        try:
            return self._blocks[block][key]
        except KeyError:
            raise KeyError(f"parameter <{block}>/{key} does not exist") from None

    def _get_or_add(self, block: str, key: str, text: str) -> str:
        entries = self._blocks.setdefault(block, {})
        return entries.setdefault(key, text)

    def get_or_add_real(self, block: str, key: str, value: float) -> float:
        """Return the real value of ``block``/``key``, storing ``value`` if absent."""
        if (block, key) not in self:
            self._get_or_add(block, key, repr(float(value)))
            return float(value)
        return float(self.get_string(block, key))

    def get_or_add_integer(self, block: str, key: str, value: int) -> int:
        """Return the integer value of ``block``/``key``, storing ``value`` if absent."""
        if (block, key) not in self:
            self._get_or_add(block, key, str(int(value)))
            return int(value)
        return int(self.get_string(block, key))

    def get_or_add_boolean(self, block: str, key: str, value: bool) -> bool:
        """Return the boolean value of ``block``/``key``, storing ``value`` if absent."""
        if (block, key) not in self:
            self._get_or_add(block, key, "true" if value else "false")
            return bool(value)
        return _parse_bool(self.get_string(block, key))

    def get_or_add_string(self, block: str, key: str, value: str) -> str:
        """Return the text of ``block``/``key``, storing ``value`` if absent."""
        return self._get_or_add(block, key, str(value))