# rmtop/protocol/loader.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .args import DECODERS, DecodeResult
from .decoder import CommandEvent

DEFAULT_COMMANDS_PATH = Path(__file__).resolve().parents[1] / "metadata" / "commands.yml"


@dataclass(frozen=True)
class CommandSpec:
    name: str
    decoder: str
    options: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DecodedCommand:
    """Result of dispatching one CommandEvent through the table."""
    spec: CommandSpec
    key: Optional[str]
    result: DecodeResult


class CommandTable:
    """
    Dispatch table: command name (case-sensitive) -> argument decoder.

    args[0] is the key; leading option flags declared for the command
    (e.g. GEOADD NX|XX|CH) are skipped before regrouping the rest.
    """

    def __init__(self, commands: Dict[str, CommandSpec]):
        self.commands = dict(commands)

    def __contains__(self, name: str) -> bool:
        return name in self.commands

    def names(self) -> list[str]:
        return sorted(self.commands)

    def decode(self, event: CommandEvent) -> Optional[DecodedCommand]:
        spec = self.commands.get(event.name)
        if spec is None:
            return None

        key = event.args[0] if event.args else None
        values = list(event.args[1:])

        if spec.options:
            flags = {o.upper() for o in spec.options}
            while values and values[0].upper() in flags:
                values.pop(0)

        return DecodedCommand(spec=spec, key=key, result=DECODERS[spec.decoder](values))

    @classmethod
    def load(cls, path: Path | str | None = None) -> "CommandTable":
        loader = CommandTableLoader(Path(path) if path else DEFAULT_COMMANDS_PATH)
        loader.load_all()
        return cls(loader.commands)


class CommandTableLoader:
    """Load the command table YAML (commands.yml) into CommandSpec entries."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.doc: Dict[str, Any] = {}
        self.commands: Dict[str, CommandSpec] = {}

    def load_all(self) -> None:
        if not self.path.exists():
            raise FileNotFoundError(f"Command table not found: {self.path}")

        with open(self.path, "r", encoding="utf-8") as f:
            self.doc = yaml.safe_load(f) or {}

        if not isinstance(self.doc, dict):
            raise ValueError("command table must be a mapping")

        raw = self.doc.get("commands", {}) or {}
        if not isinstance(raw, dict):
            raise ValueError("command table must contain 'commands' mapping")

        self.commands = {}
        for name, entry in raw.items():
            self.commands[str(name)] = self._parse_entry(str(name), entry)

    @staticmethod
    def _parse_entry(name: str, entry: Any) -> CommandSpec:
        if not isinstance(entry, dict):
            raise ValueError(f"command '{name}' must be a mapping")

        decoder = entry.get("decoder")
        if decoder not in DECODERS:
            raise ValueError(
                f"command '{name}' has unknown decoder {decoder!r} (valid: {sorted(DECODERS)})"
            )

        options = entry.get("options", []) or []
        if not isinstance(options, list):
            raise ValueError(f"command '{name}' options must be a list")

        return CommandSpec(name=name, decoder=decoder, options=tuple(str(o) for o in options))
