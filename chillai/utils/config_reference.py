"""
ChillAI configuration schema.

Every key in ``configs/config_default.yaml`` declares its type, default and
description, plus the constraint the engine enforces on it when there is one.
The loader seeds defaults and rejects unknown keys from this schema, and the
``describe-config`` / ``generate-config-docs`` commands render it.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

SCHEMA_PATH = Path(__file__).resolve().parents[1] / "configs" / "config_default.yaml"

Schema = Dict[str, Dict[str, "ConfigField"]]


@dataclass(frozen=True)
class ConfigField:
    """One documented configuration key."""

    section: str
    name: str
    type: str
    default: object
    description: str
    constraint: Optional[str] = None

    @property
    def path(self) -> str:
        return f"{self.section}.{self.name}"

    def default_repr(self) -> str:
        return "None" if self.default is None else repr(self.default)

    def as_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["key"] = data.pop("name")
        return data


def load_schema(path: Path = SCHEMA_PATH) -> Schema:
    """Parse the YAML schema at ``path`` into sections of :class:`ConfigField`."""

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except FileNotFoundError as exc:
        raise FileNotFoundError(f"Configuration schema file not found: {path}") from exc
    return {
        section: {
            key: ConfigField(
                section=section,
                name=key,
                type=str(meta.get("type", "Any")),
                default=meta.get("default"),
                # Folded YAML blocks keep their line breaks and trailing newline.
                description=" ".join(str(meta.get("description", "")).split()),
                constraint=meta.get("constraint"),
            )
            for key, meta in entries.items()
        }
        for section, entries in raw.items()
    }


CONFIG_SCHEMA: Schema = load_schema()


def sections(section: Optional[str] = None) -> Schema:
    """Return the whole schema, or only ``section`` (``KeyError`` when unknown)."""

    if section is None:
        return CONFIG_SCHEMA
    if section not in CONFIG_SCHEMA:
        raise KeyError(f"Unknown config section '{section}'. Options: {sorted(CONFIG_SCHEMA)}")
    return {section: CONFIG_SCHEMA[section]}


def iter_fields(section: Optional[str] = None) -> Iterable[ConfigField]:
    for fields in sections(section).values():
        yield from fields.values()


def defaults() -> Dict[str, Dict[str, Any]]:
    """Default value of every key, grouped by section."""

    return {name: {key: field.default for key, field in fields.items()} for name, fields in CONFIG_SCHEMA.items()}


def lookup(key: str) -> ConfigField:
    """
    Resolve ``section.key`` or a bare key name.

    Dashes are read as underscores.  A bare name resolves to the first section
    declaring it.
    """

    section, _, name = key.strip().lower().replace("-", "_").rpartition(".")
    for field in iter_fields(section or None):
        if field.name == name:
            return field
    raise KeyError(f"Unknown configuration key '{key}'.")


def explain(key: str) -> str:
    field = lookup(key)
    text = (
        f"{field.name} (section={field.section}, type={field.type}, default={field.default_repr()}) -> "
        f"{field.description or 'No description available.'}"
    )
    if field.constraint:
        text += f" Allowed: {field.constraint}."
    return text


def as_dict(section: Optional[str] = None) -> Dict[str, Dict[str, Dict[str, object]]]:
    return {name: {key: field.as_dict() for key, field in fields.items()} for name, fields in sections(section).items()}


_COLUMNS = ("Key", "Type", "Default", "Allowed", "Description")


def _cells(field: ConfigField) -> Tuple[str, ...]:
    cells = (
        f"`{field.name}`",
        f"`{field.type}`",
        f"`{field.default_repr()}`",
        field.constraint or "any",
        field.description,
    )
    return tuple(cell.replace("|", "\\|") for cell in cells)


def to_markdown(section: Optional[str] = None) -> str:
    """Render the schema as one markdown table per section."""

    heading = "# ChillAI Configuration Reference"
    lines: List[str] = [f"{heading} - {section.title()}" if section else heading, ""]
    for name, fields in sections(section).items():
        lines += [f"## {name.title()}", "", "| " + " | ".join(_COLUMNS) + " |", "|" + " --- |" * len(_COLUMNS)]
        lines += ["| " + " | ".join(_cells(field)) + " |" for field in fields.values()]
        lines.append("")
    return "\n".join(lines)


def write_markdown(path: Path, section: Optional[str] = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_markdown(section=section), encoding="utf-8")
    return path


def to_console(section: Optional[str] = None) -> str:
    """Plain-text listing for terminals, one key per line."""

    lines: List[str] = []
    for name, fields in sections(section).items():
        lines.append(f"[{name.upper()}]")
        for field in fields.values():
            allowed = f" [{field.constraint}]" if field.constraint else ""
            lines.append(f"  {field.path} = {field.default_repr()} ({field.type}){allowed}")
            if field.description:
                lines.append(f"      {field.description}")
        lines.append("")
    return "\n".join(lines).rstrip()


__all__ = [
    "SCHEMA_PATH",
    "ConfigField",
    "CONFIG_SCHEMA",
    "load_schema",
    "sections",
    "iter_fields",
    "defaults",
    "lookup",
    "explain",
    "as_dict",
    "to_markdown",
    "write_markdown",
    "to_console",
]
