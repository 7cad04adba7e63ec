"""Prompt styles for interactive confirmations and table pickers."""

from __future__ import annotations

from prompt_toolkit.styles import Style

_MUTED = "ansibrightblack"

_BASE = {
    "separator": _MUTED,
    "instruction": _MUTED,
    "disabled": _MUTED,
    "error": "bold ansired",
}


def _accented(color: str, **extra: str) -> Style:
    """Base palette with every interactive element in one bold accent color."""
    rules = dict(_BASE)
    for element in ("question", "answer", "pointer", "highlighted", "selected"):
        rules[element] = f"bold {color}"
    rules.update(extra)
    return Style.from_dict(rules)


# Table pickers (bulk drop selection).
PICKER_STYLE = _accented(
    "ansicyan",
    question="bold ansiblue",
    checkbox=_MUTED,
    **{"checkbox-selected": "bold ansicyan"},
)

# Confirmations guarding destructive commands.
DESTRUCTIVE_STYLE = _accented("ansibrightred")
