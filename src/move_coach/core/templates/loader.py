"""
YAML → TemplateDefinition loader.

Loads template definitions from individual YAML files in the bundled
``src/move_coach/templates/`` directory.  Each file (e.g. gpp.yaml)
contains one template matching the TemplateDefinition schema.

User overrides: place matching files in ``~/.move-coach/templates/``.
A user file is deep-merged over the bundled definition, so only changed
keys need to be listed.  Note that ``blocks`` is a list and is replaced
wholesale, not merged per block.  A user file whose key does not match
any bundled file is treated as a new template.

Usage (internal — called by registry.py):
    from .loader import load_templates_from_yaml
    templates = load_templates_from_yaml()   # dict or None on failure
"""

from __future__ import annotations

import logging
import os
import warnings
from pathlib import Path

import yaml

from .base import BlockDefinition, TemplateDefinition

logger = logging.getLogger(__name__)

_REQUIRED_BLOCK_FIELDS: frozenset[str] = frozenset(
    {"move", "scheme", "target_rpe", "slots"}
)

_REQUIRED_TEMPLATE_FIELDS: frozenset[str] = frozenset(
    {"key", "title", "warmup", "blocks", "finisher"}
)


def _block_from_dict(d: dict) -> BlockDefinition:
    """Convert a raw dict to BlockDefinition, raising ValueError on missing fields."""
    missing = _REQUIRED_BLOCK_FIELDS - set(d)
    if missing:
        raise ValueError(f"BlockDefinition missing fields: {sorted(missing)}")
    return BlockDefinition(
        move=str(d["move"]),
        scheme=str(d["scheme"]),
        target_rpe=float(d["target_rpe"]),
        slots=int(d["slots"]),
        alt_when={str(k): str(v) for k, v in (d.get("alt_when") or {}).items()},
        replace_when={str(k): str(v) for k, v in (d.get("replace_when") or {}).items()},
    )


def template_from_dict(d: dict) -> TemplateDefinition:
    """Convert a raw dict (from YAML) to a TemplateDefinition.

    Raises ValueError if any required field is absent.
    """
    missing = _REQUIRED_TEMPLATE_FIELDS - set(d)
    if missing:
        raise ValueError(f"TemplateDefinition missing fields: {sorted(missing)}")

    blocks = [_block_from_dict(b) for b in d["blocks"]]
    if not blocks:
        raise ValueError("TemplateDefinition needs at least one block")

    return TemplateDefinition(
        key=str(d["key"]),
        title=str(d["title"]),
        warmup=[str(w) for w in d["warmup"]],
        blocks=blocks,
        finisher=str(d["finisher"]),
        uses_constraints=bool(d.get("uses_constraints", True)),
    )


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file; return {} (with a warning) if it cannot be read."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"move-coach: cannot read {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _get_bundled_templates_dir() -> Path | None:
    """Return path to the bundled templates/ data directory, or None if not found."""
    # loader.py lives at src/move_coach/core/templates/loader.py
    # three levels up → src/move_coach/
    candidate = Path(__file__).parent.parent.parent / "templates"
    return candidate if candidate.is_dir() else None


def _get_user_templates_dir() -> Path | None:
    """Return ~/.move-coach/templates/ if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".move-coach" / "templates"
    return p if p.is_dir() else None


def load_templates_from_yaml(
    bundled_dir: Path | None = None,
    user_dir: Path | None = None,
) -> dict[str, TemplateDefinition] | None:
    """Return {key: TemplateDefinition} loaded from per-template YAML files.

    Loads each ``<key>.yaml`` from the bundled templates/ directory.
    If a matching file exists in the user directory it is deep-merged
    over the bundled definition.  User-only files are loaded as new
    templates.  Directories default to the bundled data dir and
    ``~/.move-coach/templates/``.

    Returns None when nothing could be loaded.
    """
    if bundled_dir is None:
        bundled_dir = _get_bundled_templates_dir()
    if user_dir is None:
        user_dir = _get_user_templates_dir()

    if bundled_dir is None and user_dir is None:
        return None

    result: dict[str, TemplateDefinition] = {}

    stems: dict[str, Path] = {}
    if bundled_dir is not None:
        for p in sorted(bundled_dir.glob("*.yaml")):
            stems[p.stem] = p

    user_only: list[Path] = []
    if user_dir is not None:
        for p in sorted(user_dir.glob("*.yaml")):
            if p.stem not in stems:
                user_only.append(p)

    for stem, bundled_path in stems.items():
        raw = _load_yaml_file(bundled_path)
        if not raw:
            continue
        if user_dir is not None:
            user_path = user_dir / f"{stem}.yaml"
            if user_path.exists():
                user_raw = _load_yaml_file(user_path)
                if user_raw:
                    logger.debug("Merging user override %s", user_path)
                    raw = _deep_merge(raw, user_raw)
        try:
            tmpl = template_from_dict(raw)
            result[tmpl.key] = tmpl
        except (ValueError, TypeError) as exc:
            warnings.warn(
                f"move-coach: skipping template '{stem}' — {exc}",
                stacklevel=2,
            )

    for p in user_only:
        raw = _load_yaml_file(p)
        if not raw:
            continue
        try:
            tmpl = template_from_dict(raw)
            result[tmpl.key] = tmpl
        except (ValueError, TypeError) as exc:
            warnings.warn(
                f"move-coach: skipping user template '{p.stem}' — {exc}",
                stacklevel=2,
            )

    return result if result else None
