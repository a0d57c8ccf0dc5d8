"""Persisted receipt template settings (company name, address, footer)."""

from __future__ import annotations

import logging
from dataclasses import replace

from .db import KeyValueStore
from .models import TemplateConfig

logger = logging.getLogger(__name__)

CONFIG_KEY = "weight_config"


def load_template_config(store: KeyValueStore) -> TemplateConfig:
    """Read the template settings, falling back to the defaults."""
    raw = store.get_json(CONFIG_KEY, default=None)
    if raw is None:
        return TemplateConfig()
    if not isinstance(raw, dict):
        logger.warning("Stored template config is not an object; using defaults")
        return TemplateConfig()
    return TemplateConfig.from_dict(raw)


def save_template_config(store: KeyValueStore, config: TemplateConfig) -> None:
    store.set_json(CONFIG_KEY, config.to_dict())


def update_template_config(
    store: KeyValueStore, config: TemplateConfig, name: str, value
) -> TemplateConfig:
    """Change one setting and write the whole object back immediately.

    Raises:
        KeyError: If ``name`` is not a template setting.
    """
    if name not in TemplateConfig.field_names():
        raise KeyError(f"Unknown template setting: {name!r}")
    value = bool(value) if name == "show_charges" else str(value)
    updated = replace(config, **{name: value})
    save_template_config(store, updated)
    logger.debug("Template setting %s updated", name)
    return updated
