"""Templating module - Template store, renderer and filters."""

from alertrelay.templating.renderer import (
    Payload,
    TemplateHandle,
    TemplateRenderer,
    create_environment,
)
from alertrelay.templating.store import DEFAULT_TEMPLATE, TemplateStore, load_template

__all__ = [
    "DEFAULT_TEMPLATE",
    "Payload",
    "TemplateHandle",
    "TemplateRenderer",
    "TemplateStore",
    "create_environment",
    "load_template",
]
