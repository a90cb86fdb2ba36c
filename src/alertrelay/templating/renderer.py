"""
Alert Relay - Template Rendering

Builds the Jinja2 environment alert templates are compiled in and
executes compiled templates against alert payloads.
"""

from dataclasses import dataclass
from datetime import timezone, tzinfo
from functools import partial
from typing import Any, Dict, Mapping

import structlog
from jinja2 import Environment, Template, TemplateError

from alertrelay.core.exceptions import TemplateRenderError
from alertrelay.observability.metrics import record_render
from alertrelay.templating import filters

logger = structlog.get_logger()

Payload = Dict[str, Any]


@dataclass(frozen=True)
class TemplateHandle:
    """A compiled template and where it was loaded from."""
    name: str
    path: str
    template: Template


def create_environment(
    zone: tzinfo = timezone.utc,
    date_format: str = filters.DEFAULT_DATE_FORMAT,
    split_token: str = "|",
) -> Environment:
    """
    Create the Jinja2 environment used to compile alert templates.

    Autoescaping is off: templates produce Telegram HTML themselves.
    """
    environment = Environment(autoescape=False)
    environment.filters["format_date"] = partial(
        filters.format_date,
        zone=zone,
        default_format=date_format,
    )
    environment.filters["format_float"] = filters.format_float
    environment.filters["format_bytes"] = filters.format_bytes
    environment.filters["format_measure_unit"] = partial(
        filters.format_measure_unit,
        split_token=split_token,
    )
    return environment


class TemplateRenderer:
    """Executes compiled templates against alert payloads."""

    def render(self, handle: TemplateHandle, payload: Mapping[str, Any]) -> str:
        """
        Render a template with the payload as its root context.

        Args:
            handle: Template resolved from the store
            payload: Decoded alert notification

        Returns:
            The rendered text

        Raises:
            TemplateRenderError: If the template fails on this payload
        """
        try:
            text = handle.template.render(dict(payload))
        except TemplateError as e:
            record_render("failed")
            logger.error("Problem with template execution", template=handle.name, error=str(e))
            raise TemplateRenderError(str(e), template=handle.name) from e
        except Exception as e:
            # Filters and expressions fail on unexpected payload values
            record_render("failed")
            logger.error("Problem with template execution", template=handle.name, error=str(e))
            raise TemplateRenderError(
                f"{type(e).__name__}: {e}",
                template=handle.name,
            ) from e

        record_render("rendered")
        return text
