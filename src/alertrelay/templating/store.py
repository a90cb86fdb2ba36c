"""
Alert Relay - Template Store

Named cache of compiled templates shared by all requests.

The ``default`` entry is loaded eagerly and always exists. Every other
name is a path to a template file, loaded the first time it is asked
for. When reloading is enabled every resolution reads the file again.
"""

import os
import threading
from functools import partial
from pathlib import Path
from typing import Callable, Dict, List, Optional

import structlog
from jinja2 import Environment, TemplateSyntaxError

from alertrelay.core.exceptions import TemplateLoadError
from alertrelay.observability.metrics import record_template_load
from alertrelay.templating.renderer import TemplateHandle, create_environment

logger = structlog.get_logger()

DEFAULT_TEMPLATE = "default"

Loader = Callable[[str, str], TemplateHandle]


def load_template(environment: Environment, name: str, path: str) -> TemplateHandle:
    """
    Read and compile a template file.

    Raises:
        TemplateLoadError: If the file cannot be read or does not compile
    """
    try:
        source = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError, ValueError) as e:
        # ValueError: paths with an embedded NUL byte
        raise TemplateLoadError(f"cannot read template {path}: {e}", path=path) from e

    try:
        template = environment.from_string(source)
    except TemplateSyntaxError as e:
        raise TemplateLoadError(
            f"cannot compile template {path} (line {e.lineno}): {e.message}",
            path=path,
        ) from e

    return TemplateHandle(name=name, path=path, template=template)


class TemplateStore:
    """
    Thread safe mapping of template names to compiled handles.

    Files are read and compiled outside the lock; only the lookups and
    the replacement of entries are serialised. Concurrent reloads of the
    same name keep whichever load finished last.
    """

    def __init__(
        self,
        default_path: str,
        environment: Optional[Environment] = None,
        reload: bool = False,
        loader: Optional[Loader] = None,
    ):
        self.default_path = default_path
        self.reload = reload
        self.environment = environment or create_environment()
        self._loader = loader or partial(load_template, self.environment)
        self._handles: Dict[str, TemplateHandle] = {}
        self._lock = threading.Lock()

        logger.info("Default template", path=default_path)
        # Fatal for the caller: there is nothing to fall back to
        self._handles[DEFAULT_TEMPLATE] = self._load(DEFAULT_TEMPLATE, default_path)

    @property
    def default(self) -> TemplateHandle:
        """Current handle for the default template."""
        with self._lock:
            return self._handles[DEFAULT_TEMPLATE]

    def names(self) -> List[str]:
        """Names currently cached."""
        with self._lock:
            return sorted(self._handles)

    def resolve(self, name: Optional[str] = None) -> TemplateHandle:
        """
        Resolve a template name to a compiled handle.

        An empty name means the default template. A template that cannot
        be loaded is replaced by the default template; the failure is
        logged and not raised.
        """
        name = name or DEFAULT_TEMPLATE

        if not self.reload:
            with self._lock:
                cached = self._handles.get(name)
            if cached is not None:
                return cached

        path = self.default_path if name == DEFAULT_TEMPLATE else name
        logger.info("Reloading template", template=name, path=path)

        try:
            handle = self._load(name, path)
        except TemplateLoadError as e:
            logger.warning("Problem with load template", template=name, error=e.message)
            # Only existing files are remembered, names of absent files are not cached
            remember = name != DEFAULT_TEMPLATE and os.path.isfile(path)
            with self._lock:
                fallback = self._handles[DEFAULT_TEMPLATE]
                if remember:
                    self._handles[name] = fallback
            return fallback

        with self._lock:
            self._handles[name] = handle
        return handle

    def _load(self, name: str, path: str) -> TemplateHandle:
        try:
            handle = self._loader(name, path)
        except TemplateLoadError:
            record_template_load("failed")
            raise
        record_template_load("loaded")
        return handle
