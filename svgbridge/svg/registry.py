"""Element builder registry: every SVG tag the importer understands is a
standalone function registered via decorator.

Usage:
    @element_builder("rect", description="Rectangle with optional corner radii")
    def build_rect(element: ElementRecord, ctx: ImportContext, props: Properties) -> SceneItem | None:
        ...

Supporting a new tag = adding one decorated function under svgbridge/svg/builders/.
"""

from __future__ import annotations

import importlib
import logging
import pkgutil
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from svgbridge.models.scene import SceneItem
    from svgbridge.svg.context import ImportContext
    from svgbridge.svg.reader import ElementRecord

logger = logging.getLogger(__name__)

BuilderFn = Callable[["ElementRecord", "ImportContext", dict], Optional["SceneItem"]]


@dataclass
class BuilderSpec:
    tag: str
    fn: BuilderFn
    # False when the builder resolves style and transform itself (e.g. <use>)
    finalize: bool = True
    description: str = ""


class BuilderRegistry:
    """Singleton registry of element builders, keyed by tag."""

    def __init__(self) -> None:
        self._builders: dict[str, BuilderSpec] = {}

    def register(self, spec: BuilderSpec) -> None:
        if spec.tag in self._builders:
            raise ValueError(f"Duplicate element builder for <{spec.tag}>")
        self._builders[spec.tag] = spec
        logger.debug("Registered builder for <%s>", spec.tag)

    def get(self, tag: str) -> Optional[BuilderSpec]:
        return self._builders.get(tag)

    def tags(self) -> list[str]:
        return sorted(self._builders)

    @property
    def count(self) -> int:
        return len(self._builders)


# Module-level singleton
_registry = BuilderRegistry()


def get_registry() -> BuilderRegistry:
    return _registry


def element_builder(tag: str, *, finalize: bool = True, description: str = ""):
    """Decorator to register a builder function for *tag*."""

    def decorator(fn: BuilderFn) -> BuilderFn:
        _registry.register(BuilderSpec(tag=tag, fn=fn, finalize=finalize, description=description))
        return fn

    return decorator


def register_builders() -> None:
    """Import all builder modules so @element_builder decorators fire."""
    package = importlib.import_module("svgbridge.svg.builders")
    for _, module_name, _ in pkgutil.iter_modules(package.__path__):
        importlib.import_module(f"svgbridge.svg.builders.{module_name}")
