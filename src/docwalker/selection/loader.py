"""Resolve a selector reference to a callable."""

from __future__ import annotations

import importlib
import importlib.util
import logging
from pathlib import Path

from docwalker.errors import SelectorLoadError
from docwalker.selection.evaluator import Selector
from docwalker.utils.files import resolve_rel_or_abs

logger = logging.getLogger(__name__)


def load_selector(reference: str, home_path: Path | None = None) -> Selector:
    """Load a selection function from ``module:name`` or ``file.py:name``.

    File references are resolved against ``home_path`` when relative.
    """
    module_ref, sep, attr = reference.rpartition(":")
    if not sep or not module_ref or not attr:
        raise SelectorLoadError(
            f"Selector reference must look like 'module:function', got {reference!r}"
        )

    if module_ref.endswith(".py"):
        module = _load_module_from_file(
            resolve_rel_or_abs(home_path or Path.cwd(), module_ref)
        )
    else:
        try:
            module = importlib.import_module(module_ref)
        except ImportError as exc:
            raise SelectorLoadError(f"Cannot import selector module {module_ref!r}: {exc}") from exc

    selector = getattr(module, attr, None)
    if selector is None:
        raise SelectorLoadError(f"Selector {attr!r} not found in {module_ref!r}")
    if not callable(selector):
        raise SelectorLoadError(f"Selector {reference!r} is not callable")

    logger.debug("Loaded selector %s", reference)
    return selector


def _load_module_from_file(path: Path):
    if not path.is_file():
        raise SelectorLoadError(f"Selector file not found: {path}")

    spec = importlib.util.spec_from_file_location(f"_docwalker_selector_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise SelectorLoadError(f"Cannot load selector file: {path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise SelectorLoadError(f"Selector file {path} failed to load: {exc}") from exc
    return module
