"""Load test definitions from a Python file."""

from __future__ import annotations

import importlib.util
import logging
import sys
from pathlib import Path

from screenplay.core.automator import Automator
from screenplay.core.errors import ScreenplayError

logger = logging.getLogger("screenplay.loader")

DEFAULT_ATTRIBUTE = "automator"


class LoadError(Exception):
    """Definitions file could not be loaded."""

    pass


def _unload(module_name: str, added_path: str | None) -> None:
    """Undo the import side effects of a definitions file that failed."""
    sys.modules.pop(module_name, None)
    if added_path is not None and added_path in sys.path:
        sys.path.remove(added_path)


def load_definitions(path: Path, attribute: str = DEFAULT_ATTRIBUTE) -> Automator:
    """Import a definitions file and return its Automator.

    The file is executed as a module. It must define an Automator, preferably
    under the given attribute name; otherwise the only Automator instance at
    module level is used.

    Raises:
        LoadError: If the file is missing, fails to execute, or defines no
            single Automator.
        ScreenplayError: Propagated from the definitions themselves.
    """
    path = Path(path)
    if not path.exists():
        raise LoadError(f"Definitions file not found: {path}")

    module_name = f"screenplay_definitions_{path.stem}"

    # Remove from cache so we always get a fresh copy
    sys.modules.pop(module_name, None)

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise LoadError(f"Cannot import definitions from {path}")

    module = importlib.util.module_from_spec(spec)
    # Make sibling modules importable from the definitions file
    parent = str(path.resolve().parent)
    added_path = parent not in sys.path
    if added_path:
        sys.path.insert(0, parent)
    sys.modules[module_name] = module
    logger.debug("Loading definitions from %s", path)

    try:
        spec.loader.exec_module(module)
    except ScreenplayError:
        _unload(module_name, parent if added_path else None)
        raise
    except Exception as e:
        _unload(module_name, parent if added_path else None)
        logger.debug("Definitions file %s raised", path, exc_info=True)
        raise LoadError(f"Error loading definitions from {path}: {type(e).__name__}: {e}") from e

    found = getattr(module, attribute, None)
    if isinstance(found, Automator):
        return found

    candidates = [value for value in vars(module).values() if isinstance(value, Automator)]
    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise LoadError(f"No Automator defined in {path}")
    raise LoadError(
        f"Several Automators defined in {path}; name the one to use '{attribute}'"
    )
