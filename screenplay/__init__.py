"""screenplay - declarative mobile UI scenario runner."""

from screenplay.core.automator import Automator
from screenplay.core.errors import (
    DuplicateNameError,
    RuntimeFailure,
    SetupError,
    VerificationFailure,
)

__version__ = "0.1.0"

__all__ = [
    "Automator",
    "DuplicateNameError",
    "RuntimeFailure",
    "SetupError",
    "VerificationFailure",
    "__version__",
]
