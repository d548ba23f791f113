"""Data models for screenplay."""

from screenplay.models.appmap import DEFAULT_DEVICE, Action, App, ParamSpec, Screen
from screenplay.models.scenario import UNTAGGED, Scenario, Step

__all__ = [
    "DEFAULT_DEVICE",
    "UNTAGGED",
    "Action",
    "App",
    "ParamSpec",
    "Scenario",
    "Screen",
    "Step",
]
