"""weni system information reporter."""

from weni.collector import SystemCollector
from weni.config import AppConfig, load_config
from weni.models import Selection, Snapshot
from weni.render import OutputFormat, render, render_json
from weni.schema import validate_payload

__all__ = [
    "AppConfig",
    "OutputFormat",
    "Selection",
    "Snapshot",
    "SystemCollector",
    "load_config",
    "render",
    "render_json",
    "validate_payload",
]
