# src/webforge/core/handlers/config_handler.py
import json
import logging
from typing import List

from webforge.core.managers.config_manager import config_manager

logger = logging.getLogger(__name__)

USAGE = """
Usage:
  webforge config list        Show the effective configuration as JSON.
  webforge config get <key>   Show one value (e.g., analyzer.content.thin_words).
"""


def handle_config(args: List[str]) -> int:
    """Handles the 'config' command for viewing the effective configuration."""
    if not args:
        print(USAGE)
        return 1

    command = args[0]

    if command == "list":
        print(json.dumps(config_manager.get_all(), indent=2))
        if config_manager.overrides_file:
            print(f"\n(Project overrides: {config_manager.overrides_file})")
        return 0

    if command == "get":
        if len(args) < 2:
            print("Usage: webforge config get <key>")
            return 1
        key_path = args[1]
        value = config_manager.get_nested(key_path)
        if value is None:
            print(f"❌ Unknown config key '{key_path}'.")
            return 1
        if isinstance(value, (dict, list)):
            print(json.dumps(value, indent=2))
        else:
            print(value)
        return 0

    print(f"Unknown command: 'config {command}'.")
    return 1
