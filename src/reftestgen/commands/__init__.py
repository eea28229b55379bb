"""
reftestgen.commands - CLI command implementations
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, Optional

__all__ = [
    "check",
    "generate",
    "load_configuration",
]


def load_configuration(args: argparse.Namespace) -> Optional[Dict[str, Any]]:
    """Load configuration from ``--config``, a discovered file, or defaults.

    Returns:
        Configuration dict, or None if it could not be loaded or is invalid.
    """
    from reftestgen.config import find_config_file, load_config, validate_config

    config_path = getattr(args, "config", None)
    if config_path is None:
        config_path = find_config_file(Path.cwd())
    elif not Path(config_path).exists():
        print(f"Error: config file not found: {config_path}", file=sys.stderr)
        return None

    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return None

    errors = validate_config(config)
    if errors:
        for error in errors:
            print(f"Error: invalid config: {error}", file=sys.stderr)
        return None

    if getattr(args, "verbose", False) and config_path is not None:
        print(f"Using config: {config_path}", file=sys.stderr)
    return config
