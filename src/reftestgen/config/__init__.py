"""
reftestgen.config - Configuration loading and defaults.

Configuration lives in a ``.reftestgen.toml`` file, found by walking up
from the working directory. Values are merged over DEFAULT_CONFIG and can
be overridden with ``REFTESTGEN_<SECTION>_<KEY>`` environment variables.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomlkit

from reftestgen.config.defaults import CONFIG_FILE_NAME, DEFAULT_CONFIG, ENV_PREFIX
from reftestgen.core.models import TestKind


def parse_toml_document(content: str) -> tomlkit.TOMLDocument:
    """Parse TOML text into a round-trippable tomlkit document."""
    return tomlkit.parse(content)


def parse_toml(content: str) -> Dict[str, Any]:
    """Parse TOML text into plain Python dicts and lists."""
    return parse_toml_document(content).unwrap()


def find_config_file(start: Path) -> Optional[Path]:
    """Find the config file in ``start`` or one of its parents.

    Args:
        start: Directory to start searching from.

    Returns:
        Path to the config file, or None if there is none.
    """
    current = Path(start).resolve()
    while True:
        candidate = current / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge ``override`` into a copy of ``base``."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _try_parse_env_value(value: str) -> Any:
    """Parse an environment value as JSON list/object or boolean.

    Anything else, including malformed JSON, is returned unchanged.
    """
    stripped = value.strip()
    if stripped.lower() in ("true", "false"):
        return stripped.lower() == "true"
    if stripped.startswith(("[", "{")):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            return value
    return value


def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """Apply ``REFTESTGEN_<SECTION>_<KEY>`` environment overrides.

    The section is the part before the first underscore; the rest, lower
    cased, is the key (e.g. ``REFTESTGEN_GENERATE_FAIL_FAST``).
    """
    for name, value in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        section, _, key = name[len(ENV_PREFIX) :].lower().partition("_")
        if not section or not key:
            continue
        config.setdefault(section, {})[key] = _try_parse_env_value(value)
    return config


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration merged over the defaults.

    Args:
        config_path: Path to a config file; None uses only the defaults.

    Returns:
        Configuration dictionary.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        user_config = parse_toml(Path(config_path).read_text(encoding="utf-8"))
        config = merge_configs(config, user_config)
    return _apply_env_overrides(config)


def get_config(config_path: Optional[Path] = None, start: Optional[Path] = None) -> Dict[str, Any]:
    """Load the explicit config file, or discover one from ``start``."""
    if config_path is None:
        config_path = find_config_file(start or Path.cwd())
    return load_config(config_path)


def validate_config(config: Dict[str, Any]) -> List[str]:
    """Check a configuration dictionary.

    Returns:
        List of problems; empty when the configuration is valid.
    """
    errors: List[str] = []
    generate = config.get("generate", {})

    kinds = generate.get("kinds", [])
    if not isinstance(kinds, list):
        errors.append("generate.kinds must be a list")
    else:
        for kind in kinds:
            try:
                TestKind.from_name(str(kind))
            except ValueError as e:
                errors.append(f"generate.kinds: {e}")

    module = generate.get("module", "")
    if not isinstance(module, str) or not module.strip():
        errors.append("generate.module must be a non-empty string")

    variants = config.get("analysis", {}).get("variants", [])
    if not isinstance(variants, list) or not variants:
        errors.append("analysis.variants must be a non-empty list")

    extensions = config.get("discovery", {}).get("extensions", [])
    for ext in extensions:
        if not str(ext).startswith("."):
            errors.append(f"discovery.extensions: '{ext}' must start with '.'")

    return errors


@dataclass
class GeneratorConfig:
    """
    Typed view of the configuration used by the generate command.

    Attributes:
        module: SPT module prefix
        kinds: Kinds of SPT files to write
        include_empty: Also write suites without reference checks
        force: Overwrite existing files
        fail_fast: Stop at the first text that fails
        analysis_variants: Analysis variants to emit checks for
        extensions: File extensions of annotated sources
        skip_dirs: Directory names skipped during discovery
        language: SPT language name
        start_symbol: Optional SPT start symbol
        output: Optional default output directory
    """

    module: str = "refret"
    kinds: List[TestKind] = field(
        default_factory=lambda: [TestKind.PARSING, TestKind.ANALYSIS, TestKind.REFRET]
    )
    include_empty: bool = False
    force: bool = False
    fail_fast: bool = False
    analysis_variants: List[str] = field(default_factory=lambda: ["default", "test"])
    extensions: List[str] = field(default_factory=lambda: [".java"])
    skip_dirs: List[str] = field(default_factory=list)
    language: str = "Java"
    start_symbol: Optional[str] = None
    output: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GeneratorConfig:
        """Create a GeneratorConfig from a configuration dictionary.

        Raises:
            ValueError: If the dictionary names an unknown test kind.
        """
        generate = data.get("generate", {})
        discovery = data.get("discovery", {})
        spt = data.get("spt", {})
        return cls(
            module=generate.get("module", "refret"),
            kinds=[
                TestKind.from_name(k)
                for k in generate.get("kinds", ["parsing", "analysis", "refret"])
            ],
            include_empty=generate.get("include_empty", False),
            force=generate.get("force", False),
            fail_fast=generate.get("fail_fast", False),
            analysis_variants=list(data.get("analysis", {}).get("variants", ["default", "test"])),
            extensions=list(discovery.get("extensions", [".java"])),
            skip_dirs=list(discovery.get("skip_dirs", [])),
            language=spt.get("language", "Java"),
            start_symbol=spt.get("start_symbol"),
            output=generate.get("output"),
        )


__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_CONFIG",
    "GeneratorConfig",
    "find_config_file",
    "get_config",
    "load_config",
    "merge_configs",
    "parse_toml",
    "parse_toml_document",
    "validate_config",
]
