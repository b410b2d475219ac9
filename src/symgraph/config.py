"""
Runtime Configuration Store.

Holds the process-wide settings consulted by the graph core: the separator
used when synthesizing names, whether keyword mismatches during shape
inference are fatal, and the logging threshold.

Settings resolve in three layers: defaults, then ``[tool.symgraph]`` in the
nearest ``pyproject.toml``, then explicit overrides passed to
`RuntimeConfig.load`.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  try:
    import tomli as tomllib
  except ImportError:
    tomllib = None  # type: ignore


class RuntimeConfig(BaseModel):
  """
  Global configuration container for the graph core.
  """

  name_separator: str = Field("_", description="Joins group names and argument/return names (e.g. 'fc_weight').")
  strict_mode: bool = Field(
    False, description="If True, unmatched names during shape inference raise instead of logging a warning."
  )
  log_level: str = Field("WARNING", description="Threshold for symgraph log output (DEBUG, INFO, WARNING, ...).")

  @field_validator("log_level")
  @classmethod
  def validate_log_level(cls, v: str) -> str:
    """
    Ensures the level is one the logging module understands.

    Args:
        v (str): Level name, case-insensitive.

    Returns:
        str: The normalized (uppercase) level name.

    Raises:
        ValueError: If the level is unknown.
    """
    v_clean = v.upper().strip()
    if not isinstance(logging.getLevelName(v_clean), int):
      raise ValueError(f"Unknown log level: '{v}'")
    return v_clean

  @field_validator("name_separator")
  @classmethod
  def validate_separator(cls, v: str) -> str:
    """Rejects an empty separator, which would make generated names ambiguous."""
    if not v:
      raise ValueError("name_separator must not be empty")
    return v

  @classmethod
  def load(
    cls,
    name_separator: Optional[str] = None,
    strict_mode: Optional[bool] = None,
    log_level: Optional[str] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and applies explicit overrides.

    Args:
        name_separator (Optional[str]): Override for the name separator.
        strict_mode (Optional[bool]): Override for strict mode.
        log_level (Optional[str]): Override for the log level.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, _ = _load_toml_settings(start_dir)

    final_sep = name_separator if name_separator is not None else toml_config.get("name_separator", "_")

    if strict_mode is not None:
      final_strict = strict_mode
    else:
      final_strict = toml_config.get("strict_mode", False)

    final_level = log_level or toml_config.get("log_level", "WARNING")

    return cls(name_separator=final_sep, strict_mode=final_strict, log_level=final_level)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  if not tomllib:
    return {}, None

  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError):
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get("symgraph", {}), parent

  return {}, None


_ACTIVE_CONFIG = RuntimeConfig()


def get_config() -> RuntimeConfig:
  """Returns the process-wide active configuration."""
  return _ACTIVE_CONFIG


def set_config(config: RuntimeConfig) -> None:
  """
  Installs a new process-wide configuration and applies its log level.

  Args:
      config (RuntimeConfig): The configuration to activate.
  """
  global _ACTIVE_CONFIG
  _ACTIVE_CONFIG = config
  logging.getLogger("symgraph").setLevel(config.log_level)


def reset_config() -> None:
  """Restores the default configuration."""
  set_config(RuntimeConfig())


def parse_cli_key_values(items: Optional[List[str]]) -> Dict[str, Any]:
  """
  Parses a list of 'key=value' strings into a dictionary.

  Types are inferred (int, float, bool, or string).

  Args:
      items (Optional[List[str]]): List of raw CLI strings directly from argparse.

  Returns:
      Dict[str, Any]: Parsed dictionary.

  Raises:
      ValueError: If an item has no '=' separator.
  """
  if not items:
    return {}

  parsed = {}
  for item in items:
    if "=" not in item:
      raise ValueError(f"Invalid format: '{item}'. Expected 'key=value'.")

    key, val_str = item.split("=", 1)
    key = key.strip()
    val_str = val_str.strip()

    final_val: Any = val_str

    if val_str.lower() == "true":
      final_val = True
    elif val_str.lower() == "false":
      final_val = False
    else:
      try:
        if "." in val_str or "e" in val_str.lower():
          final_val = float(val_str)
        else:
          final_val = int(val_str)
      except ValueError:
        pass

    parsed[key] = final_val

  return parsed


def parse_shape(text: str) -> Tuple[int, ...]:
  """
  Parses a comma separated shape such as '64,3,32' into a tuple.

  Args:
      text (str): Dimensions separated by commas. An empty string is a scalar.

  Returns:
      Tuple[int, ...]: The shape.
  """
  text = text.strip().strip("()")
  if not text:
    return ()
  return tuple(int(d) for d in text.split(",") if d.strip())
