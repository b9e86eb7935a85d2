"""
Configuration Loader Utility

Loads YAML/JSON configuration files and ``.env`` files for the pipeline
runtime (``pipeline_runtime.yaml``) and the CLI.
"""

from typing import Dict, Any, Iterable, Optional, Union
from pathlib import Path
import yaml
import json
import os
import re

# ${VAR} or ${VAR:-default}
_ENV_REF_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


class ConfigLoader:
    """
    Utility class for loading configuration files

    Supports YAML and JSON formats, with environment variable substitution.
    """

    @staticmethod
    def load(config_path: Union[str, Path], use_env: bool = True) -> Dict[str, Any]:
        """
        Load configuration from file

        Args:
            config_path: Path to configuration file
            use_env: Whether to substitute environment variables

        Returns:
            Dictionary containing configuration
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in [".yaml", ".yml"]:
                config = yaml.safe_load(f) or {}
            elif path.suffix.lower() == ".json":
                config = json.load(f)
            else:
                raise ValueError(f"Unsupported configuration file format: {path.suffix}")

        if not isinstance(config, dict):
            raise ValueError(f"Configuration root must be a mapping: {config_path}")

        if use_env:
            config = ConfigLoader.substitute_env_vars(config)

        return config

    @staticmethod
    def substitute_env_vars(obj: Any) -> Any:
        """
        Recursively substitute environment variables in configuration

        ``${VAR}`` is left untouched when VAR is unset; ``${VAR:-default}``
        falls back to ``default``.

        Args:
            obj: Configuration object (dict, list, or string)

        Returns:
            Object with environment variables substituted
        """
        if isinstance(obj, dict):
            return {k: ConfigLoader.substitute_env_vars(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [ConfigLoader.substitute_env_vars(item) for item in obj]
        if isinstance(obj, str) and "${" in obj:

            def replace_var(match):
                value = os.getenv(match.group(1))
                if value is not None:
                    return value
                default = match.group(2)
                return default if default is not None else match.group(0)

            return _ENV_REF_RE.sub(replace_var, obj)
        return obj

    @staticmethod
    def find_file_upwards(
        filename: Union[str, Iterable[str]],
        start_path: Optional[str] = None,
    ) -> Optional[str]:
        """
        Find a file by searching the start directory and its parents.

        Args:
            filename: File name, or several names tried in order per directory.
            start_path: Optional starting directory. Defaults to cwd.

        Returns:
            Absolute path to file if found, None otherwise.
        """
        names = [filename] if isinstance(filename, str) else list(filename)
        current = Path(start_path).expanduser().resolve() if start_path else Path.cwd().resolve()
        for candidate_dir in [current, *current.parents]:
            for name in names:
                candidate = candidate_dir / name
                if candidate.is_file():
                    return str(candidate)
        return None

    @staticmethod
    def parse_env_line(raw_line: str) -> Optional[tuple]:
        """Parse one ``.env`` line into ``(key, value)``; None for blanks/comments."""
        line = raw_line.strip()
        if not line or line.startswith("#"):
            return None
        if line.startswith("export "):
            line = line[len("export "):].strip()
        if "=" not in line:
            return None

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            return None

        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        elif " #" in value:
            value = value.split(" #", 1)[0].rstrip()
        return key, value

    @staticmethod
    def load_env_file(
        env_path: Optional[str] = None,
        *,
        override: bool = False,
    ) -> Optional[str]:
        """
        Load key/value pairs from a .env file into process environment.

        Args:
            env_path: Optional explicit env file path. If not provided,
                search from cwd upwards for ".env".
            override: If True, override existing environment variables.

        Returns:
            Loaded env file path if found and parsed; otherwise None.
        """
        resolved_path = env_path or ConfigLoader.find_file_upwards(".env")
        if not resolved_path:
            return None

        path = Path(resolved_path)
        if not path.is_file():
            return None

        for raw_line in path.read_text(encoding="utf-8").splitlines():
            parsed = ConfigLoader.parse_env_line(raw_line)
            if parsed is None:
                continue
            key, value = parsed
            if override or key not in os.environ:
                os.environ[key] = value

        return str(path)
