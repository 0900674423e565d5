"""Configuration management for knitcache."""
import tomllib
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, ClassVar

from knitcache.config.file_ops import write_text_file
from knitcache.config.paths import default_config_path
from knitcache.platform.logging import logger

FINGERPRINT_ALGORITHM_DEFAULT = "sha256"
FIG_WIDTH_DEFAULT = 7.0
FIG_HEIGHT_DEFAULT = 7.0
OUTPUT_SUFFIX_DEFAULT = ".md"


def _path_field(default: Path | None = None) -> Any:
    """Create a field for Path objects with proper conversion.

    Args:
        default: Default value for the field.

    Returns:
        Field with proper metadata for path handling.
    """
    return field(default=default, metadata={"path": True})


@dataclass
class Config:
    """Application configuration."""

    # Log file path
    log_file: Path | None = _path_field()

    # Directory for the snippet cache database
    data_dir: Path | None = _path_field()

    # Digest used to fingerprint snippet source text
    fingerprint_algorithm: str = FINGERPRINT_ALGORITHM_DEFAULT

    # Figure size hints applied when a snippet declares none
    fig_width: float = FIG_WIDTH_DEFAULT
    fig_height: float = FIG_HEIGHT_DEFAULT

    # Suffix of the rendered artifact written beside the document
    output_suffix: str = OUTPUT_SUFFIX_DEFAULT

    _instance: ClassVar["Config | None"] = None
    _loaded_from: ClassVar[Path | None] = None

    def __post_init__(self) -> None:
        """Convert string paths to ``Path`` objects using field metadata."""
        for f in fields(self):
            if not f.metadata.get("path", False):
                continue
            value = getattr(self, f.name)
            if isinstance(value, str):
                setattr(self, f.name, Path(value) if value else None)

    def save(self) -> None:
        """Save configuration to file."""
        config_dict = asdict(self)

        for key, value in config_dict.items():
            if isinstance(value, Path):
                config_dict[key] = str(value)

        try:
            target = default_config_path()
            content = self._render_toml(config_dict)
            write_text_file(target, content)
            logger.info("Configuration saved to %s", target)
        except Exception as e:
            logger.error("Failed to save configuration: %s", e)
            raise

    def _render_toml(self, config: dict[str, Any]) -> str:
        """Render configuration as TOML with inline guidance."""

        lines: list[str] = []

        lines.append("# knitcache Configuration File")
        lines.append("")

        lines.append("# Log file path (optional)")
        lines.append('# Example: log_file = "/path/to/logs/knitcache.log"')
        if config["log_file"] is not None:
            lines.append(f"log_file = {self._format_toml_value(config['log_file'])}")
        lines.append("")

        lines.append("# Directory holding the snippet cache database (optional)")
        lines.append("# KNITCACHE_DATA_DIR overrides the built-in default but not this value")
        if config["data_dir"] is not None:
            lines.append(f"data_dir = {self._format_toml_value(config['data_dir'])}")
        lines.append("")

        lines.append("# Digest used to fingerprint snippet source text (hashlib name)")
        lines.append("# Changing it invalidates every cached snippet on the next build")
        lines.append(
            f"fingerprint_algorithm = {self._format_toml_value(config['fingerprint_algorithm'])}"
        )
        lines.append("")

        lines.append("# Default figure size hints, in inches")
        lines.append(f"fig_width = {self._format_toml_value(config['fig_width'])}")
        lines.append(f"fig_height = {self._format_toml_value(config['fig_height'])}")
        lines.append("")

        lines.append("# Suffix of the rendered document written beside the source")
        lines.append(f"output_suffix = {self._format_toml_value(config['output_suffix'])}")
        lines.append("")

        return "\n".join(lines)

    def _format_toml_value(self, value: Any) -> str:
        """Format a value for TOML serialization."""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (str, Path)):
            return f'"{str(value)}"'
        return str(value)

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from file, creating the default file when absent.

        Returns:
            Config: Loaded configuration object.
        """
        if cls._instance is not None:
            return cls._instance

        config_file = default_config_path()

        try:
            if config_file.exists():
                with open(config_file, "rb") as f:
                    config_dict = tomllib.load(f)

                known = {f.name for f in fields(cls)}
                unknown = sorted(set(config_dict) - known)
                for key in unknown:
                    logger.warning("Ignoring unknown configuration key '%s'", key)
                    _ = config_dict.pop(key)

                for key in ("log_file", "data_dir"):
                    value = config_dict.get(key)
                    if isinstance(value, str) and not value.strip():
                        config_dict[key] = None

                logger.debug("Configuration loaded from %s", config_file)
                instance = cls(**config_dict)

                cls._instance = instance
                cls._loaded_from = config_file
                return instance

            config = cls()
            config.save()
            logger.info("Created default configuration at %s", config_file)
            cls._instance = config
            cls._loaded_from = config_file
            return config

        except Exception as e:
            logger.error("Failed to load configuration: %s", e)
            raise


# Global configuration instance
config = Config.load()
