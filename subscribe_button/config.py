"""Module configuration and logging setup."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Protocol
from xml.etree import ElementTree as ET

logger = logging.getLogger(__name__)


class ConfigSource(Protocol):
    """Host provided module options."""

    def get_option(self, name: str, default: Any = None) -> Any: ...

    def get_base_url(self) -> str: ...


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class DatabaseConfig:
    enabled: bool = False
    connection_string: Optional[str] = None


@dataclass
class ModuleConfig:
    """Subscribe button module settings, usable as a :class:`ConfigSource`."""

    use_cdn: bool = True
    base_url: str = ""
    options: Dict[str, str] = field(default_factory=dict)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)

    def get_option(self, name: str, default: Any = None) -> Any:
        if name == "use_cdn":
            return self.use_cdn
        return self.options.get(name, default)

    def get_base_url(self) -> str:
        return self.base_url


def _config_relative(config_path: Path, value: str) -> str:
    """Paths in the config file are relative to the file itself; ``~`` expands."""
    return str((config_path.parent / Path(value.strip()).expanduser()).resolve())


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("true", "1", "on", "yes")


def parse_module_config(path: str) -> ModuleConfig:
    """Parse the module configuration XML."""
    config_path = Path(path).resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    logger.info("Loading module configuration from %s", config_path)
    tree = ET.parse(config_path)
    root = tree.getroot()

    use_cdn = _flag(root.findtext("use-cdn"), True)
    base_url = (root.findtext("base-url") or "").strip()
    if not use_cdn and not base_url:
        raise ValueError("Config needs <base-url> when <use-cdn> is false")

    options: Dict[str, str] = {}
    options_node = root.find("options")
    if options_node is not None:
        for option in options_node.findall("option"):
            name = option.attrib.get("name")
            if not name:
                raise ValueError("Option element must have a 'name' attribute.")
            options[name] = (option.text or "").strip()

    # Logging
    log_node = root.find("logging")
    logging_config = LoggingConfig()
    if log_node is not None:
        logging_config.level = log_node.findtext("level", "INFO")
        log_file = log_node.findtext("file")
        if log_file:
            logging_config.file = _config_relative(config_path, log_file)

    # Database
    db_node = root.find("database")
    db_config = DatabaseConfig()
    if db_node is not None:
        db_config.enabled = _flag(db_node.findtext("enabled"), False)
        db_config.connection_string = db_node.findtext("connection-string")
        if db_config.enabled and not db_config.connection_string:
            raise ValueError("Enabled database needs a <connection-string>")

    return ModuleConfig(
        use_cdn=use_cdn,
        base_url=base_url,
        options=options,
        logging=logging_config,
        database=db_config,
    )


PACKAGE_LOGGER = "subscribe_button"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level_name: str, log_file: Optional[str] = None) -> logging.Logger:
    """Set the level of the package logger and attach its handlers.

    Only handlers installed by an earlier call are replaced. A console handler
    is added when the host has not configured the root logger itself; the
    optional file handler is always added.
    """
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unsupported log level: {level_name}")

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    for handler in package_logger.handlers[:]:
        if getattr(handler, "_subscribe_button", False):
            package_logger.removeHandler(handler)
            handler.close()

    handlers = []
    if not logging.getLogger().handlers:
        handlers.append(logging.StreamHandler())
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler._subscribe_button = True
        package_logger.addHandler(handler)

    logger.debug(
        "Logging for %s at %s (%d handlers, file=%s)",
        PACKAGE_LOGGER,
        logging.getLevelName(level),
        len(handlers),
        log_file,
    )
    return package_logger
