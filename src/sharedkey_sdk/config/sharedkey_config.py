"""
Configuration management for the SharedKey Python SDK

Loads account credentials and SDK settings from JSON, environment variables
or a storage connection string, and applies logging settings.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..exceptions import ConfigurationError, InvalidCredentialError
from ..signing.credential import SharedKeyCredential

ENV_ACCOUNT_NAME = "SHAREDKEY_ACCOUNT_NAME"
ENV_ACCOUNT_KEY = "SHAREDKEY_ACCOUNT_KEY"
ENV_ENDPOINT = "SHAREDKEY_ENDPOINT"
ENV_CONNECTION_STRING = "SHAREDKEY_CONNECTION_STRING"
ENV_LOG_LEVEL = "SHAREDKEY_LOG_LEVEL"
ENV_LOG_STRING_TO_SIGN = "SHAREDKEY_LOG_STRING_TO_SIGN"

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOGGER_NAMESPACE = "sharedkey_sdk"


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "WARNING"
    format: str = DEFAULT_LOG_FORMAT

    def __post_init__(self):
        """Validate logging level"""
        self.level = self.level.upper()
        if not isinstance(logging.getLevelName(self.level), int):
            raise ConfigurationError(
                f"Unknown log level: {self.level}",
                "INVALID_LOG_LEVEL",
                {"level": self.level}
            )


@dataclass
class SharedKeyConfig:
    """
    Account and SDK settings

    Attributes:
        account_name: Storage account name
        account_key: Base64-encoded account key
        endpoint: Optional service endpoint, e.g. https://acct.table.core.windows.net
        log_string_to_sign: Log each string to sign at DEBUG level
        logging: Logging settings
    """
    account_name: str
    account_key: str
    endpoint: Optional[str] = None
    log_string_to_sign: bool = False
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Validate required fields"""
        if not self.account_name:
            raise ConfigurationError("account_name is required", "MISSING_FIELD", {"field": "account_name"})
        if not self.account_key:
            raise ConfigurationError("account_key is required", "MISSING_FIELD", {"field": "account_key"})

    def to_credential(self) -> SharedKeyCredential:
        """
        Build the credential for this account.

        Raises:
            InvalidCredentialError: If the account key is not usable
        """
        return SharedKeyCredential(self.account_name, self.account_key)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'SharedKeyConfig':
        """Build configuration from a parsed JSON object"""
        if 'connection_string' in data:
            base = cls.from_connection_string(data['connection_string'])
            account_name, account_key, endpoint = base.account_name, base.account_key, base.endpoint
        else:
            account_name = data.get('account_name')
            account_key = data.get('account_key')
            endpoint = data.get('endpoint')

        try:
            logging_config = LoggingConfig(**data.get('logging', {}))
        except TypeError as e:
            raise ConfigurationError(f"Invalid logging configuration: {e}", "INVALID_FORMAT") from e

        return cls(
            account_name=account_name,
            account_key=account_key,
            endpoint=data.get('endpoint', endpoint),
            log_string_to_sign=bool(data.get('log_string_to_sign', False)),
            logging=logging_config,
        )

    @classmethod
    def from_json(cls, json_string: str) -> 'SharedKeyConfig':
        """Load configuration from JSON string"""
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Failed to parse configuration JSON: {e}", "PARSE_ERROR") from e

        if not isinstance(data, dict):
            raise ConfigurationError("Configuration JSON must be an object", "INVALID_FORMAT")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'SharedKeyConfig':
        """Load configuration from a JSON file"""
        try:
            with open(Path(file_path), 'r', encoding='utf-8') as f:
                json_string = f.read()
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file: {e}", "FILE_ERROR") from e
        return cls.from_json(json_string)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'SharedKeyConfig':
        """
        Load configuration from environment variables.

        SHAREDKEY_CONNECTION_STRING wins over SHAREDKEY_ACCOUNT_NAME and
        SHAREDKEY_ACCOUNT_KEY when set.
        """
        env = os.environ if environ is None else environ

        connection_string = env.get(ENV_CONNECTION_STRING)
        if connection_string:
            config = cls.from_connection_string(connection_string)
        else:
            config = cls(
                account_name=env.get(ENV_ACCOUNT_NAME, ""),
                account_key=env.get(ENV_ACCOUNT_KEY, ""),
            )

        if env.get(ENV_ENDPOINT):
            config.endpoint = env[ENV_ENDPOINT]
        if env.get(ENV_LOG_LEVEL):
            config.logging = LoggingConfig(level=env[ENV_LOG_LEVEL])
        config.log_string_to_sign = env.get(ENV_LOG_STRING_TO_SIGN, "").lower() in ("1", "true", "yes")
        return config

    @classmethod
    def from_connection_string(cls, connection_string: str) -> 'SharedKeyConfig':
        """
        Parse a storage connection string.

        Recognized keys: AccountName, AccountKey, TableEndpoint,
        DefaultEndpointsProtocol and EndpointSuffix. Without TableEndpoint
        the endpoint is derived as ``{protocol}://{account}.table.{suffix}``
        when an EndpointSuffix is present.
        """
        settings = parse_connection_string(connection_string)

        account_name = settings.get('accountname')
        account_key = settings.get('accountkey')
        if not account_name or not account_key:
            raise ConfigurationError(
                "Connection string must contain AccountName and AccountKey",
                "INVALID_CONNECTION_STRING",
                {"keys": sorted(settings)}
            )

        endpoint = settings.get('tableendpoint')
        if not endpoint and settings.get('endpointsuffix'):
            protocol = settings.get('defaultendpointsprotocol', 'https')
            endpoint = f"{protocol}://{account_name}.table.{settings['endpointsuffix']}"

        return cls(account_name=account_name, account_key=account_key, endpoint=endpoint)


def parse_connection_string(connection_string: str) -> Dict[str, str]:
    """
    Split ``Key=Value;Key=Value`` into a dict with lower-cased keys.

    Values may themselves contain ``=`` (base64 padding).
    """
    if not connection_string or not connection_string.strip():
        raise ConfigurationError("Connection string cannot be empty", "INVALID_CONNECTION_STRING")

    settings: Dict[str, str] = {}
    for segment in connection_string.strip().split(';'):
        if not segment.strip():
            continue
        key, separator, value = segment.partition('=')
        if not separator or not key.strip():
            raise ConfigurationError(
                f"Malformed connection string segment: {segment!r}",
                "INVALID_CONNECTION_STRING"
            )
        settings[key.strip().lower()] = value.strip()
    return settings


def configure_logging(config: LoggingConfig) -> logging.Logger:
    """
    Apply logging settings to the SDK logger namespace.

    A stream handler is attached only if the namespace has none yet.

    Returns:
        logging.Logger: The ``sharedkey_sdk`` logger
    """
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(config.level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(config.format))
        logger.addHandler(handler)
    return logger


def load_config(
    config_file: Optional[Union[str, Path]] = None,
    connection_string: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None
) -> SharedKeyConfig:
    """
    Load configuration from the first available source: explicit file,
    explicit connection string, then environment.
    """
    if config_file:
        return SharedKeyConfig.from_file(config_file)
    if connection_string:
        return SharedKeyConfig.from_connection_string(connection_string)
    return SharedKeyConfig.from_env(environ)


def validate_config(config: SharedKeyConfig) -> SharedKeyCredential:
    """
    Check that the configured key decodes.

    Raises:
        ConfigurationError: If the credential cannot be built
    """
    try:
        return config.to_credential()
    except InvalidCredentialError as e:
        raise ConfigurationError(f"Invalid account key: {e.message}", "INVALID_CREDENTIAL", e.details) from e
