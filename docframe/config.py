"""
Data source settings.

Settings come either from the environment (``.env`` files included) or from
the JSON document a host application stores for a data source instance.
"""

import json
import os
from typing import Any, Dict, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from docframe.adapters.mongodb.uri import generate_mongo_uri
from docframe.core.errors import SettingsError

ENV_VARS = {
    "uri": "MONGO_URI",
    "username": "MONGO_USERNAME",
    "password": "MONGO_PASSWORD",
    "database": "MONGO_DATABASE",
    "server_selection_timeout_ms": "DOCFRAME_SERVER_SELECTION_TIMEOUT_MS",
    "connect_timeout_ms": "DOCFRAME_CONNECT_TIMEOUT_MS",
    "query_timeout": "DOCFRAME_QUERY_TIMEOUT",
    "pool_max_idle_seconds": "DOCFRAME_POOL_MAX_IDLE_SECONDS",
    "require_existing_collection": "DOCFRAME_REQUIRE_EXISTING_COLLECTION",
    "log_level": "DOCFRAME_LOG_LEVEL",
}

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class DataSourceSettings(BaseModel):
    """Configuration of one MongoDB data source."""

    model_config = ConfigDict(extra="ignore")

    uri: str = "localhost:27017"
    username: str = ""
    password: str = ""
    database: str = ""
    server_selection_timeout_ms: int = 5000
    connect_timeout_ms: int = 5000
    query_timeout: Optional[float] = None
    pool_max_idle_seconds: float = 300.0
    require_existing_collection: bool = True
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def connection_uri(self) -> str:
        return generate_mongo_uri(self.uri, self.username, self.password)

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "DataSourceSettings":
        """
        Read settings from environment variables.

        Values from a ``.env`` file are loaded first without overriding the
        process environment.
        """
        load_dotenv(dotenv_path)
        values = {
            field: os.environ[name] for field, name in ENV_VARS.items() if os.getenv(name)
        }
        try:
            return cls(**values)
        except ValidationError as e:
            raise SettingsError(f"invalid environment settings: {e}") from e

    @classmethod
    def from_json(
        cls,
        json_data: Union[str, bytes, Dict[str, Any]],
        secure_json_data: Optional[Dict[str, str]] = None,
    ) -> "DataSourceSettings":
        """
        Build settings from a stored instance configuration.

        Args:
            json_data: Plain options (``uri``, ``username``, ``database``...)
            secure_json_data: Decrypted secrets; only ``password`` is used

        Raises:
            SettingsError: If ``json_data`` is not a JSON object
        """
        try:
            if isinstance(json_data, (str, bytes, bytearray)):
                json_data = json.loads(json_data)
            if not isinstance(json_data, dict):
                raise ValueError(f"expected a JSON object, got {type(json_data).__name__}")
            values = {key: value for key, value in json_data.items() if value is not None}
            password = (secure_json_data or {}).get("password")
            if password:
                values["password"] = password
            return cls(**values)
        except (ValueError, ValidationError) as e:
            raise SettingsError(f"error unmarshalling JSON data: {e}") from e
