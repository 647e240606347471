"""
Queue Configuration Model

One ConfigurationEntry per redriven queue. Entries are loaded from a JSON
array whose objects use PascalCase keys, e.g.:

    [
        {
            "Alias": "orders",
            "QueueUrl": "https://sqs.eu-west-1.amazonaws.com/123456789012/orders",
            "Region": "eu-west-1",
            "RedriveUrl": "https://api.example.com/orders",
            "UsePUT": true,
            "Timeout": 10000
        }
    ]
"""
import json
from datetime import timedelta
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from redrive.errors import ConfigurationError


class ConfigurationEntry(BaseModel):
    """
    Per-queue redrive configuration. Immutable once loaded.

    Attributes:
        alias: Human-readable queue name, used for logging only
        redrive_url: Absolute URL of the target HTTP endpoint
        use_get: Send a GET with message properties as query parameters
        use_put: Send a PUT (ignored when use_get or use_delete is set)
        use_delete: Send a DELETE (ignored when use_get is set)
        ignore_certificate_errors: Skip TLS validation for this endpoint
        timeout: Request timeout; transport default when absent
        aws_gateway_token: Sent as the x-api-key header
        auth_token: Sent verbatim as the Authorization header
        basic_auth_user_name: HTTP Basic user (needs basic_auth_password)
        basic_auth_password: HTTP Basic password (needs basic_auth_user_name)
        queue_url: Source queue URL
        region: AWS region of the source queue
        access_key: AWS access key id, falls back to the default credential chain
        secret_key: AWS secret access key
        service_url: Custom SQS endpoint (LocalStack, ElasticMQ)
        active: Inactive entries are not started
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    alias: str = Field(alias="Alias")
    redrive_url: str = Field(alias="RedriveUrl")

    use_get: bool = Field(default=False, alias="UseGET")
    use_put: bool = Field(default=False, alias="UsePUT")
    use_delete: bool = Field(default=False, alias="UseDelete")

    ignore_certificate_errors: bool = Field(default=False, alias="IgnoreCertificateErrors")
    timeout: Optional[timedelta] = Field(default=None, alias="Timeout")

    aws_gateway_token: Optional[str] = Field(default=None, alias="AwsGatewayToken")
    auth_token: Optional[str] = Field(default=None, alias="AuthToken")
    basic_auth_user_name: Optional[str] = Field(default=None, alias="BasicAuthUserName")
    basic_auth_password: Optional[str] = Field(default=None, alias="BasicAuthPassword")

    queue_url: Optional[str] = Field(default=None, alias="QueueUrl")
    region: Optional[str] = Field(default=None, alias="Region")
    access_key: Optional[str] = Field(default=None, alias="AccessKey")
    secret_key: Optional[str] = Field(default=None, alias="SecretKey")
    service_url: Optional[str] = Field(default=None, alias="ServiceUrl")
    active: bool = Field(default=True, alias="Active")

    @field_validator("timeout", mode="before")
    @classmethod
    def _timeout_from_milliseconds(cls, value: Union[int, float, str, timedelta, None]):
        # Bare numbers in configuration files are milliseconds
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return timedelta(milliseconds=value)
        return value

    @property
    def http_method(self) -> str:
        """HTTP method implied by the use_* flags (GET > DELETE > PUT > POST)."""
        if self.use_get:
            return "GET"
        if self.use_delete:
            return "DELETE"
        if self.use_put:
            return "PUT"
        return "POST"

    @property
    def timeout_seconds(self) -> Optional[float]:
        return self.timeout.total_seconds() if self.timeout is not None else None


_entries_adapter = TypeAdapter(list[ConfigurationEntry])


def load_configuration(path: Union[str, Path]) -> list[ConfigurationEntry]:
    """
    Load queue configuration entries from a JSON file.

    Args:
        path: Path to a JSON array of configuration objects

    Returns:
        Parsed entries, in file order

    Raises:
        ConfigurationError: If the file is missing, not JSON, or invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Configuration file {config_path} is not valid JSON: {e}") from e

    try:
        entries = _entries_adapter.validate_python(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e

    aliases = [entry.alias for entry in entries]
    duplicates = sorted({alias for alias in aliases if aliases.count(alias) > 1})
    if duplicates:
        raise ConfigurationError(f"Duplicate queue aliases in {config_path}: {', '.join(duplicates)}")

    return entries
