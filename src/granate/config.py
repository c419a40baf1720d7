from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

from granate import log

DEFAULT_USER_AGENT = "granate"


class GranateConfig(BaseModel):
    """Settings shared by the annotations of one schema build.

    Attributes:
        user_agent: Value of the ``User-Agent`` header seeded into every type's REST request defaults.
        timeout: Timeout in seconds for outbound REST requests.
        list_length: Number of items generated for mocked list fields.
        locale: Faker locale used by mock generators.
        seed: Faker seed, for reproducible mock values.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    user_agent: str = Field(DEFAULT_USER_AGENT, alias="userAgent", min_length=1)
    timeout: float = Field(30.0, gt=0)
    list_length: int = Field(2, alias="listLength", ge=0)
    locale: str | None = None
    seed: int | None = None


def load_config(config_path: Path | None) -> GranateConfig:
    """Load the configuration from a YAML file.

    Args:
        config_path: Path to the YAML file, or None for the defaults

    Returns:
        The validated configuration

    Raises:
        ValueError: If the file content is not a mapping or does not validate
    """
    if config_path is None:
        return GranateConfig()

    with open(config_path, encoding="utf-8") as file:
        content: Any = yaml.safe_load(file)

    if content is None:
        content = {}
    if not isinstance(content, dict):
        raise ValueError(f"Configuration file '{config_path}' must contain a mapping")

    config = GranateConfig.model_validate(content)
    log.debug(f"Loaded configuration from {config_path}: {config}")
    return config
