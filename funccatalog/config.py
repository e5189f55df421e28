"""
Settings for the function catalog.

Values come from FUNCCATALOG_* environment variables (a ``.env`` file is
loaded first when one is found) and can be overridden by CLI options.
"""

import os
import logging
from typing import Any, Dict, List, Mapping, Optional

from dotenv import load_dotenv, find_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from funccatalog.errors import ConfigurationError

load_dotenv(find_dotenv(usecwd=True))

logger = logging.getLogger(__name__)

ENV_PREFIX = "FUNCCATALOG_"

DEFAULT_ALLOW_LIST = ["add", "multiply"]
DEFAULT_MODULE = "funccatalog.sample_functions"


class CatalogSettings(BaseModel):
    """Configuration passed explicitly into the catalog builder."""
    allow_list: List[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOW_LIST),
        description="Function names eligible for the catalog"
    )
    param_prefix: str = Field(default="", description="Sigil prepended to parameter names")
    declaration_offset: int = Field(
        default=0,
        ge=0,
        description="Lines before the reflected start line to include in the source span"
    )
    indent: int = Field(default=4, ge=0, description="JSON indentation")
    module: str = Field(default=DEFAULT_MODULE, description="Import path of the module to catalog")

    class Config:
        frozen = True

    @field_validator('allow_list', mode='before')
    @classmethod
    def split_comma_separated(cls, v):
        """Accept ``"add,multiply"`` as well as a list."""
        if isinstance(v, str):
            return [name.strip() for name in v.split(",") if name.strip()]
        return v

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> "CatalogSettings":
        """
        Build settings from FUNCCATALOG_* variables.

        Args:
            environ: Mapping to read instead of ``os.environ``
            **overrides: Field values that win over the environment (None is ignored)

        Returns:
            CatalogSettings

        Raises:
            ConfigurationError: If a value fails validation
        """
        environ = os.environ if environ is None else environ

        values: Dict[str, Any] = {}
        for field_name in cls.model_fields:
            env_key = ENV_PREFIX + field_name.upper()
            if env_key in environ:
                values[field_name] = environ[env_key]
                logger.debug(f"Setting {field_name} from {env_key}")

        values.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid catalog settings: {e}") from e
