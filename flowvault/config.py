import secrets
import warnings
from typing import Literal, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_ignore_empty=True, extra="ignore"
    )
    PROJECT_NAME: str = "flowvault"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    # Seals vault stores at rest. Stores sealed with one key cannot be
    # unsealed with another, so pin this outside of local development.
    SECRET_KEY: str = secrets.token_urlsafe(32)

    LOG_LEVEL: str = "INFO"

    # Flow id used for nodes whose definition has no "flow" entry
    DEFAULT_FLOW_ID: str = "default"

    # Optional path to a flow definition loaded by `flowvault run`
    FLOW_FILE: Optional[str] = None

    def _check_default_secret(self, var_name: str, value: Optional[str]) -> None:
        if value == "changethis":
            message = (
                f'The value of {var_name} is "changethis", '
                "for security, please change it, at least for deployments."
            )
            if self.ENVIRONMENT == "local":
                warnings.warn(message, stacklevel=1)
            else:
                raise ValueError(message)

    @model_validator(mode="after")
    def _enforce_non_default_secrets(self) -> Self:
        self._check_default_secret("SECRET_KEY", self.SECRET_KEY)
        return self


settings = Settings()  # type: ignore
