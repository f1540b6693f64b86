from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from cfchat.exceptions import ConfigurationError
from cfchat.llm.shapes import DEFAULT_BASE_URL, DEFAULT_TEMPERATURE, EndpointShape

logger = logging.getLogger(__name__)

ACCOUNT_ID_ENV = "CLOUDFLARE_AI_ACCOUNT_ID"
API_KEY_ENV = "CLOUDFLARE_AI_API_KEY"
BASE_URL_ENV = "CLOUDFLARE_AI_BASE_URL"
HISTORY_FILE_ENV = "CFCHAT_HISTORY_FILE"

MISSING_CREDENTIALS = f"Missing {ACCOUNT_ID_ENV} or {API_KEY_ENV}."


@dataclass(frozen=True)
class ChatConfig:
    account_id: str
    api_key: str
    shape: EndpointShape
    model: str
    history_path: Path
    base_url: str = DEFAULT_BASE_URL
    temperature: float = DEFAULT_TEMPERATURE

    def __post_init__(self) -> None:
        if not self.account_id or not self.api_key:
            raise ConfigurationError(MISSING_CREDENTIALS)
        if not self.model:
            raise ConfigurationError("model must be a non-empty identifier")

    @staticmethod
    def from_env(
        shape: EndpointShape,
        *,
        model: Optional[str] = None,
        history_file: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ChatConfig":
        """
        Create a config from environment variables.

        Explicit ``model`` and ``history_file`` arguments win over the
        environment, which wins over the shape's defaults.
        """
        env = os.environ if environ is None else environ

        history = history_file or env.get(HISTORY_FILE_ENV, "").strip()
        base_url = env.get(BASE_URL_ENV, "").strip() or DEFAULT_BASE_URL
        if base_url != DEFAULT_BASE_URL:
            logger.debug(f"Using base URL override: {base_url}")

        return ChatConfig(
            account_id=env.get(ACCOUNT_ID_ENV, "").strip(),
            api_key=env.get(API_KEY_ENV, "").strip(),
            shape=shape,
            model=model or shape.default_model,
            history_path=Path(history).expanduser() if history else shape.default_history_file,
            base_url=base_url,
        )


__all__ = [
    "ACCOUNT_ID_ENV",
    "API_KEY_ENV",
    "BASE_URL_ENV",
    "HISTORY_FILE_ENV",
    "MISSING_CREDENTIALS",
    "ChatConfig",
]
