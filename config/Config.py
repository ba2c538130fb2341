# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-08
# Updated: 2026-03-02
# Description: Config
# -----------------------------------------------------------------------------

import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv, find_dotenv

# Load .env once globally
load_dotenv(find_dotenv(usecwd=True), override=False)


@dataclass(frozen=True)
class Config:
    # Google Gemini (primary when configured)
    gemini_api_key: str = ""
    gemini_chat_model: str = "gemini-2.0-flash"
    gemini_embed_model: str = "text-embedding-004"

    # OpenAI direct
    openai_api_key: str = ""
    openai_base_url: str = ""
    openai_chat_model: str = "gpt-4o-mini"
    openai_embed_model: str = "text-embedding-3-small"

    # Chroma Vector Database (cloud) or local persistent path
    chroma_api_key: str = ""
    chroma_tenant: str = ""
    chroma_database: str = ""
    chroma_path: str = ""

    # Relational member store
    database_url: str = "sqlite:///./data/members.db"

    # ---- Single source of truth: field_name -> ENV VAR NAME ----
    ENV_VARS = {
        # Gemini
        "gemini_api_key": "GEMINI_API_KEY",
        "gemini_chat_model": "GEMINI_CHAT_MODEL",
        "gemini_embed_model": "GEMINI_EMBED_MODEL",

        # OpenAI direct
        "openai_api_key": "OPENAI_API_KEY",
        "openai_base_url": "OPENAI_BASE_URL",      # e.g. https://api.openai.com/v1
        "openai_chat_model": "OPENAI_CHAT_MODEL",
        "openai_embed_model": "OPENAI_EMBED_MODEL",

        # Chroma
        "chroma_api_key": "CHROMA_API_KEY",
        "chroma_tenant": "CHROMA_TENANT",
        "chroma_database": "CHROMA_DATABASE",
        "chroma_path": "CHROMA_PATH",

        # Members database
        "database_url": "DATABASE_URL",
    }

    # Convenient *groups* for use in tests / health checks
    GEMINI_ENV_VARS = ("GEMINI_API_KEY",)
    OPENAI_ENV_VARS = ("OPENAI_API_KEY",)
    CHROMA_CLOUD_ENV_VARS = (
        "CHROMA_API_KEY",
        "CHROMA_TENANT",
        "CHROMA_DATABASE",
    )

    # Fixed precedence order for generative backends
    PROVIDER_PRECEDENCE = ("gemini", "openai")

    @staticmethod
    def from_env() -> "Config":
        """Build Config object from environment variables, keeping defaults for unset ones."""
        kwargs = {}
        for field_name, env_name in Config.ENV_VARS.items():
            value = (os.getenv(env_name) or "").strip()
            if value:
                kwargs[field_name] = value
        return Config(**kwargs)

    def configured_providers(self) -> List[str]:
        """
        Provider names with credentials present, in precedence order.
        An empty list means no generative backend is usable.
        """
        present = {
            "gemini": bool(self.gemini_api_key),
            "openai": bool(self.openai_api_key),
        }
        return [name for name in self.PROVIDER_PRECEDENCE if present[name]]

    @property
    def chroma_cloud_configured(self) -> bool:
        return bool(self.chroma_api_key and self.chroma_tenant and self.chroma_database)

    @property
    def vector_store_configured(self) -> bool:
        return self.chroma_cloud_configured or bool(self.chroma_path)

    def summary(self) -> dict:
        """Return a safe, non-sensitive summary for logging."""
        return {
            "providers": self.configured_providers(),
            "gemini_chat_model": self.gemini_chat_model,
            "gemini_embed_model": self.gemini_embed_model,
            "openai_base_url": self.openai_base_url or None,
            "openai_chat_model": self.openai_chat_model,
            "openai_embed_model": self.openai_embed_model,
            "chroma_mode": (
                "cloud" if self.chroma_cloud_configured
                else "local" if self.chroma_path
                else "disabled"
            ),
            "chroma_tenant": self.chroma_tenant or None,
            "chroma_database": self.chroma_database or None,
            "database": self.database_url.split("://", 1)[0],
        }
