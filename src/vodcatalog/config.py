# Settings - sites, paging and media formats, loaded from env and config.json.
# Created: 2026-10-19

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

DEFAULT_FORMATS = {
    "mp4", "mkv", "avi", "rmvb", "rm", "flv", "mov", "wmv", "m4v", "ts",
    "webm", "mpg", "mpeg", "3gp", "iso", "mp3", "flac", "wav", "m4a", "aac",
}


def get_config_dir() -> Path:
    """Get/create the config directory (``~/.vodcatalog`` by default)."""
    override = os.environ.get("VODCATALOG_CONFIG_DIR")
    d = Path(override) if override else Path.home() / ".vodcatalog"
    d.mkdir(parents=True, exist_ok=True)
    return d


class Site(BaseModel):
    """One configured AList instance."""

    name: str
    url: str
    searchable: bool = True
    search_api: str = "/api/fs/search"
    index_file: str | None = None  # local path or http(s) URL
    sort: bool | None = None  # None inherits Settings.sort

    @property
    def has_index_file(self) -> bool:
        return bool(self.index_file and self.index_file.strip())


class Settings(BaseSettings):
    """Application settings.

    Priority: constructor kwargs > ``VODCATALOG_*`` env vars > config.json.
    """

    model_config = SettingsConfigDict(
        env_prefix="VODCATALOG_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    sites: list[Site] = Field(default_factory=list)
    page_size: int = Field(default=100, ge=1)
    formats: set[str] = Field(default_factory=lambda: set(DEFAULT_FORMATS))
    sort: bool = True
    cache_dir: Path = Path(".cache")
    request_timeout: float = 15.0
    public_base_url: str = "http://127.0.0.1:5678"
    search_workers: int | None = Field(default=None, ge=1)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        config_file = get_config_dir() / "config.json"
        return (
            init_settings,
            env_settings,
            JsonConfigSettingsSource(settings_cls, json_file=config_file),
        )

    @classmethod
    def load(cls) -> Settings:
        return cls()

    def get_site(self, name: str) -> Site | None:
        for site in self.sites:
            if site.name == name:
                return site
        return None

    def sort_enabled(self, site: Site) -> bool:
        """Whether generated playlists for *site* are natural-sorted."""
        return self.sort if site.sort is None else site.sort

    def is_media_format(self, name: str) -> bool:
        """True when *name* has an extension listed in ``formats``.

        Case-sensitive; a leading dot alone (``.mp4``) is not an extension.
        """
        index = name.rfind(".")
        if index > 0:
            return name[index + 1 :] in self.formats
        return False

    def is_media_file(self, path: str) -> bool:
        return self.is_media_format(path.rsplit("/", 1)[-1])


@lru_cache
def get_settings() -> Settings:
    return Settings.load()
