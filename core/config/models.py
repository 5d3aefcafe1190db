"""Configuration models for the cache gate and mapping engine."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

HashAlgorithm = Literal["md5", "sha1", "sha256", "sha512", "blake2b"]


class CacheConfig(BaseModel):
    """Settings consulted by the cache gate at invocation time."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    enabled: bool = True
    hash_algorithm: HashAlgorithm = "sha256"
    sidecar_suffix: str = ".fingerprint"
    directory_sidecar_name: str = ".fingerprint"

    @field_validator("sidecar_suffix", "directory_sidecar_name")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip() or "/" in value:
            raise ValueError("sidecar names must be non-empty and contain no path separator")
        return value


class MappingConfig(BaseModel):
    """Settings for reading rename dictionaries."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    dictionary_has_header: bool = True


class AppConfig(BaseModel):
    """Top-level configuration loaded from YAML."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    cache: CacheConfig = Field(default_factory=CacheConfig)
    mapping: MappingConfig = Field(default_factory=MappingConfig)
