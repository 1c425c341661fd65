"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, brewstrap.toml only contains
overrides. A fresh machine needs no config file at all.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from brewstrap.domain.retry import RetryPolicy

_TUNA = "https://mirrors.tuna.tsinghua.edu.cn"
_INSTALL_REPO = "https://raw.githubusercontent.com/Homebrew/install/HEAD"

# --- brewstrap.toml sections ---


class HomebrewEnvConfig(BaseModel):
    """[homebrew.env] section — mirror endpoints passed to every brew call."""

    model_config = {"frozen": True}

    brew_git_remote: str = Field(default=f"{_TUNA}/git/homebrew/brew.git", min_length=1)
    core_git_remote: str = Field(
        default=f"{_TUNA}/git/homebrew/homebrew-core.git", min_length=1
    )
    api_domain: str = Field(default=f"{_TUNA}/homebrew-bottles/api", min_length=1)
    bottle_domain: str = Field(default=f"{_TUNA}/homebrew-bottles", min_length=1)


class HomebrewConfig(BaseModel):
    """[homebrew] section."""

    model_config = {"frozen": True}

    prefix: Path = Path("/home/linuxbrew/.linuxbrew")
    manager: str = Field(default="brew", min_length=1)
    install_script: str = Field(default=f"{_INSTALL_REPO}/install.sh", min_length=1)
    uninstall_script: str = Field(default=f"{_INSTALL_REPO}/uninstall.sh", min_length=1)
    preset_intro: str = Field(
        default="https://docs.brew.sh/Homebrew-on-Linux#requirements", min_length=1
    )
    packages: list[str] = Field(default_factory=lambda: ["podman", "podman-compose"])
    env: HomebrewEnvConfig = Field(default_factory=HomebrewEnvConfig)


class PodmanConfig(BaseModel):
    """[podman] section."""

    model_config = {"frozen": True}

    docker_registry: str = Field(default="mirror.ccs.tencentyun.com", min_length=1)
    registry_prefix: str = Field(default="docker.io", min_length=1)
    insecure: bool = True
    service: str = Field(default="podman", min_length=1)
    formula: str = Field(default="podman", min_length=1)
    compose_command: str = Field(default="podman-compose", min_length=1)


class ServicesConfig(BaseModel):
    """[services] section."""

    model_config = {"frozen": True}

    start_status: str = "started"
    stop_status: str = "none"
    retry: RetryPolicy = Field(default_factory=RetryPolicy)


class RunnerConfig(BaseModel):
    """[runner] section. Timeouts in seconds; 0 disables."""

    model_config = {"frozen": True}

    timeout_seconds: float = Field(default=600.0, ge=0)
    stream_timeout_seconds: float = Field(default=3600.0, ge=0)
