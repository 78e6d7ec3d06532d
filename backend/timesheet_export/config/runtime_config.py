"""
Runtime settings - read from a YAML file, overridable by environment

Responsibilities:
- timeouts for the renderer, the signing tool and capability probes
- signing tool options (timestamp service, location, signature field)
- storage locations (shared merge scratch, signing workspaces)
- batch export limits

Environment overrides use the ``TIMESHEETS_`` prefix and ``__`` as the
nested delimiter, e.g. ``TIMESHEETS_SIGNING__TIMESTAMP_URL``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource


class TimeoutConfig(BaseModel):
    """Timeouts (seconds)"""

    render_sec: int = 120
    sign_sec: int = 30
    probe_sec: int = 10


class SigningConfig(BaseModel):
    """Signing tool options"""

    # Explicit command line for the signer, e.g. "pyhanko" or
    # "/usr/bin/python3 -m pyhanko". Empty means detect at start-up.
    executable: str = ""
    timestamp_url: str | None = None
    location: str = "Philippines"
    reason: str | None = None
    certify: bool = False
    field_name: str = "employee-field"
    page: int = 1
    # pyhanko field boxes (x1,y1,x2,y2 in points) keyed by paper size
    coordinates: dict[str, str] = Field(
        default_factory=lambda: {
            "folio": "318,96,558,136",
            "legal": "318,132,558,172",
            "letter": "318,60,558,100",
            "a4": "306,64,546,104",
        }
    )


class StorageConfig(BaseModel):
    """Storage locations"""

    scratch_dir: Path = Path("storage/tmp")
    signing_dir: Path | None = None


class ExportLimitsConfig(BaseModel):
    """Batch size policy"""

    max_subjects: int = 100
    max_individual_subjects: int = 25


class RendererConfig(BaseModel):
    """Headless browser renderer"""

    browser_args: list[str] = Field(
        default_factory=lambda: ["--no-sandbox", "--disable-web-security"]
    )
    templates_dir: Path | None = None
    print_background: bool = True


class LoggingConfig(BaseModel):
    """Logging"""

    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class RuntimeConfig(BaseSettings):
    """Runtime settings (environment variables take precedence over YAML and kwargs)"""

    # layout registry override (defaults to the packaged layouts.yaml)
    layouts_path: Path | None = None

    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    signing: SigningConfig = Field(default_factory=SigningConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    export: ExportLimitsConfig = Field(default_factory=ExportLimitsConfig)
    renderer: RendererConfig = Field(default_factory=RendererConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "TIMESHEETS_",
        "env_nested_delimiter": "__",
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # environment first: values from the YAML file arrive as init kwargs
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """Load settings from a YAML file (missing file gives defaults)"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", data)

        # plain dicts so environment values merge into sections per key
        sections = {
            key: cls._extract(runtime_opts, key)
            for key in ("timeouts", "signing", "storage", "export", "renderer", "logging")
        }
        if runtime_opts.get("layouts_path"):
            sections["layouts_path"] = runtime_opts["layouts_path"]

        config = cls(**sections)

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """Flatten a section, unwrapping ``{default: value}`` entries"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            else:
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """Resolve relative paths against the directory of the YAML file"""
        if self.layouts_path and not self.layouts_path.is_absolute():
            self.layouts_path = (base_dir / self.layouts_path).resolve()
        if not self.storage.scratch_dir.is_absolute():
            self.storage.scratch_dir = (base_dir / self.storage.scratch_dir).resolve()
        if self.storage.signing_dir and not self.storage.signing_dir.is_absolute():
            self.storage.signing_dir = (base_dir / self.storage.signing_dir).resolve()
        templates_dir = self.renderer.templates_dir
        if templates_dir and not templates_dir.is_absolute():
            self.renderer.templates_dir = (base_dir / templates_dir).resolve()

    def ensure_dirs(self) -> None:
        """Create the shared scratch directory"""
        self.storage.scratch_dir.mkdir(parents=True, exist_ok=True)
        if self.storage.signing_dir:
            self.storage.signing_dir.mkdir(parents=True, exist_ok=True)


_config: RuntimeConfig | None = None

DEFAULT_CONFIG_PATH = Path("config/timesheets.yaml")


def get_config() -> RuntimeConfig:
    """Process-wide settings (lazily loaded)"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """Reload the process-wide settings"""
    global _config
    _config = RuntimeConfig.from_yaml(yaml_path or DEFAULT_CONFIG_PATH)
    return _config
