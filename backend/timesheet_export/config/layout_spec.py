"""
Layout registry - read config/layouts.yaml

Responsibilities:
- map each layout (default/csc/preformatted) to its print template
- name the transmittal (cover sheet) template
- provide filename labels per period

Usage:
    spec = load_layouts()
    spec.template_for("csc")          # "print/csc.html.j2"
    spec.transmittal_template         # "print/transmittal.html.j2"
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

DEFAULT_LAYOUTS_PATH = Path(__file__).with_name("layouts.yaml")


class LayoutEntry(BaseModel):
    """Print template for one layout"""
    template: str
    description: str = ""


class LayoutSpec(BaseModel):
    """Structured form of layouts.yaml"""
    schema_version: str
    layouts: dict[str, LayoutEntry] = Field(default_factory=dict)
    transmittal_template: str
    period_labels: dict[str, str] = Field(default_factory=dict)

    def get_layout(self, layout: str) -> LayoutEntry:
        try:
            return self.layouts[layout]
        except KeyError:
            raise KeyError(f"No template registered for layout: {layout}") from None

    def template_for(self, layout: str) -> str:
        return self.get_layout(layout).template

    def label_for(self, period: str) -> str | None:
        """Fixed filename label, None where the label is computed"""
        return self.period_labels.get(period)


class SpecLoader:
    """Cached layout registry loader"""

    @classmethod
    @lru_cache(maxsize=4)
    def load(cls, spec_path: str | Path = DEFAULT_LAYOUTS_PATH) -> LayoutSpec:
        path = Path(spec_path)
        if not path.exists():
            raise FileNotFoundError(f"Layout registry not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        return LayoutSpec(**data)

    @classmethod
    def reload(cls, spec_path: str | Path = DEFAULT_LAYOUTS_PATH) -> LayoutSpec:
        """Drop the cache and load again"""
        cls.load.cache_clear()
        return cls.load(spec_path)


def load_layouts(spec_path: str | Path | None = None) -> LayoutSpec:
    """Load the layout registry"""
    return SpecLoader.load(spec_path or DEFAULT_LAYOUTS_PATH)
