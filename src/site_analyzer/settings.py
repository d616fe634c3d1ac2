# src/site_analyzer/settings.py
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .utils.stopwords import GENERIC_ALT_WORDS


class ContentSettings(BaseModel):
    """Thresholds used by the content uniqueness analyzer."""
    min_section_length: int = 20
    min_token_length: int = 4
    thin_words: int = 300
    substantial_words: int = 1000
    duplicate_threshold: float = 0.70
    medium_threshold: float = 0.50
    noise_floor: float = 0.30
    key_phrase_count: int = 10


class AnalyzerSettings(BaseModel):
    """
    Explicit configuration for one analysis run.

    Every path is resolved against `project_root`, so the loader, the route
    builder and the report writer never depend on the working directory.
    """
    project_root: Path
    pages_dir: str = "src/pages"
    components_dir: str = "src/components"
    page_extension: str = ".astro"
    exclude_prefix: str = "_"
    index_name: str = "index"

    image_components: List[str] = Field(default_factory=lambda: ["optimizedimage", "image", "picture"])
    generic_alt_words: List[str] = Field(default_factory=lambda: sorted(GENERIC_ALT_WORDS))
    # None means: use the built-in English stop word list
    stopwords: Optional[List[str]] = None

    content: ContentSettings = Field(default_factory=ContentSettings)
    console_limit: int = 10
    reports: Dict[str, str] = Field(default_factory=dict)

    @property
    def pages_path(self) -> Path:
        return self.project_root / self.pages_dir

    @property
    def components_path(self) -> Path:
        return self.project_root / self.components_dir

    def report_path(self, analyzer: str, default_name: str) -> Path:
        return self.project_root / self.reports.get(analyzer, default_name)

    @classmethod
    def from_config(cls, project_root: Path, section: Optional[Dict[str, Any]]) -> "AnalyzerSettings":
        """Builds settings from the 'analyzer' section of the application config."""
        data = dict(section or {})
        data["project_root"] = Path(project_root)
        return cls.model_validate(data)
