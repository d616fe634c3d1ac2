# src/site_analyzer/dom/models.py
import json
from typing import Optional, List, Any
from pydantic import BaseModel, Field
from .core import ElementNode, DOCUMENT_NODE


class StructuredDataBlock(BaseModel):
    """
    One embedded JSON-LD block. `data` is set when the block is strict JSON;
    `raw` is always kept so templated blocks can still be scanned.
    """
    raw: str
    data: Optional[Any] = None

    @property
    def is_valid(self) -> bool:
        return self.data is not None

    def as_text(self) -> str:
        """Textual representation used for substring checks."""
        if self.data is not None:
            return json.dumps(self.data)
        return self.raw


class ParsedDocument(BaseModel):
    """
    Represents one parsed page or component source.

    Holds the element tree (script and style already removed), the stripped
    frontmatter and the structured data blocks that were lifted out of the
    scripts before removal.
    """
    file: str = ""
    route: Optional[str] = None
    frontmatter: str = ""
    raw_text: str = ""
    root: ElementNode = Field(default_factory=lambda: ElementNode(tag=DOCUMENT_NODE))
    structured_data: List[StructuredDataBlock] = Field(default_factory=list)
    parse_error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.root.children

    @property
    def label(self) -> str:
        """Human-readable identity: the relative file path, falling back to the route."""
        return self.file or self.route or "<unknown>"

    def schema_text(self) -> str:
        """All structured data blocks of the page joined into one string."""
        return " ".join(block.as_text() for block in self.structured_data)
