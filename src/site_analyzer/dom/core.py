from typing import Dict, Iterable, Iterator, List, Optional
from pydantic import BaseModel, Field

# Pseudo tag names for nodes that are not elements
TEXT_NODE = "#text"
DOCUMENT_NODE = "#document"


class ElementNode(BaseModel):
    """
    A node in the simplified element tree.

    Elements and text share this one type; text nodes carry the tag
    `#text` and only a `text` value. For elements, `text` holds the
    whitespace-normalized text of all descendants.
    """
    tag: str
    attrs: Dict[str, str] = Field(default_factory=dict)
    text: str = ""
    children: List['ElementNode'] = Field(default_factory=list)

    @property
    def is_text(self) -> bool:
        return self.tag == TEXT_NODE

    @property
    def is_empty(self) -> bool:
        """Returns True if the element contains no text and no children."""
        return not self.text and not self.children

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Returns an attribute value, `default` when the attribute is absent."""
        return self.attrs.get(name, default)

    @property
    def elements(self) -> List['ElementNode']:
        """Direct children that are elements (text nodes skipped)."""
        return [child for child in self.children if not child.is_text]

    def iter(self, *tags: str) -> Iterator['ElementNode']:
        """
        Yields descendant elements in document order (pre-order).
        When tag names are given, only those elements are yielded.
        """
        wanted = set(tags)
        for child in self.children:
            if child.is_text:
                continue
            if not wanted or child.tag in wanted:
                yield child
            yield from child.iter(*tags)

    def find_all(self, *tags: str) -> List['ElementNode']:
        return list(self.iter(*tags))

    def find(self, *tags: str) -> Optional['ElementNode']:
        return next(self.iter(*tags), None)

    def text_content(self, exclude: Iterable[str] = ()) -> str:
        """
        Recomputes the descendant text while skipping whole subtrees whose tag
        is listed in `exclude` (e.g. nav, header, footer).
        """
        excluded = set(exclude)
        if not excluded:
            return self.text
        parts = []
        self._collect_text(excluded, parts)
        return normalize_whitespace("".join(parts))

    def _collect_text(self, excluded: set, parts: List[str]) -> None:
        for child in self.children:
            if child.is_text:
                parts.append(child.text)
            elif child.tag not in excluded:
                child._collect_text(excluded, parts)


def normalize_whitespace(text: str) -> str:
    return " ".join(text.split())
