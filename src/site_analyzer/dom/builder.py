# src/site_analyzer/dom/builder.py
import logging
import re
import json
from typing import List, Optional, Tuple
from bs4 import BeautifulSoup, Tag, NavigableString, Comment, Declaration, Doctype, ProcessingInstruction

from .models import ParsedDocument, StructuredDataBlock
from .core import ElementNode, TEXT_NODE, DOCUMENT_NODE, normalize_whitespace
from ..model import SourceDocument

logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.S | re.M)
JSONLD_TYPE_RE = re.compile(r"application/ld\+json", re.IGNORECASE)

# Never content
STRIPPED_TAGS = ["script", "style"]

# String subclasses that are markup, not text
SKIPPED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)


def split_frontmatter(text: str) -> Tuple[str, str]:
    """
    Splits a leading '---' delimited frontmatter block from the markup.

    Returns:
        Tuple[str, str]: (frontmatter body, remaining markup). The frontmatter
                         is empty when the source does not start with one.
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return "", text
    return match.group(1), text[match.end():]


class DOMBuilder:
    """
    Builder responsible for parsing raw page sources into a ParsedDocument.

    Uses the forgiving 'html.parser' backend of BeautifulSoup, which keeps
    unknown (component-style) tags as ordinary elements with their attributes.
    Tag and attribute names come out lower-cased.
    """

    def parse_doc(self, source: SourceDocument) -> ParsedDocument:
        """Parses a loaded source document. Never raises."""
        return self.parse_markup(source.text, file=source.relative_path, route=source.route)

    def parse_markup(self, text: str, file: str = "", route: Optional[str] = None) -> ParsedDocument:
        """
        Parses raw source text into a ParsedDocument.

        Args:
            text (str): The raw file content, frontmatter included.
            file (str): Relative path used to identify the document in reports.
            route (Optional[str]): The route the page maps to (None for components).

        Returns:
            ParsedDocument: The element tree with script/style removed. On an
                            irrecoverable parse failure, an empty document
                            with `parse_error` set.
        """
        if not text:
            return ParsedDocument(file=file, route=route)

        try:
            clean_text = text.replace('\ufeff', '')
            frontmatter, markup = split_frontmatter(clean_text)
            soup = BeautifulSoup(markup, 'html.parser', multi_valued_attributes=None)

            # Lift JSON-LD out before the scripts are dropped
            structured_data = self._extract_structured_data(soup, file)

            for tag in soup.find_all(STRIPPED_TAGS):
                tag.decompose()

            root = self._build_tree(soup, tag_name=DOCUMENT_NODE)
        except Exception as e:
            logger.warning(f"Could not parse {file or 'markup'}: {e}")
            return ParsedDocument(file=file, route=route, raw_text=text, parse_error=str(e))

        return ParsedDocument(
            file=file,
            route=route,
            frontmatter=frontmatter,
            raw_text=text,
            root=root,
            structured_data=structured_data,
        )

    def _extract_structured_data(self, soup: BeautifulSoup, file: str) -> List[StructuredDataBlock]:
        """
        Collects every JSON-LD script. Blocks that are not strict JSON
        (template literals, expressions) are kept as raw text.
        """
        blocks = []
        for script in soup.find_all('script', attrs={'type': JSONLD_TYPE_RE}):
            raw = (script.string or script.get_text() or "").strip()
            if not raw:
                # Astro: <script type="application/ld+json" set:html={JSON.stringify(schema)} />
                raw = (script.get('set:html') or "").strip()
            if not raw:
                continue

            try:
                data = json.loads(raw)
            except (json.JSONDecodeError, TypeError):
                logger.debug(f"Keeping non-JSON structured data block in {file} as raw text")
                data = None
            blocks.append(StructuredDataBlock(raw=raw, data=data))
        return blocks

    def _build_tree(self, tag: Tag, tag_name: Optional[str] = None) -> ElementNode:
        """
        Recursively builds the simplified element tree from a BeautifulSoup Tag.
        """
        node, _ = self._build_node(tag, tag_name)
        return node

    def _build_node(self, tag: Tag, tag_name: Optional[str] = None) -> Tuple[ElementNode, str]:
        """
        Returns the node together with its raw descendant text. Strings are
        concatenated as-is, like the DOM's textContent, so inline markup
        (`Hel<b>lo</b>`, `<a>team</a>,`) does not split words.
        """
        children = []
        raw_parts = []
        for child in tag.children:
            if isinstance(child, Tag):
                node, raw = self._build_node(child)
                children.append(node)
                raw_parts.append(raw)
            elif isinstance(child, NavigableString) and not isinstance(child, SKIPPED_STRINGS):
                value = str(child)
                # Whitespace between blocks still separates words
                children.append(ElementNode(tag=TEXT_NODE, text=value if value.strip() else " "))
                raw_parts.append(value)

        if all(child.is_text and not child.text.strip() for child in children):
            children = []

        raw_text = "".join(raw_parts)
        attrs = {str(k).lower(): _attr_value(v) for k, v in (tag.attrs or {}).items()}

        node = ElementNode(
            tag=(tag_name or tag.name or "").lower(),
            attrs=attrs,
            text=normalize_whitespace(raw_text),
            children=children,
        )
        return node, raw_text


def _attr_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value)
    return str(value)
