# src/recall/extractors/html.py
"""HTML extractor - converts HTML to markdown for LLM consumption.

Requires: pip install recall-rag[html]
"""

from bs4 import BeautifulSoup
from markdownify import markdownify

from recall.extractors.base import TextExtractor


class HTMLExtractor(TextExtractor):
    """Clean HTML and convert it to markdown.

    Scripts, styles and navigation elements are removed with their content
    before conversion. Runs of blank lines are collapsed to one.
    """

    CONTENT_TYPES = frozenset({"text/html", "application/xhtml+xml"})

    # Tags to remove entirely (including their content)
    REMOVE_TAGS = ["script", "style", "nav", "footer", "header", "aside", "noscript"]

    def extract(self, data: bytes, filename: str | None = None) -> str:
        soup = BeautifulSoup(data, "html.parser")
        for tag in soup(self.REMOVE_TAGS):
            tag.decompose()
        md_text = markdownify(str(soup), heading_style="ATX")
        return self._clean_markdown(md_text).strip()

    @staticmethod
    def _clean_markdown(text: str) -> str:
        cleaned = []
        prev_blank = False
        for line in text.split("\n"):
            is_blank = not line.strip()
            if is_blank and prev_blank:
                continue
            cleaned.append(line.rstrip())
            prev_blank = is_blank
        return "\n".join(cleaned)
