# truelens_extension/extractor.py
"""
Article extraction for the content script.

Everything here is a pure function of the page HTML: the container is
copied before non-content tags are removed, so repeated calls return the
same result.
"""
import copy
import logging
import re
from typing import Any, Callable, Dict, Optional

from bs4 import BeautifulSoup
from pydantic import BaseModel

logger = logging.getLogger(__name__)

# Checked in order, first match wins
ARTICLE_SELECTORS = [
    "article",
    "main",
    '[role="main"]',
    ".article-content",
    ".post-content",
    ".entry-content",
    ".content",
]
NON_CONTENT_TAGS = ["script", "style", "nav", "footer"]
MAX_ARTICLE_CHARS = 5000
# Pages with less text than this are not announced as articles
MIN_DETECTED_CHARS = 100


class PageMetadata(BaseModel):
    title: str = ""
    url: str = ""
    description: str = ""


def _parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def _find_container(soup: BeautifulSoup):
    for selector in ARTICLE_SELECTORS:
        element = soup.select_one(selector)
        if element is not None:
            return element
    return soup.body or soup


def clean_text(text: str) -> str:
    text = re.sub(r"\s+", " ", text)
    text = re.sub(r"\n+", "\n", text)
    return text.strip()[:MAX_ARTICLE_CHARS]


def extract_article_text(html: str) -> str:
    container = copy.copy(_find_container(_parse(html)))
    for tag in container.find_all(NON_CONTENT_TAGS):
        tag.decompose()
    return clean_text(container.get_text())


def extract_metadata(html: str, url: str = "") -> PageMetadata:
    soup = _parse(html)
    title = soup.title.get_text() if soup.title else ""
    description_tag = soup.select_one('meta[name="description"]')
    description = description_tag.get("content", "") if description_tag else ""
    return PageMetadata(title=title or "", url=url or "", description=description or "")


class ArticleExtractor:
    """The content script's view of one loaded page."""

    def __init__(self, html: str, url: str = "",
                 send_message: Optional[Callable[[Dict[str, Any]], Any]] = None):
        self.html = html
        self.url = url
        self.send_message = send_message

    def get_article_text(self) -> Dict[str, Any]:
        return {
            "text": extract_article_text(self.html),
            "metadata": extract_metadata(self.html, self.url).model_dump(),
            "success": True,
        }

    def detection_message(self) -> Optional[Dict[str, Any]]:
        """Message sent to the background worker on page load, if the page looks like an article."""
        text = extract_article_text(self.html)
        if len(text) <= MIN_DETECTED_CHARS:
            logger.debug(f"No article detected on {self.url} ({len(text)} chars)")
            return None
        return {"action": "articleDetected", "text": text}

    def handle_message(self, request: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        action = (request or {}).get("action")
        if action == "getArticleText":
            return self.get_article_text()
        if action == "openSidePanel":
            # The background worker owns the panel window
            if self.send_message is not None:
                self.send_message({"action": "openSidePanel"})
            return {"success": True}
        return None
