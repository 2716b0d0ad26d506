"""Turn raw HTML into the text, title and links the analysis needs.

Script/style bodies, comments and boilerplate elements are stripped with
regexes first so the parser and the AI see less noise.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

from product_counter.models import ScrapedPage


def clean_html(raw_html: str) -> str:
    """Strip script/style bodies, boilerplate elements, comments, and whitespace."""
    text = raw_html
    text = re.sub(r"<script[^>]*>.*?</script>", "", text, flags=re.DOTALL | re.IGNORECASE)
    text = re.sub(r"<style[^>]*>.*?</style>", "", text, flags=re.DOTALL | re.IGNORECASE)
    text = re.sub(r"<!--.*?-->", "", text, flags=re.DOTALL)
    # nav and footer stay: category links live there, but their text is noise
    text = re.sub(r"<iframe[^>]*>.*?</iframe>", "", text, flags=re.DOTALL | re.IGNORECASE)
    text = re.sub(r"<noscript[^>]*>.*?</noscript>", "", text, flags=re.DOTALL | re.IGNORECASE)
    text = re.sub(r"\s+", " ", text)
    text = re.sub(r">\s*<", ">\n<", text)
    return text.strip()


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def extract_title(soup: BeautifulSoup) -> str:
    if soup.title and soup.title.string:
        return soup.title.string.strip()
    h1 = soup.find("h1")
    return h1.get_text(strip=True) if h1 else ""


def extract_links(soup: BeautifulSoup) -> list[str]:
    """All href values of anchors, in document order, without duplicates."""
    hrefs = [a["href"].strip() for a in soup.find_all("a", href=True)]
    return list(dict.fromkeys(h for h in hrefs if h and not h.startswith(("#", "javascript:", "mailto:", "tel:"))))


def extract_text(soup: BeautifulSoup) -> str:
    """Visible text without nav/footer/header boilerplate, one block per line."""
    for tag in soup.find_all(["nav", "footer", "header", "form"]):
        tag.decompose()
    lines = (line.strip() for line in soup.get_text(separator="\n").splitlines())
    return "\n".join(line for line in lines if line)


def parse_page(raw_html: str, url: str) -> ScrapedPage:
    """Build a ScrapedPage from raw HTML. Links are taken before boilerplate is dropped."""
    soup = _soup(clean_html(raw_html))
    title = extract_title(soup)
    links = extract_links(soup)
    text = extract_text(soup)
    return ScrapedPage(url=url, title=title, text=text, links=links)


def truncate(text: str, max_chars: int) -> str:
    """Cut text to max_chars, preferring the last line break inside the limit."""
    if len(text) <= max_chars:
        return text
    cut = text[:max_chars]
    newline = cut.rfind("\n")
    if newline > max_chars // 2:
        cut = cut[:newline]
    return cut
