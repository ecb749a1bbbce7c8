"""Website enrichment utilities for filling in listing contact data."""

from __future__ import annotations

import logging
import random
import re
import time
from collections import defaultdict
from typing import Any, Dict, List, Optional, Set, Tuple
from urllib import robotparser
from urllib.parse import urljoin, urlparse, urlunparse

import requests
from bs4 import BeautifulSoup

from listing.extraction.fields import extract_emails, extract_phone_numbers

logger = logging.getLogger(__name__)

USER_AGENT = "StorefrontListingBot/1.0"
REQUEST_TIMEOUT = 10
REQUEST_DELAY_RANGE = (1.0, 2.0)
MAX_PAGES_PER_DOMAIN = 3
SOCIAL_HOSTS = {
    "facebook": ("facebook.com", "fb.com"),
    "instagram": ("instagram.com", "instagr.am"),
    "yelp": ("yelp.com",),
    "tiktok": ("tiktok.com",),
    "x": ("twitter.com", "x.com"),
}
CONTACT_PATHS = ("/contact", "/contact-us", "/about", "/about-us", "/location", "/locations")
ABOUT_KEYWORDS = ("about", "story")


def sanitize_website(raw_url: str) -> Optional[str]:
    """Normalise an OCR or Places website into an absolute https URL."""
    url = (raw_url or "").strip()
    if not url:
        return None

    parsed = urlparse(url, scheme="https")
    if not parsed.netloc:
        parsed = urlparse(f"https://{url}")
    if not parsed.netloc or "." not in parsed.netloc:
        return None

    path = parsed.path or "/"
    if not path.startswith("/"):
        path = f"/{path}"
    return urlunparse(parsed._replace(path=path, fragment="", query=""))


def fetch_page(session: requests.Session, url: str) -> Optional[Tuple[str, BeautifulSoup]]:
    """Fetch a URL and return the final URL and parsed HTML, or None."""
    try:
        response = session.get(url, timeout=REQUEST_TIMEOUT, allow_redirects=True)
    except requests.RequestException as exc:
        logger.warning("Failed to fetch %s: %s", url, exc)
        return None
    content_type = response.headers.get("Content-Type", "").lower()
    if response.status_code >= 400 or "text/html" not in content_type:
        logger.debug("Skipping %s (status=%s, content-type=%s)", url, response.status_code, content_type)
        return None
    return response.url, BeautifulSoup(response.text, "html.parser")


def extract_social_links(soup: BeautifulSoup, base_url: str) -> Dict[str, List[str]]:
    results: Dict[str, Set[str]] = defaultdict(set)
    for anchor in soup.find_all("a", href=True):
        parsed = urlparse(urljoin(base_url, anchor["href"].strip()))
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            continue
        host = parsed.netloc.lower()
        for platform, hosts in SOCIAL_HOSTS.items():
            if any(host == allowed or host.endswith(f".{allowed}") for allowed in hosts):
                results[platform].add(urlunparse(("https", parsed.netloc, parsed.path.rstrip("/"), "", "", "")))
    return {platform: sorted(links) for platform, links in results.items()}


def _mailto_addresses(soup: BeautifulSoup) -> List[str]:
    found = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if href.lower().startswith("mailto:"):
            address = href.split(":", 1)[1].split("?")[0].strip()
            if address:
                found.append(address)
    return found


def _tel_numbers(soup: BeautifulSoup) -> List[str]:
    found = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if href.lower().startswith("tel:"):
            found.extend(extract_phone_numbers(href.split(":", 1)[1]))
    return found


def _summarize(text: str, max_length: int = 320) -> Optional[str]:
    cleaned = re.sub(r"\s+", " ", text or "").strip()
    if not cleaned:
        return None
    if len(cleaned) <= max_length:
        return cleaned
    truncated = cleaned[: max_length + 1]
    last_space = truncated.rfind(" ")
    if last_space > 0:
        truncated = truncated[:last_space]
    return f"{truncated.rstrip('. ')}..."


def _append_unique(target: List[str], values: List[str]) -> None:
    for value in values:
        if value not in target:
            target.append(value)


class SiteEnricher:
    """Crawl a handful of pages on a business website for contact details."""

    def __init__(
        self,
        website: str,
        *,
        session: Optional[requests.Session] = None,
        max_pages: int = MAX_PAGES_PER_DOMAIN,
        delay_range: Tuple[float, float] = REQUEST_DELAY_RANGE,
    ) -> None:
        root_url = sanitize_website(website)
        if not root_url:
            raise ValueError("A valid website URL is required for enrichment")

        self.root_url = root_url
        parsed = urlparse(root_url)
        self.domain = parsed.netloc.lower().removeprefix("www.")
        self.max_pages = max_pages
        self.delay_range = delay_range
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)
        self.session.headers.setdefault("Accept", "text/html,application/xhtml+xml")
        self._robots = self._load_robot_rules(parsed)

    @staticmethod
    def _load_robot_rules(parsed_url) -> Optional[robotparser.RobotFileParser]:
        robots_url = urlunparse((parsed_url.scheme, parsed_url.netloc, "/robots.txt", "", "", ""))
        rules = robotparser.RobotFileParser()
        rules.set_url(robots_url)
        try:
            rules.read()
            return rules
        except Exception as exc:  # noqa: BLE001
            logger.debug("Unable to read robots.txt from %s: %s", robots_url, exc)
            return None

    def _is_same_domain(self, url: str) -> bool:
        netloc = urlparse(url).netloc.lower()
        return not netloc or netloc.removeprefix("www.") == self.domain

    def _is_allowed(self, url: str) -> bool:
        if not self._robots:
            return True
        allowed = self._robots.can_fetch(USER_AGENT, url)
        if not allowed:
            logger.info("Robots.txt disallows %s", url)
        return allowed

    def _contact_links(self, base_url: str, soup: BeautifulSoup) -> List[str]:
        links: List[str] = []
        for anchor in soup.find_all("a", href=True):
            absolute = urljoin(base_url, anchor["href"].strip())
            if not self._is_same_domain(absolute):
                continue
            parsed = urlparse(absolute)
            if any(path in parsed.path.lower() for path in CONTACT_PATHS):
                _append_unique(links, [urlunparse((parsed.scheme, parsed.netloc, parsed.path, "", "", ""))])
        return links

    def enrich(self) -> Dict[str, Any]:
        queue: List[str] = [self.root_url]
        visited: Set[str] = set()
        emails: List[str] = []
        phones: List[str] = []
        socials: Dict[str, Set[str]] = defaultdict(set)
        about_summary: Optional[str] = None

        while queue and len(visited) < self.max_pages:
            url = queue.pop(0)
            if not self._is_same_domain(url) or not self._is_allowed(url):
                continue
            if visited:
                time.sleep(random.uniform(*self.delay_range))

            fetched = fetch_page(self.session, url)
            if not fetched:
                continue
            final_url, soup = fetched
            if final_url in visited:
                continue
            visited.add(final_url)

            text = soup.get_text(" ", strip=True)
            _append_unique(emails, extract_emails(text) + _mailto_addresses(soup))
            _append_unique(phones, extract_phone_numbers(text) + _tel_numbers(soup))
            for platform, links in extract_social_links(soup, final_url).items():
                socials[platform].update(links)

            if not about_summary and any(keyword in urlparse(final_url).path.lower() for keyword in ABOUT_KEYWORDS):
                about_summary = _summarize(text)

            for link in self._contact_links(final_url, soup):
                if link not in visited and link not in queue:
                    queue.append(link)

        logger.info("Crawled %d pages on %s: %d emails, %d phones", len(visited), self.domain, len(emails), len(phones))
        return {
            "website": self.root_url,
            "pages_crawled": len(visited),
            "emails": emails,
            "phones": phones,
            "socials": {platform: sorted(links) for platform, links in socials.items()},
            "about_summary": about_summary,
        }

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "SiteEnricher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: D401
        self.close()


def enrich_website(website: Optional[str], session: Optional[requests.Session] = None) -> Dict[str, Any]:
    """Best-effort enrichment; any failure yields an empty dict."""
    if not website:
        return {}
    try:
        with SiteEnricher(website, session=session) as enricher:
            result = enricher.enrich()
        return result if result["pages_crawled"] else {}
    except ValueError as exc:
        logger.info("Skipping enrichment for %r: %s", website, exc)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Enrichment failed for %s: %s", website, exc)
    return {}
