"""Job posting context scraped from the current page."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional
from urllib.parse import urlparse

import tldextract
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page

JOB_TITLE_SELECTORS = (
    "h1",
    ".job-title",
    ".position-title",
    "[data-testid='job-title']",
)
COMPANY_SELECTORS = (
    ".company-name",
    ".employer-name",
    "[data-testid='company-name']",
)
DESCRIPTION_SELECTORS = (
    ".job-description",
    "#job-description",
    "[data-testid='job-description']",
    ".description",
)
MAX_DESCRIPTION_LENGTH = 4000

JOB_BOARDS = (
    ("linkedin.com", "/jobs"),
    ("indeed.com", ""),
    ("glassdoor.com", ""),
    ("workday.com", ""),
    ("myworkdayjobs.com", ""),
    ("greenhouse.io", ""),
    ("lever.co", ""),
)

_TLD_EXTRACTOR = tldextract.TLDExtract(suffix_list_urls=())


@dataclass(slots=True)
class JobContext:
    job_title: Optional[str]
    company: Optional[str]
    job_description: Optional[str]
    url: str


def extract_job_context(page: Page) -> JobContext:
    job_title = _first_text(page, JOB_TITLE_SELECTORS) or _page_title(page)
    company = _first_text(page, COMPANY_SELECTORS) or company_from_url(page.url)
    description = _first_text(page, DESCRIPTION_SELECTORS)
    if description and len(description) > MAX_DESCRIPTION_LENGTH:
        description = description[:MAX_DESCRIPTION_LENGTH]
    return JobContext(
        job_title=job_title,
        company=company,
        job_description=description,
        url=page.url,
    )


def company_from_url(url: str) -> Optional[str]:
    host = urlparse(url).hostname or ""
    if not host:
        return None
    extracted = _TLD_EXTRACTOR(host)
    return extracted.domain or host


def is_job_board(url: str) -> bool:
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    if not host:
        return False
    extracted = _TLD_EXTRACTOR(host)
    if extracted.domain and extracted.suffix:
        registered = f"{extracted.domain}.{extracted.suffix}"
    else:
        registered = host
    path = parsed.path or ""
    for domain, path_prefix in JOB_BOARDS:
        if registered == domain and path.startswith(path_prefix):
            return True
    return False


def _first_text(page: Page, selectors: Iterable[str]) -> Optional[str]:
    for selector in selectors:
        try:
            element = page.query_selector(selector)
            text = element.inner_text() if element else ""
        except PlaywrightError:
            continue
        text = " ".join((text or "").split())
        if text:
            return text
    return None


def _page_title(page: Page) -> Optional[str]:
    try:
        title = page.title()
    except PlaywrightError:
        return None
    return title.strip() or None


__all__ = ["JobContext", "extract_job_context", "company_from_url", "is_job_board"]
