from typing import Dict, List, Optional, Tuple
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from headline_models import CardSelectors, HeadlineRecord, RegionSpec, ScraperConfig


def _text(el: Optional[Tag]) -> str:
    if el is None:
        return ""
    return (el.get_text() or "").strip()


def _document_base(soup: BeautifulSoup, page_url: str) -> str:
    base = soup.find("base", href=True)
    if base is not None:
        try:
            return urljoin(page_url, str(base["href"]).strip())
        except ValueError:
            return page_url
    return page_url


def _resolve_link(base_url: str, anchor: Optional[Tag]) -> str:
    """Resolve an anchor's href the way ``HTMLAnchorElement.href`` does; '' when unusable."""
    if anchor is None or not anchor.has_attr("href"):
        return ""
    href = str(anchor["href"]).strip()
    if not href:
        return ""
    try:
        link = urljoin(base_url, href)
        parsed = urlparse(link)
    except ValueError:
        return ""
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return ""
    return link


def _read_card(card: Tag, selectors: CardSelectors, base_url: str) -> Tuple[str, str]:
    headline = _text(card.select_one(selectors.headline))
    link = _resolve_link(base_url, card.select_one(selectors.link))
    return headline, link


def _region_groups(soup: BeautifulSoup, region: RegionSpec) -> List[Tuple[str, List[Tag]]]:
    """Return (label, cards) groups for one region; empty when the region is absent."""
    if region.kind == "container":
        root = soup.select_one(region.selector)
        if root is None:
            return []
        return [(region.label, root.select(region.card_selector))]

    if region.kind == "items":
        items = soup.select(region.selector)
        return [(region.label, items)] if items else []

    if region.kind == "zones":
        groups: List[Tuple[str, List[Tag]]] = []
        for zone in soup.select(region.selector):
            name = zone.get(region.label_attribute)
            if isinstance(name, list):
                name = " ".join(name)
            if not name or name in region.exclude_labels:
                continue
            groups.append((name, zone.select(region.card_selector)))
        return groups

    # titled_zone
    title = soup.select_one(region.selector)
    if title is None or region.title_contains not in title.get_text():
        return []
    scope = title.css.closest(region.scope_selector)
    if scope is None:
        return []
    return [(region.label, scope.select(region.card_selector))]


def extract_headlines(
    html: str,
    base_url: str,
    regions: List[RegionSpec],
    card: Optional[CardSelectors] = None,
    run_date: Optional[str] = None,
    verbose: bool = True,
) -> List[HeadlineRecord]:
    """Extract headline records from a rendered homepage snapshot.

    Regions are read in the given order and cards in document order. A card only
    yields a record when both its headline text and its absolute link are present.
    Missing regions contribute nothing. When ``run_date`` is set every record carries it.
    """
    card = card or CardSelectors()
    soup = BeautifulSoup(html or "", "html.parser")
    doc_base = _document_base(soup, base_url)

    records: List[HeadlineRecord] = []
    for region in regions:
        groups = _region_groups(soup, region)
        if not groups:
            if verbose:
                print(f"[extract] Region '{region.display_name}' not found")
            continue
        for label, cards in groups:
            kept = 0
            for el in cards:
                headline, link = _read_card(el, card, doc_base)
                if not headline or not link:
                    continue
                records.append(HeadlineRecord(section=label, headline=headline, link=link, date=run_date))
                kept += 1
            if verbose:
                print(f"[extract] Region '{label}': cards={len(cards)}, headlines={kept}")

    if verbose:
        print(f"[extract] Total headlines extracted: {len(records)}")
    return records


def extract_from_page(page, config: ScraperConfig, run_date: Optional[str] = None) -> List[HeadlineRecord]:
    """Snapshot the page's rendered DOM and extract headlines from it."""
    print("[extract] Extracting headlines...")
    html = page.content()
    return extract_headlines(html, page.url or config.url, config.regions, config.card, run_date)


def summarize_sections(records: List[HeadlineRecord]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for r in records:
        counts[r.section] = counts.get(r.section, 0) + 1
    return counts
