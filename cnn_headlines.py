import sys
import json
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from dotenv import load_dotenv

from browser_session import navigate_with_retry, open_browser_page, save_page_html, wait_for_lead
from headline_extractor import extract_from_page, summarize_sections
from headline_models import HeadlineRecord, ProxySettings, ScraperConfig
from headline_store import write_headlines_csv
from scraper_variants import DEFAULT_VARIANT, get_variant, list_variants


def run_date_utc() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def scrape_headlines(
    config: ScraperConfig,
    open_page: Callable[[ScraperConfig], Any] = open_browser_page,
    run_date: Optional[str] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> List[HeadlineRecord]:
    """Open a browser, load the homepage and extract its headlines.

    Navigation errors propagate after the last retry; the browser is closed either way.
    """
    if config.include_date and run_date is None:
        run_date = run_date_utc()
    stamp = run_date if config.include_date else None

    with open_page(config) as page:
        nav_kw: Dict[str, Any] = {}
        if sleep is not None:
            nav_kw["sleep"] = sleep
        navigate_with_retry(
            page,
            config.url,
            retries=config.retries,
            retry_delay=config.retry_delay,
            timeout_ms=config.navigation_timeout_ms,
            wait_until=config.wait_until,
            **nav_kw,
        )
        if config.debug_html_path:
            save_page_html(page, config.debug_html_path)
        if config.lead_selector:
            wait_for_lead(page, config.lead_selector, timeout_ms=config.lead_timeout_ms)
        headlines = extract_from_page(page, config, run_date=stamp)

    print(f"[run] Scraped {len(headlines)} headlines")
    return headlines


def run(config: ScraperConfig, **scrape_kw: Any) -> Dict[str, Any]:
    """Scrape with ``config`` and write the CSV when anything was found."""
    print(f"[run] Variant '{config.variant}' -> {config.url}")
    headlines = scrape_headlines(config, **scrape_kw)
    sections = summarize_sections(headlines)
    for section, n in sections.items():
        print(f"[run]   {section}: {n}")
    written = False
    if headlines:
        written = write_headlines_csv(headlines, config.output_csv, include_date=config.include_date)
    else:
        print("[WARN] No headlines were scraped. Check the scraping logic or website structure.", file=sys.stderr)
    return {
        "variant": config.variant,
        "headlines": headlines,
        "count": len(headlines),
        "sections": sections,
        "output": config.output_csv if written else None,
    }


def _cli():  # simple CLI
    import argparse

    # Force unbuffered utf-8 output for real-time logs
    try:
        sys.stdout.reconfigure(encoding="utf-8", line_buffering=True, write_through=True)
        sys.stderr.reconfigure(encoding="utf-8", line_buffering=True, write_through=True)
    except AttributeError:
        pass

    parser = argparse.ArgumentParser(description="Scrape CNN homepage headlines into a CSV file")
    parser.add_argument("--variant", default=DEFAULT_VARIANT, choices=list_variants(), help=f"Region layout to use (default {DEFAULT_VARIANT})")
    parser.add_argument("--list-variants", action="store_true", help="Print the known variants and exit")
    parser.add_argument("--url", help="Override the homepage URL")
    parser.add_argument("--output", help="Output CSV path (default cnn_headlines.csv)")
    parser.add_argument("--retries", type=int, help="Navigation attempts")
    parser.add_argument("--retry-delay", type=float, help="Seconds between navigation attempts")
    parser.add_argument("--timeout", type=int, help="Navigation timeout in seconds")
    parser.add_argument("--headful", action="store_true", help="Show the browser window")
    parser.add_argument("--no-proxy", action="store_true", help="Ignore PROXY_* settings")
    parser.add_argument("--debug-html", help="Where to save the rendered page")
    parser.add_argument("--no-debug-html", action="store_true", help="Do not save the rendered page")
    args = parser.parse_args()

    if args.list_variants:
        for name in list_variants():
            print(name)
        return

    load_dotenv(override=False)

    overrides: Dict[str, Any] = {"headful": args.headful}
    if args.url:
        overrides["url"] = args.url
    if args.output:
        overrides["output_csv"] = args.output
    if args.retries is not None:
        overrides["retries"] = args.retries
    if args.retry_delay is not None:
        overrides["retry_delay"] = args.retry_delay
    if args.timeout is not None:
        overrides["navigation_timeout_ms"] = args.timeout * 1000
    if args.no_proxy:
        overrides["use_proxy"] = False
    if args.no_debug_html:
        overrides["debug_html_path"] = None
    elif args.debug_html:
        overrides["debug_html_path"] = args.debug_html

    config = get_variant(args.variant, **overrides)
    if config.use_proxy:
        config.proxy = ProxySettings.from_env(load_env_file=False)

    try:
        out = run(config)
    except Exception as e:
        print(f"[ERROR] An error occurred: {e}", file=sys.stderr)
        raise SystemExit(1)

    print(json.dumps({k: out[k] for k in ("variant", "count", "sections", "output")}, ensure_ascii=False))


if __name__ == "__main__":
    _cli()
