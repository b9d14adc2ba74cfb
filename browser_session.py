import sys
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional
from urllib.parse import urlparse

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from headline_models import ScraperConfig


def _proxy_display(server: str) -> str:
    """Proxy server without any user:password part, for logs."""
    parsed = urlparse(server)
    netloc = parsed.netloc.rsplit("@", 1)[-1]
    return f"{parsed.scheme}://{netloc}" if parsed.scheme and netloc else server.rsplit("@", 1)[-1]


@contextmanager
def open_browser_page(config: ScraperConfig) -> Iterator[Any]:
    """Launch Chromium and yield one ready-to-navigate page.

    The browser is closed on exit whatever happened inside the block. Launch and
    proxy failures propagate to the caller.
    """
    proxy_kw = config.launch_proxy()
    launch_args: Dict[str, Any] = {"headless": not config.headful}
    if config.maximized:
        launch_args["args"] = ["--start-maximized"]
    if proxy_kw:
        launch_args["proxy"] = proxy_kw
        auth = "authenticated" if proxy_kw.get("username") else "unauthenticated"
        print(f"[session] Configuring browser with proxy {_proxy_display(proxy_kw['server'])} ({auth})")
    else:
        print("[session] Configuring browser (direct connection)")

    with sync_playwright() as p:
        browser = p.chromium.launch(**launch_args)
        print(f"[session] Browser launched (headful={config.headful})")
        try:
            context_args: Dict[str, Any] = {}
            if config.maximized and config.headful:
                context_args["no_viewport"] = True
            context = browser.new_context(**context_args)
            page = context.new_page()
            print("[session] New page created")
            yield page
        finally:
            try:
                browser.close()
                print("[session] Browser closed")
            except PlaywrightError as e:
                print(f"[ERROR] Could not close browser: {e}", file=sys.stderr)


def navigate_with_retry(
    page,
    url: str,
    retries: int = 3,
    retry_delay: float = 5.0,
    timeout_ms: int = 120_000,
    wait_until: str = "networkidle",
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Load ``url`` waiting for network quiescence, retrying with a fixed delay.

    Every error counts as a failed attempt. The last attempt's error is re-raised.
    """
    retries = max(1, int(retries))
    page.set_default_navigation_timeout(timeout_ms)
    print(f"[navigate] Navigating to {url} (attempts={retries}, timeout={timeout_ms}ms, wait_until={wait_until})")
    for attempt in range(retries):
        try:
            page.goto(url, wait_until=wait_until, timeout=timeout_ms)
            print("[navigate] Page loaded")
            return
        except Exception as e:
            print(f"[navigate] Attempt {attempt + 1} failed: {e}")
            if attempt == retries - 1:
                raise
            sleep(retry_delay)


def save_page_html(page, path: str) -> Optional[str]:
    """Write the rendered page to ``path`` for offline inspection; returns the path or None."""
    try:
        html = page.content()
        with open(path, "w", encoding="utf-8") as f:
            f.write(html)
    except (OSError, PlaywrightError) as e:
        print(f"[ERROR] Could not save page content to {path}: {e}", file=sys.stderr)
        return None
    print(f"[navigate] Page content saved to {path} (chars={len(html)})")
    return path


def wait_for_lead(page, selector: str, timeout_ms: int = 10_000) -> bool:
    try:
        page.wait_for_selector(selector, timeout=timeout_ms)
        return True
    except PlaywrightError as e:
        print(f"[navigate] Timeout waiting for lead package ({selector}). Continuing anyway. ({e.__class__.__name__})")
        return False
