"""
Pydantic models for headline records and scraper configuration
"""
import os
from typing import Any, Dict, List, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator


DEFAULT_URL = "https://www.cnn.com/"
DEFAULT_OUTPUT_CSV = "cnn_headlines.csv"
DEFAULT_DEBUG_HTML = "cnn_page_content.html"
LEAD_SELECTOR = ".container_lead-package__cards-wrapper"


# ============================================================================
# RECORDS
# ============================================================================

class HeadlineRecord(BaseModel):
    """One headline read from a homepage region"""
    section: str = Field(..., min_length=1, description="Label of the region the card came from")
    headline: str = Field(..., min_length=1, description="Trimmed headline text")
    link: str = Field(..., min_length=1, description="Absolute article URL")
    date: Optional[str] = Field(None, description="Run date (YYYY-MM-DD), date-stamped variants only")


# ============================================================================
# SELECTORS
# ============================================================================

class CardSelectors(BaseModel):
    """Selectors read inside every card"""
    headline: str = Field(".container__headline-text", description="Headline text element")
    link: str = Field("a.container__link", description="Anchor carrying the article link")


class RegionSpec(BaseModel):
    """A DOM region grouping the cards of one logical news section.

    kind:
        container   -- first match of ``selector``; cards are its ``card_selector`` descendants
        items       -- every match of ``selector`` is itself a card
        zones       -- every match of ``selector`` is a zone labelled by ``label_attribute``
        titled_zone -- first match of ``selector`` is a title; when its text contains
                       ``title_contains`` the closest ``scope_selector`` holds the cards
    """
    kind: Literal["container", "items", "zones", "titled_zone"]
    selector: str
    label: Optional[str] = None
    card_selector: str = ".card"
    label_attribute: str = "data-zone-label"
    exclude_labels: List[str] = Field(default_factory=list)
    title_contains: Optional[str] = None
    scope_selector: Optional[str] = None

    @model_validator(mode="after")
    def _check_kind_fields(self) -> "RegionSpec":
        if self.kind != "zones" and not self.label:
            raise ValueError(f"region kind '{self.kind}' requires a label")
        if self.kind == "titled_zone" and not (self.title_contains and self.scope_selector):
            raise ValueError("titled_zone requires title_contains and scope_selector")
        return self

    @property
    def display_name(self) -> str:
        return self.label or f"zones[{self.label_attribute}]"


# ============================================================================
# PROXY
# ============================================================================

class ProxySettings(BaseModel):
    """Outbound proxy handed to the browser at launch"""
    host: Optional[str] = None
    port: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    server: Optional[str] = Field(None, description="Full proxy URL; wins over host/port")

    @classmethod
    def from_env(cls, env: Optional[Dict[str, str]] = None, load_env_file: bool = True) -> "ProxySettings":
        if env is None:
            if load_env_file:
                load_dotenv(override=False)
            env = dict(os.environ)

        def _get(key: str) -> Optional[str]:
            v = env.get(key)
            return v.strip() if v and v.strip() else None

        return cls(
            host=_get("PROXY_HOST"),
            port=_get("PROXY_PORT"),
            username=_get("PROXY_USERNAME"),
            password=_get("PROXY_PASSWORD"),
            server=_get("PROXY_SERVER"),
        )

    @property
    def configured(self) -> bool:
        return bool(self.server or self.host)

    @property
    def server_url(self) -> Optional[str]:
        if self.server:
            return self.server
        if not self.host:
            return None
        host = self.host if "://" in self.host else f"http://{self.host}"
        return f"{host}:{self.port}" if self.port else host

    def to_playwright(self) -> Optional[Dict[str, str]]:
        """Return the ``proxy`` mapping for ``browser_type.launch`` or None for a direct connection."""
        server = self.server_url
        if not server:
            return None
        proxy: Dict[str, str] = {"server": server}
        if self.username:
            proxy["username"] = self.username
            proxy["password"] = self.password or ""
        return proxy


# ============================================================================
# RUN CONFIG
# ============================================================================

class ScraperConfig(BaseModel):
    """Everything one scrape run needs"""
    variant: str = "custom"
    url: str = DEFAULT_URL
    regions: List[RegionSpec] = Field(default_factory=list)
    card: CardSelectors = Field(default_factory=CardSelectors)
    include_date: bool = False

    retries: int = Field(3, ge=1, description="Navigation attempts before giving up")
    retry_delay: float = Field(5.0, ge=0, description="Seconds between navigation attempts")
    navigation_timeout_ms: int = Field(120_000, ge=1)
    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = "networkidle"

    lead_selector: Optional[str] = LEAD_SELECTOR
    lead_timeout_ms: int = Field(10_000, ge=0)
    debug_html_path: Optional[str] = DEFAULT_DEBUG_HTML
    output_csv: str = DEFAULT_OUTPUT_CSV

    headful: bool = False
    maximized: bool = True
    use_proxy: bool = True
    proxy: Optional[ProxySettings] = None

    def launch_proxy(self) -> Optional[Dict[str, Any]]:
        if not self.use_proxy or self.proxy is None or not self.proxy.configured:
            return None
        return self.proxy.to_playwright()
