"""
Named scraper variants for the CNN homepage.

Each variant is a region layout plus run settings; ``get_variant`` turns one into a
``ScraperConfig``. Variants differ in which regions they read, whether rows carry the
run date, and how navigation/proxying is set up.
"""
from typing import Any, Dict, List

from headline_models import RegionSpec, ScraperConfig


DEFAULT_VARIANT = "cnn_scraper"
MORE_TOP_STORIES = "More Top Stories"


def _top_stories() -> RegionSpec:
    return RegionSpec(kind="container", selector=".container_lead-package__cards-wrapper", label="Top Stories")


def _more_top_stories_items() -> RegionSpec:
    return RegionSpec(kind="items", selector=".container_lead-plus-headlines__item", label=MORE_TOP_STORIES)


def _more_top_stories_zone() -> RegionSpec:
    return RegionSpec(
        kind="container",
        selector=f'.zone__content[data-zone-label="{MORE_TOP_STORIES}"]',
        label=MORE_TOP_STORIES,
    )


def _labelled_zones() -> RegionSpec:
    # More Top Stories has its own region in every variant using zones
    return RegionSpec(
        kind="zones",
        selector=".zone__content[data-zone-label]",
        label_attribute="data-zone-label",
        exclude_labels=[MORE_TOP_STORIES],
    )


def _data_section(name: str, label: str) -> RegionSpec:
    return RegionSpec(kind="items", selector=f'[data-section="{name}"]', label=label)


def _cnn_scraper_regions() -> List[RegionSpec]:
    return [
        _top_stories(),
        _more_top_stories_items(),
        _data_section("business", "Global Business"),
        _data_section("sport", "Sport"),
        _data_section("style", "Style"),
        _data_section("travel", "Travel"),
        RegionSpec(
            kind="container",
            selector='.zone[data-collapsed-text="In Case You Missed It"]',
            label="In Case You Missed It",
        ),
        RegionSpec(
            kind="titled_zone",
            selector=".zone__title.zone--title",
            title_contains="Featured Sections",
            scope_selector=".zone__inner",
            label="Featured Sections",
        ),
    ]


_VARIANTS: Dict[str, Dict[str, Any]] = {
    # Sections by data attribute + "Featured Sections" zone title, date-stamped
    "cnn_scraper": {
        "regions": _cnn_scraper_regions,
        "include_date": True,
    },
    # Lead-plus-headlines list + labelled zones, date-stamped
    "more_top_stories": {
        "regions": lambda: [_top_stories(), _more_top_stories_items(), _labelled_zones()],
        "include_date": True,
    },
    # Labelled zones only, no date column
    "save_headlines": {
        "regions": lambda: [_top_stories(), _more_top_stories_zone(), _labelled_zones()],
        "include_date": False,
    },
    # Same layout as save_headlines over a direct connection with a single attempt
    "direct": {
        "regions": lambda: [_top_stories(), _more_top_stories_zone(), _labelled_zones()],
        "include_date": False,
        "retries": 1,
        "navigation_timeout_ms": 60_000,
        "use_proxy": False,
        "maximized": False,
        "debug_html_path": None,
        "lead_selector": None,
    },
}


def list_variants() -> List[str]:
    return list(_VARIANTS.keys())


def get_variant(name: str = DEFAULT_VARIANT, **overrides: Any) -> ScraperConfig:
    """Build the ``ScraperConfig`` for a named variant.

    ``overrides`` replace any config field (e.g. ``output_csv``, ``retries``, ``proxy``).
    Raises ``KeyError`` for unknown variant names.
    """
    try:
        base = dict(_VARIANTS[name])
    except KeyError:
        raise KeyError(f"Unknown variant '{name}'. Known variants: {', '.join(list_variants())}")
    base["regions"] = base["regions"]()
    base["variant"] = name
    base.update(overrides)
    return ScraperConfig(**base)
