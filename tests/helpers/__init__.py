"""Test helper utilities for jobfilter tests."""

from .pages import (
    FIXTURE_URLS,
    FIXTURES_DIR,
    fixture_page,
    glassdoor_card,
    indeed_card,
    linkedin_card,
    naukri_card,
    naukri_promoted_card,
    toggle_naukri_save,
    visible_titles,
)

__all__ = [
    "FIXTURE_URLS",
    "FIXTURES_DIR",
    "fixture_page",
    "visible_titles",
    "naukri_card",
    "naukri_promoted_card",
    "indeed_card",
    "glassdoor_card",
    "linkedin_card",
    "toggle_naukri_save",
]
