"""Unit tests for the matching engine.

Covers:
- Whitelist loose matching (word subset, compressed multi-word)
- Blacklist phrase matching (word boundaries, compressed multi-word)
- Exact company matching
- Regex escaping and the combined company pattern
- RuleMatcher precedence and reported rules
"""

import re

import pytest

from jobfilter.domain.models import HideReason, RuleSet
from jobfilter.matching import (
    RuleMatcher,
    build_company_pattern,
    escape_regex,
    matches_blacklist,
    matches_company,
    matches_whitelist,
)
from jobfilter.normalization import MatchableTitle, NormalizationMode, normalize


class TestMatchesWhitelist:
    """Tests for matches_whitelist()."""

    def test_all_words_present_in_any_order(self):
        assert matches_whitelist("senior engineer", normalize("Senior Backend Engineer"))
        assert matches_whitelist("engineer senior", normalize("Senior Backend Engineer"))

    def test_partial_word_does_not_count(self):
        assert not matches_whitelist("engineer manager", normalize("Engineering Manager"))

    def test_single_word(self):
        assert matches_whitelist("python", normalize("Python Developer"))
        assert not matches_whitelist("python", normalize("Java Developer"))

    def test_compressed_multi_word(self):
        assert matches_whitelist("back end", normalize("Backend Developer"))
        assert matches_whitelist("full stack", normalize("Fullstack Engineer"))

    def test_compressed_fallback_is_multi_word_only(self):
        # "end" is a substring of "backend" but single words need a whole word
        assert not matches_whitelist("end", normalize("Backend Developer"))

    def test_keyword_is_normalized(self):
        assert matches_whitelist("  Back-End  ", normalize("Backend Developer"))

    def test_empty_keyword_never_matches(self):
        assert not matches_whitelist("", normalize("Engineer"))
        assert not matches_whitelist("!!!", normalize("Engineer"))

    def test_accepts_matchable_title(self):
        title = MatchableTitle.from_text("Senior Backend Engineer")
        assert matches_whitelist("backend", title)

    def test_alnum_mode_digits(self):
        title = normalize("Engineer 2", NormalizationMode.ALNUM)
        assert matches_whitelist("engineer 2", title, NormalizationMode.ALNUM)


class TestMatchesBlacklist:
    """Tests for matches_blacklist()."""

    def test_single_word_is_whole_word(self):
        assert not matches_blacklist("ai", normalize("Air Traffic Controller"))
        assert matches_blacklist("ai", normalize("AI Research Scientist"))

    def test_multi_word_phrase(self):
        assert matches_blacklist("machine learning", normalize("Sr Machine Learning Engineer"))

    def test_multi_word_order_matters(self):
        assert not matches_blacklist("machine learning", normalize("Learning Machine Operator"))

    def test_multi_word_must_be_adjacent(self):
        assert not matches_blacklist("sales manager", normalize("Sales and Account Manager"))

    def test_compressed_multi_word(self):
        assert matches_blacklist("business development", normalize("BusinessDevelopment Executive"))

    def test_punctuation_in_keyword_and_title(self):
        assert matches_blacklist("c++", normalize("C / C++ Developer"))
        assert matches_blacklist("front-end", normalize("Front End Engineer"))

    def test_empty_keyword_never_matches(self):
        assert not matches_blacklist("   ", normalize("Anything"))

    def test_digits_only_keyword_never_matches_in_alpha_mode(self):
        assert not matches_blacklist("2024", normalize("Intern 2024"))

    def test_digits_match_in_alnum_mode(self):
        title = normalize("Intern 2024", NormalizationMode.ALNUM)
        assert matches_blacklist("2024", title, NormalizationMode.ALNUM)


class TestMatchesCompany:
    """Tests for matches_company()."""

    def test_case_insensitive_exact(self):
        assert matches_company("Acme", ["acme"])

    def test_no_partial_match(self):
        assert not matches_company("Acme Corp", ["acme"])
        assert not matches_company("Acme", ["acme corp"])

    def test_trims_both_sides(self):
        assert matches_company("  Acme  ", [" ACME "])

    def test_empty_company_never_matches(self):
        assert not matches_company("", ["acme"])
        assert not matches_company("   ", [""])

    def test_empty_list(self):
        assert not matches_company("Acme", [])


class TestRegexHelpers:
    """Tests for escape_regex() and build_company_pattern()."""

    def test_escape_regex_escapes_metacharacters(self):
        escaped = escape_regex("A.C.M.E (Labs)+ [x]|y*?^$\\{1}")
        assert re.fullmatch(escaped, "A.C.M.E (Labs)+ [x]|y*?^$\\{1}")
        assert re.fullmatch(escape_regex("a.c"), "abc") is None

    def test_escape_regex_plain_text_unchanged(self):
        assert escape_regex("Acme Labs") == "Acme Labs"

    def test_company_pattern_matches_like_matches_company(self):
        companies = ["Acme", "Yahoo!", "AT&T (India)"]
        pattern = build_company_pattern(companies)

        for text in ["acme", "YAHOO!", "at&t (india)", "Acme Corp", "Yahoo", "AT&T"]:
            assert bool(pattern.fullmatch(text.strip())) == matches_company(text, companies)

    def test_company_pattern_empty_list_never_matches(self):
        pattern = build_company_pattern(["", "  "])

        assert pattern.fullmatch("") is None
        assert pattern.search("anything") is None


class TestRuleMatcher:
    """Tests for RuleMatcher.evaluate()."""

    def test_empty_rules_show_everything(self):
        decision = RuleMatcher(RuleSet.empty()).evaluate("Anything At All", "Anyone")

        assert not decision.hide
        assert decision.reason is None

    def test_empty_whitelist_never_hides(self):
        rules = RuleSet(blacklist_keywords=["sales"])

        assert not RuleMatcher(rules).evaluate("Python Developer", "Globex").hide

    def test_company_reported_with_configured_name(self):
        rules = RuleSet(blacklisted_companies=["Acme Staffing"])
        decision = RuleMatcher(rules).evaluate("Engineer", "ACME STAFFING")

        assert decision.hide
        assert decision.reason == HideReason.COMPANY
        assert decision.matched_rule == "Acme Staffing"

    def test_whitelist_miss(self):
        rules = RuleSet(whitelist_keywords=["python", "golang"])
        decision = RuleMatcher(rules).evaluate("Java Developer", "Globex")

        assert decision.reason == HideReason.WHITELIST
        assert decision.matched_rule is None

    def test_blacklist_reports_first_matching_keyword(self):
        rules = RuleSet(blacklist_keywords=["manager", "sales"])
        decision = RuleMatcher(rules).evaluate("Sales Manager", "Globex")

        assert decision.reason == HideReason.BLACKLIST
        assert decision.matched_rule == "manager"

    def test_company_beats_whitelist_and_blacklist(self):
        rules = RuleSet(
            whitelist_keywords=["python"],
            blacklist_keywords=["java"],
            blacklisted_companies=["Acme"],
        )
        decision = RuleMatcher(rules).evaluate("Java Developer", "Acme")

        assert decision.reason == HideReason.COMPANY

    def test_whitelist_beats_blacklist(self):
        rules = RuleSet(whitelist_keywords=["engineer"], blacklist_keywords=["intern"])
        decision = RuleMatcher(rules).evaluate("Software Engineering Intern", "Acme")

        assert decision.hide
        assert decision.reason == HideReason.WHITELIST

    def test_blacklist_after_whitelist_pass(self):
        rules = RuleSet(whitelist_keywords=["engineer"], blacklist_keywords=["intern"])
        decision = RuleMatcher(rules).evaluate("Software Engineer Intern", "Acme")

        assert decision.hide
        assert decision.reason == HideReason.BLACKLIST
        assert decision.matched_rule == "intern"

    def test_alnum_mode_applies_to_titles(self):
        rules = RuleSet(blacklist_keywords=["2"])

        assert RuleMatcher(rules, NormalizationMode.ALNUM).evaluate("Engineer 2", "X").hide
        assert not RuleMatcher(rules, NormalizationMode.ALPHA).evaluate("Engineer 2", "X").hide
