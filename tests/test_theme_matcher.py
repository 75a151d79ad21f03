"""Tests for keyword theme matching."""

import pytest

from pm_copilot.config import ConfigurationError
from pm_copilot.models import ThemeDefinition
from pm_copilot.theme_matcher import (
    coerce_theme_definitions,
    keyword_matches,
    match_signals,
    matches_theme,
)
from tests.signal_factories import make_proactive, make_reactive


class TestKeywordMatches:

    def test_single_word_matches_whole_word(self):
        assert keyword_matches("found a bug in checkout", "bug")

    def test_single_word_does_not_match_inside_word(self):
        assert not keyword_matches("i was debugging all day", "bug")

    def test_word_boundary_at_punctuation(self):
        assert keyword_matches("bug-report attached", "bug")
        assert keyword_matches("(bug)", "bug")

    def test_case_insensitive(self):
        assert keyword_matches("calendar broken", "Calendar")

    def test_multi_word_is_substring(self):
        assert keyword_matches("my google sync failed", "google sync")
        assert keyword_matches("my google syncing failed", "google sync")

    def test_multi_word_case_insensitive(self):
        assert keyword_matches("google sync failed", "Google Sync")

    def test_keyword_special_characters_escaped(self):
        assert not keyword_matches("abc", "a.c")

    def test_repeated_calls_are_stateless(self):
        results = [keyword_matches("calendar calendar", "calendar") for _ in range(3)]
        assert results == [True, True, True]

    def test_matches_theme_any(self):
        assert matches_theme("issue with refund", ["invoice", "refund"])
        assert not matches_theme("issue with login", ["invoice", "refund"])


class TestCoerceThemeDefinitions:

    def test_accepts_models_and_dicts(self, calendar_theme):
        themes = coerce_theme_definitions([
            calendar_theme,
            {"id": "billing", "label": "Billing", "keywords": ["invoice"]},
        ])
        assert [t.id for t in themes] == ["calendar", "billing"]
        assert themes[1].category == "general"

    @pytest.mark.parametrize("themes", [None, "calendar", {"id": "x"}, 42])
    def test_not_a_list(self, themes):
        with pytest.raises(ConfigurationError):
            coerce_theme_definitions(themes)

    @pytest.mark.parametrize("theme", [
        {"id": "x", "label": "X", "keywords": []},
        {"id": "x", "label": "X", "keywords": [""]},
        {"id": "x", "label": "X", "keywords": ["ok", 5]},
        {"id": "x", "label": "X"},
        {"label": "X", "keywords": ["a"]},
    ])
    def test_malformed_theme(self, theme):
        with pytest.raises(ConfigurationError, match="index 0"):
            coerce_theme_definitions([theme])


class TestMatchSignals:

    def test_groups_by_theme(self, themes_config):
        signals = [
            make_reactive("1", "Calendar is broken"),
            make_reactive("2", "Need a refund on my invoice"),
            make_proactive("3", "Google sync both ways"),
        ]
        result = match_signals(signals, themes_config.themes)

        assert [s.id for s in result.matched["calendar"]] == ["hs-1", "pl-3"]
        assert [s.id for s in result.matched["billing"]] == ["hs-2"]
        assert result.matched["bugs"] == []
        assert result.unmatched == []

    def test_signal_can_match_several_themes(self, themes_config):
        signals = [make_reactive("1", "Calendar bug on the invoice page")]
        result = match_signals(signals, themes_config.themes)

        assert [s.id for s in result.matched["calendar"]] == ["hs-1"]
        assert [s.id for s in result.matched["billing"]] == ["hs-1"]
        assert [s.id for s in result.matched["bugs"]] == ["hs-1"]

    def test_unmatched_collected_in_order(self, themes_config):
        signals = [
            make_reactive("1", "dark mode please"),
            make_reactive("2", "calendar"),
            make_proactive("3", "zapier integration"),
        ]
        result = match_signals(signals, themes_config.themes)
        assert [s.id for s in result.unmatched] == ["hs-1", "pl-3"]

    def test_empty_text_is_unmatched(self, themes_config):
        result = match_signals([make_reactive("1", "")], themes_config.themes)
        assert [s.id for s in result.unmatched] == ["hs-1"]

    def test_no_themes_everything_unmatched(self):
        signals = [make_reactive("1", "calendar")]
        result = match_signals(signals, [])
        assert result.matched == {}
        assert len(result.unmatched) == 1

    def test_theme_dicts_accepted(self):
        signals = [make_reactive("1", "calendar")]
        result = match_signals(signals, [{"id": "cal", "label": "Cal", "keywords": ["calendar"]}])
        assert len(result.matched["cal"]) == 1

    def test_rejects_malformed_themes(self):
        with pytest.raises(ConfigurationError):
            match_signals([make_reactive("1", "calendar")], "calendar")

    def test_definition_keywords_used_verbatim(self):
        theme = ThemeDefinition(id="sync", label="Sync", keywords=["two way sync"])
        result = match_signals(
            [make_proactive("1", "Two Way Sync with outlook")], [theme]
        )
        assert len(result.matched["sync"]) == 1
