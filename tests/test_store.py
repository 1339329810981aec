"""Unit tests for rule stores and RuleSet loading.

Covers:
- Memory, YAML and SQL backends: load, set, change notification
- YAML outside-edit detection
- load_rule_set coercion, malformed rules and fail-open behaviour
- create_store backend selection
"""

import threading
from unittest.mock import patch

import pytest
import yaml

from jobfilter.adapters import IndeedAdapter, LinkedInAdapter, NaukriAdapter
from jobfilter.domain.models import RuleSet
from jobfilter.store import (
    MemoryRuleStore,
    RuleStore,
    SqlRuleStore,
    StoreError,
    StoreUnavailableError,
    YamlRuleStore,
    build_rule_set,
    create_store,
    load_rule_set,
)


class BrokenStore(RuleStore):
    """Store whose backing storage is always unavailable."""

    async def load(self, keys):
        raise StoreUnavailableError("storage offline")

    async def set(self, values):
        raise StoreUnavailableError("storage offline")


class NoDataStore(RuleStore):
    """Store that answers with nothing at all."""

    async def load(self, keys):
        return None

    async def set(self, values):
        pass


class CrashingStore(RuleStore):
    """Store whose client library raises something other than a StoreError."""

    async def load(self, keys):
        raise ConnectionResetError("socket closed")

    async def set(self, values):
        pass


# ============================================================================
# Backends
# ============================================================================


class TestMemoryRuleStore:
    """Tests for MemoryRuleStore."""

    @pytest.mark.asyncio
    async def test_load_returns_only_present_keys(self):
        store = MemoryRuleStore({"a": [1], "b": True})

        assert await store.load(["a", "missing"]) == {"a": [1]}

    @pytest.mark.asyncio
    async def test_set_notifies_changed_keys_only(self):
        store = MemoryRuleStore({"a": ["x"]})
        changes = []
        store.on_change(changes.append)

        await store.set({"a": ["x"], "b": True})

        assert changes == [{"b": True}]

    @pytest.mark.asyncio
    async def test_no_change_no_notification(self):
        store = MemoryRuleStore({"a": True})
        changes = []
        store.on_change(changes.append)

        await store.set({"a": True})

        assert changes == []

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        store = MemoryRuleStore()
        changes = []
        unsubscribe = store.on_change(changes.append)
        unsubscribe()

        await store.set({"a": True})

        assert changes == []
        assert store.listener_count == 0

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_block_others(self):
        store = MemoryRuleStore()
        changes = []

        def broken(change):
            raise RuntimeError("boom")

        store.on_change(broken)
        store.on_change(changes.append)

        await store.set({"a": 1})

        assert changes == [{"a": 1}]


class TestYamlRuleStore:
    """Tests for YamlRuleStore."""

    @pytest.mark.asyncio
    async def test_missing_file_reads_empty(self, tmp_path):
        store = YamlRuleStore(tmp_path / "settings.yaml")

        assert await store.load(["indeed_hideSaved"]) == {}

    @pytest.mark.asyncio
    async def test_load(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("indeed_blacklistedKeywords: [sales]\nindeed_hideSaved: true\n")
        store = YamlRuleStore(path)

        assert await store.load(["indeed_blacklistedKeywords", "indeed_hideSaved"]) == {
            "indeed_blacklistedKeywords": ["sales"],
            "indeed_hideSaved": True,
        }

    @pytest.mark.asyncio
    async def test_set_writes_file_and_notifies(self, tmp_path):
        path = tmp_path / "nested" / "settings.yaml"
        store = YamlRuleStore(path)
        changes = []
        store.on_change(changes.append)

        await store.set({"naukri_hideSaved": True})

        assert yaml.safe_load(path.read_text()) == {"naukri_hideSaved": True}
        assert changes == [{"naukri_hideSaved": True}]

    @pytest.mark.asyncio
    async def test_invalid_yaml_is_unavailable(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("key: [unclosed\n")

        with pytest.raises(StoreUnavailableError):
            await YamlRuleStore(path).load(["key"])

    @pytest.mark.asyncio
    async def test_non_mapping_is_unavailable(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(StoreUnavailableError):
            await YamlRuleStore(path).load(["a"])

    @pytest.mark.asyncio
    async def test_check_for_changes_reports_outside_edits(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("indeed_hideSaved: false\nnaukri_hideSaved: false\n")
        store = YamlRuleStore(path)
        await store.load(["indeed_hideSaved"])
        changes = []
        store.on_change(changes.append)

        path.write_text("indeed_hideSaved: true\nnaukri_hideSaved: false\n")

        assert store.check_for_changes() == {"indeed_hideSaved": True}
        assert changes == [{"indeed_hideSaved": True}]
        assert store.check_for_changes() == {}

    @pytest.mark.asyncio
    async def test_check_for_changes_reports_removed_keys(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("indeed_hideSaved: true\n")
        store = YamlRuleStore(path)
        await store.load([])

        path.write_text("{}\n")

        assert store.check_for_changes() == {"indeed_hideSaved": None}

    def test_first_check_only_takes_snapshot(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("a: 1\n")

        assert YamlRuleStore(path).check_for_changes() == {}

    @pytest.mark.asyncio
    async def test_check_for_changes_survives_broken_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("a: 1\n")
        store = YamlRuleStore(path)
        await store.load(["a"])

        path.write_text("a: [broken\n")

        assert store.check_for_changes() == {}


class TestSqlRuleStore:
    """Tests for SqlRuleStore."""

    @pytest.fixture
    def store(self, tmp_path):
        store = SqlRuleStore(f"sqlite:///{tmp_path / 'data' / 'settings.db'}")
        yield store
        store.close()

    @pytest.mark.asyncio
    async def test_set_then_load(self, store):
        await store.set({"naukri_blacklistedKeywords": ["sales", "intern"], "naukri_hideSaved": True})

        assert await store.load(["naukri_blacklistedKeywords", "naukri_hideSaved", "other"]) == {
            "naukri_blacklistedKeywords": ["sales", "intern"],
            "naukri_hideSaved": True,
        }

    @pytest.mark.asyncio
    async def test_upsert_notifies_changed_keys(self, store):
        await store.set({"a": True, "b": ["x"]})
        changes = []
        store.on_change(changes.append)

        await store.set({"a": True, "b": ["y"]})

        assert changes == [{"b": ["y"]}]
        assert await store.load(["b"]) == {"b": ["y"]}

    @pytest.mark.asyncio
    async def test_load_no_keys(self, store):
        assert await store.load([]) == {}

    @pytest.mark.asyncio
    async def test_database_work_runs_off_the_event_loop(self, store):
        loop_thread = threading.get_ident()
        threads = []
        read_rows, write_rows = store._read_rows, store._write_rows

        def record(method):
            def wrapper(*args):
                threads.append(threading.get_ident())
                return method(*args)

            return wrapper

        with patch.object(store, "_read_rows", side_effect=record(read_rows)), patch.object(
            store, "_write_rows", side_effect=record(write_rows)
        ):
            await store.set({"naukri_hideSaved": True})
            assert await store.load(["naukri_hideSaved"]) == {"naukri_hideSaved": True}

        assert len(threads) == 2
        assert loop_thread not in threads

    @pytest.mark.asyncio
    async def test_in_memory_database(self):
        store = SqlRuleStore("sqlite:///:memory:")
        try:
            await store.set({"titleKeywords": ["sales"]})

            assert await store.load(["titleKeywords"]) == {"titleKeywords": ["sales"]}
        finally:
            store.close()

    def test_empty_url_rejected(self):
        with pytest.raises(StoreUnavailableError):
            SqlRuleStore("")

    def test_bad_url_rejected(self):
        with pytest.raises(StoreUnavailableError):
            SqlRuleStore("notadialect://nowhere")


class TestCreateStore:
    """Tests for create_store()."""

    def test_memory(self):
        assert isinstance(create_store("memory"), MemoryRuleStore)

    def test_yaml(self, tmp_path):
        store = create_store("yaml", path=str(tmp_path / "s.yaml"))

        assert isinstance(store, YamlRuleStore)

    def test_sqlite(self, tmp_path):
        store = create_store("sqlite", database_url=f"sqlite:///{tmp_path / 's.db'}")

        assert isinstance(store, SqlRuleStore)
        store.close()

    def test_missing_location(self):
        with pytest.raises(StoreError):
            create_store("yaml")
        with pytest.raises(StoreError):
            create_store("sqlite")

    def test_unknown_backend(self):
        with pytest.raises(StoreError, match="Unknown settings backend"):
            create_store("redis")


# ============================================================================
# RuleSet loading
# ============================================================================


class TestLoadRuleSet:
    """Tests for load_rule_set() and build_rule_set()."""

    @pytest.mark.asyncio
    async def test_loads_site_keys(self):
        store = MemoryRuleStore(
            {
                "naukri_whitelistKeywords": ["python"],
                "naukri_blacklistedKeywords": ["sales"],
                "naukri_blacklistedCompanies": ["Acme"],
                "naukri_hideSaved": True,
                "naukri_hidePromoted": True,
                "indeed_blacklistedKeywords": ["intern"],
            }
        )

        rules = await load_rule_set(store, NaukriAdapter())

        assert rules == RuleSet(
            whitelist_keywords=["python"],
            blacklist_keywords=["sales"],
            blacklisted_companies=["Acme"],
            hide_saved=True,
            hide_promoted=True,
        )

    @pytest.mark.asyncio
    async def test_missing_keys_default(self):
        rules = await load_rule_set(MemoryRuleStore(), IndeedAdapter())

        assert rules == RuleSet.empty()

    @pytest.mark.asyncio
    async def test_linkedin_keys(self):
        store = MemoryRuleStore({"titleKeywords": ["sales"], "hideApplied": True, "hideSaved": True})

        rules = await load_rule_set(store, LinkedInAdapter())

        assert rules.blacklist_keywords == ("sales",)
        assert rules.hide_applied
        assert not rules.hide_saved

    @pytest.mark.asyncio
    async def test_store_failure_fails_open(self):
        rules = await load_rule_set(BrokenStore(), IndeedAdapter())

        assert rules == RuleSet.empty()

    @pytest.mark.asyncio
    async def test_store_without_data_fails_open(self, caplog):
        rules = await load_rule_set(NoDataStore(), IndeedAdapter())

        assert rules == RuleSet.empty()
        assert "settings.load.empty" in [getattr(r, "event", None) for r in caplog.records]

    @pytest.mark.asyncio
    async def test_unexpected_store_error_fails_open(self):
        rules = await load_rule_set(CrashingStore(), IndeedAdapter())

        assert rules == RuleSet.empty()

    def test_comma_separated_strings(self):
        rules = build_rule_set({"indeed_blacklistedKeywords": "sales, intern ,,"}, IndeedAdapter())

        assert rules.blacklist_keywords == ("sales", "intern")

    def test_rules_normalizing_to_nothing_are_discarded(self):
        rules = build_rule_set(
            {"indeed_blacklistedKeywords": ["!!!", "2024", "sales"]}, IndeedAdapter()
        )

        assert rules.blacklist_keywords == ("sales",)

    def test_digit_rules_kept_for_alnum_sites(self):
        rules = build_rule_set({"titleKeywords": ["2024", "???"]}, LinkedInAdapter())

        assert rules.blacklist_keywords == ("2024",)

    def test_company_names_are_not_normalized(self):
        rules = build_rule_set({"indeed_blacklistedCompanies": ["3M", "  "]}, IndeedAdapter())

        assert rules.blacklisted_companies == ("3M",)

    def test_wrong_types_are_ignored(self):
        rules = build_rule_set(
            {
                "indeed_blacklistedKeywords": {"not": "a list"},
                "indeed_whitelistKeywords": ["python", 7],
                "indeed_hideSaved": "yes",
            },
            IndeedAdapter(),
        )

        assert rules.blacklist_keywords == ()
        assert rules.whitelist_keywords == ("python",)
        assert not rules.hide_saved

    def test_string_booleans(self):
        rules = build_rule_set({"indeed_hideSaved": "True"}, IndeedAdapter())

        assert rules.hide_saved

    def test_null_values_default(self):
        rules = build_rule_set(
            {"indeed_blacklistedKeywords": None, "indeed_hideSaved": None}, IndeedAdapter()
        )

        assert rules == RuleSet.empty()
