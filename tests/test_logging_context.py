"""Tests for the per-scope log fields in jobfilter.logging.context."""

import asyncio

import pytest

from jobfilter.logging.context import (
    clear_log_context,
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)


def test_nothing_pushed():
    assert get_log_context() == {}


def test_push_and_pop():
    token = push_log_context(site="naukri", session_id="s1")
    assert get_log_context() == {"site": "naukri", "session_id": "s1"}

    pop_log_context(token)
    assert get_log_context() == {}


def test_nested_push_merges_layers():
    token1 = push_log_context(site="indeed")
    token2 = push_log_context(pass_id="p1")
    assert get_log_context() == {"site": "indeed", "pass_id": "p1"}

    pop_log_context(token2)
    assert get_log_context() == {"site": "indeed"}

    pop_log_context(token1)
    assert get_log_context() == {}


def test_inner_value_overrides_outer():
    with log_context(pass_id="outer"):
        with log_context(pass_id="inner"):
            assert get_log_context() == {"pass_id": "inner"}
        assert get_log_context() == {"pass_id": "outer"}


def test_session_scope_around_pass_scope():
    """Fields of both scopes are visible inside the inner one."""
    with log_context(site="linkedin", session_id="s1"):
        with log_context(pass_id="p1"):
            assert get_log_context() == {
                "site": "linkedin",
                "session_id": "s1",
                "pass_id": "p1",
            }
        assert get_log_context() == {"site": "linkedin", "session_id": "s1"}

    assert get_log_context() == {}


def test_scope_unwound_by_error():
    with pytest.raises(ValueError):
        with log_context(pass_id="p1"):
            raise ValueError("card read failed")

    assert get_log_context() == {}


def test_clear_drops_everything():
    push_log_context(site="glassdoor", pass_id="p1")

    clear_log_context()

    assert get_log_context() == {}


def test_get_log_context_returns_copy():
    with log_context(site="foundit"):
        context = get_log_context()
        context["pass_id"] = "modified"

        assert get_log_context() == {"site": "foundit"}


@pytest.mark.asyncio
async def test_tasks_keep_separate_contexts():
    """Concurrent sessions must not see each other's fields."""
    seen = {}

    async def session(site):
        with log_context(site=site):
            await asyncio.sleep(0.01)
            seen[site] = get_log_context()

    await asyncio.gather(session("naukri"), session("indeed"))

    assert seen == {"naukri": {"site": "naukri"}, "indeed": {"site": "indeed"}}
    assert get_log_context() == {}
