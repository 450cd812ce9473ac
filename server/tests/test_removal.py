"""Tests for budgeter.analysis.removal — removal candidate assembly."""

from __future__ import annotations

from budgeter.analysis.removal import assemble_removal_candidates

TAG_MANAGER = "https://www.googletagmanager.com/gtm.js"
TRACKER = "https://px.tracker.net/p.js"


class TestAssembleRemovalCandidates:
    """Tests for assemble_removal_candidates()."""

    def test_allowlisted_blocking_script_is_not_flagged(self, make_resource) -> None:
        resources = [make_resource(TAG_MANAGER, origin="third", blocking=True)]
        assert assemble_removal_candidates(resources, [], allow=["googletagmanager.com"], deny=[]) == []

    def test_blocking_third_party_flagged(self, make_resource) -> None:
        resources = [make_resource(TAG_MANAGER, origin="third", blocking=True)]
        (candidate,) = assemble_removal_candidates(resources, [], allow=[], deny=[])
        assert candidate.url == TAG_MANAGER
        assert candidate.reason == "blocking-third-party"
        assert candidate.details is None

    def test_non_blocking_or_first_party_not_flagged(self, make_resource) -> None:
        resources = [
            make_resource(TAG_MANAGER, origin="third", blocking=False),
            make_resource("https://example.com/app.js", origin="first", blocking=True),
            make_resource("https://cdn.net/x.css", type="style", origin="third"),
        ]
        assert assemble_removal_candidates(resources, [], allow=[], deny=[]) == []

    def test_deny_flags_any_resource(self, make_resource) -> None:
        resources = [
            make_resource(TRACKER, origin="third", blocking=False),
            make_resource("https://px.tracker.net/p.css", type="style", origin="third"),
        ]
        candidates = assemble_removal_candidates(resources, [], allow=[], deny=["tracker.net"])
        assert [(c.reason, c.details) for c in candidates] == [
            ("denied-domain", "px.tracker.net"),
            ("denied-domain", "px.tracker.net"),
        ]

    def test_deny_wins_over_allow_and_blocking(self, make_resource) -> None:
        resources = [make_resource(TRACKER, origin="third", blocking=True)]
        candidates = assemble_removal_candidates(resources, [], allow=["tracker"], deny=["tracker"])
        assert [c.reason for c in candidates] == ["denied-domain"]

    def test_patterns_are_case_insensitive(self, make_resource) -> None:
        resources = [make_resource("https://PX.Tracker.NET/p.js", origin="third")]
        (candidate,) = assemble_removal_candidates(resources, [], allow=[], deny=["  TRACKER.net "])
        assert candidate.details == "px.tracker.net"

    def test_blank_patterns_ignored(self, make_resource) -> None:
        resources = [make_resource(TRACKER, origin="third", blocking=True)]
        candidates = assemble_removal_candidates(resources, [], allow=["", "  "], deny=[""])
        assert [c.reason for c in candidates] == ["blocking-third-party"]

    def test_old_versions_appended_last(self, make_resource, make_library) -> None:
        old = make_library("lodash", "4.16.0", url="https://cdn.net/lodash-4.16.0.js")
        libraries = [make_library("lodash", "4.17.21", url="https://cdn.net/lodash-4.17.21.js"), old]
        resources = [
            make_resource("https://cdn.net/lodash-4.17.21.js", origin="third", blocking=True),
            make_resource("https://cdn.net/lodash-4.16.0.js", origin="third", blocking=True),
        ]
        candidates = assemble_removal_candidates(resources, libraries, allow=["cdn.net"], deny=[])
        assert [(c.reason, c.url) for c in candidates] == [("duplicate-library-old-version", old.url)]

    def test_old_version_ignores_deny_list(self, make_resource, make_library) -> None:
        libraries = [
            make_library("vue", "3.0.0", url="https://cdn.net/vue-3.0.0.js"),
            make_library("vue", "2.7.0", url="https://cdn.net/vue-2.7.0.js"),
        ]
        resources = [make_resource("https://cdn.net/vue-2.7.0.js", origin="third")]
        candidates = assemble_removal_candidates(resources, libraries, allow=[], deny=["cdn.net"])
        assert [c.reason for c in candidates] == ["denied-domain", "duplicate-library-old-version"]

    def test_resource_order_preserved(self, make_resource) -> None:
        urls = ["https://b.net/1.js", "https://a.net/2.js", "https://c.net/3.js"]
        resources = [make_resource(u, origin="third", blocking=True) for u in urls]
        candidates = assemble_removal_candidates(resources, [], allow=[], deny=[])
        assert [c.url for c in candidates] == urls
