from __future__ import annotations

from kn_ping.cli.formatting import format_changes, format_update_summary
from kn_ping.engine.types import FieldChange, UpdateResult
from kn_ping.resources import PingSource

_SOURCE = PingSource(name="heartbeat", namespace="apps", schedule="* * * * *")


class TestFormatChanges:
    def test_no_changes(self) -> None:
        out = format_changes("apps/heartbeat", [], color=False)
        assert out == "No changes. Ping source apps/heartbeat is up-to-date."

    def test_aligned_rows(self) -> None:
        out = format_changes(
            "apps/heartbeat",
            [
                FieldChange(field="schedule", before="* * * * *", after="0 * * * *"),
                FieldChange(field="ce_overrides", before={"a": "1"}, after={}),
                FieldChange(field="data", before=None, after="x"),
            ],
            color=False,
        )
        assert out.splitlines() == [
            "  # ping source apps/heartbeat will be updated in-place",
            '      ~ schedule     = "* * * * *" -> "0 * * * *"',
            '      ~ ce_overrides = {"a": "1"} -> {}',
            '      ~ data         = null -> "x"',
        ]

    def test_color(self) -> None:
        out = format_changes(
            "apps/heartbeat", [FieldChange(field="data", before="a", after="b")], color=True
        )
        assert "\x1b[" in out


class TestFormatUpdateSummary:
    def test_updated(self) -> None:
        result = UpdateResult(name="heartbeat", namespace="apps", source=_SOURCE)
        assert (
            format_update_summary(result, color=False)
            == "Ping source 'heartbeat' updated in namespace 'apps'."
        )

    def test_dry_run_plural(self) -> None:
        result = UpdateResult(
            name="heartbeat",
            namespace="apps",
            source=_SOURCE,
            dry_run=True,
            changes=[FieldChange(field="data"), FieldChange(field="data_base64")],
        )
        assert format_update_summary(result, color=False).endswith("would change 2 fields.")
