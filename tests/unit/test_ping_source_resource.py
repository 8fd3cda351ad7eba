"""Tests for PingSource and Destination models."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from kn_ping.resources import Destination, KReference, PingSource


def _manifest(**spec: Any) -> dict[str, Any]:
    return {
        "apiVersion": "sources.knative.dev/v1beta2",
        "kind": "PingSource",
        "metadata": {
            "name": "heartbeat",
            "namespace": "apps",
            "resourceVersion": "4711",
            "uid": "abc",
            "labels": {"app": "heartbeat"},
            "managedFields": [{"manager": "kn"}],
        },
        "spec": spec,
        "status": {"conditions": []},
    }


class TestPingSourceModel:
    def test_defaults(self) -> None:
        s = PingSource(name="heartbeat")
        assert s.namespace == "default"
        assert s.schedule is None
        assert s.ce_overrides == {}
        assert s.sink is None
        assert not s.is_deleting

    def test_address(self) -> None:
        assert PingSource(name="heartbeat", namespace="apps").address == "apps/heartbeat"

    def test_both_payloads_rejected(self) -> None:
        with pytest.raises(ValidationError, match="both 'data' and 'data_base64'"):
            PingSource(name="s", data="x", data_base64="eA==")

    def test_empty_schedule_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PingSource(name="s", schedule="")

    def test_invalid_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PingSource(name="Not_Valid")

    def test_extra_forbid(self) -> None:
        with pytest.raises(ValidationError, match="extra"):
            PingSource(name="s", unknown_field="x")  # type: ignore[call-arg]


class TestFromManifest:
    def test_spec_fields(self) -> None:
        s = PingSource.from_manifest(
            _manifest(
                schedule="*/1 * * * *",
                timezone="Europe/Berlin",
                contentType="application/json",
                data='{"a": 1}',
                sink={"ref": {"apiVersion": "v1", "kind": "Service", "name": "display"}},
                ceOverrides={"extensions": {"team": "core"}},
            )
        )
        assert s.name == "heartbeat"
        assert s.namespace == "apps"
        assert s.schedule == "*/1 * * * *"
        assert s.timezone == "Europe/Berlin"
        assert s.content_type == "application/json"
        assert s.data == '{"a": 1}'
        assert s.sink == Destination(
            ref=KReference(kind="Service", name="display", api_version="v1")
        )
        assert s.ce_overrides == {"team": "core"}

    def test_server_managed_metadata_stripped(self) -> None:
        s = PingSource.from_manifest(_manifest(schedule="* * * * *"))
        assert s.metadata == {
            "resourceVersion": "4711",
            "uid": "abc",
            "labels": {"app": "heartbeat"},
        }
        assert s.resource_version == "4711"

    def test_deletion_timestamp(self) -> None:
        raw = _manifest(schedule="* * * * *")
        raw["metadata"]["deletionTimestamp"] = "2024-05-01T10:00:00Z"
        assert PingSource.from_manifest(raw).is_deleting

    def test_missing_ce_overrides(self) -> None:
        s = PingSource.from_manifest(_manifest(schedule="* * * * *", ceOverrides=None))
        assert s.ce_overrides == {}


class TestToManifest:
    def test_shape(self) -> None:
        s = PingSource(
            name="heartbeat",
            namespace="apps",
            schedule="* * * * *",
            data_base64="aGk=",
            sink=Destination(uri="https://example.com"),
            ce_overrides={"team": "core"},
            metadata={"labels": {"app": "x"}},
        )
        assert s.to_manifest() == {
            "apiVersion": "sources.knative.dev/v1beta2",
            "kind": "PingSource",
            "metadata": {"labels": {"app": "x"}, "name": "heartbeat", "namespace": "apps"},
            "spec": {
                "schedule": "* * * * *",
                "dataBase64": "aGk=",
                "sink": {"uri": "https://example.com"},
                "ceOverrides": {"extensions": {"team": "core"}},
            },
        }

    def test_empty_overrides_omitted(self) -> None:
        spec = PingSource(name="s", schedule="* * * * *").to_manifest()["spec"]
        assert "ceOverrides" not in spec
        assert "data" not in spec

    def test_resource_version_carried(self) -> None:
        s = PingSource.from_manifest(_manifest(schedule="* * * * *"))
        metadata = s.to_manifest()["metadata"]
        assert metadata["resourceVersion"] == "4711"
        assert "managedFields" not in metadata

    def test_full_sink_round_trip(self) -> None:
        sink = {
            "ref": {
                "kind": "Broker",
                "name": "default",
                "namespace": "apps",
                "group": "eventing.knative.dev",
                "address": "my-address",
            },
            "uri": "/extra",
            "CACerts": "-----BEGIN CERTIFICATE-----",
            "audience": "broker-audience",
        }
        s = PingSource.from_manifest(_manifest(schedule="* * * * *", sink=sink))
        assert s.sink is not None
        assert s.sink.ca_certs == "-----BEGIN CERTIFICATE-----"
        assert s.sink.audience == "broker-audience"
        assert s.sink.ref is not None
        assert s.sink.ref.api_version is None
        assert s.to_manifest()["spec"]["sink"] == sink


class TestDestination:
    def test_requires_ref_or_uri(self) -> None:
        with pytest.raises(ValidationError, match="'ref' or 'uri'"):
            Destination()

    def test_manifest_uses_camel_case(self) -> None:
        dest = Destination(
            ref=KReference(kind="Broker", name="default", api_version="eventing.knative.dev/v1")
        )
        assert dest.to_manifest() == {
            "ref": {"kind": "Broker", "name": "default", "apiVersion": "eventing.knative.dev/v1"}
        }

    def test_reference_requires_api_version_or_group(self) -> None:
        with pytest.raises(ValidationError, match="'apiVersion' or 'group'"):
            KReference(kind="Broker", name="default")

    def test_describe(self) -> None:
        ref = KReference(kind="Broker", name="default", api_version="v1", namespace="apps")
        assert Destination(ref=ref).describe() == "Broker:default/apps"
        assert Destination(uri="http://x").describe() == "http://x"
