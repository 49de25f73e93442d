"""Unit tests for simconsole.api.schemas."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from simconsole.api.schemas import ErrorBody, ResourceList, SchedulerConfiguration


class TestResourceList:
    def test_items_and_metadata_parse(self) -> None:
        body = ResourceList.model_validate({"items": [{"metadata": {"name": "a"}}], "metadata": {"continue": ""}})
        assert body.items == [{"metadata": {"name": "a"}}]
        assert body.metadata == {"continue": ""}

    def test_null_items_become_empty(self) -> None:
        assert ResourceList.model_validate({"items": None}).items == []

    def test_null_metadata_becomes_empty(self) -> None:
        assert ResourceList.model_validate({"metadata": None}).metadata == {}

    def test_defaults_when_absent(self) -> None:
        body = ResourceList.model_validate({})
        assert body.items == []
        assert body.metadata == {}

    def test_extra_envelope_fields_are_kept(self) -> None:
        body = ResourceList.model_validate({"kind": "PodList", "apiVersion": "v1", "items": []})
        assert body.model_extra == {"kind": "PodList", "apiVersion": "v1"}

    def test_non_object_items_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ResourceList.model_validate({"items": [1, 2]})

    def test_non_object_body_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ResourceList.model_validate(["a"])


class TestErrorBody:
    def test_message_parsed(self) -> None:
        assert ErrorBody.model_validate({"message": "not found"}).message == "not found"

    def test_message_defaults_to_empty(self) -> None:
        assert ErrorBody.model_validate({"code": 500}).message == ""


class TestSchedulerConfiguration:
    def test_alias_round_trip(self) -> None:
        payload = {
            "kind": "KubeSchedulerConfiguration",
            "apiVersion": "kubescheduler.config.k8s.io/v1beta2",
            "profiles": [{"schedulerName": "default-scheduler", "plugins": {"score": {"enabled": []}}}],
        }
        config = SchedulerConfiguration.model_validate(payload)
        assert config.api_version == "kubescheduler.config.k8s.io/v1beta2"
        assert config.to_payload() == payload

    def test_populate_by_field_name(self) -> None:
        config = SchedulerConfiguration(api_version="v1")
        assert config.to_payload() == {"apiVersion": "v1"}

    def test_unknown_settings_preserved(self) -> None:
        config = SchedulerConfiguration.model_validate({"parallelism": 16, "extenders": []})
        assert config.to_payload() == {"parallelism": 16, "extenders": []}

    def test_profiles_must_be_a_list(self) -> None:
        with pytest.raises(ValidationError):
            SchedulerConfiguration.model_validate({"profiles": {"schedulerName": "x"}})
