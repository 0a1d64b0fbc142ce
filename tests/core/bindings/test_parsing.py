"""Tests for building BindingConfig from config files."""

from datetime import UTC, date, datetime
from pathlib import Path

import pytest

from bindscope.core.bindings.parsing import (
    BindingConfigError,
    load_binding_config,
    parse_binding_config,
)
from bindscope.core.bindings.types import (
    PENDING_PROVISION,
    AiBinding,
    DispatchOutbound,
    DurableObjectBinding,
    KVNamespaceBinding,
    NamedBinding,
    ServiceBinding,
    TailConsumer,
    UnsafeBinding,
)

WORKER_TOML = """
name = "my-worker"

[vars]
FOO = "bar"
DEBUG = true

[[kv_namespaces]]
binding = "CACHE"
id = "abc123"
remote = true

[[kv_namespaces]]
binding = "NEW"
id = ""

[durable_objects]
bindings = [
  { name = "COUNTER", class_name = "Counter", script_name = "other-service" },
]

[[services]]
binding = "AUTH"
service = "auth-worker"
entrypoint = "AuthEntrypoint"

[[dispatch_namespaces]]
binding = "DISPATCH"
namespace = "ns"
outbound = { service = "router" }

[ai]
binding = "AI"

[browser]
binding = "BROWSER"

[unsafe]
bindings = [{ name = "RAW", type = "custom" }]
metadata = { limits = { cpu_ms = 50 } }

[[tail_consumers]]
service = "logger"
"""


def test_load_binding_config(tmp_path: Path) -> None:
    config_path = tmp_path / "bindscope.toml"
    config_path.write_text(WORKER_TOML, encoding="utf-8")

    worker = load_binding_config(config_path)

    assert worker.name == "my-worker"
    assert worker.tail_consumers == [TailConsumer(service="logger")]
    bindings = worker.bindings
    assert bindings.vars == {"FOO": "bar", "DEBUG": True}
    assert bindings.kv_namespaces == [
        KVNamespaceBinding(binding="CACHE", id="abc123", remote=True),
        KVNamespaceBinding(binding="NEW", id=PENDING_PROVISION),
    ]
    assert bindings.durable_objects == [
        DurableObjectBinding(name="COUNTER", class_name="Counter", script_name="other-service")
    ]
    assert bindings.services == [
        ServiceBinding(binding="AUTH", service="auth-worker", entrypoint="AuthEntrypoint")
    ]
    assert bindings.dispatch_namespaces is not None
    assert bindings.dispatch_namespaces[0].outbound == DispatchOutbound(service="router")
    assert bindings.ai == AiBinding(binding="AI")
    assert bindings.browser == NamedBinding(binding="BROWSER")
    assert bindings.unsafe is not None
    assert bindings.unsafe.bindings == [UnsafeBinding(name="RAW", type="custom")]
    assert bindings.unsafe.metadata == {"limits": {"cpu_ms": 50}}


def test_absent_kinds_are_none() -> None:
    worker = parse_binding_config({})

    assert worker.name is None
    assert worker.tail_consumers == []
    assert worker.bindings.vars is None
    assert worker.bindings.services is None
    assert worker.bindings.images is None


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        load_binding_config(tmp_path / "missing.toml")


def test_invalid_toml_raises_config_error(tmp_path: Path) -> None:
    config_path = tmp_path / "bindscope.toml"
    config_path.write_text("[vars\n", encoding="utf-8")

    with pytest.raises(BindingConfigError):
        load_binding_config(config_path)


def test_list_kind_must_be_list_of_tables() -> None:
    with pytest.raises(BindingConfigError, match="queues: Input should be a valid list"):
        parse_binding_config({"queues": {"binding": "Q"}})


def test_required_field_missing_names_the_record() -> None:
    with pytest.raises(BindingConfigError, match=r"services\.1\.service: Field required"):
        parse_binding_config(
            {
                "services": [
                    {"binding": "OK", "service": "ok"},
                    {"binding": "BROKEN"},
                ]
            }
        )

def test_remote_must_be_boolean() -> None:
    config = {"r2_buckets": [{"binding": "R2", "bucket_name": "b", "remote": 1}]}

    with pytest.raises(BindingConfigError, match=r"r2_buckets\.0\.remote: .*valid boolean"):
        parse_binding_config(config)


def test_text_blobs_must_be_strings() -> None:
    with pytest.raises(BindingConfigError, match=r"text_blobs\.TEXT: .*valid string"):
        parse_binding_config({"text_blobs": {"TEXT": 3}})


def test_nested_outbound_requires_service() -> None:
    config = {"dispatch_namespaces": [{"binding": "D", "namespace": "ns", "outbound": {}}]}

    with pytest.raises(BindingConfigError, match=r"dispatch_namespaces\.0\.outbound\.service"):
        parse_binding_config(config)


def test_unknown_keys_are_ignored() -> None:
    worker = parse_binding_config(
        {"main": "src/index.ts", "compatibility_date": "2024-01-01", "vars": {"A": "b"}}
    )

    assert worker.bindings.vars == {"A": "b"}


def test_toml_dates_are_kept(tmp_path: Path) -> None:
    config_path = tmp_path / "bindscope.toml"
    config_path.write_text(
        "[vars]\nLAUNCH = 1979-05-27T07:32:00Z\n\n[unsafe.metadata]\nsince = 2024-01-01\n",
        encoding="utf-8",
    )

    worker = load_binding_config(config_path)

    assert worker.bindings.vars == {"LAUNCH": datetime(1979, 5, 27, 7, 32, tzinfo=UTC)}
    assert worker.bindings.unsafe is not None
    assert worker.bindings.unsafe.metadata == {"since": date(2024, 1, 1)}


def test_non_utf8_file_raises_config_error(tmp_path: Path) -> None:
    config_path = tmp_path / "bindscope.toml"
    config_path.write_bytes(b'name = "\xff\xfe"\n')

    with pytest.raises(BindingConfigError):
        load_binding_config(config_path)
