"""Tests for the bindings command."""

import json
from pathlib import Path

from click.testing import CliRunner

from bindscope.cli.cli import cli
from bindscope.core.bindings.types import RegistryDurableObject, RegistryEntry
from bindscope.core.context import BindscopeContext
from bindscope.core.dev_registry.fake import FakeDevRegistry
from tests.fakes.user_feedback import FakeUserFeedback

WORKER_TOML = """
name = "api"

[vars]
FOO = "bar"

[[kv_namespaces]]
binding = "CACHE"
id = "abc123"

[durable_objects]
bindings = [
  { name = "COUNTER", class_name = "Counter", script_name = "other-service" },
]

[[services]]
binding = "AUTH"
service = "auth-worker"

[[tail_consumers]]
service = "logger"
"""

RUNNING = {
    "other-service": RegistryEntry(
        durable_objects=(RegistryDurableObject(class_name="Counter"),),
    ),
}


def _write_config(cwd: Path, content: str = WORKER_TOML) -> Path:
    config_path = cwd / "bindscope.toml"
    config_path.write_text(content, encoding="utf-8")
    return config_path


def test_bindings_deploy_view(tmp_path: Path) -> None:
    """Outside local dev, values are shown without suffixes or markers."""
    _write_config(tmp_path)
    registry = FakeDevRegistry(RUNNING)
    ctx = BindscopeContext.for_test(dev_registry=registry, cwd=tmp_path)

    result = CliRunner().invoke(cli, ["bindings"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Your Worker has access to the following bindings:" in result.output
    assert "- Durable Objects:\n  - COUNTER: Counter (defined in other-service)" in result.output
    assert "  - CACHE: abc123\n" in result.output
    assert "  - FOO: \"bar\"" in result.output
    assert "- logger" in result.output
    assert "[connected]" not in result.output
    assert registry.read_count == 0


def test_bindings_local_view_checks_registry(tmp_path: Path) -> None:
    _write_config(tmp_path)
    registry = FakeDevRegistry(RUNNING)
    ctx = BindscopeContext.for_test(dev_registry=registry, cwd=tmp_path)

    result = CliRunner().invoke(cli, ["bindings", "--local"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Counter (defined in other-service [connected])" in result.output
    assert "AUTH: auth-worker [not connected]" in result.output
    assert "CACHE: abc123 [simulated locally]" in result.output
    assert "- logger [not connected]" in result.output
    assert "connection status indicated by" in result.output
    assert registry.read_count == 1


def test_bindings_local_without_registry(tmp_path: Path) -> None:
    _write_config(tmp_path)
    registry = FakeDevRegistry(RUNNING)
    ctx = BindscopeContext.for_test(dev_registry=registry, cwd=tmp_path)

    result = CliRunner().invoke(cli, ["bindings", "--local", "--no-registry"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Counter (defined in other-service)" in result.output
    assert "connected]" not in result.output
    assert "connection status indicated by" not in result.output
    assert registry.read_count == 0


def test_bindings_registry_path_option(tmp_path: Path) -> None:
    _write_config(tmp_path)
    registry_dir = tmp_path / "registry"
    registry_dir.mkdir()
    (registry_dir / "auth-worker").write_text("{}", encoding="utf-8")
    ctx = BindscopeContext.for_test(cwd=tmp_path)

    result = CliRunner().invoke(
        cli, ["bindings", "--local", "--registry-path", str(registry_dir)], obj=ctx
    )

    assert result.exit_code == 0, result.output
    assert "AUTH: auth-worker [connected]" in result.output


def test_bindings_registry_path_conflicts_with_no_registry(tmp_path: Path) -> None:
    _write_config(tmp_path)
    ctx = BindscopeContext.for_test(cwd=tmp_path)

    result = CliRunner().invoke(
        cli,
        ["bindings", "--no-registry", "--registry-path", str(tmp_path / "registry")],
        obj=ctx,
    )

    assert result.exit_code == 1
    assert "--registry-path cannot be combined with --no-registry" in result.output


def test_bindings_provisioning_title(tmp_path: Path) -> None:
    _write_config(tmp_path)
    ctx = BindscopeContext.for_test(cwd=tmp_path)

    result = CliRunner().invoke(cli, ["bindings", "--local", "--provisioning"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "The following bindings need to be provisioned:" in result.output
    assert "  - CACHE: abc123\n" in result.output
    assert "abc123 [simulated locally]" not in result.output


def test_bindings_multiworker_uses_config_name(tmp_path: Path) -> None:
    _write_config(tmp_path)
    ctx = BindscopeContext.for_test(cwd=tmp_path, multiworker=True)

    result = CliRunner().invoke(cli, ["bindings"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "api has access to the following bindings:" in result.output
    assert "api is sending Tail events to the following Workers:" in result.output


def test_bindings_explicit_config_path(tmp_path: Path) -> None:
    config_dir = tmp_path / "workers"
    config_dir.mkdir()
    _write_config(config_dir, '[vars]\nONLY = "one"\n')
    ctx = BindscopeContext.for_test(cwd=tmp_path)

    result = CliRunner().invoke(cli, ["bindings", "workers/bindscope.toml"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "ONLY: \"one\"" in result.output


def test_bindings_empty_config(tmp_path: Path) -> None:
    _write_config(tmp_path, 'name = "api"\n')
    ctx = BindscopeContext.for_test(cwd=tmp_path)

    result = CliRunner().invoke(cli, ["bindings"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "No bindings found." in result.output


def test_bindings_missing_config(tmp_path: Path) -> None:
    ctx = BindscopeContext.for_test(cwd=tmp_path)

    result = CliRunner().invoke(cli, ["bindings"], obj=ctx)

    assert result.exit_code == 1
    assert "Error: Config file not found" in result.output


def test_bindings_invalid_config(tmp_path: Path) -> None:
    _write_config(tmp_path, "queues = 3\n")
    feedback = FakeUserFeedback()
    ctx = BindscopeContext.for_test(cwd=tmp_path, feedback=feedback)

    result = CliRunner().invoke(cli, ["bindings"], obj=ctx)

    assert result.exit_code == 1
    assert len(feedback.error_messages) == 1
    assert "queues: Input should be a valid list" in feedback.error_messages[0]


def test_bindings_json(tmp_path: Path) -> None:
    _write_config(tmp_path)
    ctx = BindscopeContext.for_test(dev_registry=FakeDevRegistry(RUNNING), cwd=tmp_path)

    result = CliRunner().invoke(cli, ["bindings", "--local", "--json"], obj=ctx)

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["worker"] == "api"
    assert data["has_connection_status"] is True
    assert [group["name"] for group in data["groups"]] == [
        "Durable Objects",
        "KV Namespaces",
        "Services",
        "Vars",
    ]
    durable_object = data["groups"][0]["entries"][0]
    assert durable_object == {
        "key": "COUNTER",
        "value": "Counter (defined in other-service [connected])",
        "connection": "connected",
    }
    assert data["tail_consumers"] == [
        {"key": "logger", "value": "logger [not connected]", "connection": "not_connected"}
    ]


def test_bindings_renders_toml_dates(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        "[vars]\nLAUNCH = 1979-05-27T07:32:00Z\n\n[unsafe.metadata]\nsince = 2024-01-01\n",
    )
    ctx = BindscopeContext.for_test(cwd=tmp_path)

    result = CliRunner().invoke(cli, ["bindings"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert '  - LAUNCH: "1979-05-27T07:32:00+00:00"' in result.output
    assert '  - since: "2024-01-01"' in result.output


def test_bindings_local_skips_binary_registry_file(tmp_path: Path) -> None:
    _write_config(tmp_path)
    registry_dir = tmp_path / "registry"
    registry_dir.mkdir()
    (registry_dir / "other-service").write_bytes(b"\xff\xfe{not utf8")
    (registry_dir / "auth-worker").write_text("{}", encoding="utf-8")
    ctx = BindscopeContext.for_test(cwd=tmp_path)

    result = CliRunner().invoke(
        cli, ["bindings", "--local", "--registry-path", str(registry_dir)], obj=ctx
    )

    assert result.exit_code == 0, result.output
    assert "AUTH: auth-worker [connected]" in result.output
    assert "Counter (defined in other-service [not connected])" in result.output
