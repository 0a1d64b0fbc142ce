"""Tests for context creation."""

from pathlib import Path

import pytest

from bindscope.core.context import BindscopeContext, create_context
from bindscope.core.dev_registry.fake import FakeDevRegistry
from bindscope.core.dev_registry.real import FileDevRegistry
from bindscope.core.once import once


def test_create_context_reads_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """create_context picks up the registry path and multi-worker flag."""
    monkeypatch.setenv("BINDSCOPE_REGISTRY_PATH", str(tmp_path / "registry"))
    monkeypatch.setenv("BINDSCOPE_MULTIWORKER", "true")
    monkeypatch.chdir(tmp_path)

    ctx = create_context()

    assert isinstance(ctx.dev_registry, FileDevRegistry)
    assert ctx.dev_registry.registry_path == tmp_path / "registry"
    assert ctx.multiworker is True
    assert ctx.cwd == tmp_path
    # Production context shares the process-wide notifier
    assert ctx.notifier is once


def test_create_context_default_registry_under_config_dir(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("BINDSCOPE_REGISTRY_PATH", raising=False)
    monkeypatch.delenv("BINDSCOPE_DEV_REGISTRY_PATH", raising=False)
    monkeypatch.delenv("BINDSCOPE_MULTIWORKER", raising=False)
    monkeypatch.setenv("BINDSCOPE_CONFIG_DIR", str(tmp_path / "config"))

    ctx = create_context()

    assert isinstance(ctx.dev_registry, FileDevRegistry)
    assert ctx.dev_registry.registry_path == tmp_path / "config" / "registry"
    assert ctx.multiworker is False


def test_for_test_uses_fresh_notifier() -> None:
    ctx1 = BindscopeContext.for_test()
    ctx2 = BindscopeContext.for_test()

    assert isinstance(ctx1.dev_registry, FakeDevRegistry)
    assert ctx1.notifier is not ctx2.notifier
    assert ctx1.notifier is not once
