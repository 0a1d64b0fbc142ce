"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from bindscope.cli.ensure import Ensure
from bindscope.core.dev_registry.abc import DevRegistry
from bindscope.core.dev_registry.real import FileDevRegistry
from bindscope.core.env_vars.variables import get_multiworker_from_env, get_registry_path
from bindscope.core.once import OnceNotifier, once
from bindscope.core.user_feedback import InteractiveFeedback, UserFeedback


@dataclass(frozen=True)
class BindscopeContext:
    """Immutable context holding all dependencies for bindscope commands.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    dev_registry: DevRegistry
    feedback: UserFeedback
    notifier: OnceNotifier
    cwd: Path  # Current working directory at CLI invocation
    multiworker: bool

    @staticmethod
    def for_test(
        dev_registry: DevRegistry | None = None,
        feedback: UserFeedback | None = None,
        notifier: OnceNotifier | None = None,
        cwd: Path | None = None,
        multiworker: bool = False,
    ) -> "BindscopeContext":
        """Create test context with optional pre-configured dependencies.

        Args:
            dev_registry: Optional DevRegistry. If None, creates an empty FakeDevRegistry.
            feedback: Optional UserFeedback. If None, uses InteractiveFeedback.
            notifier: Optional OnceNotifier. If None, creates a fresh one so
                tests don't share once-only state.
            cwd: Optional current working directory. If None, uses Path("/test/default/cwd").
            multiworker: Whether multi-worker display is enabled

        Returns:
            Frozen BindscopeContext for use in tests
        """
        from bindscope.core.dev_registry.fake import FakeDevRegistry

        return BindscopeContext(
            dev_registry=dev_registry if dev_registry is not None else FakeDevRegistry(),
            feedback=feedback if feedback is not None else InteractiveFeedback(),
            notifier=notifier if notifier is not None else OnceNotifier(),
            cwd=cwd if cwd is not None else Path("/test/default/cwd"),
            multiworker=multiworker,
        )


def create_context() -> BindscopeContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Returns:
        BindscopeContext reading the dev registry from BINDSCOPE_REGISTRY_PATH
    """
    registry_path = Ensure.not_none(
        get_registry_path(), "Could not determine the dev registry directory"
    )

    return BindscopeContext(
        dev_registry=FileDevRegistry(Path(registry_path)),
        feedback=InteractiveFeedback(),
        notifier=once,
        cwd=Path.cwd(),
        multiworker=get_multiworker_from_env(),
    )
