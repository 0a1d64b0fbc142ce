"""Type definitions for worker bindings and their rendered inventory.

Each binding kind has its own record type carrying exactly the fields needed
to display it. `BindingConfig` groups them by kind; absent kinds are None.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import Any


class PendingProvision:
    """Sentinel for a resource identifier that has not been provisioned yet.

    Config files may leave an id empty to request automatic provisioning.
    Displayed as an empty string.
    """

    def __repr__(self) -> str:
        return "PENDING_PROVISION"


PENDING_PROVISION = PendingProvision()

ResourceId = str | PendingProvision

# TOML also yields dates and times (datetime is a date)
VarValue = str | bool | int | float | None | list[Any] | dict[str, Any] | date | time


@dataclass(frozen=True)
class DurableObjectBinding:
    """Durable Object namespace, optionally exported by another worker."""

    name: str
    class_name: str
    script_name: str | None = None


@dataclass(frozen=True)
class WorkflowBinding:
    binding: str
    name: str
    class_name: str
    script_name: str | None = None
    remote: bool = False


@dataclass(frozen=True)
class KVNamespaceBinding:
    binding: str
    id: ResourceId | None
    remote: bool = False


@dataclass(frozen=True)
class SendEmailBinding:
    name: str
    destination_address: str | None = None
    allowed_destination_addresses: list[str] | None = None


@dataclass(frozen=True)
class QueueBinding:
    binding: str
    queue_name: str
    remote: bool = False


@dataclass(frozen=True)
class D1DatabaseBinding:
    """D1 database binding.

    `database_id` is the literal "local" when running purely locally, in
    which case the preview id is not shown.
    """

    binding: str
    database_name: str | None = None
    database_id: ResourceId | None = None
    preview_database_id: str | None = None
    remote: bool = False


@dataclass(frozen=True)
class VectorizeBinding:
    binding: str
    index_name: str


@dataclass(frozen=True)
class HyperdriveBinding:
    binding: str
    id: str


@dataclass(frozen=True)
class R2BucketBinding:
    binding: str
    bucket_name: ResourceId | None
    jurisdiction: str | None = None
    remote: bool = False


@dataclass(frozen=True)
class LogfwdrBinding:
    name: str
    destination: str


@dataclass(frozen=True)
class SecretsStoreSecretBinding:
    binding: str
    store_id: str
    secret_name: str


@dataclass(frozen=True)
class ServiceBinding:
    """Binding to another worker, optionally to a named entrypoint."""

    binding: str
    service: str
    entrypoint: str | None = None
    remote: bool = False


@dataclass(frozen=True)
class AnalyticsEngineBinding:
    binding: str
    dataset: str | None = None


@dataclass(frozen=True)
class PipelineBinding:
    binding: str
    pipeline: str


@dataclass(frozen=True)
class DispatchOutbound:
    service: str


@dataclass(frozen=True)
class DispatchNamespaceBinding:
    binding: str
    namespace: str
    outbound: DispatchOutbound | None = None


@dataclass(frozen=True)
class MtlsCertificateBinding:
    binding: str
    certificate_id: str


@dataclass(frozen=True)
class NamedBinding:
    """Singleton binding identified only by its binding name."""

    binding: str


@dataclass(frozen=True)
class AiBinding:
    binding: str
    staging: bool | None = None


@dataclass(frozen=True)
class UnsafeBinding:
    name: str
    type: str


@dataclass(frozen=True)
class UnsafeBindings:
    """Raw bindings and metadata passed through to the runtime as-is."""

    bindings: list[UnsafeBinding] | None = None
    metadata: dict[str, Any] | None = None


@dataclass(frozen=True)
class BindingConfig:
    """All bindings declared for one worker, keyed by kind.

    Binding keys are unique within a kind only.
    """

    data_blobs: dict[str, str | bytes] | None = None
    durable_objects: list[DurableObjectBinding] | None = None
    workflows: list[WorkflowBinding] | None = None
    kv_namespaces: list[KVNamespaceBinding] | None = None
    send_email: list[SendEmailBinding] | None = None
    queues: list[QueueBinding] | None = None
    d1_databases: list[D1DatabaseBinding] | None = None
    vectorize: list[VectorizeBinding] | None = None
    hyperdrive: list[HyperdriveBinding] | None = None
    r2_buckets: list[R2BucketBinding] | None = None
    logfwdr: list[LogfwdrBinding] | None = None
    secrets_store_secrets: list[SecretsStoreSecretBinding] | None = None
    services: list[ServiceBinding] | None = None
    analytics_engine_datasets: list[AnalyticsEngineBinding] | None = None
    text_blobs: dict[str, str] | None = None
    browser: NamedBinding | None = None
    images: NamedBinding | None = None
    ai: AiBinding | None = None
    pipelines: list[PipelineBinding] | None = None
    assets: NamedBinding | None = None
    version_metadata: NamedBinding | None = None
    unsafe: UnsafeBindings | None = None
    vars: dict[str, VarValue] | None = None
    wasm_modules: dict[str, str | bytes] | None = None
    dispatch_namespaces: list[DispatchNamespaceBinding] | None = None
    mtls_certificates: list[MtlsCertificateBinding] | None = None


@dataclass(frozen=True)
class TailConsumer:
    """Worker receiving tail events from this worker."""

    service: str


class ConnectivityVerdict(Enum):
    """Whether a locally running peer worker exposes what a binding needs."""

    CONNECTED = "connected"
    NOT_CONNECTED = "not_connected"
    UNKNOWN = "unknown"  # registry unavailable


@dataclass(frozen=True)
class RegistryDurableObject:
    class_name: str
    name: str | None = None


@dataclass(frozen=True)
class RegistryAddress:
    host: str
    port: int


@dataclass(frozen=True)
class RegistryEntry:
    """What a locally running worker currently exposes."""

    durable_objects: tuple[RegistryDurableObject, ...] = ()
    entrypoint_addresses: dict[str, RegistryAddress] = field(default_factory=dict)


RegistrySnapshot = Mapping[str, RegistryEntry]


class RegistryNotLoaded:
    """Sentinel indicating no registry snapshot was supplied.

    Distinct from None, which means the registry is explicitly disabled.
    Bindings still request resolution, but every verdict is UNKNOWN.
    """


REGISTRY_NOT_LOADED = RegistryNotLoaded()


@dataclass(frozen=True)
class RenderContext:
    """Flags for one render of the binding inventory."""

    is_local_dev: bool = False
    is_provisioning: bool = False
    is_multi_worker_display: bool = False
    worker_name: str | None = None
    # Images run locally or remotely independent of the rest of the worker
    images_local_mode: bool | None = None


@dataclass(frozen=True)
class DisplayEntry:
    key: str
    value: str
    # Set when value carries a connectivity marker, for coloring only
    verdict: ConnectivityVerdict | None = None


@dataclass(frozen=True)
class DisplayGroup:
    name: str
    entries: tuple[DisplayEntry, ...]


@dataclass(frozen=True)
class ClassifiedBindings:
    """Result of classifying a worker's bindings.

    Attributes:
        groups: One group per populated binding kind, in kind order
        tail_consumers: Display entries for tail consumers (key is the service)
        has_connection_status: True if any registry resolution was requested
    """

    groups: tuple[DisplayGroup, ...]
    tail_consumers: tuple[DisplayEntry, ...]
    has_connection_status: bool
