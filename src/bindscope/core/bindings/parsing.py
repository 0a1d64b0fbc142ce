"""Build a typed BindingConfig from a parsed configuration file.

The config file is TOML in the same layout workers declare bindings in:

    name = "my-worker"

    [vars]
    FOO = "bar"

    [[kv_namespaces]]
    binding = "CACHE"
    id = "abc123"

    [[services]]
    binding = "AUTH"
    service = "auth-worker"
    entrypoint = "AuthEntrypoint"

    [[tail_consumers]]
    service = "logger-worker"

The document is validated with pydantic models mirroring that layout, then
converted to the binding records in bindscope.core.bindings.types. Parsing
fails fast on a wrong shape: the classifier downstream assumes well-typed
input and does no validation of its own.
"""

import tomllib
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr, ValidationError

from bindscope.core.bindings.types import (
    PENDING_PROVISION,
    AiBinding,
    AnalyticsEngineBinding,
    BindingConfig,
    D1DatabaseBinding,
    DispatchNamespaceBinding,
    DispatchOutbound,
    DurableObjectBinding,
    HyperdriveBinding,
    KVNamespaceBinding,
    LogfwdrBinding,
    MtlsCertificateBinding,
    NamedBinding,
    PipelineBinding,
    QueueBinding,
    R2BucketBinding,
    ResourceId,
    SecretsStoreSecretBinding,
    SendEmailBinding,
    ServiceBinding,
    TailConsumer,
    UnsafeBinding,
    UnsafeBindings,
    VectorizeBinding,
    WorkflowBinding,
)


class BindingConfigError(ValueError):
    """Raised when a binding config does not have the expected shape."""


@dataclass(frozen=True)
class WorkerConfig:
    """Everything read from a worker config file that bindscope needs."""

    name: str | None
    bindings: BindingConfig
    tail_consumers: list[TailConsumer]


def _resource_id(value: str | None) -> ResourceId | None:
    """An empty id asks for the resource to be provisioned."""
    if value == "":
        return PENDING_PROVISION
    return value


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class _DurableObjectRecord(_Record):
    name: StrictStr
    class_name: StrictStr
    script_name: StrictStr | None = None

    def to_binding(self) -> DurableObjectBinding:
        return DurableObjectBinding(
            name=self.name, class_name=self.class_name, script_name=self.script_name
        )


class _DurableObjectsTable(_Record):
    bindings: list[_DurableObjectRecord] | None = None


class _WorkflowRecord(_Record):
    binding: StrictStr
    name: StrictStr
    class_name: StrictStr
    script_name: StrictStr | None = None
    remote: StrictBool = False

    def to_binding(self) -> WorkflowBinding:
        return WorkflowBinding(
            binding=self.binding,
            name=self.name,
            class_name=self.class_name,
            script_name=self.script_name,
            remote=self.remote,
        )


class _KVNamespaceRecord(_Record):
    binding: StrictStr
    id: StrictStr | None = None
    remote: StrictBool = False

    def to_binding(self) -> KVNamespaceBinding:
        return KVNamespaceBinding(
            binding=self.binding, id=_resource_id(self.id), remote=self.remote
        )


class _SendEmailRecord(_Record):
    name: StrictStr
    destination_address: StrictStr | None = None
    allowed_destination_addresses: list[StrictStr] | None = None

    def to_binding(self) -> SendEmailBinding:
        return SendEmailBinding(
            name=self.name,
            destination_address=self.destination_address,
            allowed_destination_addresses=self.allowed_destination_addresses,
        )


class _QueueRecord(_Record):
    binding: StrictStr
    queue_name: StrictStr
    remote: StrictBool = False

    def to_binding(self) -> QueueBinding:
        return QueueBinding(binding=self.binding, queue_name=self.queue_name, remote=self.remote)


class _D1DatabaseRecord(_Record):
    binding: StrictStr
    database_name: StrictStr | None = None
    database_id: StrictStr | None = None
    preview_database_id: StrictStr | None = None
    remote: StrictBool = False

    def to_binding(self) -> D1DatabaseBinding:
        return D1DatabaseBinding(
            binding=self.binding,
            database_name=self.database_name,
            database_id=_resource_id(self.database_id),
            preview_database_id=self.preview_database_id,
            remote=self.remote,
        )


class _VectorizeRecord(_Record):
    binding: StrictStr
    index_name: StrictStr

    def to_binding(self) -> VectorizeBinding:
        return VectorizeBinding(binding=self.binding, index_name=self.index_name)


class _HyperdriveRecord(_Record):
    binding: StrictStr
    id: StrictStr

    def to_binding(self) -> HyperdriveBinding:
        return HyperdriveBinding(binding=self.binding, id=self.id)


class _R2BucketRecord(_Record):
    binding: StrictStr
    bucket_name: StrictStr | None = None
    jurisdiction: StrictStr | None = None
    remote: StrictBool = False

    def to_binding(self) -> R2BucketBinding:
        return R2BucketBinding(
            binding=self.binding,
            bucket_name=_resource_id(self.bucket_name),
            jurisdiction=self.jurisdiction,
            remote=self.remote,
        )


class _LogfwdrRecord(_Record):
    name: StrictStr
    destination: StrictStr

    def to_binding(self) -> LogfwdrBinding:
        return LogfwdrBinding(name=self.name, destination=self.destination)


class _LogfwdrTable(_Record):
    bindings: list[_LogfwdrRecord] | None = None


class _SecretsStoreSecretRecord(_Record):
    binding: StrictStr
    store_id: StrictStr
    secret_name: StrictStr

    def to_binding(self) -> SecretsStoreSecretBinding:
        return SecretsStoreSecretBinding(
            binding=self.binding, store_id=self.store_id, secret_name=self.secret_name
        )


class _ServiceRecord(_Record):
    binding: StrictStr
    service: StrictStr
    entrypoint: StrictStr | None = None
    remote: StrictBool = False

    def to_binding(self) -> ServiceBinding:
        return ServiceBinding(
            binding=self.binding,
            service=self.service,
            entrypoint=self.entrypoint,
            remote=self.remote,
        )


class _AnalyticsEngineRecord(_Record):
    binding: StrictStr
    dataset: StrictStr | None = None

    def to_binding(self) -> AnalyticsEngineBinding:
        return AnalyticsEngineBinding(binding=self.binding, dataset=self.dataset)


class _PipelineRecord(_Record):
    binding: StrictStr
    pipeline: StrictStr

    def to_binding(self) -> PipelineBinding:
        return PipelineBinding(binding=self.binding, pipeline=self.pipeline)


class _DispatchOutboundRecord(_Record):
    service: StrictStr


class _DispatchNamespaceRecord(_Record):
    binding: StrictStr
    namespace: StrictStr
    outbound: _DispatchOutboundRecord | None = None

    def to_binding(self) -> DispatchNamespaceBinding:
        outbound = None
        if self.outbound is not None:
            outbound = DispatchOutbound(service=self.outbound.service)
        return DispatchNamespaceBinding(
            binding=self.binding, namespace=self.namespace, outbound=outbound
        )


class _MtlsCertificateRecord(_Record):
    binding: StrictStr
    certificate_id: StrictStr

    def to_binding(self) -> MtlsCertificateBinding:
        return MtlsCertificateBinding(binding=self.binding, certificate_id=self.certificate_id)


class _NamedRecord(_Record):
    binding: StrictStr

    def to_binding(self) -> NamedBinding:
        return NamedBinding(binding=self.binding)


class _AiRecord(_Record):
    binding: StrictStr
    staging: StrictBool | None = None

    def to_binding(self) -> AiBinding:
        return AiBinding(binding=self.binding, staging=self.staging)


class _UnsafeBindingRecord(_Record):
    name: StrictStr
    type: StrictStr

    def to_binding(self) -> UnsafeBinding:
        return UnsafeBinding(name=self.name, type=self.type)


class _UnsafeTable(_Record):
    bindings: list[_UnsafeBindingRecord] | None = None
    metadata: dict[str, Any] | None = None

    def to_binding(self) -> UnsafeBindings:
        return UnsafeBindings(bindings=_to_bindings(self.bindings), metadata=self.metadata)


class _TailConsumerRecord(_Record):
    service: StrictStr

    def to_binding(self) -> TailConsumer:
        return TailConsumer(service=self.service)


def _to_bindings(records: Sequence[Any] | None) -> list[Any] | None:
    if records is None:
        return None
    return [record.to_binding() for record in records]


def _to_binding(record: Any | None) -> Any | None:
    if record is None:
        return None
    return record.to_binding()


class WorkerDocument(BaseModel):
    """Pydantic model for a worker config file.

    Keys that bindscope does not display are ignored. Vars and unsafe
    metadata keep whatever values TOML produced, including dates.
    """

    model_config = ConfigDict(frozen=True)

    name: StrictStr | None = None

    data_blobs: dict[str, StrictStr] | None = None
    durable_objects: _DurableObjectsTable | None = None
    workflows: list[_WorkflowRecord] | None = None
    kv_namespaces: list[_KVNamespaceRecord] | None = None
    send_email: list[_SendEmailRecord] | None = None
    queues: list[_QueueRecord] | None = None
    d1_databases: list[_D1DatabaseRecord] | None = None
    vectorize: list[_VectorizeRecord] | None = None
    hyperdrive: list[_HyperdriveRecord] | None = None
    r2_buckets: list[_R2BucketRecord] | None = None
    logfwdr: _LogfwdrTable | None = None
    secrets_store_secrets: list[_SecretsStoreSecretRecord] | None = None
    services: list[_ServiceRecord] | None = None
    analytics_engine_datasets: list[_AnalyticsEngineRecord] | None = None
    text_blobs: dict[str, StrictStr] | None = None
    browser: _NamedRecord | None = None
    images: _NamedRecord | None = None
    ai: _AiRecord | None = None
    pipelines: list[_PipelineRecord] | None = None
    assets: _NamedRecord | None = None
    version_metadata: _NamedRecord | None = None
    unsafe: _UnsafeTable | None = None
    vars: dict[str, Any] | None = None
    wasm_modules: dict[str, StrictStr] | None = None
    dispatch_namespaces: list[_DispatchNamespaceRecord] | None = None
    mtls_certificates: list[_MtlsCertificateRecord] | None = None

    tail_consumers: list[_TailConsumerRecord] | None = None

    def to_worker_config(self) -> WorkerConfig:
        bindings = BindingConfig(
            data_blobs=dict(self.data_blobs) if self.data_blobs is not None else None,
            durable_objects=(
                _to_bindings(self.durable_objects.bindings)
                if self.durable_objects is not None
                else None
            ),
            workflows=_to_bindings(self.workflows),
            kv_namespaces=_to_bindings(self.kv_namespaces),
            send_email=_to_bindings(self.send_email),
            queues=_to_bindings(self.queues),
            d1_databases=_to_bindings(self.d1_databases),
            vectorize=_to_bindings(self.vectorize),
            hyperdrive=_to_bindings(self.hyperdrive),
            r2_buckets=_to_bindings(self.r2_buckets),
            logfwdr=_to_bindings(self.logfwdr.bindings) if self.logfwdr is not None else None,
            secrets_store_secrets=_to_bindings(self.secrets_store_secrets),
            services=_to_bindings(self.services),
            analytics_engine_datasets=_to_bindings(self.analytics_engine_datasets),
            text_blobs=self.text_blobs,
            browser=_to_binding(self.browser),
            images=_to_binding(self.images),
            ai=_to_binding(self.ai),
            pipelines=_to_bindings(self.pipelines),
            assets=_to_binding(self.assets),
            version_metadata=_to_binding(self.version_metadata),
            unsafe=_to_binding(self.unsafe),
            vars=self.vars,
            wasm_modules=dict(self.wasm_modules) if self.wasm_modules is not None else None,
            dispatch_namespaces=_to_bindings(self.dispatch_namespaces),
            mtls_certificates=_to_bindings(self.mtls_certificates),
        )
        return WorkerConfig(
            name=self.name,
            bindings=bindings,
            tail_consumers=_to_bindings(self.tail_consumers) or [],
        )


def _describe_errors(error: ValidationError) -> str:
    """One "location: message" clause per validation error."""
    details = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "config"
        details.append(f"{location}: {detail['msg']}")
    return "; ".join(details)


def parse_binding_config(data: dict[str, Any]) -> WorkerConfig:
    """Convert a parsed config mapping into typed bindings.

    Args:
        data: Mapping as produced by tomllib

    Returns:
        WorkerConfig with the worker name, bindings and tail consumers

    Raises:
        BindingConfigError: If any binding kind has the wrong shape
    """
    try:
        document = WorkerDocument.model_validate(data)
    except ValidationError as e:
        raise BindingConfigError(_describe_errors(e)) from e
    return document.to_worker_config()


def load_binding_config(path: Path) -> WorkerConfig:
    """Load and parse a worker config file.

    Args:
        path: Path to a TOML config file

    Returns:
        Parsed WorkerConfig

    Raises:
        FileNotFoundError: If the file doesn't exist
        BindingConfigError: If the file is not valid TOML or has the wrong shape
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found at {path}")

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise BindingConfigError(f"{path}: {e}") from e

    return parse_binding_config(data)
