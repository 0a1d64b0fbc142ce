"""Classify a worker's heterogeneous bindings into display groups.

Every binding kind is turned into a group of (key, value) entries. Groups are
emitted in BINDING_KIND_ORDER and only for kinds with at least one entry.
Bindings that reference other locally running workers (Durable Objects,
services, tail consumers) get a connectivity marker in local dev.

All functions here are pure; no I/O happens during classification.
"""

import math
from collections.abc import Callable, Sequence
from dataclasses import replace
from enum import Enum

from bindscope.core.bindings.connectivity import resolve_connectivity
from bindscope.core.bindings.suffix import decorate, to_json, truncate
from bindscope.core.bindings.types import (
    REGISTRY_NOT_LOADED,
    BindingConfig,
    ClassifiedBindings,
    ConnectivityVerdict,
    D1DatabaseBinding,
    DisplayEntry,
    DisplayGroup,
    RegistryNotLoaded,
    RegistrySnapshot,
    RenderContext,
    SendEmailBinding,
    TailConsumer,
    VarValue,
)


class BindingKind(Enum):
    """Display slots for binding kinds.

    Unsafe bindings occupy two slots: raw bindings and metadata.
    """

    DATA_BLOBS = "data_blobs"
    DURABLE_OBJECTS = "durable_objects"
    WORKFLOWS = "workflows"
    KV_NAMESPACES = "kv_namespaces"
    SEND_EMAIL = "send_email"
    QUEUES = "queues"
    D1_DATABASES = "d1_databases"
    VECTORIZE = "vectorize"
    HYPERDRIVE = "hyperdrive"
    R2_BUCKETS = "r2_buckets"
    LOGFWDR = "logfwdr"
    SECRETS_STORE_SECRETS = "secrets_store_secrets"
    SERVICES = "services"
    ANALYTICS_ENGINE_DATASETS = "analytics_engine_datasets"
    TEXT_BLOBS = "text_blobs"
    BROWSER = "browser"
    IMAGES = "images"
    AI = "ai"
    PIPELINES = "pipelines"
    ASSETS = "assets"
    VERSION_METADATA = "version_metadata"
    UNSAFE_BINDINGS = "unsafe_bindings"
    VARS = "vars"
    WASM_MODULES = "wasm_modules"
    DISPATCH_NAMESPACES = "dispatch_namespaces"
    MTLS_CERTIFICATES = "mtls_certificates"
    UNSAFE_METADATA = "unsafe_metadata"


# Group emission order and display names. Output order never depends on
# the order kinds appear in the input.
BINDING_KIND_ORDER: tuple[tuple[BindingKind, str], ...] = (
    (BindingKind.DATA_BLOBS, "Data Blobs"),
    (BindingKind.DURABLE_OBJECTS, "Durable Objects"),
    (BindingKind.WORKFLOWS, "Workflows"),
    (BindingKind.KV_NAMESPACES, "KV Namespaces"),
    (BindingKind.SEND_EMAIL, "Send Email"),
    (BindingKind.QUEUES, "Queues"),
    (BindingKind.D1_DATABASES, "D1 Databases"),
    (BindingKind.VECTORIZE, "Vectorize Indexes"),
    (BindingKind.HYPERDRIVE, "Hyperdrive Configs"),
    (BindingKind.R2_BUCKETS, "R2 Buckets"),
    (BindingKind.LOGFWDR, "logfwdr"),
    (BindingKind.SECRETS_STORE_SECRETS, "Secrets Store Secrets"),
    (BindingKind.SERVICES, "Services"),
    (BindingKind.ANALYTICS_ENGINE_DATASETS, "Analytics Engine Datasets"),
    (BindingKind.TEXT_BLOBS, "Text Blobs"),
    (BindingKind.BROWSER, "Browser"),
    (BindingKind.IMAGES, "Images"),
    (BindingKind.AI, "AI"),
    (BindingKind.PIPELINES, "Pipelines"),
    (BindingKind.ASSETS, "Assets"),
    (BindingKind.VERSION_METADATA, "Worker Version Metadata"),
    (BindingKind.UNSAFE_BINDINGS, "Unsafe Metadata"),
    (BindingKind.VARS, "Vars"),
    (BindingKind.WASM_MODULES, "Wasm Modules"),
    (BindingKind.DISPATCH_NAMESPACES, "Dispatch Namespaces"),
    (BindingKind.MTLS_CERTIFICATES, "mTLS Certificates"),
    (BindingKind.UNSAFE_METADATA, "Unsafe Metadata"),
)


class _ConnectivityTracker:
    """Resolves peer-worker connectivity for one classify() call.

    Records whether resolution was requested at all so the caller can decide
    to explain the markers, even if every verdict was UNKNOWN.
    """

    def __init__(
        self,
        context: RenderContext,
        registry: RegistrySnapshot | RegistryNotLoaded | None,
    ) -> None:
        self._context = context
        self._registry = registry
        self.requested = False

    def resolve(
        self,
        service_name: str,
        class_name: str | None = None,
        entrypoint: str | None = None,
    ) -> ConnectivityVerdict | None:
        """Return a verdict, or None when connectivity is not checked."""
        if not self._context.is_local_dev or self._registry is None:
            return None
        self.requested = True
        return resolve_connectivity(service_name, self._registry, class_name, entrypoint)


_Builder = Callable[[BindingConfig, RenderContext, _ConnectivityTracker], list[DisplayEntry]]


def _data_blob_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    return [
        DisplayEntry(key, truncate(value) if isinstance(value, str) else "<Buffer>")
        for key, value in (config.data_blobs or {}).items()
    ]


def _durable_object_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    entries: list[DisplayEntry] = []
    for binding in config.durable_objects or []:
        if not binding.script_name:
            entries.append(DisplayEntry(binding.name, binding.class_name))
            continue

        verdict = tracker.resolve(binding.script_name, class_name=binding.class_name)
        defined_in = binding.script_name
        if verdict is not None:
            defined_in = decorate(defined_in, context=context, verdict=verdict)
        entries.append(
            DisplayEntry(
                binding.name,
                f"{binding.class_name} (defined in {defined_in})",
                verdict=_shown_verdict(verdict),
            )
        )
    return entries


def _workflow_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    entries: list[DisplayEntry] = []
    for workflow in config.workflows or []:
        if workflow.script_name:
            value = f"{workflow.class_name} (defined in {workflow.script_name})"
        else:
            value = decorate(
                workflow.class_name, context=context, simulated_locally=not workflow.remote
            )
        entries.append(DisplayEntry(workflow.binding, value))
    return entries


def _kv_namespace_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    return [
        DisplayEntry(kv.binding, decorate(kv.id, context=context, simulated_locally=not kv.remote))
        for kv in config.kv_namespaces or []
    ]


def _email_destination(email: SendEmailBinding) -> str:
    if email.destination_address:
        return email.destination_address
    if email.allowed_destination_addresses:
        return ", ".join(email.allowed_destination_addresses)
    return "unrestricted"


def _send_email_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    return [
        DisplayEntry(
            email.name,
            decorate(_email_destination(email), context=context, simulated_locally=True),
        )
        for email in config.send_email or []
    ]


def _queue_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    return [
        DisplayEntry(
            queue.binding,
            decorate(queue.queue_name, context=context, simulated_locally=not queue.remote),
        )
        for queue in config.queues or []
    ]


def format_d1_database(database: D1DatabaseBinding) -> str:
    """Identify a D1 database by name, id and preview id.

    Formats as "name (id)" when both are known, falling back to whichever is
    set. A preview id is appended unless the database is the local sentinel.
    """
    remote_id = database.database_id if isinstance(database.database_id, str) else None
    if remote_id and database.database_name:
        value = f"{database.database_name} ({remote_id})"
    else:
        value = remote_id or database.database_name or ""

    if database.preview_database_id and database.database_id != "local":
        prefix = f"{value}, " if value else ""
        value = f"{prefix}Preview: ({database.preview_database_id})"
    return value


def _d1_database_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    return [
        DisplayEntry(
            database.binding,
            decorate(
                format_d1_database(database),
                context=context,
                simulated_locally=not database.remote,
            ),
        )
        for database in config.d1_databases or []
    ]


def _vectorize_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    return [
        DisplayEntry(index.binding, decorate(index.index_name, context=context))
        for index in config.vectorize or []
    ]


def _hyperdrive_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    return [
        DisplayEntry(hd.binding, decorate(hd.id, context=context, simulated_locally=True))
        for hd in config.hyperdrive or []
    ]


def _r2_bucket_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    entries: list[DisplayEntry] = []
    for bucket in config.r2_buckets or []:
        name = bucket.bucket_name if isinstance(bucket.bucket_name, str) else ""
        if bucket.jurisdiction is not None:
            name += f" ({bucket.jurisdiction})"
        entries.append(
            DisplayEntry(
                bucket.binding,
                decorate(name, context=context, simulated_locally=not bucket.remote),
            )
        )
    return entries


def _logfwdr_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    return [
        DisplayEntry(fwd.name, decorate(fwd.destination, context=context))
        for fwd in config.logfwdr or []
    ]


def _secrets_store_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    return [
        DisplayEntry(
            secret.binding,
            decorate(
                f"{secret.store_id}/{secret.secret_name}", context=context, simulated_locally=True
            ),
        )
        for secret in config.secrets_store_secrets or []
    ]


def _service_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    entries: list[DisplayEntry] = []
    for service in config.services or []:
        value = service.service
        if service.entrypoint:
            value += f"#{service.entrypoint}"

        # Remote services are never looked up in the local registry
        if service.remote:
            entries.append(
                DisplayEntry(
                    service.binding,
                    decorate(value, context=context, simulated_locally=False),
                )
            )
            continue

        verdict = tracker.resolve(service.service, entrypoint=service.entrypoint or None)
        if verdict is not None:
            value = decorate(value, context=context, verdict=verdict)
        entries.append(DisplayEntry(service.binding, value, verdict=_shown_verdict(verdict)))
    return entries


def _analytics_engine_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    return [
        DisplayEntry(
            dataset.binding,
            decorate(dataset.dataset or dataset.binding, context=context, simulated_locally=True),
        )
        for dataset in config.analytics_engine_datasets or []
    ]


def _text_blob_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    return [
        DisplayEntry(key, decorate(truncate(value), context=context))
        for key, value in (config.text_blobs or {}).items()
    ]


def _browser_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    if config.browser is None:
        return []
    return [DisplayEntry("Name", config.browser.binding)]


def _images_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    if config.images is None:
        return []
    # images_local_mode stands in for is_local_dev
    images_context = replace(context, is_local_dev=bool(context.images_local_mode))
    return [DisplayEntry("Name", decorate(config.images.binding, context=images_context))]


def _ai_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    if config.ai is None:
        return []
    entries = [DisplayEntry("Name", decorate(config.ai.binding, context=context))]
    if config.ai.staging:
        entries.append(
            DisplayEntry(
                "Staging",
                decorate(to_json(config.ai.staging), context=context, simulated_locally=False),
            )
        )
    return entries


def _pipeline_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    return [
        DisplayEntry(pipeline.binding, decorate(pipeline.pipeline, context=context))
        for pipeline in config.pipelines or []
    ]


def _assets_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    if config.assets is None:
        return []
    return [DisplayEntry("Binding", config.assets.binding)]


def _version_metadata_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    if config.version_metadata is None:
        return []
    return [DisplayEntry("Name", decorate(config.version_metadata.binding, context=context))]


def _unsafe_binding_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    if config.unsafe is None:
        return []
    return [
        DisplayEntry(unsafe.type, decorate(unsafe.name, context=context))
        for unsafe in config.unsafe.bindings or []
    ]


def _format_number(value: int | float) -> str:
    """Integral floats drop their fraction, so 1.0 reads as 1."""
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
    return str(value)


def format_var(value: VarValue) -> str:
    """Render a plain-text variable for display.

    Strings are truncated and quoted. Booleans and numbers are truncated.
    Anything else (tables, arrays, null, dates) is dumped in full as JSON
    across several lines.
    """
    if isinstance(value, str):
        return f'"{truncate(value)}"'
    if isinstance(value, bool):
        return truncate(to_json(value))
    if isinstance(value, (int, float)):
        return truncate(_format_number(value))
    return to_json(value, indent=1)


def _var_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    return [DisplayEntry(key, format_var(value)) for key, value in (config.vars or {}).items()]


def _wasm_module_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    return [
        DisplayEntry(
            key,
            decorate(truncate(value) if isinstance(value, str) else "<Wasm>", context=context),
        )
        for key, value in (config.wasm_modules or {}).items()
    ]


def _dispatch_namespace_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    entries: list[DisplayEntry] = []
    for dispatch in config.dispatch_namespaces or []:
        value = dispatch.namespace
        if dispatch.outbound is not None:
            value = f"{dispatch.namespace} (outbound -> {dispatch.outbound.service})"
        entries.append(DisplayEntry(dispatch.binding, decorate(value, context=context)))
    return entries


def _mtls_certificate_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    return [
        DisplayEntry(cert.binding, decorate(cert.certificate_id, context=context))
        for cert in config.mtls_certificates or []
    ]


def _unsafe_metadata_entries(
    config: BindingConfig, context: RenderContext, tracker: _ConnectivityTracker
) -> list[DisplayEntry]:
    if config.unsafe is None or config.unsafe.metadata is None:
        return []
    return [
        DisplayEntry(key, decorate(to_json(value), context=context))
        for key, value in config.unsafe.metadata.items()
    ]


_BUILDERS: dict[BindingKind, _Builder] = {
    BindingKind.DATA_BLOBS: _data_blob_entries,
    BindingKind.DURABLE_OBJECTS: _durable_object_entries,
    BindingKind.WORKFLOWS: _workflow_entries,
    BindingKind.KV_NAMESPACES: _kv_namespace_entries,
    BindingKind.SEND_EMAIL: _send_email_entries,
    BindingKind.QUEUES: _queue_entries,
    BindingKind.D1_DATABASES: _d1_database_entries,
    BindingKind.VECTORIZE: _vectorize_entries,
    BindingKind.HYPERDRIVE: _hyperdrive_entries,
    BindingKind.R2_BUCKETS: _r2_bucket_entries,
    BindingKind.LOGFWDR: _logfwdr_entries,
    BindingKind.SECRETS_STORE_SECRETS: _secrets_store_entries,
    BindingKind.SERVICES: _service_entries,
    BindingKind.ANALYTICS_ENGINE_DATASETS: _analytics_engine_entries,
    BindingKind.TEXT_BLOBS: _text_blob_entries,
    BindingKind.BROWSER: _browser_entries,
    BindingKind.IMAGES: _images_entries,
    BindingKind.AI: _ai_entries,
    BindingKind.PIPELINES: _pipeline_entries,
    BindingKind.ASSETS: _assets_entries,
    BindingKind.VERSION_METADATA: _version_metadata_entries,
    BindingKind.UNSAFE_BINDINGS: _unsafe_binding_entries,
    BindingKind.VARS: _var_entries,
    BindingKind.WASM_MODULES: _wasm_module_entries,
    BindingKind.DISPATCH_NAMESPACES: _dispatch_namespace_entries,
    BindingKind.MTLS_CERTIFICATES: _mtls_certificate_entries,
    BindingKind.UNSAFE_METADATA: _unsafe_metadata_entries,
}


def _shown_verdict(verdict: ConnectivityVerdict | None) -> ConnectivityVerdict | None:
    if verdict is ConnectivityVerdict.UNKNOWN:
        return None
    return verdict


def _tail_consumer_entries(
    tail_consumers: Sequence[TailConsumer],
    context: RenderContext,
    tracker: _ConnectivityTracker,
) -> list[DisplayEntry]:
    entries: list[DisplayEntry] = []
    for consumer in tail_consumers:
        verdict = tracker.resolve(consumer.service)
        value = consumer.service
        if verdict is not None:
            value = decorate(value, context=context, verdict=verdict)
        entries.append(DisplayEntry(consumer.service, value, verdict=_shown_verdict(verdict)))
    return entries


def classify(
    config: BindingConfig,
    tail_consumers: Sequence[TailConsumer],
    context: RenderContext,
    registry: RegistrySnapshot | RegistryNotLoaded | None = REGISTRY_NOT_LOADED,
) -> ClassifiedBindings:
    """Build the display inventory for a worker's bindings.

    The classifier performs no schema validation; config must already be
    well typed.

    Args:
        config: Bindings declared for the worker
        tail_consumers: Workers receiving this worker's tail events
        context: Render flags for this call
        registry: Snapshot of locally running workers. REGISTRY_NOT_LOADED
            requests resolution with UNKNOWN verdicts; None disables it.

    Returns:
        ClassifiedBindings with groups in BINDING_KIND_ORDER

    Example:
        >>> result = classify(BindingConfig(vars={"FOO": "bar"}), [], RenderContext())
        >>> result.groups[0].entries[0].value
        '"bar"'
    """
    tracker = _ConnectivityTracker(context, registry)

    groups: list[DisplayGroup] = []
    for kind, group_name in BINDING_KIND_ORDER:
        entries = _BUILDERS[kind](config, context, tracker)
        if entries:
            groups.append(DisplayGroup(name=group_name, entries=tuple(entries)))

    tail_entries = _tail_consumer_entries(tail_consumers, context, tracker)

    return ClassifiedBindings(
        groups=tuple(groups),
        tail_consumers=tuple(tail_entries),
        has_connection_status=tracker.requested,
    )
