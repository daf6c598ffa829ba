from typing import Optional

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from .config import Settings
from .logging import SERVICE_NAME


def build_resource(settings: Settings) -> Resource:
    return Resource.create({"service.name": SERVICE_NAME, "deployment.env": settings.env})


def configure_tracing(settings: Settings, otlp_endpoint: Optional[str] = None) -> TracerProvider:
    tracer_provider = TracerProvider(resource=build_resource(settings))
    endpoint = otlp_endpoint or settings.otlp_endpoint
    if endpoint:
        tracer_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
    trace.set_tracer_provider(tracer_provider)
    return tracer_provider


def configure_metrics(settings: Settings, otlp_endpoint: Optional[str] = None) -> MeterProvider:
    endpoint = otlp_endpoint or settings.otlp_endpoint
    provider_kwargs = {"resource": build_resource(settings)}
    if endpoint:
        provider_kwargs["metric_readers"] = [PeriodicExportingMetricReader(OTLPMetricExporter(endpoint=endpoint))]
    meter_provider = MeterProvider(**provider_kwargs)
    metrics.set_meter_provider(meter_provider)
    return meter_provider


def configure_observability(settings: Settings) -> None:
    configure_tracing(settings)
    configure_metrics(settings)
