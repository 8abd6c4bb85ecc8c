from prometheus_client import Counter, Histogram, REGISTRY


# we check if they are already registered to avoid errors during hot reloads or test runs
def get_or_create_metric(name, documentation, metric_type, **kwargs):
    try:
        # Try to create it
        return metric_type(name, documentation, **kwargs)
    except ValueError:
        # If it already exists, retrieve it from the registry
        return REGISTRY._names_to_collectors[name]


REQUESTS_TOTAL = get_or_create_metric(
    "synthesis_requests_total",
    "Total synthesis requests",
    Counter,
    labelnames=["status"],
)

LATENCY_SECONDS = get_or_create_metric(
    "synthesis_latency_seconds",
    "End-to-end synthesis latency",
    Histogram,
)

TASKS_CREATED_TOTAL = get_or_create_metric(
    "synthesis_tasks_created_total", "Main tasks and subtasks written to the store", Counter
)

FALLBACKS_TOTAL = get_or_create_metric(
    "synthesis_fallbacks_total",
    "Analyses replaced by a local fallback",
    Counter,
    labelnames=["analysis"],
)

PROVIDER_ATTEMPTS_TOTAL = get_or_create_metric(
    "llm_provider_attempts_total",
    "Language model calls by provider and outcome",
    Counter,
    labelnames=["provider", "outcome"],
)


def observe_provider_attempt(provider: str, outcome: str) -> None:
    PROVIDER_ATTEMPTS_TOTAL.labels(provider=provider, outcome=outcome).inc()
