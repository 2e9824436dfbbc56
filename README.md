# driftwatch

driftwatch works with configuration drift: the difference between what a
service's manifest says its configuration should be and what is actually
deployed. It offers a comparer for two configuration mappings, analyses over
drift results (correlation, clustering, digests, confidence scoring, time
windows, exponential decay) and a set of small JSON-backed records kept
around that work: baselines, annotations, attributions, an audit log, a
changelog and a service dependency graph.

It needs nothing beyond the Python standard library (Python 3.10 or later).

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Command line

Installing the package provides the `driftwatch` command, used as
`driftwatch <command> <subcommand> [args...]`. Any failure is reported on
standard error as `error: ...` and the command exits with status 1.

### Annotations

Notes attached to a service/key pair, stored in the file named by
`DRIFTWATCH_ANNOTATIONS` (default `annotations.json`). The author defaults
to `DRIFTWATCH_AUTHOR`, or `unknown`. Service, key and note must not be empty.

```
driftwatch annotation add <service> <key> <note> [author]
driftwatch annotation show [service] [key]
```

### Attributions

Who is responsible for a drifted key. Service, key and owner are required.

```
driftwatch attribution add <file> <service> <key> <owner> [team] [reason]
driftwatch attribution show <file> [service]
```

### Audit log

```
driftwatch audit append <path> <action> <service> <user> [detail]
driftwatch audit show <path> [service] [action]
```

### Baselines

`baseline save` reads a results file laid out like a baseline
(`{"created_at": ..., "results": [...]}`) and writes its results as a new
baseline stamped with the current time. `baseline diff` lists the services
in the current file that are new or whose number of diffs differs from the
baseline.

```
driftwatch baseline save <results-file> <baseline-file>
driftwatch baseline diff <baseline-file> <current-file>
```

### Changelog

```
driftwatch changelog append <path> <service> <note>
driftwatch changelog show <path> [service]
```

### Dependencies

Directed edges between services, stored in the file named by
`DRIFTWATCH_DEP_FILE` (default `deps.json`). Adding an edge that already
exists for the same pair is an error. `show` lists what a service depends on,
or, with `dependents`, the services that depend on it.

```
driftwatch dependency add <from> <to> [label]
driftwatch dependency show <service> [dependencies|dependents]
```

## Library use

```python
from driftwatch.detector import Detector
from driftwatch.models import CompareResult, Diff
from driftwatch.correlation import build_correlation, format_correlation
from driftwatch.confidence import score_confidence, format_confidence

result = Detector().compare(
    "web",
    {"replicas": 3, "image": "nginx:1.25"},
    {"replicas": 5},
)
print(result.has_drift, [d.field for d in result.diffs])

results = [
    CompareResult(service="alpha", diffs=[Diff(key="timeout", expected="30s", actual="60s")]),
    CompareResult(service="beta", diffs=[Diff(key="timeout", expected="30s", actual="90s")]),
]
print(format_correlation(build_correlation(results)))
print(format_confidence(score_confidence(results, [])))
```

Modules:

- `driftwatch.models` – `Diff`, `DiffKind`, `CompareResult` (with `has_drift()`) and `HistoryEntry`, plus `parse_timestamp` and `format_timestamp` for the RFC 3339 timestamps used in the JSON files.
- `driftwatch.detector` – `Detector.compare(name, expected, deployed)` returns a `DriftResult` listing missing, changed and unexpected fields.
- `driftwatch.filter` – `FilterOptions` for keeping only drifted services, services with a name prefix, and dropping ignored keys.
- `driftwatch.correlation` – `build_correlation`, `format_correlation`, `save_correlation`, `load_correlation` and `top_correlated`.
- `driftwatch.cluster` – `cluster_by_drift_pattern` and `format_cluster`.
- `driftwatch.digest` – `compute_digest` (SHA-256 over a service's diffs), `build_digests`, `save_digests`, `load_digests` and `digests_changed`.
- `driftwatch.baseline` – `save_baseline`, `load_baseline`, `diff_baseline`.
- `driftwatch.window` – `new_window_options`, `apply_window` (keeps results whose service has a history entry recorded within the window) and `format_window`.
- `driftwatch.confidence` – `score_confidence` and `format_confidence`.
- `driftwatch.decay` – `apply_decay`, `format_decay` and `default_decay_options` (seven-day half-life, 0.1 threshold).
- `driftwatch.annotation`, `driftwatch.attribution`, `driftwatch.audit`, `driftwatch.changelog`, `driftwatch.dependency` – the JSON-backed records used by the command line.

Loading a record file that does not exist yields an empty record rather than
an error, except for baselines, where a missing file raises
`FileNotFoundError`.

## What it does not do

driftwatch does not read manifest files and does not fetch live
configuration from running services. There is no command that runs a drift
check end to end; drift results are built in Python (for example with
`Detector` or `CompareResult`) or read from baseline files. Tagging,
alerting and scheduling of checks are not provided.