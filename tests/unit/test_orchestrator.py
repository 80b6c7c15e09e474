from __future__ import annotations

import json
import time

import pytest
from pymongo.errors import OperationFailure

from lookup_bench.errors import ConfigurationError
from lookup_bench.infrastructure.sink import FileSink
from lookup_bench.orchestrator import (
    LookupRun,
    build_strategies,
    output_name,
    run_benchmarks,
    run_lookup,
    serialize,
)
from lookup_bench.reporter import headline, print_results
from lookup_bench.strategies import PipelineLookupStrategy

EXPECTED_PARENTS = 10
DIRECT_CHILDREN = 7
PIPELINE_CHILDREN = 5


def test_run_lookup_times_full_materialization():
    def slow_cursor():
        for i in range(3):
            time.sleep(0.02)
            yield {"_id": str(i)}

    run = run_lookup("probe", slow_cursor)

    assert run.duration_seconds >= 0.06
    assert run.elapsed_seconds == 0
    assert [d["_id"] for d in run.documents] == ["0", "1", "2"]
    assert json.loads(run.payload) == [{"_id": "0"}, {"_id": "1"}, {"_id": "2"}]


def test_run_lookup_propagates_strategy_errors():
    def broken():
        raise OperationFailure("bad pipeline")

    with pytest.raises(OperationFailure):
        run_lookup("broken", broken)


def test_lookup_run_counts_children():
    run = LookupRun(
        label="x",
        duration_seconds=1.5,
        documents=[{"order": [1, 2]}, {"order": []}, {}],
        payload="[]",
    )
    assert run.children("order") == 2
    assert run.elapsed_seconds == 1


def test_serialize_emits_relaxed_extended_json():
    from datetime import datetime, timezone

    text = serialize([{"_id": "1", "at": datetime(2024, 1, 2, tzinfo=timezone.utc)}])
    assert json.loads(text) == [{"_id": "1", "at": {"$date": "2024-01-02T00:00:00Z"}}]


def test_output_names_follow_parent_collection(small_settings):
    direct, pipeline = build_strategies(small_settings)
    assert output_name("customer", direct) == "customer_lookup.json"
    assert output_name("customer", pipeline) == "customer_lookup_pipeline.json"


def test_end_to_end_ten_by_seven(fake_store, small_settings, tmp_path):
    results = run_benchmarks(fake_store, small_settings, FileSink(tmp_path))

    assert [r["strategy"] for r in results] == ["lookup", "lookup_pipeline"]
    direct, pipeline = results
    assert set(direct) == {
        "strategy",
        "output",
        "documents",
        "children",
        "elapsed_seconds",
        "duration_seconds",
        "peak_rss_bytes",
        "cpu_percent",
    }
    assert direct["documents"] == EXPECTED_PARENTS
    assert direct["children"] == EXPECTED_PARENTS * DIRECT_CHILDREN
    assert pipeline["documents"] == EXPECTED_PARENTS
    assert pipeline["children"] == EXPECTED_PARENTS * PIPELINE_CHILDREN

    direct_payload = json.loads((tmp_path / "customer_lookup.json").read_text(encoding="utf-8"))
    pipeline_payload = json.loads(
        (tmp_path / "customer_lookup_pipeline.json").read_text(encoding="utf-8")
    )
    assert all(p["status"] == "Active" for p in direct_payload)
    assert all(len(p["order"]) == DIRECT_CHILDREN for p in direct_payload)
    assert all(len(p["order"]) == PIPELINE_CHILDREN for p in pipeline_payload)
    assert [p["_id"] for p in direct_payload] == [p["_id"] for p in pipeline_payload]


def test_run_benchmarks_without_seed_reuses_data(fake_store, small_settings, tmp_path):
    run_benchmarks(fake_store, small_settings, FileSink(tmp_path))
    inserts_after_seed = len(fake_store.calls)

    results = run_benchmarks(fake_store, small_settings, FileSink(tmp_path), seed=False)

    assert len(fake_store.calls) == inserts_after_seed
    assert results[0]["documents"] == EXPECTED_PARENTS


def test_run_benchmarks_respects_page_limit(fake_store, small_settings, tmp_path):
    settings = small_settings.model_copy(update={"customer_count": 30, "page_limit": 20})
    results = run_benchmarks(fake_store, settings, FileSink(tmp_path))
    assert [r["documents"] for r in results] == [20, 20]


def test_failed_strategy_writes_no_output(fake_store, small_settings, tmp_path):
    settings = small_settings.model_copy(update={"child_collection": ""})
    with pytest.raises(ConfigurationError):
        run_benchmarks(fake_store, settings, FileSink(tmp_path))
    assert list(tmp_path.iterdir()) == []


def test_second_strategy_failure_removes_previous_payloads(
    fake_store, small_settings, tmp_path, monkeypatch
):
    run_benchmarks(fake_store, small_settings, FileSink(tmp_path))
    assert (tmp_path / "customer_lookup.json").exists()
    assert (tmp_path / "customer_lookup_pipeline.json").exists()

    def broken(self, store, query):
        raise OperationFailure("pipeline rejected")

    monkeypatch.setattr(PipelineLookupStrategy, "execute", broken)
    with pytest.raises(OperationFailure):
        run_benchmarks(fake_store, small_settings, FileSink(tmp_path), seed=False)

    assert list(tmp_path.iterdir()) == []


def test_sink_discard_reports_whether_blob_existed(tmp_path):
    sink = FileSink(tmp_path)
    sink.write_named_blob("customer_lookup.json", "[]")
    assert sink.discard("customer_lookup.json") is True
    assert sink.discard("customer_lookup.json") is False


def test_sink_overwrites_existing_blob(tmp_path):
    sink = FileSink(tmp_path / "out")
    sink.write_named_blob("customer_lookup.json", "old payload")
    path = sink.write_named_blob("customer_lookup.json", "[]")
    assert path.read_text(encoding="utf-8") == "[]\n"


def test_headline_reports_whole_seconds():
    assert (
        headline({"strategy": "lookup", "elapsed_seconds": 3})
        == "It took 3 seconds to get the data with aggregate lookup"
    )
    assert (
        headline({"strategy": "lookup_pipeline", "elapsed_seconds": 0})
        == "It took 0 seconds to get the data with aggregate lookup pipeline"
    )


def test_print_results_renders_table():
    from rich.console import Console

    console = Console(record=True, width=160)
    print_results(
        [{"strategy": "lookup", "documents": 10, "children": 70, "duration_seconds": 0.0123}],
        console=console,
    )
    text = console.export_text()
    assert "lookup" in text
    assert "0.0123" in text
