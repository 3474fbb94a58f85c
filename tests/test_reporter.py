import json

import yaml

from mgcstatus.analyzer import analyze_collection
from mgcstatus.model import CollectionStats, ReportRow
from mgcstatus.reporter import ReportFormatter
from tests.conftest import make_row, make_shards

LONG_NS = "analytics." + "_".join(["customer_event_stream_aggregated_daily_partition"] * 3)


def test_row_conversion():
    row = make_row(extended=True)
    assert row.ave_chunk_size_kb == "125.00"
    assert row.remain_chunks_size_kb == "500.00"
    assert row.all_data_size_mb == "1.22"
    assert row.balancer == 0


def test_table_plain():
    output = ReportFormatter([make_row()]).format("table")
    assert "CollectionName" in output
    assert "aveChunkSize(KB)" in output
    assert "AllDataSize(MB)" not in output
    assert "test.users" in output
    assert "125.00" in output
    assert "500.00" in output
    assert "╭" in output


def test_table_markdown_extended():
    output = ReportFormatter([make_row(extended=True)], extended=True, markdown=True).format("table")
    lines = output.splitlines()
    assert lines[0].startswith("|")
    assert "AllDataSize(MB)" in lines[0]
    assert set(lines[1]) <= set("|-: ")
    assert "1.22" in lines[2]


def test_table_empty():
    output = ReportFormatter([]).format("table")
    assert "CollectionName" in output


def test_json():
    output = ReportFormatter([make_row()]).format("json")
    data = json.loads(output)
    assert data == [
        {
            "name": "test.users",
            "objs": 5000,
            "chunks": 10,
            "ave_chunk_size_kb": "125.00",
            "ideal_chunks_per_shard": 4,
            "remain_chunks": 4,
            "remain_chunks_size_kb": "500.00",
            "jumbo_chunks": 1,
            "balancer": 0,
            "shard_chunks": {"shard00": 8, "shard01": 2},
        }
    ]


def test_yaml_extended():
    output = ReportFormatter([make_row(extended=True)], extended=True).format("yaml")
    data = yaml.safe_load(output)
    assert data[0]["all_data_size_mb"] == "1.22"
    assert data[0]["shard_chunks"] == {"shard00": 8, "shard01": 2}


def test_row_without_chunks():
    metrics = analyze_collection(
        "test.empty", chunks=[], shards=make_shards(2), stats=CollectionStats(count=42, avg_obj_size=100.0)
    )
    row = ReportRow.from_metrics(metrics, extended=True)
    assert row.chunks == 0
    assert row.ave_chunk_size_kb == "0.00"
    assert row.remain_chunks_size_kb == "0.00"
    assert row.all_data_size_mb == f"{42 * 100 / 1024**2:.2f}"


def test_table_long_collection_name():
    assert len(LONG_NS) > 100
    rows = [make_row(ns=LONG_NS, extended=True)]

    plain = ReportFormatter(rows).format("table")
    assert LONG_NS in plain
    assert "…" not in plain

    markdown = ReportFormatter(rows, extended=True, markdown=True).format("table")
    assert LONG_NS in markdown
    assert "…" not in markdown
    assert "AllDataSize(MB)" in markdown


def test_table_markdown_has_no_blank_edges():
    output = ReportFormatter([make_row(), make_row(ns="test.logs")], markdown=True).format("table")
    lines = output.rstrip("\n").split("\n")
    assert lines[0].startswith("| CollectionName")
    assert lines[-1].startswith("| test.logs")
    assert lines[-1].endswith("|")
    assert all(line.strip() for line in lines)
    assert all(line == line.rstrip() for line in lines)
