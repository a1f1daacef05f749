"""
Unit tests for batch request building and result aggregation.
"""

import pytest

from mcp_types.primitives import SubSearch
from utils.batch import (
    UNKNOWN_ID,
    aggregate_bulk,
    aggregate_msearch,
    build_bulk_operations,
    build_msearch_body,
    parse_bulk_item,
    render_bulk_summary,
    resolve_document_id,
)


def bulk_error(doc_id, error_type="mapper_parsing_exception", reason="failed to parse field [v]"):
    return {"index": {"_id": doc_id, "status": 400, "error": {"type": error_type, "reason": reason}}}


def bulk_ok(doc_id):
    return {"index": {"_id": doc_id, "status": 201, "result": "created"}}


class TestDocumentIds:
    """Test cases for document id resolution and bulk operation building."""

    def test_uses_truthy_id_field(self):
        assert resolve_document_id({"id": "a"}, "id") == "a"

    @pytest.mark.parametrize("document", [{"id": ""}, {"id": None}, {"id": 0}, {"other": "x"}])
    def test_engine_assigns_when_missing_or_falsy(self, document):
        assert resolve_document_id(document, "id") is None

    def test_no_id_field(self):
        assert resolve_document_id({"id": "a"}, None) is None

    def test_operations_mix_assigned_and_engine_ids(self):
        documents = [{"id": "a", "v": 1}, {"v": 2}, {"id": 7, "v": 3}]
        operations = build_bulk_operations("orders", documents, "id")

        assert operations == [
            {"index": {"_index": "orders", "_id": "a"}}, {"id": "a", "v": 1},
            {"index": {"_index": "orders"}}, {"v": 2},
            {"index": {"_index": "orders", "_id": "7"}}, {"id": 7, "v": 3},
        ]


class TestAggregateBulk:
    """Test cases for bulk result aggregation."""

    def test_counts_always_add_up(self):
        items = [bulk_ok("a"), bulk_error("b"), bulk_ok("c"), bulk_error("d")]
        summary = aggregate_bulk(items, requested=4, took_ms=9)

        assert summary.success_count == 2
        assert summary.failure_count == 2
        assert summary.success_count + summary.failure_count == len(items)
        assert [f.doc_id for f in summary.failures] == ["b", "d"]

    def test_identity_falls_back_to_submitted_then_unknown(self):
        items = [
            {"index": {"status": 400, "error": {"type": "t", "reason": "r"}}},
            {"index": {"status": 400, "error": {"type": "t", "reason": "r"}}},
        ]
        summary = aggregate_bulk(items, requested=2, submitted_ids=["mine", None])

        assert [f.doc_id for f in summary.failures] == ["mine", UNKNOWN_ID]

    def test_non_index_actions(self):
        outcome = parse_bulk_item(0, {"create": {"_id": "x", "error": "version conflict"}})

        assert outcome.succeeded is False
        assert outcome.error_type is None
        assert outcome.reason == "version conflict"

    def test_render_success(self):
        summary = aggregate_bulk([bulk_ok("a"), bulk_ok("b")], requested=2, took_ms=12)
        fragments = render_bulk_summary(summary)

        assert len(fragments) == 1
        assert fragments[0].render() == (
            "Bulk import completed:\n"
            "Total documents: 2\n"
            "Successfully imported: 2\n"
            "Failed: 0\n"
            "Processing time: 12ms"
        )

    def test_render_failures_in_item_order(self):
        summary = aggregate_bulk([bulk_error("b"), bulk_ok("a"), bulk_error("c", "x", "y")], requested=3)
        fragments = render_bulk_summary(summary)

        assert len(fragments) == 2
        assert fragments[1].render() == (
            "Failed details:\n"
            "ID: b - Error type: mapper_parsing_exception, Reason: failed to parse field [v]\n"
            "ID: c - Error type: x, Reason: y"
        )


class TestMultiSearch:
    """Test cases for multi-search building and aggregation."""

    def setup_method(self):
        self.searches = [
            SubSearch(index="logs", query_body={"query": {"match_all": {}}}),
            SubSearch(index="missing", query_body={"query": {"match_all": {}}}),
        ]

    def test_body_pairs(self):
        assert build_msearch_body(self.searches) == [
            {"index": "logs"}, {"query": {"match_all": {}}},
            {"index": "missing"}, {"query": {"match_all": {}}},
        ]

    def test_one_fragment_per_search_in_order(self):
        responses = [
            {"hits": {"total": {"value": 1}, "hits": [{"_id": "1", "_score": 1.0, "_source": {"msg": "ok"}}]}},
            {"error": {"type": "index_not_found_exception", "reason": "no such index [missing]"}, "status": 404},
        ]
        fragments = aggregate_msearch(responses, self.searches)

        assert len(fragments) == 3
        assert fragments[0].render() == "Multi-search completed with 2 results"
        assert fragments[1].render().split("\n") == [
            "Search 1 (Index: logs):",
            "Total hits: 1",
            "Results: 1",
            "  ID: 1, Score: 1.0",
            "  Source: {",
            '    "msg": "ok"',
            "  }",
        ]
        assert fragments[2].render() == (
            "Search 2 (Index: missing):\n"
            "Error: index_not_found_exception: no such index [missing]"
        )

    def test_missing_response_is_an_error_line(self):
        fragments = aggregate_msearch([], self.searches)

        assert len(fragments) == 3
        assert fragments[1].render().endswith("Error: No response returned for this search")

    def test_bare_total(self):
        fragments = aggregate_msearch([{"hits": {"total": 4, "hits": []}}], self.searches[:1])
        assert "Total hits: 4" in fragments[1].render()
