"""Tests for parsing review service responses into ReviewResult."""

import pytest

from criticwave_core.errors import ResponseFormatError
from criticwave_core.models import ReviewResult


def _review(**overrides):
    item = {
        "issueType": "Bug",
        "description": "Possible None dereference",
        "severity": "High",
        "fileName": "src/app.py",
        "lineNumber": 12,
        "fixDetails": {
            "description": "Check for None first.",
            "currentCode": "user.name",
            "suggestedFixCode": "user.name if user else ''",
        },
    }
    item.update(overrides)
    return item


class TestFromPayload:
    def test_parses_nested_fix_details(self):
        result = ReviewResult.from_payload({"reviews": [_review()]})
        assert len(result.findings) == 1
        finding = result.findings[0]
        assert finding.issue_type == "Bug"
        assert finding.file_name == "src/app.py"
        assert finding.line_number == 12
        assert finding.fix.explanation == "Check for None first."
        assert finding.fix.before_snippet == "user.name"
        assert finding.fix.after_snippet == "user.name if user else ''"

    def test_preserves_order(self):
        payload = {"reviews": [_review(fileName=f"f{i}.py") for i in range(5)]}
        result = ReviewResult.from_payload(payload)
        assert [f.file_name for f in result.findings] == [f"f{i}.py" for i in range(5)]

    def test_empty_reviews_is_valid(self):
        assert ReviewResult.from_payload({"reviews": []}).findings == ()

    def test_missing_reviews_key_means_no_findings(self):
        assert ReviewResult.from_payload({}).findings == ()

    def test_null_snippets_become_empty_strings(self):
        item = _review(fixDetails={"description": "x", "currentCode": None})
        fix = ReviewResult.from_payload({"reviews": [item]}).findings[0].fix
        assert fix.before_snippet == ""
        assert fix.after_snippet == ""

    def test_zero_line_number_allowed(self):
        assert ReviewResult.from_payload({"reviews": [_review(lineNumber=0)]}).findings[0].line_number == 0

    def test_non_object_payload_rejected(self):
        with pytest.raises(ResponseFormatError):
            ReviewResult.from_payload([_review()])

    def test_reviews_not_a_list_rejected(self):
        with pytest.raises(ResponseFormatError):
            ReviewResult.from_payload({"reviews": "none"})

    def test_legacy_flat_schema_rejected(self):
        item = _review(suggestedFix="do this", codeSnippet="x = 1")
        del item["fixDetails"]
        with pytest.raises(ResponseFormatError, match="legacy"):
            ReviewResult.from_payload({"reviews": [item]})

    @pytest.mark.parametrize("line", [-1, "12", 1.5, True, None])
    def test_bad_line_number_rejected(self, line):
        with pytest.raises(ResponseFormatError, match="lineNumber"):
            ReviewResult.from_payload({"reviews": [_review(lineNumber=line)]})

    @pytest.mark.parametrize("key", ["issueType", "description", "severity", "fileName"])
    def test_missing_required_field_rejected(self, key):
        item = _review()
        del item[key]
        with pytest.raises(ResponseFormatError, match=key):
            ReviewResult.from_payload({"reviews": [item]})

    def test_missing_fix_details_rejected(self):
        item = _review()
        del item["fixDetails"]
        with pytest.raises(ResponseFormatError, match="fixDetails"):
            ReviewResult.from_payload({"reviews": [item]})
