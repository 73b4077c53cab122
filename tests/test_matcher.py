"""
test_matcher.py — Tests for the requirement matcher and its building blocks.

No external services, no PDFs. They validate:
  - Keyword table construction, lookup and classification
  - Each matching strategy in isolation
  - The full validate() contract: short-circuits, first-match-wins,
    duplicate policy, warnings, message priority, confidence
  - Document templates: number formats and field evidence
  - Wire-format (camelCase) serialisation and lenient parsing
  - Config fail-fast checks

Run with:
    python tests/test_matcher.py
    python -m pytest tests/test_matcher.py -v
"""

from __future__ import annotations

import json
import logging
import os
import sys
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from tender_validation.config import Config, MatchingConfig
from tender_validation.duplicates import (
    content_hash,
    find_identical_uploads,
    find_shared_uploads,
)
from tender_validation.keywords import (
    DEFAULT_KEYWORD_TABLE,
    CanonicalCategory,
    KeywordTable,
)
from tender_validation.matcher import (
    MSG_NO_REQUIREMENTS,
    MSG_SUCCESS,
    DocumentRequirementMatcher,
    validate,
)
from tender_validation.schemas import UploadedDocument, ValidationResult
from tender_validation.strategies import (
    DirectSubstringStrategy,
    KeywordTableStrategy,
    WordOverlapStrategy,
    normalize,
)
from tender_validation.templates import DEFAULT_TEMPLATES, inspect_text

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)



def test_supported_document_types():
    """All 16 categories, in declaration order."""
    types = DEFAULT_KEYWORD_TABLE.supported_document_types()
    assert len(types) == 16
    assert types[0] == "AADHAR"
    assert types[-1] == "REGISTRATION"
    assert "POWER_OF_ATTORNEY" in types
    print(f"  ✓ test_supported_document_types ({len(types)} types)")


def test_keywords_for_lookup():
    """Lookup is case-insensitive; unknown types give an empty tuple."""
    assert "pan card" in DEFAULT_KEYWORD_TABLE.keywords_for("pan")
    assert DEFAULT_KEYWORD_TABLE.keywords_for("GST") == ("gst", "goods and services", "gstin")
    assert DEFAULT_KEYWORD_TABLE.keywords_for("solvency") == ()
    print("  ✓ test_keywords_for_lookup")


def test_classify_label():
    table = DEFAULT_KEYWORD_TABLE
    assert table.classify("Bank Statement") == [CanonicalCategory.BANK_STATEMENT]
    assert table.classify("Aadhar") == [CanonicalCategory.AADHAR]
    assert table.classify("Solvency Letter") == []
    assert table.classify("") == []
    assert table.classify("PAN_Card") == [CanonicalCategory.PAN]
    print("  ✓ test_classify_label")


def test_classify_needs_whole_words():
    """Short keywords hidden inside longer words don't pull in a category."""
    table = DEFAULT_KEYWORD_TABLE
    assert CanonicalCategory.PAN not in table.classify("Company Registration")
    assert CanonicalCategory.AADHAR not in table.classify("Installation Guide")
    assert CanonicalCategory.QUALITY_CERTIFICATE not in table.classify("Drawing Revision List")
    assert table.classify("Company Registration") == [
        CanonicalCategory.COMPANY_REGISTRATION,
        CanonicalCategory.REGISTRATION,
    ]
    print("  ✓ test_classify_needs_whole_words")


def test_company_registration_not_satisfied_by_tax_return():
    result = validate(["Company Registration"], ["income_tax_return.pdf"])
    assert result.valid is False
    assert result.missing_documents == ["Company Registration"]
    print("  ✓ test_company_registration_not_satisfied_by_tax_return")


def test_keyword_table_is_immutable():
    table = KeywordTable({CanonicalCategory.PAN: ["PAN", " pan ", "Pan  Card"]})
    # normalised and de-duplicated on the way in
    assert table.keywords(CanonicalCategory.PAN) == ("pan", "pan card")
    assert table.keywords(CanonicalCategory.GST) == ()

    try:
        table.extra = 1
        raise AssertionError("KeywordTable accepted a new attribute")
    except AttributeError:
        pass
    print("  ✓ test_keyword_table_is_immutable")


def test_keyword_table_from_json():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "keywords.json")
        Path(path).write_text(json.dumps({"emd": ["EMD", "bank guarantee"]}), encoding="utf-8")
        table = KeywordTable.from_json(path)
        assert table.supported_document_types() == ["EMD"]
        assert table.keywords(CanonicalCategory.EMD) == ("emd", "bank guarantee")

        bad = os.path.join(tmpdir, "bad.json")
        Path(bad).write_text(json.dumps({"SOLVENCY": ["solvency"]}), encoding="utf-8")
        try:
            KeywordTable.from_json(bad)
            raise AssertionError("Unknown category should be rejected")
        except ValueError:
            pass
    print("  ✓ test_keyword_table_from_json")



def test_normalize():
    assert normalize("My_PAN-Card.pdf") == "my pan card.pdf"
    assert normalize("  Tax   Clearance ") == "tax clearance"
    assert normalize(None) == ""
    print("  ✓ test_normalize")


def test_direct_substring_strategy():
    strategy = DirectSubstringStrategy()
    hit = strategy.attempt("pan card", "my pan card scan.pdf")
    assert hit is not None and hit.strategy == "direct_substring"
    assert strategy.attempt("pan card", "pan.pdf") is None
    assert strategy.attempt("", "anything.pdf") is None
    print("  ✓ test_direct_substring_strategy")


def test_keyword_table_strategy():
    strategy = KeywordTableStrategy(DEFAULT_KEYWORD_TABLE)
    hit = strategy.attempt("aadhar", "uid proof.pdf")
    assert hit is not None
    assert hit.strategy == "keyword_table"
    assert hit.keyword == "uid"
    assert strategy.attempt("solvency letter", "solvency.pdf") is None
    print("  ✓ test_keyword_table_strategy")


def test_word_overlap_strategy():
    strategy = WordOverlapStrategy(MatchingConfig())
    hit = strategy.attempt("tax clearance", "clearance letter.pdf")
    assert hit is not None and hit.keyword == "clearance"
    # tokens of 3 chars or fewer never fire on their own
    assert strategy.attempt("pan gst", "pan gst.pdf") is None
    print("  ✓ test_word_overlap_strategy")


def test_custom_strategy_list():
    """Only the strategies handed in are consulted."""
    matcher = DocumentRequirementMatcher(strategies=[WordOverlapStrategy(MatchingConfig())])
    assert not matcher.matches("Aadhar", "uid_proof.pdf")
    assert DocumentRequirementMatcher().matches("Aadhar", "uid_proof.pdf")
    print("  ✓ test_custom_strategy_list")



def test_empty_uploads_all_missing():
    required = ["PAN Card", "GST", "Bank Statement"]
    result = validate(required, [])
    assert result.valid is False
    assert result.missing_documents == required
    assert result.matched_documents == []
    assert result.message == "No documents uploaded. Required: PAN Card, GST, Bank Statement"
    print("  ✓ test_empty_uploads_all_missing")


def test_empty_requirements_pass():
    for uploads in ([], ["anything.pdf"], None):
        result = validate([], uploads)
        assert result.valid is True
        assert result.missing_documents == []
        assert result.matched_documents == []
        assert result.message == MSG_NO_REQUIREMENTS
    assert validate(None, None).valid is True
    print("  ✓ test_empty_requirements_pass")


def test_validate_is_idempotent():
    required = ["PAN Card", "GST", "Quality Certificate"]
    uploads = ["my_pan_card_scan.pdf", "gstin.pdf", "invoice.pdf"]
    assert validate(required, uploads) == validate(required, uploads)
    print("  ✓ test_validate_is_idempotent")


def test_case_insensitive_direct_match():
    result = validate(["PAN Card"], ["my_pan_card_scan.pdf"])
    assert result.valid is True
    assert result.matched_documents == ["PAN Card -> my_pan_card_scan.pdf"]
    detail = result.match_details[0]
    assert detail.strategy == "direct_substring"
    assert detail.confidence == 1.0
    assert detail.confidence_level == "HIGH"
    assert result.message == MSG_SUCCESS
    print("  ✓ test_case_insensitive_direct_match")


def test_keyword_table_cross_match():
    result = validate(["Aadhar"], ["uid_proof.pdf"])
    assert len(result.matched_documents) == 1
    assert result.missing_documents == []
    detail = result.match_details[0]
    assert detail.strategy == "keyword_table"
    assert detail.keyword == "uid"
    assert detail.categories == ["AADHAR"]
    print(f"  ✓ test_keyword_table_cross_match (confidence={detail.confidence})")


def test_token_fallback_match():
    result = validate(["Experience Certificates"], ["project_experience_2023.pdf"])
    assert result.valid is True
    assert result.match_details[0].strategy == "word_overlap"
    assert result.match_details[0].keyword == "experience"
    assert result.match_details[0].confidence_level == "LOW"
    print("  ✓ test_token_fallback_match")


def test_no_match_missing():
    result = validate(["Quality Certificate"], ["invoice.pdf"])
    assert result.valid is False
    assert result.missing_documents == ["Quality Certificate"]
    assert result.message == "Missing required documents: Quality Certificate"
    assert result.warnings == []
    print("  ✓ test_no_match_missing")


def test_first_upload_wins():
    result = validate(
        ["Bank Statement"],
        ["bank_statement_2023.pdf", "bank_statement_2024.pdf"],
    )
    assert result.matched_documents == ["Bank Statement -> bank_statement_2023.pdf"]
    print("  ✓ test_first_upload_wins")


def test_counts_add_up():
    required = ["PAN Card", "GST", "Quality Certificate", "Bank Statement"]
    result = validate(required, ["pan_card.pdf", "gst.pdf", "hdfc_bank_statement.pdf"])
    assert len(result.matched_documents) + len(result.missing_documents) == len(required)
    assert result.missing_documents == ["Quality Certificate"]
    assert result.valid == (not result.missing_documents and not result.duplicate_documents)
    print("  ✓ test_counts_add_up")


def test_shared_upload_is_duplicate():
    """One file used for two different requirements blocks the bid."""
    result = validate(["PAN", "GST"], ["pan_gst_combo.pdf"])
    assert len(result.matched_documents) == 2
    assert result.missing_documents == []
    assert result.duplicate_documents == ["pan_gst_combo.pdf (matched by: PAN, GST)"]
    assert result.valid is False
    assert result.message.startswith("Duplicate documents detected")
    print("  ✓ test_shared_upload_is_duplicate")


def test_shared_upload_flagged_when_nothing_else_matches():
    result = validate(["PAN", "GST"], ["pan_gst_combo.pdf", "bank_statement.pdf"])
    assert result.duplicate_documents == ["pan_gst_combo.pdf (matched by: PAN, GST)"]
    assert result.valid is False
    print("  ✓ test_shared_upload_flagged_when_nothing_else_matches")


def test_generic_word_does_not_make_duplicate():
    """Both labels say "Certificate"; each still has its own file."""
    for required in (
        ["GST Certificate", "Quality Certificate"],
        ["Quality Certificate", "GST Certificate"],
    ):
        result = validate(required, ["gst_certificate.pdf", "iso_9001.pdf"])
        assert result.duplicate_documents == [], result.duplicate_documents
        assert result.valid is True
        assert sorted(result.matched_documents) == [
            "GST Certificate -> gst_certificate.pdf",
            "Quality Certificate -> iso_9001.pdf",
        ]
    print("  ✓ test_generic_word_does_not_make_duplicate")


def test_pan_and_company_registration_bid_passes():
    result = validate(
        ["PAN Card", "Company Registration"],
        ["pan_card.pdf", "company_registration.pdf"],
    )
    assert result.valid is True
    assert result.matched_documents == [
        "PAN Card -> pan_card.pdf",
        "Company Registration -> company_registration.pdf",
    ]
    print("  ✓ test_pan_and_company_registration_bid_passes")


def test_earlier_requirement_moves_to_free_upload():
    """Bank Statement would take the first file, but Audited Financials
    can only use that one."""
    result = validate(
        ["Bank Statement", "Audited Financials"],
        ["audited_bank_statement_2023.pdf", "hdfc_bank_statement.pdf"],
    )
    assert result.valid is True
    assert result.matched_documents == [
        "Bank Statement -> hdfc_bank_statement.pdf",
        "Audited Financials -> audited_bank_statement_2023.pdf",
    ]
    print("  ✓ test_earlier_requirement_moves_to_free_upload")


def test_repeated_label_is_not_duplicate():
    result = validate(["PAN", "pan "], ["pan_card.pdf"])
    assert result.duplicate_documents == []
    assert result.valid is True
    assert len(result.matched_documents) == 2
    print("  ✓ test_repeated_label_is_not_duplicate")


def test_shared_upload_policy_can_be_disabled():
    matcher = DocumentRequirementMatcher(settings=MatchingConfig(flag_shared_uploads=False))
    result = matcher.validate(["PAN", "GST"], ["pan_gst_combo.pdf"])
    assert result.valid is True
    assert result.duplicate_documents == []
    print("  ✓ test_shared_upload_policy_can_be_disabled")


def test_identical_uploads_by_hash():
    uploads = [
        UploadedDocument(name="pan_card.pdf", content_hash="abc123"),
        UploadedDocument(name="gst_certificate.pdf", content_hash="abc123"),
    ]
    result = validate(["PAN Card", "GST"], uploads)
    assert result.missing_documents == []
    assert result.duplicate_documents == ["gst_certificate.pdf (duplicate of pan_card.pdf)"]
    assert result.valid is False
    print("  ✓ test_identical_uploads_by_hash")


def test_duplicate_message_beats_missing():
    uploads = [
        UploadedDocument(name="pan.pdf", size=100),
        UploadedDocument(name="PAN.pdf", size=100),
    ]
    result = validate(["PAN", "Bank Statement"], uploads)
    assert result.missing_documents == ["Bank Statement"]
    assert result.duplicate_documents == ["PAN.pdf (duplicate of pan.pdf)"]
    assert result.message.startswith("Duplicate documents detected")
    print("  ✓ test_duplicate_message_beats_missing")


def test_find_identical_uploads_needs_metadata():
    """Same name without size or hash is not enough to call it a duplicate."""
    uploads = [UploadedDocument(name="pan.pdf"), UploadedDocument(name="pan.pdf")]
    assert find_identical_uploads(uploads) == []

    sized = [UploadedDocument(name="pan.pdf", size=10), UploadedDocument(name="pan.pdf", size=11)]
    assert find_identical_uploads(sized) == []
    print("  ✓ test_find_identical_uploads_needs_metadata")


def test_find_shared_uploads():
    triples = [("PAN", 0, "a.pdf"), ("pan", 0, "a.pdf"), ("GST", 1, "b.pdf"), ("EMD", 0, "a.pdf")]
    assert find_shared_uploads(triples) == ["a.pdf (matched by: PAN, EMD)"]
    assert find_shared_uploads([]) == []
    # two different files that happen to share a name
    assert find_shared_uploads([("PAN", 0, "scan.pdf"), ("GST", 1, "scan.pdf")]) == []
    print("  ✓ test_find_shared_uploads")


def test_content_hash():
    assert content_hash(b"abc") == "900150983cd24fb0d6963f7d28e17f72"
    print("  ✓ test_content_hash")



def test_content_match_on_text():
    """Uninformative file name, but the text says GST."""
    doc = UploadedDocument(
        name="scan001.pdf",
        text="Form GST REG-06. Goods and Services Tax registration certificate",
    )
    result = validate(["GST Certificate"], [doc])
    assert result.valid is True
    assert result.matched_documents == ["GST Certificate -> scan001.pdf"]
    detail = result.match_details[0]
    assert detail.source == "text"
    assert detail.strategy == "keyword_table"
    print(f"  ✓ test_content_match_on_text (confidence={detail.confidence})")


def test_name_is_tried_before_text():
    doc = UploadedDocument(name="pan_card.pdf", text="Income Tax Department PAN")
    result = validate(["PAN Card"], [doc])
    assert result.match_details[0].source == "name"
    # template evidence only applies to text matches
    assert result.match_details[0].document_number is None
    print("  ✓ test_name_is_tried_before_text")


def test_confidence_is_monotonic():
    one_hit = UploadedDocument(name="scan1.pdf", text="gst")
    two_hits = UploadedDocument(name="scan2.pdf", text="gst goods and services")
    three_hits = UploadedDocument(name="scan3.pdf", text="gstin gst goods and services")

    scores = [
        validate(["GST Certificate"], [doc]).match_details[0].confidence
        for doc in (one_hit, two_hits, three_hits)
    ]
    assert scores[0] < scores[1] < scores[2]
    assert scores[2] == 1.0
    print(f"  ✓ test_confidence_is_monotonic ({scores})")


PAN_CARD_TEXT = (
    "INCOME TAX DEPARTMENT GOVT. OF INDIA Permanent Account Number Card "
    "ABCDE1234F Name RAVI KUMAR Father's Name SURESH KUMAR "
    "Date of Birth 01/01/1980 Signature"
)


def test_template_evidence_raises_text_confidence():
    """A PAN number and the printed card fields push a text match to HIGH."""
    plain = UploadedDocument(
        name="scan002.pdf",
        text="Income Tax Department permanent account details on file",
    )
    card = UploadedDocument(name="scan003.pdf", text=PAN_CARD_TEXT)

    weak = validate(["PAN Card"], [plain]).match_details[0]
    strong = validate(["PAN Card"], [card]).match_details[0]

    assert weak.source == strong.source == "text"
    assert weak.document_number is None
    assert strong.document_number == "ABCDE1234F"
    assert strong.validated_fields == ["name", "fatherName", "dateOfBirth", "signature"]
    assert strong.missing_fields == []
    assert weak.confidence < strong.confidence
    assert weak.confidence_level == "MEDIUM"
    assert strong.confidence_level == "HIGH"
    print(f"  ✓ test_template_evidence_raises_text_confidence "
          f"({weak.confidence} -> {strong.confidence})")


def test_templates_can_be_disabled():
    card = UploadedDocument(name="scan003.pdf", text=PAN_CARD_TEXT)
    matcher = DocumentRequirementMatcher(templates={})
    detail = matcher.validate(["PAN Card"], [card]).match_details[0]
    assert detail.document_number is None
    assert detail.confidence == 0.8
    print("  ✓ test_templates_can_be_disabled")


def test_inspect_text_number_formats():
    aadhaar = inspect_text(
        DEFAULT_TEMPLATES[CanonicalCategory.AADHAR],
        "Government of India Name: Asha Devi DOB: 12/03/1990 Female 1234 5678 9012",
    )
    assert aadhaar.document_number == "1234 5678 9012"
    assert aadhaar.found_fields == ("name", "dateOfBirth", "gender")
    assert aadhaar.missing_fields == ("address",)
    assert aadhaar.score == 0.8

    gst = inspect_text(
        DEFAULT_TEMPLATES[CanonicalCategory.GST],
        "GSTIN: 27ABCDE1234F1Z5 Legal Name: Acme Infra",
    )
    assert gst.document_number == "27ABCDE1234F1Z5"
    assert gst.found_fields == ("businessName",)

    cin = inspect_text(
        DEFAULT_TEMPLATES[CanonicalCategory.COMPANY_REGISTRATION],
        "Corporate Identity Number U72200KA2010PTC012345. Name of company: Acme Infra",
    )
    assert cin.document_number == "U72200KA2010PTC012345"
    assert cin.found_fields == ("companyName",)

    empty = inspect_text(DEFAULT_TEMPLATES[CanonicalCategory.PAN], None)
    assert empty.document_number is None
    assert empty.score == 0.0
    print("  ✓ test_inspect_text_number_formats")


def test_extraction_failure_warning():
    doc = UploadedDocument(name="pan_card.pdf", extraction_failed=True)
    result = validate(["PAN Card"], [doc])
    assert result.valid is True
    assert "Text extraction failed for: pan_card.pdf" in result.warnings
    print("  ✓ test_extraction_failure_warning")


def test_unrecognised_label_warning():
    result = validate(["Solvency Letter"], ["annual_report.pdf"])
    assert result.missing_documents == ["Solvency Letter"]
    assert result.warnings == ["Unrecognised required document type: Solvency Letter"]
    print("  ✓ test_unrecognised_label_warning")


def test_blank_labels_are_missing():
    """A blank requirement can't be satisfied, so it fails the bid."""
    result = validate(["", "   ", None, "PAN"], ["pan.pdf", "", None])
    assert result.valid is False
    assert result.matched_documents == ["PAN -> pan.pdf"]
    assert result.missing_documents == ["", "   ", ""]
    assert len(result.matched_documents) + len(result.missing_documents) == 4
    assert result.warnings == ["3 blank required document label(s) cannot be matched"]
    print("  ✓ test_blank_labels_are_missing")


def test_blank_only_requirements_do_not_pass():
    result = validate(["  "], [])
    assert result.valid is False
    assert result.missing_documents == ["  "]
    assert result.message != MSG_NO_REQUIREMENTS

    result = validate([None], ["pan.pdf"])
    assert result.valid is False
    assert result.missing_documents == [""]
    print("  ✓ test_blank_only_requirements_do_not_pass")


def test_malformed_inputs_do_not_raise():
    assert validate("PAN", "pan.pdf").valid is True
    assert validate(["PAN"], [42, {"size": 3}]).missing_documents == ["PAN"]
    assert validate(["PAN"], [{"name": "pan.pdf", "contentHash": "x"}]).valid is True
    result = validate(12, None)
    assert result.valid is False
    assert result.missing_documents == ["12"]
    assert validate(object(), None).valid is True
    print("  ✓ test_malformed_inputs_do_not_raise")



def test_wire_format_camel_case():
    result = validate(["PAN"], [])
    wire = result.to_wire()
    for key in (
        "valid", "message", "matchedDocuments", "missingDocuments",
        "duplicateDocuments", "warnings", "matchDetails",
    ):
        assert key in wire, f"{key} missing from {sorted(wire)}"
    assert wire["missingDocuments"] == ["PAN"]
    print("  ✓ test_wire_format_camel_case")


def test_wire_format_missing_fields_default():
    parsed = ValidationResult.model_validate({"valid": True, "message": "ok"})
    assert parsed.matched_documents == []
    assert parsed.duplicate_documents == []
    assert parsed.warnings == []
    assert not parsed.has_duplicates
    print("  ✓ test_wire_format_missing_fields_default")


def test_result_is_frozen():
    result = validate([], [])
    try:
        result.valid = False
        raise AssertionError("ValidationResult should be immutable")
    except Exception as exc:
        assert not isinstance(exc, AssertionError)
    print("  ✓ test_result_is_frozen")



def test_config_rejects_bad_weights():
    try:
        Config(matching=MatchingConfig(keyword_weight=1.5))
        raise AssertionError("weight > 1 should be rejected")
    except ValueError:
        pass
    print("  ✓ test_config_rejects_bad_weights")


def test_config_rejects_inverted_thresholds():
    try:
        Config(matching=MatchingConfig(high_confidence_threshold=0.5,
                                       medium_confidence_threshold=0.8))
        raise AssertionError("medium > high should be rejected")
    except ValueError:
        pass
    print("  ✓ test_config_rejects_inverted_thresholds")



def run_all_tests():
    """Run all tests and report results."""
    print("\n" + "=" * 60)
    print("  Document matcher — Test Suite")
    print("=" * 60 + "\n")

    tests = [
        # Keyword table
        test_supported_document_types,
        test_keywords_for_lookup,
        test_classify_label,
        test_classify_needs_whole_words,
        test_keyword_table_is_immutable,
        test_keyword_table_from_json,
        # Strategies
        test_normalize,
        test_direct_substring_strategy,
        test_keyword_table_strategy,
        test_word_overlap_strategy,
        test_custom_strategy_list,
        # validate()
        test_empty_uploads_all_missing,
        test_empty_requirements_pass,
        test_validate_is_idempotent,
        test_case_insensitive_direct_match,
        test_keyword_table_cross_match,
        test_token_fallback_match,
        test_no_match_missing,
        test_first_upload_wins,
        test_counts_add_up,
        test_company_registration_not_satisfied_by_tax_return,
        # Duplicates
        test_shared_upload_is_duplicate,
        test_shared_upload_flagged_when_nothing_else_matches,
        test_generic_word_does_not_make_duplicate,
        test_pan_and_company_registration_bid_passes,
        test_earlier_requirement_moves_to_free_upload,
        test_repeated_label_is_not_duplicate,
        test_shared_upload_policy_can_be_disabled,
        test_identical_uploads_by_hash,
        test_duplicate_message_beats_missing,
        test_find_identical_uploads_needs_metadata,
        test_find_shared_uploads,
        test_content_hash,
        # Content variant + warnings
        test_content_match_on_text,
        test_name_is_tried_before_text,
        test_confidence_is_monotonic,
        test_template_evidence_raises_text_confidence,
        test_templates_can_be_disabled,
        test_inspect_text_number_formats,
        test_extraction_failure_warning,
        test_unrecognised_label_warning,
        test_blank_labels_are_missing,
        test_blank_only_requirements_do_not_pass,
        test_malformed_inputs_do_not_raise,
        # Wire format
        test_wire_format_camel_case,
        test_wire_format_missing_fields_default,
        test_result_is_frozen,
        # Config
        test_config_rejects_bad_weights,
        test_config_rejects_inverted_thresholds,
    ]

    passed = 0
    failed = 0

    for test_fn in tests:
        try:
            test_fn()
            passed += 1
        except Exception as exc:
            failed += 1
            print(f"  ✗ {test_fn.__name__} FAILED: {exc}")

    print(f"\n{'=' * 60}")
    print(f"  Results: {passed} passed, {failed} failed, {len(tests)} total")
    print(f"{'=' * 60}\n")

    return failed == 0


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
