"""Unit tests for the pure layers: validators, content sniffing and upload stages."""

from __future__ import annotations

import logging
import os
import unittest
from unittest.mock import patch

from astrotasks.config import Settings
from astrotasks.errors import (
    FileSizeError,
    FileTypeError,
    InvalidFormatError,
    MissingFieldError,
)
from astrotasks.logging_setup import setup_logging
from astrotasks.sniffer import sniff_content_type
from astrotasks.uploads import (
    MAX_UPLOAD_BYTES,
    UploadCandidate,
    check_content_type,
    check_size,
    run_upload_stages,
)
from astrotasks.validation import (
    is_valid_company_email,
    is_valid_employee_id,
    is_valid_task_employee_id,
    require_all_fields,
    require_company_email,
    require_iso_date,
    require_lookup_employee_id,
    require_task_employee_id,
)


# ===========================================================================
# 1. Employee ID predicates
# ===========================================================================

class TestEmployeeIdPredicates(unittest.TestCase):
    def test_task_variant_accepts_ats_prefix(self):
        for emp_id in ("ATS0001", "ATS0123", "ATS0999", "ATS0000"):
            self.assertTrue(is_valid_task_employee_id(emp_id), emp_id)

    def test_task_variant_rejects_other_shapes(self):
        for emp_id in ("ATE0001", "ats0001", "ATS1001", "ATS001", "ATS00011", " ATS0001", "", None):
            self.assertFalse(is_valid_task_employee_id(emp_id), emp_id)

    def test_lookup_variant_accepts_any_ats_letters(self):
        for emp_id in ("ATS0001", "TTT0123", "SAT0999", "AAA0100"):
            self.assertTrue(is_valid_employee_id(emp_id), emp_id)

    def test_lookup_variant_rejects_zero_block(self):
        self.assertFalse(is_valid_employee_id("ATS0000"))

    def test_lookup_variant_rejects_other_shapes(self):
        for emp_id in ("ABC0001", "ATS1001", "ATS001", "ATS00012", "ats0001", None):
            self.assertFalse(is_valid_employee_id(emp_id), emp_id)

    def test_variants_disagree_on_ats0000(self):
        self.assertTrue(is_valid_task_employee_id("ATS0000"))
        self.assertFalse(is_valid_employee_id("ATS0000"))

    def test_require_helpers_raise_invalid_format(self):
        with self.assertRaises(InvalidFormatError):
            require_task_employee_id("ATE0001")
        with self.assertRaises(InvalidFormatError):
            require_lookup_employee_id("ATS0000")
        self.assertEqual(require_task_employee_id("ATS0042"), "ATS0042")


# ===========================================================================
# 2. Company email
# ===========================================================================

class TestCompanyEmail(unittest.TestCase):
    def test_accepted(self):
        for email in (
            "a@astrolitetech.com",
            "a.b-c_9@astrolitetech.com",
            "john.doe@astrolitetech.com",
            "9lives@astrolitetech.com",
        ):
            self.assertTrue(is_valid_company_email(email), email)

    def test_rejected(self):
        for email in (
            ".abc@astrolitetech.com",
            "abc.@astrolitetech.com",
            "abc@other.com",
            "abc@astrolitetech.co",
            "abc@sub.astrolitetech.com",
            "a b@astrolitetech.com",
            "@astrolitetech.com",
            "",
            None,
        ):
            self.assertFalse(is_valid_company_email(email), email)

    def test_require_company_email_message(self):
        with self.assertRaises(InvalidFormatError) as ctx:
            require_company_email("abc@other.com")
        self.assertIn("astrolitetech.com", ctx.exception.message)


# ===========================================================================
# 3. Required fields and dates
# ===========================================================================

class TestRequiredFields(unittest.TestCase):
    def test_all_present(self):
        require_all_fields({"taskName": "Report", "email": "a@astrolitetech.com"})

    def test_none_is_missing(self):
        with self.assertRaises(MissingFieldError) as ctx:
            require_all_fields({"taskName": "Report", "email": None})
        self.assertEqual(ctx.exception.field, "email")
        self.assertEqual(ctx.exception.message, "All fields are required")

    def test_empty_string_is_missing(self):
        with self.assertRaises(MissingFieldError):
            require_all_fields({"taskName": ""})

    def test_iso_date(self):
        self.assertEqual(require_iso_date("2026-03-01", "deadline"), "2026-03-01")
        with self.assertRaises(InvalidFormatError):
            require_iso_date("01/03/2026", "deadline")
        with self.assertRaises(InvalidFormatError):
            require_iso_date("2026-02-30", "deadline")


# ===========================================================================
# 4. Content-type sniffing
# ===========================================================================

class TestSniffer(unittest.TestCase):
    def test_pdf(self):
        self.assertEqual(sniff_content_type(b"%PDF-1.7\n..."), "application/pdf")

    def test_pdf_needs_more_than_magic(self):
        # Exactly four bytes is not enough for the PDF rule; it falls through to text.
        self.assertEqual(sniff_content_type(b"%PDF"), "text/plain")

    def test_png(self):
        self.assertEqual(sniff_content_type(b"\x89PNG\r\n\x1a\n\x00\x00"), "image/png")

    def test_jpeg(self):
        self.assertEqual(sniff_content_type(b"\xff\xd8\xff\xe0\x00\x10JFIF"), "image/jpeg")

    def test_ascii_text(self):
        self.assertEqual(sniff_content_type(b"x" * 50), "text/plain")

    def test_only_first_hundred_bytes_inspected(self):
        data = b"a" * 100 + b"\xff\xfe"
        self.assertEqual(sniff_content_type(data), "text/plain")

    def test_binary(self):
        self.assertEqual(sniff_content_type(b"\x00\x9c\xfa\x81\x10"), "application/octet-stream")

    def test_empty(self):
        self.assertEqual(sniff_content_type(b""), "text/plain")


# ===========================================================================
# 5. Upload stages
# ===========================================================================

class TestUploadStages(unittest.TestCase):
    def test_allowed_types_pass(self):
        for mime in (
            "application/pdf",
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "image/jpeg",
            "image/png",
            "text/plain; charset=utf-8",
        ):
            candidate = UploadCandidate(content=b"data", content_type=mime)
            self.assertIs(check_content_type(candidate), candidate)

    def test_zip_rejected_regardless_of_content(self):
        candidate = UploadCandidate(content=b"%PDF-1.4 looks like a pdf", content_type="application/zip")
        with self.assertRaises(FileTypeError):
            run_upload_stages(candidate)

    def test_missing_type_rejected(self):
        with self.assertRaises(FileTypeError):
            check_content_type(UploadCandidate(content=b"data"))

    def test_size_ceiling(self):
        at_limit = UploadCandidate(content=b"\0" * MAX_UPLOAD_BYTES, content_type="text/plain")
        self.assertIs(check_size(at_limit), at_limit)

        too_big = UploadCandidate(content=b"\0" * (6 * 1024 * 1024), content_type="application/pdf")
        with self.assertRaises(FileSizeError) as ctx:
            run_upload_stages(too_big)
        self.assertIn("5 MB", ctx.exception.message)

    def test_type_checked_before_size(self):
        candidate = UploadCandidate(content=b"\0" * (MAX_UPLOAD_BYTES + 1), content_type="application/zip")
        with self.assertRaises(FileTypeError):
            run_upload_stages(candidate)


# ===========================================================================
# 6. Settings & logging
# ===========================================================================

class TestSettingsAndLogging(unittest.TestCase):
    def test_defaults(self):
        settings = Settings()
        self.assertEqual(settings.PORT, 3051)
        self.assertEqual(settings.MAX_UPLOAD_BYTES, MAX_UPLOAD_BYTES)
        self.assertEqual(settings.database_path, settings.DATA_DIR / "new_employee_db.db")

    def test_env_override(self):
        with patch.dict(os.environ, {"PORT": "8080", "DB_NAME": "tasks_test"}):
            settings = Settings()
        self.assertEqual(settings.PORT, 8080)
        self.assertEqual(settings.database_path.name, "tasks_test.db")

    def test_setup_logging_installs_one_handler(self):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            setup_logging("debug")
            setup_logging("warning")
            self.assertEqual(len(root.handlers), 1)
            self.assertEqual(root.level, logging.WARNING)
        finally:
            for h in list(root.handlers):
                root.removeHandler(h)
            for h in saved_handlers:
                root.addHandler(h)
            root.setLevel(saved_level)
            logging.captureWarnings(False)


if __name__ == "__main__":
    unittest.main()
