#!/usr/bin/env python3
"""
test_main.py — End-to-end CLI runs against the in-memory fake spreadsheet.
"""

import io
import os
import sys
from contextlib import redirect_stdout
from unittest.mock import patch

sys.path.insert(0, os.path.dirname(__file__))
os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = "/dev/null"

import httplib2

import config
import list_tabs
import main
import setup_sheet
from fake_sheets import FakeSpreadsheets, http_error

ALICE = ["--name", "Alice", "--email", "a@x.com", "--product", "Acme",
         "--cluster-id", "cid-1", "--timestamp", "2026-10-18T09:00:00Z"]


def _exit_code(fn, *args, **kwargs):
    try:
        fn(*args, **kwargs)
    except SystemExit as e:
        return e.code
    return 0


def test_records_event_in_new_tab():
    fake = FakeSpreadsheets()
    assert _exit_code(main.main, ALICE, sheets=fake) == 0
    assert fake.values("Acme") == [
        config.HEADERS,
        ["1", "Alice", "a@x.com", "cid-1", "2026-10-18T09:00:00Z"],
    ]
    print("  PASS: Empty spreadsheet -> tab + header + row")


def test_second_run_increments():
    fake = FakeSpreadsheets()
    main.main(ALICE, sheets=fake)
    main.main(ALICE[:-1] + ["2026-10-18T09:05:00Z"], sheets=fake)
    assert [r[0] for r in fake.values("Acme")] == ["SL", "1", "2"]
    assert len(fake.requests_of("addSheet")) == 1
    print("  PASS: Second run gets SL=2")


def test_append_strategy_flag():
    fake = FakeSpreadsheets()
    main.main(ALICE + ["--strategy", "append"], sheets=fake)
    main.main(ALICE + ["--strategy", "append"], sheets=fake)
    assert [r[0] for r in fake.values("Acme")] == ["SL", "1", "1"]
    print("  PASS: --strategy append")


def test_show_prints_records():
    fake = FakeSpreadsheets()
    out = io.StringIO()
    with redirect_stdout(out):
        main.main(ALICE + ["--show"], sheets=fake)
    assert "1\tAlice\ta@x.com\tcid-1\t2026-10-18T09:00:00Z" in out.getvalue()
    print("  PASS: --show prints the tab")


def test_remote_failure_exits_nonzero():
    fake = FakeSpreadsheets()
    fake.fail["get"] = http_error(500, "backend error")
    assert _exit_code(main.main, ALICE, sheets=fake) == 1
    assert fake.tab("Acme") is None
    print("  PASS: Remote failure -> exit 1")


def test_bad_sequence_exits_nonzero():
    fake = FakeSpreadsheets(tabs=[("Acme", 3, [config.HEADERS, ["x", "", "", "", ""]])])
    assert _exit_code(main.main, ALICE, sheets=fake) == 1
    assert len(fake.values("Acme")) == 2
    print("  PASS: Non-numeric SL -> exit 1")


def test_missing_fields_exit_nonzero():
    fake = FakeSpreadsheets()
    assert _exit_code(main.main, ["--name", "Alice"], sheets=fake) == 1
    assert fake.calls == []
    print("  PASS: Incomplete event -> exit 1, no API calls")


def test_missing_credentials_exit_nonzero():
    code = _exit_code(main.main, ALICE + ["--credentials", "/nonexistent/key.json"])
    assert code == 1
    print("  PASS: Missing credentials -> exit 1")


def test_unreachable_host_exits_nonzero():
    fake = FakeSpreadsheets()
    fake.fail["get"] = httplib2.ServerNotFoundError(
        "Unable to find the server at sheets.googleapis.com"
    )
    assert _exit_code(main.main, ALICE, sheets=fake) == 1
    print("  PASS: Unreachable host -> exit 1")


def test_write_timeout_exits_nonzero():
    fake = FakeSpreadsheets(tabs=[("Acme", 3, [config.HEADERS])])
    fake.fail["batchUpdate"] = TimeoutError("timed out")
    assert _exit_code(main.main, ALICE, sheets=fake) == 1
    assert fake.values("Acme") == [config.HEADERS]
    print("  PASS: Write timeout -> exit 1")


def test_unknown_strategy_rejected():
    assert _exit_code(main.main, ALICE + ["--strategy", "upsert"], sheets=FakeSpreadsheets()) == 2
    print("  PASS: Unknown strategy -> exit 2")


def test_unknown_default_strategy_rejected():
    with patch.object(config, "DEFAULT_STRATEGY", "upsert"):
        code = _exit_code(main.main, ALICE, sheets=FakeSpreadsheets())
    assert code == 2
    print("  PASS: Unknown WRITE_STRATEGY -> exit 2")


def test_setup_sheet_creates_tabs():
    fake = FakeSpreadsheets()
    assert _exit_code(setup_sheet.main, ["Acme", "Globex", "Acme"], sheets=fake) == 0
    assert [t["title"] for t in fake.tabs] == ["Sheet1", "Acme", "Globex"]
    assert fake.values("Globex") == [config.HEADERS]
    print("  PASS: setup_sheet pre-creates tabs")


def test_list_tabs_counts_records():
    fake = FakeSpreadsheets()
    main.main(ALICE, sheets=fake)
    out = io.StringIO()
    with redirect_stdout(out):
        list_tabs.main([], sheets=fake)
    assert "- Sheet1: 0 record(s)" in out.getvalue()
    assert "- Acme: 1 record(s)" in out.getvalue()
    print("  PASS: list_tabs summary")


def test_list_tabs_spreadsheet_and_credentials_flags():
    fake = FakeSpreadsheets()
    with redirect_stdout(io.StringIO()):
        list_tabs.main(["--spreadsheet-id", "other-sheet"], sheets=fake)
    assert fake.calls[-1][1]["spreadsheetId"] == "other-sheet"

    code = _exit_code(list_tabs.main, ["--credentials", "/nonexistent/key.json"])
    assert code == 1
    print("  PASS: list_tabs --spreadsheet-id / --credentials")


if __name__ == "__main__":
    tests = [
        test_records_event_in_new_tab,
        test_second_run_increments,
        test_append_strategy_flag,
        test_show_prints_records,
        test_remote_failure_exits_nonzero,
        test_bad_sequence_exits_nonzero,
        test_missing_fields_exit_nonzero,
        test_missing_credentials_exit_nonzero,
        test_unreachable_host_exits_nonzero,
        test_write_timeout_exits_nonzero,
        test_unknown_strategy_rejected,
        test_unknown_default_strategy_rejected,
        test_setup_sheet_creates_tabs,
        test_list_tabs_counts_records,
        test_list_tabs_spreadsheet_and_credentials_flags,
    ]
    print(f"Running {len(tests)} CLI tests...\n")
    passed = 0
    failed = 0
    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"  FAIL: {test.__name__}: {e}")
            failed += 1
    print(f"\nResults: {passed} passed, {failed} failed out of {len(tests)} tests.")
    sys.exit(1 if failed else 0)
