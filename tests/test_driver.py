"""Tests for the batch driver.

The explorer is mocked with a single ``respx`` route whose side effect serves
pages by (case-insensitive) address, so each test controls which records
succeed and which fail.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

import httpx
import pytest
import respx

from solgrab.batch.driver import get_all_source_code, output_path_for, write_source
from solgrab.batch.models import ContractRecord
from solgrab.config import Settings
from solgrab.errors import SourceNotFoundError, TransportError

_CAT = "0x56ba2ee7890461f463f7be02aac3099f6d5811a8"
_J8T = "0x0d262e5dc4a06a0f1c90ce79c7a60c09dfc884e4"
_EIP = "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed"


def _page(source: str) -> str:
    return f'<html><body><pre id="editor">{source}</pre></body></html>'


def _explorer(pages: Dict[str, httpx.Response]):
    """Return a respx side effect serving *pages* keyed by lowercase address."""

    def handler(request: httpx.Request) -> httpx.Response:
        address = request.url.path.rsplit("/", 1)[-1].lower()
        return pages.get(address, httpx.Response(404, text="Not Found"))

    return handler


@pytest.fixture
def cfg(tmp_path: Path) -> Settings:
    out = tmp_path / "erc20"
    out.mkdir()
    return Settings(
        explorer_url_template="https://explorer.test/address/{address}",
        source_selector="#editor",
        output_dir=out,
        output_extension=".sol",
        min_line_length=43,
        request_timeout=5.0,
    )


class TestWriteSource:
    def test_appends_address_trailer_exactly(self, cfg: Settings) -> None:
        record = ContractRecord(address=_CAT, name="BlockCAT (CAT)", checksum_address=_CAT, lineno=1)
        path = write_source(record, "contract CAT {}\n", cfg)

        assert path == cfg.output_dir / "BlockCAT (CAT).sol"
        assert path.read_bytes() == ("contract CAT {}\n" + "\n//" + _CAT).encode("utf-8")

    def test_overwrites_existing_file(self, cfg: Settings) -> None:
        record = ContractRecord(address=_CAT, name="CAT", checksum_address=_CAT, lineno=1)
        output_path_for(record, cfg).write_text("stale", encoding="utf-8")
        write_source(record, "fresh", cfg)
        assert output_path_for(record, cfg).read_text(encoding="utf-8") == f"fresh\n//{_CAT}"

    def test_custom_extension(self, cfg: Settings) -> None:
        cfg.output_extension = ".txt"
        record = ContractRecord(address=_CAT, name="CAT", checksum_address=_CAT, lineno=1)
        assert output_path_for(record, cfg).name == "CAT.txt"


class TestGetAllSourceCode:
    def test_writes_one_file_per_record(self, cfg: Settings) -> None:
        listing = f"{_CAT};BlockCAT (CAT)\n{_J8T};J8T (J8T);ignored\n"
        pages = {
            _CAT: httpx.Response(200, text=_page("contract CAT { uint a = 1 &amp;&amp; 2; }")),
            _J8T: httpx.Response(200, text=_page("contract J8T {}")),
        }
        with respx.mock:
            route = respx.get(host="explorer.test").mock(side_effect=_explorer(pages))
            summary = get_all_source_code(listing, cfg=cfg)

        assert route.call_count == 2
        cat = (cfg.output_dir / "BlockCAT (CAT).sol").read_text(encoding="utf-8")
        j8t = (cfg.output_dir / "J8T (J8T).sol").read_text(encoding="utf-8")
        assert cat == f"contract CAT {{ uint a = 1 && 2; }}\n//{_CAT}"
        assert j8t == f"contract J8T {{}}\n//{_J8T}"
        assert len(summary.written) == 2
        assert summary.failed == []

    def test_requests_checksum_address(self, cfg: Settings) -> None:
        pages = {_EIP: httpx.Response(200, text=_page("contract E {}"))}
        with respx.mock:
            route = respx.get(host="explorer.test").mock(side_effect=_explorer(pages))
            get_all_source_code(f"{_EIP};EIP55", cfg=cfg)

        assert route.calls.last.request.url.path == "/address/0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
        # The trailer keeps the address as written in the listing.
        assert (cfg.output_dir / "EIP55.sol").read_text(encoding="utf-8").endswith(f"\n//{_EIP}")

    def test_short_lines_are_not_fetched(self, cfg: Settings) -> None:
        listing = "\n0xabc;Short\n# header line\n"
        with respx.mock(assert_all_called=False) as respx_mock:
            route = respx_mock.get(host="explorer.test").mock(side_effect=_explorer({}))
            summary = get_all_source_code(listing, cfg=cfg)

        assert route.call_count == 0
        assert list(cfg.output_dir.iterdir()) == []
        assert summary.skipped == 4
        assert summary.attempted == 0

    def test_failure_does_not_stop_batch(self, cfg: Settings, caplog: pytest.LogCaptureFixture) -> None:
        listing = "\n".join(
            [
                f"{_CAT};BlockCAT (CAT)",
                f"{_J8T};J8T (J8T)",
                f"{_EIP};EIP55",
            ]
        )
        pages = {
            _CAT: httpx.Response(200, text=_page("contract CAT {}")),
            _J8T: httpx.Response(500, text="boom"),
            _EIP: httpx.Response(200, text=_page("contract E {}")),
        }
        with caplog.at_level(logging.WARNING):
            with respx.mock:
                route = respx.get(host="explorer.test").mock(side_effect=_explorer(pages))
                summary = get_all_source_code(listing, cfg=cfg)

        assert route.call_count == 3
        assert (cfg.output_dir / "BlockCAT (CAT).sol").exists()
        assert not (cfg.output_dir / "J8T (J8T).sol").exists()
        assert (cfg.output_dir / "EIP55.sol").exists()

        assert len(summary.failed) == 1
        record, error = summary.failed[0]
        assert record.name == "J8T (J8T)"
        assert isinstance(error, TransportError)
        assert f"J8T (J8T) {_J8T} cannot get code" in caplog.text

    def test_not_found_writes_nothing(self, cfg: Settings) -> None:
        pages = {_CAT: httpx.Response(200, text="<html><body>unverified</body></html>")}
        with respx.mock:
            respx.get(host="explorer.test").mock(side_effect=_explorer(pages))
            summary = get_all_source_code(f"{_CAT};BlockCAT (CAT)", cfg=cfg)

        assert list(cfg.output_dir.iterdir()) == []
        assert isinstance(summary.failed[0][1], SourceNotFoundError)

    def test_connection_error_is_isolated(self, cfg: Settings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.lower().endswith(_CAT):
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, text=_page("contract J8T {}"))

        with respx.mock:
            respx.get(host="explorer.test").mock(side_effect=handler)
            summary = get_all_source_code(f"{_CAT};CAT\n{_J8T};J8T", cfg=cfg)

        assert [p.name for p in summary.written] == ["J8T.sol"]
        assert isinstance(summary.failed[0][1], TransportError)

    def test_invalid_record_logged_and_skipped(
        self, cfg: Settings, caplog: pytest.LogCaptureFixture
    ) -> None:
        listing = f"{'g' * 42};Bogus\n{_CAT};BlockCAT (CAT)"
        pages = {_CAT: httpx.Response(200, text=_page("contract CAT {}"))}
        with caplog.at_level(logging.WARNING):
            with respx.mock:
                route = respx.get(host="explorer.test").mock(side_effect=_explorer(pages))
                summary = get_all_source_code(listing, cfg=cfg)

        assert route.call_count == 1
        assert len(summary.invalid) == 1
        assert summary.invalid[0].lineno == 1
        assert "skipping invalid record" in caplog.text
        assert (cfg.output_dir / "BlockCAT (CAT).sol").exists()

    def test_duplicate_names_overwrite_with_warning(
        self, cfg: Settings, caplog: pytest.LogCaptureFixture
    ) -> None:
        listing = f"{_CAT};Token\n{_J8T};Token"
        pages = {
            _CAT: httpx.Response(200, text=_page("contract First {}")),
            _J8T: httpx.Response(200, text=_page("contract Second {}")),
        }
        with caplog.at_level(logging.WARNING):
            with respx.mock:
                respx.get(host="explorer.test").mock(side_effect=_explorer(pages))
                summary = get_all_source_code(listing, cfg=cfg)

        assert (cfg.output_dir / "Token.sol").read_text(encoding="utf-8") == f"contract Second {{}}\n//{_J8T}"
        assert len(summary.written) == 2
        assert "overwrites" in caplog.text

    def test_control_character_name_does_not_stop_batch(self, cfg: Settings) -> None:
        listing = f"{_CAT};Bad\x00Name\n{_J8T};J8T"
        pages = {
            _CAT: httpx.Response(200, text=_page("contract CAT {}")),
            _J8T: httpx.Response(200, text=_page("contract J8T {}")),
        }
        with respx.mock(assert_all_called=False) as respx_mock:
            route = respx_mock.get(host="explorer.test").mock(side_effect=_explorer(pages))
            summary = get_all_source_code(listing, cfg=cfg)

        assert route.call_count == 1
        assert len(summary.invalid) == 1
        assert [p.name for p in summary.written] == ["J8T.sol"]
        assert (cfg.output_dir / "J8T.sol").read_text(encoding="utf-8") == f"contract J8T {{}}\n//{_J8T}"

    def test_value_error_on_write_is_a_record_failure(self, cfg: Settings, monkeypatch) -> None:
        real_write = write_source

        def write(record, source, cfg=None):
            if record.name == "CAT":
                raise ValueError("embedded null byte")
            return real_write(record, source, cfg)

        monkeypatch.setattr("solgrab.batch.driver.write_source", write)
        pages = {
            _CAT: httpx.Response(200, text=_page("contract CAT {}")),
            _J8T: httpx.Response(200, text=_page("contract J8T {}")),
        }
        with respx.mock:
            respx.get(host="explorer.test").mock(side_effect=_explorer(pages))
            summary = get_all_source_code(f"{_CAT};CAT\n{_J8T};J8T", cfg=cfg)

        assert isinstance(summary.failed[0][1], ValueError)
        assert [p.name for p in summary.written] == ["J8T.sol"]

    def test_missing_output_dir_is_a_record_failure(self, cfg: Settings) -> None:
        cfg.output_dir = cfg.output_dir / "does-not-exist"
        listing = f"{_CAT};CAT"
        pages = {_CAT: httpx.Response(200, text=_page("contract CAT {}"))}
        with respx.mock:
            respx.get(host="explorer.test").mock(side_effect=_explorer(pages))
            summary = get_all_source_code(listing, cfg=cfg)

        assert summary.written == []
        assert isinstance(summary.failed[0][1], OSError)
        assert not cfg.output_dir.exists()

    def test_uses_injected_logger_and_client(
        self, cfg: Settings, caplog: pytest.LogCaptureFixture
    ) -> None:
        log = logging.getLogger("test.batch")
        with caplog.at_level(logging.DEBUG, logger="test.batch"):
            with respx.mock:
                respx.get(host="explorer.test").mock(side_effect=_explorer({}))
                with httpx.Client() as client:
                    summary = get_all_source_code(f"{_CAT};CAT", cfg=cfg, client=client, log=log)

        assert summary.failed
        names = {r.name for r in caplog.records}
        assert "test.batch" in names
        assert f"addr={_CAT},name=CAT" in caplog.text

    def test_describe(self, cfg: Settings) -> None:
        with respx.mock(assert_all_called=False) as respx_mock:
            respx_mock.get(host="explorer.test").mock(side_effect=_explorer({}))
            summary = get_all_source_code("short", cfg=cfg)
        assert summary.describe() == "0 written, 0 failed, 0 invalid, 1 skipped"
