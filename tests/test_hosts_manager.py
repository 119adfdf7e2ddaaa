from __future__ import annotations

import asyncio
import os
import stat
from pathlib import Path

import pytest

from hostsed.errors import HostsFileBusyError, HostsFileNotFoundError
from hostsed.hosts_manager import HostsFileManager
from hostsed.models import Hostname, HostsEntry, parse_address
from hostsed.platforms import LINUX, WINDOWS, PlatformProfile


def _manager(tmp_path: Path, profile: PlatformProfile = LINUX) -> HostsFileManager:
    return HostsFileManager(profile.with_path(str(tmp_path / "hosts")))


def _entry(ip: str, host: str, comment: str = "") -> HostsEntry:
    entry = HostsEntry.from_strings(ip, host, comment)
    assert entry is not None
    return entry


def test_export_then_load_round_trips_entries(tmp_path: Path) -> None:
    source = _manager(tmp_path)
    entries = [
        _entry("192.0.2.1", "example.com"),
        _entry("::1", "localhost", "loopback"),
        _entry("10.0.0.1", "a.example", "multi word note"),
    ]
    source.contents.extend(entries)

    export_path = tmp_path / "export.txt"
    assert asyncio.run(source.save(export_path)) == 3

    target = _manager(tmp_path)
    report = asyncio.run(target.load(export_path))

    assert report.loaded == 3
    assert report.skipped == 0
    assert list(target.contents) == entries


def test_load_save_load_is_idempotent(tmp_path: Path) -> None:
    hosts = tmp_path / "hosts"
    hosts.write_text(
        "# comment line\n"
        "\n"
        "127.0.0.1\tlocalhost\n"
        "  10.0.0.1   host.example   # hi there\n"
        "192.0.2.1 example.com alias.example\n",
        encoding="utf-8",
    )
    manager = _manager(tmp_path)
    asyncio.run(manager.load())
    first = list(manager.contents)

    asyncio.run(manager.save())
    asyncio.run(manager.refresh())

    assert list(manager.contents) == first
    assert hosts.read_text(encoding="utf-8") == (
        "127.0.0.1 localhost\n"
        "10.0.0.1 host.example #hi there\n"
        "192.0.2.1 example.com\n"
    )


def test_malformed_lines_are_skipped(tmp_path: Path) -> None:
    hosts = tmp_path / "hosts"
    lines = [f"10.0.0.{i} host{i}.example" for i in range(1, 11)]
    lines.insert(5, "not-an-ip bad.example")
    hosts.write_text("\n".join(lines) + "\n", encoding="utf-8")

    manager = _manager(tmp_path)
    report = asyncio.run(manager.load())

    assert len(manager.contents) == 10
    assert report.loaded == 10
    assert report.skipped == 1


def test_invalid_entries_are_never_written(tmp_path: Path) -> None:
    manager = _manager(tmp_path)
    manager.contents.extend([
        _entry("192.0.2.1", "example.com"),
        HostsEntry(None, Hostname.try_parse("draft.example"), "unfinished"),
        HostsEntry(parse_address("192.0.2.2"), None, ""),
    ])

    written = asyncio.run(manager.save())

    assert written == 1
    assert (tmp_path / "hosts").read_text(encoding="utf-8") == "192.0.2.1 example.com\n"


def test_comment_line_formats(tmp_path: Path) -> None:
    manager = _manager(tmp_path)
    manager.contents.extend([
        _entry("192.0.2.1", "example.com", ""),
        _entry("192.0.2.1", "example.com", "note"),
    ])
    assert manager.render() == "192.0.2.1 example.com\n192.0.2.1 example.com #note\n"


def test_missing_file_has_distinct_error(tmp_path: Path) -> None:
    manager = _manager(tmp_path)
    with pytest.raises(HostsFileNotFoundError) as excinfo:
        asyncio.run(manager.load())
    assert isinstance(excinfo.value, FileNotFoundError)
    assert excinfo.value.path == str(tmp_path / "hosts")


def test_other_io_errors_propagate_unchanged(tmp_path: Path) -> None:
    (tmp_path / "folder").mkdir()
    manager = _manager(tmp_path)
    with pytest.raises(OSError) as excinfo:
        asyncio.run(manager.load(tmp_path / "folder"))
    assert not isinstance(excinfo.value, HostsFileNotFoundError)


def test_decoding_error_leaves_collection_untouched(tmp_path: Path) -> None:
    hosts = tmp_path / "hosts"
    hosts.write_bytes(b"10.0.0.1 ok.example\n10.0.0.2 bad\xff.example\n")
    manager = _manager(tmp_path)

    with pytest.raises(UnicodeDecodeError):
        asyncio.run(manager.load())
    assert len(manager.contents) == 0


def test_load_appends_and_refresh_replaces(tmp_path: Path) -> None:
    (tmp_path / "hosts").write_text("10.0.0.1 a.example\n", encoding="utf-8")
    manager = _manager(tmp_path)

    asyncio.run(manager.load())
    asyncio.run(manager.load())
    assert len(manager.contents) == 2

    manager.add_entry(parse_address("10.0.0.9"), Hostname.try_parse("z.example"))
    asyncio.run(manager.refresh())
    assert [str(e.hostname) for e in manager.contents] == ["a.example"]


def test_restore_adds_loopback_entries_when_required(tmp_path: Path) -> None:
    manager = _manager(tmp_path)
    manager.contents.append(_entry("10.0.0.1", "a.example"))

    manager.restore()

    assert [(str(e.address), str(e.hostname), e.comment) for e in manager.contents] == [
        ("127.0.0.1", "localhost", ""),
        ("::1", "localhost", ""),
    ]
    assert not (tmp_path / "hosts").exists()


def test_restore_is_empty_on_windows(tmp_path: Path) -> None:
    manager = _manager(tmp_path, WINDOWS)
    manager.contents.append(_entry("10.0.0.1", "a.example"))
    manager.restore()
    assert len(manager.contents) == 0


def test_header_written_to_canonical_file_only(tmp_path: Path) -> None:
    manager = _manager(tmp_path, WINDOWS)
    manager.contents.append(_entry("192.0.2.1", "example.com"))

    asyncio.run(manager.save())
    asyncio.run(manager.save(tmp_path / "export.txt"))

    canonical = (tmp_path / "hosts").read_bytes()
    exported = (tmp_path / "export.txt").read_bytes()

    assert canonical.startswith(b"# ")
    assert canonical.endswith(b"\r\n192.0.2.1 example.com\r\n")
    assert exported == b"192.0.2.1 example.com\r\n"

    asyncio.run(manager.refresh())
    assert len(manager.contents) == 1


def test_unicode_bom_follows_platform_flag(tmp_path: Path) -> None:
    windows = _manager(tmp_path, WINDOWS)
    windows.multibyte_encoding = True
    windows.contents.append(_entry("192.0.2.1", "example.com", "ümlaut"))
    asyncio.run(windows.save(tmp_path / "bom.txt"))

    linux = _manager(tmp_path, LINUX)
    linux.multibyte_encoding = True
    linux.contents.append(_entry("192.0.2.1", "example.com", "ümlaut"))
    asyncio.run(linux.save(tmp_path / "plain.txt"))

    assert (tmp_path / "bom.txt").read_bytes().startswith(b"\xef\xbb\xbf192.0.2.1")
    assert (tmp_path / "plain.txt").read_bytes().startswith(b"192.0.2.1")

    reader = _manager(tmp_path, LINUX)
    reader.multibyte_encoding = True
    asyncio.run(reader.load(tmp_path / "bom.txt"))
    assert [e.comment for e in reader.contents] == ["ümlaut"]


def test_encoding_toggle_keeps_entries(tmp_path: Path) -> None:
    manager = _manager(tmp_path, WINDOWS)
    entry = _entry("192.0.2.1", "example.com", "note")
    manager.contents.append(entry)

    assert manager.encoding == "cp1252"
    manager.multibyte_encoding = True
    assert manager.encoding == "utf-8-sig"
    assert manager.encoding_name.startswith("Unicode")
    manager.multibyte_encoding = False
    assert manager.encoding == "cp1252"

    assert list(manager.contents) == [entry]


def test_failed_save_keeps_previous_file(tmp_path: Path) -> None:
    hosts = tmp_path / "hosts"
    hosts.write_text("10.0.0.1 a.example\n", encoding="cp1252")
    manager = _manager(tmp_path, WINDOWS)
    manager.contents.append(_entry("192.0.2.1", "example.com", "漢字"))

    with pytest.raises(UnicodeEncodeError):
        asyncio.run(manager.save())

    assert hosts.read_text(encoding="cp1252") == "10.0.0.1 a.example\n"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["hosts"]


@pytest.mark.skipif(os.name == "nt", reason="POSIX file modes")
def test_save_preserves_file_mode(tmp_path: Path) -> None:
    hosts = tmp_path / "hosts"
    hosts.write_text("", encoding="utf-8")
    hosts.chmod(0o600)

    manager = _manager(tmp_path)
    manager.contents.append(_entry("192.0.2.1", "example.com"))
    asyncio.run(manager.save())

    assert stat.S_IMODE(hosts.stat().st_mode) == 0o600


def test_concurrent_operations_are_rejected(tmp_path: Path) -> None:
    (tmp_path / "hosts").write_text("10.0.0.1 a.example\n", encoding="utf-8")
    manager = _manager(tmp_path)

    async def run_both() -> list:
        return await asyncio.gather(manager.load(), manager.save(), return_exceptions=True)

    load_result, save_result = asyncio.run(run_both())

    assert load_result.loaded == 1
    assert isinstance(save_result, HostsFileBusyError)
    assert not manager.lock.locked()


def test_restore_rejected_while_locked(tmp_path: Path) -> None:
    manager = _manager(tmp_path)
    manager.lock.acquire()
    try:
        with pytest.raises(HostsFileBusyError):
            manager.restore()
    finally:
        manager.lock.release()


def test_comment_whitespace_survives_round_trip(tmp_path: Path) -> None:
    source = _manager(tmp_path)
    entry = _entry("192.0.2.1", "example.com", "a  b\tc")
    source.contents.append(entry)
    asyncio.run(source.save())

    assert (tmp_path / "hosts").read_text(encoding="utf-8") == "192.0.2.1 example.com #a  b\tc\n"

    target = _manager(tmp_path)
    asyncio.run(target.load())
    assert list(target.contents) == [entry]


@pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")
def test_save_through_symlink_updates_real_file(tmp_path: Path) -> None:
    real = tmp_path / "real_hosts"
    real.write_text("10.0.0.1 a.example\n", encoding="utf-8")
    (tmp_path / "hosts").symlink_to(real)

    manager = _manager(tmp_path)
    asyncio.run(manager.load())
    manager.contents.append(_entry("10.0.0.2", "b.example"))
    asyncio.run(manager.save())

    assert (tmp_path / "hosts").is_symlink()
    assert real.read_text(encoding="utf-8") == "10.0.0.1 a.example\n10.0.0.2 b.example\n"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["hosts", "real_hosts"]
