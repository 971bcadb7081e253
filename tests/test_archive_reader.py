"""
Unit tests for opening presentation packages.
"""

import io
import struct
import zipfile
from pathlib import Path

import pytest

from pptx_factory import build_package, slide_xml
from slidereader.archive.paths import SLIDE_ENTRY_PATTERN
from slidereader.archive.reader import Archive, ArchiveReader
from slidereader.core.errors import CorruptArchiveError, EntryNotFoundError


class TestArchiveReader:
    """Test suite for ArchiveReader and Archive."""

    def test_open_indexes_every_file_entry(self):
        """All non-directory entries are available by name."""
        data = build_package(
            slides={1: slide_xml(), 2: slide_xml()},
            media={"ppt/media/image1.png": b"png"},
        )

        archive = ArchiveReader().open(data)

        assert "ppt/slides/slide1.xml" in archive
        assert "ppt/media/image1.png" in archive
        assert archive.read_bytes("ppt/media/image1.png") == b"png"
        assert len(archive) == 4

    def test_list_entries_requires_full_match_and_sorts(self):
        """Pattern filtering matches whole names only, in name order."""
        data = build_package(
            slides={2: slide_xml(), 1: slide_xml(), 10: slide_xml()},
            rels={1: "<Relationships/>"},
            extra={"ppt/slides/slide3.xml.bak": b""},
        )

        archive = ArchiveReader().open(data)

        assert archive.list_entries(SLIDE_ENTRY_PATTERN) == [
            "ppt/slides/slide1.xml",
            "ppt/slides/slide10.xml",
            "ppt/slides/slide2.xml",
        ]
        assert archive.list_entries(r"ppt/slides/_rels/.*") == [
            "ppt/slides/_rels/slide1.xml.rels"
        ]

    def test_read_text_decodes_utf8(self):
        """read_text returns decoded entry content."""
        data = build_package(extra={"docProps/title.txt": "Präsentation"})

        archive = ArchiveReader().open(data)

        assert archive.read_text("docProps/title.txt") == "Präsentation"

    def test_missing_entry_raises_entry_not_found(self):
        """Absent names raise EntryNotFoundError, which is also a LookupError."""
        archive = ArchiveReader().open(build_package())

        with pytest.raises(EntryNotFoundError) as exc_info:
            archive.read_bytes("ppt/media/nope.png")

        assert exc_info.value.path == "ppt/media/nope.png"
        assert isinstance(exc_info.value, LookupError)

    def test_directory_entries_are_skipped(self):
        """Directory records in the ZIP are not exposed as entries."""
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as zf:
            zf.writestr("[Content_Types].xml", "<Types/>")
            zf.writestr("ppt/media/", b"")
            zf.writestr("ppt/media/image1.png", b"x")

        archive = ArchiveReader().open(buffer.getvalue())

        assert sorted(archive) == ["[Content_Types].xml", "ppt/media/image1.png"]

    def test_non_zip_bytes_raise_corrupt_archive(self):
        """Bytes that are not a ZIP container are rejected."""
        with pytest.raises(CorruptArchiveError):
            ArchiveReader().open(b"this is not a presentation")

    def test_truncated_zip_raises_corrupt_archive(self):
        """A truncated container is rejected rather than partially read."""
        data = build_package(slides={1: slide_xml()})

        with pytest.raises(CorruptArchiveError):
            ArchiveReader().open(data[: len(data) // 2])

    @pytest.mark.parametrize(
        "field_offset", [12, 16], ids=["directory-size", "directory-offset"]
    )
    def test_damaged_end_of_central_directory_raises_corrupt_archive(
        self, field_offset: int
    ):
        """Out-of-range central directory fields surface as CorruptArchiveError."""
        data = bytearray(build_package(slides={1: slide_xml()}))
        end_record = data.rfind(b"PK\x05\x06")
        data[end_record + field_offset : end_record + field_offset + 4] = struct.pack(
            "<I", len(data) * 4
        )

        with pytest.raises(CorruptArchiveError, match="Unreadable"):
            ArchiveReader().open(bytes(data))

    def test_zip_without_content_types_is_not_a_package(self):
        """A plain ZIP lacking [Content_Types].xml is rejected."""
        data = build_package(slides={1: slide_xml()}, content_types=False)

        with pytest.raises(CorruptArchiveError, match="Content_Types"):
            ArchiveReader().open(data)

    def test_open_path_reads_file(self, tmp_path: Path):
        """open_path loads a package from disk."""
        deck = tmp_path / "deck.pptx"
        deck.write_bytes(build_package(slides={1: slide_xml()}))

        archive = ArchiveReader().open_path(deck)

        assert "ppt/slides/slide1.xml" in archive

    def test_archive_is_read_only(self):
        """The entry index cannot be mutated through the archive."""
        source = {"a.xml": b"1"}
        archive = Archive(source)
        source["b.xml"] = b"2"

        assert "b.xml" not in archive
        with pytest.raises(TypeError):
            archive._entries["c.xml"] = b"3"
