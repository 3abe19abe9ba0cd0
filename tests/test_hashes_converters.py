"""Tests for digests, checksums and HMAC."""

import pytest

from convert_everything.converters import hashes
from convert_everything.units import FileInput

ABC_SHA256 = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


@pytest.fixture
def units(build_units):
    return build_units(hashes)


class TestTextDigests:
    @pytest.mark.parametrize(
        "unit_id, expected",
        [
            ("md5", "900150983cd24fb0d6963f7d28e17f72"),
            ("sha1", "a9993e364706816aba3e25717850c26c9cd0d89d"),
            ("sha256", ABC_SHA256),
        ],
    )
    def test_known_digests(self, units, unit_id, expected):
        assert units[unit_id].convert("abc") == expected

    def test_all_hashes_lists_every_family(self, units):
        lines = units["all-hashes"].convert("abc").split("\n")
        assert [line.split(":")[0] for line in lines] == ["SHA-1", "SHA-224", "SHA-256", "SHA-384", "SHA-512"]
        assert lines[2].endswith(ABC_SHA256)


class TestFileDigests:
    @pytest.mark.asyncio
    async def test_file_sha256(self, units):
        file = FileInput(name="abc.txt", data=b"abc")
        result = await units["file-sha256"].file_convert(file)
        assert result == {"text": f"abc.txt\nSHA-256: {ABC_SHA256}"}

    @pytest.mark.asyncio
    async def test_checksum_all(self, units):
        file = FileInput(name="abc.txt", data=b"abc")
        result = await units["checksum-all"].file_convert([file])
        report = result["text"]
        assert report.startswith("File: abc.txt\nSize: 3 bytes")
        assert "MD5:     900150983cd24fb0d6963f7d28e17f72" in report


class TestChecksums:
    def test_crc32(self):
        report = hashes.crc32_report("hello")
        assert report.startswith("CRC-32: 0x3610A686")
        assert "Bytes: 5" in report

    def test_adler32(self):
        assert hashes.adler32_report("hello").startswith("Adler-32: 0x062C0215")


class TestHashCompare:
    def test_match(self):
        report = hashes.compare_hashes(f"{ABC_SHA256}\n{ABC_SHA256.upper()}")
        assert "Result: MATCH" in report
        assert "Algorithm: SHA-256" in report

    def test_differences_reported(self):
        report = hashes.compare_hashes("abcd\nabce")
        assert "NO MATCH" in report
        assert "1 character(s) at position(s): 3" in report

    def test_needs_two_lines(self):
        assert hashes.compare_hashes("abc") == "(paste two hashes, one per line)"


class TestHmacAndXor:
    def test_hmac_sha256(self, units):
        report = units["hmac-gen"].convert("key\n---\nThe quick brown fox jumps over the lazy dog")
        assert "HMAC-SHA-256: f7bc83f430538424b13298e6aa6fb143ef4d59a14946175997479dbc2d1a3cd8" in report

    def test_hmac_needs_message(self, units):
        assert units["hmac-gen"].convert("key\n---\n") == "(add a message after the key)"

    def test_xor_encrypt_then_decrypt(self):
        encrypted = hashes.xor_cipher("k\n---\nHi")
        assert "Mode: Encrypt" in encrypted
        assert "  23 02" in encrypted
        decrypted = hashes.xor_cipher("k\n---\n23 02")
        assert "Mode: Decrypt (hex input)" in decrypted
        assert decrypted.endswith("  Hi")

    def test_xor_category(self, units):
        assert units["xor-cipher"].category == "encode"
