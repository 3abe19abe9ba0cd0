"""Digests, checksums and HMAC over text and files."""

import hmac
import zlib

from ..async_utils import run_blocking
from ..logging_config import DependencyError
from ..providers import ConverterContext
from ..units import ConverterUnit, FileConverter, FileInput, TextConverter, diagnostic
from .common import first_file

HASH_LENGTHS = {
    32: "MD5",
    40: "SHA-1",
    56: "SHA-224",
    64: "SHA-256",
    96: "SHA-384",
    128: "SHA-512",
}

KEY_SEPARATOR = "\n---\n"


def _preview(text: str, limit: int) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def split_key_message(text: str) -> tuple[str, str]:
    """Split "key\\n---\\nmessage", falling back to first line vs. the rest."""
    if KEY_SEPARATOR in text:
        key, _, message = text.partition(KEY_SEPARATOR)
        return key, message
    key, _, message = text.partition("\n")
    return key, message


def guess_algorithm(hex_digest: str) -> str:
    length = len(hex_digest)
    return HASH_LENGTHS.get(length, f"Unknown ({length} hex chars)")


def crc32_report(text: str) -> str:
    data = text.encode("utf-8")
    crc = zlib.crc32(data) & 0xFFFFFFFF
    signed = crc - 0x100000000 if crc > 0x7FFFFFFF else crc
    return "\n".join(
        [
            f"CRC-32: 0x{crc:08X}",
            f"Decimal: {crc}",
            f"Signed: {signed}",
            "",
            f"Input: {_preview(text, 50)}",
            f"Bytes: {len(data)}",
        ]
    )


def adler32_report(text: str) -> str:
    data = text.encode("utf-8")
    checksum = zlib.adler32(data) & 0xFFFFFFFF
    a, b = checksum & 0xFFFF, checksum >> 16
    return "\n".join(
        [
            f"Adler-32: 0x{checksum:08X}",
            f"Decimal: {checksum}",
            f"A: {a}  B: {b}",
            "",
            f"Input: {_preview(text, 50)}",
            f"Bytes: {len(data)}",
        ]
    )


def compare_hashes(text: str) -> str:
    lines = [line.strip().lower() for line in text.strip().split("\n") if line.strip()]
    if len(lines) < 2:
        return diagnostic("paste two hashes, one per line")
    a, b = lines[0], lines[1]
    same = a == b

    report = [
        f"Hash A: {a}",
        f"  Algorithm: {guess_algorithm(a)}",
        "",
        f"Hash B: {b}",
        f"  Algorithm: {guess_algorithm(b)}",
        "",
        "Result: MATCH, hashes are identical" if same else "Result: NO MATCH, hashes differ",
    ]
    if not same and len(a) == len(b):
        positions = [i for i, (x, y) in enumerate(zip(a, b)) if x != y]
        shown = ", ".join(str(p) for p in positions[:20])
        more = "..." if len(positions) > 20 else ""
        report.append(f"  Differences: {len(positions)} character(s) at position(s): {shown}{more}")
    if len(a) != len(b):
        report.append(f"  Length difference: {len(a)} vs {len(b)} characters")
    return "\n".join(report)


def xor_cipher(text: str) -> str:
    key, message = split_key_message(text)
    if not key:
        return diagnostic("first line: key, then --- separator, then message")
    if not message:
        return diagnostic("add message after the key")

    stripped = "".join(message.split())
    decrypting = bool(stripped) and all(c in "0123456789abcdefABCDEF" for c in stripped)
    if decrypting:
        if len(stripped) % 2:
            return diagnostic("invalid hex: odd length")
        data = bytes.fromhex(stripped)
    else:
        data = message.encode("utf-8")

    key_bytes = key.encode("utf-8")
    output = bytes(byte ^ key_bytes[i % len(key_bytes)] for i, byte in enumerate(data))
    try:
        text_output = output.decode("utf-8")
    except UnicodeDecodeError:
        text_output = diagnostic("binary, use hex output")

    return "\n".join(
        [
            f"Key: {key}",
            f"Mode: {'Decrypt (hex input)' if decrypting else 'Encrypt'}",
            "",
            "Hex output:",
            f"  {' '.join(f'{b:02x}' for b in output)}",
            "",
            "Text output:",
            f"  {text_output}",
        ]
    )


def build(ctx: ConverterContext) -> list[ConverterUnit]:
    digests = ctx.digests

    def text_digest(algorithm: str):
        def convert(text: str) -> str:
            try:
                return digests.hexdigest(algorithm, text.encode("utf-8"))
            except DependencyError as e:
                return e.diagnostic()

        return convert

    def all_hashes(text: str) -> str:
        data = text.encode("utf-8")
        lines = []
        for algorithm in ("SHA-1", "SHA-224", "SHA-256", "SHA-384", "SHA-512"):
            try:
                value = digests.hexdigest(algorithm, data)
            except DependencyError as e:
                value = e.diagnostic()
            lines.append(f"{algorithm + ':':<8} {value}")
        return "\n".join(lines)

    def hmac_report(text: str) -> str:
        key, message = split_key_message(text)
        if not key:
            return diagnostic("first line: secret key, then --- separator, then message")
        if not message:
            return diagnostic("add a message after the key")

        results = []
        for algorithm in ("SHA-256", "SHA-512"):
            name = digests.normalize(algorithm)
            try:
                signature = hmac.new(key.encode("utf-8"), message.encode("utf-8"), name).hexdigest()
            except ValueError as e:
                return diagnostic(f"failed to generate HMAC: {e}")
            results.append(f"HMAC-{algorithm}: {signature}")

        return "\n".join(
            [f"Key:     {_preview(key, 50)}", f"Message: {_preview(message, 80)}", "", *results]
        )

    def file_digest(algorithm: str):
        async def file_convert(files, _aux=None) -> dict:
            file: FileInput = first_file(files)
            try:
                value = await run_blocking(digests.hexdigest, algorithm, file.data)
            except DependencyError as e:
                return {"text": diagnostic(f"failed to calculate {algorithm}: {e.message}")}
            return {"text": f"{file.name}\n{algorithm}: {value}"}

        return file_convert

    async def file_all_hashes(files, _aux=None) -> dict:
        file: FileInput = first_file(files)
        lines = [f"File: {file.name}", f"Size: {file.size} bytes", ""]
        for algorithm in ("MD5", "SHA-1", "SHA-256", "SHA-512"):
            try:
                value = await run_blocking(digests.hexdigest, algorithm, file.data)
            except DependencyError as e:
                value = e.diagnostic()
            lines.append(f"{algorithm + ':':<8} {value}")
        return {"text": "\n".join(lines)}

    units: list[ConverterUnit] = [
        TextConverter(
            id=algorithm.lower().replace("-", ""),
            name=algorithm,
            category="hash",
            description=f"Generate {algorithm} hash",
            convert=text_digest(algorithm),
        )
        for algorithm in ("SHA-1", "SHA-256", "SHA-384", "SHA-512", "SHA-224", "MD5")
    ]
    units += [
        TextConverter(
            id="all-hashes", name="All Hashes", category="hash",
            description="Generate SHA-1, SHA-224, SHA-256, SHA-384, and SHA-512 hashes all at once",
            convert=all_hashes,
        ),
        FileConverter(
            id="file-sha256", name="File SHA-256", category="hash",
            description="Calculate SHA-256 hash of any file",
            is_media_converter=True, file_convert=file_digest("SHA-256"),
        ),
        FileConverter(
            id="file-sha512", name="File SHA-512", category="hash",
            description="Calculate SHA-512 hash of any file",
            is_media_converter=True, file_convert=file_digest("SHA-512"),
        ),
        FileConverter(
            id="checksum-all", name="File → All Hashes", category="hash",
            description="Calculate MD5, SHA-1, SHA-256 and SHA-512 of a file at once",
            is_media_converter=True, file_convert=file_all_hashes,
        ),
        TextConverter(
            id="hash-compare", name="Hash Compare", category="hash",
            description="Compare two hash values. Paste them on separate lines",
            placeholder="a94a8fe5ccb19ba61c4c0873d391e987982fbbd3\na94a8fe5ccb19ba61c4c0873d391e987982fbbd3",
            convert=compare_hashes,
        ),
        TextConverter(
            id="hmac-gen", name="HMAC Generator", category="hash",
            description="Generate HMAC-SHA256 and HMAC-SHA512. First line: secret key, rest: message",
            placeholder="my-secret-key\n---\nHello World",
            convert=hmac_report,
        ),
        TextConverter(
            id="xor-cipher", name="XOR Cipher", category="encode",
            description="Encrypt/decrypt with XOR. First line: key, rest: message (or hex to decrypt)",
            placeholder="mysecret\n---\nHello World",
            convert=xor_cipher,
        ),
        TextConverter(
            id="crc32-calc", name="CRC-32 Calculator", category="hash",
            description="Calculate CRC-32 checksum (used in ZIP, PNG, Ethernet)",
            convert=crc32_report,
        ),
        TextConverter(
            id="adler32-calc", name="Adler-32 Calculator", category="hash",
            description="Calculate Adler-32 checksum (used in zlib/Deflate format)",
            convert=adler32_report,
        ),
    ]
    return units
