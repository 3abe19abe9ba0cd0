"""
Converter groups for Convert Everything.

Each module exposes ``build(ctx)`` returning its converter units:
- text: Encodings, ciphers and text manipulation
- qr: QR code generation and reading
- hashes: Digests, checksums and HMAC
- data: JSON, CSV/TSV and config formats
- web: YAML, TOML, XML, Markdown, HTML and URLs
- number: Number bases, numerals and number theory
- color: Color notations, palettes and contrast
- utility: Dates, identifiers, random values and text extraction
- image: Pillow format conversions and transforms
- media: FFmpeg audio and video conversions
- document: PDF tools
"""
