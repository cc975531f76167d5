# utils/text.py
# HTML -> display text, entity decoding and small string helpers shared by every connector.
import re

_NAMED_ENTITIES = {
    "nbsp": " ",
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
    "rsquo": "'",
    "lsquo": "'",
    "rdquo": '"',
    "ldquo": '"',
    "ndash": "-",
    "mdash": "-",
    "hellip": "...",
}

_NAMED_RE = re.compile(r"&([a-zA-Z][a-zA-Z0-9]+);")
_DECIMAL_RE = re.compile(r"&#(\d+);")
_HEX_RE = re.compile(r"&#x([0-9a-fA-F]+);")

_SCRIPT_RE = re.compile(r"<script[\s\S]*?</script>", re.I)
_STYLE_RE = re.compile(r"<style[\s\S]*?</style>", re.I)
_META_RE = re.compile(r"<meta[^>]*>", re.I)
_BR_RE = re.compile(r"<\s*br\s*/?\s*>", re.I)
_BLOCK_CLOSE_RE = re.compile(
    r"<\s*/\s*(p|div|section|article|header|footer|aside|main|h1|h2|h3|h4|h5|h6"
    r"|ul|ol|li|blockquote|pre|table|tr)\s*>",
    re.I,
)
_LI_OPEN_RE = re.compile(r"<\s*li[^>]*>", re.I)
_TAG_RE = re.compile(r"<[^>]+>")

_SHORTCODE_RES = (
    re.compile(r"\[/?vc_\w+[^\]]*\]"),
    re.compile(r"\[/?et_pb_\w+[^\]]*\]"),
    re.compile(r"\[/?\w+_\w+[^\]]*\]"),
)


REPLACEMENT_CHAR = "\ufffd"
_SURROGATE_RE = re.compile("[\ud800-\udfff]")

# entity layers peeled per html_to_text pass
MAX_DECODE_ROUNDS = 8


def _code_point(match, base):
    try:
        cp = int(match.group(1), base)
    except ValueError:
        return match.group(0)
    # NUL, UTF-16 surrogates and out-of-range values cannot be stored as UTF-8 text
    if cp == 0 or 0xD800 <= cp <= 0xDFFF or cp > 0x10FFFF:
        return REPLACEMENT_CHAR
    return chr(cp)


def decode_entities(text: str) -> str:
    """Decode the named entities job boards actually emit plus any numeric entity.

    Unknown named entities are left as they are.
    """
    text = _NAMED_RE.sub(lambda m: _NAMED_ENTITIES.get(m.group(1).lower(), m.group(0)), text)
    text = _DECIMAL_RE.sub(lambda m: _code_point(m, 10), text)
    return _HEX_RE.sub(lambda m: _code_point(m, 16), text)


def decode_entities_fully(text: str, max_rounds: int = MAX_DECODE_ROUNDS) -> str:
    """Decode repeatedly until nothing changes (``&amp;amp;lt;`` -> ``<``)."""
    for _ in range(max_rounds):
        decoded = decode_entities(text)
        if decoded == text:
            break
        text = decoded
    return text


def scrub_surrogates(text: str) -> str:
    """Replace lone UTF-16 surrogates (e.g. from ``"\\ud800"`` JSON escapes) with U+FFFD."""
    return _SURROGATE_RE.sub(REPLACEMENT_CHAR, text)


def normalize_text_for_display(text: str) -> str:
    """Canonicalize whitespace and typography while keeping paragraph breaks."""
    text = re.sub(r"\r\n?", "\n", text)
    text = text.replace("\u00a0", " ")
    text = re.sub("[\u2018\u2019\u2032]", "'", text)
    text = re.sub("[\u201c\u201d\u2033]", '"', text)
    text = re.sub("[\u2013\u2014]", "-", text)
    text = text.replace("\u2026", "...")
    text = re.sub(r"[ \t]+\n", "\n", text)
    text = re.sub(r"\n[ \t]+", "\n", text)
    text = re.sub(r"[ \t]{2,}", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def html_to_text(html: str | None) -> str:
    """
    Convert an HTML fragment to plain text, keeping block-level line breaks.

    Entities are decoded (every layer) before tag handling so boards that ship escaped
    markup (``&lt;p&gt;...``) still get their tags removed, and once more afterwards for
    entities split by tags. Plain text output is a fixed point.
    """
    if not html:
        return ""
    text = decode_entities_fully(html)
    text = _SCRIPT_RE.sub("", text)
    text = _STYLE_RE.sub("", text)
    text = _META_RE.sub("", text)
    text = _BR_RE.sub("\n", text)
    text = _BLOCK_CLOSE_RE.sub("\n", text)
    text = _LI_OPEN_RE.sub("- ", text)
    text = _TAG_RE.sub("", text)
    text = decode_entities_fully(text)
    return normalize_text_for_display(scrub_surrogates(text))


def collapse_whitespace(s: str | None) -> str:
    return re.sub(r"\s+", " ", (s or "").replace("\u00a0", " ")).strip()


def slugify(text: str | None) -> str:
    """Lowercase, non-alphanumerics to '-', no leading/trailing dashes."""
    return re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")


def strip_shortcodes(html: str | None) -> str:
    """Remove WPBakery / Divi style ``[vc_row ...]`` shortcodes left in WordPress content."""
    out = html or ""
    for pat in _SHORTCODE_RES:
        out = pat.sub("", out)
    return out.strip()


__all__ = [
    "decode_entities",
    "decode_entities_fully",
    "scrub_surrogates",
    "normalize_text_for_display",
    "html_to_text",
    "collapse_whitespace",
    "slugify",
    "strip_shortcodes",
]
