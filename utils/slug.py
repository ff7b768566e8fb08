import re
import unicodedata

_WHITESPACE_RUN = re.compile(r"\s+")
_NON_SLUG_CHARS = re.compile(r"[^a-z0-9_]")

# NFKD leaves these letters intact, so they are folded by hand.
_EXTRA_ASCII_FOLDS = str.maketrans({"đ": "d", "Đ": "D", "ø": "o", "Ø": "O", "ł": "l", "Ł": "L"})


def fold_to_ascii(value: str) -> str:
    value = value.translate(_EXTRA_ASCII_FOLDS)
    value = unicodedata.normalize("NFKD", value)
    return value.encode("ascii", "ignore").decode("ascii")


def normalize_slug_input(value: str) -> str:
    """Rule applied while an admin types into the slug field."""
    if not value:
        return ""
    return _WHITESPACE_RUN.sub("_", value.lower())


def generate_slug(value: str, *, transliterate: bool = False) -> str:
    """Derive a theme slug from a free-text name.

    The name is trimmed and lower-cased, whitespace runs become ``_`` and
    anything outside ``[a-z0-9_]`` is dropped. Accented letters are dropped
    too unless ``transliterate`` is set, in which case they are folded to
    their ASCII base letter first ("Mùa Xuân" -> "mua_xuan").
    """
    if not value:
        return ""

    value = value.strip()
    if transliterate:
        value = fold_to_ascii(value)
    value = normalize_slug_input(value)
    return _NON_SLUG_CHARS.sub("", value)
