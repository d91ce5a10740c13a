"""Normalization of reader text selections before dictionary lookups."""


def normalize_text(text: str) -> str:
    """
    Turn a raw selection into a lookup token.

    Only leading and trailing whitespace is removed; the rest of the selection
    is matched exactly, so no case folding, no width or kana conversion and
    no collapsing of inner whitespace.

    Args:
        text: Text as selected in the reader; None is treated as empty.
    """
    return (text or "").strip()
