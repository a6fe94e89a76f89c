"""
    sets of extra ascii characters for the serializer to escape

    A set is a tuple of 128 booleans, indexed by code point. Handy for json
    that ends up inside html, where `<` and friends need to go.
"""

EMPTY_BITMAP = (False,) * 128


def build_extra_escape_bitmap(chars):
    """`build_extra_escape_bitmap("<%@")` marks `<`, `%` and `@`.

    Takes a str or bytes. Anything outside of ascii is ignored.
    """
    if isinstance(chars, str):
        codes = [ord(c) for c in chars]
    else:
        codes = bytes(chars)

    bitmap = [False] * 128
    for c in codes:
        if c < 128:
            bitmap[c] = True
    return tuple(bitmap)


def bitmap_chars(bitmap):
    """The characters a bitmap marks, as bytes."""
    if len(bitmap) != 128:
        raise ValueError("Escape bitmap must have 128 entries, not {}".format(len(bitmap)))
    return bytes(c for c, flag in enumerate(bitmap) if flag)
