""" Code point decomposition and recomposition for UTF-8

Only what the transcoder needs: bytes to code points (replacing ill-formed
sequences the way the WHATWG Encoding Standard does) and a single code
point back to bytes.

See https://encoding.spec.whatwg.org/#utf-8-decoder
"""

REPLACEMENT_CHARACTER = 0xFFFD
MAX_CODE_POINT = 0x10FFFF

def decompose(data) -> list[int]:
    """Decode UTF-8 bytes into a list of code points.

    Never fails: every maximal ill-formed subsequence becomes one U+FFFD,
    and input that ends in the middle of a sequence gets one trailing
    U+FFFD.
    """
    data = bytes(data)
    code_points = []
    code_point = 0
    bytes_needed = 0
    bytes_seen = 0
    lower = 0x80
    upper = 0xBF

    length = len(data)
    pos = 0
    while pos < length:
        byte = data[pos]
        pos += 1

        if bytes_needed == 0:
            if byte <= 0x7F:
                code_points.append(byte)
            elif 0xC2 <= byte <= 0xDF:
                bytes_needed = 1
                code_point = byte & 0x1F
            elif 0xE0 <= byte <= 0xEF:
                # no overlong forms, no surrogates
                if byte == 0xE0:
                    lower = 0xA0
                elif byte == 0xED:
                    upper = 0x9F
                bytes_needed = 2
                code_point = byte & 0xF
            elif 0xF0 <= byte <= 0xF4:
                # no overlong forms, nothing above U+10FFFF
                if byte == 0xF0:
                    lower = 0x90
                elif byte == 0xF4:
                    upper = 0x8F
                bytes_needed = 3
                code_point = byte & 0x7
            else:
                code_points.append(REPLACEMENT_CHARACTER)
            continue

        if not lower <= byte <= upper:
            code_point = bytes_needed = bytes_seen = 0
            lower, upper = 0x80, 0xBF
            code_points.append(REPLACEMENT_CHARACTER)
            # the offending byte may start a new sequence
            pos -= 1
            continue

        lower, upper = 0x80, 0xBF
        code_point = (code_point << 6) | (byte & 0x3F)
        bytes_seen += 1
        if bytes_seen == bytes_needed:
            code_points.append(code_point)
            code_point = bytes_needed = bytes_seen = 0

    if bytes_needed:
        code_points.append(REPLACEMENT_CHARACTER)

    return code_points

def encode_codepoint(code_point: int) -> bytes:
    """Encode a single code point (0..0x10FFFF) as UTF-8."""
    if 0 <= code_point <= 0x7F:
        return bytes((code_point,))

    if 0x80 <= code_point <= 0x7FF:
        count, offset = 1, 0xC0
    elif 0x800 <= code_point <= 0xFFFF:
        count, offset = 2, 0xE0
    elif 0x10000 <= code_point <= MAX_CODE_POINT:
        count, offset = 3, 0xF0
    else:
        raise ValueError("code point out of range: %r" % code_point)

    result = bytearray()
    result.append((code_point >> (6 * count)) + offset)
    while count > 0:
        result.append(0x80 | ((code_point >> (6 * (count - 1))) & 0x3F))
        count -= 1
    return bytes(result)
