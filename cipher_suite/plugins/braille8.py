"""
Byte Braille plugin - one 8-dot Braille cell per UTF-8 byte.

The Unicode Braille block (U+2800 - U+28FF) holds all 256 dot patterns,
so byte N maps straight to chr(0x2800 + N). Visual example: "Hi" -> "⡈⡩".
"""


@register_encoder
class ByteBrailleEncoder(EncoderStrategy):
    id = "braille8"
    name = "Byte Braille"
    description = "UTF-8 bytes as 8-dot Braille patterns (plugin)"
    emoji = "⣿"
    category = "visual"
    tags = ("braille", "binary", "plugin")

    BRAILLE_BASE = 0x2800

    def _encode(self, text, _param):
        return "".join(chr(self.BRAILLE_BASE + b) for b in text.encode('utf-8'))

    def _decode(self, text, _param):
        decoded = bytearray()
        for char in text:
            code_point = ord(char)
            if self.BRAILLE_BASE <= code_point <= self.BRAILLE_BASE + 255:
                decoded.append(code_point - self.BRAILLE_BASE)
            else:
                # Mixed content (whitespace etc.) passes through
                decoded.extend(char.encode('utf-8'))
        return bytes(decoded).decode('utf-8')
