from typing import Optional, Tuple

# ==========================================
#  STEGANOGRAPHY: Watermark Engine
# ==========================================


class WatermarkEngine:
    """
    Injects and retrieves invisible metadata using zero-width characters.

    Protocol:
    - S (Start/Stop Sentinel): \u2060 (Word Joiner)
    - 0 (Bit Zero): \u200B (Zero Width Space)
    - 1 (Bit One):  \u200C (Zero Width Non-Joiner)

    Format: [S] [Binary String of Label] [S] [Payload]

    The same header is used by the CLI to tag encoded output with the
    encoder id and by the shuffle encoder to frame each unit.
    """

    SENTINEL = '\u2060'
    ZERO = '\u200B'
    ONE = '\u200C'

    @staticmethod
    def _str_to_bits(s: str) -> str:
        return "".join(f"{b:08b}" for b in s.encode('utf-8'))

    @staticmethod
    def _bits_to_str(bits: str) -> str:
        if len(bits) % 8:
            raise ValueError("watermark bit count is not a multiple of 8")
        data = bytes(int(bits[i:i + 8], 2) for i in range(0, len(bits), 8))
        return data.decode('utf-8')

    @classmethod
    def header(cls, label: str) -> str:
        """The invisible header for ``label`` on its own."""
        bits = cls._str_to_bits(label)
        invisible_payload = bits.replace('0', cls.ZERO).replace('1', cls.ONE)
        return f"{cls.SENTINEL}{invisible_payload}{cls.SENTINEL}"

    @classmethod
    def inject(cls, text: str, label: str) -> str:
        """Prefixes text with an invisible watermark of the label."""
        return cls.header(label) + text

    @classmethod
    def read_header(cls, text: str, start: int = 0) -> Tuple[Optional[str], int]:
        """
        Parse a header beginning at ``start``.

        Returns (label, index just past the header), or (None, start) when
        there is no well-formed header at that position.
        """
        if not text.startswith(cls.SENTINEL, start):
            return None, start

        end_index = text.find(cls.SENTINEL, start + 1)
        if end_index == -1:
            return None, start

        raw_payload = text[start + 1:end_index]
        if any(c not in (cls.ZERO, cls.ONE) for c in raw_payload):
            return None, start

        bits = raw_payload.replace(cls.ZERO, '0').replace(cls.ONE, '1')
        try:
            return cls._bits_to_str(bits), end_index + 1
        except ValueError:
            return None, start

    @classmethod
    def detect(cls, text: str) -> Tuple[Optional[str], str]:
        """
        Scans for invisible watermark.
        Returns: (detected_label, clean_text_without_watermark)
        """
        label, end = cls.read_header(text)
        if label is None:
            return None, text
        return label, text[end:]
