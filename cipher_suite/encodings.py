"""
Computer encodings and symbol alphabets.

The byte-oriented encoders (Base64, Base32, Hex, Binary, DNA, Emoji) work
on the UTF-8 bytes of the text, so any Unicode input survives the round
trip. The symbol alphabets (Morse, Bacon) only carry what is in their
tables. The rest are one-way.
"""

import base64
import binascii
import random
import re
from abc import abstractmethod
from typing import Any, Dict, List, Optional
from urllib.parse import quote, unquote

from .alphabet import letter_of
from .base import UNRESOLVED, EncoderStrategy, register_encoder

# ==========================================
#  Byte encodings
# ==========================================


@register_encoder
class Base64Encoder(EncoderStrategy):
    id = "base64"
    name = "Base64"
    description = "Standard Base64 of the UTF-8 bytes"
    emoji = "💾"
    category = "computer"
    tags = ("computer", "encoding", "web")

    def _encode(self, text: str, _param) -> str:
        return base64.b64encode(text.encode('utf-8')).decode('ascii')

    def _decode(self, text: str, _param) -> str:
        return base64.b64decode("".join(text.split()), validate=True).decode('utf-8')


@register_encoder
class Base32Encoder(EncoderStrategy):
    id = "base32"
    name = "Base32"
    description = "RFC 4648 Base32 of the UTF-8 bytes"
    emoji = "🧮"
    category = "computer"
    tags = ("computer", "encoding")

    def _encode(self, text: str, _param) -> str:
        return base64.b32encode(text.encode('utf-8')).decode('ascii')

    def _decode(self, text: str, _param) -> str:
        return base64.b32decode("".join(text.split()).upper()).decode('utf-8')


@register_encoder
class HexEncoder(EncoderStrategy):
    id = "hex"
    name = "Hexadecimal"
    description = "Two hex digits per byte"
    emoji = "🔣"
    category = "computer"
    tags = ("computer", "encoding", "numeric")

    def _encode(self, text: str, _param) -> str:
        return " ".join(f"{b:02x}" for b in text.encode('utf-8'))

    def _decode(self, text: str, _param) -> str:
        return binascii.unhexlify("".join(text.split())).decode('utf-8')


@register_encoder
class BinaryEncoder(EncoderStrategy):
    id = "binary"
    name = "Binary"
    description = "Eight bits per byte"
    emoji = "💻"
    category = "computer"
    tags = ("computer", "encoding", "bits")

    def _encode(self, text: str, _param) -> str:
        return " ".join(f"{b:08b}" for b in text.encode('utf-8'))

    def _decode(self, text: str, _param) -> str:
        bits = "".join(text.split())
        if len(bits) % 8 or any(c not in "01" for c in bits):
            raise ValueError("binary input must be whole bytes of 0/1")
        return bytes(int(bits[i:i + 8], 2) for i in range(0, len(bits), 8)).decode('utf-8')


@register_encoder
class UrlEncoder(EncoderStrategy):
    id = "url-encode"
    name = "URL Encoding"
    description = "Percent-encode everything outside the unreserved set"
    emoji = "🔗"
    category = "computer"
    tags = ("computer", "web", "encoding")

    def _encode(self, text: str, _param) -> str:
        return quote(text, safe="")

    def _decode(self, text: str, _param) -> str:
        return unquote(text, errors="strict")


@register_encoder
class HtmlEntityEncoder(EncoderStrategy):
    """Numeric character references for markup-significant and non-ASCII characters."""

    id = "html-entities"
    name = "HTML Entities"
    description = "Numeric character references (&#NN;)"
    emoji = "🌐"
    category = "computer"
    tags = ("computer", "web", "html")

    ESCAPED = "<>&\"'"
    ENTITY = re.compile(r"&#(\d+);")

    def _encode(self, text: str, _param) -> str:
        return "".join(
            f"&#{ord(c)};" if ord(c) > 127 or c in self.ESCAPED else c for c in text
        )

    def _decode(self, text: str, _param) -> str:
        return self.ENTITY.sub(lambda m: chr(int(m.group(1))), text)


DNA_BASES = "ATGC"


@register_encoder
class DnaEncoder(EncoderStrategy):
    """Each byte as four bases, two bits per base (A=00, T=01, G=10, C=11)."""

    id = "dna"
    name = "DNA Sequence"
    description = "Bytes spelled in nucleotide bases"
    emoji = "🧬"
    category = "science"
    tags = ("science", "biology", "bits")

    def _encode(self, text: str, _param) -> str:
        out: List[str] = []
        for byte in text.encode('utf-8'):
            for shift in (6, 4, 2, 0):
                out.append(DNA_BASES[(byte >> shift) & 0b11])
        return "".join(out)

    def _decode(self, text: str, _param) -> str:
        bases = [c for c in text.upper() if c in DNA_BASES]
        if len(bases) % 4:
            raise ValueError("DNA length is not a whole number of bytes")
        data = bytearray()
        for i in range(0, len(bases), 4):
            byte = 0
            for base in bases[i:i + 4]:
                byte = (byte << 2) | DNA_BASES.index(base)
            data.append(byte)
        return bytes(data).decode('utf-8')


EMOJI_PALETTE = [
    '😀', '😃', '😄', '😁', '😆', '😅', '🤣', '😂', '🙂', '🙃',
    '😉', '😊', '😇', '🥰', '😍', '🤩', '😘', '😗', '😚', '😙',
    '🥲', '😋', '😛', '😜', '🤪', '😝', '🤑', '🤗', '🤭', '🤫'
]


@register_encoder
class EmojiEncoder(EncoderStrategy):
    """Each byte as a pair of faces: (byte // 30, byte % 30) in a 30-emoji palette."""

    id = "emoji"
    name = "Emoji Code"
    description = "Bytes as pairs of emoji faces"
    emoji = "😀"
    category = "fun"
    tags = ("fun", "emoji", "visual")

    def _encode(self, text: str, _param) -> str:
        size = len(EMOJI_PALETTE)
        return "".join(
            EMOJI_PALETTE[b // size] + EMOJI_PALETTE[b % size] for b in text.encode('utf-8')
        )

    def _decode(self, text: str, _param) -> str:
        index = {e: i for i, e in enumerate(EMOJI_PALETTE)}
        digits = [index[c] for c in text if c in index]
        if len(digits) % 2:
            raise ValueError("dangling emoji")
        data = bytes(
            digits[i] * len(EMOJI_PALETTE) + digits[i + 1] for i in range(0, len(digits), 2)
        )
        return data.decode('utf-8')


# ==========================================
#  Symbol alphabets
# ==========================================

MORSE_CODE = {
    'a': '•−', 'b': '−•••', 'c': '−•−•', 'd': '−••', 'e': '•', 'f': '••−•',
    'g': '−−•', 'h': '••••', 'i': '••', 'j': '•−−−', 'k': '−•−', 'l': '•−••',
    'm': '−−', 'n': '−•', 'o': '−−−', 'p': '•−−•', 'q': '−−•−', 'r': '•−•',
    's': '•••', 't': '−', 'u': '••−', 'v': '•••−', 'w': '•−−', 'x': '−••−',
    'y': '−•−−', 'z': '−−••', '0': '−−−−−', '1': '•−−−−', '2': '••−−−',
    '3': '•••−−', '4': '••••−', '5': '•••••', '6': '−••••', '7': '−−•••',
    '8': '−−−••', '9': '−−−−•', '.': '•−•−•−', ',': '−−••−−', '?': '••−−••',
    '!': '−•−•−−', '/': '−••−•', ':': '−−−•••', ' ': '/'
}


class TokenAlphabet(EncoderStrategy):
    """
    Base for encoders that turn each character into one token.

    Tokens are joined with ``separator``; characters without a token are
    emitted as themselves. Decode maps known tokens back and passes the
    rest through, so ``normalize`` is just a per-character round trip.
    """

    separator = " "
    lossy = True

    @abstractmethod
    def token(self, char: str) -> Optional[str]:
        """Token for one character, or None to emit the character itself."""
        pass

    @abstractmethod
    def untoken(self, token: str) -> str:
        pass

    def _encode(self, text: str, _param) -> str:
        tokens: List[str] = []
        for char in text:
            token = self.token(char)
            tokens.append(char if token is None else token)
        return self.separator.join(tokens)

    def _decode(self, text: str, _param) -> str:
        return "".join(self.untoken(t) for t in text.split(self.separator) if t)

    def normalize(self, text: str, param: Any = None) -> str:
        out: List[str] = []
        for char in text:
            token = self.token(char)
            out.append(self.untoken(char if token is None else token))
        return "".join(out)


@register_encoder
class MorseEncoder(TokenAlphabet):
    id = "morse"
    name = "Morse Code"
    description = "Dots and dashes, / between words"
    emoji = "📡"
    category = "classic"
    tags = ("classic", "telegraph", "audio")

    REVERSE = {code: char.upper() for char, code in MORSE_CODE.items()}

    def token(self, char: str) -> Optional[str]:
        return MORSE_CODE.get(char.lower())

    def untoken(self, token: str) -> str:
        return self.REVERSE.get(token, token)


def _bacon_table() -> Dict[str, str]:
    table: Dict[str, str] = {}
    for idx in range(26):
        bits = f"{idx:05b}"
        table[chr(ord('A') + idx)] = bits.replace('0', 'A').replace('1', 'B')
    return table


BACON_CODE = _bacon_table()


@register_encoder
class BaconEncoder(EncoderStrategy):
    """Francis Bacon's biliteral cipher, 26-letter variant (I/J and U/V distinct)."""

    id = "bacon"
    name = "Bacon Cipher"
    description = "Letters as five-symbol groups of A and B"
    emoji = "🥓"
    category = "classic"
    tags = ("classic", "steganography", "binary")
    lossy = True

    REVERSE = {code: letter for letter, code in BACON_CODE.items()}

    def _encode(self, text: str, _param) -> str:
        tokens: List[str] = []
        for char in text:
            letter = letter_of(char)
            if letter:
                tokens.append(BACON_CODE[letter])
            elif char == " ":
                tokens.append("/")
        return " ".join(tokens)

    def _decode(self, text: str, _param) -> str:
        out: List[str] = []
        for token in text.split():
            if token == "/":
                out.append(" ")
            else:
                out.append(self.REVERSE.get(token.upper(), UNRESOLVED))
        return "".join(out)

    def normalize(self, text: str, param: Any = None) -> str:
        return "".join(letter_of(c) or c for c in text if letter_of(c) or c == " ")


# ==========================================
#  One-way styles
# ==========================================

NATO_ALPHABET = {
    'a': 'Alpha', 'b': 'Bravo', 'c': 'Charlie', 'd': 'Delta', 'e': 'Echo',
    'f': 'Foxtrot', 'g': 'Golf', 'h': 'Hotel', 'i': 'India', 'j': 'Juliett',
    'k': 'Kilo', 'l': 'Lima', 'm': 'Mike', 'n': 'November', 'o': 'Oscar',
    'p': 'Papa', 'q': 'Quebec', 'r': 'Romeo', 's': 'Sierra', 't': 'Tango',
    'u': 'Uniform', 'v': 'Victor', 'w': 'Whiskey', 'x': 'X-ray', 'y': 'Yankee',
    'z': 'Zulu', '0': 'Zero', '1': 'One', '2': 'Two', '3': 'Three', '4': 'Four',
    '5': 'Five', '6': 'Six', '7': 'Seven', '8': 'Eight', '9': 'Nine'
}


@register_encoder
class NatoEncoder(EncoderStrategy):
    id = "nato"
    name = "NATO Phonetic"
    description = "Alpha, Bravo, Charlie..."
    emoji = "🎖️"
    category = "classic"
    tags = ("classic", "military", "radio")
    reversible = False

    def _encode(self, text: str, _param) -> str:
        return "-".join(NATO_ALPHABET.get(c.lower(), c) for c in text)


LEET_MAP = {
    'a': '4', 'e': '3', 'i': '1', 'o': '0', 's': '5', 't': '7', 'l': '1',
    'A': '4', 'E': '3', 'I': '1', 'O': '0', 'S': '5', 'T': '7', 'L': '1'
}


@register_encoder
class LeetspeakEncoder(EncoderStrategy):
    # i and l both become 1, so there is no way back
    id = "leetspeak"
    name = "Leetspeak"
    description = "H4ck3r sp34k"
    emoji = "🤓"
    category = "fun"
    tags = ("fun", "internet", "hacker")
    reversible = False

    def _encode(self, text: str, _param) -> str:
        return "".join(LEET_MAP.get(c, c) for c in text)


UPSIDE_DOWN_MAP = {
    'a': 'ɐ', 'b': 'q', 'c': 'ɔ', 'd': 'p', 'e': 'ǝ', 'f': 'ɟ', 'g': 'ƃ',
    'h': 'ɥ', 'i': 'ᴉ', 'j': 'ɾ', 'k': 'ʞ', 'l': 'ʃ', 'm': 'ɯ', 'n': 'u',
    'o': 'o', 'p': 'd', 'q': 'b', 'r': 'ɹ', 's': 's', 't': 'ʇ', 'u': 'n',
    'v': 'ʌ', 'w': 'ʍ', 'x': 'x', 'y': 'ʎ', 'z': 'z',
    '!': '¡', '?': '¿', '.': '˙', ',': "'", '(': ')', ')': '('
}


@register_encoder
class UpsideDownEncoder(EncoderStrategy):
    id = "upside-down"
    name = "Upside Down"
    description = "uʍop ǝpısdn ʇxǝʇ"
    emoji = "🙃"
    category = "visual"
    tags = ("visual", "fun", "flip")
    reversible = False

    def _encode(self, text: str, _param) -> str:
        return "".join(UPSIDE_DOWN_MAP.get(c, c) for c in reversed(text.lower()))


COMBINING_MARKS = [chr(code) for code in range(0x0300, 0x0370)]


@register_encoder
class ZalgoEncoder(EncoderStrategy):
    id = "zalgo"
    name = "Zalgo"
    description = "Glitchy stacked combining marks"
    emoji = "👹"
    category = "visual"
    tags = ("visual", "glitch", "creepy")
    reversible = False

    def _encode(self, text: str, _param) -> str:
        out: List[str] = []
        for char in text:
            out.append(char)
            out.extend(random.choice(COMBINING_MARKS) for _ in range(random.randint(2, 5)))
        return "".join(out)
