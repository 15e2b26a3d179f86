"""
ROT47 plugin - example for the plugin system.

To add your own encoder:

1. Create a new .py file in a plugins directory
2. Subclass EncoderStrategy (injected by the loader, no import needed)
3. Decorate the class with @register_encoder (also injected)
4. List the file and the encoder id in that directory's manifest.json
"""


@register_encoder
class Rot47Encoder(EncoderStrategy):
    """
    Rotates the 94 printable ASCII characters ('!' to '~') by 47.
    Like ROT13, applying it twice gives the input back.
    """

    id = "rot47"
    name = "ROT47"
    description = "Rotate printable ASCII by 47 (plugin)"
    emoji = "🔃"
    category = "cipher"
    tags = ("cipher", "rotation", "plugin")

    def _encode(self, text, _param):
        return "".join(
            chr(33 + (ord(c) - 33 + 47) % 94) if '!' <= c <= '~' else c
            for c in text
        )

    _decode = _encode
