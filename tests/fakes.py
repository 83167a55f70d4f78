"""Stand-in QR encoders wired through settings.QR_ENCODER in tests."""

import base64
import json


def encode_stub(payload):
    return "data:image/png;base64," + base64.b64encode(json.dumps(payload).encode()).decode()


def failing_encoder(payload):
    raise RuntimeError("QR encoder unavailable")
