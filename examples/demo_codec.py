"""
hybrid_codec — Live Demo
========================
Run:  python examples/demo_codec.py

Walks one message through the codec and then through each way a frame
can be rejected, printing timing and frame sizes along the way.
"""

import sys, os, time, logging
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import datetime, timedelta, timezone

from hybrid_codec import (CodecConfig, Decoder, Encoder, CodecError,
                          generate_keypair, key_id)

LINE = "═" * 70
MSG  = b"hello world"

def header(step, name):
    print(f"\n{LINE}")
    print(f"  {step} — {name}")
    print(LINE)

def ok(label, value=""):
    print(f"  ✓  {label}{f': {value}' if value else ''}")

def rejected(label, exc):
    print(f"  ✗  {label}: {type(exc).__name__} ({exc.public_message})")


logging.basicConfig(level=logging.INFO, format=" %(levelname)s %(name)s: %(message)s")

print(f"\n{LINE}")
print("  hybrid_codec — RSA-OAEP + AES-GCM transport codec")
print(LINE)
print(f"  Message: {MSG.decode()}\n")
print("  (Generating two 2048-bit keypairs...)")
priv, pub             = generate_keypair(2048)
other_priv, other_pub = generate_keypair(2048)
ok("Recipient key id", key_id(pub))

# ── ROUND TRIP ───────────────────────────────────────────────────────────────
header(1, "Round trip")
t0    = time.perf_counter()
frame = Encoder().encode(MSG, pub)
wire  = frame.to_json()
pt    = Decoder().decode(wire, priv)
elapsed = time.perf_counter() - t0
ok("Frame size",  f"{len(wire)} bytes of JSON")
ok("Timestamp",   frame.to_dict()["timestamp"])
ok("Round-trip",  f"{elapsed*1000:.2f} ms")
ok("Decrypted",   pt.decode())

# ── REJECTIONS ───────────────────────────────────────────────────────────────
header(2, "Rejections")
wrong = Decoder().try_decode(wire, other_priv)
rejected("Wrong private key", wrong.error)

tampered = frame.to_dict()
tampered["data"] = ("A" if tampered["data"][0] != "A" else "B") + tampered["data"][1:]
result = Decoder().try_decode(tampered, priv)
rejected("Tampered data", result.error)

past  = datetime.now(timezone.utc) - timedelta(minutes=5)
stale = Encoder(CodecConfig(clock=lambda: past)).encode(MSG, pub)
result = Decoder().try_decode(stale, priv, freshness_window=60)
rejected("Five minute old frame, 60s window", result.error)

result = Decoder().try_decode({"data": "x"}, priv)
rejected("Missing fields", result.error)

print(f"\n{LINE}")
print("  Done.")
print(LINE + "\n")
