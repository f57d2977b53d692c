"""
Engine settings, read from ``settings.HORUS_ENGINE`` with defaults.
"""
from django.conf import settings

DEFAULTS = {
    "STRICT_TOKENIZER": False,
    "MAX_BATCH_SIZE": 100,
}


def engine_setting(name):
    if name not in DEFAULTS:
        raise KeyError(f"Unknown HORUS_ENGINE setting '{name}'")
    overrides = getattr(settings, "HORUS_ENGINE", None) or {}
    return overrides.get(name, DEFAULTS[name])
