"""dora_server — FastAPI REST API for the DORA assessment SDK.

Exposes live assessment sessions (navigation, answers, observations),
draft save/resume backed by ``dora_db``, submission with report delivery,
and read-only catalog reference data.
"""
