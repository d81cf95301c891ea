"""Pipeline orchestration layer.

Pipeline modules are organized by verb:
- `pipeline/classify.py` - file and live-capture classification sessions

Import policy:
- CLI imports only from `pipeline.*` for orchestration (verbs).
- `pipeline.*` may call `sources.*`, `scoring.*` and `streaming.*`.
- `streaming.*` must not call `pipeline.*` or `scoring.*`.
"""
