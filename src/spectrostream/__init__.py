"""spectrostream core package.

This package currently provides:
- A streaming feature extractor (`spectrostream.streaming`) that turns
  periodic spectrum snapshots into fixed-shape classifier inputs
- Audio sources for decoded files and live microphones (`spectrostream.sources`)
- Classifier wrappers and per-session score aggregation (`spectrostream.scoring`)
- Batch pipelines and a Typer-based CLI (`spectrostream.cli`)

Configuration:
- Shared, project-wide filesystem anchors and streaming defaults live in
  `spectrostream.global_config`.
"""
