"""JSON rendering/export of FHIR resources.

Why JSON:
- The client speaks `application/fhir+json`, so the response is shown in the
  same encoding it arrived in.
- A stable pretty form (fixed indent, server key order) diffs cleanly between
  runs.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def render_resource(resource: dict[str, Any]) -> str:
    """Pretty-print a resource as UTF-8 JSON with stable formatting."""

    return json.dumps(resource, ensure_ascii=False, indent=2)


def export_resource_json(*, resource: dict[str, Any], output_path: Path) -> Path:
    """Write `resource` to `output_path` (parents created)."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_resource(resource) + "\n", encoding="utf-8")
    return output_path
