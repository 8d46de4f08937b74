"""JSON exporter."""
import json
import logging
from pathlib import Path
from datetime import datetime
from typing import Dict, Any

from src.builder.model_builder import ModelBuilder

logger = logging.getLogger(__name__)


class JsonExporter:
    """Export synthesized models to JSON."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def build_document(self, builder: ModelBuilder) -> Dict[str, Any]:
        return {
            "metadata": {
                "created_at": datetime.now().isoformat(),
                "model_count": len(builder.models),
                "strict": builder.strict,
            },
            "models": builder.to_dict(),
        }

    def export_string(self, builder: ModelBuilder) -> str:
        """Export to JSON text."""
        return json.dumps(self.build_document(builder), indent=self.indent)

    def export(self, output_file: Path, builder: ModelBuilder) -> None:
        """Export to JSON file."""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(output_file, "w") as f:
            json.dump(self.build_document(builder), f, indent=self.indent, default=str)

        logger.info(f"Exported {len(builder.models)} models to {output_file}")
