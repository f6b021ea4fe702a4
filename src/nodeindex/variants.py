"""Tool variant generation for AI-capable nodes."""

from __future__ import annotations

from nodeindex.parser import NodeRecord

__all__ = ["ToolVariantGenerator", "TOOL_SUFFIX"]

TOOL_SUFFIX = "Tool"


class ToolVariantGenerator:
    """Derives the AI-invocable Tool variant of a node record."""

    def generate_tool_variant(self, record: NodeRecord) -> NodeRecord | None:
        """Return a Tool variant of ``record``, or None if it cannot have one.

        Variants of variants are never produced. Provenance fields are left
        for the caller to set.
        """
        if record.is_tool_variant or not record.node_type:
            return None

        display_name = record.display_name or record.node_type
        return record.model_copy(
            update={
                "node_type": f"{record.node_type}{TOOL_SUFFIX}",
                "display_name": f"{display_name} {TOOL_SUFFIX}",
                "is_ai_tool": True,
                "is_trigger": False,
                "is_tool_variant": True,
                "tool_variant_of": record.node_type,
                "has_tool_variant": False,
            },
            deep=True,
        )
