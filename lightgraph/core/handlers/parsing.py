"""
Tolerant decoder for delimiter-based extraction records.

Malformed records are dropped and described in the result diagnostics;
the decoder never raises on bad LLM output.
"""

import re

from lightgraph.core.handlers.prompts import (
    COMPLETION_DELIMITER,
    RECORD_DELIMITER,
    TUPLE_DELIMITER,
)
from lightgraph.models.extraction import ExtractionResult
from lightgraph.models.graph import (
    UNKNOWN_ENTITY_TYPE,
    Entity,
    Relationship,
    entity_key,
    normalize_entity_name,
)

DEFAULT_WEIGHT = 1.0

_RECORD_SPLIT = re.compile(rf"{re.escape(RECORD_DELIMITER)}|\n")


def _clean_field(value: str) -> str:
    return value.strip().strip("\"'").strip()


def _split_records(text: str) -> list[str]:
    body = text.split(COMPLETION_DELIMITER, 1)[0]
    records = []
    for raw in _RECORD_SPLIT.split(body):
        record = raw.strip()
        # Records are sometimes wrapped as ("entity"<|>...)
        if record.startswith("(") and record.endswith(")"):
            record = record[1:-1].strip()
        if record:
            records.append(record)
    return records


def _resolve_type(raw_type: str, entity_types: list[str]) -> str:
    folded = raw_type.casefold()
    for entity_type in entity_types:
        if entity_type.casefold() == folded:
            return entity_type
    return UNKNOWN_ENTITY_TYPE


def _parse_weight(raw: str | None) -> float:
    if raw is None:
        return DEFAULT_WEIGHT
    try:
        weight = float(_clean_field(raw))
    except ValueError:
        return DEFAULT_WEIGHT
    if weight != weight or weight < 0:  # NaN or negative
        return DEFAULT_WEIGHT
    return weight


def parse_extraction_records(
    text: str, chunk_id: str, entity_types: list[str]
) -> ExtractionResult:
    """
    Decode extraction output into candidate entities and relationships.

    Every candidate gets source set {chunk_id}. Duplicate candidates within
    the output are collapsed (longer description wins).

    Args:
        text: Raw LLM output
        chunk_id: Chunk the output was extracted from
        entity_types: Entity type vocabulary; other types become UNKNOWN

    Returns:
        Parsed result with diagnostics for dropped records
    """
    entities: list[Entity] = []
    relationships: list[Relationship] = []
    diagnostics: list[str] = []

    for record in _split_records(text or ""):
        fields = [_clean_field(field) for field in record.split(TUPLE_DELIMITER)]
        kind = fields[0].casefold()

        if kind == "entity":
            if len(fields) < 4:
                diagnostics.append(f"entity record has {len(fields)} fields, expected 4: {record[:80]}")
                continue
            name = normalize_entity_name(fields[1])
            if not entity_key(name):
                diagnostics.append(f"entity record has an empty name: {record[:80]}")
                continue
            entities.append(
                Entity(
                    name=name,
                    type=_resolve_type(fields[2], entity_types),
                    description=fields[3],
                    source_chunk_ids=[chunk_id],
                )
            )

        elif kind == "relationship":
            if len(fields) < 5:
                diagnostics.append(
                    f"relationship record has {len(fields)} fields, expected 6: {record[:80]}"
                )
                continue
            source, target = normalize_entity_name(fields[1]), normalize_entity_name(fields[2])
            if not entity_key(source) or not entity_key(target):
                diagnostics.append(f"relationship record has an empty endpoint: {record[:80]}")
                continue
            if entity_key(source) == entity_key(target):
                diagnostics.append(f"self-relationship dropped: {source}")
                continue
            keywords = [kw.strip() for kw in fields[3].split(",") if kw.strip()]
            relationships.append(
                Relationship(
                    entity_a=source,
                    entity_b=target,
                    keywords=keywords,
                    description=fields[4],
                    weight=_parse_weight(fields[5] if len(fields) > 5 else None),
                    source_chunk_ids=[chunk_id],
                )
            )

        else:
            diagnostics.append(f"unrecognized record: {record[:80]}")

    return ExtractionResult().absorb(
        ExtractionResult(entities=entities, relationships=relationships, diagnostics=diagnostics)
    )
