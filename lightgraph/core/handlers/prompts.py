"""
Prompt templates for the default handlers.

Extraction output uses a line-oriented record format:

    entity<|>NAME<|>TYPE<|>DESCRIPTION
    relationship<|>SOURCE<|>TARGET<|>KEYWORDS<|>DESCRIPTION<|>WEIGHT

Records are separated by newlines or "##" and the output ends with
"<|COMPLETE|>".
"""

TUPLE_DELIMITER = "<|>"
RECORD_DELIMITER = "##"
COMPLETION_DELIMITER = "<|COMPLETE|>"

EXTRACTION_SYSTEM_PROMPT = f"""
You are a knowledge graph extraction system. You read a text and list the entities it mentions and the relationships between them.

## Output Format

One record per line. Fields are separated by {TUPLE_DELIMITER}.

Entities:
entity{TUPLE_DELIMITER}<name>{TUPLE_DELIMITER}<type>{TUPLE_DELIMITER}<description>

Relationships:
relationship{TUPLE_DELIMITER}<source name>{TUPLE_DELIMITER}<target name>{TUPLE_DELIMITER}<comma-separated keywords>{TUPLE_DELIMITER}<description>{TUPLE_DELIMITER}<strength 1-10>

End the output with {COMPLETION_DELIMITER}

## Guidelines

1. **Names**: Use the name as written in the text, capitalized
2. **Types**: Use only the entity types given by the user
3. **Descriptions**: Be comprehensive, using only information from the text
4. **Relationships**: Only between entities you listed; keywords summarize the nature of the relation
5. **No commentary**: Output records only
""".strip()

EXTRACTION_USER_PROMPT = """
## Entity Types
{entity_types}

## Language
Write descriptions in {language}.

## Example

Text: Alice joined Acme Corp as chief engineer in Berlin.

Output:
entity<|>Alice<|>person<|>Alice is the chief engineer at Acme Corp.
entity<|>Acme Corp<|>organization<|>Acme Corp is a company with an office in Berlin.
entity<|>Berlin<|>geo<|>Berlin is the city where Alice joined Acme Corp.
relationship<|>Alice<|>Acme Corp<|>employment, engineering leadership<|>Alice works for Acme Corp as chief engineer.<|>9
relationship<|>Acme Corp<|>Berlin<|>location<|>Acme Corp has an office in Berlin.<|>6
<|COMPLETE|>

## Text
{content}

## Output
""".strip()

GLEANING_PROMPT = """
Some entities and relationships were missed in the previous extraction.

## Already Extracted
{known}

List ONLY additional entities and relationships from the same text, in the same format.
If nothing was missed, output only {completion}

## Text
{content}

## Output
""".strip()

SUMMARY_PROMPT = """
You are a helpful assistant responsible for generating a comprehensive summary.

## Subject
{name}

## Descriptions
{descriptions}

## Task

Combine the descriptions above into a single, comprehensive description of the subject.
- Include information from all of the descriptions
- Resolve contradictions into one coherent account
- Write in third person and mention the subject by name
- Write in {language}
- Output the summary only
""".strip()

KEYWORD_SYSTEM_PROMPT = """
You are a helpful assistant tasked with identifying both high-level and low-level keywords in a user's query.

- high_level_keywords: overarching concepts or themes
- low_level_keywords: specific entities, names, details or concrete terms

Return JSON only:
{"high_level_keywords": ["..."], "low_level_keywords": ["..."]}
""".strip()

KEYWORD_USER_PROMPT = """
## Conversation History
{history}

## Query
{query}

## Output
""".strip()
