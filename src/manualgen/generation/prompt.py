"""Prompt construction for per-unit manual generation."""

from __future__ import annotations

from manualgen.generation.config import ManualConfig

_BLOCK_INSTRUCTIONS = """\
5. **STRUCTURED BLOCKS:** Emit the following content as fenced JSON blocks, with the
   tag on the opening fence and valid JSON only inside the fence:
   - Table of contents: ```json:toc with an array of {"chapterLabel": string, "pageRef": string}
   - Menu navigation: ```json:menu with an array of {"pathSegments": [string], "description": string}
   - Keypad/operator panel codes: ```json:keypad with an array of
     {"inputSequence": string, "function": string, "note": string}
   - Complex tables: ```json:table with {"headers": [string], "rows": [[string]]}
   - Images and diagrams: ```json:image with
     {"kind": "diagram" | "photo" | "icon", "caption": string, "description": string}
   All values are strings. Optional fields may be omitted."""


def _replacement_lines(config: ManualConfig) -> str:
    if not config.replacements:
        return "    - (none)"
    return "\n".join(f'    - Replace "{rule.match}" with "{rule.replace}"' for rule in config.replacements)


def build_prompt(config: ManualConfig) -> str:
    """Instruction text sent alongside every unit."""

    return f"""\
You are an expert technical writer and translator specialized in industrial manuals (elevators, electronics).
Your task is to transform the attached PDF document section into a professional technical document.

**CONFIGURATION:**
- Target Language: {config.target_language} (Translate everything to this language).
- Tone: {config.tone.value}.

**REPLACEMENT RULES (STRICT):**
{_replacement_lines(config)}

**FORMATTING RULES (CRITICAL):**
1. **TABLES ARE MANDATORY:** If the PDF contains any tabular data (technical specifications, error codes,
   parameters, pin assignments), YOU MUST output it as a Markdown Table.
   - Do NOT convert tables into lists or plain text.
   - Maintain the headers.
   - Every row must have as many cells as the header.
2. **PINOUTS & CONNECTIONS:** Descriptions of terminals, connectors (e.g., X1, X2, Inputs) and LEDs must be
   formatted as TABLES. Do not clump technical data into paragraphs.
3. **STRUCTURE:** Use H1 (#) for the main title of the section, H2 (##) for subsections and H3 (###) for
   specific component details. Use **bold** for component names.
4. **REPLACEMENTS:** Apply every replacement rule above to the output text.
{_BLOCK_INSTRUCTIONS}

**OUTPUT:**
Return ONLY the Markdown string. No introduction and no code fence around the whole answer.
Start directly with the content.
"""
