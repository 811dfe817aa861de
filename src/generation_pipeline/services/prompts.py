"""Prompt rendering.

Prompt wording is owned by the product team; this module only turns a
request into text with the JSON shape the validator expects.
"""

from generation_pipeline.entities import ContentType, GenerationRequest

from .validator import schema_for

_SHAPES = {
    ContentType.PLAN: """{
  "sections": [
    {"type": "timeline", "title": "Timeline Overview", "content": "..."},
    {"type": "phase", "title": "Research Phase (3-5 days before)", "items": ["...", "..."]}
  ],
  "questions": ["...", "..."]
}""",
    ContentType.TRAINING_PLAN: """{
  "title": "...",
  "sections": [
    {"type": "overview", "title": "Overview", "content": "..."},
    {"type": "module", "title": "Module 1: ...", "items": ["...", "..."]}
  ],
  "objectives": ["...", "..."]
}""",
    ContentType.RESUME_REWRITE: """{
  "sections": [
    {"type": "summary", "title": "Professional Summary", "content": "..."},
    {"type": "experience", "title": "Experience", "items": ["...", "..."]}
  ],
  "changes": ["...", "..."]
}""",
}

_TASKS = {
    ContentType.PLAN: "Create a personalized interview preparation plan and practice questions.",
    ContentType.TRAINING_PLAN: "Create a detailed, professional training plan.",
    ContentType.RESUME_REWRITE: "Rewrite the resume so it targets the role below.",
}


def render_prompt(request: GenerationRequest) -> str:
    """Render the prompt text sent to every provider in the chain."""
    schema = schema_for(request.content_type)
    tier = (
        "This is a premium user, so provide comprehensive, detailed guidance."
        if request.premium
        else "This is a free tier user; keep the guidance focused."
    )

    lines = [_TASKS[request.content_type], tier, ""]
    for name in sorted(request.fields):
        value = request.get(name)
        if value is None:
            continue
        if isinstance(value, tuple):
            value = ", ".join(str(item) for item in value)
        label = name.replace("_", " ").capitalize()
        lines.append(f"{label}: {value}")

    lines.extend(
        [
            "",
            "Respond ONLY with a JSON object of this shape, without markdown:",
            _SHAPES[request.content_type],
            f'Narrative section types ({", ".join(sorted(schema.narrative_types))}) '
            'carry "content" text; every other section carries a non-empty "items" array.',
            f'Include at least {schema.min_items} entries in "{schema.items_field}".',
        ]
    )
    return "\n".join(lines)
