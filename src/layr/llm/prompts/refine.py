"""Section refinement prompts."""
from __future__ import annotations

REFINE_SYSTEM_PROMPT = (
    "You are an expert software architect. You rewrite single sections of "
    "project plans and return only the rewritten section."
)

REFINE_SECTION_PROMPT = """\
Refine the following section of a project plan based on the user's request.

Original Section Content:
\"\"\"
{section}
\"\"\"

User's Refinement Request:
\"\"\"
{instruction}
\"\"\"

Full Plan Context (for reference):
\"\"\"
{context}
\"\"\"

CRITICAL INSTRUCTIONS:
1. Return ONLY the refined content for this section.
2. Maintain the same Markdown heading level as the original section if applicable.
3. Ensure the refined content fits seamlessly back into the full plan.
4. Do not include any introductory or concluding text.
5. If the user asks for more detail, be specific and technical."""


def build_refine_prompt(section: str, instruction: str, context: str) -> str:
    """Build the user prompt for refining one section."""
    return REFINE_SECTION_PROMPT.format(
        section=section, instruction=instruction, context=context
    )
