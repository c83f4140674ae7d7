"""Plan generation prompts.

Structured adapters get a JSON prompt that mirrors the canonical plan
shape. The hosted proxy returns a markdown document instead, so its system
prompt carries the document outline and the watermark line.
"""
from __future__ import annotations

from datetime import datetime

from layr.models.options import PlanOptions, PlanSize, ProjectType
from layr.models.plan import format_watermark

# System prompt for structured (JSON) plan generation
PLAN_SYSTEM_PROMPT = (
    "You are an expert software architect and project manager. "
    "You produce thorough, practical implementation plans as strict JSON."
)

SIZE_INSTRUCTIONS: dict[PlanSize, str] = {
    PlanSize.CONCISE: """\
CRITICAL SIZE CONSTRAINTS - MUST FOLLOW:
- Total output: 80-100 lines maximum
- Overview: 1 short paragraph only (3-4 sentences)
- Requirements: 3-4 items per category maximum
- Implementation: 2-3 phases maximum
- File Structure: top-level structure only
- Keep descriptions brief, single sentences only""",
    PlanSize.NORMAL: """\
SIZE CONSTRAINTS:
- Total output: 180-240 lines
- Overview: 2-3 paragraphs
- Requirements: 5-8 items per category
- Implementation: 4-6 phases
- File Structure: full structure with key directories
- Provide clear but concise explanations""",
    PlanSize.DESCRIPTIVE: """\
SIZE SPECIFICATIONS:
- Total output: 300+ lines
- Overview: 4-5 detailed paragraphs
- Requirements: 10-15 items per category with thorough explanations
- Implementation: 8-12 phases with detailed steps
- File Structure: complete structure with all subdirectories
- Provide extensive explanations and examples""",
}

TYPE_INSTRUCTIONS: dict[ProjectType, str] = {
    ProjectType.HOBBY: """\
PROJECT TYPE: HOBBY/LEARNING PROJECT
- Focus on basic functionality only, no enterprise features
- Database: SQLite or JSON files
- Deployment: simple hosting only (Vercel, Netlify, GitHub Pages)
- Authentication: basic email/password at most
- No CI/CD pipelines, microservices or monitoring infrastructure
- Phases: 2-3 maximum, each 1-2 weeks""",
    ProjectType.SAAS: """\
PROJECT TYPE: SOFTWARE AS A SERVICE
MUST INCLUDE:
- Multi-tenant architecture with data isolation
- User authentication with roles and permissions
- Subscription/billing integration
- RESTful or GraphQL API design
- Cloud deployment and scalable database design
- Analytics, monitoring and a CI/CD pipeline
- Phases: 6-8, production-ready focus""",
    ProjectType.PRODUCTION: """\
PROJECT TYPE: PRODUCTION-READY APPLICATION
MUST INCLUDE:
- Comprehensive error handling and logging
- Full test coverage (unit, integration, e2e)
- CI/CD pipeline with automated deployment
- Monitoring, alerting and security best practices
- Database migrations and backups
- Phases: 6-10, focus on reliability""",
    ProjectType.ENTERPRISE: """\
PROJECT TYPE: ENTERPRISE APPLICATION
MUST INCLUDE:
- Microservices architecture
- Enterprise authentication (SSO, LDAP, SAML)
- Compliance requirements (GDPR, HIPAA, etc.)
- Audit logging and security monitoring
- Container orchestration, high availability and disaster recovery
- Phases: 10-12, enterprise-grade quality""",
    ProjectType.PROTOTYPE: """\
PROJECT TYPE: RAPID PROTOTYPE
FOCUS ON:
- Minimal viable features only
- Simple architecture for easy iteration
- Mock services and hardcoded data are acceptable
- Skip testing, CI/CD and monitoring
- Phases: 1-2, 1-2 weeks total""",
    ProjectType.OPEN_SOURCE: """\
PROJECT TYPE: OPEN SOURCE PROJECT
MUST INCLUDE:
- Contribution guidelines and a code of conduct
- License selection
- Contributor documentation, issue and PR templates
- Community engagement strategy and a public roadmap
- Phases: include community building""",
}

PLAN_JSON_PROMPT = """\
Create a comprehensive and detailed project plan in JSON format for: "{prompt}"

{size_instructions}

{type_instructions}

Generate a thorough, professional project plan that includes:
- A detailed overview of the project's purpose, target audience, and key features
- Comprehensive requirements covering functional, technical, and non-functional aspects
- A well-structured file organization with clear descriptions
- Detailed next steps with realistic time estimates and clear dependencies

CRITICAL: Return ONLY valid JSON. Do not wrap in markdown code blocks. Do not \
include any explanatory text before or after the JSON. Start your response \
with {{ and end with }}.

{{
  "title": "Descriptive Project Title",
  "overview": "What the project does, who it is for and what makes it valuable.",
  "requirements": [
    "Functional requirement with specific features",
    "Technical requirement naming frameworks, libraries, or tools",
    "Non-functional requirement with measurable criteria"
  ],
  "fileStructure": [
    {{
      "name": "src",
      "type": "directory",
      "path": "src/",
      "description": "Main source code directory",
      "children": [
        {{"name": "main.ts", "type": "file", "path": "src/main.ts"}}
      ]
    }},
    {{
      "name": "README.md",
      "type": "file",
      "path": "README.md",
      "description": "Setup instructions and usage guide"
    }}
  ],
  "nextSteps": [
    {{
      "id": "step-1",
      "description": "Initialize the project and install core dependencies",
      "completed": false,
      "priority": "high",
      "estimatedTime": "45 minutes",
      "dependencies": []
    }},
    {{
      "id": "step-2",
      "description": "Implement the core features outlined in the requirements",
      "completed": false,
      "priority": "medium",
      "estimatedTime": "4-6 hours",
      "dependencies": ["step-1"]
    }}
  ]
}}"""

PLAN_MARKDOWN_SYSTEM_PROMPT = """\
You are an expert software architect and project planner for Layr AI.

{size_instructions}

{type_instructions}

Generate a project plan following this structure. START YOUR RESPONSE WITH \
THE WATERMARK ON THE FIRST LINE:

{watermark}

---

# Project Title
[Clear, compelling, professional title]

## Overview
[Purpose, target users, key features and technical approach]

## Requirements

### Functional Requirements
- [Functional requirements with clear descriptions]

### Technical Requirements
- [Technical requirements with rationale]

### Non-Functional Requirements
- [Performance, security, scalability]

## Technology Stack
[Frontend, backend and DevOps tooling]

## Architecture
[System architecture and key components]

## File Structure
[A fenced tree of the project layout with short comments]

## Implementation Phases
[Phases with checkbox tasks and deliverables]

## Next Steps
[Numbered actions with priority, time estimate and dependencies]

## Testing Strategy
[Testing approach appropriate to the project type]

## Deployment Strategy
[Deployment approach appropriate to the project type]

CRITICAL REMINDER: Your response MUST respect the size constraints above."""


def build_json_plan_prompt(prompt: str, options: PlanOptions) -> str:
    """Build the user prompt for structured plan generation."""
    return PLAN_JSON_PROMPT.format(
        prompt=prompt,
        size_instructions=SIZE_INSTRUCTIONS[options.size],
        type_instructions=TYPE_INSTRUCTIONS[options.project_type],
    )


def build_markdown_system_prompt(
    options: PlanOptions, now: datetime | None = None
) -> str:
    """Build the system prompt for markdown plan generation."""
    return PLAN_MARKDOWN_SYSTEM_PROMPT.format(
        size_instructions=SIZE_INSTRUCTIONS[options.size],
        type_instructions=TYPE_INSTRUCTIONS[options.project_type],
        watermark=format_watermark(now or datetime.now()),
    )
