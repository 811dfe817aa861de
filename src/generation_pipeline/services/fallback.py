"""Deterministic fallback content.

When every provider in the chain has failed, these generators build a
generic but schema-valid result from the request fields alone. They make no
network calls and use no randomness; premium requests get extra sections
and items.
"""

from collections.abc import Callable
from typing import Any

from generation_pipeline.entities import ContentType, GenerationRequest

BASE_QUESTIONS = [
    "Tell me about your experience that qualifies you for {job_title}.",
    "Why are you interested in working for {company}?",
    "What do you know about {company} and our position in {industry}?",
    "Describe a challenging situation you faced in your previous role and how you handled it.",
    "What are your strengths and weaknesses as they relate to {job_title}?",
    "Where do you see yourself in 5 years?",
    "Why should we hire you for this position?",
    "How do you handle stress and pressure?",
    "Describe your ideal work environment.",
    "What questions do you have for me about the role or company?",
]

PREMIUM_QUESTIONS = [
    "What specific skills or experiences do you have that align with our needs for {job_title}?",
    "How do you stay current with trends and developments in {industry}?",
    "Describe a time when you had to learn a new skill quickly. How did you approach it?",
    "What's the most innovative project you've worked on, and what was your contribution?",
    "How do you prioritize tasks when handling multiple projects?",
    "Tell me about a time when you received constructive feedback and how you responded to it.",
    "How would your previous colleagues describe your work style?",
    "What motivates you professionally?",
    "Describe a situation where you had to work with a difficult team member. How did you handle it?",
    "What are your salary expectations for this role?",
]

DEFAULT_OBJECTIVES = [
    "Understand the core concepts of {title}",
    "Apply {title} techniques to realistic {industry} scenarios",
    "Evaluate your own progress against clear success criteria",
]

DEFAULT_CHANGES = [
    "Rewrote the summary to lead with measurable impact",
    "Rephrased experience bullets with strong action verbs",
    "Aligned skills and terminology with the target role",
    "Simplified formatting for applicant tracking systems",
]


def _text(request: GenerationRequest, name: str, default: str) -> str:
    value = request.get(name)
    if not isinstance(value, str) or not value.strip():
        return default
    return value.strip()


def plan_fallback(request: GenerationRequest) -> dict[str, Any]:
    """Interview preparation plan with a fixed timeline skeleton."""
    job_title = _text(request, "job_title", "the position")
    company = _text(request, "company", "the company")
    industry = _text(request, "industry", "your industry")

    sections: list[dict[str, Any]] = [
        {
            "type": "timeline",
            "title": "Preparation Timeline",
            "content": f"Here's a structured timeline to prepare for your {job_title} interview.",
        },
        {
            "type": "phase",
            "title": "Research Phase (3-5 days before)",
            "items": [
                f"Research {company} thoroughly - their products, services, mission, and recent news",
                "Study the job description and identify key skills and qualifications",
                "Prepare examples from your experience that demonstrate these skills",
                f"Research common interview questions for {job_title} positions",
            ],
        },
        {
            "type": "phase",
            "title": "Practice Phase (1-2 days before)",
            "items": [
                "Practice answering common interview questions out loud",
                'Prepare your "tell me about yourself" response',
                "Prepare 3-5 questions to ask the interviewer",
                "Practice explaining your past experiences using the STAR method "
                "(Situation, Task, Action, Result)",
            ],
        },
        {
            "type": "phase",
            "title": "Day Before Preparation",
            "items": [
                "Plan your outfit and prepare any materials you need to bring",
                "Review your resume and be ready to discuss any item on it",
                "Get a good night's sleep",
                "Plan your route to the interview location or test your video conferencing setup",
            ],
        },
        {
            "type": "phase",
            "title": "Interview Day",
            "items": [
                "Arrive 10-15 minutes early or log in 5 minutes before a virtual interview",
                "Bring copies of your resume and a notepad",
                "Remember to maintain good eye contact and positive body language",
                "Listen carefully to questions before answering",
                "Thank the interviewer for their time at the end",
            ],
        },
    ]

    skills = request.get_list("required_skills")
    if skills:
        sections.append(
            {
                "type": "category",
                "title": "Skills to Demonstrate",
                "items": [f"Prepare a concrete example that shows your {skill} skills" for skill in skills],
            }
        )

    if request.premium:
        sections.append(
            {
                "type": "phase",
                "title": "Follow-up",
                "items": [
                    "Send a thank-you email within 24 hours",
                    "Reference specific topics discussed during the interview",
                    "Reiterate your interest in the position",
                    "Provide any additional information requested during the interview",
                ],
            }
        )

    templates = BASE_QUESTIONS + (PREMIUM_QUESTIONS if request.premium else [])
    questions = [
        template.format(job_title=job_title, company=company, industry=industry)
        for template in templates
    ]
    return {"sections": sections, "questions": questions}


def training_plan_fallback(request: GenerationRequest) -> dict[str, Any]:
    """Training plan built from the default template."""
    title = _text(request, "title", "this training")
    industry = _text(request, "industry", "the industry")
    level = _text(request, "target_audience_level", "all")
    duration = _text(request, "duration", "a few weeks")
    learning_style = _text(request, "learning_style", "blended")

    objectives = request.get_list("objectives")
    for template in DEFAULT_OBJECTIVES:
        if len(objectives) >= len(DEFAULT_OBJECTIVES):
            break
        objectives.append(template.format(title=title, industry=industry))

    description = _text(
        request,
        "description",
        f"It focuses on key skills and knowledge required for {industry}.",
    )

    sections: list[dict[str, Any]] = [
        {
            "type": "overview",
            "title": "Overview",
            "content": (
                f"This training plan provides a structured approach to learning {title}. "
                f"{description} It is suitable for {level} level learners and is designed "
                f"to be completed in {duration}."
            ),
        },
        {"type": "objectives", "title": "Learning Objectives", "items": list(objectives)},
        {
            "type": "schedule",
            "title": "Schedule",
            "items": [
                f"Module {index}: {objective}" for index, objective in enumerate(objectives, start=1)
            ],
        },
        {
            "type": "activities",
            "title": "Learning Activities",
            "items": [
                f"Guided sessions using a {learning_style} learning approach",
                "Hands-on practice exercises after each module",
                "Group discussion of real-world case studies",
            ],
        },
        {
            "type": "assessment",
            "title": "Assessment",
            "items": [
                "Short knowledge check at the end of each module",
                "Practical project applying the main objectives",
                "Final self-assessment against the learning objectives",
            ],
        },
    ]

    materials = request.get_list("materials_required")
    sections.append(
        {
            "type": "materials",
            "title": "Materials",
            "items": materials or ["No specific materials required"],
        }
    )

    if request.premium:
        sections.extend(
            [
                {
                    "type": "resources",
                    "title": "Advanced Resources",
                    "items": [
                        f"Curated reading list on {title}",
                        f"Industry case studies from {industry}",
                        "Community forum for peer support",
                    ],
                },
                {
                    "type": "certification",
                    "title": "Certification Path",
                    "items": [
                        "Complete all module assessments",
                        "Submit the final practical project for review",
                        "Receive a certificate of completion",
                    ],
                },
            ]
        )

    return {"title": title, "sections": sections, "objectives": list(objectives)}


def resume_rewrite_fallback(request: GenerationRequest) -> dict[str, Any]:
    """Resume guidance derived from the job title and skills."""
    job_title = _text(request, "job_title", "your target role")
    skills = request.get_list("required_skills")

    sections: list[dict[str, Any]] = [
        {
            "type": "summary",
            "title": "Professional Summary",
            "content": (
                f"Results-driven professional targeting a {job_title} position, with a track "
                "record of delivering measurable outcomes and collaborating across teams."
            ),
        },
        {
            "type": "improvements",
            "title": "Suggested Improvements",
            "items": [
                "Quantify achievements with numbers, percentages, or time saved",
                "Start each bullet with a strong action verb",
                f"Move the experience most relevant to {job_title} to the top",
                "Remove responsibilities that do not support your target role",
            ],
        },
        {
            "type": "keywords",
            "title": "Keywords to Emphasize",
            "items": skills or [job_title, "communication", "problem solving", "teamwork"],
        },
        {
            "type": "formatting",
            "title": "Formatting Checklist",
            "items": [
                "Use a single-column layout with standard section headings",
                "Keep the resume to one or two pages",
                "Save and submit as a text-based PDF",
            ],
        },
    ]

    if request.premium:
        sections.append(
            {
                "type": "cover-letter",
                "title": "Cover Letter Outline",
                "items": [
                    f"Open with why the {job_title} role excites you",
                    "Connect two accomplishments to the role's key requirements",
                    "Close with a confident call to action",
                ],
            }
        )

    return {"sections": sections, "changes": list(DEFAULT_CHANGES)}


FALLBACKS: dict[ContentType, Callable[[GenerationRequest], dict[str, Any]]] = {
    ContentType.PLAN: plan_fallback,
    ContentType.TRAINING_PLAN: training_plan_fallback,
    ContentType.RESUME_REWRITE: resume_rewrite_fallback,
}


def fallback(request: GenerationRequest) -> dict[str, Any]:
    """Build an always-valid result for ``request`` without any I/O."""
    return FALLBACKS[request.content_type](request)
