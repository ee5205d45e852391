"""Rubric prompt construction for the LLM judge."""

import json
import re
from collections.abc import Sequence

from ze_bench.config.domain.scenario import ScenarioConfig
from ze_bench.evaluation.domain.diff import DiffArtifacts
from ze_bench.validation.domain.command import CommandResult

MAX_LISTED_FILES = 10
MAX_LISTED_DEPENDENCIES = 10
MAX_STDERR_CHARS = 200

_NON_SLUG = re.compile(r"[^a-z0-9]+")

_SCORING_GUIDELINES = """\
**Scoring Guidelines - BE RUTHLESS:**
- **5: PERFECT** - Absolutely flawless implementation. Zero issues. Exemplary code quality. \
Industry best practices followed exactly. Would be used as a reference example. **VERY RARE.**
- **4: Excellent** - Minor cosmetic issues only (formatting, variable naming). Core implementation \
is sound and follows best practices. No functional problems.
- **3: Good/Acceptable** - Functional and mostly correct, but has notable issues: suboptimal \
patterns, missing edge cases, or minor bugs. Works but not production-ready without improvements.
- **2: Below Average** - Significant problems: incorrect patterns, security issues, broken \
functionality, or fundamental misunderstandings. Requires substantial rework.
- **1: Poor/Failing** - Completely incorrect, non-functional, or dangerous. Violates fundamental \
principles. Would cause serious problems in production.

**CRITICAL EVALUATION CRITERIA:**
- Do NOT give a 5 unless the implementation is genuinely perfect with zero room for improvement
- Be harsh on antipatterns, security issues, performance problems, and outdated practices
- Deduct points for missing error handling, poor type safety, or inadequate testing considerations
- A "working" solution that has flaws should get 3 or below, not 4-5
- Reserve 4-5 scores for code you would confidently deploy to production without changes"""


def slugify_category(category: str) -> str:
    """Short machine name for a category: the text before any ``:`` or ``(``, snake-cased."""
    name = category.split(":")[0].split("(")[0].strip().lower()
    return _NON_SLUG.sub("_", name).strip("_")


def build_judge_prompt(
    scenario: ScenarioConfig,
    agent_response: str | None,
    diffs: DiffArtifacts,
    command_results: Sequence[CommandResult],
) -> str:
    categories = scenario.llm_judge.categories
    sections = [
        _task_description(scenario),
        f"## Agent Response\n{_agent_response(agent_response)}",
        f"## Changes Made\n{_changes(diffs)}",
        f"## Command Results\n{_command_results(command_results)}",
        "\n\n".join(
            [
                "## Evaluation Instructions",
                "You are an expert code reviewer evaluating an AI agent's performance. "
                "**BE EXTREMELY CRITICAL AND RIGOROUS** in your evaluation. A score of 5.0 should be "
                "reserved for absolutely perfect, flawless implementations that exemplify best "
                "practices in every way.",
                f"Evaluate the agent across these {len(categories)} categories:",
                "\n\n".join(f"### {index}. {category}" for index, category in enumerate(categories, 1)),
                _SCORING_GUIDELINES,
                f"**Output JSON format:**\n{_json_example(categories)}",
            ]
        ),
    ]
    return "\n\n".join(sections).strip()


def _task_description(scenario: ScenarioConfig) -> str:
    constraints = scenario.constraints.model_dump(mode="json", by_alias=True, exclude_defaults=True)
    targets = scenario.targets.model_dump(mode="json", exclude_defaults=True)
    return "\n".join(
        [
            "## Task Description",
            f"**Scenario**: {scenario.id}",
            f"**Title**: {scenario.title or 'No title provided'}",
            f"**Description**: {scenario.description or 'No description provided'}",
            "",
            f"**Constraints**: {json.dumps(constraints, indent=2) if constraints else 'None specified'}",
            f"**Targets**: {json.dumps(targets, indent=2) if targets else 'None specified'}",
        ]
    )


def _agent_response(agent_response: str | None) -> str:
    if not agent_response or not agent_response.strip():
        return "No agent response provided"
    return f"```\n{agent_response}\n```"


def _changes(diffs: DiffArtifacts) -> str:
    lines = ["## File Changes"]
    if not diffs.files:
        lines.append("No file changes detected")
    else:
        lines.append(f"Found {len(diffs.files)} file changes:")
        lines.extend(f"- {diff.file} ({diff.change_type})" for diff in diffs.files[:MAX_LISTED_FILES])
        if len(diffs.files) > MAX_LISTED_FILES:
            lines.append(f"... and {len(diffs.files) - MAX_LISTED_FILES} more files")

    lines.extend(["", "## Dependency Changes"])
    if not diffs.dependencies:
        lines.append("No dependency changes detected")
    else:
        lines.append(f"Found {len(diffs.dependencies)} dependency changes:")
        lines.extend(
            f"- {dep.name}: {dep.before or 'added'} → {dep.after or 'removed'}"
            for dep in diffs.dependencies[:MAX_LISTED_DEPENDENCIES]
        )
        if len(diffs.dependencies) > MAX_LISTED_DEPENDENCIES:
            lines.append(f"... and {len(diffs.dependencies) - MAX_LISTED_DEPENDENCIES} more dependencies")
    return "\n".join(lines)


def _command_results(command_results: Sequence[CommandResult]) -> str:
    if not command_results:
        return "No command execution log available"
    lines = []
    for result in command_results:
        status = "SUCCESS" if result.succeeded else f"FAILED (exit {result.exit_code})"
        lines.append(f"- **{result.kind}** `{result.command}`: {status}")
        stderr = result.stderr.strip()
        if stderr:
            suffix = "..." if len(stderr) > MAX_STDERR_CHARS else ""
            lines.append(f"  Error: {stderr[:MAX_STDERR_CHARS]}{suffix}")
    return "\n".join(lines)


def _json_example(categories: Sequence[str]) -> str:
    entries = ",\n".join(
        f'    {{"category": "{slugify_category(category)}", "score": 1-5, "reasoning": "detailed explanation"}}'
        for category in categories
    )
    return (
        "{\n"
        '  "scores": [\n'
        f"{entries}\n"
        "  ],\n"
        '  "overall_assessment": "comprehensive summary of performance across all categories"\n'
        "}"
    )
