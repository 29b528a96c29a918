"""Load prompt files from the package's prompts/ directory.

Prompts are stored as .md files under ``visit_evaluator/prompts/`` so the
rubric text can be reviewed and diffed on its own.  Callers load them by
name::

    from visit_evaluator.prompt_loader import load_prompt

    template = load_prompt("evaluation_task")
"""

from pathlib import Path

PROMPTS_DIR = Path(__file__).resolve().parent / "prompts"


def load_prompt(prompt_name: str) -> str:
    """Read a prompt markdown file from the package's prompts directory.

    Args:
        prompt_name: Name of the prompt (without .md extension).

    Returns:
        The prompt text.

    Raises:
        FileNotFoundError: If the prompt file does not exist.
    """
    prompt_path = PROMPTS_DIR / f"{prompt_name}.md"
    return prompt_path.read_text(encoding="utf-8")
