"""lint_quiz tool implementation."""
import logging
from pathlib import Path

from quiz_diagnostic.config import Config
from quiz_diagnostic.core.linter import engine
from quiz_diagnostic.core.linter.models import LintReport

logger = logging.getLogger(__name__)


def register(mcp, config: Config):
    """Register quiz lint tools with MCP server."""

    @mcp.tool()
    async def lint_quiz(
        quiz_path: str,
        rules: list[str] | None = None
    ) -> dict:
        """
        Lint a Markdown quiz file before converting it to QTI.

        Raw-text rules:
        - deprecated_bold_marker: **bold** used to mark a correct option (warning)
        - deprecated_prefix_marker: *a) prefix used to mark a correct option (warning)

        Structural rules:
        - too_few_options: choice question with fewer than 2 options (error)
        - missing_correct_answer: choice question with nothing marked correct (error)
        - ambiguous_single_choice: single-answer question with several correct options (warning)
        - missing_stem: question with no text (error)
        - no_questions: no parsable questions at all (error)
        - duplicate_question_ids: question id used twice (error)

        Args:
            quiz_path: Path to the .md quiz file
            rules: List of specific rules to run (default: all rules)

        Returns:
            Dictionary with:
            - source_path (str): Path that was linted
            - total_issues (int): Total issues found
            - warnings (int): Advisory issues
            - errors (int): Issues that block import
            - diagnostics (list): Individual issues with line numbers

        Example:
            {
                "quiz_path": "quizzes/week-03.md"
            }
        """
        path = Path(quiz_path).expanduser()

        if not path.exists():
            return {"error": f"File not found: {path}"}

        if path.suffix.lower() not in (".md", ".markdown"):
            return {"error": f"Expected .md file, got: {path.suffix}"}

        logger.info(f"Linting {path} (rules={rules})")

        try:
            report = await engine.lint_file(
                path, rules=rules, context_width=config.context_width
            )
            return report.to_dict()

        except Exception as e:
            logger.error(f"Lint failed: {e}", exc_info=True)
            return {"error": str(e)}

    @mcp.tool()
    async def lint_quiz_content(
        content: str,
        rules: list[str] | None = None
    ) -> dict:
        """
        Lint Markdown quiz text passed directly (no file needed).

        Args:
            content: The Markdown quiz document
            rules: List of specific rules to run (default: all rules)

        Returns:
            Same shape as lint_quiz, with source_path "<content>".
        """
        report = LintReport(source_path="<content>")
        try:
            for diagnostic in engine.lint_content(
                content, rules=rules, context_width=config.context_width
            ):
                report.add(diagnostic)
        except Exception as e:
            logger.error(f"Lint failed: {e}", exc_info=True)
            return {"error": str(e)}

        logger.info(f"Linted content: {report.errors} errors, {report.warnings} warnings")
        return report.to_dict()

    @mcp.tool()
    async def get_lint_rules() -> dict:
        """
        Get list of available lint rules with descriptions.

        Returns:
            Dictionary mapping rule names to their descriptions.
        """
        return {"rules": engine.get_available_rules()}
