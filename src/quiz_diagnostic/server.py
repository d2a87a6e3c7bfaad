"""Quiz Diagnostic MCP Server - Main entry point."""
import logging
import sys

from mcp.server.fastmcp import FastMCP

from quiz_diagnostic.config import Config
from quiz_diagnostic.tools import lint, validate

# Load configuration
config = Config.load()

# Configure logging to stderr (CRITICAL: stdout is reserved for JSON-RPC)
logging.basicConfig(
    level=getattr(logging, config.log_level, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)]
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("quiz-diagnostic")

logger.info(f"Quiz Diagnostic v{config.version} starting...")
logger.info(f"Strict validation by default: {config.strict}")


def main():
    """Main entry point for the MCP server."""
    try:
        logger.info("Registering tools...")
        lint.register(mcp, config)
        validate.register(mcp, config)
        logger.info(
            "Tools registered: lint_quiz, lint_quiz_content, get_lint_rules, "
            "validate_qti_package"
        )

        logger.info("Starting MCP server on stdio...")
        mcp.run(transport="stdio")

    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
