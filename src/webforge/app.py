import logging
import sys

from webforge.core.handlers.analyze_handler import handle_command

logger = logging.getLogger(__name__)


def main() -> None:
    """Console entry point of the webforge analyzer."""
    try:
        code = handle_command(sys.argv[1:])
    except KeyboardInterrupt:
        print("\nInterrupted.")
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    main()
