"""Entry point for lexinav."""

import logging
import sys
from pathlib import Path

from .app import run_app
from .config import Config
from .lexicon import Lemma, Lexicon, LexiconAccess
from .navigation import navigate

logger = logging.getLogger(__name__)


def setup_logging(config: Config) -> None:
    """Send log records to a file; the terminal belongs to the UI."""
    log_path = config.get_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=log_path,
        level=getattr(logging, config.logging.level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def resolve(lexicon: Lexicon, lemma_id: str) -> Lemma:
    """Look up a configured lemma id, falling back to the lexicon root."""
    if not lemma_id:
        return lexicon.root
    lemma = lexicon.get(lemma_id)
    if lemma is None:
        logger.warning("Unknown lemma %s, using %s", lemma_id, lexicon.root)
        return lexicon.root
    return lemma


def main() -> int:
    """Main entry point for lexinav."""
    try:
        # Load configuration
        config = Config.load()
        if len(sys.argv) > 1:
            config.lexicon_path = Path(sys.argv[1]).expanduser()

        setup_logging(config)

        # Load the lexicon and open a session on it
        lexicon = Lexicon.load(config.lexicon_path)
        access = LexiconAccess(lexicon)
        state = navigate(
            resolve(lexicon, config.focus),
            access,
            root=resolve(lexicon, config.root) if config.root else None,
        )

        # Run the application
        run_app(config, access, state)

        return 0
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        logger.exception("lexinav failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
