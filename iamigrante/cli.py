"""CLI interface for IA Migrante"""

import sys
import time
import threading
import argparse
import logging
import textwrap
from colorama import init, Fore, Style

from . import config
from .agent import ImmigrationAgent
from .store import reset_database
from . import __version__, __author__, __powered_by__

# Initialize colorama for Windows support
init(autoreset=True)

logger = logging.getLogger(__name__)


# ── Typewriter helper ────────────────────────────────────────────────────────
def _typewrite(text: str, color: str = Fore.WHITE, delay: float = 0.010, end: str = '\n'):
    """Print text with a typewriter effect, one character at a time."""
    if len(text) > 400:
        delay = 0.003
    elif len(text) > 200:
        delay = 0.006
    sys.stdout.write(color)
    sys.stdout.flush()
    for ch in text:
        sys.stdout.write(ch)
        sys.stdout.flush()
        time.sleep(delay)
    sys.stdout.write(Style.RESET_ALL + end)
    sys.stdout.flush()


# ── Spinner ──────────────────────────────────────────────────────────────────
class _Spinner:
    """Animated braille spinner that runs in a background thread."""
    _FRAMES = ('⠋', '⠙', '⠹', '⠸', '⠼', '⠴', '⠦', '⠧', '⠇', '⠏')

    def __init__(self, message: str, color: str = Fore.YELLOW):
        self.message = message
        self.color   = color
        self._stop   = threading.Event()
        self._thread = threading.Thread(target=self._spin, daemon=True)

    def _spin(self):
        i = 0
        while not self._stop.is_set():
            frame = self._FRAMES[i % len(self._FRAMES)]
            sys.stdout.write(
                f"\r{self.color}  {frame}  {self.message}{Style.RESET_ALL}   "
            )
            sys.stdout.flush()
            time.sleep(0.09)
            i += 1

    def start(self):
        self._thread.start()
        return self

    def stop(self):
        self._stop.set()
        self._thread.join()
        sys.stdout.write('\r' + ' ' * (len(self.message) + 14) + '\r')
        sys.stdout.flush()

    def __enter__(self):
        return self.start()

    def __exit__(self, *_):
        self.stop()


# Where each answer came from, shown under the response
_SOURCE_LABELS = {
    'curated':    "curated answer",
    'cache':      "recent answer (cache)",
    'store':      "answer history",
    'knowledge':  "knowledge base",
    'generative': f"{config.OLLAMA_MODEL} via Ollama",
    'keyword':    "topic guide",
    'fallback':   "general guidance",
}


class IAMigranteCLI:
    """Interactive CLI for the IA Migrante agent"""

    def __init__(self, force: bool = None, typewriter: bool = True):
        self.agent = None
        self.running = False
        self.force = force
        self.typewriter = typewriter

    def print_banner(self):
        """Print welcome banner."""
        W = 62

        def _row(label: str, value: str, vcol: str) -> str:
            inner = f"  {Fore.WHITE}{label}{vcol}{value}"
            pad   = W - 2 - len(label) - len(value)
            return f"{Fore.BLUE}║{inner}{' ' * max(pad, 0)}{Fore.BLUE}║{Style.RESET_ALL}"

        title_text = '·  I A   M I G R A N T E  ·'
        sub_text   = 'Asistente de inmigración · Immigration assistant'

        lines = [
            "",
            f"{Fore.BLUE}╔{'═' * W}╗{Style.RESET_ALL}",
            f"{Fore.BLUE}║{' ' * W}║{Style.RESET_ALL}",
            f"{Fore.BLUE}║{Fore.CYAN + Style.BRIGHT}{title_text:^{W}}{Style.RESET_ALL}{Fore.BLUE}║{Style.RESET_ALL}",
            f"{Fore.BLUE}║{Fore.YELLOW}{sub_text:^{W}}{Style.RESET_ALL}{Fore.BLUE}║{Style.RESET_ALL}",
            f"{Fore.BLUE}║{' ' * W}║{Style.RESET_ALL}",
            f"{Fore.BLUE}║{'─' * W}║{Style.RESET_ALL}",
            _row("Developed by  : ", __author__,    Fore.GREEN),
            _row("Powered by    : ", __powered_by__, Fore.CYAN),
            _row("Version       : ", f"v{__version__}", Fore.WHITE),
            f"{Fore.BLUE}╚{'═' * W}╝{Style.RESET_ALL}",
            "",
        ]
        for line in lines:
            print(line)

    def print_help(self):
        bar = f"{Fore.CYAN}{'─' * 60}{Style.RESET_ALL}"
        print(f"\n{bar}")
        print(f"{Fore.CYAN + Style.BRIGHT}  Commands{Style.RESET_ALL}")
        print(bar)

        for cmd, desc in [
            ("help",    "Show this help message"),
            ("stats",   "Show knowledge base, cache and history statistics"),
            ("version", "Show version and credits"),
            ("clear",   "Forget cached and stored answers"),
            ("quit",    "Exit the application"),
        ]:
            print(f"  {Fore.GREEN}{cmd:<10}{Style.RESET_ALL}{Fore.WHITE}{desc}{Style.RESET_ALL}")

        print(f"\n{Fore.CYAN + Style.BRIGHT}  Examples{Style.RESET_ALL}")
        for ex in [
            "¿Qué es una visa de trabajo?",
            "¿Cómo solicitar asilo?",
            "Can I adjust status with an I-485 after an overstay?",
        ]:
            print(f"  {Fore.YELLOW}›{Style.RESET_ALL} {ex}")
        print(f"{bar}\n")

    def print_response(self, text: str, source: str = ''):
        sep   = f"{Fore.GREEN}{'─' * 62}{Style.RESET_ALL}"
        label = f"{Fore.GREEN + Style.BRIGHT}  {config.CLI_ASSISTANT}{Style.RESET_ALL}"
        print(f"\n{sep}")
        print(label)
        print(sep)

        for raw_line in text.splitlines():
            chunks = textwrap.wrap(raw_line, width=config.CLI_WIDTH) if raw_line.strip() else [raw_line]
            for line in chunks:
                if self.typewriter and line.strip():
                    _typewrite(line, Fore.WHITE)
                else:
                    print(f"{Fore.WHITE}{line}{Style.RESET_ALL}")

        print(sep)
        if source:
            print(f"{Fore.CYAN}  Source: {_SOURCE_LABELS.get(source, source)}{Style.RESET_ALL}")
        print()

    def print_error(self, error: str):
        print(f"\n{Fore.RED}  ✗  {error}{Style.RESET_ALL}\n")

    def get_input(self) -> str:
        try:
            prompt = (
                f"{Fore.LIGHTBLUE_EX}  ╰─{Style.RESET_ALL}"
                f"{Fore.LIGHTBLUE_EX + Style.BRIGHT} Pregunta {Style.RESET_ALL}"
                f"{Fore.LIGHTBLUE_EX}›{Style.RESET_ALL} "
            )
            return input(prompt).strip()
        except (KeyboardInterrupt, EOFError):
            return "quit"

    def initialize_agent(self) -> bool:
        sp = _Spinner("Initializing IA Migrante…", Fore.YELLOW).start()
        try:
            config.ensure_dirs()
            self.agent = ImmigrationAgent.from_config(force_regenerate=self.force)
            sp.stop()
            print(f"{Fore.GREEN}  ✓  Ready!{Style.RESET_ALL}\n")
            return True
        except Exception as e:
            sp.stop()
            self.print_error(f"Failed to initialize: {e}")
            logger.exception("Initialization error")
            return False

    def answer_once(self, question: str) -> str:
        """Answer a single question with a spinner; used by both modes."""
        with _Spinner("Pensando… / Thinking…", Fore.CYAN):
            response = self.agent.answer(question)
        self.print_response(response, self.agent.last_source)
        return response

    def handle_command(self, command: str):
        """
        Handle special commands.
        Returns True to continue, False to exit, None if not a command.
        """
        cmd = command.lower()

        if cmd in ('quit', 'exit', 'q', 'salir'):
            print(f"\n{Fore.BLUE}  ¡Hasta pronto! Goodbye!{Style.RESET_ALL}\n")
            return False

        if cmd in ('help', 'ayuda'):
            self.print_help()
            return True

        if cmd == 'version':
            self.print_version()
            return True

        if cmd in ('stats', 'statistics', 'info'):
            print(f"\n{self.agent.format_statistics()}\n")
            return True

        if cmd == 'clear':
            confirm = input(
                f"{Fore.YELLOW}  Forget all cached and stored answers? (yes/no): {Style.RESET_ALL}"
            ).lower()
            if confirm in ('yes', 'si', 'sí'):
                self.agent.clear_memory()
                print(f"{Fore.GREEN}  ✓  History cleared{Style.RESET_ALL}\n")
            else:
                print(f"{Fore.CYAN}  Cancelled.{Style.RESET_ALL}\n")
            return True

        return None  # Not a command

    def run(self):
        """Main CLI loop."""
        self.print_banner()
        self.print_help()

        if not self.initialize_agent():
            return

        self.running = True
        while self.running:
            try:
                user_input = self.get_input()
                if not user_input:
                    continue

                result = self.handle_command(user_input)
                if result is False:
                    break
                if result is True:
                    continue

                try:
                    self.answer_once(user_input)
                except Exception as e:
                    self.print_error(f"Failed to process question: {e}")
                    logger.exception("Query error")

            except KeyboardInterrupt:
                print(f"\n{Fore.YELLOW}  Use 'quit' to exit.{Style.RESET_ALL}\n")

        self.agent.close()

    def print_version(self):
        print()
        print(f"{Fore.CYAN + Style.BRIGHT}  IA Migrante v{__version__}{Style.RESET_ALL}")
        print(f"  {Fore.GREEN}Developer : {__author__}{Style.RESET_ALL}")
        print(f"  {Fore.CYAN}Powered by: {__powered_by__}{Style.RESET_ALL}")
        print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="iamigrante",
        description="IA Migrante — immigration question answering assistant",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            f"Developed by: {__author__}\n"
            f"Powered by:   {__powered_by__}\n"
            f"Version:      {__version__}"
        ),
    )
    parser.add_argument(
        "question",
        nargs="?",
        help="Question to answer; starts the interactive assistant when omitted",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Delete the answer history database before starting",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        default=None,
        help="Skip cache, history and knowledge base (same as FORCE_NEW_RESPONSE=1)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logging",
    )
    parser.add_argument(
        "--no-typewriter",
        dest="typewriter",
        action="store_false",
        help="Print answers at once",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"IA Migrante v{__version__}",
    )
    return parser


def main(argv=None):
    """Main entry point: one-shot question or interactive mode"""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s: %(name)s: %(message)s')
        logging.getLogger().setLevel(logging.DEBUG)

    if args.reset:
        reset_database(config.DB_PATH)
        print(f"{Fore.YELLOW}  History database removed.{Style.RESET_ALL}")

    cli = IAMigranteCLI(force=args.force, typewriter=args.typewriter)

    if args.question is not None:
        if not args.question.strip():
            cli.print_error("Question must not be empty")
            sys.exit(1)
        if not cli.initialize_agent():
            sys.exit(1)
        print(f"{Fore.WHITE}Pregunta: {args.question}{Style.RESET_ALL}")
        try:
            cli.answer_once(args.question)
        finally:
            cli.agent.close()
        return

    try:
        cli.run()
    except Exception as e:
        print(f"{Fore.RED}Fatal error: {e}{Style.RESET_ALL}")
        logging.exception("Fatal error")
        sys.exit(1)


if __name__ == "__main__":
    main()
