import getpass
import io
import sys
import traceback
from datetime import datetime
from email.utils import format_datetime

from nibbl.nibbl_constants import PROGRAM, VERSION, TokenType
from nibbl.nibbl_lexer import CharacterStream, Lexer, Token
from nibbl.nibbl_parser import parse

PROMPT = ">> "


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):  # no passwd entry and no LOGNAME/USER
        return "stranger"


def print_banner() -> None:
    print(format_datetime(datetime.now().astimezone()))
    print(f"\nHello, {current_user()}")
    print(f"Welcome to {PROGRAM} v{VERSION} on {sys.platform}")


def tokenize(src: str) -> list[Token]:
    lexer = Lexer(CharacterStream(src))
    tokens: list[Token] = []
    while True:
        tok = lexer.next_token()
        if tok.type == TokenType.EOF:
            break
        tokens.append(tok)
    return tokens


def print_parser_errors(errors: list[str]) -> None:
    print("[error] >>> parser errors:")
    for msg in errors:
        print(f"\t{msg}")


def start_repl(verbose: bool = False) -> None:
    print_banner()
    print("Type 'exit' or 'quit' to leave.")

    while True:
        try:
            src = input(PROMPT).strip()
            if not src:
                continue
            if src in ("exit", "quit"):
                print(f"Exiting {PROGRAM} REPL.")
                return
            if src.lower() == "verbose-mode":
                verbose = not verbose
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue

            try:
                if verbose:
                    print(f"[tokens] >>> {tokenize(src)}")
                program, errors = parse(src)
            except Exception:
                print_traceback()
                continue

            if errors:
                print_parser_errors(errors)
                continue
            print(program)

        except (KeyboardInterrupt, EOFError):
            print(f"\nExiting {PROGRAM} REPL.")
            break


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
