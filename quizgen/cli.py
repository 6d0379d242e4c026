"""
Terminal front end: account commands, quiz generation and taking quizzes
"""
import argparse
import getpass
import logging
import os
import sys
from typing import Callable, List, Optional

from quizgen.client.api_client import ApiError, QuizApiClient
from quizgen.client.attempt import AttemptResult, AttemptStateError, InvalidAnswerError, Phase, QuizAttempt
from quizgen.client.messages import friendly_message
from quizgen.client.session import Session, TokenStore
from quizgen.schemas.quiz import QuizOut

logger = logging.getLogger(__name__)

DEFAULT_API_URL = os.environ.get("QUIZGEN_API_URL", "http://localhost:8000")
OPTION_LABELS = "12345678"

PROMPT_HELP = "[1-4] select  [c] check  [n] next  [p] previous  [q] quit"


def render_question(attempt: QuizAttempt, difficulty: str = "") -> str:
    question = attempt.current_question
    header = f"Question {attempt.index + 1} of {attempt.total}"
    if difficulty:
        header += f"  ({difficulty})"
    lines = [header, "", question.question, ""]

    revealed = attempt.phase is Phase.REVEALED
    selected = attempt.selected()
    for label, option in zip(OPTION_LABELS, question.options):
        marker = " "
        if option == selected:
            marker = ">"
        if revealed and option == question.correct_answer:
            marker = "+"
        elif revealed and option == selected:
            marker = "x"
        lines.append(f" {marker} {label}. {option}")

    if revealed:
        lines += ["", f"Explanation: {question.explanation}"]
    return "\n".join(lines)


def render_summary(result: AttemptResult) -> str:
    lines = [
        "Quiz Results",
        f"{result.score}/{result.total}",
        f"{result.percentage}% - {result.message}",
        "",
    ]
    for item in result.questions:
        status = "correct" if item.is_correct else "wrong"
        lines.append(f"Question {item.index + 1}: {item.question} [{status}]")
        lines.append(f"  Your answer: {item.selected if item.selected is not None else '(none)'}")
        if not item.is_correct:
            lines.append(f"  Correct answer: {item.correct_answer}")
        if item.explanation:
            lines.append(f"  {item.explanation}")
    return "\n".join(lines)


def run_attempt(
    attempt: QuizAttempt,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
    difficulty: str = ""
) -> Optional[AttemptResult]:
    """
    Drive one attempt from keyboard commands

    Returns the result once completed, or None when the user quits.
    """
    while not attempt.is_completed:
        write(render_question(attempt, difficulty))
        try:
            command = read(f"{PROMPT_HELP}\n> ").strip()
        except EOFError:
            return None

        try:
            if command.lower() == "q":
                return None
            elif command.lower() == "c":
                attempt.reveal()
            elif command.lower() == "n":
                attempt.next()
            elif command.lower() == "p":
                attempt.prev()
            elif len(command) == 1 and command in OPTION_LABELS:
                position = OPTION_LABELS.index(command)
                options = attempt.current_question.options
                if position >= len(options):
                    write("No such option")
                    continue
                attempt.select(options[position])
            else:
                write("Unknown command")
        except (AttemptStateError, InvalidAnswerError) as e:
            write(str(e))

    return attempt.result()


def take_quiz(
    quiz: QuizOut,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print
) -> None:
    """Run attempts until the user stops asking to try again"""
    attempt = QuizAttempt(quiz.questions)
    write(f"{quiz.title} ({quiz.difficulty}, {len(quiz.questions)} questions)")

    while True:
        result = run_attempt(attempt, read, write, quiz.difficulty)
        if result is None:
            return
        write(render_summary(result))
        try:
            again = read("Try again? [y/N] ")
        except EOFError:
            return
        if again.strip().lower() != "y":
            return
        attempt.reset()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="quizgen", description="Generate and take AI quizzes")
    parser.add_argument("--api-url", default=DEFAULT_API_URL, help="API base URL")
    parser.add_argument("--token-file", default=None, help="Where the login token is kept")
    parser.add_argument("-v", "--verbose", action="store_true")

    sub = parser.add_subparsers(dest="command", required=True)

    for name in ("register", "login"):
        p = sub.add_parser(name)
        p.add_argument("email")

    sub.add_parser("logout")
    sub.add_parser("whoami")

    p = sub.add_parser("generate", help="Generate a quiz")
    p.add_argument("topic")
    p.add_argument("-d", "--difficulty", default="medium", choices=["easy", "medium", "hard"])
    p.add_argument("-n", "--count", type=int, default=5, help="Number of questions (1-20)")
    p.add_argument("--take", action="store_true", help="Start the quiz right away")

    sub.add_parser("list", help="List your quizzes")

    p = sub.add_parser("take", help="Take a stored quiz")
    p.add_argument("quiz_id")

    p = sub.add_parser("delete", help="Delete a quiz")
    p.add_argument("quiz_id")

    p = sub.add_parser("email", help="Change your email")
    p.add_argument("new_email")

    sub.add_parser("password", help="Change your password")
    return parser


def _read_new_password() -> str:
    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Confirm password: "):
        raise ApiError("Passwords do not match", "VALIDATION_ERROR")
    return password


def dispatch(args: argparse.Namespace, client: QuizApiClient) -> None:
    if args.command in ("register", "login"):
        if args.command == "register":
            user = client.register(args.email, _read_new_password())
        else:
            user = client.login(args.email, getpass.getpass("Password: "))
        print(f"Logged in as {user['email']}")
        return

    if args.command == "logout":
        client.logout()
        print("Logged out")
        return

    if not client.session.is_authenticated:
        print("Not logged in. Run 'quizgen login <email>' first.")
        return

    if args.command == "whoami":
        print(client.me()["email"])
    elif args.command == "generate":
        print(f"Generating {args.count} {args.difficulty} questions about {args.topic}...")
        quiz = client.generate_quiz(args.topic, args.difficulty, args.count)
        print(f"Created quiz {quiz.id}")
        if args.take:
            take_quiz(quiz)
    elif args.command == "list":
        quizzes = client.list_quizzes()
        if not quizzes:
            print("No quizzes yet")
        for quiz in quizzes:
            print(f"{quiz.id}  {quiz.created_at:%Y-%m-%d}  {quiz.difficulty:<6}  "
                  f"{len(quiz.questions):>2}q  {quiz.title}")
    elif args.command == "take":
        take_quiz(client.get_quiz(args.quiz_id))
    elif args.command == "delete":
        client.delete_quiz(args.quiz_id)
        print("Quiz deleted")
    elif args.command == "email":
        print(f"Email updated to {client.update_email(args.new_email)['email']}")
    elif args.command == "password":
        current = getpass.getpass("Current password: ")
        client.update_password(current, _read_new_password())
        print("Password updated")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    store = TokenStore(args.token_file)
    client = QuizApiClient.connect(args.api_url, Session.from_store(store))

    try:
        dispatch(args, client)
    except ApiError as e:
        print(friendly_message(e, login=args.command == "login"), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    except EOFError:
        print(file=sys.stderr)
        return 1
    finally:
        client.http.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
