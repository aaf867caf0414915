"""Command-line interface for browsing, submitting and moderating facts.

Provides subcommands for listing and searching facts, submitting new
ones, playing trivia, and the admin commands for moderation.
"""

import argparse
import sys
import textwrap
from getpass import getpass

from .activity_log import configure_logger
from .admin import AdminSession
from .browse import SORT_ORDERS, pick_random, search, sort_facts
from .config import load_config
from .errors import FactsError, NotFound, ValidationError
from .models import CATEGORIES, Fact, SubmittedFact
from .services import Services, build_services
from .trivia import DEFAULT_QUESTIONS, TriviaRound


def _get_services() -> Services:
    """Create services with config loaded from disk and the environment."""
    config = load_config()
    activity = configure_logger(config.log_dir)
    activity.set_actor("cli")
    return build_services(config, activity=activity)


def _format_fact(fact: Fact | SubmittedFact) -> str:
    """Format a fact for display."""
    header = f"[{fact.id}] {fact.category}"
    if fact.submitted_by:
        header += f" (by {fact.submitted_by})"
    body = textwrap.indent(textwrap.fill(fact.text, width=76), "    ")
    lines = [header, body]
    if fact.source:
        lines.append(f"    Source: {fact.source}")
    return "\n".join(lines)


def _login(services: Services, args: argparse.Namespace) -> AdminSession | None:
    """Log in as admin with --password or an interactive prompt."""
    password = args.password if args.password is not None else getpass("Admin password: ")
    session = services.admin_session()
    if not session.login(password):
        print("Error: Incorrect password.")
        return None
    return session


def cmd_list(args: argparse.Namespace, services: Services) -> int:
    """List published facts."""
    if args.category:
        facts = services.repository.list_published_by_category(args.category)
    else:
        facts = services.repository.list_published()

    if args.search:
        facts = search(facts, args.search)
    facts = sort_facts(facts, args.sort)

    if not facts:
        print("No facts found.")
        return 0

    for fact in facts:
        print(_format_fact(fact))
    print(f"\nTotal: {len(facts)} fact(s)")
    return 0


def cmd_random(args: argparse.Namespace, services: Services) -> int:
    """Show one random fact."""
    if args.category:
        facts = services.repository.list_published_by_category(args.category)
    else:
        facts = services.repository.list_published()

    fact = pick_random(facts)
    if fact is None:
        print("No facts found.")
        return 0
    print(_format_fact(fact))
    return 0


def cmd_categories(args: argparse.Namespace, services: Services) -> int:
    """List the categories."""
    for category in CATEGORIES:
        print(category)
    return 0


def cmd_submit(args: argparse.Namespace, services: Services) -> int:
    """Submit a fact for review."""
    submission = services.repository.submit(
        text=args.text,
        category=args.category,
        submitted_by=args.name,
        source=args.source,
    )
    print(f"✓ Thank you! Your fact was submitted for review (id {submission.id}).")
    return 0


def cmd_pending(args: argparse.Namespace, services: Services) -> int:
    """List submissions waiting for moderation."""
    if _login(services, args) is None:
        return 1

    pending = services.repository.list_pending()
    if not pending:
        print("No pending submissions.")
        return 0

    for submission in pending:
        print(_format_fact(submission))
    print(f"\nTotal: {len(pending)} pending submission(s)")
    return 0


def cmd_approve(args: argparse.Namespace, services: Services) -> int:
    """Approve one or all pending submissions."""
    session = _login(services, args)
    if session is None:
        return 1

    workflow = services.workflow(session)
    if args.all:
        count = workflow.approve_all()
        print(f"✓ Approved {count} submission(s).")
        return 0

    if not args.id:
        print("Error: Give a submission id or --all.")
        return 1

    fact = workflow.approve(args.id)
    print(f"✓ Approved submission {args.id}, published as fact {fact.id}.")
    return 0


def cmd_reject(args: argparse.Namespace, services: Services) -> int:
    """Reject one or all pending submissions."""
    session = _login(services, args)
    if session is None:
        return 1

    workflow = services.workflow(session)
    if args.all:
        count = workflow.reject_all()
        print(f"✓ Rejected {count} submission(s).")
        return 0

    if not args.id:
        print("Error: Give a submission id or --all.")
        return 1

    workflow.reject(args.id)
    print(f"✓ Rejected submission {args.id}.")
    return 0


def cmd_add(args: argparse.Namespace, services: Services) -> int:
    """Publish a fact directly."""
    if _login(services, args) is None:
        return 1

    fact = services.repository.create(
        text=args.text,
        category=args.category,
        source=args.source,
        submitted_by=args.name,
    )
    print(f"✓ Added fact {fact.id}.")
    return 0


def cmd_edit(args: argparse.Namespace, services: Services) -> int:
    """Edit a published fact."""
    if _login(services, args) is None:
        return 1

    changes = {
        name: value
        for name, value in (
            ("text", args.text),
            ("category", args.category),
            ("source", args.source),
        )
        if value is not None
    }
    if not changes:
        print("Error: Nothing to change. Use --text, --category or --source.")
        return 1

    fact = services.repository.update(args.id, **changes)
    print(f"✓ Updated fact {fact.id}.")
    return 0


def cmd_delete(args: argparse.Namespace, services: Services) -> int:
    """Delete a published fact."""
    if _login(services, args) is None:
        return 1

    services.repository.delete(args.id)
    print(f"✓ Deleted fact {args.id}.")
    return 0


def cmd_set_password(args: argparse.Namespace, services: Services) -> int:
    """Change the admin password."""
    if _login(services, args) is None:
        return 1

    new_password = getpass("New password: ")
    confirm = getpass("Confirm new password: ")
    services.gate.change_password(new_password, confirm)
    print("✓ Admin password updated.")
    return 0


def _toggle(label: str, toggle, fact_id: str) -> int:
    active = toggle(fact_id)
    print(f"{'✓' if active else '✗'} Fact {fact_id} {label if active else 'un' + label}.")
    return 0


def cmd_bookmark(args: argparse.Namespace, services: Services) -> int:
    """Bookmark or un-bookmark a fact."""
    return _toggle("bookmarked", services.preferences.toggle_bookmark, args.id)


def cmd_like(args: argparse.Namespace, services: Services) -> int:
    """Like or un-like a fact."""
    return _toggle("liked", services.preferences.toggle_like, args.id)


def cmd_dislike(args: argparse.Namespace, services: Services) -> int:
    """Dislike or un-dislike a fact."""
    return _toggle("disliked", services.preferences.toggle_dislike, args.id)


def cmd_bookmarks(args: argparse.Namespace, services: Services) -> int:
    """List bookmarked facts."""
    facts = services.preferences.bookmarked_facts(services.repository.list_published())
    if not facts:
        print("No bookmarks yet.")
        return 0

    for fact in facts:
        print(_format_fact(fact))
    return 0


def cmd_trivia(args: argparse.Namespace, services: Services) -> int:
    """Play a round of true-or-false trivia."""
    game = TriviaRound(services.repository.list_published(), total_questions=args.questions)

    while not game.finished:
        question = game.question
        assert question is not None
        print(f"\nQuestion {game.current + 1}/{game.total}  Score: {game.score}")
        print(textwrap.fill(question.text, width=76))

        answer = ""
        while answer not in ("t", "f"):
            try:
                answer = input("True or false? [t/f] ").strip().lower()[:1]
            except EOFError:
                print("\n👋 Goodbye!")
                return 0

        if game.answer(answer == "t"):
            print("Correct! Well done! 🎉")
        else:
            print("Incorrect. Better luck next time! 💪")
        print(f"This fact is {'TRUE' if question.is_true else 'FALSE'}!")

    print(f"\n{game.verdict}")
    print(f"You scored {game.score} out of {game.total} ({game.percentage}%)")
    print(f"Best streak: {game.best_streak}")
    return 0


def cmd_serve(args: argparse.Namespace, services: Services) -> int:
    """Run the HTTP API."""
    from .web import create_app

    if services.activity is not None:
        services.activity.set_actor("web")
    app = create_app(services=services)
    app.run(host=args.host, port=args.port, debug=args.debug)
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the facts CLI."""
    parser = argparse.ArgumentParser(
        prog="facts",
        description="Browse, submit and moderate useless but interesting facts",
    )

    subparsers = parser.add_subparsers(dest="command", help="Sub-command help")

    # admin commands share the password option
    admin = argparse.ArgumentParser(add_help=False)
    admin.add_argument(
        "-p", "--password",
        help="Admin password (prompted if omitted)",
    )

    list_parser = subparsers.add_parser("list", help="List published facts")
    list_parser.add_argument("-c", "--category", help="Only this category")
    list_parser.add_argument("-s", "--search", help="Only facts containing this text")
    list_parser.add_argument(
        "--sort",
        choices=SORT_ORDERS,
        default="newest",
        help="Sort order (default: newest)",
    )

    random_parser = subparsers.add_parser("random", help="Show a random fact")
    random_parser.add_argument("-c", "--category", help="Only this category")

    subparsers.add_parser("categories", help="List categories")

    submit_parser = subparsers.add_parser("submit", help="Submit a fact for review")
    submit_parser.add_argument("text", help="The fact")
    submit_parser.add_argument("-c", "--category", required=True, help="Category of the fact")
    submit_parser.add_argument("-n", "--name", required=True, help="Your name")
    submit_parser.add_argument("--source", help="Where the fact comes from")

    subparsers.add_parser("pending", parents=[admin], help="List pending submissions")

    for name, help_text in (("approve", "Approve a submission"), ("reject", "Reject a submission")):
        moderation_parser = subparsers.add_parser(name, parents=[admin], help=help_text)
        moderation_parser.add_argument("id", nargs="?", help="Submission id")
        moderation_parser.add_argument(
            "--all",
            action="store_true",
            help="Apply to every pending submission",
        )

    add_parser = subparsers.add_parser("add", parents=[admin], help="Publish a fact directly")
    add_parser.add_argument("text", help="The fact")
    add_parser.add_argument("-c", "--category", required=True, help="Category of the fact")
    add_parser.add_argument("-n", "--name", help="Credit the fact to this name")
    add_parser.add_argument("--source", help="Where the fact comes from")

    edit_parser = subparsers.add_parser("edit", parents=[admin], help="Edit a published fact")
    edit_parser.add_argument("id", help="Fact id")
    edit_parser.add_argument("--text", help="New text")
    edit_parser.add_argument("-c", "--category", help="New category")
    edit_parser.add_argument("--source", help="New source")

    delete_parser = subparsers.add_parser("delete", parents=[admin], help="Delete a published fact")
    delete_parser.add_argument("id", help="Fact id")

    subparsers.add_parser("set-password", parents=[admin], help="Change the admin password")

    for name, help_text in (
        ("bookmark", "Bookmark or un-bookmark a fact"),
        ("like", "Like or un-like a fact"),
        ("dislike", "Dislike or un-dislike a fact"),
    ):
        toggle_parser = subparsers.add_parser(name, help=help_text)
        toggle_parser.add_argument("id", help="Fact id")

    subparsers.add_parser("bookmarks", help="List bookmarked facts")

    trivia_parser = subparsers.add_parser("trivia", help="Play true-or-false trivia")
    trivia_parser.add_argument(
        "-q", "--questions",
        type=int,
        default=DEFAULT_QUESTIONS,
        help=f"Number of questions (default: {DEFAULT_QUESTIONS})",
    )

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=5000, help="Port")
    serve_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")

    return parser


COMMANDS = {
    "list": cmd_list,
    "random": cmd_random,
    "categories": cmd_categories,
    "submit": cmd_submit,
    "pending": cmd_pending,
    "approve": cmd_approve,
    "reject": cmd_reject,
    "add": cmd_add,
    "edit": cmd_edit,
    "delete": cmd_delete,
    "set-password": cmd_set_password,
    "bookmark": cmd_bookmark,
    "like": cmd_like,
    "dislike": cmd_dislike,
    "bookmarks": cmd_bookmarks,
    "trivia": cmd_trivia,
    "serve": cmd_serve,
}


def run_cli(argv: list[str] | None = None) -> int:
    """Run the facts CLI with given arguments.

    Args:
        argv: Command-line arguments. Uses sys.argv[1:] if None.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        services = _get_services()
    except ValueError as e:
        print(f"Error: Invalid configuration: {e}")
        return 1

    try:
        return handler(args, services)
    except ValidationError as e:
        print(f"Error: {e}")
        return 1
    except NotFound as e:
        print(f"Error: {e}")
        return 1
    except FactsError as e:
        print(f"Error: Operation failed: {e}")
        if services.activity is not None:
            services.activity.log_failure(args.command, e)
        return 1
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    finally:
        services.close()


if __name__ == "__main__":
    sys.exit(run_cli())
