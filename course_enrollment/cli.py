# course_enrollment/cli.py
"""Command-line front end for the enrollment API.

The session (user + token) is kept in SESSION_FILE between runs, so
``login`` once and then run the other commands.
"""
from __future__ import annotations

import argparse
import getpass
import logging
import sys
from typing import Iterable, List, Optional

from course_enrollment.core.config import settings
from course_enrollment.core.logging import setup_logging
from course_enrollment.client.api import ApiClient
from course_enrollment.client.auth import AuthContext, FileSessionStore
from course_enrollment.client.courses import SESSION_FIELDS, CourseForm, CourseManagement
from course_enrollment.client.enrollment_review import EnrollmentReviewFlow
from course_enrollment.client.errors import AuthExpired, ClientError, LocalValidationError
from course_enrollment.client.navigation import views_for
from course_enrollment.client.status_views import STATUS_MESSAGES, MyEnrollmentsView, NotificationsView
from course_enrollment.schemas.course import Course
from course_enrollment.schemas.enrollment import Enrollment
from course_enrollment.services.enrollment_workflow import FILTERS

logger = logging.getLogger(__name__)


class Console:
    """Notice sink: prints each message once to stderr."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stderr
        self.shown: List[str] = []

    def notice(self, message: str) -> None:
        self.shown.append(message)
        print(f"! {message}", file=self.stream)

    def error(self, message: str) -> None:
        if message not in self.shown:
            self.notice(message)


# ---------------------------
# rendering
# ---------------------------

def _fmt_course(c: Course) -> str:
    lines = [f"[{c.id}] {c.title}"]
    if c.description:
        lines.append(f"    {c.description}")
    if c.schedule:
        lines.append(f"    Schedule: {c.schedule}")
    if c.start_date and c.end_date:
        lines.append(f"    Dates: {c.start_date.isoformat()} - {c.end_date.isoformat()}")
    for s in c.sessions:
        lines.append(f"    session {s.id}: {s.status.value} {s.start_time:%H:%M}-{s.end_time:%H:%M}")
    return "\n".join(lines)


def _fmt_enrollment(e: Enrollment, *, with_user: bool) -> str:
    title = e.course.title if e.course else f"course #{e.course_id}"
    who = f" by {e.user.name} <{e.user.email}>" if with_user and e.user else ""
    extra = []
    if e.selected_date:
        extra.append(f"date {e.selected_date.isoformat()}")
    if e.selected_session_id:
        chosen = e.course.session_by_id(e.selected_session_id) if e.course else None
        if chosen is not None:
            extra.append(f"{chosen.status.value} session {chosen.start_time:%H:%M}-{chosen.end_time:%H:%M}")
        else:
            extra.append(f"session {e.selected_session_id}")
    suffix = f" ({', '.join(extra)})" if extra else ""
    return f"[{e.id}] {e.status.value:<8} {title}{who}{suffix}"


def _print_counts(counts) -> None:
    print("  ".join(f"{k}: {v}" for k, v in counts.items()))


def _print_all(lines: Iterable[str], empty: str) -> None:
    lines = list(lines)
    print("\n".join(lines) if lines else empty)


# ---------------------------
# commands
# ---------------------------

def cmd_login(args, api: ApiClient, auth: AuthContext) -> int:
    password = args.password or getpass.getpass("Password: ")
    user = api.auth.login(args.email, password)
    print(f"Logged in as {user.name} ({user.role.value})")
    return 0


def cmd_register(args, api: ApiClient, auth: AuthContext) -> int:
    password = args.password or getpass.getpass("Password: ")
    confirmation = args.password if args.password else getpass.getpass("Confirm password: ")
    user = api.auth.register(args.name, args.email, password, confirmation)
    print(f"Registered and logged in as {user.name} ({user.role.value})")
    return 0


def cmd_logout(args, api: ApiClient, auth: AuthContext) -> int:
    api.auth.logout()
    print("Logged out")
    return 0


def cmd_whoami(args, api: ApiClient, auth: AuthContext) -> int:
    if not auth.is_authenticated:
        print("Not logged in")
    else:
        print(f"{auth.user.name} <{auth.user.email}> ({auth.user.role.value})")
    print("Views: " + ", ".join(item.label for item in views_for(auth)))
    return 0


def _fill_form(form: CourseForm, args) -> None:
    for name in ("title", "description", "schedule"):
        value = getattr(args, name)
        if value is not None:
            setattr(form, name, value)
    form.set_dates(args.start if args.start is not None else form.start_date,
                   args.end if args.end is not None else form.end_date)
    if args.session is not None:
        form.sessions = []
        for raw in args.session:
            parts = [p.strip() for p in raw.split(",")]
            if len(parts) != 3:
                raise LocalValidationError(f"Invalid --session '{raw}', expected SLOT,START,END")
            form.add_session()
            index = len(form.sessions) - 1
            for name, value in zip(SESSION_FIELDS, parts):
                form.update_session(index, name, value)


def cmd_courses(args, api: ApiClient, auth: AuthContext) -> int:
    view = CourseManagement(api, auth)
    if args.action == "list":
        _print_all((_fmt_course(c) for c in view.refresh()), "No courses yet.")
        return 0
    if args.action == "delete":
        view.delete(args.id)
        print(f"Deleted course {args.id}")
        return 0

    if args.action == "create":
        form = view.start_create()
    else:
        view.refresh()
        form = view.start_edit(args.id)
    _fill_form(form, args)
    saved = view.save()
    print(_fmt_course(saved))
    return 0


def _session_choice(value: str) -> Optional[int]:
    if value == "all":
        return None
    try:
        return int(value)
    except ValueError:
        raise LocalValidationError(f"Invalid session '{value}', expected an id or 'all'.")


def cmd_enroll(args, api: ApiClient, auth: AuthContext) -> int:
    courses = CourseManagement(api, auth)
    courses.refresh()
    mine = MyEnrollmentsView(api, auth)
    flow = courses.begin_enrollment(args.course_id, my_enrollments=mine)
    if args.date is not None:
        flow.select_date(args.date)
    if args.session is not None:
        flow.select_session(_session_choice(args.session))
    enrollment = flow.submit()
    print("Enrollment request submitted! Waiting for admin approval.")
    print(_fmt_enrollment(enrollment, with_user=False))
    return 0


def cmd_enrollments(args, api: ApiClient, auth: AuthContext) -> int:
    review = EnrollmentReviewFlow(api, auth)
    review.refresh()
    review.set_filter(args.filter)
    _print_counts(review.counts())
    empty = "No enrollment requests found." if args.filter == "all" else f"No {args.filter} enrollments found."
    _print_all((_fmt_enrollment(e, with_user=True) for e in review.visible), empty)
    return 0


def cmd_decide(args, api: ApiClient, auth: AuthContext) -> int:
    review = EnrollmentReviewFlow(api, auth)
    review.refresh()
    action = review.approve if args.command == "approve" else review.reject
    updated = action(args.id)
    if updated is not None:
        print(_fmt_enrollment(updated, with_user=True))
    return 0


def cmd_my_enrollments(args, api: ApiClient, auth: AuthContext) -> int:
    view = MyEnrollmentsView(api, auth)
    view.refresh()
    _print_counts(view.counts())
    lines = [f"{_fmt_enrollment(e, with_user=False)}\n    {STATUS_MESSAGES[e.status]}" for e in view.enrollments]
    _print_all(lines, "You haven't enrolled in any courses yet.")
    return 0


def cmd_notifications(args, api: ApiClient, auth: AuthContext) -> int:
    view = NotificationsView(api, auth)
    view.refresh()
    print(f"{view.unread_count} unread")
    lines = [
        f"{'  ' if n.is_read else '* '}{n.created_at:%Y-%m-%d %H:%M} {n.data.message}"
        for n in view.notifications
    ]
    _print_all(lines, "No notifications yet.")
    return 0


def cmd_serve(args, api: Optional[ApiClient], auth: Optional[AuthContext]) -> int:
    import uvicorn

    uvicorn.run("course_enrollment.main:api", host=args.host, port=args.port, reload=args.reload)
    return 0


# ---------------------------
# parser
# ---------------------------

def _course_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--title")
    p.add_argument("--description")
    p.add_argument("--schedule", help="free text, e.g. 'Mon/Wed 09:00'")
    p.add_argument("--start", help="start date, YYYY-MM-DD")
    p.add_argument("--end", help="end date, YYYY-MM-DD")
    p.add_argument("--session", action="append", metavar="SLOT,START,END",
                   help="e.g. morning,09:00,11:00; repeat for several (replaces the list)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="course-enrollment", description="University course enrollment client")
    parser.add_argument("--base-url", default=None, help=f"API base URL (default {settings.API_BASE_URL})")
    parser.add_argument("--session-file", default=None, help=f"session file (default {settings.SESSION_FILE})")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("login")
    p.add_argument("email")
    p.add_argument("--password")
    p.set_defaults(func=cmd_login)

    p = sub.add_parser("register")
    p.add_argument("name")
    p.add_argument("email")
    p.add_argument("--password")
    p.set_defaults(func=cmd_register)

    sub.add_parser("logout").set_defaults(func=cmd_logout)
    sub.add_parser("whoami").set_defaults(func=cmd_whoami)

    courses = sub.add_parser("courses")
    csub = courses.add_subparsers(dest="action", required=True)
    csub.add_parser("list")
    p = csub.add_parser("create")
    _course_options(p)
    p = csub.add_parser("update")
    p.add_argument("id", type=int)
    _course_options(p)
    p = csub.add_parser("delete")
    p.add_argument("id", type=int)
    courses.set_defaults(func=cmd_courses)

    p = sub.add_parser("enroll")
    p.add_argument("course_id", type=int)
    p.add_argument("--date", help="YYYY-MM-DD (default: course start date)")
    p.add_argument("--session", help="session id, or 'all'")
    p.set_defaults(func=cmd_enroll)

    p = sub.add_parser("enrollments")
    p.add_argument("--filter", choices=FILTERS, default="all")
    p.set_defaults(func=cmd_enrollments)

    for name in ("approve", "reject"):
        p = sub.add_parser(name)
        p.add_argument("id", type=int)
        p.set_defaults(func=cmd_decide)

    sub.add_parser("my-enrollments").set_defaults(func=cmd_my_enrollments)
    sub.add_parser("notifications").set_defaults(func=cmd_notifications)

    p = sub.add_parser("serve", help="run the REST backend")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.add_argument("--reload", action="store_true")
    p.set_defaults(func=cmd_serve)
    return parser


def main(argv: Optional[List[str]] = None, *, api: Optional[ApiClient] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else "WARNING")

    if args.command == "serve":
        return args.func(args, None, None)

    console = Console()
    if api is None:
        auth = AuthContext(FileSessionStore(args.session_file or settings.SESSION_FILE))
        api = ApiClient(auth, base_url=args.base_url, notice=console.notice)
    else:
        api.notice = console.notice

    try:
        return args.func(args, api, api.auth_context)
    except AuthExpired as exc:
        if args.command == "login":
            console.error(f"Login failed: {exc.message}")
            return 1
        console.error(f"{exc.message} Run 'course-enrollment login EMAIL'.")
        return 2
    except ClientError as exc:
        console.error(exc.message)
        return 1
    finally:
        api.close()


if __name__ == "__main__":
    sys.exit(main())
