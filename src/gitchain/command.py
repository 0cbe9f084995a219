"""Fluent builder for git command lines."""

import logging
from pathlib import Path

from gitchain.config import get_settings
from gitchain.git import Git
from gitchain.logger_out import truncate_for_display

log = logging.getLogger(__name__)

REPO_NAME_PLACEHOLDER = "%%repo_name%%"

# Main commands: only the first one called on a builder is appended.
MAIN_COMMANDS = {
    "status": ("status",),
    "reset": ("reset",),
    "add": ("add",),
    "rev_parse": ("rev-parse",),
    "init": ("init",),
    "log": ("log",),
    "checkout": ("checkout",),
    "branch": ("branch",),
    "clone": ("clone",),
    "commit": ("commit",),
    "config": ("config",),
    "submodule": ("submodule",),
    "fetch": ("fetch",),
    "merge": ("merge",),
    "mv": ("mv",),
    "pull": ("pull",),
    "pull_origin": ("pull", "origin"),
    "push_origin": ("push", "origin"),
    "rebase": ("rebase",),
    "remote": ("remote",),
    "rm": ("rm",),
    "restore": ("restore",),
    "show": ("show",),
    "switch": ("switch",),
    "tag": ("tag",),
    "worktree": ("worktree",),
}

# Modifiers: appended on every call.
ALWAYS_APPEND = {
    "master": ("master",),
    "upstream": ("upstream",),
}

TEXT_METHODS = ("branch_name", "url", "text")


def find_repo_path(cwd: Path | str | None = None) -> str:
    """Return the top-level directory of the repository containing cwd.

    Returns an empty string when git reports nothing (e.g. outside a repository).
    """
    output = (
        GitCommand.create(False, cwd=cwd)
        .rev_parse()
        .options()
        .double("show-toplevel")
        .done()
        .run(debug=False)
    )
    return (output or "").strip()


def find_repo_name(cwd: Path | str | None = None) -> str:
    """Return the leaf directory name of the repository containing cwd."""
    segments = [s for s in find_repo_path(cwd).split("/") if s]
    return segments[-1] if segments else ""


class GitOptions:
    """Accumulates single- and double-dash options for a GitCommand.

    Nothing is written into the parent command until done() is called.
    """

    def __init__(self, parent: "GitCommand"):
        self.parent = parent
        self.single_dash = ""
        self.double_dash: list[tuple[str, str, bool]] = []

    def single(self, c: str) -> "GitOptions":
        """Add a single-dash flag character, e.g. single("a").single("b") -> -ab.

        Raises:
            ValueError: If c is not exactly one character
        """
        if len(c) != 1:
            raise ValueError(f"Expected a single flag character, got {c!r}")
        self.single_dash += c
        return self

    def double(self, name: str, value: str | None = None, equals: bool | None = None) -> "GitOptions":
        """Add a double-dash option.

        Args:
            name: Option name without the leading dashes
            value: Option value; emitted as a separate token when non-empty
            equals: Prefix the value token with "="

        Returns:
            Self for method chaining
        """
        self.double_dash.append((name, value or "", bool(equals)))
        return self

    def _options(self) -> list[str]:
        ret = []
        if self.single_dash:
            ret.append(f"-{self.single_dash}")
        for name, value, equals in self.double_dash:
            ret.append(f"--{name}")
            if value:
                ret.append(("=" if equals else "") + value)
        return ret

    def done(self) -> "GitCommand":
        """Append the accumulated options to the parent and return it.

        Calling done() twice appends the options twice; it is not supported.
        """
        self.parent.tokens.extend(self._options())
        return self.parent


def _named(method, name, doc):
    method.__name__ = name
    method.__qualname__ = f"GitCommand.{name}"
    method.__doc__ = doc
    return method


def _main_command(name, tokens):
    def method(self):
        if not self.primary_set:
            self.tokens.extend(tokens)
        self.primary_set = True
        return self

    return _named(method, name, f"Append `{' '.join(tokens)}` unless a main command was already set.")


def _always_append(name, tokens):
    def method(self):
        self.tokens.extend(tokens)
        return self

    return _named(method, name, f"Append `{' '.join(tokens)}`.")


def _text(name):
    def method(self, arg):
        self.tokens.append(self.sanitize(arg))
        return self

    return _named(method, name, "Append arg as one token, with %%repo_name%% substituted.")


class GitCommand:
    """Chainable git command line.

    Example:
        >>> GitCommand().status().options().double("short").done().describe()
        'git status --short'
    """

    def __init__(self, find_root: bool = False, cwd: Path | str | None = None):
        """Initialize the builder.

        Args:
            find_root: Resolve the repository name now, for %%repo_name%% substitution
            cwd: Working directory to run git in (defaults to cwd)
        """
        self.cwd = cwd
        self.find_root = find_root
        self.repo_name: str | None = None
        self._reset()
        if find_root:
            self.repo_name = find_repo_name(cwd) or None
            if self.repo_name is None:
                log.warning("Could not resolve repository name; %s will not be substituted",
                            REPO_NAME_PLACEHOLDER)

    @classmethod
    def create(cls, find_root: bool, cwd: Path | str | None = None) -> "GitCommand":
        return cls(find_root, cwd=cwd)

    def _reset(self) -> None:
        self.tokens = [Git.PROGRAM]
        self.primary_set = False

    def sanitize(self, text: str) -> str:
        """Replace %%repo_name%% with the resolved repository name, if any."""
        if self.repo_name is not None:
            return text.replace(REPO_NAME_PLACEHOLDER, self.repo_name)
        return text

    def options(self) -> GitOptions:
        return GitOptions(self)

    def command_list(self) -> list[str]:
        return list(self.tokens)

    def describe(self) -> str:
        """Return the command line as it would be typed in a shell (no quoting)."""
        return " ".join(self.tokens)

    def run(self, debug: bool | None = None) -> str | None:
        """Run the command, or print it when debugging.

        Args:
            debug: Print instead of running (defaults to GITCHAIN_DEBUG)

        Returns:
            Captured stdout, or None when debugging
        """
        if debug is None:
            debug = get_settings().debug
        if debug:
            print(self.describe())
            return None

        result = Git.run(self.tokens[1:], cwd=self.cwd)
        if result.returncode != 0:
            log.warning("%s exited with %d: %s", self.describe(), result.returncode,
                        truncate_for_display(result.stderr or ""))
        return result.stdout

    def __repr__(self) -> str:
        return f"GitCommand({self.describe()})"


def _install_methods():
    for name, tokens in MAIN_COMMANDS.items():
        setattr(GitCommand, name, _main_command(name, tokens))
    for name, tokens in ALWAYS_APPEND.items():
        setattr(GitCommand, name, _always_append(name, tokens))
    for name in TEXT_METHODS:
        setattr(GitCommand, name, _text(name))


_install_methods()
