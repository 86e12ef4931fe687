"""Tests for sandbox path resolution and containment."""

from local_agent.permissions.security import (
    collapse_home,
    find_containing_root,
    is_within_directory,
    resolve_path,
)

HOME = "/home/alice"


class TestResolvePath:
    """Tests for resolve_path."""

    def test_expands_tilde(self):
        """A leading ~ expands to the home directory."""
        assert resolve_path("~/Documents/a.txt", HOME) == "/home/alice/Documents/a.txt"

    def test_bare_tilde_is_home(self):
        """~ alone resolves to the home directory itself."""
        assert resolve_path("~", HOME) == HOME

    def test_keeps_absolute_paths(self):
        """Absolute paths are used as-is."""
        assert resolve_path("/etc/passwd", HOME) == "/etc/passwd"

    def test_relative_paths_resolve_against_home(self):
        """Relative paths never resolve against the process working directory."""
        assert resolve_path("Documents/a.txt", HOME) == "/home/alice/Documents/a.txt"

    def test_collapses_parent_segments(self):
        """.. segments are normalised before any policy check."""
        assert resolve_path("~/Documents/../.ssh/id_rsa", HOME) == "/home/alice/.ssh/id_rsa"
        assert resolve_path("/usr/../etc/./hosts", HOME) == "/etc/hosts"


class TestIsWithinDirectory:
    """Tests for is_within_directory."""

    def test_directory_contains_itself(self):
        """The root itself counts as inside."""
        assert is_within_directory("/home/alice/Documents", "/home/alice/Documents") is True

    def test_nested_paths_are_inside(self):
        """Descendants are inside."""
        assert is_within_directory("/home/alice/Documents/a/b.txt", "/home/alice/Documents")

    def test_sibling_with_shared_prefix_is_outside(self):
        """Containment is segment-wise, not a string prefix test."""
        assert is_within_directory("/home/bobby/file", "/home/bob") is False
        assert is_within_directory("/home/alice/Documents2", "/home/alice/Documents") is False

    def test_relative_paths_are_never_inside(self):
        """Only absolute paths are compared."""
        assert is_within_directory("Documents/a.txt", "/home/alice/Documents") is False


class TestFindContainingRoot:
    """Tests for find_containing_root."""

    def test_returns_first_matching_root(self):
        """The containing root is returned."""
        roots = ["/etc", "/home/alice/.ssh"]
        assert find_containing_root("/home/alice/.ssh/id_rsa", roots) == "/home/alice/.ssh"

    def test_returns_none_when_no_root_matches(self):
        """None when the path is outside every root."""
        assert find_containing_root("/opt/data", ["/etc", "/usr"]) is None


class TestCollapseHome:
    """Tests for collapse_home."""

    def test_substitutes_tilde(self):
        """The home prefix is displayed as ~."""
        assert collapse_home("/home/alice/Documents", HOME) == "~/Documents"
        assert collapse_home(HOME, HOME) == "~"

    def test_leaves_other_paths_alone(self):
        """Paths outside home are unchanged."""
        assert collapse_home("/etc", HOME) == "/etc"
