"""Tests for the LinkedLibs collection."""

from cargo_analyze.linked_libs import LinkedLibs, set_to_string
from cargo_analyze.models import LibraryKind, parse_link_descriptor


class TestSetToString:
    """Tests for set_to_string."""

    def test_sorted_and_braced(self):
        """Test names are sorted and wrapped in braces."""
        assert set_to_string({"z", "a", "m"}) == "{ a, m, z }"

    def test_single(self):
        """Test a single name."""
        assert set_to_string({"z"}) == "{ z }"

    def test_empty(self):
        """Test that an empty set renders as nothing."""
        assert set_to_string(set()) == ""


class TestAdd:
    """Tests for LinkedLibs.add."""

    def test_new_and_duplicate(self):
        """Test that adding the same pair twice reports only the first."""
        libs = LinkedLibs()
        assert libs.add(LibraryKind.STATIC, "z") is True
        assert libs.add(LibraryKind.STATIC, "z") is False

    def test_same_name_different_kinds(self):
        """Test that a name may appear under several kinds."""
        libs = LinkedLibs()
        assert libs.add(LibraryKind.STATIC, "z")
        assert libs.add(LibraryKind.DYNAMIC, "z")
        assert libs.add(None, "z")
        assert len(libs) == 3

    def test_unknown_bucket(self):
        """Test that kind None goes to the unknown bucket."""
        libs = LinkedLibs()
        libs.add(None, "z")
        assert libs.unknown == {"z"}
        assert libs.known == {}

    def test_add_descriptor(self):
        """Test adding a parsed descriptor."""
        libs = LinkedLibs()
        assert libs.add_descriptor(parse_link_descriptor("dylib=z"))
        assert libs.known == {LibraryKind.DYNAMIC: {"z"}}


class TestAllEmpty:
    """Tests for LinkedLibs.all_empty."""

    def test_new_is_empty(self):
        """Test a fresh collection is empty."""
        assert LinkedLibs().all_empty()

    def test_known_not_empty(self):
        """Test that a known library makes it non-empty."""
        libs = LinkedLibs()
        libs.add(LibraryKind.FRAMEWORK, "Security")
        assert not libs.all_empty()

    def test_unknown_not_empty(self):
        """Test that an unknown library makes it non-empty."""
        libs = LinkedLibs()
        libs.add(None, "z")
        assert not libs.all_empty()


class TestRender:
    """Tests for LinkedLibs.render."""

    def test_empty_renders_nothing(self):
        """Test rendering an empty collection."""
        assert LinkedLibs().render() == ""

    def test_single_static(self):
        """Test the static line for a single declaration."""
        libs = LinkedLibs()
        libs.add_descriptor(parse_link_descriptor("static=z"))
        assert libs.render() == "static: { z }\nunknown: \n"

    def test_kind_order_and_name_order(self):
        """Test kinds in declaration order and names sorted."""
        libs = LinkedLibs()
        libs.add(LibraryKind.FRAMEWORK, "Security")
        libs.add(LibraryKind.DYNAMIC, "z")
        libs.add(LibraryKind.DYNAMIC, "ssl")
        libs.add(LibraryKind.STATIC, "m")
        libs.add(None, "pthread")
        libs.add(None, "dl")

        assert libs.render() == (
            "static: { m }\n"
            "dylib: { ssl, z }\n"
            "framework: { Security }\n"
            "unknown: { dl, pthread }\n"
        )

    def test_idempotent_add_does_not_change_output(self):
        """Test rendering is the same whether a pair was added once or twice."""
        once = LinkedLibs()
        once.add(LibraryKind.STATIC, "z")
        twice = LinkedLibs()
        twice.add(LibraryKind.STATIC, "z")
        twice.add(LibraryKind.STATIC, "z")
        assert once.render() == twice.render()

    def test_insertion_order_does_not_matter(self):
        """Test that output is independent of insertion order."""
        a = LinkedLibs()
        b = LinkedLibs()
        for name in ["c", "a", "b"]:
            a.add(LibraryKind.DYNAMIC, name)
        for name in ["b", "c", "a"]:
            b.add(LibraryKind.DYNAMIC, name)
        assert a.render() == b.render()
        assert a.render() == a.render()

    def test_str_matches_render(self):
        """Test str() gives the rendered text."""
        libs = LinkedLibs()
        libs.add(None, "z")
        assert str(libs) == libs.render() == "unknown: { z }\n"


class TestToDict:
    """Tests for LinkedLibs.to_dict."""

    def test_to_dict(self):
        """Test conversion to dictionary."""
        libs = LinkedLibs()
        libs.add(LibraryKind.DYNAMIC, "z")
        libs.add(LibraryKind.DYNAMIC, "c")
        libs.add(None, "m")
        assert libs.to_dict() == {"dylib": ["c", "z"], "unknown": ["m"]}
