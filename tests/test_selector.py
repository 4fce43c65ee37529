from pathlib import Path

import pytest

from reqmd.errors import (
    LineNotFoundError,
    MalformedSelectorError,
    SelectionOutOfRangeError,
    SelectorError,
)
from reqmd.factory import Factory
from reqmd.selector import Selection, SelectionKind, Target, select

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def document():
    return Factory().build((FIXTURES / "widgets.md").read_text(encoding="utf-8"))


class TestSelection:
    @pytest.mark.parametrize("token,kind,value", [
        ("first", SelectionKind.FIRST, None),
        ("last", SelectionKind.LAST, None),
        ("2", SelectionKind.NTH, 2),
        ("line42", SelectionKind.LINE, 42),
    ])
    def test_parse(self, token, kind, value):
        selection = Selection.parse(token)
        assert selection.kind == kind
        assert selection.value == value
        assert str(selection) == token

    @pytest.mark.parametrize("token", ["", "-1", "line0", "lineabc", "line", "second", "1.5"])
    def test_malformed(self, token):
        with pytest.raises(MalformedSelectorError):
            Selection.parse(token)

    def test_errors_share_a_base(self):
        assert issubclass(LineNotFoundError, SelectorError)
        assert issubclass(SelectionOutOfRangeError, SelectorError)


class TestResolve:
    def test_nth(self, document):
        assert select(document, "2").title == "Search Widgets"

    def test_first_and_last(self, document):
        assert select(document, "first").title == "Create Widget"
        assert select(document, "1").title == "Create Widget"
        assert select(document, "last").request.path == "/widget/42"

    def test_default_is_first(self, document):
        assert select(document).title == "Create Widget"

    def test_line_inside_span(self, document):
        assert select(document, "line15").title == "Create Widget"
        assert select(document, "line26").title == "Create Widget"
        assert select(document, "line28").title == "Create Widget"
        assert select(document, "line34").title == "Search Widgets"
        assert select(document, "line41").request.path == "/widget/42"

    @pytest.mark.parametrize("token", ["0", "4", "99"])
    def test_out_of_range(self, document, token):
        with pytest.raises(SelectionOutOfRangeError, match="1-3"):
            select(document, token)

    @pytest.mark.parametrize("token", ["line5", "line29", "line38", "line100"])
    def test_line_outside_any_request(self, document, token):
        with pytest.raises(LineNotFoundError) as info:
            select(document, token)
        assert "15-28, 30-36, 40-42" in str(info.value)

    def test_empty_document(self):
        empty = Factory().build("# Nothing\n")
        with pytest.raises(SelectionOutOfRangeError):
            select(empty, "first")
        with pytest.raises(SelectionOutOfRangeError):
            select(empty, "last")
        with pytest.raises(LineNotFoundError):
            select(empty, "line1")


class TestTarget:
    def test_path_only(self):
        target = Target.parse("docs/api.md")
        assert target.path == Path("docs/api.md")
        assert target.selection.kind == SelectionKind.FIRST

    def test_path_and_selector(self):
        target = Target.parse("docs/api.md:line42")
        assert target.path == Path("docs/api.md")
        assert target.selection == Selection(kind=SelectionKind.LINE, value=42)

    def test_colon_inside_path(self):
        target = Target.parse("C:\\docs\\api.md")
        assert target.path == Path("C:\\docs\\api.md")
        assert target.selection.kind == SelectionKind.FIRST

    def test_bad_selector(self):
        with pytest.raises(MalformedSelectorError):
            Target.parse("api.md:nope")

    def test_missing_file_name(self):
        with pytest.raises(MalformedSelectorError):
            Target.parse(":2")
