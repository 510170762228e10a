"""
End-to-end scenarios: source text in, diagnostics and fixed text out.
"""

import pytest

from tsoverride.config import OverrideConfig
from tsoverride.runner import fix_text, lint_text
from tsoverride.types import MessageKind, OverrideStyle, SourceKind
from tests.infrastructure.file_utils import src

pytestmark = pytest.mark.usefixtures("skip_if_no_tree_sitter")


def cfg(style: OverrideStyle = OverrideStyle.EITHER, **kw) -> OverrideConfig:
    return OverrideConfig(style=style, **kw)


def kinds(diags):
    return [(d.member_name, d.message_kind) for d in diags]


BASE = """
    class Base {
      run() {}
      stop() {}
      get size() { return 1; }
    }
"""


def with_base(code: str) -> str:
    """``Base`` declaration followed by ``code``."""
    return src(BASE) + src(code)


class TestOwnMembers:

    def test_unnecessary_tag_removes_whole_block(self):
        text = src("""
            class Widget {
              /**
               * @override
               */
              render() {}
            }
        """)
        [diag] = lint_text(text)
        assert diag.message_kind is MessageKind.UNNECESSARY_TAG
        assert diag.message == 'Method "render" does not need @override.'
        assert fix_text(text).text == src("""
            class Widget {
              render() {}
            }
        """)

    def test_unnecessary_tag_keeps_description(self):
        text = src("""
            class Widget {
              /**
               * Draws the widget.
               * @override
               */
              render() {}
            }
        """)
        assert fix_text(text).text == src("""
            class Widget {
              /**
               * Draws the widget.
               */
              render() {}
            }
        """)

    def test_plain_class_is_clean(self):
        assert lint_text(src("""
            class Widget {
              render() {}
            }
        """)) == []


class TestInterfaces:

    def test_missing_tag_regardless_of_style(self):
        text = src("""
            interface Runner {
              run(): void;
            }
            class Job implements Runner {
              run() {}
            }
        """)
        [diag] = lint_text(text, config=cfg(OverrideStyle.KEYWORD_ONLY))
        assert diag.message_kind is MessageKind.MISSING_TAG
        assert (diag.source_kind, diag.source_name) == (SourceKind.INTERFACE, "Runner")
        fixed = fix_text(text, config=cfg(OverrideStyle.KEYWORD_ONLY)).text
        assert "  /**\n   * @override\n   */\n  run() {}" in fixed

    def test_interface_takes_precedence(self):
        text = with_base("""
            interface Runner {
              run(): void;
            }
            class Job extends Base implements Runner {
              /** @override */
              run() {}
            }
        """)
        assert lint_text(text, config=cfg(OverrideStyle.KEYWORD_ONLY)) == []

    def test_keyword_is_tolerated(self):
        text = src("""
            interface Runner {
              run(): void;
            }
            class Job implements Runner {
              /** @override */
              override run() {}
            }
        """)
        assert lint_text(text, config=cfg(OverrideStyle.TAG_ONLY)) == []

    def test_inherited_interface_member(self):
        text = src("""
            interface Startable {
              start(): void;
            }
            interface Runner extends Startable {
              run(): void;
            }
            class Job implements Runner {
              /** @override */
              run() {}
              start() {}
            }
        """)
        [diag] = lint_text(text)
        assert diag.member_name == "start"
        assert diag.source_name == "Startable"

    def test_object_type_alias(self):
        text = src("""
            type Handler = {
              handle(): void;
            };
            class Click implements Handler {
              handle() {}
            }
        """)
        [diag] = lint_text(text)
        assert diag.source_kind is SourceKind.INTERFACE
        assert diag.source_name == "Handler"


class TestStyles:

    @pytest.mark.parametrize("style, member, expected", [
        (OverrideStyle.EITHER, "run() {}", [MessageKind.MISSING_EITHER]),
        (OverrideStyle.EITHER, "override run() {}", []),
        (OverrideStyle.TAG_ONLY, "override run() {}", [MessageKind.MISSING_TAG, MessageKind.UNNECESSARY_KEYWORD]),
        (OverrideStyle.KEYWORD_ONLY, "run() {}", [MessageKind.MISSING_KEYWORD]),
        (OverrideStyle.BOTH, "run() {}", [MessageKind.MISSING_BOTH]),
        (OverrideStyle.BOTH, "override run() {}", [MessageKind.MISSING_TAG]),
    ])
    def test_class_sourced_member(self, style, member, expected):
        text = src(BASE) + f"class Job extends Base {{\n  {member}\n}}\n"
        diags = lint_text(text, config=cfg(style))
        assert [d.message_kind for d in diags] == expected

    def test_keyword_only_fix_swaps_forms(self):
        text = with_base("""
            class Job extends Base {
              /** @override */
              run() {}
            }
        """)
        outcome = fix_text(text, config=cfg(OverrideStyle.KEYWORD_ONLY))
        assert outcome.text.endswith("class Job extends Base {\n  override run() {}\n}\n")
        assert outcome.fixes_applied == 2
        assert outcome.remaining == []

    def test_both_fix_adds_tag_and_keyword(self):
        text = with_base("""
            class Job extends Base {
              public stop() {}
            }
        """)
        outcome = fix_text(text, config=cfg(OverrideStyle.BOTH))
        assert outcome.text.endswith(
            "class Job extends Base {\n  /**\n   * @override\n   */\n  public override stop() {}\n}\n"
        )
        assert outcome.remaining == []


class TestResolution:

    def test_grandparent_member(self):
        text = src("""
            class Root {
              stop() {}
            }
            class Middle extends Root {}
            class Leaf extends Middle {
              stop() {}
            }
        """)
        [diag] = lint_text(text)
        assert diag.member_name == "stop"
        assert (diag.source_kind, diag.source_name) == (SourceKind.CLASS, "Root")

    def test_undeclared_superclass_is_assumed(self):
        text = src("""
            class App extends React.Component {
              render() {}
            }
        """)
        [diag] = lint_text(text)
        assert diag.message == (
            'Method "render" must have @override comment or override keyword (from class React.Component).'
        )

    def test_no_type_info_uses_heritage(self):
        text = src("""
            class Job extends Base implements Runner {
              anything() {}
            }
        """)
        [diag] = lint_text(text, config=cfg(type_info=False))
        assert (diag.source_kind, diag.source_name) == (SourceKind.INTERFACE, "Runner")

    def test_cyclic_hierarchy_terminates(self):
        text = src("""
            class A extends B {
              a() {}
            }
            class B extends A {
              b() {}
            }
        """)
        assert kinds(lint_text(text)) == []


class TestMemberShapes:

    def test_skipped_members(self):
        text = with_base("""
            class Job extends Base {
              constructor() { super(); }
              static run() {}
              private stop() {}
              #size() {}
              size(x: number): void;
              size(x?: number) {}
            }
        """)
        assert kinds(lint_text(text)) == [("size", MessageKind.MISSING_EITHER)]

    def test_getter_label(self):
        text = with_base("""
            class Job extends Base {
              get size() { return 2; }
            }
        """)
        [diag] = lint_text(text)
        assert diag.message.startswith('Getter "size" must have')

    def test_computed_name_is_own(self):
        text = with_base("""
            class Job extends Base {
              /** @override */
              ['run']() {}
            }
        """)
        [diag] = lint_text(text)
        assert diag.member_name == "<computed>"
        assert diag.message_kind is MessageKind.UNNECESSARY_TAG

    def test_decorated_member_gets_tag_above_decorators(self):
        text = with_base("""
            class Job extends Base {
              @Log()
              run() {}
            }
        """)
        fixed = fix_text(text, config=cfg(OverrideStyle.TAG_ONLY)).text
        assert fixed.endswith("  /**\n   * @override\n   */\n  @Log()\n  run() {}\n}\n")

    def test_tag_in_fenced_example_does_not_count(self):
        text = with_base("""
            class Job extends Base {
              /**
               * Example:
               * ```ts
               * @override
               * ```
               */
              run() {}
            }
        """)
        [diag] = lint_text(text, config=cfg(OverrideStyle.TAG_ONLY))
        assert diag.message_kind is MessageKind.MISSING_TAG

    def test_tsx_source(self):
        text = with_base("""
            class View extends Base {
              run() {
                return <span>{this.size}</span>;
              }
            }
        """)
        assert kinds(lint_text(text, ext="tsx")) == [("run", MessageKind.MISSING_EITHER)]


class TestFixLoop:

    def test_fix_is_idempotent(self):
        text = with_base("""
            class Job extends Base {
              run() {}
              /** Stops. */
              stop() {}
              get size() { return 2; }
            }
        """)
        first = fix_text(text)
        assert first.fixes_applied == 3
        assert first.remaining == []
        assert lint_text(first.text) == []
        again = fix_text(first.text)
        assert again.text == first.text
        assert again.fixes_applied == 0

    def test_crlf_text_keeps_line_endings(self):
        text = with_base("""
            class Job extends Base {
              run() {}
            }
        """).replace("\n", "\r\n")
        fixed = fix_text(text).text
        assert "\r\n  /**\r\n   * @override\r\n   */\r\n  run() {}" in fixed
        assert "\n" not in fixed.replace("\r\n", "")

    def test_doc_block_after_previous_member_on_one_line(self):
        text = "class B { a() {} b() {} }\nclass C extends B { a() {} /** @override */ b() {} }\n"
        assert kinds(lint_text(text)) == [("a", MessageKind.MISSING_EITHER)]

    def test_one_line_class_gets_one_block_per_member(self):
        text = "class App extends Component { render() {} mount() {} }\n"
        first = fix_text(text)
        assert first.text == (
            "class App extends Component {\n"
            "  /**\n"
            "   * @override\n"
            "   */\n"
            "  render() {}\n"
            "  /**\n"
            "   * @override\n"
            "   */\n"
            "  mount() {} }\n"
        )
        assert first.remaining == []
        assert fix_text(first.text).text == first.text

    def test_pass_limit(self):
        text = with_base("""
            class Job extends Base {
              run() {}
            }
        """)
        outcome = fix_text(text, config=cfg(max_fix_passes=1))
        assert outcome.passes == 1
        assert outcome.fixes_applied == 1
