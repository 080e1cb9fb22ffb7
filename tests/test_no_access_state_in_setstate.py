"""Integration tests for the no-access-state-in-setstate check.

Each test parses a real component source with tree-sitter and asserts on the
reported violations (count, line, and the text of the offending node).
"""
from textwrap import dedent

import pytest

from setstate_guard.analyzer.checker import SetStateChecker
from setstate_guard.analyzer.parser import LanguageParser, UnsupportedLanguageError


@pytest.fixture
def checker():
    return SetStateChecker()


def run(checker, source, file_path='Counter.jsx'):
    return checker.check_source(dedent(source), file_path)


def located(violations):
    return [(v.line, v.source) for v in violations]


class TestDirectReads:
    """this.state read directly inside the setState first argument."""

    def test_read_in_object_literal(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              increment() {
                this.setState({ count: this.state.count + 1 });
              }
            }
        """)

        assert located(violations) == [(4, 'this.state')]
        assert violations[0].message_id == 'useCallback'
        assert violations[0].message == (
            'Use a callback in the state-update call when referencing the previous state.'
        )
        assert violations[0].rule == 'no-access-state-in-setstate'

    def test_read_nested_deeply(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              increment() {
                this.setState({ nested: { items: [...this.state.items, `${this.state.label}!`] } });
              }
            }
        """)

        assert len(violations) == 2
        assert all(v.source == 'this.state' for v in violations)

    def test_updater_callback_is_clean(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              increment() {
                this.setState((prevState) => ({ count: prevState.count + 1 }));
              }
            }
        """)

        assert violations == []

    def test_read_inside_updater_callback_is_reported(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              increment() {
                this.setState(() => ({ count: this.state.count + 1 }));
              }
            }
        """)

        assert located(violations) == [(4, 'this.state')]

    def test_read_in_completion_callback_is_clean(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              finish() {
                this.setState({ done: true }, () => console.log(this.state.done));
              }
            }
        """)

        assert violations == []

    def test_arrow_as_property_value_is_reported(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              increment() {
                this.setState({ onDone: () => this.state.count });
              }
            }
        """)

        assert located(violations) == [(4, 'this.state')]

    def test_function_expression_as_property_value_is_a_method(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              increment() {
                this.setState({ onDone: function () { return this.state.count; } });
              }
            }
        """)

        assert violations == []

    def test_plain_component_base(self, checker):
        violations = run(checker, """
            class Counter extends Component {
              increment = () => {
                this.setState({ count: this.state.count + 1 });
              };
            }
        """)

        assert len(violations) == 1

    def test_es5_create_react_class(self, checker):
        violations = run(checker, """
            var Counter = createReactClass({
              increment: function() {
                this.setState({ count: this.state.count + 1 });
              },
              render: function() {
                return null;
              }
            });
        """)

        assert located(violations) == [(4, 'this.state')]


class TestInertReads:

    def test_non_component_class(self, checker):
        violations = run(checker, """
            class Store {
              update() {
                this.setState({ count: this.state.count + 1 });
              }
            }
        """)

        assert violations == []

    def test_top_level_read(self, checker):
        violations = run(checker, """
            this.state;
        """)

        assert violations == []

    def test_class_field_read(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              snapshot = this.state;
              render() {
                return null;
              }
            }
        """)

        assert violations == []

    def test_state_assignment_is_not_a_read(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              constructor(props) {
                super(props);
                this.state = { count: 0 };
              }
              increment() {
                this.setState({ count: this.constructor() });
              }
            }
        """)

        assert violations == []

    def test_alias_outside_set_state(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              render() {
                const s = this.state;
                return { count: s.count };
              }
            }
        """)

        assert violations == []


class TestAliases:
    """Local variables and destructured bindings holding the state."""

    def test_variable_alias(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              increment() {
                const s = this.state;
                this.setState({ count: s.count + 1 });
              }
            }
        """)

        assert located(violations) == [(4, 'this.state')]

    def test_one_violation_per_use(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              increment() {
                const s = this.state;
                this.setState({ a: s.a, b: s.b });
              }
            }
        """)

        assert located(violations) == [(4, 'this.state'), (4, 'this.state')]

    def test_derived_value_in_binary_expression(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              increment() {
                const base = this.state.count;
                this.setState({ count: base + 1 });
              }
            }
        """)

        assert located(violations) == [(4, 'this.state')]

    def test_shorthand_property(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              increment() {
                const count = this.state.count + 1;
                this.setState({ count });
              }
            }
        """)

        assert located(violations) == [(4, 'this.state')]

    def test_destructured_state_fields(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              increment() {
                const { count } = this.state;
                this.setState({ count: count + 1 });
              }
            }
        """)

        assert located(violations) == [(4, 'this.state')]

    def test_destructured_instance(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              increment() {
                const { state } = this;
                this.setState({ count: state.count + 1 });
              }
            }
        """)

        assert located(violations) == [(4, 'state')]

    def test_destructured_instance_renamed(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              increment() {
                const { state: current, props } = this;
                this.setState({ count: current.count + props.step });
              }
            }
        """)

        assert located(violations) == [(4, 'state')]

    def test_destructured_other_instance_fields(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              increment() {
                const { props } = this;
                this.setState({ count: props.initial });
              }
            }
        """)

        assert violations == []

    def test_same_name_in_other_method(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              first() {
                const s = this.state;
                return s;
              }
              second() {
                const s = { count: 1 };
                this.setState({ count: s.count });
              }
            }
        """)

        assert violations == []

    def test_shadowed_in_nested_block(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              increment(reset) {
                const s = this.state;
                if (reset) {
                  const s = { count: 0 };
                  this.setState({ count: s.count });
                }
              }
            }
        """)

        assert violations == []

    def test_alias_used_in_nested_block(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              increment(enabled) {
                const s = this.state;
                if (enabled) {
                  this.setState({ count: s.count + 1 });
                }
              }
            }
        """)

        assert located(violations) == [(4, 'this.state')]


class TestHelperMethods:
    """State reads reached through calls to other methods of the component."""

    def test_helper_declared_before_caller(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              getNext() {
                return this.state.count + 1;
              }
              increment() {
                this.setState({ count: this.getNext() });
              }
            }
        """)

        assert located(violations) == [(4, 'this.state')]

    def test_helper_declared_after_caller(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              increment() {
                this.setState({ count: this.getNext() });
              }
              getNext() {
                return this.state.count + 1;
              }
            }
        """)

        assert located(violations) == [(7, 'this.state')]

    def test_multi_level_chain(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              increment() {
                this.setState({ count: this.compute() });
              }
              compute() {
                return this.base() * 2;
              }
              base() {
                return this.state.count;
              }
            }
        """)

        assert located(violations) == [(10, 'this.state')]

    def test_mutual_recursion_terminates(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              ping(n) {
                return n > 0 ? this.pong(n - 1) : this.state.count;
              }
              pong(n) {
                return this.ping(n);
              }
              update() {
                this.setState({ count: this.pong(3) });
              }
            }
        """)

        assert located(violations) == [(4, 'this.state')]

    def test_helper_call_outside_set_state(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              getNext() {
                return this.state.count + 1;
              }
              render() {
                return this.getNext();
              }
            }
        """)

        assert violations == []

    def test_class_field_arrow_helper(self, checker):
        violations = run(checker, """
            class Counter extends Component {
              getNext = () => this.state.count + 1;
              increment = () => {
                this.setState({ count: this.getNext() });
              };
            }
        """)

        assert located(violations) == [(3, 'this.state')]

    def test_local_function_helper(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              increment() {
                const next = () => this.state.count + 1;
                this.setState({ count: next() });
              }
            }
        """)

        assert located(violations) == [(4, 'this.state')]

    def test_es5_helper(self, checker):
        violations = run(checker, """
            var Counter = createReactClass({
              increment: function() {
                this.setState({ count: this.getNext() });
              },
              getNext: function() {
                return this.state.count + 1;
              }
            });
        """)

        assert located(violations) == [(7, 'this.state')]

    def test_same_method_name_in_other_component(self, checker):
        violations = run(checker, """
            class First extends React.Component {
              getNext() {
                return this.state.count + 1;
              }
            }
            class Second extends React.Component {
              getNext() {
                return 1;
              }
              increment() {
                this.setState({ count: this.getNext() });
              }
            }
        """)

        assert violations == []

    def test_computed_callee_is_skipped(self, checker):
        violations = run(checker, """
            class Counter extends React.Component {
              getNext() {
                return this.state.count + 1;
              }
              increment(name) {
                this.setState({ count: this[name]() });
              }
            }
        """)

        assert violations == []


class TestLanguagesAndDeterminism:

    def test_typescript_generic_component(self, checker):
        violations = run(checker, """
            interface State { count: number }
            class Counter extends React.Component<{}, State> {
              increment(): void {
                this.setState({ count: this.state.count + 1 });
              }
            }
        """, file_path='Counter.tsx')

        assert located(violations) == [(5, 'this.state')]

    def test_plain_typescript(self, checker):
        violations = run(checker, """
            class Counter extends React.PureComponent<Props, State> {
              private getNext(): number {
                return this.state.count + 1;
              }
              increment(): void {
                this.setState({ count: this.getNext() });
              }
            }
        """, file_path='Counter.ts')

        assert located(violations) == [(4, 'this.state')]

    def test_idempotent(self, checker):
        source = """
            class Counter extends React.Component {
              increment() {
                const s = this.state;
                this.setState({ a: this.state.a, b: s.b, c: this.getC() });
              }
              getC() {
                return this.state.c;
              }
            }
        """
        first = run(checker, source)
        second = run(checker, source)

        assert [v.to_dict() for v in first] == [v.to_dict() for v in second]
        assert len(first) == 3

    def test_facts_do_not_leak_between_files(self, checker):
        helper_file = run(checker, """
            class Helpers extends React.Component {
              getC() {
                return this.state.c;
              }
            }
        """, file_path='Helpers.jsx')
        caller_file = run(checker, """
            class Caller extends React.Component {
              update() {
                this.setState({ c: this.getC() });
              }
            }
        """, file_path='Caller.jsx')

        assert helper_file == []
        assert caller_file == []

    def test_language_for_extension(self):
        assert LanguageParser.language_for('App.JSX') == 'javascript'
        assert LanguageParser.language_for('App.tsx') == 'tsx'
        assert LanguageParser.language_for('types.ts') == 'typescript'
        assert LanguageParser.language_for('setup.py') is None

    def test_unsupported_extension(self, checker):
        with pytest.raises(UnsupportedLanguageError):
            checker.check_source("x = 1", "script.py")

    def test_check_file(self, checker, tmp_path):
        component = tmp_path / 'Counter.jsx'
        component.write_text(dedent("""
            class Counter extends React.Component {
              render() {
                return <button onClick={() => this.setState({ n: this.state.n + 1 })} />;
              }
            }
        """), encoding='utf-8')

        violations = checker.check_file(component)

        assert located(violations) == [(4, 'this.state')]
        assert violations[0].file_path == str(component)

    def test_check_file_unsupported(self, checker, tmp_path):
        readme = tmp_path / 'README.md'
        readme.write_text("# hi", encoding='utf-8')

        assert checker.check_file(readme) is None
