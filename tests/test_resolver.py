from tlox.errors import ErrorKind


def messages(reporter):
    return [d.message for d in reporter.diagnostics if d.kind is ErrorKind.RESOLUTION]


class TestDistances:
    def test_globals_are_not_recorded(self, resolve):
        interpreter, _ = resolve("var a = 1; print a;")
        assert interpreter.locals == {}

    def test_hops_through_blocks(self, resolve):
        interpreter, statements = resolve("{ var a = 1; { print a; } }")
        [outer] = statements
        inner = outer.statements[1]
        variable = inner.statements[0].expression
        assert interpreter.locals[variable] == 1

    def test_parameters_are_in_function_scope(self, resolve):
        interpreter, statements = resolve("fun f(a) { return a; }")
        variable = statements[0].body[0].value
        assert interpreter.locals[variable] == 0

    def test_closure_reference(self, resolve):
        interpreter, statements = resolve("""
            fun outer() {
                var x = 1;
                fun inner() { x = 2; }
            }
        """)
        inner = statements[0].body[1]
        assign = inner.body[0].expression
        assert interpreter.locals[assign] == 1

    def test_initializer_reads_shadowed_local(self, resolve, reporter):
        interpreter, statements = resolve("{ var a = 1; { var a = a; } }")
        initializer = statements[0].statements[1].statements[0].initializer
        assert interpreter.locals[initializer] == 1
        assert reporter.diagnostics == []

    def test_initializer_reads_shadowed_global(self, resolve, reporter):
        interpreter, statements = resolve("var a = 1; { var a = a + 1; }")
        initializer = statements[1].statements[0].initializer
        assert initializer.left not in interpreter.locals
        assert reporter.diagnostics == []


class TestErrors:
    def test_duplicate_local(self, resolve, reporter):
        resolve("{ var a = 1; var a = 2; }")
        assert messages(reporter) == ["Already a variable with this name in this scope."]

    def test_duplicate_parameter(self, resolve, reporter):
        resolve("fun f(a, a) {}")
        assert messages(reporter) == ["Already a variable with this name in this scope."]

    def test_self_reference_without_outer_binding(self, resolve, reporter):
        resolve("{ var x = x; }")
        assert messages(reporter) == ["Can't read local variable in its own initializer."]

    def test_top_level_self_reference(self, resolve, reporter):
        resolve("var x = x;")
        assert messages(reporter) == ["Can't read local variable in its own initializer."]

    def test_top_level_initializer_may_read_other_globals(self, resolve, reporter):
        resolve("var a = 1; var b = a + clock();")
        assert reporter.diagnostics == []

    def test_top_level_return(self, resolve, reporter):
        resolve("return 1;")
        assert messages(reporter) == ["Can't return from top-level code."]

    def test_this_outside_class(self, resolve, reporter):
        resolve("fun f() { return this; }")
        assert messages(reporter) == ["Can't use 'this' outside of a class."]

    def test_super_outside_class(self, resolve, reporter):
        resolve("fun f() { super.g(); }")
        assert messages(reporter) == ["Can't use 'super' outside of a class."]

    def test_super_without_superclass(self, resolve, reporter):
        resolve("class A { f() { super.f(); } }")
        assert messages(reporter) == ["Can't use 'super' in a class with no superclass."]

    def test_class_inherits_itself(self, resolve, reporter):
        resolve("class A < A {}")
        assert messages(reporter) == ["A class can't inherit from itself."]

    def test_undefined_superclass(self, resolve, reporter):
        resolve("class B < Nope {}")
        assert messages(reporter) == ["Undefined superclass 'Nope'."]

    def test_superclass_inside_function_is_checked_at_runtime(self, resolve, reporter):
        resolve("fun make() { class B < A {} return B; } class A {}")
        assert reporter.diagnostics == []

    def test_errors_are_collected(self, resolve, reporter):
        resolve("return 1; { var b = 1; var b = 2; } print this;")
        assert len(messages(reporter)) == 3
