import pytest

from tlox.errors import ErrorKind, LoxRuntimeError
from tlox.loxclass import LoxClass, LoxInstance
from tlox.tokens import Token, TokenType as TT


def runtime_messages(reporter):
    return [d.message for d in reporter.diagnostics if d.kind is ErrorKind.RUNTIME]


class TestInstances:
    def test_textual_forms(self, run):
        assert run("class Foo {} print Foo; print Foo();") == "<class Foo>\nFoo instance.\n"

    def test_fields(self, run):
        assert run("class P {} var p = P(); p.x = 3; p.x = p.x + 1; print p.x;") == "4\n"

    def test_undefined_property(self, run, reporter):
        run("class P {} print P().missing;")
        assert runtime_messages(reporter) == ["Undefined property 'missing'."]

    def test_missing_lookup_does_not_create_field(self):
        instance = LoxInstance(LoxClass("P", None, {}))
        with pytest.raises(LoxRuntimeError):
            instance.get(Token(TT.IDENTIFIER, "missing", 1))
        assert instance.fields == {}

    def test_properties_on_non_instances(self, run, reporter):
        run('print "s".length;')
        run("var n = 1; n.x = 2;")
        assert runtime_messages(reporter) == [
            "Only instances have properties.",
            "Only instances have fields.",
        ]


class TestMethods:
    def test_initializer(self, run):
        source = """
            class Point {
                init(x, y) {
                    this.x = x;
                    this.y = y;
                }
                sum() { return this.x + this.y; }
            }
            print Point(1, 2).sum();
        """
        assert run(source) == "3\n"

    def test_constructor_arity(self, run, reporter):
        run("class Point { init(x, y) {} } Point(1);")
        run("class Empty {} Empty(1);")
        assert runtime_messages(reporter) == [
            "Expected 2 arguments but got 1.",
            "Expected 0 arguments but got 1.",
        ]

    def test_initializer_always_yields_instance(self, run):
        source = """
            class A {
                init() {
                    this.v = 1;
                    return 5;
                }
            }
            var a = A();
            print a.v;
            print a.init();
        """
        assert run(source) == "1\nA instance.\n"

    def test_bound_method_keeps_instance(self, run):
        source = """
            class Box {
                init(v) { this.v = v; }
                get() { return this.v; }
            }
            var g = Box(7).get;
            print g();
        """
        assert run(source) == "7\n"

    def test_fields_shadow_methods(self, run):
        source = """
            class A { m() { return "method"; } }
            var a = A();
            a.m = "field";
            print a.m;
        """
        assert run(source) == "field\n"


class TestInheritance:
    def test_super_call(self, run):
        source = """
            class Base {
                greet() { return "base"; }
            }
            class Derived < Base {
                greet() { return super.greet() + "-derived"; }
            }
            print Derived().greet();
        """
        assert run(source) == "base-derived\n"

    def test_methods_found_along_superclass_chain(self, run, lox):
        source = """
            class A { hi() { return "hi"; } }
            class B < A {}
            class C < B {}
            print C().hi();
        """
        assert run(source) == "hi\n"
        b = lox.interpreter.globals.values["B"]
        assert b.methods == {}
        assert b.find_method("hi") is lox.interpreter.globals.values["A"].methods["hi"]

    def test_super_is_resolved_lexically(self, run):
        source = """
            class A { name() { return "A"; } }
            class B < A {
                name() { return "B"; }
                test() { return super.name(); }
            }
            class C < B { name() { return "C"; } }
            print C().test();
        """
        assert run(source) == "A\n"

    def test_inherited_initializer(self, run):
        source = """
            class A { init(v) { this.v = v; } }
            class B < A {
                init(v) {
                    super.init(v * 2);
                }
            }
            print B(3).v;
        """
        assert run(source) == "6\n"

    def test_superclass_must_be_a_class(self, run, reporter):
        run('var NotAClass = "x"; class B < NotAClass {}')
        assert runtime_messages(reporter) == ["Superclass must be a class."]

    def test_superclass_declared_after_enclosing_function(self, run):
        source = """
            fun make() {
                class B < A {}
                return B;
            }
            class A { hi() { return "hi"; } }
            print make()().hi();
        """
        assert run(source) == "hi\n"

    def test_undefined_superclass_inside_function(self, run, reporter):
        run("fun make() { class B < Nope {} } make();")
        assert runtime_messages(reporter) == ["Undefined variable 'Nope'."]

    def test_missing_super_method(self, run, reporter):
        run("class A {} class B < A { f() { return super.nope(); } } B().f();")
        assert runtime_messages(reporter) == ["Undefined property 'nope'."]
