import itertools
from dataclasses import dataclass
from enum import Enum

import pytest

from kamayan.config import Config
from kamayan.dispatcher import DispatchError, Dispatcher
from kamayan.options import OptionFactory, OptList, poly_parm

Foo = poly_parm("Foo", "a, b")
Bar = poly_parm("Bar", "d, e")
Baz = poly_parm("Baz", "f, g")


@dataclass(frozen=True)
class CompositeOption:
    foo: Enum
    bar: Enum


class CompositeFactory(OptionFactory):
    options = (OptList(Foo, Foo.a, Foo.b), OptList(Bar, Bar.d, Bar.e))

    @classmethod
    def composite(cls, foo, bar):
        return CompositeOption(foo, bar)


def foo_func(opt):
    return 1 if opt is Foo.a else 0


def bar_func(opt):
    return 1 if opt is Bar.e else 0


def baz_func(opt):
    return 1 if opt is Baz.f else 0


class MyFunctor:
    options = (
        OptList(Foo, Foo.a, Foo.b),
        OptList(Bar, Bar.d, Bar.e),
        OptList(Baz, Baz.f, Baz.g),
    )

    def __init__(self):
        self.calls = []

    def dispatch(self, foo_opt, bar_opt, baz_opt, foo, bar, baz):
        matches = (foo_func(foo_opt) == foo, bar_func(bar_opt) == bar, baz_func(baz_opt) == baz)
        self.calls.append(((foo_opt, bar_opt, baz_opt), matches))


class MyCompositeFunctor:
    options = (CompositeFactory, OptList(Baz, Baz.f, Baz.g))

    def __init__(self):
        self.calls = []

    def dispatch(self, composite, baz_opt, foo, bar, baz):
        matches = (
            foo_func(composite.foo) == foo,
            bar_func(composite.bar) == bar,
            baz_func(baz_opt) == baz,
        )
        self.calls.append(((composite, baz_opt), matches))


class MyFunctorR:
    options = MyFunctor.options

    def dispatch(self, foo_opt, bar_opt, baz_opt, foo, bar, baz):
        return foo_func(foo_opt) + bar_func(bar_opt) + baz_func(baz_opt)


class MyCompositeFunctorR:
    options = (CompositeFactory, OptList(Baz, Baz.f, Baz.g))

    def dispatch(self, composite, baz_opt, foo, bar, baz):
        return foo_func(composite.foo) + bar_func(composite.bar) + baz_func(baz_opt)


COMBOS = list(itertools.product(Foo, Bar, Baz))


def expected_args(foo, bar, baz):
    return (1 if foo is Foo.a else 0, 1 if bar is Bar.e else 0, 1 if baz is Baz.f else 0)


def composite_r(foo, bar, baz):
    return Dispatcher(MyCompositeFunctorR, "composite_r", foo, bar, baz).execute(
        *expected_args(foo, bar, baz)
    )


def test_manual_dispatch():
    functor = MyFunctor()
    functor.dispatch(Foo.a, Bar.e, Baz.f, 1, 1, 1)
    assert functor.calls == [((Foo.a, Bar.e, Baz.f), (True, True, True))]


@pytest.mark.parametrize("foo, bar, baz", COMBOS)
def test_dispatch(foo, bar, baz):
    functor = MyFunctor()
    Dispatcher(functor, "test_dispatch", foo, bar, baz).execute(*expected_args(foo, bar, baz))
    assert functor.calls == [((foo, bar, baz), (True, True, True))]


@pytest.mark.parametrize("foo, bar, baz", COMBOS)
def test_dispatch_returning(foo, bar, baz):
    args = expected_args(foo, bar, baz)
    value = Dispatcher(MyFunctorR, "test_dispatchR", foo, bar, baz).execute(*args)
    assert value == sum(args)


@pytest.mark.parametrize("foo, bar, baz", COMBOS)
def test_dispatch_composite_returning(foo, bar, baz):
    assert composite_r(foo, bar, baz) == sum(expected_args(foo, bar, baz))


def test_dispatch_config():
    config = Config()
    config.add(Foo.a)
    config.add(Bar.d)
    config.add(Baz.f)
    steps = [
        (None, (1, 0, 1)),
        (Foo.b, (0, 0, 1)),
        (Bar.e, (0, 1, 1)),
        (Baz.g, (0, 1, 0)),
    ]
    for update, args in steps:
        if update is not None:
            config.update(update)
        functor = MyFunctor()
        Dispatcher(functor, "dispatch_config", config).execute(*args)
        assert functor.calls[0][1] == (True, True, True)
        assert composite_r(config.get(Foo), config.get(Bar), config.get(Baz)) == sum(args)


def test_dispatch_composite():
    functor = MyCompositeFunctor()
    Dispatcher(functor, "comp", Foo.a, Bar.d, Baz.f).execute(1, 0, 1)
    assert functor.calls == [((CompositeOption(Foo.a, Bar.d), Baz.f), (True, True, True))]

    config = Config()
    config.add(Foo.a)
    config.add(Bar.d)
    config.add(Baz.f)
    steps = [
        (None, (1, 0, 1)),
        (Foo.b, (0, 0, 1)),
        (Bar.e, (0, 1, 1)),
        (Baz.g, (0, 1, 0)),
    ]
    for update, args in steps:
        if update is not None:
            config.update(update)
        functor = MyCompositeFunctor()
        Dispatcher(functor, "comp", config).execute(*args)
        assert functor.calls[0][1] == (True, True, True)
        assert composite_r(config.get(Foo), config.get(Bar), config.get(Baz)) == sum(args)


def test_keyword_arguments_forwarded():
    value = Dispatcher(MyFunctorR, "kw", Foo.b, Bar.e, Baz.g).execute(foo=0, bar=1, baz=0)
    assert value == 1


class LimitedFunctor:
    options = (OptList(Foo, Foo.a),)

    def dispatch(self, foo_opt):
        return foo_opt


def test_unhandled_option_raises():
    with pytest.raises(DispatchError) as info:
        Dispatcher(LimitedFunctor, "limited", Foo.b).execute()
    assert str(info.value) == (
        "dispatch parm [b] not handled\nAllowed options are: (a )\nfrom: limited\n"
    )


def test_handled_option_of_limited_functor():
    assert Dispatcher(LimitedFunctor, "limited", Foo.a).execute() is Foo.a


def test_unhandled_composite_option_raises():
    class Narrow(OptionFactory):
        options = (OptList(Bar, Bar.d),)

    class NarrowFunctor:
        options = (Narrow,)

        def dispatch(self, composite):
            return composite

    assert Dispatcher(NarrowFunctor, "narrow", Bar.d).execute() == (Bar.d,)
    with pytest.raises(DispatchError, match=r"dispatch parm \[e\] not handled"):
        Dispatcher(NarrowFunctor, "narrow", Bar.e).execute()


def test_missing_config_value_raises():
    with pytest.raises(KeyError):
        Dispatcher(MyFunctorR, "missing", Foo.a, Bar.d).execute(1, 0, 1)


def test_factory_after_optlist_rejected():
    class BadOrder:
        options = (OptList(Baz), CompositeFactory)

        def dispatch(self, *args):
            return args

    with pytest.raises(TypeError):
        Dispatcher(BadOrder, "bad", Foo.a, Bar.d, Baz.f)


def test_functor_without_options_rejected():
    class NoOptions:
        def dispatch(self):
            return 0

    with pytest.raises(TypeError):
        Dispatcher(NoOptions, "none")


def test_duplicate_option_values_rejected():
    with pytest.raises(KeyError):
        Dispatcher(MyFunctorR, "dup", Foo.a, Foo.b)