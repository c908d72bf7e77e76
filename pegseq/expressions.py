from collections import namedtuple
import logging

from .results import (
    EOS,
    ExpectedFailure,
    Result,
    Success,
    UnexpectedFailure,
    furthest,
)
from .sequences import as_sequence


log = logging.getLogger('pegseq')


def run(expr, seq):
    """Runs a parsing expression on a sequence and returns its `Result`.

    Each expression's `_parse` method is a generator. It yields a `Step` to
    ask for the result of a sub-expression, and finally yields its own
    `Result`. This loop feeds the sub-results back in, so the depth of the
    grammar costs heap space rather than Python stack frames.
    """
    stack = [expr._parse(seq)]
    result = None
    while stack:
        top = stack[-1]
        result = top.send(result)
        if isinstance(result, Step):
            stack.append(result.expr._parse(result.seq))
            result = None
        else:
            stack.pop()
    return result


Step = namedtuple('Step', 'expr, seq')


class Expr:
    """
    Base class of all parsing expressions. A parsing expression is a parser:
    call it with a sequence (or any iterable) to get a `Result`.

    It also supports these operators::

        Operator  Verbose Form       Description
        ========  =================  ====================
        a | b     or_(a, b)          ordered choice
        ~a        optional(a)        optional value
        a >> b    seq(a, b)          discard a
        a << b    Left(a, b)         discard b
        a * f     Transform(a, f)    transform
        a ** f    bind(a, f)         context sensitivity
        ========  =================  ====================
    """
    def __call__(self, seq):
        return run(self, as_sequence(seq))

    def _parse(self, seq):
        raise NotImplementedError('_parse')

    def __invert__(self): return Opt(self)
    def __or__(self, other): return Choice(self, other)
    def __ror__(self, other): return Choice(other, self)
    def __lshift__(self, other): return Left(self, other)
    def __rlshift__(self, other): return Left(other, self)
    def __rshift__(self, other): return Seq(self, other)
    def __rrshift__(self, other): return Seq(other, self)
    def __mul__(self, func): return Transform(self, func)
    def __pow__(self, func): return Bind(self, func)


class DerivedExpr(Expr):
    """A parsing expression that can be derived from other expressions."""

    def derive(self):
        raise NotImplementedError('derive')

    def _parse(self, seq):
        delegate = self.derive()
        self._parse = delegate._parse
        return delegate._parse(seq)


class Any(Expr):
    def _parse(self, seq):
        yield Success(seq.head, seq.tail) if seq else UnexpectedFailure('EOS', seq)

    def __repr__(self):
        return 'any_'


class Bind(Expr):
    """
    Runs each parser in turn, then passes all of their values to `receiver`,
    which returns the parser to run next::

        bind(any_, lambda c: eq(c))        # the same token twice
        bind(any_, any_, lambda a, b: result(a + b))
    """
    def __init__(self, *args):
        if len(args) < 2:
            raise TypeError('bind expects at least one parser and a receiver')
        *exprs, receiver = args
        if not callable(receiver):
            raise TypeError(f'Expected a callable receiver, got {receiver!r}')
        self.exprs = [conv(x) for x in exprs]
        self.receiver = receiver
        self._messages = [f'{x!r} is expected' for x in self.exprs]

    def _parse(self, seq):
        values = []
        pos = seq
        for expr, message in zip(self.exprs, self._messages):
            item = yield Step(expr, pos)
            if not item.is_success:
                yield ExpectedFailure(message, seq, cause=item)
                return
            values.append(item.value)
            pos = item.next

        delegate = conv(self.receiver(*values))
        result = yield Step(delegate, pos)
        if result.is_success:
            yield result
        else:
            # Keep the kind of failure the chosen parser reported.
            yield type(result)(f'{delegate!r} is expected', seq, cause=result)

    def __repr__(self):
        args = ', '.join([repr(x) for x in self.exprs] + [_name_of(self.receiver)])
        return f'bind({args})'


class Choice(Expr):
    def __init__(self, *exprs):
        # Flatten any nested Choice expressions.
        self.exprs = []
        for x in exprs:
            x = conv(x)
            if isinstance(x, Choice):
                self.exprs.extend(x.exprs)
            else:
                self.exprs.append(x)
        self._message = f'One of {self.exprs!r}'

    def _parse(self, seq):
        failures = []
        for expr in self.exprs:
            result = yield Step(expr, seq)
            if result.is_success:
                yield result
                return
            failures.append(result)
        yield ExpectedFailure(self._message, seq, cause=furthest(failures))

    def __repr__(self):
        return f'or_({", ".join(repr(x) for x in self.exprs)})'


class Debug(Expr):
    """Passes the result of `expr` to `observer`, then returns it unchanged.

    Without an observer, the result is logged at DEBUG level on the
    "pegseq" logger.
    """
    def __init__(self, expr, observer=None):
        self.expr = conv(expr)
        self.observer = observer

    def _parse(self, seq):
        result = yield Step(self.expr, seq)
        if self.observer is None:
            log.debug('%r -> %r', self.expr, result)
        else:
            self.observer(result)
        yield result

    def __repr__(self):
        return f'debug({self.expr!r})'


class Eos(Expr):
    def _parse(self, seq):
        yield ExpectedFailure('EOS', seq) if seq else Success(EOS, seq)

    def __repr__(self):
        return 'eos'


class Fail(Expr):
    def __init__(self, message):
        self.message = message

    def _parse(self, seq):
        yield ExpectedFailure(self.message, seq)

    def __repr__(self):
        return f'expected({self.message!r})'


class Function(Expr):
    """Wraps a plain function from a sequence to a `Result`."""

    def __init__(self, func):
        self.func = func

    def _parse(self, seq):
        result = self.func(seq)
        if not isinstance(result, Result):
            raise TypeError(
                f'Parser {self!r} returned {result!r}, expected a Result')
        yield result

    def __repr__(self):
        return _name_of(self.func)


class Lazy(DerivedExpr):
    """Refers to a parser that is not defined yet::

        Parens = eq('(') >> ~lazy(lambda: Parens) << eq(')')
    """
    def __init__(self, func):
        self.func = func

    def derive(self):
        return conv(self.func())

    def __repr__(self):
        return f'lazy({_name_of(self.func)})'


class Left(DerivedExpr):
    def __init__(self, expr1, expr2):
        self.expr1 = conv(expr1)
        self.expr2 = conv(expr2)

    def derive(self):
        return Bind(self.expr1, self.expr2, lambda x, _: Pure(x))

    def __repr__(self):
        return f'({self.expr1!r} << {self.expr2!r})'


class Many(Expr):
    def __init__(self, expr, at_least=0, at_most=None):
        if at_least < 0:
            raise ValueError(f'at_least must not be negative, got {at_least!r}')
        if at_most is not None and at_most < at_least:
            raise ValueError(
                f'at_most ({at_most!r}) is less than at_least ({at_least!r})')
        self.expr = conv(expr)
        self.at_least = at_least
        self.at_most = at_most
        self._message = f'At least {at_least} of {self.expr!r}'

    def _parse(self, seq):
        values = []
        pos = seq
        while self.at_most is None or len(values) < self.at_most:
            item = yield Step(self.expr, pos)
            if not item.is_success:
                if len(values) < self.at_least:
                    yield ExpectedFailure(self._message, seq, cause=item)
                    return
                break
            values.append(item.value)

            # A match that consumes nothing would match the same way every
            # time. Count it as many times as we still need and stop.
            if item.next is pos:
                missing = self.at_least - len(values)
                values.extend([item.value] * missing)
                break

            pos = item.next
        yield Success(values, pos)

    def __repr__(self):
        if self.at_least == 0 and self.at_most is None:
            return f'many({self.expr!r})'
        return f'many({self.expr!r}, {self.at_least!r}, {self.at_most!r})'


class Not(Expr):
    def __init__(self, expr):
        self.expr = conv(expr)
        self._message = f'Not {self.expr!r} is expected'

    def _parse(self, seq):
        result = yield Step(self.expr, seq)
        if result.is_success:
            yield UnexpectedFailure(self._message, seq)
        else:
            yield Success(seq.head if seq else EOS, seq)

    def __repr__(self):
        return f'not_({self.expr!r})'


class Opt(DerivedExpr):
    def __init__(self, expr, default=None):
        self.expr = conv(expr)
        self.default = default

    def derive(self):
        default = self.default
        return Transform(Many(self.expr, 0, 1), lambda x: x[0] if x else default)

    def __repr__(self):
        return f'optional({self.expr!r})'


class Peek(Expr):
    def __init__(self, expr):
        self.expr = conv(expr)

    def _parse(self, seq):
        result = yield Step(self.expr, seq)
        yield result.backtrack(seq) if result.is_success else result

    def __repr__(self):
        return f'peek({self.expr!r})'


class Pure(Expr):
    def __init__(self, value):
        self.value = value

    def _parse(self, seq):
        yield Success(self.value, seq)

    def __repr__(self):
        return f'result({self.value!r})'


class Satisfy(Expr):
    def __init__(self, pred, name=None):
        self.pred = pred
        self.name = name if name is not None else _name_of(pred)
        self._message = f'Satisfying {self!r}'

    def test(self, value):
        return self.pred(value)

    def _parse(self, seq):
        if not seq:
            yield UnexpectedFailure('EOS', seq)
            return
        head = seq.head
        if self.test(head):
            yield Success(head, seq.tail)
        else:
            yield ExpectedFailure(self._message, seq)

    def __repr__(self):
        return f'satisfy({self.name})'


class Contains(Satisfy):
    """Matches a token that is one of the given values::

        contains('+', '-')
        contains('0123456789')
        contains(['if', 'else'])

    A single string, list, tuple or set is taken as the collection of
    values. So `contains('if')` matches the characters 'i' and 'f'; to
    match the word, pass it in a list: `contains(['if'])`.
    """
    def __init__(self, *values):
        if len(values) == 1 and isinstance(values[0], (str, list, tuple, set, frozenset)):
            values = values[0]
        try:
            self.values = frozenset(values)
        except TypeError:
            self.values = tuple(values)
        self._shown = tuple(values)
        Satisfy.__init__(self, self.test, name=repr(self._shown))

    def test(self, value):
        try:
            return value in self.values
        except TypeError:
            return False

    def __repr__(self):
        return f'contains({", ".join(repr(x) for x in self._shown)})'


class Eq(Satisfy):
    def __init__(self, value):
        self.value = value
        Satisfy.__init__(self, self.test, name=repr(value))

    def test(self, value):
        return value == self.value

    def __repr__(self):
        return f'eq({self.value!r})'


class Neq(Satisfy):
    def __init__(self, value):
        self.value = value
        Satisfy.__init__(self, self.test, name=repr(value))

    def test(self, value):
        return value != self.value

    def __repr__(self):
        return f'neq({self.value!r})'


class Seq(Expr):
    def __init__(self, *exprs):
        if not exprs:
            raise TypeError('seq expects at least one parser')
        self.exprs = [conv(x) for x in exprs]
        self._messages = [f'{x!r} is expected' for x in self.exprs]

    def _parse(self, seq):
        pos = seq
        result = None
        last = len(self.exprs) - 1
        for i, (expr, message) in enumerate(zip(self.exprs, self._messages)):
            result = yield Step(expr, pos)
            if not result.is_success:
                # The last parser's failure keeps its kind, the others
                # only say that this sequence was not matched.
                kind = type(result) if i == last else ExpectedFailure
                yield kind(message, seq, cause=result)
                return
            pos = result.next
        yield result

    def __repr__(self):
        return f'seq({", ".join(repr(x) for x in self.exprs)})'


class Token(Expr):
    """Matches the items of `expected`, in order::

        token('\\r\\n')                # value is '\\r\\n'
        token(['begin', 'end'])
        token('true', value=True)
    """
    _missing = object()

    def __init__(self, expected, value=_missing):
        self.expected = expected
        self.value = expected if value is Token._missing else value
        self._message = f'Token {expected!r}'

    def _parse(self, seq):
        pos = seq
        for item in self.expected:
            if not pos:
                yield UnexpectedFailure('EOS', seq)
                return
            if pos.head != item:
                yield ExpectedFailure(self._message, seq)
                return
            pos = pos.tail
        yield Success(self.value, pos)

    def __repr__(self):
        return f'token({self.expected!r})'


class Transform(Expr):
    def __init__(self, expr, func):
        self.expr = conv(expr)
        self.func = func

    def _parse(self, seq):
        result = yield Step(self.expr, seq)
        if result.is_success:
            yield Success(self.func(result.value), result.next)
        else:
            yield result

    def __repr__(self):
        return f'({self.expr!r} * {_name_of(self.func)})'


def conv(obj):
    """Converts a Python object to a parsing expression."""
    if isinstance(obj, Expr):
        return obj

    if isinstance(obj, str):
        return Eq(obj) if len(obj) == 1 else Token(obj)

    if isinstance(obj, list) and len(obj) == 1:
        return Many(obj[0])

    if isinstance(obj, (list, tuple)):
        return Seq(*obj)

    if callable(obj):
        return Function(obj)
    else:
        return Eq(obj)


def repeat(expr, count):
    """Matches `expr` exactly `count` times."""
    return Many(expr, at_least=count, at_most=count)


def seq(*exprs):
    return conv(exprs[0]) if len(exprs) == 1 else Seq(*exprs)


def _name_of(func):
    return getattr(func, '__name__', None) or repr(func)


# Some useful aliases.
any_ = Any()
eos = Eos()
bind = Bind
contains = Contains
debug = Debug
eq = Eq
expected = Fail
lazy = Lazy
many = Many
neq = Neq
not_ = Not
optional = Opt
or_ = Choice
peek = Peek
result = Pure
satisfy = Satisfy
token = Token
