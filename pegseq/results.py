class _EndOfSequence:
    """The value of a successful `eos` parse."""

    def __repr__(self):
        return 'EOS'

    def __reduce__(self):
        return 'EOS'


EOS = _EndOfSequence()


class Result:
    """Base class of the three parse outcomes.

    Every result carries `next`: the part of the input that remains after
    the parser that produced it.
    """
    __slots__ = ()

    @property
    def is_success(self):
        raise NotImplementedError('is_success')


class Success(Result):
    __slots__ = 'value', 'next'

    def __init__(self, value, next):
        self.value = value
        self.next = next

    def backtrack(self, seq):
        return Success(self.value, seq)

    @property
    def is_success(self):
        return True

    def __eq__(self, other):
        return (type(other) is Success
            and self.next is other.next
            and self.value == other.value)

    def __hash__(self):
        return hash((Success, id(self.next)))

    def __repr__(self):
        return f'Success({self.value!r}, {self.next!r})'


class Failure(Result):
    __slots__ = 'message', 'next', 'cause'

    def __init__(self, message, next, cause=None):
        self.message = message
        self.next = next
        self.cause = cause

    @property
    def is_success(self):
        return False

    def innermost(self):
        """Follows the `cause` chain down to the failure that started it."""
        failure = self
        while failure.cause is not None:
            failure = failure.cause
        return failure

    def error_message(self):
        failure = self.innermost()
        seq = failure.next
        # Only look at positions that were already read.
        if seq.is_forced() and seq.is_empty:
            return f'Parse error at end of input: {failure.message}'
        return f'Parse error at index {seq.pos}: {failure.message}'

    def __eq__(self, other):
        return (type(other) is type(self)
            and self.next is other.next
            and self.message == other.message)

    def __hash__(self):
        return hash((type(self), self.message, id(self.next)))

    def __repr__(self):
        name = self.__class__.__name__
        return f'{name}({self.message!r}, {self.next!r})'


class ExpectedFailure(Failure):
    """A candidate did not match. An enclosing choice may try another."""
    __slots__ = ()


class UnexpectedFailure(Failure):
    """The input cannot match at all, usually because it ended too soon."""
    __slots__ = ()


def furthest(failures):
    """Returns the failure whose innermost cause got furthest into the input."""
    best, best_pos = None, -1
    for failure in failures:
        pos = _offset(failure.innermost().next)
        if best is None or pos > best_pos:
            best, best_pos = failure, pos
    return best


def _offset(seq):
    pos = getattr(seq, 'pos', None)
    return float('inf') if pos is None else pos
