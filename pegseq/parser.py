import logging

from .expressions import conv, run
from .sequences import as_sequence


log = logging.getLogger('pegseq')


class ParseError(Exception):
    """Indicates that the `parse` function failed.

    `failure` is the failure the parser returned. `message` and `pos` come
    from the innermost failure behind it, which is usually the place where
    the input stopped making sense. `pos` is the index of that place, which
    may be one past the last token when the input ended too soon.
    """
    def __init__(self, failure):
        self.failure = failure
        innermost = failure.innermost()
        self.message = innermost.message
        self.pos = getattr(innermost.next, 'pos', None)
        super().__init__(failure.error_message())


def parse(expr, source):
    """Runs a parser on `source` and returns the value it produces.

    `source` may be a sequence or anything `lazy_sequence` accepts. Trailing
    input is left alone; combine the parser with `eos` to require that the
    whole input matches.
    """
    expr = conv(expr)
    log.debug('Parsing with %r', expr)
    result = run(expr, as_sequence(source))
    if result.is_success:
        return result.value
    error = ParseError(result)
    log.debug('%s', error)
    raise error
