"""
Library for building string parsers out of small composable parser values.

See the objects for more explanations.

See the `pipeparse.general` module for general purpose parsers, and `pipeparse.grammars` for complete grammars you can use as examples.

Defining parsers:
```
point = (
    succeed2(lambda x, y: (x, y))
    .drop(string("("))
    .keep(integer_number)
    .drop(string(","))
    .drop(spaces)
    .keep(integer_number)
    .drop(string(")"))
)
```

Using parsers:
```
result = run("(1, 2)", point)
if result:
    ... # `result` is an `Ok` object, the value is in `result.data`
else:
    ... # `result` is a `ParseFailure` object
```
"""

import pipeparse.const as const
import pipeparse.main
from pipeparse.main import (
    ParseFailure,
    BadParser,
    Custom,
    EOF,
    Expected,
    UnexpectedInput,
    ParseError,
    Success,
    Ok,
    Parser,
    run,
    run_or_raise,
    map,
    then,
    map2,
    lazy,
    one_of,
    optional,
    from_option,
    from_result,
    succeed,
    succeed2,
    succeed3,
    succeed4,
    keep,
    drop,
    many,
    is_digit,
    is_space,
    is_whitespace,
    any_char,
    eof,
    string,
    take_if,
    take_while,
    take_if_and_while,
    spaces,
    whitespace,
    integer_number,
    float_number,
)
import pipeparse.general as general
