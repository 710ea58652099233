from rich.pretty import pprint

from argbinder import *

parser = Parser(descr="Copy files somewhere else.")

verbose = parser.flag("-v", "--verbose", descr="talk more")
count = parser.option("-n", "--count", type=int, default=1, descr="copies per file")
include = parser.collect("-I", "--include", descr="extra search path")
speed = parser.mapping({"--fast": "fast", "--small": "small"}, "fast", descr="optimization")
source = parser.cardinal("SRC", nargs="+", descr="files to copy")
target = parser.cardinal("DST", descr="destination")


@parser.validator(count, "count must be positive")
def _(value):
    return value > 0


def callback(outcome):
    pprint(parser)
    pprint({
        "verbose": outcome[verbose],
        "count": outcome[count],
        "include": outcome[include],
        "speed": outcome[speed],
        "source": outcome[source],
        "target": outcome[target],
    })


if __name__ == '__main__':
    run(parser, callback)
