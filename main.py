import sys

from rich.pretty import pprint

from flagbind import *

flags = FlagSet("cut", shell=True)
fields = flags.delimited("fields", (), "fields to select", kind=Integer, short=True)
delimiter = flags.character("delimiter", "\t", "use this character instead of tab", short=True)
quiet = flags.boolean("s", False, "do not print lines without delimiters")
helper = flags.boolean("help", False, "show this help and exit")


if __name__ == '__main__':
    files = flags.parse(sys.argv[1:])
    if helper.value:
        flags.print_usage()
        sys.exit(0)
    pprint(flags)
    pprint({"fields": fields.value, "delimiter": delimiter.value, "s": quiet.value, "files": files})
