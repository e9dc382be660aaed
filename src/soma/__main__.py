from soma.cli import entry

entry()
