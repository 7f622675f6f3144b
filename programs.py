"""Pre-loaded example programs for the trace-table stepper."""
from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class SampleProgram:
    name: str
    code: Tuple[str, ...]


PROGRAMS = (
    SampleProgram('Linear Search', (
        'items = [5, 3, 8, 1, 9]',
        'target = 8',
        'found = false',
        'i = 0',
        'WHILE i < 5 AND found == false',
        '  IF items[i] == target THEN',
        '    found = true',
        '  ENDIF',
        '  i = i + 1',
        'ENDWHILE',
        'PRINT found',
    )),
    SampleProgram('Running Total', (
        'total = 0',
        'numbers = [4, 7, 2, 9]',
        'i = 0',
        'WHILE i < 4',
        '  total = total + numbers[i]',
        '  i = i + 1',
        'ENDWHILE',
        'PRINT total',
    )),
    SampleProgram('Maximum Finder', (
        'values = [3, 7, 2, 9, 4]',
        'max = values[0]',
        'i = 1',
        'WHILE i < 5',
        '  IF values[i] > max THEN',
        '    max = values[i]',
        '  ENDIF',
        '  i = i + 1',
        'ENDWHILE',
        'PRINT max',
    )),
    SampleProgram('FizzBuzz Counter', (
        'i = 1',
        'WHILE i <= 15',
        '  IF i % 3 == 0 AND i % 5 == 0 THEN',
        '    PRINT "FizzBuzz"',
        '  ELSEIF i % 3 == 0 THEN',
        '    PRINT "Fizz"',
        '  ELSEIF i % 5 == 0 THEN',
        '    PRINT "Buzz"',
        '  ELSE',
        '    PRINT i',
        '  ENDIF',
        '  i = i + 1',
        'ENDWHILE',
    )),
    SampleProgram('Swap Variables', (
        'a = 5',
        'b = 3',
        'temp = a',
        'a = b',
        'b = temp',
        'PRINT a',
        'PRINT b',
    )),
    SampleProgram('Countdown', (
        'n = 5',
        'WHILE n > 0',
        '  PRINT n',
        '  n = n - 1',
        'ENDWHILE',
        'PRINT "Go!"',
    )),
)


def program_names() -> List[str]:
    return [p.name for p in PROGRAMS]


def get_program(name: str) -> SampleProgram:
    """Look up a sample by name, ignoring case."""
    for program in PROGRAMS:
        if program.name.lower() == name.lower():
            return program
    raise KeyError(f"No sample program named {name!r}")
