# -*- coding: utf-8 -*-
import argparse
import sys
import os
import inspect
import re
from collections import defaultdict
import chardet
import polib
from code_table import read_code_table
from placeholder_errors import EncodeError

"""
Tools to read the code_table.bin file of Pokémon Super Mystery Dungeon and
Pokémon Rescue Team DX, and to move game strings between raw code units and
placeholder text such as "Hello [hero_name] \\[1]".
"""
# List to hold information about callable functions
callable_functions = []


def mainFunction(func):
    """Decorator to mark functions as callable and add them to the list."""
    callable_functions.append(func)
    return func


def print_docstrings():
    print("Docstrings for callable functions:")
    for func in callable_functions:
        print("\nFunction: {}".format(func.__name__))
        docstring = inspect.getdoc(func)
        if docstring:
            encoded_docstring = docstring.encode('utf-8', errors='ignore').decode(sys.stdout.encoding or 'utf-8')
            print(encoded_docstring)
        else:
            print("No docstring available.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="A script to decode and encode game strings with code_table.bin.")
    parser.add_argument("--help-functions", action="store_true", help="Print available functions and their docstrings.")
    parser.add_argument("--list-functions", action="store_true", help="List available functions without docstrings.")
    parser.add_argument("--usage", action="store_true", help="Display usage information.")
    parser.add_argument("function", nargs="?", help="The name of the function to execute.")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Arguments for the function.")

    args = parser.parse_args(argv)

    if args.usage:
        print("Usage: pmdcodes.py function [args [args ...]]")
        print("       pmdcodes.py --help-functions, or help")
        print("       pmdcodes.py --list-functions, or list")
    elif args.help_functions or args.function == "help":
        print_docstrings()
    elif args.list_functions or args.function == "list":
        print("Available functions:")
        for func in callable_functions:
            print(func.__name__)
    elif args.function:
        function_name = args.function
        for func in callable_functions:
            if func.__name__ == function_name:
                func_args = args.args
                if func == encode_text and len(func_args) != 2:
                    print("Usage: {} <code_table.bin> <text>".format(func.__name__))
                else:
                    func(*func_args)
                break
        else:
            print("Unknown function: {}".format(function_name))
    else:
        print("No command provided.")


# Regular Expressions for Text Processing -------------------------------------

# Matches lines in the format {{key:}}text from tagged text files, the text may be empty
reTaggedLine = re.compile(r'^\{\{([^:]+):\}\}(.*)$')

# Matches one code unit written as 1 to 4 hexadecimal digits, such as 0041 or 1A05
reHexUnit = re.compile(r'^[0-9A-Fa-f]{1,4}$')


def parse_hex_units(text):
    """
    Parse space-separated hexadecimal code units.

    Example:
        "0048 0069 1A05" -> [0x48, 0x69, 0x1A05]
    """
    units = []
    for token in text.split():
        if not reHexUnit.match(token):
            raise ValueError(f"'{token}' is not a 16 bit hexadecimal code unit")
        units.append(int(token, 16))
    return units


def format_hex_units(units):
    return ' '.join(f"{unit:04X}" for unit in units)


def detect_file_encoding(filename):
    """Return utf-8 for valid UTF-8 files, otherwise guess the encoding with chardet."""
    with open(filename, 'rb') as textIns:
        raw_bytes = textIns.read()
    try:
        raw_bytes.decode('utf-8')
    except UnicodeDecodeError:
        detected_encoding = chardet.detect(raw_bytes)['encoding']
        if detected_encoding and detected_encoding.lower() != 'ascii':
            return detected_encoding
    # utf-8-sig also drops a BOM when there is one
    return 'utf-8-sig'


def preserve_line_breaks(text):
    return (
        text
            .replace("\r", "-=RT=-")
            .replace("\n", "-=CR=-")
    )


def restore_line_breaks(text):
    return (
        text
            .replace("-=CR=-", "\n")
            .replace("-=RT=-", "\r")
    )


def readTaggedTextFile(taggedFile, encoding=None):
    """
    Read a tagged text file and return a dictionary mapping keys to text.

    Lines that are not in the {{key:}}text format are ignored. Line breaks inside
    the text are stored as -=CR=- (and -=RT=- for carriage returns).

    Args:
        taggedFile (str): The filename of the tagged text file to read.
        encoding (str): The file encoding. Detected with chardet when omitted.

    Returns:
        dict: key -> text, in file order.
    """
    if encoding is None:
        encoding = detect_file_encoding(taggedFile)
    targetDict = {}
    with open(taggedFile, 'r', encoding=encoding) as textIns:
        for line in textIns:
            maTaggedLine = reTaggedLine.match(line.rstrip('\r\n'))
            if maTaggedLine:
                targetDict[maTaggedLine.group(1)] = restore_line_breaks(maTaggedLine.group(2))
    return targetDict


def writeTaggedTextFile(outputFile, taggedDict):
    with open(outputFile, 'w', encoding='utf-8') as textOut:
        for key, text in taggedDict.items():
            textOut.write(f"{{{{{key}:}}}}{preserve_line_breaks(text)}\n")


def generate_output_filename(input_file, suffix, file_extension="txt"):
    """
    Build an output filename next to the input file.

    Example:
        generate_output_filename("dungeon/en_strings.txt", "decoded") -> "dungeon/en_strings_decoded.txt"
    """
    base_dir = os.path.dirname(input_file)
    base_name = os.path.splitext(os.path.basename(input_file))[0]
    if suffix:
        base_name = f"{base_name}_{suffix}"
    return os.path.join(base_dir, f"{base_name}.{file_extension}")


def load_code_table(code_table_file):
    code_table = read_code_table(code_table_file)
    print(f"[load_code_table]: Loaded {len(code_table)} entries from {code_table_file}")
    return code_table


@mainFunction
def list_code_table(code_table_file):
    """
    Print every entry of a code_table.bin file in file order.

    Args:
        code_table_file (str): Path to code_table.bin.

    Example output:
        0   0x1A00  inline  words=0  flags=0x0001  [color:]
    """
    code_table = load_code_table(code_table_file)
    for index, entry in enumerate(code_table.entries()):
        print(f"{index:<4}0x{entry.code_value:04X}  {entry.kind.value:<6}  words={entry.word_count}  "
              f"flags=0x{entry.flags:04X}  [{entry.label}]")


@mainFunction
def check_code_table(code_table_file):
    """
    Report entries that make decoding or encoding ambiguous.

    - Inline-offset entries whose code value is not a multiple of 0x100.
    - Entries sharing a code value or a label; only the last one is used.

    Args:
        code_table_file (str): Path to code_table.bin.
    """
    code_table = load_code_table(code_table_file)
    problemCount = 0

    for entry in code_table.find_misaligned_entries():
        print(f"[check_code_table]: [{entry.label}] 0x{entry.code_value:04X} is not aligned on a 0x100 block")
        problemCount += 1

    entriesByCode = defaultdict(list)
    entriesByLabel = defaultdict(list)
    for entry in code_table.entries():
        entriesByCode[entry.code_value].append(entry)
        entriesByLabel[entry.label].append(entry)

    for codeValue, entries in entriesByCode.items():
        if len(entries) > 1:
            labels = ', '.join(f"[{entry.label}]" for entry in entries)
            print(f"[check_code_table]: 0x{codeValue:04X} is shared by {labels}, [{entries[-1].label}] is used")
            problemCount += 1

    for label, entries in entriesByLabel.items():
        if len(entries) > 1:
            values = ', '.join(f"0x{entry.code_value:04X}" for entry in entries)
            print(f"[check_code_table]: [{label}] is used by {values}, 0x{entries[-1].code_value:04X} is used")
            problemCount += 1

    print(f"Done. Found {problemCount} problem(s).")
    return problemCount


@mainFunction
def decode_units(code_table_file, *hex_units):
    """
    Decode code units given on the command line and print the placeholder text.

    Args:
        code_table_file (str): Path to code_table.bin.
        hex_units (str): Hexadecimal code units, such as 0048 0069 1A05.
    """
    decoder = load_code_table(code_table_file).generate_code_to_text()
    try:
        text = decoder.decode(parse_hex_units(' '.join(hex_units)))
    except ValueError as err:
        print(f"[decode_units]: {err}")
        return None
    print(text)
    return text


@mainFunction
def encode_text(code_table_file, text):
    """
    Encode placeholder text given on the command line and print its code units.

    Args:
        code_table_file (str): Path to code_table.bin.
        text (str): Placeholder text, such as "Hi [hero_name]\\[!]".
    """
    encoder = load_code_table(code_table_file).generate_text_to_code()
    try:
        units = encoder.encode(text)
    except EncodeError as err:
        print(f"[encode_text]: {err}")
        return None
    print(format_hex_units(units))
    return units


@mainFunction
def decode_unit_file(code_table_file, unit_file):
    """
    Decode a tagged file of code units into a tagged text file.

    Each line of the input is {{key:}} followed by hexadecimal code units. Lines that
    can't be decoded are reported and left out of the output.

    Args:
        code_table_file (str): Path to code_table.bin.
        unit_file (str): Tagged code unit file, such as {{12:}}0048 0069 1A05.

    Output:
        <unit_file>_decoded.txt with lines such as {{12:}}Hi[color:5]
    """
    decoder = load_code_table(code_table_file).generate_code_to_text()
    output_filename = generate_output_filename(unit_file, "decoded")
    decodedDict = {}
    errorCount = 0

    for key, hex_text in readTaggedTextFile(unit_file, encoding='utf-8').items():
        try:
            decodedDict[key] = decoder.decode(parse_hex_units(hex_text))
        except ValueError as err:
            print(f"[decode_unit_file]: {{{{{key}:}}}} {err}")
            errorCount += 1

    writeTaggedTextFile(output_filename, decodedDict)
    print(f"[decode_unit_file]: Decoded {len(decodedDict)} strings, {errorCount} errors")
    print(f"Done. Output written to {output_filename}")
    return output_filename


@mainFunction
def encode_tagged_file(code_table_file, tagged_file):
    """
    Encode a tagged text file into a tagged file of code units.

    The input encoding is detected with chardet. Lines that can't be encoded are
    reported with the reason and left out of the output.

    Args:
        code_table_file (str): Path to code_table.bin.
        tagged_file (str): Tagged text file, such as {{12:}}Hi[color:5]

    Output:
        <tagged_file>_units.txt with lines such as {{12:}}0048 0069 1A05
    """
    encoder = load_code_table(code_table_file).generate_text_to_code()
    output_filename = generate_output_filename(tagged_file, "units")
    encodedDict = {}
    errorCount = 0

    for key, text in readTaggedTextFile(tagged_file).items():
        try:
            encodedDict[key] = format_hex_units(encoder.encode(text))
        except EncodeError as err:
            print(f"[encode_tagged_file]: {{{{{key}:}}}} {err}")
            errorCount += 1

    writeTaggedTextFile(output_filename, encodedDict)
    print(f"[encode_tagged_file]: Encoded {len(encodedDict)} strings, {errorCount} errors")
    print(f"Done. Output written to {output_filename}")
    return output_filename


@mainFunction
def create_po_from_tagged_text(tagged_file, translated_file=None):
    """
    Convert a tagged text file into a .po file for translation.

    The key of each line becomes the msgctxt and its text the msgid. When a
    translated tagged file is given, its text for the same key becomes the msgstr.

    Args:
        tagged_file (str): Source tagged text file, usually from decode_unit_file.
        translated_file (str): Optional tagged text file with existing translations.
    """
    sourceDict = readTaggedTextFile(tagged_file)
    translatedDict = readTaggedTextFile(translated_file) if translated_file else {}
    output_filename = generate_output_filename(tagged_file, None, file_extension="po")

    po = polib.POFile()
    po.metadata = {
        'Content-Type': 'text/plain; charset=utf-8',
        'Content-Transfer-Encoding': '8bit',
    }
    for key, text in sourceDict.items():
        entry = polib.POEntry(
            msgctxt=key,
            msgid=text,
            msgstr=translatedDict.get(key, "")
        )
        po.append(entry)

    po.save(output_filename)
    print(f"Done. Created .po file: {output_filename}")
    return output_filename


@mainFunction
def rebuild_tagged_text_from_po(po_file):
    """
    Write the translations of a .po file back to a tagged text file.

    Entries without a translation keep their msgid.

    Args:
        po_file (str): The .po file, usually from create_po_from_tagged_text.
    """
    po = polib.pofile(po_file)
    output_filename = generate_output_filename(po_file, "translated")
    taggedDict = {}
    for entry in po:
        taggedDict[entry.msgctxt] = entry.msgstr if entry.msgstr else entry.msgid

    writeTaggedTextFile(output_filename, taggedDict)
    print(f"Done. Output written to {output_filename}")
    return output_filename


@mainFunction
def check_po_placeholders(code_table_file, po_file):
    """
    Encode every translation of a .po file and report the ones that are invalid.

    Use it before rebuilding the game files so translators get the exact reason,
    such as an unknown placeholder or an unescaped [.

    Args:
        code_table_file (str): Path to code_table.bin.
        po_file (str): The .po file to check.
    """
    encoder = load_code_table(code_table_file).generate_text_to_code()
    po = polib.pofile(po_file)
    checkedCount = 0
    errorCount = 0

    for entry in po:
        if not entry.msgstr:
            continue
        checkedCount += 1
        try:
            encoder.encode(entry.msgstr)
        except EncodeError as err:
            print(f"[check_po_placeholders]: {entry.msgctxt}: {err}")
            errorCount += 1

    print(f"Done. Checked {checkedCount} translations, {errorCount} errors.")
    return errorCount


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "--help-docstrings":
        print_docstrings()
    else:
        main()
