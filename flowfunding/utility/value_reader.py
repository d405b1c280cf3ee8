""" Reads settings and network descriptions from JSON files.

Files named by a relative path are looked up in the package's `data/`
directory; absolute paths are used as given.
"""

import os
import json
from flowfunding.utility.precision import INFINITY

DATA_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")

# JSON constants accepted in data files. `NaN` is rejected.
JSON_CONSTANTS = {'Infinity': INFINITY, '-Infinity': -INFINITY}

def resolve_data_path(filename):
    """ Returns `filename`, rooted in `flowfunding/data/` if relative. """
    if os.path.isabs(filename):
        return filename
    return os.path.join(DATA_PATH, filename)

def numeric_value(text):
    """ Converts `text` to int or float if it spells a number.

    Whole numbers become `int`. Anything `float` can't parse, and the
    infinite and NaN spellings, are returned unchanged.
    """
    try:
        value = float(text)
    except ValueError:
        return text
    if value in (INFINITY, -INFINITY) or value != value:
        return text
    return int(value) if value.is_integer() else value

def _parse_constant(name):
    """ Hook for `json.load` that rejects constants other than infinity. """
    try:
        return JSON_CONSTANTS[name]
    except KeyError:
        raise ValueError(
            "JSON constant '" + name + "' is not supported.") from None

class ValueReaderAttribute(object):
    """ Exposes one key of `ValueReader.values` as an attribute.

    Declare these as class variables of a `ValueReader` subclass:
    `max_iterations = ValueReaderAttribute(100)` makes
    `reader.max_iterations` read (and write) `reader.values
    ['max_iterations']`, falling back to 100 when the key is absent and
    the reader has `use_defaults` set.

    Args:
        default (Any): Returned when no value has been read in.
            Optional. `None` means there is no default.
    """

    def __init__(self, default=None):
        self.default = default
        self.name = None

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        if self.name in obj.values:
            return obj.values[self.name]
        if self.default is not None and obj.use_defaults:
            return self.default
        raise KeyError(
            "No value for '" + self.name + "' and no default to use.")

    def __set__(self, obj, value):
        obj.values[self.name] = value

    def __delete__(self, obj):
        del obj.values[self.name]

class ValueReader(object):
    """ Holds the key/value pairs of a JSON object read from file.

    Values are kept in the `values` dict. Subclasses expose individual
    keys as attributes by declaring `ValueReaderAttribute`s (see
    `flowfunding.settings.Settings`).

    Unbounded absorption ceilings are stored in files as the JSON
    constant `Infinity`, which is read as `float('inf')`.

    Arguments:
        filename (str): A UTF-8 encoded JSON file holding an object.
            Relative paths are resolved from `flowfunding/data/`.
            Optional; if omitted, nothing is read.
        numeric_convert (bool): If True, str keys and values that spell
            numbers are converted to int or float as they are read.
            Optional. Defaults to True.
        use_defaults (bool): If True, attributes with no value read in
            fall back to their declared defaults. Optional. Defaults
            to True.

    Attributes:
        values (dict[Any, Any]): The values read from file.
    """

    def __init__(self, filename=None, *, numeric_convert=True, use_defaults=True):
        self.values = {}
        self.use_defaults = use_defaults
        if filename is not None:
            self.read(filename, numeric_convert=numeric_convert)

    def read(self, filename, *, numeric_convert=True):
        """ Replaces `values` with the contents of `filename`.

        Pass `numeric_convert=False` for files whose identifiers merely
        look numeric (e.g. node ids like `"1"`), which would otherwise
        be turned into ints.

        Raises:
            FileNotFoundError: No such file or directory.
            ValueError: The file is not valid JSON or contains `NaN`.
            TypeError: The file holds something other than an object.
        """
        with open(resolve_data_path(filename), "rt", encoding="utf-8") as file:
            values = json.load(file, parse_constant=_parse_constant)
        if not isinstance(values, dict):
            raise TypeError(
                repr(filename) + ' must hold a JSON object, not ' +
                type(values).__name__ + '.')
        if numeric_convert:
            values = self._numeric_convert(values)
        self.values = values

    def _numeric_convert(self, vals):
        """ Applies `numeric_value` throughout a parsed JSON tree. """
        if isinstance(vals, dict):
            return {
                self._numeric_convert(key): self._numeric_convert(val)
                for key, val in vals.items()}
        if isinstance(vals, list):
            return [self._numeric_convert(val) for val in vals]
        if isinstance(vals, str):
            return numeric_value(vals)
        return vals

    def write(self, filename, vals=None):
        """ Writes `vals` (default: `values`) to `filename` as JSON.

        Keys are sorted and infinite values are written as `Infinity`,
        so the file can be read back by `read`.
        """
        if vals is None:
            vals = self.values
        with open(resolve_data_path(filename), "w", encoding="utf-8") as file:
            json.dump(vals, file, allow_nan=True, indent=2, sort_keys=True)
