'''JSON-ready snapshots of election records.

Records decorated by :func:`simple_serialization` get a ``to_dict()``
method that dumps their constructor parameters together with a scoped class
name, so a snapshot can be inspected or archived by the hosting
environment. Restoring an election from a snapshot is not supported.
'''

import inspect
from typing import Any, List, Dict, Callable


def simple_serialization(class_: type) -> type:
    '''A decorator to provide a simple to_dict() serialization method.

    The resulting method will serialize all object attributes corresponding
    to the class's constructor parameter names.

    :param class_: The class to add the method to.
    '''
    param_names = list(inspect.signature(
        class_.__init__
    ).parameters.keys())
    if 'self' in param_names:
        param_names.remove('self')

    def to_dict(self) -> Dict[str, Any]:
        out_dict = {'class': scoped_class_name(self)}
        for attr in param_names:
            out_dict[attr] = serialize_value(getattr(self, attr))
        return out_dict

    class_.to_dict = to_dict
    return class_


def serialize_value(value: Any) -> Any:
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    elif isinstance(value, tuple(ATOMIC_TYPES)):
        return value
    elif type(value) in CONVERTIBLE_TYPES:
        return CONVERTIBLE_TYPES[type(value)](value)
    elif hasattr(value, '__iter__'):
        if hasattr(value, 'items') and hasattr(value, 'keys'):
            if all(isinstance(key, str) for key in value.keys()):
                return {
                    key: serialize_value(val)
                    for key, val in value.items()
                }
            else:
                return {
                    'type': 'dict',
                    'keys': [serialize_value(key) for key in value.keys()],
                    'values': [serialize_value(val) for val in value.values()]
                }
        else:
            return [serialize_value(val) for val in value]
    else:
        raise ValueError(f'cannot serialize {value!r} to dict format')


def to_dict(obj: Any) -> Dict[str, Any]:
    """Serialize an election or one of its records to a JSON-ready dictionary.

    :param obj: An object providing a `to_dict()` method (all records of
        Ballotlib have it, courtesy of the simple_serialization decorator)
        or a plain collection of such objects.
    """
    return serialize_value(obj)


def scoped_class_name(value: Any) -> str:
    cls = value.__class__
    return '.'.join((cls.__module__, cls.__name__))


def sequence_to_json_factory(typeobj):
    typename = typeobj.__name__

    def sequence_to_json(seq) -> Dict[str, Any]:
        return {'type': typename, 'value': [serialize_value(v) for v in seq]}

    return sequence_to_json


ATOMIC_TYPES: List[type] = [
    str, int, float, bool, type(None),
]

CONVERTIBLE_TYPES: Dict[type, Callable] = {}

SEQUENCE_TYPES: List[type] = [frozenset, tuple]

for seqtype in SEQUENCE_TYPES:
    CONVERTIBLE_TYPES[seqtype] = sequence_to_json_factory(seqtype)
