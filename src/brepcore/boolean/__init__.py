"""Face booleans, face-face intersection and loop union."""

from .face_face import EdgesAndPoints, Faces, face_face_intersection
from .faces import face_difference, face_intersection, face_union
from .loops import loop_union
from .split import FaceSplit, SplitKind, face_split

OPERATIONS = {
    'union': face_union,
    'intersection': face_intersection,
    'difference': face_difference,
}


def get_operation(name: str):
    try:
        return OPERATIONS[name]
    except KeyError:
        raise ValueError('invalid boolean operation: {}'.format(name)) from None


def boolean_faces(name: str, face_a, face_b):
    """Apply the boolean operation called ``name`` to two faces."""
    return get_operation(name)(face_a, face_b)


__all__ = [
    'EdgesAndPoints',
    'Faces',
    'FaceSplit',
    'SplitKind',
    'OPERATIONS',
    'boolean_faces',
    'face_difference',
    'face_face_intersection',
    'face_intersection',
    'face_split',
    'face_union',
    'get_operation',
    'loop_union',
]
